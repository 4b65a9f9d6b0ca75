"""
Native compute backend for neural network inference kernels.

This module provides:
- Float buffers over managed (numpy) or unmanaged (C) memory
- Dimension validation for every kernel
- ReLU / ELU activations
- gemv / gemm with accumulation
- Single-row and batched linear layer forward
"""

from .base import (
    NNOpsError,
    BoundsViolationError,
    DimensionMismatchError,
    ReadOnlyBufferError,
    BackendError,
    BackendCapacityError,
    Trans,
    TRANSPOSE,
    NO_TRANSPOSE,
)
from .buffer import FloatBuffer, HeapFloatBuffer, DirectFloatBuffer, as_buffer
from .config import BackendConfig
from .core import NativeCore
from .fnn import NativeFNN
from .compute import NativeCompute, get_default_compute, set_default_compute

__all__ = [
    'NNOpsError',
    'BoundsViolationError',
    'DimensionMismatchError',
    'ReadOnlyBufferError',
    'BackendError',
    'BackendCapacityError',
    'Trans',
    'TRANSPOSE',
    'NO_TRANSPOSE',
    'FloatBuffer',
    'HeapFloatBuffer',
    'DirectFloatBuffer',
    'as_buffer',
    'BackendConfig',
    'NativeCore',
    'NativeFNN',
    'NativeCompute',
    'get_default_compute',
    'set_default_compute',
]
