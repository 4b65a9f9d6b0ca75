"""
nnops - low-overhead neural network inference kernels.

Dense linear algebra and activation primitives for running the forward pass
of feed-forward layers against pre-trained weights:
- backend: float buffers, dimension validation, numba kernels, configuration
- functional: module-level kernel entry points

Operations:
- relu / elu (in place)
- gemv / gemm (accumulating)
- linear_forward / linear_batch_forward (optionally transposed weights)
"""

from nnops.backend import (
    NNOpsError,
    BoundsViolationError,
    DimensionMismatchError,
    ReadOnlyBufferError,
    BackendError,
    BackendCapacityError,
    Trans,
    TRANSPOSE,
    NO_TRANSPOSE,
    FloatBuffer,
    HeapFloatBuffer,
    DirectFloatBuffer,
    as_buffer,
    BackendConfig,
    NativeCompute,
    get_default_compute,
    set_default_compute,
)
from nnops.functional import (
    relu,
    elu,
    gemv,
    gemm,
    linear_forward,
    linear_batch_forward,
)

# Main API exports
Compute = NativeCompute

import nnops.functional as functional

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
    'NativeCompute',
    'Compute',
    'get_default_compute',
    'set_default_compute',
    'relu',
    'elu',
    'gemv',
    'gemm',
    'linear_forward',
    'linear_batch_forward',
    # Submodules
    'functional',
]

__version__ = '0.1.0'
