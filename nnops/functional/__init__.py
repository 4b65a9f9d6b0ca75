"""
Functional API

Module-level kernel entry points backed by the process-wide NativeCompute
(see nnops.backend.compute.get_default_compute).
"""
from .activations import relu, elu
from .linear import gemv, gemm, linear_forward, linear_batch_forward

__all__ = [
    'relu',
    'elu',
    'gemv',
    'gemm',
    'linear_forward',
    'linear_batch_forward',
]
