"""
Utilities Module

Compiled numeric kernels backing the native backend.
"""
from .numba_ops import get_backend_info

__all__ = [
    'get_backend_info',
]
