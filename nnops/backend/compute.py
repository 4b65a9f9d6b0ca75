"""
Main NativeCompute class that composes the operation modules.
"""

import threading
from typing import Optional

from .config import BackendConfig
from .core import NativeCore
from .fnn import NativeFNN


class NativeCompute:
    """Complete native compute backend"""

    def __init__(self, config: Optional[BackendConfig] = None):
        """Initialize the backend (config defaults to BackendConfig.from_env())"""
        self.core = NativeCore(config)
        self.config = self.core.config
        self.fnn = NativeFNN(self.core)

        # Expose operations
        self.relu = self.fnn.activation_relu
        self.elu = self.fnn.activation_elu
        self.gemv = self.fnn.gemv
        self.gemm = self.fnn.gemm
        self.linear_forward = self.fnn.linear_forward
        self.linear_batch_forward = self.fnn.linear_batch_forward

    def describe(self) -> dict:
        return self.core.describe()

    def __repr__(self):
        return (
            f"NativeCompute(max_in_flight={self.config.max_in_flight}, "
            f"parallel={self.config.parallel})"
        )


# Global instance (lazy initialization)
_default_compute: Optional[NativeCompute] = None
_compute_lock = threading.Lock()


def get_default_compute() -> NativeCompute:
    """
    Get or create the process-wide backend used by the functional API.

    Built from BackendConfig.from_env() on first use.

    Returns:
        NativeCompute instance
    """
    global _default_compute

    compute = _default_compute
    if compute is not None:
        return compute
    with _compute_lock:
        if _default_compute is None:
            _default_compute = NativeCompute()
        return _default_compute


def set_default_compute(compute: Optional[NativeCompute]) -> Optional[NativeCompute]:
    """
    Replace the process-wide backend.

    Args:
        compute: New backend, or None to rebuild from the environment on next use

    Returns:
        The previous backend (None if it was never created)
    """
    global _default_compute

    with _compute_lock:
        previous = _default_compute
        _default_compute = compute
        return previous
