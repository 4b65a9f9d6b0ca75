"""
Activation functions (functional API)
Uses: relu_inplace, elu_inplace
"""
from typing import Optional


def _get_backend():
    """Get compute backend"""
    from nnops.backend.compute import get_default_compute
    return get_default_compute()


def relu(in_out, end_exclusive: Optional[int] = None):
    """
    In-place ReLU over the first ``end_exclusive`` elements
    (the whole limit when omitted).

    Args:
        in_out: FloatBuffer or float32 array (read write)
        end_exclusive: Index past the last element to process
    """
    _get_backend().relu(in_out, end_exclusive)


def elu(in_out, alpha: float = 1.0, end_exclusive: Optional[int] = None):
    """
    In-place ELU over the first ``end_exclusive`` elements
    (the whole limit when omitted).

    Args:
        in_out: FloatBuffer or float32 array (read write)
        alpha: Negative inputs converge to -alpha
        end_exclusive: Index past the last element to process
    """
    _get_backend().elu(in_out, alpha, end_exclusive)
