"""
Linear algebra functions (functional API)
Uses: gemv_acc, gemm_acc, linear_row, linear_batch
"""
from typing import Optional


def _get_backend():
    """Get compute backend"""
    from nnops.backend.compute import get_default_compute
    return get_default_compute()


def gemv(A, x, y, m: Optional[int] = None, n: Optional[int] = None):
    """
    y = A * x + y, with A of logical shape (n, m)

    Without m and n, sizes are x.limit and y.limit and A.limit must equal
    their product.
    """
    _get_backend().gemv(A, x, y, m, n)


def gemm(A, B, Y, m: int, n: int, k: int):
    """
    Y = A * B + Y, with A (m, k), B (k, n) and Y (m, n)
    """
    _get_backend().gemm(A, B, Y, m, n, k)


def linear_forward(trans, weights, biases, input, output,
                   input_size: Optional[int] = None,
                   output_size: Optional[int] = None):
    """
    output = weights * input + biases

    Args:
        trans: Trans.NO_TRANSPOSE for weights (output_size, input_size),
               Trans.TRANSPOSE for weights (input_size, output_size)
        weights: Weight matrix (ro)
        biases: Bias vector (ro)
        input: Input vector (ro)
        output: Output vector (write only)
        input_size: Elements of input to use (default: input limit)
        output_size: Elements of output to write (default: output limit)
    """
    _get_backend().linear_forward(trans, weights, biases, input, output,
                                  input_size, output_size)


def linear_batch_forward(trans, weights, biases, input, output,
                         input_row_size: int, output_row_size: int, batch_size: int):
    """
    linear_forward applied to ``batch_size`` consecutive rows of ``input``,
    results written to consecutive rows of ``output``.
    """
    _get_backend().linear_batch_forward(trans, weights, biases, input, output,
                                        input_row_size, output_row_size, batch_size)
