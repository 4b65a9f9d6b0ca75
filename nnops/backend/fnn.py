"""
Feedforward Neural Network kernels for the native backend.

Inference-time operations over caller-owned float32 buffers:
- ReLU / ELU activations (in place)
- gemv / gemm with accumulation
- single-row and batched linear layer forward

Every call validates its dimensions first and dispatches only if they hold,
so a rejected call never touches any buffer. Operands may be FloatBuffers
(heap or direct) or 1D contiguous float32 numpy arrays, which are used in
place.
"""

from typing import Optional, Union

import numpy as np

from .base import Trans
from .buffer import FloatBuffer, as_buffer
from . import validation
from ..utils.numba_ops import (
    relu_inplace,
    elu_inplace,
    gemv_acc,
    gemm_acc,
    gemm_acc_parallel,
    linear_row,
    linear_batch,
    linear_batch_parallel,
)

BufferLike = Union[FloatBuffer, np.ndarray]
TransLike = Union[Trans, str, bool]


def _both_or_neither(first_name: str, first, second_name: str, second) -> bool:
    """True when both sizes are given, False when neither is"""
    if (first is None) != (second is None):
        raise TypeError(f"Pass both {first_name} and {second_name} or neither")
    return first is not None


class NativeFNN:
    """FNN operations: activations, gemv, gemm, linear layers"""

    def __init__(self, core):
        self.core = core

    def activation_relu(self, in_out: BufferLike, end_exclusive: Optional[int] = None):
        """
        Apply ReLU in place to the first ``end_exclusive`` elements:

            ReLU(x) = max(0, x)

        Args:
            in_out: Input/output buffer (read write)
            end_exclusive: Index past the last element to process
                           (default: the buffer's limit)
        """
        buf = as_buffer(in_out)
        if end_exclusive is None:
            end_exclusive = buf.limit
        end_exclusive = validation.check_activation(buf, end_exclusive)
        self.core.dispatch('relu', relu_inplace, buf.array, end_exclusive)

    def activation_elu(self, in_out: BufferLike, alpha: float = 1.0,
                       end_exclusive: Optional[int] = None):
        """
        Apply ELU in place to the first ``end_exclusive`` elements:

            ELU(x) = x                      if x >= 0
                     alpha * (exp(x) - 1)   otherwise

        Args:
            in_out: Input/output buffer (read write)
            alpha: Value the negative branch converges to is -alpha
            end_exclusive: Index past the last element to process
                           (default: the buffer's limit)
        """
        buf = as_buffer(in_out)
        if end_exclusive is None:
            end_exclusive = buf.limit
        end_exclusive = validation.check_activation(buf, end_exclusive)
        self.core.dispatch('elu', elu_inplace, buf.array, end_exclusive, float(alpha))

    def gemv(self, A: BufferLike, x: BufferLike, y: BufferLike,
             m: Optional[int] = None, n: Optional[int] = None):
        """
        Matrix-vector multiply with accumulation:

            y = A * x + y

        ``y`` is read and overwritten; ``A`` and ``x`` are read-only.
        Without ``m`` and ``n`` the sizes are x.limit and y.limit and A's
        limit must equal their product exactly.

        Args:
            A: Matrix with logical shape (n, m), row-major
            x: Input vector
            y: Input/output vector
            m: Elements of x to use; columns of A
            n: Elements of y to update; rows of A
        """
        A, x, y = as_buffer(A), as_buffer(x), as_buffer(y)
        if _both_or_neither('m', m, 'n', n):
            m, n = validation.check_gemv(A, x, y, m, n)
        else:
            m, n = validation.check_gemv_sizeless(A, x, y)
        self.core.dispatch('gemv', gemv_acc, A.array, x.array, y.array, m, n)

    def gemm(self, A: BufferLike, B: BufferLike, Y: BufferLike, m: int, n: int, k: int):
        """
        Matrix-matrix multiply with accumulation:

            Y = A * B + Y

        Args:
            A: Matrix (m, k), row-major (ro)
            B: Matrix (k, n), row-major (ro)
            Y: Matrix (m, n), row-major (rw)
            m: Rows of A and Y
            n: Columns of B and Y
            k: Columns of A, rows of B
        """
        A, B, Y = as_buffer(A), as_buffer(B), as_buffer(Y)
        m, n, k = validation.check_gemm(A, B, Y, m, n, k)
        self.core.dispatch_parallel(
            'gemm', gemm_acc, gemm_acc_parallel,
            A.array, B.array, Y.array, m, n, k
        )

    def linear_forward(self, trans: TransLike, weights: BufferLike, biases: BufferLike,
                       input: BufferLike, output: BufferLike,
                       input_size: Optional[int] = None,
                       output_size: Optional[int] = None):
        """
        Linear layer forward for a single row:

            output = weights * input + biases

        Output contents are discarded. Without sizes, input.limit and
        output.limit are used and must match the weights and biases limits
        exactly.

        Args:
            trans: NO_TRANSPOSE for weights (output_size, input_size),
                   TRANSPOSE for weights (input_size, output_size)
            weights: Weight matrix (ro)
            biases: Bias vector (ro)
            input: Input vector (ro)
            output: Output vector (write only)
            input_size: Elements of input to use
            output_size: Elements of output and biases to use
        """
        trans = Trans.coerce(trans)
        weights, biases = as_buffer(weights), as_buffer(biases)
        input, output = as_buffer(input), as_buffer(output)
        if _both_or_neither('input_size', input_size, 'output_size', output_size):
            input_size, output_size = validation.check_linear(
                weights, biases, input, output, input_size, output_size
            )
        else:
            input_size, output_size = validation.check_linear_sizeless(
                weights, biases, input, output
            )
        row_stride, col_stride = trans.strides(input_size, output_size)
        self.core.dispatch(
            'linear_forward', linear_row,
            weights.array, biases.array,
            input.array, 0, output.array, 0,
            input_size, output_size, row_stride, col_stride
        )

    def linear_batch_forward(self, trans: TransLike, weights: BufferLike, biases: BufferLike,
                             input: BufferLike, output: BufferLike,
                             input_row_size: int, output_row_size: int, batch_size: int):
        """
        Linear layer forward for ``batch_size`` consecutive rows.

        Row r of input starts at r * input_row_size and its result is
        written at r * output_row_size. The same weights and biases serve
        every row, oriented as in linear_forward.

        Args:
            trans: Weight orientation (see linear_forward)
            weights: Weight matrix (ro)
            biases: Bias vector of size output_row_size (ro)
            input: Input matrix (batch_size, input_row_size) (ro)
            output: Output matrix (batch_size, output_row_size) (write only)
            input_row_size: Columns of input
            output_row_size: Columns of output
            batch_size: Rows to process
        """
        trans = Trans.coerce(trans)
        weights, biases = as_buffer(weights), as_buffer(biases)
        input, output = as_buffer(input), as_buffer(output)
        input_row_size, output_row_size, batch_size = validation.check_linear_batch(
            weights, biases, input, output, input_row_size, output_row_size, batch_size
        )
        row_stride, col_stride = trans.strides(input_row_size, output_row_size)
        self.core.dispatch_parallel(
            'linear_batch_forward', linear_batch, linear_batch_parallel,
            weights.array, biases.array, input.array, output.array,
            input_row_size, output_row_size, batch_size, row_stride, col_stride
        )
