"""
Dimension checks run before every kernel dispatch.

Each check raises and never touches buffer contents, so a rejected call leaves
all operands in their pre-call state:

- BoundsViolationError: a size is negative or needs more elements than a
  buffer's limit provides
- DimensionMismatchError: limits disagree in a sizeless call
- ReadOnlyBufferError: the destination cannot be written
- TypeError: a size is not an integer
"""

import numpy as np

from .base import BoundsViolationError, DimensionMismatchError, ReadOnlyBufferError
from .buffer import FloatBuffer


def check_size(name: str, value) -> int:
    """Return ``value`` as int, rejecting non-integers and negatives"""
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")
    if value < 0:
        raise BoundsViolationError(f"{name} must be >= 0, got {value}")
    return int(value)


def check_extent(name: str, buf: FloatBuffer, required: int):
    """Require ``required`` elements within the limit of ``buf``"""
    if required > buf.limit:
        raise BoundsViolationError(
            f"{name} needs {required} elements but its limit is {buf.limit}"
        )


def check_writable(name: str, buf: FloatBuffer):
    if buf.readonly:
        raise ReadOnlyBufferError(f"{name} is read-only")


def check_activation(in_out: FloatBuffer, end_exclusive) -> int:
    end_exclusive = check_size('end_exclusive', end_exclusive)
    check_extent('in_out', in_out, end_exclusive)
    check_writable('in_out', in_out)
    return end_exclusive


def check_gemv(A: FloatBuffer, x: FloatBuffer, y: FloatBuffer, m, n):
    """
    Validate y = A * x + y with A of logical shape (n, m).

    Returns:
        (m, n) as ints
    """
    m = check_size('m', m)
    n = check_size('n', n)
    check_extent('x', x, m)
    check_extent('y', y, n)
    check_extent('A', A, m * n)
    check_writable('y', y)
    return m, n


def check_gemv_sizeless(A: FloatBuffer, x: FloatBuffer, y: FloatBuffer):
    """Sizes come from x.limit and y.limit; A must match them exactly"""
    m, n = x.limit, y.limit
    if m * n != A.limit:
        raise DimensionMismatchError(
            f"A limit {A.limit} != x limit {m} * y limit {n}"
        )
    check_writable('y', y)
    return m, n


def check_gemm(A: FloatBuffer, B: FloatBuffer, Y: FloatBuffer, m, n, k):
    """
    Validate Y = A * B + Y with A (m, k), B (k, n) and Y (m, n).

    Returns:
        (m, n, k) as ints
    """
    m = check_size('m', m)
    n = check_size('n', n)
    k = check_size('k', k)
    check_extent('A', A, m * k)
    check_extent('B', B, k * n)
    check_extent('Y', Y, m * n)
    check_writable('Y', Y)
    return m, n, k


def check_linear(weights: FloatBuffer, biases: FloatBuffer, input: FloatBuffer,
                 output: FloatBuffer, input_size, output_size):
    """
    Validate a single-row linear forward.

    Returns:
        (input_size, output_size) as ints
    """
    input_size = check_size('input_size', input_size)
    output_size = check_size('output_size', output_size)
    check_extent('input', input, input_size)
    check_extent('output', output, output_size)
    check_extent('biases', biases, output_size)
    check_extent('weights', weights, input_size * output_size)
    check_writable('output', output)
    return input_size, output_size


def check_linear_sizeless(weights: FloatBuffer, biases: FloatBuffer,
                          input: FloatBuffer, output: FloatBuffer):
    input_size, output_size = input.limit, output.limit
    if input_size * output_size != weights.limit:
        raise DimensionMismatchError(
            f"weights limit {weights.limit} != input limit {input_size} "
            f"* output limit {output_size}"
        )
    if output_size != biases.limit:
        raise DimensionMismatchError(
            f"biases limit {biases.limit} != output limit {output_size}"
        )
    check_writable('output', output)
    return input_size, output_size


def check_linear_batch(weights: FloatBuffer, biases: FloatBuffer,
                       input: FloatBuffer, output: FloatBuffer,
                       input_row_size, output_row_size, batch_size):
    """
    Validate a batched linear forward over ``batch_size`` consecutive rows.

    Returns:
        (input_row_size, output_row_size, batch_size) as ints
    """
    input_row_size = check_size('input_row_size', input_row_size)
    output_row_size = check_size('output_row_size', output_row_size)
    batch_size = check_size('batch_size', batch_size)
    check_extent('input', input, input_row_size * batch_size)
    check_extent('output', output, output_row_size * batch_size)
    check_extent('biases', biases, output_row_size)
    check_extent('weights', weights, input_row_size * output_row_size)
    check_writable('output', output)
    return input_row_size, output_row_size, batch_size
