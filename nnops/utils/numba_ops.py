"""
Numba-Compiled Kernels

The numeric backend behind every public operation. All kernels work in place
on flat float32 arrays with explicit logical sizes and never allocate:

- activations overwrite a prefix of their input
- gemv / gemm accumulate into the destination
- linear kernels overwrite the destination with W * x + b

Kernels do no bounds checking of their own; callers validate dimensions
first (see nnops.backend.validation). Serial kernels hold no shared state and
can be entered from any number of threads at once. The *_parallel variants
fan out over numba's worker pool and depend on the configured threading layer.
"""

import math

import numba
import numpy as np
from numba import jit, prange


# ============================================================================
# Activations
# ============================================================================

@jit(nopython=True, cache=True)
def relu_inplace(in_out: np.ndarray, end_exclusive: int):
    """ReLU(x) = max(0, x) over in_out[:end_exclusive]"""
    for i in range(end_exclusive):
        if in_out[i] < 0.0:
            in_out[i] = 0.0


@jit(nopython=True, cache=True)
def elu_inplace(in_out: np.ndarray, end_exclusive: int, alpha: float):
    """
    ELU over in_out[:end_exclusive].

    ELU(x) = x                      if x >= 0
             alpha * (exp(x) - 1)   otherwise
    """
    for i in range(end_exclusive):
        v = in_out[i]
        if v < 0.0:
            in_out[i] = alpha * math.expm1(v)


# ============================================================================
# Matrix-Vector / Matrix-Matrix (accumulating)
# ============================================================================

@jit(nopython=True, cache=True)
def gemv_acc(A: np.ndarray, x: np.ndarray, y: np.ndarray, m: int, n: int):
    """
    y[:n] += A * x[:m]

    Args:
        A: Row-major matrix (n, m)
        x: Input vector, first m elements used
        y: Accumulator, first n elements updated
        m: Columns of A
        n: Rows of A
    """
    for r in range(n):
        base = r * m
        acc = 0.0
        for c in range(m):
            acc += A[base + c] * x[c]
        y[r] += acc


@jit(nopython=True, cache=True)
def gemm_acc(A: np.ndarray, B: np.ndarray, Y: np.ndarray, m: int, n: int, k: int):
    """
    Y += A * B with A (m, k), B (k, n), Y (m, n), all row-major.
    """
    for i in range(m):
        a_base = i * k
        y_base = i * n
        for j in range(n):
            acc = 0.0
            for p in range(k):
                acc += A[a_base + p] * B[p * n + j]
            Y[y_base + j] += acc


@jit(nopython=True, parallel=True, cache=True)
def gemm_acc_parallel(A: np.ndarray, B: np.ndarray, Y: np.ndarray,
                      m: int, n: int, k: int):
    """gemm_acc with rows of Y split across worker threads"""
    for i in prange(m):
        a_base = i * k
        y_base = i * n
        for j in range(n):
            acc = 0.0
            for p in range(k):
                acc += A[a_base + p] * B[p * n + j]
            Y[y_base + j] += acc


# ============================================================================
# Linear (Matrix-Vector + Bias)
# ============================================================================

@jit(nopython=True, cache=True)
def linear_row(weights: np.ndarray, biases: np.ndarray,
               input: np.ndarray, input_offset: int,
               output: np.ndarray, output_offset: int,
               input_size: int, output_size: int,
               row_stride: int, col_stride: int):
    """
    Single row of a linear layer:

        output[o + j] = biases[j] + sum_i W(j, i) * input[o_in + i]

    where W(j, i) = weights[j * row_stride + i * col_stride]. Strides
    (input_size, 1) read weights as (output_size, input_size); strides
    (1, output_size) read the same memory as (input_size, output_size)
    transposed.
    """
    for j in range(output_size):
        base = j * row_stride
        acc = 0.0
        for i in range(input_size):
            acc += weights[base + i * col_stride] * input[input_offset + i]
        output[output_offset + j] = biases[j] + acc


@jit(nopython=True, cache=True)
def linear_batch(weights: np.ndarray, biases: np.ndarray,
                 input: np.ndarray, output: np.ndarray,
                 input_row_size: int, output_row_size: int, batch_size: int,
                 row_stride: int, col_stride: int):
    """linear_row over batch_size consecutive rows sharing weights and biases"""
    for r in range(batch_size):
        linear_row(weights, biases,
                   input, r * input_row_size,
                   output, r * output_row_size,
                   input_row_size, output_row_size,
                   row_stride, col_stride)


@jit(nopython=True, parallel=True, cache=True)
def linear_batch_parallel(weights: np.ndarray, biases: np.ndarray,
                          input: np.ndarray, output: np.ndarray,
                          input_row_size: int, output_row_size: int,
                          batch_size: int, row_stride: int, col_stride: int):
    """linear_batch with rows split across worker threads"""
    for r in prange(batch_size):
        linear_row(weights, biases,
                   input, r * input_row_size,
                   output, r * output_row_size,
                   input_row_size, output_row_size,
                   row_stride, col_stride)


# ============================================================================
# Utility
# ============================================================================

# Concrete layers numba may pick for each requested layer
LAYER_CHOICES = {
    'safe': ('tbb',),
    'threadsafe': ('tbb', 'omp'),
    'forksafe': ('tbb', 'omp'),
    'tbb': ('tbb',),
    'omp': ('omp',),
    'workqueue': ('workqueue',),
}


def active_threading_layer():
    """Layer chosen by numba, or None before the first parallel launch"""
    try:
        return numba.threading_layer()
    except ValueError:
        return None


def get_backend_info() -> dict:
    """Get information about the numeric backend"""
    active = active_threading_layer()
    return {
        'backend': 'numba',
        'numba_version': numba.__version__,
        'threading_layer': active if active is not None else numba.config.THREADING_LAYER,
        'threading_layer_active': active is not None,
        'num_threads': numba.get_num_threads(),
    }
