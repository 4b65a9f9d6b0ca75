"""
Shared definitions for the native kernel backend: the error taxonomy and the
weight orientation discriminator.
"""

from enum import Enum
from typing import Tuple, Union


class NNOpsError(Exception):
    """Base class for every error raised by the kernel layer"""


class BoundsViolationError(NNOpsError, IndexError):
    """A declared or inferred size is negative or exceeds a buffer's limit"""


class DimensionMismatchError(NNOpsError, ValueError):
    """Buffer limits do not agree exactly in a sizeless call"""


class ReadOnlyBufferError(NNOpsError, ValueError):
    """A destination buffer does not allow writes"""


class BackendError(NNOpsError, RuntimeError):
    """The numeric backend failed while executing a kernel"""


class BackendCapacityError(BackendError):
    """No in-flight slot was free in the numeric backend"""


# CBLAS_TRANSPOSE values
_CBLAS_NO_TRANS = 111
_CBLAS_TRANS = 112


class Trans(Enum):
    """
    Orientation of a linear layer weight matrix.

    NO_TRANSPOSE: weights are (output_size, input_size), row-major.
    TRANSPOSE:    weights are (input_size, output_size), row-major, and are
                  multiplied as if transposed.

    The orientation only changes the strides the kernel walks the weights
    with; memory is never reordered.
    """
    NO_TRANSPOSE = _CBLAS_NO_TRANS
    TRANSPOSE = _CBLAS_TRANS

    @classmethod
    def coerce(cls, value: Union['Trans', str, bool]) -> 'Trans':
        """
        Resolve a Trans from a member, a name or a boolean.

        Args:
            value: Trans member, 'transpose' / 'no_transpose' (any case),
                   or a bool where True means TRANSPOSE

        Returns:
            Trans member
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            return cls.TRANSPOSE if value else cls.NO_TRANSPOSE
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                pass
        raise ValueError(f"Unsupported transpose mode: {value!r}")

    def strides(self, input_size: int, output_size: int) -> Tuple[int, int]:
        """
        Strides used to address weight (output j, input i) at
        j * row_stride + i * col_stride.

        Returns:
            (row_stride, col_stride)
        """
        if self is Trans.TRANSPOSE:
            return 1, output_size
        return input_size, 1


TRANSPOSE = Trans.TRANSPOSE
NO_TRANSPOSE = Trans.NO_TRANSPOSE
