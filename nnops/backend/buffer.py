"""
Float Buffers for Native Kernels

Flat float32 storage with a logical limit, in two flavours:

1. HeapFloatBuffer - backed by an ordinary numpy array (managed memory)
2. DirectFloatBuffer - backed by a raw C memory region (unmanaged memory)

Kernels only ever see the zero-copy numpy view exposed by ``array``, so the
storage flavour is invisible to them. Direct buffers skip the per-call
conversion work on the caller side and are preferred on the hot path.

Buffers are owned by the caller. Kernels never allocate, resize or keep a
reference to them past the call.
"""

import ctypes
from typing import Any, Iterable, Optional, Union

import numpy as np

from .base import BoundsViolationError, ReadOnlyBufferError


def _check_array(array: np.ndarray):
    """Storage must be a flat C-contiguous float32 array"""
    if not isinstance(array, np.ndarray):
        raise TypeError(f"Expected numpy array, got {type(array).__name__}")
    if array.dtype != np.float32:
        raise TypeError(f"Expected float32 array, got {array.dtype}")
    if array.ndim != 1:
        raise TypeError(f"Expected 1D array, got {array.ndim}D")
    if not array.flags.c_contiguous:
        raise TypeError("Expected a contiguous array")


def _check_capacity(capacity) -> int:
    if isinstance(capacity, bool) or not isinstance(capacity, (int, np.integer)):
        raise TypeError(f"capacity must be an int, got {type(capacity).__name__}")
    if capacity < 0:
        raise BoundsViolationError(f"capacity must be >= 0, got {capacity}")
    return int(capacity)


class FloatBuffer:
    """
    Fixed-capacity float32 buffer with a logical limit.

    The limit is the number of elements kernels may touch and defaults to the
    full capacity. It can be lowered (and raised back up to the capacity)
    without touching the underlying storage.
    """
    __slots__ = ('_array', '_limit', '_readonly')

    def __init__(self, array: np.ndarray, limit: Optional[int] = None,
                 readonly: bool = False):
        _check_array(array)
        if readonly and array.flags.writeable:
            array = array.view()
            array.flags.writeable = False
        self._array = array
        self._readonly = readonly or not array.flags.writeable
        self._limit = len(array)
        if limit is not None:
            self.limit = limit

    @property
    def array(self) -> np.ndarray:
        """Zero-copy float32 view over the full capacity"""
        return self._array

    @property
    def capacity(self) -> int:
        return len(self._array)

    @property
    def limit(self) -> int:
        return self._limit

    @limit.setter
    def limit(self, value: int):
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
            raise TypeError(f"limit must be an int, got {type(value).__name__}")
        if value < 0 or value > self.capacity:
            raise BoundsViolationError(
                f"limit {value} outside [0, {self.capacity}]"
            )
        self._limit = int(value)

    @property
    def readonly(self) -> bool:
        return self._readonly

    @property
    def is_direct(self) -> bool:
        return False

    def as_readonly(self) -> 'FloatBuffer':
        """Read-only buffer sharing this buffer's storage and limit"""
        return type(self)(self._array, self._limit, readonly=True)

    def to_numpy(self) -> np.ndarray:
        """Copy of the elements in [0, limit)"""
        return self._array[:self._limit].copy()

    def _check_index(self, index: int) -> int:
        if index < 0:
            index += self._limit
        if index < 0 or index >= self._limit:
            raise BoundsViolationError(
                f"index {index} outside limit {self._limit}"
            )
        return index

    def __len__(self) -> int:
        return self._limit

    def __getitem__(self, index: int) -> float:
        return float(self._array[self._check_index(index)])

    def __setitem__(self, index: int, value: float):
        if self._readonly:
            raise ReadOnlyBufferError("buffer is read-only")
        self._array[self._check_index(index)] = value

    def __repr__(self):
        return (
            f"{type(self).__name__}(limit={self._limit}, "
            f"capacity={self.capacity}, readonly={self._readonly})"
        )


class HeapFloatBuffer(FloatBuffer):
    """Buffer backed by a numpy array"""
    __slots__ = ()

    @classmethod
    def wrap(cls, array: np.ndarray, limit: Optional[int] = None) -> 'HeapFloatBuffer':
        """
        Wrap an existing array without copying it.

        The array must already be one-dimensional, C-contiguous float32 so
        that kernel writes land in the caller's storage.

        Args:
            array: Backing array
            limit: Logical limit (defaults to len(array))

        Returns:
            HeapFloatBuffer sharing memory with ``array``
        """
        return cls(array, limit)

    @classmethod
    def allocate(cls, capacity: int) -> 'HeapFloatBuffer':
        """Zero-filled buffer of the given capacity"""
        return cls(np.zeros(capacity, dtype=np.float32))

    @classmethod
    def of(cls, *values: float) -> 'HeapFloatBuffer':
        return cls(np.array(values, dtype=np.float32))


class DirectFloatBuffer(FloatBuffer):
    """
    Buffer backed by raw C memory in native byte order.

    The ctypes object owning the memory is kept on the buffer; the memory is
    released when the last buffer (or numpy view) referencing it goes away.
    """
    __slots__ = ('_raw', '_owner')

    def __init__(self, raw: Any, capacity: int, limit: Optional[int] = None,
                 readonly: bool = False):
        self._raw = raw
        self._owner = None
        array = np.ctypeslib.as_array(raw)[:capacity]
        super().__init__(array, limit, readonly)

    @property
    def is_direct(self) -> bool:
        return True

    @property
    def address(self) -> int:
        """Address of the first element"""
        return self._array.ctypes.data

    def as_readonly(self) -> 'DirectFloatBuffer':
        clone = DirectFloatBuffer(self._raw, self.capacity, self._limit, readonly=True)
        clone._owner = self._owner
        return clone

    @classmethod
    def allocate(cls, capacity: int) -> 'DirectFloatBuffer':
        """
        Allocate zero-filled unmanaged memory.

        Args:
            capacity: Number of float32 elements

        Returns:
            DirectFloatBuffer with limit == capacity
        """
        capacity = _check_capacity(capacity)
        # ctypes refuses zero-length arrays as numpy sources
        raw = (ctypes.c_float * max(1, capacity))()
        return cls(raw, capacity)

    @classmethod
    def of(cls, *values: float) -> 'DirectFloatBuffer':
        buf = cls.allocate(len(values))
        buf.array[:] = values
        return buf

    @classmethod
    def from_array(cls, values: Union[np.ndarray, Iterable[float]]) -> 'DirectFloatBuffer':
        """Copy values into freshly allocated unmanaged memory"""
        data = np.asarray(values, dtype=np.float32).ravel()
        buf = cls.allocate(len(data))
        buf.array[:] = data
        return buf

    @classmethod
    def from_address(cls, address: int, capacity: int,
                     owner: Any = None) -> 'DirectFloatBuffer':
        """
        View memory owned elsewhere, e.g. weights mapped by a model loader.

        Args:
            address: Address of the first float32 element
            capacity: Number of float32 elements at ``address``
            owner: Object keeping the memory alive; held for the lifetime of
                   the buffer

        Returns:
            DirectFloatBuffer over the given region
        """
        capacity = _check_capacity(capacity)
        raw = (ctypes.c_float * max(1, capacity)).from_address(address)
        buf = cls(raw, capacity)
        buf._owner = owner
        return buf


def as_buffer(obj: Union[FloatBuffer, np.ndarray]) -> FloatBuffer:
    """
    Resolve a kernel operand to a FloatBuffer.

    Args:
        obj: FloatBuffer (returned unchanged) or numpy array (wrapped in place)

    Returns:
        FloatBuffer
    """
    if isinstance(obj, FloatBuffer):
        return obj
    if isinstance(obj, np.ndarray):
        return HeapFloatBuffer.wrap(obj)
    raise TypeError(f"Unsupported buffer type: {type(obj).__name__}")
