"""
Backend configuration.

Values come from keyword arguments or from the environment:

    NNOPS_NUM_THREADS       worker threads for the parallel kernels
    NNOPS_MAX_IN_FLIGHT     concurrent kernel calls the backend accepts
    NNOPS_THREADING_LAYER   numba threading layer ('default', 'threadsafe', ...)
    NNOPS_PARALLEL          '1' to use the parallel gemm / batch kernels

max_in_flight is the capacity of the numeric backend, not of this library:
size it to at least the thread pool of the serving process, otherwise calls
beyond the limit fail with BackendCapacityError.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

ENV_NUM_THREADS = 'NNOPS_NUM_THREADS'
ENV_MAX_IN_FLIGHT = 'NNOPS_MAX_IN_FLIGHT'
ENV_THREADING_LAYER = 'NNOPS_THREADING_LAYER'
ENV_PARALLEL = 'NNOPS_PARALLEL'

THREADING_LAYERS = ('default', 'safe', 'threadsafe', 'forksafe', 'tbb', 'omp', 'workqueue')

_TRUE = ('1', 'true', 'yes', 'on')
_FALSE = ('0', 'false', 'no', 'off', '')


def _parse_positive_int(name: str, raw: Optional[str]) -> Optional[int]:
    if raw is None or raw.strip() == '':
        return None
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be a positive integer, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{name} must be a positive integer, got {raw!r}")
    return value


@dataclass(frozen=True)
class BackendConfig:
    """
    Numeric backend settings.

    Attributes:
        num_threads: Worker threads for parallel kernels (None = numba default)
        max_in_flight: Concurrent kernel calls allowed (None = unlimited)
        threading_layer: numba threading layer to request
        parallel: Use the multi-threaded gemm and batch linear kernels
    """
    num_threads: Optional[int] = None
    max_in_flight: Optional[int] = None
    threading_layer: str = 'default'
    parallel: bool = False

    def __post_init__(self):
        for name in ('num_threads', 'max_in_flight'):
            value = getattr(self, name)
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ValueError(f"{name} must be a positive int or None, got {value!r}")
        if self.threading_layer not in THREADING_LAYERS:
            raise ValueError(
                f"threading_layer must be one of {THREADING_LAYERS}, "
                f"got {self.threading_layer!r}"
            )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'BackendConfig':
        """
        Build a config from environment variables.

        Args:
            environ: Mapping to read instead of os.environ

        Returns:
            BackendConfig
        """
        env = os.environ if environ is None else environ

        parallel_raw = env.get(ENV_PARALLEL, '').strip().lower()
        if parallel_raw in _TRUE:
            parallel = True
        elif parallel_raw in _FALSE:
            parallel = False
        else:
            raise ValueError(f"{ENV_PARALLEL} must be a boolean flag, got {parallel_raw!r}")

        layer = env.get(ENV_THREADING_LAYER, '').strip().lower() or 'default'
        if layer not in THREADING_LAYERS:
            raise ValueError(
                f"{ENV_THREADING_LAYER} must be one of {THREADING_LAYERS}, got {layer!r}"
            )

        return cls(
            num_threads=_parse_positive_int(ENV_NUM_THREADS, env.get(ENV_NUM_THREADS)),
            max_in_flight=_parse_positive_int(ENV_MAX_IN_FLIGHT, env.get(ENV_MAX_IN_FLIGHT)),
            threading_layer=layer,
            parallel=parallel,
        )
