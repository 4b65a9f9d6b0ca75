"""
Dispatch core for the numba backend.

Owns the backend configuration, applies it to numba once, and runs kernels
under the configured in-flight capacity. Validation happens before dispatch,
so anything raised from inside a kernel is a backend failure.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Callable, Optional

import numba

from .base import BackendCapacityError, BackendError
from .config import BackendConfig
from ..utils.numba_ops import LAYER_CHOICES, active_threading_layer, get_backend_info

logger = logging.getLogger(__name__)


class NativeCore:
    """Configured entry point into the numeric backend"""

    def __init__(self, config: Optional[BackendConfig] = None):
        """
        Initialize the backend.

        Args:
            config: Backend settings (default: BackendConfig.from_env())
        """
        self.config = config if config is not None else BackendConfig.from_env()

        self._apply_threading_layer(self.config.threading_layer)

        max_threads = numba.config.NUMBA_NUM_THREADS
        if self.config.num_threads is not None and self.config.num_threads > max_threads:
            raise ValueError(
                f"num_threads {self.config.num_threads} exceeds numba's "
                f"NUMBA_NUM_THREADS ({max_threads})"
            )

        # No semaphore when unlimited: the hot path takes no lock at all
        self._slots = None
        if self.config.max_in_flight is not None:
            self._slots = threading.BoundedSemaphore(self.config.max_in_flight)

        logger.info(f"Native backend ready: {self.describe()}")

    def _apply_threading_layer(self, requested: str):
        if requested == 'default':
            return
        active = active_threading_layer()
        if active is None:
            numba.config.THREADING_LAYER = requested
            return
        # The layer is fixed for the process by the first parallel launch
        if active not in LAYER_CHOICES[requested]:
            logger.warning(
                f"Threading layer {requested!r} ignored, numba already runs on {active!r}"
            )

    def describe(self) -> dict:
        """Backend and configuration summary"""
        info = get_backend_info()
        info['max_in_flight'] = self.config.max_in_flight
        info['parallel'] = self.config.parallel
        if self.config.num_threads is not None:
            info['num_threads'] = self.config.num_threads
        return info

    def _acquire(self, name: str):
        if not self._slots.acquire(blocking=False):
            logger.warning(
                f"Backend capacity exhausted ({self.config.max_in_flight} in flight), "
                f"rejecting {name}"
            )
            raise BackendCapacityError(
                f"{name}: all {self.config.max_in_flight} backend slots are in use"
            )

    @contextmanager
    def slot(self, name: str = 'reservation'):
        """
        Hold one in-flight slot for the duration of the block.

        Raises:
            BackendCapacityError: If no slot is free
        """
        if self._slots is None:
            yield
            return
        self._acquire(name)
        try:
            yield
        finally:
            self._slots.release()

    def dispatch(self, name: str, kernel: Callable, *args):
        """
        Run a validated kernel call.

        Args:
            name: Operation name used in errors and logs
            kernel: Compiled kernel
            *args: Kernel arguments

        Raises:
            BackendCapacityError: If max_in_flight calls are already running
            BackendError: If the kernel itself fails
        """
        slots = self._slots
        if slots is not None:
            self._acquire(name)
        try:
            kernel(*args)
        except Exception as e:
            logger.error(f"Kernel {name} failed: {e}")
            raise BackendError(f"{name} failed in numeric backend: {e}") from e
        finally:
            if slots is not None:
                slots.release()

    def dispatch_parallel(self, name: str, serial: Callable, parallel: Callable, *args):
        """Run ``parallel`` when enabled in the config, ``serial`` otherwise"""
        if not self.config.parallel:
            self.dispatch(name, serial, *args)
            return
        if self.config.num_threads is not None:
            # numba's thread count is per calling thread
            numba.set_num_threads(self.config.num_threads)
        self.dispatch(name, parallel, *args)
