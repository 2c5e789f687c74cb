"""Random number source for the ``R`` token."""

import random
import threading
from typing import Protocol


class RandomSource(Protocol):
    """Anything that can draw an integer in ``[low, high]``."""

    def randint(self, low: int, high: int) -> int: ...


class LockedRandomSource:
    """
    Thread-safe random source backed by the OS entropy pool.

    Draws are serialized with a lock so one instance can be shared by
    every resolver in the process.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.SystemRandom()
        self._lock = threading.Lock()

    def randint(self, low: int, high: int) -> int:
        with self._lock:
            return self._rng.randint(low, high)


default_random_source = LockedRandomSource()
