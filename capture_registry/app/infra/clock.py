"""Logical clock abstraction (block height)."""
from __future__ import annotations

import os
import threading
from typing import Protocol

from dotenv import load_dotenv

load_dotenv()

CLOCK_START = int(os.getenv("REGISTRY_CLOCK_START", "1000"))


class Clock(Protocol):
    def now(self) -> int:
        ...


class BlockClock:
    """Monotonic counter standing in for the host chain's block height.

    Every read advances the height by one, so two mutations never share a
    timestamp.
    """

    def __init__(self, start: int = CLOCK_START) -> None:
        self._height = start
        self._lock = threading.Lock()

    def now(self) -> int:
        with self._lock:
            height = self._height
            self._height += 1
        return height

    def peek(self) -> int:
        return self._height

    def advance_to(self, height: int) -> None:
        """Move forward to at least `height`; never moves backwards."""
        with self._lock:
            self._height = max(self._height, height)


_clock: BlockClock | None = None


def get_clock() -> BlockClock:
    global _clock
    if _clock is None:
        _clock = BlockClock()
    return _clock
