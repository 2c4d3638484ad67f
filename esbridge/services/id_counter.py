"""
Process-wide document id counter.
Challenge: Concurrent creates must never share an id; ids keep growing after a restart.
"""

import threading


class IdCounter:
    """Monotonic counter handing out decimal string ids ("1", "2", ...)."""

    def __init__(self, start: int = 0):
        self._value = start
        self._lock = threading.Lock()

    @property
    def value(self) -> int:
        return self._value

    def next(self) -> str:
        return self.reserve(1)[0]

    def reserve(self, count: int) -> list[str]:
        """Claim count consecutive ids in one step (bulk writes)."""
        with self._lock:
            first = self._value + 1
            self._value += count
        return [str(i) for i in range(first, first + count)]

    def advance_to(self, value: int) -> None:
        """Move the counter forward to value; never moves it back."""
        with self._lock:
            if value > self._value:
                self._value = value
