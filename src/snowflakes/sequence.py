"""
Per-client sequence counter.
"""

import threading

import structlog

logger = structlog.get_logger()

# Highest value before the counter resets. The reset happens strictly after
# this value has been issued, so 4096 is handed out once per cycle.
SEQUENCE_MAX = 4095


class SequenceCounter:
    """
    Lock-guarded counter owned by a single client.

    ``advance`` is the only way to read it: it returns the current value and
    moves the counter on in one atomic step.
    """

    def __init__(self, start: int = 0) -> None:
        if start < 0:
            raise ValueError("sequence start must not be negative")
        self._value = start
        self._lock = threading.Lock()

    def advance(self) -> int:
        with self._lock:
            seq = self._value
            if self._value > SEQUENCE_MAX:
                self._value = 0
            else:
                self._value += 1
        if seq > SEQUENCE_MAX:
            logger.info("sequence_wrapped", sequence=seq)
        return seq
