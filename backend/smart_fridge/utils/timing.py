"""Timing spans for the slow parts of a request (LLM calls, recipe generation)."""

import time
from contextlib import contextmanager
from typing import Iterator

from smart_fridge.logging import get_logger

logger = get_logger(__name__)

# Grep-able prefix shared by every timing log line
_TIMING_PREFIX = "[TIMING]"


def format_duration(ms: int) -> str:
    """12500 -> '12.5s', 750 -> '750ms'."""
    if ms >= 1000:
        return f"{ms / 1000:.1f}s"
    return f"{ms}ms"


class Span:
    def __init__(self, name: str) -> None:
        self.name = name
        self.started = time.perf_counter()
        self.elapsed_ms: int | None = None

    def finish(self) -> int:
        self.elapsed_ms = int((time.perf_counter() - self.started) * 1000)
        return self.elapsed_ms


@contextmanager
def time_span(name: str, **extra: object) -> Iterator[Span]:
    """Log `[TIMING] <name> elapsed_ms=...` with extra key=value fields when the block exits."""
    span = Span(name)
    try:
        yield span
    finally:
        elapsed = span.finish()
        fields = " ".join(f"{k}={v}" for k, v in extra.items())
        logger.info(
            "%s %s elapsed_ms=%s (%s) %s",
            _TIMING_PREFIX,
            name,
            elapsed,
            format_duration(elapsed),
            fields,
        )
