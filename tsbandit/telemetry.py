from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Any, Dict

log = logging.getLogger("tsbandit.telemetry")


class Stopwatch:
    """Elapsed time of a ``timed`` block, readable after the block exits."""

    def __init__(self) -> None:
        self.elapsed_ms: float = 0.0


@contextmanager
def timed(stage: str, ctx: Dict[str, Any] | None = None):
    """Context manager that logs elapsed ms for the given stage."""
    watch = Stopwatch()
    start = time.perf_counter()
    try:
        yield watch
    finally:
        watch.elapsed_ms = (time.perf_counter() - start) * 1000.0
        payload = {"stage": stage, "ms": int(watch.elapsed_ms)}
        if ctx:
            payload.update(ctx)
        log.info("timing", extra=payload)
