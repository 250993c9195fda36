# app/utils/timeit.py
from __future__ import annotations
import logging
import time
from contextlib import contextmanager

log = logging.getLogger("timeit")


@contextmanager
def timeit(label: str, logger: logging.Logger | None = None):
    t0 = time.perf_counter()
    try:
        yield
    finally:
        dt = (time.perf_counter() - t0) * 1000.0
        (logger or log).info("[timeit] %s: %.1f ms", label, dt)


__all__ = ["timeit"]
