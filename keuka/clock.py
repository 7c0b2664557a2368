"""Processor-time measurement."""

from __future__ import annotations

import time


def get_elapsed_ticks(start: float) -> float:
    """Return processor seconds elapsed since ``start``.

    ``start`` is a value previously taken from ``time.process_time()``.
    """
    return time.process_time() - start