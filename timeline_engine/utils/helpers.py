# timeline_engine/utils/helpers.py - Helper functions
"""
Clock, identifier and time formatting helpers shared by the engine.
"""

import time
import uuid
from typing import Optional


def now_ms() -> float:
    """
    Read the monotonic clock.

    Returns:
        Current monotonic time in milliseconds
    """
    return time.perf_counter() * 1000.0


def generate_event_id() -> str:
    """
    Generate an opaque unique event identifier.

    Returns:
        Random hex identifier
    """
    return uuid.uuid4().hex


def format_time(ms: float, precision: int = 2, units: str = 'auto') -> str:
    """
    Format milliseconds into a human-readable string.

    Args:
        ms: Time in milliseconds
        precision: Number of decimal places
        units: 'auto', 'ms', 's' or 'm'

    Returns:
        Formatted string (e.g., "1.50s")
    """
    if units == 'auto':
        if ms < 1000:
            return f"{ms:.{precision}f}ms"
        elif ms < 60000:
            return f"{ms / 1000:.{precision}f}s"
        else:
            return f"{ms / 60000:.{precision}f}m"

    if units == 's':
        return f"{ms / 1000:.{precision}f}s"
    elif units == 'm':
        return f"{ms / 60000:.{precision}f}m"

    return f"{ms:.{precision}f}ms"


def format_duration(start: float, end: float) -> str:
    """
    Format the span between two timestamps.

    Args:
        start: Start timestamp (ms)
        end: End timestamp (ms)

    Returns:
        Formatted duration string
    """
    return format_time(end - start)


def format_relative(timestamp: float, reference: Optional[float] = None) -> str:
    """
    Describe a timestamp relative to a reference time.

    Args:
        timestamp: Timestamp to describe (ms)
        reference: Reference time (ms), defaults to now

    Returns:
        Description such as "just now" or "5s ago"
    """
    if reference is None:
        reference = now_ms()

    diff = reference - timestamp
    if diff < 1000:
        return "just now"
    elif diff < 60000:
        return f"{int(diff // 1000)}s ago"
    elif diff < 3600000:
        return f"{int(diff // 60000)}m ago"

    return f"{int(diff // 3600000)}h ago"
