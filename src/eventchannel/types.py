"""Common type definitions for the eventchannel library."""

from datetime import timedelta
from typing import TypeVar

# Payload type of a channel
P = TypeVar("P")

# Payload type of a linked (target) channel
R = TypeVar("R")

# Delays are seconds or a timedelta
Delay = float | int | timedelta


def delay_seconds(delay: Delay) -> float:
    """
    Normalize a delay to seconds.

    Args:
        delay: Number of seconds or a timedelta

    Returns:
        Delay in seconds as float

    Raises:
        ValueError: If the delay is negative
    """
    seconds = delay.total_seconds() if isinstance(delay, timedelta) else float(delay)
    if seconds < 0:
        raise ValueError(f"delay must be non-negative, got {seconds}")
    return seconds
