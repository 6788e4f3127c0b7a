"""Human-readable durations and sizes for terminal output."""

from __future__ import annotations

import math

_BYTE_UNITS = ("B", "KB", "MB", "GB", "TB")


def format_number(value: float, unit: str = "") -> str:
    """Round by magnitude: ``230``, ``14.5``, ``1.77``."""
    magnitude = abs(value)
    if magnitude >= 100:
        formatted = str(math.floor(value + 0.5))
    elif magnitude >= 10:
        formatted = f"{value:.1f}"
    else:
        formatted = f"{value:.2f}"
    return f"{formatted} {unit}" if unit else formatted


def format_duration(ms: float) -> str:
    if ms < 1000:
        return format_number(ms, "ms")
    if ms < 60_000:
        return format_number(ms / 1000, "s")
    if ms < 3_600_000:
        return format_number(ms / 60_000, "min")
    return format_number(ms / 3_600_000, "h")


def format_bytes(size: float) -> str:
    if size <= 0:
        return "0 B"
    index = 0
    while size >= 1024 and index < len(_BYTE_UNITS) - 1:
        size /= 1024
        index += 1
    return format_number(size, _BYTE_UNITS[index])


def format_clock(ms: float) -> str:
    """Coarse elapsed/remaining time such as ``"1m 5s"`` or ``"42s"``."""
    seconds = int(max(ms, 0) // 1000)
    minutes, remainder = divmod(seconds, 60)
    if minutes > 0:
        return f"{minutes}m {remainder}s"
    return f"{seconds}s"
