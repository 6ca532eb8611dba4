"""Validation helpers for config editing."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union


@dataclass
class NumberInfo:
    value: Optional[Union[int, float]]
    error: str | None = None


def parse_count(raw_value: str) -> NumberInfo:
    """Parse a non-negative integer cap; blank means 0 (unlimited)."""

    raw_value = raw_value.strip()
    if not raw_value:
        return NumberInfo(0)
    if not raw_value.isdigit():
        return NumberInfo(None, "Enter a non-negative integer")
    return NumberInfo(int(raw_value))


def parse_port(raw_value: str) -> NumberInfo:
    raw_value = raw_value.strip()
    if not raw_value.isdigit():
        return NumberInfo(None, "port must be numeric")
    port = int(raw_value)
    if not 1 <= port <= 65535:
        return NumberInfo(None, "port must be between 1 and 65535")
    return NumberInfo(port)


def parse_scale(raw_value: str, low: float, high: float) -> NumberInfo:
    """Parse a float voice parameter and check it is within [low, high]."""

    raw_value = raw_value.strip()
    try:
        value = float(raw_value)
    except ValueError:
        return NumberInfo(None, "Enter a number")
    if not low <= value <= high:
        return NumberInfo(None, f"Must be between {low} and {high}")
    return NumberInfo(value)
