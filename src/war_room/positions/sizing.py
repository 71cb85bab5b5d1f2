"""Exponential martingale sizing."""

from __future__ import annotations


def position_multiplier(level: int) -> int:
    return 2 ** (level - 1)


def position_size(level: int, base_size: float) -> float:
    return base_size * position_multiplier(level)


def total_exposure(level: int, base_size: float) -> float:
    """Capital committed across levels 1..level of a doubling sequence."""
    return base_size * (2**level - 1)
