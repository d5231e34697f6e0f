"""Rounding helpers for money amounts"""

import math


def round_half_up(value: float) -> int:
    """Round to nearest integer, halves towards +infinity (2.5 -> 3, -2.5 -> -2)"""
    return math.floor(value + 0.5)


def round_half_away(value: float) -> int:
    """Round to nearest integer, halves away from zero (2.5 -> 3, -2.5 -> -3)"""
    rounded = round_half_up(abs(value))
    return rounded if value >= 0 else -rounded


def to_rounded_positive(value: float) -> int:
    """Round half-up and clamp at zero"""
    return max(0, round_half_up(value))
