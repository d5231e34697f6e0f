"""Planned payments entered by users on top of the month's cash snapshot"""

import math
from dataclasses import replace
from datetime import date
from typing import Dict

from coverage_gateway.domain.exceptions import InvalidPlannedPaymentError
from coverage_gateway.domain.models import DayMetric
from coverage_gateway.utils.date_utils import days_in_month
from coverage_gateway.utils.rounding import round_half_away


def normalize_planned_amount(raw_amount: float) -> int:
    """
    Round a user-entered amount to whole currency units.

    Positive amounts are planned receipts, negative amounts planned payments.
    Raises InvalidPlannedPaymentError when nothing remains after rounding.
    """
    if raw_amount is None or not math.isfinite(raw_amount):
        raise InvalidPlannedPaymentError("Planned amount must be a finite number")

    amount = round_half_away(raw_amount)
    if amount == 0:
        raise InvalidPlannedPaymentError("Planned amount must be non-zero")

    return amount


def validate_planned_day(month_date: date, day: int) -> int:
    """Ensure the day exists in the reporting month"""
    last_day = days_in_month(month_date)
    if day < 1 or day > last_day:
        raise InvalidPlannedPaymentError(f"Day {day} is outside of month (1..{last_day})")
    return day


def merge_planned_payments(
    day_metrics: Dict[int, DayMetric],
    planned_amounts: Dict[int, int],
) -> Dict[int, DayMetric]:
    """
    Overlay planned amounts on day metrics.

    Receipts add to the day's income, payments add their absolute value to
    the day's expense. Risk flags are kept. The input mapping is not changed.
    """
    merged = dict(day_metrics)

    for day, amount in planned_amounts.items():
        if amount == 0:
            continue

        current = merged.get(day, DayMetric())
        if amount > 0:
            merged[day] = replace(current, income=(current.income or 0) + amount)
        else:
            merged[day] = replace(current, expense=(current.expense or 0) + abs(amount))

    return merged
