"""Cash-flow gap coverage planner - core business logic for closing projected shortfalls"""

import math
from dataclasses import replace
from datetime import date
from typing import Dict, List, Sequence

from coverage_gateway.domain.allocation import allocate_by_weights
from coverage_gateway.domain.balances import build_account_balances, filter_month_operations, resolve_transfer_pair
from coverage_gateway.domain.models import (
    CoverageActionType,
    CoveragePlan,
    CoveragePlanAction,
    DayMetric,
    GapAlert,
    LedgerTransaction,
    TransferPair,
    empty_totals,
)
from coverage_gateway.domain.policy import CoveragePolicy, DEFAULT_POLICY
from coverage_gateway.utils.date_utils import extract_day_number, format_day_month, shift_day_in_month
from coverage_gateway.utils.rounding import to_rounded_positive


def normalize_alerts(gap_alerts: Sequence[GapAlert]) -> List[GapAlert]:
    """Round shortages to non-negative integers and drop alerts with nothing to cover"""
    normalized = [
        replace(alert, shortage=to_rounded_positive(alert.shortage))
        for alert in gap_alerts
        if math.isfinite(alert.shortage)
    ]
    return [alert for alert in normalized if alert.shortage > 0]


def postpone_until_label(month_date: date, risk_date_label: str, postpone_days: int) -> str:
    """Label for the date payments can be pushed to, e.g. "31.01" or "03.03" """
    day = extract_day_number(risk_date_label)
    if day is None:
        return f"in {postpone_days} days"

    return format_day_month(shift_day_in_month(month_date, day, postpone_days))


def _non_risk_expenses(day_metrics: Dict[int, DayMetric]) -> int:
    return sum(
        metric.expense
        for metric in day_metrics.values()
        if metric.expense is not None and metric.expense > 0 and not metric.is_risk
    )


def _expected_income(day_metrics: Dict[int, DayMetric]) -> int:
    return sum(max(0, metric.income or 0) for metric in day_metrics.values())


def _build_alert_actions(
    index: int,
    alert: GapAlert,
    amounts: Dict[CoverageActionType, int],
    transfer_pair: TransferPair,
    postpone_label: str,
) -> List[CoveragePlanAction]:
    actions = []

    reschedule = amounts[CoverageActionType.PAYMENT_RESCHEDULE]
    if reschedule > 0:
        actions.append(
            CoveragePlanAction(
                id=f"reschedule-{index}",
                type=CoverageActionType.PAYMENT_RESCHEDULE,
                risk_date_label=alert.date,
                amount=reschedule,
                title="Reschedule low-priority payments",
                description=(
                    f"Move payments without critical penalties to {postpone_label} "
                    "to relieve the risk date."
                ),
            )
        )

    receivables = amounts[CoverageActionType.RECEIVABLES_ACCELERATION]
    if receivables > 0:
        actions.append(
            CoveragePlanAction(
                id=f"receivables-{index}",
                type=CoverageActionType.RECEIVABLES_ACCELERATION,
                risk_date_label=alert.date,
                amount=receivables,
                title="Accelerate receivables",
                description="Agree with clients on partial early payment of the nearest acts and invoices.",
            )
        )

    internal = amounts[CoverageActionType.INTERNAL_TRANSFER]
    if internal > 0:
        actions.append(
            CoveragePlanAction(
                id=f"internal-{index}",
                type=CoverageActionType.INTERNAL_TRANSFER,
                risk_date_label=alert.date,
                amount=internal,
                title="Internal transfer between accounts",
                description=(
                    f"Move liquidity from «{transfer_pair.source_account}» "
                    f"to «{transfer_pair.target_account}»."
                ),
            )
        )

    external = amounts[CoverageActionType.EXTERNAL_FINANCING]
    if external > 0:
        # Factoring only makes sense when receivables are already in play for this date
        financing_tool = "factoring" if receivables > 0 else "overdraft"
        actions.append(
            CoveragePlanAction(
                id=f"external-{index}",
                type=CoverageActionType.EXTERNAL_FINANCING,
                risk_date_label=alert.date,
                amount=external,
                title="Raise external financing",
                description=f"Open a short-term {financing_tool} to cover the remaining cash gap.",
            )
        )

    return actions


def generate_coverage_plan(
    day_metrics: Dict[int, DayMetric],
    gap_alerts: Sequence[GapAlert],
    month_date: date,
    month_key: str,
    operations: Sequence[LedgerTransaction],
    policy: CoveragePolicy = DEFAULT_POLICY,
) -> CoveragePlan:
    """
    Main entry point: build a plan that closes the month's projected cash gaps.

    Flow:
    1. Normalize alerts and sum the total gap
    2. Compute how much each internal instrument can supply this month
    3. Take a target share of the gap per instrument, capped by that capacity
    4. External financing absorbs whatever is left
    5. Spread each instrument over the alerts proportionally to their shortage

    Never raises: empty or degenerate input yields an empty plan or pushes
    the whole gap to external financing.
    """
    alerts = normalize_alerts(gap_alerts)
    total_gap = sum(alert.shortage for alert in alerts)

    if total_gap == 0:
        return CoveragePlan(total_gap=0, covered_amount=0, residual_gap=0, actions=[], totals_by_type=empty_totals())

    transfer_pair = resolve_transfer_pair(
        build_account_balances(filter_month_operations(operations, month_key)),
        policy,
    )

    # Capacity ceilings, independent of the gap size
    reschedule_potential = to_rounded_positive(_non_risk_expenses(day_metrics) * policy.reschedule_capacity_ratio)
    receivables_potential = to_rounded_positive(_expected_income(day_metrics) * policy.receivables_capacity_ratio)
    transfer_potential = to_rounded_positive(transfer_pair.available_amount)

    reschedule_amount = min(to_rounded_positive(total_gap * policy.reschedule_target_ratio), reschedule_potential)
    receivables_amount = min(to_rounded_positive(total_gap * policy.receivables_target_ratio), receivables_potential)
    transfer_amount = min(to_rounded_positive(total_gap * policy.transfer_target_ratio), transfer_potential)
    external_amount = max(0, total_gap - reschedule_amount - receivables_amount - transfer_amount)

    weights = [alert.shortage for alert in alerts]
    allocations = {
        CoverageActionType.PAYMENT_RESCHEDULE: allocate_by_weights(reschedule_amount, weights),
        CoverageActionType.RECEIVABLES_ACCELERATION: allocate_by_weights(receivables_amount, weights),
        CoverageActionType.INTERNAL_TRANSFER: allocate_by_weights(transfer_amount, weights),
        CoverageActionType.EXTERNAL_FINANCING: allocate_by_weights(external_amount, weights),
    }

    actions: List[CoveragePlanAction] = []
    for index, alert in enumerate(alerts):
        amounts = {action_type: allocated[index] for action_type, allocated in allocations.items()}
        actions.extend(
            _build_alert_actions(
                index,
                alert,
                amounts,
                transfer_pair,
                postpone_until_label(month_date, alert.date, policy.postpone_days),
            )
        )

    totals_by_type = empty_totals()
    for action in actions:
        totals_by_type[action.type] += action.amount

    covered_amount = sum(action.amount for action in actions)

    return CoveragePlan(
        total_gap=total_gap,
        covered_amount=covered_amount,
        residual_gap=max(0, total_gap - covered_amount),
        actions=actions,
        totals_by_type=totals_by_type,
    )
