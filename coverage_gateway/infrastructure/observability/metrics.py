"""Prometheus metrics for monitoring coverage plans, instrument mix, and webhook performance"""

from prometheus_client import Counter, Histogram

from coverage_gateway.domain.models import CoveragePlan

# Plan metrics
coverage_plan_counter = Counter(
    "coverage_plan_total",
    "Total coverage plans generated",
    ["outcome"],  # no_gap | full | partial
)

coverage_instrument_amount_counter = Counter(
    "coverage_instrument_amount_total",
    "Amount assigned to each remediation instrument",
    ["instrument"],
)

coverage_gap_histogram = Histogram(
    "coverage_gap_amount",
    "Total cash gap per generated plan",
    buckets=[0, 100_000, 500_000, 1_000_000, 2_500_000, 5_000_000, 10_000_000],
)

planned_payment_counter = Counter(
    "planned_payment_total",
    "Planned payments added",
    ["direction"],  # receipt | payment
)

# Webhook metrics
webhook_latency_histogram = Histogram(
    "webhook_latency_seconds",
    "Plan webhook response time",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

webhook_failure_counter = Counter(
    "webhook_failures_total",
    "Failed webhook deliveries",
)

# Ledger API metrics
ledger_fetch_failures_counter = Counter(
    "ledger_fetch_failures_total",
    "Failed ledger API calls",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_plan(plan: CoveragePlan) -> None:
    """Record plan metrics for monitoring gap sizes and instrument distribution"""
    if plan.total_gap == 0:
        outcome = "no_gap"
    elif plan.residual_gap == 0:
        outcome = "full"
    else:
        outcome = "partial"
    coverage_plan_counter.labels(outcome=outcome).inc()

    coverage_gap_histogram.observe(plan.total_gap)

    for action_type, amount in plan.totals_by_type.items():
        if amount > 0:
            coverage_instrument_amount_counter.labels(instrument=action_type.value).inc(amount)


def record_planned_payment(amount: int) -> None:
    planned_payment_counter.labels(direction="receipt" if amount > 0 else "payment").inc()
