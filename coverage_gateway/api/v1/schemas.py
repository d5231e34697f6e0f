"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field
from datetime import date as date_type
from typing import Dict, List, Optional

from coverage_gateway.domain.models import (
    CoverageActionType,
    CoveragePlan,
    DayMetric,
    GapAlert,
    LedgerTransaction,
    TransactionType,
)

MONTH_KEY_PATTERN = r"^\d{4}-\d{2}$"

# Per-entry bound for BIGINT amount columns
MAX_PLANNED_AMOUNT = 10**15


class GapAlertSchema(BaseModel):
    """Projected cash shortfall"""

    date: str = Field(..., description="Free-text date label, e.g. '26 февраля'")
    reason: str = ""
    shortage: float = Field(..., allow_inf_nan=False, description="Projected deficit amount")

    def to_domain(self) -> GapAlert:
        return GapAlert(date=self.date, reason=self.reason, shortage=self.shortage)


class DayMetricSchema(BaseModel):
    """Cash flow for one day of the month"""

    income: Optional[int] = None
    expense: Optional[int] = None
    is_risk: bool = False

    def to_domain(self) -> DayMetric:
        return DayMetric(income=self.income, expense=self.expense, is_risk=self.is_risk)


class OperationSchema(BaseModel):
    """Ledger operation, sent inline or returned by the ledger API"""

    id: str = ""
    date: date_type
    type: TransactionType
    account: str = Field(..., description="Account name; transfers use 'source -> target'")
    amount: int = Field(..., strict=True, description="Signed amount in whole currency units")
    description: str = ""

    def to_domain(self) -> LedgerTransaction:
        return LedgerTransaction(
            transaction_id=self.id,
            date=self.date,
            type=self.type,
            account=self.account,
            amount=self.amount,
            description=self.description,
        )


class CoveragePlanRequest(BaseModel):
    """Request body for POST /v1/coverage-plan"""

    month_key: str = Field(..., pattern=MONTH_KEY_PATTERN, description="Reporting month, YYYY-MM")
    gap_alerts: List[GapAlertSchema] = Field(default_factory=list)
    day_metrics: Dict[int, DayMetricSchema] = Field(default_factory=dict)
    operations: Optional[List[OperationSchema]] = Field(
        default=None, description="Omit to load the month's operations from the ledger"
    )


class CoverageActionSchema(BaseModel):
    """Single remediation action"""

    id: str
    type: CoverageActionType
    risk_date_label: str
    amount: int
    title: str
    description: str


class CoveragePlanResponse(BaseModel):
    """Response for POST /v1/coverage-plan and GET /v1/coverage-plan/{plan_id}"""

    plan_id: str
    month_key: str
    total_gap: int
    covered_amount: int
    residual_gap: int
    coverage_percent: int
    actions: List[CoverageActionSchema]
    totals_by_type: Dict[CoverageActionType, int]
    created_at: Optional[str] = None

    @classmethod
    def from_plan(cls, plan_id: str, month_key: str, plan: CoveragePlan) -> "CoveragePlanResponse":
        return cls(
            plan_id=plan_id,
            month_key=month_key,
            total_gap=plan.total_gap,
            covered_amount=plan.covered_amount,
            residual_gap=plan.residual_gap,
            coverage_percent=plan.coverage_percent,
            actions=[
                CoverageActionSchema(
                    id=action.id,
                    type=action.type,
                    risk_date_label=action.risk_date_label,
                    amount=action.amount,
                    title=action.title,
                    description=action.description,
                )
                for action in plan.actions
            ],
            totals_by_type=plan.totals_by_type,
        )


class HistoryItem(BaseModel):
    """Single plan in a month's history"""

    plan_id: str
    total_gap: int
    covered_amount: int
    residual_gap: int
    created_at: str


class HistoryResponse(BaseModel):
    """Response for GET /v1/coverage-plan/history"""

    month_key: str
    plans: List[HistoryItem]


class PlannedPaymentRequest(BaseModel):
    """Request body for POST /v1/planned-payments"""

    month_key: str = Field(..., pattern=MONTH_KEY_PATTERN)
    day: int = Field(..., description="Day of month")
    amount: float = Field(
        ...,
        allow_inf_nan=False,
        ge=-MAX_PLANNED_AMOUNT,
        le=MAX_PLANNED_AMOUNT,
        description="Positive for receipts, negative for payments",
    )


class PlannedPaymentResponse(BaseModel):
    """Accumulated planned amount for a day"""

    month_key: str
    day: int
    amount: int
    day_total: int


class PlannedPaymentsResponse(BaseModel):
    """Response for GET /v1/planned-payments"""

    month_key: str
    amounts: Dict[int, int]
