"""Domain models - pure Python dataclasses representing cash-flow planning entities"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Dict, List, Optional

from coverage_gateway.utils.rounding import round_half_up


class TransactionType(str, Enum):
    """Kind of recorded cash movement"""

    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"


class CoverageActionType(str, Enum):
    """Remediation instrument used to close a cash gap"""

    PAYMENT_RESCHEDULE = "payment_reschedule"
    RECEIVABLES_ACCELERATION = "receivables_acceleration"
    INTERNAL_TRANSFER = "internal_transfer"
    EXTERNAL_FINANCING = "external_financing"


@dataclass(frozen=True)
class GapAlert:
    """Projected cash shortfall on a given date"""

    date: str  # free-text label, e.g. "26 февраля"
    reason: str
    shortage: float


@dataclass(frozen=True)
class DayMetric:
    """Net cash record for one calendar day"""

    income: Optional[int] = None
    expense: Optional[int] = None
    is_risk: bool = False


@dataclass(frozen=True)
class LedgerTransaction:
    """Recorded cash movement from the operations ledger"""

    date: date
    type: TransactionType
    account: str  # transfers encode "source -> target"
    amount: int
    transaction_id: str = ""
    description: str = ""


@dataclass(frozen=True)
class TransferPair:
    """Accounts recommended for an internal liquidity transfer"""

    source_account: str
    target_account: str
    available_amount: int


@dataclass(frozen=True)
class CoveragePlanAction:
    """Single remediation instruction for one gap alert"""

    id: str
    type: CoverageActionType
    risk_date_label: str
    amount: int
    title: str
    description: str


def empty_totals() -> Dict[CoverageActionType, int]:
    return {action_type: 0 for action_type in CoverageActionType}


@dataclass(frozen=True)
class CoveragePlan:
    """Output of gap coverage planning"""

    total_gap: int
    covered_amount: int
    residual_gap: int
    actions: List[CoveragePlanAction] = field(default_factory=list)
    totals_by_type: Dict[CoverageActionType, int] = field(default_factory=empty_totals)

    @property
    def coverage_percent(self) -> int:
        """Share of the gap closed by the plan, capped at 100"""
        if self.total_gap <= 0:
            return 0
        return min(100, round_half_up(self.covered_amount / self.total_gap * 100))
