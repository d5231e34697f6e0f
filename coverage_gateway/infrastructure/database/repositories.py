"""Data access layer for coverage plans and planned payments"""

import uuid
from typing import Dict, List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session
from coverage_gateway.infrastructure.database.models import (
    CoverageActionRecord,
    CoveragePlanRecord,
    PlannedPaymentRecord,
)
from coverage_gateway.domain.models import CoveragePlan


class CoveragePlanRepository:
    """Repository for generated coverage plans"""

    def __init__(self, db: Session):
        self.db = db

    def create_plan(self, month_key: str, plan: CoveragePlan) -> CoveragePlanRecord:
        """Persist coverage plan with its actions"""
        db_plan = CoveragePlanRecord(
            month_key=month_key,
            total_gap=plan.total_gap,
            covered_amount=plan.covered_amount,
            residual_gap=plan.residual_gap,
            totals_by_type={action_type.value: amount for action_type, amount in plan.totals_by_type.items()},
        )
        self.db.add(db_plan)
        self.db.flush()  # Get ID without committing

        for position, action in enumerate(plan.actions):
            self.db.add(
                CoverageActionRecord(
                    plan_id=db_plan.id,
                    position=position,
                    action_key=action.id,
                    action_type=action.type.value,
                    risk_date_label=action.risk_date_label,
                    amount=action.amount,
                    title=action.title,
                    description=action.description,
                )
            )

        return db_plan

    def get_plan_by_id(self, plan_id: uuid.UUID) -> Optional[CoveragePlanRecord]:
        """Fetch plan with actions"""
        return (
            self.db.query(CoveragePlanRecord)
            .filter(CoveragePlanRecord.id == plan_id)
            .first()
        )

    def get_plans_by_month(self, month_key: str, limit: int = 20) -> List[CoveragePlanRecord]:
        """Fetch recent plans for a reporting month"""
        return (
            self.db.query(CoveragePlanRecord)
            .filter(CoveragePlanRecord.month_key == month_key)
            .order_by(CoveragePlanRecord.created_at.desc(), CoveragePlanRecord.created_ns.desc())
            .limit(limit)
            .all()
        )


class PlannedPaymentRepository:
    """Repository for planned receipts and payments"""

    def __init__(self, db: Session):
        self.db = db

    def add_payment(self, month_key: str, day: int, amount: int) -> int:
        """Record a planned amount and return the day's accumulated total"""
        self.db.add(PlannedPaymentRecord(month_key=month_key, day=day, amount=amount))
        self.db.flush()

        total = (
            self.db.query(func.sum(PlannedPaymentRecord.amount))
            .filter(PlannedPaymentRecord.month_key == month_key, PlannedPaymentRecord.day == day)
            .scalar()
        )
        return int(total or 0)

    def get_amounts_by_month(self, month_key: str) -> Dict[int, int]:
        """Accumulated planned amount per day of the month"""
        rows = (
            self.db.query(PlannedPaymentRecord.day, func.sum(PlannedPaymentRecord.amount))
            .filter(PlannedPaymentRecord.month_key == month_key)
            .group_by(PlannedPaymentRecord.day)
            .all()
        )
        return {day: int(total) for day, total in rows}
