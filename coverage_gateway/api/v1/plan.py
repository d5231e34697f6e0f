"""GET /v1/coverage-plan/{plan_id} - Fetch stored coverage plan"""

import uuid
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from coverage_gateway.api.v1.schemas import CoveragePlanResponse, CoverageActionSchema
from coverage_gateway.infrastructure.database.session import get_db
from coverage_gateway.infrastructure.database.repositories import CoveragePlanRepository
from coverage_gateway.domain.models import CoveragePlan

router = APIRouter()


@router.get("/coverage-plan/{plan_id}", response_model=CoveragePlanResponse)
def get_coverage_plan(plan_id: str, db: Session = Depends(get_db)):
    """
    Retrieve a coverage plan with its actions in original order.
    """
    try:
        plan_uuid = uuid.UUID(plan_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid plan ID format")

    plan = CoveragePlanRepository(db).get_plan_by_id(plan_uuid)

    if not plan:
        raise HTTPException(status_code=404, detail="Plan not found")

    coverage_percent = CoveragePlan(
        total_gap=plan.total_gap,
        covered_amount=plan.covered_amount,
        residual_gap=plan.residual_gap,
    ).coverage_percent

    return CoveragePlanResponse(
        plan_id=str(plan.id),
        month_key=plan.month_key,
        total_gap=plan.total_gap,
        covered_amount=plan.covered_amount,
        residual_gap=plan.residual_gap,
        coverage_percent=coverage_percent,
        actions=[
            CoverageActionSchema(
                id=action.action_key,
                type=action.action_type,
                risk_date_label=action.risk_date_label,
                amount=action.amount,
                title=action.title,
                description=action.description,
            )
            for action in plan.actions
        ],
        totals_by_type=plan.totals_by_type,
        created_at=plan.created_at.isoformat(),
    )
