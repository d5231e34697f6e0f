"""GET /v1/coverage-plan/history - Fetch a month's plan history"""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from coverage_gateway.api.v1.schemas import HistoryResponse, HistoryItem, MONTH_KEY_PATTERN
from coverage_gateway.infrastructure.database.session import get_db
from coverage_gateway.infrastructure.database.repositories import CoveragePlanRepository
from coverage_gateway.domain.exceptions import InvalidMonthKeyError
from coverage_gateway.utils.date_utils import parse_month_key

router = APIRouter()


@router.get("/coverage-plan/history", response_model=HistoryResponse)
def get_plan_history(
    month_key: str = Query(..., pattern=MONTH_KEY_PATTERN, description="Reporting month, YYYY-MM"),
    db: Session = Depends(get_db),
):
    """
    Retrieve recent coverage plans generated for a reporting month.
    """
    try:
        parse_month_key(month_key)
    except InvalidMonthKeyError as e:
        raise HTTPException(status_code=422, detail=str(e))

    plans = CoveragePlanRepository(db).get_plans_by_month(month_key, limit=20)

    return HistoryResponse(
        month_key=month_key,
        plans=[
            HistoryItem(
                plan_id=str(p.id),
                total_gap=p.total_gap,
                covered_amount=p.covered_amount,
                residual_gap=p.residual_gap,
                created_at=p.created_at.isoformat(),
            )
            for p in plans
        ],
    )
