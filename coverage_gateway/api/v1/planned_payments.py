"""/v1/planned-payments - planned receipts and payments for a reporting month"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from coverage_gateway.api.v1.schemas import (
    MONTH_KEY_PATTERN,
    PlannedPaymentRequest,
    PlannedPaymentResponse,
    PlannedPaymentsResponse,
)
from coverage_gateway.api.dependencies import get_request_id
from coverage_gateway.infrastructure.database.session import get_db
from coverage_gateway.infrastructure.database.repositories import PlannedPaymentRepository
from coverage_gateway.domain.planned_payments import normalize_planned_amount, validate_planned_day
from coverage_gateway.domain.exceptions import InvalidMonthKeyError, InvalidPlannedPaymentError
from coverage_gateway.infrastructure.observability.logging import log_planned_payment
from coverage_gateway.infrastructure.observability.metrics import record_planned_payment
from coverage_gateway.utils.date_utils import parse_month_key

router = APIRouter()


@router.post("/planned-payments", response_model=PlannedPaymentResponse)
def add_planned_payment(
    request_body: PlannedPaymentRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    """
    Add a planned receipt (positive) or payment (negative) to a day.

    Amounts on the same day accumulate and feed the next coverage plan.
    """
    request_id = get_request_id(request)

    try:
        month_date = parse_month_key(request_body.month_key)
        day = validate_planned_day(month_date, request_body.day)
        amount = normalize_planned_amount(request_body.amount)
    except (InvalidMonthKeyError, InvalidPlannedPaymentError) as e:
        logging.warning(f"Rejected planned payment: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    day_total = PlannedPaymentRepository(db).add_payment(request_body.month_key, day, amount)
    db.commit()

    record_planned_payment(amount)
    log_planned_payment(request_id, request_body.month_key, day, amount)

    return PlannedPaymentResponse(
        month_key=request_body.month_key,
        day=day,
        amount=amount,
        day_total=day_total,
    )


@router.get("/planned-payments", response_model=PlannedPaymentsResponse)
def list_planned_payments(
    month_key: str = Query(..., pattern=MONTH_KEY_PATTERN, description="Reporting month, YYYY-MM"),
    db: Session = Depends(get_db),
):
    """Accumulated planned amounts per day for a reporting month"""
    try:
        parse_month_key(month_key)
    except InvalidMonthKeyError as e:
        raise HTTPException(status_code=422, detail=str(e))

    amounts = PlannedPaymentRepository(db).get_amounts_by_month(month_key)
    return PlannedPaymentsResponse(month_key=month_key, amounts=amounts)
