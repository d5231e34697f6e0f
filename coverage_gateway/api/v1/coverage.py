"""POST /v1/coverage-plan - cash gap coverage planning endpoint"""

import time
import logging
from fastapi import APIRouter, Depends, HTTPException, BackgroundTasks, Request
from sqlalchemy.orm import Session

from coverage_gateway.api.v1.schemas import CoveragePlanRequest, CoveragePlanResponse
from coverage_gateway.api.dependencies import (
    get_coverage_policy,
    get_ledger_client,
    get_request_id,
    get_webhook_client,
)
from coverage_gateway.infrastructure.database.session import get_db
from coverage_gateway.infrastructure.database.repositories import CoveragePlanRepository, PlannedPaymentRepository
from coverage_gateway.infrastructure.clients.ledger import LedgerClient
from coverage_gateway.infrastructure.clients.webhook import PlanWebhookClient
from coverage_gateway.domain.coverage import generate_coverage_plan
from coverage_gateway.domain.planned_payments import merge_planned_payments
from coverage_gateway.domain.policy import CoveragePolicy
from coverage_gateway.domain.exceptions import InvalidMonthKeyError, LedgerAPIError
from coverage_gateway.infrastructure.observability.metrics import record_plan, ledger_fetch_failures_counter
from coverage_gateway.infrastructure.observability.logging import log_plan_generated
from coverage_gateway.utils.date_utils import parse_month_key

router = APIRouter()


@router.post("/coverage-plan", response_model=CoveragePlanResponse)
async def create_coverage_plan(
    request_body: CoveragePlanRequest,
    background_tasks: BackgroundTasks,
    request: Request,
    db: Session = Depends(get_db),
    ledger_client: LedgerClient = Depends(get_ledger_client),
    webhook_client: PlanWebhookClient = Depends(get_webhook_client),
    policy: CoveragePolicy = Depends(get_coverage_policy),
):
    """
    Build a coverage plan for the month's projected cash gaps.

    Flow:
    1. Resolve the reporting month
    2. Overlay stored planned payments on the submitted day metrics
    3. Use inline operations or fetch the month's operations from the ledger
    4. Generate the plan
    5. Persist plan + actions
    6. Send async webhook when there is a gap to cover
    7. Return plan response
    """
    start_time = time.time()
    request_id = get_request_id(request)
    month_key = request_body.month_key

    try:
        # 1. Reporting month
        month_date = parse_month_key(month_key)

        # 2. Day metrics with planned payments
        planned_amounts = PlannedPaymentRepository(db).get_amounts_by_month(month_key)
        day_metrics = merge_planned_payments(
            {day: metric.to_domain() for day, metric in request_body.day_metrics.items()},
            planned_amounts,
        )

        # 3. Operations
        if request_body.operations is not None:
            operations = [operation.to_domain() for operation in request_body.operations]
        else:
            operations = await ledger_client.get_operations(month_key)

        # 4. Plan
        plan = generate_coverage_plan(
            day_metrics=day_metrics,
            gap_alerts=[alert.to_domain() for alert in request_body.gap_alerts],
            month_date=month_date,
            month_key=month_key,
            operations=operations,
            policy=policy,
        )

        # 5. Persist
        db_plan = CoveragePlanRepository(db).create_plan(month_key=month_key, plan=plan)
        plan_id = str(db_plan.id)
        db.commit()

        # 6. Notify
        if plan.total_gap > 0:
            background_tasks.add_task(
                webhook_client.send_plan_event,
                {
                    "event": "COVERAGE_PLAN_GENERATED",
                    "plan_id": plan_id,
                    "month_key": month_key,
                    "total_gap": plan.total_gap,
                    "covered_amount": plan.covered_amount,
                    "residual_gap": plan.residual_gap,
                    "coverage_percent": plan.coverage_percent,
                },
            )

        duration_ms = (time.time() - start_time) * 1000
        record_plan(plan)
        log_plan_generated(
            request_id,
            month_key,
            plan.total_gap,
            plan.covered_amount,
            plan.coverage_percent,
            len(plan.actions),
            duration_ms,
        )

        return CoveragePlanResponse.from_plan(plan_id, month_key, plan)

    except InvalidMonthKeyError as e:
        db.rollback()
        logging.warning(f"Invalid month: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    except LedgerAPIError as e:
        ledger_fetch_failures_counter.inc()
        db.rollback()
        logging.error(f"Ledger API error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Ledger service unavailable")

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")
