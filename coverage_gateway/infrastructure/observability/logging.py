"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def __init__(self, *args: Any, service_name: str = "coverage-gateway", **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.service_name = service_name

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = self.service_name


def setup_logging(level: str = "INFO", service_name: str = "coverage-gateway") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s",
        service_name=service_name,
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    # httpx logs every outbound request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def log_plan_generated(
    request_id: str,
    month_key: str,
    total_gap: int,
    covered_amount: int,
    coverage_percent: int,
    action_count: int,
    duration_ms: float,
) -> None:
    """Log structured coverage plan outcome for analysis"""
    logging.info(
        "Coverage plan generated",
        extra={
            "request_id": request_id,
            "month_key": month_key,
            "step": "coverage_plan_complete",
            "total_gap": total_gap,
            "covered_amount": covered_amount,
            "coverage_percent": coverage_percent,
            "action_count": action_count,
            "duration_ms": duration_ms,
        },
    )


def log_planned_payment(request_id: str, month_key: str, day: int, amount: int) -> None:
    """Log a planned payment added to the month's calendar"""
    logging.info(
        "Planned payment added",
        extra={
            "request_id": request_id,
            "month_key": month_key,
            "step": "planned_payment_added",
            "day": day,
            "amount": amount,
        },
    )
