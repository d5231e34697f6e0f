"""Dependency injection for FastAPI endpoints"""

from fastapi import Request
from coverage_gateway.config import settings
from coverage_gateway.domain.policy import CoveragePolicy
from coverage_gateway.infrastructure.clients.ledger import LedgerClient
from coverage_gateway.infrastructure.clients.webhook import PlanWebhookClient


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_ledger_client() -> LedgerClient:
    """Provide Ledger API client instance"""
    return LedgerClient()


def get_webhook_client() -> PlanWebhookClient:
    """Provide plan webhook client instance"""
    return PlanWebhookClient()


def get_coverage_policy() -> CoveragePolicy:
    """Provide planner policy built from settings"""
    return settings.coverage_policy()
