"""Ledger API HTTP client for fetching recorded cash operations"""

import httpx
from typing import Any, List
from pydantic import ValidationError
from coverage_gateway.api.v1.schemas import OperationSchema
from coverage_gateway.domain.models import LedgerTransaction
from coverage_gateway.domain.exceptions import InvalidTransactionDataError, LedgerAPIError
from coverage_gateway.config import settings


def parse_operation(raw: Any) -> LedgerTransaction:
    """
    Validate one ledger row and convert it to a domain transaction.

    Raises:
        InvalidTransactionDataError: When the row is not an object or fails validation
    """
    if not isinstance(raw, dict):
        raise InvalidTransactionDataError(f"Invalid operation data from ledger: expected object, got {raw!r}")

    # Ledger ids may be numeric
    row = {**raw, "id": str(raw.get("id", ""))}
    try:
        return OperationSchema.model_validate(row).to_domain()
    except ValidationError as e:
        raise InvalidTransactionDataError(
            f"Invalid operation data from ledger: {e.error_count()} error(s) in operation {row['id']!r}"
        ) from e


class LedgerClient:
    """Client for external operations ledger API"""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url or settings.ledger_api_base
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    async def get_operations(self, month_key: str) -> List[LedgerTransaction]:
        """
        Fetch ledger operations recorded in a reporting month.

        Raises:
            LedgerAPIError: On timeout or HTTP errors
            InvalidTransactionDataError: On a malformed response body or operation
        """
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.get(
                    f"{self.base_url}/operations",
                    params={"month_key": month_key},
                )
                response.raise_for_status()
                data = response.json()

            except httpx.TimeoutException as e:
                raise LedgerAPIError(f"Ledger API timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise LedgerAPIError(f"Ledger API error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise LedgerAPIError(f"Ledger API unreachable: {e}") from e
            except ValueError as e:
                raise InvalidTransactionDataError(f"Invalid operation data from ledger: {e}") from e

        operations = data.get("operations", []) if isinstance(data, dict) else None
        if not isinstance(operations, list):
            raise InvalidTransactionDataError("Invalid operation data from ledger: 'operations' is not a list")

        return [parse_operation(op) for op in operations]
