"""Integration tests for API endpoints"""

import httpx
import pytest
from unittest.mock import AsyncMock, patch
from fastapi.testclient import TestClient
from coverage_gateway.domain.exceptions import InvalidTransactionDataError, LedgerAPIError
from coverage_gateway.domain.models import LedgerTransaction
from coverage_gateway.api.dependencies import get_ledger_client
from coverage_gateway.infrastructure.clients.ledger import LedgerClient

WEBHOOK = "coverage_gateway.infrastructure.clients.webhook.PlanWebhookClient.send_plan_event"
LEDGER = "coverage_gateway.infrastructure.clients.ledger.LedgerClient.get_operations"


@pytest.fixture
def reference_request():
    """February scenario with two gap alerts and inline ledger operations"""
    return {
        "month_key": "2026-02",
        "gap_alerts": [
            {"date": "26 февраля", "reason": "Крупный расход по материалам", "shortage": 780000},
            {"date": "27 февраля", "reason": "Платеж по аренде техники", "shortage": 430000},
        ],
        "day_metrics": {
            "5": {"expense": 300000},
            "8": {"expense": 200000},
            "10": {"income": 500000},
            "12": {"income": 600000},
            "20": {"expense": 500000, "is_risk": True},
        },
        "operations": [
            {"id": "1", "date": "2026-02-10", "type": "income", "account": "Расчетный счет (Сбер)", "amount": 900000},
            {"id": "2", "date": "2026-02-11", "type": "expense", "account": "Расчетный счет (ВТБ)", "amount": -200000},
            {
                "id": "3",
                "date": "2026-02-12",
                "type": "transfer",
                "account": "Расчетный счет (Сбер) -> Расчетный счет (ВТБ)",
                "amount": 100000,
            },
        ],
    }


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "coverage_plan_total" in response.text


def test_request_id_header_propagated(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "trace-123"})
    assert response.headers["X-Request-ID"] == "trace-123"


@patch(WEBHOOK)
def test_coverage_plan_full_coverage(mock_webhook: AsyncMock, client: TestClient, reference_request: dict):
    """Test POST /v1/coverage-plan closes the whole gap"""
    response = client.post("/v1/coverage-plan", json=reference_request)

    assert response.status_code == 200
    data = response.json()
    assert data["plan_id"] is not None
    assert data["total_gap"] == 1210000
    assert data["covered_amount"] == 1210000
    assert data["residual_gap"] == 0
    assert data["coverage_percent"] == 100
    assert len(data["actions"]) == 8
    assert all(amount > 0 for amount in data["totals_by_type"].values())

    mock_webhook.assert_called_once()
    payload = mock_webhook.call_args.args[0]
    assert payload["event"] == "COVERAGE_PLAN_GENERATED"
    assert payload["plan_id"] == data["plan_id"]


@patch(WEBHOOK)
@patch(LEDGER)
def test_coverage_plan_fetches_ledger_operations(
    mock_ledger: AsyncMock,
    mock_webhook: AsyncMock,
    client: TestClient,
    reference_request: dict,
    reference_operations: list[LedgerTransaction],
):
    """Operations are loaded from the ledger when not sent inline"""
    mock_ledger.return_value = reference_operations
    del reference_request["operations"]

    response = client.post("/v1/coverage-plan", json=reference_request)

    assert response.status_code == 200
    mock_ledger.assert_called_once_with("2026-02")
    assert response.json()["totals_by_type"]["internal_transfer"] == 240000


@patch(LEDGER)
def test_coverage_plan_ledger_unavailable(mock_ledger: AsyncMock, client: TestClient, reference_request: dict):
    """Ledger failures surface as 503"""
    mock_ledger.side_effect = LedgerAPIError("Ledger API timeout after 5.0s")
    del reference_request["operations"]

    response = client.post("/v1/coverage-plan", json=reference_request)

    assert response.status_code == 503


@patch(WEBHOOK)
def test_coverage_plan_no_gap(mock_webhook: AsyncMock, client: TestClient):
    """No alerts is the normal 'no risk' case, without a webhook"""
    response = client.post(
        "/v1/coverage-plan",
        json={"month_key": "2026-02", "gap_alerts": [], "operations": []},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["total_gap"] == 0
    assert data["covered_amount"] == 0
    assert data["residual_gap"] == 0
    assert data["actions"] == []
    mock_webhook.assert_not_called()


@patch(LEDGER)
def test_coverage_plan_malformed_ledger_rows(mock_ledger: AsyncMock, client: TestClient, reference_request: dict):
    """Unparseable ledger operations are reported as ledger unavailability"""
    mock_ledger.side_effect = InvalidTransactionDataError("Invalid operation data from ledger")
    del reference_request["operations"]

    response = client.post("/v1/coverage-plan", json=reference_request)

    assert response.status_code == 503


@pytest.mark.parametrize(
    "operation",
    [
        {"id": 1, "date": "2026-02-10", "type": "income", "account": "Sber", "amount": "900000"},
        {"id": 2, "date": "2026-02-10", "type": "income", "account": None, "amount": 900000},
    ],
)
def test_coverage_plan_ledger_returns_bad_rows(client: TestClient, reference_request: dict, operation: dict):
    """Bad rows from a live ledger response never reach the planner"""
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"operations": [operation]}))
    client.app.dependency_overrides[get_ledger_client] = lambda: LedgerClient(
        base_url="http://ledger.test", transport=transport
    )
    del reference_request["operations"]

    response = client.post("/v1/coverage-plan", json=reference_request)

    assert response.status_code == 503
    assert response.json()["detail"] == "Ledger service unavailable"


@pytest.mark.parametrize("shortage", ["NaN", "Infinity", "-Infinity"])
def test_coverage_plan_rejects_non_finite_shortage(client: TestClient, shortage: str):
    body = (
        '{"month_key": "2026-02", "operations": [], '
        '"gap_alerts": [{"date": "26", "reason": "", "shortage": ' + shortage + "}]}"
    )

    response = client.post("/v1/coverage-plan", content=body, headers={"Content-Type": "application/json"})

    assert response.status_code == 422


@patch(WEBHOOK)
def test_coverage_plan_rejects_string_operation_amount(
    mock_webhook: AsyncMock, client: TestClient, reference_request: dict
):
    reference_request["operations"][0]["amount"] = "900000"

    response = client.post("/v1/coverage-plan", json=reference_request)

    assert response.status_code == 422
    mock_webhook.assert_not_called()


@pytest.mark.parametrize("month_key", ["2026-13", "February"])
def test_coverage_plan_invalid_month(client: TestClient, month_key: str):
    response = client.post(
        "/v1/coverage-plan",
        json={"month_key": month_key, "gap_alerts": [], "operations": []},
    )
    assert response.status_code == 422


@patch(WEBHOOK)
def test_get_coverage_plan_endpoint(mock_webhook: AsyncMock, client: TestClient, reference_request: dict):
    """Test GET /v1/coverage-plan/{plan_id} returns the stored plan"""
    created = client.post("/v1/coverage-plan", json=reference_request).json()

    response = client.get(f"/v1/coverage-plan/{created['plan_id']}")

    assert response.status_code == 200
    data = response.json()
    assert data["plan_id"] == created["plan_id"]
    assert data["month_key"] == "2026-02"
    assert data["total_gap"] == created["total_gap"]
    assert data["coverage_percent"] == 100
    assert [a["id"] for a in data["actions"]] == [a["id"] for a in created["actions"]]
    assert data["totals_by_type"] == created["totals_by_type"]
    assert data["created_at"] is not None


def test_get_coverage_plan_not_found(client: TestClient):
    fake_uuid = "00000000-0000-0000-0000-000000000000"
    response = client.get(f"/v1/coverage-plan/{fake_uuid}")
    assert response.status_code == 404


def test_get_coverage_plan_invalid_id(client: TestClient):
    response = client.get("/v1/coverage-plan/not-a-uuid")
    assert response.status_code == 400


@patch(WEBHOOK)
def test_get_history_endpoint(mock_webhook: AsyncMock, client: TestClient, reference_request: dict):
    """Test GET /v1/coverage-plan/history"""
    client.post("/v1/coverage-plan", json=reference_request)
    client.post("/v1/coverage-plan", json=reference_request)

    response = client.get("/v1/coverage-plan/history?month_key=2026-02")

    assert response.status_code == 200
    data = response.json()
    assert data["month_key"] == "2026-02"
    assert len(data["plans"]) == 2

    other_month = client.get("/v1/coverage-plan/history?month_key=2026-01")
    assert other_month.json()["plans"] == []


def test_planned_payments_accumulate(client: TestClient):
    """Test POST/GET /v1/planned-payments"""
    first = client.post("/v1/planned-payments", json={"month_key": "2026-02", "day": 26, "amount": -1000.4})
    assert first.status_code == 200
    assert first.json()["amount"] == -1000
    assert first.json()["day_total"] == -1000

    second = client.post("/v1/planned-payments", json={"month_key": "2026-02", "day": 26, "amount": 400})
    assert second.json()["day_total"] == -600

    response = client.get("/v1/planned-payments?month_key=2026-02")
    assert response.status_code == 200
    assert response.json()["amounts"] == {"26": -600}


@pytest.mark.parametrize(
    "body",
    [
        {"month_key": "2026-02", "day": 26, "amount": 0.3},
        {"month_key": "2026-02", "day": 30, "amount": 1000},
        {"month_key": "2026-00", "day": 1, "amount": 1000},
        {"month_key": "2026-02", "day": 1, "amount": 1e300},
        {"month_key": "2026-02", "day": 1, "amount": -1e16},
    ],
)
def test_planned_payment_rejected(client: TestClient, body: dict):
    response = client.post("/v1/planned-payments", json=body)
    assert response.status_code == 422


@patch(WEBHOOK)
def test_planned_receipt_enables_receivables(mock_webhook: AsyncMock, client: TestClient):
    """A planned receipt creates receivables capacity and switches financing to factoring"""
    body = {
        "month_key": "2026-02",
        "gap_alerts": [{"date": "26 февраля", "reason": "Разовый платеж", "shortage": 500000}],
        "day_metrics": {"26": {"expense": 500000, "is_risk": True}},
        "operations": [],
    }

    before = client.post("/v1/coverage-plan", json=body).json()
    assert before["totals_by_type"]["external_financing"] == 500000
    assert "overdraft" in before["actions"][0]["description"]

    client.post("/v1/planned-payments", json={"month_key": "2026-02", "day": 3, "amount": 1000000})

    after = client.post("/v1/coverage-plan", json=body).json()
    assert after["totals_by_type"]["receivables_acceleration"] == 125000
    assert after["totals_by_type"]["external_financing"] == 375000
    external = [a for a in after["actions"] if a["type"] == "external_financing"]
    assert "factoring" in external[0]["description"]
