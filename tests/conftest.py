"""Pytest fixtures for testing"""

import os

# Point the app at SQLite before settings are loaded
TEST_DATABASE_URL = "sqlite:///./test.db"
os.environ.setdefault("DATABASE_URL", TEST_DATABASE_URL)

import pytest
from datetime import date
from typing import Dict, Generator, List
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from coverage_gateway.api.main import create_app
from coverage_gateway.infrastructure.database.models import Base
from coverage_gateway.infrastructure.database.session import get_db
from coverage_gateway.domain.models import DayMetric, GapAlert, LedgerTransaction, TransactionType


# Test database
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def month_date() -> date:
    return date(2026, 2, 1)


@pytest.fixture
def reference_day_metrics() -> Dict[int, DayMetric]:
    """Non-risk expenses of 500k, expected income of 1.1M, one risky day"""
    return {
        5: DayMetric(expense=300_000),
        8: DayMetric(expense=200_000),
        10: DayMetric(income=500_000),
        12: DayMetric(income=600_000),
        20: DayMetric(expense=500_000, is_risk=True),
    }


@pytest.fixture
def reference_alerts() -> List[GapAlert]:
    return [
        GapAlert(date="26 февраля", reason="Крупный расход по материалам", shortage=780_000),
        GapAlert(date="27 февраля", reason="Платеж по аренде техники", shortage=430_000),
    ]


@pytest.fixture
def reference_operations() -> List[LedgerTransaction]:
    """February ledger: receipt on Sber, payment from VTB, transfer Sber -> VTB"""
    return [
        LedgerTransaction(
            transaction_id="1",
            date=date(2026, 2, 10),
            type=TransactionType.INCOME,
            account="Расчетный счет (Сбер)",
            amount=900_000,
            description="Оплата счета",
        ),
        LedgerTransaction(
            transaction_id="2",
            date=date(2026, 2, 11),
            type=TransactionType.EXPENSE,
            account="Расчетный счет (ВТБ)",
            amount=-200_000,
            description="Покупка услуг",
        ),
        LedgerTransaction(
            transaction_id="3",
            date=date(2026, 2, 12),
            type=TransactionType.TRANSFER,
            account="Расчетный счет (Сбер) -> Расчетный счет (ВТБ)",
            amount=100_000,
            description="Переброска ликвидности",
        ),
    ]
