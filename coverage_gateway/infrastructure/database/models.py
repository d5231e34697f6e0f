"""SQLAlchemy ORM models for coverage plans and planned payments"""

import time
import uuid
from sqlalchemy import Column, BigInteger, DateTime, Integer, ForeignKey, Text, JSON
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class CoveragePlanRecord(Base):
    """Generated cash gap coverage plan"""

    __tablename__ = "coverage_plan"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    month_key = Column(Text, nullable=False, index=True)
    total_gap = Column(BigInteger, nullable=False)
    covered_amount = Column(BigInteger, nullable=False)
    residual_gap = Column(BigInteger, nullable=False)
    totals_by_type = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    # Orders plans created within the same created_at tick
    created_ns = Column(BigInteger, nullable=False, default=time.time_ns)

    actions = relationship(
        "CoverageActionRecord",
        back_populates="plan",
        cascade="all, delete-orphan",
        order_by="CoverageActionRecord.position",
    )


class CoverageActionRecord(Base):
    """Single remediation action within a coverage plan"""

    __tablename__ = "coverage_action"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    plan_id = Column(UUID(as_uuid=True), ForeignKey("coverage_plan.id", ondelete="CASCADE"), nullable=False)
    position = Column(Integer, nullable=False)
    action_key = Column(Text, nullable=False)
    action_type = Column(Text, nullable=False)
    risk_date_label = Column(Text, nullable=False)
    amount = Column(BigInteger, nullable=False)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False)

    plan = relationship("CoveragePlanRecord", back_populates="actions")


class PlannedPaymentRecord(Base):
    """User-entered planned receipt (positive) or payment (negative) for a day"""

    __tablename__ = "planned_payment"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    month_key = Column(Text, nullable=False, index=True)
    day = Column(Integer, nullable=False)
    amount = Column(BigInteger, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
