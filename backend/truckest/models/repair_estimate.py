"""RepairEstimate ORM — a repair-time estimate for a job (simulated AI or expert).

Invariants:
    - time_estimate in hours, >= 0
    - source is an EstimateSource value
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Float, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from truckest.core.domain_types import EstimateSource
from truckest.db.base import Base


class RepairEstimate(Base):
    __tablename__ = "repair_estimates"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    job_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("job_reports.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    time_estimate: Mapped[float] = mapped_column(Float, nullable=False)
    cost_estimate: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    source: Mapped[str] = mapped_column(
        String(20), nullable=False, default=EstimateSource.AI.value,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    job: Mapped["JobReport"] = relationship(
        "JobReport", back_populates="repair_estimates",
    )
