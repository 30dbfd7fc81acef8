"""JobReport ORM — one damage inspection of one vehicle.

Invariants:
    - Always references a Vehicle (vin FK)
    - status transitions: PENDING -> IN_PROGRESS -> COMPLETED
    - expert_estimate set only by an expert (PUT /api/jobs/{id})
    - Owns images, repair estimates and feedback: deleting a job deletes them

Design Decisions:
    - cascade="all, delete-orphan" on owned collections: one db.delete(job)
      removes the whole aggregate inside the request transaction
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Float, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from truckest.core.domain_types import JobStatus
from truckest.db.base import Base


class JobReport(Base):
    """Job aggregate root — owns photos, estimates and feedback."""
    __tablename__ = "job_reports"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    vin: Mapped[str] = mapped_column(
        String(17), ForeignKey("vehicles.vin"), nullable=False, index=True,
    )
    uploaded_by_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=True,
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=JobStatus.PENDING.value,
    )
    expert_estimate: Mapped[float | None] = mapped_column(Float, nullable=True)
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

    # Relationships
    vehicle: Mapped["Vehicle"] = relationship("Vehicle", lazy="selectin")
    uploaded_by: Mapped["User"] = relationship("User", lazy="selectin")
    images: Mapped[list["Image"]] = relationship(
        "Image", back_populates="job",
        cascade="all, delete-orphan", lazy="selectin",
        order_by="Image.uploaded_at",
    )
    repair_estimates: Mapped[list["RepairEstimate"]] = relationship(
        "RepairEstimate", back_populates="job",
        cascade="all, delete-orphan", lazy="selectin",
        order_by="RepairEstimate.created_at.desc()",
    )
    feedbacks: Mapped[list["Feedback"]] = relationship(
        "Feedback", back_populates="job",
        cascade="all, delete-orphan", lazy="selectin",
        order_by="Feedback.created_at.desc()",
    )
