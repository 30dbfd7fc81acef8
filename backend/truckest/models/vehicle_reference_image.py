"""VehicleReferenceImage ORM — undamaged reference photo of a vehicle, by angle."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from truckest.db.base import Base


class VehicleReferenceImage(Base):
    __tablename__ = "vehicle_reference_images"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    vehicle_vin: Mapped[str] = mapped_column(
        String(17), ForeignKey("vehicles.vin"), nullable=False, index=True,
    )
    image_url: Mapped[str] = mapped_column(String(500), nullable=False)
    angle: Mapped[str | None] = mapped_column(String(50), nullable=True)
    uploaded_by_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=True,
    )
    uploaded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    vehicle: Mapped["Vehicle"] = relationship(
        "Vehicle", back_populates="reference_images",
    )
