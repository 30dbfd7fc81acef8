"""Vehicle ORM — a truck identified by its VIN.

Invariants:
    - vin is the natural primary key
    - registry_attributes holds the full decoded registry lookup (may be empty)

Design Decisions:
    - Only the attributes the app reads get their own column; everything else
      the registry returns stays in the JSON column
"""

from datetime import datetime, timezone

from sqlalchemy import String, Text, Integer, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship

from truckest.db.base import Base


class Vehicle(Base):
    __tablename__ = "vehicles"

    vin: Mapped[str] = mapped_column(String(17), primary_key=True)
    vehicle_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    make: Mapped[str | None] = mapped_column(String(100), nullable=True)
    model: Mapped[str | None] = mapped_column(String(100), nullable=True)
    year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    body_class: Mapped[str | None] = mapped_column(String(200), nullable=True)
    drive_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    engine_model: Mapped[str | None] = mapped_column(String(200), nullable=True)
    fuel_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    weight_class: Mapped[str | None] = mapped_column(String(200), nullable=True)
    gvwr: Mapped[str | None] = mapped_column(String(200), nullable=True)
    manufacturer: Mapped[str | None] = mapped_column(String(200), nullable=True)
    plant: Mapped[str | None] = mapped_column(String(200), nullable=True)
    series: Mapped[str | None] = mapped_column(String(200), nullable=True)
    trim: Mapped[str | None] = mapped_column(String(200), nullable=True)
    cab_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    owner: Mapped[str | None] = mapped_column(String(200), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    reference_image_path: Mapped[str | None] = mapped_column(
        String(500), nullable=True,
    )
    registry_attributes: Mapped[dict] = mapped_column(
        JSON, nullable=False, default=dict,
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

    reference_images: Mapped[list["VehicleReferenceImage"]] = relationship(
        "VehicleReferenceImage", back_populates="vehicle",
        cascade="all, delete-orphan",
        order_by="VehicleReferenceImage.uploaded_at",
    )
