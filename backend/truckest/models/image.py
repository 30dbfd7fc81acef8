"""Image ORM — one uploaded damage photo with its labels.

Invariants:
    - Always belongs to a JobReport (job_id FK) and a TruckSection
    - Parts and damage types are many-to-many via join rows owned by the image
    - image_path is the public URL (/uploads/<file>), not a filesystem path

Design Decisions:
    - Join rows are explicit classes (not secondary tables): they cascade with
      the image and serialize the same way as every other relation
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from truckest.db.base import Base


class Image(Base):
    __tablename__ = "images"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    job_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("job_reports.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    image_path: Mapped[str] = mapped_column(String(500), nullable=False)
    truck_section_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("truck_sections.id"), nullable=False,
    )
    severity_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("severity_levels.id"), nullable=True,
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    uploaded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    job: Mapped["JobReport"] = relationship("JobReport", back_populates="images")
    truck_section: Mapped["TruckSection"] = relationship(
        "TruckSection", lazy="selectin",
    )
    severity: Mapped["SeverityLevel"] = relationship(
        "SeverityLevel", lazy="selectin",
    )
    vehicle_parts: Mapped[list["ImageVehiclePart"]] = relationship(
        "ImageVehiclePart", back_populates="image",
        cascade="all, delete-orphan", lazy="selectin",
    )
    damage_types: Mapped[list["ImageDamageType"]] = relationship(
        "ImageDamageType", back_populates="image",
        cascade="all, delete-orphan", lazy="selectin",
    )


class ImageVehiclePart(Base):
    __tablename__ = "image_vehicle_parts"

    image_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("images.id", ondelete="CASCADE"),
        primary_key=True,
    )
    vehicle_part_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("vehicle_parts.id"), primary_key=True,
    )

    image: Mapped["Image"] = relationship("Image", back_populates="vehicle_parts")
    vehicle_part: Mapped["VehiclePart"] = relationship(
        "VehiclePart", lazy="selectin",
    )


class ImageDamageType(Base):
    __tablename__ = "image_damage_types"

    image_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("images.id", ondelete="CASCADE"),
        primary_key=True,
    )
    damage_type_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("damage_types.id"), primary_key=True,
    )

    image: Mapped["Image"] = relationship("Image", back_populates="damage_types")
    damage_type: Mapped["DamageType"] = relationship(
        "DamageType", lazy="selectin",
    )
