"""TruckSection / VehiclePart ORM — the part taxonomy used to label photos.

Invariants:
    - Section names are unique
    - A part name is unique within its section
"""

import uuid

from sqlalchemy import String, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from truckest.db.base import Base


class TruckSection(Base):
    __tablename__ = "truck_sections"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)

    vehicle_parts: Mapped[list["VehiclePart"]] = relationship(
        "VehiclePart", back_populates="truck_section",
        cascade="all, delete-orphan", lazy="selectin",
    )


class VehiclePart(Base):
    __tablename__ = "vehicle_parts"
    __table_args__ = (
        UniqueConstraint("truck_section_id", "name", name="uq_vehicle_part_section_name"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    truck_section_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("truck_sections.id"), nullable=False,
    )

    truck_section: Mapped["TruckSection"] = relationship(
        "TruckSection", back_populates="vehicle_parts",
    )
