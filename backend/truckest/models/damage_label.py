"""DamageType / SeverityLevel ORM — damage vocabulary for photo labels.

Invariants:
    - Names unique per table
    - SeverityLevel.rank orders severities (0 = Minor)
"""

import uuid

from sqlalchemy import String, Integer
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from truckest.db.base import Base


class DamageType(Base):
    __tablename__ = "damage_types"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)


class SeverityLevel(Base):
    __tablename__ = "severity_levels"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    rank: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
