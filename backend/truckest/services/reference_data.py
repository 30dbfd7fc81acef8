"""Reference Data — seeding and reading the label catalogue tables.

Invariants:
    - seed_reference_data is idempotent: existing rows are kept, missing ones added
    - Catalogue reads filter DB rows back to the static catalogue
    - Reads never raise: DB unavailable, DB error, or empty tables fall back
      to the static catalogue (logged)
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from truckest.core.truck_catalog import (
    DAMAGE_TYPES, SECTION_PARTS, SEVERITY_LEVELS, TRUCK_SECTIONS,
    fallback_damage_types, fallback_sections, fallback_severity_levels,
    filter_sections_to_catalog,
)
from truckest.models import DamageType, SeverityLevel, TruckSection, VehiclePart

logger = logging.getLogger(__name__)


async def seed_reference_data(db: AsyncSession) -> int:
    """Insert any missing catalogue rows. Returns the number of rows added."""
    added = 0

    sections = {
        s.name: s for s in (await db.execute(select(TruckSection))).scalars().all()
    }
    for name in TRUCK_SECTIONS:
        section = sections.get(name)
        if section is None:
            section = TruckSection(name=name, vehicle_parts=[])
            db.add(section)
            added += 1
        existing_parts = {p.name for p in section.vehicle_parts}
        for part in SECTION_PARTS[name]:
            if part not in existing_parts:
                section.vehicle_parts.append(VehiclePart(name=part))
                added += 1

    damage_names = set(
        (await db.execute(select(DamageType.name))).scalars().all()
    )
    for name in DAMAGE_TYPES:
        if name not in damage_names:
            db.add(DamageType(name=name))
            added += 1

    severity_names = set(
        (await db.execute(select(SeverityLevel.name))).scalars().all()
    )
    for rank, name in enumerate(SEVERITY_LEVELS):
        if name not in severity_names:
            db.add(SeverityLevel(name=name, rank=rank))
            added += 1

    await db.commit()
    if added:
        logger.info(f"Seeded {added} reference data row(s)")
    return added


async def list_sections(db: AsyncSession | None) -> list[dict]:
    if db is not None:
        try:
            rows = (
                await db.execute(select(TruckSection).order_by(TruckSection.name))
            ).scalars().all()
            sections = filter_sections_to_catalog([
                {
                    "id": str(s.id),
                    "name": s.name,
                    "vehicle_parts": [
                        {"id": str(p.id), "name": p.name}
                        for p in sorted(s.vehicle_parts, key=lambda p: p.name)
                    ],
                }
                for s in rows
            ])
            if sections:
                return sections
            logger.warning("No truck sections in database; using static catalogue")
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"DB error loading truck sections; falling back to constants: {e}")
    return fallback_sections()


async def list_damage_types(db: AsyncSession | None) -> list[dict]:
    if db is not None:
        try:
            rows = (
                await db.execute(select(DamageType).order_by(DamageType.name))
            ).scalars().all()
            if rows:
                return [{"id": str(r.id), "name": r.name} for r in rows]
            logger.warning("No damage types in database; using static catalogue")
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"DB error loading damage types; falling back to constants: {e}")
    return fallback_damage_types()


async def list_severity_levels(db: AsyncSession | None) -> list[dict]:
    if db is not None:
        try:
            rows = (
                await db.execute(select(SeverityLevel).order_by(SeverityLevel.rank))
            ).scalars().all()
            if rows:
                return [
                    {"id": str(r.id), "name": r.name, "rank": r.rank} for r in rows
                ]
            logger.warning("No severity levels in database; using static catalogue")
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"DB error loading severity levels; falling back to constants: {e}")
    return fallback_severity_levels()
