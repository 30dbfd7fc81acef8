"""Truck Data Routes — the label catalogue (sections, parts, damage types, severity).

Invariants:
    - Always 200: a missing or empty database falls back to the static catalogue
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from truckest.infrastructure.database import get_optional_db
from truckest.services import reference_data

router = APIRouter(prefix="/api/truck-data", tags=["truck-data"])


@router.get("/sections")
async def list_sections(db: AsyncSession | None = Depends(get_optional_db)):
    return {"success": True, "sections": await reference_data.list_sections(db)}


@router.get("/damage-types")
async def list_damage_types(db: AsyncSession | None = Depends(get_optional_db)):
    return {
        "success": True,
        "damage_types": await reference_data.list_damage_types(db),
    }


@router.get("/severity-levels")
async def list_severity_levels(db: AsyncSession | None = Depends(get_optional_db)):
    return {
        "success": True,
        "severity_levels": await reference_data.list_severity_levels(db),
    }
