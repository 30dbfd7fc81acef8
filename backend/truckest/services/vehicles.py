"""Vehicles — manual registration of a vehicle by VIN.

Invariants:
    - Insert-if-absent: an existing row is returned untouched, never overwritten
    - A concurrent insert of the same VIN resolves to the row that won
"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from truckest.models import Vehicle
from truckest.schemas.vehicle import VehicleUpsertRequest

logger = logging.getLogger(__name__)


async def ensure_vehicle(
    db: AsyncSession, body: VehicleUpsertRequest,
) -> tuple[Vehicle, bool]:
    """Return (vehicle, created)."""
    existing = await db.get(Vehicle, body.vin)
    if existing is not None:
        return existing, False

    vehicle = Vehicle(**body.model_dump())
    db.add(vehicle)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        winner = await db.get(Vehicle, body.vin)
        if winner is None:
            raise
        return winner, False
    await db.refresh(vehicle)
    logger.info("Vehicle registered", extra={"vin": vehicle.vin})
    return vehicle, True
