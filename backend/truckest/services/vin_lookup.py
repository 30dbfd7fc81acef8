"""VIN Lookup — decode via the registry, then persist the vehicle and open a job.

Invariants:
    - Registry rejections and unusable profiles raise before any DB write
    - Vehicle upsert overwrites decoded columns but keeps owner/notes set by users
    - Persistence is best-effort: DB failures are logged and yield job_id=None
    - A job is only opened when the caller identified themselves (X-User-Id)
      as an existing user
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from truckest.core.errors import (
    ErrorContext, VehicleDataNotFoundError, VinDecodeRejectedError,
)
from truckest.core.vin_decoding import (
    VehicleProfile, find_registry_error, profile_from_results,
)
from truckest.infrastructure.vehicle_registry import ResilientVehicleRegistryClient
from truckest.models import JobReport, User, Vehicle

logger = logging.getLogger(__name__)

# Columns owned by the registry decode; user-entered columns are not listed
_DECODED_COLUMNS = (
    "make", "model", "year", "vehicle_type", "body_class", "drive_type",
    "engine_model", "fuel_type", "weight_class", "gvwr", "manufacturer",
    "plant", "series", "trim", "cab_type",
)


@dataclass
class VinLookupResult:
    profile: VehicleProfile
    raw_results: list[dict]
    job_id: UUID | None
    looked_up_at: datetime


async def decode_vin(
    registry: ResilientVehicleRegistryClient, vin: str,
) -> tuple[VehicleProfile, list[dict]]:
    """Call the registry and turn its answer into a usable profile or raise."""
    results = await registry.decode_vin(vin)
    context = ErrorContext(vin=vin)

    rejection = find_registry_error(results)
    if rejection:
        code, text = rejection
        raise VinDecodeRejectedError(text, code, context)
    if not results:
        raise VehicleDataNotFoundError(
            "No vehicle data found for this VIN", context,
        )

    profile = profile_from_results(vin, results)
    if not profile.is_usable:
        raise VehicleDataNotFoundError(
            "No valid truck data associated with this VIN.", context,
        )
    return profile, results


async def upsert_decoded_vehicle(
    db: AsyncSession, profile: VehicleProfile, looked_up_at: datetime,
) -> Vehicle:
    vehicle = await db.get(Vehicle, profile.vin)
    if vehicle is None:
        vehicle = Vehicle(vin=profile.vin)
        db.add(vehicle)
    for column in _DECODED_COLUMNS:
        setattr(vehicle, column, getattr(profile, column))
    vehicle.registry_attributes = dict(profile.attributes)
    if not vehicle.notes:
        vehicle.notes = f"NHTSA lookup: {looked_up_at.isoformat()}"
    return vehicle


async def lookup_vin(
    registry: ResilientVehicleRegistryClient,
    db: AsyncSession | None,
    vin: str,
    user_id: UUID | None,
) -> VinLookupResult:
    profile, raw = await decode_vin(registry, vin)
    looked_up_at = datetime.now(timezone.utc)

    job_id = None
    if db is not None:
        try:
            await upsert_decoded_vehicle(db, profile, looked_up_at)
            if user_id is not None and await db.get(User, user_id):
                job = JobReport(vin=vin, uploaded_by_id=user_id)
                db.add(job)
                await db.flush()
                job_id = job.id
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            job_id = None
            logger.warning(
                f"DB upsert failed; continuing without persistence: {e}",
                extra={"vin": vin},
            )
    return VinLookupResult(
        profile=profile, raw_results=raw, job_id=job_id, looked_up_at=looked_up_at,
    )
