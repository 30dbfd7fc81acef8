"""Vehicle Routes — VIN decoding, manual vehicle registration and reference images.

Invariants:
    - VIN lookup validates format before any outbound call
    - VIN lookup works without a database (nothing is persisted, job_id is null)
    - POST /api/vehicles is idempotent per VIN
    - Reference-image endpoints need vin / id query params (400 when missing)
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from truckest.api.deps import (
    get_image_storage, get_optional_user_id, get_vehicle_registry,
)
from truckest.core.errors import InvalidRequestError
from truckest.core.vin_decoding import normalize_vin
from truckest.infrastructure.database import get_db, get_optional_db
from truckest.infrastructure.image_storage import LocalImageStorage
from truckest.infrastructure.vehicle_registry import ResilientVehicleRegistryClient
from truckest.schemas.vehicle import VehicleUpsertRequest, VinLookupRequest
from truckest.services import reference_images
from truckest.services.presenters import present_reference_image, present_vehicle
from truckest.services.vehicles import ensure_vehicle
from truckest.services.vin_lookup import lookup_vin

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["vehicles"])

REGISTRY_SOURCE = "NHTSA"


@router.post("/vehicle/vin")
async def decode_vin(
    body: VinLookupRequest,
    registry: ResilientVehicleRegistryClient = Depends(get_vehicle_registry),
    db: AsyncSession | None = Depends(get_optional_db),
    user_id: UUID | None = Depends(get_optional_user_id),
):
    """Decode a VIN, store the vehicle and open a job for the caller."""
    vin = normalize_vin(body.vin)
    result = await lookup_vin(registry, db, vin, user_id)
    return {
        "success": True,
        "message": "Vehicle data retrieved successfully",
        "vehicle": result.profile.to_dict(),
        "source": REGISTRY_SOURCE,
        "timestamp": result.looked_up_at.isoformat(),
        "job_id": str(result.job_id) if result.job_id else None,
        "raw_registry_data": result.raw_results,
    }


@router.post("/vehicles")
async def create_vehicle(
    body: VehicleUpsertRequest, db: AsyncSession = Depends(get_db),
):
    vehicle, created = await ensure_vehicle(db, body)
    return JSONResponse(
        status_code=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        content={
            "success": True,
            "created": created,
            "vehicle": present_vehicle(vehicle),
        },
    )


# ─── Reference images ("vehicle database") ─────────────────────

@router.get("/vehicle-database")
async def list_reference_images(
    vin: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    if not vin or not vin.strip():
        raise InvalidRequestError("VIN is required", field="vin")
    images = await reference_images.list_reference_images(db, vin.strip().upper())
    return {
        "success": True,
        "images": [present_reference_image(img) for img in images],
    }


@router.post("/vehicle-database", status_code=status.HTTP_201_CREATED)
async def upload_reference_image(
    file: UploadFile | None = File(None),
    vin: str | None = Form(None),
    angle: str | None = Form(None),
    db: AsyncSession = Depends(get_db),
    storage: LocalImageStorage = Depends(get_image_storage),
    user_id: UUID | None = Depends(get_optional_user_id),
):
    if file is None or not vin or not vin.strip():
        raise InvalidRequestError("File and VIN are required")
    image = await reference_images.add_reference_image(
        db, storage, file, vin.strip().upper(),
        (angle or "").strip() or None, user_id,
    )
    return {"success": True, "image": present_reference_image(image)}


@router.delete("/vehicle-database")
async def delete_reference_image(
    id: UUID | None = Query(None),
    db: AsyncSession = Depends(get_db),
    storage: LocalImageStorage = Depends(get_image_storage),
):
    if id is None:
        raise InvalidRequestError("Image id is required", field="id")
    await reference_images.delete_reference_image(db, storage, id)
    return {"success": True, "message": "Image deleted"}
