"""Reference Images — per-VIN photos of undamaged vehicles ("vehicle database").

Invariants:
    - Listing is ordered oldest first
    - Upload requires an image/* file (400) and an existing vehicle (404)
    - Deleting removes the row first, then the file (missing file is not an error)
"""

import logging
from uuid import UUID

from fastapi import UploadFile
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from truckest.core.errors import ErrorContext, ResourceNotFoundError
from truckest.infrastructure.image_storage import LocalImageStorage, require_image_upload
from truckest.models import Vehicle, VehicleReferenceImage
from truckest.services.accounts import require_user

logger = logging.getLogger(__name__)


async def list_reference_images(
    db: AsyncSession, vin: str,
) -> list[VehicleReferenceImage]:
    result = await db.execute(
        select(VehicleReferenceImage)
        .where(VehicleReferenceImage.vehicle_vin == vin)
        .order_by(VehicleReferenceImage.uploaded_at.asc()),
    )
    return list(result.scalars().all())


async def add_reference_image(
    db: AsyncSession,
    storage: LocalImageStorage,
    upload: UploadFile,
    vin: str,
    angle: str | None,
    uploaded_by_id: UUID | None,
) -> VehicleReferenceImage:
    require_image_upload(upload)
    if not await db.get(Vehicle, vin):
        raise ResourceNotFoundError("Vehicle", vin, ErrorContext(vin=vin))
    if uploaded_by_id is not None:
        await require_user(db, uploaded_by_id)
    stored = await storage.save(upload, prefix=f"{vin}-{angle or 'misc'}")
    image = VehicleReferenceImage(
        vehicle_vin=vin,
        image_url=stored.url,
        angle=angle,
        uploaded_by_id=uploaded_by_id,
    )
    db.add(image)
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        storage.delete(stored.url)
        raise
    await db.refresh(image)
    logger.info("Reference image stored", extra={"vin": vin, "image_id": image.id})
    return image


async def delete_reference_image(
    db: AsyncSession, storage: LocalImageStorage, image_id: UUID,
) -> None:
    image = await db.get(VehicleReferenceImage, image_id)
    if image is None:
        raise ResourceNotFoundError("Reference image", str(image_id))
    url = image.image_url
    await db.delete(image)
    await db.commit()
    storage.delete(url)
    logger.info("Reference image deleted", extra={"image_id": image_id})
