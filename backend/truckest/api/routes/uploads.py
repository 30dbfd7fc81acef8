"""Upload Routes — labelled damage photos.

Invariants:
    - Multipart text fields are parsed by services/labelled_images (400 on bad ids)
    - Size cap: a declared Content-Length is checked before parsing (413),
      then the bytes written to disk are capped again
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from truckest.api.deps import get_image_storage
from truckest.core.errors import InvalidRequestError
from truckest.infrastructure.database import get_db
from truckest.infrastructure.image_storage import LocalImageStorage
from truckest.services.labelled_images import parse_image_labels, store_labelled_image
from truckest.services.presenters import present_image

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/upload", tags=["uploads"])


@router.get("")
async def upload_probe():
    return {
        "success": True,
        "message": "Upload endpoint is available",
        "methods": ["POST"],
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.post("", status_code=status.HTTP_201_CREATED)
async def upload_image(
    file: UploadFile | None = File(None),
    job_id: str | None = Form(None),
    truck_section_id: str | None = Form(None),
    vehicle_part_ids: str | None = Form(None),
    damage_type_ids: str | None = Form(None),
    severity_id: str | None = Form(None),
    notes: str | None = Form(None),
    db: AsyncSession = Depends(get_db),
    storage: LocalImageStorage = Depends(get_image_storage),
):
    if file is None:
        raise InvalidRequestError("No file uploaded", field="file")
    labels = parse_image_labels(
        job_id, truck_section_id, vehicle_part_ids,
        damage_type_ids, severity_id, notes,
    )
    image = await store_labelled_image(db, storage, file, labels)
    return {
        "success": True,
        "message": "Image uploaded successfully",
        "image": present_image(image),
    }
