"""Labelled Images — attach an uploaded damage photo and its labels to a job.

Invariants:
    - Label ids are validated before the file is written (no orphan files on 400/404)
    - Image row and its part/damage join rows commit together
    - Unknown job -> 404; unknown section/part/damage type/severity -> 400
    - If the DB write fails after the file was stored, the file is removed
"""

import json
import logging
from dataclasses import dataclass, field
from uuid import UUID

from fastapi import UploadFile
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from truckest.core.errors import ErrorContext, InvalidRequestError
from truckest.infrastructure.image_storage import LocalImageStorage, require_image_upload
from truckest.models import (
    DamageType, Image, ImageDamageType, ImageVehiclePart, SeverityLevel,
    TruckSection, VehiclePart,
)
from truckest.services.jobs import get_job_or_404, load_job

logger = logging.getLogger(__name__)


@dataclass
class ImageLabels:
    job_id: UUID
    truck_section_id: UUID
    vehicle_part_ids: list[UUID]
    damage_type_ids: list[UUID] = field(default_factory=list)
    severity_id: UUID | None = None
    notes: str | None = None


def _parse_uuid(raw: str | None, name: str) -> UUID | None:
    if raw is None or not str(raw).strip():
        return None
    try:
        return UUID(str(raw).strip())
    except ValueError:
        raise InvalidRequestError(f"{name} must be a valid id", field=name)


def _parse_uuid_list(raw: str | None, name: str) -> list[UUID]:
    """Parse a JSON array of ids sent as a multipart text field."""
    if raw is None or not raw.strip():
        return []
    try:
        values = json.loads(raw)
    except json.JSONDecodeError:
        raise InvalidRequestError(f"{name} must be a JSON array", field=name)
    if not isinstance(values, list):
        raise InvalidRequestError(f"{name} must be a JSON array", field=name)
    ids = []
    for value in values:
        parsed = _parse_uuid(str(value), name)
        if parsed is not None and parsed not in ids:
            ids.append(parsed)
    return ids


def parse_image_labels(
    job_id: str | None,
    truck_section_id: str | None,
    vehicle_part_ids: str | None,
    damage_type_ids: str | None,
    severity_id: str | None,
    notes: str | None,
) -> ImageLabels:
    """Validate raw multipart fields into ImageLabels. Raises InvalidRequestError."""
    parsed_job = _parse_uuid(job_id, "job_id")
    parsed_section = _parse_uuid(truck_section_id, "truck_section_id")
    parts = _parse_uuid_list(vehicle_part_ids, "vehicle_part_ids")
    if parsed_job is None or parsed_section is None or not parts:
        raise InvalidRequestError(
            "Job ID, Truck Section, and Vehicle Parts are required",
        )
    return ImageLabels(
        job_id=parsed_job,
        truck_section_id=parsed_section,
        vehicle_part_ids=parts,
        damage_type_ids=_parse_uuid_list(damage_type_ids, "damage_type_ids"),
        severity_id=_parse_uuid(severity_id, "severity_id"),
        notes=(notes or "").strip() or None,
    )


async def _ensure_all_exist(db: AsyncSession, model, ids: list[UUID], name: str) -> None:
    if not ids:
        return
    found = set(
        (await db.execute(select(model.id).where(model.id.in_(ids)))).scalars().all()
    )
    missing = [str(i) for i in ids if i not in found]
    if missing:
        raise InvalidRequestError(
            f"Unknown {name}: {', '.join(missing)}", field=name,
        )


async def validate_labels(db: AsyncSession, labels: ImageLabels) -> None:
    await get_job_or_404(db, labels.job_id)
    await _ensure_all_exist(db, TruckSection, [labels.truck_section_id], "truck_section_id")
    await _ensure_all_exist(db, VehiclePart, labels.vehicle_part_ids, "vehicle_part_ids")
    await _ensure_all_exist(db, DamageType, labels.damage_type_ids, "damage_type_ids")
    if labels.severity_id is not None:
        await _ensure_all_exist(db, SeverityLevel, [labels.severity_id], "severity_id")


async def store_labelled_image(
    db: AsyncSession,
    storage: LocalImageStorage,
    upload: UploadFile,
    labels: ImageLabels,
) -> Image:
    require_image_upload(upload)
    await validate_labels(db, labels)

    stored = await storage.save(upload, prefix=str(labels.job_id))
    image = Image(
        job_id=labels.job_id,
        image_path=stored.url,
        truck_section_id=labels.truck_section_id,
        severity_id=labels.severity_id,
        notes=labels.notes,
        vehicle_parts=[
            ImageVehiclePart(vehicle_part_id=pid) for pid in labels.vehicle_part_ids
        ],
        damage_types=[
            ImageDamageType(damage_type_id=did) for did in labels.damage_type_ids
        ],
    )
    db.add(image)
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        storage.delete(stored.url)
        raise
    logger.info(
        "Labelled image stored",
        extra={"job_id": labels.job_id, "image_id": image.id},
    )

    # Re-read through the job so labels come back with names
    db.expire_all()
    job = await load_job(db, labels.job_id)
    return next(
        img for img in job.images if img.id == image.id
    )
