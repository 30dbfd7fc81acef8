"""Training Data — collect labelled images with vehicle and labeler context.

Invariants:
    - Rows are ordered by upload time, newest first
    - Unlabelled images (no vehicle parts) are dropped unless explicitly requested
    - Row shape is the one core/training_export.py consumes
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from truckest.core.training_export import is_labeled
from truckest.models import Image, JobReport

logger = logging.getLogger(__name__)


def _iso(value) -> str | None:
    return value.isoformat() if value else None


def training_row(image: Image, job: JobReport) -> dict:
    vehicle = job.vehicle
    labeler = job.uploaded_by
    return {
        "image_id": str(image.id),
        "image_path": image.image_path,
        "uploaded_at": _iso(image.uploaded_at),
        "labels": {
            "vehicle_parts": [link.vehicle_part.name for link in image.vehicle_parts],
            "damage_types": [link.damage_type.name for link in image.damage_types],
            "severity": image.severity.name if image.severity else None,
            "notes": image.notes,
        },
        "vehicle": {
            "vin": vehicle.vin,
            "make": vehicle.make,
            "model": vehicle.model,
            "year": vehicle.year,
            "vehicle_type": vehicle.vehicle_type,
            "body_class": vehicle.body_class,
            "weight_class": vehicle.weight_class,
            "gvwr": vehicle.gvwr,
        } if vehicle else None,
        "job_id": str(job.id),
        "job_created_at": _iso(job.created_at),
        "labeler": {
            "user_id": str(labeler.id),
            "name": labeler.name,
            "experience_level": labeler.experience_level,
        } if labeler else None,
    }


async def collect_training_rows(
    db: AsyncSession, include_unlabeled: bool = False,
) -> list[dict]:
    result = await db.execute(
        select(Image)
        .options(selectinload(Image.job))
        .order_by(Image.uploaded_at.desc()),
    )
    rows = [training_row(image, image.job) for image in result.scalars().all()]
    if not include_unlabeled:
        rows = [row for row in rows if is_labeled(row)]
    logger.info(f"Collected {len(rows)} training row(s)")
    return rows
