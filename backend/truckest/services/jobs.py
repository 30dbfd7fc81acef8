"""Job Service — queries and mutations on the JobReport aggregate.

Invariants:
    - Job reads always return the full aggregate (vehicle, images + labels,
      estimates, feedback) loaded eagerly and freshly (populate_existing)
    - Deleting a job removes every owned row in a single commit
    - Mutations raise ResourceNotFoundError for unknown ids (404)
"""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from truckest.core.domain_types import JobStatus
from truckest.core.errors import ErrorContext, ResourceNotFoundError
from truckest.models import JobReport, Vehicle
from truckest.services.accounts import require_user

logger = logging.getLogger(__name__)


async def load_job(db: AsyncSession, job_id: UUID) -> JobReport | None:
    result = await db.execute(
        select(JobReport)
        .where(JobReport.id == job_id)
        .execution_options(populate_existing=True),
    )
    return result.scalar_one_or_none()


async def get_job_or_404(db: AsyncSession, job_id: UUID) -> JobReport:
    job = await load_job(db, job_id)
    if not job:
        raise ResourceNotFoundError(
            "Job", str(job_id), ErrorContext(job_id=str(job_id)),
        )
    return job


async def list_jobs(db: AsyncSession) -> list[JobReport]:
    result = await db.execute(
        select(JobReport)
        .order_by(JobReport.created_at.desc())
        .execution_options(populate_existing=True),
    )
    return list(result.scalars().all())


async def create_job(
    db: AsyncSession, vin: str, uploaded_by_id: UUID | None,
) -> JobReport:
    """Open a new PENDING job for an existing vehicle."""
    if uploaded_by_id is not None:
        await require_user(db, uploaded_by_id)
    vehicle = await db.get(Vehicle, vin)
    if not vehicle:
        raise ResourceNotFoundError("Vehicle", vin, ErrorContext(vin=vin))
    job = JobReport(vin=vin, uploaded_by_id=uploaded_by_id)
    db.add(job)
    await db.commit()
    await db.refresh(job)
    logger.info("Job created", extra={"job_id": job.id, "vin": vin})
    return job


async def record_expert_hours(
    db: AsyncSession, job_id: UUID, expert_hours: float,
) -> JobReport:
    job = await get_job_or_404(db, job_id)
    job.expert_estimate = expert_hours
    job.status = JobStatus.COMPLETED.value
    await db.commit()
    await db.refresh(job)
    logger.info(
        f"Expert estimate recorded: {expert_hours}h",
        extra={"job_id": job_id},
    )
    return job


async def delete_job(db: AsyncSession, job_id: UUID) -> list[str]:
    """Delete the job aggregate. Returns image URLs whose files should be removed."""
    job = await get_job_or_404(db, job_id)
    image_urls = [img.image_path for img in job.images]
    await db.delete(job)
    await db.commit()
    logger.info(
        f"Job deleted with {len(image_urls)} image(s)",
        extra={"job_id": job_id},
    )
    return image_urls
