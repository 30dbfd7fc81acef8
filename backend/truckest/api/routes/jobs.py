"""Job Routes — CRUD on inspection jobs.

Invariants:
    - Creating a job requires an identified caller (X-User-Id, else 401)
    - Reads return the full aggregate (services/presenters.present_job)
    - Image files of a deleted job are removed only after the DB commit
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from truckest.api.deps import get_current_user_id, get_image_storage
from truckest.core.errors import InvalidRequestError
from truckest.infrastructure.database import get_db
from truckest.infrastructure.image_storage import LocalImageStorage
from truckest.schemas.job import JobCreateRequest, JobUpdateRequest
from truckest.services import jobs
from truckest.services.presenters import present_job, present_job_summary

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/jobs", tags=["jobs"])


@router.get("")
async def list_jobs(db: AsyncSession = Depends(get_db)):
    return {
        "success": True,
        "jobs": [present_job(job) for job in await jobs.list_jobs(db)],
    }


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_job(
    body: JobCreateRequest,
    db: AsyncSession = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    job = await jobs.create_job(db, body.vin, user_id)
    return {
        "success": True,
        "message": "Job created successfully",
        "job": present_job_summary(job),
    }


@router.get("/{job_id}")
async def get_job(job_id: UUID, db: AsyncSession = Depends(get_db)):
    job = await jobs.get_job_or_404(db, job_id)
    return {"success": True, "job": present_job(job)}


@router.put("/{job_id}")
async def update_job(
    job_id: UUID, body: JobUpdateRequest, db: AsyncSession = Depends(get_db),
):
    if body.expert_hours is None:
        raise InvalidRequestError("Expert hours are required", field="expert_hours")
    job = await jobs.record_expert_hours(db, job_id, body.expert_hours)
    return {
        "success": True,
        "message": "Expert estimate saved",
        "job": present_job_summary(job),
    }


@router.delete("/{job_id}")
async def delete_job(
    job_id: UUID,
    db: AsyncSession = Depends(get_db),
    storage: LocalImageStorage = Depends(get_image_storage),
):
    image_urls = await jobs.delete_job(db, job_id)
    for url in image_urls:
        storage.delete(url)
    return {"success": True, "message": "Job deleted successfully"}
