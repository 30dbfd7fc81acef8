"""Estimates — persist simulated AI estimates, expert corrections and feedback.

Invariants:
    - Every write targets an existing job (404 otherwise)
    - An expert correction updates the job's newest estimate, or creates one
    - Feedback and expert corrections are attributed to the calling user
"""

import asyncio
import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from truckest.core.domain_types import EstimateSource, FeedbackType
from truckest.core.repair_estimator import SimulatedEstimate, SimulatedRepairEstimator
from truckest.models import Feedback, RepairEstimate
from truckest.services.accounts import require_user
from truckest.services.jobs import get_job_or_404

logger = logging.getLogger(__name__)


async def run_simulated_estimate(
    db: AsyncSession,
    estimator: SimulatedRepairEstimator,
    job_id: UUID,
    latency_seconds: float,
) -> SimulatedEstimate:
    """Pretend to think, draw an estimate, and store it as an AI estimate."""
    await get_job_or_404(db, job_id)
    if latency_seconds > 0:
        await asyncio.sleep(latency_seconds)
    estimate = estimator.estimate()
    db.add(RepairEstimate(
        job_id=job_id,
        time_estimate=estimate.hours,
        cost_estimate=estimate.cost,
        source=EstimateSource.AI.value,
    ))
    await db.commit()
    logger.info(
        f"Simulated repair estimate: {estimate.hours}h",
        extra={"job_id": job_id},
    )
    return estimate


async def latest_estimate(db: AsyncSession, job_id: UUID) -> RepairEstimate | None:
    result = await db.execute(
        select(RepairEstimate)
        .where(RepairEstimate.job_id == job_id)
        .order_by(RepairEstimate.created_at.desc())
        .limit(1),
    )
    return result.scalar_one_or_none()


async def apply_expert_correction(
    db: AsyncSession,
    estimator: SimulatedRepairEstimator,
    job_id: UUID,
    corrected_hours: float,
) -> RepairEstimate:
    await get_job_or_404(db, job_id)
    estimate = await latest_estimate(db, job_id)
    if estimate is None:
        estimate = RepairEstimate(job_id=job_id)
        db.add(estimate)
    estimate.time_estimate = corrected_hours
    estimate.cost_estimate = estimator.cost_for(corrected_hours)
    estimate.source = EstimateSource.EXPERT.value
    await db.commit()
    await db.refresh(estimate)
    logger.info(
        f"Expert correction saved: {corrected_hours}h",
        extra={"job_id": job_id},
    )
    return estimate


async def record_feedback(
    db: AsyncSession,
    user_id: UUID,
    job_id: UUID,
    feedback_type: str,
    actual_hours: float | None,
    message: str | None = None,
    rating: float | None = None,
) -> Feedback:
    await require_user(db, user_id)
    await get_job_or_404(db, job_id)
    feedback = Feedback(
        user_id=user_id,
        job_id=job_id,
        feedback_type=feedback_type,
        message=message,
        actual_hours=actual_hours,
        experience_score_snapshot=rating,
    )
    db.add(feedback)
    await db.commit()
    await db.refresh(feedback)
    logger.info(
        f"Feedback recorded ({feedback_type})",
        extra={"job_id": job_id, "user_id": user_id},
    )
    return feedback


def correction_message(actual_hours: float, ai_estimate: float | str | None) -> str:
    return (
        f"Expert corrected AI estimate to {actual_hours} hours. "
        f"AI was {ai_estimate} hours."
    )


async def record_expert_correction(
    db: AsyncSession,
    user_id: UUID,
    job_id: UUID,
    actual_hours: float,
    correction_type: str = FeedbackType.EXPERT_CORRECTION.value,
    message: str | None = None,
    rating: float | None = None,
    ai_estimate: float | str | None = None,
) -> Feedback:
    return await record_feedback(
        db,
        user_id=user_id,
        job_id=job_id,
        feedback_type=correction_type,
        actual_hours=actual_hours,
        message=message or correction_message(actual_hours, ai_estimate),
        rating=rating,
    )
