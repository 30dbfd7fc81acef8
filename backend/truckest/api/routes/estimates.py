"""Estimate Routes — simulated AI estimates, expert corrections and feedback.

Invariants:
    - "AI" answers are simulated (core/repair_estimator); no model is called
    - POST /api/ai and /api/ai/analyze-images never touch the database
    - Feedback and expert corrections require X-User-Id (401)
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from truckest.api.deps import get_current_user_id, get_estimator
from truckest.config import get_settings
from truckest.core.repair_estimator import SimulatedRepairEstimator
from truckest.infrastructure.database import get_db
from truckest.schemas.estimate import (
    AnalyzeImagesRequest, AskAIRequest, EstimateCorrectionRequest,
    ExpertCorrectionRequest, FeedbackRequest, RepairEstimateRequest,
)
from truckest.services import estimates
from truckest.services.presenters import present_estimate, present_feedback

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["estimates"])


@router.post("/ai")
async def ask_ai(
    body: AskAIRequest,
    estimator: SimulatedRepairEstimator = Depends(get_estimator),
):
    answer = estimator.answer_question(body.question)
    return {
        "success": True,
        "job_id": str(body.job_id) if body.job_id else None,
        **answer,
    }


@router.post("/ai/analyze-images")
async def analyze_images(
    body: AnalyzeImagesRequest,
    estimator: SimulatedRepairEstimator = Depends(get_estimator),
):
    return {"success": True, "results": estimator.analyze_images(body.images)}


@router.post("/ai/repair-estimate")
async def repair_estimate(
    body: RepairEstimateRequest,
    db: AsyncSession = Depends(get_db),
    estimator: SimulatedRepairEstimator = Depends(get_estimator),
):
    estimate = await estimates.run_simulated_estimate(
        db, estimator, body.job_id, get_settings().ai_simulated_latency_seconds,
    )
    vin = (body.vehicle_data or {}).get("vin")
    return {
        "success": True,
        "job_id": str(body.job_id),
        "estimated_hours": estimate.hours,
        "estimated_cost": estimate.cost,
        "answer": estimator.repair_estimate_answer(
            estimate, vin, len(body.damage_images or []),
        ),
    }


@router.post("/estimates")
async def save_expert_estimate(
    body: EstimateCorrectionRequest,
    db: AsyncSession = Depends(get_db),
    estimator: SimulatedRepairEstimator = Depends(get_estimator),
):
    estimate = await estimates.apply_expert_correction(
        db, estimator, body.job_id, body.corrected_hours,
    )
    return {
        "success": True,
        "message": "Estimate corrected successfully",
        "estimate": present_estimate(estimate),
    }


@router.get("/estimate")
async def get_latest_estimate(
    job_id: UUID = Query(...), db: AsyncSession = Depends(get_db),
):
    estimate = await estimates.latest_estimate(db, job_id)
    return {
        "success": True,
        "estimate": present_estimate(estimate) if estimate else None,
    }


@router.post("/feedback", status_code=status.HTTP_201_CREATED)
async def submit_feedback(
    body: FeedbackRequest,
    db: AsyncSession = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    feedback = await estimates.record_feedback(
        db,
        user_id=user_id,
        job_id=body.job_id,
        feedback_type=body.feedback_type,
        actual_hours=body.actual_hours,
        message=body.message,
        rating=body.rating,
    )
    return {
        "success": True,
        "message": "Feedback submitted successfully",
        "feedback": present_feedback(feedback),
    }


@router.post("/expert-corrections", status_code=status.HTTP_201_CREATED)
async def submit_expert_correction(
    body: ExpertCorrectionRequest,
    db: AsyncSession = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    feedback = await estimates.record_expert_correction(
        db,
        user_id=user_id,
        job_id=body.job_id,
        actual_hours=body.actual_hours,
        correction_type=body.correction_type,
        message=body.message,
        rating=body.rating,
        ai_estimate=body.ai_estimate,
    )
    return {
        "success": True,
        "message": "Expert correction saved successfully",
        "feedback": present_feedback(feedback),
    }
