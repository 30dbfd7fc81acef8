"""Estimate Schemas — simulated AI requests, expert corrections and feedback.

Invariants:
    - Hours are non-negative; expert corrections must be strictly positive
    - rating, when given, is 0-10
"""

from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field


class AskAIRequest(BaseModel):
    job_id: UUID | None = None
    question: str = Field(min_length=1, max_length=2000)
    vehicle_data: dict[str, Any] | None = None


class AnalyzeImagesRequest(BaseModel):
    images: list[str]


class RepairEstimateRequest(BaseModel):
    job_id: UUID
    vehicle_data: dict[str, Any] | None = None
    damage_images: list[Any] | None = None


class EstimateCorrectionRequest(BaseModel):
    job_id: UUID
    ai_estimate: float | str | None = None
    corrected_hours: float = Field(ge=0)


class FeedbackRequest(BaseModel):
    job_id: UUID
    feedback_type: str = Field(min_length=1, max_length=50)
    message: str | None = Field(None, max_length=5000)
    actual_hours: float = Field(ge=0)
    rating: float | None = Field(None, ge=0, le=10)


class ExpertCorrectionRequest(BaseModel):
    job_id: UUID
    correction_type: str = Field("expert_correction", min_length=1, max_length=50)
    message: str | None = Field(None, max_length=5000)
    actual_hours: float = Field(gt=0)
    rating: float | None = Field(None, ge=0, le=10)
    ai_estimate: float | str | None = None
