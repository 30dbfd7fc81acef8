"""Job Schemas — job creation and expert-hours update bodies."""

from pydantic import BaseModel, Field, field_validator


class JobCreateRequest(BaseModel):
    vin: str = Field(min_length=5, max_length=17)

    @field_validator("vin")
    @classmethod
    def normalize_vin(cls, v: str) -> str:
        v = v.strip().upper()
        if len(v) < 5:
            raise ValueError("vin must be at least 5 characters")
        return v


class JobUpdateRequest(BaseModel):
    """Missing expert_hours is reported by the route as 400 'Expert hours are required'."""
    expert_hours: float | None = Field(None, ge=0)
