"""Request Schemas — boundary validation for auth, vehicle, job and estimate bodies.

Invariants:
    - Emails are normalized (stripped, lower-cased)
    - VINs on manual registration are upper-cased, 5-17 chars
    - Hours are non-negative; expert corrections strictly positive
"""

import pytest
from uuid import uuid4
from pydantic import ValidationError

from truckest.schemas.auth import RegisterRequest, ResetPasswordRequest
from truckest.schemas.estimate import (
    EstimateCorrectionRequest, ExpertCorrectionRequest, FeedbackRequest,
)
from truckest.schemas.job import JobCreateRequest, JobUpdateRequest
from truckest.schemas.vehicle import VehicleUpsertRequest


def test_register_normalizes_email_and_name():
    body = RegisterRequest(name="  Dana  ", email="  Dana@Example.COM ", password="secret1")
    assert body.name == "Dana"
    assert body.email == "dana@example.com"


@pytest.mark.parametrize("field, value", [
    ("name", "   "),
    ("password", "12345"),
    ("email", "a"),
])
def test_register_rejects_bad_fields(field, value):
    data = {"name": "Dana", "email": "dana@example.com", "password": "secret1"}
    data[field] = value
    with pytest.raises(ValidationError):
        RegisterRequest(**data)


def test_reset_token_minimum_length():
    with pytest.raises(ValidationError):
        ResetPasswordRequest(token="short", new_password="secret1")


def test_vehicle_vin_uppercased_and_bounded():
    assert VehicleUpsertRequest(vin=" abc12 ").vin == "ABC12"
    with pytest.raises(ValidationError):
        VehicleUpsertRequest(vin="abcd")
    with pytest.raises(ValidationError):
        VehicleUpsertRequest(vin="A" * 18)


def test_job_create_vin_minimum():
    with pytest.raises(ValidationError):
        JobCreateRequest(vin="1234")


def test_job_update_hours_optional_but_non_negative():
    assert JobUpdateRequest().expert_hours is None
    with pytest.raises(ValidationError):
        JobUpdateRequest(expert_hours=-1)


def test_estimate_correction_rejects_negative_and_text_hours():
    with pytest.raises(ValidationError):
        EstimateCorrectionRequest(job_id=uuid4(), corrected_hours=-0.5)
    with pytest.raises(ValidationError):
        EstimateCorrectionRequest(job_id=uuid4(), corrected_hours="lots")


def test_feedback_rating_bounds():
    with pytest.raises(ValidationError):
        FeedbackRequest(job_id=uuid4(), feedback_type="general", actual_hours=1, rating=11)


def test_expert_correction_defaults_and_positive_hours():
    body = ExpertCorrectionRequest(job_id=uuid4(), actual_hours=3.5)
    assert body.correction_type == "expert_correction"
    with pytest.raises(ValidationError):
        ExpertCorrectionRequest(job_id=uuid4(), actual_hours=0)
