"""Presenters — ORM entities to JSON-ready dicts.

Invariants:
    - Only attributes eagerly loaded by the model (lazy="selectin") or by the
      caller's query options are touched — no implicit IO in async context
    - UUIDs and datetimes rendered as strings
    - hashed_password never leaves present_user
"""

from datetime import datetime

from truckest.core.domain_types import FeedbackType
from truckest.models import (
    Feedback, Image, JobReport, RepairEstimate, User, Vehicle,
    VehicleReferenceImage,
)


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def present_user(user: User) -> dict:
    return {
        "id": str(user.id),
        "name": user.name,
        "email": user.email,
        "role": user.role,
    }


def present_vehicle(vehicle: Vehicle) -> dict:
    return {
        "vin": vehicle.vin,
        "vehicle_type": vehicle.vehicle_type,
        "make": vehicle.make,
        "model": vehicle.model,
        "year": vehicle.year,
        "body_class": vehicle.body_class,
        "drive_type": vehicle.drive_type,
        "engine_model": vehicle.engine_model,
        "fuel_type": vehicle.fuel_type,
        "weight_class": vehicle.weight_class,
        "gvwr": vehicle.gvwr,
        "manufacturer": vehicle.manufacturer,
        "plant": vehicle.plant,
        "series": vehicle.series,
        "trim": vehicle.trim,
        "cab_type": vehicle.cab_type,
        "owner": vehicle.owner,
        "notes": vehicle.notes,
        "reference_image_path": vehicle.reference_image_path,
        "created_at": _iso(vehicle.created_at),
        "updated_at": _iso(vehicle.updated_at),
    }


def present_image(image: Image) -> dict:
    return {
        "id": str(image.id),
        "job_id": str(image.job_id),
        "image_path": image.image_path,
        "notes": image.notes,
        "uploaded_at": _iso(image.uploaded_at),
        "truck_section": (
            {"id": str(image.truck_section.id), "name": image.truck_section.name}
            if image.truck_section else None
        ),
        "vehicle_parts": [
            {"id": str(link.vehicle_part.id), "name": link.vehicle_part.name}
            for link in image.vehicle_parts
        ],
        "damage_types": [
            {"id": str(link.damage_type.id), "name": link.damage_type.name}
            for link in image.damage_types
        ],
        "severity": (
            {"id": str(image.severity.id), "name": image.severity.name}
            if image.severity else None
        ),
    }


def present_estimate(estimate: RepairEstimate) -> dict:
    return {
        "id": str(estimate.id),
        "job_id": str(estimate.job_id),
        "time_estimate": estimate.time_estimate,
        "cost_estimate": estimate.cost_estimate,
        "source": estimate.source,
        "created_at": _iso(estimate.created_at),
        "updated_at": _iso(estimate.updated_at),
    }


def present_feedback(feedback: Feedback) -> dict:
    return {
        "id": str(feedback.id),
        "job_id": str(feedback.job_id),
        "user_id": str(feedback.user_id),
        "feedback_type": feedback.feedback_type,
        "message": feedback.message,
        "actual_hours": feedback.actual_hours,
        "rating": feedback.experience_score_snapshot,
        "created_at": _iso(feedback.created_at),
    }


def present_job_summary(job: JobReport) -> dict:
    """Job columns only (no relations) — used right after insert/update."""
    return {
        "id": str(job.id),
        "vin": job.vin,
        "uploaded_by_id": str(job.uploaded_by_id) if job.uploaded_by_id else None,
        "status": job.status,
        "expert_estimate": job.expert_estimate,
        "created_at": _iso(job.created_at),
        "updated_at": _iso(job.updated_at),
    }


def present_job(job: JobReport) -> dict:
    """Full job detail: vehicle, labelled images, estimates, expert corrections."""
    corrections = [
        f for f in job.feedbacks
        if f.feedback_type == FeedbackType.EXPERT_CORRECTION.value
        and f.actual_hours is not None
    ]
    return {
        **present_job_summary(job),
        "vehicle": present_vehicle(job.vehicle) if job.vehicle else None,
        "images": [present_image(img) for img in job.images],
        "repair_estimates": [present_estimate(e) for e in job.repair_estimates],
        "feedbacks": [present_feedback(f) for f in corrections],
    }


def present_reference_image(image: VehicleReferenceImage) -> dict:
    return {
        "id": str(image.id),
        "vehicle_vin": image.vehicle_vin,
        "image_url": image.image_url,
        "angle": image.angle,
        "uploaded_by_id": str(image.uploaded_by_id) if image.uploaded_by_id else None,
        "uploaded_at": _iso(image.uploaded_at),
    }
