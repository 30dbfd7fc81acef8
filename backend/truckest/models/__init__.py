"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - JobReport is the aggregate root for images, estimates and feedback

Design Decisions:
    - One file per entity (label vocab tables grouped by concern)
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from truckest.models.user import User  # noqa: F401
from truckest.models.password_reset_token import PasswordResetToken  # noqa: F401
from truckest.models.vehicle import Vehicle  # noqa: F401
from truckest.models.vehicle_reference_image import VehicleReferenceImage  # noqa: F401
from truckest.models.job_report import JobReport  # noqa: F401
from truckest.models.truck_section import TruckSection, VehiclePart  # noqa: F401
from truckest.models.damage_label import DamageType, SeverityLevel  # noqa: F401
from truckest.models.image import Image, ImageVehiclePart, ImageDamageType  # noqa: F401
from truckest.models.repair_estimate import RepairEstimate  # noqa: F401
from truckest.models.feedback import Feedback  # noqa: F401
