"""Domain Types — enums shared across the codebase.

Invariants:
    - All valid states encoded as Enums — no raw string matching
    - Enum values are what the DB `status`/`role`/`source` columns store

Design Decisions:
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum


class UserRole(str, Enum):
    """Who the account belongs to. Experts correct estimates."""
    TECHNICIAN = "TECHNICIAN"
    EXPERT = "EXPERT"
    ADMIN = "ADMIN"


class JobStatus(str, Enum):
    """Job report lifecycle — maps to DB `status` column."""
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


class EstimateSource(str, Enum):
    """Who produced a repair estimate row."""
    AI = "ai"
    EXPERT = "expert"


class FeedbackType(str, Enum):
    """Feedback kinds. Only expert_correction is surfaced on job detail."""
    EXPERT_CORRECTION = "expert_correction"
    GENERAL = "general"


class ExportFormat(str, Enum):
    """Training data export encodings."""
    JSON = "json"
    CSV = "csv"
