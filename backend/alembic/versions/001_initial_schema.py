"""Initial schema — users, vehicles, jobs, labelled images, estimates, feedback.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

Also seeds the label catalogue (truck sections with parts, damage types,
severity levels) so a fresh database serves real ids immediately.
"""
import uuid
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

from truckest.core.truck_catalog import (
    DAMAGE_TYPES, SECTION_PARTS, SEVERITY_LEVELS, TRUCK_SECTIONS,
)

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps(*names: str) -> list[sa.Column]:
    return [
        sa.Column(n, sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now())
        for n in names
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("email", sa.String(320), nullable=False, unique=True),
        sa.Column("hashed_password", sa.String(100), nullable=False),
        sa.Column("role", sa.String(20), nullable=False, server_default="TECHNICIAN"),
        sa.Column("experience_level", sa.String(50), nullable=True),
        *_timestamps("created_at"),
    )
    op.create_index("ix_users_email", "users", ["email"])

    op.create_table(
        "password_reset_tokens",
        sa.Column("token", sa.String(128), primary_key=True),
        sa.Column("user_id", UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        *_timestamps("created_at"),
    )

    op.create_table(
        "vehicles",
        sa.Column("vin", sa.String(17), primary_key=True),
        sa.Column("vehicle_type", sa.String(100), nullable=True),
        sa.Column("make", sa.String(100), nullable=True),
        sa.Column("model", sa.String(100), nullable=True),
        sa.Column("year", sa.Integer, nullable=True),
        sa.Column("body_class", sa.String(200), nullable=True),
        sa.Column("drive_type", sa.String(100), nullable=True),
        sa.Column("engine_model", sa.String(200), nullable=True),
        sa.Column("fuel_type", sa.String(100), nullable=True),
        sa.Column("weight_class", sa.String(200), nullable=True),
        sa.Column("gvwr", sa.String(200), nullable=True),
        sa.Column("manufacturer", sa.String(200), nullable=True),
        sa.Column("plant", sa.String(200), nullable=True),
        sa.Column("series", sa.String(200), nullable=True),
        sa.Column("trim", sa.String(200), nullable=True),
        sa.Column("cab_type", sa.String(100), nullable=True),
        sa.Column("owner", sa.String(200), nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("reference_image_path", sa.String(500), nullable=True),
        sa.Column("registry_attributes", sa.JSON, nullable=False, server_default="{}"),
        *_timestamps("created_at", "updated_at"),
    )

    op.create_table(
        "vehicle_reference_images",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("vehicle_vin", sa.String(17), sa.ForeignKey("vehicles.vin"), nullable=False),
        sa.Column("image_url", sa.String(500), nullable=False),
        sa.Column("angle", sa.String(50), nullable=True),
        sa.Column("uploaded_by_id", UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=True),
        *_timestamps("uploaded_at"),
    )
    op.create_index(
        "ix_vehicle_reference_images_vehicle_vin", "vehicle_reference_images", ["vehicle_vin"],
    )

    op.create_table(
        "job_reports",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("vin", sa.String(17), sa.ForeignKey("vehicles.vin"), nullable=False),
        sa.Column("uploaded_by_id", UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="PENDING"),
        sa.Column("expert_estimate", sa.Float, nullable=True),
        *_timestamps("created_at", "updated_at"),
    )
    op.create_index("ix_job_reports_vin", "job_reports", ["vin"])

    op.create_table(
        "truck_sections",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False, unique=True),
    )
    op.create_table(
        "vehicle_parts",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("truck_section_id", UUID(as_uuid=True), sa.ForeignKey("truck_sections.id"), nullable=False),
        sa.UniqueConstraint("truck_section_id", "name", name="uq_vehicle_part_section_name"),
    )
    op.create_table(
        "damage_types",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False, unique=True),
    )
    op.create_table(
        "severity_levels",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(50), nullable=False, unique=True),
        sa.Column("rank", sa.Integer, nullable=False, server_default="0"),
    )

    op.create_table(
        "images",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("job_id", UUID(as_uuid=True), sa.ForeignKey("job_reports.id", ondelete="CASCADE"), nullable=False),
        sa.Column("image_path", sa.String(500), nullable=False),
        sa.Column("truck_section_id", UUID(as_uuid=True), sa.ForeignKey("truck_sections.id"), nullable=False),
        sa.Column("severity_id", UUID(as_uuid=True), sa.ForeignKey("severity_levels.id"), nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        *_timestamps("uploaded_at"),
    )
    op.create_index("ix_images_job_id", "images", ["job_id"])
    op.create_table(
        "image_vehicle_parts",
        sa.Column("image_id", UUID(as_uuid=True), sa.ForeignKey("images.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("vehicle_part_id", UUID(as_uuid=True), sa.ForeignKey("vehicle_parts.id"), primary_key=True),
    )
    op.create_table(
        "image_damage_types",
        sa.Column("image_id", UUID(as_uuid=True), sa.ForeignKey("images.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("damage_type_id", UUID(as_uuid=True), sa.ForeignKey("damage_types.id"), primary_key=True),
    )

    op.create_table(
        "repair_estimates",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("job_id", UUID(as_uuid=True), sa.ForeignKey("job_reports.id", ondelete="CASCADE"), nullable=False),
        sa.Column("time_estimate", sa.Float, nullable=False),
        sa.Column("cost_estimate", sa.Float, nullable=False, server_default="0"),
        sa.Column("source", sa.String(20), nullable=False, server_default="ai"),
        *_timestamps("created_at", "updated_at"),
    )
    op.create_index("ix_repair_estimates_job_id", "repair_estimates", ["job_id"])

    op.create_table(
        "feedbacks",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("job_id", UUID(as_uuid=True), sa.ForeignKey("job_reports.id", ondelete="CASCADE"), nullable=False),
        sa.Column("feedback_type", sa.String(50), nullable=False),
        sa.Column("message", sa.Text, nullable=True),
        sa.Column("actual_hours", sa.Float, nullable=True),
        sa.Column("experience_score_snapshot", sa.Float, nullable=True),
        *_timestamps("created_at"),
    )
    op.create_index("ix_feedbacks_job_id", "feedbacks", ["job_id"])

    _seed_catalogue()


def _seed_catalogue() -> None:
    sections = sa.table(
        "truck_sections",
        sa.column("id", UUID(as_uuid=True)), sa.column("name", sa.String),
    )
    parts = sa.table(
        "vehicle_parts",
        sa.column("id", UUID(as_uuid=True)), sa.column("name", sa.String),
        sa.column("truck_section_id", UUID(as_uuid=True)),
    )
    damage_types = sa.table(
        "damage_types",
        sa.column("id", UUID(as_uuid=True)), sa.column("name", sa.String),
    )
    severities = sa.table(
        "severity_levels",
        sa.column("id", UUID(as_uuid=True)), sa.column("name", sa.String),
        sa.column("rank", sa.Integer),
    )

    section_rows = [{"id": uuid.uuid4(), "name": name} for name in TRUCK_SECTIONS]
    op.bulk_insert(sections, section_rows)
    op.bulk_insert(parts, [
        {"id": uuid.uuid4(), "name": part, "truck_section_id": row["id"]}
        for row in section_rows
        for part in SECTION_PARTS[row["name"]]
    ])
    op.bulk_insert(damage_types, [
        {"id": uuid.uuid4(), "name": name} for name in DAMAGE_TYPES
    ])
    op.bulk_insert(severities, [
        {"id": uuid.uuid4(), "name": name, "rank": rank}
        for rank, name in enumerate(SEVERITY_LEVELS)
    ])


def downgrade() -> None:
    for table in (
        "feedbacks", "repair_estimates", "image_damage_types",
        "image_vehicle_parts", "images", "severity_levels", "damage_types",
        "vehicle_parts", "truck_sections", "job_reports",
        "vehicle_reference_images", "vehicles", "password_reset_tokens", "users",
    ):
        op.drop_table(table)
