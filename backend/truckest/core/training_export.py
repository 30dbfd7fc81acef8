"""Training Export — flattens labelled image records into JSON stats and CSV.

Invariants:
    - Rows are plain dicts (built by services/training_data.py); no ORM here
    - An image is "labelled" iff it has at least one vehicle part
    - CSV: header row first, every cell quoted, multi-valued labels joined by "|",
      None rendered as empty string
    - Statistics distributions count every occurrence (an image with 2 parts
      contributes 2 to partDistribution)
"""

import csv
import io
from collections import Counter
from datetime import date

CSV_HEADERS: tuple[str, ...] = (
    "imageId",
    "imagePath",
    "uploadedAt",
    "vehicleParts",
    "damageType",
    "severity",
    "notes",
    "vin",
    "make",
    "model",
    "year",
    "vehicleType",
    "bodyClass",
    "weightClass",
    "gvwr",
    "jobId",
    "jobCreatedAt",
    "labelerExperience",
)

MULTI_VALUE_SEPARATOR = "|"


def is_labeled(row: dict) -> bool:
    return bool(row["labels"].get("vehicle_parts"))


def compute_statistics(rows: list[dict]) -> dict:
    """Label distribution summary for the export metadata."""
    parts: Counter[str] = Counter()
    damage_types: Counter[str] = Counter()
    severities: Counter[str] = Counter()
    vehicle_types: Counter[str] = Counter()
    labeled = 0

    for row in rows:
        labels = row["labels"]
        if is_labeled(row):
            labeled += 1
        parts.update(labels.get("vehicle_parts") or [])
        damage_types.update(labels.get("damage_types") or [])
        if labels.get("severity"):
            severities[labels["severity"]] += 1
        vehicle = row.get("vehicle") or {}
        if vehicle.get("vehicle_type"):
            vehicle_types[vehicle["vehicle_type"]] += 1

    return {
        "total_images": len(rows),
        "labeled_images": labeled,
        "unlabeled_images": len(rows) - labeled,
        "part_distribution": dict(parts),
        "damage_type_distribution": dict(damage_types),
        "severity_distribution": dict(severities),
        "vehicle_type_distribution": dict(vehicle_types),
    }


def _csv_cells(row: dict) -> list:
    labels = row["labels"]
    vehicle = row.get("vehicle") or {}
    labeler = row.get("labeler") or {}
    return [
        row["image_id"],
        row["image_path"],
        row.get("uploaded_at"),
        MULTI_VALUE_SEPARATOR.join(labels.get("vehicle_parts") or []),
        MULTI_VALUE_SEPARATOR.join(labels.get("damage_types") or []),
        labels.get("severity"),
        labels.get("notes"),
        vehicle.get("vin"),
        vehicle.get("make"),
        vehicle.get("model"),
        vehicle.get("year"),
        vehicle.get("vehicle_type"),
        vehicle.get("body_class"),
        vehicle.get("weight_class"),
        vehicle.get("gvwr"),
        row.get("job_id"),
        row.get("job_created_at"),
        labeler.get("experience_level"),
    ]


def render_csv(rows: list[dict]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for row in rows:
        writer.writerow(["" if v is None else v for v in _csv_cells(row)])
    return buffer.getvalue().rstrip("\n")


def export_filename(on: date) -> str:
    return f"training-data-{on.isoformat()}.csv"
