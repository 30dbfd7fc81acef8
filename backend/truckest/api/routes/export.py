"""Export Routes — labelled images as ML training data (JSON or CSV).

Invariants:
    - format is json or csv, case-insensitive (anything else is a 400)
    - CSV is served as an attachment named training-data-YYYY-MM-DD.csv
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from truckest.core.domain_types import ExportFormat
from truckest.core.errors import InvalidRequestError
from truckest.core.training_export import compute_statistics, export_filename, render_csv
from truckest.infrastructure.database import get_db
from truckest.services.training_data import collect_training_rows

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/export", tags=["export"])


def parse_export_format(raw: str) -> ExportFormat:
    try:
        return ExportFormat(raw.strip().lower())
    except ValueError:
        raise InvalidRequestError("format must be json or csv", field="format")


@router.get("/training-data")
async def export_training_data(
    format: str = Query(ExportFormat.JSON.value),
    include_unlabeled: bool = Query(False),
    db: AsyncSession = Depends(get_db),
):
    export_format = parse_export_format(format)
    rows = await collect_training_rows(db, include_unlabeled)
    exported_at = datetime.now(timezone.utc)
    logger.info(f"Training data export: {len(rows)} row(s) as {export_format.value}")

    if export_format == ExportFormat.CSV:
        return Response(
            content=render_csv(rows),
            media_type="text/csv",
            headers={
                "Content-Disposition": (
                    f'attachment; filename="{export_filename(exported_at.date())}"'
                ),
            },
        )

    return {
        "success": True,
        "metadata": {
            "exported_at": exported_at.isoformat(),
            "format": export_format.value,
            "include_unlabeled": include_unlabeled,
            "statistics": compute_statistics(rows),
        },
        "data": rows,
    }
