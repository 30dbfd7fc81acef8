"""Training Export — verifies labelled/unlabelled split, statistics and CSV rendering.

Tests:
    - An image is labelled iff it has at least one vehicle part
    - Distributions count every occurrence
    - CSV quotes every cell, joins multi-values with "|", renders None as ""
"""

from datetime import date

from truckest.core.training_export import (
    CSV_HEADERS, compute_statistics, export_filename, is_labeled, render_csv,
)


def _row(parts=("Grille",), damage=("Dent",), severity="Minor", vehicle_type="TRUCK"):
    return {
        "image_id": "img-1",
        "image_path": "/uploads/a.jpg",
        "uploaded_at": "2026-01-01T00:00:00+00:00",
        "labels": {
            "vehicle_parts": list(parts),
            "damage_types": list(damage),
            "severity": severity,
            "notes": None,
        },
        "vehicle": {
            "vin": "1FUJGLDR5CLBP8834", "make": "FREIGHTLINER", "model": "Cascadia",
            "year": 2012, "vehicle_type": vehicle_type, "body_class": None,
            "weight_class": None, "gvwr": None,
        },
        "job_id": "job-1",
        "job_created_at": "2026-01-01T00:00:00+00:00",
        "labeler": {"user_id": "u-1", "name": "Dana", "experience_level": "senior"},
    }


def test_is_labeled_requires_a_vehicle_part():
    assert is_labeled(_row())
    assert not is_labeled(_row(parts=()))


def test_statistics_count_every_occurrence():
    rows = [
        _row(parts=("Grille", "LT Headlamp"), damage=("Dent", "Scratch")),
        _row(parts=("Grille",), severity="Severe"),
        _row(parts=(), damage=(), severity=None, vehicle_type=None),
    ]
    stats = compute_statistics(rows)
    assert stats["total_images"] == 3
    assert stats["labeled_images"] == 2
    assert stats["unlabeled_images"] == 1
    assert stats["part_distribution"] == {"Grille": 2, "LT Headlamp": 1}
    assert stats["damage_type_distribution"] == {"Dent": 2, "Scratch": 1}
    assert stats["severity_distribution"] == {"Minor": 1, "Severe": 1}
    assert stats["vehicle_type_distribution"] == {"TRUCK": 2}


def test_statistics_of_nothing():
    stats = compute_statistics([])
    assert stats["total_images"] == 0
    assert stats["part_distribution"] == {}


def test_render_csv_header_and_quoting():
    csv_text = render_csv([_row(parts=("Grille", "LT Headlamp"))])
    header, line = csv_text.split("\n")
    assert header == ",".join(f'"{h}"' for h in CSV_HEADERS)
    assert '"Grille|LT Headlamp"' in line
    assert line.startswith('"img-1","/uploads/a.jpg"')
    # notes is None -> empty quoted cell
    assert ',"",' in line
    assert line.endswith('"senior"')


def test_render_csv_handles_missing_vehicle_and_labeler():
    row = _row()
    row["vehicle"] = None
    row["labeler"] = None
    line = render_csv([row]).split("\n")[1]
    assert line.endswith('"job-1","2026-01-01T00:00:00+00:00",""')


def test_render_csv_escapes_quotes():
    row = _row()
    row["labels"]["notes"] = 'said "ouch"'
    assert '"said ""ouch"""' in render_csv([row])


def test_export_filename():
    assert export_filename(date(2026, 3, 9)) == "training-data-2026-03-09.csv"
