"""Upload route — labelled damage photos.

Invariants:
    - Labels are validated before the file is written
    - The response carries the image with label names resolved
"""

import json
import os
import uuid

import pytest

from truckest.api.upload_limits import MULTIPART_OVERHEAD_BYTES
from truckest.config import get_settings


def _form(job, catalogue, **overrides):
    data = {
        "job_id": str(job),
        "truck_section_id": catalogue["sections"]["Front of Truck"],
        "vehicle_part_ids": json.dumps([
            catalogue["parts"]["Grille"], catalogue["parts"]["LT Headlamp"],
        ]),
        "damage_type_ids": json.dumps([catalogue["damage_types"]["Dent"]]),
        "severity_id": catalogue["severity"]["Moderate"],
        "notes": "  impact at low speed  ",
    }
    data.update(overrides)
    return {k: v for k, v in data.items() if v is not None}


def _file(content=b"\xff\xd8\xff\xe0photo", name="dent.JPG", content_type="image/jpeg"):
    return {"file": (name, content, content_type)}


async def test_probe(client):
    res = await client.get("/api/upload")
    assert res.status_code == 200
    assert res.json()["methods"] == ["POST"]


async def test_upload_labelled_image(client, seed_job, catalogue, upload_dir):
    res = await client.post("/api/upload", files=_file(), data=_form(seed_job.id, catalogue))
    assert res.status_code == 201
    image = res.json()["image"]
    assert image["job_id"] == str(seed_job.id)
    assert image["image_path"].startswith(f"/uploads/{seed_job.id}-")
    assert image["image_path"].endswith(".jpg")
    assert image["truck_section"]["name"] == "Front of Truck"
    assert sorted(p["name"] for p in image["vehicle_parts"]) == ["Grille", "LT Headlamp"]
    assert [d["name"] for d in image["damage_types"]] == ["Dent"]
    assert image["severity"]["name"] == "Moderate"
    assert image["notes"] == "impact at low speed"
    assert (upload_dir / os.path.basename(image["image_path"])).exists()

    job = (await client.get(f"/api/jobs/{seed_job.id}")).json()["job"]
    assert [i["id"] for i in job["images"]] == [image["id"]]


async def test_upload_without_optional_labels(client, seed_job, catalogue):
    res = await client.post("/api/upload", files=_file(), data=_form(
        seed_job.id, catalogue, damage_type_ids=None, severity_id=None, notes=None,
    ))
    assert res.status_code == 201
    image = res.json()["image"]
    assert image["damage_types"] == []
    assert image["severity"] is None


@pytest.mark.parametrize("override", [
    {"vehicle_part_ids": None},
    {"vehicle_part_ids": "[]"},
    {"truck_section_id": None},
    {"job_id": None},
])
async def test_required_labels(client, seed_job, catalogue, override, upload_dir):
    res = await client.post("/api/upload", files=_file(), data=_form(seed_job.id, catalogue, **override))
    assert res.status_code == 400
    assert not upload_dir.exists() or os.listdir(upload_dir) == []


async def test_malformed_json_array(client, seed_job, catalogue):
    res = await client.post("/api/upload", files=_file(), data=_form(
        seed_job.id, catalogue, vehicle_part_ids="not json",
    ))
    assert res.status_code == 400


async def test_unknown_job(client, catalogue):
    res = await client.post("/api/upload", files=_file(), data=_form(uuid.uuid4(), catalogue))
    assert res.status_code == 404


async def test_unknown_part_writes_no_file(client, seed_job, catalogue, upload_dir):
    res = await client.post("/api/upload", files=_file(), data=_form(
        seed_job.id, catalogue, vehicle_part_ids=json.dumps([str(uuid.uuid4())]),
    ))
    assert res.status_code == 400
    assert not upload_dir.exists() or os.listdir(upload_dir) == []


async def test_non_image_rejected(client, seed_job, catalogue):
    res = await client.post(
        "/api/upload",
        files=_file(name="notes.txt", content=b"hello", content_type="text/plain"),
        data=_form(seed_job.id, catalogue),
    )
    assert res.status_code == 400


async def test_too_large(client, seed_job, catalogue, upload_dir):
    # Test storage caps uploads at 1024 bytes
    res = await client.post(
        "/api/upload", files=_file(content=b"x" * 2048), data=_form(seed_job.id, catalogue),
    )
    assert res.status_code == 413
    assert os.listdir(upload_dir) == []


async def test_oversized_body_refused_before_parsing(client, seed_job, catalogue, upload_dir, monkeypatch):
    monkeypatch.setattr(get_settings(), "max_upload_bytes", 1024)
    res = await client.post(
        "/api/upload",
        files=_file(content=b"x" * (MULTIPART_OVERHEAD_BYTES + 4096)),
        data=_form(seed_job.id, catalogue),
    )
    assert res.status_code == 413
    assert res.json()["error"]["code"] == "UPLOAD_TOO_LARGE"
    # Storage never ran, so the upload directory was never created
    assert not upload_dir.exists()


async def test_declared_length_checked_without_reading_body(client, upload_dir):
    res = await client.post(
        "/api/upload",
        content=b"--x--",
        headers={
            "Content-Type": "multipart/form-data; boundary=x",
            "Content-Length": str(100 * 1024 * 1024),
        },
    )
    assert res.status_code == 413
    assert not upload_dir.exists()


async def test_missing_file(client, seed_job, catalogue):
    res = await client.post("/api/upload", data=_form(seed_job.id, catalogue))
    assert res.status_code == 400
