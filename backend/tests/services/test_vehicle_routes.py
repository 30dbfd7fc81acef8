"""Vehicle routes — idempotent registration and the reference-image database."""

import os
import uuid

from truckest.models import Vehicle

from tests.services.fakes import TEST_VIN

JPEG = ("front.jpg", b"\xff\xd8\xff\xe0reference", "image/jpeg")


async def test_register_vehicle_then_repeat_is_idempotent(client, test_session_factory):
    first = await client.post("/api/vehicles", json={
        "vin": TEST_VIN.lower(), "make": "FREIGHTLINER", "owner": "Acme",
    })
    assert first.status_code == 201
    assert first.json()["created"] is True
    assert first.json()["vehicle"]["vin"] == TEST_VIN

    second = await client.post("/api/vehicles", json={
        "vin": TEST_VIN, "make": "PETERBILT", "owner": "Someone else",
    })
    assert second.status_code == 200
    assert second.json()["created"] is False
    assert second.json()["vehicle"]["make"] == "FREIGHTLINER"

    async with test_session_factory() as db:
        vehicle = await db.get(Vehicle, TEST_VIN)
    assert vehicle.owner == "Acme"


async def test_register_vehicle_short_vin(client):
    res = await client.post("/api/vehicles", json={"vin": "1234"})
    assert res.status_code == 400


async def test_reference_image_lifecycle(client, seed_vehicle, auth_headers, upload_dir):
    res = await client.post(
        "/api/vehicle-database",
        files={"file": JPEG},
        data={"vin": TEST_VIN, "angle": "front"},
        headers=auth_headers,
    )
    assert res.status_code == 201
    image = res.json()["image"]
    assert image["image_url"].startswith(f"/uploads/{TEST_VIN}-front-")
    assert image["uploaded_by_id"] == auth_headers["X-User-Id"]
    stored_path = upload_dir / os.path.basename(image["image_url"])
    assert stored_path.exists()

    listing = await client.get("/api/vehicle-database", params={"vin": TEST_VIN})
    assert [i["id"] for i in listing.json()["images"]] == [image["id"]]

    deleted = await client.delete("/api/vehicle-database", params={"id": image["id"]})
    assert deleted.status_code == 200
    assert not stored_path.exists()
    listing = await client.get("/api/vehicle-database", params={"vin": TEST_VIN})
    assert listing.json()["images"] == []


async def test_reference_image_without_angle_uses_misc(client, seed_vehicle):
    res = await client.post(
        "/api/vehicle-database", files={"file": JPEG}, data={"vin": TEST_VIN},
    )
    assert res.status_code == 201
    assert res.json()["image"]["image_url"].startswith(f"/uploads/{TEST_VIN}-misc-")


async def test_reference_image_requires_vin_and_file(client, seed_vehicle):
    no_file = await client.post("/api/vehicle-database", data={"vin": TEST_VIN})
    no_vin = await client.post("/api/vehicle-database", files={"file": JPEG})
    assert no_file.status_code == 400
    assert no_vin.status_code == 400


async def test_reference_image_for_unknown_vehicle(client, upload_dir):
    res = await client.post(
        "/api/vehicle-database", files={"file": JPEG}, data={"vin": TEST_VIN},
    )
    assert res.status_code == 404
    assert not upload_dir.exists() or os.listdir(upload_dir) == []


async def test_list_requires_vin(client):
    res = await client.get("/api/vehicle-database")
    assert res.status_code == 400


async def test_delete_unknown_image(client):
    res = await client.delete("/api/vehicle-database", params={"id": str(uuid.uuid4())})
    assert res.status_code == 404


async def test_delete_requires_id(client):
    res = await client.delete("/api/vehicle-database")
    assert res.status_code == 400


async def test_reference_upload_rejects_non_image(client, seed_vehicle, upload_dir):
    res = await client.post(
        "/api/vehicle-database",
        files={"file": ("specs.pdf", b"%PDF-1.4", "application/pdf")},
        data={"vin": TEST_VIN},
    )
    assert res.status_code == 400
    assert not upload_dir.exists()


async def test_reference_upload_refuses_oversized_declared_length(client, seed_vehicle, upload_dir):
    res = await client.post(
        "/api/vehicle-database",
        content=b"--x--",
        headers={
            "Content-Type": "multipart/form-data; boundary=x",
            "Content-Length": str(100 * 1024 * 1024),
        },
    )
    assert res.status_code == 413
    assert not upload_dir.exists()
