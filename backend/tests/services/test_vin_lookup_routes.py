"""VIN lookup route — registry decode, vehicle upsert and job creation.

Invariants:
    - VIN format errors are 400 and never reach the registry
    - Registry rejections 400, empty/unusable decodes 404, outages 502
    - Lookup persists the vehicle; a job is opened only for an identified caller
"""

import httpx
from sqlalchemy import select

from truckest.models import JobReport, Vehicle

from tests.services.fakes import TEST_VIN, registry_results


async def test_lookup_decodes_and_persists(client, registry_stub, test_session_factory):
    res = await client.post("/api/vehicle/vin", json={"vin": TEST_VIN.lower()})
    assert res.status_code == 200
    body = res.json()
    assert body["success"] is True
    assert body["source"] == "NHTSA"
    assert body["job_id"] is None
    assert body["vehicle"]["make"] == "FREIGHTLINER"
    assert body["vehicle"]["year"] == 2012
    assert body["vehicle"]["plant"] == "CLEVELAND, NORTH CAROLINA"
    assert body["vehicle"]["trim"] is None
    assert body["raw_registry_data"][0]["Variable"] == "Error Code"
    assert registry_stub.requests[0].url.path.endswith(f"/DecodeVin/{TEST_VIN}")

    async with test_session_factory() as db:
        vehicle = await db.get(Vehicle, TEST_VIN)
    assert vehicle.model == "Cascadia"
    assert vehicle.notes.startswith("NHTSA lookup: ")
    assert vehicle.registry_attributes["Make"] == "FREIGHTLINER"


async def test_lookup_opens_job_for_identified_caller(client, auth_headers, seed_user, test_session_factory):
    res = await client.post("/api/vehicle/vin", json={"vin": TEST_VIN}, headers=auth_headers)
    job_id = res.json()["job_id"]
    assert job_id is not None

    async with test_session_factory() as db:
        job = (await db.execute(select(JobReport))).scalar_one()
    assert str(job.id) == job_id
    assert job.uploaded_by_id == seed_user.id
    assert job.status == "PENDING"


async def test_lookup_keeps_user_entered_fields(client, seed_vehicle, test_session_factory):
    async with test_session_factory() as db:
        vehicle = await db.get(Vehicle, TEST_VIN)
        vehicle.owner = "Acme Freight"
        vehicle.notes = "Yard 4"
        await db.commit()

    await client.post("/api/vehicle/vin", json={"vin": TEST_VIN})

    async with test_session_factory() as db:
        vehicle = await db.get(Vehicle, TEST_VIN)
    assert vehicle.owner == "Acme Freight"
    assert vehicle.notes == "Yard 4"
    assert vehicle.manufacturer == "DAIMLER TRUCKS NORTH AMERICA (DTNA)"


async def test_missing_vin(client, registry_stub):
    res = await client.post("/api/vehicle/vin", json={})
    assert res.status_code == 400
    assert res.json()["message"] == "VIN is required"
    assert registry_stub.requests == []


async def test_malformed_vin_never_reaches_registry(client, registry_stub):
    res = await client.post("/api/vehicle/vin", json={"vin": "1FUJGLDR5CLBP883Q"})
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_VIN"
    assert registry_stub.requests == []


async def test_registry_rejection_is_400(client, registry_stub):
    registry_stub.queue(httpx.Response(200, json={"Results": registry_results(**{
        "Error Code": "11", "Error Text": "11 - Incorrect Model Year, decoded data may not be accurate!",
    })}))
    res = await client.post("/api/vehicle/vin", json={"vin": TEST_VIN})
    assert res.status_code == 400
    assert res.json()["message"].startswith("11 - Incorrect Model Year")


async def test_empty_registry_result_is_404(client, registry_stub):
    registry_stub.queue(httpx.Response(200, json={"Results": []}))
    res = await client.post("/api/vehicle/vin", json={"vin": TEST_VIN})
    assert res.status_code == 404
    assert res.json()["message"] == "No vehicle data found for this VIN"


async def test_unusable_profile_is_404_and_not_stored(client, registry_stub, test_session_factory):
    registry_stub.queue(httpx.Response(200, json={"Results": registry_results(Make="N/A", Model="")}))
    res = await client.post("/api/vehicle/vin", json={"vin": TEST_VIN})
    assert res.status_code == 404
    async with test_session_factory() as db:
        assert await db.get(Vehicle, TEST_VIN) is None


async def test_registry_outage_is_502(client, registry_stub):
    registry_stub.queue(httpx.Response(503), httpx.Response(503), httpx.Response(503))
    res = await client.post("/api/vehicle/vin", json={"vin": TEST_VIN})
    assert res.status_code == 502
    assert res.json()["error"]["category"] == "external_api"
    assert len(registry_stub.requests) == 3
