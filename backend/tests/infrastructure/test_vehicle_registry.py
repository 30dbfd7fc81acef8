"""Resilient Vehicle Registry Client — verifies retry, error mapping and request shape.

Tests:
    - Request: GET /vehicles/DecodeVin/{vin}?format=json with our User-Agent
    - 5xx / 429 / transport errors retried up to max_retries, then 502-mapped
    - Other 4xx fail immediately without retry
    - Malformed JSON -> bad_payload
"""

import httpx
import pytest

from truckest.core.errors import VehicleRegistryError
from truckest.infrastructure.vehicle_registry import ResilientVehicleRegistryClient

VIN = "1FUJGLDR5CLBP8834"


def _client(handler, max_retries=2) -> ResilientVehicleRegistryClient:
    return ResilientVehicleRegistryClient(
        base_url="https://vpic.test/api",
        user_agent="truckest-tests",
        max_retries=max_retries,
        base_delay_ms=0,
        client=httpx.AsyncClient(
            transport=httpx.MockTransport(handler),
            base_url="https://vpic.test/api",
            headers={"User-Agent": "truckest-tests"},
        ),
    )


async def test_decode_vin_returns_results_list():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"Results": [{"Variable": "Make", "Value": "MACK"}]})

    client = _client(handler)
    results = await client.decode_vin(VIN)
    await client.close()

    assert results == [{"Variable": "Make", "Value": "MACK"}]
    assert seen[0].url.path == f"/api/vehicles/DecodeVin/{VIN}"
    assert seen[0].url.params["format"] == "json"
    assert seen[0].headers["User-Agent"] == "truckest-tests"


async def test_missing_results_key_is_empty_list():
    client = _client(lambda request: httpx.Response(200, json={"Count": 0}))
    assert await client.decode_vin(VIN) == []
    await client.close()


async def test_retries_transient_status_then_succeeds():
    responses = [httpx.Response(503), httpx.Response(429), httpx.Response(200, json={"Results": []})]
    calls = []

    def handler(request):
        calls.append(request)
        return responses.pop(0)

    client = _client(handler, max_retries=2)
    assert await client.decode_vin(VIN) == []
    assert len(calls) == 3
    await client.close()


async def test_gives_up_after_max_retries():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(500)

    client = _client(handler, max_retries=1)
    with pytest.raises(VehicleRegistryError) as exc_info:
        await client.decode_vin(VIN)
    assert exc_info.value.error_type == "connection_error"
    assert exc_info.value.http_status == 502
    assert len(calls) == 2
    await client.close()


async def test_transport_errors_are_retried():
    calls = []

    def handler(request):
        calls.append(request)
        raise httpx.ConnectError("boom", request=request)

    client = _client(handler, max_retries=2)
    with pytest.raises(VehicleRegistryError):
        await client.decode_vin(VIN)
    assert len(calls) == 3
    await client.close()


async def test_client_errors_fail_fast():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(404)

    client = _client(handler)
    with pytest.raises(VehicleRegistryError) as exc_info:
        await client.decode_vin(VIN)
    assert exc_info.value.error_type == "client_error"
    assert len(calls) == 1
    await client.close()


async def test_malformed_json_is_bad_payload():
    client = _client(lambda request: httpx.Response(200, content=b"<html>"))
    with pytest.raises(VehicleRegistryError) as exc_info:
        await client.decode_vin(VIN)
    assert exc_info.value.error_type == "bad_payload"
    await client.close()


def test_backoff_is_capped():
    client = ResilientVehicleRegistryClient(
        base_url="https://vpic.test/api", user_agent="t",
        base_delay_ms=1000, max_delay_ms=2000,
    )
    assert client._backoff(10) <= 2500
    assert client._backoff(0) >= 750
