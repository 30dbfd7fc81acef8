"""Resilient Vehicle Registry Client — wraps httpx.AsyncClient for NHTSA vPIC with retry and error mapping.

Invariants:
    - Transient errors (connection, timeout, 429, 5xx): max_retries retries with exponential backoff
    - Other 4xx: immediate failure, no retry
    - All failures mapped to VehicleRegistryError (core/errors.py)
    - Returns the raw "Results" list; interpretation lives in core/vin_decoding.py

Design Decisions:
    - Wrapper over raw client: isolates retry logic from the route
    - ±25% jitter on backoff
    - The httpx client can be injected (tests use httpx.MockTransport)
"""

import asyncio
import random
import logging

import httpx

from truckest.core.errors import ErrorContext, VehicleRegistryError

logger = logging.getLogger(__name__)

_RETRYABLE_STATUS = {429, 500, 502, 503, 504}


class ResilientVehicleRegistryClient:
    """Decodes VINs against the NHTSA vPIC API with retries."""

    def __init__(
        self,
        base_url: str,
        user_agent: str,
        timeout_seconds: float = 10.0,
        max_retries: int = 2,
        base_delay_ms: int = 250,
        max_delay_ms: int = 4_000,
        client: httpx.AsyncClient | None = None,
    ):
        self.client = client or httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout_seconds,
            headers={"User-Agent": user_agent},
        )
        self.max_retries = max_retries
        self.base_delay_ms = base_delay_ms
        self.max_delay_ms = max_delay_ms

    async def decode_vin(self, vin: str) -> list[dict]:
        """Fetch the flat [{Variable, Value, ...}] decode list for a VIN."""
        context = ErrorContext(vin=vin)
        for attempt in range(self.max_retries + 1):
            try:
                response = await self.client.get(
                    f"/vehicles/DecodeVin/{vin}", params={"format": "json"},
                )
            except httpx.TransportError as e:
                await self._handle_transient_error(e, attempt, context)
                continue

            if response.status_code in _RETRYABLE_STATUS:
                await self._handle_transient_error(
                    f"HTTP {response.status_code}", attempt, context,
                )
                continue
            if response.is_error:
                raise VehicleRegistryError(
                    f"HTTP {response.status_code}", "client_error", context=context,
                )

            try:
                payload = response.json()
            except ValueError as e:
                raise VehicleRegistryError(
                    f"Malformed registry response: {e}", "bad_payload", context=context,
                )
            logger.info(
                "Vehicle registry success",
                extra={"vin": vin, "attempt": attempt + 1},
            )
            return payload.get("Results") or []

        # Unreachable: the final attempt either returns or raises
        raise VehicleRegistryError("Retries exhausted", "connection_error", context=context)

    async def close(self) -> None:
        await self.client.aclose()

    async def _handle_transient_error(
        self, e: Exception | str, attempt: int, context: ErrorContext,
    ) -> None:
        """Sleep before the next attempt, or raise once retries are spent."""
        if attempt >= self.max_retries:
            raise VehicleRegistryError(
                f"Transient failure after {self.max_retries} retries: {e}",
                "connection_error",
                context=context,
            )
        delay = self._backoff(attempt)
        logger.warning(
            f"Vehicle registry transient error, retry after {delay}ms: {e}",
            extra={"vin": context.vin, "attempt": attempt + 1},
        )
        await asyncio.sleep(delay / 1000)

    def _backoff(self, attempt: int) -> int:
        """Exponential backoff with ±25% jitter."""
        delay = min(self.max_delay_ms, (2 ** attempt) * self.base_delay_ms)
        return int(delay * random.uniform(0.75, 1.25))  # nosec B311
