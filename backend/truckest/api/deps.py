"""API Dependencies — caller identity and shared infrastructure for route handlers.

Invariants:
    - Caller identity is the X-User-Id header (a user UUID); malformed ids are
      treated exactly like a missing header
    - Registry client is a process-wide singleton (one httpx connection pool)
    - Storage and estimator are built from settings; tests override all three
      through app.dependency_overrides
"""

import logging
from uuid import UUID

from fastapi import Header

from truckest.config import get_settings
from truckest.core.errors import AuthenticationError
from truckest.core.repair_estimator import SimulatedRepairEstimator
from truckest.infrastructure.image_storage import LocalImageStorage
from truckest.infrastructure.vehicle_registry import ResilientVehicleRegistryClient

logger = logging.getLogger(__name__)

_registry_client: ResilientVehicleRegistryClient | None = None


def _parse_user_id(raw: str | None) -> UUID | None:
    if not raw or not raw.strip():
        return None
    try:
        return UUID(raw.strip())
    except ValueError:
        logger.warning(f"Ignoring malformed X-User-Id header: {raw!r}")
        return None


async def get_optional_user_id(
    x_user_id: str | None = Header(None, alias="X-User-Id"),
) -> UUID | None:
    return _parse_user_id(x_user_id)


async def get_current_user_id(
    x_user_id: str | None = Header(None, alias="X-User-Id"),
) -> UUID:
    """Require an identified caller. Raises AuthenticationError (401)."""
    user_id = _parse_user_id(x_user_id)
    if user_id is None:
        raise AuthenticationError()
    return user_id


def get_vehicle_registry() -> ResilientVehicleRegistryClient:
    """Singleton registry client, reused across requests."""
    global _registry_client
    if _registry_client is None:
        settings = get_settings()
        _registry_client = ResilientVehicleRegistryClient(
            base_url=settings.nhtsa_base_url,
            user_agent=settings.nhtsa_user_agent,
            timeout_seconds=settings.nhtsa_timeout_seconds,
            max_retries=settings.nhtsa_max_retries,
            base_delay_ms=settings.nhtsa_base_delay_ms,
            max_delay_ms=settings.nhtsa_max_delay_ms,
        )
    return _registry_client


async def close_vehicle_registry() -> None:
    global _registry_client
    if _registry_client is not None:
        await _registry_client.close()
        _registry_client = None


def get_image_storage() -> LocalImageStorage:
    settings = get_settings()
    return LocalImageStorage(settings.upload_dir, settings.max_upload_bytes)


def get_estimator() -> SimulatedRepairEstimator:
    return SimulatedRepairEstimator(get_settings().labor_rate_per_hour)
