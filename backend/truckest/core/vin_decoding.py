"""VIN Decoding — pure validation and registry-result shaping, no IO.

Invariants:
    - A valid VIN is exactly 17 chars from [A-HJ-NPR-Z0-9] (no I, O, Q)
    - Registry lookups ignore empty and "Not Applicable" values
    - Registry "Error Code" "0" means success; anything else is a rejection
    - A profile without make or model (or "N/A") is not a usable vehicle

Design Decisions:
    - Registry field names stay inside this module; the rest of the codebase
      only sees VehicleProfile attributes
    - Numeric fields parsed leniently (None on garbage), never raise
"""

import re
from dataclasses import dataclass, field
from typing import Any

from truckest.core.errors import InvalidVinError

VIN_LENGTH = 17
_VIN_PATTERN = re.compile(r"^[A-HJ-NPR-Z0-9]{17}$")
_IGNORED_VALUES = {"", "Not Applicable"}
_MISSING_MARKERS = {None, "", "N/A"}


@dataclass
class VehicleProfile:
    """Decoded vehicle attributes in our own vocabulary."""
    vin: str
    make: str | None = None
    model: str | None = None
    year: int | None = None
    vehicle_type: str | None = None
    body_class: str | None = None
    drive_type: str | None = None
    engine_model: str | None = None
    engine_cylinders: int | None = None
    engine_displacement_l: float | None = None
    fuel_type: str | None = None
    gvwr: str | None = None
    weight_class: str | None = None
    manufacturer: str | None = None
    plant: str | None = None
    series: str | None = None
    trim: str | None = None
    cab_type: str | None = None
    bed_length: str | None = None
    brake_system_type: str | None = None
    transmission_style: str | None = None
    attributes: dict[str, str] = field(default_factory=dict)

    @property
    def is_usable(self) -> bool:
        return (
            self.make not in _MISSING_MARKERS
            and self.model not in _MISSING_MARKERS
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "vin": self.vin,
            "make": self.make,
            "model": self.model,
            "year": self.year,
            "vehicle_type": self.vehicle_type,
            "body_class": self.body_class,
            "drive_type": self.drive_type,
            "engine_model": self.engine_model,
            "engine_cylinders": self.engine_cylinders,
            "engine_displacement_l": self.engine_displacement_l,
            "fuel_type": self.fuel_type,
            "gvwr": self.gvwr,
            "weight_class": self.weight_class,
            "manufacturer": self.manufacturer,
            "plant": self.plant,
            "series": self.series,
            "trim": self.trim,
            "cab_type": self.cab_type,
            "bed_length": self.bed_length,
            "brake_system_type": self.brake_system_type,
            "transmission_style": self.transmission_style,
            "attributes": dict(self.attributes),
        }


def normalize_vin(raw: str | None) -> str:
    """Strip, upper-case, and validate a VIN. Raises InvalidVinError."""
    if raw is None or not str(raw).strip():
        raise InvalidVinError("VIN is required")
    vin = str(raw).strip().upper()
    if len(vin) != VIN_LENGTH:
        raise InvalidVinError(f"VIN must be exactly {VIN_LENGTH} characters")
    if not _VIN_PATTERN.match(vin):
        raise InvalidVinError(
            "VIN may only contain letters and digits, excluding I, O and Q",
        )
    return vin


def build_lookup(results: list[dict] | None) -> dict[str, str]:
    """Collapse the registry's [{Variable, Value}] list into a dict."""
    lookup: dict[str, str] = {}
    for item in results or []:
        value = item.get("Value")
        variable = item.get("Variable")
        if variable is None or value is None:
            continue
        value = str(value).strip()
        if value in _IGNORED_VALUES:
            continue
        lookup[variable] = value
    return lookup


def find_registry_error(results: list[dict] | None) -> tuple[str, str] | None:
    """Return (error_code, error_text) if the registry rejected the VIN."""
    code = None
    text = None
    for item in results or []:
        if item.get("Variable") == "Error Code":
            code = str(item.get("Value") or "").strip()
        elif item.get("Variable") == "Error Text":
            text = item.get("Value")
    if code is None or code == "0":
        return None
    return code, text or "Vehicle registry error"


def profile_from_results(vin: str, results: list[dict] | None) -> VehicleProfile:
    """Map registry results onto a VehicleProfile."""
    data = build_lookup(results)
    plant_city = data.get("Plant City", "")
    plant_state = data.get("Plant State")
    plant = plant_city + (f", {plant_state}" if plant_state else "")
    return VehicleProfile(
        vin=vin,
        make=data.get("Make"),
        model=data.get("Model"),
        year=_parse_int(data.get("Model Year")),
        vehicle_type=data.get("Vehicle Type"),
        body_class=data.get("Body Class"),
        drive_type=data.get("Drive Type"),
        engine_model=data.get("Engine Model") or data.get("Engine Configuration"),
        engine_cylinders=_parse_int(data.get("Engine Number of Cylinders")),
        engine_displacement_l=_parse_float(data.get("Displacement (L)")),
        fuel_type=data.get("Fuel Type - Primary"),
        gvwr=data.get("Gross Vehicle Weight Rating"),
        weight_class=data.get("Gross Vehicle Weight Rating Class"),
        manufacturer=data.get("Manufacturer Name"),
        plant=plant or None,
        series=data.get("Series"),
        trim=data.get("Trim"),
        cab_type=data.get("Cab Type"),
        bed_length=data.get("Bed Length"),
        brake_system_type=data.get("Brake System Type"),
        transmission_style=data.get("Transmission Style"),
        attributes=data,
    )


def _parse_int(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(float(value))
    except (ValueError, OverflowError):
        return None


def _parse_float(value: str | None) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None
