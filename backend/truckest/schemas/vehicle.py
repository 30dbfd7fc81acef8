"""Vehicle Schemas — VIN lookup and manual vehicle upsert bodies."""

from pydantic import BaseModel, Field, field_validator


class VinLookupRequest(BaseModel):
    """VIN format is checked by core/vin_decoding.normalize_vin (400, not 422-style)."""
    vin: str | None = None


class VehicleUpsertRequest(BaseModel):
    vin: str = Field(min_length=5, max_length=17)
    vehicle_type: str | None = Field(None, max_length=100)
    make: str | None = Field(None, max_length=100)
    model: str | None = Field(None, max_length=100)
    year: int | None = Field(None, ge=1900, le=2100)
    weight_class: str | None = Field(None, max_length=200)
    owner: str | None = Field(None, max_length=200)
    notes: str | None = Field(None, max_length=5000)
    reference_image_path: str | None = Field(None, max_length=500)

    @field_validator("vin")
    @classmethod
    def normalize_vin(cls, v: str) -> str:
        v = v.strip().upper()
        if len(v) < 5:
            raise ValueError("vin must be at least 5 characters")
        return v
