import logging
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from app.core.enums import FuelType

logger = logging.getLogger(__name__)

# First production automobile; anything outside this window is a caller bug.
MIN_VEHICLE_YEAR = 1886
MAX_VEHICLE_YEAR = 2100


class VehicleInfo(BaseModel):
    """Vehicle attributes consumed by the pricing rules.

    ``pickup_distance`` of ``0`` means the customer drops the vehicle off;
    ``None`` means no distance is known and the distance rule is skipped.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    year: int = Field(ge=MIN_VEHICLE_YEAR, le=MAX_VEHICLE_YEAR)
    fuel_type: Optional[FuelType] = Field(None, alias="fuelType")
    pickup_distance: Optional[float] = Field(None, ge=0, alias="pickupDistance")
    is_dropoff_complete: Optional[bool] = Field(None, alias="isDropoffComplete")

    has_engine: Optional[bool] = Field(None, alias="hasEngine")
    has_transmission: Optional[bool] = Field(None, alias="hasTransmission")
    has_catalyst: Optional[bool] = Field(None, alias="hasCatalyst")
    has_battery: Optional[bool] = Field(None, alias="hasBattery")
    has_four_wheels: Optional[bool] = Field(None, alias="hasFourWheels")
    is_other_complete: Optional[bool] = Field(None, alias="isOtherComplete")

    @field_validator("fuel_type", mode="before")
    @classmethod
    def unknown_fuel_type_to_none(cls, value):
        if value is None or isinstance(value, FuelType):
            return value
        try:
            return FuelType(str(value).strip().lower())
        except ValueError:
            logger.warning(f"Unknown fuel type {value!r}, no fuel adjustment will apply")
            return None
