"""Tenant pricing configuration and pricing result schemas.

Configuration keys are stored and exchanged in camelCase (``ageBonuses``,
``pickup0to20``) so tenant records written by the admin screens load as-is.
Stored categories are checked for shape only; the value ranges the admin
screens enforce apply to updates.
"""
from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field
from app.core.enums import ConfigSource, PricingCategory


class _Category(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")


class AgeBonuses(_Category):
    age0to5: float
    age5to10: float
    age10to15: float
    age15to20: float
    age20plus: float


class OldCarDeduction(_Category):
    before1990: float


class DistanceAdjustments(_Category):
    dropoff_complete: float = Field(alias="dropoffComplete")
    dropoff_incomplete: float = Field(alias="dropoffIncomplete")
    pickup0to20: float
    pickup20to50: float
    pickup50to75: float
    pickup75to100: float
    pickup100plus: float


class PartsBonuses(_Category):
    engine_transmission_catalyst: float = Field(alias="engineTransmissionCatalyst")
    battery_wheels_other: float = Field(alias="batteryWheelsOther")


class FuelAdjustments(_Category):
    gasoline: float
    ethanol: float
    electric: float
    other: float


class AgeBonusesUpdate(AgeBonuses):
    age0to5: float = Field(ge=0, le=20000)
    age5to10: float = Field(ge=0, le=20000)
    age10to15: float = Field(ge=0, le=20000)
    age15to20: float = Field(ge=0, le=20000)
    age20plus: float = Field(ge=0, le=20000)


class OldCarDeductionUpdate(OldCarDeduction):
    before1990: float = Field(ge=-5000, le=0)


class DistanceAdjustmentsUpdate(DistanceAdjustments):
    dropoff_complete: float = Field(ge=0, le=5000, alias="dropoffComplete")
    dropoff_incomplete: float = Field(ge=0, le=5000, alias="dropoffIncomplete")
    pickup0to20: float = Field(ge=-5000, le=0)
    pickup20to50: float = Field(ge=-5000, le=0)
    pickup50to75: float = Field(ge=-5000, le=0)
    pickup75to100: float = Field(ge=-5000, le=0)
    pickup100plus: float = Field(ge=-5000, le=0)


class PartsBonusesUpdate(PartsBonuses):
    engine_transmission_catalyst: float = Field(ge=0, le=5000, alias="engineTransmissionCatalyst")
    battery_wheels_other: float = Field(ge=0, le=5000, alias="batteryWheelsOther")


class FuelAdjustmentsUpdate(FuelAdjustments):
    # Only "other" is adjustable; the named fuels are fixed at zero.
    gasoline: float = Field(ge=0, le=0)
    ethanol: float = Field(ge=0, le=0)
    electric: float = Field(ge=0, le=0)
    other: float = Field(ge=-1000, le=0)


class PricingConfiguration(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    age_bonuses: AgeBonuses = Field(alias="ageBonuses")
    old_car_deduction: OldCarDeduction = Field(alias="oldCarDeduction")
    distance_adjustments: DistanceAdjustments = Field(alias="distanceAdjustments")
    parts_bonuses: PartsBonuses = Field(alias="partsBonuses")
    fuel_adjustments: FuelAdjustments = Field(alias="fuelAdjustments")


class PricingConfigurationUpdate(BaseModel):
    """Partial tenant configuration within the admin value ranges.

    Supplied categories replace the stored ones; omitted categories are left
    as they are.
    """
    model_config = ConfigDict(populate_by_name=True)

    age_bonuses: Optional[AgeBonusesUpdate] = Field(None, alias="ageBonuses")
    old_car_deduction: Optional[OldCarDeductionUpdate] = Field(None, alias="oldCarDeduction")
    distance_adjustments: Optional[DistanceAdjustmentsUpdate] = Field(None, alias="distanceAdjustments")
    parts_bonuses: Optional[PartsBonusesUpdate] = Field(None, alias="partsBonuses")
    fuel_adjustments: Optional[FuelAdjustmentsUpdate] = Field(None, alias="fuelAdjustments")

    def to_record(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class PricingConfigOut(BaseModel):
    tenant_id: str
    source: ConfigSource
    config: PricingConfiguration


class BreakdownItem(BaseModel):
    category: PricingCategory
    amount: float
    description: str


class PricingResult(BaseModel):
    base_price: float
    age_bonus: float = 0.0
    old_car_deduction: float = 0.0
    distance_adjustment: float = 0.0
    parts_bonus: float = 0.0
    fuel_adjustment: float = 0.0
    total_price: float
    breakdown: List[BreakdownItem] = Field(default_factory=list)
