"""Vehicle scrap pricing rules.

A quote is the caller's base price plus five independent adjustments,
evaluated in a fixed order: age bonus, old-car deduction, distance,
parts bonus, fuel. Every adjustment that applies is itemized in the
breakdown; lines whose amount resolves to zero are dropped at the end.
"""
import logging
from datetime import date
from typing import Callable, Optional, Union

from app.core.enums import FuelType, PricingCategory
from app.core.metrics import quote_calculations
from app.schemas.pricing import BreakdownItem, PricingConfiguration, PricingResult
from app.schemas.vehicle import VehicleInfo
from app.services.pricing_config import ConfigFetcher, PricingConfigLoader

logger = logging.getLogger(__name__)

# (exclusive upper age, ageBonuses key, description)
AGE_BRACKETS = [
    (5, "age0to5", "0-4,99 år"),
    (10, "age5to10", "5-9,99 år"),
    (15, "age10to15", "10-14,99 år"),
    (20, "age15to20", "15-19,99 år"),
]
AGE_BRACKET_OLDEST = ("age20plus", "20+ år")

OLD_CAR_CUTOFF_YEAR = 1990

# (inclusive upper km, distanceAdjustments key, description)
PICKUP_BANDS = [
    (20, "pickup0to20", "Hämtning 0-20km"),
    (50, "pickup20to50", "Hämtning 20-50km"),
    (75, "pickup50to75", "Hämtning 50-75km"),
    (100, "pickup75to100", "Hämtning 75-100km"),
]
PICKUP_BAND_FARTHEST = ("pickup100plus", "Hämtning 100+km")

FUEL_DESCRIPTIONS = {
    FuelType.GASOLINE: "Bensin",
    FuelType.ETHANOL: "Etanol",
    FuelType.ELECTRIC: "El",
    FuelType.OTHER: "Annat",
}

RuleOutcome = tuple[float, list[BreakdownItem]]


def _item(category: PricingCategory, amount: float, description: str) -> BreakdownItem:
    return BreakdownItem(category=category, amount=amount, description=description)


def evaluate_age_bonus(vehicle: VehicleInfo, config: PricingConfiguration, current_year: int) -> RuleOutcome:
    age = current_year - vehicle.year

    key, description = AGE_BRACKET_OLDEST
    for upper, bracket_key, bracket_description in AGE_BRACKETS:
        if age < upper:
            key, description = bracket_key, bracket_description
            break

    amount = getattr(config.age_bonuses, key)
    return amount, [_item(PricingCategory.AGE_BONUS, amount, description)]


def evaluate_old_car_deduction(vehicle: VehicleInfo, config: PricingConfiguration, current_year: int) -> RuleOutcome:
    if vehicle.year >= OLD_CAR_CUTOFF_YEAR:
        return 0.0, []

    amount = config.old_car_deduction.before1990
    return amount, [_item(PricingCategory.OLD_CAR_DEDUCTION, amount, "Före 1990")]


def evaluate_distance_adjustment(vehicle: VehicleInfo, config: PricingConfiguration, current_year: int) -> RuleOutcome:
    distance = vehicle.pickup_distance
    adjustments = config.distance_adjustments

    # Unknown distance skips the rule; drop-off must be sent as 0.
    if distance is None:
        return 0.0, []

    if distance == 0:
        if vehicle.is_dropoff_complete:
            amount, description = adjustments.dropoff_complete, "Avlämning (komplett)"
        else:
            amount, description = adjustments.dropoff_incomplete, "Avlämning (ofullständig)"
        return amount, [_item(PricingCategory.DISTANCE, amount, description)]

    key, description = PICKUP_BAND_FARTHEST
    for upper, band_key, band_description in PICKUP_BANDS:
        if distance <= upper:
            key, description = band_key, band_description
            break

    amount = getattr(adjustments, key)
    return amount, [_item(PricingCategory.DISTANCE, amount, description)]


def evaluate_parts_bonus(vehicle: VehicleInfo, config: PricingConfiguration, current_year: int) -> RuleOutcome:
    bonuses = config.parts_bonuses
    total = 0.0
    items = []

    if vehicle.has_engine or vehicle.has_transmission or vehicle.has_catalyst:
        total += bonuses.engine_transmission_catalyst
        items.append(_item(
            PricingCategory.PARTS_BONUS,
            bonuses.engine_transmission_catalyst,
            "Motor/Växellåda/Katalysator",
        ))

    if vehicle.has_battery or vehicle.has_four_wheels or vehicle.is_other_complete:
        total += bonuses.battery_wheels_other
        items.append(_item(
            PricingCategory.PARTS_BONUS,
            bonuses.battery_wheels_other,
            "Batteri/Hjul/Övrigt",
        ))

    return total, items


def evaluate_fuel_adjustment(vehicle: VehicleInfo, config: PricingConfiguration, current_year: int) -> RuleOutcome:
    if vehicle.fuel_type is None:
        return 0.0, []

    amount = getattr(config.fuel_adjustments, vehicle.fuel_type.value)
    return amount, [_item(PricingCategory.FUEL, amount, FUEL_DESCRIPTIONS[vehicle.fuel_type])]


PRICING_RULES: list[tuple[str, Callable[[VehicleInfo, PricingConfiguration, int], RuleOutcome]]] = [
    ("age_bonus", evaluate_age_bonus),
    ("old_car_deduction", evaluate_old_car_deduction),
    ("distance_adjustment", evaluate_distance_adjustment),
    ("parts_bonus", evaluate_parts_bonus),
    ("fuel_adjustment", evaluate_fuel_adjustment),
]


def apply_pricing_rules(
    vehicle: VehicleInfo,
    config: PricingConfiguration,
    base_price: float = 0.0,
    current_year: Optional[int] = None,
) -> PricingResult:
    if current_year is None:
        current_year = date.today().year

    components = {}
    breakdown = []
    for component, evaluate in PRICING_RULES:
        amount, items = evaluate(vehicle, config, current_year)
        components[component] = amount
        breakdown.extend(items)

    return PricingResult(
        base_price=base_price,
        total_price=base_price + sum(components.values()),
        breakdown=[item for item in breakdown if item.amount != 0],
        **components,
    )


class VehiclePricingCalculator:
    """Prices vehicles for one tenant.

    The tenant's configuration is loaded on the first calculation and reused
    for the lifetime of the calculator; call ``loader.refresh()`` to pick up
    changes.
    """

    def __init__(
        self,
        tenant_id: Union[str, int],
        fetcher: Optional[ConfigFetcher] = None,
        current_year: Optional[int] = None,
        loader: Optional[PricingConfigLoader] = None,
    ):
        self.loader = loader or PricingConfigLoader(tenant_id, fetcher=fetcher)
        self.tenant_id = self.loader.tenant_id
        self.current_year = current_year

    async def calculate_price(self, vehicle: VehicleInfo, base_price: float = 0.0) -> PricingResult:
        config = await self.loader.get()
        result = apply_pricing_rules(vehicle, config, base_price, self.current_year)
        quote_calculations.inc()
        logger.debug(
            f"Priced {vehicle.year} vehicle for tenant {self.tenant_id}: "
            f"{result.total_price} ({len(result.breakdown)} adjustments)"
        )
        return result

    @classmethod
    async def get_quick_price(
        cls,
        tenant_id: Union[str, int],
        vehicle: VehicleInfo,
        base_price: float = 0.0,
        fetcher: Optional[ConfigFetcher] = None,
    ) -> float:
        result = await cls(tenant_id, fetcher=fetcher).calculate_price(vehicle, base_price)
        return result.total_price

    @classmethod
    async def get_price_breakdown(
        cls,
        tenant_id: Union[str, int],
        vehicle: VehicleInfo,
        base_price: float = 0.0,
        fetcher: Optional[ConfigFetcher] = None,
    ) -> PricingResult:
        return await cls(tenant_id, fetcher=fetcher).calculate_price(vehicle, base_price)
