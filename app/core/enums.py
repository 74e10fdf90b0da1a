from enum import Enum


class FuelType(str, Enum):
    GASOLINE = "gasoline"
    ETHANOL = "ethanol"
    ELECTRIC = "electric"
    OTHER = "other"

    def __str__(self):
        return self.value


class PricingCategory(str, Enum):
    AGE_BONUS = "Åldersbonus"
    OLD_CAR_DEDUCTION = "Avdrag"
    DISTANCE = "Avstånd"
    PARTS_BONUS = "Delbonus"
    FUEL = "Bränsle"

    def __str__(self):
        return self.value


class ConfigSource(str, Enum):
    TENANT = "tenant"
    DEFAULT = "default"

    def __str__(self):
        return self.value
