"""
ChefIQ appliance and cooking-method registry.

Static capability data: which appliance family supports which method, the
keywords that point to a method, and the method's default parameters.
"""

from typing import Optional

from pydantic import BaseModel, Field

from .models import (
    ApplianceFamily,
    CookerMethod,
    FanSpeed,
    KeepWarm,
    MethodId,
    OvenMethod,
    PressureLevel,
    PressureRelease,
    ShadeLevel,
    TemperatureLevel,
    method_key,
)


class Appliance(BaseModel):
    """A ChefIQ device."""

    category_id: str
    name: str
    family: ApplianceFamily
    short_code: str
    supports_probe: bool = False
    product_url: str = "https://chefiq.com/products"


class CookingMethodPattern(BaseModel):
    """Registry entry tying a method to its appliance family and keywords."""

    method_id: MethodId
    family: ApplianceFamily
    name: str
    keywords: list[str]
    default_parameters: dict = Field(default_factory=dict)
    estimated_time_minutes: Optional[int] = None

    @property
    def key(self) -> str:
        return method_key(self.method_id)

    @property
    def default_time_seconds(self) -> int:
        if "cooking_time" in self.default_parameters:
            return self.default_parameters["cooking_time"]
        return (self.estimated_time_minutes or 10) * 60


APPLIANCES = [
    Appliance(
        category_id="c8ff3aef-3de6-4a74-bba6-03e943b2762c",
        name="iQ Cooker",
        family=ApplianceFamily.COOKER,
        short_code="SC",
        product_url="https://chefiq.com/products/iq-cooker",
    ),
    Appliance(
        category_id="a542fa25-5053-4946-8b77-e358467baa0f",
        name="iQ Sense",
        family=ApplianceFamily.SENSE,
        short_code="CQ60",
        supports_probe=True,
        product_url="https://chefiq.com/products/iq-sense",
    ),
    Appliance(
        category_id="4a3cd4f1-839b-4f45-80ea-08f594ff74c3",
        name="iQ MiniOven",
        family=ApplianceFamily.OVEN,
        short_code="SO",
        supports_probe=True,
        product_url="https://chefiq.com/products/iq-minioven",
    ),
]

LEGACY_APPLIANCE_IDS = {
    "rj40": "c8ff3aef-3de6-4a74-bba6-03e943b2762c",
    "cq60": "a542fa25-5053-4946-8b77-e358467baa0f",
    "cq50": "4a3cd4f1-839b-4f45-80ea-08f594ff74c3",
}

# ---------------------------------------------------------------------------
# Method patterns. Order matters: score ties go to the earlier entry.
# ---------------------------------------------------------------------------
COOKING_METHOD_PATTERNS = [
    # iQ Cooker (RJ40)
    CookingMethodPattern(
        method_id=CookerMethod.PRESSURE,
        family=ApplianceFamily.COOKER,
        name="Pressure Cook",
        keywords=["pressure cook", "instant pot", "pressure cooker", "quick cook", "high pressure"],
        default_parameters={
            "pres_level": PressureLevel.HIGH,
            "pres_release": PressureRelease.QUICK,
            "keep_warm": KeepWarm.ON,
            "delay_time": 0,
        },
        estimated_time_minutes=15,
    ),
    CookingMethodPattern(
        method_id=CookerMethod.SEAR_SAUTE,
        family=ApplianceFamily.COOKER,
        name="Sear/Sauté",
        keywords=[
            "sauté", "saute", "brown", "sear", "fry", "cook until golden",
            "cook over medium heat", "cook over high heat",
        ],
        default_parameters={
            "temp_level": TemperatureLevel.MEDIUM_LOW,
            "keep_warm": KeepWarm.OFF,
            "delay_time": 0,
        },
        estimated_time_minutes=10,
    ),
    CookingMethodPattern(
        method_id=CookerMethod.STEAM,
        family=ApplianceFamily.COOKER,
        name="Steam",
        keywords=["steam", "steamer", "steam basket", "steamed"],
        default_parameters={"keep_warm": KeepWarm.OFF, "delay_time": 0},
        estimated_time_minutes=15,
    ),
    CookingMethodPattern(
        method_id=CookerMethod.SLOW_COOK,
        family=ApplianceFamily.COOKER,
        name="Slow Cook",
        keywords=["slow cook", "slow cooker", "crock pot", "low and slow", "simmer"],
        default_parameters={
            "temp_level": TemperatureLevel.HIGH,
            "keep_warm": KeepWarm.ON,
            "delay_time": 0,
        },
        estimated_time_minutes=240,
    ),
    CookingMethodPattern(
        method_id=CookerMethod.SOUS_VIDE,
        family=ApplianceFamily.COOKER,
        name="Sous Vide",
        keywords=["sous vide", "water bath", "vacuum seal"],
        default_parameters={"delay_time": 0},
        estimated_time_minutes=120,
    ),
    # iQ MiniOven (CQ50)
    CookingMethodPattern(
        method_id=OvenMethod.BAKE,
        family=ApplianceFamily.OVEN,
        name="Bake",
        keywords=["bake", "baking", "oven", "baked", "preheat"],
        default_parameters={
            "cooking_time": 1800,
            "target_cavity_temp": 350,
            "fan_speed": FanSpeed.LOW,
        },
        estimated_time_minutes=30,
    ),
    CookingMethodPattern(
        method_id=OvenMethod.AIR_FRY,
        family=ApplianceFamily.OVEN,
        name="Air Fry",
        keywords=["air fry", "air fryer", "crispy", "crunchy", "air-fry"],
        default_parameters={
            "cooking_time": 900,
            "target_cavity_temp": 375,
            "fan_speed": FanSpeed.HIGH,
        },
        estimated_time_minutes=15,
    ),
    CookingMethodPattern(
        method_id=OvenMethod.ROAST,
        family=ApplianceFamily.OVEN,
        name="Roast",
        keywords=["roast", "roasted", "roasting"],
        default_parameters={
            "cooking_time": 2700,
            "target_cavity_temp": 400,
            "fan_speed": FanSpeed.LOW,
        },
        estimated_time_minutes=45,
    ),
    CookingMethodPattern(
        method_id=OvenMethod.BROIL,
        family=ApplianceFamily.OVEN,
        name="Broil",
        keywords=[
            "broil", "broiled", "broiling", "grill", "grilled", "char",
            "outdoor grill", "preheated grill", "barbecue", "bbq",
        ],
        default_parameters={"cooking_time": 600, "temp_level": TemperatureLevel.HIGH},
        estimated_time_minutes=10,
    ),
    CookingMethodPattern(
        method_id=OvenMethod.TOAST,
        family=ApplianceFamily.OVEN,
        name="Toast",
        keywords=["toast", "toasted", "toasting", "golden brown"],
        default_parameters={"cooking_time": 180, "shade_level": ShadeLevel.MEDIUM},
        estimated_time_minutes=3,
    ),
    CookingMethodPattern(
        method_id=OvenMethod.DEHYDRATE,
        family=ApplianceFamily.OVEN,
        name="Dehydrate",
        keywords=[
            "dehydrate", "dehydrating", "dehydrator", "make jerky", "beef jerky",
            "dried fruit", "drying fruit", "fruit leather",
        ],
        default_parameters={"cooking_time": 28800, "target_cavity_temp": 135},
        estimated_time_minutes=480,
    ),
]

_PATTERNS_BY_KEY = {pattern.key: pattern for pattern in COOKING_METHOD_PATTERNS}


def get_pattern(method_id: MethodId | str) -> CookingMethodPattern:
    """Look up a registry entry by method id (enum member or its string key)."""
    if isinstance(method_id, (CookerMethod, OvenMethod)):
        method_id = method_key(method_id)
    return _PATTERNS_BY_KEY[method_id]


def get_appliance_for_family(family: ApplianceFamily) -> Appliance | None:
    return next((a for a in APPLIANCES if a.family == family), None)


def get_appliance_by_id(category_id: str) -> Appliance | None:
    return next((a for a in APPLIANCES if a.category_id == category_id), None)


def get_appliance_by_legacy_id(legacy_id: str) -> Appliance | None:
    """Resolve an old short device id ("rj40", "cq60", "cq50")."""
    category_id = LEGACY_APPLIANCE_IDS.get(legacy_id.lower())
    return get_appliance_by_id(category_id) if category_id else None


def get_appliance_product_url(category_id: str) -> str:
    appliance = get_appliance_by_id(category_id)
    return appliance.product_url if appliance else "https://chefiq.com/products"
