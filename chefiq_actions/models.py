"""
Pydantic models for recipe text and the ChefIQ cooking actions inferred from it.

Covers:
- Device enums (fan speed, pressure, shade, cooker and oven methods)
- Per-method parameter records, keyed by method id
- CookingAction / AnalysisResult returned by the analyzer
"""

import uuid
from enum import Enum, IntEnum
from typing import ClassVar, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# ---------------------------------------------------------------------------
# Device enums
# ---------------------------------------------------------------------------
class ApplianceFamily(str, Enum):
    COOKER = "cooker"
    OVEN = "oven"
    SENSE = "sense"


class FanSpeed(IntEnum):
    OFF = 0
    LOW = 1
    MEDIUM = 2
    HIGH = 3


class TemperatureLevel(IntEnum):
    LOW = 0
    MEDIUM_LOW = 1
    MEDIUM_HIGH = 2
    HIGH = 3


class PressureLevel(IntEnum):
    LOW = 0
    HIGH = 1


class PressureRelease(IntEnum):
    QUICK = 0
    PULSE = 1
    NATURAL = 2


class KeepWarm(IntEnum):
    OFF = 0
    ON = 1


class ShadeLevel(IntEnum):
    LIGHT = 0
    MEDIUM_LIGHT = 1
    MEDIUM = 2
    MEDIUM_DARK = 3
    DARK = 4


class CookerMethod(IntEnum):
    """iQ Cooker (RJ40) cooking methods."""

    PRESSURE = 0
    SEAR_SAUTE = 1
    STEAM = 2
    SLOW_COOK = 3
    DEHYDRATE = 4
    SOUS_VIDE = 5


class OvenMethod(str, Enum):
    """iQ MiniOven (CQ50) cooking methods."""

    AIR_FRY = "METHOD_AIR_FRY"
    BAKE = "METHOD_BAKE"
    ROAST = "METHOD_ROAST"
    BROIL = "METHOD_BROIL"
    TOAST = "METHOD_TOAST"
    DEHYDRATE = "METHOD_DEHYDRATE"


MethodId = Union[CookerMethod, OvenMethod]

FAN_SPEED_NAMES = {
    FanSpeed.OFF: "Off",
    FanSpeed.LOW: "Low",
    FanSpeed.MEDIUM: "Medium",
    FanSpeed.HIGH: "High",
}

TEMPERATURE_LEVEL_NAMES = {
    TemperatureLevel.LOW: "Low",
    TemperatureLevel.MEDIUM_LOW: "Medium-Low",
    TemperatureLevel.MEDIUM_HIGH: "Medium-High",
    TemperatureLevel.HIGH: "High",
}

PRESSURE_LEVEL_NAMES = {
    PressureLevel.LOW: "Low Pressure",
    PressureLevel.HIGH: "High Pressure",
}

PRESSURE_RELEASE_NAMES = {
    PressureRelease.QUICK: "Quick Release",
    PressureRelease.PULSE: "Pulse Release",
    PressureRelease.NATURAL: "Natural Release",
}

SHADE_LEVEL_NAMES = {
    ShadeLevel.LIGHT: "Light",
    ShadeLevel.MEDIUM_LIGHT: "Medium-Light",
    ShadeLevel.MEDIUM: "Medium",
    ShadeLevel.MEDIUM_DARK: "Medium-Dark",
    ShadeLevel.DARK: "Dark",
}


def method_key(method_id: MethodId) -> str:
    """Return the string form of a method id as stored on a CookingAction.

    Args:
        method_id: A cooker or oven method.

    Returns:
        "0".."5" for cooker methods, "METHOD_*" for oven methods.
    """
    return str(method_id.value)


def _format_duration(seconds: int) -> str:
    minutes, secs = divmod(seconds, 60)
    hours, minutes = divmod(minutes, 60)
    parts = []
    if hours:
        parts.append(f"{hours} h")
    if minutes:
        parts.append(f"{minutes} min")
    if secs or not parts:
        parts.append(f"{secs} sec")
    return " ".join(parts)


# ---------------------------------------------------------------------------
# Recipe input
# ---------------------------------------------------------------------------
class RecipeStep(BaseModel):
    """A single instruction step."""

    text: str


class RecipeText(BaseModel):
    """Recipe text handed to the analyzer."""

    title: str = ""
    description: str = ""
    steps: list[RecipeStep] = []
    cook_time_minutes: Optional[int] = Field(
        None, description="Author-declared cook time, used as a fallback only"
    )

    @field_validator("steps", mode="before")
    @classmethod
    def _coerce_steps(cls, value):
        if value is None:
            return []
        return [{"text": step} if isinstance(step, str) else step for step in value]

    @property
    def step_texts(self) -> list[str]:
        return [step.text for step in self.steps]


# ---------------------------------------------------------------------------
# Extraction results
# ---------------------------------------------------------------------------
class ExtractedTemperature(BaseModel):
    """A temperature found in one instruction step, normalized to Fahrenheit."""

    temperature: int = Field(..., description="Temperature in °F")
    step_index: int
    is_increase: bool = False


class ExtractedDuration(BaseModel):
    """A duration found in one instruction step."""

    minutes: int
    step_index: int
    is_additional: bool = False


class MethodExtraction(BaseModel):
    """Partial parameter set pulled from the steps by a per-method extractor.

    Durations are in minutes here; conversion to seconds happens when the
    action is assembled.
    """

    temperature: Optional[int] = None
    cooking_time: Optional[int] = None
    fan_speed: Optional[FanSpeed] = None
    temp_level: Optional[TemperatureLevel] = None
    pressure_level: Optional[PressureLevel] = None
    pressure_release: Optional[PressureRelease] = None
    shade_level: Optional[ShadeLevel] = None
    is_frozen: bool = False
    is_bagel: bool = False


# ---------------------------------------------------------------------------
# Method parameter records
# ---------------------------------------------------------------------------
class MethodParameters(BaseModel):
    """Base record for the parameters of one cooking method."""

    model_config = ConfigDict(frozen=True)

    method_id: ClassVar[MethodId]

    cooking_time: int = Field(..., ge=0, description="Duration in seconds")

    def details(self) -> list[str]:
        """Human-readable parameter fragments, most important first."""
        return [_format_duration(self.cooking_time)]


class CookerParameters(MethodParameters):
    delay_time: int = 0


class PressureCookParameters(CookerParameters):
    method_id: ClassVar[MethodId] = CookerMethod.PRESSURE

    pres_level: PressureLevel = PressureLevel.HIGH
    pres_release: PressureRelease = PressureRelease.QUICK
    keep_warm: KeepWarm = KeepWarm.ON

    def details(self) -> list[str]:
        return super().details() + [
            PRESSURE_LEVEL_NAMES[self.pres_level],
            PRESSURE_RELEASE_NAMES[self.pres_release],
        ]


class SearSauteParameters(CookerParameters):
    method_id: ClassVar[MethodId] = CookerMethod.SEAR_SAUTE

    temp_level: TemperatureLevel = TemperatureLevel.MEDIUM_LOW
    keep_warm: KeepWarm = KeepWarm.OFF

    def details(self) -> list[str]:
        return super().details() + [TEMPERATURE_LEVEL_NAMES[self.temp_level]]


class SteamParameters(CookerParameters):
    method_id: ClassVar[MethodId] = CookerMethod.STEAM

    keep_warm: KeepWarm = KeepWarm.OFF


class SlowCookParameters(CookerParameters):
    method_id: ClassVar[MethodId] = CookerMethod.SLOW_COOK

    temp_level: TemperatureLevel = TemperatureLevel.HIGH
    keep_warm: KeepWarm = KeepWarm.ON

    def details(self) -> list[str]:
        return super().details() + [TEMPERATURE_LEVEL_NAMES[self.temp_level]]


class SousVideParameters(CookerParameters):
    method_id: ClassVar[MethodId] = CookerMethod.SOUS_VIDE

    cooking_temp: Optional[int] = Field(None, description="Water bath temperature in °F")

    def details(self) -> list[str]:
        details = super().details()
        if self.cooking_temp:
            details.insert(0, f"{self.cooking_temp}°F")
        return details


class OvenParameters(MethodParameters):
    """Oven records may carry probe targets."""

    target_probe_temp: Optional[int] = Field(None, description="Probe target in °F")
    remove_probe_temp: Optional[int] = Field(
        None, description="Probe temperature to pull the food at (carryover)"
    )

    @model_validator(mode="after")
    def _check_remove_temp(self):
        if self.remove_probe_temp is not None:
            if self.target_probe_temp is None:
                raise ValueError("remove_probe_temp requires target_probe_temp")
            if self.remove_probe_temp >= self.target_probe_temp:
                raise ValueError("remove_probe_temp must be below target_probe_temp")
        return self

    def details(self) -> list[str]:
        details = super().details()
        if self.target_probe_temp:
            probe = f"probe {self.target_probe_temp}°F"
            if self.remove_probe_temp:
                probe += f" (remove at {self.remove_probe_temp}°F)"
            details.append(probe)
        return details


class _CavityParameters(OvenParameters):
    target_cavity_temp: int = Field(350, description="Cavity temperature in °F")
    fan_speed: FanSpeed = FanSpeed.LOW

    def details(self) -> list[str]:
        return [f"{self.target_cavity_temp}°F"] + super().details() + [
            f"fan {FAN_SPEED_NAMES[self.fan_speed]}"
        ]


class BakeParameters(_CavityParameters):
    method_id: ClassVar[MethodId] = OvenMethod.BAKE


class AirFryParameters(_CavityParameters):
    method_id: ClassVar[MethodId] = OvenMethod.AIR_FRY

    target_cavity_temp: int = 375
    fan_speed: FanSpeed = FanSpeed.HIGH


class RoastParameters(_CavityParameters):
    method_id: ClassVar[MethodId] = OvenMethod.ROAST

    target_cavity_temp: int = 400


class DehydrateParameters(_CavityParameters):
    method_id: ClassVar[MethodId] = OvenMethod.DEHYDRATE

    target_cavity_temp: int = 135


class BroilParameters(OvenParameters):
    method_id: ClassVar[MethodId] = OvenMethod.BROIL

    temp_level: TemperatureLevel = TemperatureLevel.HIGH

    def details(self) -> list[str]:
        return [TEMPERATURE_LEVEL_NAMES[self.temp_level]] + super().details()


class ToastParameters(OvenParameters):
    method_id: ClassVar[MethodId] = OvenMethod.TOAST

    shade_level: ShadeLevel = ShadeLevel.MEDIUM
    is_frozen: bool = False
    is_bagel: bool = False

    def details(self) -> list[str]:
        details = [SHADE_LEVEL_NAMES[self.shade_level]] + super().details()
        if self.is_frozen:
            details.append("frozen")
        if self.is_bagel:
            details.append("bagel")
        return details


AnyMethodParameters = Union[
    PressureCookParameters,
    SearSauteParameters,
    SteamParameters,
    SlowCookParameters,
    SousVideParameters,
    BakeParameters,
    AirFryParameters,
    RoastParameters,
    BroilParameters,
    ToastParameters,
    DehydrateParameters,
]

PARAMETER_MODELS: dict[str, type[MethodParameters]] = {
    method_key(model.method_id): model
    for model in AnyMethodParameters.__args__
}


def build_parameters(method_id: MethodId, values: dict) -> MethodParameters:
    """Validate a raw parameter dict into the record type of a method.

    Args:
        method_id: The cooker or oven method.
        values: Raw parameters (unknown keys are ignored).

    Returns:
        The typed parameter record.
    """
    model = PARAMETER_MODELS[method_key(method_id)]
    known = {k: v for k, v in values.items() if k in model.model_fields}
    return model(**known)


# ---------------------------------------------------------------------------
# Analyzer output
# ---------------------------------------------------------------------------
class CookingAction(BaseModel):
    """One appliance action suggested for a recipe."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    appliance_id: str
    method_id: str
    method_name: str
    parameters: AnyMethodParameters
    step_index: Optional[int] = Field(None, description="Instruction step this action belongs to")

    def to_text(self) -> str:
        """Format the action as a one-line summary.

        Returns:
            A string like "Bake: 350°F/25 min/fan Low".
        """
        return f"{self.method_name}: " + "/".join(self.parameters.details())


class AnalysisResult(BaseModel):
    """Outcome of analysing one recipe."""

    model_config = ConfigDict(frozen=True)

    suggested_appliance_id: Optional[str] = None
    suggested_actions: list[CookingAction] = []
    use_probe: bool = False
    probe_temp: Optional[int] = None
    confidence: float = Field(0.0, ge=0.0, le=1.0)
    reasoning: list[str] = []

    @classmethod
    def empty(cls, reason: str) -> "AnalysisResult":
        return cls(suggested_actions=[], confidence=0.0, reasoning=[reason])

    def to_summary(self) -> str:
        """Format the result as readable text for the MCP tools."""
        if not self.suggested_actions:
            reason = self.reasoning[-1] if self.reasoning else "No suggestion."
            return f"No ChefIQ cooking action suggested. {reason}"

        lines = [f"Confidence: {self.confidence:.0%}"]
        for action in self.suggested_actions:
            step = f"step {action.step_index + 1}" if action.step_index is not None else "recipe"
            lines.append(f"  • [{step}] {action.to_text()}")
        if self.use_probe and self.probe_temp:
            lines.append(f"Use the probe: target {self.probe_temp}°F")
        if self.reasoning:
            lines.append("Why:")
            lines.extend(f"  - {r}" for r in self.reasoning)
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Web import
# ---------------------------------------------------------------------------
class ScrapedRecipe(BaseModel):
    """Raw recipe extracted from a website."""

    title: str
    description: str = ""
    ingredients: list[str] = []
    instructions: list[str] = []
    total_time: Optional[int] = Field(None, description="Total time in minutes")
    prep_time: Optional[int] = Field(None, description="Prep time in minutes")
    cook_time: Optional[int] = Field(None, description="Cook time in minutes")
    servings: Optional[int] = None
    image_url: Optional[str] = None
    source_url: str = ""

    def to_recipe_text(self) -> RecipeText:
        return RecipeText(
            title=self.title,
            description=self.description,
            steps=self.instructions,
            cook_time_minutes=self.cook_time,
        )
