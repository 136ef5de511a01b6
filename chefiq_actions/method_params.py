"""
Per-method parameter extractors.

Each extractor reads the instruction steps for one cooking method and returns
a MethodExtraction holding whatever it could find. Only the extractor of the
method the classifier picked is ever run.
"""

import logging
import re
from typing import Callable, Optional

from . import constants as c
from .durations import duration_pattern, first_duration
from .models import (
    FAN_SPEED_NAMES,
    PRESSURE_LEVEL_NAMES,
    PRESSURE_RELEASE_NAMES,
    SHADE_LEVEL_NAMES,
    TEMPERATURE_LEVEL_NAMES,
    CookerMethod,
    FanSpeed,
    MethodExtraction,
    OvenMethod,
    PressureLevel,
    PressureRelease,
    ShadeLevel,
    TemperatureLevel,
    method_key,
)
from .temperature import in_window

_LOGGER = logging.getLogger(__name__)

_DEGREES_F = r"(\d{2,3})\s*(?:°\s*f|degrees\s*f?)"


def _temperature_pattern(anchor: str) -> re.Pattern:
    return re.compile(anchor + r".*?(?:at\s+)?" + _DEGREES_F, re.IGNORECASE)


def first_temperature(
    steps: list[str], patterns: list[re.Pattern], window: tuple[int, int]
) -> Optional[int]:
    """First °F value inside a window, scanning steps then patterns in order."""
    for step in steps:
        for pattern in patterns:
            for match in pattern.finditer(step):
                value = int(match.group(1))
                if in_window(value, window):
                    return value
    return None


def _has_any(text: str, cues) -> bool:
    return any(cue in text for cue in cues)


def _joined(steps: list[str]) -> str:
    return " ".join(steps).lower()


# ---------------------------------------------------------------------------
# iQ MiniOven
# ---------------------------------------------------------------------------
_AIR_FRY_TEMPS = [
    _temperature_pattern(r"air\s+fry"),
    _temperature_pattern(r"air\s+fryer"),
    _temperature_pattern(r"crispy"),
]
_AIR_FRY_TIMES = [
    duration_pattern(r"air\s+fry"),
    duration_pattern(r"air\s+fryer"),
    duration_pattern(r"crispy"),
]


def extract_air_frying_params(steps: list[str]) -> MethodExtraction:
    return MethodExtraction(
        temperature=first_temperature(steps, _AIR_FRY_TEMPS, c.AIR_FRY_TEMP_F),
        cooking_time=first_duration(steps, _AIR_FRY_TIMES, c.AIR_FRY_MINUTES),
        fan_speed=FanSpeed.HIGH,
    )


_ROAST_TEMPS = [
    _temperature_pattern(r"roast"),
    _temperature_pattern(r"roasting"),
    _temperature_pattern(r"oven.*?roast"),
]
_ROAST_TIMES = [
    duration_pattern(r"roast"),
    duration_pattern(r"roasting"),
    duration_pattern(r"oven.*?roast"),
]


def extract_roasting_params(steps: list[str]) -> MethodExtraction:
    return MethodExtraction(
        temperature=first_temperature(steps, _ROAST_TEMPS, c.ROAST_TEMP_F),
        cooking_time=first_duration(steps, _ROAST_TIMES, c.ROAST_MINUTES),
        fan_speed=FanSpeed.MEDIUM,
    )


_BROIL_TIMES = [
    duration_pattern(r"broil"),
    duration_pattern(r"broiling"),
    duration_pattern(r"broiler"),
]
_LOW_BROIL_CUES = ("low broil", "broil on low", "low heat broil")


def extract_broiling_params(steps: list[str]) -> MethodExtraction:
    """Broil has discrete heat levels, so no degrees are read."""
    low = _has_any(_joined(steps), _LOW_BROIL_CUES)
    return MethodExtraction(
        temp_level=TemperatureLevel.LOW if low else TemperatureLevel.HIGH,
        cooking_time=first_duration(steps, _BROIL_TIMES, c.BROIL_MINUTES),
    )


_TOAST_TIMES = [
    duration_pattern(r"toast"),
    duration_pattern(r"toasting"),
    duration_pattern(r"golden\s+brown"),
]


def _shade_level(text: str) -> ShadeLevel:
    # Two-word shades first so "medium dark" is not read as plain "dark"
    if "medium light" in text:
        return ShadeLevel.MEDIUM_LIGHT
    if "medium dark" in text or "deep golden" in text:
        return ShadeLevel.MEDIUM_DARK
    if _has_any(text, ("lightly toasted", "pale golden", "light")):
        return ShadeLevel.LIGHT
    if _has_any(text, ("well toasted", "deep brown", "dark")):
        return ShadeLevel.DARK
    if "golden" in text:
        return ShadeLevel.MEDIUM_LIGHT
    return ShadeLevel.MEDIUM


def extract_toasting_params(steps: list[str]) -> MethodExtraction:
    text = _joined(steps)
    return MethodExtraction(
        shade_level=_shade_level(text),
        cooking_time=first_duration(steps, _TOAST_TIMES, c.TOAST_MINUTES),
        is_frozen="frozen" in text,
        is_bagel=_has_any(text, ("bagel", "english muffin", "cut side")),
    )


_DEHYDRATE_TEMPS = [
    _temperature_pattern(r"dehydrat"),
    _temperature_pattern(r"(?:make|making)\s+jerky"),
    re.compile(r"(\d{2,3})\s*degrees.*?jerky", re.IGNORECASE),
    _temperature_pattern(r"drying\s+fruit"),
]
_DEHYDRATE_TIMES = [
    duration_pattern(r"dehydrat"),
    duration_pattern(r"(?:make|making)\s+jerky"),
    duration_pattern(r"drying\s+fruit"),
    duration_pattern(r"until\s+completely\s+dried"),
]


def extract_dehydrating_params(steps: list[str]) -> MethodExtraction:
    return MethodExtraction(
        temperature=first_temperature(steps, _DEHYDRATE_TEMPS, c.DEHYDRATE_TEMP_F),
        cooking_time=first_duration(steps, _DEHYDRATE_TIMES, c.DEHYDRATE_MINUTES),
        fan_speed=FanSpeed.LOW,
    )


# ---------------------------------------------------------------------------
# iQ Cooker
# ---------------------------------------------------------------------------
_PRESSURE_TIMES = [
    duration_pattern(r"pressure\s+cook"),
    duration_pattern(r"cook\s+(?:under\s+)?pressure"),
    duration_pattern(r"(?:instant\s+pot|pressure\s+cooker)"),
]
_NATURAL_RELEASE_CUES = ("natural release", "naturally release", "release naturally")
_PULSE_RELEASE_CUES = ("pulse release", "intermittent release")


def extract_pressure_cooking_params(steps: list[str]) -> MethodExtraction:
    text = _joined(steps)
    if _has_any(text, _NATURAL_RELEASE_CUES):
        release = PressureRelease.NATURAL
    elif _has_any(text, _PULSE_RELEASE_CUES):
        release = PressureRelease.PULSE
    else:
        release = PressureRelease.QUICK
    low = _has_any(text, ("low pressure", "gentle pressure"))
    return MethodExtraction(
        pressure_level=PressureLevel.LOW if low else PressureLevel.HIGH,
        pressure_release=release,
        cooking_time=first_duration(steps, _PRESSURE_TIMES, c.PRESSURE_COOK_MINUTES),
    )


_SLOW_COOK_TIMES = [
    duration_pattern(r"slow\s+cook"),
    duration_pattern(r"cook\s+(?:on\s+)?(?:low|high)"),
    duration_pattern(r"(?:slow\s+cooker|crock\s+pot)"),
    duration_pattern(r"simmer"),
]
_SLOW_COOK_LOW_CUES = ("low heat", "on low", "low temperature", "low setting")


def extract_slow_cooking_params(steps: list[str]) -> MethodExtraction:
    low = _has_any(_joined(steps), _SLOW_COOK_LOW_CUES)
    return MethodExtraction(
        temp_level=TemperatureLevel.LOW if low else TemperatureLevel.HIGH,
        cooking_time=first_duration(steps, _SLOW_COOK_TIMES, c.SLOW_COOK_MINUTES),
    )


_STEAM_TIMES = [
    duration_pattern(r"steam"),
    duration_pattern(r"steaming"),
    duration_pattern(r"steamer"),
    duration_pattern(r"steam\s+basket"),
]


def extract_steaming_params(steps: list[str]) -> MethodExtraction:
    return MethodExtraction(cooking_time=first_duration(steps, _STEAM_TIMES, c.STEAM_MINUTES))


_SEAR_TIMES = [
    duration_pattern(r"sear"),
    duration_pattern(r"saut[ée]"),
    duration_pattern(r"brown"),
    duration_pattern(r"fry"),
]
_SEAR_LOW_CUES = ("low heat", "gentle", "low temperature")
_SEAR_HIGH_CUE = re.compile(r"high heat|\bhot\b")


def extract_searing_saute_params(steps: list[str]) -> MethodExtraction:
    text = _joined(steps)
    if _has_any(text, _SEAR_LOW_CUES):
        level = TemperatureLevel.MEDIUM_LOW
    elif _SEAR_HIGH_CUE.search(text):
        level = TemperatureLevel.HIGH
    else:
        level = TemperatureLevel.MEDIUM_HIGH
    return MethodExtraction(
        temp_level=level,
        cooking_time=first_duration(steps, _SEAR_TIMES, c.SEAR_SAUTE_MINUTES),
    )


_SOUS_VIDE_TEMPS = [
    _temperature_pattern(r"sous\s+vide"),
    _temperature_pattern(r"water\s+bath"),
    _temperature_pattern(r"vacuum"),
    _temperature_pattern(r"immersion"),
]
_SOUS_VIDE_TIMES = [
    duration_pattern(r"sous\s+vide"),
    duration_pattern(r"water\s+bath"),
    duration_pattern(r"vacuum"),
    duration_pattern(r"immersion"),
]


def extract_sous_vide_params(steps: list[str]) -> MethodExtraction:
    return MethodExtraction(
        temperature=first_temperature(steps, _SOUS_VIDE_TEMPS, c.SOUS_VIDE_TEMP_F),
        cooking_time=first_duration(steps, _SOUS_VIDE_TIMES, c.SOUS_VIDE_MINUTES),
    )


METHOD_EXTRACTORS: dict[str, Callable[[list[str]], MethodExtraction]] = {
    method_key(OvenMethod.AIR_FRY): extract_air_frying_params,
    method_key(OvenMethod.ROAST): extract_roasting_params,
    method_key(OvenMethod.BROIL): extract_broiling_params,
    method_key(OvenMethod.TOAST): extract_toasting_params,
    method_key(OvenMethod.DEHYDRATE): extract_dehydrating_params,
    method_key(CookerMethod.PRESSURE): extract_pressure_cooking_params,
    method_key(CookerMethod.SLOW_COOK): extract_slow_cooking_params,
    method_key(CookerMethod.STEAM): extract_steaming_params,
    method_key(CookerMethod.SEAR_SAUTE): extract_searing_saute_params,
    method_key(CookerMethod.SOUS_VIDE): extract_sous_vide_params,
}

# Where an extracted temperature lands in the parameter record
_TEMPERATURE_FIELD = {
    method_key(CookerMethod.SOUS_VIDE): "cooking_temp",
}


def extract_method_params(method_id, steps: list[str]) -> Optional[MethodExtraction]:
    """Run the extractor registered for a method, if there is one."""
    extractor = METHOD_EXTRACTORS.get(method_key(method_id))
    if extractor is None:
        return None
    found = extractor(steps)
    _LOGGER.debug("Extraction for method %s: %s", method_key(method_id), found)
    return found


def apply_method_extraction(
    method_id, method_name: str, params: dict, found: Optional[MethodExtraction], reasoning: list[str]
) -> dict:
    """Overlay an extraction onto a parameter dict.

    Args:
        method_id: Method the classifier picked.
        method_name: Display name used in the reasoning trace.
        params: Parameter dict, durations in seconds. Not modified.
        found: Result of extract_method_params.
        reasoning: Trace to append to.

    Returns:
        A new parameter dict.
    """
    params = dict(params)
    if found is None:
        return params
    key = method_key(method_id)
    label = method_name.lower()

    if found.temperature:
        params[_TEMPERATURE_FIELD.get(key, "target_cavity_temp")] = found.temperature
        reasoning.append(f"Using extracted {label} temperature: {found.temperature}°F")
    if found.fan_speed is not None:
        params["fan_speed"] = found.fan_speed
        reasoning.append(f"Using {label} fan speed: {FAN_SPEED_NAMES[found.fan_speed]}")
    if found.temp_level is not None:
        params["temp_level"] = found.temp_level
        reasoning.append(f"Using {label} temperature level: {TEMPERATURE_LEVEL_NAMES[found.temp_level]}")
    if found.pressure_level is not None:
        params["pres_level"] = found.pressure_level
        reasoning.append(f"Detected pressure level: {PRESSURE_LEVEL_NAMES[found.pressure_level]}")
    if found.pressure_release is not None:
        params["pres_release"] = found.pressure_release
        reasoning.append(f"Detected pressure release method: {PRESSURE_RELEASE_NAMES[found.pressure_release]}")
    if found.shade_level is not None:
        params["shade_level"] = found.shade_level
        reasoning.append(f"Using toasting shade level: {SHADE_LEVEL_NAMES[found.shade_level]}")
    if found.is_frozen:
        params["is_frozen"] = True
        reasoning.append("Detected frozen bread setting")
    if found.is_bagel:
        params["is_bagel"] = True
        reasoning.append("Detected bagel mode setting")
    if found.cooking_time:
        params["cooking_time"] = found.cooking_time * 60
        reasoning.append(f"Using extracted {label} time: {found.cooking_time} minutes")
    return params
