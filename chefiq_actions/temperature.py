"""
Temperature extraction from recipe text.

Every temperature is returned in Fahrenheit. Celsius values are converted
where they are read; anything outside the plausible oven window is dropped.
"""

import re
from typing import Optional

from .constants import OVEN_TEMP_C, OVEN_TEMP_F
from .models import ExtractedTemperature

# Pattern families, highest priority first. A number already claimed by a
# family is never re-read by a later one.
_CELSIUS_PATTERNS = [
    re.compile(r"(\d{2,3})\s*°\s*C(?:elsius)?\b", re.IGNORECASE),
    re.compile(r"(\d{2,3})\s*degrees\s*C(?:elsius)?\b", re.IGNORECASE),
]

_FAHRENHEIT_PATTERNS = [
    re.compile(r"(\d{2,3})\s*°\s*F(?:ahrenheit)?\b", re.IGNORECASE),
    re.compile(r"(\d{2,3})\s*degrees\s*F(?:ahrenheit)?\b", re.IGNORECASE),
]

_AMBIGUOUS_PATTERNS = [
    re.compile(r"(\d{2,3})\s*degrees", re.IGNORECASE),
    re.compile(r"preheat\s+(?:oven\s+)?(?:to\s+)?(\d{2,3})", re.IGNORECASE),
    re.compile(r"temperature\s+(?:to\s+)?(\d{2,3})", re.IGNORECASE),
    re.compile(r"heat\s+(?:to\s+)?(\d{2,3})", re.IGNORECASE),
    re.compile(r"oven\s+(?:to\s+)?(\d{2,3})", re.IGNORECASE),
    re.compile(r"bake\s+(?:at\s+)?(\d{2,3})", re.IGNORECASE),
]

_PREHEAT_CUE = re.compile(r"preheat[^0-9]*(\d{2,3})", re.IGNORECASE)


def in_window(value: int, window: tuple[int, int]) -> bool:
    low, high = window
    return low <= value <= high


def fahrenheit_from_celsius(celsius: int) -> int:
    return int(round(celsius * 9 / 5 + 32))


def _read_celsius(value: int) -> Optional[int]:
    return fahrenheit_from_celsius(value) if in_window(value, OVEN_TEMP_C) else None


def _read_fahrenheit(value: int) -> Optional[int]:
    return value if in_window(value, OVEN_TEMP_F) else None


def _read_ambiguous(value: int) -> Optional[int]:
    if in_window(value, OVEN_TEMP_F):
        return value
    return _read_celsius(value)


def _scan(text: str) -> dict[int, Optional[int]]:
    """Map each temperature number's offset to its Fahrenheit value.

    Offsets claimed by a family but rejected by its window map to None.
    """
    claimed: dict[int, Optional[int]] = {}
    families = [
        (_CELSIUS_PATTERNS, _read_celsius),
        (_FAHRENHEIT_PATTERNS, _read_fahrenheit),
        (_AMBIGUOUS_PATTERNS, _read_ambiguous),
    ]
    for patterns, read in families:
        for pattern in patterns:
            for match in pattern.finditer(text):
                offset = match.start(1)
                if offset not in claimed:
                    claimed[offset] = read(int(match.group(1)))
    return claimed


def _accepted(claimed: dict[int, Optional[int]]) -> list[int]:
    return [claimed[offset] for offset in sorted(claimed) if claimed[offset] is not None]


def find_temperatures(text: str) -> list[int]:
    """All plausible temperatures in document order, in °F."""
    return _accepted(_scan(text))


def extract_temperature(text: str, prefer_initial: bool = True) -> Optional[int]:
    """Pick the cooking temperature a piece of recipe text is about.

    Args:
        text: Free recipe text.
        prefer_initial: Return the preheat temperature when the text has one.

    Returns:
        The temperature in °F, or None when nothing plausible was found.
    """
    claimed = _scan(text)
    temperatures = _accepted(claimed)
    if not temperatures:
        return None

    lowered = text.lower()
    if prefer_initial and "preheat" in lowered:
        match = _PREHEAT_CUE.search(text)
        if match:
            offset = match.start(1)
            if claimed.get(offset) is not None:
                return claimed[offset]
            if offset not in claimed and in_window(int(match.group(1)), OVEN_TEMP_F):
                return int(match.group(1))

    if "increase" in lowered and "temperature" in lowered:
        return max(temperatures)

    return temperatures[0]


def extract_temperatures_with_context(steps: list[str]) -> list[ExtractedTemperature]:
    """One entry per step that states a temperature.

    Steps mentioning "increase" are flagged so multi-stage bakes can be found.
    """
    found = []
    for index, step in enumerate(steps):
        temperature = extract_temperature(step, prefer_initial=False)
        if temperature:
            found.append(
                ExtractedTemperature(
                    temperature=temperature,
                    step_index=index,
                    is_increase="increase" in step.lower(),
                )
            )
    return found
