"""
Duration extraction from recipe instructions.

All durations come back in minutes. Ranges ("20-25 minutes") resolve to the
larger endpoint so a recipe is never undercooked.
"""

import re
from typing import Optional

from .constants import INSTRUCTION_MINUTES
from .models import ExtractedDuration
from .temperature import in_window

DURATION = (
    r"(?P<low>\d+)\s*(?:(?:-|–|to)\s*(?P<high>\d+)\s*)?"
    r"(?P<unit>hour|hr|minute|min)s?\b"
)


def duration_pattern(anchor: str) -> re.Pattern:
    """Compile "<anchor> ... N unit" with the anchor as a regex fragment."""
    return re.compile(anchor + r".*?(?:for\s+)?" + DURATION, re.IGNORECASE)


_INSTRUCTION_PATTERNS = [
    duration_pattern(r"bake"),
    duration_pattern(r"cook"),
    duration_pattern(r"oven"),
    duration_pattern(r"roast"),
    re.compile(DURATION + r".*?(?:in\s+(?:the\s+)?oven|baking|cooking)", re.IGNORECASE),
    re.compile(DURATION + r"(?:\s*[,.]?\s*or\s+until)", re.IGNORECASE),
    re.compile(r"an?\s+additional\s+" + DURATION, re.IGNORECASE),
]

_PREP_WORDS = ("prepare", "mix", "combine")
_COOKING_ANCHOR = re.compile(r"bake|cook|oven|roast", re.IGNORECASE)


def minutes_from_match(match: re.Match) -> int:
    """Convert a DURATION match to minutes, taking the larger range endpoint."""
    factor = 60 if match.group("unit").lower() in ("hour", "hr") else 1
    minutes = int(match.group("low")) * factor
    if match.group("high"):
        minutes = max(minutes, int(match.group("high")) * factor)
    return minutes


def find_durations(text: str, patterns: list[re.Pattern]) -> list[int]:
    """Durations mentioned in a text, each number counted once.

    Several pattern families often match the same mention ("bake in the oven
    for 20 minutes"); the mention is keyed on where its number starts.
    """
    seen: dict[int, int] = {}
    for pattern in patterns:
        for match in pattern.finditer(text):
            seen.setdefault(match.start("low"), minutes_from_match(match))
    return [seen[offset] for offset in sorted(seen)]


def first_duration(
    steps: list[str], patterns: list[re.Pattern], window: tuple[int, int]
) -> Optional[int]:
    """First duration inside a window, scanning steps then patterns in order."""
    for step in steps:
        for pattern in patterns:
            for match in pattern.finditer(step):
                minutes = minutes_from_match(match)
                if in_window(minutes, window):
                    return minutes
    return None


def _is_prep_step(lowered: str) -> bool:
    is_prep = lowered.startswith("preheat") or any(word in lowered for word in _PREP_WORDS)
    return is_prep and not _COOKING_ANCHOR.search(lowered)


def extract_durations(steps: list[str]) -> list[ExtractedDuration]:
    """All plausible cooking durations, tagged with their step.

    Prep-only steps are skipped. Every duration in a step that talks about
    "additional" time is marked as an addition to the main time.
    """
    found = []
    for index, step in enumerate(steps):
        lowered = step.lower()
        if _is_prep_step(lowered):
            continue
        is_additional = "additional" in lowered
        for minutes in find_durations(step, _INSTRUCTION_PATTERNS):
            if in_window(minutes, INSTRUCTION_MINUTES):
                found.append(
                    ExtractedDuration(minutes=minutes, step_index=index, is_additional=is_additional)
                )
    return found


def extract_cooking_time_from_instructions(steps: list[str]) -> Optional[int]:
    """Total cooking time stated in the instructions.

    Args:
        steps: Instruction texts in order.

    Returns:
        The longest main duration plus every additional duration, in minutes,
        or None when no step states a plausible duration.
    """
    durations = extract_durations(steps)
    if not durations:
        return None
    main = [d.minutes for d in durations if not d.is_additional]
    additional = sum(d.minutes for d in durations if d.is_additional)
    return max(main, default=0) + additional
