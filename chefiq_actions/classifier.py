"""
Cooking-method classifier.

Scores every registry method against the recipe text by keyword frequency,
with a few overrides: stovetop-only recipes get nothing, grilled proteins are
moved to the oven, and temperature increases favour baking.
"""

import logging
import re
from typing import Optional

from pydantic import BaseModel

from . import constants as c
from .appliances import COOKING_METHOD_PATTERNS, CookingMethodPattern
from .models import MethodId, OvenMethod, method_key

_LOGGER = logging.getLogger(__name__)

_INCREASE_CUES = ("increase temperature", "increase oven temperature")


class ScoringWeights(BaseModel):
    """Tunable classifier constants."""

    bake_increase_boost: int = c.BAKE_INCREASE_BOOST
    dehydrate_high_temp_penalty: int = c.DEHYDRATE_HIGH_TEMP_PENALTY
    dehydrate_max_plausible_temp: int = c.DEHYDRATE_MAX_PLAUSIBLE_F
    confidence_base: float = c.CONFIDENCE_BASE
    confidence_per_match: float = c.CONFIDENCE_PER_MATCH


DEFAULT_WEIGHTS = ScoringWeights()


class MethodScore(BaseModel):
    pattern: CookingMethodPattern
    score: int


class GrillSubstitution(BaseModel):
    """Oven method standing in for an outdoor grill."""

    method_id: OvenMethod
    step_index: Optional[int] = None
    reasoning: list[str] = []


def _contains_any(text: str, keywords) -> bool:
    return any(keyword in text for keyword in keywords)


def has_registry_keyword(text: str) -> bool:
    lowered = text.lower()
    return any(_contains_any(lowered, p.keywords) for p in COOKING_METHOD_PATTERNS)


def is_stovetop_only(text: str) -> bool:
    """True when the text only describes stovetop work ChefIQ has no method for."""
    lowered = text.lower()
    return _contains_any(lowered, c.STOVETOP_KEYWORDS) and not has_registry_keyword(lowered)


def count_keyword(text: str, keyword: str) -> int:
    return len(re.findall(re.escape(keyword), text, re.IGNORECASE))


def detect_grill_substitution(
    text: str, steps: list[str], cook_time_minutes: Optional[int] = None
) -> Optional[GrillSubstitution]:
    """Pick an oven method for a grilled-protein recipe.

    Args:
        text: Full recipe text.
        steps: Instruction texts, used to bind the action to the grill step.
        cook_time_minutes: Author-declared cook time.

    Returns:
        The substitution, or None when the recipe is not a grilled protein.
    """
    lowered = text.lower()
    if not (_contains_any(lowered, c.GRILL_KEYWORDS) and _contains_any(lowered, c.GRILL_PROTEIN_KEYWORDS)):
        return None

    reasoning = ["Detected grilling recipe with protein - suggesting oven as ChefIQ alternative."]
    if _contains_any(lowered, c.CRISPY_KEYWORDS):
        method = OvenMethod.AIR_FRY
        reasoning.append("Detected need for crispy texture - suggesting Air Fry.")
    elif _contains_any(lowered, c.BROWNING_KEYWORDS):
        method = OvenMethod.BROIL
        reasoning.append("Detected need for browning/searing - suggesting Broil.")
    elif cook_time_minutes and cook_time_minutes > c.GRILL_BAKE_MIN_COOK_MINUTES:
        method = OvenMethod.BAKE
        reasoning.append("Longer cooking time detected - suggesting Bake.")
    else:
        method = OvenMethod.AIR_FRY

    step_index = next(
        (i for i, step in enumerate(steps) if _contains_any(step.lower(), c.GRILL_KEYWORDS)),
        None,
    )
    return GrillSubstitution(method_id=method, step_index=step_index, reasoning=reasoning)


def score_methods(
    text: str,
    extracted_temp: Optional[int] = None,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
    reasoning: Optional[list[str]] = None,
) -> list[MethodScore]:
    """Keyword-frequency score for every registry method, in registry order."""
    lowered = text.lower()
    scores = []
    for pattern in COOKING_METHOD_PATTERNS:
        score = sum(count_keyword(lowered, keyword) for keyword in pattern.keywords)
        if score and pattern.method_id == OvenMethod.BAKE and _contains_any(lowered, _INCREASE_CUES):
            score += weights.bake_increase_boost
            if reasoning is not None:
                reasoning.append("Detected temperature increase instructions - prioritizing bake method.")
        if (
            pattern.method_id == OvenMethod.DEHYDRATE
            and extracted_temp
            and extracted_temp > weights.dehydrate_max_plausible_temp
        ):
            score = max(0, score - weights.dehydrate_high_temp_penalty)
        scores.append(MethodScore(pattern=pattern, score=score))
    _LOGGER.debug("Method scores: %s", {s.pattern.name: s.score for s in scores if s.score})
    return scores


def rank_methods(scores: list[MethodScore]) -> list[MethodScore]:
    """Methods scoring above zero, best first; ties keep registry order."""
    return sorted((s for s in scores if s.score > 0), key=lambda s: -s.score)


def select_secondary_methods(ranked: list[MethodScore]) -> list[MethodScore]:
    """Runner-up methods worth a separate action on the primary's appliance."""
    if not ranked:
        return []
    primary = ranked[0].pattern
    return [
        s
        for s in ranked[1 : 1 + c.MAX_SECONDARY_METHODS]
        if s.score > c.SECONDARY_METHOD_MIN_SCORE
        and s.pattern.family == primary.family
        and s.pattern.key != primary.key
    ]


def confidence_for(score: int, weights: ScoringWeights = DEFAULT_WEIGHTS) -> float:
    return min(1.0, score * weights.confidence_per_match + weights.confidence_base)


def analyze_step_methods(steps: list[str]) -> list[list[CookingMethodPattern]]:
    """Registry methods mentioned by each step.

    A step that raises the temperature is a bake stage, never a dehydrate.
    """
    bake = next(p for p in COOKING_METHOD_PATTERNS if p.method_id == OvenMethod.BAKE)
    analysis = []
    for step in steps:
        lowered = step.lower()
        raises_temp = ("increase" in lowered or "raise" in lowered) and "temperature" in lowered
        matches = [
            p
            for p in COOKING_METHOD_PATTERNS
            if not (raises_temp and p.method_id == OvenMethod.DEHYDRATE)
            and _contains_any(lowered, p.keywords)
        ]
        if raises_temp and bake not in matches:
            matches.append(bake)
        analysis.append(matches)
    return analysis


def find_method_step(step_methods: list[list[CookingMethodPattern]], method_id: MethodId) -> Optional[int]:
    key = method_key(method_id)
    for index, matches in enumerate(step_methods):
        if any(p.key == key for p in matches):
            return index
    return None
