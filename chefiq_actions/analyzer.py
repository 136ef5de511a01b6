"""
Recipe analyzer: turns recipe text into ChefIQ cooking actions.

Pipeline:
1. Drop storage notes from the description
2. Bail out on stovetop-only recipes
3. Extract temperatures and durations
4. Move grilled proteins to the oven
5. Score methods, pick the primary and its runners-up
6. Decide on probe targets (oven only)
7. Overlay the primary method's own parameters
8. Add a second bake stage for temperature increases
9. Bind every action to the step that mentions its method

The analyzer never raises: any failure comes back as an empty result.
"""

import logging
import re
from collections.abc import Mapping
from typing import Optional

from . import constants as c
from .appliances import CookingMethodPattern, get_appliance_for_family, get_pattern
from .classifier import (
    DEFAULT_WEIGHTS,
    GrillSubstitution,
    ScoringWeights,
    analyze_step_methods,
    confidence_for,
    detect_grill_substitution,
    find_method_step,
    is_stovetop_only,
    rank_methods,
    score_methods,
    select_secondary_methods,
)
from .durations import extract_cooking_time_from_instructions
from .method_params import apply_method_extraction, extract_method_params
from .models import (
    AnalysisResult,
    ApplianceFamily,
    CookingAction,
    ExtractedTemperature,
    OvenMethod,
    RecipeText,
    build_parameters,
)
from .temperature import extract_temperature, extract_temperatures_with_context
from .temperature_guide import detect_protein_type, get_usda_recommended_temp

_LOGGER = logging.getLogger(__name__)

_REMOVE_TEMP_PATTERNS = [
    re.compile(
        r"(?:remove|pull|take out)\s+(?:at|when|from\s+(?:heat|oven)\s+at)\s+"
        r"(\d{2,3})\s*(?:°\s*f|degrees\s*f?|°)"
    ),
    re.compile(r"(\d{2,3})\s*(?:°\s*f|degrees\s*f?).*?(?:remove|pull|take out)"),
]

STOVETOP_ONLY_REASON = "Recipe uses stovetop cooking only - no ChefIQ appliance needed."
NO_METHOD_REASON = "No specific cooking methods detected that match ChefIQ capabilities."
ERROR_REASON = "Error occurred during recipe analysis"


def _filter_description(description: str) -> str:
    """Drop storage/freezer lines, which name methods the recipe never uses."""
    kept = [
        line
        for line in description.split("\n")
        if not any(keyword in line.lower() for keyword in c.STORAGE_LINE_KEYWORDS)
    ]
    return " ".join(kept)


# ---------------------------------------------------------------------------
# Probe targets
# ---------------------------------------------------------------------------
def get_protein_temperature(text: str) -> int:
    """Probe target for the protein a recipe mentions, in °F."""
    protein = detect_protein_type(text)
    if protein:
        return get_usda_recommended_temp(protein)
    lowered = text.lower()
    for name, temperature in c.FALLBACK_PROTEIN_TEMPERATURES.items():
        if name in lowered:
            return temperature
    return c.DEFAULT_PROBE_TEMP_F


def should_use_remove_temp(text: str) -> bool:
    """Large cuts and resting instructions call for pulling the food early."""
    lowered = text.lower()
    has_cue = any(re.search(rf"\b{re.escape(cue)}\b", lowered) for cue in c.REMOVE_TEMP_KEYWORDS)
    return has_cue or any(protein in lowered for protein in c.CARRYOVER_PROTEINS)


def extract_remove_temperature(text: str, target_temp: int) -> Optional[int]:
    """Temperature to pull the food at so carryover reaches target_temp.

    An explicit "remove at N°F" wins when it sits at most 15°F under the
    target. Otherwise carryover recipes default to 5°F under targets below
    160°F and 10°F under the rest.
    """
    lowered = text.lower()
    for pattern in _REMOVE_TEMP_PATTERNS:
        for match in pattern.finditer(lowered):
            temperature = int(match.group(1))
            if c.MIN_REMOVE_TEMP_F <= temperature < target_temp and temperature >= target_temp - c.MAX_CARRYOVER_F:
                return temperature

    if should_use_remove_temp(lowered):
        offset = c.CARRYOVER_OFFSET_HIGH if target_temp >= c.CARRYOVER_HIGH_TARGET_F else c.CARRYOVER_OFFSET_LOW
        return max(c.MIN_REMOVE_TEMP_F, target_temp - offset)
    return None


def _probe_targets(text: str, reasoning: list[str]) -> tuple[int, Optional[int]]:
    target = get_protein_temperature(text)
    protein = detect_protein_type(text)
    if protein:
        reasoning.append(f"Detected {protein.label} protein, suggesting {target}°F target temperature.")

    remove = None
    if should_use_remove_temp(text):
        remove = extract_remove_temperature(text, target)
        if remove is not None and remove < target:
            reasoning.append(
                f"Recipe involves large protein or resting - suggesting remove temp at {remove}°F "
                f"({target - remove}°F carryover cooking)."
            )
        else:
            remove = None
    return target, remove


# ---------------------------------------------------------------------------
# Assembly helpers
# ---------------------------------------------------------------------------
def _initial_temperature(
    extracted: Optional[int], temperature_steps: list[ExtractedTemperature]
) -> Optional[int]:
    # With a later increase the whole-text pick is the raised temperature;
    # the first stage runs at the first step that does not raise it.
    if any(t.is_increase for t in temperature_steps):
        for t in temperature_steps:
            if not t.is_increase:
                return t.temperature
    return extracted


def _primary_cooking_seconds(
    instruction_minutes: Optional[int],
    declared_minutes: Optional[int],
    default_seconds: int,
) -> int:
    # default_seconds already carries the method extractor's time
    if instruction_minutes:
        return instruction_minutes * 60
    if declared_minutes:
        return declared_minutes * 60
    return default_seconds


def _make_action(
    appliance_id: str,
    pattern: CookingMethodPattern,
    params: dict,
    step_index: Optional[int],
    method_name: Optional[str] = None,
) -> CookingAction:
    return CookingAction(
        appliance_id=appliance_id,
        method_id=pattern.key,
        method_name=method_name or pattern.name,
        parameters=build_parameters(pattern.method_id, params),
        step_index=step_index,
    )


def _grill_result(
    grill: GrillSubstitution,
    all_text: str,
    initial_temp: Optional[int],
    cook_time_minutes: Optional[int],
    reasoning: list[str],
) -> AnalysisResult:
    reasoning.extend(grill.reasoning)
    oven = get_appliance_for_family(ApplianceFamily.OVEN)
    pattern = get_pattern(grill.method_id)

    params = dict(pattern.default_parameters)
    if initial_temp and grill.method_id == OvenMethod.BAKE:
        params["target_cavity_temp"] = initial_temp

    probe_temp = None
    if any(keyword in all_text.lower() for keyword in c.TEMPERATURE_CHECK_KEYWORDS):
        probe_temp, remove = _probe_targets(all_text, reasoning)
        params["target_probe_temp"] = probe_temp
        if remove is not None:
            params["remove_probe_temp"] = remove

    if cook_time_minutes:
        params["cooking_time"] = cook_time_minutes * 60
    else:
        params["cooking_time"] = (pattern.estimated_time_minutes or 10) * 60

    action = _make_action(oven.category_id, pattern, params, grill.step_index)
    return AnalysisResult(
        suggested_appliance_id=oven.category_id,
        suggested_actions=[action],
        use_probe=probe_temp is not None,
        probe_temp=probe_temp,
        confidence=c.GRILL_SUBSTITUTION_CONFIDENCE,
        reasoning=reasoning,
    )


def _second_bake_stage(
    temperature_steps: list[ExtractedTemperature], initial_temp: Optional[int]
) -> Optional[ExtractedTemperature]:
    if len(temperature_steps) < 2:
        return None
    hottest = max(temperature_steps, key=lambda t: t.temperature)
    if not hottest.is_increase or hottest.temperature <= (initial_temp or 0):
        return None
    return hottest


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------
def _analyze(
    title: str,
    description: str,
    steps: list[str],
    cook_time_minutes: Optional[int],
    weights: ScoringWeights,
) -> AnalysisResult:
    all_text = " ".join([title, _filter_description(description), *steps])
    lowered = all_text.lower()

    if is_stovetop_only(all_text):
        _LOGGER.debug("Stovetop-only recipe: %s", title)
        return AnalysisResult.empty(STOVETOP_ONLY_REASON)

    reasoning: list[str] = []
    extracted_temp = extract_temperature(all_text, prefer_initial=True)
    temperature_steps = extract_temperatures_with_context(steps)
    initial_temp = _initial_temperature(extracted_temp, temperature_steps)
    instruction_minutes = extract_cooking_time_from_instructions(steps)

    if initial_temp:
        reasoning.append(f"Detected initial temperature: {initial_temp}°F")
    if instruction_minutes:
        reasoning.append(f"Detected cooking time: {instruction_minutes} minutes from instructions")
    if len(temperature_steps) > 1:
        reasoning.append(f"Detected {len(temperature_steps)} temperature changes in recipe")

    grill = detect_grill_substitution(all_text, steps, cook_time_minutes)
    if grill is not None:
        return _grill_result(grill, all_text, initial_temp, cook_time_minutes, reasoning)

    ranked = rank_methods(score_methods(all_text, extracted_temp, weights, reasoning))
    if not ranked:
        return AnalysisResult.empty(NO_METHOD_REASON)

    best = ranked[0]
    pattern = best.pattern
    appliance = get_appliance_for_family(pattern.family)
    if appliance is None:
        return AnalysisResult.empty("Could not map detected cooking method to available appliances.")
    reasoning.append(f'Detected "{pattern.name}" cooking method from recipe text.')

    params = dict(pattern.default_parameters)
    is_oven = pattern.family == ApplianceFamily.OVEN

    probe_temp = None
    if is_oven and any(keyword in lowered for keyword in c.PROBE_KEYWORDS):
        reasoning.append("Detected temperature-based cooking instructions, suggesting probe use.")
        probe_temp, remove = _probe_targets(all_text, reasoning)
        params["target_probe_temp"] = probe_temp
        if remove is not None:
            params["remove_probe_temp"] = remove

    if is_oven and initial_temp and pattern.method_id in (OvenMethod.BAKE, OvenMethod.ROAST, OvenMethod.AIR_FRY):
        params["target_cavity_temp"] = initial_temp
        reasoning.append(f"Using extracted initial temperature of {initial_temp}°F for {pattern.name}.")

    extraction = extract_method_params(pattern.method_id, steps)
    params = apply_method_extraction(pattern.method_id, pattern.name, params, extraction, reasoning)
    params["cooking_time"] = _primary_cooking_seconds(
        instruction_minutes,
        cook_time_minutes,
        params.get("cooking_time", pattern.default_time_seconds),
    )

    step_methods = analyze_step_methods(steps)
    actions = [
        _make_action(
            appliance.category_id, pattern, params, find_method_step(step_methods, pattern.method_id)
        )
    ]
    reasoning.append(f"Suggested {appliance.name} with {pattern.name} method.")

    if pattern.method_id == OvenMethod.BAKE:
        stage = _second_bake_stage(temperature_steps, initial_temp)
        if stage is not None:
            stage_params = dict(
                params,
                target_cavity_temp=stage.temperature,
                cooking_time=params["cooking_time"] // c.SECOND_STAGE_TIME_FRACTION,
            )
            actions.append(
                _make_action(
                    appliance.category_id,
                    pattern,
                    stage_params,
                    stage.step_index,
                    method_name=f"{pattern.name} (Increased Temp)",
                )
            )
            reasoning.append(f"Added second baking step at {stage.temperature}°F for temperature increase.")

    for secondary in select_secondary_methods(ranked):
        other = secondary.pattern
        seconds = other.default_time_seconds
        if cook_time_minutes:
            seconds = min(seconds, cook_time_minutes * 60 // c.SECOND_STAGE_TIME_FRACTION)
        other_params = dict(other.default_parameters, cooking_time=seconds)
        actions.append(
            _make_action(
                appliance.category_id, other, other_params, find_method_step(step_methods, other.method_id)
            )
        )
        reasoning.append(f"Also detected {other.name} method in recipe steps.")

    confidence = confidence_for(best.score, weights)
    _LOGGER.info(
        "Analyzed %r: %s (%d action(s), confidence %.2f)", title, pattern.name, len(actions), confidence
    )
    return AnalysisResult(
        suggested_appliance_id=appliance.category_id,
        suggested_actions=actions,
        use_probe=probe_temp is not None,
        probe_temp=probe_temp,
        confidence=confidence,
        reasoning=reasoning,
    )


def _step_text(step) -> str:
    if isinstance(step, str):
        return step
    if isinstance(step, Mapping):
        return step["text"]
    return step.text


def analyze_recipe(
    title: str,
    description: str,
    steps: list,
    cook_time_minutes: Optional[int] = None,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> AnalysisResult:
    """Suggest ChefIQ cooking actions for a recipe.

    Args:
        title: Recipe title.
        description: Free description; storage notes are ignored.
        steps: Instruction steps, as strings, {"text": ...} mappings or
            RecipeStep objects.
        cook_time_minutes: Author-declared cook time, used only when the
            instructions state none.
        weights: Classifier constants.

    Returns:
        The analysis. Unexpected failures give an empty, zero-confidence result.
    """
    try:
        step_texts = [_step_text(step) for step in steps or []]
        return _analyze(title or "", description or "", step_texts, cook_time_minutes, weights)
    except Exception:
        _LOGGER.error("Error in recipe analysis for %r", title, exc_info=True)
        return AnalysisResult.empty(ERROR_REASON)


def analyze(recipe: RecipeText, weights: ScoringWeights = DEFAULT_WEIGHTS) -> AnalysisResult:
    return analyze_recipe(
        recipe.title, recipe.description, recipe.steps, recipe.cook_time_minutes, weights
    )
