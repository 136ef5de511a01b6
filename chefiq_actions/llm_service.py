"""
Gemini service: asks an LLM which ChefIQ actions a recipe needs.

Talks to the public generateContent REST endpoint. The model's JSON answer
is validated against the same parameter records the heuristic analyzer
builds, so both paths produce identical CookingAction objects.
"""

import json
import logging
import os
from typing import Optional

from aiohttp import ClientSession, ClientTimeout
from pydantic import BaseModel, ValidationError

from .appliances import COOKING_METHOD_PATTERNS, get_appliance_for_family, get_pattern
from .models import PARAMETER_MODELS, CookingAction, RecipeText

_LOGGER = logging.getLogger(__name__)

GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
DEFAULT_MODEL = "gemini-2.0-flash"
DEFAULT_TIMEOUT = 60.0


class LLMSettings(BaseModel):
    api_key: str
    model: str = DEFAULT_MODEL
    timeout: float = DEFAULT_TIMEOUT


def load_llm_settings() -> Optional[LLMSettings]:
    """Load Gemini settings from environment variables.

    Returns:
        The settings, or None when GEMINI_API_KEY is not set (heuristics only).
    """
    api_key = os.getenv("GEMINI_API_KEY")
    if not api_key:
        return None
    timeout = os.getenv("GEMINI_TIMEOUT", str(DEFAULT_TIMEOUT))
    try:
        timeout_seconds = float(timeout)
    except ValueError:
        raise ValueError(f"GEMINI_TIMEOUT must be a number of seconds, got {timeout!r}")
    return LLMSettings(
        api_key=api_key,
        model=os.getenv("GEMINI_MODEL") or DEFAULT_MODEL,
        timeout=timeout_seconds,
    )


class LLMServiceError(RuntimeError):
    """HTTP failure from the LLM endpoint."""

    def __init__(self, status: int, message: str):
        super().__init__(f"LLM request failed (status {status}): {message}")
        self.status = status


def _method_catalog() -> str:
    lines = []
    for pattern in COOKING_METHOD_PATTERNS:
        model = PARAMETER_MODELS[pattern.key]
        fields = ", ".join(name for name in model.model_fields)
        lines.append(f'- "{pattern.key}" {pattern.name} ({pattern.family.value}): {fields}')
    return "\n".join(lines)


def build_prompt(recipe: RecipeText) -> str:
    steps = "\n".join(f"{i}. {text}" for i, text in enumerate(recipe.step_texts))
    cook_time = f"{recipe.cook_time_minutes} minutes" if recipe.cook_time_minutes else "unknown"
    return (
        "You map recipes to ChefIQ smart appliance cooking actions.\n"
        "Available methods (method_id, name, appliance, parameters):\n"
        f"{_method_catalog()}\n\n"
        "Rules: cooking_time is in seconds, temperatures in Fahrenheit, enum "
        "parameters are integers. Only suggest actions for steps that use one of "
        "these methods; stovetop-only recipes get no actions.\n"
        'Answer with JSON only: {"actions": [{"step_index": 0, "method_id": "...", '
        '"parameters": {...}}]}\n\n'
        f"Title: {recipe.title}\n"
        f"Description: {recipe.description}\n"
        f"Declared cook time: {cook_time}\n"
        f"Steps:\n{steps}"
    )


def _load_json(raw: str):
    """Parse the model's JSON, tolerating markdown code fences."""
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        pass
    if "```" in raw:
        body = raw.split("```")[1]
        if body.startswith("json"):
            body = body[len("json"):]
        try:
            return json.loads(body.strip())
        except json.JSONDecodeError:
            pass
    start, end = raw.find("{"), raw.rfind("}") + 1
    if 0 <= start < end:
        try:
            return json.loads(raw[start:end])
        except json.JSONDecodeError:
            pass
    raise ValueError("LLM response is not valid JSON")


def parse_actions_response(raw: str, recipe: Optional[RecipeText] = None) -> list[CookingAction]:
    """Turn the model's answer into validated cooking actions.

    Args:
        raw: Text returned by the model.
        recipe: The analysed recipe, used to check step indexes.

    Returns:
        The valid actions; malformed entries are dropped with a warning.

    Raises:
        ValueError: The answer is not JSON at all.
    """
    data = _load_json(raw)
    entries = data.get("actions", []) if isinstance(data, dict) else data
    if not isinstance(entries, list):
        raise ValueError("LLM response has no action list")

    step_count = len(recipe.steps) if recipe else None
    actions = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        method_key = str(entry.get("method_id"))
        model = PARAMETER_MODELS.get(method_key)
        if model is None:
            _LOGGER.warning("Dropping LLM action with unknown method %r", method_key)
            continue
        pattern = get_pattern(method_key)
        values = {k: v for k, v in (entry.get("parameters") or {}).items() if k in model.model_fields}
        values.setdefault("cooking_time", pattern.default_time_seconds)
        try:
            parameters = model(**values)
        except ValidationError as e:
            _LOGGER.warning("Dropping invalid LLM action for %s: %s", pattern.name, e)
            continue

        step_index = entry.get("step_index")
        if not isinstance(step_index, int) or (step_count is not None and not 0 <= step_index < step_count):
            step_index = None
        actions.append(
            CookingAction(
                appliance_id=get_appliance_for_family(pattern.family).category_id,
                method_id=method_key,
                method_name=pattern.name,
                parameters=parameters,
                step_index=step_index,
            )
        )
    return actions


def _response_text(data: dict) -> str:
    try:
        parts = data["candidates"][0]["content"]["parts"]
    except (KeyError, IndexError, TypeError):
        raise ValueError("Empty response from LLM")
    return "".join(part.get("text", "") for part in parts)


class GeminiActionAnalyzer:
    """Cooking-action analyzer backed by the Gemini API."""

    def __init__(self, settings: LLMSettings):
        self.settings = settings

    async def analyze_cooking_actions(self, recipe: RecipeText) -> list[CookingAction]:
        """Ask Gemini for the recipe's cooking actions.

        Raises:
            LLMServiceError: The endpoint answered with an HTTP error.
            ValueError: The answer could not be parsed.
        """
        url = GEMINI_URL.format(model=self.settings.model)
        payload = {
            "contents": [{"parts": [{"text": build_prompt(recipe)}]}],
            "generationConfig": {"temperature": 0.1, "responseMimeType": "application/json"},
        }
        timeout = ClientTimeout(total=self.settings.timeout)
        async with ClientSession(timeout=timeout) as session:
            async with session.post(
                url, params={"key": self.settings.api_key}, json=payload
            ) as response:
                if response.status != 200:
                    error_text = await response.text()
                    raise LLMServiceError(response.status, error_text[:200])
                data = await response.json()

        actions = parse_actions_response(_response_text(data), recipe)
        _LOGGER.info("Gemini suggested %d action(s) for %r", len(actions), recipe.title)
        return actions


def create_analyzer_from_env() -> Optional[GeminiActionAnalyzer]:
    settings = load_llm_settings()
    return GeminiActionAnalyzer(settings) if settings else None
