"""
Cooking-action suggestions: LLM first, heuristic analyzer as fallback.

The two paths are alternatives. An LLM answer with actions is adopted as is;
anything else (no analyzer, no actions, an error) runs the heuristic engine.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, Protocol

from . import constants as c
from .analyzer import analyze
from .models import AnalysisResult, CookingAction, RecipeText
from .retry import RetryPolicy, default_llm_policy, retry_async

_LOGGER = logging.getLogger(__name__)


class ActionAnalyzer(Protocol):
    """Anything that can suggest cooking actions for a recipe."""

    async def analyze_cooking_actions(self, recipe: RecipeText) -> list[CookingAction]:
        ...


def _result_from_actions(actions: list[CookingAction]) -> AnalysisResult:
    probe_temp = next(
        (
            action.parameters.target_probe_temp
            for action in actions
            if getattr(action.parameters, "target_probe_temp", None)
        ),
        None,
    )
    return AnalysisResult(
        suggested_appliance_id=actions[0].appliance_id,
        suggested_actions=actions,
        use_probe=probe_temp is not None,
        probe_temp=probe_temp,
        confidence=c.LLM_CONFIDENCE,
        reasoning=[f"AI analysis suggested {len(actions)} cooking action(s)."],
    )


async def suggest_cooking_actions(
    recipe: RecipeText,
    analyzer: Optional[ActionAnalyzer] = None,
    policy: Optional[RetryPolicy] = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> AnalysisResult:
    """Suggest cooking actions for a recipe.

    Args:
        recipe: The recipe to analyse.
        analyzer: LLM-backed analyzer; None skips straight to heuristics.
        policy: Retry policy for the LLM call (503 and 429 by default).
        sleep: Awaitable delay between retries.

    Returns:
        The LLM result when it suggested actions, the heuristic one otherwise.
        Never raises.
    """
    if analyzer is not None:
        policy = policy or default_llm_policy()
        try:
            actions = await retry_async(
                lambda: analyzer.analyze_cooking_actions(recipe), policy, sleep=sleep
            )
        except Exception as e:
            _LOGGER.warning("AI analysis failed for %r, using heuristics: %s", recipe.title, e)
        else:
            if actions:
                return _result_from_actions(actions)
            _LOGGER.info("AI analysis found no actions for %r, using heuristics", recipe.title)
    return analyze(recipe)
