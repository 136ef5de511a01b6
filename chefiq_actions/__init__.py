"""ChefIQ cooking-action inference: recipe text in, appliance actions out."""

from .analyzer import analyze, analyze_recipe
from .models import AnalysisResult, CookingAction, RecipeText
from .suggestions import suggest_cooking_actions

__all__ = [
    "AnalysisResult",
    "CookingAction",
    "RecipeText",
    "analyze",
    "analyze_recipe",
    "suggest_cooking_actions",
]
