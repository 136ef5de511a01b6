"""
MCP Server ChefIQ cooking actions

Tools that read a recipe (pasted or from a web link) and suggest which
ChefIQ appliance method, temperature and time to use for each step.
"""
import logging
import os
from typing import Optional

from fastmcp import FastMCP

from .appliances import get_appliance_by_id, get_appliance_product_url
from .llm_service import create_analyzer_from_env
from .models import AnalysisResult, RecipeText
from .recipe_scraper import scrape_recipe
from .suggestions import suggest_cooking_actions

_LOGGER = logging.getLogger(__name__)

mcp = FastMCP(
    "chefiq-actions",
    instructions=(
        "This server suggests ChefIQ smart-appliance cooking actions (iQ Cooker, "
        "iQ MiniOven, iQ Sense probe) for a recipe. Send the recipe steps, or a "
        "recipe link.\n\n"
        "Set GEMINI_API_KEY to let an AI model propose the actions first; without "
        "it the built-in recipe analyzer is used.\n\n"
        "Temperatures are in °F. When showing the result, list one line per "
        "action with its step number, as returned by the tool."
    ),
)


def _configured_analyzer():
    try:
        return create_analyzer_from_env()
    except ValueError as e:
        _LOGGER.warning("Ignoring AI configuration: %s", e)
        return None


def format_result(title: str, result: AnalysisResult) -> str:
    """Tool output: recipe title, suggested appliance, then the action summary."""
    header = title or "Recipe"
    appliance = get_appliance_by_id(result.suggested_appliance_id or "")
    if appliance:
        header += f" -> {appliance.name} ({get_appliance_product_url(appliance.category_id)})"
    return f"{header}\n\n{result.to_summary()}"


async def suggest_for_recipe(recipe: RecipeText, analyzer=None) -> str:
    result = await suggest_cooking_actions(recipe, analyzer=analyzer)
    return format_result(recipe.title, result)


async def suggest_for_url(url: str, analyzer=None) -> str:
    try:
        scraped = await scrape_recipe(url)
    except Exception as e:
        _LOGGER.warning("Scraping %s failed: %s", url, e)
        return (
            f"Unable to read the recipe from {url}\n"
            f"Error: {e}\n\n"
            "Make sure the link is correct and the site is accessible."
        )

    if not scraped.instructions:
        return f"No instructions found on {url}, nothing to analyze."

    return await suggest_for_recipe(scraped.to_recipe_text(), analyzer=analyzer)


@mcp.tool()
async def analyze_recipe(
    steps: list[str],
    title: str = "",
    description: str = "",
    cook_time_minutes: Optional[int] = None,
) -> str:
    """Suggest ChefIQ cooking actions for a recipe.

    Args:
        steps: The instruction steps, in order.
        title: The recipe title.
        description: The recipe description or notes.
        cook_time_minutes: Cook time stated by the author, if any.

    Returns:
        The suggested actions with confidence and reasoning.
    """
    recipe = RecipeText(
        title=title, description=description, steps=steps, cook_time_minutes=cook_time_minutes
    )
    return await suggest_for_recipe(recipe, analyzer=_configured_analyzer())


@mcp.tool()
async def suggest_actions_from_url(url: str) -> str:
    """Read a recipe from a web link and suggest ChefIQ cooking actions.

    Args:
        url: The recipe link (e.g. https://www.allrecipes.com/recipe/...).

    Returns:
        The suggested actions with confidence and reasoning.
    """
    return await suggest_for_url(url, analyzer=_configured_analyzer())


def main():
    """Entry point to start the MCP server."""
    logging.basicConfig(
        level=os.getenv("CHEFIQ_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    mcp.run()


if __name__ == "__main__":
    main()
