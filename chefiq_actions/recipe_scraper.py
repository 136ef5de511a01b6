"""
Web recipe import.

Fetches a recipe page and reads it with recipe-scrapers (schema.org
fallback for unsupported sites) into a ScrapedRecipe the analyzer can use.
"""
import logging
import re
from typing import Optional

import aiohttp
from recipe_scrapers import scrape_html

from .models import ScrapedRecipe

_LOGGER = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)

_STEP_HEADER = re.compile(r"^(?:step|étape|etape|paso|schritt)\s*\d+\s*[:.>)\-]?\s*$", re.IGNORECASE)
_STEP_NUMBER = re.compile(r"^\d+\s*[.)]\s+")


async def fetch_html(url: str, timeout: float = 30) -> str:
    """Download a recipe page.

    Raises:
        aiohttp.ClientResponseError: The site answered with an HTTP error.
    """
    async with aiohttp.ClientSession() as session:
        async with session.get(
            url, headers={"User-Agent": USER_AGENT}, timeout=aiohttp.ClientTimeout(total=timeout)
        ) as resp:
            resp.raise_for_status()
            return await resp.text()


def _to_minutes(value) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (ValueError, TypeError):
        return None


def _parse_servings(value) -> Optional[int]:
    match = re.search(r"(\d+)", str(value or ""))
    return int(match.group(1)) if match else None


def split_instructions(raw) -> list[str]:
    """Instruction steps without blank lines, "Step 3" headers or leading numbers."""
    lines = raw.split("\n") if isinstance(raw, str) else list(raw or [])
    steps = []
    for line in lines:
        text = str(line).strip()
        if not text or _STEP_HEADER.match(text):
            continue
        steps.append(_STEP_NUMBER.sub("", text))
    return steps


def _safe_call(method, default):
    """Call a scraper accessor, falling back to default when the site lacks the field."""
    try:
        result = method()
    except Exception as e:
        _LOGGER.debug("Scraper field %s unavailable: %s", getattr(method, "__name__", method), e)
        return default
    return result if result else default


def parse_recipe_html(html: str, url: str) -> ScrapedRecipe:
    """Read a recipe out of a page's HTML."""
    # supported_only=False falls back to schema.org markup on unknown sites
    scraper = scrape_html(html, org_url=url, online=False, supported_only=False)

    ingredients = _safe_call(scraper.ingredients, [])
    return ScrapedRecipe(
        title=_safe_call(scraper.title, "Untitled recipe"),
        description=_safe_call(scraper.description, ""),
        ingredients=ingredients if isinstance(ingredients, list) else [ingredients],
        instructions=split_instructions(_safe_call(scraper.instructions, "")),
        total_time=_to_minutes(_safe_call(scraper.total_time, None)),
        prep_time=_to_minutes(_safe_call(scraper.prep_time, None)),
        cook_time=_to_minutes(_safe_call(scraper.cook_time, None)),
        servings=_parse_servings(_safe_call(scraper.yields, None)),
        image_url=_safe_call(scraper.image, None),
        source_url=url,
    )


async def scrape_recipe(url: str) -> ScrapedRecipe:
    """Scrape a recipe from a URL (any site recipe-scrapers understands).

    Args:
        url: The recipe page URL.

    Returns:
        The scraped recipe.
    """
    html = await fetch_html(url)
    recipe = parse_recipe_html(html, url)
    _LOGGER.info("Scraped %r from %s (%d steps)", recipe.title, url, len(recipe.instructions))
    return recipe
