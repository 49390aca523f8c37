"""Recipe link resolution with search-engine fallbacks for malformed URLs."""

from __future__ import annotations

import logging
from urllib.parse import quote

from recipebox.recipes.models import Recipe, parse_url

logger = logging.getLogger(__name__)

_GOOGLE_SEARCH = "https://www.google.com/search?q="
_YOUTUBE_SEARCH = "https://www.youtube.com/results?search_query="


class URLProvider:
    """Turns stored recipe links into openable URLs."""

    def recipe_site_url(self, value: str, recipe: Recipe) -> str:
        url = parse_url(value)
        if url is not None:
            return str(url)
        fallback = self.search_url(recipe, is_video_search=False)
        logger.info("Falling back to Google search URL: %s", fallback)
        return fallback

    def video_url(self, value: str, recipe: Recipe) -> str | None:
        if not value:
            return None
        url = parse_url(value)
        if url is not None:
            return str(url)
        fallback = self.search_url(recipe, is_video_search=True)
        logger.info("Falling back to YouTube search URL: %s", fallback)
        return fallback

    def search_url(self, recipe: Recipe, is_video_search: bool = False) -> str:
        suffix = "recipe video" if is_video_search else "recipe"
        query = f"{recipe.name} {recipe.cuisine} {suffix}"
        base = _YOUTUBE_SEARCH if is_video_search else _GOOGLE_SEARCH
        return base + quote(query, safe="")
