"""Free-text recipe filtering."""

from __future__ import annotations

from collections.abc import Iterable

from recipebox.recipes.models import Recipe


def filter_recipes(recipes: Iterable[Recipe], query: str | None = None) -> list[Recipe]:
    """Keep recipes whose "cuisine name" text contains every query term.

    Matching is case-insensitive; an empty query keeps everything.
    """
    recipes = list(recipes)
    terms = (query or "").lower().split()
    if not terms:
        return recipes
    return [
        r for r in recipes
        if all(term in f"{r.cuisine} {r.name}".lower() for term in terms)
    ]
