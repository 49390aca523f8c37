"""Recipe feed DTOs and the validated domain model."""

from __future__ import annotations

import logging
import re

import httpx
from pydantic import BaseModel, Field

from recipebox.errors.exceptions import RecipeValidationError

logger = logging.getLogger(__name__)

_UUID_RE = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)
_WHITESPACE_RE = re.compile(r"\s")


class Recipe(BaseModel):
    """Validated recipe."""

    model_config = {"frozen": True}

    id: str
    cuisine: str
    name: str
    large_photo_url: str
    small_photo_url: str
    site_url: str = ""
    video_url: str = ""

    def photo_url(self, size: str = "small") -> str:
        return self.large_photo_url if size == "large" else self.small_photo_url


class RecipeDTO(BaseModel):
    """One record as it appears in the feed."""

    uuid: str
    cuisine: str
    name: str
    photo_url_large: str
    photo_url_small: str
    source_url: str | None = None
    youtube_url: str | None = None

    def validate_recipe(self) -> Recipe:
        """Check structural rules and convert to a Recipe.

        Raises RecipeValidationError on the first rule that fails.
        """
        if not self.uuid or not _UUID_RE.match(self.uuid):
            raise RecipeValidationError(f"Invalid UUID: {self.uuid}")
        if not self.cuisine:
            raise RecipeValidationError("Cuisine cannot be empty")
        if not self.name:
            raise RecipeValidationError("Name cannot be empty")
        if not is_fetchable_url(self.photo_url_large):
            raise RecipeValidationError("Invalid large photo URL")
        if not is_fetchable_url(self.photo_url_small):
            raise RecipeValidationError("Invalid small photo URL")

        return Recipe(
            id=self.uuid,
            cuisine=self.cuisine,
            name=self.name,
            large_photo_url=self.photo_url_large,
            small_photo_url=self.photo_url_small,
            site_url=self.source_url or "",
            video_url=self.youtube_url or "",
        )


class RecipesDTO(BaseModel):
    """Top-level feed document: {"recipes": [...]}."""

    recipes: list[RecipeDTO] = Field(default_factory=list)

    def validate_recipes(self, skip_invalid: bool = False) -> list[Recipe]:
        """Validate every record.

        By default one bad record rejects the whole batch. With
        skip_invalid, bad records are logged and dropped; the batch still
        fails if nothing valid remains.
        """
        if not self.recipes:
            raise RecipeValidationError(
                "No recipes found in the data", kind="invalid_recipes_list"
            )

        result: list[Recipe] = []
        for index, dto in enumerate(self.recipes):
            try:
                result.append(dto.validate_recipe())
            except RecipeValidationError as e:
                if not skip_invalid:
                    raise RecipeValidationError(
                        f"Invalid recipe found at index {index}: {e.message}",
                        kind="invalid_recipes_list",
                    ) from e
                logger.warning("Skipping invalid recipe at index %d: %s", index, e.message)

        if not result:
            raise RecipeValidationError(
                "No valid recipes found in the data", kind="invalid_recipes_list"
            )
        return result


def is_fetchable_url(value: str) -> bool:
    """True for a non-empty absolute http(s) URL with a host."""
    url = parse_url(value)
    return url is not None and url.scheme in ("http", "https") and bool(url.host)


def parse_url(value: str) -> httpx.URL | None:
    """Parse a URL string, returning None for empty or malformed input."""
    if not value or _WHITESPACE_RE.search(value):
        return None
    try:
        return httpx.URL(value)
    except httpx.InvalidURL:
        return None
