"""Recipe service — fetch from a data source, then validate."""

from __future__ import annotations

import logging
from pathlib import Path

import httpx

from recipebox.config import defaults
from recipebox.errors.exceptions import (
    RecipeServiceError,
    RecipeValidationError,
    ValidationError,
)
from recipebox.recipes.models import Recipe, RecipesDTO
from recipebox.recipes.sources import (
    LocalRecipeDataSource,
    RecipeDataSource,
    RemoteRecipeDataSource,
    StaticRecipeDataSource,
)

logger = logging.getLogger(__name__)


class RecipeService:
    """Fetches and validates recipes.

    Raises NetworkError, DecodingError or ValidationError; all three are
    RecipeServiceError subclasses.
    """

    def __init__(self, data_source: RecipeDataSource, skip_invalid: bool = False) -> None:
        self._data_source = data_source
        self._skip_invalid = skip_invalid

    @property
    def data_source(self) -> RecipeDataSource:
        return self._data_source

    async def fetch_recipes(self) -> list[Recipe]:
        try:
            dto = await self._data_source.fetch()
        except RecipeServiceError as e:
            logger.warning("Recipe fetch failed (%s): %s", e.kind, e.message)
            raise

        try:
            recipes = dto.validate_recipes(skip_invalid=self._skip_invalid)
        except RecipeValidationError as e:
            logger.warning("Recipe validation failed: %s", e.message)
            raise ValidationError(e.message) from e

        logger.info("Loaded %d recipe(s)", len(recipes))
        return recipes


class RecipeServiceFactory:
    """Builds services over the different data sources."""

    def __init__(
        self,
        default_path: str | Path | None = None,
        default_endpoint: str = defaults.DEFAULT_FEED_URL,
        default_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._default_path = default_path
        self._default_endpoint = default_endpoint
        self._default_client = default_client

    def make_local_service(
        self, path: str | Path | None = None, skip_invalid: bool = False
    ) -> RecipeService:
        resolved = path or self._default_path
        if resolved is None:
            raise ValueError("No local recipe file configured")
        return RecipeService(LocalRecipeDataSource(resolved), skip_invalid=skip_invalid)

    def make_remote_service(
        self,
        endpoint: str | None = None,
        client: httpx.AsyncClient | None = None,
        skip_invalid: bool = False,
        **source_kwargs: float,
    ) -> RecipeService:
        source = RemoteRecipeDataSource(
            endpoint=endpoint or self._default_endpoint,
            client=client or self._default_client,
            **source_kwargs,
        )
        return RecipeService(source, skip_invalid=skip_invalid)

    def make_static_service(
        self,
        recipes: RecipesDTO | None = None,
        error: Exception | None = None,
        skip_invalid: bool = False,
    ) -> RecipeService:
        return RecipeService(
            StaticRecipeDataSource(recipes=recipes, error=error), skip_invalid=skip_invalid
        )
