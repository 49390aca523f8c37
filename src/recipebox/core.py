"""Top-level entry point: Recipebox, the application's composition root."""

from __future__ import annotations

import asyncio
import logging
from datetime import timedelta
from pathlib import Path
from typing import Any

import httpx
from pydantic import BaseModel

from recipebox.cache.keys import Locator
from recipebox.cache.loader import ImageLoader, LoaderState
from recipebox.cache.manager import ImageCache
from recipebox.concurrency.singleflight import SingleFlight
from recipebox.config.settings import Settings
from recipebox.recipes.models import Recipe
from recipebox.recipes.search import filter_recipes
from recipebox.recipes.service import RecipeService, RecipeServiceFactory

logger = logging.getLogger(__name__)


class PrefetchResult(BaseModel):
    cached: int = 0
    downloaded: int = 0
    failed: int = 0

    @property
    def total(self) -> int:
        return self.cached + self.downloaded + self.failed


class Recipebox:
    """Owns the shared image cache, HTTP client and recipe service.

    Build one per process and hand its cache (or loaders made by
    image_loader()) to whatever needs images. The host calls
    on_low_memory(), on_background() and on_terminate() from its own
    lifecycle hooks.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        local_feed: str | Path | None = None,
        client: httpx.AsyncClient | None = None,
        cache: ImageCache | None = None,
    ) -> None:
        self._settings = settings or Settings.load()
        self._client = client or httpx.AsyncClient(follow_redirects=True)
        self._owns_client = client is None
        self._cache = cache or self._build_cache(self._settings)
        self._single_flight: SingleFlight[bytes] | None = (
            SingleFlight() if self._settings.single_flight else None
        )
        self._service = self._build_service(local_feed)

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def cache(self) -> ImageCache:
        return self._cache

    @property
    def service(self) -> RecipeService:
        return self._service

    async def load_recipes(self, query: str | None = None) -> list[Recipe]:
        """Fetch, validate and optionally filter recipes."""
        recipes = await self._service.fetch_recipes()
        return filter_recipes(recipes, query)

    def image_loader(self, locator: Locator | None, **kwargs: Any) -> ImageLoader:
        """A loader bound to the shared cache and client."""
        return ImageLoader(
            locator,
            self._cache,
            client=self._client,
            single_flight=self._single_flight,
            timeout=self._settings.image_timeout,
            **kwargs,
        )

    async def prefetch_images(
        self,
        recipes: list[Recipe],
        size: str = "small",
        concurrency: int | None = None,
    ) -> PrefetchResult:
        """Warm the cache for each recipe's photo with bounded concurrency."""
        semaphore = asyncio.Semaphore(concurrency or self._settings.prefetch_concurrency)
        result = PrefetchResult()

        async def worker(recipe: Recipe) -> None:
            url = recipe.photo_url(size)
            async with semaphore:
                if await self._cache.aimage_for(url) is not None:
                    result.cached += 1
                    return
                loader = self.image_loader(url)
                await loader.load()
                if loader.state == LoaderState.LOADED:
                    result.downloaded += 1
                else:
                    result.failed += 1

        await asyncio.gather(*(worker(r) for r in recipes))
        logger.info(
            "Prefetch done: %d cached, %d downloaded, %d failed",
            result.cached,
            result.downloaded,
            result.failed,
        )
        return result

    # ── Host lifecycle ──

    def on_low_memory(self) -> None:
        self._cache.on_low_memory()

    def on_background(self) -> int:
        return self._cache.on_background()

    def on_terminate(self) -> None:
        self._cache.on_terminate()

    async def close(self) -> None:
        self.on_terminate()
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> Recipebox:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    # ── Construction helpers ──

    @staticmethod
    def _build_cache(settings: Settings) -> ImageCache:
        return ImageCache(
            directory=settings.cache_dir,
            count_limit=settings.memory_count_limit,
            cost_limit_mb=settings.memory_cost_limit_mb,
            max_age=timedelta(days=settings.max_age_days),
            jpeg_quality=settings.jpeg_quality,
            key_scheme=settings.key_scheme,
        )

    def _build_service(self, local_feed: str | Path | None) -> RecipeService:
        factory = RecipeServiceFactory(
            default_path=local_feed,
            default_endpoint=self._settings.feed_url,
            default_client=self._client,
        )
        if local_feed is not None:
            return factory.make_local_service(skip_invalid=self._settings.skip_invalid)
        return factory.make_remote_service(
            skip_invalid=self._settings.skip_invalid,
            timeout=self._settings.feed_timeout,
            max_attempts=self._settings.feed_max_retries,
        )
