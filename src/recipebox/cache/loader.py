"""Image loader — cache lookup, else fetch, decode and populate both tiers."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from enum import StrEnum

import httpx
from PIL import Image

from recipebox.cache.keys import Locator
from recipebox.cache.manager import ImageCache
from recipebox.concurrency.singleflight import SingleFlight
from recipebox.config import defaults
from recipebox.errors.exceptions import ImageLoadError
from recipebox.utils.image import decode_image

logger = logging.getLogger(__name__)


class LoaderState(StrEnum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


class ImageLoader:
    """Loads one image for one observer.

    State machine: idle → loading → loaded | failed. A cache hit goes
    straight from idle to loaded without touching the network. Nothing is
    written to the cache until the fetched bytes have been fully decoded,
    so cancel() never leaves a partial entry behind.

    Two loaders for the same locator fetch independently unless they share
    a SingleFlight registry.
    """

    def __init__(
        self,
        locator: Locator | None,
        cache: ImageCache,
        client: httpx.AsyncClient | None = None,
        single_flight: SingleFlight[bytes] | None = None,
        on_change: Callable[[ImageLoader], None] | None = None,
        timeout: float = defaults.DEFAULT_IMAGE_TIMEOUT,
    ) -> None:
        self._locator = locator
        self._cache = cache
        self._client = client
        self._owns_client = client is None
        self._single_flight = single_flight
        self._on_change = on_change
        self._timeout = timeout
        self._task: asyncio.Task[Image.Image | None] | None = None

        self.state = LoaderState.IDLE
        self.image: Image.Image | None = None
        self.error: ImageLoadError | None = None

    @property
    def locator(self) -> Locator | None:
        return self._locator

    @property
    def is_loading(self) -> bool:
        return self.state == LoaderState.LOADING

    def start(self) -> asyncio.Task[Image.Image | None]:
        """Schedule load() on the running loop; reuses a pending task."""
        if self._task is None or self._task.done():
            self._task = asyncio.ensure_future(self.load())
        return self._task

    async def load(self) -> Image.Image | None:
        """Resolve the image from cache or network. Returns None on failure."""
        if self._locator is None:
            self._fail(ImageLoadError("No URL provided", error_type="no_url"))
            return None

        cached = await self._cache.aimage_for(self._locator)
        if cached is not None:
            self._succeed(cached)
            return cached

        self.error = None
        self._transition(LoaderState.LOADING)
        try:
            data = await self._fetch()
            img = _decode(data, self._locator)
        except ImageLoadError as e:
            logger.warning("Failed to load image %s: %s", self._locator, e.message)
            self._fail(e)
            return None
        except asyncio.CancelledError:
            if self.state == LoaderState.LOADING:
                self._transition(LoaderState.IDLE)
            raise

        await self._cache.astore_image(img, self._locator)
        self._succeed(img)
        return img

    def cancel(self) -> None:
        """Abort an in-flight load. Safe to call in any state."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None
        if self.state == LoaderState.LOADING:
            self._transition(LoaderState.IDLE)

    async def close(self) -> None:
        self.cancel()
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    # ── Internals ──

    async def _fetch(self) -> bytes:
        if self._single_flight is None:
            return await self._download()
        key = self._cache.key_for(self._locator)
        return await self._single_flight.do(key, self._download)

    async def _download(self) -> bytes:
        client = self._get_client()
        try:
            response = await client.get(str(self._locator), timeout=self._timeout)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise ImageLoadError(str(e) or type(e).__name__, error_type="network", original=e) from e
        if response.is_error:
            raise ImageLoadError(
                f"HTTP {response.status_code} for {self._locator}",
                error_type="http_status",
                http_status=response.status_code,
            )
        if not response.content:
            raise ImageLoadError(f"No data received for {self._locator}", error_type="network")
        return response.content

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(follow_redirects=True)
        return self._client

    def _succeed(self, img: Image.Image) -> None:
        self.image = img
        self.error = None
        self._transition(LoaderState.LOADED)

    def _fail(self, error: ImageLoadError) -> None:
        self.error = error
        self._transition(LoaderState.FAILED)

    def _transition(self, state: LoaderState) -> None:
        self.state = state
        if self._on_change is not None:
            self._on_change(self)


def _decode(data: bytes, locator: Locator) -> Image.Image:
    try:
        return decode_image(data)
    except ValueError as e:
        raise ImageLoadError(f"Malformed image data from {locator}: {e}", error_type="decode") from e
