"""Recipe data sources — remote JSON endpoint, local file, static payload."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Protocol

import httpx
from pydantic import ValidationError as PydanticValidationError
from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from recipebox.config import defaults
from recipebox.errors.exceptions import DecodingError, NetworkError
from recipebox.recipes.models import RecipesDTO

logger = logging.getLogger(__name__)


class RecipeDataSource(Protocol):
    async def fetch(self) -> RecipesDTO: ...


def decode_feed(data: bytes | str) -> RecipesDTO:
    """Parse a feed body, raising DecodingError for bad JSON or shape."""
    try:
        return RecipesDTO.model_validate_json(data)
    except PydanticValidationError as e:
        raise DecodingError(f"Malformed recipe feed: {e.error_count()} error(s)") from e


def _is_transient(exc: BaseException) -> bool:
    """Transport failures and 5xx responses are worth another attempt."""
    if not isinstance(exc, NetworkError):
        return False
    if exc.http_status is not None:
        return exc.http_status >= 500
    return isinstance(exc.original, httpx.TransportError)


class RemoteRecipeDataSource:
    """Fetches the feed with an HTTP GET, retrying transient failures."""

    def __init__(
        self,
        endpoint: str = defaults.DEFAULT_FEED_URL,
        client: httpx.AsyncClient | None = None,
        timeout: float = defaults.DEFAULT_FEED_TIMEOUT,
        max_attempts: int = defaults.DEFAULT_FEED_MAX_RETRIES,
        retry_wait: float = 1.0,
    ) -> None:
        self._endpoint = endpoint
        self._client = client
        self._owns_client = client is None
        self._timeout = timeout
        self._max_attempts = max_attempts
        self._retry_wait = retry_wait

    @property
    def endpoint(self) -> str:
        return self._endpoint

    async def fetch(self) -> RecipesDTO:
        retrying = AsyncRetrying(
            retry=retry_if_exception(_is_transient),
            wait=wait_exponential(multiplier=self._retry_wait, max=30),
            stop=stop_after_attempt(self._max_attempts),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                body = await self._get()
        return decode_feed(body)

    async def close(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _get(self) -> bytes:
        client = self._get_client()
        try:
            response = await client.get(self._endpoint, timeout=self._timeout)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("Recipe feed request failed: %s", e)
            raise NetworkError(str(e) or type(e).__name__, original=e) from e
        if response.is_error:
            raise NetworkError(
                f"Recipe feed returned HTTP {response.status_code}",
                http_status=response.status_code,
            )
        if not response.content:
            raise NetworkError("No data received", http_status=response.status_code)
        return response.content

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(follow_redirects=True)
        return self._client


class LocalRecipeDataSource:
    """Loads the feed from a bundled JSON file with the same schema."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    async def fetch(self) -> RecipesDTO:
        try:
            data = await asyncio.to_thread(self._path.read_bytes)
        except FileNotFoundError as e:
            raise NetworkError(f"Could not find {self._path.name}", original=e) from e
        except OSError as e:
            raise NetworkError(f"Could not read {self._path}: {e}", original=e) from e
        return decode_feed(data)


class StaticRecipeDataSource:
    """Returns a fixed payload or raises a fixed error."""

    def __init__(
        self,
        recipes: RecipesDTO | None = None,
        error: Exception | None = None,
    ) -> None:
        self._recipes = recipes or RecipesDTO()
        self._error = error

    async def fetch(self) -> RecipesDTO:
        if self._error is not None:
            raise self._error
        return self._recipes
