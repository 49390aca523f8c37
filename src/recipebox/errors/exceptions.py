"""Custom exception hierarchy for recipebox."""

from __future__ import annotations

from typing import Any


class RecipeboxError(Exception):
    """Base exception for all recipebox errors."""

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        super().__init__(message)
        self.message = message


class RecipeValidationError(RecipeboxError):
    """A recipe record (or the list holding it) failed structural validation."""

    def __init__(self, message: str = "", kind: str = "invalid_recipe") -> None:
        super().__init__(message)
        self.kind = kind


class RecipeServiceError(RecipeboxError):
    """Error surfaced by the recipe service to its caller.

    Subclasses keep network, decoding and validation failures apart so the
    caller can message them differently.
    """

    kind = "service_error"


class NetworkError(RecipeServiceError):
    """Transport failure, non-2xx status, or an empty body."""

    kind = "network_error"

    def __init__(
        self,
        message: str = "",
        http_status: int | None = None,
        original: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.http_status = http_status
        self.original = original


class DecodingError(RecipeServiceError):
    """The feed body was not JSON, or not the expected shape."""

    kind = "decoding_error"


class ValidationError(RecipeServiceError):
    """The feed decoded but its records failed validation."""

    kind = "validation_error"


class ImageLoadError(RecipeboxError):
    """An image loader could not produce an image.

    error_type is one of: no_url, network, http_status, decode.
    """

    def __init__(
        self,
        message: str = "",
        error_type: str = "network",
        http_status: int | None = None,
        original: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.error_type = error_type
        self.http_status = http_status
        self.original = original
