"""Error handling — exception hierarchy shared by the service and loaders."""

from recipebox.errors.exceptions import (
    DecodingError,
    ImageLoadError,
    NetworkError,
    RecipeboxError,
    RecipeServiceError,
    RecipeValidationError,
    ValidationError,
)

__all__ = [
    "RecipeboxError",
    "RecipeServiceError",
    "NetworkError",
    "DecodingError",
    "ValidationError",
    "RecipeValidationError",
    "ImageLoadError",
]
