"""recipebox — recipe feed client with a two-tier image cache."""

from recipebox.cache.loader import ImageLoader, LoaderState
from recipebox.cache.manager import ImageCache
from recipebox.config.settings import Settings
from recipebox.core import PrefetchResult, Recipebox
from recipebox.recipes.models import Recipe

__version__ = "0.1.0"

__all__ = [
    "Recipebox",
    "ImageCache",
    "ImageLoader",
    "LoaderState",
    "PrefetchResult",
    "Recipe",
    "Settings",
]
