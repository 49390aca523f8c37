"""Recipe feed — DTO validation, data sources, search and link fallbacks."""

from recipebox.recipes.models import Recipe, RecipeDTO, RecipesDTO
from recipebox.recipes.search import filter_recipes
from recipebox.recipes.service import RecipeService, RecipeServiceFactory
from recipebox.recipes.sources import (
    LocalRecipeDataSource,
    RemoteRecipeDataSource,
    StaticRecipeDataSource,
)
from recipebox.recipes.urls import URLProvider

__all__ = [
    "Recipe",
    "RecipeDTO",
    "RecipesDTO",
    "RecipeService",
    "RecipeServiceFactory",
    "RemoteRecipeDataSource",
    "LocalRecipeDataSource",
    "StaticRecipeDataSource",
    "URLProvider",
    "filter_recipes",
]
