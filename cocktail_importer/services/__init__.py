"""Services package."""
from .ingredient_formatter import (
    PitcherScale,
    ScaledIngredient,
    format_ingredient,
    format_pitcher,
    scale_to_pitcher,
)
from .recipe_service import extract_recipes_from_text, extract_recipes_from_url
from .recipe_store import JsonFileRecipeStore, RecipeStore, slugify

__all__ = [
    "JsonFileRecipeStore",
    "PitcherScale",
    "RecipeStore",
    "ScaledIngredient",
    "extract_recipes_from_text",
    "extract_recipes_from_url",
    "format_ingredient",
    "format_pitcher",
    "scale_to_pitcher",
    "slugify",
]
