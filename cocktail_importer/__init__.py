"""Cocktail Importer: turn AI-generated and scraped text into cocktail recipes."""
from .models import Ingredient, ParsedRecipes, Recipe, SkippedItem
from .parsers import RecipeParser, parse_recipes_from_ai, parse_recipes_from_ai_timed

__all__ = [
    "Ingredient",
    "ParsedRecipes",
    "Recipe",
    "RecipeParser",
    "SkippedItem",
    "parse_recipes_from_ai",
    "parse_recipes_from_ai_timed",
]
