"""Models package."""
from .recipe import Ingredient, ParsedRecipes, Recipe, SkippedItem

__all__ = ["Ingredient", "ParsedRecipes", "Recipe", "SkippedItem"]
