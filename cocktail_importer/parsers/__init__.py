"""Parsers package."""
from .json_extractor import extract_json_objects
from .json_repair import parse_json_fragment, soft_repair
from .key_normalizer import canonical_key, normalize_keys
from .markdown_parser import MarkdownRecipeParser, parse_ingredient_line
from .merger import merge_recipe_objects
from .recipe_parser import (
    RecipeParser,
    TimedParse,
    parse_recipes_from_ai,
    parse_recipes_from_ai_timed,
)
from .validator import validate_envelope, validate_recipes

__all__ = [
    "MarkdownRecipeParser",
    "RecipeParser",
    "TimedParse",
    "canonical_key",
    "extract_json_objects",
    "merge_recipe_objects",
    "normalize_keys",
    "parse_ingredient_line",
    "parse_json_fragment",
    "parse_recipes_from_ai",
    "parse_recipes_from_ai_timed",
    "soft_repair",
    "validate_envelope",
    "validate_recipes",
]
