"""
Tolerant recipe parser for AI responses.

Handles single and multi-recipe responses, JSON wrapped in prose, several
JSON blobs in one reply, mislabelled keys and markdown recipe cards. The
parser never raises: untrusted input that cannot be read yields an empty
envelope and a logged diagnostic.
"""
from __future__ import annotations

import logging
import time
from typing import Any, NamedTuple

from ..exceptions import FragmentParseError, RecipeParseError
from ..models.recipe import Ingredient, ParsedRecipes, Recipe, SkippedItem
from ..unit_converter import normalize_quantity, standardize_unit
from .base_parser import BaseRecipeParser
from .json_extractor import extract_json_objects
from .json_repair import parse_json_fragment
from .key_normalizer import normalize_keys
from .markdown_parser import MarkdownRecipeParser
from .merger import merge_recipe_objects
from .validator import validate_recipes

_LOGGER = logging.getLogger(__name__)


class TimedParse(NamedTuple):
    """Result of a parse together with its wall-clock duration."""

    result: ParsedRecipes
    time_ms: float


def normalize_ingredient(ingredient: Ingredient) -> Ingredient:
    """Return a copy with a canonical unit and fraction-style quantity."""
    return ingredient.model_copy(update={
        "quantity": normalize_quantity(ingredient.quantity),
        "unit": standardize_unit(ingredient.unit),
    })


def normalize_recipe(recipe: Recipe) -> Recipe:
    """Return a copy of recipe with every ingredient normalized."""
    return recipe.model_copy(update={
        "ingredients": [normalize_ingredient(ing) for ing in recipe.ingredients],
    })


class RecipeParser(BaseRecipeParser):
    """Turns raw AI output into validated, normalized recipes.

    Pipeline: extract JSON spans, decode each (with one soft-repair retry),
    normalize keys, merge, validate. When no JSON object decodes the markdown
    fallback reads the text instead, keeping the record of failed objects.
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        """Initialize the parser.

        Args:
            logger: Where diagnostics go; defaults to this module's logger
        """
        self.logger = logger or _LOGGER
        self.markdown_parser = MarkdownRecipeParser()

    def _decode_fragments(self, fragments: list[str]) -> tuple[list[Any], list[SkippedItem]]:
        objects = []
        skipped = []
        for idx, fragment in enumerate(fragments):
            try:
                objects.append(normalize_keys(parse_json_fragment(fragment)))
            except (FragmentParseError, RecursionError) as e:
                cause = str(e) if isinstance(e, FragmentParseError) else "Object nested too deeply"
                self.logger.warning("Skipping JSON object %d of %d: %s",
                                    idx + 1, len(fragments), cause)
                skipped.append(SkippedItem(kind="object", index=idx, cause=cause))
        return objects, skipped

    def _parse(self, text: str) -> ParsedRecipes:
        objects, skipped = self._decode_fragments(extract_json_objects(text))

        if objects:
            validated = validate_recipes(merge_recipe_objects(objects), skipped)
        else:
            self.logger.debug("No valid JSON object found, using markdown fallback")
            cards = self.markdown_parser.extract_recipes(text)
            validated = validate_recipes({"recipes": cards}, skipped)

        return validated.model_copy(update={
            "recipes": [normalize_recipe(recipe) for recipe in validated.recipes],
        })

    def parse_recipes(self, text: str) -> ParsedRecipes:
        """Parse every recipe in an AI response or pasted text.

        Args:
            text: Untrusted raw text

        Returns:
            The recipes found, plus a record of skipped content. Never raises.
        """
        if not isinstance(text, str):
            self.logger.warning("Expected recipe text as str, got %s",
                                type(text).__name__)
            return ParsedRecipes()

        try:
            result = self._parse(text)
        except RecipeParseError as e:
            self.logger.error("Rejected AI recipe response: %s\nRaw input (%d characters):\n%s",
                              e, len(text), text)
            return ParsedRecipes()
        except Exception as e:
            self.logger.error("Unexpected error parsing AI recipe response: %s\nRaw input (%d characters):\n%s",
                              e, len(text), text, exc_info=True)
            return ParsedRecipes()

        self.logger.info("Parsed %d characters of AI output: %s",
                         len(text), result.summary())
        return result


def parse_recipes_from_ai(raw: str, logger: logging.Logger | None = None) -> ParsedRecipes:
    """Parse recipes from raw AI output. See RecipeParser.parse_recipes."""
    return RecipeParser(logger=logger).parse_recipes(raw)


def parse_recipes_from_ai_timed(raw: str, logger: logging.Logger | None = None) -> TimedParse:
    """Parse recipes and measure how long the call took, in milliseconds."""
    start = time.perf_counter()
    result = parse_recipes_from_ai(raw, logger=logger)
    return TimedParse(result=result, time_ms=(time.perf_counter() - start) * 1000)
