"""
Recipe Import Service.

This module orchestrates importing cocktail recipes from URLs and pasted
text, deciding whether structured page data can be parsed directly or the
content has to go through the AI model first.
"""
from __future__ import annotations

import logging
from typing import Any

from ..const import (
    EXTRACTION_METHOD_AI,
    EXTRACTION_METHOD_DIRECT,
    EXTRACTION_METHOD_JSONLD,
    MIN_TEXT_LENGTH,
)
from ..extractors.ai_client import CompletionClient
from ..extractors.prompts import RECIPE_IMPORT_SYSTEM_PROMPT
from ..extractors.scraper import fetch_recipe_text
from ..models.recipe import ParsedRecipes
from ..parsers.recipe_parser import RecipeParser

_LOGGER = logging.getLogger(__name__)


def _result(parsed: ParsedRecipes, method: str) -> dict[str, Any]:
    result = parsed.model_dump()
    result["extraction_method"] = method
    result["used_ai"] = method == EXTRACTION_METHOD_AI
    return result


def _complete_and_parse(text: str, completion_client: CompletionClient,
                        parser: RecipeParser) -> ParsedRecipes:
    raw = completion_client.complete(RECIPE_IMPORT_SYSTEM_PROMPT, text)
    _LOGGER.debug("Received %d characters of AI output", len(raw))
    return parser.parse_recipes(raw)


def extract_recipes_from_url(
    url: str,
    completion_client: CompletionClient,
    parser: RecipeParser | None = None
) -> dict[str, Any]:
    """Import every cocktail recipe found at a URL.

    This function orchestrates the import:
    1. Fetches recipe text from the URL
    2. Parses a JSON-LD recipe card directly when the page has one
    3. Otherwise sends the page text to the AI model and parses its reply

    Args:
        url: Recipe page URL
        completion_client: Model client, used only when the page has no JSON-LD
        parser: Parser to use; a fresh RecipeParser by default

    Returns:
        Parsed recipes and skipped items, plus extraction metadata

    Raises:
        ValueError: If the URL is rejected or the page has too little text
        Exception: Fetch and completion errors are logged and re-raised
    """
    parser = parser or RecipeParser()
    _LOGGER.debug("Starting recipe import from %s", url)

    try:
        recipe_text, is_jsonld = fetch_recipe_text(url)

        # JSON-LD cards are exempt from the minimum length
        if not is_jsonld and len(recipe_text.strip()) < MIN_TEXT_LENGTH:
            raise ValueError(
                f"Insufficient text content from {url} (length: {len(recipe_text)})")

        if is_jsonld:
            _LOGGER.info("Using direct JSON-LD parsing (skipping AI inference)")
            parsed = parser.parse_recipes(recipe_text)
            method = EXTRACTION_METHOD_JSONLD
        else:
            _LOGGER.info("Using AI extraction for unstructured text")
            parsed = _complete_and_parse(recipe_text, completion_client, parser)
            method = EXTRACTION_METHOD_AI
    except Exception as e:
        _LOGGER.error("Error importing recipes from %s: %s",
                      url, str(e), exc_info=True)
        raise

    _LOGGER.info("Imported %d recipe(s) from %s", len(parsed.recipes), url)
    return _result(parsed, method)


def extract_recipes_from_text(
    text: str,
    completion_client: CompletionClient | None = None,
    parser: RecipeParser | None = None
) -> dict[str, Any]:
    """Import cocktail recipes from pasted text or a transcript.

    Without a completion client the text is parsed as-is, which suits
    pasted JSON and markdown recipe cards.

    Raises:
        Exception: Completion errors are logged and re-raised
    """
    parser = parser or RecipeParser()

    if completion_client is None:
        parsed = parser.parse_recipes(text)
        return _result(parsed, EXTRACTION_METHOD_DIRECT)

    try:
        parsed = _complete_and_parse(text, completion_client, parser)
    except Exception as e:
        _LOGGER.error("Error importing recipes from text: %s",
                      str(e), exc_info=True)
        raise

    return _result(parsed, EXTRACTION_METHOD_AI)
