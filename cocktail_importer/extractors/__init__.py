"""Extractors package."""
from .ai_client import CompletionClient, GeminiCompletionClient, list_models
from .scraper import extract_recipe_text, fetch_recipe_text, validate_url

__all__ = [
    "CompletionClient",
    "GeminiCompletionClient",
    "extract_recipe_text",
    "fetch_recipe_text",
    "list_models",
    "validate_url",
]
