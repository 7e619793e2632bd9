"""Exceptions raised by the Cocktail Importer."""
from __future__ import annotations


class RecipeImporterError(Exception):
    """Base class for all importer errors."""


class RecipeParseError(RecipeImporterError, ValueError):
    """Raised when recipe text cannot be turned into recipe data."""


class FragmentParseError(RecipeParseError):
    """Raised when a JSON fragment stays unparseable after soft repair."""

    def __init__(self, message: str, fragment: str) -> None:
        super().__init__(message)
        self.fragment = fragment


class InvalidEnvelopeError(RecipeParseError):
    """Raised when the top-level ``{"recipes": [...]}`` wrapper is broken."""


class AICompletionError(RecipeImporterError):
    """Raised when the language model returns no usable completion."""
