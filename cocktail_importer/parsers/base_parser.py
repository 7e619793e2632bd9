"""
Base Recipe Parser.

This module defines the base interface that all recipe parsers must implement.
"""
from __future__ import annotations

from abc import ABC, abstractmethod

from ..models.recipe import ParsedRecipes


class BaseRecipeParser(ABC):
    """Abstract base class for recipe parsers.

    All recipe parsers must implement the parse_recipes method to convert
    raw text into a ParsedRecipes envelope.
    """

    @abstractmethod
    def parse_recipes(self, text: str) -> ParsedRecipes:
        """Parse every recipe found in text.

        Args:
            text: The raw recipe text to parse

        Returns:
            The recipes found; an empty envelope if there are none
        """
