"""
Recipe data models for the Cocktail Importer.

This module defines the Pydantic models used to structure cocktail recipes
extracted from AI responses, pasted text and scraped pages. The models are
also the validation schema: anything that needs to check recipe-shaped data
can call ``ParsedRecipes.model_validate`` directly.
"""
from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, field_validator

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class Ingredient(BaseModel):
    """A structured representation of a single cocktail ingredient.

    Attributes:
        quantity: The amount as written, fractions preserved (e.g., '1 1/2')
        unit: Canonical unit abbreviation (e.g., 'oz', 'dashes'), may be empty
        item: The ingredient name (e.g., 'Bourbon whiskey')
        notes: Optional qualifier (e.g., 'fresh squeezed', 'for garnish')
    """

    model_config = ConfigDict(frozen=True)

    quantity: NonEmptyStr = Field(
        description="The amount, e.g. '2', '3/4' or '1 1/2'"
    )
    unit: str = Field(
        default="",
        description="The unit of measurement, e.g. 'oz', 'ml', 'dashes'"
    )
    item: NonEmptyStr = Field(
        description="The ingredient name, e.g. 'Fresh lime juice'"
    )
    notes: str | None = Field(
        default=None,
        description="Free-text qualifier, e.g. 'for garnish'"
    )

    @field_validator("quantity", mode="before")
    @classmethod
    def _coerce_numeric_quantity(cls, value: Any) -> Any:
        # Models often emit bare JSON numbers; bools stay invalid.
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("unit", mode="before")
    @classmethod
    def _empty_unit(cls, value: Any) -> Any:
        return "" if value is None else value


class Recipe(BaseModel):
    """The schema for a single cocktail recipe."""

    model_config = ConfigDict(frozen=True)

    name: NonEmptyStr = Field(description="The title of the recipe")
    description: str = Field(default="", description="Short description")
    ingredients: list[Ingredient] = Field(
        min_length=1,
        description="Ingredients in the order they were listed"
    )
    instructions: list[NonEmptyStr] = Field(
        min_length=1,
        description="Preparation steps in order"
    )
    glassware: str | None = Field(default=None, description="Serving glass")
    garnish: str | None = Field(default=None, description="Garnish")
    tags: list[str] = Field(default_factory=list, description="Free-form tags")

    @field_validator("description", mode="before")
    @classmethod
    def _empty_description(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("tags", mode="before")
    @classmethod
    def _empty_tags(cls, value: Any) -> Any:
        return [] if value is None else value


class SkippedItem(BaseModel):
    """Why a piece of the input did not make it into the result."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["object", "recipe", "ingredient"]
    index: int
    recipe_index: int | None = None
    name: str | None = None
    cause: str


class ParsedRecipes(BaseModel):
    """The top-level result of a parse: the envelope plus what was skipped.

    An empty ``recipes`` list means no recipe could be extracted; it is a
    valid outcome, not an error.
    """

    model_config = ConfigDict(frozen=True)

    recipes: list[Recipe] = Field(default_factory=list)
    skipped: list[SkippedItem] = Field(default_factory=list)

    def summary(self) -> str:
        """Describe the outcome, e.g. '3 of 5 recipes imported; 2 skipped: ...'."""
        rejected = [s for s in self.skipped if s.kind != "ingredient"]
        imported = len(self.recipes)
        if not rejected:
            noun = "recipe" if imported == 1 else "recipes"
            return f"{imported} {noun} imported"

        total = imported + len(rejected)
        causes = "; ".join(dict.fromkeys(s.cause for s in rejected))
        return f"{imported} of {total} recipes imported; {len(rejected)} skipped: {causes}"
