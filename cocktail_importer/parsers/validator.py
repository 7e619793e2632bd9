"""
Schema validation of merged recipe envelopes.

A structurally broken envelope fails as a whole. Inside a valid envelope,
each recipe and each ingredient is checked on its own so that one bad entry
never costs the rest of the batch.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable

from pydantic import ValidationError

from ..exceptions import InvalidEnvelopeError
from ..models.recipe import Ingredient, ParsedRecipes, Recipe, SkippedItem

_LOGGER = logging.getLogger(__name__)


def describe_validation_error(error: ValidationError) -> str:
    """Turn a pydantic ValidationError into a short, readable cause."""
    causes = []
    for detail in error.errors():
        loc = ".".join(str(part) for part in detail["loc"])
        if detail["type"] == "missing":
            causes.append(f"missing {loc}")
        elif detail["type"] in ("too_short", "string_too_short"):
            causes.append(f"{loc} must not be empty")
        elif loc:
            causes.append(f"{loc}: {detail['msg']}")
        else:
            causes.append(detail["msg"])
    return "; ".join(causes)


def validate_envelope(obj: Any) -> list[Any]:
    """Check the ``{"recipes": [...]}`` wrapper and return the raw recipe list.

    Raises:
        InvalidEnvelopeError: If ``obj`` is not a dict with a ``recipes`` list
    """
    if not isinstance(obj, dict):
        raise InvalidEnvelopeError(
            f"Expected an object with a 'recipes' list, got {type(obj).__name__}")
    if "recipes" not in obj:
        raise InvalidEnvelopeError("Missing 'recipes' key")

    recipes = obj["recipes"]
    if not isinstance(recipes, list):
        raise InvalidEnvelopeError(
            f"'recipes' must be a list, got {type(recipes).__name__}")
    return recipes


def _validate_ingredients(
    raw_ingredients: list[Any],
    recipe_index: int,
    recipe_name: str | None,
    skipped: list[SkippedItem],
) -> list[Ingredient]:
    kept = []
    for idx, raw_ingredient in enumerate(raw_ingredients):
        try:
            kept.append(Ingredient.model_validate(raw_ingredient))
        except ValidationError as e:
            cause = describe_validation_error(e)
            _LOGGER.debug("Skipping ingredient %d of recipe %d: %s",
                          idx, recipe_index, cause)
            skipped.append(SkippedItem(
                kind="ingredient",
                index=idx,
                recipe_index=recipe_index,
                name=recipe_name,
                cause=cause,
            ))
    return kept


def _validate_recipe(idx: int, raw: Any, skipped: list[SkippedItem]) -> Recipe | None:
    if not isinstance(raw, dict):
        skipped.append(SkippedItem(
            kind="recipe", index=idx,
            cause=f"expected an object, got {type(raw).__name__}"))
        return None

    name = raw.get("name") if isinstance(raw.get("name"), str) else None

    if isinstance(raw.get("ingredients"), list):
        raw = {**raw, "ingredients": _validate_ingredients(
            raw["ingredients"], idx, name, skipped)}

    try:
        return Recipe.model_validate(raw)
    except ValidationError as e:
        cause = describe_validation_error(e)
        _LOGGER.warning("Skipping recipe %d (%s): %s", idx, name or "unnamed", cause)
        skipped.append(SkippedItem(kind="recipe", index=idx, name=name, cause=cause))
        return None


def validate_recipes(
    obj: Any, skipped: Iterable[SkippedItem] = ()
) -> ParsedRecipes:
    """Validate a merged envelope, filtering out invalid recipes and ingredients.

    Args:
        obj: The merged ``{"recipes": [...]}`` object
        skipped: Items already rejected by earlier stages, carried into the result

    Returns:
        ParsedRecipes with the valid recipes and a record of everything skipped

    Raises:
        InvalidEnvelopeError: If the envelope itself is malformed
    """
    raw_recipes = validate_envelope(obj)
    skipped_items = list(skipped)

    recipes = []
    for idx, raw in enumerate(raw_recipes):
        recipe = _validate_recipe(idx, raw, skipped_items)
        if recipe is not None:
            recipes.append(recipe)

    return ParsedRecipes(recipes=recipes, skipped=skipped_items)
