"""Merging of several decoded JSON objects into a single recipe envelope."""
from __future__ import annotations

import logging
from typing import Any, Iterable

from ..exceptions import InvalidEnvelopeError

_LOGGER = logging.getLogger(__name__)

_RECIPE_MARKERS = ("name", "ingredients", "instructions")


def looks_like_recipe(obj: Any) -> bool:
    """Return True if ``obj`` is a bare recipe object rather than an envelope."""
    return isinstance(obj, dict) and any(marker in obj for marker in _RECIPE_MARKERS)


def merge_recipe_objects(objects: Iterable[Any]) -> dict[str, list[Any]]:
    """Combine envelopes and bare recipes into one ``{"recipes": [...]}``.

    Recipes keep first-seen order across objects, then each object's own
    order. Identical recipes from different objects are all kept.

    Args:
        objects: Normalized objects, each an envelope or a single recipe

    Returns:
        A new envelope holding every recipe found

    Raises:
        InvalidEnvelopeError: If an object has a ``recipes`` key that is not a list
    """
    merged: list[Any] = []

    for idx, obj in enumerate(objects):
        if isinstance(obj, dict) and "recipes" in obj:
            recipes = obj["recipes"]
            if not isinstance(recipes, list):
                raise InvalidEnvelopeError(
                    f"Object {idx} has 'recipes' of type {type(recipes).__name__}, expected a list")
            merged.extend(recipes)
        elif looks_like_recipe(obj):
            merged.append(obj)
        else:
            _LOGGER.debug("Ignoring object %d: neither an envelope nor a recipe", idx)

    return {"recipes": merged}
