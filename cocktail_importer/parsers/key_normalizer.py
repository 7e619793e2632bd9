"""
Key normalization for parsed-but-unvalidated recipe objects.

AI output regularly mislabels fields: markdown labels leak into JSON keys
("Ingredients:"), synonyms appear ("steps", "glass_type"), and sometimes a
key is lost entirely and only whitespace remains. This module maps those
variants onto the canonical recipe vocabulary without ever dropping data.
"""
from __future__ import annotations

import logging
import re
from typing import Any

_LOGGER = logging.getLogger(__name__)

RECIPE_CONTEXT = "recipe"
INGREDIENT_CONTEXT = "ingredient"
OTHER_CONTEXT = "other"

# Keys are compared after lowercasing and dropping everything but letters
RECIPE_KEY_ALIASES = {
    "recipes": "recipes",
    "cocktails": "recipes",
    "drinks": "recipes",
    "recipelist": "recipes",
    "name": "name",
    "recipename": "name",
    "cocktailname": "name",
    "title": "name",
    "description": "description",
    "desc": "description",
    "summary": "description",
    "ingredients": "ingredients",
    "ingredient": "ingredients",
    "ingredientlist": "ingredients",
    "ingrdnts": "ingredients",
    "instructions": "instructions",
    "instruction": "instructions",
    "steps": "instructions",
    "method": "instructions",
    "directions": "instructions",
    "preparation": "instructions",
    "glassware": "glassware",
    "glass": "glassware",
    "glasstype": "glassware",
    "garnish": "garnish",
    "garnishes": "garnish",
    "tags": "tags",
    "tag": "tags",
}

INGREDIENT_KEY_ALIASES = {
    "quantity": "quantity",
    "amount": "quantity",
    "qty": "quantity",
    "measure": "quantity",
    "unit": "unit",
    "units": "unit",
    "measurement": "unit",
    "item": "item",
    "ingredient": "item",
    "name": "item",
    "notes": "notes",
    "note": "notes",
    "comment": "notes",
    "comments": "notes",
}

_ALIASES = {
    RECIPE_CONTEXT: RECIPE_KEY_ALIASES,
    INGREDIENT_CONTEXT: INGREDIENT_KEY_ALIASES,
}

_INGREDIENT_FIELDS = ("quantity", "unit", "item")
_NON_LETTERS_RE = re.compile(r"[^a-z]")


def canonical_key(key: str, context: str = RECIPE_CONTEXT) -> str | None:
    """Return the canonical field name for ``key``, or None if unrecognized.

    Examples:
        >>> canonical_key("Ingredients:")
        'ingredients'
        >>> canonical_key("glass_type")
        'glassware'
        >>> canonical_key("amount", "ingredient")
        'quantity'
    """
    aliases = _ALIASES.get(context)
    if not aliases:
        return None
    return aliases.get(_NON_LETTERS_RE.sub("", key.lower()))


def _recover_blank_key(value: Any) -> str | None:
    """Guess the field a blank key stood for from the shape of its value."""
    if not isinstance(value, list) or not value:
        return None

    first = value[0]
    if isinstance(first, dict) and any(
            field in first or f"{field}:" in first for field in _INGREDIENT_FIELDS):
        return "ingredients"
    if all(isinstance(entry, str) for entry in value):
        return "instructions"
    return None


def _child_context(key: str, parent_context: str) -> str:
    if parent_context != RECIPE_CONTEXT:
        return OTHER_CONTEXT
    if key == "ingredients":
        return INGREDIENT_CONTEXT
    if key == "recipes":
        return RECIPE_CONTEXT
    return OTHER_CONTEXT


def _normalize_value(value: Any, context: str) -> Any:
    if isinstance(value, list):
        return [_normalize_value(entry, context) for entry in value]
    if isinstance(value, dict):
        return _normalize_dict(value, context)
    if isinstance(value, str):
        return value.strip()
    return value


def _normalize_dict(obj: dict[str, Any], context: str) -> dict[str, Any]:
    aliases = _ALIASES.get(context, {})
    canonical_names = set(aliases.values())

    # Keys that are already canonical always keep their slot
    used = {key for key in obj if key in canonical_names}
    renamed: dict[str, str] = {}

    for key, value in obj.items():
        if key in used:
            renamed[key] = key
            continue

        if key.strip():
            target = canonical_key(key, context)
        elif context == RECIPE_CONTEXT:
            target = _recover_blank_key(value)
        else:
            target = None

        if target and target not in used:
            used.add(target)
            renamed[key] = target
            if key != target:
                _LOGGER.debug("Renamed key %r to %r", key, target)
        else:
            renamed[key] = key

    return {
        renamed[key]: _normalize_value(value, _child_context(renamed[key], context))
        for key, value in obj.items()
    }


def normalize_keys(obj: Any) -> Any:
    """Rewrite variant keys to canonical recipe field names.

    Works on envelopes (``{"recipes": [...]}``), bare recipes and lists of
    either. Unrecognized keys are left untouched, a variant is only renamed
    when its canonical name is still free, and strings are trimmed. The
    input is not modified; applying the function twice gives the same
    result as applying it once.

    Args:
        obj: Decoded JSON of unknown shape

    Returns:
        A normalized copy of ``obj``
    """
    return _normalize_value(obj, RECIPE_CONTEXT)
