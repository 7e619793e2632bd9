"""
Ingredient Formatter and Pitcher Scaling.

This module handles formatting of parsed cocktail ingredients for display and
scaling a single-serve recipe up to a batch (pitcher) volume. Scaled amounts
are rounded to the nearest quarter ounce, and the batch never overshoots the
target volume.
"""
from __future__ import annotations

import logging

from pydantic import BaseModel, Field

from ..const import DEFAULT_PITCHER_OZ, PITCHER_ROUNDING_OZ
from ..models.recipe import Ingredient
from ..unit_converter import convert_to_oz, format_quantity, quantity_to_float

_LOGGER = logging.getLogger(__name__)

# Units whose singular form reads wrong next to a quantity other than one
PLURAL_UNITS = {
    "dash": "dashes",
    "drop": "drops",
    "slice": "slices",
    "wedge": "wedges",
}

PART_UNITS = ("part", "parts")


class ScaledIngredient(BaseModel):
    """An ingredient converted to ounces and scaled to the pitcher volume."""

    item: str
    amount_oz: float
    original_quantity: str
    original_unit: str


class PitcherScale(BaseModel):
    """Result of scaling a recipe up to a pitcher."""

    ingredients: list[ScaledIngredient] = Field(default_factory=list)
    total_oz: float = 0.0
    target_oz: float = DEFAULT_PITCHER_OZ


def format_ingredient(ingredient: Ingredient) -> str:
    """Format an ingredient as a single display line.

    Examples:
        >>> format_ingredient(Ingredient(quantity="3/4", unit="oz", item="Lime juice", notes="fresh"))
        '3/4 oz Lime juice (fresh)'
        >>> format_ingredient(Ingredient(quantity="2", unit="dash", item="Angostura bitters"))
        '2 dashes Angostura bitters'
    """
    unit = ingredient.unit
    amount = quantity_to_float(ingredient.quantity)
    if unit.lower() in PLURAL_UNITS and amount is not None and amount != 1:
        unit = PLURAL_UNITS[unit.lower()]

    parts = [ingredient.quantity]
    if unit:
        parts.append(unit)
    parts.append(ingredient.item)

    line = " ".join(parts)
    if ingredient.notes:
        line += f" ({ingredient.notes})"
    return line


def _round_to_increment(oz: float) -> float:
    return round(oz / PITCHER_ROUNDING_OZ) * PITCHER_ROUNDING_OZ


def scale_to_pitcher(
    ingredients: list[Ingredient],
    target_oz: float = DEFAULT_PITCHER_OZ
) -> PitcherScale:
    """Scale a recipe's measurable ingredients to fill a pitcher.

    When any ingredient is measured in parts, parts and converted ounces share
    one ratio. Ingredients without a numeric quantity or a volume unit (a
    garnish, say) are left out.

    Args:
        ingredients: The recipe's parsed ingredients
        target_oz: Pitcher volume in fluid ounces

    Returns:
        The scaled ingredients with their rounded total

    Raises:
        ValueError: If target_oz is not positive
    """
    if target_oz <= 0:
        raise ValueError("Pitcher volume must be positive")

    measured = []
    for ingredient in ingredients:
        amount = quantity_to_float(ingredient.quantity)
        if amount is None:
            _LOGGER.debug("Leaving out %s: quantity %r is not numeric",
                          ingredient.item, ingredient.quantity)
            continue

        if ingredient.unit.lower() in PART_UNITS:
            base = amount
        else:
            base = convert_to_oz(amount, ingredient.unit)
            if base is None:
                _LOGGER.debug("Leaving out %s: unit %r is not a volume",
                              ingredient.item, ingredient.unit)
                continue
        measured.append((ingredient, base))

    base_total = sum(base for _, base in measured)
    if base_total <= 0:
        _LOGGER.warning("No measurable ingredients to scale")
        return PitcherScale(target_oz=target_oz)

    factor = target_oz / base_total
    _LOGGER.info("Scaling %d ingredients to %.2f oz (factor: %.2f)",
                 len(measured), target_oz, factor)

    scaled = [
        ScaledIngredient(
            item=ingredient.item,
            amount_oz=_round_to_increment(base * factor),
            original_quantity=ingredient.quantity,
            original_unit=ingredient.unit,
        )
        for ingredient, base in measured
    ]

    # Rounding can push the total over the pitcher; trim the largest pour
    total = sum(ing.amount_oz for ing in scaled)
    while total > target_oz and any(ing.amount_oz > PITCHER_ROUNDING_OZ for ing in scaled):
        idx = max(
            (i for i, ing in enumerate(scaled) if ing.amount_oz > PITCHER_ROUNDING_OZ),
            key=lambda i: scaled[i].amount_oz,
        )
        scaled[idx] = scaled[idx].model_copy(update={
            "amount_oz": _round_to_increment(scaled[idx].amount_oz - PITCHER_ROUNDING_OZ),
        })
        total = sum(ing.amount_oz for ing in scaled)

    return PitcherScale(ingredients=scaled, total_oz=total, target_oz=target_oz)


def format_pitcher(scale: PitcherScale) -> str:
    """Format a pitcher scale as display lines followed by the total."""
    lines = [f"{format_quantity(ing.amount_oz)} oz {ing.item}" for ing in scale.ingredients]
    lines.append(f"\nTotal: {format_quantity(scale.total_oz)} oz "
                 f"(target: {format_quantity(scale.target_oz)} oz)")
    return "\n".join(lines)
