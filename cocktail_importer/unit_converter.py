"""Unit and quantity normalization utilities for cocktail ingredients."""
from __future__ import annotations

import re

from .const import FRACTION_TOLERANCE

# Unit spellings mapped to their canonical abbreviation
UNIT_STANDARDIZATION = {
    # Ounces
    "oz": "oz",
    "oz.": "oz",
    "ounce": "oz",
    "ounces": "oz",
    "fl oz": "oz",
    "fl. oz": "oz",
    "fluid ounce": "oz",
    "fluid ounces": "oz",
    # Spoons
    "tsp": "tsp",
    "teaspoon": "tsp",
    "teaspoons": "tsp",
    "tbsp": "tbsp",
    "tbs": "tbsp",
    "tablespoon": "tbsp",
    "tablespoons": "tbsp",
    "barspoon": "barspoon",
    "barspoons": "barspoons",
    "bar spoon": "barspoon",
    "bar spoons": "barspoons",
    # Metric
    "ml": "ml",
    "milliliter": "ml",
    "milliliters": "ml",
    "millilitre": "ml",
    "millilitres": "ml",
    "cl": "cl",
    "centiliter": "cl",
    "centiliters": "cl",
    "centilitre": "cl",
    "centilitres": "cl",
    # Already canonical, kept as written
    "dash": "dash",
    "dashes": "dashes",
    "drop": "drop",
    "drops": "drops",
    "splash": "splash",
    "part": "part",
    "parts": "parts",
    "sprig": "sprig",
    "sprigs": "sprigs",
    "twist": "twist",
    "twists": "twists",
    "leaf": "leaf",
    "leaves": "leaves",
}

# Measures that are not worth standardizing but still read as a unit
# when they follow a quantity in free text
EXTRA_UNIT_WORDS = {
    "cup", "cups", "pinch", "pinches", "slice", "slices", "wedge", "wedges",
    "wheel", "wheels", "piece", "pieces", "cube", "cubes", "scoop", "scoops",
    "bottle", "bottles", "can", "cans", "handful", "rinse", "l", "liter",
    "liters", "litre", "litres", "peel", "peels", "spear", "spears",
}

# Units that can be converted to fluid ounces for pitcher scaling
UNIT_TO_OZ = {
    "oz": 1.0,
    "ml": 1 / 29.5735,
    "cl": 10 / 29.5735,
    "tbsp": 0.5,
    "tsp": 1 / 6,
    "barspoon": 1 / 6,
    "barspoons": 1 / 6,
    "dash": 0.02,
    "dashes": 0.02,
}

# Common cocktail fractions; 0 and 1 let near-whole values snap to integers
SNAP_POINTS = [
    (0.0, ""),
    (1 / 8, "1/8"),
    (1 / 4, "1/4"),
    (1 / 3, "1/3"),
    (3 / 8, "3/8"),
    (1 / 2, "1/2"),
    (5 / 8, "5/8"),
    (2 / 3, "2/3"),
    (3 / 4, "3/4"),
    (7 / 8, "7/8"),
    (1.0, ""),
]

UNICODE_FRACTIONS = {
    "¼": "1/4",
    "½": "1/2",
    "¾": "3/4",
    "⅓": "1/3",
    "⅔": "2/3",
    "⅛": "1/8",
    "⅜": "3/8",
    "⅝": "5/8",
    "⅞": "7/8",
}

_DECIMAL_RE = re.compile(r"^(?:\d+(?:\.\d+)?|\.\d+)$")
_UNICODE_FRACTION_RE = re.compile(
    r"(?:(\d+)\s*)?([" + "".join(UNICODE_FRACTIONS) + r"])")


def standardize_unit(unit: str | None) -> str:
    """
    Map a unit spelling to its canonical abbreviation.

    Args:
        unit: The unit as extracted (e.g., 'Ounces', 'teaspoon', 'splashes')

    Returns:
        The canonical unit, or the trimmed input if the unit is unknown

    Examples:
        >>> standardize_unit('ounces')
        'oz'
        >>> standardize_unit('Milliliters')
        'ml'
        >>> standardize_unit('splashes')
        'splashes'
    """
    if not unit:
        return ""

    trimmed = unit.strip()
    return UNIT_STANDARDIZATION.get(trimmed.lower(), trimmed)


def is_unit_word(word: str) -> bool:
    """Return True if ``word`` reads as a measurement unit."""
    lowered = word.strip().lower()
    return lowered in UNIT_STANDARDIZATION or lowered in EXTRA_UNIT_WORDS


def replace_unicode_fractions(text: str) -> str:
    """Replace unicode vulgar fractions with ASCII ones ('1½' -> '1 1/2')."""
    def _replace(match: re.Match[str]) -> str:
        whole, fraction = match.groups()
        ascii_fraction = UNICODE_FRACTIONS[fraction]
        return f"{whole} {ascii_fraction}" if whole else ascii_fraction

    return _UNICODE_FRACTION_RE.sub(_replace, text)


def _snap_to_fraction(value: float) -> str | None:
    """Render ``value`` as a whole number plus a table fraction, if close enough."""
    if value < 0:
        return None

    whole = int(value)
    remainder = value - whole
    for point, label in SNAP_POINTS:
        if abs(remainder - point) < FRACTION_TOLERANCE:
            whole += int(point)
            if not label:
                return str(whole) if whole else None
            return f"{whole} {label}" if whole else label
    return None


def normalize_quantity(quantity: str) -> str:
    """
    Convert a plain decimal quantity to the nearest common cocktail fraction.

    Only strings that parse as a plain decimal are touched; fractions,
    mixed numbers and words pass through unchanged. Decimals further than
    FRACTION_TOLERANCE from every table entry keep their original text.

    Examples:
        >>> normalize_quantity('0.75')
        '3/4'
        >>> normalize_quantity('2.5')
        '2 1/2'
        >>> normalize_quantity('1 1/2')
        '1 1/2'
        >>> normalize_quantity('0.3')
        '0.3'
    """
    text = quantity.strip()
    if not _DECIMAL_RE.match(text):
        return text

    snapped = _snap_to_fraction(float(text))
    return snapped if snapped is not None else text


def _parse_fraction(fraction_str: str) -> float:
    """Parse '1/2' or '2' into a float.

    Raises:
        ValueError: If the string is not a number or fraction
        ZeroDivisionError: If the denominator is zero
    """
    if "/" not in fraction_str:
        return float(fraction_str)

    numerator, _, denominator = fraction_str.partition("/")
    return float(numerator) / float(denominator)


def quantity_to_float(quantity: str | None) -> float | None:
    """Read '2', '0.75', '3/4', '1 1/2' or '1½' as a float, None otherwise."""
    if not quantity:
        return None

    parts = replace_unicode_fractions(quantity).split()
    if not parts or len(parts) > 2:
        return None
    try:
        return sum(_parse_fraction(part) for part in parts)
    except (ValueError, ZeroDivisionError):
        return None


def format_quantity(quantity: float | int | None) -> str:
    """
    Format a numeric quantity for display, preferring cocktail fractions.

    Examples:
        >>> format_quantity(2.0)
        '2'
        >>> format_quantity(1.75)
        '1 3/4'
        >>> format_quantity(2.4)
        '2.4'
    """
    if quantity is None:
        return ""

    snapped = _snap_to_fraction(float(quantity))
    if snapped is not None:
        return snapped

    return f"{quantity:.2f}".rstrip("0").rstrip(".")


def convert_to_oz(amount: float, unit: str) -> float | None:
    """Convert an amount to fluid ounces, or None if the unit is not a volume."""
    factor = UNIT_TO_OZ.get(standardize_unit(unit).lower())
    if factor is None:
        return None
    return amount * factor
