"""
Markdown Recipe Parser.

Fallback for model responses that contain no JSON at all. Recipes arrive as
markdown cards like::

    ### Old Fashioned
    _A timeless bourbon cocktail._

    **Ingredients**
    - 2 oz Bourbon whiskey
    - 2 dashes Angostura bitters

    **Instructions**
    1) Stir with ice.

    **Glassware**: Rocks glass
    **Tags**: classic, bourbon
    ---

Cards are split on ``---`` lines and ``###`` headings. Each line is then
classified once, and a small state machine assigns it to a recipe field
based on the section it appears in.
"""
from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass, field
from typing import Any, NamedTuple

from ..unit_converter import UNIT_STANDARDIZATION, is_unit_word, replace_unicode_fractions

_LOGGER = logging.getLogger(__name__)

LABELS = {
    "ingredients": "ingredients",
    "ingredient": "ingredients",
    "instructions": "instructions",
    "directions": "instructions",
    "method": "instructions",
    "steps": "instructions",
    "preparation": "instructions",
    "glassware": "glassware",
    "glass": "glassware",
    "garnish": "garnish",
    "tags": "tags",
    "description": "description",
}

_SEPARATOR_RE = re.compile(r"^-{3,}$")
_HEADING_RE = re.compile(r"^(#{1,6})\s*(.*?)\s*#*$")
_BULLET_RE = re.compile(r"^[-*•+]\s+(.*)$")
_NUMBERED_RE = re.compile(r"^\d+\s*[.)]\s+(.*)$")
_ITALIC_RE = re.compile(r"^(_|\*)(?!\1)(.+?)\1$")
_BOLD_RE = re.compile(r"^(\*\*|__)(.+?)\1$")
_LABEL_RE = re.compile(r"^([A-Za-z ]+?)\s*:\s*(.*)$")

_QUANTITY_TOKEN_RE = re.compile(r"^(?:\d+(?:\.\d+)?|\.\d+)(?:-\d+(?:\.\d+)?)?$")
_FRACTION_TOKEN_RE = re.compile(r"^\d+/\d+$")
_TRAILING_NOTES_RE = re.compile(r"\s*\(([^)]*)\)\s*$")


class LineKind(enum.Enum):
    """What a single markdown line looks like, independent of context."""

    BLANK = "blank"
    SEPARATOR = "separator"
    HEADING = "heading"
    LABEL = "label"
    BULLET = "bullet"
    NUMBERED = "numbered"
    ITALIC = "italic"
    BOLD = "bold"
    PROSE = "prose"


class ClassifiedLine(NamedTuple):
    kind: LineKind
    text: str
    label: str | None = None
    level: int = 0


def _strip_emphasis(text: str) -> str:
    return text.replace("**", "").replace("__", "").strip()


def _match_label(text: str) -> tuple[str, str] | None:
    """Return (field, inline value) if ``text`` is a section label."""
    bare = _strip_emphasis(text)
    lowered = bare.lower()
    if lowered in LABELS:
        return LABELS[lowered], ""

    match = _LABEL_RE.match(bare)
    if match and match.group(1).strip().lower() in LABELS:
        return LABELS[match.group(1).strip().lower()], match.group(2).strip()
    return None


def classify_line(raw_line: str) -> ClassifiedLine:
    """Classify one line of markdown without looking at its neighbours."""
    line = raw_line.strip()
    if not line:
        return ClassifiedLine(LineKind.BLANK, "")
    if _SEPARATOR_RE.match(line):
        return ClassifiedLine(LineKind.SEPARATOR, "")

    heading = _HEADING_RE.match(line)
    if heading:
        title = _strip_emphasis(heading.group(2))
        label = _match_label(title)
        if label:
            return ClassifiedLine(LineKind.LABEL, label[1], label[0])
        return ClassifiedLine(LineKind.HEADING, title, level=len(heading.group(1)))

    bullet = _BULLET_RE.match(line)
    if bullet:
        return ClassifiedLine(LineKind.BULLET, bullet.group(1).strip())

    numbered = _NUMBERED_RE.match(line)
    if numbered:
        return ClassifiedLine(LineKind.NUMBERED, numbered.group(1).strip())

    label = _match_label(line)
    if label:
        return ClassifiedLine(LineKind.LABEL, label[1], label[0])

    bold = _BOLD_RE.match(line)
    if bold:
        return ClassifiedLine(LineKind.BOLD, bold.group(2).strip())

    italic = _ITALIC_RE.match(line)
    if italic:
        return ClassifiedLine(LineKind.ITALIC, italic.group(2).strip())

    return ClassifiedLine(LineKind.PROSE, line)


def parse_ingredient_line(text: str) -> dict[str, Any]:
    """
    Split an ingredient line into quantity, unit, item and notes.

    Leading numeric tokens (including fractions and mixed numbers) form the
    quantity, a following unit word forms the unit, and the rest is the
    item. A trailing parenthetical or the text after the first comma
    becomes the notes. Lines without a number get an empty quantity.

    Examples:
        >>> parse_ingredient_line("1 1/2 oz gin, London dry")
        {'quantity': '1 1/2', 'unit': 'oz', 'item': 'gin', 'notes': 'London dry'}
        >>> parse_ingredient_line("1 Orange twist (for garnish)")
        {'quantity': '1', 'unit': '', 'item': 'Orange twist', 'notes': 'for garnish'}
    """
    line = replace_unicode_fractions(text.strip())

    notes = None
    trailing = _TRAILING_NOTES_RE.search(line)
    if trailing:
        notes = trailing.group(1).strip() or None
        line = line[:trailing.start()]

    tokens = line.split()
    quantity_tokens: list[str] = []
    if tokens and (_QUANTITY_TOKEN_RE.match(tokens[0]) or _FRACTION_TOKEN_RE.match(tokens[0])):
        quantity_tokens.append(tokens.pop(0))
        # Mixed numbers such as "1 1/2"
        if (tokens and _FRACTION_TOKEN_RE.match(tokens[0])
                and not _FRACTION_TOKEN_RE.match(quantity_tokens[0])):
            quantity_tokens.append(tokens.pop(0))

    unit = ""
    if quantity_tokens and len(tokens) >= 2:
        two_words = " ".join(tokens[:2]).lower()
        if len(tokens) >= 3 and two_words in UNIT_STANDARDIZATION:
            unit = " ".join(tokens[:2])
            tokens = tokens[2:]
        elif is_unit_word(tokens[0]):
            unit = tokens.pop(0)

    item = " ".join(tokens).strip()
    if notes is None and "," in item:
        item, _, rest = item.partition(",")
        item = item.strip()
        notes = rest.strip() or None

    return {
        "quantity": " ".join(quantity_tokens),
        "unit": unit,
        "item": item,
        "notes": notes,
    }


@dataclass
class RecipeCard:
    """Mutable accumulator for one markdown segment while it is being read."""

    name: str = ""
    description_lines: list[str] = field(default_factory=list)
    ingredient_lines: list[str] = field(default_factory=list)
    instructions: list[str] = field(default_factory=list)
    glassware: str = ""
    garnish: str = ""
    tags: list[str] = field(default_factory=list)

    def set_field(self, name: str, value: str) -> None:
        """Apply a value found after a label or inside a labelled section."""
        if not value:
            return
        if name == "ingredients":
            self.ingredient_lines.append(value)
        elif name == "instructions":
            self.instructions.append(value)
        elif name == "description":
            self.description_lines.append(value)
        elif name == "tags":
            self.tags.extend(tag.strip() for tag in value.split(",") if tag.strip())
        elif name == "glassware" and not self.glassware:
            self.glassware = value
        elif name == "garnish" and not self.garnish:
            self.garnish = value

    def is_candidate(self) -> bool:
        return bool(self.name and (self.ingredient_lines or self.instructions))

    def to_dict(self) -> dict[str, Any]:
        recipe: dict[str, Any] = {
            "name": self.name,
            "description": " ".join(self.description_lines),
            "ingredients": [parse_ingredient_line(line) for line in self.ingredient_lines],
            "instructions": list(self.instructions),
            "tags": list(self.tags),
        }
        if self.glassware:
            recipe["glassware"] = self.glassware
        if self.garnish:
            recipe["garnish"] = self.garnish
        return recipe


class MarkdownRecipeParser:
    """Extracts raw recipe dicts from markdown recipe cards.

    The result is not validated; incomplete recipes are left for the schema
    validator to reject so that the rejection is reported like any other.
    """

    def split_segments(self, text: str) -> list[list[ClassifiedLine]]:
        """Split text into recipe segments of classified lines."""
        segments: list[list[ClassifiedLine]] = []
        current: list[ClassifiedLine] = []

        for raw_line in text.splitlines():
            line = classify_line(raw_line)

            if line.kind is LineKind.SEPARATOR:
                if current:
                    segments.append(current)
                current = []
                continue

            starts_recipe = line.kind is LineKind.HEADING and line.level <= 3
            if starts_recipe and any(l.kind is LineKind.HEADING for l in current):
                segments.append(current)
                current = []

            current.append(line)

        if current:
            segments.append(current)
        return segments

    def parse_segment(self, lines: list[ClassifiedLine]) -> RecipeCard:
        """Run the section state machine over one segment."""
        card = RecipeCard()
        section: str | None = None

        for line in lines:
            kind = line.kind

            if kind is LineKind.BLANK:
                continue

            if kind is LineKind.HEADING:
                if not card.name:
                    card.name = line.text
                continue

            if kind is LineKind.LABEL:
                if line.text:
                    card.set_field(line.label, line.text)
                    section = None
                else:
                    section = line.label
                continue

            if section is None:
                if kind is LineKind.BOLD and not card.name:
                    card.name = line.text
                elif card.name and kind in (LineKind.ITALIC, LineKind.PROSE):
                    card.set_field("description", line.text)
                continue

            if section == "instructions" and kind is LineKind.NUMBERED:
                card.set_field("instructions", line.text)
            elif kind in (LineKind.BULLET, LineKind.NUMBERED, LineKind.PROSE):
                card.set_field(section, line.text)

        return card

    def extract_recipes(self, text: str) -> list[dict[str, Any]]:
        """Extract every recipe card that has a name and some content.

        Args:
            text: Markdown text without JSON content

        Returns:
            Raw recipe dicts, in the order they appear
        """
        recipes = []
        for idx, segment in enumerate(self.split_segments(text)):
            card = self.parse_segment(segment)
            if not card.is_candidate():
                _LOGGER.debug("Markdown segment %d holds no recipe, dropping it", idx)
                continue
            recipes.append(card.to_dict())

        _LOGGER.debug("Markdown fallback found %d recipe card(s)", len(recipes))
        return recipes
