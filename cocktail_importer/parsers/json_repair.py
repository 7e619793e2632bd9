"""
Soft repair for JSON fragments that fail strict parsing.

Only a small, bounded set of textual fixes is attempted. Anything that would
need structural guesswork (inserting braces, quoting keys) is left to fail,
so a broken fragment is reported instead of silently misread.
"""
from __future__ import annotations

import json
import logging
import re
from typing import Any

from ..exceptions import FragmentParseError

_LOGGER = logging.getLogger(__name__)

_TRAILING_COMMA_RE = re.compile(r",\s*[}\]]")

_CURLY_DOUBLE_QUOTES = frozenset("“”„‟″")
_CURLY_SINGLE_QUOTES = frozenset("‘’‚‛")


def soft_repair(text: str) -> str:
    """Strip trailing commas and straighten curly quotes used as delimiters.

    Only text outside string literals is touched: a curly quote inside a
    straight-quoted value is kept as written. A string opened by a curly
    quote closes at the next straight or curly double quote.

    Examples:
        >>> soft_repair('{"tags": ["gin",]}')
        '{"tags": ["gin"]}'
        >>> soft_repair('{“name”: "The “classic” martini"}')
        '{"name": "The “classic” martini"}'
    """
    out: list[str] = []
    closer = None
    escaped = False

    for pos, char in enumerate(text):
        if closer is not None:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"' or (closer != '"' and char in _CURLY_DOUBLE_QUOTES):
                closer = None
                char = '"'
            out.append(char)
        elif char == '"' or char in _CURLY_DOUBLE_QUOTES:
            closer = char
            out.append('"')
        elif char == "," and _TRAILING_COMMA_RE.match(text, pos):
            continue
        elif char in _CURLY_SINGLE_QUOTES:
            out.append("'")
        else:
            out.append(char)

    return "".join(out)


def parse_json_fragment(fragment: str) -> Any:
    """Parse a JSON fragment, retrying once after soft repair.

    The retry also runs the decoder in non-strict mode, which accepts raw
    control characters (such as newlines) inside string literals.

    Args:
        fragment: A balanced ``{...}`` span

    Returns:
        The decoded JSON value

    Raises:
        FragmentParseError: If the fragment is still invalid after repair
    """
    try:
        return json.loads(fragment)
    except json.JSONDecodeError as e:
        _LOGGER.debug("Strict JSON parse failed (%s), attempting soft repair", e)

    try:
        return json.loads(soft_repair(fragment), strict=False)
    except json.JSONDecodeError as e:
        raise FragmentParseError(
            f"Invalid JSON after soft repair: {e.msg} at line {e.lineno} column {e.colno}",
            fragment,
        ) from e
