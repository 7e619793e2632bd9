"""
JSON object extraction from noisy model output.

Models wrap JSON in prose, code fences or emit several objects back to back.
The scanner below finds every balanced top-level ``{...}`` span without
trying to decide whether the span is valid JSON.
"""
from __future__ import annotations

import logging

_LOGGER = logging.getLogger(__name__)


class JsonObjectScanner:
    """Single left-to-right scan over text, tracking brace depth and strings.

    Braces inside string literals are ignored, and backslash escapes inside
    strings are honoured so an escaped quote never closes the literal. Depth
    is a plain counter, so arbitrarily deep nesting is safe.
    """

    def __init__(self, text: str) -> None:
        self.text = text
        self.depth = 0
        self.start = -1
        self.in_string = False
        self.escaped = False

    def _step_in_string(self, char: str) -> None:
        if self.escaped:
            self.escaped = False
        elif char == "\\":
            self.escaped = True
        elif char == '"':
            self.in_string = False

    def scan(self) -> list[str]:
        """Return every balanced top-level object span, in order."""
        spans: list[str] = []

        for pos, char in enumerate(self.text):
            if self.in_string:
                self._step_in_string(char)
                continue

            if char == '"':
                # Strings only matter once we are inside an object
                if self.depth > 0:
                    self.in_string = True
            elif char == "{":
                if self.depth == 0:
                    self.start = pos
                self.depth += 1
            elif char == "}" and self.depth > 0:
                self.depth -= 1
                if self.depth == 0:
                    spans.append(self.text[self.start:pos + 1])
                    self.start = -1

        if self.depth > 0:
            _LOGGER.debug(
                "Dropping unbalanced trailing object starting at offset %d", self.start)

        return spans


def extract_json_objects(text: str) -> list[str]:
    """Find one or more top-level JSON object spans in a noisy string.

    Args:
        text: Raw text, typically an AI completion

    Returns:
        The balanced ``{...}`` substrings in order of appearance; empty if
        the text holds no complete object
    """
    if not text or "{" not in text:
        return []

    spans = JsonObjectScanner(text).scan()
    _LOGGER.debug("Extracted %d JSON object span(s) from %d characters",
                  len(spans), len(text))
    return spans
