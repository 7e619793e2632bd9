"""
Web scraper utilities for fetching cocktail recipe text.

Pages that publish a schema.org Recipe in JSON-LD are rendered straight into
a markdown recipe card, which the parser reads without any AI involvement.
Other pages are reduced to cleaned visible text for the model.
"""
from __future__ import annotations

import ipaddress
import json
import logging
import time
from typing import Any
from urllib.parse import urlparse

import cloudscraper
import requests
from bs4 import BeautifulSoup

from ..const import (
    DEFAULT_MAX_REDIRECTS,
    DEFAULT_MAX_RESPONSE_SIZE,
    DEFAULT_MAX_RETRIES,
    DEFAULT_MAX_TEXT_LENGTH,
    DEFAULT_TIMEOUT,
)

_LOGGER = logging.getLogger(__name__)

_ALLOWED_CONTENT_TYPES = ("text/html", "application/xhtml", "application/xml")


def validate_url(url: str) -> None:
    """Reject non-HTTP URLs and literal addresses on internal networks.

    Raises:
        ValueError: If the URL may not be fetched
    """
    if not url or not url.strip():
        raise ValueError("URL cannot be empty")

    parsed = urlparse(url.strip())
    if parsed.scheme not in ("http", "https"):
        raise ValueError("Only HTTP/HTTPS protocols allowed")
    if not parsed.hostname:
        raise ValueError(f"URL has no host: {url}")

    try:
        ip = ipaddress.ip_address(parsed.hostname)
    except ValueError:
        return  # Hostname is not an IP literal

    if ip.is_private or ip.is_loopback or ip.is_link_local:
        raise ValueError("Cannot access internal IP addresses")


def _fetch_with_retry(session: requests.Session, url: str,
                      max_retries: int = DEFAULT_MAX_RETRIES) -> bytes:
    """Fetch URL with exponential backoff retry logic.

    Raises:
        requests.exceptions.RequestException: If all retries fail
        ValueError: If response is too large or not HTML
    """
    for attempt in range(max_retries):
        try:
            _LOGGER.debug("Fetching %s (attempt %d/%d)",
                          url, attempt + 1, max_retries)
            with session.get(
                url,
                timeout=DEFAULT_TIMEOUT,
                allow_redirects=True,
                stream=True
            ) as response:
                response.raise_for_status()

                content_type = response.headers.get("content-type", "").lower()
                if not any(allowed in content_type for allowed in _ALLOWED_CONTENT_TYPES):
                    raise ValueError(
                        f"Invalid content type: {content_type}. Only HTML/XHTML content is allowed.")

                content_length = response.headers.get("content-length")
                if content_length and int(content_length) > DEFAULT_MAX_RESPONSE_SIZE:
                    raise ValueError(
                        f"Response size ({content_length} bytes) exceeds maximum allowed size ({DEFAULT_MAX_RESPONSE_SIZE} bytes)")

                content = b""
                for chunk in response.iter_content(chunk_size=8192):
                    content += chunk
                    if len(content) > DEFAULT_MAX_RESPONSE_SIZE:
                        raise ValueError(
                            f"Response size exceeds maximum allowed size ({DEFAULT_MAX_RESPONSE_SIZE} bytes)")

                return content
        except requests.exceptions.HTTPError as e:
            if e.response is not None and e.response.status_code == 403 and attempt < max_retries - 1:
                wait_time = 2 ** attempt
                _LOGGER.warning(
                    "Got 403 for %s, retrying after %ds", url, wait_time)
                time.sleep(wait_time)
                continue
            raise
        except requests.exceptions.RequestException as e:
            if attempt < max_retries - 1:
                wait_time = 2 ** attempt
                _LOGGER.warning(
                    "Error fetching %s: %s, retrying after %ds", url, e, wait_time)
                time.sleep(wait_time)
                continue
            raise

    raise requests.exceptions.RequestException(
        f"Failed to fetch {url} after {max_retries} attempts")


def _is_recipe(item: Any) -> bool:
    """Check if a JSON-LD item represents a Recipe."""
    if not isinstance(item, dict):
        return False
    item_type = item.get("@type")
    if isinstance(item_type, str):
        return item_type == "Recipe"
    if isinstance(item_type, list):
        return "Recipe" in item_type
    return False


def find_jsonld_recipe(soup: BeautifulSoup) -> dict[str, Any] | None:
    """Return the first schema.org Recipe found in the page's JSON-LD scripts."""
    for idx, script in enumerate(soup.find_all("script", type="application/ld+json")):
        if not script.string:
            continue
        try:
            data = json.loads(script.string)
        except json.JSONDecodeError as e:
            _LOGGER.debug("Failed to parse JSON-LD script %d: %s", idx, e)
            continue

        if isinstance(data, dict) and isinstance(data.get("@graph"), list):
            data = data["@graph"]
        candidates = data if isinstance(data, list) else [data]

        recipe = next((item for item in candidates if _is_recipe(item)), None)
        if recipe:
            _LOGGER.debug("Found recipe data in JSON-LD script %d", idx)
            return recipe
    return None


def _instruction_steps(instructions: Any) -> list[str]:
    """Flatten recipeInstructions (text, HowToStep or HowToSection) into steps."""
    if isinstance(instructions, str):
        return [line.strip() for line in instructions.splitlines() if line.strip()]
    if isinstance(instructions, dict):
        if "itemListElement" in instructions:
            return _instruction_steps(instructions["itemListElement"])
        text = instructions.get("text") or instructions.get("name") or ""
        return [text.strip()] if text.strip() else []
    if isinstance(instructions, list):
        return [step for entry in instructions for step in _instruction_steps(entry)]
    return []


def _keywords(data: dict[str, Any]) -> list[str]:
    tags = []
    for key in ("keywords", "recipeCategory", "recipeCuisine"):
        value = data.get(key)
        if isinstance(value, str):
            tags.extend(value.split(","))
        elif isinstance(value, list):
            tags.extend(str(entry) for entry in value)
    return list(dict.fromkeys(tag.strip() for tag in tags if tag.strip()))


def format_jsonld_recipe(data: dict[str, Any]) -> str:
    """Render a schema.org Recipe as a markdown recipe card."""
    name = " ".join(str(data.get("name") or "Recipe").split())
    parts = [f"### {name}"]

    description = " ".join(str(data.get("description") or "").split())
    if description:
        parts.append(f"_{description}_")

    ingredients = data.get("recipeIngredient") or data.get("ingredients") or []
    if isinstance(ingredients, str):
        ingredients = [ingredients]
    if ingredients:
        parts.append("\n**Ingredients**")
        parts.extend(f"- {' '.join(str(line).split())}" for line in ingredients)

    steps = _instruction_steps(data.get("recipeInstructions"))
    if steps:
        parts.append("\n**Instructions**")
        parts.extend(f"{i}) {' '.join(step.split())}" for i, step in enumerate(steps, 1))

    tags = _keywords(data)
    if tags:
        parts.append(f"\n**Tags**: {', '.join(tags)}")

    return "\n".join(parts)


def _page_text(soup: BeautifulSoup) -> str:
    """Reduce a page to its visible, recipe-relevant text."""
    recipe_container = None
    for selector in ['[itemtype*="Recipe"]', ".recipe", "#recipe", "article"]:
        recipe_container = soup.select_one(selector)
        if recipe_container:
            break

    if recipe_container:
        soup = recipe_container

    for element in soup(["script", "style", "nav", "header", "footer", "aside",
                         "iframe", "noscript", "svg"]):
        element.extract()

    patterns_to_remove = ["advertisement", "social-share", "comment",
                          "navigation", "sidebar", "newsletter",
                          "cookie-banner", "popup", "modal"]
    if not recipe_container:
        patterns_to_remove.extend(["related", "recommendation"])

    for pattern in patterns_to_remove:
        for element in soup.find_all(class_=lambda x: x and pattern in x.lower()):
            element.extract()
        for element in soup.find_all(id=lambda x: x and pattern in x.lower()):
            element.extract()

    text = soup.get_text(separator="\n")
    lines = (line.strip() for line in text.splitlines())
    chunks = (phrase.strip() for line in lines for phrase in line.split("  "))
    return "\n".join(chunk for chunk in chunks if chunk)


def extract_recipe_text(html: bytes | str) -> tuple[str, bool]:
    """Turn a fetched page into recipe text.

    Returns:
        Tuple of (text, is_jsonld). When is_jsonld is True the text is a
        markdown recipe card built from structured data.
    """
    soup = BeautifulSoup(html, features="html.parser")

    data = find_jsonld_recipe(soup)
    if data:
        return format_jsonld_recipe(data), True

    text = _page_text(soup)
    if len(text) > DEFAULT_MAX_TEXT_LENGTH:
        _LOGGER.debug("Truncating text from %d to %d characters",
                      len(text), DEFAULT_MAX_TEXT_LENGTH)
        text = text[:DEFAULT_MAX_TEXT_LENGTH]
    return text, False


def fetch_recipe_text(url: str) -> tuple[str, bool]:
    """Fetch and clean recipe text from a URL.

    Args:
        url: The URL of the recipe page

    Returns:
        Tuple of (text, is_jsonld), see extract_recipe_text

    Raises:
        requests.exceptions.RequestException: If fetching fails
        ValueError: If the URL is not allowed or the content is not HTML
    """
    validate_url(url)
    _LOGGER.info("Fetching recipe from %s", url)

    session = cloudscraper.create_scraper(
        browser={
            "browser": "chrome",
            "platform": "windows",
            "desktop": True
        }
    )
    session.max_redirects = DEFAULT_MAX_REDIRECTS

    try:
        html = _fetch_with_retry(session, url)
    except requests.exceptions.RequestException as e:
        _LOGGER.error("Failed to fetch %s: %s", url, str(e))
        raise

    text, is_jsonld = extract_recipe_text(html)
    _LOGGER.info("Extracted %d characters of text from %s (JSON-LD: %s)",
                 len(text), url, is_jsonld)
    return text, is_jsonld
