"""
Tests for the web scraper. No network access: sessions are mocked.

Run: pytest tests/test_scraper.py -v
"""
import json
from unittest.mock import MagicMock, patch

import pytest
import requests

from cocktail_importer.extractors import scraper
from cocktail_importer.extractors.scraper import (
    extract_recipe_text,
    fetch_recipe_text,
    format_jsonld_recipe,
    validate_url,
)
from cocktail_importer.parsers import parse_recipes_from_ai

SAZERAC = {
    "@context": "https://schema.org",
    "@type": "Recipe",
    "name": "Sazerac",
    "description": "A  New Orleans\nclassic.",
    "recipeIngredient": ["2 oz rye whiskey", "3 dashes Peychaud's bitters", "1 barspoon absinthe"],
    "recipeInstructions": [
        {"@type": "HowToSection", "name": "Prep", "itemListElement": [
            {"@type": "HowToStep", "text": "Rinse a chilled glass with absinthe."},
        ]},
        {"@type": "HowToStep", "text": "Stir rye and bitters with ice."},
        "Strain into the glass.",
    ],
    "keywords": "classic, rye",
    "recipeCategory": ["Cocktail"],
}


def page(body):
    return f"<html><body>{body}</body></html>"


def jsonld_page(data):
    return page(f'<script type="application/ld+json">{json.dumps(data)}</script>')


class TestValidateUrl:
    """Tests for validate_url()"""

    def test_allowed(self):
        validate_url("https://example.com/recipe")
        validate_url("http://8.8.8.8/recipe")

    @pytest.mark.parametrize("url", [
        "",
        "   ",
        "ftp://example.com/recipe",
        "file:///etc/passwd",
        "http:///nohost",
        "http://127.0.0.1/admin",
        "http://192.168.1.10/",
        "http://10.0.0.1/",
        "http://169.254.169.254/latest/meta-data",
        "http://[::1]/",
    ])
    def test_rejected(self, url):
        with pytest.raises(ValueError):
            validate_url(url)


class TestFormatJsonldRecipe:
    """Tests for format_jsonld_recipe()"""

    def test_card(self):
        card = format_jsonld_recipe(SAZERAC)
        assert card.splitlines()[:2] == ["### Sazerac", "_A New Orleans classic._"]
        assert "- 3 dashes Peychaud's bitters" in card
        assert "1) Rinse a chilled glass with absinthe." in card
        assert "3) Strain into the glass." in card
        assert card.endswith("**Tags**: classic, rye, Cocktail")

    def test_card_parses(self):
        result = parse_recipes_from_ai(format_jsonld_recipe(SAZERAC))
        recipe = result.recipes[0]
        assert recipe.name == "Sazerac"
        assert recipe.description == "A New Orleans classic."
        assert [(i.quantity, i.unit, i.item) for i in recipe.ingredients] == [
            ("2", "oz", "rye whiskey"),
            ("3", "dashes", "Peychaud's bitters"),
            ("1", "barspoon", "absinthe"),
        ]
        assert len(recipe.instructions) == 3
        assert recipe.tags == ["classic", "rye", "Cocktail"]

    def test_instruction_text_block(self):
        card = format_jsonld_recipe({"name": "Gimlet", "recipeInstructions": "Shake.\nStrain."})
        assert "1) Shake.\n2) Strain." in card


class TestExtractRecipeText:
    """Tests for extract_recipe_text()"""

    def test_jsonld_recipe(self):
        text, is_jsonld = extract_recipe_text(jsonld_page(SAZERAC))
        assert is_jsonld
        assert text.startswith("### Sazerac")

    def test_jsonld_graph(self):
        graph = {"@graph": [{"@type": "WebPage"}, {**SAZERAC, "@type": ["Recipe", "Thing"]}]}
        text, is_jsonld = extract_recipe_text(jsonld_page(graph))
        assert is_jsonld
        assert text.startswith("### Sazerac")

    def test_broken_jsonld_falls_back_to_text(self):
        html = page('<script type="application/ld+json">{not json</script>'
                    '<article><h1>Gimlet</h1><p>2 oz gin</p></article>')
        text, is_jsonld = extract_recipe_text(html)
        assert not is_jsonld
        assert text == "Gimlet\n2 oz gin"

    def test_noise_removed(self):
        html = page('<nav>Home</nav><div class="recipe"><p>Shake it.</p>'
                    '<div class="social-share">Share</div></div><footer>(c)</footer>')
        text, _ = extract_recipe_text(html)
        assert text == "Shake it."

    def test_truncated(self):
        text, _ = extract_recipe_text(page(f"<p>{'x' * 20000}</p>"))
        assert len(text) == scraper.DEFAULT_MAX_TEXT_LENGTH


class TestFetchRecipeText:
    """Tests for fetch_recipe_text() and the retry loop"""

    @staticmethod
    def response(body, content_type="text/html; charset=utf-8"):
        resp = MagicMock()
        resp.headers = {"content-type": content_type}
        resp.iter_content.return_value = [body.encode("utf-8")]
        resp.__enter__.return_value = resp
        return resp

    @pytest.fixture
    def session(self):
        session = MagicMock()
        with patch.object(scraper.cloudscraper, "create_scraper", return_value=session):
            yield session

    @pytest.fixture(autouse=True)
    def no_sleep(self):
        with patch.object(scraper.time, "sleep") as sleep:
            yield sleep

    def test_fetch_jsonld(self, session):
        session.get.return_value = self.response(jsonld_page(SAZERAC))
        text, is_jsonld = fetch_recipe_text("https://example.com/sazerac")
        assert is_jsonld
        assert "### Sazerac" in text

    def test_retry_after_timeout(self, session, no_sleep):
        session.get.side_effect = [requests.exceptions.Timeout("slow"),
                                   self.response(page("<p>Stir.</p>"))]
        text, is_jsonld = fetch_recipe_text("https://example.com/slow")
        assert text == "Stir."
        assert not is_jsonld
        assert session.get.call_count == 2
        no_sleep.assert_called_once_with(1)

    def test_gives_up_after_max_retries(self, session):
        session.get.side_effect = requests.exceptions.ConnectionError("down")
        with pytest.raises(requests.exceptions.ConnectionError):
            fetch_recipe_text("https://example.com/down")
        assert session.get.call_count == scraper.DEFAULT_MAX_RETRIES

    def test_rejects_non_html(self, session):
        session.get.return_value = self.response("{}", content_type="application/json")
        with pytest.raises(ValueError, match="Invalid content type"):
            fetch_recipe_text("https://example.com/api")
        session.get.return_value.__exit__.assert_called_once()

    def test_rejects_oversized_response(self, session):
        resp = self.response("")
        resp.headers["content-length"] = str(scraper.DEFAULT_MAX_RESPONSE_SIZE + 1)
        session.get.return_value = resp
        with pytest.raises(ValueError, match="exceeds maximum"):
            fetch_recipe_text("https://example.com/huge")
        resp.__exit__.assert_called_once()
        resp.iter_content.assert_not_called()

    def test_invalid_url_not_fetched(self, session):
        with pytest.raises(ValueError):
            fetch_recipe_text("http://127.0.0.1/")
        session.get.assert_not_called()
