"""
Tests for the tolerant AI recipe parser.

Run: pytest tests/test_recipe_parser.py -v
"""
import json
import logging
from unittest.mock import MagicMock, patch

import pytest

from cocktail_importer.models import Ingredient, ParsedRecipes
from cocktail_importer.parsers.key_normalizer import normalize_keys
from cocktail_importer.parsers.recipe_parser import (
    RecipeParser,
    TimedParse,
    normalize_ingredient,
    parse_recipes_from_ai,
    parse_recipes_from_ai_timed,
)


class TestValidInput:
    """Well-formed JSON comes through verbatim"""

    def test_single_recipe(self, old_fashioned, envelope_text):
        result = parse_recipes_from_ai(envelope_text)
        assert len(result.recipes) == 1
        recipe = result.recipes[0]
        assert recipe.name == old_fashioned["name"]
        assert recipe.description == old_fashioned["description"]
        assert recipe.instructions == old_fashioned["instructions"]
        assert recipe.glassware == old_fashioned["glassware"]
        assert recipe.garnish == old_fashioned["garnish"]
        assert recipe.tags == old_fashioned["tags"]
        assert [(i.quantity, i.unit, i.item) for i in recipe.ingredients] == [
            (i["quantity"], i["unit"], i["item"]) for i in old_fashioned["ingredients"]]
        assert result.skipped == []

    def test_minimal_recipe_defaults(self):
        raw = ('{"recipes":[{"name":"X","ingredients":[{"quantity":"1","unit":"oz","item":"Y"}],'
               '"instructions":["Z"]}]}')
        recipe = parse_recipes_from_ai(raw).recipes[0]
        assert recipe.description == ""
        assert recipe.tags == []

    def test_json_in_prose_and_fence(self, envelope_text):
        raw = f"Here's a classic for you!\n```json\n{envelope_text}\n```\nCheers!"
        assert [r.name for r in parse_recipes_from_ai(raw).recipes] == ["Old Fashioned"]

    def test_bare_recipe_object(self, make_recipe):
        raw = json.dumps(make_recipe("Gimlet"))
        assert [r.name for r in parse_recipes_from_ai(raw).recipes] == ["Gimlet"]


class TestMultipleRecipes:
    """Several recipes, several blobs"""

    def test_concatenated_objects_keep_order_and_count(self, make_recipe):
        names = ["Gimlet", "Martini", "Negroni", "Sazerac"]
        raw = "\n".join(json.dumps({"recipes": [make_recipe(n)]}) for n in names)
        result = parse_recipes_from_ai(raw)
        assert [r.name for r in result.recipes] == names

    def test_mixed_envelopes_and_bare_recipes(self, make_recipe):
        raw = (json.dumps({"recipes": [make_recipe("A"), make_recipe("B")]})
               + " and also " + json.dumps(make_recipe("C")))
        assert [r.name for r in parse_recipes_from_ai(raw).recipes] == ["A", "B", "C"]

    def test_duplicates_not_removed(self, make_recipe):
        blob = json.dumps({"recipes": [make_recipe("Gimlet")]})
        assert len(parse_recipes_from_ai(blob + blob).recipes) == 2

    def test_unparseable_middle_object_isolated(self, make_recipe):
        raw = "\n".join([
            json.dumps({"recipes": [make_recipe("First")]}),
            '{"recipes": [{"name": Second, "ingredients": []}]}',
            json.dumps({"recipes": [make_recipe("Third")]}),
        ])
        result = parse_recipes_from_ai(raw)
        assert [r.name for r in result.recipes] == ["First", "Third"]
        assert len(result.skipped) == 1
        assert result.skipped[0].kind == "object"
        assert result.skipped[0].index == 1
        assert result.summary().startswith("2 of 3 recipes imported; 1 skipped: Invalid JSON")

    def test_deeply_nested_object_isolated(self, make_recipe):
        deep = '{"a":' * 600 + "1" + "}" * 600
        raw = "\n".join([json.dumps(make_recipe("A")), deep, json.dumps(make_recipe("B"))])
        result = parse_recipes_from_ai(raw)
        assert [r.name for r in result.recipes] == ["A", "B"]

    def test_recursion_during_normalization_skips_object(self, make_recipe):
        raw = json.dumps(make_recipe("A")) + "\n" + json.dumps(make_recipe("B"))
        real = normalize_keys
        calls = []

        def flaky(obj):
            calls.append(obj)
            if len(calls) == 1:
                raise RecursionError("maximum recursion depth exceeded")
            return real(obj)

        with patch("cocktail_importer.parsers.recipe_parser.normalize_keys", side_effect=flaky):
            result = parse_recipes_from_ai(raw)
        assert [r.name for r in result.recipes] == ["B"]
        assert result.skipped[0].kind == "object"
        assert result.skipped[0].index == 0
        assert result.skipped[0].cause == "Object nested too deeply"

    def test_invalid_recipe_isolated(self, make_recipe):
        no_ingredients = {"name": "Broken", "instructions": ["Stir."]}
        raw = json.dumps({"recipes": [make_recipe("A"), no_ingredients, make_recipe("C")]})
        result = parse_recipes_from_ai(raw)
        assert [r.name for r in result.recipes] == ["A", "C"]
        assert result.summary() == "2 of 3 recipes imported; 1 skipped: missing ingredients"


class TestRepairAndNormalization:
    """Soft repair, key variants, units and quantities"""

    def test_trailing_comma_matches_clean_version(self, make_recipe):
        clean = json.dumps({"recipes": [make_recipe("Gimlet")]})
        dirty = clean[:-2] + ",]}"
        assert dirty != clean
        assert parse_recipes_from_ai(dirty) == parse_recipes_from_ai(clean)

    def test_mislabelled_keys(self):
        raw = json.dumps({"Cocktails": [{
            "Title": "Gimlet",
            "Ingredients:": [{"amount": "2", "units": "ounces", "name": "Gin"}],
            "Steps": ["Shake."],
            "glass_type": "Coupe",
        }]})
        recipe = parse_recipes_from_ai(raw).recipes[0]
        assert recipe.name == "Gimlet"
        assert recipe.ingredients[0] == Ingredient(quantity="2", unit="oz", item="Gin")
        assert recipe.instructions == ["Shake."]
        assert recipe.glassware == "Coupe"

    def test_units_and_quantities_normalized(self, make_recipe):
        recipe = make_recipe("Daiquiri")
        recipe["ingredients"] = [
            {"quantity": "0.75", "unit": "ounces", "item": "Lime juice"},
            {"quantity": 2.5, "unit": "teaspoon", "item": "Sugar"},
            {"quantity": "1 1/2", "unit": "milliliters", "item": "Absinthe"},
            {"quantity": "1", "unit": "splashes", "item": "Soda"},
        ]
        ingredients = parse_recipes_from_ai(json.dumps(recipe)).recipes[0].ingredients
        assert [(i.quantity, i.unit) for i in ingredients] == [
            ("3/4", "oz"), ("2 1/2", "tsp"), ("1 1/2", "ml"), ("1", "splashes")]

    def test_normalize_ingredient(self):
        ingredient = Ingredient(quantity="0.5", unit="Tablespoons", item="Honey")
        assert normalize_ingredient(ingredient) == Ingredient(quantity="1/2", unit="tbsp", item="Honey")


class TestMarkdownFallback:
    """Text without JSON goes through the markdown parser"""

    def test_fallback_activates(self, markdown_cards):
        assert "{" not in markdown_cards
        result = parse_recipes_from_ai(markdown_cards)
        assert [r.name for r in result.recipes] == ["Daiquiri", "Negroni"]
        assert result.recipes[0].ingredients[2].quantity == "3/4"

    def test_fallback_skips_ingredients_without_quantity(self):
        text = "### Mojito\n**Ingredients**\n- 2 oz rum\n- Mint leaves\n**Instructions**\n1) Muddle."
        result = parse_recipes_from_ai(text)
        assert [i.item for i in result.recipes[0].ingredients] == ["rum"]
        assert result.skipped[0].kind == "ingredient"

    def test_fallback_when_no_span_decodes(self):
        text = ("### Daiquiri\n_Bright {and} tart._\n\n**Ingredients**\n- 2 oz white rum\n"
                "- 1 oz lime juice\n\n**Instructions**\n1) Shake with ice.")
        result = parse_recipes_from_ai(text)
        assert [r.name for r in result.recipes] == ["Daiquiri"]
        assert result.recipes[0].description == "Bright {and} tart."
        assert [s.kind for s in result.skipped] == ["object"]

    def test_no_fallback_when_json_present(self, markdown_cards):
        raw = '{"note": "nothing here"}\n' + markdown_cards
        assert parse_recipes_from_ai(raw).recipes == []

    def test_unrelated_text(self):
        assert parse_recipes_from_ai("random unrelated text") == ParsedRecipes()


class TestNeverRaises:
    """Every string input yields a ParsedRecipes"""

    @pytest.mark.parametrize("raw", [
        "",
        "   \n\t",
        "random unrelated text",
        '{"recipes": [{"name": "Truncated", "ingredients": [',
        "{" * 10000,
        "{" * 5000 + "}" * 5000,
        '{"a":' * 3000 + "1" + "}" * 3000,
        '{"a":' * 400 + "1" + "}" * 400,
        '{"recipes": "not a list"}',
        '{"recipes": null}',
        '{"recipes": [null, 1, "x", []]}',
        '[1, 2, 3]',
        "### Heading only\n---\n---",
        "\x00\x01 ⅞ {“”}",
    ])
    def test_total(self, raw):
        result = parse_recipes_from_ai(raw)
        assert isinstance(result, ParsedRecipes)

    @pytest.mark.parametrize("raw", [None, 42, b"{}"])
    def test_non_string_input(self, raw):
        assert parse_recipes_from_ai(raw) == ParsedRecipes()

    def test_invalid_envelope_gives_empty_result(self):
        assert parse_recipes_from_ai('{"recipes": "not a list"}') == ParsedRecipes()


class TestLogging:
    """Diagnostics go through the injected logger"""

    def test_rejected_input_logged_with_raw_text(self):
        logger = MagicMock(spec=logging.Logger)
        raw = '{"recipes": {"name": "Not a list"}}'
        result = RecipeParser(logger=logger).parse_recipes(raw)
        assert result == ParsedRecipes()
        logger.error.assert_called_once()
        assert raw in logger.error.call_args.args

    def test_unexpected_error_logged_with_traceback(self):
        logger = MagicMock(spec=logging.Logger)
        with patch("cocktail_importer.parsers.recipe_parser.extract_json_objects",
                   side_effect=RuntimeError("boom")):
            result = RecipeParser(logger=logger).parse_recipes("{}")
        assert result == ParsedRecipes()
        assert logger.error.call_args.kwargs["exc_info"] is True

    def test_skipped_object_logged_as_warning(self, make_recipe):
        logger = MagicMock(spec=logging.Logger)
        raw = json.dumps(make_recipe("A")) + ' {"name": oops}'
        RecipeParser(logger=logger).parse_recipes(raw)
        logger.warning.assert_called_once()
        logger.info.assert_called_once()

    def test_default_logger(self, caplog):
        with caplog.at_level(logging.ERROR, logger="cocktail_importer.parsers.recipe_parser"):
            parse_recipes_from_ai('{"recipes": 5}')
        assert "Rejected AI recipe response" in caplog.text
        assert '{"recipes": 5}' in caplog.text


class TestTimedParse:
    """Tests for parse_recipes_from_ai_timed()"""

    def test_returns_result_and_duration(self, envelope_text):
        timed = parse_recipes_from_ai_timed(envelope_text)
        assert isinstance(timed, TimedParse)
        assert len(timed.result.recipes) == 1
        assert timed.time_ms >= 0

    def test_five_small_recipes_are_fast(self, make_recipe):
        raw = json.dumps({"recipes": [make_recipe(f"Recipe {i}") for i in range(5)]})
        parse_recipes_from_ai_timed(raw)  # warm up imports and validators
        timed = parse_recipes_from_ai_timed(raw)
        assert len(timed.result.recipes) == 5
        assert timed.time_ms < 50
