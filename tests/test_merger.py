"""
Tests for merging decoded objects into a single envelope.

Run: pytest tests/test_merger.py -v
"""
import pytest

from cocktail_importer.exceptions import InvalidEnvelopeError
from cocktail_importer.parsers.merger import looks_like_recipe, merge_recipe_objects


class TestLooksLikeRecipe:
    """Tests for looks_like_recipe()"""

    def test_recipe_markers(self):
        assert looks_like_recipe({"name": "A"})
        assert looks_like_recipe({"ingredients": []})
        assert looks_like_recipe({"instructions": []})

    def test_not_a_recipe(self):
        assert not looks_like_recipe({"abv": 12})
        assert not looks_like_recipe(["name"])
        assert not looks_like_recipe("name")


class TestMergeRecipeObjects:
    """Tests for merge_recipe_objects()"""

    def test_envelopes_concatenated_in_order(self):
        merged = merge_recipe_objects([
            {"recipes": [{"name": "A"}, {"name": "B"}]},
            {"recipes": [{"name": "C"}]},
        ])
        assert merged == {"recipes": [{"name": "A"}, {"name": "B"}, {"name": "C"}]}

    def test_bare_recipes_wrapped(self):
        merged = merge_recipe_objects([{"name": "A"}, {"recipes": [{"name": "B"}]}, {"name": "C"}])
        assert [r["name"] for r in merged["recipes"]] == ["A", "B", "C"]

    def test_duplicates_kept(self):
        merged = merge_recipe_objects([{"name": "A"}, {"name": "A"}])
        assert merged == {"recipes": [{"name": "A"}, {"name": "A"}]}

    def test_unrelated_objects_ignored(self):
        merged = merge_recipe_objects([{"status": "ok"}, 42, {"name": "A"}])
        assert merged == {"recipes": [{"name": "A"}]}

    def test_empty(self):
        assert merge_recipe_objects([]) == {"recipes": []}

    def test_recipes_not_a_list(self):
        with pytest.raises(InvalidEnvelopeError, match="expected a list"):
            merge_recipe_objects([{"recipes": {"name": "A"}}])
