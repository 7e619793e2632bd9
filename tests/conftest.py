"""Shared fixtures for the cocktail importer tests."""
import json

import pytest


def _make_recipe(name, item="Gin", quantity="2", unit="oz", **extra):
    recipe = {
        "name": name,
        "ingredients": [{"quantity": quantity, "unit": unit, "item": item}],
        "instructions": ["Stir with ice and strain."],
    }
    recipe.update(extra)
    return recipe


@pytest.fixture
def make_recipe():
    """Factory for minimal valid recipe dicts."""
    return _make_recipe


@pytest.fixture
def old_fashioned():
    return {
        "name": "Old Fashioned",
        "description": "A timeless cocktail.",
        "ingredients": [
            {"quantity": "2", "unit": "oz", "item": "Bourbon whiskey", "notes": ""},
            {"quantity": "1/2", "unit": "oz", "item": "Rich simple syrup"},
            {"quantity": "2", "unit": "dashes", "item": "Angostura bitters"},
        ],
        "instructions": [
            "Combine the bourbon, syrup and bitters in a glass.",
            "Add ice and stir until well chilled.",
        ],
        "glassware": "Old-fashioned glass",
        "garnish": "Orange twist",
        "tags": ["classic", "bourbon"],
    }


@pytest.fixture
def envelope_text(old_fashioned):
    return json.dumps({"recipes": [old_fashioned]})


@pytest.fixture
def markdown_cards():
    return """Here are two cocktails you might enjoy!

### Daiquiri
_Bright and tart._

**Ingredients**
- 2 oz white rum
- 3/4 oz lime juice (fresh)
- ¾ oz simple syrup

**Instructions**
1) Shake with ice.
2) Double strain into a chilled coupe.

**Glassware**: Coupe
**Garnish**: Lime wheel
**Tags**: classic, rum
---

### Negroni

**Ingredients**
- 1 oz gin
- 1 oz Campari
- 1 oz sweet vermouth

**Instructions**
1) Stir with ice.
2) Strain over a large cube.
---
"""
