"""Persistence for imported recipes."""
from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Protocol

from ..models.recipe import Recipe

_LOGGER = logging.getLogger(__name__)


class RecipeStore(Protocol):
    """Anything that can persist a recipe and report where it went."""

    def save(self, recipe: Recipe) -> str:
        ...


def slugify(name: str) -> str:
    """Turn a recipe name into a safe file stem.

    Examples:
        >>> slugify("Pimm's Cup No. 1")
        'pimms_cup_no_1'
        >>> slugify("!!!")
        'recipe'
    """
    slug = re.sub(r"[^\w\s-]", "", name.lower())
    slug = re.sub(r"[\s-]+", "_", slug).strip("_")
    return slug or "recipe"


class JsonFileRecipeStore:
    """Writes each recipe to its own JSON file in a directory."""

    def __init__(self, output_dir: str | Path) -> None:
        self.output_dir = Path(output_dir)

    def _free_path(self, slug: str) -> Path:
        path = self.output_dir / f"{slug}.json"
        counter = 2
        while path.exists():
            path = self.output_dir / f"{slug}_{counter}.json"
            counter += 1
        return path

    def save(self, recipe: Recipe) -> str:
        """Write recipe as JSON and return the file path.

        Raises:
            OSError: If the directory or file cannot be written
        """
        self.output_dir.mkdir(parents=True, exist_ok=True)
        path = self._free_path(slugify(recipe.name))

        with path.open("w", encoding="utf-8") as f:
            json.dump(recipe.model_dump(), f, indent=2, ensure_ascii=False)

        _LOGGER.info("Saved recipe '%s' to %s", recipe.name, path)
        return str(path)
