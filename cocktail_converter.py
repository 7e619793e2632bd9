#!/usr/bin/env python3
"""
Cocktail Converter - Import cocktail recipes from websites and AI output

Fetches recipe pages (or reads pasted text), runs them through the AI model
when needed, parses every recipe in the reply and saves each one as JSON.
"""
import argparse
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from cocktail_importer.const import (
    DEFAULT_MODEL,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_PITCHER_OZ,
    ENV_API_KEY,
    ENV_MODEL,
)
from cocktail_importer.extractors import GeminiCompletionClient, list_models
from cocktail_importer.extractors.scraper import fetch_recipe_text
from cocktail_importer.models import ParsedRecipes
from cocktail_importer.services import (
    JsonFileRecipeStore,
    extract_recipes_from_text,
    extract_recipes_from_url,
    format_ingredient,
    format_pitcher,
    scale_to_pitcher,
)

logger = logging.getLogger(__name__)


def _read_text(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def _print_recipes(parsed: ParsedRecipes, pitcher_oz: float | None) -> None:
    for recipe in parsed.recipes:
        print(f"\n🍸 {recipe.name}")
        if recipe.description:
            print(f"   {recipe.description}")
        for ingredient in recipe.ingredients:
            print(f"   - {format_ingredient(ingredient)}")
        for i, step in enumerate(recipe.instructions, 1):
            print(f"   {i}. {step}")
        if recipe.glassware:
            print(f"   Glass: {recipe.glassware}")
        if recipe.garnish:
            print(f"   Garnish: {recipe.garnish}")

        if pitcher_oz:
            scale = scale_to_pitcher(recipe.ingredients, pitcher_oz)
            if scale.ingredients:
                print(f"\n   Pitcher ({pitcher_oz:g} oz):")
                for line in format_pitcher(scale).splitlines():
                    if line:
                        print(f"   {line}")


def import_recipes(args: argparse.Namespace, api_key: str | None) -> ParsedRecipes:
    """Run the import the command line asked for.

    Raises:
        ValueError: If an API key is needed but missing, or input is rejected
    """
    client = None
    if not args.no_ai:
        if not api_key:
            raise ValueError(
                f"API key not provided. Set {ENV_API_KEY} env var, use --api-key, or pass --no-ai")
        client = GeminiCompletionClient(api_key=api_key, model=args.model)

    if args.file:
        result = extract_recipes_from_text(_read_text(args.file), client)
    elif client is None:
        text, _ = fetch_recipe_text(args.url)
        result = extract_recipes_from_text(text)
    else:
        result = extract_recipes_from_url(args.url, client)

    logger.info("Extraction method: %s", result["extraction_method"])
    return ParsedRecipes.model_validate(
        {"recipes": result["recipes"], "skipped": result["skipped"]})


def main():
    """Main entry point for the cocktail converter."""
    parser = argparse.ArgumentParser(
        description="Import cocktail recipes from websites or AI output into structured JSON"
    )
    parser.add_argument(
        "url",
        nargs="?",
        help="URL of the recipe website"
    )
    parser.add_argument(
        "--file",
        help="Read recipe text from a file instead of a URL ('-' for stdin)"
    )
    parser.add_argument(
        "--no-ai",
        action="store_true",
        help="Parse the text directly without sending it to the model"
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path(DEFAULT_OUTPUT_DIR),
        help=f"Directory to save recipe JSON files (default: ./{DEFAULT_OUTPUT_DIR})"
    )
    parser.add_argument(
        "--pitcher",
        type=float,
        nargs="?",
        const=DEFAULT_PITCHER_OZ,
        metavar="OZ",
        help=f"Also print each recipe scaled to a pitcher (default: {DEFAULT_PITCHER_OZ:g} oz)"
    )
    parser.add_argument(
        "--list-models",
        action="store_true",
        help="List the models that support text generation and exit"
    )
    parser.add_argument(
        "--api-key",
        help=f"API key for the language model (can also be set via {ENV_API_KEY} env var)"
    )
    parser.add_argument(
        "--model",
        default=None,
        help=f"Model to use for extraction (default: {DEFAULT_MODEL})"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging"
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    # Load environment variables
    load_dotenv()
    api_key = args.api_key or os.getenv(ENV_API_KEY)
    args.model = args.model or os.getenv(ENV_MODEL) or DEFAULT_MODEL

    if args.list_models:
        if not api_key:
            logger.error("API key not provided. Set %s env var or use --api-key", ENV_API_KEY)
            sys.exit(1)
        for name in list_models(api_key):
            print(name)
        sys.exit(0)

    if bool(args.url) == bool(args.file):
        parser.error("provide either a URL or --file")

    try:
        parsed = import_recipes(args, api_key)
    except Exception as e:
        logger.error("Error importing recipes: %s", str(e), exc_info=args.verbose)
        sys.exit(1)

    print(f"\n{parsed.summary()}")
    _print_recipes(parsed, args.pitcher)

    if parsed.recipes:
        store = JsonFileRecipeStore(args.output_dir)
        print("\n📄 Output files:")
        for recipe in parsed.recipes:
            print(f"   - JSON: {store.save(recipe)}")

    sys.exit(0 if parsed.recipes else 1)


if __name__ == "__main__":
    main()
