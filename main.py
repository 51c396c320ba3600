"""Command line entrypoint for running the jewel matcher locally."""

from __future__ import annotations

import argparse
import json
from dataclasses import replace
from pathlib import Path

from matcher_app.app import JewelMatcherApp
from matcher_app.config import MatcherConfig


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Recommend jewelry from a photo and shopper preferences")
    parser.add_argument("--image", help="Path to a photo to analyze for dominant colors.")
    parser.add_argument("--image-url", help="URL of a photo to fetch and analyze.")
    parser.add_argument("--occasion")
    parser.add_argument("--style")
    parser.add_argument("--budget", help="low, medium, high or a numeric ceiling.")
    parser.add_argument("--material")
    parser.add_argument("--category")
    parser.add_argument("--gender", default="unisex")
    parser.add_argument("--seed", help="JSON file of catalog records to load before matching.")
    parser.add_argument("--database", help="Path to the SQLite catalog (overrides CATALOG_DB_PATH).")
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    config = MatcherConfig.from_env()
    if args.database:
        config = replace(config, catalog_db_path=args.database)
    app = JewelMatcherApp(config=config)

    if args.seed:
        app.seed_catalog_from_file(args.seed)

    preferences = {
        "occasion": args.occasion,
        "style": args.style,
        "budget": args.budget,
        "material": args.material,
        "category": args.category,
        "gender": args.gender,
    }
    # Unset flags fall back to the request defaults.
    preferences = {key: value for key, value in preferences.items() if value is not None}
    if args.image or args.image_url:
        image = Path(args.image).read_bytes() if args.image else None
        response = app.analyze({**preferences, "image_url": args.image_url}, image=image)
    else:
        response = app.suggest(preferences)
    print(json.dumps(response, indent=2))


if __name__ == "__main__":
    main()
