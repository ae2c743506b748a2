#!/usr/bin/env python3
"""Content check workflow.

Fetches rooms, amenities and tourist spots from the CMS and prints what the
site would render. Useful after editing content or changing WORDPRESS_URL.

Usage:
    # Everything
    uv run python -m workflows.content_check

    # Rooms only, as JSON
    uv run python -m workflows.content_check --section rooms --json

    # One page by slug
    uv run python -m workflows.content_check --page about-us
"""

import argparse
import asyncio
import json
import sys

from loguru import logger

from lib.wordpress.api_client import WordPressApiClient
from lib.wordpress.config import load_config
from lib.wordpress.errors import ConfigurationError, ContentError, NotFoundError
from lib.wordpress.logging import configure_logging
from services import content

SECTIONS = ("rooms", "amenities", "explore")


async def check_content(sections, page_slug=None, as_json=False) -> int:
    """Returns the number of sections that failed to load."""
    config = load_config()
    configure_logging(config, level="WARNING" if as_json else None)

    failures = 0
    output = {}
    async with WordPressApiClient(config) as client:
        if "rooms" in sections:
            rooms = await content.load_rooms(client)
            if not rooms:
                failures += 1
            output["rooms"] = [r.model_dump() for r in rooms]
            if not as_json:
                logger.info(f"Rooms: {len(rooms)}")
                for room in rooms:
                    logger.info(f"  {room.name:<30} {room.rate:>8}  {room.details}")

        for name, loader in (
            ("amenities", content.load_amenities),
            ("explore", content.load_points_of_interest),
        ):
            if name not in sections:
                continue
            state = await loader(client)
            if state.error:
                failures += 1
                logger.error(f"{name}: {state.error}")
            output[name] = state.model_dump()
            if not as_json:
                logger.info(f"{name.title()}: {len(state.items)}")
                for item in state.items:
                    logger.info(f"  {item.title}")

        if page_slug:
            try:
                page = await content.load_page(client, page_slug)
                output["page"] = page.model_dump()
                if not as_json:
                    logger.info(f"Page '{page_slug}': {page.title}")
            except NotFoundError as e:
                failures += 1
                logger.error(str(e))
            except ContentError as e:
                failures += 1
                logger.error(f"Page '{page_slug}' failed to load: {e}")

    if as_json:
        print(json.dumps(output, indent=2))
    return failures


def main():
    parser = argparse.ArgumentParser(description="Check CMS content the site renders")
    parser.add_argument(
        "--section",
        choices=SECTIONS,
        action="append",
        help="Section to check (repeatable, default: all)",
    )
    parser.add_argument("--page", help="Also fetch a page by slug")
    parser.add_argument("--json", action="store_true", help="Print JSON instead of a summary")
    args = parser.parse_args()

    try:
        failures = asyncio.run(
            check_content(args.section or SECTIONS, page_slug=args.page, as_json=args.json)
        )
    except ConfigurationError as e:
        logger.error(str(e))
        sys.exit(2)

    sys.exit(1 if failures else 0)


if __name__ == "__main__":
    main()
