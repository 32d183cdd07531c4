#!/usr/bin/env python3
"""Drive a query session against a live car API and print the results.

Examples::

    python scripts/browse_catalog.py --search golf
    python scripts/browse_catalog.py --car-type manual --tags sport,compact \\
        --sort-by createdAt --sort-order DESC
    CARCATALOG_BASE_URL=http://api.example.com python scripts/browse_catalog.py --vocabulary
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from carcatalog import (  # noqa: E402
    CatalogClient,
    CatalogConfig,
    CatalogError,
    FetchStatus,
    Notification,
    QuerySessionController,
    SortBy,
    SortOrder,
)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--base-url", help="API base address (default: CARCATALOG_BASE_URL or localhost)")
    parser.add_argument("--cache", help="JSON file used to persist the filter vocabulary")
    parser.add_argument("--search", default="", help="free-text filter")
    parser.add_argument("--car-type", help="single car type filter")
    parser.add_argument("--tags", default="", help="comma-separated tag filter")
    parser.add_argument("--sort-by", choices=[s.value for s in SortBy], default=SortBy.NAME.value)
    parser.add_argument("--sort-order", choices=[s.value for s in SortOrder], default=SortOrder.ASCENDING.value)
    parser.add_argument("--vocabulary", action="store_true", help="also print known car types and tags")
    parser.add_argument("--json", action="store_true", help="print items as JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser.parse_args(argv)


def _print_notification(notification: Notification) -> None:
    print(f"! {notification.message}", file=sys.stderr)


async def _run(args: argparse.Namespace) -> int:
    overrides: dict[str, object] = {}
    if args.base_url:
        overrides["base_url"] = args.base_url
    if args.cache:
        overrides["cache_path"] = args.cache
    config = CatalogConfig.from_env(**overrides)

    async with CatalogClient(config) as client:
        session = QuerySessionController(client, config=config, on_notify=_print_notification)
        try:
            await session.load_vocabulary()
            tags = [tag for tag in args.tags.split(",") if tag.strip()]
            if args.car_type or tags:
                await session.set_type_and_tags(args.car_type, tags)
            if args.search:
                await session.submit_search(args.search)
            await session.set_sort(args.sort_by, args.sort_order)
        finally:
            await session.aclose()

    if args.vocabulary:
        print("types:", ", ".join(session.vocabulary.car_types) or "-")
        print("tags: ", ", ".join(session.vocabulary.tags) or "-")

    result = session.result
    if result.status == FetchStatus.ERROR:
        print(f"error: {result.error_message}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps([item.model_dump(mode="json", exclude={"raw"}) for item in result.items], indent=2))
    else:
        print(f"{len(result.items)} car(s) for {session.query.to_params()}")
        for item in result.items:
            tag_text = f" [{', '.join(item.tags)}]" if item.tags else ""
            print(f"  #{item.id:<5} {item.name} ({item.car_type}){tag_text}")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        return asyncio.run(_run(args))
    except CatalogError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
