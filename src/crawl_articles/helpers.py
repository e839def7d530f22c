"""Helper functions for crawl_articles CLI."""

from __future__ import annotations

import argparse

from common.cli_helpers import parse_csv


def parse_crawl_articles_args(argv: list[str] | None = None) -> argparse.Namespace:
    '''Parse CLI arguments for crawl_articles.'''

    parser = argparse.ArgumentParser(description="Crawl RSS/Atom sources into latest-raw.json")

    # Input options
    parser.add_argument(
        "--config",
        default=None,
        help="Crawl config name or path to a YAML file (default: CRAWL_CONFIG or prod)",
    )
    parser.add_argument(
        "--sources",
        default=None,
        help="Comma-separated list of source groups (default: all).",
    )

    # Filter options
    parser.add_argument(
        "--no-classifier",
        action="store_true",
        help="Use keyword filtering only, without loading the zero-shot model",
    )

    # Output options
    parser.add_argument("--data-dir", default=None, help="Snapshot directory (default: DATA_DIR or data)")
    parser.add_argument("--load-s3", action="store_true", help="Also upload written snapshots to S3")

    return parser.parse_args(argv)


def parse_source_groups(value: str | None) -> list[str]:
    '''Parse the --sources argument into a list of groups; empty means all.'''
    return [group for group in parse_csv(value) if group.lower() != "all"]
