"""Helper functions for process_articles CLI."""

from __future__ import annotations

import argparse

from common.cli_helpers import parse_positive_int
from common.zero_shot import DEFAULT_MODEL


def parse_process_articles_args(argv: list[str] | None = None) -> argparse.Namespace:
    '''Parse CLI arguments for process_articles.'''

    parser = argparse.ArgumentParser(description="Categorize new articles from latest-raw.json")

    # Input options
    parser.add_argument("--data-dir", default=None, help="Snapshot directory (default: DATA_DIR or data)")
    parser.add_argument(
        "--limit",
        type=parse_positive_int,
        default=None,
        help="Process at most this many new articles (default: PROCESSING_LIMIT or all)",
    )

    # Model options
    parser.add_argument(
        "--no-classifier",
        action="store_true",
        help="Use rule-based categorization only, without loading the zero-shot model",
    )
    parser.add_argument("--model", default=DEFAULT_MODEL, help="Zero-shot classification model")

    # Output options
    parser.add_argument("--load-s3", action="store_true", help="Also upload written snapshots to S3")

    return parser.parse_args(argv)
