"""CLI for categorizing crawled articles."""

from __future__ import annotations

import dataclasses
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from common.aws import upload_snapshots_to_s3
from common.cli_helpers import setup_logging
from common.config import load_settings
from common.datetime import utc_now
from common.snapshots import SnapshotNotFoundError, SnapshotWriteError
from process_articles.categorize import build_categorizer
from process_articles.helpers import parse_process_articles_args
from process_articles.process_articles import log_process_summary, process_articles, save_process_output

load_dotenv()

setup_logging()
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    args = parse_process_articles_args(argv)
    settings = load_settings()
    if args.limit is not None:
        settings = dataclasses.replace(settings, processing_limit=args.limit)
    data_dir = Path(args.data_dir or settings.data_dir)

    categorizer = build_categorizer(use_classifier=not args.no_classifier, model=args.model)

    now = utc_now()
    try:
        output = process_articles(data_dir, categorizer, settings, now)
        written = save_process_output(output, data_dir, now)
    except (SnapshotNotFoundError, SnapshotWriteError) as e:
        logger.error("Processing failed: %s", e)
        sys.exit(1)

    log_process_summary(output, settings.categorization_confidence_threshold)

    if args.load_s3:
        upload_snapshots_to_s3(written, data_dir, "processed_snapshots", now)

    logger.info("Processing complete!")


if __name__ == "__main__":
    main()
