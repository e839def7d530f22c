"""CLI for crawling RSS/Atom sources."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from common.aws import upload_snapshots_to_s3
from common.cli_helpers import setup_logging
from common.config import load_settings
from common.datetime import utc_now
from common.rejections import rejected_ids
from common.snapshots import REJECTED_ARTICLES, SnapshotWriteError, read_snapshot
from crawl_articles.config import load_crawl_config
from crawl_articles.crawl_articles import crawl_articles, log_crawl_summary, save_crawl_output
from crawl_articles.fetch_articles.sources import load_sources
from crawl_articles.filter_articles.relevance import build_relevance_filter
from crawl_articles.helpers import parse_crawl_articles_args, parse_source_groups

load_dotenv()

setup_logging()
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    args = parse_crawl_articles_args(argv)
    settings = load_settings()
    config = load_crawl_config(args.config or settings.crawl_config, max_days_back=settings.rolling_window_days)
    data_dir = Path(args.data_dir or settings.data_dir)

    try:
        sources = load_sources(config.sources_path, parse_source_groups(args.sources))
    except ValueError as e:
        logger.error("%s", e)
        sys.exit(2)
    logger.info("Found %d sources to crawl", len(sources))

    cache = read_snapshot(data_dir / REJECTED_ARTICLES)
    relevance_filter = build_relevance_filter(
        threshold=settings.crawl_confidence_threshold,
        use_classifier=config.use_classifier and not args.no_classifier,
        model=config.classifier_model,
        rejected_ids=rejected_ids(cache),
    )

    output = crawl_articles(sources, config, relevance_filter)
    log_crawl_summary(output, settings.crawl_confidence_threshold)

    now = utc_now()
    try:
        written = save_crawl_output(output, data_dir, now, settings.rejected_cache_cleanup_days)
    except SnapshotWriteError as e:
        logger.error("Crawl failed: %s", e)
        sys.exit(1)

    if args.load_s3:
        upload_snapshots_to_s3(written, data_dir, "raw_snapshots", now)

    logger.info("Crawl complete! Found %d articles", len(output.articles))


if __name__ == "__main__":
    main()
