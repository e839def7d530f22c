"""Crawl sources, normalize, filter, dedupe and persist raw snapshots."""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterator

from common.datetime import to_iso, utc_now
from common.rejections import LOW_CRAWL_CONFIDENCE, build_rejected_record, merge_rejected_cache
from common.retention import sort_newest_first
from common.serialization import serialize_dataclass
from common.snapshots import (
    LATEST_RAW,
    REJECTED_ARTICLES,
    group_archive_name,
    read_snapshot,
    write_snapshot,
)
from crawl_articles.clean_articles.normalize import normalize_entries
from crawl_articles.config import CrawlConfig
from crawl_articles.dedupe import remove_duplicates
from crawl_articles.fetch_articles.fetch_feed import fetch_feed
from crawl_articles.filter_articles.models import CACHED_REJECTION, IRRELEVANT, LOW_QUALITY
from crawl_articles.filter_articles.relevance import RelevanceFilter
from crawl_articles.models import ARTICLE_ALIASES, Article, CrawlStats, FetchResult, SourceDescriptor

logger = logging.getLogger(__name__)

Fetcher = Callable[..., FetchResult]


@dataclass
class CrawlOutput:
    """Result of one crawl run."""
    articles: list[Article]
    rejected: list[dict]
    stats: CrawlStats
    ai_filter_used: bool
    groups: dict[str, list[Article]] = field(default_factory=dict)


def serialize_article(article: Article) -> dict:
    return serialize_dataclass(article, ARTICLE_ALIASES)


def _fetch_one(fetcher: Fetcher, source: SourceDescriptor, config: CrawlConfig) -> FetchResult:
    item_limit = config.limits_for(source.category).item_limit
    return fetcher(source, config.fetch, item_limit)


def fetch_in_batches(
    sources: list[SourceDescriptor],
    config: CrawlConfig,
    fetcher: Fetcher = fetch_feed,
    sleep: Callable[[float], None] = time.sleep,
) -> Iterator[list[FetchResult]]:
    """Fetch sources `batch_size` at a time.

    Each batch is joined before it is yielded; results keep the batch's
    input order. A delay separates consecutive batches.
    """
    batch_size = config.batch_size
    for start in range(0, len(sources), batch_size):
        batch = sources[start:start + batch_size]

        with ThreadPoolExecutor(max_workers=len(batch)) as executor:
            futures = [executor.submit(_fetch_one, fetcher, source, config) for source in batch]

        results = []
        for source, future in zip(batch, futures):
            try:
                results.append(future.result())
            except Exception as e:
                logger.error("Failed to crawl %s: %s", source.name, e)
                results.append(FetchResult(source=source, entries=[], error=str(e)))

        yield results

        if start + batch_size < len(sources):
            sleep(config.batch_delay)


def crawl_articles(
    sources: list[SourceDescriptor],
    config: CrawlConfig,
    relevance_filter: RelevanceFilter,
    fetcher: Fetcher = fetch_feed,
    clock: Callable[[], datetime] = utc_now,
    sleep: Callable[[float], None] = time.sleep,
) -> CrawlOutput:
    """Crawl all sources and return kept, deduplicated articles, newest first."""
    logger.info("Crawling %d sources", len(sources))
    stats = CrawlStats(sources=len(sources))
    kept: list[tuple[str, Article]] = []
    rejected: list[dict] = []

    for results in fetch_in_batches(sources, config, fetcher, sleep):
        for result in results:
            source = result.source
            if result.failed:
                stats.failed_sources += 1
                stats.failed_source_names.append(source.name)
                continue

            now = clock()
            window = config.limits_for(source.category).days_back
            articles = normalize_entries(result.entries, source, now, window, stats)

            source_kept = 0
            for article in articles:
                stats.processed += 1
                decision = relevance_filter.evaluate(article)

                if decision.kept:
                    kept.append((source.source_identifier, article))
                    source_kept += 1
                elif decision.outcome == LOW_QUALITY:
                    stats.quality_filtered += 1
                    rejected.append(
                        build_rejected_record(
                            serialize_article(article),
                            LOW_CRAWL_CONFIDENCE,
                            decision.confidence,
                            decision.threshold,
                            now,
                        )
                    )
                elif decision.outcome == IRRELEVANT:
                    stats.irrelevant += 1
                elif decision.outcome == CACHED_REJECTION:
                    stats.cached_rejections += 1

            logger.info("%s: %d articles kept", source.name, source_kept)

    unique = remove_duplicates([article for _, article in kept])
    stats.duplicates = len(kept) - len(unique)
    unique = sort_newest_first(unique)
    stats.kept = len(unique)

    unique_ids = {id(article) for article in unique}
    groups: dict[str, list[Article]] = {}
    for group, article in kept:
        if id(article) in unique_ids:
            groups.setdefault(group, []).append(article)
    groups = {group: sort_newest_first(articles) for group, articles in groups.items()}

    return CrawlOutput(
        articles=unique,
        rejected=rejected,
        stats=stats,
        ai_filter_used=relevance_filter.classifier_used,
        groups=groups,
    )


def build_raw_snapshot(output: CrawlOutput, total_sources: int, now: datetime) -> dict:
    stats = output.stats
    return {
        "crawledAt": to_iso(now),
        "totalSources": total_sources,
        "totalArticles": len(output.articles),
        "aiFilterUsed": output.ai_filter_used,
        "stats": {
            "processed": stats.processed,
            "kept": stats.kept,
            "filtered": stats.filtered,
            "qualityFiltered": stats.quality_filtered,
            "duplicates": stats.duplicates,
            "malformed": stats.malformed,
            "stale": stats.stale,
            "failedSources": stats.failed_sources,
        },
        "articles": [serialize_article(a) for a in output.articles],
    }


def save_crawl_output(
    output: CrawlOutput,
    data_dir: Path,
    now: datetime,
    rejected_cleanup_days: int,
) -> list[Path]:
    """Write latest-raw.json, per-group archives and the rejected cache.

    Raises:
        SnapshotWriteError: If any document cannot be written
    """
    data_dir = Path(data_dir)
    written = [write_snapshot(build_raw_snapshot(output, output.stats.sources, now), data_dir / LATEST_RAW)]

    for group, articles in output.groups.items():
        document = {
            "crawledAt": to_iso(now),
            "sourceIdentifier": group,
            "totalArticles": len(articles),
            "articles": [serialize_article(a) for a in articles],
        }
        written.append(write_snapshot(document, data_dir / group_archive_name(group, now)))

    if output.rejected:
        rejected_path = data_dir / REJECTED_ARTICLES
        cache = merge_rejected_cache(read_snapshot(rejected_path), output.rejected, rejected_cleanup_days, now)
        written.append(write_snapshot(cache, rejected_path))
        logger.info("Updated rejected articles cache: %d new, %d total", cache["newlyRejected"], cache["totalRejected"])

    return written


def log_crawl_summary(output: CrawlOutput, threshold: float) -> None:
    stats = output.stats
    logger.info("Found %d unique AI articles", len(output.articles))
    logger.info("AI filtering: %s", "ENABLED" if output.ai_filter_used else "fallback to keywords")
    if stats.quality_filtered:
        logger.info("Quality filtered during crawl: %d articles (< %.0f%% confidence)", stats.quality_filtered, threshold * 100)
    if stats.cached_rejections:
        logger.info("Skipped %d previously rejected articles", stats.cached_rejections)
    if stats.failed_sources:
        logger.warning("Failed sources: %s", ", ".join(stats.failed_source_names))
    logger.info(
        "Crawl stats: %d processed, %d kept, %d filtered, %d duplicates, %d malformed, %d stale, %d failed sources",
        stats.processed, stats.kept, stats.filtered, stats.duplicates, stats.malformed, stats.stale, stats.failed_sources,
    )
