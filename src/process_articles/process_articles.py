"""Incrementally categorize crawled articles into the processed snapshots."""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from common.config import PipelineSettings
from common.datetime import to_iso
from common.rejections import LOW_CONFIDENCE, build_rejected_record, merge_rejected_cache, rejected_ids
from common.retention import apply_rolling_window, select_daily, sort_newest_first
from common.snapshots import (
    LATEST_PROCESSED,
    LATEST_RAW,
    REJECTED_ARTICLES,
    daily_snapshot_name,
    read_snapshot,
    write_snapshot,
)
from process_articles.categorize import (
    CACHED,
    Categorizer,
    calculate_difficulty,
    extract_entities,
    generate_summary,
)
from process_articles.models import ProcessOutput, ProcessStats

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "en"


def select_candidates(
    raw_articles: list[dict],
    processed_ids: set[str],
    skipped_ids: set[str],
    limit: Optional[int],
    stats: ProcessStats,
) -> list[dict]:
    """Raw articles that are neither processed nor rejected, capped at `limit`."""
    candidates = []
    for article in raw_articles:
        article_id = article.get("id")
        if article_id in processed_ids:
            stats.already_processed += 1
        elif article_id in skipped_ids:
            stats.previously_rejected += 1
        else:
            candidates.append(article)

    stats.candidates = len(candidates)
    if limit is not None and limit < len(candidates):
        logger.info("Processing only the first %d of %d new articles (PROCESSING_LIMIT)", limit, len(candidates))
        candidates = candidates[:limit]
    return candidates


def categorize_article(
    article: dict[str, Any],
    categorizer: Categorizer,
    threshold: float,
    now: datetime,
) -> tuple[Optional[dict], Optional[dict]]:
    """Categorize one raw article.

    Returns:
        (processed record, None) when confidence reaches `threshold`,
        otherwise (None, rejected-cache record)
    """
    title = article.get("title") or ""
    result = categorizer.categorize(title, article.get("source") or "")

    if result.confidence < threshold:
        logger.info("Rejected low confidence (%.1f%%): %.60s", result.confidence * 100, title)
        return None, build_rejected_record(article, LOW_CONFIDENCE, result.confidence, threshold, now)

    entities = extract_entities(title)
    processed = {
        **article,
        "category": result.category,
        "confidence": result.confidence,
        "difficulty": calculate_difficulty(title, entities),
        "entities": entities,
        "summary": generate_summary(title, article.get("metaDescription")),
        "language": DEFAULT_LANGUAGE,
        "processed_at": to_iso(now),
    }
    return processed, None


def _unique_categories(articles: list[dict]) -> list[str]:
    return list(dict.fromkeys(a["category"] for a in articles if a.get("category")))


def build_processed_snapshots(
    raw: dict,
    articles: list[dict],
    stats: ProcessStats,
    method: str,
    existing_count: int,
    window_days: int,
    now: datetime,
) -> tuple[dict, dict]:
    """Build the latest-processed and daily documents from the retained articles."""
    processed_at = to_iso(now)
    latest = {
        **raw,
        "articles": articles,
        "processedAt": processed_at,
        "totalArticles": len(articles),
        "categories": _unique_categories(articles),
        "processingMethod": method,
        "newArticlesProcessed": stats.processed,
        "existingArticlesKept": existing_count,
        "cleanupApplied": stats.cleaned_up > 0,
        "cleanedUpCount": stats.cleaned_up,
        "rollingWindowDays": window_days,
    }

    todays = select_daily(articles, now)
    daily = {
        **raw,
        "articles": todays,
        "processedAt": processed_at,
        "totalArticles": len(todays),
        "categories": _unique_categories(todays),
        "processingMethod": method,
        "newArticlesProcessed": stats.processed,
        "dailyArticlesCount": len(todays),
        "filterDate": now.strftime("%Y-%m-%d"),
    }
    return latest, daily


def process_articles(
    data_dir: Path,
    categorizer: Categorizer,
    settings: PipelineSettings,
    now: datetime,
) -> ProcessOutput:
    """Categorize new raw articles and merge them into the processed set.

    Articles already processed or present in the rejected cache are skipped.
    With nothing new to categorize the run only re-applies the rolling window
    (processingMethod "cached").

    Raises:
        SnapshotNotFoundError: If latest-raw.json is missing or unreadable
    """
    data_dir = Path(data_dir)
    raw = read_snapshot(data_dir / LATEST_RAW, required=True)
    existing = read_snapshot(data_dir / LATEST_PROCESSED)
    cache = read_snapshot(data_dir / REJECTED_ARTICLES)

    existing_articles = existing["articles"]
    processed_ids = {a.get("id") for a in existing_articles}
    logger.info("Found %d already processed articles", len(existing_articles))
    logger.info("Found %d previously rejected articles", len(cache["articles"]))

    stats = ProcessStats(raw_articles=len(raw["articles"]))
    candidates = select_candidates(
        raw["articles"], processed_ids, rejected_ids(cache), settings.processing_limit, stats
    )
    logger.info("Found %d total articles, %d new articles to process", stats.raw_articles, stats.candidates)

    new_processed: list[dict] = []
    new_rejected: list[dict] = []
    if candidates:
        logger.info("Processing %d new articles", len(candidates))
        for i, article in enumerate(candidates, 1):
            logger.info("Processing %d/%d: %.50s", i, len(candidates), article.get("title") or "")
            processed, rejected = categorize_article(
                article, categorizer, settings.categorization_confidence_threshold, now
            )
            if processed is not None:
                new_processed.append(processed)
                counts = stats.category_counts
                counts[processed["category"]] = counts.get(processed["category"], 0) + 1
            else:
                new_rejected.append(rejected)
        method = categorizer.method
    else:
        logger.info("All articles already processed, refreshing the rolling window")
        method = CACHED

    stats.processed = len(new_processed)
    stats.rejected = len(new_rejected)

    merged = sort_newest_first(existing_articles + new_processed)
    retention = apply_rolling_window(merged, settings.rolling_window_days, now)
    stats.cleaned_up = retention.removed

    latest, daily = build_processed_snapshots(
        raw, retention.kept, stats, method, len(existing_articles), settings.rolling_window_days, now
    )

    rejected_cache = merge_rejected_cache(cache, new_rejected, settings.rejected_cache_cleanup_days, now)
    if not rejected_cache["newlyRejected"] and not rejected_cache["cleanedUpCount"]:
        rejected_cache = None

    return ProcessOutput(latest=latest, daily=daily, rejected_cache=rejected_cache, stats=stats)


def save_process_output(output: ProcessOutput, data_dir: Path, now: datetime) -> list[Path]:
    """Write latest-processed.json, the daily snapshot and, if changed, the rejected cache.

    Raises:
        SnapshotWriteError: If any document cannot be written
    """
    data_dir = Path(data_dir)
    written = [
        write_snapshot(output.latest, data_dir / LATEST_PROCESSED),
        write_snapshot(output.daily, data_dir / daily_snapshot_name(now)),
    ]
    if output.rejected_cache is not None:
        written.append(write_snapshot(output.rejected_cache, data_dir / REJECTED_ARTICLES))
        logger.info(
            "Updated rejected articles cache: %d new rejections, %d total",
            output.rejected_cache["newlyRejected"], output.rejected_cache["totalRejected"],
        )
    return written


def log_process_summary(output: ProcessOutput, threshold: float) -> None:
    stats = output.stats
    latest = output.latest
    logger.info("Processed %d new articles (%s)", stats.processed, latest["processingMethod"])
    logger.info(
        "Total articles in %d-day window: %d (%d existing + %d new)",
        latest["rollingWindowDays"], latest["totalArticles"], latest["existingArticlesKept"], stats.processed,
    )
    if stats.cleaned_up:
        logger.info("Cleaned up %d articles older than %d days", stats.cleaned_up, latest["rollingWindowDays"])
    if stats.category_counts:
        logger.info("New categories found: %s", ", ".join(stats.category_counts))
    if stats.rejected:
        logger.info("Rejected %d articles with confidence < %.0f%%", stats.rejected, threshold * 100)
    logger.info("Daily snapshot: %d of today's articles", output.daily["dailyArticlesCount"])
