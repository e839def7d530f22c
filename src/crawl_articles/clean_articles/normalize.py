"""Normalize raw feed entries into Article records."""

import logging
import re
from datetime import datetime, timedelta
from typing import Iterable, Optional
from urllib.parse import urlparse

from common.datetime import parse_feed_date
from common.hashing import stable_id
from crawl_articles.models import Article, CrawlStats, RawEntry, SourceDescriptor

logger = logging.getLogger(__name__)

DESCRIPTION_LIMIT = 200


def clean_title(title: Optional[str]) -> str:
    """Strip [tags] and (parentheticals), collapse whitespace."""
    if not title:
        return ""
    title = re.sub(r"\[.*?\]", "", title)
    title = re.sub(r"\(.*?\)", "", title)
    return re.sub(r"\s+", " ", title).strip()


def strip_tags(text: Optional[str]) -> str:
    if not text:
        return ""
    return re.sub(r"<[^>]*>", "", text)


def extract_domain(url: str) -> str:
    """Hostname without a leading www., or "unknown"."""
    try:
        host = urlparse(url).hostname
    except ValueError:
        return "unknown"
    if not host:
        return "unknown"
    return host[4:] if host.startswith("www.") else host


def extract_description(entry: RawEntry) -> str:
    if entry.content_snippet:
        return entry.content_snippet[:DESCRIPTION_LIMIT]
    if entry.content:
        return strip_tags(entry.content)[:DESCRIPTION_LIMIT]
    if entry.summary:
        return strip_tags(entry.summary)[:DESCRIPTION_LIMIT]
    return ""


def resolve_pub_date(entry: RawEntry, now: datetime) -> Optional[datetime]:
    """Parse the entry date, falling back to `now` when none is given.

    Returns None for unparseable dates. Future dates are clamped to `now`.
    """
    raw = entry.pub_date or entry.iso_date or entry.published
    if not raw:
        return now

    pub_date = parse_feed_date(raw)
    if pub_date is None:
        return None

    if pub_date > now:
        logger.warning("Future date %s clamped to now for article: %.50s", pub_date.isoformat(), entry.title or "")
        return now
    return pub_date


def normalize_entry(
    entry: RawEntry,
    source: SourceDescriptor,
    now: datetime,
    window_days: int,
    stats: Optional[CrawlStats] = None,
) -> Optional[Article]:
    """Convert a RawEntry into an Article, or None if it is unusable or stale."""
    title = clean_title(entry.title)
    url = (entry.link or entry.guid or "").strip()
    if not title or not url:
        if stats is not None:
            stats.malformed += 1
        return None

    pub_date = resolve_pub_date(entry, now)
    if pub_date is None:
        if stats is not None:
            stats.malformed += 1
        return None

    if pub_date <= now - timedelta(days=window_days):
        if stats is not None:
            stats.stale += 1
        return None

    return Article(
        id=stable_id(title, url),
        title=title,
        url=url,
        source=source.name,
        source_domain=extract_domain(url),
        source_category=source.category,
        source_priority=source.priority,
        pub_date=pub_date,
        meta_description=extract_description(entry),
        crawled_at=now,
    )


def normalize_entries(
    entries: Iterable[RawEntry],
    source: SourceDescriptor,
    now: datetime,
    window_days: int,
    stats: Optional[CrawlStats] = None,
) -> list[Article]:
    articles = []
    for entry in entries:
        if stats is not None:
            stats.entries_seen += 1
        article = normalize_entry(entry, source, now, window_days, stats)
        if article is not None:
            articles.append(article)
    return articles
