"""RSS/Atom feed fetching."""

import logging
from typing import Any

import feedparser
import requests

from common.retry import RetryPolicy
from crawl_articles.config import FetchConfig
from crawl_articles.models import FetchResult, RawEntry, SourceDescriptor

logger = logging.getLogger(__name__)


class FeedParseError(Exception):
    """Feed body could not be parsed into entries."""


def build_session(config: FetchConfig) -> requests.Session:
    session = requests.Session()
    session.max_redirects = config.max_redirects
    session.headers.update({"User-Agent": config.user_agent})
    return session


def fetch_feed(
    source: SourceDescriptor,
    config: FetchConfig,
    item_limit: int,
    policy: RetryPolicy | None = None,
    session: requests.Session | None = None,
) -> FetchResult:
    """Fetch one source's feed, returning at most `item_limit` entries.

    Never raises: after the retry policy is exhausted the error is logged
    and an empty result is returned.
    """
    if policy is None:
        policy = RetryPolicy(max_attempts=config.max_attempts, base_delay=config.retry_base_delay)
    session = session or build_session(config)

    attempts_used = 0

    def attempt() -> list[RawEntry]:
        nonlocal attempts_used
        attempts_used += 1
        return _fetch_entries(source.url, config, session)

    try:
        entries, _ = policy.call(attempt, description=f"fetch {source.name}")
    except Exception as e:
        logger.error("Failed to crawl %s: %s", source.name, e)
        return FetchResult(source=source, entries=[], error=str(e), attempts=attempts_used)

    return FetchResult(source=source, entries=entries[:item_limit], attempts=attempts_used)


def _fetch_entries(feed_url: str, config: FetchConfig, session: requests.Session) -> list[RawEntry]:
    """Fetch and parse a single feed."""
    response = session.get(feed_url, timeout=config.timeout)
    response.raise_for_status()

    feed = feedparser.parse(response.content)
    if feed.bozo and not feed.entries:
        raise FeedParseError(f"Unparseable feed: {feed.get('bozo_exception')}")

    return [to_raw_entry(entry) for entry in feed.entries]


def _content_value(entry: Any) -> str | None:
    content = entry.get("content")
    if not content:
        return None
    values = [part.get("value", "") for part in content if part.get("value")]
    return "".join(values) or None


def to_raw_entry(entry: Any) -> RawEntry:
    """Map a feedparser entry onto RawEntry.

    A plain-text summary is exposed as the pre-stripped snippet; HTML
    summaries are left for the normalizer to strip.
    """
    summary = entry.get("summary")
    detail = entry.get("summary_detail") or {}
    snippet = summary if summary and detail.get("type") == "text/plain" else None

    return RawEntry(
        title=entry.get("title"),
        link=entry.get("link"),
        guid=entry.get("id"),
        pub_date=entry.get("published"),
        iso_date=entry.get("updated"),
        published=entry.get("created"),
        content_snippet=snippet,
        content=_content_value(entry),
        summary=summary,
    )
