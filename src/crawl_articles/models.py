"""Data models for crawl_articles pipeline stage."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class SourceDescriptor:
    """A feed endpoint from the source registry."""
    name: str
    url: str
    category: str
    priority: str
    source_identifier: str
    language: Optional[str] = None


@dataclass
class RawEntry:
    """Feed item as returned by the fetch stage."""
    title: Optional[str] = None
    link: Optional[str] = None
    guid: Optional[str] = None
    pub_date: Optional[str] = None
    iso_date: Optional[str] = None
    published: Optional[str] = None
    content_snippet: Optional[str] = None
    content: Optional[str] = None
    summary: Optional[str] = None


@dataclass
class FetchResult:
    """Entries fetched for one source, tagged with that source."""
    source: SourceDescriptor
    entries: list[RawEntry]
    error: Optional[str] = None
    attempts: int = 1

    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclass
class Article:
    """Canonical article record produced by normalization."""
    id: str
    title: str
    url: str
    source: str
    source_domain: str
    source_category: str
    source_priority: str
    pub_date: datetime
    meta_description: str
    crawled_at: datetime
    category: Optional[str] = None
    difficulty: Optional[int] = None
    confidence: Optional[float] = None


# Snapshot JSON keys that differ from the attribute names
ARTICLE_ALIASES = {
    "pub_date": "pubDate",
    "meta_description": "metaDescription",
    "crawled_at": "crawledAt",
}


@dataclass
class CrawlStats:
    """Run-level counters reported at the end of a crawl."""
    sources: int = 0
    failed_sources: int = 0
    entries_seen: int = 0
    malformed: int = 0
    stale: int = 0
    processed: int = 0
    kept: int = 0
    irrelevant: int = 0
    quality_filtered: int = 0
    cached_rejections: int = 0
    duplicates: int = 0
    failed_source_names: list[str] = field(default_factory=list)

    @property
    def filtered(self) -> int:
        return self.irrelevant + self.quality_filtered + self.cached_rejections
