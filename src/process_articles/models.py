"""Data models for process_articles pipeline stage."""

from dataclasses import dataclass, field


@dataclass
class Categorization:
    """Category assigned to one article."""
    category: str
    confidence: float
    method: str


@dataclass
class ProcessStats:
    raw_articles: int = 0
    already_processed: int = 0
    previously_rejected: int = 0
    candidates: int = 0
    processed: int = 0
    rejected: int = 0
    cleaned_up: int = 0
    category_counts: dict[str, int] = field(default_factory=dict)


@dataclass
class ProcessOutput:
    """Documents produced by one processing run."""
    latest: dict
    daily: dict
    rejected_cache: dict | None
    stats: ProcessStats
