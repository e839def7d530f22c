"""Data models for relevance filtering."""

from dataclasses import dataclass
from typing import Optional

KEPT = "kept"
IRRELEVANT = "irrelevant"
LOW_QUALITY = "low_quality"
CACHED_REJECTION = "cached_rejection"


@dataclass
class RelevanceResult:
    """Strategy verdict for one article."""
    is_relevant: bool
    confidence: float
    top_category: Optional[str] = None


@dataclass
class FilterDecision:
    """Acceptance outcome after applying the confidence threshold."""
    outcome: str
    confidence: float
    threshold: float
    strategy: str
    top_category: Optional[str] = None

    @property
    def kept(self) -> bool:
        return self.outcome == KEPT
