"""Rejected-article cache records."""

from datetime import datetime
from typing import Any

from common.datetime import to_iso
from common.retention import apply_rolling_window

LOW_CONFIDENCE = "low_confidence"
LOW_CRAWL_CONFIDENCE = "low_crawl_confidence"

REJECTED_AT_FIELDS = ("rejected_at",)


def build_rejected_record(
    article: dict[str, Any],
    reason: str,
    confidence: float,
    threshold: float,
    now: datetime,
) -> dict[str, Any]:
    return {
        **article,
        "rejectedReason": reason,
        "confidence": confidence,
        "confidenceThreshold": threshold,
        "rejected_at": to_iso(now),
    }


def rejected_ids(document: dict[str, Any]) -> set[str]:
    return {a["id"] for a in document.get("articles", []) if a.get("id")}


def merge_rejected_cache(
    existing: dict[str, Any],
    new_records: list[dict[str, Any]],
    cleanup_days: int,
    now: datetime,
) -> dict[str, Any]:
    """Append new rejections and drop entries rejected more than `cleanup_days` ago."""
    known = rejected_ids(existing)
    fresh = []
    for record in new_records:
        if record.get("id") in known:
            continue
        known.add(record.get("id"))
        fresh.append(record)
    retention = apply_rolling_window(
        list(existing.get("articles", [])) + fresh,
        cleanup_days,
        now,
        fields=REJECTED_AT_FIELDS,
    )
    return {
        "articles": retention.kept,
        "updatedAt": to_iso(now),
        "totalRejected": len(retention.kept),
        "newlyRejected": len(fresh),
        "cleanupThresholdDays": cleanup_days,
        "cleanedUpCount": retention.removed,
    }
