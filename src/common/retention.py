"""Rolling-window retention and daily partitioning of article records."""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from common.datetime import parse_feed_date, utc_day_bounds
from common.utils import get_value

logger = logging.getLogger(__name__)

PUBLISHED_FIELDS = ("pubDate", "published_at", "pub_date")
PROCESSED_FIELDS = ("processed_at", "crawledAt")


@dataclass
class RetentionResult:
    kept: list[Any]
    removed: int

    @property
    def cleanup_applied(self) -> bool:
        return self.removed > 0


def record_date(record: Any, fields: tuple[str, ...]) -> datetime | None:
    """Parse the first present date field of a record."""
    for name in fields:
        value = get_value(record, name)
        if value:
            return parse_feed_date(value)
    return None


def apply_rolling_window(
    records: list[Any],
    days: int,
    now: datetime,
    fields: tuple[str, ...] = PUBLISHED_FIELDS,
) -> RetentionResult:
    """Keep records dated strictly after `now - days`.

    Records without a parseable date are dropped with the stale ones.
    Running it again on its own output removes nothing.
    """
    cutoff = now - timedelta(days=days)
    kept = []
    for record in records:
        dt = record_date(record, fields)
        if dt is not None and dt > cutoff:
            kept.append(record)

    removed = len(records) - len(kept)
    if removed:
        logger.info("Cleaned up %d records older than %d days", removed, days)
    return RetentionResult(kept=kept, removed=removed)


def select_daily(records: list[Any], now: datetime) -> list[Any]:
    """Records published or processed during the UTC day containing `now`."""
    start, end = utc_day_bounds(now)

    def in_day(dt: datetime | None) -> bool:
        return dt is not None and start <= dt <= end

    return [
        record for record in records
        if in_day(record_date(record, PUBLISHED_FIELDS)) or in_day(record_date(record, PROCESSED_FIELDS))
    ]


def sort_newest_first(records: list[Any]) -> list[Any]:
    oldest = datetime.min.replace(tzinfo=timezone.utc)
    return sorted(records, key=lambda r: record_date(r, PUBLISHED_FIELDS) or oldest, reverse=True)
