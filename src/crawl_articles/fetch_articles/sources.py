"""Source registry loading."""

import logging
from pathlib import Path

from common.config import load_yaml
from crawl_articles.models import SourceDescriptor

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "url")


def parse_sources(data: dict) -> list[SourceDescriptor]:
    """Flatten grouped source records into SourceDescriptors.

    Groups keep their file order. Records missing a name or url are
    skipped with a warning.
    """
    sources = []
    for group, records in (data or {}).items():
        if not isinstance(records, list):
            logger.warning("Ignoring source group %s: expected a list", group)
            continue

        for record in records:
            missing = [f for f in REQUIRED_FIELDS if not record.get(f)]
            if missing:
                logger.warning("Skipping source in %s missing %s: %s", group, ", ".join(missing), record)
                continue

            sources.append(
                SourceDescriptor(
                    name=record["name"],
                    url=record["url"],
                    category=record.get("category", "news"),
                    priority=str(record.get("priority", "medium")),
                    source_identifier=record.get("source_identifier") or group,
                    language=record.get("language"),
                )
            )
    return sources


def load_sources(path: Path, groups: list[str] | None = None) -> list[SourceDescriptor]:
    """Load the source registry, optionally restricted to some groups.

    Raises:
        ValueError: If `groups` names no known group
    """
    sources = parse_sources(load_yaml(Path(path)))
    if not groups:
        return sources

    known = {s.source_identifier for s in sources}
    for group in groups:
        if group not in known:
            logger.warning("Invalid source group: %s", group)

    selected = [s for s in sources if s.source_identifier in groups]
    if not selected:
        raise ValueError(f"No valid source groups provided. Valid groups: {', '.join(sorted(known))}")
    return selected
