"""Title-prefix duplicate removal."""

import logging
import re
from typing import TypeVar

from common.utils import get_value

logger = logging.getLogger(__name__)

T = TypeVar("T")

KEY_WORDS = 8


def dedupe_key(title: str) -> str:
    """Lowercased, punctuation-free first 8 words of a title."""
    text = re.sub(r"[^a-z0-9\s]", "", (title or "").lower())
    text = re.sub(r"\s+", " ", text).strip()
    return " ".join(text.split(" ")[:KEY_WORDS])


def remove_duplicates(articles: list[T]) -> list[T]:
    """Keep the first article for each title key, preserving input order."""
    unique: list[T] = []
    seen: set[str] = set()

    for article in articles:
        key = dedupe_key(get_value(article, "title"))
        if key in seen:
            continue
        seen.add(key)
        unique.append(article)

    if len(unique) < len(articles):
        logger.info("Removed %d duplicate articles", len(articles) - len(unique))
    return unique
