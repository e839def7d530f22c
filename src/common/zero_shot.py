"""Zero-shot classification model loading."""

import logging
from typing import Any, Callable

from transformers import pipeline as hf_pipeline

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "typeform/distilbert-base-uncased-mnli"

ZeroShotClassifier = Callable[..., Any]


def load_zero_shot_classifier(model: str = DEFAULT_MODEL) -> ZeroShotClassifier:
    """Load a HuggingFace zero-shot-classification pipeline.

    The returned callable takes ``(text, candidate_labels=[...])`` and returns
    ``{"labels": [...], "scores": [...]}`` sorted by descending score.
    """
    logger.info("Loading model: %s", model)
    return hf_pipeline("zero-shot-classification", model=model)
