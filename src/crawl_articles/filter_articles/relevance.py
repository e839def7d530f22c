"""Relevance/quality filtering with classifier-to-keyword fallback."""

import logging
from typing import Callable, Iterable, Optional

from common.zero_shot import load_zero_shot_classifier
from crawl_articles.filter_articles.classifier import ClassifierStrategy
from crawl_articles.filter_articles.keywords import KeywordStrategy
from crawl_articles.filter_articles.models import (
    CACHED_REJECTION,
    IRRELEVANT,
    KEPT,
    LOW_QUALITY,
    FilterDecision,
)
from crawl_articles.models import Article

logger = logging.getLogger(__name__)


class RelevanceFilter:
    """Decide whether crawled articles are kept.

    An article is kept when its strategy marks it relevant with confidence
    at or above `threshold`. Ids in `rejected_ids` are refused without
    running any strategy. Once the classifier fails, the keyword strategy is
    used for every later article.
    """

    def __init__(
        self,
        threshold: float,
        classifier: Optional[ClassifierStrategy] = None,
        keywords: Optional[KeywordStrategy] = None,
        rejected_ids: Iterable[str] = (),
    ):
        self.threshold = threshold
        self.classifier = classifier
        self.keywords = keywords or KeywordStrategy()
        self.rejected_ids = set(rejected_ids)
        self.classifier_used = classifier is not None

    @property
    def using_classifier(self) -> bool:
        return self.classifier is not None

    def evaluate(self, article: Article) -> FilterDecision:
        if article.id in self.rejected_ids:
            return FilterDecision(CACHED_REJECTION, 0.0, self.threshold, "cache")

        strategy = self.classifier or self.keywords
        try:
            result = strategy(article.title, article.meta_description, article.source, article.source_category)
        except Exception as e:
            if strategy is self.keywords:
                raise
            logger.warning("Classifier failed, using keyword filtering for the rest of the run: %s", e)
            self.classifier = None
            strategy = self.keywords
            result = strategy(article.title, article.meta_description, article.source, article.source_category)

        if not result.is_relevant:
            outcome = IRRELEVANT
            if strategy is self.classifier and result.confidence > 0.2:
                logger.info("AI filtered out: %s (confidence: %.2f)", article.title, result.confidence)
        elif result.confidence < self.threshold:
            outcome = LOW_QUALITY
            logger.info(
                "Quality filtered: %.50s (confidence: %.1f%% < %.0f%%)",
                article.title, result.confidence * 100, self.threshold * 100,
            )
        else:
            outcome = KEPT

        return FilterDecision(
            outcome=outcome,
            confidence=result.confidence,
            threshold=self.threshold,
            strategy=strategy.name,
            top_category=result.top_category,
        )


def build_relevance_filter(
    threshold: float,
    use_classifier: bool,
    model: str,
    rejected_ids: Iterable[str] = (),
    loader: Callable[[str], Callable] = load_zero_shot_classifier,
) -> RelevanceFilter:
    """Create a RelevanceFilter, falling back to keywords if the model will not load."""
    classifier = None
    if use_classifier:
        try:
            classifier = ClassifierStrategy(loader(model))
            logger.info("AI classifier ready for content filtering")
        except Exception as e:
            logger.warning("AI classifier failed to load, falling back to keyword filtering: %s", e)

    return RelevanceFilter(threshold=threshold, classifier=classifier, rejected_ids=rejected_ids)
