"""Zero-shot classifier relevance strategy."""

from common.zero_shot import ZeroShotClassifier
from crawl_articles.filter_articles.models import RelevanceResult

INPUT_CHAR_LIMIT = 500

# Stage 1: label 0 must beat both others for the article to be relevant
RELEVANCE_LABELS = [
    "AI and machine learning related content",
    "Non-AI technical content",
    "General news and entertainment",
]

# Stage 2: metadata only
AI_TOPIC_LABELS = [
    "LLM and language models",
    "Computer vision and image AI",
    "AI tools and developer platforms",
    "AI research and papers",
    "AI business and industry news",
]

DEFAULT_TOPIC = "artificial intelligence and machine learning"


def _scores_by_label(prediction: dict) -> dict[str, float]:
    return dict(zip(prediction["labels"], prediction["scores"]))


class ClassifierStrategy:
    """Two-stage zero-shot relevance classification.

    Errors from the underlying pipeline propagate so the caller can decide
    to fall back.
    """

    name = "classifier"

    def __init__(self, classifier: ZeroShotClassifier):
        self.classifier = classifier

    def __call__(
        self,
        title: str,
        description: str,
        source_name: str,
        source_category: str | None = None,
    ) -> RelevanceResult:
        text = f"{title} {description or ''}"[:INPUT_CHAR_LIMIT]

        scores = _scores_by_label(self.classifier(text, candidate_labels=RELEVANCE_LABELS))
        ai_score = scores[RELEVANCE_LABELS[0]]
        is_relevant = ai_score > max(scores[RELEVANCE_LABELS[1]], scores[RELEVANCE_LABELS[2]])

        top_category = DEFAULT_TOPIC
        if is_relevant:
            topic = self.classifier(text, candidate_labels=AI_TOPIC_LABELS)
            top_category = topic["labels"][0]

        return RelevanceResult(is_relevant=is_relevant, confidence=ai_score, top_category=top_category)
