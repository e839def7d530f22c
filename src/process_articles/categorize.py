"""Article categorization, entity tagging, difficulty scoring and summaries."""

import logging
import re
from typing import Callable, Optional

from common.zero_shot import ZeroShotClassifier, load_zero_shot_classifier
from process_articles.models import Categorization

logger = logging.getLogger(__name__)

CATEGORIES = [
    "model-release",
    "research-paper",
    "developer-tool",
    "product-launch",
    "tutorial-guide",
    "industry-news",
    "ai-agents",
    "creative-ai",
    "infrastructure",
    "safety-ethics",
]

AI_POWERED = "ai-powered"
RULE_BASED = "rule-based"
MIXED = "mixed"
CACHED = "cached"

# (category, confidence, title pattern, source substrings), first match wins
CATEGORY_RULES = [
    ("model-release", 0.85, re.compile(r"\b(gpt-\d+|claude|gemini|llama|mistral|release|model)\b"), ("openai", "anthropic")),
    ("research-paper", 0.9, re.compile(r"\b(paper|arxiv|research|study|analysis)\b"), ("arxiv",)),
    ("developer-tool", 0.8, re.compile(r"\b(api|sdk|framework|tool|library|code|programming)\b"), ("hugging",)),
    ("ai-agents", 0.85, re.compile(r"\b(agent|workflow|automation|autonomous)\b"), ()),
    ("tutorial-guide", 0.8, re.compile(r"\b(tutorial|guide|how to|step by step|learn)\b"), ("data science", "mastery")),
    ("creative-ai", 0.75, re.compile(r"\b(image|video|audio|creative|art|generate)\b"), ()),
]
DEFAULT_CATEGORY = ("industry-news", 0.6)

ORGANIZATIONS = [
    "OpenAI", "Anthropic", "Google", "Meta", "Microsoft", "NVIDIA", "Apple", "Amazon", "Tesla",
    "Hugging Face", "LangChain", "Pinecone", "Weights & Biases", "DeepMind", "Stability AI",
    "Midjourney", "RunwayML",
]
PRODUCTS = [
    "GPT-4", "GPT-5", "Claude", "Gemini", "LLaMA", "Llama", "ChatGPT", "DALL-E", "Midjourney",
    "Stable Diffusion", "BERT", "Transformer",
]
TECHNOLOGIES = [
    "AI", "ML", "NLP", "Computer Vision", "Deep Learning", "Machine Learning", "Neural Network",
    "Transformer", "LLM", "API", "SDK",
]

TECHNICAL_TERMS = ["transformer", "neural", "deep learning", "api", "sdk", "algorithm", "model", "training", "inference"]
RESEARCH_TERMS = ["paper", "study", "research", "analysis", "arxiv"]
ADVANCED_TERMS = ["rlhf", "fine-tuning", "quantization", "distillation", "embedding"]

BASE_DIFFICULTY = 3
MIN_DIFFICULTY = 1
MAX_DIFFICULTY = 10

SUMMARY_LIMIT = 120
MIN_DESCRIPTION_LENGTH = 50

TOPIC_SUMMARIES = [
    (re.compile(r"\b(gpt|chatgpt|claude|gemini|llama|mistral|ollama|lmstudio)\b"),
     "Discussion about AI models and tools mentioned in the title."),
    (re.compile(r"\b(how to|help|issue|error|problem|question|which|best|recommend)\b"),
     "Community discussion seeking help or recommendations on AI-related topics."),
    (re.compile(r"\b(release|releasing|available|launched|new|update)\b"),
     "Announcement or discussion about new AI model releases and updates."),
    (re.compile(r"\b(image|generate|create|art|stable diffusion|midjourney)\b"),
     "Discussion about AI-powered creative content generation and tools."),
    (re.compile(r"\b(paper|research|study|arxiv|analysis)\b"),
     "Discussion of AI research findings and academic papers."),
]
DEFAULT_TOPIC_SUMMARY = "Community discussion about AI developments and related topics."


def classify_category(title: str, source: str) -> Categorization:
    """Rule-based category from title keywords and source name."""
    title_lower = title.lower()
    source_lower = (source or "").lower()

    for category, confidence, pattern, source_hints in CATEGORY_RULES:
        if pattern.search(title_lower) or any(hint in source_lower for hint in source_hints):
            return Categorization(category=category, confidence=confidence, method=RULE_BASED)

    category, confidence = DEFAULT_CATEGORY
    return Categorization(category=category, confidence=confidence, method=RULE_BASED)


def extract_entities(title: str) -> list[dict[str, str]]:
    """Tag known organizations, products and technologies mentioned in a title."""
    title_lower = title.lower()
    entities = []
    for label, names in (("ORG", ORGANIZATIONS), ("PRODUCT", PRODUCTS), ("TECH", TECHNOLOGIES)):
        for name in names:
            if name.lower() in title_lower:
                entities.append({"text": name, "label": label})
    return entities


def calculate_difficulty(title: str, entities: list) -> int:
    title_lower = title.lower()
    difficulty = float(BASE_DIFFICULTY)

    for terms, weight in ((TECHNICAL_TERMS, 1), (RESEARCH_TERMS, 2), (ADVANCED_TERMS, 3)):
        difficulty += weight * sum(1 for term in terms if term in title_lower)
    difficulty += len(entities) * 0.5

    # half up
    rounded = int(difficulty + 0.5)
    return min(max(rounded, MIN_DIFFICULTY), MAX_DIFFICULTY)


def is_boilerplate(description: str) -> bool:
    """True for feed descriptions that carry no article text (Reddit link stubs, bare URLs)."""
    text = description.strip()
    return (
        ("submitted by" in description and "[link]" in description)
        or len(text) < 30
        or "https://preview.redd.it" in description
        or re.match(r"^https?://", description) is not None
    )


def create_topic_based_summary(title: str) -> str:
    title_lower = title.lower()
    for pattern, summary in TOPIC_SUMMARIES:
        if pattern.search(title_lower):
            return summary
    return DEFAULT_TOPIC_SUMMARY


def generate_summary(title: str, meta_description: Optional[str]) -> str:
    """Short summary from the feed description, or a topic line derived from the title."""
    content = None
    if meta_description and meta_description.strip() and not is_boilerplate(meta_description):
        if len(meta_description) > MIN_DESCRIPTION_LENGTH:
            content = meta_description.strip()

    if content is None:
        return create_topic_based_summary(title)

    cleaned = re.sub(r"\s+", " ", content).strip()
    if len(cleaned) > SUMMARY_LIMIT:
        return cleaned[:SUMMARY_LIMIT] + "..."
    return cleaned


class Categorizer:
    """Assign one of CATEGORIES to article titles.

    Uses the zero-shot classifier when one is given. The first classifier
    error switches the categorizer to rules for the rest of the run.
    """

    def __init__(self, classifier: Optional[ZeroShotClassifier] = None):
        self.classifier = classifier
        self.model_calls = 0
        self.rule_calls = 0

    @property
    def using_classifier(self) -> bool:
        return self.classifier is not None

    @property
    def method(self) -> str:
        """processingMethod label for the articles categorized so far."""
        if self.model_calls and self.rule_calls:
            return MIXED
        if self.model_calls:
            return AI_POWERED
        if self.rule_calls:
            return RULE_BASED
        return AI_POWERED if self.using_classifier else RULE_BASED

    def categorize(self, title: str, source: str) -> Categorization:
        if self.classifier is not None:
            try:
                prediction = self.classifier(title, candidate_labels=CATEGORIES)
                self.model_calls += 1
                return Categorization(
                    category=prediction["labels"][0],
                    confidence=float(prediction["scores"][0]),
                    method=AI_POWERED,
                )
            except Exception as e:
                logger.warning("Classifier failed, using rule-based categorization for the rest of the run: %s", e)
                self.classifier = None

        self.rule_calls += 1
        return classify_category(title, source)


def build_categorizer(
    use_classifier: bool,
    model: str,
    loader: Callable[[str], ZeroShotClassifier] = load_zero_shot_classifier,
) -> Categorizer:
    if not use_classifier:
        logger.info("Using rule-based categorization")
        return Categorizer()

    try:
        classifier = loader(model)
    except Exception as e:
        logger.warning("AI models failed to load, using rule-based processing: %s", e)
        return Categorizer()

    logger.info("AI models loaded")
    return Categorizer(classifier)
