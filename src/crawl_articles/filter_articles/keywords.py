"""Keyword-based relevance strategy."""

from crawl_articles.filter_articles.models import RelevanceResult

AI_KEYWORDS = [
    # Core AI terms
    "ai", "artificial intelligence", "machine learning", "ml", "deep learning",
    "neural network", "neural net", "deep neural", "artificial neural",
    # LLMs and models
    "llm", "large language model", "language model", "foundation model",
    "gpt", "claude", "gemini", "llama", "alpaca", "vicuna", "falcon",
    "transformer", "bert", "roberta", "t5", "bart", "electra",
    # Companies and products
    "openai", "anthropic", "google ai", "deepmind", "meta ai",
    "hugging face", "langchain", "pinecone", "weaviate", "chroma",
    "chatgpt", "copilot", "github copilot", "cursor ai", "replit ai",
    "dall-e", "midjourney", "stable diffusion", "runway", "pika",
    # Techniques and concepts
    "fine-tuning", "fine tuning", "prompt", "prompting", "prompt engineering",
    "rag", "retrieval augmented", "embeddings", "vector database",
    "attention", "self-attention", "multi-head attention",
    "backpropagation", "gradient descent", "optimization",
    "reinforcement learning", "rl", "rlhf", "constitutional ai",
    # Applications
    "computer vision", "cv", "image recognition", "object detection",
    "nlp", "natural language processing", "natural language",
    "speech recognition", "text-to-speech", "voice synthesis",
    "generative", "generation", "synthesis", "diffusion",
    "chatbot", "agent", "autonomous", "automation", "robotics",
    # Technical terms
    "pytorch", "tensorflow", "keras", "transformers",
    "dataset", "training", "inference", "model", "algorithm",
    "benchmark", "evaluation", "metrics", "loss function",
    "overfitting", "regularization", "dropout", "batch norm",
]

# Sources whose every post is considered relevant
AI_SOURCES = [
    "openai", "anthropic", "huggingface", "hugging face", "langchain",
    "deepmind", "google ai", "meta ai", "nvidia", "cohere",
    "replicate", "gradio", "wandb", "weights & biases",
]

EDUCATIONAL_CATEGORIES = {"youtube", "research", "tutorial", "newsletter"}

EDUCATIONAL_KEYWORDS = [
    "ai", "artificial intelligence", "machine learning", "ml", "deep learning",
    "neural", "algorithm", "model", "data science", "automation", "robotics",
    "computer science", "programming", "coding", "software", "tech", "agent",
]

EXCLUDE_TERMS = [
    "fields medal", "nobel prize", "pure mathematics", "number theory",
    "sports", "football", "basketball", "soccer", "tennis", "olympics",
    "politics", "election", "climate change", "global warming",
]


def _contains_any(text: str, terms: list[str]) -> bool:
    return any(term in text for term in terms)


class KeywordStrategy:
    """Deterministic title/source matching; confidence is 1.0 or 0.0."""

    name = "keywords"

    def __init__(
        self,
        keywords: list[str] | None = None,
        source_allowlist: list[str] | None = None,
        exclude_terms: list[str] | None = None,
    ):
        self.keywords = keywords or AI_KEYWORDS
        self.source_allowlist = source_allowlist or AI_SOURCES
        self.exclude_terms = exclude_terms or EXCLUDE_TERMS

    def is_relevant(self, title: str, source_name: str, source_category: str | None = None) -> bool:
        title_lower = title.lower()
        if _contains_any(title_lower, self.exclude_terms):
            return False

        if _contains_any(source_name.lower(), self.source_allowlist):
            return True

        if _contains_any(title_lower, self.keywords):
            return True

        return source_category in EDUCATIONAL_CATEGORIES and _contains_any(title_lower, EDUCATIONAL_KEYWORDS)

    def __call__(
        self,
        title: str,
        description: str,
        source_name: str,
        source_category: str | None = None,
    ) -> RelevanceResult:
        relevant = self.is_relevant(title, source_name, source_category)
        return RelevanceResult(
            is_relevant=relevant,
            confidence=1.0 if relevant else 0.0,
            top_category="keyword-match" if relevant else None,
        )
