"""Configuration loader for crawl_articles."""

from dataclasses import dataclass, field
from pathlib import Path

from common.config import find_config_path, load_yaml

CONFIG_DIR = Path(__file__).parent / "configs"


@dataclass(frozen=True)
class CategoryLimits:
    """Per-category crawl bounds."""
    item_limit: int = 20
    days_back: int = 7


# `default` applies to categories not listed.
DEFAULT_CATEGORY_LIMITS = {
    "youtube": CategoryLimits(item_limit=10, days_back=14),
    "research": CategoryLimits(item_limit=15, days_back=15),
    "community": CategoryLimits(item_limit=25, days_back=3),
    "medium": CategoryLimits(item_limit=15, days_back=7),
    "developer": CategoryLimits(item_limit=12, days_back=14),
    "tutorial": CategoryLimits(item_limit=20, days_back=14),
    "agentic": CategoryLimits(item_limit=20, days_back=10),
    "default": CategoryLimits(item_limit=20, days_back=7),
}


@dataclass
class FetchConfig:
    timeout: float = 10.0
    max_redirects: int = 3
    max_attempts: int = 3
    retry_base_delay: float = 1.0
    user_agent: str = "ai-news-crawler/1.0 (RSS reader)"


@dataclass
class CrawlConfig:
    batch_size: int = 5
    batch_delay: float = 1.0
    use_classifier: bool = True
    classifier_model: str = "typeform/distilbert-base-uncased-mnli"
    sources_file: str = "sources.yaml"
    fetch: FetchConfig = field(default_factory=FetchConfig)
    categories: dict[str, CategoryLimits] = field(default_factory=lambda: dict(DEFAULT_CATEGORY_LIMITS))

    def limits_for(self, category: str | None) -> CategoryLimits:
        """Item limit and day window for a source category."""
        if category and category in self.categories:
            return self.categories[category]
        return self.categories.get("default", CategoryLimits())

    @property
    def sources_path(self) -> Path:
        path = Path(self.sources_file)
        return path if path.is_absolute() else CONFIG_DIR / path


def load_crawl_config(config_name: str | None = None, max_days_back: int | None = None) -> CrawlConfig:
    """Load crawl configuration from YAML file.

    Args:
        config_name: Name of config file (without .yaml extension) or a
                    path to one. If None, uses CRAWL_CONFIG env var or "prod".
        max_days_back: Upper bound for per-category day windows (the
                    retention window), if given.

    Returns:
        Loaded CrawlConfig object
    """
    path = find_config_path(config_name, CONFIG_DIR, env_var="CRAWL_CONFIG")
    return _parse_config(load_yaml(path), max_days_back)


def _parse_limits(data: dict, base: CategoryLimits) -> CategoryLimits:
    return CategoryLimits(
        item_limit=int(data.get("item_limit", base.item_limit)),
        days_back=int(data.get("days_back", base.days_back)),
    )


def _parse_config(data: dict, max_days_back: int | None = None) -> CrawlConfig:
    """Parse config dictionary into CrawlConfig object."""
    fetch_data = data.get("fetch", {}) or {}
    fetch = FetchConfig(
        timeout=float(fetch_data.get("timeout", 10)),
        max_redirects=int(fetch_data.get("max_redirects", 3)),
        max_attempts=int(fetch_data.get("max_attempts", 3)),
        retry_base_delay=float(fetch_data.get("retry_base_delay", 1.0)),
        user_agent=fetch_data.get("user_agent", FetchConfig.user_agent),
    )

    overrides = data.get("categories", {}) or {}
    if "default" in overrides:
        # A configured default replaces the built-in per-category table.
        categories = {"default": _parse_limits(overrides["default"], DEFAULT_CATEGORY_LIMITS["default"])}
    else:
        categories = dict(DEFAULT_CATEGORY_LIMITS)
    for name, limits in overrides.items():
        if name != "default":
            categories[name] = _parse_limits(limits, categories.get(name, categories["default"]))

    if max_days_back is not None:
        categories = {
            name: CategoryLimits(limits.item_limit, min(limits.days_back, max_days_back))
            for name, limits in categories.items()
        }

    return CrawlConfig(
        batch_size=max(1, int(data.get("batch_size", 5))),
        batch_delay=float(data.get("batch_delay", 1.0)),
        use_classifier=bool(data.get("use_classifier", True)),
        classifier_model=data.get("classifier_model", CrawlConfig.classifier_model),
        sources_file=data.get("sources_file", "sources.yaml"),
        fetch=fetch,
        categories=categories,
    )
