"""Tests for crawl_articles.fetch_articles.sources module."""

import pytest

from crawl_articles.config import CONFIG_DIR
from crawl_articles.fetch_articles.sources import load_sources, parse_sources


class TestParseSources:
    def test_group_becomes_source_identifier(self) -> None:
        data = {"reddit_sources": [{"name": "r/ML", "url": "https://reddit.com/r/ml/.rss", "category": "community"}]}
        [source] = parse_sources(data)
        assert source.name == "r/ML"
        assert source.source_identifier == "reddit_sources"
        assert source.category == "community"

    def test_explicit_identifier_wins(self) -> None:
        data = {"sources": [{"name": "A", "url": "https://a.com/rss", "source_identifier": "custom"}]}
        assert parse_sources(data)[0].source_identifier == "custom"

    def test_defaults_for_optional_fields(self) -> None:
        [source] = parse_sources({"sources": [{"name": "A", "url": "https://a.com/rss"}]})
        assert source.category == "news"
        assert source.priority == "medium"
        assert source.language is None

    def test_skips_records_missing_name_or_url(self) -> None:
        data = {"sources": [{"name": "A"}, {"url": "https://b.com/rss"}, {"name": "C", "url": "https://c.com/rss"}]}
        assert [s.name for s in parse_sources(data)] == ["C"]

    def test_ignores_non_list_groups(self) -> None:
        assert parse_sources({"broken": "not a list"}) == []

    def test_keeps_file_order(self) -> None:
        data = {
            "b": [{"name": "B1", "url": "https://b.com/1"}],
            "a": [{"name": "A1", "url": "https://a.com/1"}, {"name": "A2", "url": "https://a.com/2"}],
        }
        assert [s.name for s in parse_sources(data)] == ["B1", "A1", "A2"]


class TestLoadSources:
    def test_loads_bundled_registry(self) -> None:
        sources = load_sources(CONFIG_DIR / "sources.yaml")
        assert sources
        assert {"sources", "reddit_sources", "youtube_channels"} <= {s.source_identifier for s in sources}

    def test_filters_groups(self, tmp_path) -> None:
        path = tmp_path / "sources.yaml"
        path.write_text(
            "news:\n  - {name: A, url: 'https://a.com/rss'}\n"
            "blogs:\n  - {name: B, url: 'https://b.com/rss'}\n"
        )
        assert [s.name for s in load_sources(path, ["blogs"])] == ["B"]

    def test_unknown_groups_ignored_when_one_is_valid(self, tmp_path) -> None:
        path = tmp_path / "sources.yaml"
        path.write_text("news:\n  - {name: A, url: 'https://a.com/rss'}\n")
        assert [s.name for s in load_sources(path, ["news", "nope"])] == ["A"]

    def test_no_valid_group_raises(self, tmp_path) -> None:
        path = tmp_path / "sources.yaml"
        path.write_text("news:\n  - {name: A, url: 'https://a.com/rss'}\n")
        with pytest.raises(ValueError, match="No valid source groups"):
            load_sources(path, ["nope"])
