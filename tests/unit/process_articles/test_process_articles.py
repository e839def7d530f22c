"""Tests for process_articles.process_articles module."""

import json
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from common.config import PipelineSettings
from common.datetime import to_iso
from common.snapshots import SnapshotNotFoundError
from process_articles.categorize import Categorizer
from process_articles.process_articles import process_articles, save_process_output

NOW = datetime(2024, 6, 20, 12, 0, tzinfo=timezone.utc)
SETTINGS = PipelineSettings()


def _article(article_id: str, age: timedelta = timedelta(hours=1), **extra) -> dict:
    return {
        "id": article_id,
        "title": f"Funding round {article_id} closes",
        "url": f"https://example.com/{article_id}",
        "source": "Example AI",
        "source_domain": "example.com",
        "pubDate": to_iso(NOW - age),
        "metaDescription": "",
        "crawledAt": to_iso(NOW - age),
        **extra,
    }


def _write(path, document: dict) -> None:
    path.write_text(json.dumps(document))


def _raw(tmp_path, articles: list[dict]) -> None:
    _write(tmp_path / "latest-raw.json", {
        "crawledAt": to_iso(NOW),
        "totalSources": 3,
        "totalArticles": len(articles),
        "aiFilterUsed": True,
        "articles": articles,
    })


def _classifier(score: float, category: str = "industry-news") -> MagicMock:
    return MagicMock(return_value={"labels": [category], "scores": [score]})


class TestProcessArticles:
    def test_missing_raw_snapshot_raises(self, tmp_path) -> None:
        with pytest.raises(SnapshotNotFoundError):
            process_articles(tmp_path, Categorizer(), SETTINGS, NOW)

    def test_processes_new_articles(self, tmp_path) -> None:
        _raw(tmp_path, [_article("a")])

        output = process_articles(tmp_path, Categorizer(_classifier(0.9, "ai-agents")), SETTINGS, NOW)

        [record] = output.latest["articles"]
        assert record["id"] == "a"
        assert record["url"] == "https://example.com/a"
        assert record["category"] == "ai-agents"
        assert record["confidence"] == 0.9
        assert 1 <= record["difficulty"] <= 10
        assert record["entities"] == []
        assert record["summary"]
        assert record["language"] == "en"
        assert record["processed_at"] == to_iso(NOW)
        assert output.stats.processed == 1
        assert output.stats.category_counts == {"ai-agents": 1}

    def test_latest_document_metadata(self, tmp_path) -> None:
        _raw(tmp_path, [_article("a")])
        _write(tmp_path / "latest-processed.json", {"articles": [_article("old", timedelta(days=2), category="research-paper")]})

        latest = process_articles(tmp_path, Categorizer(), SETTINGS, NOW).latest

        assert latest["crawledAt"] == to_iso(NOW)
        assert latest["totalSources"] == 3
        assert latest["processedAt"] == to_iso(NOW)
        assert latest["totalArticles"] == 2
        assert latest["categories"] == ["industry-news", "research-paper"]
        assert latest["processingMethod"] == "rule-based"
        assert latest["newArticlesProcessed"] == 1
        assert latest["existingArticlesKept"] == 1
        assert latest["cleanupApplied"] is False
        assert latest["cleanedUpCount"] == 0
        assert latest["rollingWindowDays"] == 15

    def test_rolling_window_over_twenty_articles(self, tmp_path) -> None:
        articles = [_article(f"a{i}", timedelta(hours=i)) for i in range(19)]
        articles.append(_article("stale", timedelta(days=16)))
        _raw(tmp_path, articles)

        output = process_articles(tmp_path, Categorizer(), SETTINGS, NOW)

        assert output.latest["totalArticles"] == 19
        assert output.latest["cleanupApplied"] is True
        assert output.latest["cleanedUpCount"] == 1
        assert "stale" not in {a["id"] for a in output.latest["articles"]}

    def test_low_confidence_goes_to_rejected_cache(self, tmp_path) -> None:
        _raw(tmp_path, [_article("weak")])

        output = process_articles(tmp_path, Categorizer(_classifier(0.20)), SETTINGS, NOW)

        assert output.latest["articles"] == []
        [rejected] = output.rejected_cache["articles"]
        assert rejected["id"] == "weak"
        assert rejected["rejectedReason"] == "low_confidence"
        assert rejected["confidence"] == 0.20
        assert rejected["confidenceThreshold"] == 0.25
        assert rejected["rejected_at"] == to_iso(NOW)
        assert output.rejected_cache["newlyRejected"] == 1
        assert output.stats.rejected == 1

    def test_skips_processed_and_rejected_ids(self, tmp_path) -> None:
        _raw(tmp_path, [_article("done"), _article("refused"), _article("new")])
        _write(tmp_path / "latest-processed.json", {"articles": [_article("done", category="industry-news")]})
        _write(tmp_path / "rejected-articles.json", {
            "articles": [{"id": "refused", "rejected_at": to_iso(NOW - timedelta(days=1))}]
        })
        classifier = _classifier(0.9)

        output = process_articles(tmp_path, Categorizer(classifier), SETTINGS, NOW)

        assert classifier.call_count == 1
        assert classifier.call_args.args[0] == "Funding round new closes"
        assert output.stats.already_processed == 1
        assert output.stats.previously_rejected == 1
        assert {a["id"] for a in output.latest["articles"]} == {"done", "new"}
        assert output.rejected_cache is None

    def test_nothing_new_is_a_cached_run(self, tmp_path) -> None:
        existing = [_article("a", category="industry-news"), _article("old", timedelta(days=16), category="industry-news")]
        _raw(tmp_path, [_article("a")])
        _write(tmp_path / "latest-processed.json", {"articles": existing})
        classifier = _classifier(0.9)

        output = process_articles(tmp_path, Categorizer(classifier), SETTINGS, NOW)

        classifier.assert_not_called()
        assert output.latest["processingMethod"] == "cached"
        assert output.daily["processingMethod"] == "cached"
        assert output.latest["totalArticles"] == 1
        assert output.latest["cleanedUpCount"] == 1

    def test_second_cached_run_cleans_nothing(self, tmp_path) -> None:
        existing = [_article("a", category="industry-news"), _article("old", timedelta(days=16), category="industry-news")]
        _raw(tmp_path, [_article("a")])
        _write(tmp_path / "latest-processed.json", {"articles": existing})

        first = process_articles(tmp_path, Categorizer(), SETTINGS, NOW)
        save_process_output(first, tmp_path, NOW)
        second = process_articles(tmp_path, Categorizer(), SETTINGS, NOW)

        assert second.latest["cleanedUpCount"] == 0
        assert second.latest["cleanupApplied"] is False
        assert second.latest["articles"] == first.latest["articles"]

    def test_processing_limit(self, tmp_path) -> None:
        _raw(tmp_path, [_article(str(i)) for i in range(5)])
        settings = replace(SETTINGS, processing_limit=2)

        output = process_articles(tmp_path, Categorizer(), settings, NOW)

        assert output.stats.candidates == 5
        assert output.stats.processed == 2
        assert [a["id"] for a in output.latest["articles"]] == ["0", "1"]

    def test_daily_subset(self, tmp_path) -> None:
        _raw(tmp_path, [_article("new")])
        _write(tmp_path / "latest-processed.json", {
            "articles": [_article("older", timedelta(days=3), category="industry-news", processed_at=to_iso(NOW - timedelta(days=3)))]
        })

        daily = process_articles(tmp_path, Categorizer(), SETTINGS, NOW).daily

        assert [a["id"] for a in daily["articles"]] == ["new"]
        assert daily["dailyArticlesCount"] == 1
        assert daily["totalArticles"] == 1
        assert daily["filterDate"] == "2024-06-20"
        assert daily["crawledAt"] == to_iso(NOW)

    def test_expired_rejections_rewrite_cache(self, tmp_path) -> None:
        _raw(tmp_path, [])
        _write(tmp_path / "rejected-articles.json", {
            "articles": [{"id": "x", "rejected_at": to_iso(NOW - timedelta(days=20))}]
        })

        output = process_articles(tmp_path, Categorizer(), SETTINGS, NOW)

        assert output.rejected_cache["articles"] == []
        assert output.rejected_cache["cleanedUpCount"] == 1


class TestSaveProcessOutput:
    def test_writes_latest_daily_and_cache(self, tmp_path) -> None:
        _raw(tmp_path, [_article("ok"), _article("weak")])
        classifier = MagicMock(side_effect=[
            {"labels": ["ai-agents"], "scores": [0.9]},
            {"labels": ["industry-news"], "scores": [0.1]},
        ])
        output = process_articles(tmp_path, Categorizer(classifier), SETTINGS, NOW)

        written = save_process_output(output, tmp_path, NOW)

        assert written == [
            tmp_path / "latest-processed.json",
            tmp_path / "2024-06-20-processed.json",
            tmp_path / "rejected-articles.json",
        ]
        latest = json.loads((tmp_path / "latest-processed.json").read_text())
        assert [a["id"] for a in latest["articles"]] == ["ok"]
        cache = json.loads((tmp_path / "rejected-articles.json").read_text())
        assert [a["id"] for a in cache["articles"]] == ["weak"]

    def test_unchanged_cache_is_not_written(self, tmp_path) -> None:
        _raw(tmp_path, [_article("ok")])
        output = process_articles(tmp_path, Categorizer(), SETTINGS, NOW)

        written = save_process_output(output, tmp_path, NOW)

        assert len(written) == 2
        assert not (tmp_path / "rejected-articles.json").exists()
