"""Tests for process_articles.cli module."""

import json
from datetime import datetime, timezone
from unittest.mock import patch

import pytest

from common.datetime import to_iso
from process_articles.categorize import Categorizer
from process_articles.cli import main


def _write_raw(data_dir, articles: list[dict]) -> None:
    (data_dir / "latest-raw.json").write_text(json.dumps({"crawledAt": to_iso(datetime.now(timezone.utc)), "articles": articles}))


def _article(article_id: str) -> dict:
    return {
        "id": article_id,
        "title": f"Funding round {article_id} closes",
        "url": f"https://example.com/{article_id}",
        "source": "Example AI",
        "pubDate": to_iso(datetime.now(timezone.utc)),
    }


class TestMain:
    def test_missing_raw_snapshot_exits_1(self, tmp_path) -> None:
        with pytest.raises(SystemExit) as exc:
            main(["--data-dir", str(tmp_path), "--no-classifier"])
        assert exc.value.code == 1

    @patch("process_articles.cli.build_categorizer")
    def test_writes_processed_snapshots(self, mock_build, tmp_path) -> None:
        mock_build.return_value = Categorizer()
        _write_raw(tmp_path, [_article("a"), _article("b"), _article("c")])

        main(["--data-dir", str(tmp_path), "--no-classifier", "--limit", "2"])

        mock_build.assert_called_once()
        assert mock_build.call_args.kwargs["use_classifier"] is False
        latest = json.loads((tmp_path / "latest-processed.json").read_text())
        assert latest["newArticlesProcessed"] == 2
        assert latest["processingMethod"] == "rule-based"

    @patch("process_articles.cli.upload_snapshots_to_s3")
    @patch("process_articles.cli.build_categorizer")
    def test_load_s3_uploads_written_files(self, mock_build, mock_upload, tmp_path) -> None:
        mock_build.return_value = Categorizer()
        _write_raw(tmp_path, [_article("a")])

        main(["--data-dir", str(tmp_path), "--load-s3"])

        written, data_dir, prefix, _ = mock_upload.call_args.args
        assert tmp_path / "latest-processed.json" in written
        assert data_dir == tmp_path
        assert prefix == "processed_snapshots"
