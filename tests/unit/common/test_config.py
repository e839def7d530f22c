"""Tests for common.config module."""

import pytest

from common.config import PipelineSettings, find_config_path, load_settings, load_yaml


class TestLoadSettings:
    def test_defaults_when_unset(self) -> None:
        assert load_settings({}) == PipelineSettings()

    def test_default_values(self) -> None:
        settings = load_settings({})
        assert settings.crawl_confidence_threshold == 0.30
        assert settings.categorization_confidence_threshold == 0.25
        assert settings.rejected_cache_cleanup_days == 15
        assert settings.rolling_window_days == 15
        assert settings.processing_limit is None
        assert settings.data_dir == "data"
        assert settings.crawl_config == "prod"

    def test_reads_environment_values(self) -> None:
        settings = load_settings({
            "CRAWL_CONFIDENCE_THRESHOLD": "0.5",
            "CATEGORIZATION_CONFIDENCE_THRESHOLD": "0.4",
            "REJECTED_CACHE_CLEANUP_DAYS": "7",
            "ROLLING_WINDOW_DAYS": "30",
            "PROCESSING_LIMIT": "10",
            "DATA_DIR": "/tmp/news",
            "CRAWL_CONFIG": "test",
        })
        assert settings.crawl_confidence_threshold == 0.5
        assert settings.categorization_confidence_threshold == 0.4
        assert settings.rejected_cache_cleanup_days == 7
        assert settings.rolling_window_days == 30
        assert settings.processing_limit == 10
        assert settings.data_dir == "/tmp/news"
        assert settings.crawl_config == "test"

    def test_process_threshold_variable(self) -> None:
        settings = load_settings({"PROCESS_CONFIDENCE_THRESHOLD": "0.35"})
        assert settings.categorization_confidence_threshold == 0.35

    def test_process_threshold_takes_precedence(self) -> None:
        settings = load_settings({
            "PROCESS_CONFIDENCE_THRESHOLD": "0.35",
            "CATEGORIZATION_CONFIDENCE_THRESHOLD": "0.4",
        })
        assert settings.categorization_confidence_threshold == 0.35

    def test_invalid_process_threshold_names_variable(self) -> None:
        with pytest.raises(ValueError, match="PROCESS_CONFIDENCE_THRESHOLD"):
            load_settings({"PROCESS_CONFIDENCE_THRESHOLD": "low"})

    def test_blank_values_use_defaults(self) -> None:
        settings = load_settings({"ROLLING_WINDOW_DAYS": "  ", "CRAWL_CONFIDENCE_THRESHOLD": ""})
        assert settings.rolling_window_days == 15
        assert settings.crawl_confidence_threshold == 0.30

    def test_non_positive_limit_means_unlimited(self) -> None:
        assert load_settings({"PROCESSING_LIMIT": "0"}).processing_limit is None

    def test_invalid_float_names_variable(self) -> None:
        with pytest.raises(ValueError, match="CRAWL_CONFIDENCE_THRESHOLD"):
            load_settings({"CRAWL_CONFIDENCE_THRESHOLD": "high"})

    def test_invalid_int_names_variable(self) -> None:
        with pytest.raises(ValueError, match="ROLLING_WINDOW_DAYS"):
            load_settings({"ROLLING_WINDOW_DAYS": "two weeks"})


class TestFindConfigPath:
    def test_finds_named_config(self, tmp_path) -> None:
        (tmp_path / "prod.yaml").write_text("batch_size: 5\n")
        assert find_config_path("prod", tmp_path) == tmp_path / "prod.yaml"

    def test_uses_default_name(self, tmp_path) -> None:
        (tmp_path / "prod.yaml").write_text("")
        assert find_config_path(None, tmp_path) == tmp_path / "prod.yaml"

    def test_env_var_overrides_default(self, tmp_path, monkeypatch) -> None:
        (tmp_path / "test.yaml").write_text("")
        monkeypatch.setenv("CRAWL_CONFIG", "test")
        assert find_config_path(None, tmp_path, env_var="CRAWL_CONFIG") == tmp_path / "test.yaml"

    def test_accepts_yaml_path(self, tmp_path) -> None:
        path = tmp_path / "custom.yaml"
        path.write_text("")
        assert find_config_path(str(path), tmp_path / "elsewhere") == path

    def test_missing_config_raises(self, tmp_path) -> None:
        with pytest.raises(FileNotFoundError):
            find_config_path("missing", tmp_path)


class TestLoadYaml:
    def test_loads_mapping(self, tmp_path) -> None:
        path = tmp_path / "c.yaml"
        path.write_text("batch_size: 3\nfetch:\n  timeout: 5\n")
        assert load_yaml(path) == {"batch_size": 3, "fetch": {"timeout": 5}}

    def test_empty_file_returns_empty_dict(self, tmp_path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_yaml(path) == {}
