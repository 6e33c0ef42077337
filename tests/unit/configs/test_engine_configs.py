"""Tests for engine configuration loading."""
import pytest

from readlog.configs.engine_configs import DEFAULT_CONFIG, EngineConfig, load_engine_config
from readlog.core.exceptions import ConfigError


class TestEngineConfig:
    """Tests for EngineConfig defaults and validation."""

    def test_defaults(self):
        assert DEFAULT_CONFIG.progress_window_days == 7
        assert DEFAULT_CONFIG.future_horizon_days == 1
        assert DEFAULT_CONFIG.stale_after_years == 2
        assert DEFAULT_CONFIG.max_entries == 10000
        assert DEFAULT_CONFIG.max_note_length == 1000
        assert DEFAULT_CONFIG.chunk_size == 500

    def test_rejects_negative_values(self):
        with pytest.raises(ConfigError):
            EngineConfig(progress_window_days=-1)

    def test_rejects_zero_chunk_size(self):
        with pytest.raises(ConfigError, match="chunk_size"):
            EngineConfig(chunk_size=0)

    def test_with_overrides_rejects_unknown_keys(self):
        with pytest.raises(ConfigError, match="Unknown config keys: chunk"):
            DEFAULT_CONFIG.with_overrides({"chunk": 10})


class TestLoadEngineConfig:
    """Tests for YAML config loading."""

    def test_none_and_missing_file_give_defaults(self, tmp_path):
        assert load_engine_config(None) is DEFAULT_CONFIG
        assert load_engine_config(tmp_path / "absent.yaml") is DEFAULT_CONFIG

    def test_overrides_from_file(self, tmp_path):
        path = tmp_path / "readlog.yaml"
        path.write_text("progress_window_days: 10\nchunk_size: 50\n", encoding="utf-8")

        config = load_engine_config(path)

        assert config.progress_window_days == 10
        assert config.chunk_size == 50
        assert config.stale_after_years == 2

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "readlog.yaml"
        path.write_text("", encoding="utf-8")
        assert load_engine_config(path) is DEFAULT_CONFIG

    def test_non_mapping_raises(self, tmp_path):
        path = tmp_path / "readlog.yaml"
        path.write_text("- 1\n- 2\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="mapping"):
            load_engine_config(path)

    def test_invalid_yaml_raises(self, tmp_path):
        path = tmp_path / "readlog.yaml"
        path.write_text("key: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="Cannot read"):
            load_engine_config(path)
