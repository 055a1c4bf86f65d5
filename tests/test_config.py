"""Unit tests for Config and related Pydantic models (viewscaffold.config).

Tests cover:
- CacheConfig and ParserConfig defaults and validation
- Config defaults, derived values, save/load
- Config.from_env
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from viewscaffold.config import CacheConfig, Config, ParserConfig


# ---------------------------------------------------------------------------
# CacheConfig / ParserConfig
# ---------------------------------------------------------------------------


class TestCacheConfig:
    @pytest.mark.unit
    def test_defaults(self):
        cache = CacheConfig()
        assert cache.max_entries == 100
        assert cache.expiration_seconds == 300.0
        assert cache.sweep_interval_seconds == 60.0

    @pytest.mark.unit
    def test_zero_entries_rejected(self):
        with pytest.raises(ValidationError):
            CacheConfig(max_entries=0)

    @pytest.mark.unit
    def test_zero_expiration_rejected(self):
        with pytest.raises(ValidationError):
            CacheConfig(expiration_seconds=0)


class TestParserConfig:
    @pytest.mark.unit
    def test_defaults(self):
        parser = ParserConfig()
        assert parser.model_folders == ["Models", "Entities", "Domain"]
        assert parser.excluded_dirs == ["bin", "obj", "node_modules"]
        assert parser.skip_identity is False


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------


class TestConfig:
    @pytest.mark.unit
    def test_default_values(self):
        config = Config()
        assert config.default_template_directory == "Views"
        assert config.use_layout_by_default is True
        assert config.default_layout_name == "_Layout"
        assert config.enable_logging is False

    @pytest.mark.unit
    def test_default_layout(self):
        assert Config().default_layout == "_Layout"
        assert Config(use_layout_by_default=False).default_layout is None

    @pytest.mark.unit
    def test_empty_layout_name_rejected(self):
        with pytest.raises(ValidationError):
            Config(default_layout_name="")

    @pytest.mark.unit
    def test_views_path(self, tmp_path: Path):
        config = Config(default_template_directory="Pages")
        assert config.views_path(tmp_path) == tmp_path / "Pages"

    @pytest.mark.unit
    def test_save_and_load(self, tmp_path: Path):
        config = Config(
            default_layout_name="_Main",
            cache=CacheConfig(max_entries=5),
            parser=ParserConfig(skip_identity=True),
        )
        path = config.save(tmp_path / "nested" / "viewscaffold.json")
        assert json.loads(path.read_text(encoding="utf-8"))["default_layout_name"] == "_Main"

        loaded = Config.load(path)
        assert loaded == config

    @pytest.mark.unit
    def test_load_invalid(self, tmp_path: Path):
        path = tmp_path / "bad.json"
        path.write_text('{"cache": {"max_entries": 0}}', encoding="utf-8")
        with pytest.raises(ValidationError):
            Config.load(path)


# ---------------------------------------------------------------------------
# Config.from_env
# ---------------------------------------------------------------------------


class TestConfigFromEnv:
    @pytest.mark.unit
    def test_defaults_when_no_env(self):
        with patch.dict(os.environ, {}, clear=True):
            config = Config.from_env()
        assert config == Config()

    @pytest.mark.unit
    def test_view_settings(self):
        env = {
            "VIEWSCAFFOLD_TEMPLATE_DIR": "Pages",
            "VIEWSCAFFOLD_USE_LAYOUT": "false",
            "VIEWSCAFFOLD_LAYOUT_NAME": "_Main",
            "VIEWSCAFFOLD_ENABLE_LOGGING": "YES",
        }
        with patch.dict(os.environ, env, clear=True):
            config = Config.from_env()
        assert config.default_template_directory == "Pages"
        assert config.use_layout_by_default is False
        assert config.default_layout_name == "_Main"
        assert config.enable_logging is True

    @pytest.mark.unit
    def test_cache_settings(self):
        env = {
            "VIEWSCAFFOLD_CACHE_MAX_ENTRIES": "10",
            "VIEWSCAFFOLD_CACHE_EXPIRATION": "30.5",
            "VIEWSCAFFOLD_CACHE_SWEEP_INTERVAL": "5",
        }
        with patch.dict(os.environ, env, clear=True):
            config = Config.from_env()
        assert config.cache == CacheConfig(
            max_entries=10, expiration_seconds=30.5, sweep_interval_seconds=5
        )

    @pytest.mark.unit
    def test_parser_settings(self):
        env = {"VIEWSCAFFOLD_MODEL_FOLDERS": "Domain, ,Models", "VIEWSCAFFOLD_SKIP_IDENTITY": "1"}
        with patch.dict(os.environ, env, clear=True):
            config = Config.from_env()
        assert config.parser.model_folders == ["Domain", "Models"]
        assert config.parser.skip_identity is True

    @pytest.mark.unit
    def test_bad_number(self):
        with patch.dict(os.environ, {"VIEWSCAFFOLD_CACHE_MAX_ENTRIES": "many"}, clear=True):
            with pytest.raises(ValueError):
                Config.from_env()
