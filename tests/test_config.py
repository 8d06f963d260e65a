"""Unit tests for cveinfo.config — Pydantic configuration models."""

import datetime as dt
import json
import os
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest
import yaml
from pydantic import ValidationError

from cveinfo.config import CveInfoConfig, default_cache_dir, find_config, load_config

# ── default_cache_dir ────────────────────────────────────────────────────────


class TestDefaultCacheDir:
    def test_xdg_cache_home(self):
        with patch.dict(os.environ, {"XDG_CACHE_HOME": "/xdg/cache", "HOME": "/home/u"}, clear=True):
            assert default_cache_dir() == Path("/xdg/cache/cveinfo")

    def test_home_fallback(self):
        with patch.dict(os.environ, {"HOME": "/home/u"}, clear=True):
            assert default_cache_dir() == Path("/home/u/.cache/cveinfo")

    def test_tempdir_fallback(self):
        with patch.dict(os.environ, {}, clear=True):
            assert default_cache_dir() == Path(tempfile.gettempdir()) / "cveinfo"


# ── CveInfoConfig ────────────────────────────────────────────────────────────


class TestCveInfoConfig:
    def test_defaults(self):
        c = CveInfoConfig()
        assert c.cache_dir is None
        assert c.api_key is None
        assert c.codename is None
        assert c.max_age == dt.timedelta(hours=1)
        assert c.max_attempts == 3
        assert c.backoff_seconds == 5.0
        assert c.verify_tls is False
        assert c.no_cvss is False

    def test_blank_strings_are_unset(self):
        c = CveInfoConfig(api_key="  ", codename="")
        assert c.api_key is None
        assert c.codename is None

    def test_codename_stripped(self):
        assert CveInfoConfig(codename=" bookworm ").codename == "bookworm"

    def test_cache_dir_expanded(self):
        with patch.dict(os.environ, {"HOME": "/home/u"}):
            c = CveInfoConfig(cache_dir="~/cves")
        assert c.cache_dir == Path("/home/u/cves")

    def test_resolved_cache_dir(self, tmp_path):
        assert CveInfoConfig(cache_dir=tmp_path).resolved_cache_dir() == tmp_path
        with patch.dict(os.environ, {"XDG_CACHE_HOME": str(tmp_path)}):
            assert CveInfoConfig().resolved_cache_dir() == tmp_path / "cveinfo"

    def test_api_key_env_fallback(self):
        with patch.dict(os.environ, {"NVD_API_KEY": "env-key"}):
            assert CveInfoConfig().resolved_api_key() == "env-key"
            assert CveInfoConfig(api_key="cfg-key").resolved_api_key() == "cfg-key"

    def test_no_api_key(self):
        with patch.dict(os.environ, {}, clear=True):
            assert CveInfoConfig().resolved_api_key() is None

    def test_negative_max_age(self):
        with pytest.raises(ValidationError):
            CveInfoConfig(max_age_seconds=-1)

    def test_attempts_bounds(self):
        with pytest.raises(ValidationError):
            CveInfoConfig(max_attempts=0)
        with pytest.raises(ValidationError):
            CveInfoConfig(max_attempts=11)

    def test_negative_backoff(self):
        with pytest.raises(ValidationError):
            CveInfoConfig(backoff_seconds=-0.5)


# ── load_config ──────────────────────────────────────────────────────────────


class TestLoadConfig:
    def test_yaml(self, tmp_path):
        p = tmp_path / "config.yaml"
        p.write_text(yaml.dump({"codename": "bullseye", "max_age_seconds": 60}))
        c = load_config(p)
        assert c.codename == "bullseye"
        assert c.max_age == dt.timedelta(seconds=60)

    def test_json(self, tmp_path):
        p = tmp_path / "config.json"
        p.write_text(json.dumps({"api_key": "abc", "no_cvss": True}))
        c = load_config(p)
        assert c.api_key == "abc"
        assert c.no_cvss is True

    def test_empty_yaml(self, tmp_path):
        p = tmp_path / "config.yaml"
        p.write_text("")
        assert load_config(p) == CveInfoConfig()

    def test_invalid_values(self, tmp_path):
        p = tmp_path / "config.yaml"
        p.write_text("max_attempts: many\n")
        with pytest.raises(ValidationError):
            load_config(p)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")


# ── find_config ──────────────────────────────────────────────────────────────


class TestFindConfig:
    def test_xdg_config_home(self, tmp_path):
        cfg = tmp_path / "cveinfo" / "config.yaml"
        cfg.parent.mkdir()
        cfg.write_text("codename: sid\n")
        with patch.dict(os.environ, {"XDG_CONFIG_HOME": str(tmp_path)}, clear=True):
            assert find_config() == cfg

    def test_home_config(self, tmp_path):
        cfg = tmp_path / ".config" / "cveinfo" / "config.yaml"
        cfg.parent.mkdir(parents=True)
        cfg.write_text("codename: sid\n")
        with patch.dict(os.environ, {"HOME": str(tmp_path)}, clear=True):
            assert find_config() == cfg

    def test_none(self, tmp_path):
        with patch.dict(os.environ, {"HOME": str(tmp_path)}, clear=True):
            assert find_config() is None
