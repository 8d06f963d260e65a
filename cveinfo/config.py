"""Configuration models using Pydantic.

Settings are read from an optional YAML file and overridden by command
line options.  The cache directory follows the XDG base directory
convention.
"""

import datetime as dt
import json
import os
import tempfile
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

APP_NAME = "cveinfo"


def default_cache_dir() -> Path:
    """Resolve the cache directory.

    Tries ``$XDG_CACHE_HOME/cveinfo``, then ``$HOME/.cache/cveinfo``, and
    finally ``<tempdir>/cveinfo``.

    Returns:
        Path to the (possibly not yet existing) cache directory.
    """
    xdg = os.environ.get("XDG_CACHE_HOME")
    if xdg:
        return Path(xdg) / APP_NAME
    home = os.environ.get("HOME")
    if home:
        return Path(home) / ".cache" / APP_NAME
    return Path(tempfile.gettempdir()) / APP_NAME


class CveInfoConfig(BaseModel):
    """Validated runtime configuration.

    Example YAML::

        api_key: 00000000-0000-0000-0000-000000000000
        codename: bookworm
        max_age_seconds: 3600
        max_attempts: 3
        backoff_seconds: 5

    Attributes:
        cache_dir: Cache directory.  ``None`` resolves via
            ``default_cache_dir()``.
        api_key: NVD API key for elevated rate limits.  Falls back to the
            ``NVD_API_KEY`` environment variable.
        codename: Debian release codename to restrict tracker output to.
        max_age_seconds: Freshness window for cached responses.
        max_attempts: Total NVD request attempts when rate limited (HTTP 403).
        backoff_seconds: Linear backoff multiplier between attempts.
        verify_tls: Verify TLS certificates.  Off by default, which weakens
            transport security against a spoofed endpoint.
        no_cvss: Skip the CVSS block in the output.
    """

    cache_dir: Path | None = None
    api_key: str | None = None
    codename: str | None = None
    max_age_seconds: int = Field(default=3600, ge=0)
    max_attempts: int = Field(default=3, ge=1, le=10)
    backoff_seconds: float = Field(default=5.0, ge=0.0)
    verify_tls: bool = False
    no_cvss: bool = False

    @field_validator("api_key", "codename", mode="before")
    @classmethod
    def _blank_to_none(cls, v: Any) -> Any:
        """Treat empty or whitespace-only strings as unset."""
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @field_validator("cache_dir", mode="before")
    @classmethod
    def _expand_cache_dir(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip()
            if not v:
                return None
            return Path(os.path.expandvars(v)).expanduser()
        return v

    @property
    def max_age(self) -> dt.timedelta:
        """Freshness window as a ``timedelta``."""
        return dt.timedelta(seconds=self.max_age_seconds)

    def resolved_cache_dir(self) -> Path:
        """Return the configured cache directory or the default one."""
        return self.cache_dir if self.cache_dir is not None else default_cache_dir()

    def resolved_api_key(self) -> str | None:
        """Return the configured API key, falling back to ``NVD_API_KEY``."""
        if self.api_key:
            return self.api_key
        return os.environ.get("NVD_API_KEY") or None


def load_config(path: Path) -> CveInfoConfig:
    """Load configuration from a YAML or JSON file.

    Args:
        path: Path to the config file.

    Returns:
        Validated ``CveInfoConfig`` instance.

    Raises:
        FileNotFoundError: if the file doesn't exist.
        pydantic.ValidationError: if content fails validation.
    """
    suffix = path.suffix.lower()
    content = path.read_text(encoding="utf-8")

    if suffix == ".json":
        raw = json.loads(content)
    else:
        raw = yaml.safe_load(content) or {}

    return CveInfoConfig.model_validate(raw)


def find_config() -> Path | None:
    """Find the user's config file.

    Returns:
        Path to ``config.yaml`` under ``$XDG_CONFIG_HOME/cveinfo`` or
        ``~/.config/cveinfo`` if one exists, otherwise ``None``.
    """
    candidates = []
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        candidates.append(Path(xdg) / APP_NAME / "config.yaml")
    home = os.environ.get("HOME")
    if home:
        candidates.append(Path(home) / ".config" / APP_NAME / "config.yaml")
    for candidate in candidates:
        if candidate.is_file():
            return candidate
    return None
