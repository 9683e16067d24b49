"""Client configuration.

Why here:
- Centralizes environment variables (pydantic-settings) away from the CLI.
- Lets adapters (director/transfer/credentials) read config consistently.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

OSDF_DIRECTOR_URL = "https://osdf-director.osg-htc.org/api/v1.0/director/origin"


def get_user_config_dir() -> Path:
    """Per-user config directory (cross-platform, no extra dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "dumb-pelican-client"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "dumb-pelican-client"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "dumb-pelican-client"
    return Path.home() / ".config" / "dumb-pelican-client"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


class AppSettings(BaseSettings):
    """Central application settings.

    Why pydantic-settings:
    - Typed, validated values at the edge (env vars) without polluting the core.
    - One config contract shared by the CLI and every adapter.

    `condor_creds_dir` is the one setting read without the `DUMB_PELICAN_`
    prefix: HTCondor exports it as `_CONDOR_CREDS` inside the job sandbox.
    """

    model_config = SettingsConfigDict(
        env_prefix="DUMB_PELICAN_",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
        # Order: project first (dev), then the user's global config.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    http_timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Timeout per HTTP operation (seconds).",
    )
    user_agent: str = Field(
        default="dumb-pelican-client/0.1",
        min_length=1,
        description="User-Agent sent to the director and origins.",
    )
    director_url: str = Field(
        default=OSDF_DIRECTOR_URL,
        min_length=8,
        description="Director origin-lookup endpoint; the object path is appended.",
    )

    log_level: str = Field(
        default="warning",
        min_length=1,
        description="Default log level (off/error/warn/info/debug/trace).",
    )
    retries: int = Field(
        default=1,
        ge=0,
        le=100,
        description="Extra origins to try after the first failed attempt.",
    )

    condor_creds_dir: Path | None = Field(
        default=None,
        validation_alias="_CONDOR_CREDS",
        description="HTCondor credential directory holding `*.use` token files.",
    )

    @field_validator("condor_creds_dir", mode="before")
    @classmethod
    def _blank_creds_dir_is_unset(cls, value: Any) -> Any:
        # An empty `_CONDOR_CREDS` would otherwise become Path("."), the cwd.
        if isinstance(value, str) and not value.strip():
            return None
        return value
