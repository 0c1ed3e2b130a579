"""Global configuration defaults for the ccna launcher."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, Optional, Tuple


@dataclass
class RequestConfig:
    """Configuration for talking to the OpenAI-compatible models endpoint."""

    # Per-request timeout (connect + read) for the model listing call
    timeout: float = 30.0
    request_headers: Dict[str, str] = field(
        default_factory=lambda: {"Content-Type": "application/json"}
    )


@dataclass
class LauncherConfig:
    """Where the user's config lives and how the assistant CLI is started."""

    config_dir: Path = field(default_factory=lambda: Path.home() / ".claude-config")
    config_filename: str = "config.json"
    default_base_url: str = "https://api.anthropic.com"
    windows_candidates: Tuple[str, ...] = (
        "claude",
        "claude.cmd",
        "claude.exe",
        ".\\claude.cmd",
        ".\\claude.exe",
    )
    posix_candidates: Tuple[str, ...] = ("claude", "./claude")

    @property
    def config_path(self) -> Path:
        return self.config_dir / self.config_filename


@dataclass
class AppConfig:
    """Top-level configuration values."""

    launcher: LauncherConfig = field(default_factory=LauncherConfig)
    request: RequestConfig = field(default_factory=RequestConfig)
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> "AppConfig":
        """Build a config with ``CCNA_*`` environment overrides applied."""

        env = os.environ if environ is None else environ
        config = cls()

        config_dir = env.get("CCNA_CONFIG_DIR")
        if config_dir:
            config.launcher = replace(config.launcher, config_dir=Path(config_dir).expanduser())
        base_url = env.get("CCNA_DEFAULT_BASE_URL")
        if base_url:
            config.launcher = replace(config.launcher, default_base_url=base_url)
        timeout = env.get("CCNA_REQUEST_TIMEOUT")
        if timeout:
            try:
                config.request = replace(config.request, timeout=float(timeout))
            except ValueError as exc:
                raise ValueError(f"CCNA_REQUEST_TIMEOUT must be a number, got {timeout!r}") from exc
        log_level = env.get("CCNA_LOG_LEVEL")
        if log_level:
            config.log_level = log_level.upper()
        return config


DEFAULT_CONFIG = AppConfig()
