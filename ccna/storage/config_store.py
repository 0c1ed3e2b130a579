"""Persistence for the single per-user launcher config file."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Optional

from rich.console import Console

from ccna.config import DEFAULT_CONFIG

LOGGER = logging.getLogger(__name__)


class ConfigReadError(RuntimeError):
    """Raised when the config file exists but cannot be parsed."""


@dataclass
class Config:
    """Persisted launcher settings, serialized with camelCase keys."""

    baseUrl: str
    authToken: str
    opusModel: str
    sonnetModel: str
    haikuModel: str
    subagentModel: str

    @classmethod
    def from_dict(cls, data: object) -> "Config":
        if not isinstance(data, dict):
            raise ConfigReadError("config root is not a JSON object")
        values = {}
        for item in fields(cls):
            value = data.get(item.name)
            if not isinstance(value, str):
                raise ConfigReadError(f"config key {item.name!r} is missing or not a string")
            if not value.strip():
                raise ConfigReadError(f"config key {item.name!r} is empty")
            values[item.name] = value
        return cls(**values)

    def to_dict(self) -> dict:
        return asdict(self)


class ConfigStore:
    """Reads, writes and deletes the config record at a fixed path."""

    def __init__(self, path: Optional[Path] = None, *, console: Optional[Console] = None) -> None:
        self.path = Path(path) if path is not None else DEFAULT_CONFIG.launcher.config_path
        self._console = console or Console()

    def _read(self) -> Config:
        try:
            raw = self.path.read_text(encoding="utf-8")
            data = json.loads(raw)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise ConfigReadError(str(exc)) from exc
        return Config.from_dict(data)

    def load(self) -> Optional[Config]:
        """Return the stored config, or None when missing or unreadable."""

        if not self.path.exists():
            return None
        try:
            return self._read()
        except ConfigReadError as exc:
            LOGGER.warning("Ignoring unreadable config %s: %s", self.path, exc)
            self._console.print("[yellow]Config file could not be read, reconfiguring[/yellow]")
            return None

    def save(self, config: Config) -> None:
        """Replace the stored config with ``config`` via write-then-rename."""

        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(config.to_dict(), indent=2, ensure_ascii=False)
        fd, tmp_name = tempfile.mkstemp(prefix=".config-", suffix=".tmp", dir=self.path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        LOGGER.info("Config written to %s", self.path)

    def clear(self) -> bool:
        """Delete the config file. Returns False when there was nothing to delete."""

        try:
            self.path.unlink()
        except FileNotFoundError:
            return False
        LOGGER.info("Config removed from %s", self.path)
        return True
