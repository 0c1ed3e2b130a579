from __future__ import annotations

import io

import pytest
from rich.console import Console

from ccna.agents.models_client import Model
from ccna.storage.config_store import Config, ConfigStore


@pytest.fixture
def console():
    return Console(file=io.StringIO(), force_terminal=False, width=120)


@pytest.fixture
def store(tmp_path, console):
    return ConfigStore(tmp_path / ".claude-config" / "config.json", console=console)


@pytest.fixture
def sample_models():
    return [
        Model(id="claude-3-opus", owned_by="anthropic"),
        Model(id="claude-3-sonnet", owned_by="anthropic"),
        Model(id="claude-3-haiku"),
        Model(id="gpt-4", owned_by="openai"),
    ]


@pytest.fixture
def sample_config():
    return Config(
        baseUrl="https://api.example.com",
        authToken="sk-test",
        opusModel="claude-3-opus",
        sonnetModel="claude-3-sonnet",
        haikuModel="claude-3-haiku",
        subagentModel="gpt-4",
    )


class FakeResponse:
    def __init__(self, status_code: int = 200, payload=None, text: str | None = None):
        import json

        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else json.dumps(payload)

    def json(self):
        import json

        return json.loads(self.text)

    def raise_for_status(self):
        import requests

        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Client Error", response=self)


class StubPrompter:
    """Answers prompts from a script; falls back to the offered default."""

    def __init__(self, console, *, texts=None, secrets=None, choices=None):
        self.console = console
        self._texts = list(texts or [])
        self._secrets = list(secrets or [])
        self._choices = list(choices or [])
        self.asked: list[dict] = []

    def ask_text(self, message, *, default=None, error=""):
        self.asked.append({"kind": "text", "message": message, "default": default})
        return self._texts.pop(0) if self._texts else default

    def ask_secret(self, message, *, error=""):
        self.asked.append({"kind": "secret", "message": message})
        return self._secrets.pop(0)

    def ask_choice(self, message, choices, default_value):
        self.asked.append({"kind": "choice", "message": message, "choices": list(choices), "default": default_value})
        if self._choices:
            return self._choices.pop(0)
        return default_value


@pytest.fixture
def make_prompter(console):
    def _make(**kwargs):
        return StubPrompter(console, **kwargs)

    return _make


@pytest.fixture(autouse=True)
def restore_sigint():
    import signal

    previous = signal.getsignal(signal.SIGINT)
    yield
    signal.signal(signal.SIGINT, previous)
