from __future__ import annotations

from ccna.prompts import console_prompts as cp


def _script(monkeypatch, answers):
    calls = []

    def fake_ask(prompt, **kwargs):
        calls.append({"prompt": prompt, **kwargs})
        return answers.pop(0)

    monkeypatch.setattr(cp.Prompt, "ask", fake_ask)
    return calls


def test_ask_text_reprompts_on_blank(monkeypatch, console):
    calls = _script(monkeypatch, ["   ", "https://api.example.com "])
    prompter = cp.ConsolePrompter(console)

    assert prompter.ask_text("API endpoint URL", default="https://d", error="URL cannot be empty") == "https://api.example.com"
    assert len(calls) == 2
    assert calls[0]["default"] == "https://d"
    assert "URL cannot be empty" in console.file.getvalue()


def test_ask_secret_hides_input(monkeypatch, console):
    calls = _script(monkeypatch, ["", "sk-1"])
    prompter = cp.ConsolePrompter(console)

    assert prompter.ask_secret("API key") == "sk-1"
    assert all(call["password"] for call in calls)
    assert "default" not in calls[0]


def test_ask_choice_returns_value_and_preselects_default(monkeypatch, console):
    calls = _script(monkeypatch, ["3"])
    prompter = cp.ConsolePrompter(console)
    choices = [("a (x)", "a"), ("b", "b"), ("[c]", "c")]

    assert prompter.ask_choice("Select Opus model", choices, "b") == "c"
    assert calls[0]["default"] == "2"
    assert calls[0]["choices"] == ["1", "2", "3"]
    out = console.file.getvalue()
    assert "Select Opus model" in out
    assert "[c]" in out


def test_ask_choice_unknown_default_falls_back_to_first(monkeypatch, console):
    calls = _script(monkeypatch, ["1"])
    prompter = cp.ConsolePrompter(console)

    assert prompter.ask_choice("Pick", [("a", "a"), ("b", "b")], "gone") == "a"
    assert calls[0]["default"] == "1"
