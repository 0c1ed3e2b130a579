"""Turn a saved config into environment variable assignments."""

from __future__ import annotations

import sys
from typing import List, Optional, Tuple

from rich.console import Console
from rich.markup import escape

from ccna.storage.config_store import Config

ENV_FIELDS = (
    ("ANTHROPIC_BASE_URL", "baseUrl"),
    ("ANTHROPIC_AUTH_TOKEN", "authToken"),
    ("ANTHROPIC_DEFAULT_OPUS_MODEL", "opusModel"),
    ("ANTHROPIC_DEFAULT_SONNET_MODEL", "sonnetModel"),
    ("ANTHROPIC_DEFAULT_HAIKU_MODEL", "haikuModel"),
    ("CLAUDE_CODE_SUBAGENT_MODEL", "subagentModel"),
)

BANNER = "=" * 60


def detect_platform(system: Optional[str] = None) -> str:
    system = system or sys.platform
    if system.startswith("win"):
        return "windows"
    if system == "darwin":
        return "mac"
    return "linux"


def env_bindings(config: Config) -> List[Tuple[str, str]]:
    return [(name, getattr(config, attr)) for name, attr in ENV_FIELDS]


def render_assignments(config: Config, platform: str) -> List[str]:
    """Shell lines that reproduce the launch environment.

    Values are wrapped in double quotes as-is; embedded quotes are not escaped.
    """

    template = '$env:{name}="{value}"' if platform == "windows" else 'export {name}="{value}"'
    return [template.format(name=name, value=value) for name, value in env_bindings(config)]


def render_manual_fallback(config: Config, platform: str) -> List[str]:
    if platform == "windows":
        return [f"set {name}={value}" for name, value in env_bindings(config)]
    return render_assignments(config, platform)


def usage_hints(config: Config, platform: str) -> List[str]:
    if platform == "windows":
        return [
            "PowerShell: paste the commands above into a PowerShell session",
            f"Command Prompt: use set instead, e.g. set ANTHROPIC_BASE_URL={config.baseUrl}",
        ]
    return [
        "bash/zsh: paste the commands above into your terminal",
        "or add them to ~/.bashrc, ~/.zshrc, ~/.profile or similar",
    ]


def print_env_vars(config: Config, console: Console, platform: Optional[str] = None) -> None:
    platform = platform or detect_platform()
    console.print(f"\n{BANNER}")
    console.print("[green]Environment variables:[/green]")
    console.print(BANNER)
    for line in render_assignments(config, platform):
        console.print(f"[cyan]{escape(line)}[/cyan]", highlight=False)
    console.print(BANNER)
    console.print("\n[yellow]Usage:[/yellow]")
    for hint in usage_hints(config, platform):
        console.print(f"[bright_black]{escape(hint)}[/bright_black]", highlight=False)
