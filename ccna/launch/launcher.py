"""Start the Claude Code CLI with the configured environment."""

from __future__ import annotations

import logging
import os
import signal
import subprocess
import threading
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence

from rich.console import Console
from rich.markup import escape

from ccna.config import DEFAULT_CONFIG, LauncherConfig
from ccna.launch.environment import detect_platform, env_bindings, render_manual_fallback
from ccna.storage.config_store import Config

LOGGER = logging.getLogger(__name__)

Spawn = Callable[..., subprocess.Popen]


class LaunchError(RuntimeError):
    """Raised when none of the candidate commands could be started."""


def build_process_env(config: Config, base_env: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    env = dict(os.environ if base_env is None else base_env)
    env.update(env_bindings(config))
    return env


def launch_candidates(platform: str, settings: Optional[LauncherConfig] = None) -> List[str]:
    settings = settings or DEFAULT_CONFIG.launcher
    if platform == "windows":
        return list(settings.windows_candidates)
    return list(settings.posix_candidates)


def resolve_and_launch(
    candidates: Iterable[str],
    args: Sequence[str],
    env: Mapping[str, str],
    spawn: Spawn = subprocess.Popen,
) -> subprocess.Popen:
    """Spawn the first candidate that starts without raising.

    Only spawn-time errors move on to the next candidate. A child that starts
    and then fails (nonzero exit) is kept; it is never retried with another
    candidate.
    """

    errors: List[str] = []
    for command in candidates:
        LOGGER.info("Trying to start: %s", command)
        try:
            return spawn([command, *args], env=dict(env))
        except OSError as exc:
            LOGGER.debug("Could not start %s: %s", command, exc)
            errors.append(f"{command}: {exc}")
    raise LaunchError("Claude executable not found (" + "; ".join(errors) + ")")


def _watch(child: subprocess.Popen, console: Console) -> None:
    code = child.wait()
    if code != 0:
        LOGGER.error("Claude Code exited with code %s", code)
        console.print(f"[red]Claude Code exited with code {code}[/red]")


def launch(
    config: Config,
    extra_args: Sequence[str] = (),
    *,
    console: Optional[Console] = None,
    platform: Optional[str] = None,
    base_env: Optional[Mapping[str, str]] = None,
    spawn: Spawn = subprocess.Popen,
    settings: Optional[LauncherConfig] = None,
) -> Optional[subprocess.Popen]:
    """Start Claude Code and return without waiting for it.

    A watcher thread reports a nonzero exit. SIGINT is ignored in this process
    once the child is up, so an interrupt only reaches Claude Code. When
    nothing can be spawned the variables are printed for a manual start and
    None is returned.
    """

    console = console or Console()
    platform = platform or detect_platform()
    env = build_process_env(config, base_env)
    try:
        child = resolve_and_launch(launch_candidates(platform, settings), list(extra_args), env, spawn)
    except LaunchError as exc:
        LOGGER.error("Launch failed: %s", exc)
        console.print(f"[red]Failed to start Claude Code: {escape(str(exc))}[/red]")
        console.print("[yellow]Make sure Claude Code is installed and on your PATH.[/yellow]")
        console.print("\n[yellow]Set these environment variables manually, then run claude:[/yellow]")
        for line in render_manual_fallback(config, platform):
            console.print(f"[bright_black]{escape(line)}[/bright_black]", highlight=False)
        return None

    # Ctrl-C belongs to the child while it runs; the terminal delivers it to both.
    if threading.current_thread() is threading.main_thread():
        signal.signal(signal.SIGINT, signal.SIG_IGN)
    watcher = threading.Thread(target=_watch, args=(child, console), name="ccna-child-watcher")
    watcher.start()
    return child
