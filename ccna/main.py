"""CLI entrypoint: configure models, export them and launch Claude Code."""

from __future__ import annotations

import logging
import sys
from typing import Callable, List, Optional, Sequence, Tuple

from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape

from ccna.agents.models_client import Model, ModelCatalogClient, ModelFetchError
from ccna.config import AppConfig
from ccna.launch.environment import print_env_vars
from ccna.launch.launcher import launch
from ccna.prompts.console_prompts import ConsolePrompter
from ccna.selection.model_selector import EmptyCatalogError, describe_catalog, select_roles
from ccna.storage.config_store import Config, ConfigStore

LOGGER = logging.getLogger("ccna")

RESERVED_COMMANDS = ("help", "clear")

FetchModels = Callable[[str, str], List[Model]]


def parse_command(argv: Sequence[str]) -> Tuple[str, List[str]]:
    """Split argv into the reserved command (``help``/``clear``/``run``) and passthrough args."""

    args = list(argv)
    if "help" in args:
        command = "help"
    elif "clear" in args:
        command = "clear"
    else:
        command = "run"
    return command, [arg for arg in args if arg not in RESERVED_COMMANDS]


def show_help(console: Console, config_path: str) -> None:
    console.print("[blue]ccna - Claude Code configuration and launch tool[/blue]")
    console.print("=" * 40)
    console.print("\n[cyan]Usage:[/cyan]")
    console.print("  ccna                - start with the saved config, or run first-time setup")
    console.print("  ccna clear          - delete the config file and set up again on next run")
    console.print("  ccna help           - show this help")
    console.print("  ccna \\[claude-args]  - start Claude Code and pass the extra arguments through")
    console.print("\n[cyan]Examples:[/cyan]")
    console.print("  ccna                - normal start")
    console.print("  ccna clear          - clear the config")
    console.print("  ccna --version      - start Claude Code and print its version")
    console.print("  ccna my-project     - start Claude Code in a project directory")
    console.print("\n[cyan]Config file:[/cyan]")
    console.print(f"  {escape(config_path)}", highlight=False, soft_wrap=True)


class ConfigurationFlow:
    """First-run setup and per-run model reselection."""

    def __init__(
        self,
        store: ConfigStore,
        prompter: ConsolePrompter,
        *,
        fetch_models: Optional[FetchModels] = None,
        default_base_url: str = "https://api.anthropic.com",
        console: Optional[Console] = None,
    ) -> None:
        self.store = store
        self.prompter = prompter
        self.fetch_models = fetch_models or ModelCatalogClient().fetch_models
        self.default_base_url = default_base_url
        self.console = console or prompter.console

    def _choose(self, base_url: str, auth_token: str, previous: Optional[Config]) -> Config:
        self.console.print("\n[yellow]Fetching available models...[/yellow]")
        models = self.fetch_models(base_url, auth_token)
        if not models:
            raise EmptyCatalogError("Could not get the model list, check the endpoint URL and API key")

        self.console.print("\n[green]Available models:[/green]")
        for line in describe_catalog(models):
            self.console.print(escape(line), highlight=False)
        self.console.print("\n[blue]Choose the default models:[/blue]")
        roles = select_roles(models, self.prompter.ask_choice, previous)
        config = Config(
            baseUrl=base_url,
            authToken=auth_token,
            opusModel=roles.opusModel,
            sonnetModel=roles.sonnetModel,
            haikuModel=roles.haikuModel,
            subagentModel=roles.subagentModel,
        )
        self.store.save(config)
        return config

    def configure_initial(self) -> Config:
        self.console.print("[blue]Claude Code initial setup[/blue]")
        self.console.print("=" * 40)
        base_url = self.prompter.ask_text(
            "API endpoint URL",
            default=self.default_base_url,
            error="Endpoint URL cannot be empty",
        )
        auth_token = self.prompter.ask_secret("API key", error="API key cannot be empty")
        return self._choose(base_url, auth_token, None)

    def reselect(self, existing: Config) -> Config:
        return self._choose(existing.baseUrl, existing.authToken, existing)

    def resolve(self) -> Config:
        existing = self.store.load()
        if existing is not None:
            self.console.print("[blue]Found existing config, selecting models...[/blue]")
            return self.reselect(existing)
        self.console.print("[blue]No config found, running initial setup...[/blue]")
        return self.configure_initial()


def run(
    extra_args: Sequence[str],
    flow: ConfigurationFlow,
    *,
    launcher: Callable[..., object] = launch,
) -> int:
    console = flow.console
    try:
        config = flow.resolve()
    except (ModelFetchError, EmptyCatalogError) as exc:
        LOGGER.error("Configuration failed: %s", exc)
        console.print(f"[red]Configuration failed: {escape(str(exc))}[/red]")
        return 1

    print_env_vars(config, console)
    console.print("\n[yellow]Starting Claude Code...[/yellow]")
    launcher(config, list(extra_args), console=console)
    return 0


def _dispatch(command: str, extra_args: List[str], console: Console) -> int:
    app_config = AppConfig.from_env()
    logging.basicConfig(level=getattr(logging, app_config.log_level, logging.WARNING))
    store = ConfigStore(app_config.launcher.config_path, console=console)

    if command == "help":
        show_help(console, str(store.path))
        return 0
    if command == "clear":
        if store.clear():
            console.print("[green]Config cleared[/green]")
        console.print("[yellow]Run ccna again to configure[/yellow]")
        return 0

    flow = ConfigurationFlow(
        store,
        ConsolePrompter(console),
        fetch_models=ModelCatalogClient(app_config.request).fetch_models,
        default_base_url=app_config.launcher.default_base_url,
        console=console,
    )
    return run(extra_args, flow)


def main(argv: Optional[Sequence[str]] = None) -> int:
    load_dotenv()
    console = Console()
    command, extra_args = parse_command(sys.argv[1:] if argv is None else argv)
    try:
        return _dispatch(command, extra_args, console)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted[/yellow]")
        return 130
    except EOFError:
        LOGGER.error("Input closed while prompting")
        console.print("\n[red]Input closed, setup aborted[/red]")
        return 1
    except Exception as exc:  # noqa: BLE001
        LOGGER.error("Launch failed: %s", exc)
        console.print(f"[red]Launch failed: {escape(str(exc))}[/red]")
        return 1


if __name__ == "__main__":
    sys.exit(main())
