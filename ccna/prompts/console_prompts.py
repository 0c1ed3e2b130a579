"""Interactive terminal prompts backed by rich."""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt


class ConsolePrompter:
    """Terminal implementation of the ask-one-of-N capability."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()

    def _ask_required(self, message: str, error: str, *, default: Optional[str] = None, password: bool = False) -> str:
        while True:
            if default is None:
                answer = Prompt.ask(message, console=self.console, password=password)
            else:
                answer = Prompt.ask(message, console=self.console, password=password, default=default)
            if answer and answer.strip():
                return answer.strip()
            self.console.print(f"[red]{error}[/red]")

    def ask_text(self, message: str, *, default: Optional[str] = None, error: str = "Value cannot be empty") -> str:
        return self._ask_required(message, error, default=default)

    def ask_secret(self, message: str, *, error: str = "Value cannot be empty") -> str:
        return self._ask_required(message, error, password=True)

    def ask_choice(self, message: str, choices: Sequence[Tuple[str, str]], default_value: str) -> str:
        """Show a numbered list and return the value of the picked entry."""

        values = [value for _, value in choices]
        default_index = values.index(default_value) + 1 if default_value in values else 1
        self.console.print(f"\n[bold]{escape(message)}[/bold]")
        for index, (label, _) in enumerate(choices, 1):
            marker = "[cyan]>[/cyan]" if index == default_index else " "
            self.console.print(f" {marker} {index:>3}. {escape(label)}", highlight=False)
        answer = Prompt.ask(
            "Number",
            console=self.console,
            choices=[str(index) for index in range(1, len(choices) + 1)],
            default=str(default_index),
            show_choices=False,
        )
        return values[int(answer) - 1]
