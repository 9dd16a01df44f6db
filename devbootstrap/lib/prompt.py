from __future__ import annotations

import logging
from typing import Mapping, Optional, Protocol

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt

logger = logging.getLogger(__name__)


class Prompter(Protocol):
    """Operator interaction points. Every blocking read goes through here."""

    def ask(self, message: str, *, key: Optional[str] = None) -> str:
        ...

    def pause(self, message: str) -> None:
        ...

    def show(self, text: str, *, title: Optional[str] = None) -> None:
        ...


class RichPrompter:
    """Terminal prompter.

    ``answers`` pre-seeds responses by key (from the config file) so a run can
    be made unattended; keys that are not seeded fall through to the terminal.
    """

    def __init__(self, console: Optional[Console] = None, answers: Optional[Mapping[str, str]] = None) -> None:
        self.console = console or Console()
        self.answers = dict(answers or {})

    def ask(self, message: str, *, key: Optional[str] = None) -> str:
        if key is not None and key in self.answers:
            logger.info("Using configured answer for %s", key)
            return str(self.answers[key])
        return Prompt.ask(message, console=self.console, default="", show_default=False).strip()

    def pause(self, message: str) -> None:
        if bool(self.answers.get("assume_ack", False)):
            logger.info("Skipping acknowledgment (assume_ack): %s", message)
            return
        self.console.input(f"[bold]{message}[/bold] ")

    def show(self, text: str, *, title: Optional[str] = None) -> None:
        if title:
            self.console.print(Panel(title, expand=False))
        # Key material and paths must reach the terminal byte-for-byte.
        self.console.print(text, markup=False, highlight=False, soft_wrap=True)
