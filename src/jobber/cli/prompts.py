"""Interactive input for confirmations, times and messages.

Commands talk to a :class:`Prompter` instead of reading stdin directly, so
tests (or ``--yes``) can supply the answers.
"""

from __future__ import annotations

from typing import List

import typer


class Prompter:
    """Blocking prompts on the terminal, via typer/click."""

    def confirm(self, text: str) -> bool:
        return typer.confirm(text, default=False)

    def ask(self, text: str) -> str:
        """Ask for one line; an empty answer is allowed."""
        return typer.prompt(text, default="", show_default=False).strip()

    def ask_lines(self, text: str) -> str:
        """Ask for a multi-line text, terminated by an empty line or EOF."""
        typer.echo(text)
        lines: List[str] = []
        while True:
            try:
                line = typer.prompt("", default="", show_default=False, prompt_suffix="")
            except typer.Abort:
                break
            if not line.strip():
                break
            lines.append(line)
        return "\n".join(lines).strip()


class AssumeYesPrompter(Prompter):
    """Answers every confirmation with yes; other prompts stay interactive."""

    def confirm(self, text: str) -> bool:
        typer.echo(f"{text} [y/N]: y")
        return True
