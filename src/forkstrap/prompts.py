"""Interactive prompts behind an injectable line reader.

The default reader blocks on the controlling terminal. ``Prompter.scripted``
feeds a fixed list of answers instead, for unattended runs and tests; once
the answers run out every prompt sees end-of-input, which callers treat as
"cancel" or "no".
"""

from __future__ import annotations

from collections import deque
from collections.abc import Callable, Iterable
from typing import Literal

import click

from forkstrap.console import notice, warn
from forkstrap.paths import is_valid_fork_name, is_valid_repo_slug

LineReader = Callable[[str], str | None]
SetupMode = Literal["local", "online"]

_LOCAL_CHOICES = {"", "1", "local", "local mode"}
_ONLINE_CHOICES = {"2", "online", "online mode"}


def _terminal_read(prompt: str) -> str | None:
    """Read a line from the terminal; None at end of input.

    click raises ``Abort`` for both EOF and Ctrl-C. Only EOF is a cancelled
    answer; an interrupt propagates and ends the run.
    """
    try:
        return click.prompt(
            prompt,
            default="",
            show_default=False,
            prompt_suffix="",
            err=True,
        )
    except click.Abort as exc:
        if isinstance(exc.__context__, EOFError):
            return None
        raise


class Prompter:
    def __init__(self, read: LineReader | None = None) -> None:
        self._read = read or _terminal_read
        self.asked: list[str] = []

    @classmethod
    def scripted(cls, answers: Iterable[str]) -> Prompter:
        pending = deque(answers)

        def _read(_prompt: str) -> str | None:
            return pending.popleft() if pending else None

        return cls(_read)

    def ask(self, prompt: str) -> str | None:
        """Read one trimmed line, or None at end of input."""
        self.asked.append(prompt)
        raw = self._read(prompt)
        if raw is None:
            return None
        return raw.strip()

    def yes_no(self, question: str, default: bool = True) -> bool:
        suffix = "[y/n] (default: y)" if default else "[y/n] (default: n)"
        while True:
            answer = self.ask(f"{question} {suffix} ")
            if answer is None:
                return False
            answer = answer.lower()
            if answer == "":
                return default
            if answer in {"y", "yes"}:
                return True
            if answer in {"n", "no"}:
                return False
            notice("Please enter y or n.")

    def setup_mode(self) -> SetupMode | None:
        notice()
        notice("Choose setup mode:")
        notice("  1) Local mode (fork + clone + local setup)")
        notice("  2) Online mode (no local clone; configure GitHub directly)")
        while True:
            choice = self.ask("Select option [1/2] (default: 1): ")
            if choice is None:
                return None
            choice = choice.lower()
            if choice in _LOCAL_CHOICES:
                return "local"
            if choice in _ONLINE_CHOICES:
                return "online"
            notice("Please enter 1 or 2.")

    def fork_name(self, default_name: str) -> str | None:
        """Return the fork repo name, ``default_name`` unless a custom one is chosen."""
        if not self.yes_no("Use a custom name for your fork?", default=False):
            return default_name
        while True:
            answer = self.ask(f"Fork name (repo only, default: {default_name}): ")
            if answer is None:
                return None
            name = answer or default_name
            if is_valid_fork_name(name):
                return name
            warn("Invalid fork name. Use only letters, numbers, '.', '_' or '-'.")

    def repo_slug(
        self,
        default_repo: str | None,
        accessible: Callable[[str], bool],
    ) -> str | None:
        prompt = "Repository to configure (OWNER/REPO)"
        if default_repo:
            prompt = f"{prompt} (default: {default_repo})"
        prompt = f"{prompt}: "

        while True:
            answer = self.ask(prompt)
            if answer is None:
                return None
            if not answer:
                if not default_repo:
                    notice("A repository slug is required.")
                    continue
                answer = default_repo
            if not is_valid_repo_slug(answer):
                notice("Invalid format. Please enter OWNER/REPO.")
                continue
            if not accessible(answer):
                warn(f"Repository is not accessible with current gh auth: {answer}")
                continue
            return answer
