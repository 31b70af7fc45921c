"""External command execution for git, gh and the setup interpreter."""

from __future__ import annotations

import logging
import shutil
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from forkstrap.errors import CommandNotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CommandResult:
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def lines(self) -> list[str]:
        return [line.strip() for line in self.stdout.splitlines() if line.strip()]


class CommandRunner(Protocol):
    def run(
        self,
        args: Sequence[str],
        *,
        cwd: str | Path | None = None,
        interactive: bool = False,
    ) -> CommandResult: ...

    def which(self, name: str) -> str | None: ...


class SubprocessRunner:
    """Run commands with :mod:`subprocess`.

    Captured runs return stdout/stderr as text. Interactive runs inherit the
    terminal so the child can prompt the operator (``gh auth login``,
    ``git clone`` progress, the setup script itself) and only report status.
    """

    def run(
        self,
        args: Sequence[str],
        *,
        cwd: str | Path | None = None,
        interactive: bool = False,
    ) -> CommandResult:
        cmd = list(args)
        try:
            if interactive:
                proc = subprocess.run(cmd, cwd=cwd, check=False)
                result = CommandResult(proc.returncode)
            else:
                proc = subprocess.run(
                    cmd,
                    cwd=cwd,
                    text=True,
                    capture_output=True,
                    check=False,
                )
                result = CommandResult(proc.returncode, proc.stdout or "", proc.stderr or "")
        except FileNotFoundError:
            # Same status a shell reports for an unknown command.
            result = CommandResult(127, "", f"{cmd[0]}: command not found")
        logger.debug("command %s exited with %d", cmd, result.returncode)
        return result

    def which(self, name: str) -> str | None:
        return shutil.which(name)


def have_cmd(runner: CommandRunner, name: str) -> bool:
    return runner.which(name) is not None


def require_cmd(runner: CommandRunner, name: str) -> None:
    if not have_cmd(runner, name):
        raise CommandNotFoundError(name)
