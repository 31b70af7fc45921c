"""Shared check primitives for the doctor report."""

from __future__ import annotations

import os
import shutil
import sys
from dataclasses import dataclass

from forkstrap.commands import CommandRunner
from forkstrap.config import Settings, validate_settings
from forkstrap.errors import ConfigError
from forkstrap.paths import is_wsl


@dataclass(frozen=True, slots=True)
class CheckResult:
    name: str
    passed: bool
    message: str
    fix_hint: str = ""
    required: bool = True


def check_tool_exists(name: str, *, hint: str = "") -> CheckResult:
    found = shutil.which(name) is not None
    return CheckResult(
        name=f"{name} on PATH",
        passed=found,
        message=f"{name} found" if found else f"{name} not found",
        fix_hint=hint or f"Install {name} and ensure it is on your PATH.",
    )


def check_python_version() -> CheckResult:
    v = sys.version_info
    ok = (v.major, v.minor) >= (3, 12)
    version_str = f"{v.major}.{v.minor}.{v.micro}"
    return CheckResult(
        name="Python version is 3.12+",
        passed=ok,
        message=f"Python {version_str}",
        fix_hint="Requires Python 3.12 or newer. Install via pyenv or your package manager.",
    )


def check_config(settings: Settings) -> CheckResult:
    try:
        validate_settings(settings)
    except ConfigError as exc:
        return CheckResult(
            name="Configuration valid",
            passed=False,
            message=str(exc),
            fix_hint="Fix the FORKSTRAP_* environment variables listed above.",
        )
    return CheckResult(
        name="Configuration valid",
        passed=True,
        message=f"upstream {settings.upstream_repo}",
    )


def check_gh_auth(runner: CommandRunner) -> CheckResult:
    if runner.which("gh") is None:
        return CheckResult(
            name="gh authenticated",
            passed=False,
            message="gh not found",
            fix_hint="Install the GitHub CLI: https://cli.github.com/",
        )
    result = runner.run(["gh", "auth", "status"])
    return CheckResult(
        name="gh authenticated",
        passed=result.ok,
        message="logged in" if result.ok else "not logged in",
        fix_hint="Run: gh auth login",
    )


def check_wsl(settings: Settings) -> CheckResult:
    wsl = is_wsl()
    if not wsl:
        return CheckResult(name="WSL", passed=True, message="not detected", required=False)
    roots = [root for root in settings.users_roots if os.path.isdir(root)]
    return CheckResult(
        name="WSL",
        passed=bool(roots),
        message=(
            f"detected; scanning {', '.join(roots)}"
            if roots
            else "detected; no Windows users roots mounted"
        ),
        fix_hint="Set FORKSTRAP_WSL_USERS_ROOTS to the mounted Windows Users folders.",
        required=False,
    )
