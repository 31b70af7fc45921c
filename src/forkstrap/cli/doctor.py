"""Doctor command: runs preflight checks and prints a color-coded report."""

from __future__ import annotations

import json
import sys

from forkstrap.cli.checks import (
    CheckResult,
    check_config,
    check_gh_auth,
    check_python_version,
    check_tool_exists,
    check_wsl,
)
from forkstrap.commands import CommandRunner, SubprocessRunner
from forkstrap.config import get_settings


def _green(text: str) -> str:
    return f"\033[32m{text}\033[0m"


def _red(text: str) -> str:
    return f"\033[31m{text}\033[0m"


def _yellow(text: str) -> str:
    return f"\033[33m{text}\033[0m"


def _bold(text: str) -> str:
    return f"\033[1m{text}\033[0m"


def _print_result(result: CheckResult) -> None:
    if result.passed:
        icon = _green("✓")
    elif result.required:
        icon = _red("✗")
    else:
        icon = _yellow("!")
    print(f"  {icon} {result.name}: {result.message}")
    if not result.passed and result.fix_hint:
        print(f"    {_yellow('Fix:')} {result.fix_hint}")


def _section(title: str) -> None:
    print(f"\n{_bold(title)}")


def run_doctor(*, json_output: bool = False, runner: CommandRunner | None = None) -> None:
    runner = runner or SubprocessRunner()
    settings = get_settings()
    all_results: list[CheckResult] = []

    def _run(result: CheckResult) -> bool:
        all_results.append(result)
        _print_result(result)
        return result.passed

    _section("System Tools")
    _run(check_tool_exists("git"))
    gh_ok = _run(check_tool_exists("gh", hint="Install the GitHub CLI: https://cli.github.com/"))
    _run(check_tool_exists(settings.python_command))
    _run(check_python_version())

    _section("Configuration")
    _run(check_config(settings))

    _section("GitHub")
    if gh_ok:
        _run(check_gh_auth(runner))
    else:
        print(f"  {_yellow('⊘')} skipped (gh not installed)")

    _section("Environment")
    _run(check_wsl(settings))

    fail_count = sum(1 for r in all_results if not r.passed and r.required)
    print()
    if fail_count == 0:
        print(_green("All checks passed!"))
    else:
        print(_red(f"{fail_count} check(s) failed."))

    if json_output:
        data = [
            {
                "name": r.name,
                "passed": r.passed,
                "required": r.required,
                "message": r.message,
                "fix_hint": r.fix_hint,
            }
            for r in all_results
        ]
        print("\n" + json.dumps(data, indent=2))

    if fail_count:
        sys.exit(1)
