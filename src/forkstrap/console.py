"""Operator-facing output: progress on stdout, warnings on stderr."""

from __future__ import annotations

import click


def info(message: str = "") -> None:
    click.echo(message)


def warn(message: str) -> None:
    click.echo(f"WARN: {message}", err=True)


def error(message: str) -> None:
    click.echo(f"ERROR: {message}", err=True)


def notice(message: str = "") -> None:
    """Prompt-adjacent text that must not pollute stdout."""
    click.echo(message, err=True)


def resume_command(repo_dir: str) -> str:
    return f'  (cd "{repo_dir}" && forkstrap)'
