"""Click entry points: ``forkstrap`` and ``forkstrap-doctor``."""

from __future__ import annotations

import sys

import click

from forkstrap.commands import SubprocessRunner
from forkstrap.config import get_settings, validate_settings
from forkstrap.console import error, notice
from forkstrap.errors import ConfigError, ForkstrapError
from forkstrap.logging import clear_context, configure_logging
from forkstrap.orchestrator import RepoOrchestrator
from forkstrap.prompts import Prompter


class PassthroughCommand(click.Command):
    """Hand argv to the callback untouched.

    click's parser drops a literal ``--``; the setup script must see it.
    """

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        ctx.params["setup_args"] = tuple(args)
        ctx.args = []
        return ctx.args


@click.command(cls=PassthroughCommand, context_settings={"help_option_names": []})
def main(setup_args: tuple[str, ...]) -> None:
    """Fork, clone and configure the project, then run its setup script.

    Every argument is forwarded verbatim to the setup script.
    """
    try:
        settings = get_settings()
        configure_logging(settings.log_level, json_output=bool(settings.log_json))
        validate_settings(settings)
        orchestrator = RepoOrchestrator(settings, SubprocessRunner(), Prompter())
        status = orchestrator.run(list(setup_args))
    except ForkstrapError as exc:
        error(str(exc))
        if exc.retryable:
            notice("This may be a transient failure; re-run forkstrap to retry.")
        sys.exit(1)
    finally:
        clear_context()
    sys.exit(status)


@click.command()
@click.option("--json", "json_output", is_flag=True, help="Append JSON output to the report.")
def doctor(json_output: bool) -> None:
    """Check that git, gh and the setup interpreter are ready."""
    from forkstrap.cli.doctor import run_doctor

    try:
        run_doctor(json_output=json_output)
    except ConfigError as exc:
        error(str(exc))
        sys.exit(1)
