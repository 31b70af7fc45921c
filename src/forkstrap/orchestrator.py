"""Top-level bootstrap flow: reuse, locate or create a clone, then run setup.

The flow is a decision tree driven by operator answers. Everything it
selects (clone directory, fork slug) is passed back as return values;
nothing is kept in module state between steps.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

import httpx

from forkstrap.clones import CloneValidator, clone_repo, configure_fork_remotes
from forkstrap.commands import CommandRunner, have_cmd, require_cmd
from forkstrap.config import Settings
from forkstrap.console import info, notice, resume_command, warn
from forkstrap.errors import BootstrapError
from forkstrap.forks import ForkLocator, ForkProvisioner
from forkstrap.github import GitHubCli
from forkstrap.logging import bind_context
from forkstrap.online import OnlineSetup
from forkstrap.paths import expand_path, is_wsl, repo_name_from_slug
from forkstrap.prompts import Prompter

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LocalResolution:
    repo_dir: str
    fork_repo: str | None = None


class RepoOrchestrator:
    def __init__(
        self,
        settings: Settings,
        runner: CommandRunner,
        prompter: Prompter,
        *,
        cwd: str | None = None,
        environ: Mapping[str, str] | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.settings = settings
        self.runner = runner
        self.prompter = prompter
        self.cwd = cwd or os.getcwd()
        self.upstream = settings.upstream_repo
        self.wsl = is_wsl(environ)

        self.gh = GitHubCli(runner, fork_list_limit=settings.fork_list_limit)
        self.clones = CloneValidator(runner, settings.setup_script_rel)
        self.locator = ForkLocator(self.gh, explicit_fork=settings.fork_repo)
        self.provisioner = ForkProvisioner(self.gh, self.locator, prompter)
        self.online = OnlineSetup(
            settings, runner, prompter, self.provisioner, transport=transport
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def expand(self, raw: str) -> str:
        return expand_path(raw, wsl=self.wsl, mount_prefix=self.settings.wsl_mount_prefix)

    def scan_wsl(self, repo_name: str) -> str | None:
        return self.clones.detect_wsl_windows_clone_by_repo_name(
            repo_name, self.settings.users_roots, wsl=self.wsl
        )

    def configure_remotes(self, repo_dir: str, fork_repo: str) -> None:
        configure_fork_remotes(
            self.runner,
            repo_dir,
            origin_url=self.settings.repo_url(fork_repo),
            upstream_url=self.settings.repo_url(self.upstream),
        )

    def run_setup(self, repo_root: str, args: Sequence[str]) -> int:
        script = Path(repo_root) / self.settings.setup_script_rel
        if not script.is_file():
            raise BootstrapError(f"Missing setup script: {script}")
        self.provisioner.ensure_gh_auth()
        require_cmd(self.runner, self.settings.python_command)

        info()
        info("Launching setup script...")
        result = self.runner.run(
            [self.settings.python_command, self.settings.setup_script_rel, *args],
            cwd=repo_root,
            interactive=True,
        )
        return result.returncode

    def offer_setup(self, repo_dir: str, args: Sequence[str], *, skipped: str) -> int:
        if self.prompter.yes_no("Run setup now?", default=True):
            return self.run_setup(repo_dir, args)
        info(skipped)
        info(resume_command(repo_dir))
        return 0

    # ------------------------------------------------------------------
    # Local mode steps
    # ------------------------------------------------------------------

    def auto_detect_existing_clone(self, default_dir: str) -> LocalResolution | None:
        """Find a usable clone without asking the operator anything.

        Order: the default directory, a sibling named after the operator's
        fork, then the WSL scan by fork name and by upstream name.
        """
        if self.clones.is_compatible(default_dir):
            return LocalResolution(default_dir)

        upstream_name = repo_name_from_slug(self.upstream)
        if self.gh.is_available() and self.gh.is_authenticated():
            login = self.gh.current_login()
            fork_repo = self.locator.find_fork(self.upstream, login) if login else None
            if fork_repo:
                fork_name = repo_name_from_slug(fork_repo)
                sibling = os.path.join(os.path.dirname(default_dir), fork_name)
                if self.clones.is_compatible(sibling):
                    return LocalResolution(sibling, fork_repo)
                detected = self.scan_wsl(fork_name)
                if detected:
                    return LocalResolution(detected, fork_repo)

        detected = self.scan_wsl(upstream_name)
        if detected:
            return LocalResolution(detected)
        return None

    def prompt_existing_clone_path(self, default_dir: str) -> str | None:
        notice()
        notice(f"Default clone directory is: {default_dir}")
        notice("Choose this for a fresh setup, or point to an existing compatible clone.")
        if not self.prompter.yes_no("Use an existing local clone path?", default=False):
            return None

        while True:
            raw = self.prompter.ask("Existing clone path (press Enter to cancel): ")
            if not raw:
                return None
            repo_dir = self.expand(raw)
            if self.clones.is_compatible(repo_dir):
                return repo_dir
            warn(f"Not a compatible clone: {repo_dir}")
            warn(
                f"Expected both: {repo_dir}/.git and {repo_dir}/{self.settings.setup_script_rel}"
            )

    def fork_and_clone(self, default_dir: str) -> LocalResolution:
        fork_repo = self.provisioner.ensure_fork(self.upstream)
        info(f"Using fork repository: {fork_repo}")

        repo_dir = self.clones.prefer_existing_fork_clone_dir(default_dir, fork_repo)
        if repo_dir != default_dir:
            info(f"Detected existing local fork clone at {repo_dir}")

        if self.clones.is_compatible(repo_dir):
            info(f"Using existing clone at {repo_dir}")
        else:
            self.clones.ensure_repo_dir_ready(repo_dir)
            info(f"Cloning fork into {repo_dir}")
            clone_repo(self.runner, self.settings.repo_url(fork_repo), repo_dir)

        self.configure_remotes(repo_dir, fork_repo)
        return LocalResolution(repo_dir, fork_repo)

    def clone_upstream(self, default_dir: str) -> LocalResolution:
        if self.clones.is_compatible(default_dir):
            info(f"Using existing clone at {default_dir}")
            return LocalResolution(default_dir)

        self.clones.ensure_repo_dir_ready(default_dir)
        info(f"Cloning upstream repository into {default_dir}")
        clone_repo(self.runner, self.settings.repo_url(self.upstream), default_dir)
        return LocalResolution(default_dir)

    def run_local(self, args: Sequence[str]) -> int:
        require_cmd(self.runner, "git")
        default_dir = os.path.join(self.cwd, repo_name_from_slug(self.upstream))
        info("No compatible local clone detected in current working tree.")
        info(f"Upstream repository: {self.upstream}")
        info(f"Default clone directory: {default_dir}")

        detected = self.auto_detect_existing_clone(default_dir)
        if detected is not None:
            info(f"Detected existing compatible local clone at {detected.repo_dir}")
            if detected.fork_repo:
                self.configure_remotes(detected.repo_dir, detected.fork_repo)
            return self.offer_setup(detected.repo_dir, args, skipped="Setup not run. Next step:")

        existing = self.prompt_existing_clone_path(default_dir)
        if existing is not None:
            info(f"Using existing clone at {existing}")
            return self.offer_setup(existing, args, skipped="Setup not run. Next step:")

        if self.prompter.yes_no("Fork the repo to your GitHub account first?", default=True):
            resolution = self.fork_and_clone(default_dir)
        elif self.prompter.yes_no("Clone upstream directly (without forking)?", default=True):
            resolution = self.clone_upstream(default_dir)
        else:
            info("No repository action selected. Exiting.")
            return 0

        return self.offer_setup(resolution.repo_dir, args, skipped="Setup not run. Next step:")

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def run(self, args: Sequence[str] = ()) -> int:
        """Run the whole bootstrap and return the process exit status."""
        require_cmd(self.runner, self.settings.python_command)
        bind_context(upstream=self.upstream)

        if have_cmd(self.runner, "git"):
            local_root = self.clones.detect_local_repo_root(self.cwd)
            if local_root is not None:
                info(f"Detected local clone: {local_root}")
                return self.offer_setup(
                    local_root, args, skipped="Skipped setup. Run this when ready:"
                )

        mode = self.prompter.setup_mode()
        if mode is None:
            info("No setup mode selected. Exiting.")
            return 0
        bind_context(mode=mode)
        logger.debug("setup mode %s selected", mode)
        if mode == "online":
            return self.online.run(self.upstream, args)
        return self.run_local(args)
