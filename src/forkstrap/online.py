"""Online mode: run the project's setup helper without a local clone."""

from __future__ import annotations

import logging
import tempfile
from collections.abc import Sequence
from pathlib import Path

import httpx

from forkstrap.commands import CommandRunner, require_cmd
from forkstrap.config import Settings
from forkstrap.console import info
from forkstrap.errors import DownloadError
from forkstrap.forks import ForkProvisioner
from forkstrap.prompts import Prompter

logger = logging.getLogger(__name__)

DEFAULT_BRANCH_FALLBACK = "main"


def download_setup_script(
    url: str,
    dest: Path,
    *,
    timeout: float,
    transport: httpx.BaseTransport | None = None,
) -> None:
    try:
        with httpx.Client(
            timeout=timeout,
            follow_redirects=True,
            transport=transport,
        ) as client:
            resp = client.get(url)
            resp.raise_for_status()
    except httpx.HTTPStatusError as exc:
        logger.debug("setup helper download failed: %s", exc)
        raise DownloadError(
            f"Unable to download setup helper from {url}",
            retryable=exc.response.status_code >= 500,
        ) from exc
    except httpx.HTTPError as exc:
        logger.debug("setup helper download failed: %s", exc)
        raise DownloadError(f"Unable to download setup helper from {url}") from exc
    dest.write_bytes(resp.content)


class OnlineSetup:
    def __init__(
        self,
        settings: Settings,
        runner: CommandRunner,
        prompter: Prompter,
        provisioner: ForkProvisioner,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.settings = settings
        self.runner = runner
        self.prompter = prompter
        self.provisioner = provisioner
        self.transport = transport

    def select_target_repo(self, upstream: str, login: str) -> str | None:
        if self.prompter.yes_no("Fork the repo to your GitHub account first?", default=True):
            return self.provisioner.ensure_fork(upstream)
        detected = self.provisioner.locator.find_fork(upstream, login)
        return self.prompter.repo_slug(detected, self.provisioner.gh.repo_exists)

    def run(self, upstream: str, args: Sequence[str]) -> int:
        python = self.settings.python_command
        require_cmd(self.runner, python)
        self.provisioner.ensure_gh_auth()
        login = self.provisioner.require_login()

        target_repo = self.select_target_repo(upstream, login)
        if target_repo is None:
            info("No repository selected. Exiting.")
            return 0

        branch = self.provisioner.gh.default_branch(upstream) or DEFAULT_BRANCH_FALLBACK
        setup_url = self.settings.raw_script_url(upstream, branch)
        script_name = Path(self.settings.setup_script_rel).name

        with tempfile.TemporaryDirectory(prefix="forkstrap-") as tmp_dir:
            setup_script = Path(tmp_dir) / script_name
            info(f"Downloading setup helper from {setup_url}")
            download_setup_script(
                setup_url,
                setup_script,
                timeout=self.settings.download_timeout_seconds,
                transport=self.transport,
            )

            info()
            info("Launching online setup (no local clone)...")
            result = self.runner.run(
                [python, str(setup_script), "--repo", target_repo, *args],
                interactive=True,
            )
        return result.returncode
