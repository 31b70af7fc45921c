"""Typed wrapper over the ``gh`` CLI subcommands the bootstrap flow needs."""

from __future__ import annotations

import json
import logging

from forkstrap.commands import CommandRunner

logger = logging.getLogger(__name__)


class GitHubCli:
    def __init__(self, runner: CommandRunner, *, fork_list_limit: int = 1000) -> None:
        self.runner = runner
        self.fork_list_limit = fork_list_limit

    def is_available(self) -> bool:
        return self.runner.which("gh") is not None

    def is_authenticated(self) -> bool:
        return self.runner.run(["gh", "auth", "status"]).ok

    def login(self) -> bool:
        """Run the interactive ``gh auth login`` flow."""
        return self.runner.run(["gh", "auth", "login"], interactive=True).ok

    def current_login(self) -> str:
        result = self.runner.run(["gh", "api", "user", "--jq", ".login"])
        if not result.ok:
            return ""
        return result.stdout.strip()

    def repo_exists(self, slug: str) -> bool:
        return self.runner.run(["gh", "repo", "view", slug]).ok

    def list_user_forks_of(self, login: str, upstream: str) -> list[str]:
        """Forks owned by ``login`` whose declared parent is ``upstream``."""
        result = self.runner.run(
            [
                "gh",
                "repo",
                "list",
                login,
                "--fork",
                "--limit",
                str(self.fork_list_limit),
                "--json",
                "nameWithOwner,parent",
            ]
        )
        if not result.ok or not result.stdout.strip():
            return []
        try:
            payload = json.loads(result.stdout)
        except json.JSONDecodeError:
            logger.debug("unparseable gh repo list output for %s", login)
            return []
        if not isinstance(payload, list):
            return []

        matches: list[str] = []
        for item in payload:
            if not isinstance(item, dict):
                continue
            parent = item.get("parent")
            if not isinstance(parent, dict) or parent.get("nameWithOwner") != upstream:
                continue
            name = item.get("nameWithOwner")
            if isinstance(name, str) and name:
                matches.append(name)
        return matches

    def list_forks_owned_by(self, upstream: str, login: str) -> list[str]:
        """Walk the paginated forks endpoint of ``upstream`` for forks owned by ``login``."""
        result = self.runner.run(
            [
                "gh",
                "api",
                f"repos/{upstream}/forks?per_page=100",
                "--paginate",
                "--jq",
                f'.[] | select(.owner.login == "{login}") | .full_name',
            ]
        )
        if not result.ok:
            return []
        return result.lines()

    def create_fork(self, upstream: str, fork_name: str | None = None) -> bool:
        cmd = ["gh", "repo", "fork", upstream, "--clone=false", "--remote=false"]
        if fork_name:
            cmd += ["--fork-name", fork_name]
        return self.runner.run(cmd).ok

    def default_branch(self, upstream: str) -> str:
        result = self.runner.run(["gh", "api", f"repos/{upstream}", "--jq", ".default_branch"])
        if not result.ok:
            return ""
        return result.stdout.strip()
