"""Recognising, locating and wiring up local clones of the project."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Iterator
from pathlib import Path

from forkstrap.commands import CommandRunner
from forkstrap.errors import BootstrapError
from forkstrap.paths import repo_name_from_slug

logger = logging.getLogger(__name__)

# Relative to a Windows user home, in the order they are probed.
WSL_PROJECT_FOLDERS = (
    "source/repos",
    "repos",
    "source",
    "Documents/GitHub",
    "Documents/repos",
    "code",
    "dev",
)


def _subdirs(path: Path) -> Iterator[Path]:
    # Directory-listing order; deliberately unsorted.
    try:
        entries = list(path.iterdir())
    except OSError:
        return
    for entry in entries:
        if entry.is_dir():
            yield entry


class CloneValidator:
    def __init__(self, runner: CommandRunner, setup_script_rel: str) -> None:
        self.runner = runner
        self.setup_script_rel = setup_script_rel

    def has_setup_script(self, repo_dir: str | Path) -> bool:
        return (Path(repo_dir) / self.setup_script_rel).is_file()

    def is_compatible(self, repo_dir: str | Path) -> bool:
        """A compatible clone has git metadata, the setup script and a live work tree.

        ``.git`` may be a file, which is how linked worktrees and submodules
        point at their git dir.
        """
        path = Path(repo_dir)
        if not (path / ".git").exists() or not self.has_setup_script(path):
            return False
        result = self.runner.run(["git", "-C", str(path), "rev-parse", "--is-inside-work-tree"])
        return result.ok

    def detect_local_repo_root(self, cwd: str | Path) -> str | None:
        """Top level of the work tree containing ``cwd`` when it carries the setup script."""
        inside = self.runner.run(["git", "rev-parse", "--is-inside-work-tree"], cwd=cwd)
        if not inside.ok:
            return None
        toplevel = self.runner.run(["git", "rev-parse", "--show-toplevel"], cwd=cwd)
        root = toplevel.stdout.strip()
        if not toplevel.ok or not root:
            return None
        if self.has_setup_script(root):
            return root
        return None

    def ensure_repo_dir_ready(self, repo_dir: str | Path) -> None:
        if self.is_compatible(repo_dir):
            return
        if os.path.lexists(repo_dir):
            raise BootstrapError(f"Path already exists and is not a compatible clone: {repo_dir}")

    def prefer_existing_fork_clone_dir(self, repo_dir: str, fork_repo: str) -> str:
        """Swap the default clone dir for a sibling named after the fork when one is usable."""
        fork_repo_dir = os.path.join(os.path.dirname(repo_dir), repo_name_from_slug(fork_repo))
        if fork_repo_dir == repo_dir:
            return repo_dir
        if self.is_compatible(fork_repo_dir):
            return fork_repo_dir
        return repo_dir

    def detect_wsl_windows_clone_by_repo_name(
        self,
        repo_name: str,
        users_roots: Iterable[str],
        *,
        wsl: bool,
    ) -> str | None:
        """Best-effort scan of Windows user folders mounted into WSL.

        Probes ``<root>/<user>/<folder>/<repo_name>`` and
        ``<root>/<user>/<folder>/<owner>/<repo_name>`` for each conventional
        project folder. The first compatible clone wins; the order users and
        owners are visited in is whatever the filesystem lists.
        """
        if not wsl or not repo_name:
            return None
        for users_root in users_roots:
            root = Path(users_root)
            if not root.is_dir():
                continue
            for user_home in _subdirs(root):
                for folder in WSL_PROJECT_FOLDERS:
                    base = user_home / folder
                    if not base.is_dir():
                        continue
                    candidate = base / repo_name
                    if self.is_compatible(candidate):
                        logger.debug("WSL scan matched %s", candidate)
                        return str(candidate)
                    for owner_dir in _subdirs(base):
                        candidate = owner_dir / repo_name
                        if self.is_compatible(candidate):
                            logger.debug("WSL scan matched %s", candidate)
                            return str(candidate)
        return None


def clone_repo(runner: CommandRunner, url: str, repo_dir: str) -> None:
    result = runner.run(["git", "clone", url, repo_dir], interactive=True)
    if not result.ok:
        raise BootstrapError(f"git clone failed for {url} (exit {result.returncode})")


def configure_fork_remotes(
    runner: CommandRunner,
    repo_dir: str,
    *,
    origin_url: str,
    upstream_url: str,
) -> None:
    """Point ``origin`` at the fork and ``upstream`` at the canonical repo."""
    result = runner.run(["git", "-C", repo_dir, "remote", "set-url", "origin", origin_url])
    if not result.ok:
        raise BootstrapError(f"Unable to set origin remote in {repo_dir}")
    if runner.run(["git", "-C", repo_dir, "remote", "get-url", "upstream"]).ok:
        action = "set-url"
    else:
        action = "add"
    result = runner.run(["git", "-C", repo_dir, "remote", action, "upstream", upstream_url])
    if not result.ok:
        raise BootstrapError(f"Unable to configure upstream remote in {repo_dir}")
