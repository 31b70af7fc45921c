"""Finding the operator's fork of the upstream repo, creating it when missing."""

from __future__ import annotations

import logging

from forkstrap.console import info, warn
from forkstrap.errors import BootstrapError, CommandNotFoundError
from forkstrap.github import GitHubCli
from forkstrap.paths import repo_name_from_slug
from forkstrap.prompts import Prompter

logger = logging.getLogger(__name__)


class ForkLocator:
    """Resolve an accessible fork of ``upstream`` owned by ``login``.

    Strategies, first hit wins: the explicit override, the user's fork list
    filtered by parent, then the upstream's paginated forks endpoint filtered
    by owner. Every candidate is re-checked with ``gh repo view``; one that
    fails is dropped and the next strategy runs.
    """

    def __init__(self, gh: GitHubCli, *, explicit_fork: str = "") -> None:
        self.gh = gh
        self.explicit_fork = explicit_fork.strip()

    def find_fork(self, upstream: str, login: str) -> str | None:
        if self.explicit_fork:
            if self.gh.repo_exists(self.explicit_fork):
                return self.explicit_fork
            logger.debug("explicit fork override %s is not accessible", self.explicit_fork)
            return None

        for strategy, candidates in (
            ("repo list", lambda: self.gh.list_user_forks_of(login, upstream)),
            ("forks api", lambda: self.gh.list_forks_owned_by(upstream, login)),
        ):
            found = candidates()
            if not found:
                continue
            candidate = found[0]
            if self.gh.repo_exists(candidate):
                logger.debug("fork %s found via %s", candidate, strategy)
                return candidate
            logger.debug("fork candidate %s from %s is not accessible", candidate, strategy)
        return None


class ForkProvisioner:
    def __init__(self, gh: GitHubCli, locator: ForkLocator, prompter: Prompter) -> None:
        self.gh = gh
        self.locator = locator
        self.prompter = prompter

    def ensure_gh_auth(self) -> None:
        if not self.gh.is_available():
            raise CommandNotFoundError("gh")
        if self.gh.is_authenticated():
            return

        info("GitHub CLI is not authenticated.")
        if self.prompter.yes_no("Run gh auth login now?", default=True):
            self.gh.login()

        if not self.gh.is_authenticated():
            raise BootstrapError(
                "GitHub CLI auth is required. Run 'gh auth login' and re-run bootstrap."
            )

    def require_login(self) -> str:
        login = self.gh.current_login()
        if not login:
            raise BootstrapError(
                "Unable to resolve GitHub username from current gh auth session."
            )
        return login

    def resolve_fork(self, upstream: str, login: str) -> str:
        found = self.locator.find_fork(upstream, login)
        if found:
            return found
        raise BootstrapError(
            f"Unable to find an accessible fork for {upstream} under {login}. "
            "Set FORKSTRAP_FORK_REPO=<owner>/<repo> and retry."
        )

    def ensure_fork(self, upstream: str) -> str:
        """Return an accessible fork slug, creating the fork if none exists yet."""
        self.ensure_gh_auth()
        login = self.require_login()

        existing = self.locator.find_fork(upstream, login)
        if existing:
            info(f"Using existing fork repository: {existing}")
            return existing

        default_name = repo_name_from_slug(upstream)
        fork_name = self.prompter.fork_name(default_name)
        if fork_name is None:
            raise BootstrapError("No fork name provided.")
        fork_repo = f"{login}/{fork_name}"
        info(f"Creating fork repository: {fork_repo}")

        custom_name = fork_name if fork_name != default_name else None
        if not self.gh.create_fork(upstream, custom_name):
            warn(
                "Fork creation command did not succeed cleanly. "
                "Continuing if fork already exists."
            )

        if not self.gh.repo_exists(fork_repo):
            fork_repo = self.resolve_fork(upstream, login)
            if not self.gh.repo_exists(fork_repo):
                raise BootstrapError(f"Fork is not accessible: {fork_repo}")
        return fork_repo
