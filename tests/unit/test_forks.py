import pytest

from forkstrap.errors import BootstrapError, CommandNotFoundError
from forkstrap.forks import ForkLocator, ForkProvisioner
from forkstrap.github import GitHubCli
from forkstrap.prompts import Prompter

UPSTREAM = "aspain/git-sweaty"


def _fork(name: str, parent: str = UPSTREAM) -> dict[str, object]:
    return {"nameWithOwner": name, "parent": {"nameWithOwner": parent}}


def _provisioner(fake_runner, answers=(), explicit: str = "") -> ForkProvisioner:
    gh = GitHubCli(fake_runner)
    return ForkProvisioner(gh, ForkLocator(gh, explicit_fork=explicit), Prompter.scripted(answers))


class TestForkLocator:
    def test_explicit_override_wins(self, fake_runner) -> None:
        fake_runner.repo_list = [_fork("tester/strava")]
        locator = ForkLocator(GitHubCli(fake_runner), explicit_fork="team/custom")
        assert locator.find_fork(UPSTREAM, "tester") == "team/custom"
        assert not any(line.startswith("repo list") for line in fake_runner.lines("gh"))

    def test_inaccessible_override_is_not_found(self, fake_runner) -> None:
        fake_runner.repo_view_failures = {"team/custom"}
        fake_runner.repo_list = [_fork("tester/strava")]
        locator = ForkLocator(GitHubCli(fake_runner), explicit_fork="team/custom")
        assert locator.find_fork(UPSTREAM, "tester") is None

    def test_repo_list_strategy(self, fake_runner) -> None:
        fake_runner.repo_list = [_fork("tester/unrelated", "x/y"), _fork("tester/strava")]
        locator = ForkLocator(GitHubCli(fake_runner))
        assert locator.find_fork(UPSTREAM, "tester") == "tester/strava"
        assert "repo view tester/strava" in fake_runner.lines("gh")

    def test_falls_back_to_forks_api(self, fake_runner) -> None:
        fake_runner.fork_api_output = ["tester/strava"]
        locator = ForkLocator(GitHubCli(fake_runner))
        assert locator.find_fork(UPSTREAM, "tester") == "tester/strava"

    def test_candidate_failing_revalidation_moves_on(self, fake_runner) -> None:
        fake_runner.repo_list = [_fork("tester/stale")]
        fake_runner.fork_api_output = ["tester/strava"]
        fake_runner.repo_view_failures = {"tester/stale"}
        locator = ForkLocator(GitHubCli(fake_runner))
        assert locator.find_fork(UPSTREAM, "tester") == "tester/strava"

    def test_nothing_found(self, fake_runner) -> None:
        assert ForkLocator(GitHubCli(fake_runner)).find_fork(UPSTREAM, "tester") is None


class TestEnsureGhAuth:
    def test_missing_gh(self, fake_runner) -> None:
        fake_runner.missing.add("gh")
        with pytest.raises(CommandNotFoundError):
            _provisioner(fake_runner).ensure_gh_auth()

    def test_offers_login(self, fake_runner) -> None:
        fake_runner.authenticated = False
        _provisioner(fake_runner, ["y"]).ensure_gh_auth()
        assert "auth login" in fake_runner.lines("gh")

    def test_declined_login_is_fatal(self, fake_runner) -> None:
        fake_runner.authenticated = False
        with pytest.raises(BootstrapError, match="GitHub CLI auth is required"):
            _provisioner(fake_runner, ["n"]).ensure_gh_auth()
        assert "auth login" not in fake_runner.lines("gh")

    def test_failed_login_is_fatal(self, fake_runner) -> None:
        fake_runner.authenticated = False
        fake_runner.login_fixes_auth = False
        with pytest.raises(BootstrapError, match="GitHub CLI auth is required"):
            _provisioner(fake_runner, ["y"]).ensure_gh_auth()


class TestEnsureFork:
    def test_creates_fork_owned_by_login(self, fake_runner) -> None:
        fork = _provisioner(fake_runner, ["n"]).ensure_fork(UPSTREAM)
        assert fork == "tester/git-sweaty"
        assert fork.split("/")[0] == "tester"
        gh = fake_runner.lines("gh")
        assert "repo fork aspain/git-sweaty --clone=false --remote=false" in gh
        assert "repo view tester/git-sweaty" in gh

    def test_custom_fork_name(self, fake_runner) -> None:
        fork = _provisioner(fake_runner, ["y", "sweaty-online"]).ensure_fork(UPSTREAM)
        assert fork == "tester/sweaty-online"
        assert (
            "repo fork aspain/git-sweaty --clone=false --remote=false --fork-name sweaty-online"
            in fake_runner.lines("gh")
        )

    def test_existing_fork_is_reused(self, fake_runner) -> None:
        fake_runner.repo_list = [_fork("tester/strava")]
        assert _provisioner(fake_runner).ensure_fork(UPSTREAM) == "tester/strava"
        assert not any(line.startswith("repo fork") for line in fake_runner.lines("gh"))

    def test_fork_failure_is_advisory(self, fake_runner, capsys) -> None:
        fake_runner.fork_succeeds = False
        assert _provisioner(fake_runner, ["n"]).ensure_fork(UPSTREAM) == "tester/git-sweaty"
        assert "WARN: Fork creation command did not succeed cleanly" in capsys.readouterr().err

    def test_fork_never_visible_is_fatal(self, fake_runner) -> None:
        fake_runner.repo_view_failures = {"tester/git-sweaty"}
        with pytest.raises(BootstrapError, match="Unable to find an accessible fork"):
            _provisioner(fake_runner, ["n"]).ensure_fork(UPSTREAM)

    def test_unresolvable_login_is_fatal(self, fake_runner) -> None:
        fake_runner.login = ""
        with pytest.raises(BootstrapError, match="Unable to resolve GitHub username"):
            _provisioner(fake_runner).ensure_fork(UPSTREAM)
