import json
import os
from pathlib import Path

import pytest

from forkstrap.commands import CommandResult
from forkstrap.config import get_settings

SETUP_SCRIPT_REL = "scripts/setup_auth.py"


class FakeRunner:
    """Emulates git, gh and the setup interpreter without touching the network."""

    def __init__(self) -> None:
        self.calls: list[tuple[list[str], str | None]] = []
        self.missing: set[str] = set()
        self.authenticated = True
        self.login_fixes_auth = True
        self.login = "tester"
        self.inside_worktree = False
        self.toplevel = ""
        self.repo_view_failures: set[str] = set()
        self.repo_list: list[dict[str, object]] = []
        self.fork_api_output: list[str] = []
        self.default_branch = "main"
        self.fork_succeeds = True
        self.clone_succeeds = True
        self.setup_status = 0
        self.remotes: dict[str, dict[str, str]] = {}

    # -- CommandRunner -------------------------------------------------

    def which(self, name: str) -> str | None:
        if name in self.missing:
            return None
        return f"/usr/bin/{name}"

    def run(self, args, *, cwd=None, interactive=False) -> CommandResult:
        cmd = list(args)
        self.calls.append((cmd, None if cwd is None else str(cwd)))
        if cmd[0] == "git":
            return self._git(cmd[1:])
        if cmd[0] == "gh":
            return self._gh(cmd[1:])
        return CommandResult(self.setup_status)

    # -- inspection helpers --------------------------------------------

    def lines(self, tool: str) -> list[str]:
        return [" ".join(cmd[1:]) for cmd, _ in self.calls if cmd[0] == tool]

    def clone_lines(self) -> list[str]:
        return [line for line in self.lines("git") if line.startswith("clone ")]

    def setup_calls(self) -> list[tuple[list[str], str | None]]:
        return [(cmd, cwd) for cmd, cwd in self.calls if cmd[0] not in {"git", "gh"}]

    # -- emulation -----------------------------------------------------

    def _git(self, args: list[str]) -> CommandResult:
        if args[:1] == ["-C"]:
            repo_dir, rest = args[1], args[2:]
            remotes = self.remotes.setdefault(repo_dir, {})
            if rest[:2] == ["remote", "get-url"]:
                url = remotes.get(rest[2])
                if url is None:
                    return CommandResult(2, "", f"error: No such remote '{rest[2]}'")
                return CommandResult(0, url + "\n")
            if rest[:2] in (["remote", "set-url"], ["remote", "add"]):
                remotes[rest[2]] = rest[3]
                return CommandResult(0)
            return CommandResult(0, "true\n")
        if args == ["rev-parse", "--is-inside-work-tree"]:
            if self.inside_worktree:
                return CommandResult(0, "true\n")
            return CommandResult(128, "", "fatal: not a git repository")
        if args == ["rev-parse", "--show-toplevel"]:
            if self.toplevel:
                return CommandResult(0, self.toplevel + "\n")
            return CommandResult(128, "", "fatal: not a git repository")
        if args[:1] == ["clone"]:
            if not self.clone_succeeds:
                return CommandResult(128, "", "fatal: repository not found")
            target = Path(args[2])
            (target / ".git").mkdir(parents=True, exist_ok=True)
            script = target / SETUP_SCRIPT_REL
            script.parent.mkdir(parents=True, exist_ok=True)
            script.write_text("")
            self.remotes.setdefault(str(target), {})["origin"] = args[1]
            return CommandResult(0)
        return CommandResult(0)

    def _gh(self, args: list[str]) -> CommandResult:
        if args[:2] == ["auth", "status"]:
            return CommandResult(0 if self.authenticated else 1)
        if args[:2] == ["auth", "login"]:
            self.authenticated = self.login_fixes_auth
            return CommandResult(0 if self.authenticated else 1)
        if args[:2] == ["api", "user"]:
            if not self.login:
                return CommandResult(1, "", "HTTP 401")
            return CommandResult(0, self.login + "\n")
        if args[:1] == ["api"] and args[1].endswith("/forks?per_page=100"):
            out = "".join(f"{line}\n" for line in self.fork_api_output)
            return CommandResult(0, out)
        if args[:1] == ["api"] and args[1].startswith("repos/"):
            if not self.default_branch:
                return CommandResult(1, "", "HTTP 404")
            return CommandResult(0, self.default_branch + "\n")
        if args[:2] == ["repo", "view"]:
            return CommandResult(1 if args[2] in self.repo_view_failures else 0)
        if args[:2] == ["repo", "list"]:
            return CommandResult(0, json.dumps(self.repo_list))
        if args[:2] == ["repo", "fork"]:
            return CommandResult(0 if self.fork_succeeds else 1)
        return CommandResult(0)


@pytest.fixture(autouse=True)
def test_env(tmp_path: Path, monkeypatch):
    for key in list(os.environ):
        if key.startswith("FORKSTRAP_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.delenv("WSL_DISTRO_NAME", raising=False)
    monkeypatch.delenv("WSL_INTEROP", raising=False)
    monkeypatch.setattr("forkstrap.paths.PROC_VERSION", tmp_path / "no-proc-version")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def make_clone():
    def _make(path: Path, *, git_file: bool = False) -> Path:
        path.mkdir(parents=True, exist_ok=True)
        if git_file:
            (path / ".git").write_text("gitdir: /tmp/fake-worktree\n")
        else:
            (path / ".git").mkdir(exist_ok=True)
        script = path / SETUP_SCRIPT_REL
        script.parent.mkdir(parents=True, exist_ok=True)
        script.write_text("# test\n")
        return path

    return _make
