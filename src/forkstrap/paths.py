"""Path and slug helpers, including Windows-drive translation under WSL."""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from pathlib import Path

PROC_VERSION = Path("/proc/version")

_SLUG_RE = re.compile(r"^[^/\s]+/[^/\s]+$")
_FORK_NAME_RE = re.compile(r"^[A-Za-z0-9._-]+$")
_WINDOWS_PATH_RE = re.compile(r"^([A-Za-z]):[\\/](.*)$")


def is_wsl(
    environ: Mapping[str, str] | None = None,
    proc_version: Path | None = None,
) -> bool:
    """Return True when running inside Windows Subsystem for Linux."""
    env = os.environ if environ is None else environ
    if env.get("WSL_DISTRO_NAME") or env.get("WSL_INTEROP"):
        return True
    path = PROC_VERSION if proc_version is None else proc_version
    try:
        return "microsoft" in path.read_text(errors="ignore").lower()
    except OSError:
        return False


def expand_path(
    raw: str,
    *,
    home: str | None = None,
    wsl: bool | None = None,
    mount_prefix: str = "/mnt",
) -> str:
    """Expand ``~`` and, under WSL, map ``C:\\x`` style paths onto the drive mount.

    No ``..`` or symlink resolution is applied.
    """
    home_dir = home if home is not None else str(Path.home())
    if raw == "~":
        return home_dir
    if raw.startswith("~/"):
        return f"{home_dir}/{raw[2:]}"

    match = _WINDOWS_PATH_RE.match(raw)
    if match and (is_wsl() if wsl is None else wsl):
        drive = match.group(1).lower()
        rest = match.group(2).replace("\\", "/")
        return f"{mount_prefix.rstrip('/')}/{drive}/{rest}"
    return raw


def is_valid_repo_slug(slug: str) -> bool:
    return bool(_SLUG_RE.fullmatch(slug))


def is_valid_fork_name(name: str) -> bool:
    return bool(_FORK_NAME_RE.fullmatch(name))


def repo_name_from_slug(slug: str) -> str:
    return slug.rsplit("/", 1)[-1]
