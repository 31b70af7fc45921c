"""Application configuration contract."""

from functools import lru_cache

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from forkstrap.errors import ConfigError
from forkstrap.paths import is_valid_repo_slug

DEFAULT_WSL_USERS_ROOTS = "/mnt/c/Users:/mnt/d/Users:/mnt/e/Users"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(extra="ignore", populate_by_name=True)

    upstream_repo: str = Field(alias="FORKSTRAP_UPSTREAM_REPO", default="aspain/git-sweaty")
    fork_repo: str = Field(alias="FORKSTRAP_FORK_REPO", default="")
    wsl_mount_prefix: str = Field(alias="FORKSTRAP_WSL_MOUNT_PREFIX", default="/mnt")
    wsl_users_roots: str = Field(
        alias="FORKSTRAP_WSL_USERS_ROOTS", default=DEFAULT_WSL_USERS_ROOTS
    )
    setup_script_rel: str = Field(
        alias="FORKSTRAP_SETUP_SCRIPT", default="scripts/setup_auth.py"
    )
    python_command: str = Field(alias="FORKSTRAP_PYTHON", default="python3")
    github_host: str = Field(alias="FORKSTRAP_GITHUB_HOST", default="github.com")
    raw_content_host: str = Field(
        alias="FORKSTRAP_RAW_CONTENT_HOST", default="raw.githubusercontent.com"
    )
    download_timeout_seconds: float = Field(
        alias="FORKSTRAP_DOWNLOAD_TIMEOUT_SECONDS", default=30.0
    )
    fork_list_limit: int = Field(alias="FORKSTRAP_FORK_LIST_LIMIT", default=1000)
    log_level: str = Field(alias="FORKSTRAP_LOG_LEVEL", default="WARNING")
    log_json: int = Field(alias="FORKSTRAP_LOG_JSON", default=0)

    @property
    def users_roots(self) -> list[str]:
        return [item for item in self.wsl_users_roots.split(":") if item]

    def repo_url(self, slug: str) -> str:
        return f"https://{self.github_host}/{slug}.git"

    def raw_script_url(self, upstream: str, branch: str) -> str:
        return f"https://{self.raw_content_host}/{upstream}/{branch}/{self.setup_script_rel}"


def validate_settings(settings: Settings) -> None:
    """Raise ConfigError naming every invalid setting."""
    invalid: list[str] = []
    if not is_valid_repo_slug(settings.upstream_repo):
        invalid.append("FORKSTRAP_UPSTREAM_REPO(expected OWNER/REPO)")
    if settings.fork_repo and not is_valid_repo_slug(settings.fork_repo):
        invalid.append("FORKSTRAP_FORK_REPO(expected OWNER/REPO)")
    if not settings.setup_script_rel.strip() or settings.setup_script_rel.startswith("/"):
        invalid.append("FORKSTRAP_SETUP_SCRIPT(relative path required)")
    if not settings.python_command.strip():
        invalid.append("FORKSTRAP_PYTHON")
    if settings.download_timeout_seconds <= 0:
        invalid.append("FORKSTRAP_DOWNLOAD_TIMEOUT_SECONDS(must be > 0)")
    if settings.fork_list_limit <= 0:
        invalid.append("FORKSTRAP_FORK_LIST_LIMIT(must be > 0)")

    if invalid:
        keys = ", ".join(invalid)
        raise ConfigError(f"invalid configuration: {keys}")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from the environment; malformed values raise ConfigError."""
    try:
        return Settings()
    except ValidationError as exc:
        keys = ", ".join(str(err["loc"][0]) for err in exc.errors() if err["loc"])
        raise ConfigError(f"invalid configuration: {keys}") from exc
