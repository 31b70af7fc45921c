"""forkstrap exception hierarchy.

All forkstrap-specific exceptions inherit from ForkstrapError. The CLI
turns any of them into an ``ERROR:`` line on stderr and exit status 1.
"""


class ForkstrapError(Exception):
    """Base exception for all forkstrap errors."""

    def __init__(self, message: str = "", *, retryable: bool = False) -> None:
        super().__init__(message)
        self.retryable = retryable


class BootstrapError(ForkstrapError):
    """Fatal precondition failure while preparing the checkout."""


class ConfigError(ForkstrapError):
    """Invalid or missing configuration."""


class CommandNotFoundError(BootstrapError):
    """A required external command is not on PATH."""

    def __init__(self, command: str) -> None:
        super().__init__(f"Missing required command: {command}")
        self.command = command


class DownloadError(BootstrapError):
    """Fetching the remote setup helper failed."""

    def __init__(self, message: str = "", *, retryable: bool = True) -> None:
        super().__init__(message, retryable=retryable)
