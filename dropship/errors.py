"""Exception hierarchy for deployment failures.

Components raise these; only the CLI handlers turn them into a process exit.
"""


class DropshipError(Exception):
    """Base exception for all dropship errors."""

    def __init__(self, message: str, context: str | None = None):
        self.message = message
        self.context = context
        super().__init__(self.format_message())

    def format_message(self) -> str:
        """Format error message with optional context."""
        if self.context:
            return f"{self.message}\nContext: {self.context}"
        return self.message


class ConfigError(DropshipError):
    """Raised when the deployment config is missing, malformed or incomplete."""


class PackagingError(DropshipError):
    """Raised when the artifact source directory or one of its files can't be read."""


class BuildError(DropshipError):
    """Raised when the local server build step fails."""


class ProviderError(DropshipError):
    """Raised when the cloud provider rejects a request."""

    def __init__(self, message: str, context: str | None = None, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message, context)


class RendezvousTimeoutError(DropshipError):
    """Raised when the droplet address or the archive wasn't ready by the deadline."""


class HostUnreachableError(DropshipError):
    """Raised when the liveness probe never succeeded."""


class TransferError(DropshipError):
    """Raised when the artifact can't be copied to the droplet."""


class TransferIntegrityError(TransferError):
    """Raised when the remote byte count doesn't match the local archive."""

    def __init__(self, expected: int, written: int, remote_path: str):
        self.expected = expected
        self.written = written
        self.remote_path = remote_path
        super().__init__(f"copy to {remote_path}: expected {expected} bytes, got {written}")


class RemoteCommandError(DropshipError):
    """Raised when a remote command fails; halts the rest of the sequence."""

    def __init__(self, result, completed=None):
        self.result = result
        self.completed = list(completed or [])
        context = result.stderr.strip() or None
        super().__init__(f"Remote command failed (exit {result.returncode}): '{result.command}'", context)
