"""Exception hierarchy for rbisync.

- RbiSyncError: base for every error the engine raises on purpose
- FatalCompileError: the compiler could not finish its setup; the batch is void
- ArtifactIOError: the output directory (or a file in it) cannot be read or written
- AmbiguousArtifactError: two files in the output directory claim the same gem
- ConfigError: the config file or the manifest is unusable
- CLIError: click-facing wrapper carrying an exit code

User-facing messages are safe to print; technical details go to the log.
"""

from __future__ import annotations

import click
import structlog

from rbisync.output import error

logger = structlog.get_logger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_FAILURE = 1  # Out-of-date RBIs, fatal compile error, bad usage
EXIT_SYSTEM_ERROR = 2  # Filesystem, ambiguous artifacts, config


class RbiSyncError(Exception):
    """Base exception for rbisync.

    Args:
        message: Message to display to the user.
        internal_details: Optional technical details, logged but not displayed.
    """

    def __init__(self, message: str, *, internal_details: str | None = None) -> None:
        super().__init__(message)
        self.message = message

        if internal_details:
            logger.error(
                "rbisync_error",
                error_type=self.__class__.__name__,
                message=message,
                internal_details=internal_details,
            )


class FatalCompileError(RbiSyncError):
    """Raised when the compiler cannot complete its setup phase.

    Aborts the whole batch: nothing is created, updated or removed.

    Attributes:
        message: The underlying cause, e.g. ``LoadError: cannot load such file -- foo``.
        remediation: What the user should do about it.
    """

    def __init__(self, message: str, remediation: str = "") -> None:
        super().__init__(message)
        self.remediation = remediation

    def render(self) -> str:
        if not self.remediation:
            return self.message
        return f"{self.message}\n\n{self.remediation}"


class ArtifactIOError(RbiSyncError):
    """Raised when the output directory cannot be read or written."""

    def __init__(self, path: object, operation: str, cause: OSError | None = None) -> None:
        super().__init__(
            f"Cannot {operation} {path}",
            internal_details=repr(cause) if cause else None,
        )
        self.path = path
        self.operation = operation


class AmbiguousArtifactError(RbiSyncError):
    """Raised when more than one file in the output directory belongs to a gem."""

    def __init__(self, name: str, filenames: list[str]) -> None:
        listing = ", ".join(sorted(filenames))
        super().__init__(
            f"Ambiguous RBI files for gem '{name}': {listing}. "
            "Remove all but one of them and run again."
        )
        self.name = name
        self.filenames = sorted(filenames)


class ConfigError(RbiSyncError):
    """Raised when a config file or a dependency manifest cannot be used."""

    def __init__(self, message: str, file_path: object = None) -> None:
        if file_path is not None:
            message = f"{file_path}: {message}"
        super().__init__(message)
        self.file_path = file_path


class CLIError(click.ClickException):
    """CLI exception with exit code support.

    Attributes:
        message: User-facing error message.
        exit_code: Exit code for the CLI (default: 1).
    """

    def __init__(self, message: str, exit_code: int = EXIT_FAILURE) -> None:
        super().__init__(message)
        self.exit_code = exit_code

    def show(self, file: object = None) -> None:
        """Display the error message on the rich console."""
        error(self.format_message())

    @classmethod
    def from_error(cls, err: RbiSyncError) -> CLIError:
        """Map an engine error to the exit code the CLI should return."""
        if isinstance(err, FatalCompileError):
            return cls(err.render(), exit_code=EXIT_FAILURE)
        return cls(err.message, exit_code=EXIT_SYSTEM_ERROR)
