"""Error taxonomy for gtoolkit_installer.

Every error carries a stable ``code`` for structured handling. Library
exceptions are translated into these types at the primitive boundary; the
build pipeline never recovers from them and the CLI is responsible for
presenting them.
"""

from __future__ import annotations

from pathlib import Path


class InstallerError(Exception):
    """Base error for all installer failures."""

    def __init__(self, message: str, code: str = "installer_error") -> None:
        """Initialize InstallerError.

        Args:
            message: Error description.
            code: Error code for structured error handling.
        """
        super().__init__(message)
        self.message = message
        self.code = code


class ConfigurationError(InstallerError):
    """Raised for malformed or contradictory build options."""

    def __init__(self, message: str, code: str = "configuration_error") -> None:
        super().__init__(message, code)


class AlreadyInstalledError(InstallerError):
    """Raised when an installation exists and overwrite was not requested."""

    def __init__(self, path: Path, code: str = "already_installed") -> None:
        super().__init__(
            f"Glamorous Toolkit is already installed in {path}. "
            "Use --overwrite to replace it.",
            code,
        )
        self.path = path


class NotFoundError(InstallerError):
    """Raised when a required file does not exist or a pattern matched nothing."""

    def __init__(self, message: str, code: str = "not_found") -> None:
        super().__init__(message, code)


class AmbiguousMatchError(InstallerError):
    """Raised when a file pattern matched more than one file."""

    def __init__(
        self,
        pattern: str,
        directory: Path,
        matches: list[Path],
        code: str = "ambiguous_match",
    ) -> None:
        names = ", ".join(sorted(m.name for m in matches))
        super().__init__(
            f"Pattern {pattern!r} matched {len(matches)} files in {directory}: {names}",
            code,
        )
        self.pattern = pattern
        self.directory = directory
        self.matches = matches


class FileOperationError(InstallerError):
    """Raised when a disk read, write or move fails."""

    def __init__(self, message: str, code: str = "io_error") -> None:
        super().__init__(message, code)


class DownloadError(InstallerError):
    """Raised when an artifact download fails."""

    def __init__(self, message: str, code: str = "network_error") -> None:
        super().__init__(message, code)


class ExtractionError(InstallerError):
    """Raised when archive extraction fails."""

    def __init__(self, message: str, code: str = "bad_archive") -> None:
        super().__init__(message, code)


class ScriptExecutionError(InstallerError):
    """Raised when the Pharo VM reports a failure while evaluating scripts."""

    def __init__(
        self,
        message: str,
        exit_code: int | None = None,
        code: str = "script_failed",
    ) -> None:
        super().__init__(message, code)
        self.exit_code = exit_code


__all__ = [
    "AlreadyInstalledError",
    "AmbiguousMatchError",
    "ConfigurationError",
    "DownloadError",
    "ExtractionError",
    "FileOperationError",
    "InstallerError",
    "NotFoundError",
    "ScriptExecutionError",
]
