"""Exception hierarchy for the research scaffolder.

Every failure surfaced to the caller derives from :class:`ScaffoldError` so
that callers can catch one type.  Errors raised around external processes
carry the failing ``command`` and its ``stderr`` for diagnostics.
"""

from __future__ import annotations


class ScaffoldError(Exception):
    """Base class for all scaffolding failures."""

    def __init__(self, message: str, command: str = "", stderr: str = "") -> None:
        self.command = command
        self.stderr = stderr
        super().__init__(message)


class ConfigurationError(ScaffoldError):
    """Raised when the caller-supplied options or template are invalid."""


class FilesystemError(ScaffoldError):
    """Raised when the project tree cannot be created on disk."""

    def __init__(self, message: str, path: str = "") -> None:
        self.path = path
        super().__init__(message)


class TargetExistsError(ConfigurationError, FilesystemError):
    """Raised when the project root already exists.

    Both a configuration problem (wrong name/path) and a filesystem one, so
    it is catchable as either.
    """

    def __init__(self, path: str) -> None:
        self.path = path
        ScaffoldError.__init__(self, f"Target dir already exists: {path}")


class VCSError(ScaffoldError):
    """Raised when git initialisation, staging or the initial commit fails."""


class AuthenticationError(ScaffoldError):
    """Raised when the hosting platform rejects (or lacks) a credential."""

    def __init__(self, message: str, remediation: str = "") -> None:
        self.remediation = remediation
        full = f"{message}\n{remediation}" if remediation else message
        super().__init__(full)


class RemoteError(ScaffoldError):
    """Raised when remote repository creation or the initial push fails."""

    def __init__(
        self,
        message: str,
        command: str = "",
        stderr: str = "",
        status_code: int | None = None,
    ) -> None:
        self.status_code = status_code
        super().__init__(message, command=command, stderr=stderr)


class DependencyEnvError(ScaffoldError):
    """Raised when the dependency-environment tool fails to initialise."""
