"""Exception hierarchy for the scaffold engine.

Every failure a step can surface derives from :class:`ScaffoldError` so the
orchestrator can report it with context and stop the affected branch.
"""

from __future__ import annotations

from pathlib import Path


class ScaffoldError(Exception):
    """Base class for all scaffold failures."""


class FilesystemConflict(ScaffoldError):
    """Raised when a target path already exists or its parent is not a directory."""

    def __init__(self, path: str | Path, message: str = "") -> None:
        self.path = Path(path)
        super().__init__(message or f"Path already exists: {self.path}")


class PermissionDenied(ScaffoldError):
    """Raised when the process lacks rights to create a path."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        super().__init__(f"Permission denied: {self.path}")


class CommandFailed(ScaffoldError):
    """Raised when an external command exits with a non-zero code."""

    def __init__(self, command_line: str, exit_code: int, stderr: str = "") -> None:
        self.command_line = command_line
        self.exit_code = exit_code
        self.stderr = stderr
        message = f"Command failed (exit {exit_code}): {command_line}"
        if stderr:
            message += f"\n{stderr}"
        super().__init__(message)


class ManifestParseError(ScaffoldError):
    """Raised when an existing ``package.json`` cannot be read or parsed."""

    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Cannot parse manifest {self.path}: {reason}")


class WriteError(ScaffoldError):
    """Raised when a generated file cannot be written."""

    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Cannot write {self.path}: {reason}")


class InvalidName(ScaffoldError):
    """Raised when a folder or file name is not a safe single path segment."""

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        self.reason = reason
        super().__init__(f"Invalid name {name!r}: {reason}")


class InvalidAnswer(ScaffoldError):
    """Raised when a preset answer does not satisfy its question."""

    def __init__(self, key: str, value: object, reason: str) -> None:
        self.key = key
        self.value = value
        super().__init__(f"Invalid answer for {key!r} ({value!r}): {reason}")
