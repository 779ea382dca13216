"""Directory planning and creation.

A :class:`FolderManifest` declares the logical folders of one level of the
scaffold.  Each logical name is shown to the user as a text question whose
default is the logical name itself; the resolved names are validated and then
materialised by :func:`create_tree`.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field
from rich.markup import escape

from .collector import QuestionSpec
from .errors import FilesystemConflict, InvalidName, PermissionDenied
from .utils import console

_SAFE_SEGMENT = re.compile(r"^[A-Za-z0-9._-]+$")

MAIN_FILE_SUFFIXES = (".js", ".mjs", ".cjs")


def validate_name(name: str) -> str:
    """Return *name* if it is a safe single path segment.

    Names end up inside filesystem paths and command lines, so anything that
    could traverse directories or be read by the shell is rejected.

    Raises:
        InvalidName: If the name is empty, ``.``/``..`` or contains characters
            outside ``[A-Za-z0-9._-]``.
    """
    if not name:
        raise InvalidName(name, "name is empty")
    if name in (".", ".."):
        raise InvalidName(name, "relative path segments are not allowed")
    if not _SAFE_SEGMENT.match(name):
        raise InvalidName(name, "only letters, digits, '.', '_' and '-' are allowed")
    return name


def validate_main_file_name(name: str) -> str:
    """Validate the backend entry file name (``index.js`` by default)."""
    validate_name(name)
    if not name.endswith(MAIN_FILE_SUFFIXES):
        raise InvalidName(name, f"must end with one of {', '.join(MAIN_FILE_SUFFIXES)}")
    return name


class FolderManifest(BaseModel):
    """Ordered logical folder names for one level of the scaffold."""

    label: str = Field(..., description="Human label used in prompts (e.g. 'backend')")
    folders: list[str] = Field(default_factory=list)

    def question_specs(self) -> list[QuestionSpec]:
        """One text question per folder, defaulting to the logical name."""
        return [
            QuestionSpec(
                kind="text",
                key=folder,
                prompt=f"Enter a name for the {self.label} {folder} directory",
                default=folder,
            )
            for folder in self.folders
        ]

    def resolve(self, answers: dict[str, Any]) -> dict[str, str]:
        """Map each logical folder to its resolved display name.

        Order follows the manifest.  Blank answers fall back to the logical
        name.

        Raises:
            InvalidName: If a resolved name is unsafe or used twice.
        """
        resolved: dict[str, str] = {}
        seen: set[str] = set()
        for folder in self.folders:
            raw = answers.get(folder)
            name = str(raw).strip() if raw is not None else ""
            name = validate_name(name or folder)
            if name in seen:
                raise InvalidName(name, f"used twice in the {self.label} manifest")
            seen.add(name)
            resolved[folder] = name
        return resolved


BACKEND_MANIFEST = FolderManifest(
    label="backend",
    folders=[
        "db",
        "models",
        "routes",
        "controllers",
        "middlewares",
        "utils",
        "validators",
    ],
)


def create_tree(base_path: str | Path, names: list[str]) -> list[Path]:
    """Create one directory per name directly under *base_path*.

    Directories are created non-recursively and in order.  The first failure
    aborts the remaining names; directories created before it are kept.

    Args:
        base_path: Existing parent directory.
        names: Resolved folder names.

    Returns:
        Absolute paths of the created directories.

    Raises:
        FilesystemConflict: If a target already exists or the parent is missing
            or not a directory.
        PermissionDenied: If the process may not create the directory.
    """
    base = Path(base_path).resolve()
    created: list[Path] = []
    for name in names:
        destination = base / name
        try:
            destination.mkdir()
        except FileExistsError:
            kind = "Directory" if destination.is_dir() else "File"
            raise FilesystemConflict(destination, f"{kind} already exists: {destination}") from None
        except (FileNotFoundError, NotADirectoryError):
            raise FilesystemConflict(destination, f"Parent is not a directory: {base}") from None
        except PermissionError:
            raise PermissionDenied(destination) from None
        console.print(f"  [green]+[/green] Created folder: {escape(str(destination))}")
        created.append(destination)
    return created
