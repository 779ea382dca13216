"""Generated file model and batch writer."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict
from rich.markup import escape

from ..errors import WriteError
from ..utils import console


class GeneratedFile(BaseModel):
    """A synthesized file waiting to be written."""

    model_config = ConfigDict(frozen=True)

    path: Path
    content: str
    write_mode: Literal["create_or_overwrite"] = "create_or_overwrite"


async def write_files(files: Iterable[GeneratedFile]) -> list[Path]:
    """Write each file in order, creating parent directories as needed.

    There is no transaction across the batch: when a write fails the files
    written before it stay on disk.

    Raises:
        WriteError: On the first file that cannot be written.
    """
    written: list[Path] = []
    for generated in files:
        try:
            await asyncio.to_thread(_write_file, generated.path, generated.content)
        except OSError as exc:
            raise WriteError(generated.path, exc.strerror or str(exc)) from exc
        console.print(f"  [green]+[/green] Wrote file: {escape(str(generated.path))}")
        written.append(generated.path)
    return written


def _write_file(path: Path, content: str) -> None:
    """Synchronous helper: create parent dirs and write content."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
