"""External command execution.

Runs one shell command in one working directory, captures its output and
turns a non-zero exit into :class:`~stackseed.errors.CommandFailed`.  There
is no timeout: the package manager's own lifetime bounds each
call, so a hung ``npm`` blocks the run.
"""

from __future__ import annotations

import asyncio
import os
from dataclasses import dataclass
from pathlib import Path

from rich.markup import escape

from .errors import CommandFailed
from .utils import console, print_warning


@dataclass(frozen=True)
class CommandSpec:
    """A command line bound to the directory it must run in."""

    command_line: str
    cwd: Path

    def __str__(self) -> str:
        return f"{self.command_line} (in {self.cwd})"


async def run_command(
    cmd: str,
    cwd: str | Path | None = None,
    env: dict[str, str] | None = None,
) -> tuple[int, str, str]:
    """Run a shell command asynchronously.

    Args:
        cmd: Shell command string.
        cwd: Working directory for the child process.
        env: Optional extra environment variables merged on top of ``os.environ``.

    Returns:
        A ``(returncode, stdout, stderr)`` tuple.
    """
    merged_env: dict[str, str] | None = None
    if env:
        merged_env = {**os.environ, **env}

    process = await asyncio.create_subprocess_shell(
        cmd,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        cwd=str(cwd) if cwd else None,
        env=merged_env,
    )
    stdout_bytes, stderr_bytes = await process.communicate()

    stdout_str = (stdout_bytes or b"").decode("utf-8", errors="replace").strip()
    stderr_str = (stderr_bytes or b"").decode("utf-8", errors="replace").strip()
    return (process.returncode or 0, stdout_str, stderr_str)


class CommandRunner:
    """Executes commands one at a time and echoes their output."""

    def __init__(self, echo_output: bool = True) -> None:
        self.echo_output = echo_output

    async def run(self, command_line: str, cwd: str | Path) -> str:
        """Run *command_line* in *cwd* and return its stdout.

        Raises:
            CommandFailed: If the process exits with a non-zero code.
        """
        console.print(f"  [cyan]$[/cyan] {escape(command_line)}  [dim]({escape(str(cwd))})[/dim]")
        returncode, stdout, stderr = await run_command(command_line, cwd=cwd)

        if returncode != 0:
            raise CommandFailed(command_line, returncode, stderr)

        if self.echo_output and stdout:
            console.print(f"[dim]{escape(stdout)}[/dim]")
        if self.echo_output and stderr:
            print_warning(stderr)
        return stdout
