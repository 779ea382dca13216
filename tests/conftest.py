"""Shared pytest fixtures for the stackseed test suite.

Provides reusable fixtures for:
- Temporary base directories
- Run configurations pointing at them
- A fake command runner that simulates npm and the Vite template tool
- Preset answer maps for the common scenarios
- Mock asyncio subprocess helpers
"""

from __future__ import annotations

import json
import shlex
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from stackseed.config import ScaffoldConfig
from stackseed.errors import CommandFailed
from stackseed.synthesizer.packages import optional_packages


# ---------------------------------------------------------------------------
# Paths & configuration
# ---------------------------------------------------------------------------

@pytest.fixture
def base_dir(tmp_path: Path) -> Path:
    """Empty directory standing in for the user's cwd."""
    directory = tmp_path / "workspace"
    directory.mkdir()
    return directory


@pytest.fixture
def scaffold_config(base_dir: Path) -> ScaffoldConfig:
    return ScaffoldConfig(base_dir=base_dir)


# ---------------------------------------------------------------------------
# Fake command runner
# ---------------------------------------------------------------------------

DEFAULT_MANIFEST = {
    "name": "api",
    "version": "1.0.0",
    "main": "index.js",
    "scripts": {"test": "echo \"Error: no test specified\" && exit 1"},
}


class FakeRunner:
    """Records commands and reproduces the side effects later steps rely on.

    * ``npm init -y`` writes ``package.json`` (or *manifest_text* if given).
    * ``npm create vite@latest <name> ...`` creates ``<name>/src/index.css``.
    * ``npx tailwindcss init -p`` writes default Tailwind/PostCSS configs.
    * Any command containing *fail_on* raises :class:`CommandFailed`.
    """

    def __init__(self, fail_on: str | None = None, manifest_text: str | None = None) -> None:
        self.fail_on = fail_on
        self.manifest_text = manifest_text
        self.calls: list[tuple[str, Path]] = []

    @property
    def command_lines(self) -> list[str]:
        return [command for command, _ in self.calls]

    async def run(self, command_line: str, cwd: str | Path) -> str:
        cwd = Path(cwd)
        self.calls.append((command_line, cwd))
        if self.fail_on and self.fail_on in command_line:
            raise CommandFailed(command_line, 1, "npm ERR! simulated failure")

        parts = shlex.split(command_line)
        if parts[:2] == ["npm", "init"]:
            text = self.manifest_text
            if text is None:
                text = json.dumps({**DEFAULT_MANIFEST, "name": cwd.name}, indent=2)
            (cwd / "package.json").write_text(text, encoding="utf-8")
        elif parts[:2] == ["npm", "create"]:
            project = cwd / parts[3]
            (project / "src").mkdir(parents=True, exist_ok=True)
            (project / "src" / "index.css").write_text(":root { color: black; }\n", encoding="utf-8")
            (project / "package.json").write_text('{"name": "%s"}\n' % parts[3], encoding="utf-8")
        elif parts[:3] == ["npx", "tailwindcss", "init"]:
            (cwd / "tailwind.config.js").write_text("module.exports = {}\n", encoding="utf-8")
            (cwd / "postcss.config.js").write_text("module.exports = {}\n", encoding="utf-8")
        return ""


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def make_runner():
    """Factory for configured fake runners (failures, custom manifests)."""
    def factory(fail_on: str | None = None, manifest_text: str | None = None) -> FakeRunner:
        return FakeRunner(fail_on=fail_on, manifest_text=manifest_text)

    return factory


# ---------------------------------------------------------------------------
# Preset answers
# ---------------------------------------------------------------------------

def _no_packages() -> dict[str, Any]:
    return {rule.package_id: False for rule in optional_packages()}


@pytest.fixture
def scenario_a_answers() -> dict[str, Any]:
    """api/web folders, mongoose + cors + dotenv, React, no CSS library."""
    return {
        "backend": "api",
        "frontend": "web",
        **_no_packages(),
        "mongoose": True,
        "cors": True,
        "dotenv": True,
        "create_frontend": True,
        "template": "react",
        "css_library": "none",
    }


@pytest.fixture
def no_package_answers() -> dict[str, Any]:
    """Every optional package declined."""
    return {"backend": "api", "frontend": "web", **_no_packages()}


# ---------------------------------------------------------------------------
# Mock Subprocess (generic)
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_subprocess():
    """Mock asyncio subprocess for testing command execution.

    Returns a factory that creates mock subprocess instances with configurable
    stdout, stderr, and return codes.

    Usage:
        def test_command(mock_subprocess):
            proc = mock_subprocess(stdout="output", returncode=0)
            with patch("asyncio.create_subprocess_shell", return_value=proc):
                ...
    """
    def factory(
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
    ) -> AsyncMock:
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(
            return_value=(stdout.encode("utf-8"), stderr.encode("utf-8"))
        )
        mock_proc.returncode = returncode
        mock_proc.pid = 99999
        mock_proc.kill = MagicMock()
        mock_proc.wait = AsyncMock(return_value=returncode)
        return mock_proc

    return factory
