"""Unit tests for command execution (stackseed.runner).

Tests cover:
- run_command with real shell commands (success, failure, cwd, env)
- CommandRunner.run returning stdout and raising CommandFailed
- CommandRunner with a mocked subprocess
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from stackseed.errors import CommandFailed
from stackseed.runner import CommandRunner, CommandSpec, run_command


class TestRunCommand:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_successful_command(self):
        returncode, stdout, stderr = await run_command("echo hello")
        assert returncode == 0
        assert stdout == "hello"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_failed_command(self):
        returncode, stdout, stderr = await run_command("echo oops 1>&2; exit 3")
        assert returncode == 3
        assert stderr == "oops"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_command_with_cwd(self, tmp_path: Path):
        returncode, stdout, _ = await run_command("pwd", cwd=tmp_path)
        assert returncode == 0
        assert Path(stdout).resolve() == tmp_path.resolve()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_command_with_env(self):
        returncode, stdout, _ = await run_command(
            "echo $STACKSEED_TEST_VAR", env={"STACKSEED_TEST_VAR": "seeded"}
        )
        assert returncode == 0
        assert stdout == "seeded"


class TestCommandRunner:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_returns_stdout(self, tmp_path: Path):
        runner = CommandRunner()
        assert await runner.run("echo installed", tmp_path) == "installed"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_non_zero_exit_raises(self, tmp_path: Path):
        runner = CommandRunner()
        with pytest.raises(CommandFailed) as exc_info:
            await runner.run("echo 'npm ERR! missing script' 1>&2; exit 1", tmp_path)
        err = exc_info.value
        assert err.exit_code == 1
        assert "missing script" in err.stderr
        assert "exit 1" in err.command_line
        assert "Command failed (exit 1)" in str(err)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_stderr_on_success_is_not_an_error(self, tmp_path: Path):
        runner = CommandRunner()
        output = await runner.run("echo done; echo 'npm WARN deprecated' 1>&2", tmp_path)
        assert output == "done"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_mocked_process(self, mock_subprocess, tmp_path: Path):
        proc = mock_subprocess(stdout="added 57 packages\n", returncode=0)
        with patch("asyncio.create_subprocess_shell", return_value=proc) as create:
            output = await CommandRunner().run("npm install express", tmp_path)
        assert output == "added 57 packages"
        args, kwargs = create.call_args
        assert args[0] == "npm install express"
        assert kwargs["cwd"] == str(tmp_path)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_mocked_failure(self, mock_subprocess, tmp_path: Path):
        proc = mock_subprocess(stderr="npm ERR! 404", returncode=1)
        with patch("asyncio.create_subprocess_shell", return_value=proc):
            with pytest.raises(CommandFailed) as exc_info:
                await CommandRunner().run("npm install no-such-pkg", tmp_path)
        assert exc_info.value.stderr == "npm ERR! 404"


class TestCommandSpec:
    @pytest.mark.unit
    def test_str(self, tmp_path: Path):
        spec = CommandSpec(command_line="npm init -y", cwd=tmp_path)
        assert str(spec) == f"npm init -y (in {tmp_path})"

    @pytest.mark.unit
    def test_frozen(self, tmp_path: Path):
        spec = CommandSpec(command_line="npm init -y", cwd=tmp_path)
        with pytest.raises(AttributeError):
            spec.command_line = "rm -rf /"  # type: ignore[misc]
