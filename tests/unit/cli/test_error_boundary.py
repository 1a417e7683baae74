"""Tests for the CLI error boundary decorator."""

from pathlib import Path

import click
from click.testing import CliRunner

from cppsage.cli.error_boundary import INTERRUPTED_EXIT_CODE, cli_error_boundary
from cppsage.core.errors import BuildStageFailed, ManifestNotFound, ToolNotFound


def _command_raising(exc: BaseException) -> click.Command:
    @click.command()
    @cli_error_boundary
    def failing() -> None:
        raise exc

    return failing


def test_sage_error_uses_its_exit_code() -> None:
    result = CliRunner().invoke(_command_raising(BuildStageFailed("compile", 2)))

    assert result.exit_code == 2
    assert "Error: Stage 'compile' failed (exit code 2)" in result.output


def test_tool_not_found_exits_127() -> None:
    result = CliRunner().invoke(_command_raising(ToolNotFound("cmake")))

    assert result.exit_code == 127
    assert "'cmake' was not found on PATH" in result.output


def test_manifest_not_found_exits_1() -> None:
    error = ManifestNotFound(Path("packages/requirements.txt"))
    result = CliRunner().invoke(_command_raising(error))

    assert result.exit_code == 1
    assert "packages/requirements.txt not found" in result.output


def test_value_error_is_reported_without_traceback() -> None:
    result = CliRunner().invoke(_command_raising(ValueError("Unknown key 'x'")))

    assert result.exit_code == 1
    assert "Error: Unknown key 'x'" in result.output
    assert "Traceback" not in result.output


def test_keyboard_interrupt_exits_130() -> None:
    result = CliRunner().invoke(_command_raising(KeyboardInterrupt()))

    assert result.exit_code == INTERRUPTED_EXIT_CODE
    assert "Interrupted." in result.output


def test_unexpected_errors_bubble_up() -> None:
    result = CliRunner().invoke(_command_raising(RuntimeError("bug")))

    assert result.exit_code == 1
    assert isinstance(result.exception, RuntimeError)
