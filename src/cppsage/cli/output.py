"""Output utilities for CLI commands with clear intent.

user_output() is for messages meant for the person at the terminal and goes
to stderr. forward_process_output() relays a tool's own streams untouched, so
diagnostics from conan or cmake reach the user exactly as the tool printed them.
"""

import click

from cppsage.core.process.abc import ProcessResult


def user_output(message: str = "", nl: bool = True, color: bool | None = None) -> None:
    """Output informational message for human users (stderr)."""
    click.echo(message, nl=nl, err=True, color=color)


def forward_process_output(result: ProcessResult) -> None:
    """Relay a finished tool's stdout and stderr verbatim.

    color=True keeps ANSI sequences even when sage's own output is piped.
    """
    if result.stdout:
        click.echo(result.stdout, nl=False, color=True)
    if result.stderr:
        click.echo(result.stderr, nl=False, err=True, color=True)
