"""Error boundary handling for CLI commands.

This module provides a decorator to catch well-known exceptions at CLI entry
points and display clean error messages without stack traces.
"""

import functools
import logging
from collections.abc import Callable
from typing import Any, TypeVar

import click

from cppsage.cli.output import user_output
from cppsage.core.errors import SageError

logger = logging.getLogger(__name__)

INTERRUPTED_EXIT_CODE = 130

T = TypeVar("T", bound=Callable[..., Any])


def _fail(message: str, exit_code: int) -> None:
    user_output(click.style("Error: ", fg="red") + message)
    raise SystemExit(exit_code)


def cli_error_boundary(func: T) -> T:
    """Decorator that catches well-known exceptions and displays clean error messages.

    Catches:
        - SageError: exits with the error's own exit code
        - FileExistsError, FileNotFoundError, PermissionError, ValueError: exit 1
        - KeyboardInterrupt: exit 130, no cleanup of external tool state

    All other exceptions bubble up normally with full stack traces.

    Example:
        @click.command()
        @click.pass_obj
        @cli_error_boundary
        def my_command(ctx: SageContext) -> None:
            ...
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except SageError as e:
            logger.debug("%s: %s", type(e).__name__, e)
            _fail(str(e), e.exit_code)
        except (FileExistsError, FileNotFoundError, PermissionError, ValueError) as e:
            _fail(str(e), 1)
        except KeyboardInterrupt:
            user_output(click.style("Interrupted.", fg="red"))
            raise SystemExit(INTERRUPTED_EXIT_CODE) from None

    return wrapper  # type: ignore[return-value]
