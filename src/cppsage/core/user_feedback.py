"""User-facing diagnostic output with mode awareness."""

from abc import ABC, abstractmethod

import click

from cppsage.cli.output import user_output


class UserFeedback(ABC):
    """Provides user-facing diagnostic output.

    Commands call ctx.feedback methods instead of echoing directly, which lets
    tests capture messages with a fake and lets --quiet suppress progress.

    Usage:
        ctx.feedback.info("Configuring project with CMake...")
        ctx.feedback.success("Project compiled successfully!")
        ctx.feedback.warning("Conan toolchain not found")
    """

    @abstractmethod
    def info(self, message: str) -> None:
        """Show informational message (suppressed in quiet mode)."""

    @abstractmethod
    def success(self, message: str) -> None:
        """Show success message (suppressed in quiet mode)."""

    @abstractmethod
    def warning(self, message: str) -> None:
        """Show warning message (always shown)."""

    @abstractmethod
    def error(self, message: str) -> None:
        """Show error message (always shown)."""


class InteractiveFeedback(UserFeedback):
    """Feedback shown in interactive mode (all messages)."""

    def info(self, message: str) -> None:
        user_output(click.style(message, fg="green"))

    def success(self, message: str) -> None:
        user_output(click.style("Success: ", fg="green") + message)

    def warning(self, message: str) -> None:
        user_output(click.style("Warning: ", fg="yellow") + message)

    def error(self, message: str) -> None:
        user_output(click.style("Error: ", fg="red") + message)


class SuppressedFeedback(UserFeedback):
    """Feedback in quiet mode: only warnings and errors are shown."""

    def info(self, message: str) -> None:
        pass

    def success(self, message: str) -> None:
        pass

    def warning(self, message: str) -> None:
        user_output(click.style("Warning: ", fg="yellow") + message)

    def error(self, message: str) -> None:
        user_output(click.style("Error: ", fg="red") + message)
