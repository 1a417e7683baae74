"""Fake UserFeedback that records messages instead of printing them."""

from cppsage.core.user_feedback import UserFeedback


class FakeUserFeedback(UserFeedback):
    """Records every message with its level for test assertions."""

    def __init__(self) -> None:
        self._messages: list[tuple[str, str]] = []

    def info(self, message: str) -> None:
        self._messages.append(("info", message))

    def success(self, message: str) -> None:
        self._messages.append(("success", message))

    def warning(self, message: str) -> None:
        self._messages.append(("warning", message))

    def error(self, message: str) -> None:
        self._messages.append(("error", message))

    @property
    def messages(self) -> list[tuple[str, str]]:
        """Get (level, message) tuples in the order they were emitted."""
        return self._messages.copy()

    def messages_at(self, level: str) -> list[str]:
        return [message for lvl, message in self._messages if lvl == level]
