"""
Error taxonomy for ark-chat.

Only ``ConfigurationError`` is fatal. Everything deriving from ``TurnError`` is
scoped to a single conversational turn: the controller prints it, rolls the
transcript back and keeps the read loop going.
"""

from __future__ import annotations

TIMEOUT_GUIDANCE = (
    "Hint: the API responded too slowly. Try: "
    "1. a longer timeout (--timeout 180) "
    "2. checking your network "
    "3. retrying later"
)


class ArkChatError(Exception):
    """Base class for every error raised by ark-chat."""


class ConfigurationError(ArkChatError):
    """Mandatory startup parameters are missing or invalid."""


class TurnError(ArkChatError):
    """A failure confined to one user turn."""


class RequestError(TurnError):
    """The chat request could not be sent."""


class RequestTimeoutError(RequestError):
    """The chat request timed out before the response arrived."""

    def __init__(self, message: str) -> None:
        super().__init__(f"{message}\n{TIMEOUT_GUIDANCE}")


class StreamReadError(TurnError):
    """The response body broke while it was being streamed."""


class HTTPStatusError(TurnError):
    """The endpoint answered with a non-success status code."""

    def __init__(self, status_code: int, detail: str | None = None) -> None:
        self.status_code = status_code
        self.detail = detail
        message = f"request failed, status code: {status_code}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class EmptyAnswerError(TurnError):
    """The stream finished without producing any reply text."""

    def __init__(self) -> None:
        super().__init__("no valid answer was received")


class StreamError(TurnError):
    """The server reported an error inside the stream."""

    def __init__(self, code: str | None, message: str) -> None:
        self.code = code
        self.message = message
        label = f"[{code}] " if code else ""
        super().__init__(f"server reported an error: {label}{message}")


def require_config(value: str | None, option: str) -> str:
    """Return ``value`` stripped, or raise if it is blank."""
    if value is None or not value.strip():
        raise ConfigurationError(f"{option} must be specified")
    return value.strip()
