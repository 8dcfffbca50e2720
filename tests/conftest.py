"""Shared fixtures and fakes for the ark-chat test suite."""

from __future__ import annotations

import io
import json
import threading
import time
from unittest.mock import MagicMock

import pytest
import requests

from ark_chat.animation import ThinkingAnimation
from ark_chat.config import ChatConfig

TEST_URL = "https://ark.cn-beijing.volces.com/api/v3/chat/completions"


def data_frame(content: str | None, finish_reason: str | None = None) -> str:
    """A ``data:`` line carrying one delta in the Ark streaming format."""
    payload = {
        "id": "chatcmpl-test",
        "object": "chat.completion.chunk",
        "choices": [
            {
                "delta": {"role": "assistant", "content": content},
                "finish_reason": finish_reason,
                "index": 0,
            }
        ],
    }
    return "data: " + json.dumps(payload)


def done_frame() -> str:
    return "data: [DONE]"


class ScriptedRaw:
    """Raw body for ``requests.Response`` that hands out one line per read.

    ``delay`` sleeps before every line; ``fail_after`` raises a broken-connection
    error once that many lines have been delivered.
    """

    def __init__(
        self, lines: list[str], delay: float = 0.0, fail_after: int | None = None
    ) -> None:
        self._lines = [(line + "\n").encode("utf-8") for line in lines]
        self.delay = delay
        self.fail_after = fail_after
        self.served = 0
        self.closed = False

    def read(self, amt: int | None = None, **kwargs) -> bytes:
        if self.fail_after is not None and self.served >= self.fail_after:
            raise requests.exceptions.ChunkedEncodingError("Connection broken: reset by peer")
        if self.served >= len(self._lines):
            return b""
        if self.delay:
            time.sleep(self.delay)
        line = self._lines[self.served]
        self.served += 1
        return line

    def close(self) -> None:
        self.closed = True


def make_response(
    lines: list[str] | None = None,
    status_code: int = 200,
    *,
    body: str | None = None,
    delay: float = 0.0,
    fail_after: int | None = None,
) -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response.url = TEST_URL
    if body is not None:
        response.raw = io.BytesIO(body.encode("utf-8"))
    else:
        response.raw = ScriptedRaw(lines or [], delay=delay, fail_after=fail_after)
    return response


def make_session(response=None, side_effect=None) -> MagicMock:
    session = MagicMock(spec=requests.Session)
    if side_effect is not None:
        session.post.side_effect = side_effect
    else:
        session.post.return_value = response
    return session


def posted_body(session: MagicMock, call_index: int = -1) -> dict:
    call = session.post.call_args_list[call_index]
    return json.loads(call.kwargs["data"])


class RecordingStream(io.StringIO):
    """StringIO that remembers which thread wrote each piece of text."""

    def __init__(self) -> None:
        super().__init__()
        self.writes: list[tuple[str, str]] = []
        self._lock = threading.Lock()

    def write(self, text: str) -> int:
        with self._lock:
            self.writes.append((threading.current_thread().name, text))
            return super().write(text)


@pytest.fixture
def config() -> ChatConfig:
    return ChatConfig(api_key="sk-test", endpoint_id="ep-test")


@pytest.fixture
def out() -> RecordingStream:
    return RecordingStream()


@pytest.fixture
def fast_animation(out):
    """Factory for indicators that tick every 10ms into ``out``."""

    def factory() -> ThinkingAnimation:
        return ThinkingAnimation(stream=out, interval=0.01, ack_timeout=2.0)

    return factory
