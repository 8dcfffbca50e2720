"""
Streaming consumer for the Ark chat-completions endpoint.

``iter_stream_chunks`` turns the newline-delimited body into ``StreamChunk``
objects, skipping blank lines, comments and frames that do not parse.
``ChatClient.stream_reply`` sends one request per call, forwards every non-empty
delta as soon as it arrives and fires ``on_first_delta`` exactly once, before the
first delta is emitted.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import requests
from pydantic import ValidationError

from .exceptions import (
    EmptyAnswerError,
    HTTPStatusError,
    RequestError,
    RequestTimeoutError,
    StreamError,
    StreamReadError,
)
from .models import ChatRequest, Message, StreamChunk

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator, Sequence

    from .config import ChatConfig

logger = logging.getLogger("ark_chat.stream")

DATA_PREFIX = "data:"
COMMENT_PREFIX = ":"
DONE_SENTINEL = "[DONE]"


def iter_stream_chunks(lines: Iterable[str | bytes]) -> Iterator[StreamChunk]:
    """Yield parsed chunks from server-sent-event lines until ``[DONE]``."""
    for raw in lines:
        line = raw.decode("utf-8", errors="replace") if isinstance(raw, bytes) else raw
        if not line or line.startswith(COMMENT_PREFIX):
            continue
        if not line.startswith(DATA_PREFIX):
            continue

        payload = line[len(DATA_PREFIX) :]
        if payload.startswith(" "):
            payload = payload[1:]
        if payload.strip() == DONE_SENTINEL:
            return

        try:
            chunk = StreamChunk.model_validate_json(payload)
        except ValidationError:
            logger.debug("[ArkChat Stream] Skipping unparsable frame: %r", payload[:200])
            continue
        yield chunk


def _error_detail(response: requests.Response) -> str | None:
    """Best-effort ``error.message`` from a JSON error body.

    Yields ``None`` when the body is not JSON or breaks while being read.
    """
    try:
        body: Any = response.json()
    except (ValueError, requests.exceptions.RequestException):
        return None
    if not isinstance(body, dict):
        return None
    error = body.get("error")
    if isinstance(error, dict) and isinstance(error.get("message"), str):
        return error["message"]
    return None


class ChatClient:
    """Single-attempt streaming client for one configured endpoint."""

    def __init__(self, config: ChatConfig, session: requests.Session | None = None) -> None:
        self.config = config
        self.session = session or requests.Session()

    def build_request(self, messages: Sequence[Message]) -> ChatRequest:
        return ChatRequest(
            model=self.config.endpoint_id,
            messages=list(messages),
            max_tokens=self.config.max_tokens,
            temperature=self.config.temperature,
            stream=True,
        )

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.config.api_key}",
        }

    def _send(self, messages: Sequence[Message]) -> requests.Response:
        body = self.build_request(messages).model_dump_json()
        logger.debug(
            "[ArkChat Stream] POST %s with %d messages.", self.config.url, len(messages)
        )
        try:
            return self.session.post(
                self.config.url,
                data=body.encode("utf-8"),
                headers=self._headers(),
                stream=True,
                timeout=self.config.http_timeout,
            )
        except requests.exceptions.Timeout as exc:
            raise RequestTimeoutError(f"failed to send request: {exc}") from exc
        except requests.exceptions.RequestException as exc:
            raise RequestError(f"failed to send request: {exc}") from exc

    def stream_reply(
        self,
        messages: Sequence[Message],
        on_first_delta: Callable[[], object] | None = None,
        on_delta: Callable[[str], object] | None = None,
    ) -> str:
        """Request a streamed completion of ``messages`` and return the full reply.

        Args:
            messages: The whole transcript, oldest first.
            on_first_delta: Called synchronously once, right before the first
                non-empty delta is emitted. Used to stop the thinking indicator.
            on_delta: Called with every non-empty delta as it arrives.

        Raises:
            TurnError: any subclass; see ``ark_chat.exceptions``.
        """
        response = self._send(messages)
        try:
            if response.status_code != requests.codes.ok:
                raise HTTPStatusError(response.status_code, _error_detail(response))

            parts: list[str] = []
            first_delta = True
            try:
                # Raw bytes: split at \r/\n only, never at U+2028/U+2029/U+0085.
                for chunk in iter_stream_chunks(response.iter_lines()):
                    if chunk.error is not None:
                        logger.warning(
                            "[ArkChat Stream] Server error chunk: code=%s message=%s",
                            chunk.error.code,
                            chunk.error.message,
                        )
                        code = None if chunk.error.code is None else str(chunk.error.code)
                        raise StreamError(code, chunk.error.message)

                    if chunk.finish_reason:
                        logger.debug("[ArkChat Stream] finish_reason=%s", chunk.finish_reason)

                    content = chunk.delta_content
                    if not content:
                        continue
                    if first_delta:
                        first_delta = False
                        if on_first_delta is not None:
                            on_first_delta()
                    parts.append(content)
                    if on_delta is not None:
                        on_delta(content)
            except (requests.exceptions.RequestException, OSError) as exc:
                raise StreamReadError(f"failed to read streamed response: {exc}") from exc
        finally:
            response.close()

        reply = "".join(parts)
        if not reply:
            raise EmptyAnswerError()
        return reply
