"""
ark-chat: an interactive terminal client for multi-turn conversations with a
Volcengine Ark (Doubao) chat-completions endpoint.

Replies stream to the terminal as they arrive while a "thinking" indicator runs
on its own thread until the first piece of text shows up. The conversation
transcript is kept in memory and sent as context with every request.
"""

from .animation import ThinkingAnimation
from .config import ChatConfig
from .controller import TurnController, TurnOutcome, TurnState
from .exceptions import (
    ArkChatError,
    ConfigurationError,
    EmptyAnswerError,
    HTTPStatusError,
    RequestError,
    RequestTimeoutError,
    StreamError,
    StreamReadError,
    TurnError,
)
from .models import Message, StreamChunk
from .streaming import ChatClient, iter_stream_chunks
from .transcript import Transcript

__all__ = [
    "ArkChatError",
    "ChatClient",
    "ChatConfig",
    "ConfigurationError",
    "EmptyAnswerError",
    "HTTPStatusError",
    "Message",
    "RequestError",
    "RequestTimeoutError",
    "StreamChunk",
    "StreamError",
    "StreamReadError",
    "ThinkingAnimation",
    "Transcript",
    "TurnController",
    "TurnError",
    "TurnOutcome",
    "TurnState",
    "iter_stream_chunks",
]
