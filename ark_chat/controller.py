"""
Turn controller: one line of user input in, one reconciled transcript out.

Each conversational turn appends the user message provisionally, runs the
thinking indicator while the reply streams, and then either commits the
assistant message or rolls the user message back. The indicator is always
stopped (via its rendezvous) before anything else is printed.
"""

from __future__ import annotations

import enum
import logging
import sys
from typing import TYPE_CHECKING, TextIO

import click

from .animation import DEFAULT_LABEL, ThinkingAnimation
from .exceptions import TurnError
from .transcript import Transcript

if TYPE_CHECKING:
    from collections.abc import Callable

    from .streaming import ChatClient

logger = logging.getLogger("ark_chat.turn")

EXIT_COMMANDS = frozenset({"q", "quit"})
CLEAR_COMMAND = "clear"


class TurnState(enum.Enum):
    IDLE = "idle"
    AWAITING_INPUT = "awaiting_input"
    VALIDATING = "validating"
    REQUESTING = "requesting"
    RECONCILING = "reconciling"


class TurnOutcome(enum.Enum):
    EXIT = "exit"
    CLEARED = "cleared"
    EMPTY = "empty"
    COMPLETED = "completed"
    FAILED = "failed"


class TurnController:
    def __init__(
        self,
        client: ChatClient,
        transcript: Transcript | None = None,
        output: TextIO | None = None,
        label: str = DEFAULT_LABEL,
        animation_factory: Callable[[], ThinkingAnimation] | None = None,
    ) -> None:
        self.client = client
        self.transcript = transcript if transcript is not None else Transcript()
        self.output = output
        self.label = label
        self.animation_factory = animation_factory or self._default_animation
        self.state = TurnState.IDLE
        self.last_error: TurnError | None = None

    def _default_animation(self) -> ThinkingAnimation:
        return ThinkingAnimation(stream=self.output, label=self.label)

    def _echo(self, text: str, nl: bool = True) -> None:
        click.echo(text, file=self.output or sys.stdout, nl=nl)

    def _transition(self, state: TurnState) -> None:
        logger.debug("[ArkChat Turn] %s -> %s", self.state.value, state.value)
        self.state = state

    def handle(self, line: str) -> TurnOutcome:
        """Process one line of user input and return what happened."""
        self._transition(TurnState.AWAITING_INPUT)
        text = line.strip()

        if text in EXIT_COMMANDS:
            self._echo(f"\n{self.label}Thanks for chatting, goodbye!")
            self._transition(TurnState.IDLE)
            return TurnOutcome.EXIT

        if text == CLEAR_COMMAND:
            self.transcript.clear()
            self._echo(f"{self.label}All conversation context has been cleared!")
            self._transition(TurnState.IDLE)
            return TurnOutcome.CLEARED

        self._transition(TurnState.VALIDATING)
        if not text:
            self._echo(f"{self.label}The question cannot be empty, please try again!")
            self._transition(TurnState.IDLE)
            return TurnOutcome.EMPTY

        return self._converse(text)

    def _converse(self, text: str) -> TurnOutcome:
        self.last_error = None
        self.transcript.add("user", text)
        committed = False
        animation = self.animation_factory()
        self._transition(TurnState.REQUESTING)
        try:
            animation.start()
            try:
                reply = self.client.stream_reply(
                    self.transcript.messages,
                    on_first_delta=animation.stop,
                    on_delta=lambda delta: self._echo(delta, nl=False),
                )
            finally:
                animation.stop()
                self._transition(TurnState.RECONCILING)
        except TurnError as exc:
            self.last_error = exc
            logger.info("[ArkChat Turn] Turn failed: %s", exc)
            self._echo(f"[error] {exc}\n")
            return TurnOutcome.FAILED
        else:
            self.transcript.add("assistant", reply)
            committed = True
            self._echo("\n")
            return TurnOutcome.COMPLETED
        finally:
            if not committed:
                self.transcript.rollback_last()
            self._transition(TurnState.IDLE)

    def run(self, read_line: Callable[[], str]) -> int:
        """Read-evaluate loop. Returns the process exit code.

        ``read_line`` signals end of input by raising ``EOFError``.
        """
        while True:
            try:
                line = read_line()
            except (EOFError, KeyboardInterrupt):
                self._echo(f"\n{self.label}Thanks for chatting, goodbye!")
                return 0
            if self.handle(line) is TurnOutcome.EXIT:
                return 0
