"""
Terminal "thinking" indicator that runs on its own thread for one turn.

The indicator redraws a single line with carriage returns until ``stop()`` is
called. ``stop()`` is a rendezvous: it returns only after the worker has cleared
the line, written the bare label and acknowledged, so nothing printed afterwards
can interleave with an animation frame. Repeated ``stop()`` calls are no-ops.
"""

from __future__ import annotations

import logging
import sys
import threading
from typing import TextIO

import click

logger = logging.getLogger("ark_chat.animation")

DEFAULT_LABEL = "Doubao: "
DEFAULT_CAPTION = "thinking"
DEFAULT_FRAMES = (".", "..", "...", "....")
DEFAULT_INTERVAL_SECONDS = 0.5
DEFAULT_ACK_TIMEOUT_SECONDS = 5.0
THREAD_NAME = "ark-chat-thinking"


class ThinkingAnimation:
    def __init__(
        self,
        stream: TextIO | None = None,
        label: str = DEFAULT_LABEL,
        caption: str = DEFAULT_CAPTION,
        frames: tuple[str, ...] = DEFAULT_FRAMES,
        interval: float = DEFAULT_INTERVAL_SECONDS,
        ack_timeout: float = DEFAULT_ACK_TIMEOUT_SECONDS,
    ) -> None:
        if not frames:
            raise ValueError("frames must not be empty")
        if interval <= 0:
            raise ValueError("interval must be > 0")
        self.stream = stream
        self.label = label
        self.caption = caption
        self.frames = frames
        self.interval = interval
        self.ack_timeout = ack_timeout
        self._frame_width = max(len(frame) for frame in frames)
        self._stop_requested = threading.Event()
        self._acknowledged = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and not self._acknowledged.is_set()

    @property
    def stopped(self) -> bool:
        return self._acknowledged.is_set()

    def start(self) -> None:
        if self._thread is not None:
            raise RuntimeError("ThinkingAnimation can only be started once")
        self._thread = threading.Thread(target=self._run, name=THREAD_NAME, daemon=True)
        self._thread.start()

    def stop(self, timeout: float | None = None) -> bool:
        """Request a stop and wait for the worker to acknowledge it.

        Returns True once the indicator has been replaced by the bare label, or
        immediately when it was never started or is already stopped. Returns
        False if no acknowledgement arrived within ``timeout`` seconds.
        """
        if self._thread is None:
            return True
        self._stop_requested.set()
        wait_for = self.ack_timeout if timeout is None else timeout
        if not self._acknowledged.wait(wait_for):
            logger.warning(
                "[ArkChat Animation] Indicator did not acknowledge stop within %.1fs.", wait_for
            )
            return False
        self._thread.join(wait_for)
        return True

    def _write(self, text: str) -> None:
        click.echo(text, file=self.stream or sys.stdout, nl=False)

    def _frame_text(self, index: int) -> str:
        frame = self.frames[index % len(self.frames)].ljust(self._frame_width)
        return f"\r{self.label}{self.caption}{frame}"

    def _clear_text(self) -> str:
        blank = " " * (len(self.label) + len(self.caption) + self._frame_width)
        return f"\r{blank}\r{self.label}"

    def _run(self) -> None:
        try:
            self._write("\n")
            index = 0
            while not self._stop_requested.is_set():
                self._write(self._frame_text(index))
                index += 1
                self._stop_requested.wait(self.interval)
            self._write(self._clear_text())
        except Exception:
            logger.warning("[ArkChat Animation] Indicator thread failed.", exc_info=True)
        finally:
            self._acknowledged.set()
