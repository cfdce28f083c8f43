"""Line-oriented terminal: stdout via rich, stdin read on a daemon thread."""

from __future__ import annotations

import asyncio
import logging
import queue
import sys
import threading
from typing import IO

from rich.console import Console
from rich.text import Text

logger = logging.getLogger(__name__)

_STOP = None


def _resolve(future: asyncio.Future, line: str | None, error: BaseException | None) -> None:
    # A cancelled prompt leaves its future done; the line read for it is dropped.
    if future.done():
        return
    if error is not None:
        future.set_exception(error)
    else:
        future.set_result(line)


class Terminal:
    """Writes text (plain or styled) and reads one line at a time.

    Reads happen on a daemon thread that serves one request per prompt, so
    a cancelled prompt never holds up interpreter shutdown.
    """

    def __init__(self, stdin: IO[str] | None = None, console: Console | None = None) -> None:
        self._stdin = stdin or sys.stdin
        self.console = console or Console(highlight=False)
        self._closed = False
        self._requests: queue.Queue = queue.Queue()
        self._reader: threading.Thread | None = None

    def write(self, text: str | Text = "", style: str | None = None) -> None:
        self.console.print(text, style=style, end="", markup=False, soft_wrap=True)

    def write_line(self, text: str | Text = "", style: str | None = None) -> None:
        self.console.print(text, style=style, markup=False, soft_wrap=True)

    async def prompt(self, prompt_text: str = "> ") -> str | None:
        """Show `prompt_text` and wait for one line. None on end of input."""
        if self._closed:
            return None
        self.write(prompt_text)
        loop = asyncio.get_running_loop()
        future = loop.create_future()
        self._ensure_reader()
        self._requests.put((loop, future))
        return await future

    def _ensure_reader(self) -> None:
        if self._reader is None:
            self._reader = threading.Thread(
                target=self._read_loop, name="nodedit-stdin", daemon=True
            )
            self._reader.start()

    def _read_loop(self) -> None:
        while True:
            request = self._requests.get()
            if request is _STOP:
                return
            loop, future = request
            line, error = None, None
            try:
                line = self._read_input()
            except Exception as e:
                error = e
            try:
                loop.call_soon_threadsafe(_resolve, future, line, error)
            except RuntimeError:
                # Loop already closed.
                return

    def _read_input(self) -> str | None:
        line = self._stdin.readline()
        if not line:
            return None
        return line.rstrip("\n").strip()

    def close(self) -> None:
        self._closed = True
        self._requests.put(_STOP)
        logger.debug("Terminal closed")
