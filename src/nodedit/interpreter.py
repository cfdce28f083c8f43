"""Command interpreter: the read-eval-print loop.

One command is in flight at a time: read a line, parse verb + rest,
apply it to the store (or write back), redisplay if the handler asks for
it, prompt again unless closed.
"""

from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from nodedit.render import render_help, render_state, render_usage
from nodedit.storage import select_all
from nodedit.store import BadCategoryError, MissingProjectError, NoMatchError, StoreError
from nodedit.writeback import PersistenceError, write_back

if TYPE_CHECKING:
    from nodedit.storage import Storage
    from nodedit.store import RecordStore
    from nodedit.terminal import Terminal

logger = logging.getLogger(__name__)

PROMPT = "> "

_COMMAND_RE = re.compile(r"^([a-z]+)(?:\s+(.*))?$", re.DOTALL)


@dataclass
class Command:
    verb: str
    args: str | None = None


def parse_command(line: str) -> Command | None:
    """Split a trimmed line into verb and the verbatim rest.

    Returns None if the line does not start with a lowercase verb.
    """
    m = _COMMAND_RE.match(line)
    if not m:
        return None
    return Command(verb=m.group(1), args=m.group(2))


class State(Enum):
    ACTIVE = "active"
    CLOSED = "closed"


Handler = Callable[[Command], Awaitable[bool]]


class Interpreter:
    """Drives the store from operator commands."""

    def __init__(self, store: RecordStore, storage: Storage, terminal: Terminal) -> None:
        self.store = store
        self.storage = storage
        self.terminal = terminal
        self.state = State.ACTIVE
        self._handlers: dict[str, Handler] = {
            "list": self._list,
            "clear": self._clear,
            "add": self._add,
            "rm": self._rm,
            "toggle": self._toggle,
            "write": self._write,
            "help": self._help,
            "quit": self._quit,
        }

    @property
    def closed(self) -> bool:
        return self.state is State.CLOSED

    # ── Lifecycle ─────────────────────────────────────────────

    async def start(self) -> None:
        """Load the table, show it, then run the loop until closed."""
        self.terminal.write_line(render_usage(self.storage.table))
        rows = await self.storage.query(select_all(self.storage.table))
        self.store.load(rows)
        self.print_state()
        await self.run()

    async def run(self) -> None:
        try:
            while not self.closed:
                line = await self.terminal.prompt(PROMPT)
                if line is None:
                    # End of input: same as quit.
                    self.terminal.write_line()
                    await self.close()
                    break
                await self.handle_line(line)
        except asyncio.CancelledError:
            # Ctrl-C at the prompt.
            self.terminal.write_line()
            await self.close()
            raise

    async def close(self) -> None:
        if self.closed:
            return
        self.state = State.CLOSED
        self.terminal.close()
        await self.storage.close()
        logger.info("Session closed")

    async def _abort(self) -> None:
        """Best-effort close on the way to a fatal exit."""
        try:
            await self.close()
        except Exception:
            logger.warning("Could not close storage cleanly", exc_info=True)

    # ── Dispatch ──────────────────────────────────────────────

    async def handle_line(self, raw: str) -> None:
        line = raw.strip()
        if not line:
            return

        command = parse_command(line)
        handler = None
        if command is not None:
            verb = self.store.schema.resolve_verb(command.verb)
            handler = self._handlers.get(verb)

        if handler is None:
            self.terminal.write_line("Unknown command.")
            return

        if await handler(command):
            self.terminal.write_line()
            self.print_state()

    def print_state(self) -> None:
        self.store.sort_and_renumber()
        self.terminal.write(render_state(self.store))

    # ── Handlers (return True to redisplay) ──────────────────

    async def _list(self, command: Command) -> bool:
        return True

    async def _clear(self, command: Command) -> bool:
        self.store.clear()
        return True

    async def _add(self, command: Command) -> bool:
        args = (command.args or "").split()
        project = args[0] if len(args) > 0 else None
        category = args[1] if len(args) > 1 else None
        host = args[2] if len(args) > 2 else None
        try:
            self.store.add(project, category, host)
        except (BadCategoryError, MissingProjectError) as e:
            self.terminal.write_line(str(e))
            return False
        return True

    async def _rm(self, command: Command) -> bool:
        try:
            self.store.remove(command.args)
        except StoreError as e:
            self.terminal.write_line(str(e))
            return False
        return True

    async def _toggle(self, command: Command) -> bool:
        try:
            self.store.toggle(command.args)
        except NoMatchError:
            return False
        return True

    async def _write(self, command: Command) -> bool:
        try:
            await write_back(self.store, self.storage)
        except PersistenceError as e:
            logger.error("Write-back failed after %d rows", e.inserted)
            self.terminal.write_line(str(e), style="red")
            await self._abort()
            raise
        self.terminal.write_line("Table successfully updated.", style="green")
        return True

    async def _help(self, command: Command) -> bool:
        self.terminal.write(render_help(self.store.schema))
        return False

    async def _quit(self, command: Command) -> bool:
        await self.close()
        return False
