"""Tests for the line terminal."""

import asyncio
import io
import os

import pytest
from rich.console import Console
from rich.text import Text

from nodedit.terminal import Terminal


def make(stdin: str = ""):
    out = io.StringIO()
    console = Console(file=out, force_terminal=False, highlight=False, width=200)
    return Terminal(stdin=io.StringIO(stdin), console=console), out


class TestTerminal:
    def test_write_and_write_line(self):
        term, out = make()
        term.write("a")
        term.write_line("b")
        term.write_line()
        assert out.getvalue() == "ab\n\n"

    def test_markup_not_interpreted(self):
        term, out = make()
        term.write_line("add %PROJECT [%TYPE [%HOST]] [bold]x[/bold]")
        assert out.getvalue() == "add %PROJECT [%TYPE [%HOST]] [bold]x[/bold]\n"

    def test_styled_text_plain_output(self):
        term, out = make()
        term.write(Text("Id  ", style="bold"))
        assert out.getvalue() == "Id  "

    @pytest.mark.asyncio
    async def test_prompt_reads_trimmed_lines(self):
        term, out = make("  list  \nquit\n")
        assert await term.prompt("> ") == "list"
        assert await term.prompt("> ") == "quit"
        assert await term.prompt("> ") is None
        assert out.getvalue() == "> > > "

    @pytest.mark.asyncio
    async def test_prompt_after_close(self):
        term, _ = make("list\n")
        term.close()
        assert await term.prompt() is None

    @pytest.mark.asyncio
    async def test_cancelled_prompt_does_not_block_shutdown(self):
        read_fd, write_fd = os.pipe()
        stdin = os.fdopen(read_fd)
        term, _ = make()
        term._stdin = stdin

        task = asyncio.create_task(term.prompt())
        await asyncio.sleep(0.05)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        # stdin stays open: the reader is a daemon thread, not an executor
        # job that asyncio.run would wait for.
        assert term._reader.daemon

        term.close()
        os.close(write_fd)
        term._reader.join(timeout=2)
        assert not term._reader.is_alive()
        stdin.close()
