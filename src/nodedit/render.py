"""Text rendering of the record set and the help screen."""

from __future__ import annotations

from typing import Any

from rich.text import Text

from nodedit.schema import Schema
from nodedit.store import RecordStore

DELIMITER = "  "
EMPTY_PLACEHOLDER = "  --- EMPTY ---"

NEW_STYLE = "green"
CHANGED_STYLE = "yellow"

HELP_TEXT = """\
  Commands:
    {list} -- print lines
    add %PROJECT [%TYPE [%HOST]] -- add lines
    rm %ID|%PROJECT -- remove lines by ID or by project name
    {toggle} %ID|%PROJECT -- toggle the active flag by ID or by project name
    clear -- clear up all lines
    {write} -- write changes into database
    help -- print this help
    {quit} -- exit without saving
"""


def _cell(value: Any) -> str:
    return "" if value is None else str(value)


def column_widths(store: RecordStore) -> list[int]:
    fields = store.schema.fields
    widths = [len(f) for f in fields]
    for record in store:
        for i, name in enumerate(fields):
            widths[i] = max(widths[i], len(_cell(record.get(name))))
    return widths


def render_state(store: RecordStore) -> Text:
    """Render the header plus one line per record.

    Cells are left-justified to the widest value of their column and each
    is followed by two spaces. New rows are green, changed rows yellow,
    the project column is bold.
    """
    schema = store.schema
    widths = column_widths(store)
    out = Text()

    for title, width in zip(schema.titles, widths):
        out.append(title.ljust(width), style="bold")
        out.append(DELIMITER)
    out.append("\n")

    if not len(store):
        out.append(EMPTY_PLACEHOLDER + "\n")
        return out

    for record in store:
        if record.new:
            row_style = NEW_STYLE
        elif record.changed:
            row_style = CHANGED_STYLE
        else:
            row_style = ""

        for name, width in zip(schema.fields, widths):
            style = row_style
            if name == "project":
                style = f"{row_style} bold".strip()
            out.append(_cell(record.get(name)).ljust(width), style=style or None)
            out.append(DELIMITER)
        out.append("\n")

    return out


def _verb_label(schema: Schema, verb: str) -> str:
    short = [alias for alias, target in schema.aliases.items() if target == verb]
    return "|".join([*short, verb])


def render_help(schema: Schema) -> str:
    return HELP_TEXT.format(
        **{verb: _verb_label(schema, verb) for verb in ("list", "toggle", "write", "quit")}
    )


def render_usage(table: str) -> str:
    verbs = ",".join(["list", "add", "rm", "toggle", "clear", "write", "help", "quit"])
    return f"MySQL `{table}` editor.\n  Usage: {{{verbs}}}\n"
