"""nodedit: interactive editor for the `node` table.

Layout:
    schema.py       Field list + category table (base / system presets)
    store.py        In-memory record set and its mutations
    render.py       Table rendering
    terminal.py     Line input/output
    storage.py      Async SQL connection
    writeback.py    Truncate-then-reinsert persistence
    interpreter.py  Command loop
"""

__version__ = "0.1.0"
