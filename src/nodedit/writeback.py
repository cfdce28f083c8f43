"""Write-back: replace the table contents with the in-memory set.

Not transactional. The truncate commits first, then rows are inserted one
by one in display order; the first failure stops the action and leaves
the table holding whatever prefix was inserted.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from nodedit.storage import insert_set, truncate

if TYPE_CHECKING:
    from nodedit.storage import Storage
    from nodedit.store import RecordStore

logger = logging.getLogger(__name__)


class PersistenceError(Exception):
    """Write-back failed part way. Fatal for the session."""

    def __init__(self, message: str, inserted: int) -> None:
        super().__init__(message)
        self.inserted = inserted


async def write_back(store: RecordStore, storage: Storage) -> int:
    """Sort, truncate, insert every record. Returns the number inserted."""
    store.sort_and_renumber()
    table = storage.table
    logger.info("Writing %d records to %s", len(store), table)

    try:
        await storage.query(truncate(table))
    except Exception as e:
        raise PersistenceError(f"Truncate of {table} failed: {e}", inserted=0) from e

    inserted = 0
    for record in store:
        row = record.to_row()
        try:
            await storage.query(insert_set(table, row), row)
        except Exception as e:
            raise PersistenceError(
                f"Insert of row {inserted + 1} into {table} failed: {e}",
                inserted=inserted,
            ) from e
        inserted += 1

    # Everything on disk now matches memory.
    for record in store:
        record.new = False
        record.changed = False

    logger.info("Wrote %d records to %s", inserted, table)
    return inserted
