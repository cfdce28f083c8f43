"""In-memory record set, the only source of truth during a session.

Storage is read once at startup (`load`) and overwritten wholesale by the
write-back action. Everything in between happens here, synchronously,
without touching the terminal or the database.
"""

from __future__ import annotations

import locale
import logging
import re
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from nodedit.schema import Schema

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """A command could not be applied; the record set is unchanged."""


class BadCategoryError(StoreError):
    pass


class MissingProjectError(StoreError):
    pass


class MissingArgumentError(StoreError):
    pass


class NoMatchError(StoreError):
    pass


@dataclass
class Record:
    """One row of the node table plus its session-only markers."""

    values: dict[str, Any]
    new: bool = False
    changed: bool = False

    def get(self, name: str, default: Any = None) -> Any:
        return self.values.get(name, default)

    def to_row(self) -> dict[str, Any]:
        """Column values as they go to storage, without `new`/`changed`."""
        return dict(self.values)


def _collate_key(value: Any) -> str:
    return locale.strxfrm("" if value is None else str(value))


_NUMBER_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")


def _parse_id(token: str) -> int | float | None:
    """Numeric value of `token`, or None if it names a project.

    Any decimal literal counts as numeric (`3`, `3.0`, `+3`, `3e0`); a
    non-integral value stays numeric but matches no id.
    """
    if not _NUMBER_RE.match(token):
        return None
    value = float(token)
    return int(value) if value.is_integer() else value


@dataclass
class RecordStore:
    """Ordered collection of records for one schema."""

    schema: Schema
    records: list[Record] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[Record]:
        return iter(self.records)

    # ── Loading & ordering ───────────────────────────────────

    def load(self, rows: Iterable[Mapping[str, Any]]) -> None:
        """Replace the set with `rows` verbatim. Call `sort_and_renumber` after."""
        self.records = [Record(values=dict(row)) for row in rows]
        logger.debug("Loaded %d records", len(self.records))

    def sort_and_renumber(self) -> None:
        """Order by project, then category, and reassign ids 1..N.

        Two stable passes: category first, then project as the outer key.
        """
        cat = self.schema.category_field
        records = sorted(self.records, key=lambda r: _collate_key(r.get(cat)))
        records = sorted(records, key=lambda r: _collate_key(r.get("project")))
        for i, record in enumerate(records, start=1):
            record.values[self.schema.id_field] = i
        self.records = records

    def next_index(self) -> int:
        ids = [r.get(self.schema.id_field) for r in self.records]
        return max((i for i in ids if isinstance(i, int)), default=0) + 1

    def find(self, record_id: int | float) -> Record | None:
        for record in self.records:
            if record.get(self.schema.id_field) == record_id:
                return record
        return None

    # ── Mutations ────────────────────────────────────────────

    def add(
        self,
        project: str | None,
        category: str | None = None,
        host: str | None = None,
    ) -> list[Record]:
        """Append new records for `project`, one per implied category.

        Without a category every category marked `applies_when_omitted`
        gets a record. Ids are max+1 and stay unsorted until the next sort.
        """
        categories = self.schema.implied_categories(category)
        if not categories:
            names = ", ".join(c.name for c in self.schema.categories)
            raise BadCategoryError(f"Bad type. Expected one of: {names}.")
        if not project:
            raise MissingProjectError("Where project?")

        s = self.schema
        added = []
        for cat in categories:
            record = Record(
                values={
                    s.id_field: self.next_index(),
                    "active": "yes",
                    s.category_field: cat.value,
                    "project": project,
                    s.host_field: host or cat.default_host,
                    s.args_field: s.default_args,
                    "count": 1,
                },
                new=True,
            )
            self.records.append(record)
            added.append(record)

        logger.debug("Added %d record(s) for project %s", len(added), project)
        return added

    def remove(self, args: str | None) -> int:
        """Remove by id (first match) or by project name (all matches).

        `args` is a whitespace-separated token list. Returns the number of
        records removed; raises `NoMatchError` if nothing was removed.
        """
        tokens = (args or "").split()
        if not tokens:
            raise MissingArgumentError("Need argument.")

        before = len(self.records)
        for token in tokens:
            record_id = _parse_id(token)
            if record_id is not None:
                for i, record in enumerate(self.records):
                    if record.get(self.schema.id_field) == record_id:
                        del self.records[i]
                        break
            else:
                self.records = [r for r in self.records if r.get("project") != token]

        removed = before - len(self.records)
        if not removed:
            raise NoMatchError(f"Not matched lines for {args}.")
        logger.debug("Removed %d record(s) for %r", removed, args)
        return removed

    def toggle(self, token: str | None) -> int:
        """Flip `active` by id (one record) or by project name (all records)."""
        if not token:
            raise NoMatchError("Need argument.")

        record_id = _parse_id(token)
        if record_id is not None:
            record = self.find(record_id)
            matched = [record] if record is not None else []
        else:
            matched = [r for r in self.records if r.get("project") == token]

        if not matched:
            raise NoMatchError(f"Not matched lines for {token}.")

        for record in matched:
            record.values["active"] = "no" if record.get("active") == "yes" else "yes"
            record.changed = True
        logger.debug("Toggled %d record(s) for %r", len(matched), token)
        return len(matched)

    def clear(self) -> None:
        self.records = []

    def rows(self) -> list[dict[str, Any]]:
        return [r.to_row() for r in self.records]
