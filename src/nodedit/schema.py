"""Record schema: ordered field list plus the category table.

Two presets exist. `base` is the plain node table (id/type/host/flags);
`system` is the wider table with folder/server/group/comment columns,
the extra `process` category and the short verb aliases.
"""

from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_ARGS = "--config.override=local"


@dataclass(frozen=True)
class Category:
    """One entry of the category enum."""

    name: str
    value: str  # what is written into the category column
    default_host: str
    applies_when_omitted: bool = True


@dataclass(frozen=True)
class Schema:
    """Column names and category rules for one table layout."""

    name: str
    fields: tuple[str, ...]
    id_field: str
    category_field: str
    host_field: str
    args_field: str
    categories: tuple[Category, ...]
    aliases: dict[str, str] = field(default_factory=dict)
    default_args: str = DEFAULT_ARGS

    @property
    def titles(self) -> tuple[str, ...]:
        return tuple(f.capitalize() for f in self.fields)

    def category(self, name: str) -> Category | None:
        """Look up a category by name. `projects` is accepted for `project`."""
        if name == "projects":
            name = "project"
        for cat in self.categories:
            if cat.name == name:
                return cat
        return None

    def implied_categories(self, name: str | None) -> list[Category]:
        if name is None:
            return [c for c in self.categories if c.applies_when_omitted]
        cat = self.category(name)
        return [cat] if cat else []

    def resolve_verb(self, verb: str) -> str:
        return self.aliases.get(verb, verb)


BASE = Schema(
    name="base",
    fields=("id", "active", "type", "project", "host", "count", "flags"),
    id_field="id",
    category_field="type",
    host_field="host",
    args_field="flags",
    categories=(
        Category("admin", "admin", "virt1"),
        Category("project", "project", "virt2"),
    ),
)

SYSTEM = Schema(
    name="system",
    fields=("auto", "active", "folder", "project", "server", "group", "args", "count", "comment"),
    id_field="auto",
    category_field="folder",
    host_field="server",
    args_field="args",
    categories=(
        Category("admin", "admin", "virt1"),
        Category("project", "projects", "virt2"),
        Category("process", "process", "virt2", applies_when_omitted=False),
    ),
    aliases={"l": "list", "w": "write", "t": "toggle", "q": "quit"},
)

SCHEMAS = {s.name: s for s in (BASE, SYSTEM)}


def get_schema(name: str) -> Schema:
    try:
        return SCHEMAS[name]
    except KeyError:
        raise ValueError(
            f"Unknown schema '{name}'. Available: {sorted(SCHEMAS)}"
        ) from None
