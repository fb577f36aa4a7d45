"""Tables and trees that summarise listed objects."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, MutableMapping

_RED = "\x1b[31m"
_RESET = "\x1b[0m"


@dataclass(frozen=True)
class Column:
    """A table column: its header and the kind of value it holds."""

    name: str
    type: str = "string"


@dataclass
class Table:
    """Column definitions and rows of cells."""

    columns: list[Column]
    rows: list[list[Any]] = field(default_factory=list)

    def add_row(self, *args: Any) -> list[Any]:
        """Append a row holding one cell for each column."""
        if len(args) != len(self.columns):
            raise ValueError(
                f"row has {len(args)} cells but the table has {len(self.columns)} columns"
            )
        row = list(args)
        self.rows.append(row)
        return row


def find_status_condition(
    conditions: Iterable[Mapping[str, Any]] | None, condition_type: str
) -> Mapping[str, Any] | None:
    """Return the condition of the given type, or None."""
    for condition in conditions or ():
        if condition.get("type") == condition_type:
            return condition
    return None


def sanitize_condition(condition: Mapping[str, Any] | None, colored: bool = True) -> str:
    """Describe a condition as "true", "false" or "unknown"; "false" is red when colored."""
    if condition is None:
        return "unknown"
    if condition.get("status") == "True":
        return "true"
    return f"{_RED}false{_RESET}" if colored else "false"


def add_fields(
    tree: MutableMapping[str, dict[str, Any]], name: str, fields: Mapping[str, Any]
) -> MutableMapping[str, dict[str, Any]]:
    """Merge fields, keyed by dotted path, into the tree node called name."""
    tree.setdefault(name, {}).update(fields)
    return tree