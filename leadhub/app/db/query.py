"""Builders for parameterized UPDATE and WHERE clauses.

Both follow the same accumulate-then-join pattern: each piece appends a SQL
fragment and its bound value, and the final statement is assembled once.
Column names come from an allow-list, never from request data.
"""

import json
from typing import Any, Iterable, Mapping, Optional

from leadhub.app.core.time import timestamp


class UpdateBuilder:
    """Ordered ``column = :column`` accumulation for partial updates.

    Only fields explicitly supplied are set; ``updated_at`` is always appended
    last with a server timestamp.
    """

    def __init__(self, table: str, allowed_columns: Iterable[str], touch_updated_at: bool = True):
        self.table = table
        self.allowed_columns = tuple(allowed_columns)
        self.touch_updated_at = touch_updated_at
        self._values: dict[str, Any] = {}

    def set(self, column: str, value: Any) -> "UpdateBuilder":
        if column not in self.allowed_columns:
            raise KeyError(f"Column {column!r} is not updatable on {self.table}")
        self._values[column] = value
        return self

    def set_many(self, changes: Mapping[str, Any]) -> "UpdateBuilder":
        for column, value in changes.items():
            if column in self.allowed_columns:
                self.set(column, value)
        return self

    @property
    def columns(self) -> list[str]:
        return list(self._values)

    def build(self, row_id: int) -> tuple[str, dict]:
        fragments = [f"{column} = :{column}" for column in self._values]
        params = dict(self._values)
        if self.touch_updated_at:
            fragments.append("updated_at = :updated_at")
            params["updated_at"] = timestamp()
        params["row_id"] = row_id
        sql = f"UPDATE {self.table} SET {', '.join(fragments)} WHERE id = :row_id"
        return sql, params


class FilterBuilder:
    """AND-joined WHERE fragments with named parameters."""

    def __init__(self):
        self.fragments: list[str] = []
        self.params: dict[str, Any] = {}

    def add(self, fragment: str, **params: Any) -> "FilterBuilder":
        self.fragments.append(fragment)
        self.params.update(params)
        return self

    def where_clause(self) -> str:
        if not self.fragments:
            return "1=1"
        return " AND ".join(self.fragments)


def tag_pattern(tag: str) -> str:
    """LIKE pattern matching one whole tag inside a JSON-encoded list.

    The tag is JSON-encoded the same way stored tags are, so quotes and
    backslashes match their stored form. The surrounding quotes keep ``vip``
    from matching ``vipp``.
    """
    encoded = json.dumps(tag, ensure_ascii=False)
    escaped = encoded.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def client_filters(
    alias: str = "c",
    search: Optional[str] = None,
    status: Optional[str] = None,
    source: Optional[str] = None,
    tag: Optional[str] = None,
    business_id: Optional[int] = None,
) -> FilterBuilder:
    """Predicate set shared by the client list, its COUNT, and the CSV export."""
    prefix = f"{alias}." if alias else ""
    filters = FilterBuilder()
    if search:
        filters.add(
            f"({prefix}full_name LIKE :search OR {prefix}email LIKE :search OR {prefix}phone LIKE :search)",
            search=f"%{search}%",
        )
    if status:
        filters.add(f"{prefix}status = :status", status=status)
    if source:
        filters.add(f"{prefix}source = :source", source=source)
    if tag:
        filters.add(f"{prefix}tags LIKE :tag ESCAPE '\\'", tag=tag_pattern(tag))
    if business_id is not None:
        filters.add(f"{prefix}business_id = :business_id", business_id=business_id)
    return filters
