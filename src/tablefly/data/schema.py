# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Typed column registry for one table.

Filters, sort keys and search columns arrive as plain column ids; they are
resolved here against the known columns before anything touches a row or a
query. Reference columns carry their :class:`ReferenceDefinition` explicitly
instead of looking it up in a shared registry.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

import structlog

from tablefly.data.filters.model import FilterCategory

logger = structlog.get_logger(__name__)

# Filter categories a column of a given category can be filtered with.
_COMPATIBLE: dict[FilterCategory, frozenset[FilterCategory]] = {
    FilterCategory.TEXT: frozenset({FilterCategory.TEXT, FilterCategory.SELECT, FilterCategory.BADGE}),
    FilterCategory.NUMBER: frozenset({FilterCategory.NUMBER, FilterCategory.SELECT}),
    FilterCategory.DATE: frozenset({FilterCategory.DATE, FilterCategory.DATE_RANGE}),
    FilterCategory.DATE_RANGE: frozenset({FilterCategory.DATE, FilterCategory.DATE_RANGE}),
    FilterCategory.BOOLEAN: frozenset({FilterCategory.BOOLEAN}),
    FilterCategory.SELECT: frozenset({FilterCategory.SELECT, FilterCategory.TEXT}),
    FilterCategory.BADGE: frozenset({FilterCategory.BADGE, FilterCategory.SELECT}),
    FilterCategory.PROGRESS: frozenset({FilterCategory.PROGRESS, FilterCategory.NUMBER}),
    FilterCategory.REFERENCE: frozenset({FilterCategory.REFERENCE, FilterCategory.SELECT}),
}

# Column categories whose cells are matched as text.
_TEXT_CATEGORIES = frozenset({FilterCategory.TEXT, FilterCategory.SELECT, FilterCategory.BADGE})


@dataclass(frozen=True)
class ReferenceDefinition:
    """A reference-data source a foreign-key column points at."""

    name: str
    id_key: str = "id"
    label_key: str = "name"


@dataclass(frozen=True)
class ColumnDefinition:
    """One filterable/sortable column.

    Attributes:
        name: Column id used in filter, sort and search payloads.
        category: Value category of the cells.
        attribute: Row key / model attribute; defaults to ``name``.
        sortable: Whether user sort requests may use this column.
        searchable: Whether global search covers this column by default.
        reference: Reference-data source for ``reference`` columns.
    """

    name: str
    category: FilterCategory
    attribute: str | None = None
    sortable: bool = True
    searchable: bool = False
    reference: ReferenceDefinition | None = None

    @property
    def key(self) -> str:
        return self.attribute or self.name

    @property
    def reference_id_key(self) -> str:
        return self.reference.id_key if self.reference is not None else "id"

    @property
    def is_text(self) -> bool:
        return self.category in _TEXT_CATEGORIES

    def accepts(self, category: FilterCategory) -> bool:
        return category in _COMPATIBLE[self.category]

    def read(self, row: Any) -> Any:
        """Cell value of this column in a mapping row or an attribute-style row."""
        if isinstance(row, Mapping):
            return row.get(self.key)
        return getattr(row, self.key, None)


class TableSchema:
    """The known columns of one table, keyed by column id."""

    def __init__(self, name: str, columns: Iterable[ColumnDefinition]) -> None:
        self.name = name
        self._columns: dict[str, ColumnDefinition] = {}
        for column in columns:
            if column.name in self._columns:
                raise ValueError(f"Duplicate column '{column.name}' in table schema '{name}'")
            self._columns[column.name] = column

    def __contains__(self, name: object) -> bool:
        return name in self._columns

    def __iter__(self) -> Iterator[ColumnDefinition]:
        return iter(self._columns.values())

    def __len__(self) -> int:
        return len(self._columns)

    def get(self, name: str) -> ColumnDefinition | None:
        return self._columns.get(name)

    def default_searchable(self) -> list[str]:
        return [c.name for c in self._columns.values() if c.searchable]

    def resolve_searchable(self, names: Sequence[str] | None) -> list[ColumnDefinition]:
        """Resolve caller-supplied search columns; unknown and non-text ids are dropped."""
        resolved: list[ColumnDefinition] = []
        for name in self.default_searchable() if names is None else names:
            column = self._columns.get(name)
            if column is None:
                logger.warning("search_column_ignored", table=self.name, column=name, reason="unknown column")
                continue
            if not column.is_text:
                logger.warning("search_column_ignored", table=self.name, column=name, reason="not a text column")
                continue
            resolved.append(column)
        return resolved
