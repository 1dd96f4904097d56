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
"""Sort/paginate planner.

Normalizes a :class:`Sort` and a page request into a :class:`QueryPlan`
that either backend can execute: the SQLAlchemy repository turns it into
``ORDER BY ... OFFSET ... LIMIT``, :meth:`SortPlanner.sort_rows` and
:meth:`QueryPlan.slice_bounds` do the same over a list.

Both paths use the same ordering: the requested keys, or the configured
fallback column when none survive normalization, followed by the id
column as a final ascending tiebreaker. Nulls order as the smallest value.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, TypeVar

import structlog

from tablefly.config.properties.engine import EngineProperties
from tablefly.data.filters.operands import sort_value
from tablefly.data.pageable import Pageable, Sort
from tablefly.data.schema import ColumnDefinition, TableSchema

logger = structlog.get_logger(__name__)

R = TypeVar("R")


@dataclass(frozen=True)
class SortKey:
    """A sort order resolved against the schema."""

    column: ColumnDefinition
    descending: bool = False


@dataclass(frozen=True)
class QueryPlan:
    """Resolved ordering plus the page window."""

    keys: tuple[SortKey, ...]
    pageable: Pageable

    @property
    def offset(self) -> int:
        return self.pageable.offset

    @property
    def limit(self) -> int:
        return self.pageable.size

    @property
    def page(self) -> int:
        return self.pageable.page

    @property
    def size(self) -> int:
        return self.pageable.size

    def slice_bounds(self) -> tuple[int, int]:
        return self.offset, self.offset + self.limit


class SortPlanner:
    """Build deterministic query plans for one table."""

    def __init__(self, schema: TableSchema, properties: EngineProperties | None = None) -> None:
        self._schema = schema
        self._properties = properties or EngineProperties()

    def page_request(self, page: int = 1, size: int | None = None) -> Pageable:
        """Build a :class:`Pageable`, clamping the size to ``max_page_size``.

        Raises:
            ValidationException: If *page* is lower than 1.
        """
        requested = self._properties.default_page_size if size is None else size
        return Pageable.clamped(page, requested, self._properties.max_page_size)

    def resolve(self, sort: Sort | None) -> tuple[SortKey, ...]:
        """Resolve requested orders, dropping unknown and unsortable columns."""
        keys: list[SortKey] = []
        seen: set[str] = set()
        for order in (sort or Sort()).orders:
            column = self._schema.get(order.property)
            if column is None or not column.sortable:
                logger.warning(
                    "sort_column_ignored",
                    table=self._schema.name,
                    column=order.property,
                    reason="unknown column" if column is None else "column is not sortable",
                )
                continue
            if column.name in seen:
                continue
            seen.add(column.name)
            keys.append(SortKey(column, order.descending))

        if not keys:
            fallback = self._schema.get(self._properties.default_sort_column)
            if fallback is not None:
                seen.add(fallback.name)
                keys.append(SortKey(fallback, self._properties.default_sort_descending))

        tiebreaker = self._schema.get(self._properties.id_column)
        if tiebreaker is not None and tiebreaker.name not in seen:
            keys.append(SortKey(tiebreaker, False))
        return tuple(keys)

    def plan(self, sort: Sort | None, pageable: Pageable) -> QueryPlan:
        return QueryPlan(keys=self.resolve(sort), pageable=pageable)

    @staticmethod
    def sort_rows(rows: Iterable[R], keys: Iterable[SortKey]) -> list[R]:
        """Stable multi-key sort of *rows*; the first key has the highest precedence."""
        ordered = list(rows)
        # Successive stable sorts, least significant key first.
        for key in reversed(list(keys)):
            ordered.sort(key=lambda row, k=key: _null_first(_cell_sort_value(k.column, row)), reverse=key.descending)
        return ordered


def _cell_sort_value(column: ColumnDefinition, row: Any) -> Any:
    return sort_value(column.category, column.read(row), column.reference_id_key)


def _null_first(value: Any) -> tuple[Any, ...]:
    return (0,) if value is None else (1, value)
