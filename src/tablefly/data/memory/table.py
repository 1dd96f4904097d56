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
"""Client-mode page fetch over a materialized row snapshot."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Generic, TypeVar

import structlog

from tablefly.config.properties.engine import EngineProperties
from tablefly.data.filters.model import FilterState
from tablefly.data.memory.evaluator import PredicateEvaluator
from tablefly.data.memory.specification import RowSpecification
from tablefly.data.page import Page
from tablefly.data.pageable import Sort
from tablefly.data.planner import SortPlanner
from tablefly.data.schema import TableSchema

logger = structlog.get_logger(__name__)

T = TypeVar("T")


def scope_to_tenant(tenant_id: Any, tenant_column: str = "organization_id") -> RowSpecification[Any]:
    """Rows owned by *tenant_id*; the in-memory form of the tenant predicate."""

    def owned(row: Any) -> bool:
        value = row.get(tenant_column) if isinstance(row, Mapping) else getattr(row, tenant_column, None)
        return value is not None and value == tenant_id

    return RowSpecification(owned)


class InMemoryTable(Generic[T]):
    """A snapshot of rows served with the same semantics as the SQL path.

    Args:
        rows: Rows already materialized for one session.
        schema: Known columns of the table.
        properties: Engine configuration; defaults apply when omitted.
        tenant_id: When given, the snapshot is pre-filtered to this tenant.
    """

    def __init__(
        self,
        rows: Iterable[T],
        schema: TableSchema,
        properties: EngineProperties | None = None,
        *,
        tenant_id: Any = None,
    ) -> None:
        self._properties = properties or EngineProperties()
        self._evaluator = PredicateEvaluator(schema)
        self._planner = SortPlanner(schema, self._properties)
        snapshot = list(rows)
        if tenant_id is not None:
            snapshot = scope_to_tenant(tenant_id, self._properties.tenant_column).to_predicate(object, snapshot)
        self._rows: list[T] = snapshot

    def __len__(self) -> int:
        return len(self._rows)

    def fetch_page(
        self,
        state: FilterState,
        sort: Sort | None = None,
        *,
        page: int = 1,
        page_size: int | None = None,
        searchable_columns: Sequence[str] | None = None,
    ) -> Page[T]:
        """Filter, sort and slice the snapshot into one page."""
        plan = self._planner.plan(sort, self._planner.page_request(page, page_size))
        matched = self._evaluator.filter_rows(self._rows, state, searchable_columns)
        ordered = self._planner.sort_rows(matched, plan.keys)
        start, stop = plan.slice_bounds()
        logger.debug("memory_page_fetched", total=len(matched), page=plan.page, size=plan.size)
        return Page(items=ordered[start:stop], total=len(matched), page=plan.page, size=plan.size)
