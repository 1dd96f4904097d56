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
"""Predicate evaluator: FilterState semantics over in-memory rows."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any, TypeVar

from tablefly.data.filters.model import FilterState
from tablefly.data.filters.rules import FilterCompiler
from tablefly.data.memory.comparisons import InMemoryComparisons, RowPredicate
from tablefly.data.memory.specification import RowSpecification
from tablefly.data.schema import TableSchema

T = TypeVar("T")


def _match_all(row: Any) -> bool:
    return True


class PredicateEvaluator:
    """Compile filter states into row predicates for one table.

    Compile once with :meth:`predicate` and apply the result to every row;
    :meth:`evaluate_row` recompiles on each call.
    """

    def __init__(self, schema: TableSchema) -> None:
        self._schema = schema
        self._compiler: FilterCompiler[RowPredicate] = FilterCompiler(InMemoryComparisons(), schema)

    @property
    def schema(self) -> TableSchema:
        return self._schema

    def predicate(self, state: FilterState, searchable_columns: Sequence[str] | None = None) -> RowPredicate:
        condition = self._compiler.compile_state(state, searchable_columns)
        return _match_all if condition is None else condition

    def specification(
        self, state: FilterState, searchable_columns: Sequence[str] | None = None
    ) -> RowSpecification[Any]:
        return RowSpecification(self.predicate(state, searchable_columns))

    def evaluate_row(self, row: Any, state: FilterState, searchable_columns: Sequence[str] | None = None) -> bool:
        return self.predicate(state, searchable_columns)(row)

    def filter_rows(
        self, rows: Iterable[T], state: FilterState, searchable_columns: Sequence[str] | None = None
    ) -> list[T]:
        matches = self.predicate(state, searchable_columns)
        return [row for row in rows if matches(row)]


def evaluate_row(
    row: Any,
    filter_state: FilterState,
    searchable_columns: Sequence[str] | None,
    schema: TableSchema,
) -> bool:
    """Return whether *row* satisfies *filter_state*.

    Global search (OR across *searchable_columns*) is always ANDed with the
    combined filters, whatever the logic operator.
    """
    return PredicateEvaluator(schema).evaluate_row(row, filter_state, searchable_columns)
