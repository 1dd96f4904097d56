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
"""Comparison primitives over in-memory rows.

Conditions are plain ``row -> bool`` callables. Rows may be mappings or
attribute-style objects; cells are read through :meth:`ColumnDefinition.read`.
"""

from __future__ import annotations

import operator
from collections.abc import Callable, Sequence
from datetime import datetime
from decimal import Decimal
from typing import Any

from tablefly.data.filters.model import BooleanState
from tablefly.data.filters.operands import (
    as_bool,
    as_datetime,
    as_decimal,
    badge_label,
    badge_labels,
    reference_id,
    stringify,
)
from tablefly.data.filters.rules import Comparison, TextMode, ValueKind
from tablefly.data.schema import ColumnDefinition

RowPredicate = Callable[[Any], bool]

_OPERATORS: dict[Comparison, Callable[[Any, Any], bool]] = {
    Comparison.EQ: operator.eq,
    Comparison.NE: operator.ne,
    Comparison.GT: operator.gt,
    Comparison.GTE: operator.ge,
    Comparison.LT: operator.lt,
    Comparison.LTE: operator.le,
}


def _decimal(value: Any) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def _text_matches(text: str, mode: TextMode, term: str) -> bool:
    if mode == TextMode.EQUALS:
        return text == term
    if mode == TextMode.STARTS_WITH:
        return text.startswith(term)
    if mode == TextMode.ENDS_WITH:
        return text.endswith(term)
    return term in text


class InMemoryComparisons:
    """:class:`~tablefly.data.filters.rules.ComparisonPort` producing row predicates."""

    name = "memory"

    def compare(self, column: ColumnDefinition, op: Comparison, operand: Any, kind: ValueKind) -> RowPredicate:
        fn = _OPERATORS[op]

        if kind == ValueKind.DATETIME:

            def date_predicate(row: Any) -> bool:
                cell = as_datetime(column.read(row))
                if cell is None:
                    return False
                if isinstance(cell, datetime):
                    return fn(cell, operand)
                # Date-only cells compare at day granularity.
                return fn(cell, operand.date())

            return date_predicate

        target = _decimal(operand)

        def number_predicate(row: Any) -> bool:
            cell = as_decimal(column.read(row))
            return cell is not None and fn(cell, target)

        return number_predicate

    def member_of(
        self, column: ColumnDefinition, values: Sequence[Any], kind: ValueKind, *, negate: bool = False
    ) -> RowPredicate:
        if kind == ValueKind.NUMBER:
            numbers = {_decimal(v) for v in values}

            def number_keys(cell: Any) -> list[Any]:
                value = as_decimal(cell)
                return [] if value is None else [value]

            return self._membership(column, numbers, number_keys, negate)

        if kind == ValueKind.BADGE:
            labels = {badge_label(v) for v in values}
            return self._membership(column, labels, badge_labels, negate)

        targets = {str(v) for v in values}
        if kind == ValueKind.REFERENCE:
            id_key = column.reference_id_key

            def reference_keys(cell: Any) -> list[str]:
                ident = reference_id(cell, id_key)
                return [] if ident is None else [str(ident)]

            return self._membership(column, targets, reference_keys, negate)

        def select_keys(cell: Any) -> list[str]:
            items = cell if isinstance(cell, (list, tuple)) else [cell]
            return [str(item) for item in items if item is not None]

        return self._membership(column, targets, select_keys, negate)

    @staticmethod
    def _membership(
        column: ColumnDefinition, targets: set[Any], keys: Callable[[Any], list[Any]], negate: bool
    ) -> RowPredicate:
        def predicate(row: Any) -> bool:
            cell = column.read(row)
            if cell is None:
                return False
            hit = any(k in targets for k in keys(cell))
            return not hit if negate else hit

        return predicate

    def text_match(
        self, column: ColumnDefinition, mode: TextMode, term: str, *, case_sensitive: bool, negate: bool = False
    ) -> RowPredicate:
        needle = term if case_sensitive else term.lower()

        def predicate(row: Any) -> bool:
            cell = column.read(row)
            if cell is None:
                return False
            text = cell if isinstance(cell, str) else str(cell)
            hit = _text_matches(text if case_sensitive else text.lower(), mode, needle)
            return not hit if negate else hit

        return predicate

    def boolean_is(self, column: ColumnDefinition, state: BooleanState) -> RowPredicate:
        if state == BooleanState.NULL:
            return self.is_null(column)
        expected = state == BooleanState.TRUE

        def predicate(row: Any) -> bool:
            return as_bool(column.read(row)) is expected

        return predicate

    def is_null(self, column: ColumnDefinition, *, negate: bool = False) -> RowPredicate:
        def predicate(row: Any) -> bool:
            return (column.read(row) is None) != negate

        return predicate

    def search(self, column: ColumnDefinition, term: str) -> RowPredicate:
        needle = term.lower()

        def predicate(row: Any) -> bool:
            cell = column.read(row)
            return cell is not None and needle in stringify(cell).lower()

        return predicate

    def all_of(self, conditions: Sequence[RowPredicate]) -> RowPredicate:
        parts = tuple(conditions)
        return lambda row: all(c(row) for c in parts)

    def any_of(self, conditions: Sequence[RowPredicate]) -> RowPredicate:
        parts = tuple(conditions)
        return lambda row: any(c(row) for c in parts)
