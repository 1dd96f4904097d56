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
"""Comparison primitives emitting SQLAlchemy boolean clauses.

Operands are coerced to the Python type of the mapped column, so a date
filter against a ``Date`` column compares calendar days and a reference
filter against a ``Uuid`` column binds real UUIDs. Selected values that
cannot be converted to the column type can never match a stored cell and
are dropped from the membership set.
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import ColumnElement, and_, false, func, not_, or_
from sqlalchemy.orm import InstrumentedAttribute

from tablefly.data.filters.model import BooleanState
from tablefly.data.filters.operands import OperandError, as_bool, badge_label, coerce_datetime, coerce_number
from tablefly.data.filters.rules import Comparison, TextMode, ValueKind
from tablefly.data.schema import ColumnDefinition

Clause = ColumnElement[bool]

_MISSING = object()


def escape_like(term: str) -> str:
    """Escape ``LIKE`` wildcards so *term* matches literally (escape char ``\\``)."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def python_type(attr: InstrumentedAttribute[Any]) -> type | None:
    try:
        return attr.type.python_type
    except NotImplementedError:
        return None


def _bind_number(py: type | None, value: Any) -> Any:
    if py is Decimal:
        return Decimal(str(value))
    if isinstance(value, Decimal):
        return float(value)
    return value


def _member_value(py: type | None, value: Any, kind: ValueKind) -> Any:
    """Convert a selected value to the column type, or ``_MISSING``."""
    if kind == ValueKind.BADGE:
        value = badge_label(value)
    try:
        if py is None:
            return value
        if py is bool:
            flag = as_bool(value)
            return _MISSING if flag is None else flag
        if py is uuid.UUID:
            return value if isinstance(value, uuid.UUID) else uuid.UUID(str(value))
        if py in (int, float, Decimal):
            return _bind_number(py, coerce_number(value))
        if py is datetime:
            return coerce_datetime(value)
        if py is date:
            return coerce_datetime(value).date()
        if py is str:
            return str(value)
    except (OperandError, ValueError):
        return _MISSING
    return value


class SqlAlchemyComparisons:
    """:class:`~tablefly.data.filters.rules.ComparisonPort` for a mapped model."""

    name = "sqlalchemy"

    def __init__(self, model: type[Any]) -> None:
        self._model = model

    def attribute(self, column: ColumnDefinition) -> InstrumentedAttribute[Any]:
        return getattr(self._model, column.key)

    def compare(self, column: ColumnDefinition, op: Comparison, operand: Any, kind: ValueKind) -> Clause:
        attr = self.attribute(column)
        py = python_type(attr)
        if kind == ValueKind.DATETIME:
            if py is date and isinstance(operand, datetime):
                operand = operand.date()
        else:
            operand = _bind_number(py, operand)

        if op == Comparison.EQ:
            return attr == operand
        if op == Comparison.NE:
            return attr != operand
        if op == Comparison.GT:
            return attr > operand
        if op == Comparison.GTE:
            return attr >= operand
        if op == Comparison.LT:
            return attr < operand
        return attr <= operand

    def member_of(
        self, column: ColumnDefinition, values: Sequence[Any], kind: ValueKind, *, negate: bool = False
    ) -> Clause:
        attr = self.attribute(column)
        py = python_type(attr)
        bound = [v for v in (_member_value(py, value, kind) for value in values) if v is not _MISSING]
        if not bound:
            return attr.is_not(None) if negate else false()
        return attr.not_in(bound) if negate else attr.in_(bound)

    def text_match(
        self, column: ColumnDefinition, mode: TextMode, term: str, *, case_sensitive: bool, negate: bool = False
    ) -> Clause:
        expr = self.attribute(column)
        if mode == TextMode.EQUALS:
            clause = expr == term if case_sensitive else func.lower(expr) == term.lower()
        else:
            escaped = escape_like(term)
            if mode == TextMode.STARTS_WITH:
                pattern = f"{escaped}%"
            elif mode == TextMode.ENDS_WITH:
                pattern = f"%{escaped}"
            else:
                pattern = f"%{escaped}%"
            if case_sensitive:
                clause = expr.like(pattern, escape="\\")
            else:
                clause = expr.ilike(pattern, escape="\\")
        return not_(clause) if negate else clause

    def boolean_is(self, column: ColumnDefinition, state: BooleanState) -> Clause:
        attr = self.attribute(column)
        if state == BooleanState.NULL:
            return attr.is_(None)
        return attr.is_(state == BooleanState.TRUE)

    def is_null(self, column: ColumnDefinition, *, negate: bool = False) -> Clause:
        attr = self.attribute(column)
        return attr.is_not(None) if negate else attr.is_(None)

    def search(self, column: ColumnDefinition, term: str) -> Clause:
        return self.attribute(column).ilike(f"%{escape_like(term)}%", escape="\\")

    def all_of(self, conditions: Sequence[Clause]) -> Clause:
        return and_(*conditions)

    def any_of(self, conditions: Sequence[Clause]) -> Clause:
        return or_(*conditions)
