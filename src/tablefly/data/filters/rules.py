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
"""The operator-to-predicate rule table.

Each ``(category, operator)`` pair maps to one rule. A rule only talks to a
:class:`ComparisonPort`, a handful of native comparison primitives, so the
same table drives both the in-memory evaluator and the SQL translator:

    evaluator  = FilterCompiler(InMemoryComparisons(schema), schema)
    translator = FilterCompiler(SqlAlchemyComparisons(Employee), schema)

Port contract: every primitive except :meth:`ComparisonPort.is_null` is
false for a null cell, negated primitives included. Neither path ever
negates a composite condition, so SQL three-valued logic and plain Python
booleans select the same rows.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from enum import StrEnum
from typing import Any, Generic, Protocol, TypeVar

import structlog

from tablefly.data.filters.model import (
    BooleanOperator,
    BooleanState,
    DateOperator,
    DateRangeOperator,
    Filter,
    FilterCategory,
    FilterState,
    LogicOperator,
    NullOperator,
    NumberOperator,
    ProgressOperator,
    SelectOperator,
    TextOperator,
)
from tablefly.data.filters.operands import (
    OperandError,
    as_list,
    boolean_states,
    coerce_datetime,
    coerce_number,
    coerce_numbers,
    coerce_progress,
    coerce_text,
    day_bounds,
)
from tablefly.data.schema import ColumnDefinition, TableSchema

logger = structlog.get_logger(__name__)

C = TypeVar("C")


class Comparison(StrEnum):
    EQ = "eq"
    NE = "ne"
    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"


class TextMode(StrEnum):
    CONTAINS = "contains"
    EQUALS = "equals"
    STARTS_WITH = "startsWith"
    ENDS_WITH = "endsWith"


class ValueKind(StrEnum):
    """How a backend should read a cell before comparing it."""

    NUMBER = "number"
    DATETIME = "datetime"
    SELECT = "select"
    BADGE = "badge"
    REFERENCE = "reference"


class ComparisonPort(Protocol[C]):
    """Native comparison primitives a backend provides to the rule table."""

    name: str

    def compare(self, column: ColumnDefinition, op: Comparison, operand: Any, kind: ValueKind) -> C: ...

    def member_of(
        self, column: ColumnDefinition, values: Sequence[Any], kind: ValueKind, *, negate: bool = False
    ) -> C: ...

    def text_match(
        self, column: ColumnDefinition, mode: TextMode, term: str, *, case_sensitive: bool, negate: bool = False
    ) -> C: ...

    def boolean_is(self, column: ColumnDefinition, state: BooleanState) -> C: ...

    def is_null(self, column: ColumnDefinition, *, negate: bool = False) -> C: ...

    def search(self, column: ColumnDefinition, term: str) -> C: ...

    def all_of(self, conditions: Sequence[C]) -> C: ...

    def any_of(self, conditions: Sequence[C]) -> C: ...


Rule = Callable[[ComparisonPort[Any], ColumnDefinition, Filter], Any]

_RULES: dict[tuple[FilterCategory, str], Rule] = {}


def rule(categories: Iterable[FilterCategory], *operators: StrEnum) -> Callable[[Rule], Rule]:
    """Register a rule for every ``(category, operator)`` combination given."""

    def decorator(fn: Rule) -> Rule:
        for category in categories:
            for operator in operators:
                _RULES[(category, operator.value)] = fn
        return fn

    return decorator


def registered_operators(category: FilterCategory) -> list[str]:
    """Operators the rule table implements for *category* (null checks excluded)."""
    return [op for (cat, op) in _RULES if cat == category]


# ---------------------------------------------------------------------------
# text
# ---------------------------------------------------------------------------

_TEXT_MODES = {
    TextOperator.CONTAINS: TextMode.CONTAINS,
    TextOperator.EQUALS: TextMode.EQUALS,
    TextOperator.STARTS_WITH: TextMode.STARTS_WITH,
    TextOperator.ENDS_WITH: TextMode.ENDS_WITH,
}


@rule([FilterCategory.TEXT], *_TEXT_MODES)
def _text(port: ComparisonPort[Any], column: ColumnDefinition, flt: Filter) -> Any:
    mode = _TEXT_MODES[TextOperator(flt.canonical_operator)]
    return port.text_match(column, mode, coerce_text(flt.value), case_sensitive=flt.case_sensitive)


@rule([FilterCategory.TEXT], TextOperator.NOT_CONTAINS)
def _text_not_contains(port: ComparisonPort[Any], column: ColumnDefinition, flt: Filter) -> Any:
    return port.text_match(
        column, TextMode.CONTAINS, coerce_text(flt.value), case_sensitive=flt.case_sensitive, negate=True
    )


@rule([FilterCategory.TEXT], TextOperator.REGEX)
def _text_regex(port: ComparisonPort[Any], column: ColumnDefinition, flt: Filter) -> Any:
    term = coerce_text(flt.value)
    logger.warning(
        "degraded_match",
        backend=port.name,
        column=column.name,
        operator=TextOperator.REGEX.value,
        fallback=TextOperator.CONTAINS.value,
        value=term,
    )
    return port.text_match(column, TextMode.CONTAINS, term, case_sensitive=flt.case_sensitive)


# ---------------------------------------------------------------------------
# number / progress
# ---------------------------------------------------------------------------

_COMPARISONS = {
    "eq": Comparison.EQ,
    "ne": Comparison.NE,
    "gt": Comparison.GT,
    "gte": Comparison.GTE,
    "lt": Comparison.LT,
    "lte": Comparison.LTE,
}


@rule(
    [FilterCategory.NUMBER],
    NumberOperator.EQ,
    NumberOperator.NE,
    NumberOperator.GT,
    NumberOperator.GTE,
    NumberOperator.LT,
    NumberOperator.LTE,
)
def _number_compare(port: ComparisonPort[Any], column: ColumnDefinition, flt: Filter) -> Any:
    op = _COMPARISONS[str(flt.canonical_operator)]
    return port.compare(column, op, coerce_number(flt.value), ValueKind.NUMBER)


@rule([FilterCategory.NUMBER], NumberOperator.BETWEEN)
def _number_between(port: ComparisonPort[Any], column: ColumnDefinition, flt: Filter) -> Any:
    if flt.value2 is None:
        return None
    low, high = coerce_number(flt.value), coerce_number(flt.value2)
    return port.all_of(
        [
            port.compare(column, Comparison.GTE, low, ValueKind.NUMBER),
            port.compare(column, Comparison.LTE, high, ValueKind.NUMBER),
        ]
    )


@rule([FilterCategory.NUMBER], NumberOperator.IN, NumberOperator.NOT_IN)
def _number_membership(port: ComparisonPort[Any], column: ColumnDefinition, flt: Filter) -> Any:
    values = coerce_numbers(flt.value)
    if not values:
        return None
    negate = flt.canonical_operator == NumberOperator.NOT_IN
    return port.member_of(column, values, ValueKind.NUMBER, negate=negate)


@rule(
    [FilterCategory.PROGRESS],
    ProgressOperator.EQ,
    ProgressOperator.NE,
    ProgressOperator.GT,
    ProgressOperator.LT,
)
def _progress_compare(port: ComparisonPort[Any], column: ColumnDefinition, flt: Filter) -> Any:
    op = _COMPARISONS[str(flt.canonical_operator)]
    return port.compare(column, op, coerce_progress(flt.value), ValueKind.NUMBER)


@rule([FilterCategory.PROGRESS], ProgressOperator.BETWEEN)
def _progress_between(port: ComparisonPort[Any], column: ColumnDefinition, flt: Filter) -> Any:
    if flt.value2 is None:
        return None
    low, high = coerce_progress(flt.value), coerce_progress(flt.value2)
    return port.all_of(
        [
            port.compare(column, Comparison.GTE, low, ValueKind.NUMBER),
            port.compare(column, Comparison.LTE, high, ValueKind.NUMBER),
        ]
    )


# ---------------------------------------------------------------------------
# date / dateRange
# ---------------------------------------------------------------------------

_DATE_COMPARISONS = {
    DateOperator.BEFORE: Comparison.LT,
    DateOperator.AFTER: Comparison.GT,
    DateOperator.ON_OR_BEFORE: Comparison.LTE,
    DateOperator.ON_OR_AFTER: Comparison.GTE,
}


def _within(port: ComparisonPort[Any], column: ColumnDefinition, start: Any, end: Any) -> Any:
    bounds = []
    if start is not None:
        bounds.append(port.compare(column, Comparison.GTE, start, ValueKind.DATETIME))
    if end is not None:
        bounds.append(port.compare(column, Comparison.LTE, end, ValueKind.DATETIME))
    if not bounds:
        return None
    return bounds[0] if len(bounds) == 1 else port.all_of(bounds)


@rule([FilterCategory.DATE], *_DATE_COMPARISONS)
def _date_compare(port: ComparisonPort[Any], column: ColumnDefinition, flt: Filter) -> Any:
    op = _DATE_COMPARISONS[DateOperator(flt.canonical_operator)]
    return port.compare(column, op, coerce_datetime(flt.value), ValueKind.DATETIME)


@rule([FilterCategory.DATE], DateOperator.EQUALS)
def _date_equals(port: ComparisonPort[Any], column: ColumnDefinition, flt: Filter) -> Any:
    start, end = day_bounds(flt.value)
    return _within(port, column, start, end)


@rule([FilterCategory.DATE], DateOperator.BETWEEN)
def _date_between(port: ComparisonPort[Any], column: ColumnDefinition, flt: Filter) -> Any:
    if flt.value2 is None:
        return None
    return _within(port, column, day_bounds(flt.value)[0], day_bounds(flt.value2)[1])


@rule([FilterCategory.DATE_RANGE], DateRangeOperator.BETWEEN)
def _date_range(port: ComparisonPort[Any], column: ColumnDefinition, flt: Filter) -> Any:
    start = day_bounds(flt.value)[0] if flt.value is not None else None
    end = day_bounds(flt.value2)[1] if flt.value2 is not None else None
    return _within(port, column, start, end)


# ---------------------------------------------------------------------------
# boolean
# ---------------------------------------------------------------------------


@rule([FilterCategory.BOOLEAN], BooleanOperator.IS_TRUE)
def _boolean_true(port: ComparisonPort[Any], column: ColumnDefinition, flt: Filter) -> Any:
    return port.boolean_is(column, BooleanState.TRUE)


@rule([FilterCategory.BOOLEAN], BooleanOperator.IS_FALSE)
def _boolean_false(port: ComparisonPort[Any], column: ColumnDefinition, flt: Filter) -> Any:
    return port.boolean_is(column, BooleanState.FALSE)


@rule([FilterCategory.BOOLEAN], BooleanOperator.ANY_OF)
def _boolean_any_of(port: ComparisonPort[Any], column: ColumnDefinition, flt: Filter) -> Any:
    states = boolean_states(flt.value)
    if not states:
        return None
    return port.any_of([port.boolean_is(column, state) for state in sorted(states)])


# ---------------------------------------------------------------------------
# select / badge / reference
# ---------------------------------------------------------------------------

_MEMBER_KINDS = {
    FilterCategory.SELECT: ValueKind.SELECT,
    FilterCategory.BADGE: ValueKind.BADGE,
    FilterCategory.REFERENCE: ValueKind.REFERENCE,
}


@rule(_MEMBER_KINDS, SelectOperator.IN, SelectOperator.NOT_IN)
def _membership(port: ComparisonPort[Any], column: ColumnDefinition, flt: Filter) -> Any:
    values = [v for v in as_list(flt.value) if v is not None]
    if not values:
        return None
    negate = flt.canonical_operator == SelectOperator.NOT_IN
    return port.member_of(column, values, _MEMBER_KINDS[flt.category], negate=negate)


# ---------------------------------------------------------------------------
# compilation
# ---------------------------------------------------------------------------


class FilterCompiler(Generic[C]):
    """Compile a :class:`FilterState` into one backend condition.

    ``None`` means "no constraint". A filter that cannot be compiled (unknown
    column, unknown operator, malformed operand) is logged and matches every
    row: under AND it drops out of the conjunction, under OR it leaves the
    filter part unconstrained. Global search still applies on top.
    """

    def __init__(self, port: ComparisonPort[C], schema: TableSchema) -> None:
        self._port = port
        self._schema = schema

    def compile_filter(self, flt: Filter) -> C | None:
        column = self._schema.get(flt.column_id)
        if column is None:
            self._ignored(flt, "unknown column")
            return None
        if not column.accepts(flt.category):
            self._ignored(flt, f"column category '{column.category}' does not accept '{flt.category}' filters")
            return None

        operator = flt.canonical_operator
        if operator is None:
            self._ignored(flt, "unknown operator")
            return None
        if isinstance(operator, NullOperator):
            return self._port.is_null(column, negate=operator == NullOperator.IS_NOT_EMPTY)

        fn = _RULES.get((flt.category, operator.value))
        if fn is None:
            self._ignored(flt, "operator not supported for category")
            return None
        try:
            return fn(self._port, column, flt)
        except OperandError as exc:
            self._ignored(flt, str(exc))
            return None

    def compile_state(self, state: FilterState, searchable_columns: Sequence[str] | None = None) -> C | None:
        """Combine enabled filters with the logic operator, then AND global search on."""
        compiled = [self.compile_filter(f) for f in state.enabled_filters()]
        conditions = [c for c in compiled if c is not None]

        combined: C | None = None
        if state.logic_operator == LogicOperator.OR:
            # One match-all branch makes the whole disjunction match-all.
            if conditions and len(conditions) == len(compiled):
                combined = self._port.any_of(conditions)
        elif conditions:
            combined = self._port.all_of(conditions)

        term = state.search_term
        if term is not None:
            columns = self._schema.resolve_searchable(searchable_columns)
            if not columns:
                logger.warning("global_search_ignored", table=self._schema.name, reason="no searchable columns")
            else:
                search = self._port.any_of([self._port.search(column, term) for column in columns])
                combined = search if combined is None else self._port.all_of([combined, search])

        return combined

    def _ignored(self, flt: Filter, reason: str) -> None:
        logger.warning(
            "filter_ignored",
            backend=self._port.name,
            table=self._schema.name,
            column=flt.column_id,
            category=str(flt.category),
            operator=flt.operator,
            reason=reason,
        )
