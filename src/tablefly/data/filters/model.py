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
"""Filter value model: categories, canonical operators, filters and filter state.

Every category has exactly one operator vocabulary. Older payloads that use
the long-form names (``notEquals``, ``greaterThan``, ``dateBetween`` ...) are
mapped onto the canonical enum by :func:`resolve_operator`; the vocabulary is
never duplicated.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class FilterCategory(StrEnum):
    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    DATE_RANGE = "dateRange"
    BOOLEAN = "boolean"
    SELECT = "select"
    BADGE = "badge"
    PROGRESS = "progress"
    REFERENCE = "reference"


class LogicOperator(StrEnum):
    """How enabled filters are combined with each other."""

    AND = "AND"
    OR = "OR"


class TextOperator(StrEnum):
    CONTAINS = "contains"
    EQUALS = "equals"
    STARTS_WITH = "startsWith"
    ENDS_WITH = "endsWith"
    NOT_CONTAINS = "notContains"
    REGEX = "regex"


class NumberOperator(StrEnum):
    EQ = "eq"
    NE = "ne"
    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"
    BETWEEN = "between"
    IN = "in"
    NOT_IN = "notIn"


class DateOperator(StrEnum):
    EQUALS = "equals"
    BEFORE = "before"
    AFTER = "after"
    ON_OR_BEFORE = "onOrBefore"
    ON_OR_AFTER = "onOrAfter"
    BETWEEN = "between"


class DateRangeOperator(StrEnum):
    BETWEEN = "between"


class BooleanOperator(StrEnum):
    IS_TRUE = "isTrue"
    IS_FALSE = "isFalse"
    ANY_OF = "anyOf"


class SelectOperator(StrEnum):
    """Selected-set membership, shared by select, badge and reference columns."""

    IN = "in"
    NOT_IN = "notIn"


class ProgressOperator(StrEnum):
    EQ = "eq"
    NE = "ne"
    GT = "gt"
    LT = "lt"
    BETWEEN = "between"


class NullOperator(StrEnum):
    """Accepted by every category."""

    IS_EMPTY = "isEmpty"
    IS_NOT_EMPTY = "isNotEmpty"


class BooleanState(StrEnum):
    """Cell states a multi-state boolean filter can select."""

    TRUE = "true"
    FALSE = "false"
    NULL = "null"


OPERATORS: dict[FilterCategory, type[StrEnum]] = {
    FilterCategory.TEXT: TextOperator,
    FilterCategory.NUMBER: NumberOperator,
    FilterCategory.DATE: DateOperator,
    FilterCategory.DATE_RANGE: DateRangeOperator,
    FilterCategory.BOOLEAN: BooleanOperator,
    FilterCategory.SELECT: SelectOperator,
    FilterCategory.BADGE: SelectOperator,
    FilterCategory.PROGRESS: ProgressOperator,
    FilterCategory.REFERENCE: SelectOperator,
}

_NUMERIC_ALIASES = {
    "equals": "eq",
    "notEquals": "ne",
    "greaterThan": "gt",
    "greaterThanOrEqual": "gte",
    "lessThan": "lt",
    "lessThanOrEqual": "lte",
}

_NULL_OPERATORS = frozenset(op.value for op in NullOperator)

_ALIASES: dict[FilterCategory, dict[str, str]] = {
    FilterCategory.NUMBER: _NUMERIC_ALIASES,
    FilterCategory.PROGRESS: _NUMERIC_ALIASES,
    FilterCategory.DATE: {"dateEquals": "equals", "dateBetween": "between"},
    FilterCategory.DATE_RANGE: {"dateBetween": "between"},
}


def resolve_operator(category: FilterCategory, operator: str) -> StrEnum | None:
    """Return the canonical operator for *category*, or ``None`` if unrecognized."""
    name = _ALIASES.get(category, {}).get(operator, operator)
    if name in _NULL_OPERATORS:
        return NullOperator(name)
    try:
        return OPERATORS[category](name)
    except ValueError:
        return None


@dataclass(frozen=True)
class Filter:
    """A single column predicate.

    ``value2`` is the upper bound for range operators. Disabled filters stay
    in the state but never take part in evaluation.
    """

    column_id: str
    category: FilterCategory
    operator: str
    value: Any = None
    value2: Any = None
    enabled: bool = True
    case_sensitive: bool = False

    @property
    def canonical_operator(self) -> StrEnum | None:
        return resolve_operator(self.category, self.operator)


@dataclass(frozen=True)
class FilterState:
    """Complete, composable description of a table's active filters."""

    filters: tuple[Filter, ...] = field(default_factory=tuple)
    logic_operator: LogicOperator = LogicOperator.AND
    global_search: str | None = None

    def enabled_filters(self) -> list[Filter]:
        return [f for f in self.filters if f.enabled]

    @property
    def search_term(self) -> str | None:
        """The global search term, or ``None`` when absent or blank."""
        if self.global_search is None:
            return None
        return self.global_search if self.global_search.strip() else None

    @property
    def is_unconstrained(self) -> bool:
        return not self.enabled_filters() and self.search_term is None
