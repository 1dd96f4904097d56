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
"""Operand coercion shared by the in-memory and SQL paths.

Malformed operands raise :class:`OperandError`; the rule table turns that
into "no constraint" for the single offending filter.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from datetime import UTC, date, datetime, time
from decimal import Decimal, InvalidOperation
from typing import Any

from tablefly.data.filters.model import BooleanState, FilterCategory

_END_OF_DAY = time(23, 59, 59, 999000)

_TRUE_STRINGS = frozenset({"1", "true", "yes", "y"})
_FALSE_STRINGS = frozenset({"0", "false", "no", "n"})


class OperandError(ValueError):
    """A filter operand cannot be coerced to the shape its operator needs."""


def coerce_number(value: Any) -> int | float | Decimal:
    """Coerce a number or a numeric string (``,`` accepted as decimal point)."""
    if value is None or isinstance(value, bool):
        raise OperandError(f"expected a number, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise OperandError(f"expected a finite number, got {value!r}")
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise OperandError(f"expected a finite number, got {value!r}")
        return value
    text = str(value).strip().replace(",", ".")
    if not text:
        raise OperandError("expected a number, got an empty string")
    try:
        parsed = Decimal(text)
    except InvalidOperation as exc:
        raise OperandError(f"expected a number, got {value!r}") from exc
    if not parsed.is_finite():
        raise OperandError(f"expected a finite number, got {value!r}")
    if parsed == parsed.to_integral_value():
        return int(parsed)
    return float(parsed)


def coerce_numbers(values: Any) -> list[int | float | Decimal]:
    return [coerce_number(v) for v in as_list(values)]


def as_decimal(value: Any) -> Decimal | None:
    """Normalize a cell value for exact numeric comparison; ``None`` if not numeric."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return None
        return Decimal(str(value))
    try:
        return Decimal(str(coerce_number(value)))
    except OperandError:
        return None


def coerce_datetime(value: Any) -> datetime:
    """Coerce to a naive UTC datetime.

    Accepts datetimes (aware values are converted to UTC), dates (start of
    day) and ISO-8601 strings, including a trailing ``Z``.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        return datetime.combine(value, time.min)
    else:
        text = str(value or "").strip()
        if not text:
            raise OperandError("expected a date, got an empty value")
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError as exc:
            raise OperandError(f"expected an ISO date, got {value!r}") from exc
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(UTC).replace(tzinfo=None)
    return parsed


def as_datetime(value: Any) -> datetime | date | None:
    """Normalize a cell value for date comparison.

    Date-only cells stay ``date`` so they compare at day granularity.
    """
    if value is None:
        return None
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    try:
        return coerce_datetime(value)
    except OperandError:
        return None


def day_bounds(value: Any) -> tuple[datetime, datetime]:
    """``[00:00:00.000, 23:59:59.999]`` of the calendar day of *value*."""
    day = coerce_datetime(value).date()
    return datetime.combine(day, time.min), datetime.combine(day, _END_OF_DAY)


def as_bool(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    if value is None:
        return None
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    text = str(value).strip().lower()
    if text in _TRUE_STRINGS:
        return True
    if text in _FALSE_STRINGS:
        return False
    return None


def boolean_states(value: Any) -> set[BooleanState]:
    """Parse the selected states of a multi-state boolean filter."""
    states: set[BooleanState] = set()
    for item in as_list(value):
        if item is None:
            states.add(BooleanState.NULL)
            continue
        flag = item if isinstance(item, bool) else None
        text = str(item).strip().lower()
        if flag is True or text == BooleanState.TRUE:
            states.add(BooleanState.TRUE)
        elif flag is False or text == BooleanState.FALSE:
            states.add(BooleanState.FALSE)
        elif text in (BooleanState.NULL, "undefined", "none"):
            states.add(BooleanState.NULL)
        else:
            raise OperandError(f"unknown boolean state {item!r}")
    return states


def coerce_progress(value: Any) -> int | float | Decimal:
    """Coerce a 0-1 progress fraction.

    Values above 1 are percentage-scaled input that should have been divided
    by 100 before reaching the engine.
    """
    number = coerce_number(value)
    if number < 0 or number > 1:
        raise OperandError(f"progress must be a 0-1 fraction, got {value!r} (percentage-scaled?)")
    return number


def percent_to_fraction(percent: Any) -> float:
    """Convert a UI percentage (0-100) to the 0-1 fraction the engine expects."""
    return float(coerce_number(percent)) / 100


def coerce_text(value: Any) -> str:
    if value is None:
        raise OperandError("expected text, got None")
    return value if isinstance(value, str) else str(value)


def as_list(value: Any) -> list[Any]:
    """Wrap scalars in a list; ``None`` becomes an empty list."""
    if value is None:
        return []
    if isinstance(value, (list, tuple, set, frozenset)):
        return list(value)
    return [value]


def badge_label(value: Any) -> str:
    """Label of a badge given as a string or a ``{label, variant}`` mapping."""
    if isinstance(value, str):
        return value
    if isinstance(value, Mapping) and "label" in value:
        return str(value["label"])
    return str(value)


def badge_labels(cell: Any) -> list[str]:
    """Labels of a cell holding one badge or an array of badges."""
    if cell is None:
        return []
    items: Iterable[Any] = cell if isinstance(cell, (list, tuple)) else [cell]
    return [badge_label(item) for item in items if item is not None]


def reference_id(cell: Any, id_key: str = "id") -> Any:
    """Identifier of a reference cell, independent of how it is displayed."""
    if isinstance(cell, Mapping):
        return cell.get(id_key)
    return cell


def stringify(value: Any) -> str:
    """Text used by global search; ``None`` is the empty string."""
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.isoformat(sep=" ")
    return str(value)


def sort_value(category: FilterCategory, cell: Any, id_key: str = "id") -> Any:
    """Normalize a cell for in-memory ordering; ``None`` sorts as the smallest value."""
    if cell is None:
        return None
    if category in (FilterCategory.NUMBER, FilterCategory.PROGRESS):
        return as_decimal(cell)
    if category in (FilterCategory.DATE, FilterCategory.DATE_RANGE):
        value = as_datetime(cell)
        if isinstance(value, date) and not isinstance(value, datetime):
            return datetime.combine(value, time.min)
        return value
    if category == FilterCategory.BOOLEAN:
        return as_bool(cell)
    if category == FilterCategory.REFERENCE:
        return reference_id(cell, id_key)
    if category == FilterCategory.BADGE:
        labels = badge_labels(cell)
        return labels[0] if labels else None
    return str(cell)
