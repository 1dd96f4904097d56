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
"""Tests for operand coercion shared by both evaluation paths."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest

from tablefly.data.filters.model import BooleanState, FilterCategory
from tablefly.data.filters.operands import (
    OperandError,
    as_bool,
    as_datetime,
    as_decimal,
    badge_labels,
    boolean_states,
    coerce_datetime,
    coerce_number,
    coerce_progress,
    day_bounds,
    percent_to_fraction,
    reference_id,
    sort_value,
    stringify,
)


class TestNumbers:
    def test_numeric_strings(self):
        assert coerce_number("42") == 42
        assert coerce_number(" 3,5 ") == 3.5
        assert coerce_number("1e3") == 1000
        assert isinstance(coerce_number("7.0"), int)

    @pytest.mark.parametrize("bad", [None, True, "", "abc", float("nan"), float("inf"), "Infinity"])
    def test_rejects_non_numbers(self, bad):
        with pytest.raises(OperandError):
            coerce_number(bad)

    def test_as_decimal_normalizes_cells(self):
        assert as_decimal(85000.0) == Decimal("85000")
        assert as_decimal("12.5") == Decimal("12.5")
        assert as_decimal(None) is None
        assert as_decimal(False) is None
        assert as_decimal("n/a") is None


class TestDates:
    def test_iso_with_zulu_becomes_naive_utc(self):
        assert coerce_datetime("2026-02-26T10:00:00Z") == datetime(2026, 2, 26, 10, 0)

    def test_offset_is_converted_to_utc(self):
        assert coerce_datetime("2026-02-26T10:00:00+02:00") == datetime(2026, 2, 26, 8, 0)

    def test_date_becomes_midnight(self):
        assert coerce_datetime(date(2026, 2, 26)) == datetime(2026, 2, 26)

    def test_invalid_date(self):
        with pytest.raises(OperandError):
            coerce_datetime("yesterday")
        with pytest.raises(OperandError):
            coerce_datetime(None)

    def test_day_bounds(self):
        start, end = day_bounds("2026-02-26T15:30:00")
        assert start == datetime(2026, 2, 26, 0, 0, 0)
        assert end == datetime(2026, 2, 26, 23, 59, 59, 999000)

    def test_as_datetime_keeps_date_cells(self):
        assert as_datetime(date(2021, 3, 15)) == date(2021, 3, 15)
        assert as_datetime("garbage") is None


class TestBooleans:
    def test_as_bool(self):
        assert as_bool(True) is True
        assert as_bool("yes") is True
        assert as_bool(0) is False
        assert as_bool(None) is None
        assert as_bool("maybe") is None

    def test_boolean_states(self):
        assert boolean_states(["true", None]) == {BooleanState.TRUE, BooleanState.NULL}
        assert boolean_states([False, "undefined"]) == {BooleanState.FALSE, BooleanState.NULL}
        assert boolean_states(None) == set()

    def test_unknown_boolean_state(self):
        with pytest.raises(OperandError):
            boolean_states(["sometimes"])


class TestProgress:
    def test_fraction_accepted(self):
        assert coerce_progress("0.25") == 0.25
        assert coerce_progress(1) == 1

    def test_percentage_scaled_rejected(self):
        with pytest.raises(OperandError, match="percentage"):
            coerce_progress(50)

    def test_percent_to_fraction(self):
        assert percent_to_fraction(50) == 0.5
        assert percent_to_fraction("12.5") == 0.125


class TestCells:
    def test_badge_labels(self):
        assert badge_labels("Senior") == ["Senior"]
        assert badge_labels({"label": "Lead", "variant": "info"}) == ["Lead"]
        assert badge_labels(["Junior", {"label": "Remote"}, None]) == ["Junior", "Remote"]
        assert badge_labels(None) == []

    def test_reference_id(self):
        assert reference_id({"id": 7, "name": "Ann"}) == 7
        assert reference_id({"code": "X1"}, id_key="code") == "X1"
        assert reference_id(7) == 7

    def test_stringify(self):
        assert stringify(None) == ""
        assert stringify(datetime(2026, 2, 26, 9, 15)) == "2026-02-26 09:15:00"
        assert stringify(3) == "3"

    def test_sort_value(self):
        assert sort_value(FilterCategory.NUMBER, "10") == Decimal(10)
        assert sort_value(FilterCategory.DATE, date(2021, 3, 15)) == datetime(2021, 3, 15)
        assert sort_value(FilterCategory.BADGE, [{"label": "Lead"}]) == "Lead"
        assert sort_value(FilterCategory.TEXT, None) is None
