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
"""Tests for the filter value model and operator resolution."""

from __future__ import annotations

import pytest

from tablefly.data.filters.model import (
    BooleanOperator,
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
    resolve_operator,
)


class TestResolveOperator:
    @pytest.mark.parametrize(
        ("category", "raw", "expected"),
        [
            (FilterCategory.NUMBER, "notEquals", NumberOperator.NE),
            (FilterCategory.NUMBER, "greaterThan", NumberOperator.GT),
            (FilterCategory.NUMBER, "greaterThanOrEqual", NumberOperator.GTE),
            (FilterCategory.NUMBER, "lessThanOrEqual", NumberOperator.LTE),
            (FilterCategory.PROGRESS, "lessThan", ProgressOperator.LT),
            (FilterCategory.DATE, "dateBetween", DateOperator.BETWEEN),
            (FilterCategory.DATE, "dateEquals", DateOperator.EQUALS),
            (FilterCategory.DATE_RANGE, "dateBetween", DateRangeOperator.BETWEEN),
        ],
    )
    def test_legacy_aliases_resolve_to_canonical(self, category, raw, expected):
        assert resolve_operator(category, raw) is expected

    def test_canonical_names(self):
        assert resolve_operator(FilterCategory.TEXT, "startsWith") is TextOperator.STARTS_WITH
        assert resolve_operator(FilterCategory.BOOLEAN, "anyOf") is BooleanOperator.ANY_OF
        assert resolve_operator(FilterCategory.BADGE, "in") is SelectOperator.IN
        assert resolve_operator(FilterCategory.REFERENCE, "notIn") is SelectOperator.NOT_IN

    def test_null_operators_exist_for_every_category(self):
        for category in FilterCategory:
            assert resolve_operator(category, "isEmpty") is NullOperator.IS_EMPTY
            assert resolve_operator(category, "isNotEmpty") is NullOperator.IS_NOT_EMPTY

    def test_unknown_operator(self):
        assert resolve_operator(FilterCategory.TEXT, "soundsLike") is None
        assert resolve_operator(FilterCategory.PROGRESS, "gte") is None
        assert resolve_operator(FilterCategory.BOOLEAN, "equals") is None

    def test_aliases_do_not_leak_across_categories(self):
        assert resolve_operator(FilterCategory.TEXT, "greaterThan") is None


class TestFilterState:
    def test_defaults_are_unconstrained(self):
        state = FilterState()
        assert state.logic_operator is LogicOperator.AND
        assert state.is_unconstrained

    def test_disabled_filters_are_skipped(self):
        on = Filter("name", FilterCategory.TEXT, "contains", "ann")
        off = Filter("name", FilterCategory.TEXT, "contains", "bob", enabled=False)
        state = FilterState(filters=(on, off))
        assert state.enabled_filters() == [on]
        assert not state.is_unconstrained

    def test_blank_search_is_absent_and_terms_are_kept_as_given(self):
        assert FilterState(global_search="   ").search_term is None
        assert FilterState(global_search="  ann ").search_term == "  ann "
        assert FilterState(global_search="   ").is_unconstrained

    def test_canonical_operator_property(self):
        flt = Filter("salary", FilterCategory.NUMBER, "greaterThan", 10)
        assert flt.canonical_operator is NumberOperator.GT
