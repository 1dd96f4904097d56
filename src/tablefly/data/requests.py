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
"""Request payload models for page queries and row mutations.

Payloads arrive as JSON with camelCase keys::

    {
        "filters": [
            {"columnId": "salary", "category": "number", "operator": "between",
             "value": 40000, "value2": 90000},
            {"columnId": "department", "category": "select", "operator": "in",
             "value": ["Engineering", "Sales"]}
        ],
        "logicOperator": "AND",
        "globalSearch": "ann",
        "sorting": [{"id": "hired_on", "desc": true}],
        "page": 1,
        "pageSize": 25
    }

``valueTo`` is accepted as an alias of ``value2``.

Structural problems (wrong types, ``page < 1``, an unknown logic operator)
raise :class:`ValidationException`. A filter with an unknown category is
dropped with a ``filter_ignored`` warning, like any other filter the engine
cannot apply.
"""

from __future__ import annotations

from typing import Any

import structlog
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from tablefly.data.filters.model import Filter, FilterCategory, FilterState, LogicOperator
from tablefly.data.pageable import Order, Sort
from tablefly.validation.helpers import validate_model

logger = structlog.get_logger(__name__)


class _Payload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class FilterPayload(_Payload):
    column_id: str = Field(alias="columnId", min_length=1)
    category: str
    operator: str
    value: Any = None
    value2: Any = Field(default=None, validation_alias=AliasChoices("value2", "valueTo"))
    values: list[Any] | None = None
    enabled: bool = True
    case_sensitive: bool = Field(default=False, alias="caseSensitive")

    def to_filter(self) -> Filter | None:
        try:
            category = FilterCategory(self.category)
        except ValueError:
            logger.warning(
                "filter_ignored",
                column=self.column_id,
                category=self.category,
                operator=self.operator,
                reason="unknown category",
            )
            return None
        # Older payloads carry multi-value selections in "values".
        value = self.values if self.value is None and self.values is not None else self.value
        return Filter(
            column_id=self.column_id,
            category=category,
            operator=self.operator,
            value=value,
            value2=self.value2,
            enabled=self.enabled,
            case_sensitive=self.case_sensitive,
        )


class SortPayload(_Payload):
    column_id: str = Field(validation_alias=AliasChoices("id", "columnId", "column_id"), min_length=1)
    descending: bool = Field(default=False, validation_alias=AliasChoices("desc", "descending"))

    def to_order(self) -> Order:
        return Order.desc(self.column_id) if self.descending else Order.asc(self.column_id)


class QueryRequest(_Payload):
    """Filter state, sort and page request for one page fetch."""

    filters: list[FilterPayload] = Field(default_factory=list)
    logic_operator: LogicOperator = Field(default=LogicOperator.AND, alias="logicOperator")
    global_search: str | None = Field(default=None, alias="globalSearch")
    sorting: list[SortPayload] = Field(default_factory=list, validation_alias=AliasChoices("sorting", "sort"))
    page: int = Field(default=1, ge=1)
    page_size: int | None = Field(default=None, alias="pageSize")
    searchable_columns: list[str] | None = Field(default=None, alias="searchableColumns")

    @field_validator("logic_operator", mode="before")
    @classmethod
    def _upper(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value

    def to_filter_state(self) -> FilterState:
        filters = tuple(f for f in (p.to_filter() for p in self.filters) if f is not None)
        return FilterState(filters=filters, logic_operator=self.logic_operator, global_search=self.global_search)

    def to_sort(self) -> Sort:
        return Sort(orders=tuple(s.to_order() for s in self.sorting))


class CreateRequest(_Payload):
    data: dict[str, Any]


class MutationRequest(_Payload):
    """Partial row update guarded by the version the caller last saw."""

    patch: dict[str, Any] = Field(validation_alias=AliasChoices("patch", "data"))
    expected_version: int = Field(validation_alias=AliasChoices("expectedVersion", "expected_version", "version"), ge=1)


def parse_query(data: Any) -> QueryRequest:
    return validate_model(QueryRequest, data)


def parse_create(data: Any) -> CreateRequest:
    return validate_model(CreateRequest, data)


def parse_mutation(data: Any) -> MutationRequest:
    return validate_model(MutationRequest, data)
