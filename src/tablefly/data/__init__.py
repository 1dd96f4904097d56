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
"""tablefly data: filter/query/sort engine and optimistic row mutation.

Framework-agnostic types (filter model, schema, paging, planner) are
exported directly. Adapters live in subpackages:

    - ``tablefly.data.memory`` evaluates filter states over row snapshots (client mode).
    - ``tablefly.data.relational.sqlalchemy`` translates them into SQL (server mode).

The SQLAlchemy-backed :class:`TableQueryService` is re-exported for convenience.
"""

from tablefly.data.filters import (
    BooleanState,
    Filter,
    FilterCategory,
    FilterCompiler,
    FilterState,
    LogicOperator,
    percent_to_fraction,
)
from tablefly.data.page import Page
from tablefly.data.pageable import Order, Pageable, Sort
from tablefly.data.planner import QueryPlan, SortKey, SortPlanner
from tablefly.data.requests import MutationRequest, QueryRequest, parse_mutation, parse_query
from tablefly.data.schema import ColumnDefinition, ReferenceDefinition, TableSchema
from tablefly.data.service import TableQueryService
from tablefly.data.specification import Specification

__all__ = [
    # Filter model
    "BooleanState",
    "Filter",
    "FilterCategory",
    "FilterCompiler",
    "FilterState",
    "LogicOperator",
    "percent_to_fraction",
    # Schema and paging
    "ColumnDefinition",
    "Order",
    "Page",
    "Pageable",
    "QueryPlan",
    "ReferenceDefinition",
    "Sort",
    "SortKey",
    "SortPlanner",
    "Specification",
    "TableSchema",
    # Requests and service
    "MutationRequest",
    "QueryRequest",
    "TableQueryService",
    "parse_mutation",
    "parse_query",
]
