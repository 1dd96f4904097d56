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
"""Query translator: FilterState semantics as a SQLAlchemy WHERE clause.

Construction order: one condition per enabled filter combined with the
logic operator, then the global-search OR-group ANDed on, then the tenant
predicate ANDed on last. The tenant predicate is outside the reach of the
logic operator.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Generic, TypeVar

from sqlalchemy import ColumnElement, and_

from tablefly.config.properties.engine import EngineProperties
from tablefly.data.filters.model import FilterState
from tablefly.data.filters.rules import FilterCompiler
from tablefly.data.relational.sqlalchemy.comparisons import SqlAlchemyComparisons, python_type
from tablefly.data.relational.sqlalchemy.specification import Specification
from tablefly.data.schema import TableSchema
from tablefly.kernel.exceptions import ValidationException

T = TypeVar("T")


class QueryTranslator(Generic[T]):
    """Translate filter states for one mapped model.

    Raises:
        ValueError: If a schema column or the tenant column is not mapped on
            *model*, or a text column is not mapped to a string type.
    """

    def __init__(self, model: type[T], schema: TableSchema, properties: EngineProperties | None = None) -> None:
        self._properties = properties or EngineProperties()
        missing = [c.key for c in schema if getattr(model, c.key, None) is None]
        if missing:
            raise ValueError(f"{model.__name__} does not map schema columns: {', '.join(missing)}")
        # The store's text cast of a non-string cell differs from str() in memory.
        untyped = [c.name for c in schema if c.is_text and python_type(getattr(model, c.key)) is not str]
        if untyped:
            raise ValueError(f"{model.__name__} maps text columns to non-string types: {', '.join(untyped)}")
        self._tenant_attr = getattr(model, self._properties.tenant_column, None)
        if self._tenant_attr is None:
            raise ValueError(f"{model.__name__} has no tenant column '{self._properties.tenant_column}'")
        self._model = model
        self._compiler: FilterCompiler[ColumnElement[bool]] = FilterCompiler(SqlAlchemyComparisons(model), schema)

    def translate(
        self,
        state: FilterState,
        searchable_columns: Sequence[str] | None,
        tenant_id: Any,
    ) -> ColumnElement[bool]:
        """Build the complete WHERE clause, tenant scope included.

        Raises:
            ValidationException: If *tenant_id* is ``None``.
        """
        if tenant_id is None:
            raise ValidationException("A tenant scope is required for every query", code="TENANT_REQUIRED")
        tenant = self._tenant_attr == tenant_id
        condition = self._compiler.compile_state(state, searchable_columns)
        return tenant if condition is None else and_(condition, tenant)

    def specification(
        self,
        state: FilterState,
        searchable_columns: Sequence[str] | None,
        tenant_id: Any,
    ) -> Specification[T]:
        clause = self.translate(state, searchable_columns, tenant_id)
        return Specification.where(clause)
