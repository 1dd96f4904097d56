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
"""Generic async read repository built on SQLAlchemy 2.0."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Generic, TypeVar, cast, get_args, get_origin

import structlog
from sqlalchemy import Select, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tablefly.data.page import Page
from tablefly.data.planner import QueryPlan, SortKey
from tablefly.data.relational.sqlalchemy.specification import Specification
from tablefly.kernel.exceptions import StoreFailureException

logger = structlog.get_logger(__name__)

T = TypeVar("T")
ID = TypeVar("ID")


class Repository(Generic[T, ID]):
    """Query access to one SQLAlchemy entity.

    Type Parameters:
        T: The entity type (any SQLAlchemy model).
        ID: The primary key type (e.g. UUID, int, str).

    Usage::

        class EmployeeRepository(Repository[Employee, UUID]):
            pass  # entity type extracted from the generic base

        repo = EmployeeRepository(session=session)
        page = await repo.find_page(spec, plan)

    Every store error is logged as ``store_failure`` and re-raised as
    :class:`StoreFailureException`.
    """

    _entity_type: type | None = None

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        for base in getattr(cls, "__orig_bases__", []):
            origin = get_origin(base)
            if origin is Repository:
                args = get_args(base)
                if args and not isinstance(args[0], TypeVar):
                    cls._entity_type = args[0]
                break

    def __init__(self, model: type[T] | None = None, session: AsyncSession | None = None) -> None:
        resolved = model or getattr(type(self), "_entity_type", None)
        if resolved is None:
            raise TypeError(
                f"{type(self).__name__} requires either Repository[Entity, ID] declaration or explicit model argument"
            )
        self._model: type[T] = cast(type[T], resolved)
        self._session = session

    def _require_session(self) -> AsyncSession:
        if self._session is None:
            raise RuntimeError("No AsyncSession configured for this repository")
        return self._session

    def _apply_sort(self, stmt: Select[Any], keys: Iterable[SortKey]) -> Select[Any]:
        """Apply resolved sort keys; nulls order as the smallest value."""
        for key in keys:
            col = getattr(self._model, key.column.key)
            stmt = stmt.order_by(col.desc().nulls_last() if key.descending else col.asc().nulls_first())
        return stmt

    async def _execute(self, stmt: Any) -> Any:
        session = self._require_session()
        try:
            return await session.execute(stmt)
        except SQLAlchemyError as exc:
            logger.error("store_failure", entity=self._model.__name__, error=str(exc))
            raise StoreFailureException(
                f"Query against {self._model.__name__} failed",
                code="STORE_FAILURE",
                context={"entity": self._model.__name__},
            ) from exc

    async def find_all_by_spec(self, spec: Specification[T]) -> list[T]:
        """Find all entities matching the specification."""
        stmt = spec.to_predicate(self._model, select(self._model))
        result = await self._execute(stmt)
        return list(result.scalars().all())

    async def count_by_spec(self, spec: Specification[T]) -> int:
        filtered = spec.to_predicate(self._model, select(self._model))
        result = await self._execute(select(func.count()).select_from(filtered.subquery()))
        return cast(int, result.scalar_one())

    async def find_page(self, spec: Specification[T], plan: QueryPlan) -> Page[T]:
        """Find one page of entities matching *spec*, ordered and windowed by *plan*."""
        total = await self.count_by_spec(spec)

        stmt = spec.to_predicate(self._model, select(self._model))
        stmt = self._apply_sort(stmt, plan.keys)
        stmt = stmt.offset(plan.offset).limit(plan.limit)
        result = await self._execute(stmt)
        items = list(result.scalars().all())

        return Page(items=items, total=total, page=plan.page, size=plan.size)
