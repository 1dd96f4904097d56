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
"""Aggregate query service: page fetch and row mutation for one table.

Each operation opens its own session from the factory and owns the
transaction boundary; the engine holds no state between calls.

Usage::

    service = TableQueryService(session_factory, Employee, schema, properties)
    # or, from a loaded config file:
    service = TableQueryService.from_config(Config.from_file("tablefly.yaml"), session_factory, Employee, schema)

    envelope = await service.query(payload, tenant_id=org_id)
    updated = await service.update_row(row_id, 3, {"salary": 72000}, tenant_id=org_id, actor=user)
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Generic, TypeVar

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from tablefly.config.properties.engine import EngineProperties
from tablefly.core.config import Config
from tablefly.data.filters.model import FilterState
from tablefly.data.page import Page
from tablefly.data.pageable import Sort
from tablefly.data.planner import SortPlanner
from tablefly.data.relational.sqlalchemy.concurrency import OptimisticLockController
from tablefly.data.relational.sqlalchemy.entity import to_dict
from tablefly.data.relational.sqlalchemy.repository import Repository
from tablefly.data.relational.sqlalchemy.translator import QueryTranslator
from tablefly.data.requests import parse_create, parse_mutation, parse_query
from tablefly.data.schema import TableSchema
from tablefly.kernel.exceptions import StoreFailureException
from tablefly.logging import configure_logging

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class TableQueryService(Generic[T]):
    """Serve filtered, sorted pages and version-guarded mutations of one model.

    Args:
        session_factory: Factory for ``AsyncSession`` objects.
        model: Mapped entity using ``VersionedMixin`` and the tenant column.
        schema: Known columns of the table.
        properties: Engine configuration; defaults apply when omitted.
        searchable_columns: Default global-search columns; the schema's
            searchable columns when omitted.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        model: type[T],
        schema: TableSchema,
        properties: EngineProperties | None = None,
        *,
        searchable_columns: Sequence[str] | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._model = model
        self._schema = schema
        self._properties = properties or EngineProperties()
        self._searchable = list(searchable_columns) if searchable_columns is not None else None
        self._translator: QueryTranslator[T] = QueryTranslator(model, schema, self._properties)
        self._planner = SortPlanner(schema, self._properties)

    @classmethod
    def from_config(
        cls,
        config: Config,
        session_factory: async_sessionmaker[AsyncSession],
        model: type[T],
        schema: TableSchema,
        *,
        searchable_columns: Sequence[str] | None = None,
    ) -> TableQueryService[T]:
        """Build a service from loaded configuration.

        Binds ``tablefly.engine`` and configures log output from ``tablefly.logging``.

        Raises:
            ValueError: If either section fails validation.
        """
        properties = config.bind(EngineProperties)
        configure_logging(config)
        return cls(session_factory, model, schema, properties, searchable_columns=searchable_columns)

    async def fetch_page(
        self,
        state: FilterState,
        sort: Sort | None = None,
        *,
        tenant_id: Any,
        page: int = 1,
        page_size: int | None = None,
        searchable_columns: Sequence[str] | None = None,
    ) -> Page[dict[str, Any]]:
        """Fetch one page of rows of *tenant_id* matching *state*."""
        plan = self._planner.plan(sort, self._planner.page_request(page, page_size))
        searchable = searchable_columns if searchable_columns is not None else self._searchable
        spec = self._translator.specification(state, searchable, tenant_id)
        async with self._session_factory() as session:
            result = await Repository(self._model, session).find_page(spec, plan)
        logger.debug(
            "page_fetched",
            table=self._schema.name,
            total=result.total,
            page=result.page,
            size=result.size,
        )
        return result.map(to_dict)

    async def create_row(
        self, data: Mapping[str, Any], *, tenant_id: Any, actor: str | None = None
    ) -> dict[str, Any]:
        async with self._session_factory() as session:
            row = await self._controller(session).create(data, tenant_id=tenant_id, actor=actor)
            created = to_dict(row)
            await self._commit(session)
        return created

    async def update_row(
        self,
        row_id: Any,
        expected_version: int,
        patch: Mapping[str, Any],
        *,
        tenant_id: Any,
        actor: str | None = None,
    ) -> dict[str, Any]:
        """Apply *patch* to the row if it is still at *expected_version*.

        Raises:
            ResourceNotFoundException: The row does not exist in the tenant.
            VersionConflictException: Another writer got there first; carries
                the persisted row and its version.
        """
        async with self._session_factory() as session:
            row = await self._controller(session).update(
                row_id, expected_version, patch, tenant_id=tenant_id, actor=actor
            )
            snapshot = to_dict(row)
            await self._commit(session)
        return snapshot

    async def delete_row(self, row_id: Any, *, tenant_id: Any) -> None:
        async with self._session_factory() as session:
            await self._controller(session).delete(row_id, tenant_id=tenant_id)
            await self._commit(session)

    # ------------------------------------------------------------------
    # Payload entry points
    # ------------------------------------------------------------------

    async def query(self, payload: Any, *, tenant_id: Any) -> dict[str, Any]:
        """Parse a query payload and return the page envelope."""
        request = parse_query(payload)
        result = await self.fetch_page(
            request.to_filter_state(),
            request.to_sort(),
            tenant_id=tenant_id,
            page=request.page,
            page_size=request.page_size,
            searchable_columns=request.searchable_columns,
        )
        return result.to_envelope()

    async def create(self, payload: Any, *, tenant_id: Any, actor: str | None = None) -> dict[str, Any]:
        request = parse_create(payload)
        return {"data": await self.create_row(request.data, tenant_id=tenant_id, actor=actor)}

    async def mutate(
        self, row_id: Any, payload: Any, *, tenant_id: Any, actor: str | None = None
    ) -> dict[str, Any]:
        """Parse a mutation payload and return ``{"data": row}``."""
        request = parse_mutation(payload)
        row = await self.update_row(
            row_id, request.expected_version, request.patch, tenant_id=tenant_id, actor=actor
        )
        return {"data": row}

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _controller(self, session: AsyncSession) -> OptimisticLockController[T]:
        return OptimisticLockController(session, self._model, self._properties)

    async def _commit(self, session: AsyncSession) -> None:
        try:
            await session.commit()
        except SQLAlchemyError as exc:
            logger.error("store_failure", table=self._schema.name, operation="commit", error=str(exc))
            raise StoreFailureException(
                f"Commit on {self._schema.name} failed",
                code="STORE_FAILURE",
                context={"table": self._schema.name},
            ) from exc
