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
"""Concurrency controller: optimistic locking for single-row mutations.

Update lifecycle::

    read     load the row in the caller's tenant          -> NotFound
    compare  expected_version != row.version              -> VersionConflict
    apply    set patched columns (always dirty), stamp the actor
    persist  UPDATE ... WHERE id = ? AND version = ?      -> VersionConflict
             (0 rows: a concurrent writer won the race)

The compare-and-set is the flush itself: ``version`` is the mapper's
``version_id_col``, so of two writers holding the same version only the
first UPDATE matches a row. No in-process lock is held.
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Generic, TypeVar

import structlog
from sqlalchemy import Column, delete, inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import flag_modified
from sqlalchemy.orm.exc import StaleDataError

from tablefly.config.properties.engine import EngineProperties
from tablefly.data.filters.operands import OperandError, as_bool, coerce_datetime, coerce_number
from tablefly.data.relational.sqlalchemy.entity import to_dict
from tablefly.kernel.exceptions import (
    ResourceNotFoundException,
    StoreFailureException,
    ValidationException,
    VersionConflictException,
)

logger = structlog.get_logger(__name__)

T = TypeVar("T")

_AUDIT_COLUMNS = frozenset({"version", "created_at", "created_by", "updated_at", "updated_by"})


def _coerce_value(column: Column[Any], value: Any) -> Any:
    """Convert a JSON-ish patch value to the Python type of *column*."""
    if value is None:
        if not column.nullable:
            raise ValidationException(
                f"Column '{column.key}' cannot be null", code="NULL_NOT_ALLOWED", context={"column": column.key}
            )
        return None
    try:
        py = column.type.python_type
    except NotImplementedError:
        return value
    try:
        if py is bool:
            flag = as_bool(value)
            if flag is None:
                raise ValueError(value)
            return flag
        if py is datetime:
            return coerce_datetime(value)
        if py is date:
            return coerce_datetime(value).date()
        if py is uuid.UUID:
            return value if isinstance(value, uuid.UUID) else uuid.UUID(str(value))
        if py is Decimal:
            return Decimal(str(coerce_number(value)))
        if py is int:
            number = coerce_number(value)
            if number != int(number):
                raise ValueError(value)
            return int(number)
        if py is float:
            return float(coerce_number(value))
        if py is str and not isinstance(value, str):
            raise ValueError(value)
    except (OperandError, ValueError) as exc:
        raise ValidationException(
            f"Invalid value for column '{column.key}'",
            code="INVALID_VALUE",
            context={"column": column.key, "value": repr(value)},
        ) from exc
    return value


class OptimisticLockController(Generic[T]):
    """Create, update and delete rows of one versioned model in a session.

    The controller flushes but never commits; the caller owns the
    transaction boundary.
    """

    def __init__(self, session: AsyncSession, model: type[T], properties: EngineProperties | None = None) -> None:
        self._session = session
        self._model = model
        self._properties = properties or EngineProperties()
        self._mapper = inspect(model)
        self._columns: dict[str, Column[Any]] = {attr.key: attr.columns[0] for attr in self._mapper.column_attrs}

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def create(self, data: Mapping[str, Any], *, tenant_id: Any, actor: str | None = None) -> T:
        """Insert a new row at the baseline version, stamped with tenant and actor."""
        if tenant_id is None:
            raise ValidationException("A tenant scope is required to create a row", code="TENANT_REQUIRED")
        values = self._validate(data, protected=_AUDIT_COLUMNS | {self._properties.tenant_column})
        missing = sorted(
            key
            for key, column in self._columns.items()
            if key not in values
            and key not in _AUDIT_COLUMNS
            and key != self._properties.tenant_column
            and not column.nullable
            and not column.primary_key
            and column.default is None
            and column.server_default is None
        )
        if missing:
            raise ValidationException(
                f"Missing required columns: {', '.join(missing)}",
                code="MISSING_COLUMN",
                context={"columns": missing},
            )
        entity = self._model(**values)
        setattr(entity, self._properties.tenant_column, tenant_id)
        if actor is not None:
            entity.created_by = actor  # type: ignore[attr-defined]
            entity.updated_by = actor  # type: ignore[attr-defined]
        self._session.add(entity)
        await self._flush()
        await self._session.refresh(entity)
        logger.info("row_created", entity=self._model.__name__, row_id=str(self._identity(entity)))
        return entity

    async def update(
        self,
        row_id: Any,
        expected_version: int,
        patch: Mapping[str, Any],
        *,
        tenant_id: Any,
        actor: str | None = None,
    ) -> T:
        """Apply *patch* if the row is still at *expected_version*.

        Raises:
            ResourceNotFoundException: The row does not exist in the tenant.
            VersionConflictException: The row moved past *expected_version*;
                carries the persisted row.
            ValidationException: The patch is empty or names unknown or protected columns.
        """
        if not patch:
            raise ValidationException("The patch is empty", code="EMPTY_PATCH")
        values = self._validate(
            patch,
            protected=_AUDIT_COLUMNS | {self._properties.id_column, self._properties.tenant_column},
        )
        row = await self._load(row_id, tenant_id)
        current = row.version  # type: ignore[attr-defined]
        if current != expected_version:
            raise self._conflict(row_id, expected_version, row)

        for key, value in values.items():
            setattr(row, key, value)
            # Unchanged values still issue the versioned UPDATE.
            flag_modified(row, key)
        if actor is not None:
            row.updated_by = actor  # type: ignore[attr-defined]

        try:
            await self._session.flush()
        except StaleDataError:
            await self._session.rollback()
            raise self._conflict(row_id, expected_version, await self._load(row_id, tenant_id)) from None
        except SQLAlchemyError as exc:
            raise self._store_failure("update", exc) from exc

        await self._session.refresh(row)
        logger.info(
            "row_updated",
            entity=self._model.__name__,
            row_id=str(row_id),
            version=row.version,  # type: ignore[attr-defined]
            actor=actor,
        )
        return row

    async def delete(self, row_id: Any, *, tenant_id: Any) -> None:
        """Delete a row of the tenant; no version check applies.

        Raises:
            ResourceNotFoundException: The row does not exist in the tenant.
        """
        id_attr = getattr(self._model, self._properties.id_column)
        tenant_attr = getattr(self._model, self._properties.tenant_column)
        stmt = delete(self._model).where(id_attr == self._coerce_id(row_id), tenant_attr == tenant_id)
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as exc:
            raise self._store_failure("delete", exc) from exc
        if result.rowcount == 0:  # type: ignore[attr-defined]
            raise self._not_found(row_id)
        logger.info("row_deleted", entity=self._model.__name__, row_id=str(row_id))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _validate(self, data: Mapping[str, Any], *, protected: frozenset[str]) -> dict[str, Any]:
        unknown = sorted(k for k in data if k not in self._columns)
        if unknown:
            raise ValidationException(
                f"Unknown columns for {self._model.__name__}: {', '.join(unknown)}",
                code="UNKNOWN_COLUMN",
                context={"columns": unknown},
            )
        denied = sorted(k for k in data if k in protected)
        if denied:
            raise ValidationException(
                f"Columns cannot be written directly: {', '.join(denied)}",
                code="PROTECTED_COLUMN",
                context={"columns": denied},
            )
        return {key: _coerce_value(self._columns[key], value) for key, value in data.items()}

    def _coerce_id(self, row_id: Any) -> Any:
        try:
            return _coerce_value(self._columns[self._properties.id_column], row_id)
        except ValidationException:
            raise self._not_found(row_id) from None

    def _identity(self, entity: Any) -> Any:
        return getattr(entity, self._properties.id_column)

    async def _load(self, row_id: Any, tenant_id: Any) -> T:
        try:
            row = await self._session.get(self._model, self._coerce_id(row_id), populate_existing=True)
        except SQLAlchemyError as exc:
            raise self._store_failure("load", exc) from exc
        if row is None or getattr(row, self._properties.tenant_column) != tenant_id:
            raise self._not_found(row_id)
        return row

    async def _flush(self) -> None:
        try:
            await self._session.flush()
        except SQLAlchemyError as exc:
            raise self._store_failure("insert", exc) from exc

    def _conflict(self, row_id: Any, expected_version: int, row: Any) -> VersionConflictException:
        current = row.version
        logger.info(
            "version_conflict",
            entity=self._model.__name__,
            row_id=str(row_id),
            expected_version=expected_version,
            current_version=current,
        )
        return VersionConflictException(
            f"{self._model.__name__} {row_id} is at version {current}, not {expected_version}",
            current_version=current,
            current_data=to_dict(row),
            expected_version=expected_version,
        )

    def _not_found(self, row_id: Any) -> ResourceNotFoundException:
        logger.info("row_not_found", entity=self._model.__name__, row_id=str(row_id))
        return ResourceNotFoundException(
            f"{self._model.__name__} {row_id} not found",
            code="ROW_NOT_FOUND",
            context={"row_id": str(row_id)},
        )

    def _store_failure(self, operation: str, exc: SQLAlchemyError) -> StoreFailureException:
        logger.error("store_failure", entity=self._model.__name__, operation=operation, error=str(exc))
        return StoreFailureException(
            f"{operation} on {self._model.__name__} failed",
            code="STORE_FAILURE",
            context={"entity": self._model.__name__, "operation": operation},
        )
