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
"""Declarative base and entity mixins for versioned, tenant-scoped tables."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import DateTime, Integer, String, inspect
from sqlalchemy.orm import DeclarativeBase, Mapped, declared_attr, mapped_column


class Base(DeclarativeBase):
    """SQLAlchemy declarative base for tablefly entities."""


class VersionedMixin:
    """Mixin that enables optimistic locking via a ``version`` column.

    ``version`` is the mapper's ``version_id_col``: an insert stores 1 and
    every flushed update runs ``UPDATE ... WHERE id = ? AND version = ?``,
    setting ``version + 1``. A stale version matches no row and SQLAlchemy
    raises :class:`sqlalchemy.orm.exc.StaleDataError`.
    """

    __abstract__ = True

    version: Mapped[int] = mapped_column(Integer, nullable=False)

    @declared_attr  # type: ignore[arg-type]
    def __mapper_args__(cls) -> dict[str, Any]:  # noqa: N805
        return {"version_id_col": cls.version}


class TenantScopedMixin:
    """Mixin adding the owning organization of a row."""

    __abstract__ = True

    organization_id: Mapped[str] = mapped_column(String(255), index=True, nullable=False)


class BaseEntity(Base):
    """Base entity providing a UUID primary key and audit trail fields."""

    __abstract__ = True

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True,
        default=uuid.uuid4,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )
    created_by: Mapped[str | None] = mapped_column(
        String(255),
        default=None,
    )
    updated_by: Mapped[str | None] = mapped_column(
        String(255),
        default=None,
    )


def to_dict(entity: Any) -> dict[str, Any]:
    """Column attributes of a loaded entity, keyed by attribute name."""
    return {attr.key: getattr(entity, attr.key) for attr in inspect(type(entity)).column_attrs}
