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
"""Employee table used across the data tests: schema, mapped model and seed rows."""

from __future__ import annotations

import uuid
from datetime import date, datetime, timedelta

from sqlalchemy import Boolean, Date, DateTime, Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from tablefly.data.filters.model import FilterCategory
from tablefly.data.relational.sqlalchemy.entity import BaseEntity, TenantScopedMixin, VersionedMixin
from tablefly.data.schema import ColumnDefinition, ReferenceDefinition, TableSchema


class Employee(BaseEntity, VersionedMixin, TenantScopedMixin):
    __tablename__ = "employees"

    name: Mapped[str] = mapped_column(String(255))
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    department: Mapped[str | None] = mapped_column(String(64), nullable=True)
    salary: Mapped[float | None] = mapped_column(Float, nullable=True)
    rating: Mapped[int | None] = mapped_column(Integer, nullable=True)
    progress: Mapped[float | None] = mapped_column(Float, nullable=True)
    active: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    hired_on: Mapped[date | None] = mapped_column(Date, nullable=True)
    last_login: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    badge: Mapped[str | None] = mapped_column(String(32), nullable=True)
    manager_id: Mapped[int | None] = mapped_column(Integer, nullable=True)


EMPLOYEE_SCHEMA = TableSchema(
    "employees",
    [
        ColumnDefinition("id", FilterCategory.REFERENCE),
        ColumnDefinition("name", FilterCategory.TEXT, searchable=True),
        ColumnDefinition("email", FilterCategory.TEXT, searchable=True),
        ColumnDefinition("department", FilterCategory.SELECT, searchable=True),
        ColumnDefinition("salary", FilterCategory.NUMBER),
        ColumnDefinition("rating", FilterCategory.NUMBER),
        ColumnDefinition("progress", FilterCategory.PROGRESS),
        ColumnDefinition("active", FilterCategory.BOOLEAN),
        ColumnDefinition("hired_on", FilterCategory.DATE),
        ColumnDefinition("last_login", FilterCategory.DATE),
        ColumnDefinition("badge", FilterCategory.BADGE),
        ColumnDefinition("manager", FilterCategory.REFERENCE, attribute="manager_id",
                         reference=ReferenceDefinition("employees")),
        ColumnDefinition("created_at", FilterCategory.DATE),
        ColumnDefinition("notes", FilterCategory.TEXT, attribute="name", sortable=False),
    ],
)

_BASE_CREATED = datetime(2026, 1, 1, 8, 0)

SEED_ROWS: list[dict] = [
    dict(name="Ann Lee", email="ann@acme.io", department="Engineering", salary=85000.0, rating=5,
         progress=0.9, active=True, hired_on=date(2021, 3, 15), last_login=datetime(2026, 2, 26, 9, 15),
         badge="Senior", manager_id=None, organization_id="acme"),
    dict(name="Bob Stone", email="bob@acme.io", department="Sales", salary=52000.0, rating=3,
         progress=0.4, active=False, hired_on=date(2019, 7, 1), last_login=datetime(2026, 2, 25, 18, 0),
         badge="Junior", manager_id=1, organization_id="acme"),
    dict(name="Cara Diaz", email=None, department="Engineering", salary=67000.5, rating=4,
         progress=0.55, active=None, hired_on=date(2023, 1, 9), last_login=None,
         badge="Lead", manager_id=1, organization_id="acme"),
    dict(name="Dan Oneil", email="dan@acme.io", department=None, salary=None, rating=None,
         progress=None, active=True, hired_on=None, last_login=datetime(2026, 2, 26, 23, 59, 59, 500000),
         badge=None, manager_id=2, organization_id="acme"),
    dict(name="Eve_Park 100%", email="eve@acme.io", department="Marketing", salary=40000.0, rating=2,
         progress=0.0, active=False, hired_on=date(2020, 12, 31), last_login=datetime(2026, 2, 27, 0, 0),
         badge="Junior", manager_id=2, organization_id="acme"),
    dict(name="Frank ENGLE", email="frank@acme.io", department="Support", salary=58000.0, rating=3,
         progress=1.0, active=True, hired_on=date(2022, 6, 30), last_login=datetime(2026, 1, 1, 12, 0),
         badge="Senior", manager_id=3, organization_id="acme"),
    dict(name="Gina Globex", email="gina@globex.io", department="Engineering", salary=99000.0, rating=5,
         progress=0.7, active=True, hired_on=date(2018, 5, 5), last_login=datetime(2026, 2, 26, 10, 0),
         badge="Lead", manager_id=None, organization_id="globex"),
]


def row_id(index: int) -> uuid.UUID:
    """Deterministic id of the seed row at *index* (0-based)."""
    return uuid.UUID(int=index + 1)


def seed_entities() -> list[Employee]:
    return [
        Employee(id=row_id(i), created_at=_BASE_CREATED + timedelta(hours=i), **data)
        for i, data in enumerate(SEED_ROWS)
    ]
