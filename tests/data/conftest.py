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
"""Shared fixtures: a seeded in-memory SQLite store of employees."""

from __future__ import annotations

import pytest
from employee_table import EMPLOYEE_SCHEMA, Employee, seed_entities
from sqlalchemy import select
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from tablefly.data.relational.sqlalchemy.dialects import enable_case_sensitive_like
from tablefly.data.relational.sqlalchemy.entity import Base, to_dict
from tablefly.data.schema import TableSchema


@pytest.fixture
def schema() -> TableSchema:
    return EMPLOYEE_SCHEMA


@pytest.fixture
def model() -> type[Employee]:
    return Employee


@pytest.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    enable_case_sensitive_like(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def session_factory(engine):
    factory = async_sessionmaker(engine, expire_on_commit=False)
    async with factory() as session:
        session.add_all(seed_entities())
        await session.commit()
    return factory


@pytest.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def stored_rows(session_factory) -> list[dict]:
    """The seed rows as read back from the store, for the in-memory path."""
    async with session_factory() as session:
        result = await session.execute(select(Employee).order_by(Employee.created_at))
        return [to_dict(e) for e in result.scalars().all()]
