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
"""Tests for optimistic locking on single-row mutations."""

from __future__ import annotations

from datetime import date
from uuid import UUID

import pytest
from employee_table import Employee, row_id, seed_entities
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from structlog.testing import capture_logs

from tablefly.data.relational.sqlalchemy import OptimisticLockController
from tablefly.data.relational.sqlalchemy.entity import Base
from tablefly.kernel.exceptions import ResourceNotFoundException, ValidationException, VersionConflictException

BOB = row_id(1)


@pytest.fixture
def controller(session) -> OptimisticLockController[Employee]:
    return OptimisticLockController(session, Employee)


async def bump(controller: OptimisticLockController, times: int) -> Employee:
    row = None
    for i in range(times):
        row = await controller.update(BOB, 1 + i, {"rating": i}, tenant_id="acme")
    return row


class TestUpdate:
    async def test_baseline_version(self, controller):
        row = await controller.update(BOB, 1, {"salary": 53000}, tenant_id="acme", actor="ann")
        assert row.version == 2
        assert row.salary == 53000.0
        assert row.updated_by == "ann"

    async def test_unchanged_values_still_bump_the_version(self, controller):
        row = await controller.update(BOB, 1, {"salary": 52000.0}, tenant_id="acme")
        assert row.version == 2
        assert row.salary == 52000.0
        row = await controller.update(BOB, 2, {"salary": 52000.0, "name": "Bob Stone"}, tenant_id="acme")
        assert row.version == 3
        with pytest.raises(VersionConflictException):
            await controller.update(BOB, 2, {"salary": 52000.0}, tenant_id="acme")

    async def test_values_are_coerced_to_column_types(self, controller):
        row = await controller.update(
            BOB, 1, {"hired_on": "2024-05-01", "active": "yes", "rating": "4", "manager_id": 3}, tenant_id="acme"
        )
        assert row.hired_on == date(2024, 5, 1)
        assert row.active is True
        assert row.rating == 4

    async def test_stale_version_is_a_conflict(self, controller):
        await bump(controller, 2)
        with capture_logs() as logs:
            with pytest.raises(VersionConflictException) as exc_info:
                await controller.update(BOB, 2, {"salary": 1}, tenant_id="acme")
        conflict = exc_info.value
        assert conflict.code == "VERSION_CONFLICT"
        assert conflict.current_version == 3
        assert conflict.expected_version == 2
        assert conflict.current_data["name"] == "Bob Stone"
        assert conflict.current_data["salary"] == 52000.0
        assert logs[0]["event"] == "version_conflict"

    async def test_retry_with_current_version(self, controller):
        await bump(controller, 2)
        with pytest.raises(VersionConflictException):
            await controller.update(BOB, 2, {"salary": 1}, tenant_id="acme")
        row = await controller.update(BOB, 3, {"salary": 1}, tenant_id="acme")
        assert row.version == 4

    async def test_missing_row(self, controller):
        with pytest.raises(ResourceNotFoundException) as exc_info:
            await controller.update(UUID(int=999), 1, {"salary": 1}, tenant_id="acme")
        assert exc_info.value.code == "ROW_NOT_FOUND"

    async def test_row_of_another_tenant_is_not_found(self, controller):
        with pytest.raises(ResourceNotFoundException):
            await controller.update(BOB, 1, {"salary": 1}, tenant_id="globex")

    async def test_malformed_id_is_not_found(self, controller):
        with pytest.raises(ResourceNotFoundException):
            await controller.update("not-a-uuid", 1, {"salary": 1}, tenant_id="acme")

    @pytest.mark.parametrize(
        ("patch", "code"),
        [
            ({}, "EMPTY_PATCH"),
            ({"owner": "x"}, "UNKNOWN_COLUMN"),
            ({"version": 9}, "PROTECTED_COLUMN"),
            ({"organization_id": "globex"}, "PROTECTED_COLUMN"),
            ({"id": str(UUID(int=50))}, "PROTECTED_COLUMN"),
            ({"created_by": "mallory"}, "PROTECTED_COLUMN"),
            ({"rating": "high"}, "INVALID_VALUE"),
            ({"rating": 2.5}, "INVALID_VALUE"),
            ({"active": "maybe"}, "INVALID_VALUE"),
            ({"name": None}, "NULL_NOT_ALLOWED"),
        ],
    )
    async def test_rejected_patches(self, controller, patch, code):
        with pytest.raises(ValidationException) as exc_info:
            await controller.update(BOB, 1, patch, tenant_id="acme")
        assert exc_info.value.code == code


class TestCreate:
    async def test_stamps_tenant_actor_and_baseline_version(self, controller):
        row = await controller.create({"name": "Hal Moss", "salary": "61000"}, tenant_id="acme", actor="ann")
        assert row.version == 1
        assert row.organization_id == "acme"
        assert row.created_by == "ann"
        assert row.updated_by == "ann"
        assert row.salary == 61000.0
        assert isinstance(row.id, UUID)

    async def test_tenant_is_required(self, controller):
        with pytest.raises(ValidationException) as exc_info:
            await controller.create({"name": "Hal Moss"}, tenant_id=None)
        assert exc_info.value.code == "TENANT_REQUIRED"

    async def test_required_columns(self, controller):
        with pytest.raises(ValidationException) as exc_info:
            await controller.create({"salary": 1}, tenant_id="acme")
        assert exc_info.value.code == "MISSING_COLUMN"
        assert exc_info.value.context == {"columns": ["name"]}

    async def test_tenant_cannot_be_supplied(self, controller):
        with pytest.raises(ValidationException) as exc_info:
            await controller.create({"name": "Hal Moss", "organization_id": "globex"}, tenant_id="acme")
        assert exc_info.value.code == "PROTECTED_COLUMN"


class TestDelete:
    async def test_delete(self, controller, session):
        await controller.delete(BOB, tenant_id="acme")
        assert await session.get(Employee, BOB) is None

    async def test_delete_in_another_tenant(self, controller):
        with pytest.raises(ResourceNotFoundException):
            await controller.delete(BOB, tenant_id="globex")

    async def test_delete_missing_row(self, controller):
        with pytest.raises(ResourceNotFoundException):
            await controller.delete(str(UUID(int=999)), tenant_id="acme")


class TestConcurrentWriters:
    @pytest.fixture
    async def file_factory(self, tmp_path):
        engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'race.db'}")
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        factory = async_sessionmaker(engine, expire_on_commit=False)
        async with factory() as session:
            session.add_all(seed_entities())
            await session.commit()
        yield factory
        await engine.dispose()

    async def test_second_writer_loses(self, file_factory):
        async with file_factory() as first, file_factory() as second:
            mine = OptimisticLockController(first, Employee)
            theirs = OptimisticLockController(second, Employee)
            await theirs.update(BOB, 1, {"rating": 4}, tenant_id="acme")
            await second.commit()

            with pytest.raises(VersionConflictException) as exc_info:
                await mine.update(BOB, 1, {"rating": 1}, tenant_id="acme")
            assert exc_info.value.current_version == 2
            assert exc_info.value.current_data["rating"] == 4

    async def test_race_between_read_and_write(self, file_factory):
        """A writer that commits after our version check makes our UPDATE match no row."""

        class Interleaved(OptimisticLockController):
            raced = False

            async def _load(self, row_id, tenant_id):
                row = await super()._load(row_id, tenant_id)
                if not self.raced:
                    self.raced = True
                    async with file_factory() as other:
                        await OptimisticLockController(other, Employee).update(
                            row_id, row.version, {"rating": 5}, tenant_id=tenant_id
                        )
                        await other.commit()
                return row

        async with file_factory() as session:
            controller = Interleaved(session, Employee)
            with capture_logs() as logs:
                with pytest.raises(VersionConflictException) as exc_info:
                    await controller.update(BOB, 1, {"rating": 1}, tenant_id="acme")

        assert exc_info.value.current_version == 2
        assert exc_info.value.current_data["rating"] == 5
        assert [e["event"] for e in logs] == ["row_updated", "version_conflict"]

        async with file_factory() as session:
            stored = await session.get(Employee, BOB)
            assert (stored.version, stored.rating) == (2, 5)
