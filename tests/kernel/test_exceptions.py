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
"""Tests for the tablefly exception hierarchy."""

from tablefly.kernel.exceptions import (
    BusinessException,
    ConflictException,
    InfrastructureException,
    ResourceNotFoundException,
    StoreFailureException,
    TableFlyException,
    ValidationException,
    VersionConflictException,
)


class TestTableFlyException:
    def test_basic_creation(self):
        exc = TableFlyException("something went wrong")
        assert str(exc) == "something went wrong"
        assert exc.code is None
        assert exc.context == {}

    def test_with_code_and_context(self):
        exc = TableFlyException("not found", code="ROW_NOT_FOUND", context={"row_id": "42"})
        assert exc.code == "ROW_NOT_FOUND"
        assert exc.context["row_id"] == "42"

    def test_context_not_shared_between_instances(self):
        exc = TableFlyException("a")
        exc.context["key"] = "value"
        assert TableFlyException("b").context == {}


class TestExceptionHierarchy:
    def test_business_errors(self):
        assert issubclass(ValidationException, BusinessException)
        assert issubclass(ResourceNotFoundException, BusinessException)
        assert issubclass(ConflictException, BusinessException)

    def test_version_conflict_is_conflict(self):
        assert issubclass(VersionConflictException, ConflictException)

    def test_store_failure_is_infrastructure(self):
        assert issubclass(StoreFailureException, InfrastructureException)
        assert issubclass(InfrastructureException, TableFlyException)

    def test_catch_all_tablefly_exceptions(self):
        exceptions = [
            ValidationException("bad input"),
            ResourceNotFoundException("missing"),
            StoreFailureException("db down"),
            VersionConflictException("stale", current_version=2, current_data={}),
        ]
        for exc in exceptions:
            try:
                raise exc
            except TableFlyException as caught:
                assert caught is exc


class TestVersionConflictException:
    def test_carries_current_row(self):
        exc = VersionConflictException(
            "row moved on",
            current_version=3,
            current_data={"id": 1, "version": 3, "name": "Ann"},
            expected_version=2,
        )
        assert exc.code == "VERSION_CONFLICT"
        assert exc.current_version == 3
        assert exc.expected_version == 2
        assert exc.current_data["name"] == "Ann"
        assert exc.context == {"current_version": 3, "expected_version": 2}

    def test_distinguishable_from_generic_conflict(self):
        generic = ConflictException("duplicate")
        assert not isinstance(generic, VersionConflictException)
