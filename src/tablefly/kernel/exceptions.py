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
"""Unified exception hierarchy for tablefly.

All engine exceptions inherit from TableFlyException so a request layer can
catch one type, or catch a specific subclass for targeted handling.

Categories:
- BusinessException: malformed input, missing rows, version conflicts
- InfrastructureException: failures raised by the backing store
"""

from __future__ import annotations

from typing import Any


class TableFlyException(Exception):
    """Base exception for all tablefly errors.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "VERSION_CONFLICT").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


class BusinessException(TableFlyException):
    """Request-level errors the caller can act on."""


class ValidationException(BusinessException):
    """Malformed filter, sort, page or mutation input."""


class ResourceNotFoundException(BusinessException):
    """The target row of a mutation or delete does not exist."""


class ConflictException(BusinessException):
    """The request conflicts with the current state of the resource."""


class VersionConflictException(ConflictException):
    """Optimistic-lock mismatch.

    Carries the persisted row so the caller can re-render and decide
    without a second round trip.
    """

    def __init__(
        self,
        message: str,
        *,
        current_version: int,
        current_data: dict[str, Any],
        expected_version: int | None = None,
    ) -> None:
        super().__init__(
            message,
            code="VERSION_CONFLICT",
            context={
                "current_version": current_version,
                "expected_version": expected_version,
            },
        )
        self.current_version = current_version
        self.current_data = current_data
        self.expected_version = expected_version


class InfrastructureException(TableFlyException):
    """Failures raised below the engine."""


class StoreFailureException(InfrastructureException):
    """A native query or write failed in the backing store."""
