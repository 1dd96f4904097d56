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
"""Exception to HTTP-analogue status mapping and JSON error bodies.

A version conflict body carries the persisted row so the caller can offer
"reload and retry"::

    {
        "error": {"message": "...", "code": "VERSION_CONFLICT", "status": 409, ...},
        "currentVersion": 4,
        "currentData": {"id": "...", "version": 4, ...}
    }
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Any

from pydantic_core import to_jsonable_python
from starlette.requests import Request
from starlette.responses import JSONResponse

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

# Exception -> HTTP status code mapping (most specific first)
_STATUS_MAP: dict[type, int] = {
    ValidationException: 422,
    ResourceNotFoundException: 404,
    VersionConflictException: 409,
    ConflictException: 409,
    StoreFailureException: 502,
    # Catch-all
    BusinessException: 400,
    InfrastructureException: 502,
}


def status_code_for(exc: Exception) -> int:
    """Map exception type to HTTP status code."""
    for exc_type, status in _STATUS_MAP.items():
        if isinstance(exc, exc_type):
            return status
    return 500


def error_body(exc: Exception, *, path: str | None = None, transaction_id: str | None = None) -> dict[str, Any]:
    """Build the JSON-safe error body for *exc*."""
    status = status_code_for(exc)
    error: dict[str, Any] = {
        "transaction_id": transaction_id or str(uuid.uuid4()),
        "timestamp": datetime.now(UTC).isoformat(),
        "status": status,
    }
    if path is not None:
        error["path"] = path

    if not isinstance(exc, TableFlyException):
        error.update(message="Internal server error", code="INTERNAL_ERROR")
        return {"error": error}

    error.update(message=str(exc), code=exc.code or type(exc).__name__)
    if exc.context:
        error["context"] = to_jsonable_python(exc.context, fallback=str)
    body: dict[str, Any] = {"error": error}
    if isinstance(exc, VersionConflictException):
        body["currentVersion"] = exc.current_version
        body["currentData"] = to_jsonable_python(exc.current_data, fallback=str)
    return body


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all exceptions with structured JSON responses."""
    transaction_id = getattr(request.state, "transaction_id", None)
    body = error_body(exc, path=request.url.path, transaction_id=transaction_id)
    return JSONResponse(body, status_code=body["error"]["status"])
