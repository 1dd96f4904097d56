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
"""SQLAlchemy (server-mode) adapter: query translation, repository and optimistic locking."""

from tablefly.data.relational.sqlalchemy.comparisons import SqlAlchemyComparisons, escape_like
from tablefly.data.relational.sqlalchemy.concurrency import OptimisticLockController
from tablefly.data.relational.sqlalchemy.dialects import enable_case_sensitive_like
from tablefly.data.relational.sqlalchemy.entity import Base, BaseEntity, TenantScopedMixin, VersionedMixin, to_dict
from tablefly.data.relational.sqlalchemy.repository import Repository
from tablefly.data.relational.sqlalchemy.specification import Specification
from tablefly.data.relational.sqlalchemy.translator import QueryTranslator

__all__ = [
    "Base",
    "BaseEntity",
    "OptimisticLockController",
    "QueryTranslator",
    "Repository",
    "Specification",
    "SqlAlchemyComparisons",
    "TenantScopedMixin",
    "VersionedMixin",
    "enable_case_sensitive_like",
    "escape_like",
    "to_dict",
]
