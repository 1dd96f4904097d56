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
"""Composable SQLAlchemy query predicates.

A :class:`Specification` wraps a callable that receives the mapped model
(``root``) and a ``Select`` and returns the ``Select`` with its WHERE clause
applied. Translated filter states, tenant scope and ad-hoc conditions all
compose with ``&`` (AND), ``|`` (OR) and ``~`` (NOT).

Example::

    scoped = Specification.where(Employee.organization_id == org_id)
    filters = translator.specification(state, ["name", "department"], org_id)

    page = await repo.find_page(filters & ~Specification.where(Employee.archived), plan)
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

from sqlalchemy import ColumnElement, Select, not_, or_

from tablefly.data.specification import Specification as SpecificationBase

T = TypeVar("T")


class Specification(SpecificationBase[T, Select[Any]]):
    """Composable predicate over a SQLAlchemy ``Select``."""

    def __init__(self, predicate: Callable[[type[T], Select[Any]], Select[Any]]) -> None:
        self._predicate = predicate

    @staticmethod
    def where(clause: ColumnElement[bool] | None) -> Specification[Any]:
        """Specification applying a prebuilt clause; ``None`` matches everything."""
        if clause is None:
            return Specification(lambda root, q: q)
        return Specification(lambda root, q: q.where(clause))

    def to_predicate(self, root: type[T], query: Select[Any]) -> Select[Any]:
        """Apply this specification's predicate to *query*."""
        return self._predicate(root, query)

    def __and__(self, other: Specification[T]) -> Specification[T]:  # type: ignore[override]
        """Both specs must match; successive ``.where()`` calls are ANDed."""
        left, right = self._predicate, other._predicate
        return Specification(lambda root, q: right(root, left(root, q)))

    def __or__(self, other: Specification[T]) -> Specification[T]:  # type: ignore[override]
        """Either spec may match.

        Each side is applied to a clean copy of the query and the two
        resulting WHERE clauses are combined with ``or_()``. A side that adds
        no clause matches everything, so the whole OR matches everything.
        """
        left_pred, right_pred = self._predicate, other._predicate

        def or_predicate(root: type[T], query: Select[Any]) -> Select[Any]:
            left_clause = left_pred(root, query).whereclause
            right_clause = right_pred(root, query).whereclause
            if left_clause is None or right_clause is None:
                return query
            return query.where(or_(left_clause, right_clause))

        return Specification(or_predicate)

    def __invert__(self) -> Specification[T]:
        pred = self._predicate

        def not_predicate(root: type[T], query: Select[Any]) -> Select[Any]:
            clause = pred(root, query).whereclause
            if clause is not None:
                return query.where(not_(clause))
            return query

        return Specification(not_predicate)
