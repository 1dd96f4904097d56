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
"""Composable row predicates for in-memory row sets.

The in-memory counterpart of the SQLAlchemy ``Specification``: the query
representation is an iterable of rows and ``to_predicate`` returns the
matching rows, in their original order.

Example::

    active = RowSpecification(lambda row: row["active"])
    mine = RowSpecification(lambda row: row["organization_id"] == org_id)

    visible = (active & mine).to_predicate(dict, rows)
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any, TypeVar

from tablefly.data.specification import Specification

T = TypeVar("T")


class RowSpecification(Specification[T, Iterable[T]]):
    """Wrap a ``row -> bool`` callable as a composable specification."""

    def __init__(self, matches: Callable[[T], bool]) -> None:
        self._matches = matches

    @staticmethod
    def all() -> RowSpecification[Any]:
        """A specification matching every row."""
        return RowSpecification(lambda row: True)

    def matches(self, row: T) -> bool:
        return self._matches(row)

    def to_predicate(self, root: type[T], query: Iterable[T]) -> list[T]:  # type: ignore[override]
        """Return the rows of *query* this specification matches."""
        return [row for row in query if self._matches(row)]

    def __and__(self, other: Specification[T, Iterable[T]]) -> RowSpecification[T]:
        left, right = self._matches, _matcher(other)
        return RowSpecification(lambda row: left(row) and right(row))

    def __or__(self, other: Specification[T, Iterable[T]]) -> RowSpecification[T]:
        left, right = self._matches, _matcher(other)
        return RowSpecification(lambda row: left(row) or right(row))

    def __invert__(self) -> RowSpecification[T]:
        inner = self._matches
        return RowSpecification(lambda row: not inner(row))


def _matcher(spec: Specification[T, Iterable[T]]) -> Callable[[T], bool]:
    if not isinstance(spec, RowSpecification):
        raise TypeError(f"Cannot combine RowSpecification with {type(spec).__name__}")
    return spec.matches
