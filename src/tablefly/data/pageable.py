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
"""Sort specification and page request types."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from tablefly.kernel.exceptions import ValidationException


@dataclass(frozen=True)
class Order:
    """A single sort key: column id + direction."""

    property: str
    direction: Literal["asc", "desc"] = "asc"

    @staticmethod
    def asc(property: str) -> Order:
        return Order(property=property, direction="asc")

    @staticmethod
    def desc(property: str) -> Order:
        return Order(property=property, direction="desc")

    @property
    def descending(self) -> bool:
        return self.direction == "desc"


@dataclass(frozen=True)
class Sort:
    """Ordered sort keys; the first order has the highest precedence."""

    orders: tuple[Order, ...] = ()


@dataclass(frozen=True)
class Pageable:
    """Page request: 1-based page number and page size."""

    page: int = 1
    size: int = 20

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValidationException(f"page must be >= 1, got {self.page}", code="INVALID_PAGE")
        if self.size < 1:
            raise ValidationException(f"size must be >= 1, got {self.size}", code="INVALID_PAGE_SIZE")

    @staticmethod
    def clamped(page: int, size: int, max_size: int) -> Pageable:
        """Create a pageable whose size is clamped to ``[1, max_size]``.

        The page number is not clamped: ``page < 1`` is malformed input.
        """
        return Pageable(page=page, size=min(max(size, 1), max_size))

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.size
