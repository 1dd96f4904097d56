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
"""Query engine configuration properties."""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

from tablefly.core.config import config_properties


@config_properties(prefix="tablefly.engine")
class EngineProperties(BaseModel):
    """Configuration for the filter/query/sort engine (tablefly.engine.*)."""

    default_page_size: int = Field(default=100, ge=1)
    max_page_size: int = Field(default=1000, ge=1)
    default_sort_column: str = "created_at"
    default_sort_descending: bool = True
    id_column: str = "id"
    tenant_column: str = "organization_id"

    @model_validator(mode="after")
    def _default_fits_max(self) -> EngineProperties:
        if self.default_page_size > self.max_page_size:
            raise ValueError(
                f"default_page_size ({self.default_page_size}) exceeds max_page_size ({self.max_page_size})"
            )
        return self
