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
"""Tests for EngineProperties."""

import pytest
from pydantic import ValidationError

from tablefly.config.properties.engine import EngineProperties


class TestEngineProperties:
    def test_defaults(self):
        props = EngineProperties()
        assert props.default_page_size == 100
        assert props.max_page_size == 1000
        assert props.default_sort_column == "created_at"
        assert props.default_sort_descending is True
        assert props.id_column == "id"
        assert props.tenant_column == "organization_id"

    def test_page_sizes_must_be_positive(self):
        with pytest.raises(ValidationError):
            EngineProperties(max_page_size=0)

    def test_default_page_size_cannot_exceed_max(self):
        with pytest.raises(ValidationError, match="exceeds max_page_size"):
            EngineProperties(default_page_size=200, max_page_size=100)

    def test_prefix(self):
        assert EngineProperties.__tablefly_config_prefix__ == "tablefly.engine"
