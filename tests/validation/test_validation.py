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
"""Tests for validate_model."""

import pytest
from pydantic import BaseModel, Field

from tablefly.kernel.exceptions import ValidationException
from tablefly.validation.helpers import validate_model


class Paging(BaseModel):
    page: int = Field(ge=1)
    size: int = 20


class TestValidateModel:
    def test_valid_mapping(self):
        assert validate_model(Paging, {"page": 2}).page == 2

    def test_valid_json_string(self):
        assert validate_model(Paging, '{"page": 3, "size": 10}').size == 10

    def test_invalid_raises_validation_exception(self):
        with pytest.raises(ValidationException) as exc_info:
            validate_model(Paging, {"page": 0})
        exc = exc_info.value
        assert exc.code == "VALIDATION_ERROR"
        assert exc.context["errors"][0]["loc"] == ("page",)
        assert "page" in str(exc)

    def test_malformed_json_raises_validation_exception(self):
        with pytest.raises(ValidationException):
            validate_model(Paging, "{not json")
