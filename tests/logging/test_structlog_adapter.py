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
"""Tests for StructlogAdapter and configure_logging."""

import io
import json
import logging

import pytest
import structlog

from tablefly.core.config import Config
from tablefly.logging import StructlogAdapter, configure_logging


def json_config(**levels: str) -> Config:
    return Config({"tablefly": {"logging": {"format": "json", "level": levels or {"root": "INFO"}}}})


class TestConfigure:
    def test_packaged_defaults(self):
        adapter = configure_logging()
        assert adapter.properties.format == "console"
        assert logging.getLogger().level == logging.INFO
        assert structlog.is_configured()

    def test_json_lines_carry_event_fields(self):
        stream = io.StringIO()
        configure_logging(json_config(), stream=stream)
        structlog.get_logger("tablefly.data.filters.rules").warning("filter_ignored", column="owner")
        line = json.loads(stream.getvalue().strip().splitlines()[-1])
        assert line["event"] == "filter_ignored"
        assert line["column"] == "owner"
        assert line["level"] == "warning"
        assert line["logger"] == "tablefly.data.filters.rules"
        assert "timestamp" in line

    def test_logger_levels_filter_events(self):
        stream = io.StringIO()
        configure_logging(json_config(root="INFO", **{"tablefly.data.service": "ERROR"}), stream=stream)
        structlog.get_logger("tablefly.data.service").info("page_fetched")
        structlog.get_logger("tablefly.data.relational").info("row_updated")
        events = [json.loads(line)["event"] for line in stream.getvalue().splitlines()]
        assert events == ["row_updated"]
        assert logging.getLogger("tablefly.data.service").level == logging.ERROR

    def test_module_loggers_follow_reconfiguration(self):
        logger = structlog.get_logger("tablefly.test.reconfigured")
        first, second = io.StringIO(), io.StringIO()
        configure_logging(json_config(), stream=first)
        logger.warning("one")
        configure_logging(json_config(), stream=second)
        logger.warning("two")
        assert json.loads(first.getvalue())["event"] == "one"
        assert json.loads(second.getvalue())["event"] == "two"

    def test_invalid_section_is_rejected(self):
        with pytest.raises(ValueError, match="LoggingProperties"):
            StructlogAdapter().configure(Config({"tablefly": {"logging": {"format": "xml"}}}))
