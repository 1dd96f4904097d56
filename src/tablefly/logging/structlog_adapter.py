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
"""StructlogAdapter: render engine log events through structlog.

Engine modules log through module-level ``structlog.get_logger(__name__)``
proxies: ``filter_ignored``, ``degraded_match``, ``version_conflict`` and
the rest. The adapter decides how those events are rendered, configured
from the ``tablefly.logging`` section::

    tablefly:
      logging:
        format: json
        level:
          root: INFO
          tablefly.data.filters.rules: ERROR
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog

from tablefly.config.properties.logging import LoggingProperties
from tablefly.core.config import Config

_PROCESSORS: list[structlog.types.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.filter_by_level,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.format_exc_info,
]


class StructlogAdapter:
    """Route structlog events to a stdlib stream handler.

    Args:
        stream: Destination of rendered lines; ``sys.stdout`` when omitted.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream
        self.properties = LoggingProperties()

    def configure(self, config: Config) -> LoggingProperties:
        """Bind ``tablefly.logging`` and install the processors and levels.

        Raises:
            ValueError: If the section names an unknown format or level.
        """
        self.properties = config.bind(LoggingProperties)
        renderer: structlog.types.Processor = (
            structlog.processors.JSONRenderer()
            if self.properties.format == "json"
            else structlog.dev.ConsoleRenderer(colors=False)
        )
        structlog.configure(
            processors=[*_PROCESSORS, renderer],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            # Module-level proxies must follow a later reconfiguration.
            cache_logger_on_first_use=False,
        )
        logging.basicConfig(
            format="%(message)s",
            stream=self._stream or sys.stdout,
            level=self.properties.root_level,
            force=True,
        )
        for name, level in self.properties.logger_levels.items():
            logging.getLogger(name).setLevel(level)
        return self.properties
