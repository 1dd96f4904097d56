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
"""Filter value model, operand coercion and the shared rule table."""

from tablefly.data.filters.model import (
    BooleanOperator,
    BooleanState,
    DateOperator,
    DateRangeOperator,
    Filter,
    FilterCategory,
    FilterState,
    LogicOperator,
    NullOperator,
    NumberOperator,
    ProgressOperator,
    SelectOperator,
    TextOperator,
    resolve_operator,
)
from tablefly.data.filters.operands import OperandError, percent_to_fraction
from tablefly.data.filters.rules import Comparison, ComparisonPort, FilterCompiler, TextMode, ValueKind

__all__ = [
    "BooleanOperator",
    "BooleanState",
    "Comparison",
    "ComparisonPort",
    "DateOperator",
    "DateRangeOperator",
    "Filter",
    "FilterCategory",
    "FilterCompiler",
    "FilterState",
    "LogicOperator",
    "NullOperator",
    "NumberOperator",
    "OperandError",
    "ProgressOperator",
    "SelectOperator",
    "TextMode",
    "TextOperator",
    "ValueKind",
    "percent_to_fraction",
    "resolve_operator",
]
