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
"""In-memory (client-mode) adapter: predicate evaluation over row snapshots."""

from tablefly.data.memory.comparisons import InMemoryComparisons, RowPredicate
from tablefly.data.memory.evaluator import PredicateEvaluator, evaluate_row
from tablefly.data.memory.specification import RowSpecification
from tablefly.data.memory.table import InMemoryTable, scope_to_tenant

__all__ = [
    "InMemoryComparisons",
    "InMemoryTable",
    "PredicateEvaluator",
    "RowPredicate",
    "RowSpecification",
    "evaluate_row",
    "scope_to_tenant",
]
