#  Copyright 2023 Google LLC
#
#  Licensed under the Apache License, Version 2.0 (the "License");
#  you may not use this file except in compliance with the License.
#  You may obtain a copy of the License at
#
#      https://www.apache.org/licenses/LICENSE-2.0
#
#  Unless required by applicable law or agreed to in writing, software
#  distributed under the License is distributed on an "AS IS" BASIS,
#  WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#  See the License for the specific language governing permissions and
#  limitations under the License.

"""Counting resource usage (gates, qubits, depth) and exposing the call structure.

isort:skip_file
"""

from ._generalization import GeneralizerT

from ._call_graph import (
    BloqCountDictT,
    BloqCountT,
    big_O,
    SympySymbolAllocator,
    get_bloq_callee_counts,
    get_bloq_call_graph,
    format_call_graph_debug_text,
)

from ._costing import get_cost_value, get_cost_cache, query_costs, CostKey, CostValT

from ._qubit_counts import QubitCount
from ._bloq_counts import GateCounts, ReversibleGatesCost
from ._depth import get_circuit_depth
from ._call_tree import CallTreeNode, walk_call_tree
from ._footprint import ResourceFootprint, get_resource_footprint
