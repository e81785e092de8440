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

import logging
from typing import Optional, Sequence, TYPE_CHECKING, Union

from attrs import frozen

from revadders._infra.gate_with_registers import total_bits
from revadders.symbolics import SymbolicInt

from ._bloq_counts import GateCounts, ReversibleGatesCost
from ._costing import get_cost_value
from ._depth import get_circuit_depth
from ._qubit_counts import QubitCount

if TYPE_CHECKING:
    from revadders import Bloq

    from ._generalization import GeneralizerT

logger = logging.getLogger(__name__)


def _data_qubit_count(bloq: 'Bloq') -> SymbolicInt:
    from revadders.bloqs.arithmetic import AdderProgram

    if isinstance(bloq, AdderProgram):
        return bloq.data_qubit_count()
    return total_bits(bloq.signature)


@frozen
class ResourceFootprint:
    """The numeric summary of a circuit consumed by external cost models.

    Args:
        gate_counts: The number of each elementary gate.
        qubit_count: The maximum number of qubits simultaneously in use.
        auxiliary_qubit_count: The maximum number of auxiliary qubits simultaneously in use.
            These are the qubits beyond the bloq's own registers, or for an adder program
            beyond the `x`, `y` and `z` registers it allocates. This is the adder workspace.
        depth: The number of moments in the fully decomposed circuit.
    """

    gate_counts: GateCounts
    qubit_count: SymbolicInt
    auxiliary_qubit_count: SymbolicInt
    depth: int


def get_resource_footprint(
    bloq: 'Bloq',
    generalizer: Optional[Union['GeneralizerT', Sequence['GeneralizerT']]] = None,
) -> ResourceFootprint:
    """Compute the gate counts, width and depth of `bloq`.

    Args:
        bloq: The bloq, typically an adder or adder program with concrete bitsizes.
        generalizer: Passed on to the gate-count and qubit-count computations.
    """
    gate_counts = get_cost_value(bloq, ReversibleGatesCost(), generalizer=generalizer)
    qubit_count = get_cost_value(bloq, QubitCount(), generalizer=generalizer)
    depth = get_circuit_depth(bloq)
    logger.debug("Footprint of %s: %s, %s qubits, depth %d", bloq, gate_counts, qubit_count, depth)
    return ResourceFootprint(
        gate_counts=gate_counts,
        qubit_count=qubit_count,
        auxiliary_qubit_count=qubit_count - _data_qubit_count(bloq),
        depth=depth,
    )
