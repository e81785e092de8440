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

from functools import cached_property
from typing import Dict, TYPE_CHECKING

import cirq
from attrs import frozen
from numpy.typing import NDArray

from revadders import Bloq, DecomposeTypeError, GateWithRegisters, Signature

if TYPE_CHECKING:
    from revadders.simulation.classical_sim import ClassicalValT


@frozen
class CNOT(GateWithRegisters):
    """`target ^= ctrl`. Its own inverse.

    Copies bits into fresh zeroed registers, and merges propagate bits in the adders.
    """

    @cached_property
    def signature(self) -> 'Signature':
        return Signature.build(ctrl=1, target=1)

    def decompose_from_registers(
        self, *, context: cirq.DecompositionContext, **quregs: NDArray[cirq.Qid]
    ) -> cirq.OP_TREE:
        raise DecomposeTypeError(f"{self} is an elementary gate.")

    def adjoint(self) -> 'Bloq':
        return self

    def on_classical_vals(self, ctrl: int, target: int) -> Dict[str, 'ClassicalValT']:
        return {'ctrl': ctrl, 'target': ctrl ^ target}

    def _circuit_diagram_info_(self, args: cirq.CircuitDiagramInfoArgs) -> cirq.CircuitDiagramInfo:
        return cirq.CircuitDiagramInfo(wire_symbols=('@', 'X'))
