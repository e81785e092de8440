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
"""Logical AND of two bits into a freshly allocated bit, and its uncomputation."""
from functools import cached_property
from typing import Dict, Optional

import attrs
import cirq
from attrs import frozen
from numpy.typing import NDArray

from revadders import DecomposeTypeError, GateWithRegisters, Register, Side, Signature
from revadders.simulation.classical_sim import ClassicalValT


@frozen
class And(GateWithRegisters):
    """Writes the AND of two control bits into a new target bit.

    Unlike `Toffoli`, the target is not an input: it is allocated in the zero state and set
    to the result. The adjoint (`uncompute=True`) takes the target back, which is only
    valid while the target still equals the AND of the controls. Every generate bit and
    every generalized propagate bit of the carry-lookahead adder is computed this way, as is
    every carry of the ripple-carry adder. The base propagate bits are CNOTs into `y`.

    A control value of 0 makes that control active on the zero state.

    Args:
        cv1: Active value of the low control bit.
        cv2: Active value of the high control bit.
        uncompute: Whether this is the adjoint, which consumes the target.

    Registers:
        ctrl: The two control bits, low bit first.
        target [right]: The result. A left register when `uncompute` is set.

    References:
        [Halving the cost of quantum addition](https://arxiv.org/abs/1709.06648).
            Gidney, C. 2018.
    """

    cv1: int = 1
    cv2: int = 1
    uncompute: bool = False

    @cached_property
    def signature(self) -> Signature:
        target_side = Side.LEFT if self.uncompute else Side.RIGHT
        return Signature([Register('ctrl', 2), Register('target', 1, side=target_side)])

    def adjoint(self) -> 'And':
        return attrs.evolve(self, uncompute=not self.uncompute)

    def decompose_from_registers(
        self, *, context: cirq.DecompositionContext, **quregs: NDArray[cirq.Qid]
    ) -> cirq.OP_TREE:
        raise DecomposeTypeError(f"{self} is an elementary gate.")

    def _and(self, ctrl: int) -> int:
        return int((ctrl & 1) == self.cv1 and (ctrl >> 1) == self.cv2)

    def on_classical_vals(
        self, *, ctrl: int, target: Optional[int] = None
    ) -> Dict[str, ClassicalValT]:
        result = self._and(ctrl)
        if self.uncompute:
            assert target == result, f"{self} needs target={result} to uncompute, got {target}."
            return {'ctrl': ctrl}
        return {'ctrl': ctrl, 'target': result}

    def pretty_name(self) -> str:
        return str(self)

    def __str__(self):
        return 'And†' if self.uncompute else 'And'

    def _circuit_diagram_info_(self, args: cirq.CircuitDiagramInfoArgs) -> cirq.CircuitDiagramInfo:
        controls = tuple('@' if cv else '(0)' for cv in (self.cv1, self.cv2))
        return cirq.CircuitDiagramInfo(wire_symbols=controls + (str(self),))
