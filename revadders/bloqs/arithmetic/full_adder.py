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
from typing import Dict, Iterator, TYPE_CHECKING

import cirq
from attrs import frozen
from numpy.typing import NDArray

from revadders import GateWithRegisters, Register, Side, Signature
from revadders.bloqs.basic_gates import CNOT
from revadders.bloqs.mcmt import And

if TYPE_CHECKING:
    from revadders.resource_counting import BloqCountDictT, SympySymbolAllocator


@frozen
class FullAdder(GateWithRegisters):
    r"""A one-bit adder that writes its carry into a fresh bit.

    The construction is the six-gate sequence

        y ^= x;  c ^= x;  c_out = y & c;  y ^= x;  c_out ^= x;  c ^= y

    after which `carry_in` holds the sum bit $x \oplus y \oplus c$ and `carry_out` holds
    the majority $\mathrm{maj}(x, y, c)$. The operands `x` and `y` are unchanged. The only
    non-Clifford cost is a single `And`.

    Registers:
        carry_in: The incoming carry. Replaced by the sum bit.
        x: The first operand bit.
        y: The second operand bit.
        carry_out [right]: The outgoing carry, written into a fresh bit.

    References:
        [Halving the cost of quantum addition](https://arxiv.org/abs/1709.06648).
            Gidney, C. 2018.
    """

    @cached_property
    def signature(self) -> Signature:
        return Signature(
            [
                Register('carry_in', 1),
                Register('x', 1),
                Register('y', 1),
                Register('carry_out', 1, side=Side.RIGHT),
            ]
        )

    def decompose_from_registers(
        self, *, context: cirq.DecompositionContext, **quregs: NDArray[cirq.Qid]  # type: ignore[type-var]
    ) -> Iterator[cirq.OP_TREE]:
        (c,), (x,), (y,), (c_out,) = (
            quregs['carry_in'],
            quregs['x'],
            quregs['y'],
            quregs['carry_out'],
        )
        yield CNOT().on(x, y)
        yield CNOT().on(x, c)
        yield And().on(y, c, c_out)
        yield CNOT().on(x, y)
        yield CNOT().on(x, c_out)
        yield CNOT().on(y, c)

    def build_call_graph(self, ssa: 'SympySymbolAllocator') -> 'BloqCountDictT':
        return {And(): 1, CNOT(): 5}

    def on_classical_vals(self, carry_in: int, x: int, y: int) -> Dict[str, int]:
        s = carry_in + x + y
        return {'carry_in': s % 2, 'x': x, 'y': y, 'carry_out': s // 2}

    def _circuit_diagram_info_(self, args: cirq.CircuitDiagramInfoArgs) -> cirq.CircuitDiagramInfo:
        return cirq.CircuitDiagramInfo(wire_symbols=('c_in', 'x', 'y', 'c_out'))
