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
from collections import Counter
from functools import cached_property
from typing import TYPE_CHECKING

import cirq
from attrs import frozen
from numpy.typing import NDArray

from .bloq import Bloq
from .gate_with_registers import GateWithRegisters

if TYPE_CHECKING:
    from revadders import Signature
    from revadders.resource_counting import BloqCountDictT, SympySymbolAllocator


@frozen
class Adjoint(GateWithRegisters):
    """Runs `subbloq` backwards.

    Obtain one with `bloq.adjoint()` rather than constructing it. Elementary gates override
    `adjoint()` and never end up wrapped.

    Left and right registers of `subbloq` swap roles, so the adjoint of an adder consumes its
    output register. The decomposition replays the operations of `subbloq` in reverse order,
    each inverted, and the call graph inverts every callee. Classical simulation always goes
    through that reversed decomposition.

    Args:
        subbloq: The bloq to invert.
    """

    subbloq: Bloq

    @cached_property
    def signature(self) -> 'Signature':
        return self.subbloq.signature.adjoint()

    def decompose_from_registers(
        self, *, context: cirq.DecompositionContext, **quregs: NDArray[cirq.Qid]
    ) -> cirq.OP_TREE:
        forward = self.subbloq.decompose_from_registers(context=context, **quregs)
        return cirq.inverse(list(cirq.flatten_to_ops(forward)))

    def adjoint(self) -> 'Bloq':
        return self.subbloq

    def build_call_graph(self, ssa: 'SympySymbolAllocator') -> 'BloqCountDictT':
        inverted = Counter['Bloq']()
        for callee, n in self.subbloq.build_call_graph(ssa=ssa).items():
            inverted[callee.adjoint()] += n
        return dict(inverted)

    def pretty_name(self) -> str:
        return f'{self.subbloq.pretty_name()}†'

    def __str__(self) -> str:
        return f'Adjoint(subbloq={self.subbloq})'
