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

"""The decomposition of a bloq into a sequence of operations."""

import logging
from collections import defaultdict
from typing import Dict, FrozenSet, List, Optional, Sequence, Tuple, TYPE_CHECKING

import cirq
from numpy.typing import NDArray

from revadders._infra.bloq import Bloq, DecomposeNotImplementedError, DecomposeTypeError
from revadders._infra.gate_with_registers import get_named_qubits, merge_qubits, split_qubits
from revadders._infra.registers import Signature

if TYPE_CHECKING:
    from revadders.resource_counting import BloqCountDictT, SympySymbolAllocator
    from revadders.simulation.classical_sim import ClassicalValT

logger = logging.getLogger(__name__)


def bloq_of(op: cirq.Operation) -> Bloq:
    """The bloq applied by a Cirq operation.

    Raises:
        TypeError: If the operation's gate is not a `Bloq`.
    """
    gate = getattr(op, 'gate', None)
    if not isinstance(gate, Bloq):
        raise TypeError(f"Operation {op} is not an application of a Bloq.")
    return gate


def decompose_operation(
    op: cirq.Operation, context: cirq.DecompositionContext
) -> List[cirq.Operation]:
    """Decompose one application of a bloq into the operations of its decomposition.

    Raises:
        DecomposeTypeError: If the bloq is atomic or symbolic.
        DecomposeNotImplementedError: If the bloq has no decomposition.
    """
    bloq = bloq_of(op)
    quregs = split_qubits(bloq.signature, op.qubits)
    return list(cirq.flatten_to_ops(bloq.decompose_from_registers(context=context, **quregs)))


class CompositeBloq:
    """One level of a bloq's decomposition: a sequence of operations on named qubits.

    The parent bloq is applied to qubits named after its registers (see `get_named_qubits`).
    Any other qubit touched by `operations` is an auxiliary qubit that was obtained from
    the qubit manager of `context`.

    Args:
        bloq: The bloq that was decomposed.
        quregs: The qubits for each of the parent bloq's registers.
        operations: The operations, in order of application.
        context: The decomposition context used to allocate auxiliary qubits. Further
            decompositions (for example, `flatten`) reuse it so qubits stay distinct.
    """

    def __init__(
        self,
        bloq: Bloq,
        quregs: Dict[str, NDArray[cirq.Qid]],
        operations: Sequence[cirq.Operation],
        context: cirq.DecompositionContext,
    ):
        self.bloq = bloq
        self.quregs = quregs
        self.operations: Tuple[cirq.Operation, ...] = tuple(operations)
        self.context = context

    @classmethod
    def from_bloq(
        cls, bloq: Bloq, context: Optional[cirq.DecompositionContext] = None
    ) -> 'CompositeBloq':
        if context is None:
            context = cirq.DecompositionContext(cirq.SimpleQubitManager())
        if any(reg.is_symbolic() for reg in bloq.signature):
            raise DecomposeTypeError(f"Cannot decompose {bloq}: it has a symbolic bitsize.")
        quregs = get_named_qubits(bloq.signature)
        ops = list(cirq.flatten_to_ops(bloq.decompose_from_registers(context=context, **quregs)))
        for op in ops:
            bloq_of(op)
        logger.debug("Decomposed %s into %d operations", bloq, len(ops))
        return cls(bloq=bloq, quregs=quregs, operations=ops, context=context)

    @property
    def signature(self) -> Signature:
        return self.bloq.signature

    @property
    def bloq_instances(self) -> List[Bloq]:
        """The bloq applied by each operation, in order."""
        return [bloq_of(op) for op in self.operations]

    @property
    def signature_qubits(self) -> List[cirq.Qid]:
        return merge_qubits(self.signature, **self.quregs)

    def auxiliary_qubits(self) -> FrozenSet[cirq.Qid]:
        """Qubits used by the operations that do not belong to the parent's registers."""
        mine = frozenset(self.signature_qubits)
        return frozenset(q for op in self.operations for q in op.qubits if q not in mine)

    def build_call_graph(self, ssa: 'SympySymbolAllocator') -> 'BloqCountDictT':
        counts: Dict[Bloq, int] = defaultdict(lambda: 0)
        for bloq in self.bloq_instances:
            counts[bloq] += 1
        return dict(counts)

    def flatten(self) -> 'CompositeBloq':
        """Recursively decompose every operation until only atomic bloqs remain."""
        flat: List[cirq.Operation] = []
        stack = list(reversed(self.operations))
        while stack:
            op = stack.pop()
            try:
                sub_ops = decompose_operation(op, self.context)
            except (DecomposeTypeError, DecomposeNotImplementedError):
                flat.append(op)
                continue
            stack.extend(reversed(sub_ops))
        return CompositeBloq(
            bloq=self.bloq, quregs=self.quregs, operations=flat, context=self.context
        )

    def to_cirq_circuit(self) -> cirq.Circuit:
        return cirq.Circuit(self.operations)

    def on_classical_vals(self, **vals: 'ClassicalValT') -> Dict[str, 'ClassicalValT']:
        from revadders.simulation.classical_sim import simulate_composite_bloq

        return simulate_composite_bloq(self, **vals)

    def __len__(self) -> int:
        return len(self.operations)

    def __repr__(self):
        return f'CompositeBloq({self.bloq!r}, {len(self.operations)} operations)'
