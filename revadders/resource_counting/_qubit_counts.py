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
from typing import Callable, Dict, List, Sequence, TYPE_CHECKING

import cirq
from attrs import frozen

from revadders import CompositeBloq, DecomposeNotImplementedError, DecomposeTypeError
from revadders._infra.composite_bloq import bloq_of
from revadders._infra.gate_with_registers import total_bits
from revadders.symbolics import smax, SymbolicInt

from ._costing import CostKey

if TYPE_CHECKING:
    from revadders import Bloq

logger = logging.getLogger(__name__)


def _auxiliary_liveness(
    operations: Sequence[cirq.Operation], signature_qubits: Sequence[cirq.Qid]
) -> List[int]:
    """The number of auxiliary qubits in use during each operation.

    An auxiliary qubit is in use from the first operation that touches it through the last.
    """
    mine = set(signature_qubits)
    first: Dict[cirq.Qid, int] = {}
    last: Dict[cirq.Qid, int] = {}
    for i, op in enumerate(operations):
        for q in op.qubits:
            if q in mine:
                continue
            first.setdefault(q, i)
            last[q] = i

    delta = [0] * (len(operations) + 1)
    for q, i in first.items():
        delta[i] += 1
        delta[last[q] + 1] -= 1

    live: List[int] = []
    n_live = 0
    for d in delta[:-1]:
        n_live += d
        live.append(n_live)
    return live


def _cbloq_max_width(
    cbloq: CompositeBloq, _bloq_max_width: Callable[['Bloq'], SymbolicInt] = lambda b: 0
) -> SymbolicInt:
    """Get the maximum width of one level of a decomposition.

    The operations are treated in series. The width during an operation is the number of
    qubits in the parent's registers, plus the auxiliary qubits in use at that point, plus
    any qubits the operation needs beyond its own registers (provided by `_bloq_max_width`).
    """
    n_sig = len(cbloq.signature_qubits)
    live = _auxiliary_liveness(cbloq.operations, cbloq.signature_qubits)
    max_width: SymbolicInt = n_sig
    for op, n_live in zip(cbloq.operations, live):
        callee = bloq_of(op)
        extra = _bloq_max_width(callee) - total_bits(callee.signature)
        max_width = smax(max_width, n_sig + n_live + extra)
    return max_width


@frozen
class QubitCount(CostKey[SymbolicInt]):
    """The maximum number of qubits simultaneously in use while running a bloq.

    If a bloq has no decomposition, the size implied by its signature is returned. Otherwise,
    the width is computed from one level of the decomposition: the operations run in series,
    auxiliary qubits obtained from the qubit manager occupy space from their first to their
    last use, and each callee contributes its own extra width (computed recursively).

    For the carry-lookahead adder this reproduces the signature width plus the carry-network
    workspace, $n - w(n) - \\lfloor \\log_2 n \\rfloor$.
    """

    def compute(
        self, bloq: 'Bloq', get_callee_cost: Callable[['Bloq'], SymbolicInt]
    ) -> SymbolicInt:
        """Compute the number of qubits used by `bloq`.

        See the class docstring for more information.
        """
        try:
            cbloq = bloq.decompose_bloq()
            logger.info("Computing %s for %s from its decomposition", self, bloq)
            return _cbloq_max_width(cbloq, get_callee_cost)
        except (DecomposeNotImplementedError, DecomposeTypeError):
            pass
        except Exception as e:
            raise RuntimeError(
                f"An unexpected error occurred when trying to compute {self} for {bloq}: {e}"
            ) from e

        # Fallback: the number of qubits implied by the signature.
        return bloq.signature.n_qubits()

    def zero(self) -> SymbolicInt:
        """Zero cost is zero qubits."""
        return 0

    def __str__(self):
        return 'qubit count'
