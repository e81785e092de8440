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

"""Helpers for testing bloqs."""
import itertools
from dataclasses import dataclass
from functools import cached_property
from typing import Dict, List, Mapping, Sequence, Union

import cirq
from numpy.typing import NDArray

from revadders import Bloq, CompositeBloq
from revadders._infra.composite_bloq import bloq_of
from revadders._infra.gate_with_registers import (
    get_named_qubits,
    GateWithRegisters,
    merge_qubits,
    total_bits,
)
from revadders.resource_counting import (
    get_bloq_callee_counts,
    GeneralizerT,
    SympySymbolAllocator,
)
from revadders.simulation.classical_sim import ClassicalValT


@dataclass(frozen=True)
class GateHelper:
    """Named qubits, the operation and its circuits for one gate, built on demand.

    Attributes:
        gate: The gate under test.
    """

    gate: GateWithRegisters

    @cached_property
    def quregs(self) -> Dict[str, NDArray[cirq.Qid]]:  # type: ignore[type-var]
        """Qubits named after the gate's registers."""
        return get_named_qubits(self.gate.signature)

    @cached_property
    def all_qubits(self) -> List[cirq.Qid]:
        """Register qubits in signature order, then the sorted auxiliary qubits."""
        register_qubits = merge_qubits(self.gate.signature, **self.quregs)
        aux = self.decomposed_circuit.all_qubits() - frozenset(register_qubits)
        return register_qubits + sorted(aux)

    @cached_property
    def operation(self) -> cirq.Operation:
        return self.gate.on_registers(**self.quregs)

    @cached_property
    def circuit(self) -> cirq.Circuit:
        return cirq.Circuit(self.operation)

    @cached_property
    def decomposed_circuit(self) -> cirq.Circuit:
        """`circuit` with every operation decomposed down to elementary gates."""
        return cirq.Circuit(cirq.decompose(self.operation))


def assert_valid_bloq_decomposition(bloq: Bloq) -> CompositeBloq:
    """Decompose `bloq` once and check the result is well formed.

    Register qubits must be distinct, every operation must act on as many qubits as its
    bloq's signature needs, and auxiliary qubits must not overlap the registers. The
    arithmetic is not checked; use the classical simulation helpers for that.

    Returns:
        The decomposition, for further checks.
    """
    cbloq = bloq.decompose_bloq()
    mine = frozenset(cbloq.signature_qubits)
    assert len(mine) == total_bits(bloq.signature), "Register qubits are not distinct."
    for op in cbloq.operations:
        callee = bloq_of(op)
        assert len(op.qubits) == total_bits(callee.signature), f'{op} does not match {callee}.'
    assert not (cbloq.auxiliary_qubits() & mine)
    return cbloq


def assert_equivalent_bloq_counts(
    bloq: Bloq, generalizer: Union[GeneralizerT, Sequence[GeneralizerT]] = lambda x: x
) -> None:
    """Compare the closed-form callee counts of `bloq` against its decomposition.

    `bloq` must override `build_call_graph`.
    """
    # The default `build_call_graph` reads the decomposition, which would compare it to itself.
    assert not type(bloq).build_call_graph.__qualname__.startswith(
        'Bloq.'
    ), f'{bloq} has no bloq count annotation.'
    manual_counts = dict(get_bloq_callee_counts(bloq, generalizer=generalizer))

    decomp_counts: Dict[Bloq, int] = {}
    for callee, n in bloq.decompose_bloq().build_call_graph(SympySymbolAllocator()).items():
        decomp_counts[callee] = decomp_counts.get(callee, 0) + n

    assert manual_counts == decomp_counts, (
        f'{bloq} does not have equivalent bloq counts.\n'
        f'Annotation: {sorted(manual_counts.items(), key=str)}\n'
        f'Decomp:     {sorted(decomp_counts.items(), key=str)}'
    )


def assert_circuit_inp_out_classical(
    bloq: Bloq, inputs: Mapping[str, ClassicalValT], outputs: Mapping[str, ClassicalValT]
) -> None:
    """Check by classical simulation that `bloq` maps `inputs` to `outputs`.

    Args:
        bloq: The classical-reversible bloq.
        inputs: A value for each left (or thru) register.
        outputs: The expected value for each right (or thru) register.
    """
    names = [reg.name for reg in bloq.signature.rights()]
    actual = dict(zip(names, bloq.call_classically(**inputs)))
    assert actual == dict(outputs), f'{bloq}: {dict(inputs)} -> {actual}, expected {dict(outputs)}'


def assert_adjoint_round_trip(bloq: Bloq, **vals: ClassicalValT) -> Dict[str, ClassicalValT]:
    """Run `bloq` forwards and then its adjoint, and check that the inputs are restored.

    Returns:
        The intermediate outputs of the forward pass, keyed by register name.
    """
    out_names = [reg.name for reg in bloq.signature.rights()]
    outputs = dict(zip(out_names, bloq.call_classically(**vals)))

    adjoint = bloq.adjoint()
    in_names = [reg.name for reg in adjoint.signature.rights()]
    restored = dict(zip(in_names, adjoint.call_classically(**outputs)))
    assert restored == {k: int(v) for k, v in vals.items()}, f'{bloq}: {vals} -> {restored}'
    return outputs


def assert_consistent_classical_action(bloq: Bloq, **parameter_ranges: Sequence[int]) -> None:
    """Compare `bloq.on_classical_vals` with simulating its decomposition, on every input.

    Args:
        bloq: A bloq that overrides `on_classical_vals`.
        **parameter_ranges: The values to try for each left register.
    """
    cbloq = bloq.decompose_bloq()
    names = list(parameter_ranges)
    for vals in itertools.product(*parameter_ranges.values()):
        inputs = dict(zip(names, vals))
        direct = bloq.on_classical_vals(**inputs)
        simulated = cbloq.on_classical_vals(**inputs)
        assert direct == simulated, f'{bloq} on {inputs}: {direct} != {simulated}'
