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

import cirq
import pytest
import sympy

from revadders import CompositeBloq, DecomposeTypeError
from revadders._infra.composite_bloq import bloq_of
from revadders.bloqs.arithmetic import ComputeCarries, FullAdder, RippleCarryAdder
from revadders.bloqs.basic_gates import CNOT, Toffoli
from revadders.bloqs.mcmt import And
from revadders.resource_counting import SympySymbolAllocator


def test_from_bloq():
    cbloq = FullAdder().decompose_bloq()
    assert isinstance(cbloq, CompositeBloq)
    assert len(cbloq) == 6
    assert cbloq.bloq_instances == [CNOT(), CNOT(), And(), CNOT(), CNOT(), CNOT()]
    assert cbloq.signature == FullAdder().signature
    assert [q.name for q in cbloq.signature_qubits] == ['carry_in', 'x', 'y', 'carry_out']
    assert not cbloq.auxiliary_qubits()


def test_atomic_bloq_does_not_decompose():
    with pytest.raises(DecomposeTypeError):
        CNOT().decompose_bloq()


def test_symbolic_bloq_does_not_decompose():
    n = sympy.Symbol('n', positive=True, integer=True)
    with pytest.raises(DecomposeTypeError, match='symbolic bitsize'):
        RippleCarryAdder(n).decompose_bloq()
    with pytest.raises(DecomposeTypeError):
        RippleCarryAdder(n).adjoint().decompose_bloq()


def test_bloq_of():
    q = cirq.LineQubit(0)
    assert bloq_of(CNOT().on(q, cirq.LineQubit(1))) == CNOT()
    with pytest.raises(TypeError):
        bloq_of(cirq.X(q))


def test_build_call_graph():
    cbloq = RippleCarryAdder(3, carry_out=False).decompose_bloq()
    assert cbloq.build_call_graph(SympySymbolAllocator()) == {FullAdder(): 2, CNOT(): 2}


def test_flatten():
    cbloq = RippleCarryAdder(3).decompose_bloq()
    flat = cbloq.flatten()
    assert len(flat) == 18
    assert set(flat.bloq_instances) == {CNOT(), And()}
    assert flat.quregs is cbloq.quregs


def test_flatten_allocates_workspace():
    cbloq = ComputeCarries(8).decompose_bloq()
    flat = cbloq.flatten()
    # Four pyramid bits, computed and uncomputed.
    assert len(flat.auxiliary_qubits()) == 4
    assert flat.bloq_instances.count(And()) == 4
    assert flat.bloq_instances.count(And(uncompute=True)) == 4
    assert set(flat.bloq_instances) == {And(), And(uncompute=True), Toffoli()}

    circuit = flat.to_cirq_circuit()
    assert isinstance(circuit, cirq.Circuit)
    assert len(list(circuit.all_operations())) == len(flat)


def test_repr():
    assert repr(FullAdder().decompose_bloq()) == 'CompositeBloq(FullAdder(), 6 operations)'
