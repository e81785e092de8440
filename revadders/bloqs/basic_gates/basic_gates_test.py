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

import itertools

import cirq
import pytest

from revadders import DecomposeTypeError
from revadders.bloqs.basic_gates import CNOT, Toffoli, XGate


def test_cnot_classical():
    for c, t in itertools.product([0, 1], repeat=2):
        assert CNOT().call_classically(ctrl=c, target=t) == (c, c ^ t)


def test_toffoli_classical():
    for c0, c1, t in itertools.product([0, 1], repeat=3):
        ctrl = c0 | (c1 << 1)
        assert Toffoli().call_classically(ctrl=ctrl, target=t) == (ctrl, t ^ (c0 & c1))


def test_x_classical():
    assert XGate().call_classically(q=0) == (1,)
    assert XGate().call_classically(q=1) == (0,)


@pytest.mark.parametrize('gate', [XGate(), CNOT(), Toffoli()])
def test_self_inverse(gate):
    assert gate.adjoint() == gate
    assert gate**-1 == gate
    with pytest.raises(DecomposeTypeError):
        gate.decompose_bloq()


def test_gate_sizes():
    assert cirq.num_qubits(XGate()) == 1
    assert cirq.num_qubits(CNOT()) == 2
    assert cirq.num_qubits(Toffoli()) == 3


def test_classical_range_checks():
    with pytest.raises(ValueError, match='out of range'):
        CNOT().call_classically(ctrl=2, target=0)
    with pytest.raises(ValueError, match='Missing input'):
        CNOT().call_classically(ctrl=1)


def test_diagrams():
    a, b, c = cirq.LineQubit.range(3)
    circuit = cirq.Circuit(XGate().on(a), CNOT().on(a, b), Toffoli().on(a, b, c))
    cirq.testing.assert_has_diagram(
        circuit,
        """
0: ───X───@───@───
          │   │
1: ───────X───@───
              │
2: ───────────X───
""",
    )
