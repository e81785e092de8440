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

from revadders.bloqs.arithmetic import FullAdder
from revadders.bloqs.basic_gates import CNOT
from revadders.bloqs.mcmt import And
from revadders.simulation.classical_sim import (
    format_classical_truth_table,
    get_classical_truth_table,
)
from revadders.testing import (
    assert_adjoint_round_trip,
    assert_consistent_classical_action,
    assert_equivalent_bloq_counts,
    assert_valid_bloq_decomposition,
    GateHelper,
)


def test_full_adder_decomposition():
    cbloq = assert_valid_bloq_decomposition(FullAdder())
    c, x, y, c_out = cbloq.signature_qubits
    assert list(cbloq.operations) == [
        CNOT().on(x, y),
        CNOT().on(x, c),
        And().on(y, c, c_out),
        CNOT().on(x, y),
        CNOT().on(x, c_out),
        CNOT().on(y, c),
    ]
    assert_equivalent_bloq_counts(FullAdder())


def test_full_adder_truth_table():
    in_names, out_names, truth_table = get_classical_truth_table(FullAdder())
    assert in_names == ['carry_in', 'x', 'y']
    assert out_names == ['carry_in', 'x', 'y', 'carry_out']
    assert len(truth_table) == 8
    for (c, x, y), (s, x_out, y_out, c_out) in truth_table:
        assert (x_out, y_out) == (x, y)
        assert s == c ^ x ^ y
        assert c_out == int(c + x + y >= 2)

    table = format_classical_truth_table(in_names, out_names, truth_table)
    assert table.splitlines()[3] == '0, 0, 1 -> 1, 0, 1, 0'


def test_full_adder_consistent_classical_action():
    assert_consistent_classical_action(FullAdder(), carry_in=range(2), x=range(2), y=range(2))


def test_full_adder_round_trip():
    for c in range(2):
        for x in range(2):
            for y in range(2):
                assert_adjoint_round_trip(FullAdder(), carry_in=c, x=x, y=y)


def test_full_adder_diagram():
    g = GateHelper(FullAdder())
    cirq.testing.assert_has_diagram(
        g.circuit,
        """
carry_in: ────c_in────
              │
carry_out: ───c_out───
              │
x: ───────────x───────
              │
y: ───────────y───────
""",
    )
    # The last two CNOTs act on disjoint qubits and share a moment.
    assert len(g.decomposed_circuit) == 5
    assert len(list(g.decomposed_circuit.all_operations())) == 6
