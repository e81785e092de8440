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

from revadders.bloqs.arithmetic import (
    CarryLookaheadAdder,
    CarryLookaheadAdderProgram,
    ComputeCarries,
    FullAdder,
    PRounds,
    RippleCarryAdder,
    RippleCarryAdderProgram,
)
from revadders.bloqs.basic_gates import CNOT
from revadders.bloqs.mcmt import And
from revadders.resource_counting import get_cost_value, QubitCount
from revadders.resource_counting._qubit_counts import _auxiliary_liveness, _cbloq_max_width


def test_auxiliary_liveness():
    a, b, c, d = cirq.LineQubit.range(4)
    ops = [CNOT().on(a, b), CNOT().on(a, c), CNOT().on(c, d), CNOT().on(a, b)]
    assert _auxiliary_liveness(ops, [a, b]) == [0, 1, 2, 0]
    assert _auxiliary_liveness([], [a]) == []


def test_cbloq_max_width():
    cbloq = ComputeCarries(8).decompose_bloq()
    assert _cbloq_max_width(cbloq, lambda b: get_cost_value(b, QubitCount())) == 15 + 4
    # Without callee widths only the parent registers are counted.
    assert _cbloq_max_width(cbloq) == 15
    assert _cbloq_max_width(FullAdder().decompose_bloq()) == 4


def test_atoms():
    assert get_cost_value(CNOT(), QubitCount()) == 2
    assert get_cost_value(And(), QubitCount()) == 3
    assert get_cost_value(And().adjoint(), QubitCount()) == 3


@pytest.mark.parametrize('n', [1, 2, 8, 15])
def test_ripple_carry_adder_qubit_counts(n):
    assert get_cost_value(RippleCarryAdder(n), QubitCount()) == 3 * n + 1
    assert get_cost_value(RippleCarryAdder(n, carry_out=False), QubitCount()) == 3 * n
    assert get_cost_value(RippleCarryAdderProgram(n), QubitCount()) == 3 * n + 1


@pytest.mark.parametrize('n, workspace', [(1, 0), (3, 0), (4, 1), (8, 4), (10, 5), (16, 11)])
def test_carry_lookahead_adder_qubit_counts(n, workspace):
    assert get_cost_value(PRounds(n), QubitCount()) == n - 1 + workspace
    assert get_cost_value(CarryLookaheadAdder(n), QubitCount()) == 3 * n + 1 + workspace
    assert get_cost_value(CarryLookaheadAdderProgram(n), QubitCount()) == 3 * n + 1 + workspace


def test_carry_lookahead_adder_no_carry_qubit_counts():
    # The carry network is sized for the lower `n - 1` bits.
    assert get_cost_value(CarryLookaheadAdder(9, carry_out=False), QubitCount()) == 27 + 4


def test_symbolic_falls_back_to_signature():
    n = sympy.Symbol('n', positive=True, integer=True)
    assert get_cost_value(RippleCarryAdder(n), QubitCount()) == 3 * n + 1
    assert str(QubitCount()) == 'qubit count'
    assert QubitCount().zero() == 0
