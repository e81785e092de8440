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
from typing import Iterator

import cirq
import numpy as np
import pytest
from attrs import frozen
from numpy.typing import NDArray

from revadders import GateWithRegisters, Signature
from revadders.bloqs.arithmetic import FullAdder, RippleCarryAdder
from revadders.bloqs.basic_gates import CNOT, XGate
from revadders.bloqs.mcmt import And
from revadders.simulation.classical_sim import (
    add_ints,
    call_bloq_classically,
    format_classical_truth_table,
    get_classical_truth_table,
)


@frozen
class DirtyAuxiliary(GateWithRegisters):
    """Flips a borrowed qubit and releases it without cleaning it up."""

    @cached_property
    def signature(self) -> Signature:
        return Signature.build(q=1)

    def decompose_from_registers(
        self, *, context: cirq.DecompositionContext, q: NDArray[cirq.Qid]  # type: ignore[type-var]
    ) -> Iterator[cirq.OP_TREE]:
        (aux,) = context.qubit_manager.qalloc(1)
        yield CNOT().on(q[0], aux)
        context.qubit_manager.qfree([aux])


@frozen
class DoubleAnd(GateWithRegisters):
    """Writes into the same fresh bit twice."""

    @cached_property
    def signature(self) -> Signature:
        return Signature.build(a=1, b=1, t=1)

    def decompose_from_registers(
        self, *, context: cirq.DecompositionContext, **quregs: NDArray[cirq.Qid]  # type: ignore[type-var]
    ) -> Iterator[cirq.OP_TREE]:
        a, b, t = quregs['a'], quregs['b'], quregs['t']
        yield And().on(a[0], b[0], t[0])
        yield And().on(a[0], b[0], t[0])


def test_call_classically():
    assert XGate().call_classically(q=0) == (1,)
    assert CNOT().call_classically(ctrl=1, target=1) == (1, 0)
    assert And().call_classically(ctrl=0b11) == (0b11, 1)
    assert call_bloq_classically(FullAdder(), carry_in=1, x=1, y=0) == {
        'carry_in': 0,
        'x': 1,
        'y': 0,
        'carry_out': 1,
    }


def test_call_classically_numpy_ints():
    x, y = np.uint8(200), np.int64(100)
    assert RippleCarryAdder(8).call_classically(x=x, y=y) == (200, 100, 300)
    assert RippleCarryAdder(8).call_classically(x=np.array(3), y=5) == (3, 5, 8)


@pytest.mark.parametrize(
    'vals, match',
    [
        (dict(x=16, y=0), 'out of range'),
        (dict(x=-1, y=0), 'out of range'),
        (dict(x=1), 'Missing input for register y'),
        (dict(x=1, y=1, z=0), 'Unexpected inputs'),
        (dict(x=1.0, y=1), 'must be an integer'),
        (dict(x=True, y=1), 'must be an integer'),
        (dict(x=np.array([1, 2]), y=1), 'must be a scalar'),
    ],
)
def test_call_classically_bad_inputs(vals, match):
    with pytest.raises(ValueError, match=match):
        RippleCarryAdder(4).call_classically(**vals)


def test_dirty_auxiliary():
    assert DirtyAuxiliary().call_classically(q=0) == (0,)
    with pytest.raises(ValueError, match='not returned to zero'):
        DirtyAuxiliary().call_classically(q=1)


def test_allocating_dirty_register():
    assert DoubleAnd().call_classically(a=0, b=1, t=0) == (0, 1, 0)
    with pytest.raises(ValueError, match='allocates register target'):
        DoubleAnd().call_classically(a=1, b=1, t=0)


def test_and_uncompute_checks_target():
    with pytest.raises(AssertionError):
        And().adjoint().call_classically(ctrl=0b01, target=1)
    assert And().adjoint().call_classically(ctrl=0b11, target=1) == (0b11,)


def test_add_ints():
    assert add_ints(5, 3) == 8
    assert add_ints(5, 3, num_bits=3) == 0
    assert add_ints(255, 1, num_bits=8) == 0
    assert add_ints(2**70, 2**70) == 2**71


def test_classical_truth_table():
    in_names, out_names, truth_table = get_classical_truth_table(FullAdder())
    assert in_names == ['carry_in', 'x', 'y']
    assert out_names == ['carry_in', 'x', 'y', 'carry_out']
    assert len(truth_table) == 8
    assert truth_table[-1] == ((1, 1, 1), (1, 1, 1, 1))

    table = format_classical_truth_table(in_names, out_names, truth_table)
    lines = table.split('\n')
    assert lines[0] == 'carry_in  x  y  |  carry_in  x  y  carry_out'
    assert set(lines[1]) == {'-'}
    assert lines[2] == '0, 0, 0 -> 0, 0, 0, 0'
    assert len(lines) == 2 + 8
