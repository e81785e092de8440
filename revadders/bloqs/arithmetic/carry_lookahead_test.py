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
import numpy as np
import pytest

from revadders import ConfigurationError, ResourceSizingError
from revadders.bit_tools import floor_log2, hamming_weight
from revadders.bloqs.arithmetic import (
    carry_lookahead_adder,
    carry_workspace_partition,
    carry_workspace_size,
    CarryLookaheadAdder,
    ComputeCarries,
    CRounds,
    GRounds,
    PRounds,
    RippleCarryAdder,
)
from revadders.bloqs.basic_gates import CNOT, Toffoli
from revadders.bloqs.mcmt import And
from revadders.resource_counting import (
    get_circuit_depth,
    get_cost_value,
    get_resource_footprint,
    QubitCount,
    ReversibleGatesCost,
)
from revadders.simulation.classical_sim import add_ints
from revadders.testing import (
    assert_adjoint_round_trip,
    assert_circuit_inp_out_classical,
    assert_equivalent_bloq_counts,
    assert_valid_bloq_decomposition,
)


def _carries(n: int, x: int, y: int) -> int:
    """Bit `j` is the carry into bit `j + 1` of `x + y`."""
    c = ((x + y) ^ x ^ y) >> 1
    return c & (2**n - 1)


@pytest.mark.parametrize(
    'n, sizes',
    [(1, []), (2, []), (3, []), (4, [1]), (5, [1]), (8, [3, 1]), (13, [5, 2]), (16, [7, 3, 1])],
)
def test_carry_workspace_partition(n, sizes):
    assert carry_workspace_partition(n) == sizes
    assert carry_workspace_size(n) == n - hamming_weight(n) - floor_log2(n)


@pytest.mark.parametrize('n', [2, 3, 4, 5, 8, 16, 17, 32, 1024])
def test_carry_workspace_partition_total(n):
    assert sum(carry_workspace_partition(n)) == n - hamming_weight(n) - floor_log2(n)


def test_carry_workspace_partition_bad_size():
    with pytest.raises(ResourceSizingError):
        carry_workspace_partition(0)
    with pytest.raises(ResourceSizingError):
        carry_workspace_partition(-3)


@pytest.mark.parametrize('n', [1, 2, 3, 5, 8])
def test_network_decompositions(n):
    for bloq in [PRounds(n), GRounds(n), CRounds(n), ComputeCarries(n)]:
        assert_valid_bloq_decomposition(bloq)
    for bloq in [PRounds(n), GRounds(n), ComputeCarries(n)]:
        assert_equivalent_bloq_counts(bloq)


def test_p_rounds_pyramid():
    cbloq = PRounds(8).decompose_bloq()
    p, w = cbloq.quregs['ps'], cbloq.quregs['workspace']
    # Level 1 is P_1[1..3], level 2 is P_2[1].
    assert list(cbloq.operations) == [
        And().on(p[1], p[2], w[0]),
        And().on(p[3], p[4], w[1]),
        And().on(p[5], p[6], w[2]),
        And().on(w[1], w[2], w[3]),
    ]


@pytest.mark.parametrize('n', [2, 3, 4, 5, 6, 7, 8])
def test_p_rounds_classical(n):
    for ps in range(2 ** (n - 1)):
        bits = [0] + [(ps >> i) & 1 for i in range(n - 1)]
        expected, k = 0, 0
        for t in range(1, floor_log2(n)):
            for m in range(1, n // 2**t):
                block = bits[2**t * m : 2**t * (m + 1)]
                expected |= int(all(block)) << k
                k += 1
        assert PRounds(n).call_classically(ps=ps) == (ps, expected)
        assert_adjoint_round_trip(PRounds(n), ps=ps)


@pytest.mark.parametrize('n', [2, 3, 4, 5, 8])
def test_compute_carries_exhaustive(n):
    bloq = ComputeCarries(n)
    for x, y in itertools.product(range(2**n), repeat=2):
        ps = (x ^ y) >> 1
        gs = x & y
        assert bloq.call_classically(ps=ps, gs=gs) == (ps, _carries(n, x, y))


@pytest.mark.parametrize('n', [2, 5, 8])
def test_rounds_round_trip(n):
    w = carry_workspace_size(n)
    rng = np.random.default_rng(n)
    for _ in range(10):
        x, y = (int(v) for v in rng.integers(2**n, size=2))
        ps, gs = (x ^ y) >> 1, x & y
        (_, workspace) = PRounds(n).call_classically(ps=ps)
        g_out = assert_adjoint_round_trip(GRounds(n), ps=ps, workspace=workspace, gs=gs)
        assert_adjoint_round_trip(CRounds(n), ps=ps, workspace=workspace, gs=g_out['gs'])
        assert_adjoint_round_trip(ComputeCarries(n), ps=ps, gs=gs)
        assert 0 <= workspace < 2**w


@pytest.mark.parametrize('n', [2, 3, 4, 5, 8, 16, 17, 32, 1024])
def test_g_rounds_toffoli_count(n):
    sigma = GRounds(n).call_graph()[1]
    assert sigma.get(Toffoli(), 0) == n - hamming_weight(n)
    cbloq = GRounds(n).decompose_bloq()
    assert len(cbloq) == n - hamming_weight(n)


@pytest.mark.parametrize('k', [1, 2, 3, 4, 5, 10])
def test_c_rounds_toffoli_count(k):
    n = 2**k
    assert len(CRounds(n).decompose_bloq()) == n - 1 - k


@pytest.mark.parametrize('n', [1, 2, 3, 4])
@pytest.mark.parametrize('carry_out', [True, False])
def test_carry_lookahead_adder_exhaustive(n, carry_out):
    bloq = CarryLookaheadAdder(n, carry_out=carry_out)
    for x, y in itertools.product(range(2**n), repeat=2):
        expected = add_ints(x, y) if carry_out else add_ints(x, y, num_bits=n)
        assert_circuit_inp_out_classical(bloq, dict(x=x, y=y), dict(x=x, y=y, z=expected))


@pytest.mark.parametrize('n', [5, 6, 7, 9, 16, 31, 64])
def test_carry_lookahead_adder_random(n):
    rng = np.random.default_rng(4321 + n)
    for _ in range(5):
        x, y = (int(v) for v in rng.integers(2**n, size=2, dtype=np.uint64))
        assert CarryLookaheadAdder(n).call_classically(x=x, y=y) == (x, y, x + y)
        assert CarryLookaheadAdder(n, carry_out=False).call_classically(x=x, y=y) == (
            x,
            y,
            (x + y) % 2**n,
        )


@pytest.mark.slow
@pytest.mark.parametrize('n', [5, 6, 7, 8])
def test_carry_lookahead_adder_exhaustive_slow(n):
    bloq = CarryLookaheadAdder(n)
    for x, y in itertools.product(range(2**n), repeat=2):
        assert bloq.call_classically(x=x, y=y) == (x, y, x + y)


def test_carry_lookahead_adder_scenario():
    assert CarryLookaheadAdder(3).call_classically(x=0b101, y=0b011) == (5, 3, 0b1000)
    assert CarryLookaheadAdder(3).call_classically(
        x=5, y=3
    ) == RippleCarryAdder(3).call_classically(x=5, y=3)


@pytest.mark.parametrize('n', [1, 2, 3, 8, 13])
def test_carry_lookahead_adder_round_trip(n):
    for carry_out in [True, False]:
        bloq = CarryLookaheadAdder(n, carry_out=carry_out)
        assert_adjoint_round_trip(bloq, x=2**n - 1, y=1)
        assert_adjoint_round_trip(bloq, x=0, y=2**n - 1)


def test_carry_lookahead_adder_empty():
    assert len(CarryLookaheadAdder(0).decompose_bloq()) == 0
    assert len(CarryLookaheadAdder(0, carry_out=False).decompose_bloq()) == 0


def test_carry_lookahead_adder_one_bit_no_carry():
    cbloq = CarryLookaheadAdder(1, carry_out=False).decompose_bloq()
    assert cbloq.bloq_instances == [CNOT(), CNOT()]
    assert_valid_bloq_decomposition(CarryLookaheadAdder(1, carry_out=False))


def test_carry_lookahead_adder_no_carry_recursion():
    cbloq = CarryLookaheadAdder(4, carry_out=False).decompose_bloq()
    x, y, z = cbloq.quregs['x'], cbloq.quregs['y'], cbloq.quregs['z']
    assert list(cbloq.operations) == [
        CarryLookaheadAdder(3).on(*x[:-1], *y[:-1], *z),
        CNOT().on(x[-1], z[-1]),
        CNOT().on(y[-1], z[-1]),
    ]


def test_carry_lookahead_adder_carry_out_structure():
    cbloq = CarryLookaheadAdder(4).decompose_bloq()
    assert cbloq.bloq_instances == [And()] * 4 + [CNOT()] * 4 + [ComputeCarries(4)] + [CNOT()] * 8
    y, z = cbloq.quregs['y'], cbloq.quregs['z']
    assert cbloq.operations[8] == ComputeCarries(4).on(*y[1:], *z[1:])


@pytest.mark.parametrize('n', [2, 3, 4, 5, 8, 16, 17, 32, 1024])
def test_carry_lookahead_adder_auxiliary_qubits(n):
    expected_aux = n - hamming_weight(n) - floor_log2(n)
    assert get_cost_value(CarryLookaheadAdder(n), QubitCount()) == 3 * n + 1 + expected_aux
    assert get_cost_value(ComputeCarries(n), QubitCount()) == 2 * n - 1 + expected_aux


@pytest.mark.parametrize('n', [1, 2, 4, 7, 16, 100])
def test_carry_lookahead_adder_gate_counts(n):
    gc = get_cost_value(CarryLookaheadAdder(n), ReversibleGatesCost())
    w = carry_workspace_size(n)
    assert gc.and_bloq == n + w
    assert gc.and_dagger == w
    assert gc.cnot == 3 * n
    if n > 1:
        assert gc.toffoli == n - hamming_weight(n) + len(CRounds(n).decompose_bloq())
    else:
        assert gc.toffoli == 0


def test_carry_lookahead_adder_log_depth():
    depths = {n: get_circuit_depth(CarryLookaheadAdder(n)) for n in [16, 64, 256, 1024]}
    assert depths[256] < 60
    assert depths[1024] - depths[64] <= 30
    # Ripple-carry depth is linear.
    assert get_circuit_depth(RippleCarryAdder(256)) > 256


def test_carry_lookahead_adder_footprint():
    fp = get_resource_footprint(CarryLookaheadAdder(8))
    assert fp.qubit_count == 3 * 8 + 1 + 4
    assert fp.auxiliary_qubit_count == 4
    assert fp.gate_counts.and_bloq == 12
    assert fp.depth == get_circuit_depth(CarryLookaheadAdder(8))


def test_carry_lookahead_adder_register_function():
    xs = cirq.LineQubit.range(4)
    ys = cirq.LineQubit.range(4, 8)
    zs = cirq.LineQubit.range(8, 13)
    op = carry_lookahead_adder(xs, ys, zs)
    assert op.gate == CarryLookaheadAdder(4)
    assert carry_lookahead_adder(xs, ys, zs[:4]).gate == CarryLookaheadAdder(4, carry_out=False)
    with pytest.raises(ConfigurationError):
        carry_lookahead_adder(xs, ys[:3], zs)
    with pytest.raises(ConfigurationError):
        carry_lookahead_adder(xs, ys, zs[:3])


@pytest.mark.parametrize('bloq_cls', [PRounds, GRounds, CRounds, ComputeCarries])
@pytest.mark.parametrize('n', [0, -2, 1.5])
def test_network_bad_size(bloq_cls, n):
    with pytest.raises(ConfigurationError):
        _ = bloq_cls(n)


def test_carry_lookahead_adder_bad_bitsize():
    with pytest.raises(ConfigurationError):
        _ = CarryLookaheadAdder(-1)


def test_carry_lookahead_adder_and_targets():
    n = 8
    flat = CarryLookaheadAdder(n).decompose_bloq().flatten()
    x, y, z = flat.quregs['x'], flat.quregs['y'], flat.quregs['z']
    and_targets = {op.qubits[2] for op in flat.operations if op.gate == And()}
    # Generate bits go into z, generalized propagate bits into the workspace.
    assert set(z[1:]) <= and_targets
    assert and_targets - set(z[1:]) == set(flat.auxiliary_qubits())
    assert len(flat.auxiliary_qubits()) == carry_workspace_size(n)
    # Base propagate bits are CNOTs into y.
    cnot_pairs = {op.qubits for op in flat.operations if op.gate == CNOT()}
    assert all((x[k], y[k]) in cnot_pairs for k in range(n))
    assert not and_targets & set(y)
