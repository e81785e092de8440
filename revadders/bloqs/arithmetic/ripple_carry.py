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
from typing import Iterator, Sequence, TYPE_CHECKING

import cirq
import sympy
from attrs import field, frozen
from numpy.typing import NDArray

from revadders import DecomposeTypeError, GateWithRegisters, Register, Side, Signature
from revadders.bloqs.arithmetic.full_adder import FullAdder
from revadders.bloqs.basic_gates import CNOT
from revadders.exception import ConfigurationError
from revadders.symbolics import is_symbolic, SymbolicInt

if TYPE_CHECKING:
    from revadders.resource_counting import BloqCountDictT, SympySymbolAllocator


def check_adder_bitsize(val: SymbolicInt) -> None:
    """Raise `ConfigurationError` unless `val` is a non-negative integer or a sympy expression."""
    if isinstance(val, sympy.Expr):
        return
    if isinstance(val, bool) or not isinstance(val, int) or val < 0:
        raise ConfigurationError(f"Adder bitsize must be a non-negative integer, got {val!r}.")


def adder_signature(bitsize: SymbolicInt, carry_out: bool) -> Signature:
    """The `x`, `y` operand registers and the fresh `z` output shared by both adders."""
    return Signature(
        [
            Register('x', bitsize),
            Register('y', bitsize),
            Register('z', bitsize + 1 if carry_out else bitsize, side=Side.RIGHT),
        ]
    )


def check_adder_registers(
    xs: Sequence[cirq.Qid], ys: Sequence[cirq.Qid], zs: Sequence[cirq.Qid]
) -> bool:
    """Validate operand and output lengths and report whether a carry-out bit is present.

    Raises:
        ConfigurationError: If `len(ys) != len(xs)` or `len(zs)` is neither `len(xs)` nor
            `len(xs) + 1`.
    """
    n = len(xs)
    if len(ys) != n:
        raise ConfigurationError(f"Operand registers differ in length: {n} != {len(ys)}.")
    if len(zs) not in (n, n + 1):
        raise ConfigurationError(
            f"Output register must have {n} or {n + 1} bits for {n}-bit operands, got {len(zs)}."
        )
    return len(zs) == n + 1


@frozen
class RippleCarryAdder(GateWithRegisters):
    r"""Out-of-place addition with a chain of full adders.

    Computes $z = x + y$ into a fresh register, leaving `x` and `y` unchanged. The `z`
    register doubles as the carry chain: full adder `k` reads its carry from `z[k]`, replaces
    it with sum bit `k` and writes the next carry into `z[k+1]`.

    Without a carry-out bit the top sum bit is finished with two CNOTs, since no further
    carry needs to be produced. The result is then $(x + y) \bmod 2^n$.

    Both the gate count and the depth are linear in the bitsize.

    Args:
        bitsize: Number of bits in each operand. May be symbolic for call-graph queries.
        carry_out: Whether `z` has an extra bit for the final carry.

    Registers:
        x: The first operand.
        y: The second operand.
        z [right]: The sum, `bitsize + 1` bits if `carry_out` is set and `bitsize` bits otherwise.

    References:
        [Halving the cost of quantum addition](https://arxiv.org/abs/1709.06648).
            Gidney, C. 2018.
    """

    bitsize: SymbolicInt = field()
    carry_out: bool = True

    @bitsize.validator
    def _bitsize_validate(self, field, val):
        check_adder_bitsize(val)

    @cached_property
    def signature(self) -> Signature:
        return adder_signature(self.bitsize, self.carry_out)

    def decompose_from_registers(
        self, *, context: cirq.DecompositionContext, **quregs: NDArray[cirq.Qid]  # type: ignore[type-var]
    ) -> Iterator[cirq.OP_TREE]:
        if is_symbolic(self.bitsize):
            raise DecomposeTypeError(f"Cannot decompose {self} with symbolic bitsize.")
        x, y, z = quregs['x'], quregs['y'], quregs['z']
        for k in range(len(z) - 1):
            yield FullAdder().on_registers(carry_in=z[k], x=x[k], y=y[k], carry_out=z[k + 1])
        if not self.carry_out and self.bitsize > 0:
            yield CNOT().on(x[-1], z[-1])
            yield CNOT().on(y[-1], z[-1])

    def build_call_graph(self, ssa: 'SympySymbolAllocator') -> 'BloqCountDictT':
        n = self.bitsize
        if not is_symbolic(n) and n == 0:
            return {}
        counts = {FullAdder(): n} if self.carry_out else {FullAdder(): n - 1, CNOT(): 2}
        return {bloq: c for bloq, c in counts.items() if is_symbolic(c) or c > 0}

    def __str__(self):
        return f'RippleCarryAdder({self.bitsize}, carry_out={self.carry_out})'


def ripple_carry_adder(
    xs: Sequence[cirq.Qid], ys: Sequence[cirq.Qid], zs: Sequence[cirq.Qid]
) -> cirq.Operation:
    """Add `xs` and `ys` into the fresh register `zs` with a ripple-carry adder.

    The carry-out variant is used when `zs` is one bit longer than the operands.

    Raises:
        ConfigurationError: If the register lengths are inconsistent.
    """
    carry_out = check_adder_registers(xs, ys, zs)
    return RippleCarryAdder(len(xs), carry_out=carry_out).on_registers(x=xs, y=ys, z=zs)
