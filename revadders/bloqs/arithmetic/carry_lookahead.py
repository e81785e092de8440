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

r"""The logarithmic-depth carry-lookahead adder and its carry network.

With propagate bits $p_i = x_i \oplus y_i$ and generate bits $g_i = x_i \wedge y_i$, the
carry into bit $i + 1$ is the 'generalized generate' of the block $[0, i]$. The carry network
computes all of them in three passes over a binary tree of blocks:

 - `PRounds` builds a pyramid of generalized propagate bits. Level $t$ entry $m$ is the
   'and' of the propagate bits of the block $[2^t m, 2^t (m + 1))$.
 - `GRounds` combines generate bits up the tree, so that the last bit of every aligned
   block holds that block's generalized generate.
 - `CRounds` walks back down the tree and fills in the carries of the remaining positions.

`ComputeCarries` sandwiches the last two between `PRounds` and its inverse, so the pyramid
workspace is returned to zero. Entry 0 of each pyramid level is never used and is not stored.
The workspace therefore needs exactly $n - w(n) - \lfloor \log_2 n \rfloor$ bits, where $w$
is the Hamming weight.

References:
    [A logarithmic-depth quantum carry-lookahead adder](https://arxiv.org/abs/quant-ph/0406142).
        Draper, Kutin, Rains, Svore. 2004.
"""
from functools import cached_property
from typing import Iterator, List, Optional, Sequence, TYPE_CHECKING

import cirq
import numpy as np
from attrs import field, frozen
from numpy.typing import NDArray

from revadders import DecomposeTypeError, GateWithRegisters, Register, Side, Signature
from revadders._infra.within_apply import within_apply
from revadders.bit_tools import floor_log2, hamming_weight
from revadders.bloqs.arithmetic.ripple_carry import (
    adder_signature,
    check_adder_bitsize,
    check_adder_registers,
)
from revadders.bloqs.basic_gates import CNOT, Toffoli
from revadders.bloqs.mcmt import And
from revadders.exception import ConfigurationError, ResourceSizingError
from revadders.symbolics import is_symbolic, SymbolicInt

if TYPE_CHECKING:
    from revadders.resource_counting import BloqCountDictT, SympySymbolAllocator


def carry_workspace_partition(n: int) -> List[int]:
    """The sizes of pyramid levels `1 .. floor(log2(n)) - 1` for an `n`-bit carry network.

    Level `t` holds `n // 2**t - 1` bits. Level 0 is the propagate register itself and is
    not part of the workspace.

    Raises:
        ResourceSizingError: If `n < 1`, a level size is negative, or the sizes do not add
            up to `n - hamming_weight(n) - floor_log2(n)`.
    """
    if n < 1:
        raise ResourceSizingError(f"A carry network needs at least one bit, got {n}.")
    num_rounds = floor_log2(n)
    sizes = [n // 2**t - 1 for t in range(1, num_rounds)]
    if any(s < 0 for s in sizes):
        raise ResourceSizingError(f"Negative workspace level in {sizes} for {n=}.")
    expected = n - hamming_weight(n) - num_rounds
    if sum(sizes) != expected:
        raise ResourceSizingError(
            f"Workspace levels {sizes} for {n=} add up to {sum(sizes)}, expected {expected}."
        )
    return sizes


def carry_workspace_size(n: int) -> int:
    """Total number of auxiliary bits used by the carry network on `n` bits."""
    return sum(carry_workspace_partition(n))


def _check_network_size(self, field, val):
    if isinstance(val, bool) or not isinstance(val, int) or val < 1:
        raise ConfigurationError(f"{field.name} must be a positive integer, got {val!r}.")


def _pyramid(
    n: int, ps: NDArray[cirq.Qid], workspace: NDArray[cirq.Qid]  # type: ignore[type-var]
) -> List[NDArray[cirq.Qid]]:  # type: ignore[type-var]
    """Split `workspace` into levels and prepend the propagate register as level 0."""
    bounds = np.cumsum(carry_workspace_partition(n))[:-1]
    return [np.asarray(ps)] + list(np.split(np.asarray(workspace), bounds))


def _network_signature(n: int, *, gs: bool = False, ws: Optional[Side] = None) -> Signature:
    regs = [Register('ps', n - 1)]
    if ws is not None:
        regs.append(Register('workspace', carry_workspace_size(n), side=ws))
    if gs:
        regs.append(Register('gs', n))
    return Signature(regs)


@frozen
class PRounds(GateWithRegisters):
    """Compute the pyramid of generalized propagate bits into fresh workspace.

    For each level `t = 1 .. floor(log2(n)) - 1` and each stored entry `m`, this writes the
    'and' of entries `2m + 1` and `2m + 2` of level `t - 1` with one `And`.

    Args:
        n: Number of bits in the carry network.

    Registers:
        ps: The propagate bits `p_1 .. p_{n-1}`.
        workspace [right]: The pyramid levels above level 0, concatenated.
    """

    n: int = field(validator=_check_network_size)

    @cached_property
    def signature(self) -> Signature:
        return _network_signature(self.n, ws=Side.RIGHT)

    def decompose_from_registers(
        self, *, context: cirq.DecompositionContext, **quregs: NDArray[cirq.Qid]  # type: ignore[type-var]
    ) -> Iterator[cirq.OP_TREE]:
        levels = _pyramid(self.n, quregs['ps'], quregs['workspace'])
        for current, nxt in zip(levels, levels[1:]):
            cur = current[1:]
            for m, target in enumerate(nxt):
                yield And().on(cur[2 * m], cur[2 * m + 1], target)

    def build_call_graph(self, ssa: 'SympySymbolAllocator') -> 'BloqCountDictT':
        size = carry_workspace_size(self.n)
        return {And(): size} if size else {}


@frozen
class GRounds(GateWithRegisters):
    r"""Combine generate bits up the tree of aligned blocks.

    Round $t = 1 .. \lfloor \log_2 n \rfloor$ applies, for $0 \le m < \lfloor n / 2^t \rfloor$,

    $$
    g_{2^t m + 2^t - 1} \mathrel{\oplus}= g_{2^t m + 2^{t-1} - 1} \wedge P_{t-1}[2m + 1]
    $$

    Args:
        n: Number of bits in the carry network.

    Registers:
        ps: The propagate bits `p_1 .. p_{n-1}`.
        workspace: The propagate pyramid computed by `PRounds`.
        gs: The generate bits `g_0 .. g_{n-1}`, updated in place.
    """

    n: int = field(validator=_check_network_size)

    @cached_property
    def signature(self) -> Signature:
        return _network_signature(self.n, gs=True, ws=Side.THRU)

    def decompose_from_registers(
        self, *, context: cirq.DecompositionContext, **quregs: NDArray[cirq.Qid]  # type: ignore[type-var]
    ) -> Iterator[cirq.OP_TREE]:
        levels = _pyramid(self.n, quregs['ps'], quregs['workspace'])
        gs = quregs['gs']
        for t in range(1, floor_log2(self.n) + 1):
            p = levels[t - 1][0::2]
            for m in range(self.n // 2**t):
                yield Toffoli().on(
                    gs[2**t * m + 2 ** (t - 1) - 1], p[m], gs[2**t * m + 2**t - 1]
                )

    def build_call_graph(self, ssa: 'SympySymbolAllocator') -> 'BloqCountDictT':
        n_toffoli = self.n - hamming_weight(self.n)
        return {Toffoli(): n_toffoli} if n_toffoli else {}


@frozen
class CRounds(GateWithRegisters):
    r"""Turn the generalized generate bits left by `GRounds` into carries.

    Rounds run from $t = \lfloor \log_2(2n/3) \rfloor$ down to 1 and apply, for
    $1 \le m \le \lfloor (n - 2^{t-1}) / 2^t \rfloor$,

    $$
    g_{2^t m + 2^{t-1} - 1} \mathrel{\oplus}= g_{2^t m - 1} \wedge P_{t-1}[2m]
    $$

    Afterwards `gs[j]` holds the carry into bit `j + 1`.

    Args:
        n: Number of bits in the carry network.

    Registers:
        ps: The propagate bits `p_1 .. p_{n-1}`.
        workspace: The propagate pyramid computed by `PRounds`.
        gs: The generalized generate bits, updated in place.
    """

    n: int = field(validator=_check_network_size)

    @cached_property
    def signature(self) -> Signature:
        return _network_signature(self.n, gs=True, ws=Side.THRU)

    def decompose_from_registers(
        self, *, context: cirq.DecompositionContext, **quregs: NDArray[cirq.Qid]  # type: ignore[type-var]
    ) -> Iterator[cirq.OP_TREE]:
        levels = _pyramid(self.n, quregs['ps'], quregs['workspace'])
        gs = quregs['gs']
        start = (2 * self.n // 3).bit_length() - 1
        for t in range(start, 0, -1):
            p = levels[t - 1][1::2]
            for m in range(1, (self.n - 2 ** (t - 1)) // 2**t + 1):
                yield Toffoli().on(
                    gs[2**t * m - 1], p[m - 1], gs[2**t * m + 2 ** (t - 1) - 1]
                )


@frozen
class ComputeCarries(GateWithRegisters):
    """Compute all carries of an `n`-bit addition in place of its generate bits.

    The propagate pyramid is allocated from the context's qubit manager, computed with
    `PRounds`, used by `GRounds` and `CRounds`, then uncomputed and released.

    Args:
        n: Number of bits in the carry network.

    Registers:
        ps: The propagate bits `p_1 .. p_{n-1}`. Unchanged.
        gs: The generate bits `g_0 .. g_{n-1}`. On return `gs[j]` holds the carry into
            bit `j + 1`.
    """

    n: int = field(validator=_check_network_size)

    @cached_property
    def signature(self) -> Signature:
        return _network_signature(self.n, gs=True)

    def decompose_from_registers(
        self, *, context: cirq.DecompositionContext, **quregs: NDArray[cirq.Qid]  # type: ignore[type-var]
    ) -> Iterator[cirq.OP_TREE]:
        ps, gs = quregs['ps'], quregs['gs']
        workspace = context.qubit_manager.qalloc(carry_workspace_size(self.n))
        yield within_apply(
            PRounds(self.n).on_registers(ps=ps, workspace=workspace),
            [
                GRounds(self.n).on_registers(ps=ps, workspace=workspace, gs=gs),
                CRounds(self.n).on_registers(ps=ps, workspace=workspace, gs=gs),
            ],
        )
        context.qubit_manager.qfree(workspace)

    def build_call_graph(self, ssa: 'SympySymbolAllocator') -> 'BloqCountDictT':
        p_rounds = PRounds(self.n)
        return {p_rounds: 1, GRounds(self.n): 1, CRounds(self.n): 1, p_rounds.adjoint(): 1}


@frozen
class CarryLookaheadAdder(GateWithRegisters):
    r"""Out-of-place addition in logarithmic depth.

    With a carry-out bit:

     1. The generate bits $g_i = x_i \wedge y_i$ are written into `z[i + 1]`.
     2. The propagate bits $p_i = x_i \oplus y_i$ are computed in place in `y`.
     3. `ComputeCarries` turns `z[1:]` into the carries. Bit 0 produces no carry from
        below, so `p_0` is not needed and the network acts on `y[1:]`.
     4. Each propagate bit is XORed into `z`, which leaves the sum.
     5. The propagate bits are uncomputed, restoring `y`.

    Without a carry-out bit the lower `bitsize - 1` bits are added with carry-out, which
    supplies the carry into the top bit, and the top sum bit is finished with two CNOTs.

    Args:
        bitsize: Number of bits in each operand.
        carry_out: Whether `z` has an extra bit for the final carry.

    Registers:
        x: The first operand.
        y: The second operand.
        z [right]: The sum, `bitsize + 1` bits if `carry_out` is set and `bitsize` bits otherwise.

    References:
        [A logarithmic-depth quantum carry-lookahead adder](https://arxiv.org/abs/quant-ph/0406142).
            Draper, Kutin, Rains, Svore. 2004.
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
        n = self.bitsize
        x, y, z = quregs['x'], quregs['y'], quregs['z']
        if not self.carry_out:
            if n == 0:
                return
            if n > 1:
                yield CarryLookaheadAdder(n - 1).on_registers(x=x[:-1], y=y[:-1], z=z)
            yield CNOT().on(x[-1], z[-1])
            yield CNOT().on(y[-1], z[-1])
            return

        yield [And().on(x[k], y[k], z[k + 1]) for k in range(n)]
        carries = [ComputeCarries(n).on_registers(ps=y[1:], gs=z[1:])] if n > 1 else []
        yield within_apply(
            [CNOT().on(x[k], y[k]) for k in range(n)],
            carries + [CNOT().on(y[k], z[k]) for k in range(n)],
        )

    def __str__(self):
        return f'CarryLookaheadAdder({self.bitsize}, carry_out={self.carry_out})'


def carry_lookahead_adder(
    xs: Sequence[cirq.Qid], ys: Sequence[cirq.Qid], zs: Sequence[cirq.Qid]
) -> cirq.Operation:
    """Add `xs` and `ys` into the fresh register `zs` with a carry-lookahead adder.

    The carry-out variant is used when `zs` is one bit longer than the operands.

    Raises:
        ConfigurationError: If the register lengths are inconsistent.
    """
    carry_out = check_adder_registers(xs, ys, zs)
    return CarryLookaheadAdder(len(xs), carry_out=carry_out).on_registers(x=xs, y=ys, z=zs)
