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
"""Named bit registers and the signatures built from them."""
import enum
from typing import Dict, Iterable, Iterator, overload, Tuple, Union

import attrs
import sympy
from attrs import field, frozen

from revadders.symbolics import is_symbolic, smax, ssum, SymbolicInt


class Side(enum.Flag):
    """Which end of a bloq a register exists on.

    A RIGHT register is created by the bloq: its bits are fresh and start at zero. A LEFT
    register is consumed by the bloq: its bits are left at zero and can be released. A THRU
    register is both.
    """

    LEFT = enum.auto()
    RIGHT = enum.auto()
    THRU = LEFT | RIGHT


def _to_bitsize(v: SymbolicInt) -> SymbolicInt:
    if is_symbolic(v):
        return v
    if int(v) != v or v < 0:
        raise ValueError(f"Register bitsize must be a non-negative integer, got {v}.")
    return int(v)


@frozen
class Register:
    """A little-endian register: bit `k` of its value is carried by qubit `k`.

    Args:
        name: Used as the keyword when qubits or classical values are passed to a bloq.
        bitsize: Number of bits. May be a sympy expression.
        side: See `Side`.
    """

    name: str
    bitsize: SymbolicInt = field(converter=_to_bitsize)
    side: Side = Side.THRU

    def is_symbolic(self) -> bool:
        return is_symbolic(self.bitsize)

    def total_bits(self) -> SymbolicInt:
        return self.bitsize

    def adjoint(self) -> 'Register':
        """The same register with LEFT and RIGHT exchanged."""
        if self.side is Side.LEFT:
            return attrs.evolve(self, side=Side.RIGHT)
        if self.side is Side.RIGHT:
            return attrs.evolve(self, side=Side.LEFT)
        return self


def _by_name(registers: Iterable[Register]) -> Dict[str, Register]:
    d: Dict[str, Register] = {}
    for reg in registers:
        if reg.name in d:
            raise ValueError(f"Register {reg.name} is specified more than once per side.")
        d[reg.name] = reg
    return d


class Signature:
    """The ordered registers of a bloq.

    Behaves like a tuple of `Register`s. Names must be unique among the registers present on
    each side, so a LEFT and a RIGHT register may share a name.

    Examples:
        The signature of an 8-bit adder with a carry-out bit:

        >>> Signature([
        ...  Register('x', 8),
        ...  Register('y', 8),
        ...  Register('z', 9, side=Side.RIGHT),
        ... ])
        Signature(...)
    """

    def __init__(self, registers: Iterable[Register]):
        self._registers = tuple(registers)
        self._lefts = _by_name(reg for reg in self._registers if reg.side & Side.LEFT)
        self._rights = _by_name(reg for reg in self._registers if reg.side & Side.RIGHT)

    @classmethod
    def build(cls, **registers: Union[int, sympy.Expr]) -> 'Signature':
        """THRU registers from keyword bitsizes. Zero-width registers are omitted.

        >>> Signature.build(ctrl=1, target=1)
        Signature(...)
        """
        return cls(Register(name=k, bitsize=v) for k, v in registers.items() if v)

    def lefts(self) -> Iterable[Register]:
        """Registers present on input: LEFT and THRU."""
        yield from self._lefts.values()

    def rights(self) -> Iterable[Register]:
        """Registers present on output: RIGHT and THRU."""
        yield from self._rights.values()

    def get_left(self, name: str) -> Register:
        return self._lefts[name]

    def get_right(self, name: str) -> Register:
        return self._rights[name]

    def adjoint(self) -> 'Signature':
        return Signature(reg.adjoint() for reg in self._registers)

    def n_qubits(self) -> SymbolicInt:
        """The larger of the input width and the output width."""
        left_size = ssum(reg.total_bits() for reg in self.lefts())
        right_size = ssum(reg.total_bits() for reg in self.rights())
        return smax(left_size, right_size)

    def __repr__(self):
        return f'Signature({self._registers!r})'

    @overload
    def __getitem__(self, key: int) -> Register:
        pass

    @overload
    def __getitem__(self, key: slice) -> Tuple[Register, ...]:
        pass

    def __getitem__(self, key):
        return self._registers[key]

    def __contains__(self, item: Register) -> bool:
        return item in self._registers

    def __iter__(self) -> Iterator[Register]:
        yield from self._registers

    def __len__(self) -> int:
        return len(self._registers)

    def __eq__(self, other) -> bool:
        return isinstance(other, Signature) and self._registers == other._registers

    def __hash__(self):
        return hash(self._registers)
