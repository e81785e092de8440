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

"""Self-contained adder programs: the roots of the call tree.

An adder program fixes a bitsize, allocates the operand and output registers and invokes one
carry-out adder. It has no registers of its own, so it can be handed to the resource counting
protocols as a complete program.
"""
import abc
from functools import cached_property
from typing import Dict, Iterator, Type

import cirq
from attrs import field, frozen
from numpy.typing import NDArray

from revadders import GateWithRegisters, Signature
from revadders._infra.gate_with_registers import total_bits
from revadders.bloqs.arithmetic.carry_lookahead import CarryLookaheadAdder
from revadders.bloqs.arithmetic.ripple_carry import RippleCarryAdder
from revadders.exception import ConfigurationError


def _check_program_bitsize(self, field, val):
    if isinstance(val, bool) or not isinstance(val, int) or val < 1:
        raise ConfigurationError(f"Adder programs need a positive integer bitsize, got {val!r}.")


class AdderProgram(GateWithRegisters, metaclass=abc.ABCMeta):
    """Allocate `x`, `y` and a carry-out `z` and add `x` and `y` into `z`."""

    bitsize: int

    @abc.abstractmethod
    def adder(self) -> GateWithRegisters:
        """The carry-out adder this program invokes."""

    def data_qubit_count(self) -> int:
        """Qubits the program allocates for `x`, `y` and `z`, as opposed to adder workspace."""
        return total_bits(self.adder().signature)

    @cached_property
    def signature(self) -> Signature:
        return Signature([])

    def decompose_from_registers(
        self, *, context: cirq.DecompositionContext, **quregs: NDArray[cirq.Qid]  # type: ignore[type-var]
    ) -> Iterator[cirq.OP_TREE]:
        qm = context.qubit_manager
        x = qm.qalloc(self.bitsize)
        y = qm.qalloc(self.bitsize)
        z = qm.qalloc(self.bitsize + 1)
        yield self.adder().on_registers(x=x, y=y, z=z)
        qm.qfree([*z, *y, *x])

    def __str__(self):
        return f'{self.__class__.__name__}({self.bitsize})'


@frozen
class RippleCarryAdderProgram(AdderProgram):
    """Add two fresh `bitsize`-bit registers with `RippleCarryAdder`."""

    bitsize: int = field(validator=_check_program_bitsize)

    def adder(self) -> RippleCarryAdder:
        return RippleCarryAdder(self.bitsize, carry_out=True)


@frozen
class CarryLookaheadAdderProgram(AdderProgram):
    """Add two fresh `bitsize`-bit registers with `CarryLookaheadAdder`."""

    bitsize: int = field(validator=_check_program_bitsize)

    def adder(self) -> CarryLookaheadAdder:
        return CarryLookaheadAdder(self.bitsize, carry_out=True)


ADDER_PROGRAMS: Dict[str, Type[AdderProgram]] = {
    'ripple_carry': RippleCarryAdderProgram,
    'carry_lookahead': CarryLookaheadAdderProgram,
}


def make_adder_program(name: str, bitsize: int) -> AdderProgram:
    """Build the adder program registered under `name` in `ADDER_PROGRAMS`.

    Raises:
        ConfigurationError: If `name` is unknown or `bitsize` is not a positive integer.
    """
    try:
        cls = ADDER_PROGRAMS[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown adder program {name!r}. Choose one of {sorted(ADDER_PROGRAMS)}."
        ) from None
    return cls(bitsize)
