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

import abc
from typing import Dict, Iterable, List, Optional, Sequence, Union

import cirq
import numpy as np
from numpy.typing import NDArray

from revadders._infra.bloq import Bloq, DecomposeNotImplementedError, DecomposeTypeError
from revadders._infra.registers import Register


def total_bits(registers: Iterable[Register]) -> int:
    """The number of qubits spanned by `registers`."""
    return sum(reg.total_bits() for reg in registers)


def split_qubits(
    registers: Iterable[Register], qubits: Sequence[cirq.Qid]
) -> Dict[str, NDArray[cirq.Qid]]:  # type: ignore[type-var]
    """Cut the flat qubit list of an operation into one array per register, in order."""
    quregs = {}
    start = 0
    for reg in registers:
        stop = start + reg.total_bits()
        quregs[reg.name] = np.array(qubits[start:stop], dtype=object)
        start = stop
    return quregs


def merge_qubits(
    registers: Iterable[Register],
    **qubit_regs: Union[cirq.Qid, Sequence[cirq.Qid], NDArray[cirq.Qid]],
) -> List[cirq.Qid]:
    """Concatenate per-register qubits into the flat order `cirq.Gate.on` expects.

    Raises:
        ConfigurationError: If a register is missing or has the wrong number of qubits.
    """
    from revadders.exception import ConfigurationError

    ret: List[cirq.Qid] = []
    for reg in registers:
        if reg.name not in qubit_regs:
            raise ConfigurationError(f"No qubits were given for register {reg.name}.")
        qubits = qubit_regs[reg.name]
        qubits = [qubits] if isinstance(qubits, cirq.Qid) else list(np.asarray(qubits).flatten())
        if len(qubits) != reg.total_bits():
            raise ConfigurationError(
                f"Register {reg.name} needs {reg.total_bits()} qubits, got {len(qubits)}."
            )
        ret += qubits
    return ret


def get_named_qubits(registers: Iterable[Register]) -> Dict[str, NDArray[cirq.Qid]]:
    """Qubits named after each register: `x0, x1, ...`, or just `c` for a one-bit `c`."""

    def _named(reg: Register) -> List[cirq.Qid]:
        if reg.total_bits() == 1:
            return [cirq.NamedQubit(reg.name)]
        return cirq.NamedQubit.range(reg.total_bits(), prefix=reg.name)

    return {reg.name: np.array(_named(reg), dtype=object) for reg in registers}


class GateWithRegisters(Bloq, cirq.Gate, metaclass=abc.ABCMeta):
    """A `cirq.Gate` whose qubits are grouped into the named registers of its `signature`.

    Plain Cirq gates decompose from one flat list of qubits. Adders act on several registers
    whose sizes depend on the bitsize, so subclasses instead implement
    `decompose_from_registers`, which receives one array of qubits per register, and are
    applied with `on_registers`. Applying `cirq.inverse` to an operation calls `adjoint()`.

    As an example, a bitwise XOR of one register into another:

    >>> import attrs
    >>> import cirq
    >>> import revadders
    >>> from revadders.bloqs.basic_gates import CNOT
    >>>
    >>> @attrs.frozen
    ... class XorInto(revadders.GateWithRegisters):
    ...     bitsize: int
    ...
    ...     @property
    ...     def signature(self) -> revadders.Signature:
    ...         return revadders.Signature.build(x=self.bitsize, y=self.bitsize)
    ...
    ...     def decompose_from_registers(self, *, context, x, y) -> cirq.OP_TREE:
    ...         return [CNOT().on(qx, qy) for qx, qy in zip(x, y)]
    ...
    >>> op = XorInto(2).on_registers(
    ...     x=cirq.NamedQubit.range(2, prefix='x'),
    ...     y=cirq.NamedQubit.range(2, prefix='y'),
    ... )
    """

    def _num_qubits_(self) -> int:
        return total_bits(self.signature)

    def _decompose_with_context_(
        self, qubits: Sequence[cirq.Qid], context: Optional[cirq.DecompositionContext] = None
    ) -> cirq.OP_TREE:
        quregs = split_qubits(self.signature, qubits)
        if context is None:
            context = cirq.DecompositionContext(cirq.ops.SimpleQubitManager())
        try:
            return self.decompose_from_registers(context=context, **quregs)
        except (DecomposeNotImplementedError, DecomposeTypeError):
            pass
        return NotImplemented

    def _decompose_(self, qubits: Sequence[cirq.Qid]) -> cirq.OP_TREE:
        return self._decompose_with_context_(qubits)

    def on(self, *qubits) -> 'cirq.Operation':
        # Multiple inheritance: use `cirq.Gate.on()`.
        return cirq.Gate.on(self, *qubits)

    def on_registers(
        self, **qubit_regs: Union[cirq.Qid, Sequence[cirq.Qid], NDArray[cirq.Qid]]
    ) -> cirq.Operation:
        return self.on(*merge_qubits(self.signature, **qubit_regs))

    def __pow__(self, power: int) -> 'GateWithRegisters':
        if power == 1:
            return self
        if power == -1:
            return self.adjoint()
        raise NotImplementedError(f"{self} does not implement __pow__ for {power=}.")

    def _circuit_diagram_info_(self, args: cirq.CircuitDiagramInfoArgs) -> cirq.CircuitDiagramInfo:
        """Label each wire with its register name and the first wire with `pretty_name()`."""
        wire_symbols = []
        for reg in self.signature:
            wire_symbols += [reg.name] * reg.total_bits()

        if wire_symbols:
            wire_symbols[0] = self.pretty_name()
        return cirq.CircuitDiagramInfo(wire_symbols=wire_symbols)
