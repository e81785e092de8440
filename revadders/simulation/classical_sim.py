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

"""Classical simulation: run reversible bloqs on integers, bit by bit."""
import itertools
import logging
from typing import Any, Dict, List, Mapping, Sequence, Tuple, TYPE_CHECKING, Union

import cirq
import numpy as np
from numpy.typing import NDArray

from revadders._infra.gate_with_registers import split_qubits
from revadders._infra.registers import Register, Side, Signature
from revadders.bit_tools import bits_to_int, iter_bits

if TYPE_CHECKING:
    from revadders import Bloq, CompositeBloq

logger = logging.getLogger(__name__)

ClassicalValT = Union[int, np.integer, NDArray[np.integer]]


def _check_val(reg: Register, val: Any, *, what: str) -> int:
    """Validate that `val` fits in `reg` and return it as a Python int."""
    if isinstance(val, np.ndarray):
        if val.shape != ():
            raise ValueError(f"{what} for register {reg.name} must be a scalar, got {val!r}.")
        val = val.item()
    if not isinstance(val, (int, np.integer)) or isinstance(val, bool):
        raise ValueError(f"{what} for register {reg.name} must be an integer, got {val!r}.")
    val = int(val)
    if val < 0 or val >= 2**reg.bitsize:
        raise ValueError(f"{what} for register {reg.name} is out of range: {val}.")
    return val


def _update_vals(
    registers: Sequence[Register], vals: Mapping[str, Any], *, what: str
) -> Dict[str, int]:
    """Check that `vals` has exactly one valid value for each of `registers`."""
    names = {reg.name for reg in registers}
    unknown = set(vals) - names
    if unknown:
        raise ValueError(f"Unexpected {what}s for registers {sorted(unknown)}.")
    checked = {}
    for reg in registers:
        if reg.name not in vals:
            raise ValueError(f"Missing {what} for register {reg.name}.")
        checked[reg.name] = _check_val(reg, vals[reg.name], what=what)
    return checked


def call_bloq_classically(bloq: 'Bloq', **vals: ClassicalValT) -> Dict[str, ClassicalValT]:
    """Call `bloq.on_classical_vals` with input and output checking.

    Args:
        bloq: The bloq to evaluate.
        **vals: One value per left (or thru) register. Right-only registers implicitly
            start at zero and must not be supplied.

    Returns:
        A mapping from right (or thru) register name to its output value.

    Raises:
        ValueError: If an input or output is missing, unexpected or out of range.
    """
    lefts = list(bloq.signature.lefts())
    in_vals = _update_vals(lefts, vals, what='input')
    out_vals = bloq.on_classical_vals(**in_vals)
    if not isinstance(out_vals, dict):
        raise TypeError(f"{bloq}.on_classical_vals should return a dictionary, got {out_vals!r}.")
    return _update_vals(list(bloq.signature.rights()), out_vals, what='output')


def _read(state: Dict[cirq.Qid, int], qubits: NDArray[cirq.Qid]) -> int:  # type: ignore[type-var]
    return bits_to_int(state.get(q, 0) for q in qubits)


def _write(
    state: Dict[cirq.Qid, int], qubits: NDArray[cirq.Qid], val: int  # type: ignore[type-var]
) -> None:
    for q, b in zip(qubits, iter_bits(int(val), len(qubits))):
        state[q] = b


def simulate_composite_bloq(cbloq: 'CompositeBloq', **vals: ClassicalValT) -> Dict[str, int]:
    """Propagate classical values bit by bit through a fully flattened decomposition.

    Every operation is decomposed down to atomic gates, whose `on_classical_vals` are applied
    to a qubit-to-bit assignment in order. Auxiliary qubits start at zero.

    Raises:
        ValueError: If an input is out of range, a freshly allocated register is not zero
            when it is first written, or an auxiliary qubit or consumed register is not
            returned to zero.
    """
    signature: Signature = cbloq.signature
    in_vals = _update_vals(list(signature.lefts()), vals, what='input')
    flat = cbloq.flatten()

    state: Dict[cirq.Qid, int] = {}
    for reg in signature:
        _write(state, flat.quregs[reg.name], in_vals.get(reg.name, 0))

    for i, op in enumerate(flat.operations):
        bloq = op.gate
        quregs = split_qubits(bloq.signature, op.qubits)
        for reg in bloq.signature:
            if reg.side is Side.RIGHT and _read(state, quregs[reg.name]) != 0:
                raise ValueError(
                    f"Operation {i} ({bloq}) allocates register {reg.name} on qubits "
                    f"that are not zero."
                )
        op_in = {reg.name: _read(state, quregs[reg.name]) for reg in bloq.signature.lefts()}
        op_out = bloq.on_classical_vals(**op_in)
        for reg in bloq.signature:
            if reg.side is Side.LEFT:
                _write(state, quregs[reg.name], 0)
            else:
                _write(state, quregs[reg.name], op_out[reg.name])

    for q in flat.auxiliary_qubits():
        if state.get(q, 0) != 0:
            raise ValueError(f"Auxiliary qubit {q} of {cbloq.bloq} was not returned to zero.")
    for reg in signature:
        if reg.side is Side.LEFT and _read(state, flat.quregs[reg.name]) != 0:
            raise ValueError(f"Register {reg.name} of {cbloq.bloq} was not returned to zero.")

    logger.debug("Simulated %d operations of %s", len(flat), cbloq.bloq)
    return {reg.name: _read(state, flat.quregs[reg.name]) for reg in signature.rights()}


def get_classical_truth_table(
    bloq: 'Bloq',
) -> Tuple[List[str], List[str], List[Tuple[Sequence[Any], Sequence[Any]]]]:
    """Evaluate `bloq` on every combination of input register values.

    Only practical for small bloqs such as `FullAdder` or a few-bit adder.

    Returns:
        in_names: Left register names, the headings of the input columns.
        out_names: Right register names, the headings of the output columns.
        truth_table: One `(in_vals, out_vals)` row per input combination, with values
            ordered like `in_names` and `out_names`.
    """
    lefts = list(bloq.signature.lefts())
    in_names = [reg.name for reg in lefts]
    out_names = [reg.name for reg in bloq.signature.rights()]
    rows = []
    for in_vals in itertools.product(*(range(2**reg.bitsize) for reg in lefts)):
        rows.append((in_vals, bloq.call_classically(**dict(zip(in_names, in_vals)))))
    return in_names, out_names, rows


def format_classical_truth_table(
    in_names: Sequence[str],
    out_names: Sequence[str],
    truth_table: Sequence[Tuple[Sequence[Any], Sequence[Any]]],
) -> str:
    """Render a truth table as text: a heading line, a rule, then one line per row."""
    heading = f"{'  '.join(in_names)}  |  {'  '.join(out_names)}"
    lines = [heading, '-' * (len(heading) + 1)]
    for in_vals, out_vals in truth_table:
        lines.append(f"{', '.join(map(str, in_vals))} -> {', '.join(map(str, out_vals))}")
    return '\n'.join(lines)


def add_ints(a: int, b: int, *, num_bits: Union[int, None] = None) -> int:
    """The sum the adders are checked against.

    With `num_bits` the sum wraps modulo `2**num_bits`, as an adder without a carry-out does.
    """
    total = a + b
    return total if num_bits is None else total % 2**num_bits
