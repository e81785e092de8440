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

"""A walk over the tree of bloq invocations, for attributing cost to subroutines."""
import logging
from typing import Iterator, Optional, Tuple

import cirq
from attrs import frozen

from revadders import Bloq, DecomposeNotImplementedError, DecomposeTypeError
from revadders._infra.composite_bloq import bloq_of, decompose_operation
from revadders._infra.gate_with_registers import get_named_qubits

logger = logging.getLogger(__name__)


@frozen
class CallTreeNode:
    """One invocation of a bloq while constructing a circuit.

    Args:
        bloq: The invoked bloq.
        name: The bloq's `pretty_name()`, which profilers use as the node label.
        depth: The nesting depth. The root bloq has depth 0.
        path: The names of the invocations from the root down to and including this one.
    """

    bloq: Bloq
    name: str
    depth: int
    path: Tuple[str, ...]


def _walk(
    op: cirq.Operation,
    context: cirq.DecompositionContext,
    parent: Tuple[str, ...],
    max_depth: Optional[int],
) -> Iterator[CallTreeNode]:
    bloq = bloq_of(op)
    name = bloq.pretty_name()
    path = parent + (name,)
    depth = len(path) - 1
    yield CallTreeNode(bloq=bloq, name=name, depth=depth, path=path)
    if max_depth is not None and depth >= max_depth:
        return
    try:
        sub_ops = decompose_operation(op, context)
    except (DecomposeNotImplementedError, DecomposeTypeError):
        return
    for sub_op in sub_ops:
        yield from _walk(sub_op, context, path, max_depth)


def walk_call_tree(
    bloq: Bloq,
    context: Optional[cirq.DecompositionContext] = None,
    max_depth: Optional[int] = None,
) -> Iterator[CallTreeNode]:
    """Yield every bloq invocation made while constructing `bloq`, in construction order.

    The walk is a pre-order traversal of the decomposition tree: `bloq` itself comes first
    with depth 0, then each operation of its decomposition followed by everything that
    operation invokes. Elementary gates are yielded as leaves.

    A profiler can attach a weight (for example a gate count) to each leaf and aggregate it
    along `CallTreeNode.path` to attribute cost to subroutines.

    Args:
        bloq: The root of the call tree, typically an adder program.
        context: The decomposition context. By default, auxiliary qubits are provided by a
            fresh `cirq.SimpleQubitManager`.
        max_depth: If provided, do not descend below this depth.
    """
    if context is None:
        context = cirq.DecompositionContext(cirq.SimpleQubitManager())
    op = bloq.on_registers(**get_named_qubits(bloq.signature))
    logger.debug("Walking the call tree of %s", bloq)
    yield from _walk(op, context, (), max_depth)
