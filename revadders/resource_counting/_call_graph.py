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
"""The call graph of a bloq: which bloqs it calls, how often, down to the leaves."""

import logging
from collections import defaultdict
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

import networkx as nx
import sympy

from revadders import Bloq, DecomposeNotImplementedError, DecomposeTypeError
from revadders.symbolics import SymbolicInt

from ._generalization import _as_generalizer, GeneralizerT

logger = logging.getLogger(__name__)

BloqCountT = Tuple[Bloq, SymbolicInt]
BloqCountDictT = Mapping[Bloq, SymbolicInt]


def big_O(expr) -> sympy.Order:
    """Asymptotic order of `expr` as every free symbol goes to infinity."""
    if isinstance(expr, (int, float)):
        return sympy.Order(expr)
    return sympy.Order(expr, *[(s, sympy.oo) for s in expr.free_symbols])


class SympySymbolAllocator:
    """Hands out fresh sympy symbols, `_p0`, `_p1` and so on for prefix `p`.

    Generalizers use these to replace attributes that do not change a bloq's cost, so that
    bloqs differing only in those attributes are counted together.
    """

    def __init__(self):
        self._idxs: Dict[str, int] = defaultdict(int)

    def new_symbol(self, prefix: str) -> sympy.Symbol:
        i = self._idxs[prefix]
        self._idxs[prefix] = i + 1
        return sympy.Symbol(f'_{prefix}{i}')


def get_bloq_callee_counts(
    bloq: Bloq,
    generalizer: Optional[Union[GeneralizerT, Sequence[GeneralizerT]]] = None,
    ssa: Optional[SympySymbolAllocator] = None,
    ignore_decomp_failure: bool = True,
) -> List[BloqCountT]:
    """The bloqs `bloq` calls directly, with multiplicities.

    Args:
        bloq: The caller.
        generalizer: Applied to each callee. Callees mapped to `None` are dropped and callees
            that become equal are merged. A sequence is applied in order.
        ssa: Passed on to `bloq.build_call_graph`. A fresh one is made if not given.
        ignore_decomp_failure: Report leaves and undecomposable bloqs as having no callees.
            When False the decomposition error propagates instead.

    Returns:
        `(callee, n)` pairs in the order the callees first appear.
    """
    generalizer = _as_generalizer(generalizer)
    if ssa is None:
        ssa = SympySymbolAllocator()

    try:
        raw = bloq.build_call_graph(ssa)
    except (DecomposeNotImplementedError, DecomposeTypeError):
        if ignore_decomp_failure:
            return []
        raise

    counts: Dict[Bloq, SymbolicInt] = {}
    for callee, n in raw.items():
        callee = generalizer(callee)
        if callee is not None:
            counts[callee] = counts.get(callee, 0) + n
    return list(counts.items())


def _add_callees(
    bloq: Bloq,
    g: nx.DiGraph,
    depth: int,
    *,
    generalizer: GeneralizerT,
    ssa: SympySymbolAllocator,
    keep: Callable[[Bloq], bool],
    max_depth: Optional[int],
) -> None:
    """Add `bloq` and, unless it is a leaf, everything below it to `g`."""
    if bloq in g:
        return
    g.add_node(bloq)
    if keep(bloq) or (max_depth is not None and depth >= max_depth):
        return

    for callee, n in get_bloq_callee_counts(bloq, generalizer=generalizer, ssa=ssa):
        # Recurse before adding the edge: the edge would add the callee as a visited node.
        _add_callees(
            callee, g, depth + 1, generalizer=generalizer, ssa=ssa, keep=keep, max_depth=max_depth
        )
        if g.has_edge(bloq, callee):
            g.edges[bloq, callee]['n'] += n
        else:
            g.add_edge(bloq, callee, n=n)


def _leaf_totals(root: Bloq, g: nx.DiGraph) -> Dict[Bloq, SymbolicInt]:
    """Total calls from `root` to each leaf of `g`, empty if `root` is itself a leaf."""
    totals: Dict[Bloq, Dict[Bloq, SymbolicInt]] = {}
    # Reverse topological order visits every callee before its callers.
    for node in reversed(list(nx.topological_sort(g))):
        if g.out_degree(node) == 0:
            totals[node] = {node: 1}
            continue
        acc: Dict[Bloq, SymbolicInt] = defaultdict(int)
        for callee, data in g.succ[node].items():
            for leaf, k in totals[callee].items():
                acc[leaf] += data['n'] * k
        totals[node] = dict(acc)

    if g.out_degree(root) == 0:
        return {}
    return totals[root]


def get_bloq_call_graph(
    bloq: Bloq,
    generalizer: Optional[Union[GeneralizerT, Sequence[GeneralizerT]]] = None,
    ssa: Optional[SympySymbolAllocator] = None,
    keep: Optional[Callable[[Bloq], bool]] = None,
    max_depth: Optional[int] = None,
) -> Tuple[nx.DiGraph, Dict[Bloq, SymbolicInt]]:
    """Build the call graph below `bloq` and count the calls to each leaf.

    `Bloq.call_graph()` is a shortcut for this function.

    Args:
        bloq: The root.
        generalizer: Applied to every bloq before it enters the graph. See
            `get_bloq_callee_counts`.
        ssa: Passed to every `build_call_graph`. Provide the one your generalizer uses, if any.
        keep: Bloqs for which this returns True become leaves.
        max_depth: Bloqs this many calls below the root become leaves.

    Returns:
        g: Nodes are bloqs; an edge's `n` attribute is how many times the caller calls the
            callee.
        sigma: Total calls to each leaf, multiplied through the graph. Empty when the root has
            no callees.
    """
    if ssa is None:
        ssa = SympySymbolAllocator()
    if keep is None:
        keep = lambda b: False
    generalizer = _as_generalizer(generalizer)

    root = generalizer(bloq)
    if root is None:
        raise ValueError(f"The generalizer removed the root bloq {bloq}.")
    g = nx.DiGraph()
    _add_callees(root, g, 0, generalizer=generalizer, ssa=ssa, keep=keep, max_depth=max_depth)
    logger.debug("Call graph of %s has %d nodes", root, g.number_of_nodes())
    return g, _leaf_totals(root, g)


def format_call_graph_debug_text(g: nx.DiGraph) -> str:
    """One `caller -- n -> callee` line per edge, callers in topological generations."""
    lines = []
    for generation in nx.topological_generations(g):
        for caller in sorted(generation, key=str):
            for callee in sorted(g.succ[caller], key=str):
                lines.append(f"{caller} -- {g.edges[caller, callee]['n']} -> {callee}")
    return '\n'.join(lines)
