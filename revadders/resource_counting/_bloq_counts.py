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
"""Elementary gate counts, the main cost reported for an adder."""

import logging
from typing import Callable, Dict, TYPE_CHECKING

import attrs
import sympy
from attrs import frozen

from revadders.symbolics import SymbolicInt

from ._call_graph import get_bloq_callee_counts
from ._costing import CostKey

if TYPE_CHECKING:
    from revadders import Bloq

logger = logging.getLogger(__name__)


def _maybe_nonzero(v: SymbolicInt) -> bool:
    # A symbolic count is kept unless it simplifies to zero.
    return sympy.sympify(v) != 0


@frozen(kw_only=True)
class GateCounts:
    """How many of each elementary reversible gate a compilation uses.

    `and_bloq` counts computing `And`s, the dominant cost of both adders. `and_dagger` counts
    their uncomputation, which is much cheaper on most hardware and is reported separately.
    Counts may be sympy expressions for symbolic bitsizes.
    """

    x: SymbolicInt = 0
    cnot: SymbolicInt = 0
    toffoli: SymbolicInt = 0
    and_bloq: SymbolicInt = 0
    and_dagger: SymbolicInt = 0

    def _combine(self, f) -> 'GateCounts':
        return GateCounts(**{a.name: f(a.name) for a in attrs.fields(GateCounts)})

    def __add__(self, other):
        if not isinstance(other, GateCounts):
            raise TypeError(f"Cannot add {other!r} to GateCounts.")
        return self._combine(lambda k: getattr(self, k) + getattr(other, k))

    def __mul__(self, other):
        return self._combine(lambda k: other * getattr(self, k))

    __rmul__ = __mul__

    def __str__(self):
        return ', '.join(f'{k}: {v}' for k, v in self.asdict().items()) or '-'

    def asdict(self) -> Dict[str, SymbolicInt]:
        """The non-zero counts by gate name, in field order."""
        return {k: v for k, v in attrs.asdict(self).items() if _maybe_nonzero(v)}

    @property
    def total(self) -> SymbolicInt:
        return self.x + self.cnot + self.toffoli + self.and_bloq + self.and_dagger

    def total_toffoli_like(self) -> SymbolicInt:
        """Gates with two controls: `Toffoli`s plus computing `And`s."""
        return self.toffoli + self.and_bloq


@frozen
class ReversibleGatesCost(CostKey[GateCounts]):
    """Counts `XGate`, `CNOT`, `Toffoli`, `And` and `And†` leaves, as a `GateCounts`."""

    def compute(self, bloq: 'Bloq', get_callee_cost: Callable[['Bloq'], GateCounts]) -> GateCounts:
        from revadders.bloqs.basic_gates import CNOT, Toffoli, XGate
        from revadders.bloqs.mcmt import And

        if isinstance(bloq, And):
            return GateCounts(and_dagger=1) if bloq.uncompute else GateCounts(and_bloq=1)
        for leaf_type, field in ((XGate, 'x'), (CNOT, 'cnot'), (Toffoli, 'toffoli')):
            if isinstance(bloq, leaf_type):
                return GateCounts(**{field: 1})

        callees = get_bloq_callee_counts(bloq, ignore_decomp_failure=False)
        logger.info("Summing %s of %d callee(s) of %s", self, len(callees), bloq)
        totals = GateCounts()
        for callee, n in callees:
            totals += n * get_callee_cost(callee)
        return totals

    def zero(self) -> GateCounts:
        return GateCounts()

    def validate_val(self, val: GateCounts):
        if not isinstance(val, GateCounts):
            raise TypeError(f"{self} must be a GateCounts, not {val!r}.")

    def __str__(self):
        return 'gate counts'
