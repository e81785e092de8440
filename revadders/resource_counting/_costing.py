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
"""The cost-key protocol: recursive, cached cost computations over the call graph."""

import abc
import logging
import time
from collections import defaultdict
from typing import (
    Callable,
    Dict,
    Generic,
    Iterable,
    Optional,
    Sequence,
    TYPE_CHECKING,
    TypeVar,
    Union,
)

from ._generalization import _as_generalizer, GeneralizerT

if TYPE_CHECKING:
    from revadders import Bloq

logger = logging.getLogger(__name__)

CostValT = TypeVar('CostValT')


class CostKey(Generic[CostValT], metaclass=abc.ABCMeta):
    """One kind of cost, such as gate counts or peak qubit count.

    A cost key computes its value for a bloq, usually by combining the values of the bloq's
    callees. Subclasses must be hashable since they are used as dictionary keys.

    Query costs with `get_cost_value`, `get_cost_cache` or `query_costs`, which cache
    intermediate values, honor `Bloq.my_static_costs` and apply generalizers.
    """

    @abc.abstractmethod
    def compute(self, bloq: 'Bloq', get_callee_cost: Callable[['Bloq'], CostValT]) -> CostValT:
        """Compute the cost of `bloq`.

        Args:
            bloq: The bloq to cost.
            get_callee_cost: Returns the (cached) cost of a callee. Use it to recurse.
        """

    @abc.abstractmethod
    def zero(self) -> CostValT:
        """The cost of doing nothing."""

    def validate_val(self, val: CostValT):
        """Raise if a static cost is not a valid value for this key."""


def _get_cost_value(
    bloq: 'Bloq',
    cost_key: CostKey[CostValT],
    *,
    costs_cache: Dict['Bloq', CostValT],
    generalizer: 'GeneralizerT',
) -> CostValT:
    """Look the cost up in `costs_cache`, then in the static costs, and finally compute it.

    Computed and static values are written back into `costs_cache`.
    """
    bloq = generalizer(bloq)
    if bloq is None:
        return cost_key.zero()

    if bloq in costs_cache:
        logger.debug("Using cached %s for %s", cost_key, bloq)
        return costs_cache[bloq]

    static_cost = bloq.my_static_costs(cost_key)
    if static_cost is not NotImplemented:
        cost_key.validate_val(static_cost)
        logger.info("Using static %s for %s", cost_key, bloq)
        costs_cache[bloq] = static_cost
        return static_cost

    def _callee_cost(callee: 'Bloq') -> CostValT:
        return _get_cost_value(callee, cost_key, costs_cache=costs_cache, generalizer=generalizer)

    tstart = time.perf_counter()
    computed_cost = cost_key.compute(bloq, _callee_cost)
    logger.info("Computed %s for %s in %g s", cost_key, bloq, time.perf_counter() - tstart)
    costs_cache[bloq] = computed_cost
    return computed_cost


def get_cost_value(
    bloq: 'Bloq',
    cost_key: CostKey[CostValT],
    costs_cache: Optional[Dict['Bloq', CostValT]] = None,
    generalizer: Optional[Union['GeneralizerT', Sequence['GeneralizerT']]] = None,
) -> CostValT:
    """The value of `cost_key` for `bloq`.

    Args:
        bloq: The bloq to cost, for example an adder or an adder program.
        cost_key: Which cost to compute.
        costs_cache: Known values, which take precedence over computed ones. It is updated
            with every value computed along the way.
        generalizer: Applied to each bloq before it is costed. Bloqs generalized to `None`
            cost `cost_key.zero()`. A sequence of generalizers is applied in order.
    """
    if costs_cache is None:
        costs_cache = {}
    return _get_cost_value(
        bloq, cost_key, costs_cache=costs_cache, generalizer=_as_generalizer(generalizer)
    )


def get_cost_cache(
    bloq: 'Bloq',
    cost_key: CostKey[CostValT],
    costs_cache: Optional[Dict['Bloq', CostValT]] = None,
    generalizer: Optional[Union['GeneralizerT', Sequence['GeneralizerT']]] = None,
) -> Dict['Bloq', CostValT]:
    """The value of `cost_key` for `bloq` and for every bloq it calls, directly or not.

    This is the per-subroutine breakdown a profiler needs. Arguments are as for
    `get_cost_value`; `costs_cache` is updated in place and returned.
    """
    if costs_cache is None:
        costs_cache = {}
    _get_cost_value(
        bloq, cost_key, costs_cache=costs_cache, generalizer=_as_generalizer(generalizer)
    )
    return costs_cache


def query_costs(
    bloq: 'Bloq',
    cost_keys: Iterable[CostKey],
    generalizer: Optional[Union['GeneralizerT', Sequence['GeneralizerT']]] = None,
) -> Dict['Bloq', Dict[CostKey, CostValT]]:
    """A table of several costs for `bloq` and its callees, indexed by bloq then cost key."""
    costs: Dict['Bloq', Dict[CostKey, CostValT]] = defaultdict(dict)
    for cost_key in cost_keys:
        for callee, val in get_cost_cache(bloq, cost_key, generalizer=generalizer).items():
            costs[callee][cost_key] = val
    return dict(costs)
