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
"""The `Bloq` interface shared by every gate, adder and carry-network stage."""

import abc
from typing import Callable, Dict, Optional, Sequence, Tuple, TYPE_CHECKING, Union

if TYPE_CHECKING:
    import cirq
    import networkx as nx
    import sympy
    from numpy.typing import NDArray

    from revadders import CompositeBloq, Signature
    from revadders.resource_counting import (
        BloqCountDictT,
        CostKey,
        GeneralizerT,
        SympySymbolAllocator,
    )
    from revadders.simulation.classical_sim import ClassicalValT


class DecomposeNotImplementedError(NotImplementedError):
    """The bloq could be decomposed, but no decomposition has been written for it."""


class DecomposeTypeError(TypeError):
    """The bloq cannot be decomposed.

    Elementary gates raise this because they are the bottom of the hierarchy. Bloqs with a
    symbolic bitsize raise it because no concrete gate list exists for them.
    """


class Bloq(metaclass=abc.ABCMeta):
    """A reversible subroutine with named registers.

    Bloqs form a hierarchy. An adder is defined by the operations yielded from
    `decompose_from_registers`; each operation applies another bloq to some of the adder's
    qubits or to auxiliary qubits from the qubit manager. The leaves are the elementary gates
    `XGate`, `CNOT`, `Toffoli` and `And`, which raise `DecomposeTypeError`.

    Only `signature` is abstract. Subclasses override the other methods to supply a
    decomposition, a classical action, explicit call counts or static costs.
    """

    @property
    @abc.abstractmethod
    def signature(self) -> 'Signature':
        """The registers this bloq acts on, in order."""

    def pretty_name(self) -> str:
        """The label profilers use for this kind of bloq. Independent of attributes."""
        return self.__class__.__name__

    def decompose_from_registers(
        self, *, context: 'cirq.DecompositionContext', **quregs: 'NDArray[cirq.Qid]'
    ) -> 'cirq.OP_TREE':
        """Yield the operations that implement this bloq on `quregs`.

        Args:
            context: Auxiliary qubits must be obtained from, and returned to,
                `context.qubit_manager`.
            **quregs: One 1-D array of qubits per register, least significant bit first.
        """
        raise DecomposeNotImplementedError(f"{self} does not declare a decomposition.")

    def decompose_bloq(
        self, context: Optional['cirq.DecompositionContext'] = None
    ) -> 'CompositeBloq':
        """Apply this bloq to named qubits and record one level of its decomposition.

        Args:
            context: Defaults to one with a fresh `cirq.SimpleQubitManager`.

        Raises:
            DecomposeTypeError: For elementary gates and symbolic bitsizes.
            DecomposeNotImplementedError: If `decompose_from_registers` is not overridden.
        """
        from revadders._infra.composite_bloq import CompositeBloq

        return CompositeBloq.from_bloq(self, context=context)

    def adjoint(self) -> 'Bloq':
        """The inverse of this bloq.

        Self-inverse gates return themselves and `And` flips its `uncompute` flag. Everything
        else is wrapped in `Adjoint`, which runs the decomposition backwards.
        """
        from revadders._infra.adjoint import Adjoint

        return Adjoint(subbloq=self)

    def on_classical_vals(
        self, **vals: Union['sympy.Symbol', 'ClassicalValT']
    ) -> Dict[str, 'ClassicalValT']:
        """Map input register values to output register values.

        Elementary gates override this. Composite bloqs fall back to simulating their
        decomposition bit by bit. Prefer `call_classically`, which validates the values.

        Args:
            **vals: One integer per left (or thru) register.

        Returns:
            One integer per right (or thru) register.
        """
        try:
            return self.decompose_bloq().on_classical_vals(**vals)
        except DecomposeTypeError as e:
            raise NotImplementedError(f"{self} is not classically simulable.") from e
        except DecomposeNotImplementedError as e:
            raise NotImplementedError(
                f"{self} has no decomposition and does not "
                f"support classical simulation directly"
            ) from e

    def call_classically(self, **vals: 'ClassicalValT') -> Tuple['ClassicalValT', ...]:
        """Run this bloq on integers.

        Args:
            **vals: One value in `[0, 2**bitsize)` per left (or thru) register. Right-only
                registers such as an adder's `z` start at zero and are not passed.

        Returns:
            The output values in the order of the right (or thru) registers.
        """
        from revadders.simulation.classical_sim import call_bloq_classically

        res = call_bloq_classically(self, **vals)
        return tuple(res[reg.name] for reg in self.signature.rights())

    def build_call_graph(self, ssa: 'SympySymbolAllocator') -> 'BloqCountDictT':
        """The bloqs this bloq calls directly and how many times.

        The default counts the operations of `decompose_bloq()`. Override it when the counts
        are known in closed form, in particular for symbolic bitsizes.
        """
        return self.decompose_bloq().build_call_graph(ssa)

    def my_static_costs(self, cost_key: 'CostKey'):
        """A precomputed value for `cost_key`, or `NotImplemented` to compute it."""
        return NotImplemented

    def call_graph(
        self,
        generalizer: Optional[Union['GeneralizerT', Sequence['GeneralizerT']]] = None,
        keep: Optional[Callable[['Bloq'], bool]] = None,
        max_depth: Optional[int] = None,
    ) -> Tuple['nx.DiGraph', Dict['Bloq', Union[int, 'sympy.Expr']]]:
        """The full call graph below this bloq and the total calls to each leaf.

        See `revadders.resource_counting.get_bloq_call_graph` for the arguments.

        Returns:
            g: Edges go from caller to callee; the `n` attribute is the number of calls.
            sigma: Total calls to each leaf bloq.
        """
        from revadders.resource_counting import get_bloq_call_graph

        return get_bloq_call_graph(self, generalizer=generalizer, keep=keep, max_depth=max_depth)

    def bloq_counts(
        self, generalizer: Optional[Union['GeneralizerT', Sequence['GeneralizerT']]] = None
    ) -> Dict['Bloq', Union[int, 'sympy.Expr']]:
        """The first level of `call_graph()`."""
        from revadders.resource_counting import get_bloq_callee_counts

        return dict(get_bloq_callee_counts(self, generalizer=generalizer))

    def __str__(self):
        return self.__class__.__name__
