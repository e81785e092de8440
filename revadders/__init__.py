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

# isort:skip_file

"""The top-level revadders module.

Fundamental objects for expressing reversible circuits can be imported from this
top-level namespace like `revadders.Bloq`, `revadders.Register` and `revadders.Signature`.

The adders and their building blocks must be imported from the `revadders.bloqs` submodule.
Analysis protocols are available in submodules as well: `revadders.resource_counting`
and `revadders.simulation`.
"""

# --------------------------------------------------------------------------------------------------
# Tier 1: Basic bloq data structures.
#
# Allowed external dependencies: attrs, cirq, numpy, sympy
# Allowed internal dependencies: other modules in tier 1, revadders.symbolics.

# Internal imports: none
# External imports: none
from ._infra.bloq import Bloq, DecomposeTypeError, DecomposeNotImplementedError

# Internal imports: none
# External:
#  - sympy: symbolic bitsizes
from ._infra.registers import Register, Signature, Side

# External:
#  - cirq: Gate, Qid
#  - numpy: making cirq quregs
from ._infra.gate_with_registers import GateWithRegisters

from ._infra.composite_bloq import CompositeBloq

from ._infra.adjoint import Adjoint

from ._infra.within_apply import within_apply

from .exception import ConfigurationError, ResourceSizingError

from ._version import __version__

# --------------------------------------------------------------------------------------------------
