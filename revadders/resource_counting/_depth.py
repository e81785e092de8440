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

from typing import Optional, TYPE_CHECKING

import cirq

from revadders import DecomposeNotImplementedError, DecomposeTypeError
from revadders._infra.gate_with_registers import total_bits

if TYPE_CHECKING:
    from revadders import Bloq


def get_circuit_depth(bloq: 'Bloq', context: Optional[cirq.DecompositionContext] = None) -> int:
    """The number of moments in the fully decomposed circuit of `bloq`.

    Operations are placed with Cirq's default earliest-moment strategy, so this is the depth
    in elementary gates when independent gates run in parallel. An atomic bloq has depth one.
    """
    try:
        cbloq = bloq.decompose_bloq(context=context)
    except (DecomposeNotImplementedError, DecomposeTypeError):
        return 1 if total_bits(bloq.signature) else 0
    return len(cbloq.flatten().to_cirq_circuit())
