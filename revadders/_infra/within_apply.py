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

from typing import List

import cirq


def within_apply(compute: cirq.OP_TREE, action: cirq.OP_TREE) -> List[cirq.Operation]:
    """Sandwich `action` between `compute` and its inverse.

    This is the compute / action / uncompute pattern: `compute` prepares some temporary
    state, `action` uses it, and the inverse of `compute` restores the temporary state.
    Every operation in `compute` must support `cirq.inverse`.

    Both operation trees are fully materialized before anything is returned, so an error
    raised while building either of them means no operations are emitted at all.

    Args:
        compute: The operations that prepare the temporary state.
        action: The operations to run while the temporary state is prepared.

    Returns:
        `compute`, then `action`, then the inverse of `compute`.
    """
    compute_ops = list(cirq.flatten_to_ops(compute))
    action_ops = list(cirq.flatten_to_ops(action))
    return [*compute_ops, *action_ops, *cirq.inverse(compute_ops)]
