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
from typing import Iterable

import sympy

from revadders.symbolics.types import is_symbolic, SymbolicInt


def smax(*args):
    """`max` that builds a `sympy.Max` when any argument is symbolic.

    Accepts either several values or a single iterable of values.
    """
    if len(args) == 1 and isinstance(args[0], Iterable):
        args = tuple(args[0])
    if not args:
        raise ValueError("smax() needs at least one value.")
    if len(args) == 1:
        return args[0]
    if is_symbolic(*args):
        return sympy.Max(*args)
    return max(args)


def ssum(args: Iterable[SymbolicInt]) -> SymbolicInt:
    """`sum` that keeps sympy expressions intact and returns plain `0` when empty."""
    total: SymbolicInt = 0
    for arg in args:
        total = total + arg
    return total
