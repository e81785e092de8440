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
from typing import Union

import sympy

SymbolicInt = Union[int, sympy.Expr]
"""A bitsize or count: either a concrete integer or a sympy expression."""


def is_symbolic(*args) -> bool:
    """Whether any argument is a sympy object or reports itself as symbolic.

    Objects such as `Register` opt in by defining an `is_symbolic()` method.
    """
    for arg in args:
        if isinstance(arg, sympy.Basic):
            return True
        checker = getattr(arg, 'is_symbolic', None)
        if checker is not None and checker():
            return True
    return False
