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

from .full_adder import FullAdder
from .ripple_carry import RippleCarryAdder, ripple_carry_adder
from .carry_lookahead import (
    carry_lookahead_adder,
    carry_workspace_partition,
    carry_workspace_size,
    CarryLookaheadAdder,
    ComputeCarries,
    CRounds,
    GRounds,
    PRounds,
)
from .entry_points import (
    ADDER_PROGRAMS,
    AdderProgram,
    CarryLookaheadAdderProgram,
    make_adder_program,
    RippleCarryAdderProgram,
)
