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

"""Bit-level helpers used for sizing registers and packing classical values.

Registers are little-endian throughout: qubit `k` of a register holds bit `k` of the value.
"""

from typing import Iterable, Iterator

_WORD_MASK = 0xFFFFFFFFFFFFFFFF
_M1 = 0x5555555555555555
_M2 = 0x3333333333333333
_M4 = 0x0F0F0F0F0F0F0F0F
_H01 = 0x0101010101010101


def _popcount_word(x: int) -> int:
    """Set bits in a 64-bit word by parallel pairwise summation."""
    x = x - ((x >> 1) & _M1)
    x = (x & _M2) + ((x >> 2) & _M2)
    x = (x + (x >> 4)) & _M4
    return ((x * _H01) & _WORD_MASK) >> 56


def hamming_weight(n: int) -> int:
    """The number of set bits in the binary representation of `n`.

    Each 64-bit word of `n` is reduced with a fixed number of shift/mask/add steps
    rather than by visiting individual bits.

    Args:
        n: A non-negative integer of any size.

    Raises:
        ValueError: If `n` is negative.
    """
    n = int(n)
    if n < 0:
        raise ValueError(f"Hamming weight is undefined for negative {n=}.")
    weight = 0
    while n:
        weight += _popcount_word(n & _WORD_MASK)
        n >>= 64
    return weight


def floor_log2(n: int) -> int:
    """Largest `t` such that `2**t <= n`."""
    n = int(n)
    if n < 1:
        raise ValueError(f"floor_log2 requires a positive integer, got {n}.")
    return n.bit_length() - 1


def iter_bits(val: int, width: int) -> Iterator[int]:
    """Iterate over the bits in a binary representation of `val`.

    This uses a little-endian convention where the least significant bit
    is yielded first.

    Args:
        val: The integer value. Its bitsize must fit within `width`
        width: The number of output bits.
    """
    if val < 0:
        raise ValueError(f"{val} is negative.")
    if val.bit_length() > width:
        raise ValueError(f"{val} exceeds width {width}.")
    for k in range(width):
        yield (val >> k) & 1


def bits_to_int(bits: Iterable[int]) -> int:
    """Inverse of `iter_bits`: pack little-endian bits into an integer."""
    val = 0
    for k, b in enumerate(bits):
        if b not in (0, 1):
            raise ValueError(f"Bit {k} has non-binary value {b}.")
        val |= int(b) << k
    return val
