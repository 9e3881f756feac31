# samflash
# Copyright (c) 2015-2019 Arm Limited
# Copyright (c) 2026 samflash contributors
# SPDX-License-Identifier: Apache-2.0
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from typing import Optional

def bitmask(*args) -> int:
    """@brief Returns a mask with specified bit ranges set.

    Each argument may be either a 2-tuple of (msb, lsb) bit positions, or an individual bit
    position. The result is the OR of the masks produced by every argument.

    Example:
    @code
      >>> hex(bitmask((27, 20), 31))
      '0x8ff00000'
    @endcode
    """
    mask = 0
    for a in args:
        if isinstance(a, tuple):
            hi, lo = a
            mask |= ((1 << (hi - lo + 1)) - 1) << lo
        elif isinstance(a, int):
            mask |= 1 << a
    return mask

def bfx(value: int, msb: int, lsb: int) -> int:
    """@brief Extract a value from a bitfield."""
    mask = bitmask((msb, lsb))
    return (value & mask) >> lsb

def bfi(value: int, msb: int, lsb: int, field: int) -> int:
    """@brief Change a bitfield value."""
    mask = bitmask((msb, lsb))
    value &= ~mask
    value |= (field << lsb) & mask
    return value

class Bitfield:
    """@brief Represents a bitfield of a register.

    Used to describe the fields of the chip identification registers, so that register
    decoding reads the same as the register tables of the datasheet.
    """

    def __init__(self, msb: int, lsb: Optional[int] = None, name: Optional[str] = None) -> None:
        self._msb = msb
        self._lsb = lsb if (lsb is not None) else msb
        self._name = name
        assert self._msb >= self._lsb

    @property
    def name(self) -> Optional[str]:
        return self._name

    @property
    def width(self) -> int:
        return self._msb - self._lsb + 1

    @property
    def mask(self) -> int:
        """@brief The in-place mask of the field within a register value."""
        return bitmask((self._msb, self._lsb))

    def get(self, value: int) -> int:
        """@brief Extract the bitfield value from a register value.
        @param self The Bitfield object.
        @param value Integer register value.
        @return Integer value of the bitfield extracted from `value`.
        """
        return bfx(value, self._msb, self._lsb)

    def set(self, register_value: int, field_value: int) -> int:
        """@brief Modify the bitfield in a register value.
        @param self The Bitfield object.
        @param register_value Integer register value.
        @param field_value New value for the bitfield. Must not be shifted into place already.
        @return Integer register value with the bitfield updated to `field_value`.
        """
        return bfi(register_value, self._msb, self._lsb, field_value)

    def __repr__(self) -> str:
        return "<{}@{:x} name={} {}:{}>".format(self.__class__.__name__, id(self), self._name, self._msb, self._lsb)
