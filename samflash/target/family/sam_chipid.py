# samflash
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

"""@brief Decoding of the SAM chip identification (CHIPID) registers.

Nothing in this module touches the target. decode() turns raw CIDR and EXID values into a
ChipDescriptor, and the probe routines in @ref samflash.target.family.target_sam "target_sam"
act on the result. The flash controller addresses of each family live here as well, since
both the probe routines and the console commands select them by family.
"""

from enum import Enum
from typing import (NamedTuple, Optional)

from ...utility.mask import Bitfield

# CHIPID register addresses.
SAM3X_CHIPID_CIDR = 0x400E0940
SAM3N_CHIPID_CIDR = 0x400E0740
SAMX7X_CHIPID_CIDR = 0x400E0940
SAMX7X_CHIPID_EXID = 0x400E0944

# Flash controller base addresses. Families with two banks have one EEFC per bank.
SAM3N_EEFC_BASE = 0x400E0A00
SAMX7X_EEFC_BASE = 0x400E0C00

def SAM3X_EEFC_BASE(n: int) -> int:
    return 0x400E0A00 + n * 0x200

def SAM3U_EEFC_BASE(n: int) -> int:
    return 0x400E0800 + n * 0x200

def SAM4S_EEFC_BASE(n: int) -> int:
    return 0x400E0A00 + n * 0x200

# CHIPID_CIDR fields.
CIDR_VERSION = Bitfield(4, 0, 'VERSION')
CIDR_EPROC = Bitfield(7, 5, 'EPROC')
CIDR_NVPSIZ = Bitfield(11, 8, 'NVPSIZ')
CIDR_SRAMSIZ = Bitfield(19, 16, 'SRAMSIZ')
CIDR_ARCH = Bitfield(27, 20, 'ARCH')
CIDR_EXT = Bitfield(31, 31, 'EXT')

# CHIPID_EXID fields.
EXID_PINS = Bitfield(1, 0, 'PINS')

# Embedded processor codes.
EPROC_CM7 = 0
EPROC_CM3 = 3
EPROC_CM4 = 7

# Architecture codes of the SAMx7 line.
ARCH_SAME70 = 0x10
ARCH_SAMS70 = 0x11
ARCH_SAMV71 = 0x12
ARCH_SAMV70 = 0x13

# Architecture codes of the SAM3/SAM4 line.
ARCH_SAM3UxC = 0x80
ARCH_SAM3UxE = 0x81
ARCH_SAM3XxC = 0x84
ARCH_SAM3XxE = 0x85
ARCH_SAM3XxG = 0x86
ARCH_SAM3SxA = 0x88
ARCH_SAM3SxB = 0x89
ARCH_SAM3SxC = 0x8A
ARCH_SAM3NxA = 0x93
ARCH_SAM3NxB = 0x94
ARCH_SAM3NxC = 0x95
ARCH_SAM4SDB = 0x99
ARCH_SAM4SDC = 0x9A

## SAM4S parts share their architecture codes with SAM3S and differ only in the processor.
ARCH_SAM4SxA = ARCH_SAM3SxA
ARCH_SAM4SxB = ARCH_SAM3SxB
ARCH_SAM4SxC = ARCH_SAM3SxC

## Placeholder for an undecodable character field.
UNKNOWN_CHAR = '_'

class SamFamily(Enum):
    """@brief Device families with a common flash layout."""
    SAM3X = 1
    SAM3NS = 2
    SAM3U = 3
    SAM4S = 4
    SAMX7X = 5
    UNKNOWN = 0

## Families of the SAM3/SAM4 line, keyed by (ARCH, EPROC).
LEGACY_FAMILIES = {
    (ARCH_SAM3XxC, EPROC_CM3): SamFamily.SAM3X,
    (ARCH_SAM3XxE, EPROC_CM3): SamFamily.SAM3X,
    (ARCH_SAM3XxG, EPROC_CM3): SamFamily.SAM3X,
    (ARCH_SAM3NxA, EPROC_CM3): SamFamily.SAM3NS,
    (ARCH_SAM3NxB, EPROC_CM3): SamFamily.SAM3NS,
    (ARCH_SAM3NxC, EPROC_CM3): SamFamily.SAM3NS,
    (ARCH_SAM3SxA, EPROC_CM3): SamFamily.SAM3NS,
    (ARCH_SAM3SxB, EPROC_CM3): SamFamily.SAM3NS,
    (ARCH_SAM3SxC, EPROC_CM3): SamFamily.SAM3NS,
    (ARCH_SAM3UxC, EPROC_CM3): SamFamily.SAM3U,
    (ARCH_SAM3UxE, EPROC_CM3): SamFamily.SAM3U,
    (ARCH_SAM4SxA, EPROC_CM4): SamFamily.SAM4S,
    (ARCH_SAM4SxB, EPROC_CM4): SamFamily.SAM4S,
    (ARCH_SAM4SxC, EPROC_CM4): SamFamily.SAM4S,
    (ARCH_SAM4SDB, EPROC_CM4): SamFamily.SAM4S,
    (ARCH_SAM4SDC, EPROC_CM4): SamFamily.SAM4S,
    }

## SAMx7 product code letter and product number, keyed by ARCH.
SAMX7X_PRODUCTS = {
    ARCH_SAME70: ('E', 70),
    ARCH_SAMS70: ('S', 70),
    ARCH_SAMV71: ('V', 71),
    ARCH_SAMV70: ('V', 70),
    }

## Flash size in bytes, keyed by NVPSIZ code.
FLASH_SIZES = {
    1: 8 * 1024,
    2: 16 * 1024,
    3: 32 * 1024,
    5: 64 * 1024,
    7: 128 * 1024,
    9: 256 * 1024,
    10: 512 * 1024,
    12: 1024 * 1024,
    14: 2048 * 1024,
    }

## SRAM size in bytes, keyed by SRAMSIZ code. Only the SAMx7 encodings are listed.
SRAM_SIZES = {
    13: 256 * 1024,
    2: 384 * 1024,
    }

## Density digits of the SAMx7 part number, keyed by flash size.
DENSITIES = {
    2048 * 1024: 21,
    1024 * 1024: 20,
    512 * 1024: 19,
    }

PIN_CODES = {
    0: 'J', # 64 pins
    1: 'N', # 100 pins
    2: 'Q', # 144 pins
    }

REVISIONS = {
    0: 'A',
    1: 'B',
    }

class ChipDescriptor(NamedTuple):
    """@brief Decoded chip identification.

    Fields that could not be decoded hold UNKNOWN_CHAR, 0, SamFamily.UNKNOWN or, for `ram_size`,
    None.
    """
    family: SamFamily
    arch: int
    eproc: int
    product_code: str
    product_id: int
    pins: str
    revision: str
    ram_size: Optional[int]
    flash_size: int
    density: int

    @property
    def is_known(self) -> bool:
        return self.family is not SamFamily.UNKNOWN

def decode_flash_size(code: int) -> int:
    """@brief Flash size in bytes for an NVPSIZ code, or 0 if the code is reserved."""
    return FLASH_SIZES.get(code, 0)

def decode_sram_size(code: int) -> Optional[int]:
    """@brief SRAM size in bytes for a SRAMSIZ code, or None if the code is not known."""
    return SRAM_SIZES.get(code)

def decode_density(flash_size: int) -> int:
    return DENSITIES.get(flash_size, 0)

def decode_family(cidr: int) -> SamFamily:
    """@brief Identify the family from ARCH, and from EPROC for the SAM3/SAM4 line."""
    arch = CIDR_ARCH.get(cidr)
    if arch in SAMX7X_PRODUCTS:
        return SamFamily.SAMX7X
    return LEGACY_FAMILIES.get((arch, CIDR_EPROC.get(cidr)), SamFamily.UNKNOWN)

def decode(cidr: int, exid: int = 0) -> ChipDescriptor:
    """@brief Decode the CIDR and EXID register values.

    @param cidr Value of CHIPID_CIDR.
    @param exid Value of CHIPID_EXID. Only used when the EXT bit of `cidr` is set.
    """
    arch = CIDR_ARCH.get(cidr)
    product_code, product_id = SAMX7X_PRODUCTS.get(arch, (UNKNOWN_CHAR, 0))

    if CIDR_EXT.get(cidr):
        pins = PIN_CODES.get(EXID_PINS.get(exid), UNKNOWN_CHAR)
    else:
        pins = UNKNOWN_CHAR

    flash_size = decode_flash_size(CIDR_NVPSIZ.get(cidr))

    return ChipDescriptor(
        family=decode_family(cidr),
        arch=arch,
        eproc=CIDR_EPROC.get(cidr),
        product_code=product_code,
        product_id=product_id,
        pins=pins,
        revision=REVISIONS.get(CIDR_VERSION.get(cidr), UNKNOWN_CHAR),
        ram_size=decode_sram_size(CIDR_SRAMSIZ.get(cidr)),
        flash_size=flash_size,
        density=decode_density(flash_size),
        )
