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

import logging
from typing import (List, NamedTuple, Optional, TYPE_CHECKING)

from ...commands.eefc_commands import EEFC_COMMANDS
from ...core.memory_map import FlashRegion
from ...flash.eefc import (EEFC_FCR_FCMD_EWP, EEFC_FCR_FCMD_WP, EraseMethod)
from . import sam_chipid
from .sam_chipid import (ChipDescriptor, SamFamily)

if TYPE_CHECKING:
    from ...core.target import Target

LOG = logging.getLogger(__name__)

class FamilyInfo(NamedTuple):
    """@brief Flash and RAM parameters shared by every device of a family."""
    ## None means the label is built from the chip descriptor.
    label: Optional[str]
    command_label: str
    ram_start: int
    ## None means the RAM size is taken from the chip descriptor.
    ram_length: Optional[int]
    page_size: int
    blocksize: int
    write_cmd: int
    erase_method: EraseMethod

class FlashBank(NamedTuple):
    eefc_base: int
    start: int
    length: int

SAM3_PAGE_SIZE = 256
SAM4_PAGE_SIZE = 512
SAM4_BLOCK_SIZE = SAM4_PAGE_SIZE * 8

FAMILY_INFO = {
    SamFamily.SAM3X: FamilyInfo("Atmel SAM3X", "SAM3X", 0x20000000, 0x200000,
        SAM3_PAGE_SIZE, SAM3_PAGE_SIZE, EEFC_FCR_FCMD_EWP, EraseMethod.WRITE_ERASES),
    SamFamily.SAM3NS: FamilyInfo("Atmel SAM3N/S", "SAM3N/S", 0x20000000, 0x200000,
        SAM3_PAGE_SIZE, SAM3_PAGE_SIZE, EEFC_FCR_FCMD_EWP, EraseMethod.WRITE_ERASES),
    SamFamily.SAM3U: FamilyInfo("Atmel SAM3U", "SAM3U", 0x20000000, 0x200000,
        SAM3_PAGE_SIZE, SAM3_PAGE_SIZE, EEFC_FCR_FCMD_EWP, EraseMethod.WRITE_ERASES),
    SamFamily.SAM4S: FamilyInfo("Atmel SAM4S", "SAM4S", 0x20000000, 0x400000,
        SAM4_PAGE_SIZE, SAM4_BLOCK_SIZE, EEFC_FCR_FCMD_WP, EraseMethod.PAGE_ERASE),
    SamFamily.SAMX7X: FamilyInfo(None, "SAMX7X", 0x20400000, None,
        SAM4_PAGE_SIZE, SAM4_BLOCK_SIZE, EEFC_FCR_FCMD_WP, EraseMethod.PAGE_ERASE),
    }

## Largest bank of the SAM3U. Bigger parts continue in a second bank at 0x100000.
SAM3U_BANK0_MAX = 0x80000

## Largest SAM4S part with a single bank.
SAM4S_SINGLE_BANK_MAX = 0x80000

def flash_banks(family: SamFamily, flash_size: int) -> List[FlashBank]:
    """@brief Compute the flash banks of a device.

    The bank lengths add up to `flash_size`, and banks are listed in ascending address order.
    """
    if flash_size == 0:
        return []

    if family is SamFamily.SAM3X:
        # Two banks back to back starting at 0x80000.
        half = flash_size // 2
        return [
            FlashBank(sam_chipid.SAM3X_EEFC_BASE(0), 0x80000, half),
            FlashBank(sam_chipid.SAM3X_EEFC_BASE(1), 0x80000 + half, half),
            ]
    elif family is SamFamily.SAM3NS:
        return [FlashBank(sam_chipid.SAM3N_EEFC_BASE, 0x400000, flash_size)]
    elif family is SamFamily.SAM3U:
        banks = [FlashBank(sam_chipid.SAM3U_EEFC_BASE(0), 0x80000, min(flash_size, SAM3U_BANK0_MAX))]
        if flash_size > SAM3U_BANK0_MAX:
            banks.append(FlashBank(sam_chipid.SAM3U_EEFC_BASE(1), 0x100000,
                    flash_size - SAM3U_BANK0_MAX))
        return banks
    elif family is SamFamily.SAM4S:
        if flash_size <= SAM4S_SINGLE_BANK_MAX:
            return [FlashBank(sam_chipid.SAM4S_EEFC_BASE(0), 0x400000, flash_size)]
        half = flash_size // 2
        return [
            FlashBank(sam_chipid.SAM4S_EEFC_BASE(0), 0x400000, half),
            FlashBank(sam_chipid.SAM4S_EEFC_BASE(1), 0x400000 + half, half),
            ]
    elif family is SamFamily.SAMX7X:
        return [FlashBank(sam_chipid.SAMX7X_EEFC_BASE, 0x400000, flash_size)]
    else:
        return []

def format_part_number(descriptor: ChipDescriptor) -> str:
    """@brief Build the device label.

    SAMx7 devices get a full part number such as "SAME70Q21A". The older families have a fixed
    label per family.
    """
    if descriptor.family is SamFamily.SAMX7X:
        return "SAM%c%02d%c%d%c" % (descriptor.product_code, descriptor.product_id, descriptor.pins,
                descriptor.density, descriptor.revision)
    return FAMILY_INFO[descriptor.family].label

def build_regions(target: "Target", descriptor: ChipDescriptor) -> bool:
    """@brief Register the RAM and flash regions, label and commands of a device.

    A region that cannot be created for lack of memory is skipped with a warning, as are a RAM
    region of unknown size and flash of size 0.

    @return True if at least one region was registered. Nothing but regions has been registered
        on the target when False is returned.
    """
    info = FAMILY_INFO.get(descriptor.family)
    if info is None:
        LOG.debug("no memory layout for device family %s", descriptor.family)
        return False

    part_number = format_part_number(descriptor)
    region_count = 0

    ram_length = info.ram_length if (info.ram_length is not None) else descriptor.ram_size
    if ram_length is None:
        LOG.warning("%s: unknown SRAM size, no RAM region added", part_number)
    else:
        try:
            target.add_ram_region(info.ram_start, ram_length)
            region_count += 1
        except MemoryError:
            LOG.warning("%s: out of memory adding RAM region at 0x%08x", part_number, info.ram_start)

    banks = flash_banks(descriptor.family, descriptor.flash_size)
    if not banks:
        LOG.warning("%s: unknown flash size, no flash region added", part_number)
    for n, bank in enumerate(banks):
        try:
            region = FlashRegion(
                name="flash%d" % n if (len(banks) > 1) else "flash",
                start=bank.start,
                length=bank.length,
                blocksize=info.blocksize,
                page_size=info.page_size,
                is_boot_memory=(n == 0),
                family=descriptor.family,
                eefc_base=bank.eefc_base,
                write_cmd=info.write_cmd,
                erase_method=info.erase_method,
                )
            target.add_flash_region(region)
            region_count += 1
        except MemoryError:
            LOG.warning("%s: out of memory adding flash region at 0x%08x", part_number, bank.start)

    if region_count == 0:
        return False

    target.family = descriptor.family
    target.part_number = part_number
    target.add_commands(EEFC_COMMANDS, info.command_label)

    LOG.info("%s: %d KB flash in %d bank(s), %s RAM", part_number, descriptor.flash_size // 1024,
            len(banks), ("%d KB" % (ram_length // 1024)) if (ram_length is not None) else "unknown")
    return True

def samx7x_probe(target: "Target") -> bool:
    """@brief Probe for a SAME70, SAMS70, SAMV70 or SAMV71 device."""
    cidr = target.read32(sam_chipid.SAMX7X_CHIPID_CIDR)
    exid = 0
    if sam_chipid.CIDR_EXT.get(cidr):
        exid = target.read32(sam_chipid.SAMX7X_CHIPID_EXID)

    descriptor = sam_chipid.decode(cidr, exid)
    if descriptor.family is not SamFamily.SAMX7X:
        return False

    LOG.debug("CIDR=0x%08x EXID=0x%08x: %s", cidr, exid, descriptor)
    return build_regions(target, descriptor)

def sam3x_probe(target: "Target") -> bool:
    """@brief Probe for a SAM3X, SAM3N, SAM3S, SAM3U or SAM4S device.

    The SAM3X has its CHIPID at a different address from the other families, so it is checked
    first.
    """
    cidr = target.read32(sam_chipid.SAM3X_CHIPID_CIDR)
    descriptor = sam_chipid.decode(cidr)
    if descriptor.family is SamFamily.SAM3X:
        LOG.debug("CIDR=0x%08x: %s", cidr, descriptor)
        return build_regions(target, descriptor)

    cidr = target.read32(sam_chipid.SAM3N_CHIPID_CIDR)
    descriptor = sam_chipid.decode(cidr)
    if descriptor.family in (SamFamily.SAM3NS, SamFamily.SAM3U, SamFamily.SAM4S):
        LOG.debug("CIDR=0x%08x: %s", cidr, descriptor)
        return build_regions(target, descriptor)

    return False
