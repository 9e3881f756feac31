# samflash
# Copyright (c) 2006-2019 Arm Limited
# Copyright (c) 2021 Chris Reed
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
from xml.etree import ElementTree
from typing import (List, NamedTuple, Optional, Sequence, TYPE_CHECKING, Type)

from .memory_interface import MemoryInterface
from .memory_map import (FlashRegion, MemoryMap, MemoryType, RamRegion)

if TYPE_CHECKING:
    from .session import Session
    from ..commands.base import CommandBase
    from ..target.family.sam_chipid import SamFamily

LOG = logging.getLogger(__name__)

## Longest device label kept on a target.
MAX_PART_NUMBER_LENGTH = 59

MAP_XML_HEADER = b"""<?xml version="1.0"?>
<!DOCTYPE memory-map PUBLIC "+//IDN gnu.org//DTD GDB Memory Map V1.0//EN" "http://sourceware.org/gdb/gdb-memory-map.dtd">
"""

## Maps the memory region type to the corresponding GDB memory map type name.
GDB_TYPE_MAP = {
    MemoryType.RAM: 'ram',
    MemoryType.FLASH: 'flash',
    }

class CommandGroup(NamedTuple):
    """@brief Console commands contributed by a device family."""
    label: str
    commands: Sequence[Type["CommandBase"]]

class Target(MemoryInterface):
    """@brief A SAM device attached through a debug link.

    Memory accesses are forwarded to the link the target was created with. Everything else the
    target holds is filled in by a probe routine: the memory map, the device label, the family
    tag and the console commands. release() drops all of it again.
    """

    def __init__(self, session: Optional["Session"], link: MemoryInterface) -> None:
        self._session = session
        self._link = link
        self._memory_map = MemoryMap()
        self._part_number: Optional[str] = None
        self._family: Optional["SamFamily"] = None
        self._command_groups: List[CommandGroup] = []
        self._released = False

    @property
    def session(self) -> Optional["Session"]:
        return self._session

    @property
    def link(self) -> MemoryInterface:
        return self._link

    @property
    def memory_map(self) -> MemoryMap:
        return self._memory_map

    @property
    def part_number(self) -> Optional[str]:
        """@brief Human readable device label, such as "SAME70Q21A" or "Atmel SAM3X"."""
        return self._part_number

    @part_number.setter
    def part_number(self, value: Optional[str]) -> None:
        if (value is not None) and (len(value) > MAX_PART_NUMBER_LENGTH):
            LOG.debug("truncating part number '%s'", value)
            value = value[:MAX_PART_NUMBER_LENGTH]
        self._part_number = value

    @property
    def family(self) -> Optional["SamFamily"]:
        return self._family

    @family.setter
    def family(self, value: Optional["SamFamily"]) -> None:
        self._family = value

    @property
    def command_groups(self) -> List[CommandGroup]:
        return self._command_groups

    @property
    def is_released(self) -> bool:
        return self._released

    def add_flash_region(self, region: FlashRegion) -> None:
        """@brief Add a flash region to the memory map and bind its flash object.

        The flash object is created first, so the map is unchanged if that fails.

        @exception ValueError The region overlaps one already registered.
        """
        flash = region.flash_class(self, region)
        self._memory_map.add_region(region)
        region.flash = flash

    def add_ram_region(self, start: int, length: int) -> RamRegion:
        """@brief Create and add a RAM region.

        @exception ValueError The length is not positive or the region overlaps another.
        """
        region = RamRegion(start=start, length=length)
        self._memory_map.add_region(region)
        return region

    def add_commands(self, command_classes: Sequence[Type["CommandBase"]], family_label: str) -> None:
        """@brief Register console commands under a family label."""
        self._command_groups.append(CommandGroup(family_label, tuple(command_classes)))

    def release(self) -> None:
        """@brief Drop the regions, label and commands. Only the first call has an effect."""
        if self._released:
            return
        self._released = True
        LOG.debug("releasing target %s", self._part_number)
        for region in self._memory_map.iter_matching_regions(is_flash=True):
            region.flash = None
        self._memory_map.clear()
        self._command_groups = []
        self._part_number = None
        self._family = None

    def get_memory_map_xml(self) -> bytes:
        """@brief Generate GDB memory map XML for the registered regions."""
        root = ElementTree.Element('memory-map')
        for r in self._memory_map:
            # Regions default to ram if gdb doesn't have a concept of the region type.
            gdb_type = GDB_TYPE_MAP.get(r.type, 'ram')

            mem = ElementTree.SubElement(root, 'memory', type=gdb_type, start=hex(r.start),
                    length=hex(r.length))
            if r.is_flash:
                prop = ElementTree.SubElement(mem, 'property', name='blocksize')
                prop.text = hex(r.blocksize)
        return MAP_XML_HEADER + ElementTree.tostring(root)

    def write_memory(self, addr: int, data: int, transfer_size: int = 32) -> None:
        self._link.write_memory(addr, data, transfer_size)

    def read_memory(self, addr: int, transfer_size: int = 32) -> int:
        return self._link.read_memory(addr, transfer_size)

    def write_memory_block32(self, addr: int, data: Sequence[int]) -> None:
        self._link.write_memory_block32(addr, data)

    def write_memory_block8(self, addr: int, data: Sequence[int]) -> None:
        self._link.write_memory_block8(addr, data)

    def transport_error(self) -> bool:
        return self._link.transport_error()

    def __repr__(self) -> str:
        return "<%s@0x%x part_number=%s family=%s regions=%d>" % (self.__class__.__name__, id(self),
                self._part_number, self._family, len(self._memory_map))
