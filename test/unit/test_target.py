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

import pytest
from xml.etree import ElementTree

from samflash.commands.eefc_commands import EEFC_COMMANDS
from samflash.core.memory_map import FlashRegion
from samflash.core.target import (MAP_XML_HEADER, MAX_PART_NUMBER_LENGTH, Target)
from samflash.flash.eefc import (EEFCFlash, EEFC_FCR_FCMD_WP, EraseMethod)
from samflash.target.family.sam_chipid import SamFamily
from mockmemory import MockMemory

@pytest.fixture(scope='function')
def target():
    return Target(None, MockMemory())

def make_flash(start=0x400000, length=0x4000, **attrs):
    return FlashRegion(start=start, length=length, blocksize=0x2000, page_size=0x200,
            eefc_base=0x400E0C00, write_cmd=EEFC_FCR_FCMD_WP, erase_method=EraseMethod.PAGE_ERASE,
            **attrs)

class TestTarget:
    def test_initial_state(self, target):
        assert target.memory_map.is_empty
        assert target.part_number is None
        assert target.family is None
        assert target.command_groups == []
        assert not target.is_released

    def test_add_flash_binds_flash(self, target):
        region = make_flash()
        target.add_flash_region(region)
        assert isinstance(region.flash, EEFCFlash)
        assert region.flash.region is region
        assert target.memory_map.get_region_for_address(0x401000) is region

    def test_add_flash_failing_flash_object(self, target):
        class FailingFlash(EEFCFlash):
            def __init__(self, target, region):
                raise MemoryError()
        region = make_flash(flash_class=FailingFlash)
        with pytest.raises(MemoryError):
            target.add_flash_region(region)
        assert target.memory_map.is_empty
        assert region.map is None
        assert region.flash is None

    def test_add_ram(self, target):
        region = target.add_ram_region(0x20400000, 0x60000)
        assert region.is_ram
        assert region.end == 0x2045ffff
        assert target.memory_map.get_first_matching_region(is_ram=True) is region

    def test_add_overlapping(self, target):
        target.add_ram_region(0x20000000, 0x1000)
        with pytest.raises(ValueError):
            target.add_ram_region(0x20000800, 0x1000)

    def test_part_number_truncated(self, target):
        target.part_number = "X" * 100
        assert len(target.part_number) == MAX_PART_NUMBER_LENGTH
        target.part_number = "SAME70Q21A"
        assert target.part_number == "SAME70Q21A"

    def test_add_commands(self, target):
        target.add_commands(EEFC_COMMANDS, "SAMX7X")
        assert len(target.command_groups) == 1
        assert target.command_groups[0].label == "SAMX7X"
        assert tuple(target.command_groups[0].commands) == EEFC_COMMANDS

    def test_release(self, target):
        region = make_flash()
        target.add_flash_region(region)
        target.add_ram_region(0x20400000, 0x60000)
        target.add_commands(EEFC_COMMANDS, "SAMX7X")
        target.part_number = "SAME70Q21A"
        target.family = SamFamily.SAMX7X

        target.release()
        assert target.is_released
        assert target.memory_map.is_empty
        assert region.flash is None
        assert target.command_groups == []
        assert target.part_number is None
        assert target.family is None

        # A second release does nothing.
        target.release()
        assert target.is_released

    def test_memory_access_forwarded(self, target):
        target.write32(0x20400000, 0x12345678)
        assert target.read32(0x20400000) == 0x12345678
        target.write_memory_block8(0x20400001, [1, 2, 3, 4, 5, 6, 7])
        assert target.link.read_bytes(0x20400000, 8) == [0x78, 1, 2, 3, 4, 5, 6, 7]

    def test_transport_error_forwarded(self, target):
        target.link.transport_error_after = 2
        assert not target.transport_error()
        assert target.transport_error()

class TestMemoryMapXml:
    def test_empty(self, target):
        xml = target.get_memory_map_xml()
        assert xml.startswith(MAP_XML_HEADER)
        root = ElementTree.fromstring(xml[len(MAP_XML_HEADER):])
        assert root.tag == 'memory-map'
        assert len(root) == 0

    def test_regions(self, target):
        target.add_flash_region(make_flash())
        target.add_ram_region(0x20400000, 0x60000)
        xml = target.get_memory_map_xml()
        root = ElementTree.fromstring(xml[len(MAP_XML_HEADER):])
        mems = root.findall('memory')
        assert [m.get('type') for m in mems] == ['flash', 'ram']
        assert mems[0].get('start') == '0x400000'
        assert mems[0].get('length') == '0x4000'
        assert mems[0].find('property').get('name') == 'blocksize'
        assert mems[0].find('property').text == '0x2000'
        assert mems[1].get('start') == '0x20400000'
        assert mems[1].find('property') is None
