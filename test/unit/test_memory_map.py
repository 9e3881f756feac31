# samflash
# Copyright (c) 2015-2020 Arm Limited
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

from samflash.core.memory_map import (
    MemoryType,
    MemoryRangeBase,
    MemoryRegion,
    MemoryMap,
    FlashRegion,
    RamRegion,
    )
from samflash.flash.eefc import (EEFCFlash, EraseMethod)

@pytest.fixture(scope='function')
def flash():
    return FlashRegion(start=0x400000, length=8*1024, blocksize=0x1000, page_size=0x200, name='flash',
            is_boot_memory=True, erase_method=EraseMethod.PAGE_ERASE)

@pytest.fixture(scope='function')
def flash1():
    return FlashRegion(start=0x402000, length=8*1024, blocksize=0x1000, page_size=0x200, name='flash1')

@pytest.fixture(scope='function')
def ram1():
    return RamRegion(start=0x20000000, length=1*1024, name='ram')

@pytest.fixture(scope='function')
def ram2():
    return RamRegion(start=0x20000400, length=1*1024, name='ram2')

@pytest.fixture(scope='function')
def memmap(flash, flash1, ram1, ram2):
    return MemoryMap(flash, flash1, ram1, ram2)

class TestRange:
    def test_empty_range(self):
        range = MemoryRangeBase(start=0x1000, length=0)
        assert range.start == 0x1000
        assert range.end == 0xfff
        assert range.length == 0

    def test_eq(self):
        assert MemoryRangeBase(0, length=1000) == MemoryRangeBase(0, length=1000)

    def test_lt(self):
        assert MemoryRangeBase(0, length=1000) < MemoryRangeBase(1000, length=1000)

    def test_sort(self, ram1, ram2, flash, flash1):
        assert sorted([ram2, flash1, flash, ram1]) == [flash, flash1, ram1, ram2]

# MemoryRegion test cases.
class TestMemoryRegion:
    def test_empty_region(self):
        with pytest.raises(ValueError):
            RamRegion(start=0x1000, length=0)
        with pytest.raises(ValueError):
            MemoryRegion(MemoryType.FLASH, start=0x1000, end=0xfff)

    def test_default_name(self):
        assert RamRegion(start=0x1000, end=0x1fff).name == 'ram'
        assert FlashRegion(start=0x1000, end=0x1fff, blocksize=256).name == 'flash'

    def test_page_size_default(self):
        rgn = FlashRegion(start=0x80000, length=0x1000, blocksize=256)
        assert rgn.page_size == 256

    def test_requires_blocksize(self):
        with pytest.raises(AssertionError):
            FlashRegion(start=0x80000, length=0x1000)

    def test_length_multiple_of_blocksize(self):
        with pytest.raises(ValueError):
            FlashRegion(start=0x400000, length=0x1800, blocksize=0x1000)

    def test_flash_attrs(self, flash):
        assert flash.type == MemoryType.FLASH
        assert flash.start == 0x400000
        assert flash.end == 0x401fff
        assert flash.length == 0x2000
        assert flash.blocksize == 0x1000
        assert flash.page_size == 0x200
        assert flash.erase_method is EraseMethod.PAGE_ERASE
        assert flash.family is None
        assert flash.eefc_base is None
        assert flash.write_cmd is None
        assert flash.flash_class is EEFCFlash
        assert flash.flash is None
        assert flash.is_flash
        assert not flash.is_ram
        assert flash.is_boot_memory

    def test_ram_attrs(self, ram1):
        assert ram1.type == MemoryType.RAM
        assert ram1.end == 0x200003ff
        with pytest.raises(AttributeError):
            ram1.blocksize
        assert ram1.is_ram
        assert not ram1.is_flash
        assert not ram1.is_boot_memory

    def test_set_attribute(self, flash):
        flash.write_cmd = 0x1
        assert flash.attributes['write_cmd'] == 0x1

    def test_flash_range(self, flash):
        assert flash.contains_address(0x400000)
        assert flash.contains_address(0x401fff)
        assert not flash.contains_address(0x402000)
        assert flash.intersects_range(MemoryRangeBase(0x401000, end=0x402fff))
        assert not flash.intersects_range(MemoryRangeBase(0x402000, length=0x1000))

    def test_intersects(self, ram1):
        assert not ram1.intersects_range(MemoryRangeBase(0, length=10))
        assert ram1.intersects_range(MemoryRangeBase(0x100000, end=0x20000010))
        assert ram1.intersects_range(MemoryRangeBase(0x20000010, end=0x30000000))
        assert ram1.intersects_range(MemoryRangeBase(0x20000020, length=0x10))
        assert ram1.intersects_range(MemoryRangeBase(0x1ffff000, length=0x40000))
        assert not ram1.intersects_range(MemoryRangeBase(0x20000400, length=0x10))
        assert ram1.intersects_range(ram1)

    def test_eq(self, flash, ram1):
        assert flash != ram1
        a = RamRegion(name='a', start=0x1000, length=0x2000)
        b = RamRegion(name='a', start=0x1000, length=0x2000)
        assert a == b

# MemoryMap test cases.
class TestMemoryMap:
    def test_empty_map(self):
        memmap = MemoryMap()
        assert len(memmap) == 0
        assert memmap.is_empty
        assert memmap.get_boot_memory() is None
        assert memmap.get_region_for_address(0x1000) is None

    def test_regions(self, memmap):
        rgns = list(memmap)
        assert len(memmap) == 4
        assert memmap[0].name == 'flash'
        assert [r.start for r in rgns] == sorted(r.start for r in rgns)

    def test_sorted_on_add(self, flash, flash1, ram1):
        memmap = MemoryMap(ram1, flash1)
        memmap.add_region(flash)
        assert list(memmap) == [flash, flash1, ram1]
        assert flash.map is memmap

    def test_overlap_rejected(self, memmap):
        with pytest.raises(ValueError):
            memmap.add_region(RamRegion(start=0x20000200, length=0x400))
        assert len(memmap) == 4

    def test_boot_mem(self, memmap):
        bootmem = memmap.get_boot_memory()
        assert bootmem.name == 'flash'

    def test_rgn_for_addr(self, memmap):
        assert memmap.get_region_for_address(0x400000).name == 'flash'
        assert memmap.get_region_for_address(0x402000).name == 'flash1'
        assert memmap.get_region_for_address(0x20000500).name == 'ram2'
        assert 0x20000000 in memmap
        assert 0x30000000 not in memmap

    def test_get_type_iter(self, memmap, flash, flash1, ram1, ram2):
        assert list(memmap.iter_matching_regions(type=MemoryType.FLASH)) == [flash, flash1]
        assert list(memmap.iter_matching_regions(type=MemoryType.RAM)) == [ram1, ram2]

    def test_match_iter(self, memmap, flash, ram1):
        assert list(memmap.iter_matching_regions(erase_method=EraseMethod.PAGE_ERASE)) == [flash]
        assert list(memmap.iter_matching_regions(start=0x20000000)) == [ram1]

    def test_first_match(self, memmap, flash1):
        assert memmap.get_first_matching_region(name='flash1') is flash1
        assert memmap.get_first_matching_region(name='nothing') is None

    def test_clear(self, memmap, flash):
        memmap.clear()
        assert memmap.is_empty
        assert flash.map is None

    def test_eq(self, flash, ram1):
        assert MemoryMap(flash, ram1) == MemoryMap(ram1, flash)
