# samflash
# Copyright (c) 2015-2019 Arm Limited
# Copyright (c) 2021-2022 Chris Reed
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

from enum import Enum
import collections.abc
from functools import total_ordering
from typing import (Any, Dict, Iterator, List, Optional, TYPE_CHECKING, Type)

if TYPE_CHECKING:
    from ..flash.eefc import EEFCFlash

class MemoryType(Enum):
    """@brief Kinds of region a SAM device exposes."""
    RAM = 1
    FLASH = 3

@total_ordering
class MemoryRangeBase:
    """@brief An inclusive address range.

    Ranges order by start address, which is how the memory map keeps its regions sorted.
    """
    def __init__(self, start: int = 0, end: int = 0, length: Optional[int] = None) -> None:
        self._start = start
        self._end = (start + length - 1) if (length is not None) else end
        assert self._end >= (self._start - 1)

    @property
    def start(self) -> int:
        return self._start

    @property
    def end(self) -> int:
        return self._end

    @property
    def length(self) -> int:
        return self._end - self._start + 1

    def contains_address(self, address: int) -> bool:
        return self._start <= address <= self._end

    def intersects_range(self, other: "MemoryRangeBase") -> bool:
        """@return Whether this range and `other` share at least one address."""
        return (other.start <= self._end) and (self._start <= other.end)

    def __hash__(self) -> int:
        return hash((self._start, self._end))

    def __eq__(self, other: "MemoryRangeBase") -> bool:
        return self.start == other.start and self.length == other.length

    def __lt__(self, other: "MemoryRangeBase") -> bool:
        return self.start < other.start

class MemoryRegion(MemoryRangeBase):
    """@brief A RAM or flash region of a device.

    Regions carry a dictionary of attributes that read like normal instance attributes. Callable
    values in the dictionary are computed from the region when read.

    - `name`: Region name, by default the lowercase type name.
    - `is_boot_memory`: Whether the device boots from this region.
    - `is_ram`, `is_flash`: Computed from the type. Don't pass these to the constructor.
    """

    ## Attribute values used when the constructor doesn't get one.
    DEFAULT_ATTRS: Dict[str, Any] = {
        'name': lambda r: r.type.name.lower(),
        'is_boot_memory': False,
        'is_ram': lambda r: r.type is MemoryType.RAM,
        'is_flash': lambda r: r.type is MemoryType.FLASH,
        }

    def __init__(
                self,
                type: MemoryType,
                start: int = 0,
                end: int = 0,
                length: Optional[int] = None,
                **attrs: Any
            ) -> None:
        """@brief Constructor.

        @exception ValueError The region would be empty.
        """
        super().__init__(start=start, end=end, length=length)
        if self.length <= 0:
            raise ValueError("region at 0x%08x has no length" % start)
        assert isinstance(type, MemoryType)
        self._map: Optional[MemoryMap] = None
        self._type = type
        self._attributes = dict(self.DEFAULT_ATTRS)
        self._attributes.update(attrs)

    @property
    def map(self) -> Optional["MemoryMap"]:
        """@brief The memory map holding this region, if any."""
        return self._map

    @map.setter
    def map(self, the_map: Optional["MemoryMap"]) -> None:
        self._map = the_map

    @property
    def type(self) -> MemoryType:
        return self._type

    @property
    def attributes(self) -> Dict[str, Any]:
        return self._attributes

    def __getattr__(self, name: str) -> Any:
        try:
            value = self._attributes[name]
        except KeyError:
            raise AttributeError(name)
        return value(self) if callable(value) else value

    def __setattr__(self, name: str, value: Any) -> None:
        # Until _attributes exists every assignment is a plain instance attribute.
        attrs = self.__dict__.get('_attributes')
        if (attrs is not None) and (name in attrs):
            attrs[name] = value
        else:
            super().__setattr__(name, value)

    # Redefined because __eq__ is.
    __hash__ = MemoryRangeBase.__hash__

    def __eq__(self, other: "MemoryRegion") -> bool:
        return isinstance(other, MemoryRegion) and (self.start, self.length, self.type) \
            == (other.start, other.length, other.type) and self.attributes == other.attributes

    def __repr__(self) -> str:
        return "<%s@0x%x name=%s start=0x%x end=0x%x length=0x%x>" % (self.__class__.__name__,
                id(self), self.name, self.start, self.end, self.length)

class RamRegion(MemoryRegion):
    """@brief The SRAM of a device."""
    def __init__(self, start: int = 0, end: int = 0, length: Optional[int] = None, **attrs: Any) -> None:
        super().__init__(MemoryType.RAM, start=start, end=end, length=length, **attrs)

class FlashRegion(MemoryRegion):
    """@brief One flash bank, programmed through its own EEFC instance.

    Attributes in addition to those of every region:
    - `blocksize`: Erase granularity in bytes. Required, and the region length must be a
        multiple of it.
    - `page_size`: Program granularity in bytes, the size of the controller page buffer. Defaults
        to the `blocksize`.
    - `family`: The @ref samflash.target.family.sam_chipid.SamFamily "SamFamily" of the device.
    - `eefc_base`: Base address of the controller owning the bank.
    - `write_cmd`: Controller opcode that programs one page.
    - `erase_method`: The @ref samflash.flash.eefc.EraseMethod "EraseMethod" of the controller.

    The `flash_class` constructor argument selects the class doing erase and program, by default
    @ref samflash.flash.eefc.EEFCFlash "EEFCFlash". Once the region is added to a target, the
    `flash` property holds the instance of it.
    """

    DEFAULT_ATTRS = dict(MemoryRegion.DEFAULT_ATTRS,
        page_size=lambda r: r.blocksize,
        family=None,
        eefc_base=None,
        write_cmd=None,
        erase_method=None,
        )

    _flash: Optional["EEFCFlash"]
    _flash_class: Type["EEFCFlash"]

    def __init__(self, start: int = 0, end: int = 0, length: Optional[int] = None, **attrs: Any) -> None:
        # Import locally to prevent import loops.
        from ..flash.eefc import EEFCFlash

        assert 'blocksize' in attrs
        self._flash_class = attrs.pop('flash_class', None) or EEFCFlash
        self._flash = None
        super().__init__(MemoryType.FLASH, start=start, end=end, length=length, **attrs)
        if self.length % self.blocksize:
            raise ValueError("flash region length 0x%x is not a multiple of the block size 0x%x"
                    % (self.length, self.blocksize))

    @property
    def flash_class(self) -> Type["EEFCFlash"]:
        return self._flash_class

    @property
    def flash(self) -> Optional["EEFCFlash"]:
        return self._flash

    @flash.setter
    def flash(self, flash_instance: Optional["EEFCFlash"]) -> None:
        self._flash = flash_instance

    __hash__ = MemoryRegion.__hash__

    def __eq__(self, other: "FlashRegion") -> bool:
        return super().__eq__(other) and self.flash_class == other.flash_class

    def __repr__(self) -> str:
        return "<%s@0x%x name=%s start=0x%x end=0x%x length=0x%x blocksize=0x%x eefc=%s>" % (
                self.__class__.__name__, id(self), self.name, self.start, self.end, self.length,
                self.blocksize, ("0x%08x" % self.eefc_base) if (self.eefc_base is not None) else None)

class MemoryMap(collections.abc.Sequence):
    """@brief The regions of one target, sorted by start address and never overlapping."""

    _regions: List[MemoryRegion]

    def __init__(self, *regions: MemoryRegion) -> None:
        self._regions = []
        for region in regions:
            self.add_region(region)

    @property
    def is_empty(self) -> bool:
        return not self._regions

    def add_region(self, new_region: MemoryRegion) -> None:
        """@brief Insert a region at its sorted position.

        @exception ValueError The region overlaps a region already in the map.
        """
        for r in self._regions:
            if r.intersects_range(new_region):
                raise ValueError("region %s overlaps existing region %s" % (new_region, r))
        new_region.map = self
        self._regions.append(new_region)
        self._regions.sort()

    def clear(self) -> None:
        """@brief Remove every region from the map."""
        for r in self._regions:
            r.map = None
        self._regions = []

    def get_boot_memory(self) -> Optional[MemoryRegion]:
        """@brief The first flash bank, which the device boots from, or None."""
        return self.get_first_matching_region(is_boot_memory=True)

    def get_region_for_address(self, address: int) -> Optional[MemoryRegion]:
        for r in self._regions:
            if r.contains_address(address):
                return r
        return None

    def iter_matching_regions(self, **kwargs: Any) -> Iterator[MemoryRegion]:
        """@brief Iterate over the regions whose attributes equal all the given values.

        A region without one of the attributes does not match.
        """
        for r in self._regions:
            if all(getattr(r, k, _MISSING) == v for k, v in kwargs.items()):
                yield r

    def get_first_matching_region(self, **kwargs: Any) -> Optional[MemoryRegion]:
        """@brief The lowest-addressed region matching the given attributes, or None."""
        return next(self.iter_matching_regions(**kwargs), None)

    def __eq__(self, other: "MemoryMap") -> bool:
        return isinstance(other, MemoryMap) and (self._regions == other._regions)

    def __iter__(self) -> Iterator[MemoryRegion]:
        return iter(self._regions)

    def __getitem__(self, key: int) -> MemoryRegion:
        return self._regions[key]

    def __len__(self) -> int:
        return len(self._regions)

    def __contains__(self, key: Any) -> bool:
        if isinstance(key, int):
            return self.get_region_for_address(key) is not None
        return key in self._regions

    def __repr__(self) -> str:
        return "<MemoryMap@0x%08x regions=%r>" % (id(self), self._regions)

## Marks a missing attribute in iter_matching_regions().
_MISSING = object()
