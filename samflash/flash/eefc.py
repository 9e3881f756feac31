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
from enum import Enum
from typing import (Sequence, TYPE_CHECKING)

from ..core import exceptions

if TYPE_CHECKING:
    from ..core.target import Target
    from ..core.memory_map import FlashRegion

LOG = logging.getLogger(__name__)

# Enhanced Embedded Flash Controller register offsets.
EEFC_FMR = 0x00
EEFC_FCR = 0x04
EEFC_FSR = 0x08
EEFC_FRR = 0x0C

EEFC_FCR_FKEY = 0x5A

EEFC_FCR_FCMD_GETD = 0x00
EEFC_FCR_FCMD_WP = 0x01
EEFC_FCR_FCMD_WPL = 0x02
EEFC_FCR_FCMD_EWP = 0x03
EEFC_FCR_FCMD_EWPL = 0x04
EEFC_FCR_FCMD_EA = 0x05
EEFC_FCR_FCMD_EPA = 0x07
EEFC_FCR_FCMD_SLB = 0x08
EEFC_FCR_FCMD_CLB = 0x09
EEFC_FCR_FCMD_GLB = 0x0A
EEFC_FCR_FCMD_SGPB = 0x0B
EEFC_FCR_FCMD_CGPB = 0x0C
EEFC_FCR_FCMD_GGPB = 0x0D
EEFC_FCR_FCMD_STUI = 0x0E
EEFC_FCR_FCMD_SPUI = 0x0F

EEFC_FSR_FRDY = (1 << 0)
EEFC_FSR_FCMDE = (1 << 1)
EEFC_FSR_FLOCKE = (1 << 2)
EEFC_FSR_ERROR = (EEFC_FSR_FCMDE | EEFC_FSR_FLOCKE)

## Pages erased by one EPA command when the low argument bits are 0b01.
EPA_PAGES_PER_COMMAND = 8
EPA_ARG_8_PAGES = 0x1

class EraseMethod(Enum):
    """@brief How a flash controller erases pages."""
    ## The controller has an erase-pages command, which erases 8 pages at a time.
    PAGE_ERASE = 1
    ## The controller has no stand-alone page erase. Pages are erased as part of the
    # erase-and-write command, so an erase request is a no-op and only the subsequent
    # write leaves the page erased and programmed.
    WRITE_ERASES = 2

def encode_command(cmd: int, arg: int = 0, key: int = EEFC_FCR_FKEY) -> int:
    """@brief Build an EEFC_FCR command word.

    The word is `key` in bits [31:24], `arg` in bits [23:8] and `cmd` in bits [7:0].

    @exception ValueError The opcode is wider than 8 bits or the argument is wider than 16 bits.
        Values are never truncated.
    """
    if not (0 <= cmd <= 0xff):
        raise ValueError("EEFC opcode 0x%x does not fit in 8 bits" % cmd)
    if not (0 <= arg <= 0xffff):
        raise ValueError("EEFC command argument 0x%x does not fit in 16 bits" % arg)
    return ((key & 0xff) << 24) | cmd | (arg << 8)

class EEFC:
    """@brief Command sequencer for one Enhanced Embedded Flash Controller instance.

    A command is issued by writing the command word to FCR. The controller then clears FRDY in
    FSR until the command completes. There is no timeout on that wait; it only ends early if the
    debug link reports a transport error, so an unresponsive but connected target blocks the
    caller.
    """

    def __init__(self, target: "Target", base: int) -> None:
        self._target = target
        self._base = base

    @property
    def base(self) -> int:
        return self._base

    def command(self, cmd: int, arg: int = 0) -> int:
        """@brief Issue a command and wait for it to complete.

        @return The FSR error bits (FCMDE and FLOCKE). Zero means the command succeeded. A non-zero
            value is a failure even though the controller is ready again.
        @exception ValueError Invalid opcode or argument; nothing is written to the target.
        @exception TransportFailure The link reported an error while polling FSR.
        """
        word = encode_command(cmd, arg)
        LOG.debug("EEFC@0x%08x: cmd=0x%02x arg=0x%04x", self._base, cmd, arg)
        self._target.write32(self._base + EEFC_FCR, word)

        while not (self._target.read32(self._base + EEFC_FSR) & EEFC_FSR_FRDY):
            if self._target.transport_error():
                raise exceptions.TransportFailure("transport error while waiting for EEFC@0x%08x command 0x%02x"
                        % (self._base, cmd))

        return self._target.read32(self._base + EEFC_FSR) & EEFC_FSR_ERROR

    def read_result(self) -> int:
        """@brief Read the result register (FRR) of the last command."""
        return self._target.read32(self._base + EEFC_FRR)

class EEFCFlash:
    """@brief Erase and program operations on one flash region.

    Instances are bound to a @ref samflash.core.memory_map.FlashRegion "FlashRegion" when the region
    is added to a target, and are available from the region's `flash` attribute. The region's
    `erase_method` and `write_cmd` attributes select the family behaviour.

    Neither operation checks alignment or bounds. Callers pass page-aligned addresses inside the
    region and at most one page of data per program() call, as the flash loader does.
    """

    def __init__(self, target: "Target", region: "FlashRegion") -> None:
        assert region.is_flash
        self.target = target
        self._region = region
        self._eefc = EEFC(target, region.eefc_base)

    @property
    def region(self) -> "FlashRegion":
        return self._region

    @property
    def eefc(self) -> EEFC:
        return self._eefc

    def erase(self, address: int, length: int) -> None:
        """@brief Erase `length` bytes of flash starting at `address`.

        @exception FlashEraseFailure The controller reported an error. Commands for the remaining
            blocks are not issued, and nothing already erased is restored.
        @exception TransportFailure The link was lost during the operation.
        """
        method = self._region.erase_method
        if method is EraseMethod.WRITE_ERASES:
            LOG.debug("erase of 0x%08x+0x%x deferred to erase-and-write", address, length)
            return
        elif method is EraseMethod.PAGE_ERASE:
            self._erase_pages(address, length)
        else:
            raise exceptions.InternalError("region %s has no erase method" % self._region.name)

    def _erase_pages(self, address: int, length: int) -> None:
        blocksize = self._region.blocksize
        page = (address - self._region.start) // self._region.page_size

        while length > 0:
            result = self._eefc.command(EEFC_FCR_FCMD_EPA, page | EPA_ARG_8_PAGES)
            if result:
                raise exceptions.FlashEraseFailure("flash erase failed",
                        address=self._region.start + page * self._region.page_size,
                        result_code=result)

            if length > blocksize:
                length -= blocksize
            else:
                length = 0
            page += EPA_PAGES_PER_COMMAND

    def program(self, address: int, data: Sequence[int]) -> None:
        """@brief Program one page.

        The data is written to the target address, which loads the controller's page buffer,
        then the region's write command is issued for the page containing `address`.

        @exception FlashProgramFailure The controller reported an error.
        @exception TransportFailure The link was lost during the operation.
        """
        page = (address - self._region.start) // self._region.page_size

        self.target.write_memory_block8(address, data)
        result = self._eefc.command(self._region.write_cmd, page)
        if result:
            raise exceptions.FlashProgramFailure("flash program page failed", address=address,
                    result_code=result)
