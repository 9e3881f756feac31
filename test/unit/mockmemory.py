# samflash
# Copyright (c) 2016-2020 Arm Limited
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

from samflash.core.exceptions import TransferError
from samflash.core.memory_interface import MemoryInterface
from samflash.flash.eefc import (
    EEFC_FCR,
    EEFC_FCR_FCMD_CGPB,
    EEFC_FCR_FCMD_GGPB,
    EEFC_FCR_FCMD_SGPB,
    EEFC_FCR_FKEY,
    EEFC_FMR,
    EEFC_FRR,
    EEFC_FSR,
    EEFC_FSR_FCMDE,
    EEFC_FSR_FRDY,
    )
from samflash.target.family.sam_chipid import (
    CIDR_ARCH,
    CIDR_EPROC,
    CIDR_EXT,
    CIDR_NVPSIZ,
    CIDR_SRAMSIZ,
    CIDR_VERSION,
    )
from samflash.utility import conversion

## Every EEFC instance on the supported parts.
EEFC_BASES = (0x400E0800, 0x400E0A00, 0x400E0C00)

def make_cidr(arch, eproc=0, nvpsiz=0, sramsiz=0, version=0, ext=False):
    """Build a CHIPID_CIDR value from its fields."""
    cidr = 0
    cidr = CIDR_ARCH.set(cidr, arch)
    cidr = CIDR_EPROC.set(cidr, eproc)
    cidr = CIDR_NVPSIZ.set(cidr, nvpsiz)
    cidr = CIDR_SRAMSIZ.set(cidr, sramsiz)
    cidr = CIDR_VERSION.set(cidr, version)
    cidr = CIDR_EXT.set(cidr, int(ext))
    return cidr

class MockEEFC:
    """Model of one flash controller.

    Each command keeps FRDY clear for `busy_polls` FSR reads. A busy_polls of None means the
    controller never becomes ready. The GPNVM commands act on `gpnvm`.
    """

    def __init__(self, base):
        self.base = base
        self.fmr = 0
        self.frr = 0
        self.gpnvm = 0
        self.busy_polls = 0
        self.commands = []
        self.fsr_reads = 0
        self._busy = 0
        self._status = 0
        self._failures = {}

    def inject_error(self, bits, after=0):
        """Make the command issued `after` commands from now report `bits` in FSR."""
        self._failures[len(self.commands) + after] = bits

    def write_fcr(self, word):
        key = (word >> 24) & 0xff
        cmd = word & 0xff
        arg = (word >> 8) & 0xffff
        index = len(self.commands)
        self.commands.append((cmd, arg))
        self._busy = self.busy_polls

        if key != EEFC_FCR_FKEY:
            self._status = EEFC_FSR_FCMDE
            return
        self._status = self._failures.pop(index, 0)
        if self._status:
            return

        if cmd == EEFC_FCR_FCMD_GGPB:
            self.frr = self.gpnvm
        elif cmd == EEFC_FCR_FCMD_SGPB:
            self.gpnvm |= (1 << arg)
        elif cmd == EEFC_FCR_FCMD_CGPB:
            self.gpnvm &= ~(1 << arg)

    def read_fsr(self):
        self.fsr_reads += 1
        if self._busy is None:
            return 0
        if self._busy > 0:
            self._busy -= 1
            return 0
        return EEFC_FSR_FRDY | self._status

class MockMemory(MemoryInterface):
    """Simulated debug link to a SAM device.

    Holds CHIPID register values, the EEFC controllers and a sparse byte memory for everything
    else. Every access is appended to `log`:
    - ('read', addr, size)
    - ('write', addr, value, size)
    - ('block32', addr, words)
    - ('cmd', base, cmd, arg) for EEFC command writes

    `transport_error_after` makes transport_error() return True on that call, counting from 1.
    `fail_reads_at` makes a read of that address raise TransferError.
    """

    def __init__(self, registers=None):
        self.registers = dict(registers or {})
        self.eefcs = {base: MockEEFC(base) for base in EEFC_BASES}
        self.memory = {}
        self.log = []
        self.transport_error_after = None
        self.transport_error_calls = 0
        self.fail_reads_at = None

    def _eefc_register(self, addr):
        for base, eefc in self.eefcs.items():
            if base <= addr < base + 0x10:
                return eefc, addr - base
        return None, None

    def read_memory(self, addr, transfer_size=32):
        self.log.append(('read', addr, transfer_size))
        if addr == self.fail_reads_at:
            raise TransferError("read of 0x%08x failed" % addr)
        eefc, offset = self._eefc_register(addr)
        if eefc is not None:
            if offset == EEFC_FSR:
                return eefc.read_fsr()
            elif offset == EEFC_FRR:
                return eefc.frr
            elif offset == EEFC_FMR:
                return eefc.fmr
            return 0
        if addr in self.registers:
            return self.registers[addr]
        data = [self.memory.get(addr + i, 0) for i in range(transfer_size // 8)]
        return sum(b << (8 * i) for i, b in enumerate(data))

    def write_memory(self, addr, data, transfer_size=32):
        eefc, offset = self._eefc_register(addr)
        if eefc is not None:
            if offset == EEFC_FCR:
                self.log.append(('cmd', eefc.base, data & 0xff, (data >> 8) & 0xffff))
                eefc.write_fcr(data)
            elif offset == EEFC_FMR:
                eefc.fmr = data
            return
        self.log.append(('write', addr, data, transfer_size))
        for i in range(transfer_size // 8):
            self.memory[addr + i] = (data >> (8 * i)) & 0xff

    def write_memory_block32(self, addr, data):
        self.log.append(('block32', addr, list(data)))
        for i, b in enumerate(conversion.u32le_list_to_byte_list(data)):
            self.memory[addr + i] = b

    def transport_error(self):
        self.transport_error_calls += 1
        return (self.transport_error_after is not None) \
            and (self.transport_error_calls == self.transport_error_after)

    def read_bytes(self, addr, length):
        return [self.memory.get(addr + i, 0) for i in range(length)]

    @property
    def commands(self):
        """All EEFC commands in issue order, as (base, cmd, arg) tuples."""
        return [entry[1:] for entry in self.log if entry[0] == 'cmd']
