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

from ..core import exceptions
from ..flash.eefc import (EEFC, EEFC_FCR_FCMD_CGPB, EEFC_FCR_FCMD_GGPB, EEFC_FCR_FCMD_SGPB)
from ..target.family import sam_chipid
from ..target.family.sam_chipid import SamFamily
from .base import CommandBase

LOG = logging.getLogger(__name__)

## Controller that holds the GPNVM bits, keyed by family.
GPNVM_EEFC_BASES = {
    SamFamily.SAM3X: sam_chipid.SAM3X_EEFC_BASE(0),
    SamFamily.SAM3U: sam_chipid.SAM3U_EEFC_BASE(0),
    SamFamily.SAM4S: sam_chipid.SAM4S_EEFC_BASE(0),
    SamFamily.SAM3NS: sam_chipid.SAM3N_EEFC_BASE,
    SamFamily.SAMX7X: sam_chipid.SAMX7X_EEFC_BASE,
    }

class GpnvmCommandBase(CommandBase):
    """@brief Shared access to the GPNVM controller of the attached target."""

    def _get_eefc(self) -> EEFC:
        target = self.context.target
        if target is None:
            raise exceptions.CommandError("no target attached")
        base = GPNVM_EEFC_BASES.get(target.family)
        if base is None:
            raise exceptions.CommandError("GPNVM bits are not supported on this device")
        return EEFC(target, base)

    def _show_gpnvm(self, eefc: EEFC) -> None:
        result = eefc.command(EEFC_FCR_FCMD_GGPB, 0)
        if result:
            raise exceptions.CommandError("get GPNVM bits failed (FSR error bits 0x%x)" % result)
        self.context.writei("GPNVM: 0x%08X", eefc.read_result())

class GpnvmGetCommand(GpnvmCommandBase):
    INFO = {
            'names': ['gpnvm_get'],
            'category': 'flash',
            'nargs': None,
            'usage': "",
            'help': "Get GPNVM value",
            'extra_help': "Takes no arguments; any argument is reported as a usage error without "
                          "accessing the device.",
            }

    def execute(self):
        self._show_gpnvm(self._get_eefc())

class GpnvmSetCommand(GpnvmCommandBase):
    INFO = {
            'names': ['gpnvm_set'],
            'category': 'flash',
            'nargs': 2,
            'usage': "<bit> <val>",
            'help': "Set GPNVM bit",
            'extra_help': "A non-zero value sets the bit and zero clears it. The GPNVM bits are "
                          "displayed afterwards.",
            }

    def parse(self, args):
        self.bit = self._convert_value(args[0])
        self.value = self._convert_value(args[1])

    def execute(self):
        eefc = self._get_eefc()
        cmd = EEFC_FCR_FCMD_SGPB if self.value else EEFC_FCR_FCMD_CGPB
        LOG.debug("%s GPNVM bit %d", "setting" if self.value else "clearing", self.bit)
        try:
            result = eefc.command(cmd, self.bit)
        except ValueError as err:
            raise exceptions.CommandError(str(err)) from None
        if result:
            raise exceptions.CommandError("%s GPNVM bit %d failed (FSR error bits 0x%x)"
                    % ("set" if self.value else "clear", self.bit, result))
        self._show_gpnvm(eefc)

EEFC_COMMANDS = (GpnvmGetCommand, GpnvmSetCommand)
