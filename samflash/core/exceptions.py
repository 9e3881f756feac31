# samflash
# Copyright (c) 2018-2020 Arm Limited
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

class Error(RuntimeError):
    """@brief Parent of all errors samflash can raise"""
    pass

class InternalError(Error):
    """@brief Internal consistency or logic error."""
    pass

class TargetSupportError(Error):
    """@brief No probe routine recognized the connected device."""
    pass

class TargetError(Error):
    """@brief An error that happens on the target"""
    pass

class TransferError(TargetError):
    """@brief Error ocurred with a transfer over the debug link"""
    pass

class TransportFailure(TransferError):
    """@brief The debug link reported an error while waiting on the target.

    Raised from the flash controller polling loop when the memory interface signals a transport
    error. The operation in progress is abandoned, but the session itself stays usable, so an outer
    layer may retry.
    """
    pass

class FlashFailure(TargetError):
    """@brief Exception raised when the flash controller reports an error.

    The flash address that failed and/or the error bits read from the controller status register
    can optionally be recorded in the exception, if passed to the constructor as 'address' and
    'result_code' keyword arguments.
    """
    def __init__(self, *args, **kwargs):
        super().__init__(*args)
        self._address = kwargs.get('address', None)
        self._result_code = kwargs.get('result_code', None)

    @property
    def address(self):
        return self._address

    @property
    def result_code(self):
        return self._result_code

    def __str__(self):
        desc = super().__str__()
        parts = []
        if self.address is not None:
            parts.append("address 0x%08x" % self.address)
        if self.result_code is not None:
            parts.append("result code 0x%x" % self.result_code)
        if parts:
            if desc:
                desc += " "
            desc += "(%s)" % ("; ".join(parts))
        return desc

class FlashEraseFailure(FlashFailure):
    """@brief An attempt to erase flash failed. """
    pass

class FlashProgramFailure(FlashFailure):
    """@brief An attempt to program flash failed. """
    pass

class CommandError(Error):
    """@brief Raised when a console command encounters an error."""
    pass

class UsageError(CommandError):
    """@brief A console command was invoked with malformed arguments.

    No target access has been performed when this is raised.
    """
    pass
