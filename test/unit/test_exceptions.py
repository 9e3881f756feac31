# samflash
# Copyright (c) 2019-2020 Arm Limited
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

from samflash.core.exceptions import *

# Tests for FlashFailure.
class TestFlashFailure:
    def test_no_args(self):
        e = FlashFailure()
        assert str(e) == ""
        assert e.address == None
        assert e.result_code == None

    def test_msg(self):
        e = FlashFailure("something exploded")
        assert str(e) == "something exploded"
        assert e.address == None
        assert e.result_code == None

    def test_addr(self):
        e = FlashFailure(address=0x4000)
        assert str(e) == "(address 0x00004000)"
        assert e.address == 0x4000
        assert e.result_code == None

    def test_code(self):
        e = FlashFailure(result_code=0x4)
        assert str(e) == "(result code 0x4)"
        assert e.address == None
        assert e.result_code == 0x4

    def test_addr_code(self):
        e = FlashFailure(address=0x400000, result_code=0x6)
        assert str(e) == "(address 0x00400000; result code 0x6)"

    def test_msg_addr_code(self):
        e = FlashEraseFailure("flash erase failed", address=0x401000, result_code=0x4)
        assert str(e) == "flash erase failed (address 0x00401000; result code 0x4)"
        assert e.address == 0x401000
        assert e.result_code == 0x4

class TestHierarchy:
    def test_root(self):
        for klass in (InternalError, TargetSupportError, TargetError, TransferError, TransportFailure,
                FlashFailure, FlashEraseFailure, FlashProgramFailure, CommandError, UsageError):
            assert issubclass(klass, Error)
        assert issubclass(Error, RuntimeError)

    def test_transport(self):
        assert issubclass(TransportFailure, TransferError)
        assert issubclass(TransferError, TargetError)

    def test_flash(self):
        assert issubclass(FlashEraseFailure, FlashFailure)
        assert issubclass(FlashProgramFailure, FlashFailure)
        assert issubclass(FlashFailure, TargetError)
        assert not issubclass(FlashFailure, TransferError)

    def test_usage(self):
        assert issubclass(UsageError, CommandError)
        assert str(UsageError("usage: gpnvm_set <bit> <val>")) == "usage: gpnvm_set <bit> <val>"
