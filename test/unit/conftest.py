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

from mockmemory import (MockMemory, make_cidr)
from samflash.core.target import Target
from samflash.target.family.sam_chipid import (
    ARCH_SAME70,
    EPROC_CM7,
    SAMX7X_CHIPID_CIDR,
    SAMX7X_CHIPID_EXID,
    )

## SAME70Q21 rev A: 2 MB flash, 384 KB SRAM, 144 pins.
SAME70Q21A_CIDR = make_cidr(ARCH_SAME70, EPROC_CM7, nvpsiz=14, sramsiz=2, version=0, ext=True)
SAME70Q21A_EXID = 0x2

@pytest.fixture(scope='function')
def same70():
    return MockMemory({
            SAMX7X_CHIPID_CIDR: SAME70Q21A_CIDR,
            SAMX7X_CHIPID_EXID: SAME70Q21A_EXID,
            })

@pytest.fixture(scope='function')
def same70_target(same70):
    return Target(None, same70)
