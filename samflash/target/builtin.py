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

from .family.target_sam import (sam3x_probe, samx7x_probe)

## @brief Builtin probe routines, keyed by name, in the order they are tried.
#
# A probe routine is called with a @ref samflash.core.target.Target "Target" and returns True if
# it recognized the device and registered its memory regions. The routines are mutually
# exclusive, so the order only affects how many identification registers are read.
BUILTIN_PROBES = {
    'samx7x': samx7x_probe,
    'sam3x': sam3x_probe,
    }
