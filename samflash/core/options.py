# samflash
# Copyright (c) 2018-2020 Arm Limited
# Copyright (c) 2022 Chris Reed
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

from typing import (Any, Dict, NamedTuple, Tuple, Union)

class OptionInfo(NamedTuple):
    name: str
    type: Union[type, Tuple[type, ...]]
    default: Any
    help: str

## @brief Definitions of the builtin options.
BUILTIN_OPTIONS = [
    OptionInfo('config_file', str, None,
        "Path to custom config file."),
    OptionInfo('debug.traceback', bool, False,
        "Log tracebacks for errors reported by console commands."),
    OptionInfo('logging', (str, dict), None,
        "Logging configuration dictionary, or path to YAML file containing logging configuration."),
    OptionInfo('no_config', bool, False,
        "Do not use default config file."),
    OptionInfo('project_dir', str, None,
        "Path to the session's project directory. Defaults to the working directory when the "
        "session is created."),
    OptionInfo('target_override', str, None,
        "Name of the only probe routine to run when opening a session, either 'sam3x' or "
        "'samx7x'. By default every probe routine is tried in turn."),
    ]

## @brief The runtime dictionary of options.
OPTIONS_INFO: Dict[str, OptionInfo] = {}

def add_option_set(options):
    """@brief Merge a list of OptionInfo objects into OPTIONS_INFO."""
    OPTIONS_INFO.update({oi.name: oi for oi in options})

# Start with only builtin options.
add_option_set(BUILTIN_OPTIONS)
