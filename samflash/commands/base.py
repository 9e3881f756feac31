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

import logging
import textwrap
from typing import (Any, Dict, List, TYPE_CHECKING)

from ..core import exceptions

if TYPE_CHECKING:
    from .execution_context import CommandExecutionContext

LOG = logging.getLogger(__name__)

class CommandBase:
    """@brief Base class for a console command.

    Each command class must have an `INFO` attribute with the following keys:
    - `names`: List of names for the command. The first element is the primary name.
    - `category`: Functional category for the command.
    - `nargs`: The number of arguments the command accepts. Either the string "*", meaning any number of
        arguments, None for no arguments, a single integer, or a list of integers.
    - `usage`: String with a description of the command's argument usage.
    - `help`: String for the short help. Typically should be no more than one sentence.
    - `extra_help`: Optional key for a string with more detailed help.

    Commands are not registered globally. A probe routine passes the command classes for a device
    to @ref samflash.core.target.Target.add_commands() "Target.add_commands()".
    """

    INFO: Dict[str, Any]

    def __init__(self, context: "CommandExecutionContext") -> None:
        """@brief Constructor."""
        self._context = context

    @property
    def context(self) -> "CommandExecutionContext":
        """@brief The command execution context."""
        return self._context

    @classmethod
    def usage_text(cls) -> str:
        return "usage: {cmd} {usage}".format(cmd=cls.INFO['names'][0], usage=cls.INFO['usage']).rstrip()

    def check_arg_count(self, args: List[str]) -> None:
        """@brief Verify the number of command arguments.

        @exception UsageError The argument count doesn't match `nargs`. The message is the usage line.
        """
        nargs = self.INFO['nargs']
        if nargs == '*':
            return
        elif nargs is None:
            valid = (len(args) == 0)
        elif isinstance(nargs, list):
            valid = (len(args) in nargs)
        else:
            valid = (len(args) == nargs)
        if not valid:
            raise exceptions.UsageError(self.usage_text())

    def parse(self, args: List[str]) -> None:
        """@brief Extract command arguments."""
        pass

    def execute(self) -> None:
        """@brief Perform the command."""
        raise NotImplementedError()

    def _convert_value(self, arg: str) -> int:
        """@brief Convert an argument to an integer.

        Handles the usual decimal, binary, and hex numbers with the appropriate prefix.
        """
        try:
            return int(arg.lower().replace('_', ''), base=0)
        except ValueError:
            raise exceptions.CommandError("invalid argument '{}'".format(arg)) from None

    @classmethod
    def format_help(cls, max_width: int = 72) -> str:
        """@brief Return a string with the help text for this command."""
        text = "Usage: {cmd} {usage}\n".format(cmd=cls.INFO['names'][0], usage=cls.INFO['usage'])
        if len(cls.INFO['names']) > 1:
            text += "Aliases: {0}\n".format(", ".join(cls.INFO['names'][1:]))
        text += "\n" + textwrap.fill(cls.INFO['help'], width=max_width) + "\n"
        if 'extra_help' in cls.INFO:
            text += "\n" + textwrap.fill(cls.INFO['extra_help'], width=max_width) + "\n"
        return text
