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

from natsort import natsorted

from ..core import exceptions
from .base import CommandBase

class HelpCommand(CommandBase):
    INFO = {
            'names': ['help', '?'],
            'category': 'general',
            'nargs': '*',
            'usage': "[CMD]",
            'help': "Show help for commands.",
            }

    def parse(self, args):
        self.args = args

    def execute(self):
        if not self.args:
            self._list_commands("Commands", "{cmd:<25} {usage:<20} {help}")
            return

        cmd_name = self.args[0].lower()
        matched_commands = self.context.command_set.command_matcher.find_all(cmd_name)
        if len(matched_commands) > 1:
            self.context.writei("Command '%s' is ambiguous; matches are %s", cmd_name,
                    ", ".join("'%s'" % c for c in matched_commands))
            return
        elif len(matched_commands) == 0:
            raise exceptions.CommandError("unrecognized command '%s'" % cmd_name)
        cmd_class = self.context.command_set.commands[matched_commands[0]]
        self.context.write(cmd_class.format_help())

    def _list_commands(self, title, help_format):
        cmds = {klass.INFO['names'][0]: klass for klass in self.context.command_set.command_classes}

        self.context.write(title + ":\n" + ("-" * len(title)))
        for cmd_name in natsorted(cmds):
            klass = cmds[cmd_name]
            info = klass.INFO
            aliases = ', '.join(natsorted(info['names']))
            group = self.context.command_set.group_for(klass)
            if group is not None:
                aliases += " [%s]" % group
            self.context.writef(help_format, cmd=aliases, usage=info['usage'], help=info['help'])

STANDARD_COMMANDS = (HelpCommand,)
