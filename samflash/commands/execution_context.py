# samflash
# Copyright (c) 2015-2020 Arm Limited
# Copyright (c) 2021 Chris Reed
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
import shlex
import sys
from typing import (Dict, IO, Iterable, List, NamedTuple, Optional, Sequence, Set, Type, TYPE_CHECKING,
        Union)

from ..core import exceptions
from ..utility.strings import UniquePrefixMatcher

if TYPE_CHECKING:
    from .base import CommandBase
    from ..core.session import Session
    from ..core.target import Target

LOG = logging.getLogger(__name__)

class CommandSet:
    """@brief Holds a set of command classes."""

    def __init__(self) -> None:
        self._commands: Dict[str, Type["CommandBase"]] = {}
        self._command_classes: Set[Type["CommandBase"]] = set()
        self._command_groups: Dict[Type["CommandBase"], str] = {}
        self._command_matcher = UniquePrefixMatcher()

    @property
    def commands(self) -> Dict[str, Type["CommandBase"]]:
        return self._commands

    @property
    def command_classes(self) -> Set[Type["CommandBase"]]:
        return self._command_classes

    @property
    def command_matcher(self) -> UniquePrefixMatcher:
        return self._command_matcher

    def group_for(self, klass: Type["CommandBase"]) -> Optional[str]:
        """@brief Return the label of the group a command class was added with."""
        return self._command_groups.get(klass)

    def add_commands(self, commands: Iterable[Type["CommandBase"]], group: Optional[str] = None) -> None:
        """@brief Add some commands to the command set.
        @param self The command set.
        @param commands Iterable of command classes.
        @param group Label of the command group, normally a device family.
        """
        cmd_classes = set(commands)
        cmd_names = {name: klass for klass in cmd_classes for name in klass.INFO['names']}
        self._commands.update(cmd_names)
        self._command_classes.update(cmd_classes)
        self._command_matcher.add_items(cmd_names.keys())
        if group is not None:
            self._command_groups.update({klass: group for klass in cmd_classes})

class CommandInvocation(NamedTuple):
    """@brief Groups the resolved command name with its arguments."""
    cmd: str
    args: Sequence[str]

class CommandExecutionContext:
    """@brief Manages command execution.

    This class holds the command set for an attached target and provides the interface for
    executing commands. Command output and reported errors go to the output stream.
    """

    _session: Optional["Session"]
    _target: Optional["Target"]

    def __init__(self, output_stream: Optional[IO[str]] = None) -> None:
        """@brief Constructor.
        @param self This object.
        @param output_stream Stream object to which command output and errors will be written. If not provided,
            output will be written to sys.stdout.
        """
        # Import locally to prevent import loops.
        from .commands import STANDARD_COMMANDS

        self._output = output_stream or sys.stdout
        self._command_set = CommandSet()
        self._session = None
        self._target = None

        # Add in the standard commands.
        self._command_set.add_commands(STANDARD_COMMANDS)

    def write(self, message='', **kwargs) -> None:
        """@brief Write a fixed message to the output stream.

        The message is written to the output stream passed to the constructor, terminated with
        a newline by default. The `end` keyword argument can be passed to change the terminator. No
        formatting is applied to the message. If formatting is required, use the writei() or writef()
        methods instead.

        @param self This object.
        @param message The text to write to the output. If not a string object, it is run through str().
        """
        if self._output is None:
            return
        end = kwargs.pop('end', "\n")
        if not isinstance(message, str):
            message = str(message)
        self._output.write(message + end)

    def writei(self, fmt: str, *args, **kwargs) -> None:
        """@brief Write an interpolated string to the output stream.

        @param self This object.
        @param fmt Format string using printf-style "%" formatters.
        """
        assert isinstance(fmt, str)
        message = fmt % args
        self.write(message, **kwargs)

    def writef(self, fmt: str, *args, **kwargs) -> None:
        """@brief Write a formatted string to the output stream.

        @param self This object.
        @param fmt Format string using the format() mini-language.
        """
        assert isinstance(fmt, str)
        end = kwargs.pop('end', "\n")
        message = fmt.format(*args, **kwargs)
        self.write(message, end=end)

    def attach_session(self, session: "Session") -> None:
        """@brief Associate an open session with the command context.

        The commands registered on the session's target become available.
        """
        assert self._session is None
        assert session.is_open
        self._session = session
        self.attach_target(session.target)

    def attach_target(self, target: "Target") -> None:
        """@brief Make the commands registered on a target available."""
        assert self._target is None
        self._target = target
        for group in target.command_groups:
            LOG.debug("adding %s commands: %s", group.label,
                    ", ".join(klass.INFO['names'][0] for klass in group.commands))
            self._command_set.add_commands(group.commands, group.label)

    @property
    def session(self) -> Optional["Session"]:
        return self._session

    @property
    def target(self) -> Optional["Target"]:
        return self._target

    @property
    def command_set(self) -> CommandSet:
        return self._command_set

    @property
    def output_stream(self) -> IO[str]:
        return self._output

    @output_stream.setter
    def output_stream(self, stream: IO[str]) -> None:
        self._output = stream

    @property
    def log_tracebacks(self) -> bool:
        if self._session is None:
            return False
        return self._session.log_tracebacks

    def parse_command(self, cmdline: List[str]) -> CommandInvocation:
        """@brief Resolve the command name of a split command line.

        @exception CommandError The name is unknown or matches more than one command.
        """
        cmd = cmdline[0].lower()
        args = cmdline[1:]

        # Look up shortened unambiguous match for the command name.
        matched_command = self._command_set.command_matcher.find_one(cmd)

        # Check for valid command.
        if matched_command is None:
            all_matches = self._command_set.command_matcher.find_all(cmd)
            if len(all_matches) > 1:
                raise exceptions.CommandError("command '%s' is ambiguous; matches are %s" % (cmd,
                        ", ".join("'%s'" % c for c in all_matches)))
            else:
                raise exceptions.CommandError("unrecognized command '%s'" % cmd)

        return CommandInvocation(matched_command, args)

    def execute_command(self, cmdline: Union[str, Sequence[str]]) -> bool:
        """@brief Run a single command.

        @param self
        @param cmdline Either a command line string or an argv-style list whose first element is the
            command name. An empty command line does nothing.
        @retval True The command completed.
        @retval False A command error was reported on the output stream.
        @exception Error Errors other than command errors, such as a flash or transfer error, are
            passed to the caller.
        """
        try:
            args = self._split_command_line(cmdline)
            if not args:
                return True
            invocation = self.parse_command(args)
            self._run_invocation(invocation)
        except exceptions.UsageError as err:
            self.write(str(err))
            return False
        except exceptions.CommandError as err:
            if self.log_tracebacks:
                LOG.error("command error", exc_info=True)
            self.write("Error: %s" % err)
            return False
        return True

    def _split_command_line(self, cmdline: Union[str, Sequence[str]]) -> List[str]:
        if not isinstance(cmdline, str):
            return list(cmdline)
        try:
            return shlex.split(cmdline)
        except ValueError as err:
            raise exceptions.CommandError("cannot parse command line: %s" % err) from None

    def _run_invocation(self, invocation: CommandInvocation) -> None:
        cmd_class = self._command_set.commands[invocation.cmd]
        cmd_object = cmd_class(self)
        cmd_object.check_arg_count(list(invocation.args))
        cmd_object.parse(list(invocation.args))
        cmd_object.execute()
