# samflash
# Copyright (c) 2018-2020 Arm Limited
# Copyright (c) 2021-2022 Chris Reed
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

from __future__ import annotations

import logging
import logging.config
import yaml
import os
from typing import (Any, Callable, Dict, List, Mapping, Optional, TYPE_CHECKING)
from typing_extensions import Self

from . import exceptions
from .options_manager import OptionsManager
from .target import Target

if TYPE_CHECKING:
    from types import TracebackType
    from .memory_interface import MemoryInterface

LOG = logging.getLogger(__name__)

## @brief Set of default config filenames to search for.
_CONFIG_FILE_NAMES = [
        "samflash.yaml",
        "samflash.yml",
        ".samflash.yaml",
        ".samflash.yml",
    ]

## @brief Signature of a probe routine.
ProbeRoutine = Callable[[Target], bool]

class Session:
    """@brief Top-level object for working with one attached device.

    A session is created with the memory link of a debug probe. Opening the session identifies the
    device by running probe routines against a new @ref samflash.core.target.Target "Target", which
    receives the device's memory map and console commands. Closing the session releases the target.

    Another important function of this class is that it contains a dictionary of session-scope
    options. These would normally be passed in from the command line, or read from a config file.
    Options are looked up in this order, first match wins:
    - keyword arguments to the constructor
    - the _options_ parameter to the constructor
    - the config file
    - the _option_defaults_ parameter to the constructor
    - the builtin defaults in @ref samflash.core.options "options"

    A session can be used as a context manager, which opens it on entry and closes it on exit:
    @code
    with Session(link) as session:
        region = session.target.memory_map.get_boot_memory()
        region.flash.erase(region.start, region.blocksize)
    @endcode
    """

    def __init__(
            self,
            link: Optional[MemoryInterface],
            auto_open: bool = True,
            options: Optional[Mapping[str, Any]] = None,
            option_defaults: Optional[Mapping[str, Any]] = None,
            **kwargs
            ) -> None:
        """@brief Session constructor.

        @param self
        @param link Object implementing @ref samflash.core.memory_interface.MemoryInterface
            "MemoryInterface" for the debug link. May be None for a session that only holds
            options; such a session cannot be opened.
        @param auto_open Whether to automatically open the session when used as a context manager.
        @param options Optional session options dictionary.
        @param option_defaults Optional dictionary of session option values. This dictionary has the
            lowest priority in determining final session option values, and is intended to set new
            defaults for option if they are not set through any other method.
        @param kwargs Session options passed as keyword arguments.
        """
        self._link = link
        self._target: Optional[Target] = None
        self._closed: bool = True
        self._inited: bool = False
        self._auto_open = auto_open
        self._options = OptionsManager()

        # Update options.
        self._options.add_front(kwargs)
        self._options.add_back(options)

        # Init project directory.
        if self.options.get('project_dir') is None:
            self._project_dir: str = os.environ.get('SAMFLASH_PROJECT_DIR') or os.getcwd()
        else:
            self._project_dir: str = os.path.abspath(os.path.expanduser(self.options.get('project_dir')))
        LOG.debug("Project directory: %s", self.project_dir)

        # Add global config options, then the lowest priority options.
        self._options.add_back(self._get_config())
        self._options.add_back(option_defaults)

        # Logging config.
        self._configure_logging()

    def _get_config(self) -> Dict[str, Any]:
        # Load config file if one was provided via options, and no_config option was not set.
        if not self.options.get('no_config'):
            configPath = self.find_user_file('config_file', _CONFIG_FILE_NAMES)

            if configPath is not None:
                try:
                    with open(configPath, 'r') as configFile:
                        LOG.debug("Loading config from: %s", configPath)
                        config = yaml.safe_load(configFile)
                        # Allow an empty config file.
                        if config is None:
                            return {}
                        # But fail if someone tries to put something other than a dict at the top.
                        elif not isinstance(config, dict):
                            raise exceptions.Error("configuration file %s does not contain a top-level dictionary"
                                    % configPath)
                        return config
                except IOError as err:
                    LOG.warning("Error attempting to access config file '%s': %s", configPath, err)

        return {}

    def find_user_file(self, option_name: Optional[str], filename_list: List[str]) -> Optional[str]:
        """@brief Search the project directory for a file.

        @retval None No matching file was found.
        @retval string An absolute path to the requested file.
        """
        if option_name is not None:
            filePath = self.options.get(option_name)
        else:
            filePath = None

        # Look for default filenames if a path wasn't provided.
        if filePath is None:
            for filename in filename_list:
                thisPath = os.path.expanduser(filename)
                if not os.path.isabs(thisPath):
                    thisPath = os.path.join(self.project_dir, filename)
                if os.path.isfile(thisPath):
                    filePath = thisPath
                    break
        # Use the path passed in options, which may be absolute, relative to the
        # home directory, or relative to the project directory.
        else:
            filePath = os.path.expanduser(filePath)
            if not os.path.isabs(filePath):
                filePath = os.path.join(self.project_dir, filePath)

        return filePath

    def _configure_logging(self) -> None:
        """@brief Load a logging config dict or file."""
        # Get logging config that could have been loaded from the config file.
        config_value = self.options.get('logging')

        # Allow logging setting to refer to another file.
        if isinstance(config_value, str):
            loggingConfigPath = self.find_user_file(None, [config_value])

            if loggingConfigPath is not None:
                try:
                    with open(loggingConfigPath, 'r') as configFile:
                        config = yaml.safe_load(configFile)
                        LOG.debug("Using logging configuration from: %s", loggingConfigPath)
                except IOError as err:
                    LOG.warning("Error attempting to load logging config file '%s': %s", config_value, err)
                    return
            else:
                LOG.warning("Logging config file '%s' does not exist", config_value)
                return
        else:
            config = config_value

        if config is not None:
            if not isinstance(config, dict):
                LOG.warning("Logging configuration is not a dictionary")
                return
            # Stuff a version key if it's missing, to make it easier to use.
            if 'version' not in config:
                config['version'] = 1
            # Set a different default for disabling existing loggers.
            if 'disable_existing_loggers' not in config:
                config['disable_existing_loggers'] = False
            # Remove an empty 'loggers' key.
            if ('loggers' in config) and (config['loggers'] is None):
                del config['loggers']

            try:
                logging.config.dictConfig(config)
            except (ValueError, TypeError, AttributeError, ImportError) as err:
                LOG.warning("Error applying logging configuration: %s", err)

    @property
    def is_open(self) -> bool:
        """@brief Boolean of whether the session has been opened."""
        return self._inited and not self._closed

    @property
    def link(self) -> Optional[MemoryInterface]:
        return self._link

    @property
    def target(self) -> Optional[Target]:
        """@brief The @ref samflash.core.target.Target "Target" of an open session, otherwise None."""
        return self._target

    @property
    def options(self) -> OptionsManager:
        """@brief The @ref samflash.core.options_manager.OptionsManager "OptionsManager" object."""
        return self._options

    @property
    def project_dir(self) -> str:
        """@brief Path to the project directory."""
        return self._project_dir

    @property
    def log_tracebacks(self) -> bool:
        """@brief Quick access to debug.traceback option since it is widely used."""
        return bool(self.options.get('debug.traceback'))

    def __enter__(self) -> Self:
        assert self._link is not None
        if self._auto_open:
            try:
                self.open()
            except Exception:
                self.close()
                raise
        return self

    def __exit__(self, exc_type: type, value: Any, traceback: TracebackType) -> bool:
        self.close()
        return False

    def _select_probes(self, probes: Optional[Mapping[str, ProbeRoutine]]) -> Mapping[str, ProbeRoutine]:
        if probes is None:
            # Import locally to prevent import loops.
            from ..target.builtin import BUILTIN_PROBES
            probes = BUILTIN_PROBES

        override = self.options.get('target_override')
        if override is None:
            return probes
        override = override.lower()
        if override not in probes:
            raise exceptions.TargetSupportError("target override '%s' is not one of %s" % (override,
                    ", ".join(probes.keys())))
        return {override: probes[override]}

    def open(self, probes: Optional[Mapping[str, ProbeRoutine]] = None) -> None:
        """@brief Open the session.

        A new target is created on the session's link, then each probe routine is tried in turn until
        one recognizes the device. The `target_override` option restricts this to a single named
        routine.

        @param self
        @param probes Mapping of probe routine names to routines. Defaults to the builtin routines.
        @exception TargetSupportError No probe routine recognized the device.
        """
        if self._inited:
            return
        assert self._link is not None, "Cannot open a session without a link."

        selected = self._select_probes(probes)
        target = Target(self, self._link)
        self._closed = False

        for name, probe in selected.items():
            LOG.debug("trying probe routine %s", name)
            if probe(target):
                LOG.info("Target %s recognized by %s probe", target.part_number, name)
                self._target = target
                self._inited = True
                return

        target.release()
        self._closed = True
        raise exceptions.TargetSupportError("no probe routine recognized the device (tried %s)"
                % ", ".join(selected.keys()))

    def close(self) -> None:
        """@brief Close the session.

        Releases the target's regions and commands.
        """
        if self._closed:
            return
        self._closed = True

        LOG.debug("uninit session %s", self)
        if self._target is not None:
            self._target.release()
            self._target = None
        self._inited = False
