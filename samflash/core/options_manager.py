# samflash
# Copyright (c) 2019-2020 Arm Limited
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
from typing import (Any, Dict, List, Mapping, Optional)

from .options import OPTIONS_INFO

LOG = logging.getLogger(__name__)

class OptionsManager:
    """@brief Layered option values for a session.

    When an option is looked up, the first layer holding a value for it wins. Layers are added at
    the front (highest priority) or at the back (lowest priority), which lets a session stack
    keyword arguments, an options dict and a config file in priority order. The default from
    OPTIONS_INFO sits below every layer.

    Option names are normalised before they are stored: `None` values are dropped, a double
    underscore becomes a dot, and names are lowercased. That makes `debug__traceback=True` usable
    as a keyword argument.
    """

    def __init__(self) -> None:
        self._layers: List[Dict[str, Any]] = []

    def add_front(self, new_options: Optional[Mapping[str, Any]]) -> None:
        """@brief Add a new highest priority layer of option values."""
        if new_options is not None:
            self._layers.insert(0, self._convert_options(new_options))

    def add_back(self, new_options: Optional[Mapping[str, Any]]) -> None:
        """@brief Add a new lowest priority layer of option values."""
        if new_options is not None:
            self._layers.append(self._convert_options(new_options))

    def _convert_options(self, new_options: Mapping[str, Any]) -> Dict[str, Any]:
        output = {}
        for name, value in new_options.items():
            if value is None:
                continue
            name = name.replace("__", ".").lower()
            if name not in OPTIONS_INFO:
                LOG.debug("unknown option '%s'", name)
            output[name] = value
        return output

    def is_set(self, key: str) -> bool:
        """@brief Return whether any layer holds a value for the option.

        This is True even if the value equals the default.
        """
        return any(key in layer for layer in self._layers)

    def get_default(self, key: str) -> Any:
        """@brief Return the default value for the specified option."""
        if key in OPTIONS_INFO:
            return OPTIONS_INFO[key].default
        return None

    def get(self, key: str) -> Any:
        """@brief Return the highest priority value for the option, or its default."""
        for layer in self._layers:
            if key in layer:
                return layer[key]
        return self.get_default(key)

    def set(self, key: str, value: Any) -> None:
        """@brief Set an option in the current highest priority layer."""
        self.update({key: value})

    def update(self, new_options: Mapping[str, Any]) -> None:
        """@brief Set multiple options in the current highest priority layer."""
        if not self._layers:
            self._layers.append({})
        self._layers[0].update(self._convert_options(new_options))

    def __contains__(self, key: str) -> bool:
        return self.is_set(key)

    def __getitem__(self, key: str) -> Any:
        return self.get(key)

    def __setitem__(self, key: str, value: Any) -> None:
        self.set(key, value)
