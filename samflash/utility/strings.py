# samflash
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

from typing import (Iterable, Optional, Tuple)

class UniquePrefixMatcher:
    """@brief Resolves abbreviated command names.

    A console user may type any prefix of a command name as long as exactly one registered name
    starts with it, so `gpnvm_g` runs `gpnvm_get`. An exact match always wins, even when the
    name is also a prefix of another name.
    """

    def __init__(self, items: Optional[Iterable[str]] = None) -> None:
        self._items = set(items) if (items is not None) else set()

    def add_items(self, items: Iterable[str]) -> None:
        self._items.update(items)

    def find_all(self, prefix: str) -> Tuple[str, ...]:
        """@brief Return all names that start with `prefix`.
        @exception ValueError Raised for an empty `prefix`.
        """
        if len(prefix) == 0:
            raise ValueError("empty prefix")
        if prefix in self._items:
            return (prefix,)
        return tuple(sorted(i for i in self._items if i.startswith(prefix)))

    def find_one(self, prefix: str) -> Optional[str]:
        """@brief Return the single name matching `prefix`, or None if there are zero or several."""
        all_matches = self.find_all(prefix)
        if len(all_matches) == 1:
            return all_matches[0]
        return None
