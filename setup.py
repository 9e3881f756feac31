# samflash
# Copyright (c) 2012-2020 Arm Limited
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

import os
import re
from setuptools import (find_packages, setup)
from pathlib import Path

# Get the directory containing this setup.py so relative paths resolve when run from elsewhere.
SCRIPT_DIR = Path(__file__).parent.resolve()
os.chdir(SCRIPT_DIR)

# Read the version from the package without importing it.
init_text = (SCRIPT_DIR / "samflash" / "__init__.py").read_text()
version = re.search(r'^__version__\s*=\s*"([^"]+)"', init_text, re.MULTILINE).group(1)

setup(
    name="samflash",
    version=version,
    description="Flash identification and programming for Microchip SAM3, SAM4 and SAMx7 devices",
    license="Apache-2.0",
    python_requires=">=3.8",
    packages=find_packages(include=["samflash", "samflash.*"]),
    install_requires=[
        "natsort>=8.0.0,<9.0",
        "pyyaml>=6.0,<7.0",
        "typing-extensions>=4.0,<5.0",
        ],
    extras_require={
        "test": [
            "pytest>=6.2",
            ],
        },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: Apache Software License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Topic :: Software Development :: Debuggers",
        "Topic :: Software Development :: Embedded Systems",
        ],
)
