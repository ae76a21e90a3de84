# Copyright 2024 inuex35
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

"""
pyantex - ANTEX Antenna Phase Center Library

A Python library for reading ANTEX antenna exchange files and querying
ground station and satellite antenna phase center offsets (PCO) and
phase center variations (PCV), with PRN/SVN resolution over satellite
validity windows.
"""

__version__ = "1.0.0"
__author__ = "pyantex Development Team"
__title__ = "pyantex"
__description__ = "ANTEX antenna phase center parser and lookup engine"

from .logger import setup_logger, setup_logger_from_config
from .core import *
from .io import *
from .antenna import *
