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

"""Core ANTEX Module.

This module provides the building blocks shared by the reader and the
lookup engine:

- **Constants**: ANTEX record labels, constellation letters, frequency aliases
- **Data Structures**: typed antenna records, PCV grids, antenna selectors
  and the immutable model snapshot
- **Time**: calendar dates with a total order for validity windows
- **Exceptions**: usage, not-found and format errors

Example Usage:
    >>> from pyantex.core import *
    >>>
    >>> date = CalendarDate(2009, 9, 13)
    >>> normalize_frequency('L1')
    'G01'
"""

from .constants import *
from .data_structures import *
from .exceptions import *
from .time import *

from . import constants, data_structures, exceptions, time

__all__ = [name for name in dir(constants) if name.isupper()] \
    + data_structures.__all__ + exceptions.__all__ + time.__all__
