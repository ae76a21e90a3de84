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

"""Antenna phase center queries, PRN/SVN resolution and ANTPHC tables."""

from .antphc import (antphc_block, antphc_combination, antphc_header,
                     antphc_pattern, format_antphc, iono_free_coefficients)
from .lookup import AntexLookup, AntexService, Selector
from .resolver import IdentityResolver, constellation_char

__all__ = [
    'AntexLookup', 'AntexService', 'Selector',
    'IdentityResolver', 'constellation_char',
    'antphc_block', 'antphc_combination', 'antphc_header', 'antphc_pattern',
    'format_antphc', 'iono_free_coefficients',
]
