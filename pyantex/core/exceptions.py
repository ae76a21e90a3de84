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

"""Exception hierarchy for pyantex."""


class AntexError(Exception):
    """Base exception for all pyantex errors."""


class AntexUsageError(AntexError, ValueError):
    """A query is missing a required component (antenna, dome, frequency, date)."""


class AntennaNotFoundError(AntexError, KeyError):
    """No antenna record, or no frequency entry, for the requested key.

    Parameters
    ----------
    message : str
        Human readable description
    key : AntennaKey, optional
        Resolved key, None when the selector did not resolve
    frequency : str, optional
        Normalized frequency code that was requested
    """

    def __init__(self, message, key=None, frequency=None):
        self.key = key
        self.frequency = frequency
        super().__init__(message)

    def __str__(self):
        return self.args[0]


class AntexFormatError(AntexError, ValueError):
    """Malformed ANTEX content, raised only when strict reading is enabled.

    Parameters
    ----------
    message : str
        Description of the problem
    line_number : int, optional
        1-based line number in the source
    """

    def __init__(self, message, line_number=None):
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


__all__ = ['AntexError', 'AntexUsageError', 'AntennaNotFoundError', 'AntexFormatError']
