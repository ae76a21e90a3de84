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

"""Core data structures for antenna phase-center models"""

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, NamedTuple, Optional, Tuple

import numpy as np

from .constants import FREQUENCY_ALIASES
from .exceptions import AntexUsageError
from .time import CalendarDate

_SHORT_FREQUENCY = re.compile(r'^([GRECJSI])\s*([1-9])$')


def normalize_frequency(code: str) -> str:
    """Normalize a frequency code to the ANTEX ``sNN`` form.

    ``L1``/``L2`` map to ``G01``/``G02``; a single digit code such as
    ``G 1`` or ``G1`` is zero padded to ``G01``.

    Parameters
    ----------
    code : str
        Frequency code as written by the caller or found in the file

    Returns
    -------
    str
        Normalized frequency code

    Raises
    ------
    AntexUsageError
        If code is None or blank
    """
    if code is None or not str(code).strip():
        raise AntexUsageError("frequency is required")
    code = str(code).strip()
    if code in FREQUENCY_ALIASES:
        return FREQUENCY_ALIASES[code]
    match = _SHORT_FREQUENCY.match(code)
    if match:
        return f"{match.group(1)}0{match.group(2)}"
    return code


def frozen_array(values) -> np.ndarray:
    """Return a read-only float64 copy of values"""
    array = np.array(values, dtype=np.float64)
    array.flags.writeable = False
    return array


class AntennaKey(NamedTuple):
    """Unique key of an antenna record.

    label is the antenna type for ground antennas and the PRN for
    satellites; variant is the dome type or the SVN respectively.
    """
    label: str
    variant: str

    def __str__(self):
        return f"{self.label} {self.variant}"


@dataclass(frozen=True)
class PCVGrid:
    """Phase center variations of one frequency (mm).

    Attributes
    ----------
    noazi : np.ndarray
        Azimuth-independent pattern, one value per zenith step
    azimuth : Mapping[float, np.ndarray]
        Azimuth angle (degrees, clockwise) to pattern over zenith steps.
        Empty when the antenna has no azimuth dependence.
    """
    noazi: np.ndarray
    azimuth: Mapping[float, np.ndarray] = field(default_factory=lambda: MappingProxyType({}))

    @property
    def has_azimuth(self) -> bool:
        return len(self.azimuth) > 0

    def as_mapping(self) -> Mapping[float, np.ndarray]:
        """Azimuth-keyed view; an isotropic pattern is keyed at azimuth 0"""
        if self.has_azimuth:
            return self.azimuth
        return MappingProxyType({0.0: self.noazi})

    def __eq__(self, other):
        if not isinstance(other, PCVGrid):
            return NotImplemented
        if not np.array_equal(self.noazi, other.noazi):
            return False
        if set(self.azimuth.keys()) != set(other.azimuth.keys()):
            return False
        return all(np.array_equal(row, other.azimuth[az]) for az, row in self.azimuth.items())

    def __hash__(self):
        return hash((self.noazi.tobytes(), tuple(sorted(self.azimuth.keys()))))


@dataclass(frozen=True)
class FrequencyEntry:
    """Offset and PCV of one antenna on one frequency.

    The offset is (north, east, up) for ground antennas and (x, y, z)
    in the satellite body frame for satellites, both in millimeters.
    """
    frequency: str
    offset: Tuple[float, float, float]
    pcv: PCVGrid


@dataclass(frozen=True)
class AntennaRecord:
    """Complete phase-center model of one antenna.

    Attributes
    ----------
    key : AntennaKey
        (antenna, dome) or (PRN, SVN)
    zen1, zen2, dzen : float
        Zenith (nadir for satellites) angle start, stop and step in degrees
    dazi : float
        Azimuth step in degrees, 0 for azimuth-independent patterns
    frequencies : Mapping[str, FrequencyEntry]
        Normalized frequency code to entry
    valid_from, valid_until : CalendarDate or None
        Validity window, only set for satellite antennas
    antenna_type : str
        Antenna type for ground antennas, block name for satellites
    serial : str
        Serial number or COSPAR id
    sinex_code : str
        SINEX code of the calibration, empty if absent
    is_satellite : bool
        True when the record was built from a satellite header
    """
    key: AntennaKey
    zen1: float
    zen2: float
    dzen: float
    dazi: float
    frequencies: Mapping[str, FrequencyEntry]
    valid_from: Optional[CalendarDate] = None
    valid_until: Optional[CalendarDate] = None
    antenna_type: str = ""
    serial: str = ""
    sinex_code: str = ""
    is_satellite: bool = False

    def __hash__(self):
        # frequencies is an unhashable mapping; equal records share these
        return hash((self.key, self.valid_from, self.valid_until))

    @property
    def n_zenith(self) -> int:
        """Number of zenith samples per pattern row"""
        return int(round((self.zen2 - self.zen1) / self.dzen)) + 1

    @property
    def n_azimuth(self) -> int:
        """Number of tabulated azimuth rows, 0 when isotropic"""
        if self.dazi == 0:
            return 0
        return int(360.0 // self.dazi) + 1

    @property
    def zenith_angles(self) -> np.ndarray:
        return self.zen1 + self.dzen * np.arange(self.n_zenith)

    def covers(self, date: CalendarDate) -> bool:
        """True if date lies in the validity window (always for ground antennas)"""
        if self.valid_from is None:
            return True
        return self.valid_from <= date <= self.valid_until


@dataclass(frozen=True)
class SatelliteEntry:
    """One SVN registered under a PRN for a validity window"""
    prn: str
    svn: str
    valid_from: CalendarDate
    valid_until: CalendarDate

    def contains(self, date: CalendarDate) -> bool:
        return self.valid_from <= date <= self.valid_until


@dataclass(frozen=True)
class AntexHeader:
    """File header of an ANTEX file"""
    version: str = ""
    system: str = ""
    pcv_type: str = ""
    reference_antenna: str = ""
    reference_serial: str = ""

    @property
    def is_absolute(self) -> bool:
        return self.pcv_type == 'A'


# Antenna selectors. Each query of the lookup engine takes one of these (or
# an AntennaKey); required components are validated on construction.

def _require(value, what):
    if value is None or (isinstance(value, str) and not value.strip()):
        raise AntexUsageError(f"{what} is required")


@dataclass(frozen=True)
class GroundAntenna:
    """Ground antenna given by antenna type and dome type"""
    antenna: str
    dome: str

    def __post_init__(self):
        _require(self.antenna, "antenna")
        _require(self.dome, "dome")


@dataclass(frozen=True)
class SatelliteByPrn:
    """Satellite antenna given by PRN and observation date"""
    prn: str
    date: CalendarDate

    def __post_init__(self):
        _require(self.prn, "prn")
        _require(self.date, "date")
        if not isinstance(self.date, CalendarDate):
            raise AntexUsageError(f"date must be a CalendarDate, got {type(self.date).__name__}")


@dataclass(frozen=True)
class SatelliteBySvn:
    """Satellite antenna given by SVN"""
    svn: str

    def __post_init__(self):
        _require(self.svn, "svn")


@dataclass(frozen=True)
class AntexModel:
    """Immutable snapshot produced by one parse of an ANTEX file.

    Attributes
    ----------
    header : AntexHeader
        File header
    records : Mapping[AntennaKey, AntennaRecord]
        All antenna records by key
    satellites : Mapping[str, Tuple[SatelliteEntry, ...]]
        PRN to SVN entries in file order
    warnings : Tuple[str, ...]
        Data-quality warnings raised while parsing
    source : str
        File name or description of the parsed input
    """
    header: AntexHeader
    records: Mapping[AntennaKey, AntennaRecord]
    satellites: Mapping[str, Tuple[SatelliteEntry, ...]]
    warnings: Tuple[str, ...] = ()
    source: str = ""

    def __len__(self):
        return len(self.records)

    def __contains__(self, key):
        return key in self.records


__all__ = [
    'normalize_frequency', 'frozen_array', 'AntennaKey', 'PCVGrid',
    'FrequencyEntry', 'AntennaRecord', 'SatelliteEntry', 'AntexHeader',
    'GroundAntenna', 'SatelliteByPrn', 'SatelliteBySvn', 'AntexModel',
]
