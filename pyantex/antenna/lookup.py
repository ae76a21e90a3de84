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

"""Phase center offset and variation queries over a parsed ANTEX model.

Every query names its antenna with one selector:

- ``AntennaKey(label, variant)`` or a plain ``(label, variant)`` tuple
- ``GroundAntenna(antenna, dome)``
- ``SatelliteByPrn(prn, date)``, resolved to the SVN valid on that date
- ``SatelliteBySvn(svn)``, resolved to the PRN the SVN is registered under

Missing selector components raise :class:`AntexUsageError`. The dome is
never defaulted: falling back to ``NONE`` when a dome is not calibrated is
a decision for the caller (check with :meth:`AntexLookup.exists` first).

Examples
--------
>>> lookup = AntexLookup.from_file('igs14.atx')
>>> ant = GroundAntenna('ASH700228A+EX', 'NONE')
>>> north, east, up = lookup.get_offset(ant, 'L1')
>>> for azimuth, pattern in sorted(lookup.get_pcv(ant, 'L1').items()):
...     print(azimuth, pattern)
>>> sv = SatelliteByPrn('G19', CalendarDate(2009, 9, 13))
>>> x, y, z = lookup.get_offset(sv, 'G01')
"""

import threading
from pathlib import Path
from typing import List, Mapping, Optional, Tuple, Union

import numpy as np
import pandas as pd

from ..core.data_structures import (AntennaKey, AntennaRecord, AntexModel,
                                    FrequencyEntry, GroundAntenna,
                                    SatelliteByPrn, SatelliteBySvn,
                                    normalize_frequency)
from ..core.exceptions import AntennaNotFoundError, AntexUsageError
from ..core.time import CalendarDate
from ..io.antex import ReaderOptions, read_antex
from ..logger import get_logger
from .resolver import IdentityResolver

logger = get_logger(__name__)

Selector = Union[AntennaKey, Tuple[str, str], GroundAntenna, SatelliteByPrn, SatelliteBySvn]


class AntexLookup:
    """Read-only query API over one immutable :class:`AntexModel`.

    Safe to share between threads: no query mutates state.
    """

    def __init__(self, model: AntexModel):
        self.model = model
        self.resolver = IdentityResolver(model.satellites)

    @classmethod
    def from_file(cls, file_path: Union[str, Path], options: Optional[ReaderOptions] = None) -> 'AntexLookup':
        return cls(read_antex(file_path, options))

    def __len__(self):
        return len(self.model.records)

    def key_for(self, selector: Selector) -> Optional[AntennaKey]:
        """Resolve a selector to an AntennaKey, None if a satellite does not resolve"""
        if isinstance(selector, GroundAntenna):
            return AntennaKey(selector.antenna, selector.dome)
        if isinstance(selector, SatelliteByPrn):
            svn = self.resolver.resolve_vehicle(selector.prn, selector.date)
            return None if svn is None else AntennaKey(selector.prn, svn)
        if isinstance(selector, SatelliteBySvn):
            prn = self.resolver.resolve_broadcast_id(selector.svn)
            return None if prn is None else AntennaKey(prn, selector.svn)
        if isinstance(selector, tuple) and len(selector) == 2:
            label, variant = selector
            if not label or not variant:
                raise AntexUsageError("antenna and dome (or PRN and SVN) are required")
            return AntennaKey(label, variant)
        raise AntexUsageError(f"unsupported antenna selector: {selector!r}")

    def get_record(self, selector: Selector) -> AntennaRecord:
        """Antenna record for selector; AntennaNotFoundError if absent"""
        key = self.key_for(selector)
        record = self.model.records.get(key) if key is not None else None
        if record is None:
            raise AntennaNotFoundError(f"antenna not found: {selector}", key=key)
        return record

    def _entry(self, selector: Selector, frequency: str) -> FrequencyEntry:
        freq = normalize_frequency(frequency)
        record = self.get_record(selector)
        entry = record.frequencies.get(freq)
        if entry is None:
            raise AntennaNotFoundError(f"frequency {freq} not found for antenna {record.key}",
                                       key=record.key, frequency=freq)
        return entry

    def exists(self, selector: Selector, frequency: Optional[str] = None) -> bool:
        """True if the antenna (and the frequency, when given) is in the model"""
        key = self.key_for(selector)
        if key is None:
            return False
        record = self.model.records.get(key)
        if record is None:
            return False
        if frequency is None:
            return True
        return normalize_frequency(frequency) in record.frequencies

    def frequencies(self, selector: Selector) -> List[str]:
        return list(self.get_record(selector).frequencies.keys())

    def get_offset(self, selector: Selector, frequency: str) -> Tuple[float, float, float]:
        """Phase center offset in mm: (north, east, up) or satellite (x, y, z)"""
        return self._entry(selector, frequency).offset

    def get_pcv(self, selector: Selector, frequency: str) -> Mapping[float, np.ndarray]:
        """Azimuth (degrees, clockwise) to PCV pattern over zenith steps in mm.

        For an antenna without azimuth dependence the NOAZI pattern is
        returned as the single entry keyed at azimuth 0, so callers can
        iterate the same way regardless of the source layout.
        """
        return self._entry(selector, frequency).pcv.as_mapping()

    def get_noazi(self, selector: Selector, frequency: str) -> np.ndarray:
        """Azimuth-independent PCV pattern"""
        return self._entry(selector, frequency).pcv.noazi

    def get_zenith_angles(self, selector: Selector) -> Tuple[float, float, float]:
        """(zen1, zen2, dzen) in degrees"""
        record = self.get_record(selector)
        return record.zen1, record.zen2, record.dzen

    def get_azimuthal_angles(self, selector: Selector) -> Tuple[float, float, float]:
        """(0, 360, dazi) in degrees; dazi is 0 for azimuth-independent patterns"""
        record = self.get_record(selector)
        return 0.0, 360.0, record.dazi

    def get_antenna_header_line(self, selector: Selector) -> str:
        """ANTPHC header: nzen, zen1, dzen, nazi, azi1, dazi.

        An azimuth-independent pattern is reported as one azimuth sample
        with a 360 degree step. Sample counts are truncated, not rounded.
        """
        record = self.get_record(selector)
        nzen = int((record.zen2 - record.zen1) / record.dzen + 1)
        if record.dazi == 0:
            nazi, dazi = 1, 360.0
        else:
            nazi, dazi = int(360.0 / record.dazi), record.dazi
        return "%4d%7.2f%7.2f%4d%7.2f%7.2f" % (nzen, record.zen1, record.dzen,
                                               nazi, 0.0, dazi)

    def list_satellites_on_date(self, date: CalendarDate, constellation: Optional[str] = None) -> List[str]:
        """PRNs with an antenna definition valid on date"""
        return self.resolver.broadcast_ids_on(date, constellation)

    def resolve_vehicle(self, prn: str, date: CalendarDate) -> Optional[str]:
        return self.resolver.resolve_vehicle(prn, date)

    def resolve_broadcast_id(self, svn: str) -> Optional[str]:
        return self.resolver.resolve_broadcast_id(svn)

    def antenna_types(self) -> List[str]:
        """Sorted ground antenna types in the model"""
        return sorted({r.key.label for r in self.model.records.values() if not r.is_satellite})

    def radome_types(self) -> List[str]:
        """Sorted ground antenna dome types in the model"""
        return sorted({r.key.variant for r in self.model.records.values() if not r.is_satellite})

    def pcv_frame(self, selector: Selector, frequency: str) -> pd.DataFrame:
        """PCV table as a DataFrame, azimuth rows by zenith angle columns"""
        record = self.get_record(selector)
        pcv = self.get_pcv(selector, frequency)
        zenith = record.zenith_angles
        table = np.full((len(pcv), len(zenith)), np.nan)
        azimuths = sorted(pcv.keys())
        for i, azimuth in enumerate(azimuths):
            row = pcv[azimuth]
            n = min(len(row), len(zenith))
            table[i, :n] = row[:n]
        df = pd.DataFrame(table, index=pd.Index(azimuths, name='azimuth'),
                          columns=pd.Index(zenith, name='zenith'))
        return df


class AntexService:
    """Holds the current lookup snapshot and swaps in a fresh one on reload.

    Readers call :attr:`lookup` and keep using the snapshot they got; a
    reload never mutates a published snapshot.
    """

    def __init__(self, file_path: Union[str, Path], options: Optional[ReaderOptions] = None):
        self.file_path = Path(file_path)
        self.options = options
        self._lock = threading.Lock()
        self._lookup = AntexLookup.from_file(self.file_path, self.options)

    @property
    def lookup(self) -> AntexLookup:
        return self._lookup

    def reload(self, file_path: Union[str, Path, None] = None) -> AntexLookup:
        """Parse the file again (or a new file) and publish the new snapshot.

        A failed parse leaves the current snapshot in place.
        """
        with self._lock:
            path = Path(file_path) if file_path is not None else self.file_path
            lookup = AntexLookup.from_file(path, self.options)
            self.file_path = path
            self._lookup = lookup
        logger.info(f"Reloaded ANTEX snapshot from {path} ({len(lookup)} antennas)")
        return lookup


__all__ = ['Selector', 'AntexLookup', 'AntexService']
