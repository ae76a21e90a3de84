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

"""PRN <-> SVN resolution over satellite validity windows.

A PRN (broadcast ID) is reassigned to different physical vehicles (SVN)
over time. The ANTEX satellite sections record which SVN carried a PRN
between VALID FROM and VALID UNTIL; this module answers both directions
of that mapping with a linear scan, which is fast enough for the few
hundred satellite sections of an IGS file.
"""

from typing import List, Mapping, Optional, Tuple

from ..core.constants import CONSTELLATION_NAMES, PRN_PATTERN, SATELLITE_SYSTEM_CHARS
from ..core.data_structures import SatelliteEntry
from ..core.exceptions import AntexUsageError
from ..core.time import CalendarDate


def constellation_char(constellation: Optional[str]) -> Optional[str]:
    """Map a constellation name or letter to its system letter.

    Parameters
    ----------
    constellation : str or None
        'gps', 'GLONASS', 'G', 'r', ... or None for no filter

    Returns
    -------
    str or None
        Upper case system letter, None when no filter was given

    Raises
    ------
    AntexUsageError
        Unrecognized constellation
    """
    if constellation is None:
        return None
    value = constellation.strip()
    if value.lower() in CONSTELLATION_NAMES:
        return CONSTELLATION_NAMES[value.lower()]
    if len(value) == 1 and value.upper() in SATELLITE_SYSTEM_CHARS:
        return value.upper()
    raise AntexUsageError(
        f"Unrecognized constellation: {constellation}. Valid constellations are: "
        f"{', '.join(sorted(CONSTELLATION_NAMES))} or one of {''.join(SATELLITE_SYSTEM_CHARS)}")


class IdentityResolver:
    """Resolve satellite identities against the identity index of a model"""

    def __init__(self, satellites: Mapping[str, Tuple[SatelliteEntry, ...]]):
        self._satellites = satellites

    def entries(self, prn: str) -> Tuple[SatelliteEntry, ...]:
        """All SVN entries registered under a PRN, in file order"""
        return tuple(self._satellites.get(prn, ()))

    def broadcast_ids(self) -> List[str]:
        return list(self._satellites.keys())

    def resolve_vehicle(self, prn: str, date: CalendarDate) -> Optional[str]:
        """SVN that carried prn on date, or None.

        With overlapping windows (a data error in the file) the first
        entry in file order wins.
        """
        if date is None:
            raise AntexUsageError("date is required to resolve a PRN")
        for entry in self._satellites.get(prn, ()):
            if entry.contains(date):
                return entry.svn
        return None

    def resolve_broadcast_id(self, svn: str) -> Optional[str]:
        """PRN under which svn is registered, or None (first match wins)"""
        for prn, entries in self._satellites.items():
            for entry in entries:
                if entry.svn == svn:
                    return prn
        return None

    def broadcast_ids_on(self, date: CalendarDate, constellation: Optional[str] = None) -> List[str]:
        """PRNs with at least one SVN whose window contains date.

        Parameters
        ----------
        date : CalendarDate
            Observation date
        constellation : str, optional
            Restrict to one constellation (name or system letter)

        Returns
        -------
        List[str]
            Matching PRNs in file order
        """
        if date is None:
            raise AntexUsageError("date is required to list satellites")
        sys_char = constellation_char(constellation)
        prns = []
        for prn, entries in self._satellites.items():
            if not PRN_PATTERN.match(prn):
                continue
            if sys_char is not None and prn[0] != sys_char:
                continue
            if any(entry.contains(date) for entry in entries):
                prns.append(prn)
        return prns


__all__ = ['constellation_char', 'IdentityResolver']
