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

"""Calendar dates used for antenna validity windows"""

from datetime import date, datetime, timedelta
from typing import Union

from .constants import FAR_FUTURE_DOY, FAR_FUTURE_YEAR

MJD_EPOCH = date(1858, 11, 17)
GPS_EPOCH = date(1980, 1, 6)


class CalendarDate:
    """Day-resolution calendar date with a total order

    Dates are ordered by their Modified Julian Day number, so interval
    containment ``valid_from <= d <= valid_until`` is well defined.
    Instances are immutable and hashable.
    """

    __slots__ = ('_mjd',)

    def __init__(self, year: int, month: int = 1, day: int = 1):
        """
        Initialize calendar date

        Parameters:
        -----------
        year : int
            Four digit year
        month : int
            Month (1-12)
        day : int
            Day of month
        """
        d = date(int(year), int(month), int(day))
        object.__setattr__(self, '_mjd', (d - MJD_EPOCH).days)

    def __setattr__(self, name, value):
        raise AttributeError("CalendarDate is immutable")

    @classmethod
    def from_doy(cls, year: int, doy: int) -> 'CalendarDate':
        """Create date from year and day of year"""
        year = int(year)
        doy = int(doy)
        days_in_year = 366 if _is_leap(year) else 365
        if doy < 1 or doy > days_in_year:
            raise ValueError(f"Invalid day of year {doy} for {year}: must be between 1 and {days_in_year}")
        d = date(year, 1, 1) + timedelta(days=doy - 1)
        return cls(d.year, d.month, d.day)

    @classmethod
    def from_mjd(cls, mjd: int) -> 'CalendarDate':
        """Create date from Modified Julian Day"""
        d = MJD_EPOCH + timedelta(days=int(mjd))
        return cls(d.year, d.month, d.day)

    @classmethod
    def from_datetime(cls, dt: Union[date, datetime]) -> 'CalendarDate':
        """Create date from a datetime or date object (time of day is dropped)"""
        return cls(dt.year, dt.month, dt.day)

    @classmethod
    def from_string(cls, text: str) -> 'CalendarDate':
        """Parse ``YYYY-MM-DD`` or ``YYYY:DOY``"""
        text = text.strip()
        if ':' in text:
            year, doy = text.split(':', 1)
            return cls.from_doy(int(year), int(doy))
        try:
            d = datetime.strptime(text, '%Y-%m-%d')
        except ValueError as exc:
            raise ValueError(f"Invalid date '{text}': expected YYYY-MM-DD or YYYY:DOY") from exc
        return cls.from_datetime(d)

    @classmethod
    def far_future(cls) -> 'CalendarDate':
        """Default end of a satellite validity window"""
        return cls.from_doy(FAR_FUTURE_YEAR, FAR_FUTURE_DOY)

    def to_date(self) -> date:
        """Convert to datetime.date"""
        return MJD_EPOCH + timedelta(days=self._mjd)

    @property
    def mjd(self) -> int:
        return self._mjd

    @property
    def year(self) -> int:
        return self.to_date().year

    @property
    def month(self) -> int:
        return self.to_date().month

    @property
    def day(self) -> int:
        return self.to_date().day

    @property
    def doy(self) -> int:
        return self.to_date().timetuple().tm_yday

    @property
    def gps_week(self) -> int:
        return (self.to_date() - GPS_EPOCH).days // 7

    @property
    def gps_week_day(self) -> int:
        return (self.to_date() - GPS_EPOCH).days % 7

    def __lt__(self, other: 'CalendarDate') -> bool:
        if not isinstance(other, CalendarDate):
            return NotImplemented
        return self._mjd < other._mjd

    def __le__(self, other: 'CalendarDate') -> bool:
        if not isinstance(other, CalendarDate):
            return NotImplemented
        return self._mjd <= other._mjd

    def __gt__(self, other: 'CalendarDate') -> bool:
        if not isinstance(other, CalendarDate):
            return NotImplemented
        return self._mjd > other._mjd

    def __ge__(self, other: 'CalendarDate') -> bool:
        if not isinstance(other, CalendarDate):
            return NotImplemented
        return self._mjd >= other._mjd

    def __eq__(self, other) -> bool:
        if not isinstance(other, CalendarDate):
            return NotImplemented
        return self._mjd == other._mjd

    def __hash__(self):
        return hash(self._mjd)

    def __reduce__(self):
        return (CalendarDate.from_mjd, (self._mjd,))

    def __str__(self):
        return self.to_date().isoformat()

    def __repr__(self):
        d = self.to_date()
        return f"CalendarDate({d.year}, {d.month}, {d.day})"


def _is_leap(year: int) -> bool:
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


__all__ = ['CalendarDate', 'MJD_EPOCH', 'GPS_EPOCH']
