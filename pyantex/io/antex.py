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

"""ANTEX antenna exchange file reader.

The ANTEX format stores one ``START OF ANTENNA`` ... ``END OF ANTENNA``
section per antenna. Each section carries a ``TYPE / SERIAL NO`` header,
optional ``VALID FROM`` / ``VALID UNTIL`` lines for satellite antennas, the
zenith and azimuth sampling, and one ``START OF FREQUENCY`` block per
frequency holding the phase center offset and the PCV pattern. Optional
``START OF FREQ RMS`` blocks repeat that layout with RMS values; they are
skipped.

The reader is a single pass state machine over the lines. Every section
start resets all transient state, so nothing leaks from one antenna into
the next. The result is an immutable :class:`AntexModel`.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union

from ..core.constants import (ANTEX_VERSION_SYST, DAZI, END_OF_ANTENNA,
                              END_OF_FREQ_RMS, END_OF_FREQUENCY, END_OF_HEADER,
                              NOAZI, NORTH_EAST_UP, PCV_TYPE_REFANT,
                              SINEX_CODE, START_OF_ANTENNA, START_OF_FREQ_RMS,
                              START_OF_FREQUENCY, TYPE_SERIAL_NO, VALID_FROM,
                              VALID_UNTIL, ZEN1_ZEN2_DZEN)
from ..core.data_structures import (AntennaKey, AntennaRecord, AntexHeader,
                                    AntexModel, FrequencyEntry, PCVGrid,
                                    SatelliteEntry, frozen_array,
                                    normalize_frequency)
from ..core.exceptions import AntexFormatError
from ..core.time import CalendarDate
from ..logger import get_logger

logger = get_logger(__name__)

# PCV values are always written with a decimal point
_NUMBER = re.compile(r'-?\d+\.\d+')
_INTEGER = re.compile(r'\d+')
# "G 1" -> "G01" in frequency headers
_SHORT_FREQUENCY = re.compile(r'\b([GRECJSI])\s([1-9])\b')


class SectionState(Enum):
    """Where the reader is inside an antenna section"""
    HEADER = 1
    FREQUENCY = 2
    FREQUENCY_RMS = 3


@dataclass
class ReaderOptions:
    """Configuration of the ANTEX reader.

    Attributes
    ----------
    default_valid_until : CalendarDate
        End of a satellite validity window when VALID UNTIL is absent
    strict : bool
        Raise AntexFormatError on data-quality problems instead of
        logging a warning and continuing
    encoding : str
        Text encoding of the file
    """
    default_valid_until: CalendarDate = field(default_factory=CalendarDate.far_future)
    strict: bool = False
    encoding: str = 'ascii'


@dataclass(frozen=True)
class SatelliteHeader:
    """Parsed satellite ``TYPE / SERIAL NO`` line"""
    block: str
    prn: str
    svn: str
    cospar: str


@dataclass(frozen=True)
class GroundHeader:
    """Parsed ground antenna ``TYPE / SERIAL NO`` line"""
    antenna: str
    dome: str
    serial: str = ""


class SatelliteHeaderParser:
    """Try-parse a satellite header line for one family of block names"""

    def __init__(self, name: str, pattern: str):
        self.name = name
        self.pattern = re.compile(pattern)

    def try_parse(self, line: str) -> Optional[SatelliteHeader]:
        match = self.pattern.match(line)
        if match is None:
            return None
        block, prn, svn, cospar = match.groups()
        if prn[0] != svn[0]:
            return None
        return SatelliteHeader(block.strip(), prn, svn, cospar)


class GroundStationParser:
    """Try-parse a ground antenna header line (antenna type, dome, serial)"""

    name = "ground"

    def try_parse(self, line: str) -> Optional[GroundHeader]:
        fields = line.split(TYPE_SERIAL_NO, 1)[0].split()
        if len(fields) < 2:
            return None
        serial = fields[2] if len(fields) > 2 else ""
        return GroundHeader(fields[0], fields[1], serial)


_SATELLITE_TAIL = r'\s+(\d+-\d+\w)\s+TYPE / SERIAL NO\s*$'

# Order matters: satellite patterns are tried before the ground fallback
HEADER_PARSERS = (
    SatelliteHeaderParser("gps", r'^(BLOCK\s.+?)\s+(G\d+)\s+(G\d+)' + _SATELLITE_TAIL),
    SatelliteHeaderParser("glonass", r'^(GLONASS.*?)\s+(R\d+)\s+(R\d+)' + _SATELLITE_TAIL),
    SatelliteHeaderParser("gnss", r'^(\S.*?)\s+([ECJSI]\d+)\s+([ECJSI]\d+)' + _SATELLITE_TAIL),
    GroundStationParser(),
)


def parse_type_serial(line: str) -> Union[SatelliteHeader, GroundHeader, None]:
    """Return the first successful header parse of a TYPE / SERIAL NO line"""
    for parser in HEADER_PARSERS:
        header = parser.try_parse(line)
        if header is not None:
            return header
    return None


def _parse_date(line: str) -> CalendarDate:
    year, month, day = (int(v) for v in _INTEGER.findall(line)[:3])
    return CalendarDate(year, month, day)


@dataclass
class _FrequencyBuilder:
    frequency: str
    offset: Optional[Tuple[float, float, float]] = None
    noazi: Optional[List[float]] = None
    azimuth: Dict[float, List[float]] = field(default_factory=dict)

    def build(self) -> FrequencyEntry:
        pcv = PCVGrid(
            noazi=frozen_array(self.noazi),
            azimuth=MappingProxyType({az: frozen_array(row) for az, row in self.azimuth.items()}),
        )
        return FrequencyEntry(self.frequency, self.offset or (0.0, 0.0, 0.0), pcv)


@dataclass
class _SectionBuilder:
    """Mutable state of the antenna section being read"""
    start_line: int
    label: Optional[str] = None
    variant: Optional[str] = None
    antenna_type: str = ""
    serial: str = ""
    sinex_code: str = ""
    is_satellite: bool = False
    valid_from: Optional[CalendarDate] = None
    valid_until: Optional[CalendarDate] = None
    dazi: Optional[float] = None
    zen1: Optional[float] = None
    zen2: Optional[float] = None
    dzen: Optional[float] = None
    state: SectionState = SectionState.HEADER
    current: Optional[_FrequencyBuilder] = None
    frequencies: Dict[str, _FrequencyBuilder] = field(default_factory=dict)

    @property
    def n_zenith(self) -> Optional[int]:
        if self.zen1 is None or self.zen2 is None or not self.dzen:
            return None
        return int(round((self.zen2 - self.zen1) / self.dzen)) + 1

    def apply_header(self, header):
        if isinstance(header, SatelliteHeader):
            self.label, self.variant = header.prn, header.svn
            self.antenna_type = header.block
            self.serial = header.cospar
            self.is_satellite = True
        else:
            self.label, self.variant = header.antenna, header.dome
            self.antenna_type = header.antenna
            self.serial = header.serial
            self.is_satellite = False


class AntexParser:
    """Line-driven ANTEX state machine.

    Feed it lines with :meth:`parse`; it returns the finished model. A
    parser instance is single use.
    """

    def __init__(self, options: Optional[ReaderOptions] = None, source: str = "<lines>"):
        self.options = options or ReaderOptions()
        self.source = source
        self._header: Dict[str, str] = {}
        self._records: Dict[AntennaKey, AntennaRecord] = {}
        self._satellites: Dict[str, List[SatelliteEntry]] = {}
        self._warnings: List[str] = []
        self._section: Optional[_SectionBuilder] = None
        self._line_number = 0
        self._in_header = True

    def parse(self, lines: Iterable[str]) -> AntexModel:
        it = self._numbered(lines)
        for line in it:
            self._classify(line, it)
        if self._section is not None:
            self._warn("missing END OF ANTENNA at end of input")
            self._commit()

        model = AntexModel(
            header=AntexHeader(**self._header),
            records=MappingProxyType(dict(self._records)),
            satellites=MappingProxyType({prn: tuple(entries) for prn, entries in self._satellites.items()}),
            warnings=tuple(self._warnings),
            source=self.source,
        )
        logger.info(f"Parsed {len(model.records)} antennas "
                    f"({len(model.satellites)} PRNs) from {self.source}")
        if model.warnings:
            logger.info(f"  {len(model.warnings)} data-quality warnings")
        return model

    def _numbered(self, lines: Iterable[str]) -> Iterator[str]:
        for line in lines:
            self._line_number += 1
            yield line.rstrip('\r\n')

    def _warn(self, message: str):
        if self.options.strict:
            raise AntexFormatError(message, self._line_number)
        message = f"{self.source}:{self._line_number}: {message}"
        self._warnings.append(message)
        logger.warning(message)

    def _classify(self, line: str, it: Iterator[str]):
        label = line[60:]
        if 'COMMENT' in label:
            return

        if START_OF_ANTENNA in line:
            if self._section is not None:
                self._warn("START OF ANTENNA inside an open section")
                self._commit()
            self._section = _SectionBuilder(start_line=self._line_number)
            return

        section = self._section
        if section is None:
            if END_OF_HEADER in line:
                self._in_header = False
            elif self._in_header:
                self._file_header(line)
            return

        if END_OF_ANTENNA in line:
            self._commit()
        elif TYPE_SERIAL_NO in line:
            header = parse_type_serial(line)
            if header is None:
                self._warn(f"unrecognized TYPE / SERIAL NO line: {line.strip()}")
            else:
                section.apply_header(header)
        elif VALID_FROM in line:
            section.valid_from = _parse_date(line)
        elif VALID_UNTIL in line:
            section.valid_until = _parse_date(line)
        elif SINEX_CODE in line:
            section.sinex_code = line[:60].strip()
        elif ZEN1_ZEN2_DZEN in line:
            section.zen1, section.zen2, section.dzen = (float(v) for v in line.split()[:3])
        elif DAZI in line:
            section.dazi = float(line.split()[0])
        elif START_OF_FREQ_RMS in line:
            section.state = SectionState.FREQUENCY_RMS
        elif END_OF_FREQ_RMS in line:
            section.state = SectionState.HEADER
        elif START_OF_FREQUENCY in line:
            frequency = normalize_frequency(_SHORT_FREQUENCY.sub(r'\g<1>0\g<2>', line).split()[0])
            section.state = SectionState.FREQUENCY
            section.current = _FrequencyBuilder(frequency)
        elif END_OF_FREQUENCY in line:
            if section.current is not None:
                if section.current.noazi is None:
                    self._warn(f"frequency {section.current.frequency} of {section.label} has no NOAZI line")
                else:
                    section.frequencies[section.current.frequency] = section.current
            section.current = None
            section.state = SectionState.HEADER
        elif NORTH_EAST_UP in line:
            if section.state is SectionState.FREQUENCY and section.current is not None:
                north, east, up = (float(v) for v in line.split()[:3])
                section.current.offset = (north, east, up)
        elif line.lstrip().startswith(NOAZI):
            if section.state is SectionState.FREQUENCY and section.current is not None:
                self._read_pattern(section, line, it)

    def _file_header(self, line: str):
        if ANTEX_VERSION_SYST in line:
            fields = line[:60].split()
            self._header['version'] = fields[0] if fields else ""
            self._header['system'] = fields[1] if len(fields) > 1 else ""
        elif PCV_TYPE_REFANT in line:
            self._header['pcv_type'] = line[0:1].strip()
            self._header['reference_antenna'] = line[20:40].strip()
            self._header['reference_serial'] = line[40:60].strip()

    def _read_pattern(self, section: _SectionBuilder, line: str, it: Iterator[str]):
        """Store the NOAZI row and, if dazi is nonzero, the azimuth rows after it"""
        freq = section.current
        nzen = section.n_zenith
        if nzen is None:
            self._warn(f"PCV data for {section.label} {section.variant} before ZEN1 / ZEN2 / DZEN")

        values = [float(v) for v in _NUMBER.findall(line)]
        if nzen is not None and len(values) != nzen:
            self._warn(f"invalid PCV data line for {section.label} {section.variant} "
                       f"freq {freq.frequency} at NOAZI: expected {nzen} values, parsed {len(values)}")
        freq.noazi = values

        dazi = section.dazi or 0.0
        if dazi == 0:
            return
        if 360.0 % dazi != 0:
            self._warn(f"DAZI {dazi} of {section.label} {section.variant} does not divide 360")

        for _ in range(int(360.0 // dazi) + 1):
            row_line = next(it, None)
            if row_line is None:
                self._warn(f"input ended inside the PCV table of {section.label} {section.variant}")
                return
            row = [float(v) for v in _NUMBER.findall(row_line)]
            if not row:
                self._warn(f"missing azimuth row for {section.label} {section.variant} "
                           f"freq {freq.frequency}: {row_line.strip()}")
                continue
            azimuth, row = row[0], row[1:]
            if nzen is not None and len(row) != nzen:
                self._warn(f"invalid PCV data line for {section.label} {section.variant} "
                           f"freq {freq.frequency} at azimuth {azimuth}: "
                           f"expected {nzen} values, parsed {len(row)}")
            freq.azimuth[azimuth] = row

    def _commit(self):
        section, self._section = self._section, None
        if section.current is not None:
            self._warn(f"missing END OF FREQUENCY for {section.current.frequency}")
            if section.current.noazi is not None:
                section.frequencies[section.current.frequency] = section.current

        if section.label is None:
            self._warn(f"antenna section starting at line {section.start_line} has no TYPE / SERIAL NO")
            return
        if not section.frequencies:
            logger.debug(f"Skipping {section.label} {section.variant}: no frequency data")
            return
        if section.n_zenith is None:
            self._warn(f"skipping {section.label} {section.variant}: no ZEN1 / ZEN2 / DZEN")
            return

        valid_from = valid_until = None
        if section.is_satellite:
            if section.valid_from is None:
                self._warn(f"skipping satellite {section.label} {section.variant}: no VALID FROM")
                return
            valid_from = section.valid_from
            valid_until = section.valid_until or self.options.default_valid_until

        key = AntennaKey(section.label, section.variant)
        record = AntennaRecord(
            key=key,
            zen1=section.zen1,
            zen2=section.zen2,
            dzen=section.dzen,
            dazi=section.dazi or 0.0,
            frequencies=MappingProxyType({f: b.build() for f, b in section.frequencies.items()}),
            valid_from=valid_from,
            valid_until=valid_until,
            antenna_type=section.antenna_type,
            serial=section.serial,
            sinex_code=section.sinex_code,
            is_satellite=section.is_satellite,
        )
        if key in self._records:
            self._warn(f"duplicate antenna {key}: replacing the earlier definition")
        self._records[key] = record

        if section.is_satellite:
            self._satellites.setdefault(key.label, []).append(
                SatelliteEntry(key.label, key.variant, valid_from, valid_until))
        logger.trace(f"Committed {key} with {len(record.frequencies)} frequencies")


class AntexReader:
    """ANTEX file reader"""

    def __init__(self, file_path: Union[str, Path], options: Optional[ReaderOptions] = None):
        """
        Initialize ANTEX reader

        Parameters:
        -----------
        file_path : str or Path
            Path to the ANTEX file
        options : ReaderOptions, optional
            Reader configuration
        """
        self.file_path = Path(file_path)
        self.options = options or ReaderOptions()

        if not self.file_path.is_file():
            raise FileNotFoundError(f"ANTEX file not found: {file_path}")

    def read(self) -> AntexModel:
        """Parse the whole file into an immutable model"""
        logger.debug(f"Reading ANTEX file {self.file_path}")
        parser = AntexParser(self.options, source=self.file_path.name)
        with self.file_path.open('r', encoding=self.options.encoding, errors='replace') as fh:
            return parser.parse(fh)


def read_antex(file_path: Union[str, Path], options: Optional[ReaderOptions] = None) -> AntexModel:
    """Read an ANTEX file into an :class:`AntexModel`."""
    return AntexReader(file_path, options).read()


def parse_antex_lines(lines: Iterable[str], options: Optional[ReaderOptions] = None,
                      source: str = "<lines>") -> AntexModel:
    """Parse ANTEX content given as an iterable of lines (or one string)."""
    if isinstance(lines, str):
        lines = lines.splitlines()
    return AntexParser(options, source).parse(lines)


__all__ = [
    'SectionState', 'ReaderOptions', 'SatelliteHeader', 'GroundHeader',
    'SatelliteHeaderParser', 'GroundStationParser', 'HEADER_PARSERS',
    'parse_type_serial', 'AntexParser', 'AntexReader', 'read_antex',
    'parse_antex_lines',
]
