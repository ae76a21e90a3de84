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

"""Command line inspection of ANTEX files.

Examples:

    pyantex igs14.atx --antenna ASH700228A+EX --dome NONE --freq L1
    pyantex igs14.atx --prn G19 --date 2009-09-13 --freq G01
    pyantex igs14.atx --svn R712 --antphc
    pyantex igs14.atx --satellites 2009-09-13 --constellation glonass
"""

import argparse
import sys

from .antenna.antphc import antphc_block, antphc_combination
from .antenna.lookup import AntexLookup
from .core.data_structures import (GroundAntenna, SatelliteByPrn, SatelliteBySvn,
                                   normalize_frequency)
from .core.exceptions import AntennaNotFoundError, AntexError, AntexUsageError
from .core.time import CalendarDate
from .io.antex import ReaderOptions
from .logger import get_logger, setup_logger

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='pyantex',
                                     description='Query antenna phase center offsets and variations in an ANTEX file')
    parser.add_argument('file', type=str, help='ANTEX file')
    parser.add_argument('--antenna', type=str, help='Ground antenna type')
    parser.add_argument('--dome', type=str, help='Dome type of the ground antenna')
    parser.add_argument('--prn', type=str, help='Satellite PRN, e.g. G19 (requires --date)')
    parser.add_argument('--date', type=CalendarDate.from_string, help='Date as YYYY-MM-DD or YYYY:DOY')
    parser.add_argument('--svn', type=str, help='Satellite SVN, e.g. G034')
    parser.add_argument('--freq', type=str,
                        help='Frequency (L1, L2, G01, R02, ...); default is the first one of the antenna')
    parser.add_argument('--antphc', action='store_true', help='Print the ionosphere-free ANTPHC block')
    parser.add_argument('--satellites', type=CalendarDate.from_string, metavar='DATE',
                        help='List PRNs with antenna definitions valid on DATE')
    parser.add_argument('--constellation', type=str, help='Constellation filter for --satellites')
    parser.add_argument('--strict', action='store_true', help='Fail on malformed PCV data')
    parser.add_argument('--log-level', type=str, default='WARNING', help='Log level')
    return parser


def _selector(args, parser):
    if args.antenna or args.dome:
        return GroundAntenna(args.antenna, args.dome)
    if args.prn:
        if args.date is None:
            parser.error('--prn requires --date')
        return SatelliteByPrn(args.prn, args.date)
    if args.svn:
        return SatelliteBySvn(args.svn)
    return None


def print_antenna(lookup: AntexLookup, selector, frequency: str, out=None):
    out = out or sys.stdout
    record = lookup.get_record(selector)
    zen1, zen2, dzen = lookup.get_zenith_angles(selector)
    _, _, dazi = lookup.get_azimuthal_angles(selector)
    print(f"Antenna:     {record.key.label} {record.key.variant}", file=out)
    if record.is_satellite:
        print(f"Block:       {record.antenna_type} ({record.serial})", file=out)
        print(f"Valid:       {record.valid_from} .. {record.valid_until}", file=out)
    print(f"Frequencies: {' '.join(record.frequencies)}", file=out)
    print(f"Zenith:      {zen1:.1f} .. {zen2:.1f} step {dzen:.1f}", file=out)
    print(f"Azimuth:     step {dazi:.1f}", file=out)

    offset = lookup.get_offset(selector, frequency)
    frame = 'x/y/z' if record.is_satellite else 'n/e/u'
    print(f"Offset {frame} [mm]: {offset[0]:.2f} {offset[1]:.2f} {offset[2]:.2f}", file=out)
    for azimuth, pattern in sorted(lookup.get_pcv(selector, frequency).items()):
        print(f"{azimuth:6.1f} " + ' '.join(f"{v:7.2f}" for v in pattern), file=out)


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logger(level=args.log_level)

    try:
        lookup = AntexLookup.from_file(args.file, ReaderOptions(strict=args.strict))
        selector = _selector(args, parser)

        if args.satellites is not None:
            prns = lookup.list_satellites_on_date(args.satellites, args.constellation)
            for prn in prns:
                svn = lookup.resolve_vehicle(prn, args.satellites)
                print(f"{prn} {svn}")

        if selector is not None:
            if not lookup.exists(selector):
                logger.error(f"Antenna not found in {args.file}: {selector}")
                return 1
            if args.antphc:
                frequencies, coefficients = antphc_combination(lookup, selector)
                sys.stdout.write(antphc_block(lookup, selector, frequencies, coefficients))
            else:
                frequency = args.freq or lookup.frequencies(selector)[0]
                if not lookup.exists(selector, frequency):
                    raise AntexUsageError(f"frequency {normalize_frequency(frequency)} not available, "
                                          f"antenna has {' '.join(lookup.frequencies(selector))}")
                print_antenna(lookup, selector, frequency)
        elif args.satellites is None:
            print(f"{args.file}: {len(lookup)} antennas, "
                  f"{len(lookup.antenna_types())} ground antenna types, "
                  f"{len(lookup.resolver.broadcast_ids())} PRNs")
    except FileNotFoundError as exc:
        logger.error(str(exc))
        return 2
    except AntennaNotFoundError as exc:
        logger.error(str(exc))
        return 1
    except AntexError as exc:
        logger.error(str(exc))
        return 2
    return 0


if __name__ == '__main__':
    sys.exit(main())
