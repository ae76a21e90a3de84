#!/usr/bin/env python3
"""Test suite for the ANTEX reader"""

import tempfile
import unittest
from pathlib import Path

import numpy as np

from pyantex.core.data_structures import AntennaKey
from pyantex.core.exceptions import AntexFormatError
from pyantex.core.time import CalendarDate
from pyantex.io.antex import (AntexReader, GroundHeader, ReaderOptions,
                              SatelliteHeader, parse_antex_lines,
                              parse_type_serial, read_antex)

DATA_DIR = Path(__file__).resolve().parents[2] / "test_data"
SAMPLE = DATA_DIR / "igs_sample.atx"


def _line(content, label):
    return f"{content:<60}{label:<20}"


def _values(values):
    return ''.join(f"{v:8.2f}" for v in values)


def _ground(antenna='TRM59800.00', dome='NONE', zen=(0.0, 10.0, 5.0), dazi=0.0,
            frequencies=(('G01', (0.0, 0.0, 90.0), [0.0, -1.0, -2.0], ()),), end=True):
    lines = [
        _line('', 'START OF ANTENNA'),
        _line(f"{antenna:<16}{dome:<4}", 'TYPE / SERIAL NO'),
        _line(f"{dazi:8.1f}", 'DAZI'),
        _line(f"{zen[0]:8.1f}{zen[1]:6.1f}{zen[2]:6.1f}", 'ZEN1 / ZEN2 / DZEN'),
    ]
    for freq, offset, noazi, rows in frequencies:
        lines.append(_line(f"   {freq}", 'START OF FREQUENCY'))
        lines.append(_line(f"{offset[0]:10.2f}{offset[1]:10.2f}{offset[2]:10.2f}", 'NORTH / EAST / UP'))
        lines.append('   NOAZI' + _values(noazi))
        for azimuth, row in rows:
            lines.append(f"{azimuth:8.1f}" + _values(row))
        if end:
            lines.append(_line(f"   {freq}", 'END OF FREQUENCY'))
    if end:
        lines.append(_line('', 'END OF ANTENNA'))
    return lines


def _satellite(prn='G01', svn='G032', block='BLOCK IIA', cospar='1992-079A',
               valid_from=(1992, 11, 22), valid_until=None, up=1000.0):
    lines = [
        _line('', 'START OF ANTENNA'),
        _line(f"{block:<20}{prn:<20}{svn:<10}{cospar:<10}", 'TYPE / SERIAL NO'),
        _line('     0.0', 'DAZI'),
        _line('     0.0  10.0   5.0', 'ZEN1 / ZEN2 / DZEN'),
    ]
    if valid_from is not None:
        lines.append(_line('%6d%6d%6d     0     0    0.0000000' % valid_from, 'VALID FROM'))
    if valid_until is not None:
        lines.append(_line('%6d%6d%6d    23    59   59.9999999' % valid_until, 'VALID UNTIL'))
    lines += [
        _line('   G01', 'START OF FREQUENCY'),
        _line(f"{0.0:10.2f}{0.0:10.2f}{up:10.2f}", 'NORTH / EAST / UP'),
        '   NOAZI' + _values([0.0, 0.0, 0.0]),
        _line('   G01', 'END OF FREQUENCY'),
        _line('', 'END OF ANTENNA'),
    ]
    return lines


HEADER = [
    _line('     1.4            M', 'ANTEX VERSION / SYST'),
    _line('A', 'PCV TYPE / REFANT'),
    _line('', 'END OF HEADER'),
]


class TestSampleFile(unittest.TestCase):
    """Test reading the bundled IGS sample file"""

    @classmethod
    def setUpClass(cls):
        cls.model = read_antex(SAMPLE)

    def test_counts(self):
        self.assertEqual(len(self.model), 7)
        self.assertEqual(list(self.model.satellites.keys()), ['G19', 'G05', 'R04', 'E11'])
        self.assertEqual(self.model.warnings, ())
        self.assertEqual(self.model.source, 'igs_sample.atx')

    def test_header(self):
        header = self.model.header
        self.assertEqual(header.version, '1.4')
        self.assertEqual(header.system, 'M')
        self.assertEqual(header.pcv_type, 'A')
        self.assertTrue(header.is_absolute)

    def test_satellite_record(self):
        record = self.model.records[AntennaKey('G19', 'G019')]
        self.assertTrue(record.is_satellite)
        self.assertEqual(record.antenna_type, 'BLOCK II')
        self.assertEqual(record.serial, '1989-085A')
        self.assertEqual(record.sinex_code, 'IGS08_1602')
        self.assertEqual(record.valid_from, CalendarDate(1989, 10, 21))
        self.assertEqual(record.valid_until, CalendarDate(2001, 9, 11))
        self.assertEqual(record.n_zenith, 15)
        self.assertEqual(record.frequencies['G01'].offset, (279.0, 0.0, 2319.5))

    def test_missing_valid_until(self):
        record = self.model.records[AntennaKey('G19', 'G059')]
        self.assertEqual(record.valid_from, CalendarDate(2004, 3, 20))
        self.assertEqual(record.valid_until, CalendarDate(2050, 1, 1))

    def test_identity_index(self):
        entries = self.model.satellites['G19']
        self.assertEqual([e.svn for e in entries], ['G019', 'G059'])
        self.assertIsInstance(entries, tuple)

    def test_short_frequency_codes(self):
        glonass = self.model.records[AntennaKey('R04', 'R712')]
        self.assertEqual(list(glonass.frequencies.keys()), ['R01', 'R02'])
        ground = self.model.records[AntennaKey('ASH700228A+EX', 'NONE')]
        self.assertEqual(list(ground.frequencies.keys()), ['G01', 'G02'])

    def test_other_gnss_header(self):
        record = self.model.records[AntennaKey('E11', 'E101')]
        self.assertEqual(record.antenna_type, 'GALILEO-1')
        self.assertEqual(list(record.frequencies.keys()), ['E01', 'E05'])

    def test_rms_blocks_not_recorded(self):
        record = self.model.records[AntennaKey('ASH700228A+EX', 'NONE')]
        g01 = record.frequencies['G01']
        self.assertEqual(g01.offset, (1.10, -0.50, 78.10))
        self.assertEqual(len(g01.pcv.noazi), 19)
        self.assertAlmostEqual(g01.pcv.noazi[1], -0.36)
        self.assertAlmostEqual(g01.pcv.noazi[-1], 3.80)
        self.assertEqual(record.frequencies['G02'].offset, (0.20, 1.30, 71.20))

    def test_ground_record(self):
        record = self.model.records[AntennaKey('ASH700228A+EX', 'NONE')]
        self.assertFalse(record.is_satellite)
        self.assertIsNone(record.valid_from)
        self.assertIsNone(record.valid_until)
        self.assertEqual(record.dazi, 0.0)
        self.assertFalse(record.frequencies['G01'].pcv.has_azimuth)

    def test_azimuth_rows(self):
        record = self.model.records[AntennaKey('AOAD/M_T', 'NONE')]
        self.assertEqual(record.dazi, 120.0)
        self.assertEqual(record.n_azimuth, 4)
        pcv = record.frequencies['G01'].pcv
        self.assertEqual(sorted(pcv.azimuth.keys()), [0.0, 120.0, 240.0, 360.0])
        np.testing.assert_allclose(pcv.azimuth[120.0][:3], [0.0, -1.10, -2.10])
        np.testing.assert_allclose(pcv.azimuth[0.0], pcv.azimuth[360.0])
        for row in pcv.azimuth.values():
            self.assertEqual(len(row), record.n_zenith)

    def test_arrays_read_only(self):
        pcv = self.model.records[AntennaKey('AOAD/M_T', 'NONE')].frequencies['G01'].pcv
        with self.assertRaises(ValueError):
            pcv.noazi[0] = 1.0
        with self.assertRaises(TypeError):
            self.model.records[AntennaKey('X', 'Y')] = None

    def test_reader_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            AntexReader(DATA_DIR / "missing.atx")


class TestHeaderParsers(unittest.TestCase):
    """Test TYPE / SERIAL NO classification"""

    def test_gps(self):
        header = parse_type_serial(_line(f"{'BLOCK IIR-B':<20}{'G19':<20}{'G059':<10}{'2004-009A':<10}",
                                         'TYPE / SERIAL NO'))
        self.assertEqual(header, SatelliteHeader('BLOCK IIR-B', 'G19', 'G059', '2004-009A'))

    def test_glonass(self):
        header = parse_type_serial(_line(f"{'GLONASS-M':<20}{'R04':<20}{'R712':<10}{'2007-052A':<10}",
                                         'TYPE / SERIAL NO'))
        self.assertEqual(header.prn, 'R04')
        self.assertEqual(header.svn, 'R712')

    def test_beidou(self):
        header = parse_type_serial(_line(f"{'BEIDOU-2M':<20}{'C11':<20}{'C012':<10}{'2012-018A':<10}",
                                         'TYPE / SERIAL NO'))
        self.assertIsInstance(header, SatelliteHeader)
        self.assertEqual(header.block, 'BEIDOU-2M')

    def test_ground(self):
        header = parse_type_serial(_line(f"{'TRM59800.00':<16}{'SCIS':<4}{'12345':>20}", 'TYPE / SERIAL NO'))
        self.assertEqual(header, GroundHeader('TRM59800.00', 'SCIS', '12345'))

    def test_unrecognized(self):
        self.assertIsNone(parse_type_serial(_line('LONELYTYPE', 'TYPE / SERIAL NO')))


class TestMalformedInput(unittest.TestCase):
    """Test data-quality handling"""

    def test_count_mismatch_warns(self):
        lines = HEADER + _ground(frequencies=(('G01', (0.0, 0.0, 90.0), [0.0, -1.0], ()),))
        model = parse_antex_lines(lines)
        self.assertEqual(len(model.warnings), 1)
        self.assertIn('expected 3 values, parsed 2', model.warnings[0])
        record = model.records[AntennaKey('TRM59800.00', 'NONE')]
        self.assertEqual(len(record.frequencies['G01'].pcv.noazi), 2)

    def test_strict_raises(self):
        lines = HEADER + _ground(frequencies=(('G01', (0.0, 0.0, 90.0), [0.0, -1.0], ()),))
        with self.assertRaises(AntexFormatError) as ctx:
            parse_antex_lines(lines, ReaderOptions(strict=True))
        self.assertEqual(ctx.exception.line_number, 10)

    def test_satellite_without_valid_from(self):
        model = parse_antex_lines(HEADER + _satellite(valid_from=None))
        self.assertEqual(len(model), 0)
        self.assertNotIn('G01', model.satellites)
        self.assertTrue(any('no VALID FROM' in w for w in model.warnings))

    def test_custom_default_valid_until(self):
        options = ReaderOptions(default_valid_until=CalendarDate(2030, 1, 1))
        model = parse_antex_lines(HEADER + _satellite(), options)
        self.assertEqual(model.satellites['G01'][0].valid_until, CalendarDate(2030, 1, 1))

    def test_duplicate_key(self):
        lines = (HEADER
                 + _satellite(valid_from=(1992, 11, 22), valid_until=(2008, 3, 17), up=1000.0)
                 + _satellite(valid_from=(2009, 1, 1), up=1200.0))
        model = parse_antex_lines(lines)
        self.assertEqual(len(model), 1)
        self.assertEqual(model.records[AntennaKey('G01', 'G032')].frequencies['G01'].offset[2], 1200.0)
        self.assertEqual(len(model.satellites['G01']), 2)
        self.assertTrue(any('duplicate' in w for w in model.warnings))

    def test_missing_end_of_antenna(self):
        first = _ground(antenna='FIRST')[:-1]
        lines = HEADER + first + _ground(antenna='SECOND')
        model = parse_antex_lines(lines)
        self.assertIn(AntennaKey('FIRST', 'NONE'), model)
        self.assertIn(AntennaKey('SECOND', 'NONE'), model)
        self.assertTrue(any('inside an open section' in w for w in model.warnings))

    def test_no_state_leak_between_sections(self):
        lines = (HEADER
                 + _ground(antenna='AZI', dazi=180.0,
                           frequencies=(('G01', (0.0, 0.0, 90.0), [0.0, -1.0, -2.0],
                                         ((0.0, [0.0, -1.0, -2.0]), (180.0, [0.0, -1.5, -2.5]),
                                          (360.0, [0.0, -1.0, -2.0]))),))
                 + _ground(antenna='ISO'))
        model = parse_antex_lines(lines)
        self.assertEqual(model.warnings, ())
        iso = model.records[AntennaKey('ISO', 'NONE')]
        self.assertEqual(iso.dazi, 0.0)
        self.assertFalse(iso.frequencies['G01'].pcv.has_azimuth)
        azi = model.records[AntennaKey('AZI', 'NONE')]
        self.assertEqual(sorted(azi.frequencies['G01'].pcv.azimuth.keys()), [0.0, 180.0, 360.0])

    def test_truncated_azimuth_table(self):
        lines = HEADER + _ground(dazi=180.0, end=False,
                                 frequencies=(('G01', (0.0, 0.0, 90.0), [0.0, -1.0, -2.0],
                                               ((0.0, [0.0, -1.0, -2.0]),)),))
        model = parse_antex_lines(lines)
        self.assertTrue(any('input ended' in w for w in model.warnings))
        record = model.records[AntennaKey('TRM59800.00', 'NONE')]
        self.assertEqual(list(record.frequencies['G01'].pcv.azimuth.keys()), [0.0])

    def test_dazi_not_dividing_360(self):
        rows = tuple((az, [0.0, 0.0, 0.0]) for az in (0.0, 70.0, 140.0, 210.0, 280.0, 350.0))
        lines = HEADER + _ground(dazi=70.0, frequencies=(('G01', (0.0, 0.0, 90.0), [0.0, 0.0, 0.0], rows),))
        model = parse_antex_lines(lines)
        self.assertTrue(any('does not divide 360' in w for w in model.warnings))
        record = model.records[AntennaKey('TRM59800.00', 'NONE')]
        self.assertEqual(len(record.frequencies['G01'].pcv.azimuth), 6)

    def test_comment_lines_ignored(self):
        lines = HEADER + _ground()
        lines.insert(6, _line('NOAZI 9.99 VALID FROM END OF ANTENNA', 'COMMENT'))
        model = parse_antex_lines(lines)
        self.assertEqual(model.warnings, ())
        self.assertEqual(len(model), 1)

    def test_header_ends_at_end_of_header(self):
        lines = HEADER + [_line('R', 'PCV TYPE / REFANT')] + _ground()
        model = parse_antex_lines(lines)
        self.assertEqual(model.header.pcv_type, 'A')
        self.assertEqual(len(model), 1)

    def test_string_input(self):
        model = parse_antex_lines('\n'.join(HEADER + _ground()), source='inline')
        self.assertEqual(model.source, 'inline')
        self.assertEqual(len(model), 1)

    def test_reader_from_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / 'small.atx'
            path.write_text('\n'.join(HEADER + _ground()) + '\n', encoding='ascii')
            model = AntexReader(path).read()
        self.assertEqual(model.source, 'small.atx')
        self.assertEqual(model.records[AntennaKey('TRM59800.00', 'NONE')].frequencies['G01'].offset,
                         (0.0, 0.0, 90.0))


if __name__ == '__main__':
    unittest.main()
