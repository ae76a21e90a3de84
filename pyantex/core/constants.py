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

"""ANTEX Constants and Record Labels"""

import re

# Section markers (columns 61-80 of an ANTEX line)
START_OF_ANTENNA = "START OF ANTENNA"
END_OF_ANTENNA = "END OF ANTENNA"
TYPE_SERIAL_NO = "TYPE / SERIAL NO"
VALID_FROM = "VALID FROM"
VALID_UNTIL = "VALID UNTIL"
SINEX_CODE = "SINEX CODE"
DAZI = "DAZI"
ZEN1_ZEN2_DZEN = "ZEN1 / ZEN2 / DZEN"
START_OF_FREQUENCY = "START OF FREQUENCY"
END_OF_FREQUENCY = "END OF FREQUENCY"
NORTH_EAST_UP = "NORTH / EAST / UP"
START_OF_FREQ_RMS = "START OF FREQ RMS"
END_OF_FREQ_RMS = "END OF FREQ RMS"
NOAZI = "NOAZI"

# File header labels
ANTEX_VERSION_SYST = "ANTEX VERSION / SYST"
PCV_TYPE_REFANT = "PCV TYPE / REFANT"
END_OF_HEADER = "END OF HEADER"

# Default end of a satellite validity window when VALID UNTIL is absent
FAR_FUTURE_YEAR = 2050
FAR_FUTURE_DOY = 1

# Constellation letters
SYS_CHAR_GPS = 'G'
SYS_CHAR_GLO = 'R'
SYS_CHAR_GAL = 'E'
SYS_CHAR_BDS = 'C'
SYS_CHAR_QZS = 'J'
SYS_CHAR_SBS = 'S'
SYS_CHAR_IRN = 'I'

SATELLITE_SYSTEM_CHARS = (
    SYS_CHAR_GPS, SYS_CHAR_GLO, SYS_CHAR_GAL, SYS_CHAR_BDS,
    SYS_CHAR_QZS, SYS_CHAR_SBS, SYS_CHAR_IRN,
)

# Constellation names accepted by satellite listings
CONSTELLATION_NAMES = {
    'gps': SYS_CHAR_GPS,
    'glonass': SYS_CHAR_GLO,
    'galileo': SYS_CHAR_GAL,
    'compass': SYS_CHAR_BDS,
    'beidou': SYS_CHAR_BDS,
    'qzss': SYS_CHAR_QZS,
    'sbas': SYS_CHAR_SBS,
    'irnss': SYS_CHAR_IRN,
}

# PRN of a satellite entry, e.g. G05, R14
PRN_PATTERN = re.compile(r'^[GRECJSI]\d\d$')

# Frequency aliases for GPS L1/L2
FREQUENCY_ALIASES = {
    'L1': 'G01',
    'L2': 'G02',
}

# Ionosphere-free L1/L2 combination used for ANTPHC tables
IONO_FREE_L1 = 2.5457
IONO_FREE_L2 = -1.5457

# Carrier frequencies (Hz)
FREQ_L1 = 1.57542E9
FREQ_L2 = 1.22760E9
FREQ_L5 = 1.17645E9
FREQ_G1 = 1.60200E9   # GLONASS base frequencies; G1/G2 ratio is the same on every channel
FREQ_G2 = 1.24600E9
FREQ_E5b = 1.20714E9
FREQ_E5 = 1.191795E9
FREQ_E6 = 1.27875E9
FREQ_B1I = 1.561098E9
FREQ_B3 = 1.26852E9
FREQ_IS = 2.492028E9

# ANTEX frequency code to carrier frequency
CARRIER_FREQUENCIES = {
    'G01': FREQ_L1, 'G02': FREQ_L2, 'G05': FREQ_L5,
    'R01': FREQ_G1, 'R02': FREQ_G2,
    'E01': FREQ_L1, 'E05': FREQ_L5, 'E06': FREQ_E6, 'E07': FREQ_E5b, 'E08': FREQ_E5,
    'C01': FREQ_L1, 'C02': FREQ_B1I, 'C05': FREQ_L5, 'C06': FREQ_B3, 'C07': FREQ_E5b, 'C08': FREQ_E5,
    'J01': FREQ_L1, 'J02': FREQ_L2, 'J05': FREQ_L5, 'J06': FREQ_E6,
    'S01': FREQ_L1, 'S05': FREQ_L5,
    'I05': FREQ_L5, 'I09': FREQ_IS,
}
