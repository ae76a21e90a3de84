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

"""ANTPHC phase center tables built from ANTEX patterns.

An ANTPHC block for one antenna is::

    ANTNO=DD   #ASH700228A+EX   NONE
      19   0.00   5.00   1   0.00 360.00
    0.1234D-02-.5678D-03 ...

The values are a linear combination of two frequencies (ionosphere-free
L1/L2 by default) in meters, zenith angle outer and azimuth inner, written
eight per line in Fortran ``D10.4`` layout. The 360 degree azimuth row
duplicates azimuth 0 and is left out.
"""

import math
from typing import List, Sequence, Tuple

import numpy as np

from ..core.constants import CARRIER_FREQUENCIES, IONO_FREE_L1, IONO_FREE_L2
from ..core.data_structures import normalize_frequency
from ..core.exceptions import AntexUsageError
from ..logger import get_logger
from .lookup import AntexLookup, Selector

logger = get_logger(__name__)


def antphc_header(lookup: AntexLookup, selector: Selector) -> str:
    """``ANTNO=DD   #<antenna><dome>`` identification line"""
    key = lookup.get_record(selector).key
    return "ANTNO=DD   #%-16s%4s" % (key.label, key.variant)


def antphc_pattern(lookup: AntexLookup,
                   selector: Selector,
                   frequencies: Sequence[str] = ("L1", "L2"),
                   coefficients: Sequence[float] = (IONO_FREE_L1, IONO_FREE_L2),
                   scale: float = 1e-3) -> np.ndarray:
    """
    Linear combination of PCV patterns

    Parameters:
    -----------
    lookup : AntexLookup
        Query engine
    selector : Selector
        Antenna to tabulate
    frequencies : Sequence[str]
        Frequencies to combine
    coefficients : Sequence[float]
        One coefficient per frequency
    scale : float
        Factor applied to the result (mm to m by default)

    Returns:
    --------
    np.ndarray
        Array of shape (n_zenith, n_azimuth) without the 360 degree row
    """
    if len(frequencies) != len(coefficients):
        raise ValueError("one coefficient per frequency is required")

    record = lookup.get_record(selector)
    patterns = [lookup.get_pcv(selector, f) for f in frequencies]
    azimuths = [az for az in sorted(patterns[0].keys()) if az != 360.0]

    result = np.zeros((record.n_zenith, len(azimuths)))
    for pcv, coef in zip(patterns, coefficients):
        for j, az in enumerate(azimuths):
            if az not in pcv:
                raise ValueError(f"azimuth {az} missing from one of the frequencies of {record.key}")
            row = pcv[az]
            if len(row) != record.n_zenith:
                raise ValueError(f"PCV row at azimuth {az} of {record.key} has {len(row)} values, "
                                 f"expected {record.n_zenith}")
            result[:, j] += coef * row
    return result * scale


def iono_free_coefficients(first: str, second: str) -> Tuple[float, float]:
    """Ionosphere-free coefficients f1^2/(f1^2-f2^2), -f2^2/(f1^2-f2^2).

    GPS L1/L2 returns the rounded IONO_FREE_L1/IONO_FREE_L2 pair.
    """
    first, second = normalize_frequency(first), normalize_frequency(second)
    if (first, second) == ('G01', 'G02'):
        return IONO_FREE_L1, IONO_FREE_L2
    for code in (first, second):
        if code not in CARRIER_FREQUENCIES:
            raise AntexUsageError(f"no carrier frequency known for {code}")
    f1 = CARRIER_FREQUENCIES[first] ** 2
    f2 = CARRIER_FREQUENCIES[second] ** 2
    if f1 == f2:
        raise AntexUsageError(f"{first} and {second} share one carrier frequency")
    return f1 / (f1 - f2), -f2 / (f1 - f2)


def antphc_combination(lookup: AntexLookup, selector: Selector) -> Tuple[Tuple[str, str], Tuple[float, float]]:
    """Frequencies and coefficients of the ionosphere-free ANTPHC pattern.

    GPS L1/L2 when the antenna has both, otherwise the first two
    frequencies of the constellation of its first frequency.
    """
    record = lookup.get_record(selector)
    available = list(record.frequencies.keys())
    if 'G01' in available and 'G02' in available:
        return ('G01', 'G02'), (IONO_FREE_L1, IONO_FREE_L2)
    system = available[0][0]
    same = [f for f in available if f[0] == system]
    if len(same) < 2:
        raise AntexUsageError(f"ANTPHC needs two frequencies of one constellation; "
                              f"{record.key} has {' '.join(available)}")
    frequencies = (same[0], same[1])
    return frequencies, iono_free_coefficients(*frequencies)


def format_fortran_d(value: float, width: int = 10, digits: int = 4) -> str:
    """Format one value with the Fortran ``Dw.d`` edit descriptor"""
    if not np.isfinite(value):
        return '*' * width
    if value == 0:
        mantissa, exponent = 0.0, 0
    else:
        exponent = int(math.floor(math.log10(abs(value)))) + 1
        mantissa = round(abs(value) / 10.0 ** exponent, digits)
        if mantissa >= 1.0:
            mantissa /= 10.0
            exponent += 1
    if abs(exponent) > 99:
        return '*' * width
    text = f"{mantissa:.{digits}f}D{exponent:+03d}"
    if value < 0:
        text = '-' + text
        if len(text) > width:
            text = '-' + text[2:]  # drop the leading zero
    if len(text) > width:
        return '*' * width
    return text.rjust(width)


def format_antphc(values, per_line: int = 8) -> List[str]:
    """Write values (flattened in C order) as ``8D10.4`` lines"""
    flat = np.asarray(values, dtype=np.float64).ravel()
    lines = []
    for start in range(0, len(flat), per_line):
        lines.append(''.join(format_fortran_d(v) for v in flat[start:start + per_line]))
    return lines


def antphc_block(lookup: AntexLookup,
                 selector: Selector,
                 frequencies: Sequence[str] = ("L1", "L2"),
                 coefficients: Sequence[float] = (IONO_FREE_L1, IONO_FREE_L2)) -> str:
    """Complete ANTPHC block for one antenna"""
    pattern = antphc_pattern(lookup, selector, frequencies, coefficients)
    lines = [antphc_header(lookup, selector), lookup.get_antenna_header_line(selector)]
    lines.extend(format_antphc(pattern))
    logger.debug(f"ANTPHC block for {lookup.get_record(selector).key}: {pattern.size} values")
    return '\n'.join(lines) + '\n'


__all__ = ['antphc_header', 'antphc_pattern', 'iono_free_coefficients', 'antphc_combination',
           'format_fortran_d', 'format_antphc', 'antphc_block']
