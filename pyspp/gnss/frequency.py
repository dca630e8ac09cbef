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

"""GNSS carrier frequency resolution.

The carrier of an observation is derived from the band digit of its RINEX 3
code (``"1C"`` -> band 1). GLONASS FDMA carriers additionally need the
satellite's frequency channel number from the navigation data.

Notes:
    - All frequencies are in Hz, wavelengths in meters
    - GLONASS frequency channel numbers must lie in [-7, +6]
    - An unresolvable carrier is reported as 0.0
"""

from ..core.constants import (
    CLIGHT, DFREQ_G1, DFREQ_G2, FREQ_B1I, FREQ_B2, FREQ_B2I, FREQ_B3,
    FREQ_E5, FREQ_E5b, FREQ_E6, FREQ_G1, FREQ_G2, FREQ_G3, FREQ_IS, FREQ_L1,
    FREQ_L2, FREQ_L5, FREQ_L6, SYS_BDS, SYS_GAL, SYS_GLO, SYS_GPS, SYS_IRN,
    SYS_QZS, SYS_SBS, sat2sys
)

FREQ_G1a = 1.600995E9  # GLONASS G1a CDMA frequency (Hz)
FREQ_G2a = 1.248060E9  # GLONASS G2a CDMA frequency (Hz)

# band digit -> carrier for the CDMA systems
_BAND_FREQS = {
    SYS_GPS: {'1': FREQ_L1, '2': FREQ_L2, '5': FREQ_L5},
    SYS_QZS: {'1': FREQ_L1, '2': FREQ_L2, '5': FREQ_L5, '6': FREQ_L6},
    SYS_SBS: {'1': FREQ_L1, '5': FREQ_L5},
    SYS_GAL: {'1': FREQ_L1, '7': FREQ_E5b, '5': FREQ_L5, '6': FREQ_E6,
              '8': FREQ_E5},
    SYS_BDS: {'1': FREQ_L1, '2': FREQ_B1I, '7': FREQ_B2I, '5': FREQ_L5,
              '6': FREQ_B3, '8': FREQ_B2},
    SYS_IRN: {'5': FREQ_L5, '9': FREQ_IS},
}


def code2freq(sys, code, fcn=0):
    """Carrier frequency of a tracked code.

    Parameters
    ----------
    sys : int
        Satellite system (SYS_GPS, SYS_GLO, ...)
    code : str
        RINEX 3 signal attribute such as ``"1C"`` or ``"7Q"``
    fcn : int, optional
        GLONASS frequency channel number

    Returns
    -------
    float
        Carrier frequency in Hz, 0.0 when unknown
    """
    if not code:
        return 0.0
    band = code[0]

    if sys == SYS_GLO:
        if band == '1':
            return FREQ_G1 + DFREQ_G1 * fcn if -7 <= fcn <= 6 else 0.0
        if band == '2':
            return FREQ_G2 + DFREQ_G2 * fcn if -7 <= fcn <= 6 else 0.0
        if band == '3':
            return FREQ_G3
        if band == '4':
            return FREQ_G1a
        if band == '6':
            return FREQ_G2a
        return 0.0

    return _BAND_FREQS.get(sys, {}).get(band, 0.0)


def sat2freq(sat, code, nav=None):
    """Carrier frequency of the code tracked on a satellite.

    Parameters
    ----------
    sat : int
        Satellite number
    code : str
        RINEX 3 signal attribute
    nav : NavigationData, optional
        Source of GLONASS frequency channel numbers; GLONASS FDMA carriers
        resolve to 0.0 without it

    Returns
    -------
    float
        Carrier frequency in Hz, 0.0 when unresolved
    """
    sys = sat2sys(sat)
    fcn = 0
    if sys == SYS_GLO and code and code[0] in '12':
        if nav is None or sat not in nav.glo_fcn:
            return 0.0
        fcn = nav.glo_fcn[sat]
    return code2freq(sys, code, fcn)


def sat2wavelength(sat, code, nav=None):
    """Carrier wavelength (m), 0.0 when the carrier is unresolved"""
    freq = sat2freq(sat, code, nav)
    return CLIGHT / freq if freq > 0 else 0.0
