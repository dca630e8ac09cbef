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

"""GNSS constants, system identifiers and error-model parameters"""

import numpy as np

# Physical Constants
CLIGHT = 299792458.0  # speed of light (m/s)

# GPS / QZSS frequencies
FREQ_L1 = 1.57542E9   # L1 frequency (Hz)
FREQ_L2 = 1.22760E9   # L2 frequency (Hz)
FREQ_L5 = 1.17645E9   # L5 frequency (Hz)
FREQ_L6 = 1.27875E9   # L6/LEX frequency (Hz)

# GLONASS frequencies
FREQ_G1 = 1.60200E9   # G1 base frequency (Hz)
FREQ_G2 = 1.24600E9   # G2 base frequency (Hz)
FREQ_G3 = 1.202025E9  # G3 frequency (Hz)
DFREQ_G1 = 0.56250E6  # G1 channel spacing (Hz)
DFREQ_G2 = 0.43750E6  # G2 channel spacing (Hz)

# Galileo frequencies
FREQ_E1 = FREQ_L1
FREQ_E5a = FREQ_L5
FREQ_E5b = 1.20714E9  # E5b frequency (Hz)
FREQ_E5 = 1.191795E9  # E5 AltBOC frequency (Hz)
FREQ_E6 = FREQ_L6

# BeiDou frequencies
FREQ_B1I = 1.561098E9  # B1I frequency (Hz)
FREQ_B1C = FREQ_L1
FREQ_B2I = FREQ_E5b
FREQ_B2a = FREQ_L5
FREQ_B2 = FREQ_E5
FREQ_B3 = 1.26852E9    # B3 frequency (Hz)

# NavIC frequencies
FREQ_I5 = FREQ_L5
FREQ_IS = 2.492028E9   # S-band frequency (Hz)

# GNSS System IDs
SYS_NONE = 0x00
SYS_GPS = 0x01    # GPS
SYS_GLO = 0x02    # GLONASS
SYS_GAL = 0x04    # Galileo
SYS_BDS = 0x08    # BeiDou
SYS_QZS = 0x10    # QZSS
SYS_SBS = 0x20    # SBAS
SYS_IRN = 0x40    # NavIC/IRNSS
SYS_ALL = 0xFF    # All systems

# Earth Parameters (WGS84)
RE_WGS84 = 6378137.0           # earth semimajor axis (m)
FE_WGS84 = 1.0 / 298.257223563 # earth flattening
OMGE = 7.2921151467E-5         # earth angular velocity (rad/s)

# Unit conversions
R2D = 180.0 / np.pi            # radians to degrees
D2R = np.pi / 180.0            # degrees to radians

# Estimator dimensions
NX = 8              # position (3) + reference clock (1) + inter-system offsets (4)
NFREQ = 2           # code frequency slots used for positioning
MAXITR = 10         # max Gauss-Newton iterations
MIN_EL = 5.0 * D2R  # elevation floor of the variance model (rad)

# Error/Threshold Constants
ERR_ION = 5.0       # ionosphere error std with no model (m)
ERR_TROP = 3.0      # troposphere error std with no model (m)
ERR_SAAS = 0.3      # Saastamoinen model error std (m)
ERR_BRDCI = 0.5     # broadcast ionosphere model error factor
ERR_CBIAS = 0.3     # code bias error std (m)
REL_HUMI = 0.7      # relative humidity for Saastamoinen model
MAX_VAR_EPH = 300.0 ** 2  # max ephemeris variance (m^2)
VAR_ISB_CONSTRAINT = 0.01 # variance of inter-system offset pseudo-measurement (m^2)

# System error factors
EFACT_GPS = 1.0
EFACT_GLO = 1.5
EFACT_SBS = 3.0

# Solution Status
SOLQ_NONE = 0       # no solution
SOLQ_FIX = 1        # fixed solution
SOLQ_FLOAT = 2      # float solution
SOLQ_SBAS = 3       # SBAS solution
SOLQ_DGPS = 4       # DGPS solution
SOLQ_SINGLE = 5     # single point positioning
SOLQ_PPP = 6        # PPP solution
SOLQ_DR = 7         # dead reckoning


def sat2sys(sat):
    """Get satellite system from satellite number"""
    from .satellite_numbering import SATELLITE_RANGES

    for sys_id, ranges in SATELLITE_RANGES.items():
        for start, end in ranges:
            if start <= sat <= end:
                return sys_id

    return SYS_NONE


def sat2prn(sat):
    """Get PRN number from satellite number"""
    from .satellite_numbering import sat_to_prn
    return sat_to_prn(sat)


def prn2sat(prn, sys):
    """Get satellite number from PRN and system

    Parameters:
    -----------
    prn : int
        PRN number
    sys : int
        Satellite system (SYS_GPS, SYS_GLO, etc.)

    Returns:
    --------
    int
        Satellite number, 0 if the pair is invalid
    """
    from .satellite_numbering import SYS_TO_CHAR, prn_to_sat

    sys_char = SYS_TO_CHAR.get(sys, None)
    if sys_char is None:
        return 0

    return prn_to_sat(sys_char, prn)


def sys2char(sys):
    """Convert system ID to character"""
    syschar = {
        SYS_GPS: 'G',
        SYS_GLO: 'R',
        SYS_GAL: 'E',
        SYS_BDS: 'C',
        SYS_QZS: 'J',
        SYS_SBS: 'S',
        SYS_IRN: 'I'
    }
    return syschar.get(sys, ' ')


def char2sys(c):
    """Convert character to system ID"""
    charmap = {
        'G': SYS_GPS,
        'R': SYS_GLO,
        'E': SYS_GAL,
        'C': SYS_BDS,
        'J': SYS_QZS,
        'S': SYS_SBS,
        'I': SYS_IRN
    }
    return charmap.get(c.upper(), 0)
