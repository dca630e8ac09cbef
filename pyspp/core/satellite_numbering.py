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

"""Unified satellite numbering for pyspp.

Every satellite of every constellation is mapped onto a single integer so that
per-satellite tables (group delays, satellite status slots, exclusion lists)
can be indexed without knowing the constellation. The ranges are:

- GPS (G): 1-32
- SBAS (S): 33-64, 133-140
- GLONASS (R): 65-88
- Galileo (E): 97-132
- BeiDou (C): 141-203
- QZSS (J): 210-216
- NavIC (I): 230-243

Satellites are also written as three-character ids such as ``"G05"`` or
``"E11"``; SBAS uses the PRN directly (``"S127"`` style ids are written as
``"S27"``, i.e. PRN - 100).
"""

# Define system IDs (duplicated from constants.py to avoid circular import)
SYS_NONE = 0x00
SYS_GPS = 0x01
SYS_GLO = 0x02
SYS_GAL = 0x04
SYS_BDS = 0x08
SYS_QZS = 0x10
SYS_SBS = 0x20
SYS_IRN = 0x40

MAXSAT = 243  # number of satellite status slots

SATELLITE_RANGES = {
    SYS_GPS: [(1, 32)],
    SYS_SBS: [(33, 64), (133, 140)],
    SYS_GLO: [(65, 88)],
    SYS_GAL: [(97, 132)],
    SYS_BDS: [(141, 203)],
    SYS_QZS: [(210, 216)],
    SYS_IRN: [(230, 243)],
}

# (first PRN, last PRN, satellite number of first PRN)
_PRN_BLOCKS = {
    'G': [(1, 32, 1)],
    'R': [(1, 24, 65)],
    'E': [(1, 36, 97)],
    'C': [(1, 63, 141)],
    'J': [(1, 7, 210)],
    'S': [(120, 151, 33), (152, 159, 133)],
    'I': [(1, 14, 230)],
}

SYS_TO_CHAR = {
    SYS_GPS: 'G',
    SYS_GLO: 'R',
    SYS_GAL: 'E',
    SYS_BDS: 'C',
    SYS_QZS: 'J',
    SYS_SBS: 'S',
    SYS_IRN: 'I',
}

CHAR_TO_SYS = {v: k for k, v in SYS_TO_CHAR.items()}


def prn_to_sat(system_char, prn):
    """Convert system character and PRN to the unified satellite number.

    Parameters
    ----------
    system_char : str
        Single character system identifier (G, R, E, C, J, S, I)
    prn : int
        PRN number within the constellation

    Returns
    -------
    int
        Satellite number (1-243), or 0 if the PRN or system is invalid

    Examples
    --------
    >>> prn_to_sat('G', 1)
    1
    >>> prn_to_sat('E', 1)
    97
    >>> prn_to_sat('I', 14)
    243
    """
    for first, last, base in _PRN_BLOCKS.get(system_char, []):
        if first <= prn <= last:
            return base + prn - first
    return 0


def sat_to_prn(sat):
    """Convert unified satellite number to constellation PRN.

    Returns 0 for numbers outside every constellation block.
    """
    for blocks in _PRN_BLOCKS.values():
        for first, last, base in blocks:
            if base <= sat <= base + last - first:
                return sat - base + first
    return 0


def sat_to_char(sat):
    """System character of a satellite number, or ``''`` when unknown."""
    for sys_id, ranges in SATELLITE_RANGES.items():
        for start, end in ranges:
            if start <= sat <= end:
                return SYS_TO_CHAR[sys_id]
    return ''


def sat2id(sat):
    """Format a satellite number as an id string such as ``"G05"``.

    Parameters
    ----------
    sat : int
        Unified satellite number

    Returns
    -------
    str
        Satellite id, empty string for an invalid number
    """
    char = sat_to_char(sat)
    if not char:
        return ''
    prn = sat_to_prn(sat)
    if char == 'S':
        prn -= 100
    return f"{char}{prn:02d}"


def id2sat(sat_id):
    """Parse a satellite id string (``"G05"``, ``"R12"``, ``"S27"``).

    Returns 0 when the id cannot be parsed.
    """
    if not sat_id or len(sat_id) < 2:
        return 0
    char = sat_id[0].upper()
    try:
        prn = int(sat_id[1:])
    except ValueError:
        return 0
    if char == 'S':
        prn += 100
    return prn_to_sat(char, prn)
