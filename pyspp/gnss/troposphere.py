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

"""Tropospheric delay models.

References
----------
Saastamoinen, J. (1972), "Atmospheric correction for the troposphere
and stratosphere in radio ranging of satellites"

RTCA/DO-229C, Minimum operational performance standards for global
positioning system/wide area augmentation system airborne equipment,
Appendix A.4.2.4
"""

import numpy as np

from ..core.constants import R2D, REL_HUMI
from ..core.time import time2doy

# MOPS meteorological parameters at latitudes 15, 30, 45, 60, 75 deg:
# average P, T, e, beta, lambda followed by their seasonal variations
_MOPS_MET = np.array([
    [1013.25, 299.65, 26.31, 6.30E-3, 2.77, 0.00, 0.00, 0.00, 0.00E-3, 0.00],
    [1017.25, 294.15, 21.79, 6.05E-3, 3.15, -3.75, 7.00, 8.85, 0.25E-3, 0.33],
    [1015.75, 283.15, 11.66, 5.58E-3, 2.57, -2.25, 11.00, 7.24, 0.32E-3, 0.46],
    [1011.75, 272.15, 6.78, 5.39E-3, 1.81, -1.75, 15.00, 5.36, 0.81E-3, 0.74],
    [1013.00, 263.65, 4.11, 4.53E-3, 1.55, -0.50, 14.50, 3.39, 0.62E-3, 0.30],
])


def saastamoinen(pos, azel, humi=REL_HUMI):
    """Saastamoinen tropospheric delay with standard atmosphere.

    Parameters
    ----------
    pos : array_like
        Receiver geodetic position [lat, lon, h] (rad, rad, m)
    azel : array_like
        Satellite azimuth and elevation (rad)
    humi : float, optional
        Relative humidity (0-1), default 0.7

    Returns
    -------
    float
        Slant tropospheric delay (m); 0 below the horizon or for heights
        outside [-100 m, 10 km]
    """
    el = azel[1]
    if pos[2] < -100.0 or pos[2] > 1e4 or el <= 0.0:
        return 0.0

    # standard atmosphere
    hgt = max(pos[2], 0.0)
    pres = 1013.25 * (1.0 - 2.2557E-5 * hgt) ** 5.2568
    temp = 15.0 - 6.5E-3 * hgt + 273.16
    e = 6.108 * humi * np.exp((17.15 * temp - 4684.0) / (temp - 38.45))

    # saastamoinen model
    z = np.pi / 2.0 - el
    trph = 0.0022768 * pres / (1.0 - 0.00266 * np.cos(2.0 * pos[0]) - 0.00028 * hgt / 1e3) / np.cos(z)
    trpw = 0.002277 * (1255.0 / temp + 0.05) * e / np.cos(z)
    return trph + trpw


def _mops_met(lat_deg):
    lat = abs(lat_deg)
    if lat <= 15.0:
        return _MOPS_MET[0].copy()
    if lat >= 75.0:
        return _MOPS_MET[4].copy()
    j = int(lat / 15.0)
    a = (lat - j * 15.0) / 15.0
    return (1.0 - a) * _MOPS_MET[j - 1] + a * _MOPS_MET[j]


def sbas_troposphere(time, pos, azel):
    """SBAS (MOPS) tropospheric delay and variance.

    Parameters
    ----------
    time : float
        GPS time (s), selects the seasonal term
    pos : array_like
        Receiver geodetic position [lat, lon, h] (rad, rad, m)
    azel : array_like
        Satellite azimuth and elevation (rad)

    Returns
    -------
    tuple
        ``(delay, variance)`` in m and m^2; ``(0, 0)`` below the horizon or
        for heights outside [-100 m, 10 km]
    """
    k1, k2, rd, gm, g = 77.604, 382000.0, 287.054, 9.784, 9.80665
    el = azel[1]
    h = pos[2]
    if h < -100.0 or h > 10000.0 or el <= 0.0:
        return 0.0, 0.0

    met = _mops_met(pos[0] * R2D)
    c = np.cos(2.0 * np.pi * (time2doy(time) - (28.0 if pos[0] >= 0.0 else 211.0)) / 365.25)
    met[:5] -= met[5:] * c

    pres, temp, ewv, beta, lam = met[:5]
    zh = 1e-6 * k1 * rd * pres / gm
    zw = 1e-6 * k2 * rd / (gm * (lam + 1.0) - beta * rd) * ewv / temp
    zh *= (1.0 - beta * h / temp) ** (g / (rd * beta))
    zw *= (1.0 - beta * h / temp) ** ((lam + 1.0) * g / (rd * beta) - 1.0)

    sinel = np.sin(el)
    m = 1.001 / np.sqrt(0.002001 + sinel * sinel)
    return (zh + zw) * m, 0.12 ** 2 * m ** 2
