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

"""
Receiver-satellite geometry kernels.

Geometric range with Earth rotation (Sagnac) correction, azimuth/elevation
in the local ENU frame, and the inverse mapping from azimuth/elevation back
to an ECEF line-of-sight vector. The kernels are compiled with numba since
they run once per satellite per Gauss-Newton iteration.

All inputs are float64 arrays: ECEF vectors in meters and geodetic
positions as [lat (rad), lon (rad), height (m)].
"""

import numpy as np
from numba import njit

from ..core.constants import CLIGHT, OMGE, RE_WGS84


@njit(cache=True, fastmath=True)
def geodist(rs, rr):
    """
    Geometric distance and line-of-sight unit vector.

    Parameters
    ----------
    rs : ndarray, shape (3,)
        Satellite ECEF position (m)
    rr : ndarray, shape (3,)
        Receiver ECEF position (m)

    Returns
    -------
    r : float
        Geometric distance including the Sagnac term (m), -1 when the
        satellite position is inside the Earth
    e : ndarray, shape (3,)
        Unit vector from receiver to satellite in ECEF
    """
    e = np.zeros(3)
    if np.sqrt(rs[0] * rs[0] + rs[1] * rs[1] + rs[2] * rs[2]) < RE_WGS84:
        return -1.0, e
    for i in range(3):
        e[i] = rs[i] - rr[i]
    r = np.sqrt(e[0] * e[0] + e[1] * e[1] + e[2] * e[2])
    if r <= 0.0:
        return -1.0, e
    for i in range(3):
        e[i] /= r
    return r + OMGE * (rs[0] * rr[1] - rs[1] * rr[0]) / CLIGHT, e


@njit(cache=True, fastmath=True)
def satazel(pos, e):
    """
    Satellite azimuth and elevation.

    Parameters
    ----------
    pos : ndarray, shape (3,)
        Receiver geodetic position [lat, lon, h]
    e : ndarray, shape (3,)
        Receiver-to-satellite unit vector in ECEF

    Returns
    -------
    az : float
        Azimuth in [0, 2*pi) (rad)
    el : float
        Elevation in [-pi/2, pi/2] (rad); pi/2 when the receiver position
        is not initialized (height <= -RE_WGS84)
    """
    az = 0.0
    el = np.pi / 2.0
    if pos[2] > -RE_WGS84:
        sinp = np.sin(pos[0])
        cosp = np.cos(pos[0])
        sinl = np.sin(pos[1])
        cosl = np.cos(pos[1])
        east = -sinl * e[0] + cosl * e[1]
        north = -sinp * cosl * e[0] - sinp * sinl * e[1] + cosp * e[2]
        up = cosp * cosl * e[0] + cosp * sinl * e[1] + sinp * e[2]
        if east * east + north * north >= 1e-12:
            az = np.arctan2(east, north)
        if az < 0.0:
            az += 2.0 * np.pi
        up = min(1.0, max(-1.0, up))
        el = np.arcsin(up)
    return az, el


@njit(cache=True, fastmath=True)
def los_from_azel(pos, az, el):
    """
    ECEF line-of-sight unit vector from azimuth and elevation.

    Parameters
    ----------
    pos : ndarray, shape (3,)
        Receiver geodetic position [lat, lon, h]
    az, el : float
        Azimuth and elevation (rad)

    Returns
    -------
    e : ndarray, shape (3,)
        Receiver-to-satellite unit vector in ECEF
    """
    sinp = np.sin(pos[0])
    cosp = np.cos(pos[0])
    sinl = np.sin(pos[1])
    cosl = np.cos(pos[1])
    cosel = np.cos(el)
    a0 = np.sin(az) * cosel
    a1 = np.cos(az) * cosel
    a2 = np.sin(el)

    e = np.empty(3)
    e[0] = -sinl * a0 - sinp * cosl * a1 + cosp * cosl * a2
    e[1] = cosl * a0 - sinp * sinl * a1 + cosp * sinl * a2
    e[2] = cosp * a1 + sinp * a2
    return e
