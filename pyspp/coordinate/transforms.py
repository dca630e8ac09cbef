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

"""Coordinate transformation utilities"""


import numpy as np

from ..core.constants import FE_WGS84, RE_WGS84

E2_WGS84 = FE_WGS84 * (2.0 - FE_WGS84)


def ecef2llh(xyz: np.ndarray) -> np.ndarray:
    """Convert ECEF coordinates to geodetic coordinates

    Parameters
    ----------
    xyz : np.ndarray
        ECEF coordinates [x, y, z] in meters

    Returns
    -------
    np.ndarray
        Geodetic coordinates [lat (rad), lon (rad), height (m)]

    Notes
    -----
    The latitude is iterated until the ellipsoidal z term changes by less
    than 0.1 mm. Points on the polar axis get longitude 0; the geocenter maps
    to latitude -90 deg and height -RE_WGS84, which callers use to detect an
    uninitialized receiver position.

    Examples
    --------
    >>> import numpy as np
    >>> llh = ecef2llh(np.array([-3961904.9, 3348993.8, 3698211.8]))
    >>> lat_deg, lon_deg = np.degrees(llh[0]), np.degrees(llh[1])
    """
    x, y, z0 = float(xyz[0]), float(xyz[1]), float(xyz[2])
    r2 = x * x + y * y

    z = z0
    zk = 0.0
    v = RE_WGS84
    while abs(z - zk) >= 1e-4:
        zk = z
        sinp = z / np.sqrt(r2 + z * z)
        v = RE_WGS84 / np.sqrt(1.0 - E2_WGS84 * sinp * sinp)
        z = z0 + v * E2_WGS84 * sinp

    if r2 > 1e-12:
        lat = np.arctan(z / np.sqrt(r2))
        lon = np.arctan2(y, x)
    else:
        lat = np.pi / 2.0 if z0 > 0.0 else -np.pi / 2.0
        lon = 0.0
    h = np.sqrt(r2 + z * z) - v

    return np.array([lat, lon, h])


def llh2ecef(llh: np.ndarray) -> np.ndarray:
    """Convert geodetic coordinates [lat (rad), lon (rad), h (m)] to ECEF"""
    lat, lon, h = llh[0], llh[1], llh[2]

    sin_lat = np.sin(lat)
    cos_lat = np.cos(lat)

    N = RE_WGS84 / np.sqrt(1.0 - E2_WGS84 * sin_lat**2)

    x = (N + h) * cos_lat * np.cos(lon)
    y = (N + h) * cos_lat * np.sin(lon)
    z = (N * (1.0 - E2_WGS84) + h) * sin_lat

    return np.array([x, y, z])


def xyz2enu(llh: np.ndarray) -> np.ndarray:
    """Rotation matrix from ECEF to local ENU at a geodetic position

    Parameters
    ----------
    llh : np.ndarray
        Geodetic coordinates [lat, lon, height] (rad, rad, m);
        the height is not used

    Returns
    -------
    np.ndarray
        3x3 matrix whose rows are the east, north and up unit vectors
    """
    sin_lat = np.sin(llh[0])
    cos_lat = np.cos(llh[0])
    sin_lon = np.sin(llh[1])
    cos_lon = np.cos(llh[1])

    return np.array([
        [-sin_lon, cos_lon, 0.0],
        [-sin_lat * cos_lon, -sin_lat * sin_lon, cos_lat],
        [cos_lat * cos_lon, cos_lat * sin_lon, sin_lat]
    ])


def ecef2enu(xyz: np.ndarray, org_llh: np.ndarray) -> np.ndarray:
    """Convert ECEF to local ENU coordinates relative to an origin

    Parameters
    ----------
    xyz : np.ndarray
        ECEF coordinates [x, y, z] in meters
    org_llh : np.ndarray
        Origin geodetic coordinates [lat, lon, height] (rad, rad, m)

    Returns
    -------
    np.ndarray
        Local ENU displacement [e, n, u] in meters
    """
    dx = np.asarray(xyz, dtype=float) - llh2ecef(org_llh)
    return xyz2enu(org_llh) @ dx


def covecef2enu(llh: np.ndarray, P_ecef: np.ndarray) -> np.ndarray:
    """Rotate a 3x3 covariance from ECEF to ENU: ``P_enu = E P_ecef E^T``"""
    E = xyz2enu(llh)
    return E @ P_ecef @ E.T
