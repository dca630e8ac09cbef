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

"""Ionospheric delay models.

The broadcast (Klobuchar) model is evaluated here. Grid based models (SBAS
ionosphere grid, IONEX TEC maps) are provided by external collaborators
implementing :class:`IonosphereGrid`.
"""

from abc import ABC, abstractmethod
from typing import Optional, Tuple

import numpy as np

from ..core.constants import CLIGHT
from ..core.time import SECONDS_PER_WEEK

# Default broadcast parameters (2004/1/1) used when none were received
ION_DEFAULT = np.array([
    0.1118E-07, -0.7451E-08, -0.5961E-07, 0.1192E-06,
    0.1167E+06, -0.2294E+06, -0.1311E+06, 0.1049E+07
])


class IonosphereGrid(ABC):
    """Provider of grid based ionospheric delay at L1"""

    @abstractmethod
    def delay(self, time: float, pos: np.ndarray,
              azel: np.ndarray) -> Optional[Tuple[float, float]]:
        """Slant delay at L1.

        Parameters
        ----------
        time : float
            GPS time (s)
        pos : np.ndarray
            Receiver geodetic position [lat, lon, h] (rad, rad, m)
        azel : np.ndarray
            Satellite azimuth and elevation (rad)

        Returns
        -------
        tuple or None
            ``(delay, variance)`` in m and m^2, None when the grid does not
            cover the pierce point
        """


def klobuchar(time, ion, pos, azel):
    """Broadcast ionosphere model (Klobuchar).

    Parameters
    ----------
    time : float
        GPS time (s)
    ion : array_like
        Broadcast parameters [alpha0-3, beta0-3]; the default set is used
        when all are zero
    pos : array_like
        Receiver geodetic position [lat, lon, h] (rad, rad, m)
    azel : array_like
        Satellite azimuth and elevation (rad)

    Returns
    -------
    float
        Ionospheric delay at L1 in meters, 0 below the horizon or for
        receivers far below the ellipsoid
    """
    az, el = azel[0], azel[1]
    if pos[2] < -1e3 or el <= 0.0:
        return 0.0
    ion = np.asarray(ion, dtype=float)
    if np.linalg.norm(ion) <= 0.0:
        ion = ION_DEFAULT

    # Earth-centered angle (semi-circle)
    psi = 0.0137 / (el / np.pi + 0.11) - 0.022

    # Subionospheric latitude and longitude
    phi = pos[0] / np.pi + psi * np.cos(az)
    phi = min(max(phi, -0.416), 0.416)
    lam = pos[1] / np.pi + psi * np.sin(az) / np.cos(phi * np.pi)

    # Geomagnetic latitude
    phi += 0.064 * np.cos((lam - 1.617) * np.pi)

    # Local time
    tow = time % SECONDS_PER_WEEK
    tt = 43200.0 * lam + tow
    tt -= np.floor(tt / 86400.0) * 86400.0

    # Slant factor
    f = 1.0 + 16.0 * (0.53 - el / np.pi) ** 3

    amp = ion[0] + phi * (ion[1] + phi * (ion[2] + phi * ion[3]))
    per = ion[4] + phi * (ion[5] + phi * (ion[6] + phi * ion[7]))
    amp = max(amp, 0.0)
    per = max(per, 72000.0)
    x = 2.0 * np.pi * (tt - 50400.0) / per

    if abs(x) < 1.57:
        return CLIGHT * f * (5e-9 + amp * (1.0 + x * x * (-0.5 + x * x / 24.0)))
    return CLIGHT * f * 5e-9
