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

"""Atmospheric correction selection for pseudorange processing.

Picks the ionosphere and troposphere model configured in the processing
options, evaluates it and returns the delay with its variance.

Ionosphere options:
    BRDC: Klobuchar with GPS parameters, sigma = 0.5 x delay
    QZS: Klobuchar with QZSS parameters when available, otherwise no delay
    SBAS / TEC: grid provider from the navigation data; unavailable grids
        reject the satellite
    OFF: no delay, sigma = 5 m
    IFLC / EST: no delay, no variance

Troposphere options:
    SAAS / EST / ESTG: Saastamoinen, sigma = 0.3 / (sin(el) + 0.1)
    SBAS: MOPS model with its own variance
    OFF: no delay, sigma = 3 m

Notes:
    Ionospheric delays refer to L1 and are rescaled by (f_L1 / f)^2 for
    the carrier actually used.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from ..core.constants import ERR_BRDCI, ERR_ION, ERR_SAAS, ERR_TROP, FREQ_L1, REL_HUMI
from ..core.options import IonoOption, TropOption
from .ionosphere import klobuchar
from .troposphere import saastamoinen, sbas_troposphere

logger = logging.getLogger(__name__)

ALTITUDE_FLOOR = -100.0  # m


@dataclass(frozen=True)
class AtmosphereDelay:
    """Ionospheric and tropospheric delay of one satellite (m, m^2)"""
    dion: float = 0.0
    vion: float = 0.0
    dtrp: float = 0.0
    vtrp: float = 0.0


def ionocorr(time, nav, sat, pos, azel, ionoopt) -> Optional[Tuple[float, float]]:
    """Ionospheric delay at L1 and its variance.

    Parameters
    ----------
    time : float
        GPS time (s)
    nav : NavigationData
        Broadcast parameters and grid providers
    sat : int
        Satellite number
    pos : np.ndarray
        Receiver geodetic position [lat, lon, h]
    azel : np.ndarray
        Satellite azimuth and elevation (rad)
    ionoopt : IonoOption
        Selected model

    Returns
    -------
    tuple or None
        ``(delay, variance)``, None when the selected grid cannot provide a
        correction
    """
    if ionoopt == IonoOption.BRDC:
        ion = klobuchar(time, nav.ion_gps, pos, azel)
        return ion, (ion * ERR_BRDCI) ** 2

    if ionoopt in (IonoOption.SBAS, IonoOption.TEC):
        grid = nav.sbas_ionosphere if ionoopt == IonoOption.SBAS else nav.ionex
        if grid is None:
            logger.trace("no %s ionosphere provider for sat=%d", ionoopt.value, sat)
            return None
        return grid.delay(time, pos, azel)

    if ionoopt == IonoOption.QZS and np.linalg.norm(nav.ion_qzs) > 0.0:
        ion = klobuchar(time, nav.ion_qzs, pos, azel)
        return ion, (ion * ERR_BRDCI) ** 2

    return 0.0, (ERR_ION ** 2 if ionoopt == IonoOption.OFF else 0.0)


def tropcorr(time, pos, azel, tropopt) -> Tuple[float, float]:
    """Tropospheric delay and its variance.

    Parameters
    ----------
    time : float
        GPS time (s)
    pos : np.ndarray
        Receiver geodetic position [lat, lon, h]
    azel : np.ndarray
        Satellite azimuth and elevation (rad)
    tropopt : TropOption
        Selected model

    Returns
    -------
    tuple
        ``(delay, variance)`` in m and m^2
    """
    if tropopt in (TropOption.SAAS, TropOption.EST, TropOption.ESTG):
        trp = saastamoinen(pos, azel, REL_HUMI)
        return trp, (ERR_SAAS / (np.sin(azel[1]) + 0.1)) ** 2

    if tropopt == TropOption.SBAS:
        return sbas_troposphere(time, pos, azel)

    return 0.0, (ERR_TROP ** 2 if tropopt == TropOption.OFF else 0.0)


def atmosphere_delays(time, nav, sat, pos, azel, opt, freq) -> Optional[AtmosphereDelay]:
    """Ionospheric and tropospheric delays scaled to a carrier.

    Parameters
    ----------
    time : float
        GPS time (s)
    nav : NavigationData
        Navigation data
    sat : int
        Satellite number
    pos : np.ndarray
        Receiver geodetic position [lat, lon, h]
    azel : np.ndarray
        Satellite azimuth and elevation (rad)
    opt : ProcessingOptions
        Processing options
    freq : float
        Carrier frequency of the pseudorange (Hz)

    Returns
    -------
    AtmosphereDelay or None
        None when the ionosphere model is unavailable
    """
    ion = ionocorr(time, nav, sat, pos, azel, opt.ionoopt)
    if ion is None:
        return None
    trp = tropcorr(time, pos, azel, opt.tropopt)

    scale = (FREQ_L1 / freq) ** 2
    return AtmosphereDelay(dion=ion[0] * scale, vion=ion[1] * scale,
                           dtrp=trp[0], vtrp=trp[1])


def clamp_altitude(pos, floor=ALTITUDE_FLOOR):
    """Copy of a geodetic position with the height limited to ``floor``.

    Used for atmosphere lookups of exported measurements so that receivers
    estimated below the ellipsoid (typically under multipath) still get a
    model delay. The estimated state is never modified.
    """
    pos = np.array(pos, dtype=float)
    pos[2] = max(pos[2], floor)
    return pos
