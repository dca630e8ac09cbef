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

"""Noiseless synthetic epochs for testing and examples.

Satellites are placed on a sphere of orbit radius along given azimuth and
elevation seen from a true receiver position. Pseudoranges and Doppler are
generated with the same measurement model the estimators invert, so a
correct solver recovers the truth exactly up to floating point error.

The atmosphere and code bias terms reuse ``atmosphere_delays`` and
``prange``; a solve on these epochs checks the estimator, while the models
themselves are covered by their own tests against reference values.
"""

from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from ..coordinate import ecef2llh
from ..core.constants import (
    CLIGHT, D2R, OMGE, SYS_BDS, SYS_GAL, SYS_GLO, SYS_GPS, SYS_IRN, SYS_QZS, SYS_SBS,
    sat2sys
)
from ..core.data_structures import NavigationData, Observation, SatelliteState
from ..core.options import IonoOption, ProcessingOptions
from ..core.time import week_tow_to_gps_seconds
from .atmosphere import atmosphere_delays
from .frequency import sat2freq
from .geometry import geodist, los_from_azel, satazel
from .pseudorange import prange
from .residuals import ISB_COLUMNS

ORBIT_RADIUS = 26_560e3  # m, GPS semi-major axis
ORBIT_SPEED = 3_874.0    # m/s
DEFAULT_TIME = week_tow_to_gps_seconds(2300, 345600.0)
DEFAULT_SNR = 45.0       # dB-Hz

DEFAULT_CODES = {
    SYS_GPS: '1C',
    SYS_GLO: '1C',
    SYS_GAL: '1C',
    SYS_BDS: '2I',
    SYS_QZS: '1C',
    SYS_SBS: '1C',
    SYS_IRN: '5A',
}


@dataclass
class SyntheticEpoch:
    """Generated epoch with its ground truth.

    Attributes
    ----------
    obs : list of Observation
        Observations ordered as requested
    states : list of SatelliteState
        Satellite states aligned with ``obs``
    nav : NavigationData
        Navigation data used for the measurement model
    rr : np.ndarray
        True receiver ECEF position (m)
    vel : np.ndarray
        True receiver ECEF velocity (m/s)
    clock : float
        True receiver clock bias (m)
    isb : dict
        True inter-system offsets (m) by system
    drift : float
        True receiver clock drift (m/s)
    """
    obs: List[Observation]
    states: List[SatelliteState]
    nav: NavigationData
    rr: np.ndarray
    vel: np.ndarray = field(default_factory=lambda: np.zeros(3))
    clock: float = 0.0
    isb: Dict[int, float] = field(default_factory=dict)
    drift: float = 0.0


def satellite_at(rr, az, el, radius=ORBIT_RADIUS):
    """
    Satellite position on a sphere seen at azimuth/elevation from ``rr``

    Returns:
    --------
    rs : np.ndarray
        Satellite ECEF position (m)
    vs : np.ndarray
        Satellite ECEF velocity (m/s), orbit speed perpendicular to ``rs``
    """
    rr = np.asarray(rr, dtype=float)
    e = los_from_azel(ecef2llh(rr), az, el)
    b = np.dot(rr, e)
    rho = -b + np.sqrt(b * b - np.dot(rr, rr) + radius * radius)
    rs = rr + rho * e

    axis = np.array([0.0, 0.0, 1.0])
    t = np.cross(axis, rs)
    if np.linalg.norm(t) < 1e-3 * radius:
        t = np.cross(np.array([1.0, 0.0, 0.0]), rs)
    vs = ORBIT_SPEED * t / np.linalg.norm(t)
    return rs, vs


def synthesize_epoch(rr: Sequence[float],
                     satellites: Sequence[Tuple[int, float, float]],
                     time: float = DEFAULT_TIME,
                     clock: float = 0.0,
                     isb: Optional[Dict[int, float]] = None,
                     vel: Optional[Sequence[float]] = None,
                     drift: float = 0.0,
                     faults: Optional[Dict[int, float]] = None,
                     opt: Optional[ProcessingOptions] = None,
                     nav: Optional[NavigationData] = None,
                     snr: float = DEFAULT_SNR,
                     sat_clock: float = 1e-5) -> SyntheticEpoch:
    """
    Generate a noiseless epoch

    Parameters:
    -----------
    rr : array_like
        True receiver ECEF position (m)
    satellites : sequence of (sat, az_deg, el_deg)
        Satellite numbers with their azimuth/elevation seen from ``rr``
    time : float
        Reception time in GPS seconds
    clock : float
        Receiver clock bias (m)
    isb : dict, optional
        Inter-system offsets (m) by system (GLO, GAL, BDS, IRN)
    vel : array_like, optional
        Receiver velocity (m/s), zero when omitted
    drift : float
        Receiver clock drift (m/s)
    faults : dict, optional
        Pseudorange bias (m) added per satellite number
    opt : ProcessingOptions, optional
        Atmosphere and code bias model; without it no atmosphere is added
    nav : NavigationData, optional
        Navigation data; GLONASS satellites without a frequency channel get
        channel 0 in the returned copy
    snr : float
        Signal strength (dB-Hz) of every observation
    sat_clock : float
        Clock bias step (s); the k-th satellite (from 1) gets ``k * sat_clock``

    Returns:
    --------
    SyntheticEpoch
        Observations, states and the truth
    """
    rr = np.asarray(rr, dtype=float)
    isb = dict(isb or {})
    faults = faults or {}
    vel = np.zeros(3) if vel is None else np.asarray(vel, dtype=float)
    nav = NavigationData() if nav is None else nav
    glo_fcn = dict(nav.glo_fcn)
    for sat, _, _ in satellites:
        if sat2sys(sat) == SYS_GLO:
            glo_fcn.setdefault(sat, 0)
    nav = replace(nav, glo_fcn=glo_fcn)
    model_opt = opt or ProcessingOptions()
    pos = ecef2llh(rr)

    obs, states = [], []
    for k, (sat, az_deg, el_deg) in enumerate(satellites):
        sys = sat2sys(sat)
        code = DEFAULT_CODES.get(sys, '1C')
        rs, vs = satellite_at(rr, az_deg * D2R, el_deg * D2R)
        st = SatelliteState(rs=rs, vs=vs, dts=(k + 1) * sat_clock)

        r, e = geodist(rs, rr)
        az, el = satazel(pos, e)
        freq = sat2freq(sat, code, nav)

        dion = dtrp = 0.0
        if opt is not None:
            atm = atmosphere_delays(time, nav, sat, pos, np.array([az, el]), opt, freq)
            if atm is not None:
                dion, dtrp = atm.dion, atm.dtrp

        offset = isb.get(sys, 0.0) if sys in ISB_COLUMNS else 0.0
        model = r + clock + offset - CLIGHT * st.dts + dion + dtrp + faults.get(sat, 0.0)

        # invert the code bias correction applied by the estimator
        dual = model_opt.ionoopt == IonoOption.IFLC
        probe = Observation(time=time, sat=sat, P=[model, model if dual else 0.0],
                            code=(code, ''))
        P_corr, _ = prange(probe, nav, model_opt)
        P = model - (P_corr - model)

        D = 0.0
        if freq > 0.0:
            rate = np.dot(vs - vel, e) + OMGE / CLIGHT * (vs[1] * rr[0] + rs[1] * vel[0]
                                                         - vs[0] * rr[1] - rs[0] * vel[1])
            D = -(rate + drift - CLIGHT * st.ddts) * freq / CLIGHT

        obs.append(Observation(time=time, sat=sat, P=[P, P if dual else 0.0],
                               L=[P * freq / CLIGHT, 0.0],
                               D=[D, 0.0], SNR=[snr, 0.0], code=(code, '')))
        states.append(st)

    return SyntheticEpoch(obs=obs, states=states, nav=nav, rr=rr, vel=vel,
                          clock=clock, isb=isb, drift=drift)
