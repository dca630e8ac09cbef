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

"""Receiver velocity from Doppler measurements.

State vector::

    x = [vx, vy, vz, drift]

Velocity in ECEF m/s, receiver clock drift in m/s. The estimate is best
effort: it never fails the epoch.
"""

import logging

import numpy as np
from numpy.linalg import norm

from ..coordinate import ecef2llh
from ..core.constants import CLIGHT, MAXITR, OMGE
from ..core.satellite_numbering import sat2id
from .frequency import sat2freq
from .geometry import los_from_azel
from .wls import lsq

logger = logging.getLogger(__name__)

NV_VEL = 4
CONV_THRESHOLD_VEL = 1e-6


def resdop(obs, states, nav, opt, rr, x, azel, vsat):
    """
    Range-rate residuals of Doppler measurements

    Parameters:
    -----------
    obs : sequence of Observation
        Observations of one epoch
    states : sequence of SatelliteState
        Satellite states aligned with ``obs``
    nav : NavigationData
        Navigation data (GLONASS channels)
    opt : ProcessingOptions
        Processing options, ``err[4]`` is the Doppler sigma (Hz)
    rr : np.ndarray
        Receiver ECEF position (m)
    x : np.ndarray
        Current state [vx, vy, vz, drift]
    azel : np.ndarray
        Azimuth/elevation per observation (rad)
    vsat : np.ndarray
        Observations used by the position solution

    Returns:
    --------
    v : np.ndarray
        Normalized residuals
    H : np.ndarray
        Normalized design matrix, shape (nv, 4)
    """
    pos = ecef2llh(rr)
    v, H = [], []

    for i, o in enumerate(obs):
        st = states[i]
        freq = sat2freq(o.sat, o.code[0], nav)
        if o.D[0] == 0.0 or freq == 0.0 or not vsat[i] or norm(st.vs) <= 0.0:
            continue

        e = los_from_azel(pos, azel[i, 0], azel[i, 1])
        vs = st.vs - x[:3]

        # range rate with earth rotation correction
        rate = np.dot(vs, e) + OMGE / CLIGHT * (st.vs[1] * rr[0] + st.rs[1] * x[0]
                                               - st.vs[0] * rr[1] - st.rs[0] * x[1])

        sig = 1.0 if opt.err[4] <= 0.0 else opt.err[4] * CLIGHT / freq
        res = (-o.D[0] * CLIGHT / freq - (rate + x[3] - CLIGHT * st.ddts)) / sig

        v.append(res)
        H.append(np.concatenate([-e / sig, [1.0 / sig]]))
        logger.trace("sat=%s doppler res=%8.4f", sat2id(o.sat), res * sig)

    return np.array(v), np.array(H).reshape(-1, NV_VEL)


def estimate_velocity(obs, states, nav, opt, solution, azel, vsat):
    """
    Estimate receiver velocity and clock drift from Doppler

    Parameters:
    -----------
    obs : sequence of Observation
        Observations of one epoch
    states : sequence of SatelliteState
        Satellite states aligned with ``obs``
    nav : NavigationData
        Navigation data
    opt : ProcessingOptions
        Processing options
    solution : Solution
        Position solution; ``vv`` and ``qv`` are written on convergence
    azel : np.ndarray
        Azimuth/elevation per observation (rad)
    vsat : np.ndarray
        Observations used by the position solution

    Returns:
    --------
    bool
        True when the velocity converged
    """
    x = np.zeros(NV_VEL)
    azel = np.asarray(azel, dtype=float)

    for i in range(MAXITR):
        v, H = resdop(obs, states, nav, opt, solution.rr, x, azel, vsat)
        if len(v) < NV_VEL:
            logger.debug("velocity: lack of doppler nv=%d", len(v))
            return False

        try:
            dx, Q = lsq(H, v)
        except np.linalg.LinAlgError as e:
            logger.debug("velocity: lsq error %s", e)
            return False

        x += dx
        if norm(dx) < CONV_THRESHOLD_VEL:
            solution.vv = x[:3].copy()
            solution.qv = Q[:3, :3].copy()
            logger.debug("velocity converged iter=%d vv=%s", i, np.round(x[:3], 4))
            return True

    logger.debug("velocity: iteration divergent i=%d", MAXITR)
    return False
