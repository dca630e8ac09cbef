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

"""Pseudorange residuals and design matrix for one Gauss-Newton iteration.

State vector (NX = 8)::

    x = [x, y, z, dtr, isb_glo, isb_gal, isb_bds, isb_irn]

Position in ECEF meters, clock terms in meters. GPS, QZSS and SBAS share
the reference clock ``dtr``; the other systems add their inter-system offset
column from :data:`ISB_COLUMNS`. A clock column without any measurement in
the epoch is pinned to zero by a pseudo-measurement so the normal equations
stay regular.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import numpy as np

from ..coordinate import ecef2llh
from ..core.constants import (
    CLIGHT, NX, R2D, SYS_BDS, SYS_GAL, SYS_GLO, SYS_IRN, VAR_ISB_CONSTRAINT,
    sat2sys
)
from ..core.data_structures import NavigationData, Observation, SatelliteState
from ..core.options import IonoOption, ProcessingOptions
from ..core.results import SatelliteRejection
from ..core.satellite_numbering import sat2id
from ..core.time import time_str
from .atmosphere import atmosphere_delays
from .ephemeris import satexclude
from .frequency import sat2freq
from .geometry import geodist, satazel
from .pseudorange import prange
from .variance import varerr

logger = logging.getLogger(__name__)

REF_CLOCK = 3
ISB_COLUMNS = {
    SYS_GLO: 4,
    SYS_GAL: 5,
    SYS_BDS: 6,
    SYS_IRN: 7,
}
CLOCK_COLUMNS = tuple(range(REF_CLOCK, NX))


@dataclass
class ResidualSet:
    """Residuals of one iteration.

    Attributes
    ----------
    v : np.ndarray
        Residuals (m), one per row including constraint rows
    H : np.ndarray
        Design matrix, shape (nv, NX)
    var : np.ndarray
        Row variances (m^2)
    azel : np.ndarray
        Azimuth/elevation per observation (rad), shape (n, 2)
    vsat : np.ndarray
        True for observations that produced a row
    resp : np.ndarray
        Residual per observation (m), 0 when unused
    rejections : list
        ``SatelliteRejection`` per observation, None when used
    ns : int
        Number of observations that produced a row
    """
    v: np.ndarray
    H: np.ndarray
    var: np.ndarray
    azel: np.ndarray
    vsat: np.ndarray
    resp: np.ndarray
    rejections: List[Optional[SatelliteRejection]] = field(default_factory=list)
    ns: int = 0

    @property
    def nv(self) -> int:
        return len(self.v)


def clock_column(sys):
    """State column of the clock term of a satellite system"""
    return ISB_COLUMNS.get(sys, REF_CLOCK)


def rescode(iteration: int,
            obs: Sequence[Observation],
            states: Sequence[SatelliteState],
            nav: NavigationData,
            x: np.ndarray,
            opt: ProcessingOptions) -> ResidualSet:
    """
    Pseudorange residuals

    Parameters:
    -----------
    iteration : int
        Iteration index; elevation/SNR masks and atmosphere corrections are
        applied from the second iteration on, once the geometry is known
    obs : sequence of Observation
        Observations, duplicates of a satellite must be adjacent
    states : sequence of SatelliteState
        Satellite states aligned with ``obs``
    nav : NavigationData
        Navigation data
    x : np.ndarray
        Current state, shape (NX,)
    opt : ProcessingOptions
        Processing options

    Returns:
    --------
    ResidualSet
        Residual rows and per-observation diagnostics
    """
    n = len(obs)
    rr = np.array(x[:3], dtype=float)
    dtr = x[REF_CLOCK]
    pos = ecef2llh(rr)

    v, H, var = [], [], []
    azel = np.zeros((n, 2))
    vsat = np.zeros(n, dtype=bool)
    resp = np.zeros(n)
    rejections: List[Optional[SatelliteRejection]] = [None] * n
    seen = set()

    for i, o in enumerate(obs):
        st = states[i]
        sys = sat2sys(o.sat)
        if not sys:
            rejections[i] = SatelliteRejection.UNKNOWN_SYSTEM
            continue

        # both observations of a duplicated pair are rejected
        if rejections[i] == SatelliteRejection.DUPLICATE:
            continue
        if i < n - 1 and o.sat == obs[i + 1].sat:
            logger.warning("duplicated observation data %s sat=%s",
                           time_str(o.time), sat2id(o.sat))
            rejections[i] = rejections[i + 1] = SatelliteRejection.DUPLICATE
            continue

        if satexclude(o.sat, st.var, st.svh, opt):
            rejections[i] = SatelliteRejection.EXCLUDED
            continue

        r, e = geodist(st.rs, rr)
        if r <= 0.0:
            rejections[i] = SatelliteRejection.BELOW_RECEIVER
            continue

        az, el = satazel(pos, e)
        azel[i] = az, el

        dion = vion = dtrp = vtrp = 0.0
        if iteration > 0:
            if el < opt.elmin:
                rejections[i] = SatelliteRejection.ELEVATION_MASK
                continue

            if opt.snrmask.rejects(0, el, o.SNR[0]) or (
                    opt.ionoopt == IonoOption.IFLC and opt.snrmask.rejects(1, el, o.SNR[1])):
                rejections[i] = SatelliteRejection.SNR_MASK
                continue

            freq = sat2freq(o.sat, o.code[0], nav)
            if freq == 0.0:
                rejections[i] = SatelliteRejection.NO_FREQUENCY
                continue

            atm = atmosphere_delays(o.time, nav, o.sat, pos, azel[i], opt, freq)
            if atm is None:
                rejections[i] = SatelliteRejection.NO_IONOSPHERE
                continue
            dion, vion, dtrp, vtrp = atm.dion, atm.vion, atm.dtrp, atm.vtrp

        P, vmeas = prange(o, nav, opt)
        if P == 0.0:
            rejections[i] = SatelliteRejection.NO_PSEUDORANGE
            continue

        res = P - (r + dtr - CLIGHT * st.dts + dion + dtrp)

        h = np.zeros(NX)
        h[:3] = -e
        h[REF_CLOCK] = 1.0
        col = clock_column(sys)
        if col != REF_CLOCK:
            res -= x[col]
            h[col] = 1.0
        seen.add(col)

        vsat[i] = True
        resp[i] = res
        v.append(res)
        H.append(h)
        var.append(varerr(opt, el, sys) + st.var + vmeas + vion + vtrp)

        logger.trace("sat=%s azel=%5.1f %4.1f res=%7.3f sig=%5.3f", sat2id(o.sat),
                     az * R2D, el * R2D, res, np.sqrt(var[-1]))

    # constraint to avoid rank-deficient normal equations
    for col in CLOCK_COLUMNS:
        if col in seen:
            continue
        h = np.zeros(NX)
        h[col] = 1.0
        v.append(0.0)
        H.append(h)
        var.append(VAR_ISB_CONSTRAINT)

    return ResidualSet(
        v=np.array(v),
        H=np.array(H).reshape(-1, NX),
        var=np.array(var),
        azel=azel,
        vsat=vsat,
        resp=resp,
        rejections=rejections,
        ns=int(vsat.sum()),
    )
