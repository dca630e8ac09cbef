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

"""RAIM (Receiver Autonomous Integrity Monitoring) fault detection and exclusion"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from ..core.results import PositionFix
from ..core.satellite_numbering import sat2id
from ..core.time import time_str
from .wls import estimate_position

logger = logging.getLogger(__name__)

RAIM_MIN_OBS = 6       # observations needed to attempt an exclusion
RAIM_MIN_VALID = 5     # valid satellites needed after an exclusion
RAIM_RMS_LIMIT = 100.0  # m, initial best residual RMS


@dataclass
class RaimCandidate:
    """Solution obtained without one observation.

    ``fix`` arrays are aligned with the full observation set; the held-out
    observation is marked invalid.
    """
    index: int
    sat: int
    fix: PositionFix
    rms: float


def raim_candidate(i, obs, states, nav, opt, rr0=None, azel=None) -> Optional[RaimCandidate]:
    """
    Re-solve the position without observation ``i``

    Parameters:
    -----------
    i : int
        Index of the held-out observation
    obs : sequence of Observation
        Observations of one epoch
    states : sequence of SatelliteState
        Satellite states aligned with ``obs``
    nav : NavigationData
        Navigation data
    opt : ProcessingOptions
        Processing options
    rr0 : array_like, optional
        Initial receiver position (m)
    azel : np.ndarray, optional
        Azimuth/elevation of the full set; keeps the angles of the held-out
        observation in the returned arrays

    Returns:
    --------
    RaimCandidate or None
        None when the reduced solve fails or fewer than 5 satellites stay valid
    """
    keep = [j for j in range(len(obs)) if j != i]
    result = estimate_position([obs[j] for j in keep], [states[j] for j in keep],
                               nav, opt, rr0)
    if not result.ok:
        logger.debug("raim candidate %s: %s", sat2id(obs[i].sat), result.message)
        return None

    nvsat = int(np.count_nonzero(result.vsat))
    if nvsat < RAIM_MIN_VALID:
        logger.debug("raim candidate %s: valid satellites %d", sat2id(obs[i].sat), nvsat)
        return None

    rms = float(np.sqrt(np.sum(result.resp[result.vsat] ** 2) / nvsat))

    n = len(obs)
    full_azel = np.zeros((n, 2)) if azel is None else np.array(azel, dtype=float)
    full_vsat = np.zeros(n, dtype=bool)
    full_resp = np.zeros(n)
    full_azel[keep] = result.azel
    full_vsat[keep] = result.vsat
    full_resp[keep] = result.resp

    fix = PositionFix(result.solution, full_azel, full_vsat, full_resp,
                      nv=result.nv, chisq=result.chisq, gdop=result.gdop)
    return RaimCandidate(index=i, sat=obs[i].sat, fix=fix, rms=rms)


def raim_fde(obs, states, nav, opt, rr0=None, azel=None) -> Optional[Tuple[PositionFix, int]]:
    """
    Fault detection and exclusion by leave-one-out re-solves

    Every observation is held out in turn; the candidate with the smallest
    residual RMS wins, the first one in observation order on ties.

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
    rr0 : array_like, optional
        Initial receiver position (m)
    azel : np.ndarray, optional
        Azimuth/elevation of the failed baseline solve

    Returns:
    --------
    tuple or None
        ``(fix, excluded_sat)`` of the best exclusion, None when no exclusion
        yields an acceptable solution
    """
    if len(obs) < RAIM_MIN_OBS:
        return None

    best = None
    rms = RAIM_RMS_LIMIT
    for i in range(len(obs)):
        cand = raim_candidate(i, obs, states, nav, opt, rr0, azel)
        if cand is None:
            continue
        logger.trace("raim candidate %s rms=%.3f", sat2id(cand.sat), cand.rms)
        if cand.rms < rms:
            best, rms = cand, cand.rms

    if best is None:
        return None

    logger.info("%s: %s excluded by raim", time_str(obs[0].time, 0), sat2id(best.sat))
    return best.fix, best.sat
