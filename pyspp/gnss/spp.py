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

"""Single Point Positioning (SPP) core implementation"""

import logging
from typing import Optional, Sequence

import numpy as np

from ..core.data_structures import (
    NavigationData, Observation, SatelliteState, Solution, empty_satellite_status
)
from ..core.options import ProcessingOptions
from ..core.results import FailureReason, PositionFailure, SppResult
from ..core.satellite_numbering import MAXSAT
from ..core.time import time_str
from .raim import RAIM_MIN_OBS, raim_fde
from .velocity import estimate_velocity
from .wls import estimate_position

logger = logging.getLogger(__name__)


def single_point_positioning(obs: Sequence[Observation],
                             nav: NavigationData,
                             opt: ProcessingOptions,
                             states: Sequence[SatelliteState],
                             solution: Optional[Solution] = None) -> SppResult:
    """
    Single point positioning of one epoch

    Parameters:
    -----------
    obs : sequence of Observation
        Observations of one epoch, ordered by satellite
    nav : NavigationData
        Navigation data
    opt : ProcessingOptions
        Processing options
    states : sequence of SatelliteState
        Satellite states aligned with ``obs`` (see ``satellite_states``)
    solution : Solution, optional
        Previous solution; its position is the initial guess

    Returns:
    --------
    SppResult
        Position outcome, satellite status slots and the RAIM exclusion.
        Expected failures are reported in the result, never raised.

    Raises:
    -------
    ValueError
        If ``states`` is not aligned with ``obs``
    """
    if len(states) != len(obs):
        raise ValueError(f"satellite states ({len(states)}) do not match "
                         f"observations ({len(obs)})")

    if len(obs) == 0:
        msg = "no observation data"
        logger.debug(msg)
        fix = PositionFailure(FailureReason.NO_OBSERVATIONS, msg, np.zeros((0, 2)),
                              np.zeros(0, dtype=bool), np.zeros(0))
        return SppResult(fix, empty_satellite_status())

    opt = opt.effective()
    rr0 = None if solution is None else np.array(solution.rr, dtype=float)

    logger.debug("spp: time=%s n=%d", time_str(obs[0].time), len(obs))

    fix = estimate_position(obs, states, nav, opt, rr0)

    excluded = 0
    if not fix.ok and len(obs) >= RAIM_MIN_OBS and opt.raim:
        raim = raim_fde(obs, states, nav, opt, rr0, fix.azel)
        if raim is not None:
            fix, excluded = raim
        else:
            logger.debug("raim: no valid exclusion (%s)", fix.message)

    sol = fix.solution
    if sol is None and rr0 is not None:
        # no position this epoch: doppler against the warm-start position
        sol = Solution(time=obs[0].time, rr=rr0.copy())
    velocity = None
    if sol is not None and estimate_velocity(obs, states, nav, opt, sol, fix.azel, fix.vsat):
        velocity = sol.vv.copy()

    if not fix.ok:
        logger.debug("spp failed: %s", fix.message)

    return SppResult(fix, satellite_status(obs, fix.azel, fix.vsat, fix.resp), excluded,
                     velocity)


def satellite_status(obs, azel, vsat, resp):
    """
    Satellite status slots of one epoch

    Parameters:
    -----------
    obs : sequence of Observation
        Observations of the epoch
    azel, vsat, resp : np.ndarray
        Per-observation geometry, validity and residuals

    Returns:
    --------
    list of SatelliteStatus
        One slot per satellite number; angles and SNR for every observed
        satellite, validity and residual only for used ones
    """
    statuses = empty_satellite_status()
    for i, o in enumerate(obs):
        if not 0 < o.sat <= MAXSAT:
            continue
        st = statuses[o.sat - 1]
        st.az, st.el = float(azel[i, 0]), float(azel[i, 1])
        st.snr = float(o.SNR[0])
        if not vsat[i]:
            continue
        st.valid = True
        st.resp = float(resp[i])
    return statuses
