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

"""Satellite states at signal transmission time and satellite eligibility.

Orbit and clock evaluation from broadcast or precise products lives outside
pyspp; it is reached through :class:`EphemerisProvider`.
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from ..core.constants import CLIGHT, MAX_VAR_EPH, SYS_QZS, sat2sys
from ..core.data_structures import Observation, SatelliteState
from ..core.satellite_numbering import sat2id

logger = logging.getLogger(__name__)


class EphemerisProvider(ABC):
    """Source of satellite orbits and clocks"""

    @abstractmethod
    def clock_bias(self, sat: int, time: float) -> Optional[float]:
        """Satellite clock bias (s) at GPS time ``time``, None if unavailable"""

    @abstractmethod
    def satellite_state(self, sat: int, time: float) -> Optional[SatelliteState]:
        """Satellite position, velocity and clock at GPS time ``time``.

        Returns None when no ephemeris covers the satellite.
        """


def satellite_states(obs: Sequence[Observation],
                     provider: EphemerisProvider) -> List[SatelliteState]:
    """
    Evaluate satellite states for the observations of one epoch

    The transmission time is the reception time minus the first non-zero
    pseudorange divided by the speed of light, corrected by the satellite
    clock bias.

    Parameters:
    -----------
    obs : sequence of Observation
        Observations of one epoch
    provider : EphemerisProvider
        Orbit and clock source

    Returns:
    --------
    list of SatelliteState
        One state per observation; satellites without pseudorange or
        ephemeris get ``SatelliteState.missing()`` (health -1)
    """
    states = []
    for o in obs:
        pr = next((p for p in o.P if p != 0.0), 0.0)
        if pr == 0.0:
            logger.trace("no pseudorange sat=%s", sat2id(o.sat))
            states.append(SatelliteState.missing())
            continue

        time = o.time - pr / CLIGHT
        dt = provider.clock_bias(o.sat, time)
        state = None if dt is None else provider.satellite_state(o.sat, time - dt)
        if state is None:
            logger.debug("no ephemeris sat=%s", sat2id(o.sat))
            state = SatelliteState.missing()
        states.append(state)
    return states


def satexclude(sat, var, svh, opt):
    """
    Test whether a satellite must be excluded from positioning

    Parameters:
    -----------
    sat : int
        Satellite number
    var : float
        Ephemeris/clock variance (m^2)
    svh : int
        Health flag (-1: no ephemeris)
    opt : ProcessingOptions or None
        Options with enabled systems and forced exclusions/inclusions

    Returns:
    --------
    bool
        True when the satellite is excluded
    """
    sys = sat2sys(sat)

    if svh < 0:
        return True
    if opt is not None:
        if sat in opt.exsats:
            return True
        if sat in opt.incsats:
            return False
        if not (sys & opt.navsys):
            return True
    if sys == SYS_QZS:
        svh &= 0xFE  # LEX health
    if svh:
        logger.debug("unhealthy satellite: sat=%s svh=%02X", sat2id(sat), svh)
        return True
    if var > MAX_VAR_EPH:
        logger.debug("invalid ura satellite: sat=%s ura=%.2f", sat2id(sat), var ** 0.5)
        return True
    return False
