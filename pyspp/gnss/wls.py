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

"""Weighted least squares position estimation (Gauss-Newton)"""

import logging

import numpy as np
from numpy.linalg import norm

from ..core.constants import CLIGHT, MAXITR, NX, SOLQ_SBAS, SOLQ_SINGLE
from ..core.data_structures import Solution
from ..core.options import EphemerisOption
from ..core.results import FailureReason, PositionFailure, PositionFix
from .residuals import rescode
from .validation import validate_solution

logger = logging.getLogger(__name__)

CONV_THRESHOLD = 1e-4  # norm of the state update at convergence


def lsq(H, v):
    """
    Least squares estimation

    Parameters:
    -----------
    H : np.ndarray
        Design matrix, shape (m, n)
    v : np.ndarray
        Measurement residuals, shape (m,)

    Returns:
    --------
    dx : np.ndarray
        Estimated update, shape (n,)
    Q : np.ndarray
        Covariance ``(H^T H)^-1``, shape (n, n)

    Raises:
    -------
    np.linalg.LinAlgError
        If the normal matrix is singular
    """
    Q = np.linalg.inv(H.T @ H)
    if not np.all(np.isfinite(Q)):
        raise np.linalg.LinAlgError("non-finite covariance")
    dx = Q @ (H.T @ v)
    return dx, Q


def estimate_position(obs, states, nav, opt, rr0=None):
    """
    Estimate receiver position and clocks from pseudoranges

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
        Initial receiver ECEF position (m), the geocenter when omitted

    Returns:
    --------
    PositionFix or PositionFailure
        Accepted solution, or the failure reason. Validation failures still
        carry the converged solution; insufficient rows, least squares errors
        and divergence carry none.
    """
    n = len(obs)
    x = np.zeros(NX)
    if rr0 is not None:
        x[:3] = rr0

    azel = np.zeros((n, 2))
    vsat = np.zeros(n, dtype=bool)
    resp = np.zeros(n)

    for i in range(MAXITR):
        res = rescode(i, obs, states, nav, x, opt)
        azel, vsat, resp = res.azel, res.vsat, res.resp

        if res.nv < NX:
            msg = f"lack of valid sats ns={res.nv}"
            logger.debug(msg)
            return PositionFailure(FailureReason.INSUFFICIENT_ROWS, msg, azel, vsat, resp,
                                   nv=res.nv)

        # weighted by std
        sig = np.sqrt(res.var)
        v = res.v / sig
        H = res.H / sig[:, np.newaxis]

        try:
            dx, Q = lsq(H, v)
        except np.linalg.LinAlgError as e:
            msg = f"lsq error info={e}"
            logger.debug(msg)
            return PositionFailure(FailureReason.LSQ_ERROR, msg, azel, vsat, resp, nv=res.nv)

        x += dx
        logger.debug("iteration %d: nv=%d ns=%d |dx|=%.3e", i, res.nv, res.ns, norm(dx))

        if norm(dx) < CONV_THRESHOLD:
            sol = Solution(time=obs[0].time - x[3] / CLIGHT)
            sol.rr = x[:3].copy()
            sol.dtr = x[3:NX] / CLIGHT
            sol.qr = Q[:3, :3].copy()
            sol.ns = res.ns

            val = validate_solution(azel, vsat, opt, v, NX)
            if not val.ok:
                return PositionFailure(val.reason, val.message, azel, vsat, resp,
                                       solution=sol, nv=res.nv, chisq=val.chisq,
                                       gdop=val.gdop)

            sol.stat = SOLQ_SBAS if opt.sateph == EphemerisOption.SBAS else SOLQ_SINGLE
            return PositionFix(sol, azel, vsat, resp, nv=res.nv, chisq=val.chisq,
                               gdop=val.gdop)

    msg = f"iteration divergent i={MAXITR}"
    logger.debug(msg)
    return PositionFailure(FailureReason.DIVERGED, msg, azel, vsat, resp)
