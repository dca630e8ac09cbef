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

"""Solution validation: residual chi-square test and GDOP check"""

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np
from scipy.stats import chi2

from ..core.results import FailureReason

logger = logging.getLogger(__name__)

CHISQR_ALPHA = 0.001  # false alarm probability of the chi-square test

# chi-square critical values for 1..100 degrees of freedom
CHISQR = chi2.ppf(1.0 - CHISQR_ALPHA, np.arange(1, 101))


def chisqr_threshold(dof):
    """Critical chi-square value for ``dof`` degrees of freedom"""
    if 1 <= dof <= len(CHISQR):
        return float(CHISQR[dof - 1])
    return float(chi2.ppf(1.0 - CHISQR_ALPHA, dof))


@dataclass(frozen=True)
class Validation:
    """Outcome of the solution validation"""
    ok: bool
    reason: Optional[FailureReason] = None
    message: str = ""
    chisq: float = 0.0
    gdop: float = 0.0


def dops(azel, elmin=0.0):
    """
    Dilution of precision

    Parameters:
    -----------
    azel : array_like
        Azimuth/elevation of the satellites (rad), shape (n, 2)
    elmin : float
        Elevation mask (rad)

    Returns:
    --------
    np.ndarray
        [GDOP, PDOP, HDOP, VDOP]; all zero with fewer than 4 satellites above
        the mask or a singular geometry
    """
    dop = np.zeros(4)
    rows = []
    for az, el in np.asarray(azel, dtype=float).reshape(-1, 2):
        if el < elmin or el <= 0.0:
            continue
        cosel = np.cos(el)
        rows.append([cosel * np.sin(az), cosel * np.cos(az), np.sin(el), 1.0])
    if len(rows) < 4:
        return dop

    H = np.array(rows)
    try:
        Q = np.linalg.inv(H.T @ H)
    except np.linalg.LinAlgError:
        return dop

    dop[0] = np.sqrt(np.trace(Q))
    dop[1] = np.sqrt(Q[0, 0] + Q[1, 1] + Q[2, 2])
    dop[2] = np.sqrt(Q[0, 0] + Q[1, 1])
    dop[3] = np.sqrt(Q[2, 2])
    return dop


def validate_solution(azel, vsat, opt, v, nx):
    """
    Validate a converged solution

    Parameters:
    -----------
    azel : np.ndarray
        Azimuth/elevation per observation (rad), shape (n, 2)
    vsat : np.ndarray
        Observations used by the solution
    opt : ProcessingOptions
        Elevation mask and maximum GDOP
    v : np.ndarray
        Whitened residuals of the final iteration
    nx : int
        Number of estimated states

    Returns:
    --------
    Validation
        Acceptance with the failed test and its message on rejection
    """
    nv = len(v)
    vv = float(np.dot(v, v))

    if nv > nx:
        cs = chisqr_threshold(nv - nx)
        if vv > cs:
            msg = f"chi-square error nv={nv} vv={vv:.1f} cs={cs:.1f}"
            logger.debug(msg)
            return Validation(False, FailureReason.CHI_SQUARE, msg, chisq=vv)

    gdop = dops(np.asarray(azel)[np.asarray(vsat, dtype=bool)], opt.elmin)[0]
    if gdop <= 0.0 or gdop > opt.maxgdop:
        msg = f"gdop error nv={nv} gdop={gdop:.1f}"
        logger.debug(msg)
        return Validation(False, FailureReason.GDOP, msg, chisq=vv, gdop=gdop)

    return Validation(True, chisq=vv, gdop=gdop)
