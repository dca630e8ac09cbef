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

"""Result types of the point positioning pipeline.

Expected estimation failures are returned as values, never raised. A
position solve yields either a :class:`PositionFix` or a
:class:`PositionFailure`; the epoch-level entry point wraps it in an
:class:`SppResult` together with the satellite status slots.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union

import numpy as np

from .data_structures import SatelliteStatus, Solution


class ErrorCategory(Enum):
    """Failure taxonomy"""
    INPUT = "input"            # no observations, too few usable rows
    NUMERIC = "numeric"        # singular normal equations, divergence
    VALIDATION = "validation"  # chi-square or GDOP rejection
    GEOMETRY = "geometry"      # per-satellite, never aborts the epoch


class FailureReason(Enum):
    """Epoch-level failure reasons"""
    NO_OBSERVATIONS = "no_observations"
    INSUFFICIENT_ROWS = "insufficient_rows"
    LSQ_ERROR = "lsq_error"
    DIVERGED = "diverged"
    CHI_SQUARE = "chi_square"
    GDOP = "gdop"

    @property
    def category(self) -> ErrorCategory:
        return _CATEGORIES[self]


_CATEGORIES = {
    FailureReason.NO_OBSERVATIONS: ErrorCategory.INPUT,
    FailureReason.INSUFFICIENT_ROWS: ErrorCategory.INPUT,
    FailureReason.LSQ_ERROR: ErrorCategory.NUMERIC,
    FailureReason.DIVERGED: ErrorCategory.NUMERIC,
    FailureReason.CHI_SQUARE: ErrorCategory.VALIDATION,
    FailureReason.GDOP: ErrorCategory.VALIDATION,
}


class SatelliteRejection(Enum):
    """Why a single observation did not produce a residual row"""
    UNKNOWN_SYSTEM = "unknown system"
    DUPLICATE = "duplicated observation"
    EXCLUDED = "excluded by eligibility policy"
    BELOW_RECEIVER = "non-positive geometric range"
    ELEVATION_MASK = "below elevation mask"
    SNR_MASK = "below SNR mask"
    NO_IONOSPHERE = "ionosphere correction unavailable"
    NO_FREQUENCY = "carrier frequency unresolved"
    NO_PSEUDORANGE = "pseudorange unusable"

    @property
    def category(self) -> ErrorCategory:
        return ErrorCategory.GEOMETRY


@dataclass
class PositionFix:
    """Accepted position solution.

    ``azel`` (n x 2, rad), ``vsat`` and ``resp`` (m) are aligned with the
    input observations.
    """
    solution: Solution
    azel: np.ndarray
    vsat: np.ndarray
    resp: np.ndarray
    nv: int = 0
    chisq: float = 0.0
    gdop: float = 0.0

    ok = True
    reason = None
    message = ""


@dataclass
class PositionFailure:
    """Rejected or failed position solve.

    ``solution`` carries the numeric solution for validation failures and is
    None when the solve never converged.
    """
    reason: FailureReason
    message: str
    azel: np.ndarray
    vsat: np.ndarray
    resp: np.ndarray
    solution: Optional[Solution] = None
    nv: int = 0
    chisq: float = 0.0
    gdop: float = 0.0

    ok = False

    @property
    def category(self) -> ErrorCategory:
        return self.reason.category


PositionResult = Union[PositionFix, PositionFailure]


@dataclass
class SppResult:
    """Outcome of one epoch of single point positioning.

    Attributes
    ----------
    fix : PositionFix or PositionFailure
        Position outcome after RAIM
    satellites : list of SatelliteStatus
        One slot per satellite number (index ``sat - 1``)
    excluded_sat : int
        Satellite removed by RAIM, 0 when none
    velocity : np.ndarray or None
        Receiver velocity (m/s) when the Doppler estimate converged; without
        a position solution it refers to the warm-start position
    """
    fix: PositionResult
    satellites: List[SatelliteStatus] = field(default_factory=list)
    excluded_sat: int = 0
    velocity: Optional[np.ndarray] = None

    @property
    def ok(self) -> bool:
        return self.fix.ok

    @property
    def solution(self) -> Optional[Solution]:
        return self.fix.solution

    @property
    def message(self) -> str:
        """Diagnostic message, empty on success"""
        return self.fix.message

    @property
    def reason(self) -> Optional[FailureReason]:
        return self.fix.reason

    @property
    def azel(self) -> np.ndarray:
        return self.fix.azel
