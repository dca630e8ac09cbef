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

"""Core data structures for single point positioning"""

from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Sequence

import numpy as np

from .constants import CLIGHT, NFREQ, SOLQ_NONE, SYS_GLO, sat2prn, sat2sys
from .satellite_numbering import MAXSAT, sat2id


def _as_slots(values, dtype=float) -> np.ndarray:
    arr = np.zeros(NFREQ, dtype=dtype)
    if values is not None:
        values = np.asarray(values, dtype=dtype).ravel()
        arr[:min(NFREQ, values.size)] = values[:NFREQ]
    return arr


@dataclass(frozen=True, eq=False)
class Observation:
    """GNSS observation data for a single satellite at a specific epoch.

    Attributes
    ----------
    time : float
        Reception time in GPS time (GPST) seconds
    sat : int
        Satellite number using the unified satellite numbering
    P : np.ndarray
        Pseudorange measurements in meters, shape (NFREQ,)
    L : np.ndarray
        Carrier phase measurements in cycles, shape (NFREQ,)
    D : np.ndarray
        Doppler frequency measurements in Hz, shape (NFREQ,)
    SNR : np.ndarray
        Signal-to-noise ratio in dB-Hz, shape (NFREQ,)
    code : tuple of str
        Tracked signal per slot as RINEX 3 attribute ("1C", "2W", "7Q", ...),
        empty string when the slot is not tracked

    Notes
    -----
    Slot 0 is the primary frequency (L1/G1/E1/B1), slot 1 the secondary one
    used by the ionosphere-free combination. Zero values mean "not measured".
    """
    time: float
    sat: int
    P: np.ndarray = None
    L: np.ndarray = None
    D: np.ndarray = None
    SNR: np.ndarray = None
    code: tuple = ('', '')

    def __post_init__(self):
        for name in ('P', 'L', 'D', 'SNR'):
            object.__setattr__(self, name, _as_slots(getattr(self, name)))
        codes = tuple(self.code or ())
        codes = (codes + ('',) * NFREQ)[:NFREQ]
        object.__setattr__(self, 'code', codes)

    @property
    def system(self) -> int:
        """Satellite system ID"""
        return sat2sys(self.sat)

    @property
    def prn(self) -> int:
        """PRN number within the satellite's constellation"""
        return sat2prn(self.sat)

    @property
    def sat_id(self) -> str:
        return sat2id(self.sat)


@dataclass(frozen=True, eq=False)
class SatelliteState:
    """Satellite position, velocity and clock at signal transmission time.

    Attributes
    ----------
    rs : np.ndarray
        Satellite ECEF position (m)
    vs : np.ndarray
        Satellite ECEF velocity (m/s)
    dts : float
        Satellite clock bias (s)
    ddts : float
        Satellite clock drift (s/s)
    var : float
        Orbit and clock error variance (m^2)
    svh : int
        Health flag, 0 healthy, -1 when no ephemeris was available
    """
    rs: np.ndarray
    vs: np.ndarray = field(default_factory=lambda: np.zeros(3))
    dts: float = 0.0
    ddts: float = 0.0
    var: float = 0.0
    svh: int = 0

    def __post_init__(self):
        object.__setattr__(self, 'rs', np.asarray(self.rs, dtype=float))
        object.__setattr__(self, 'vs', np.asarray(self.vs, dtype=float))

    @classmethod
    def missing(cls) -> "SatelliteState":
        """State of a satellite without usable ephemeris"""
        return cls(rs=np.zeros(3), vs=np.zeros(3), svh=-1)


@dataclass
class NavigationData:
    """Navigation parameters consumed by the pseudorange and atmosphere models.

    Attributes
    ----------
    tgd : dict
        Broadcast group delays per satellite in seconds. Index meaning per
        system: GPS/QZSS/NavIC ``[TGD]``; Galileo ``[BGD_E1E5a, BGD_E1E5b]``;
        BeiDou ``[TGD_B1I, TGD_B2I/B2bI, TGD_B1Cp, TGD_B2ap, ISC_B1Cd,
        ISC_B2ad]``
    dtaun : dict
        GLONASS ``tau_n`` (L1/L2 delay difference) per satellite in seconds
    glo_fcn : dict
        GLONASS frequency channel number per satellite
    cbias : dict
        Differential code biases per satellite in meters:
        ``[P1-P2, P1-C1, P2-C2]``
    ion_gps : np.ndarray
        GPS broadcast ionosphere parameters (alpha0-3, beta0-3), shape (8,)
    ion_qzs : np.ndarray
        QZSS broadcast ionosphere parameters, shape (8,)
    sbas_ionosphere : IonosphereGrid, optional
        SBAS grid ionosphere provider
    ionex : IonosphereGrid, optional
        IONEX TEC map provider
    """
    tgd: Dict[int, Sequence[float]] = field(default_factory=dict)
    dtaun: Dict[int, float] = field(default_factory=dict)
    glo_fcn: Dict[int, int] = field(default_factory=dict)
    cbias: Dict[int, Sequence[float]] = field(default_factory=dict)

    ion_gps: np.ndarray = field(default_factory=lambda: np.zeros(8))
    ion_qzs: np.ndarray = field(default_factory=lambda: np.zeros(8))

    sbas_ionosphere: Optional[object] = None
    ionex: Optional[object] = None

    def get_tgd(self, sat: int, index: int = 0) -> float:
        """Group delay of a satellite converted to meters.

        For GLONASS the delay is ``-tau_n * c`` regardless of ``index``.
        Missing entries give 0.
        """
        if sat2sys(sat) == SYS_GLO:
            return -self.dtaun.get(sat, 0.0) * CLIGHT
        values = self.tgd.get(sat)
        if values is None or index >= len(values):
            return 0.0
        return values[index] * CLIGHT

    def get_cbias(self, sat: int, index: int) -> float:
        """Differential code bias (m), 0 when not available"""
        values = self.cbias.get(sat)
        if values is None or index >= len(values):
            return 0.0
        return float(values[index])


@dataclass
class Solution:
    """Single point positioning solution of one epoch.

    Attributes
    ----------
    time : float
        Solution epoch in GPS time (seconds), corrected by the receiver clock
    stat : int
        Solution quality (SOLQ_NONE, SOLQ_SINGLE, SOLQ_SBAS)
    rr : np.ndarray
        Position in ECEF coordinates (m), shape (3,)
    vv : np.ndarray
        Velocity in ECEF coordinates (m/s), shape (3,)
    dtr : np.ndarray
        Receiver clock bias and inter-system offsets (s), shape (5,):
        ``[GPS, GLO-GPS, GAL-GPS, BDS-GPS, IRN-GPS]``
    qr : np.ndarray
        Position covariance (m^2), shape (3, 3)
    qv : np.ndarray
        Velocity covariance (m^2/s^2), shape (3, 3)
    ns : int
        Number of valid satellites
    age : float
        Age of differential (s), always 0 for single point positioning
    ratio : float
        Ambiguity ratio, always 0 for single point positioning
    """
    time: float
    stat: int = SOLQ_NONE

    rr: np.ndarray = field(default_factory=lambda: np.zeros(3))
    vv: np.ndarray = field(default_factory=lambda: np.zeros(3))
    dtr: np.ndarray = field(default_factory=lambda: np.zeros(5))

    qr: np.ndarray = field(default_factory=lambda: np.zeros((3, 3)))
    qv: np.ndarray = field(default_factory=lambda: np.zeros((3, 3)))

    ns: int = 0
    age: float = 0.0
    ratio: float = 0.0

    def copy(self) -> "Solution":
        """Deep copy of the solution arrays"""
        return replace(self, rr=self.rr.copy(), vv=self.vv.copy(),
                       dtr=self.dtr.copy(), qr=self.qr.copy(),
                       qv=self.qv.copy())

    def get_llh(self):
        """Geodetic position [lat (rad), lon (rad), height (m)]"""
        from ..coordinate import ecef2llh
        return ecef2llh(self.rr)

    def get_enu_cov(self):
        """Position covariance rotated to local East-North-Up (m^2)"""
        from ..coordinate import covecef2enu
        return covecef2enu(self.get_llh(), self.qr)


@dataclass
class SatelliteStatus:
    """Per-satellite status of one epoch.

    ``az``/``el`` in radians, ``snr`` in dB-Hz, ``resp`` is the pseudorange
    residual (m) of the last position iteration.
    """
    sat: int
    az: float = 0.0
    el: float = 0.0
    snr: float = 0.0
    valid: bool = False
    resp: float = 0.0


def empty_satellite_status() -> List[SatelliteStatus]:
    """One empty status slot per satellite number (index ``sat - 1``)"""
    return [SatelliteStatus(sat=i + 1) for i in range(MAXSAT)]
