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

"""Per-epoch tables for telemetry collaborators.

Two exports are provided:

- the satellite status slots of an epoch (angles, SNR, validity, residual)
- the corrected measurements of an epoch: raw pseudorange with the satellite
  clock added back and the model atmosphere removed, for downstream
  estimators that work with their own receiver model
"""

import logging
from dataclasses import asdict, dataclass
from typing import List

import numpy as np
import pandas as pd

from ..coordinate import ecef2llh
from ..core.constants import (
    CLIGHT, R2D, SYS_BDS, SYS_GAL, SYS_GLO, SYS_GPS, SYS_IRN, SYS_QZS, SYS_SBS, sat2sys
)
from ..core.satellite_numbering import sat2id
from .atmosphere import atmosphere_delays, clamp_altitude
from .ephemeris import satexclude
from .frequency import sat2freq
from .pseudorange import prange

logger = logging.getLogger(__name__)

SYSTEM_NAMES = {
    SYS_GPS: "GPS",
    SYS_GLO: "GLONASS",
    SYS_GAL: "Galileo",
    SYS_BDS: "BeiDou",
    SYS_QZS: "QZSS",
    SYS_SBS: "SBAS",
    SYS_IRN: "NavIC",
}

STATUS_COLUMNS = ['sat', 'id', 'az_deg', 'el_deg', 'snr', 'valid', 'resp']


def satellite_status_frame(statuses) -> pd.DataFrame:
    """Status slots of the satellites seen in an epoch as a DataFrame.

    Slots that were never filled (zero SNR and elevation, not valid) are
    dropped.
    """
    rows = []
    for st in statuses:
        if not st.valid and st.snr == 0.0 and st.el == 0.0 and st.az == 0.0:
            continue
        rows.append({
            'sat': st.sat,
            'id': sat2id(st.sat),
            'az_deg': st.az * R2D,
            'el_deg': st.el * R2D,
            'snr': st.snr,
            'valid': st.valid,
            'resp': st.resp,
        })
    return pd.DataFrame(rows, columns=STATUS_COLUMNS)


@dataclass
class CorrectedMeasurement:
    """Pseudorange of one satellite with its model corrections (m)."""
    time: float
    sat: int
    system: str
    valid: bool
    snr: float
    azimuth: float      # deg
    elevation: float    # deg
    sat_pos: np.ndarray
    wavelength: float
    raw_pseudorange: float
    pseudorange: float
    sat_clock: float
    iono: float
    tropo: float
    carrier_phase: float


def corrected_measurements(obs, states, nav, opt, solution, azel) -> List[CorrectedMeasurement]:
    """
    Corrected pseudoranges of the satellites above the elevation mask

    The atmosphere is evaluated at the estimated receiver position with the
    height limited to -100 m.

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
        Position solution of the epoch
    azel : np.ndarray
        Azimuth/elevation per observation (rad)

    Returns:
    --------
    list of CorrectedMeasurement
        ``pseudorange = P + c*dts - iono - tropo`` with P the code-bias
        corrected pseudorange
    """
    opt = opt.effective()
    pos = clamp_altitude(ecef2llh(solution.rr))

    records = []
    for i, o in enumerate(obs):
        st = states[i]
        freq = sat2freq(o.sat, o.code[0], nav)
        if freq == 0.0:
            continue
        P, _ = prange(o, nav, opt)
        if P == 0.0:
            continue
        atm = atmosphere_delays(o.time, nav, o.sat, pos, azel[i], opt, freq)
        if atm is None:
            continue
        if azel[i, 1] <= opt.elmin:
            continue

        sat_clock = st.dts * CLIGHT
        records.append(CorrectedMeasurement(
            time=o.time,
            sat=o.sat,
            system=SYSTEM_NAMES.get(sat2sys(o.sat), "unknown"),
            valid=not satexclude(o.sat, st.var, st.svh, opt),
            snr=float(o.SNR[0]),
            azimuth=float(azel[i, 0] * R2D),
            elevation=float(azel[i, 1] * R2D),
            sat_pos=np.array(st.rs, dtype=float),
            wavelength=CLIGHT / freq,
            raw_pseudorange=float(o.P[0]),
            pseudorange=P + sat_clock - atm.dion - atm.dtrp,
            sat_clock=sat_clock,
            iono=atm.dion,
            tropo=atm.dtrp,
            carrier_phase=float(o.L[0]),
        ))

    logger.debug("corrected measurements: %d of %d", len(records), len(obs))
    return records


def measurements_frame(records) -> pd.DataFrame:
    """Corrected measurements as a DataFrame, one row per satellite."""
    rows = []
    for rec in records:
        row = asdict(rec)
        pos = row.pop('sat_pos')
        row['sat_x'], row['sat_y'], row['sat_z'] = pos
        rows.append(row)
    return pd.DataFrame(rows)
