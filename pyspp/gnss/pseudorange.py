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

"""Pseudorange code bias correction and ionosphere-free combination.

Group delay table used per system (index into ``NavigationData.tgd``):

=========  ==========================  =====================================
System     Single frequency            Dual frequency (ionosphere-free)
=========  ==========================  =====================================
GPS/QZSS   L1: ``P1 - TGD``            L1-L2, no TGD
GLONASS    G1: ``P1 - b/(gamma - 1)``  G1-G2, no TGD (b = -tau_n c)
Galileo    E1: BGD E1E5a (F/NAV) or    E1-E5b, F/NAV removes
           BGD E1E5b (I/NAV)           BGD_E1E5a - BGD_E1E5b from P2
BeiDou     B1I: TGD_B1I, B1Cp:         B1-B2I with TGD_B2I on P2
           TGD_B1Cp, B1Cd:
           TGD_B1Cp + ISC_B1Cd
NavIC      L5: ``(fS/fL5)^2 TGD``      L5-S, no TGD
SBAS       none                        none
=========  ==========================  =====================================
"""

from ..core.constants import (
    ERR_CBIAS, FREQ_B1I, FREQ_B2I, FREQ_E5b, FREQ_G1, FREQ_G2, FREQ_IS,
    FREQ_L1, FREQ_L2, FREQ_L5, SYS_BDS, SYS_GAL, SYS_GLO, SYS_GPS, SYS_IRN,
    SYS_QZS, sat2sys
)
from ..core.options import IonoOption


def _bds_b1_bias(obs, nav):
    """BeiDou B1 group delay selected by the tracked code (m)"""
    code = obs.code[0]
    if code == '2I':
        return nav.get_tgd(obs.sat, 0)  # TGD_B1I
    if code == '1P':
        return nav.get_tgd(obs.sat, 2)  # TGD_B1Cp
    return nav.get_tgd(obs.sat, 2) + nav.get_tgd(obs.sat, 4)  # TGD_B1Cp+ISC_B1Cd


def prange(obs, nav, opt):
    """
    Pseudorange with code bias correction

    Parameters:
    -----------
    obs : Observation
        Observation of one satellite
    nav : NavigationData
        Group delays, GLONASS tau_n and DCB tables
    opt : ProcessingOptions
        Processing options (ionosphere option, Galileo F/NAV flag)

    Returns:
    --------
    P : float
        Corrected pseudorange (m); 0.0 when required code measurements are
        missing, which marks the observation unusable
    var : float
        Code bias variance (m^2)
    """
    sat = obs.sat
    sys = sat2sys(sat)
    P1 = obs.P[0]
    P2 = obs.P[1]
    iflc = opt.ionoopt == IonoOption.IFLC

    if P1 == 0.0 or (iflc and P2 == 0.0):
        return 0.0, 0.0

    # P1-C1, P2-C2 DCB correction
    if sys in (SYS_GPS, SYS_GLO):
        if obs.code[0] == '1C':
            P1 += nav.get_cbias(sat, 1)
        if obs.code[1] == '2C':
            P2 += nav.get_cbias(sat, 2)

    if iflc:
        if sys in (SYS_GPS, SYS_QZS):
            gamma = (FREQ_L1 / FREQ_L2) ** 2
            return (P2 - gamma * P1) / (1.0 - gamma), 0.0
        if sys == SYS_GLO:
            gamma = (FREQ_G1 / FREQ_G2) ** 2
            return (P2 - gamma * P1) / (1.0 - gamma), 0.0
        if sys == SYS_GAL:
            gamma = (FREQ_L1 / FREQ_E5b) ** 2
            if opt.galileo_fnav:
                P2 -= nav.get_tgd(sat, 0) - nav.get_tgd(sat, 1)
            return (P2 - gamma * P1) / (1.0 - gamma), 0.0
        if sys == SYS_BDS:
            f1 = FREQ_B1I if obs.code[0] == '2I' else FREQ_L1
            gamma = (f1 / FREQ_B2I) ** 2
            b1 = _bds_b1_bias(obs, nav)
            b2 = nav.get_tgd(sat, 1)
            return ((P2 - gamma * P1) - (b2 - gamma * b1)) / (1.0 - gamma), 0.0
        if sys == SYS_IRN:
            gamma = (FREQ_L5 / FREQ_IS) ** 2
            return (P2 - gamma * P1) / (1.0 - gamma), 0.0
        return P1, 0.0

    var = ERR_CBIAS ** 2

    if sys in (SYS_GPS, SYS_QZS):
        return P1 - nav.get_tgd(sat, 0), var
    if sys == SYS_GLO:
        gamma = (FREQ_G1 / FREQ_G2) ** 2
        return P1 - nav.get_tgd(sat, 0) / (gamma - 1.0), var
    if sys == SYS_GAL:
        b1 = nav.get_tgd(sat, 0) if opt.galileo_fnav else nav.get_tgd(sat, 1)
        return P1 - b1, var
    if sys == SYS_BDS:
        return P1 - _bds_b1_bias(obs, nav), var
    if sys == SYS_IRN:
        gamma = (FREQ_IS / FREQ_L5) ** 2
        return P1 - gamma * nav.get_tgd(sat, 0), var
    return P1, var
