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

"""Pseudorange measurement error model"""

import numpy as np

from ..core.constants import EFACT_GLO, EFACT_GPS, EFACT_SBS, MIN_EL, SYS_GLO, SYS_SBS
from ..core.options import IonoOption


def system_factor(sys):
    """Error scale factor of a satellite system"""
    if sys == SYS_GLO:
        return EFACT_GLO
    if sys == SYS_SBS:
        return EFACT_SBS
    return EFACT_GPS


def varerr(opt, el, sys):
    """
    Variance of pseudorange measurement error

    Parameters:
    -----------
    opt : ProcessingOptions
        Options providing the error model ``err`` and ionosphere option
    el : float
        Satellite elevation (rad), floored at 5 deg
    sys : int
        Satellite system

    Returns:
    --------
    float
        Variance (m^2): ``fact^2 * err0^2 * (err1^2 + err2^2 / sin(el))``,
        multiplied by 9 for the ionosphere-free combination
    """
    fact = system_factor(sys)
    el = max(el, MIN_EL)
    varr = opt.err[0] ** 2 * (opt.err[1] ** 2 + opt.err[2] ** 2 / np.sin(el))
    if opt.ionoopt == IonoOption.IFLC:
        varr *= 3.0 ** 2
    return fact ** 2 * varr
