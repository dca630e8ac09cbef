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

"""GNSS single point positioning.

Key Components:
- Pseudorange code bias correction and ionosphere-free combination
- Ionosphere (Klobuchar) and troposphere (Saastamoinen, MOPS) models
- Weighted least squares position solver with an 8-state clock model
- Chi-square and GDOP validation
- RAIM fault detection and exclusion
- Doppler velocity estimation

Examples:
    >>> from pyspp.gnss import single_point_positioning, satellite_states
    >>> states = satellite_states(obs, ephemeris)
    >>> result = single_point_positioning(obs, nav, ProcessingOptions(raim=True), states)
    >>> if result.ok:
    ...     print(result.solution.rr)
"""

from .atmosphere import AtmosphereDelay, atmosphere_delays, ionocorr, tropcorr
from .ephemeris import EphemerisProvider, satellite_states, satexclude
from .frequency import sat2freq, sat2wavelength
from .ionosphere import IonosphereGrid, klobuchar
from .pseudorange import prange
from .raim import raim_candidate, raim_fde
from .residuals import ResidualSet, rescode
from .simulation import SyntheticEpoch, synthesize_epoch
from .spp import satellite_status, single_point_positioning
from .status import corrected_measurements, measurements_frame, satellite_status_frame
from .troposphere import saastamoinen, sbas_troposphere
from .validation import dops, validate_solution
from .variance import varerr
from .velocity import estimate_velocity
from .wls import estimate_position

__all__ = [
    'AtmosphereDelay',
    'EphemerisProvider',
    'IonosphereGrid',
    'ResidualSet',
    'SyntheticEpoch',
    'atmosphere_delays',
    'corrected_measurements',
    'dops',
    'estimate_position',
    'estimate_velocity',
    'ionocorr',
    'klobuchar',
    'measurements_frame',
    'prange',
    'raim_candidate',
    'raim_fde',
    'rescode',
    'saastamoinen',
    'sat2freq',
    'sat2wavelength',
    'satellite_states',
    'satellite_status',
    'satellite_status_frame',
    'satexclude',
    'sbas_troposphere',
    'single_point_positioning',
    'synthesize_epoch',
    'tropcorr',
    'validate_solution',
    'varerr',
]
