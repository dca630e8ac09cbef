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

"""Core module of pyspp.

- **Constants**: physical constants, carrier frequencies, system identifiers
  and error-model parameters
- **Satellite Numbering**: unified satellite numbers and ``"G05"`` style ids
- **Data Structures**: observations, satellite states, navigation data,
  solutions and satellite status slots
- **Options**: immutable processing options with YAML/JSON loading
- **Results**: discriminated success/failure result types

Example Usage:
    >>> from pyspp.core import Observation, ProcessingOptions, prn2sat, SYS_GPS
    >>> obs = Observation(time=1.3e9, sat=prn2sat(5, SYS_GPS),
    ...                   P=[21000123.4, 0.0], code=('1C', ''))
    >>> opt = ProcessingOptions(raim=True)
"""

from .constants import *
from .data_structures import *
from .options import (
    EphemerisOption,
    IonoOption,
    PositioningMode,
    ProcessingOptions,
    SnrMask,
    TropOption,
    load_config,
    load_options,
)
from .results import (
    ErrorCategory,
    FailureReason,
    PositionFailure,
    PositionFix,
    SatelliteRejection,
    SppResult,
)
from .satellite_numbering import MAXSAT, id2sat, sat2id
