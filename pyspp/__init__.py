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

"""
pyspp - GNSS Single Point Positioning

Weighted least squares receiver positioning from code pseudoranges of
GPS, GLONASS, Galileo, BeiDou, QZSS, NavIC and SBAS satellites, with
chi-square/GDOP validation, leave-one-out RAIM fault exclusion and Doppler
velocity estimation. Algorithms follow RTKLIB's point positioning.
"""

__version__ = "1.0.0"
__author__ = "inuex35"
__title__ = "pyspp"
__description__ = "GNSS single point positioning with RAIM and Doppler velocity"

from . import logger  # registers the TRACE level before any module logs
from .core import *
from .coordinate import *
from .gnss import *
