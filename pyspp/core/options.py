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

"""Processing options for single point positioning.

Options are immutable for the duration of a solve. They can be built in code,
from a dictionary, or loaded from a YAML/JSON file::

    mode: single
    elmin_deg: 10
    ionoopt: brdc
    tropopt: saas
    err: [100.0, 0.003, 0.003, 0.0, 1.0]
    raim: true
    maxgdop: 30
    navsys: [G, R, E, C, J]
    exsats: [G05]
    snrmask:
      enabled: true
      mask: [[35, 35, 35, 35, 35, 35, 35, 35, 35],
             [30, 30, 30, 30, 30, 30, 30, 30, 30]]
    logging:
      default_level: INFO
"""

import json
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from pathlib import Path
from typing import FrozenSet, Tuple, Union

import numpy as np
import yaml

from .constants import D2R, NFREQ, R2D, SYS_ALL, char2sys
from .satellite_numbering import id2sat


class PositioningMode(Enum):
    """Positioning mode of the caller.

    Any mode other than SINGLE uses the point position only as an
    initial estimate, so atmosphere corrections are fixed to broadcast
    ionosphere and Saastamoinen troposphere.
    """
    SINGLE = "single"
    DGPS = "dgps"
    KINEMATIC = "kinematic"
    STATIC = "static"
    PPP_KINEMATIC = "ppp-kinematic"
    PPP_STATIC = "ppp-static"


class IonoOption(Enum):
    """Ionosphere correction option"""
    OFF = "off"
    BRDC = "brdc"        # GPS broadcast (Klobuchar) model
    SBAS = "sbas"        # SBAS grid model
    IFLC = "dual-freq"   # ionosphere-free combination
    EST = "est-stec"     # estimated by the caller, zero here
    TEC = "ionex-tec"    # IONEX TEC map
    QZS = "qzs-brdc"     # QZSS broadcast model


class TropOption(Enum):
    """Troposphere correction option"""
    OFF = "off"
    SAAS = "saas"
    SBAS = "sbas"
    EST = "est-ztd"
    ESTG = "est-ztdgrad"


class EphemerisOption(Enum):
    """Source of satellite ephemeris"""
    BRDC = "brdc"
    PREC = "precise"
    SBAS = "brdc+sbas"
    SSRAPC = "brdc+ssrapc"
    SSRCOM = "brdc+ssrcom"


SNR_BINS = 9


@dataclass(frozen=True)
class SnrMask:
    """Elevation dependent minimum SNR per frequency slot.

    ``mask[slot]`` holds the minimum SNR (dB-Hz) at elevations of
    5, 15, ..., 85 degrees; values in between are interpolated linearly.
    """
    enabled: bool = False
    mask: Tuple[Tuple[float, ...], ...] = tuple((0.0,) * SNR_BINS for _ in range(NFREQ))

    def __post_init__(self):
        mask = tuple(tuple(float(v) for v in row) for row in self.mask)
        if len(mask) < NFREQ or any(len(row) != SNR_BINS for row in mask):
            raise ValueError(f"SNR mask needs {NFREQ} rows of {SNR_BINS} values")
        object.__setattr__(self, 'mask', mask)

    def min_snr(self, slot: int, el: float) -> float:
        """Interpolated SNR threshold for a slot at elevation ``el`` (rad)"""
        a = (el * R2D + 5.0) / 10.0
        i = int(np.floor(a))
        a -= i
        row = self.mask[slot]
        if i < 1:
            return row[0]
        if i > 8:
            return row[8]
        return (1.0 - a) * row[i - 1] + a * row[i]

    def rejects(self, slot: int, el: float, snr: float) -> bool:
        """True when ``snr`` is below the mask; always False when disabled"""
        if not self.enabled or slot < 0 or slot >= NFREQ:
            return False
        return snr < self.min_snr(slot, el)


@dataclass(frozen=True)
class ProcessingOptions:
    """Immutable options of one single point positioning call.

    Attributes
    ----------
    mode : PositioningMode
        Caller positioning mode
    elmin : float
        Elevation mask (rad)
    ionoopt : IonoOption
        Ionosphere correction
    tropopt : TropOption
        Troposphere correction
    err : tuple
        Error model ``(factor, base, elevation, baseline, doppler)``: the first
        three feed the code variance model in meters, the last one is the
        Doppler error in Hz
    sateph : EphemerisOption
        Ephemeris source; SBAS marks accepted solutions as SOLQ_SBAS
    raim : bool
        Enable RAIM fault detection and exclusion
    maxgdop : float
        Maximum acceptable GDOP
    snrmask : SnrMask
        SNR mask
    navsys : int
        Bit mask of enabled systems (SYS_GPS | SYS_GAL ...)
    exsats : frozenset
        Satellite numbers always excluded
    incsats : frozenset
        Satellite numbers always included, even when flagged unhealthy
    galileo_fnav : bool
        Galileo group delays refer to F/NAV (E1-E5a) instead of I/NAV
    """
    mode: PositioningMode = PositioningMode.SINGLE
    elmin: float = 15.0 * D2R
    ionoopt: IonoOption = IonoOption.BRDC
    tropopt: TropOption = TropOption.SAAS
    err: Tuple[float, ...] = (100.0, 0.003, 0.003, 0.0, 1.0)
    sateph: EphemerisOption = EphemerisOption.BRDC
    raim: bool = False
    maxgdop: float = 30.0
    snrmask: SnrMask = field(default_factory=SnrMask)
    navsys: int = SYS_ALL
    exsats: FrozenSet[int] = frozenset()
    incsats: FrozenSet[int] = frozenset()
    galileo_fnav: bool = False

    def __post_init__(self):
        err = tuple(float(v) for v in self.err)
        if len(err) != 5:
            raise ValueError(f"err needs 5 values, got {len(err)}")
        object.__setattr__(self, 'err', err)
        object.__setattr__(self, 'exsats', frozenset(self.exsats))
        object.__setattr__(self, 'incsats', frozenset(self.incsats))

    def updated(self, **changes) -> "ProcessingOptions":
        """Copy of the options with some fields replaced"""
        return replace(self, **changes)

    def effective(self) -> "ProcessingOptions":
        """Options actually used by the point positioning.

        Non-single modes force broadcast ionosphere and Saastamoinen
        troposphere.
        """
        if self.mode == PositioningMode.SINGLE:
            return self
        return replace(self, ionoopt=IonoOption.BRDC, tropopt=TropOption.SAAS)

    @classmethod
    def from_dict(cls, config: dict) -> "ProcessingOptions":
        """Build options from a configuration dictionary.

        Enum fields accept their string values, ``elmin_deg`` sets the
        elevation mask in degrees, ``navsys`` accepts a list of system
        characters and ``exsats``/``incsats`` accept satellite ids.
        An optional ``logging`` section is ignored here.

        Raises
        ------
        ValueError
            On unknown keys or invalid values
        """
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in config.items():
            if key == 'logging':
                continue
            if key == 'elmin_deg':
                kwargs['elmin'] = float(value) * D2R
            elif key not in known:
                raise ValueError(f"Unknown processing option: {key}")
            elif key == 'mode':
                kwargs[key] = PositioningMode(value)
            elif key == 'ionoopt':
                kwargs[key] = IonoOption(value)
            elif key == 'tropopt':
                kwargs[key] = TropOption(value)
            elif key == 'sateph':
                kwargs[key] = EphemerisOption(value)
            elif key == 'snrmask':
                kwargs[key] = SnrMask(**value)
            elif key == 'navsys':
                kwargs[key] = _parse_navsys(value)
            elif key in ('exsats', 'incsats'):
                kwargs[key] = frozenset(_parse_sat(s) for s in value)
            elif key in ('elmin', 'maxgdop'):
                kwargs[key] = float(value)
            elif key in ('raim', 'galileo_fnav'):
                kwargs[key] = bool(value)
            else:
                kwargs[key] = value
        return cls(**kwargs)


def _parse_navsys(value) -> int:
    if isinstance(value, int):
        return value
    navsys = 0
    for char in value:
        sys = char2sys(char)
        if not sys:
            raise ValueError(f"Unknown navigation system: {char}")
        navsys |= sys
    return navsys


def _parse_sat(value) -> int:
    if isinstance(value, int):
        return value
    sat = id2sat(value)
    if not sat:
        raise ValueError(f"Invalid satellite id: {value}")
    return sat


def load_config(filepath: Union[str, Path]) -> dict:
    """Read a YAML or JSON configuration file into a dictionary.

    Raises
    ------
    ValueError
        If the file format is not supported
    FileNotFoundError
        If the file doesn't exist
    """
    filepath = Path(filepath)

    if filepath.suffix in ['.yaml', '.yml']:
        with open(filepath) as f:
            data = yaml.safe_load(f)
    elif filepath.suffix == '.json':
        with open(filepath) as f:
            data = json.load(f)
    else:
        raise ValueError(f"Unsupported file format: {filepath.suffix}")

    return data or {}


def load_options(filepath: Union[str, Path],
                 configure_logging: bool = True) -> ProcessingOptions:
    """Load processing options from a YAML or JSON file.

    When ``configure_logging`` is set and the file has a ``logging``
    section, it is forwarded to :func:`pyspp.logger.setup_logger_from_config`.
    """
    data = load_config(filepath)
    if configure_logging and data.get('logging'):
        from ..logger import setup_logger_from_config
        setup_logger_from_config(data['logging'])
    return ProcessingOptions.from_dict(data)
