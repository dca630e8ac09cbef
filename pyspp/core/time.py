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

"""GPS time helpers.

All epochs in pyspp are continuous GPS time expressed in seconds since the
GPS epoch (1980-01-06 00:00:00 GPST).
"""

from datetime import datetime, timedelta

GPST0 = datetime(1980, 1, 6)
SECONDS_PER_WEEK = 604800.0


def gps_seconds_to_week_tow(gps_seconds: float) -> tuple:
    """
    Convert GPS seconds to GPS week number and time of week

    Parameters:
    -----------
    gps_seconds : float
        GPS seconds since GPS epoch

    Returns:
    --------
    tuple : (week, tow)
        GPS week number and time of week in seconds
    """
    if gps_seconds < 0:
        raise ValueError(f"GPS seconds cannot be negative: {gps_seconds}")

    week = int(gps_seconds // SECONDS_PER_WEEK)
    tow = gps_seconds - week * SECONDS_PER_WEEK

    return week, tow


def week_tow_to_gps_seconds(week: int, tow: float) -> float:
    """Convert GPS week number and time of week to GPS seconds"""
    if week < 0:
        raise ValueError(f"GPS week cannot be negative: {week}")
    return week * SECONDS_PER_WEEK + tow


def gpst2datetime(gps_seconds: float) -> datetime:
    """Calendar representation of a GPS time (no leap seconds applied)"""
    return GPST0 + timedelta(seconds=gps_seconds)


def time2doy(gps_seconds: float) -> float:
    """Day of year including the fraction of the day (1.0 = Jan 1 00:00)"""
    dt = gpst2datetime(gps_seconds)
    jan1 = datetime(dt.year, 1, 1)
    return (dt - jan1).total_seconds() / 86400.0 + 1.0


def time_str(gps_seconds: float, decimals: int = 3) -> str:
    """Format a GPS time as ``YYYY/MM/DD HH:MM:SS.sss``"""
    dt = gpst2datetime(gps_seconds)
    sec = dt.second + dt.microsecond * 1e-6
    width = 3 + decimals if decimals > 0 else 2
    return f"{dt:%Y/%m/%d %H:%M}:{sec:0{width}.{decimals}f}"
