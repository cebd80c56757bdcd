"""
Copyright 2025 DNAi inc.

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

    http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""

"""
Utility functions for the zipcatalog library.

This module provides helpers for DOS date/time conversion, best-effort
resource cleanup and destination path checks.
"""

import logging
import os
from datetime import datetime, timedelta
from typing import Optional

logger = logging.getLogger(__name__)


def dos_datetime_to_timestamp(dos_date: int, dos_time: int) -> datetime:
    """Convert DOS date and time to Python datetime.

    DOS date format (16 bits):
        Bits 0-4: Day (1-31)
        Bits 5-8: Month (1-12)
        Bits 9-15: Year - 1980 (0-127, so 1980-2107)

    DOS time format (16 bits):
        Bits 0-4: Second / 2 (0-29, so 0-58 seconds in 2-second increments)
        Bits 5-10: Minute (0-59)
        Bits 11-15: Hour (0-23)

    Out-of-range hours, minutes, seconds and months are clamped into range.
    The day is not validated: it is applied as an offset from the first day
    of the month, so day 0 or a day past the end of the month rolls over into
    the neighbouring month.

    Args:
        dos_date: DOS date value (16-bit unsigned integer).
        dos_time: DOS time value (16-bit unsigned integer).

    Returns:
        datetime object representing the DOS date/time.
    """
    hour = min(dos_time >> 11, 23)
    minute = min((dos_time >> 5) & 0x3F, 59)
    second = min((dos_time & 0x1F) * 2, 59)

    year = 1980 + (dos_date >> 9)
    month = max(1, min(12, (dos_date >> 5) & 0x0F))
    day = dos_date & 0x1F

    return datetime(year, month, 1, hour, minute, second) + timedelta(days=day - 1)


def safe_close(closeable: Optional[object]) -> None:
    """Close an object, ignoring any I/O error raised while closing.

    Used on error paths so that a failing close never replaces the exception
    that is already propagating.

    Args:
        closeable: Object with a close() method, or None.
    """
    if closeable is None:
        return
    try:
        closeable.close()
    except OSError as e:
        logger.debug("Ignoring error while closing %r: %s", closeable, e)


def is_within_directory(directory: str, target: str) -> bool:
    """Check whether target resolves to a location inside directory.

    Args:
        directory: Base directory.
        target: Path to check.

    Returns:
        True if target is directory itself or lies below it.
    """
    base = os.path.realpath(directory)
    resolved = os.path.realpath(target)
    return os.path.commonpath([base, resolved]) == base
