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
Locating the central directory of a ZIP archive.

The end of central directory (EOCD) record sits at the very end of the file,
followed only by an optional comment of up to 65535 bytes. Its position is
therefore unknown until its signature has been found. find_catalog() checks
the no-comment position first and then scans backward through windows that
grow by EOCD_SCAN_GROWTH each attempt, never rescanning bytes it has already
looked at and never looking further back than the largest legal record.

Known limitation: a comment that itself contains the EOCD signature is not
disambiguated. Windows are scanned from the end of the file inward and the
first match found wins.
"""

import io
import logging
import os
from typing import BinaryIO, Optional, Union

from .constants import (
    END_OF_CENTRAL_DIR,
    END_OF_CENTRAL_DIR_SIZE,
    EOCD_SCAN_GROWTH,
    EOCD_SCAN_INITIAL,
    EOCD_SCAN_MAX,
)
from .cursor import ZipDataReader
from .errors import ZipEOFError, ZipFormatError, ZipUnsupportedFeature
from .structures import EndOfCentralDirectory, parse_eocd
from .utils import safe_close

logger = logging.getLogger(__name__)

ArchiveSource = Union[str, os.PathLike, BinaryIO]


def find_catalog(source: ArchiveSource) -> ZipDataReader:
    """Find the central directory of an archive.

    Args:
        source: Path to a ZIP file, or a seekable binary file-like object
            holding the whole archive.

    Returns:
        ZipDataReader positioned at the first central directory record. The
        reader owns the underlying file and closes it when closed.

    Raises:
        ZipFormatError: If no valid EOCD record can be found or it is
            inconsistent.
        ZipUnsupportedFeature: If the archive spans multiple disks.
    """
    if isinstance(source, (str, os.PathLike)):
        f = open(source, "rb")
        owned = True
    else:
        f = source
        owned = False

    try:
        cursor = _find_catalog(f)
    except Exception:
        if owned:
            safe_close(f)
        raise
    return cursor


def _find_catalog(f: BinaryIO) -> ZipDataReader:
    length = f.seek(0, io.SEEK_END)
    if length < END_OF_CENTRAL_DIR_SIZE:
        raise ZipFormatError(
            "The provided file is too short to hold even one end-of-central-directory record"
        )

    eocd_pos = locate_eocd(f, length)
    if eocd_pos is None:
        raise ZipFormatError("No directory found")

    # Parse from a copy so the probe reader never owns the archive file
    f.seek(eocd_pos + 4)
    record = f.read(length - eocd_pos - 4)
    eocd = parse_eocd(ZipDataReader(io.BytesIO(record)))
    _check_eocd(eocd, eocd_pos)

    logger.debug(
        "EOCD at offset %d, %d entries, directory at offset %d",
        eocd_pos,
        eocd.cd_records_total,
        eocd.cd_offset,
    )
    f.seek(eocd.cd_offset)
    return ZipDataReader(f)


def _check_eocd(eocd: EndOfCentralDirectory, eocd_pos: int) -> None:
    if eocd.disk_num != 0 or eocd.cd_disk != 0:
        raise ZipUnsupportedFeature("Multi-disk zips not supported")
    if eocd.cd_records_on_disk != eocd.cd_records_total:
        raise ZipFormatError("Entry count inconsistency in end-of-directory record")
    if eocd.cd_offset > eocd_pos:
        raise ZipFormatError(
            f"Invalid central directory offset: {eocd.cd_offset} "
            f"(end of central directory at {eocd_pos})"
        )


def locate_eocd(f: BinaryIO, length: int) -> Optional[int]:
    """Find the offset of the EOCD signature in a seekable file.

    Args:
        f: Seekable binary file-like object.
        length: Total length of the file in bytes.

    Returns:
        Absolute offset of the EOCD signature, or None if it was not found
        within the last EOCD_SCAN_MAX bytes.
    """
    if length < END_OF_CENTRAL_DIR_SIZE:
        return None

    # Fast path: no archive comment
    scanned = END_OF_CENTRAL_DIR_SIZE
    pos = _scan_window(f, length - scanned, 0)
    if pos is not None:
        return pos

    window = EOCD_SCAN_INITIAL
    while True:
        start = max(0, length - window)
        # Only the start positions this window newly exposes are tested
        pos = _scan_window(f, start, length - scanned - start)
        if pos is not None:
            logger.debug("EOCD signature found scanning %d bytes from the end", window)
            return pos
        if start == 0 or window >= EOCD_SCAN_MAX:
            return None
        scanned = window
        window = min(window * EOCD_SCAN_GROWTH, EOCD_SCAN_MAX)


def _scan_window(f: BinaryIO, start: int, limit: int) -> Optional[int]:
    """Look for the EOCD signature at start, start + 1, ..., start + limit.

    The signature is matched with a rolling four-byte little-endian value
    that shifts in one byte per position.
    """
    f.seek(start)
    data = f.read(limit + 4)
    if len(data) < limit + 4:
        raise ZipEOFError(
            f"Short read while scanning for the end of central directory at offset {start}"
        )

    sig = int.from_bytes(data[:4], "little")
    for i in range(limit + 1):
        if sig == END_OF_CENTRAL_DIR:
            return start + i
        if i < limit:
            sig = (sig >> 8) | (data[i + 4] << 24)
    return None
