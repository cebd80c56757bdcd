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
Helpers that build ZIP archives in memory for the tests.

make_zip() uses the standard library writer for well-formed archives.
build_archive() packs the records by hand so tests can produce archives the
standard writer refuses to write: mismatched local headers, unknown methods,
multi-disk markers, ZIP64 trailers and so on.
"""

import io
import struct
import warnings
import zipfile
import zlib
from dataclasses import dataclass
from typing import Optional

DATE_TIME = (2009, 6, 13, 0, 24, 8)

# DOS encoding of DATE_TIME
DOS_DATE = ((2009 - 1980) << 9) | (6 << 5) | 13
DOS_TIME = (0 << 11) | (24 << 5) | (8 // 2)


def make_zip(files, comment: bytes = b"", compression: int = zipfile.ZIP_STORED) -> bytes:
    """Build an archive with the standard library writer.

    Args:
        files: Iterable of (name, data) pairs, written in order.
        comment: Archive comment.
        compression: zipfile compression constant used for every entry.
    """
    buf = io.BytesIO()
    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        with zipfile.ZipFile(buf, "w", compression=compression) as zf:
            for name, data in files:
                info = zipfile.ZipInfo(name, date_time=DATE_TIME)
                info.compress_type = compression
                zf.writestr(info, data)
            zf.comment = comment
    return buf.getvalue()


def deflate(data: bytes) -> bytes:
    compressor = zlib.compressobj(9, zlib.DEFLATED, -zlib.MAX_WBITS)
    return compressor.compress(data) + compressor.flush()


@dataclass
class RawEntry:
    """One entry for build_archive(); fields left as None follow the defaults."""

    name: bytes
    data: bytes = b""
    method: int = 0
    version: int = 20
    disk: int = 0
    comment: bytes = b""
    extra: bytes = b""
    local_name: Optional[bytes] = None
    local_method: Optional[int] = None
    local_version: Optional[int] = None
    local_extra: bytes = b""
    uncompressed_size: Optional[int] = None
    mod_time: int = DOS_TIME
    mod_date: int = DOS_DATE


def local_header(entry: RawEntry, payload: bytes) -> bytes:
    name = entry.name if entry.local_name is None else entry.local_name
    method = entry.method if entry.local_method is None else entry.local_method
    version = entry.version if entry.local_version is None else entry.local_version
    return (
        struct.pack(
            "<IHHHHHIIIHH",
            0x04034B50,
            version,
            0,
            method,
            entry.mod_time,
            entry.mod_date,
            0,
            0,
            0,
            len(name),
            len(entry.local_extra),
        )
        + name
        + entry.local_extra
        + payload
    )


def central_header(entry: RawEntry, payload: bytes, offset: int) -> bytes:
    size = len(entry.data) if entry.uncompressed_size is None else entry.uncompressed_size
    return (
        struct.pack(
            "<IHHHHHHIIIHHHHHII",
            0x02014B50,
            20,
            entry.version,
            0,
            entry.method,
            entry.mod_time,
            entry.mod_date,
            zlib.crc32(entry.data) & 0xFFFFFFFF,
            len(payload),
            size,
            len(entry.name),
            len(entry.extra),
            len(entry.comment),
            entry.disk,
            0,
            0,
            offset,
        )
        + entry.name
        + entry.extra
        + entry.comment
    )


def eocd(
    count: int,
    cd_size: int,
    cd_offset: int,
    comment: bytes = b"",
    disk: int = 0,
    cd_disk: int = 0,
    count_on_disk: Optional[int] = None,
) -> bytes:
    if count_on_disk is None:
        count_on_disk = count
    return (
        struct.pack(
            "<IHHHHIIH",
            0x06054B50,
            disk,
            cd_disk,
            count_on_disk,
            count,
            cd_size,
            cd_offset,
            len(comment),
        )
        + comment
    )


def build_archive(entries, trailer: bytes = b"", comment: bytes = b"", **eocd_fields) -> bytes:
    """Pack entries by hand.

    Entries with method 8 get their data deflated; any other method stores
    the data as given. ``trailer`` is inserted between the last central
    directory record and the end of central directory record.
    """
    body = b""
    directory = b""
    for entry in entries:
        payload = deflate(entry.data) if entry.method == 8 else entry.data
        directory += central_header(entry, payload, len(body))
        body += local_header(entry, payload)
    directory += trailer
    return body + directory + eocd(len(entries), len(directory), len(body), comment, **eocd_fields)


class NonSeekable:
    """Read-only byte source without seek support."""

    def __init__(self, data: bytes):
        self._buffer = io.BytesIO(data)
        self.closed = False

    def read(self, size: int = -1) -> bytes:
        return self._buffer.read(size)

    def close(self) -> None:
        self.closed = True
