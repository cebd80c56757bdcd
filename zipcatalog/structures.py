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
ZIP structure definitions and parsing functions.

This module defines dataclasses for the ZIP records the catalog reader
consumes (local file headers, central directory headers and the end of
central directory record), the public entry and catalog types, and the
functions that parse records from a ZipDataReader.

Record parse functions expect the four-byte signature to have been consumed
already, because the callers dispatch on it.
"""

import enum
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Iterator, Mapping, Optional, Sequence

from .cursor import ZipDataReader
from .utils import dos_datetime_to_timestamp


class ZipEntryType(enum.Enum):
    """Kind of a catalog entry."""

    FILE = "file"
    DIRECTORY = "directory"
    # Reserved for kinds signalled through platform specific attributes
    # (symlinks and the like), which are not interpreted.
    OTHER = "other"


class ZipCompressionMethod(enum.IntEnum):
    """Registered ZIP compression method codes.

    Codes that are not registered here map to an UNKNOWN pseudo-member that
    keeps the raw numeric code, so ``ZipCompressionMethod(77).value == 77``.
    """

    STORE = 0
    SHRINK = 1
    REDUCE_1 = 2
    REDUCE_2 = 3
    REDUCE_3 = 4
    REDUCE_4 = 5
    IMPLODE = 6
    DEFLATE = 8
    DEFLATE64 = 9
    BZIP2 = 12
    LZMA = 14
    TERSE = 18
    LZ77 = 19
    WAVPAK = 97
    PPMD = 98

    @classmethod
    def _missing_(cls, value):
        if not isinstance(value, int) or not 0 <= value <= 0xFFFF:
            return None
        member = int.__new__(cls, value)
        member._name_ = "UNKNOWN"
        member._value_ = value
        return member

    @property
    def is_known(self) -> bool:
        """Whether this is a registered method rather than an UNKNOWN code."""
        return self._name_ != "UNKNOWN"


@dataclass
class LocalFileHeader:
    """Local file header structure.

    This header appears before each file's compressed data in the ZIP archive.
    Only the fields needed to cross-check the central directory are kept.
    """

    version: int
    flags: int
    compression_method: int
    mod_time: int
    mod_date: int
    crc32: int
    compressed_size: int
    uncompressed_size: int
    filename_len: int
    extra_len: int
    filename: bytes


@dataclass
class CentralDirectoryHeader:
    """Central directory header structure.

    This header appears in the central directory and contains information
    about a file entry, including a pointer to the local file header.
    """

    version_made_by: int
    version: int
    flags: int
    compression_method: int
    mod_time: int
    mod_date: int
    crc32: int
    compressed_size: int
    uncompressed_size: int
    filename_len: int
    extra_len: int
    comment_len: int
    disk_num: int
    internal_attrs: int
    external_attrs: int
    local_header_offset: int
    filename: bytes
    extra: bytes
    comment: bytes

    @property
    def date_time(self) -> datetime:
        """Get modification date/time as datetime object."""
        return dos_datetime_to_timestamp(self.mod_date, self.mod_time)


@dataclass
class EndOfCentralDirectory:
    """End of Central Directory record.

    This record marks the end of the central directory and contains
    information needed to locate the central directory.
    """

    disk_num: int
    cd_disk: int
    cd_records_on_disk: int
    cd_records_total: int
    cd_size: int
    cd_offset: int
    comment_len: int
    comment: bytes = b""


@dataclass(frozen=True)
class ZipEntry:
    """ZIP entry metadata.

    Built once from a central directory record and never modified. The CRC-32
    is informational only; entry data is never checked against it.
    """

    name: str
    comment: str
    offset: int
    size: int
    compressed_size: int
    crc32: int
    entry_type: ZipEntryType
    modification_time: datetime
    compression_method: ZipCompressionMethod
    extra: bytes = field(default=b"", repr=False)

    @property
    def is_dir(self) -> bool:
        return self.entry_type is ZipEntryType.DIRECTORY

    def __str__(self) -> str:
        return (
            f'Zip Entry: name="{self.name}", compressed size={self.compressed_size}, '
            f"uncompressed size={self.size}, offset={self.offset}, "
            f"type={self.entry_type.name}, method={self.compression_method.name}, "
            f'crc32=0x{self.crc32:08x}, comment="{self.comment}"'
        )


class ZipCatalog:
    """Read-only snapshot of an archive's central directory.

    ``all_entries`` holds every entry in directory order, including unnamed
    entries and duplicates. ``indexed_by_name`` maps each non-empty name to
    its first occurrence; later entries with the same name never replace it.
    """

    def __init__(self, entries: Sequence[ZipEntry], comment: bytes = b""):
        by_name: dict[str, ZipEntry] = {}
        for entry in entries:
            if entry.name and entry.name not in by_name:
                by_name[entry.name] = entry

        self._entries = tuple(entries)
        self._by_name = MappingProxyType(by_name)
        self._comment = comment

    @property
    def all_entries(self) -> tuple[ZipEntry, ...]:
        """All entries in the order they appear in the directory."""
        return self._entries

    @property
    def indexed_by_name(self) -> Mapping[str, ZipEntry]:
        """Named entries, first occurrence wins, in directory order."""
        return self._by_name

    @property
    def comment(self) -> bytes:
        """Archive comment from the end of central directory record."""
        return self._comment

    def get(self, name: str) -> Optional[ZipEntry]:
        return self._by_name.get(name)

    def names(self) -> list[str]:
        return list(self._by_name)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __iter__(self) -> Iterator[ZipEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"<ZipCatalog entries={len(self._entries)} named={len(self._by_name)}>"


def parse_local_file_header(f: ZipDataReader) -> LocalFileHeader:
    """Parse a local file header, signature excluded.

    The extra field is left unread; callers skip it by extra_len.

    Args:
        f: Reader positioned just after a local file header signature.

    Returns:
        LocalFileHeader object.

    Raises:
        ZipEOFError: If the stream is truncated.
    """
    version = f.read_uint16()
    flags = f.read_uint16()
    compression_method = f.read_uint16()
    mod_time = f.read_uint16()
    mod_date = f.read_uint16()
    crc32 = f.read_uint32()
    compressed_size = f.read_uint32()
    uncompressed_size = f.read_uint32()
    filename_len = f.read_uint16()
    extra_len = f.read_uint16()
    filename = f.read_exact(filename_len)

    return LocalFileHeader(
        version=version,
        flags=flags,
        compression_method=compression_method,
        mod_time=mod_time,
        mod_date=mod_date,
        crc32=crc32,
        compressed_size=compressed_size,
        uncompressed_size=uncompressed_size,
        filename_len=filename_len,
        extra_len=extra_len,
        filename=filename,
    )


def parse_central_directory_header(f: ZipDataReader) -> CentralDirectoryHeader:
    """Parse a central directory header, signature excluded.

    Args:
        f: Reader positioned just after a central directory header signature.

    Returns:
        CentralDirectoryHeader object.

    Raises:
        ZipEOFError: If the stream is truncated.
    """
    version_made_by = f.read_uint16()
    version = f.read_uint16()
    flags = f.read_uint16()
    compression_method = f.read_uint16()
    mod_time = f.read_uint16()
    mod_date = f.read_uint16()
    crc32 = f.read_uint32()
    compressed_size = f.read_uint32()
    uncompressed_size = f.read_uint32()
    filename_len = f.read_uint16()
    extra_len = f.read_uint16()
    comment_len = f.read_uint16()
    disk_num = f.read_uint16()
    internal_attrs = f.read_uint16()
    external_attrs = f.read_uint32()
    local_header_offset = f.read_uint32()

    filename = f.read_exact(filename_len)
    extra = f.read_exact(extra_len)
    comment = f.read_exact(comment_len)

    return CentralDirectoryHeader(
        version_made_by=version_made_by,
        version=version,
        flags=flags,
        compression_method=compression_method,
        mod_time=mod_time,
        mod_date=mod_date,
        crc32=crc32,
        compressed_size=compressed_size,
        uncompressed_size=uncompressed_size,
        filename_len=filename_len,
        extra_len=extra_len,
        comment_len=comment_len,
        disk_num=disk_num,
        internal_attrs=internal_attrs,
        external_attrs=external_attrs,
        local_header_offset=local_header_offset,
        filename=filename,
        extra=extra,
        comment=comment,
    )


def parse_eocd(f: ZipDataReader) -> EndOfCentralDirectory:
    """Parse an End of Central Directory record, signature excluded.

    The archive comment is read leniently: a record whose comment length
    runs past the end of the file yields a shorter comment rather than an
    error.

    Args:
        f: Reader positioned just after an EOCD signature.

    Returns:
        EndOfCentralDirectory object.

    Raises:
        ZipEOFError: If the fixed part of the record is truncated.
    """
    disk_num = f.read_uint16()
    cd_disk = f.read_uint16()
    cd_records_on_disk = f.read_uint16()
    cd_records_total = f.read_uint16()
    cd_size = f.read_uint32()
    cd_offset = f.read_uint32()
    comment_len = f.read_uint16()
    comment = f.read(comment_len) if comment_len else b""

    return EndOfCentralDirectory(
        disk_num=disk_num,
        cd_disk=cd_disk,
        cd_records_on_disk=cd_records_on_disk,
        cd_records_total=cd_records_total,
        cd_size=cd_size,
        cd_offset=cd_offset,
        comment_len=comment_len,
        comment=comment or b"",
    )


def decode_name(raw: bytes) -> str:
    """Decode an entry name or comment as ASCII.

    Bytes outside the ASCII range are replaced rather than rejected, so the
    same raw bytes always decode to the same text.
    """
    return raw.decode("ascii", errors="replace")
