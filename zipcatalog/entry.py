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
Opening the data of a single catalog entry.

open_entry() reads the entry's local file header, checks it against the
central directory metadata and returns a stream of the entry's uncompressed
bytes. The stream is built from independent layers, each owning the one
below it:

    STORE:    BoundedReader(raw, compressed_size)
    DEFLATE:  BoundedReader(InflaterReader(BoundedReader(raw, compressed_size)), size)

The inner bound keeps the decompressor inside the entry's compressed region
and the outer bound keeps a damaged stream from yielding more bytes than the
entry declares.
"""

import logging
import os
from typing import BinaryIO

from .constants import LOCAL_FILE_HEADER, VERSION_SUPPORTED
from .cursor import ZipDataReader
from .errors import ZipFormatError, ZipIntegrityError, ZipUnsupportedFeature
from .locator import ArchiveSource
from .stream import BoundedReader, InflaterReader
from .structures import (
    ZipCompressionMethod,
    ZipEntry,
    ZipEntryType,
    decode_name,
    parse_local_file_header,
)
from .utils import safe_close

logger = logging.getLogger(__name__)


def open_entry(source: ArchiveSource, entry: ZipEntry) -> BinaryIO:
    """Open an entry for reading its uncompressed data.

    Args:
        source: Path to the ZIP file, in which case a new file handle is
            opened and positioned at the entry's offset; or a readable binary
            stream already positioned at the entry's local file header.
        entry: Catalog entry to open.

    Returns:
        Readable binary stream yielding the entry's uncompressed bytes.
        Closing it closes the source as well. It supports forward reads only.

    Raises:
        ZipFormatError: If the local file header is missing or truncated.
        ZipIntegrityError: If the local header disagrees with the entry.
        ZipUnsupportedFeature: If the entry is not a plain file or uses an
            unsupported compression method.
    """
    if isinstance(source, (str, os.PathLike)):
        archive = open(source, "rb")
        try:
            archive.seek(entry.offset)
        except Exception:
            safe_close(archive)
            raise
        source = archive

    logger.debug("Opening entry %r at offset %d", entry.name, entry.offset)
    f = source if isinstance(source, ZipDataReader) else ZipDataReader(source)
    try:
        read_local_file(f, entry)
        return _open_data(f, entry)
    except Exception:
        safe_close(f)
        raise


def read_local_file(f: ZipDataReader, entry: ZipEntry) -> None:
    """Read and verify a local file header, leaving f at the entry data.

    The local modification time, CRC-32 and sizes are ignored: the central
    directory is authoritative and writers often leave them zero.

    Raises:
        ZipFormatError: If the signature is wrong or the header is truncated.
        ZipUnsupportedFeature: If the entry needs a later version to extract.
        ZipIntegrityError: If compression method or name do not match.
    """
    sig = f.read_uint32()
    if sig != LOCAL_FILE_HEADER:
        raise ZipFormatError("Corrupted zip entry (local file header signature is incorrect)")

    header = parse_local_file_header(f)
    if header.version > VERSION_SUPPORTED:
        raise ZipUnsupportedFeature("Entry requires a later version to extract")

    method = ZipCompressionMethod(header.compression_method)
    expected_method = entry.compression_method
    if method != expected_method:
        raise ZipIntegrityError(
            f'Compression methods do not match (expected "{expected_method.name}", got "{method.name}")'
        )

    actual_name = decode_name(header.filename)
    if actual_name != entry.name:
        raise ZipIntegrityError(
            f'File names do not match (expected "{entry.name}", got "{actual_name}")'
        )

    f.skip_exact(header.extra_len)


def _open_data(raw: ZipDataReader, entry: ZipEntry) -> BinaryIO:
    if entry.entry_type is not ZipEntryType.FILE:
        raise ZipUnsupportedFeature("Attempt to open a zip entry with an unsupported type")

    method = entry.compression_method
    if method == ZipCompressionMethod.STORE:
        return BoundedReader(raw, entry.compressed_size)
    if method == ZipCompressionMethod.DEFLATE:
        compressed = BoundedReader(raw, entry.compressed_size)
        return BoundedReader(InflaterReader(compressed), entry.size)

    raise ZipUnsupportedFeature(
        f"Unsupported compression method {method.name} ({int(method)})"
    )
