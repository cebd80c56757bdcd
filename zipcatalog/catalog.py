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
Central directory parsing.

read_directory() walks the central directory records in a single pass and
builds an immutable ZipCatalog. The directory may be followed by a digital
signature record, which is skipped, and must end with the end of central
directory record. ZIP64 records are recognised and rejected.
"""

import logging
from typing import BinaryIO

from .constants import (
    CENTRAL_DIR_HEADER,
    DIGITAL_SIGNATURE,
    END_OF_CENTRAL_DIR,
    VERSION_SUPPORTED,
    ZIP64_END_OF_CENTRAL_DIR,
    ZIP64_END_OF_CENTRAL_DIR_LOCATOR,
)
from .cursor import ZipDataReader
from .errors import ZipEOFError, ZipFormatError, ZipUnsupportedFeature
from .locator import ArchiveSource, find_catalog
from .structures import (
    CentralDirectoryHeader,
    ZipCatalog,
    ZipCompressionMethod,
    ZipEntry,
    ZipEntryType,
    decode_name,
    parse_central_directory_header,
    parse_eocd,
)
from .utils import safe_close

logger = logging.getLogger(__name__)


def read_catalog(source: ArchiveSource) -> ZipCatalog:
    """Read the catalog of an archive.

    Args:
        source: Path to a ZIP file, or a seekable binary file-like object
            holding the whole archive. A file-like object is closed once the
            directory has been read.

    Returns:
        The archive's ZipCatalog.
    """
    return read_directory(find_catalog(source))


def read_directory(stream: BinaryIO) -> ZipCatalog:
    """Build a catalog from a stream positioned at the central directory.

    The stream is always closed, whether parsing succeeds or fails.

    Args:
        stream: Readable binary stream positioned at the first central
            directory record (or directly at the EOCD record of an empty
            archive).

    Returns:
        ZipCatalog with every entry in directory order.

    Raises:
        ZipFormatError: If the directory is corrupt or truncated.
        ZipUnsupportedFeature: If the directory uses features beyond
            ZIP 2.0 (later versions, multiple disks, ZIP64 records).
    """
    f = stream if isinstance(stream, ZipDataReader) else ZipDataReader(stream)
    try:
        entries = []
        sig = f.read_uint32()
        while sig == CENTRAL_DIR_HEADER:
            entries.append(_build_entry(parse_central_directory_header(f)))
            sig = f.read_uint32()

        if sig == DIGITAL_SIGNATURE:
            f.skip_exact(f.read_uint16())
            sig = f.read_uint32()

        if sig in (ZIP64_END_OF_CENTRAL_DIR, ZIP64_END_OF_CENTRAL_DIR_LOCATOR):
            raise ZipUnsupportedFeature("64-bit zip records unsupported")

        if sig != END_OF_CENTRAL_DIR:
            raise ZipFormatError(f"Unexpected signature 0x{sig:08x}")

        try:
            comment = parse_eocd(f).comment
        except ZipEOFError:
            # Only the signature is required here
            comment = b""

        catalog = ZipCatalog(entries, comment=comment)
        logger.debug("Read catalog: %r", catalog)
        return catalog
    finally:
        safe_close(f)


def _build_entry(header: CentralDirectoryHeader) -> ZipEntry:
    if header.version > VERSION_SUPPORTED:
        raise ZipUnsupportedFeature("Need a later version to extract")
    if header.disk_num != 0:
        raise ZipUnsupportedFeature("Multi-disk archives not supported")

    name = decode_name(header.filename)
    if name.startswith("/"):
        raise ZipFormatError(f'Leading slash not allowed in file name "{name}"')

    if header.uncompressed_size == 0 and name.endswith("/"):
        entry_type = ZipEntryType.DIRECTORY
    else:
        entry_type = ZipEntryType.FILE

    return ZipEntry(
        name=name,
        comment=decode_name(header.comment),
        offset=header.local_header_offset,
        size=header.uncompressed_size,
        compressed_size=header.compressed_size,
        crc32=header.crc32,
        entry_type=entry_type,
        modification_time=header.date_time,
        compression_method=ZipCompressionMethod(header.compression_method),
        extra=header.extra,
    )
