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
Custom exception classes for the zipcatalog library.

This module defines specific exception types for the different ways reading
an archive catalog or an entry's data can fail. I/O errors raised by the
underlying file objects are never wrapped and propagate as ``OSError``.
"""


class ZipError(Exception):
    """Base exception class for all ZIP-related errors."""

    pass


class ZipFormatError(ZipError):
    """Raised when a ZIP file has an invalid format or structure.

    This exception is raised when:
    - The file is too short to hold an end-of-central-directory record
    - No end-of-central-directory record is found within the scan limit
    - A required signature is missing or incorrect
    - Entry counts in the end-of-central-directory record disagree
    - An entry name starts with a slash
    """

    pass


class ZipEOFError(ZipFormatError, EOFError):
    """Raised when a fixed-width or exact-length read runs out of input."""

    pass


class ZipUnsupportedFeature(ZipError):
    """Raised when encountering an unsupported ZIP feature.

    This exception is raised when:
    - The archive spans multiple disks
    - ZIP64 records are present
    - An entry needs a later version to extract
    - Compression method is not store or deflate
    - An entry other than a plain file is opened for reading
    """

    pass


class ZipIntegrityError(ZipError):
    """Raised when a local file header disagrees with the central directory.

    The compression method and the entry name recorded in the local header
    must match the catalog entry byte for byte. A mismatch usually means the
    caller passed a stale entry or a wrong offset.
    """

    pass


class ZipCompressionError(ZipError):
    """Raised when decompression fails.

    This exception is raised when the deflate decompressor rejects the
    compressed data of an entry.
    """

    pass
