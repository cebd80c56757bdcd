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
zipcatalog - ZIP catalog reader and streaming entry access.

This library reads the central directory of a ZIP archive without loading
the archive, and exposes each entry's metadata and a streaming view of its
uncompressed data. Only the store and deflate methods are supported.
"""

import logging

from .catalog import read_catalog, read_directory
from .entry import open_entry
from .errors import (
    ZipCompressionError,
    ZipEOFError,
    ZipError,
    ZipFormatError,
    ZipIntegrityError,
    ZipUnsupportedFeature,
)
from .extract import extract
from .locator import find_catalog
from .reader import ZipReader
from .structures import ZipCatalog, ZipCompressionMethod, ZipEntry, ZipEntryType

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "ZipReader",
    "ZipCatalog",
    "ZipEntry",
    "ZipEntryType",
    "ZipCompressionMethod",
    "find_catalog",
    "read_catalog",
    "read_directory",
    "open_entry",
    "extract",
    "ZipError",
    "ZipFormatError",
    "ZipEOFError",
    "ZipUnsupportedFeature",
    "ZipIntegrityError",
    "ZipCompressionError",
]

__version__ = "0.1.0"
