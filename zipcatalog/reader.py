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

from __future__ import annotations

"""
ZIP archive reader implementation.

This module provides the ZipReader class, a convenience wrapper around the
catalog and entry functions for archives stored in files.
"""

import logging
import os
from typing import BinaryIO, Optional, Union

from .catalog import read_catalog
from .entry import open_entry
from .errors import ZipError
from .extract import extract
from .structures import ZipCatalog, ZipEntry

logger = logging.getLogger(__name__)


class ZipReader:
    """Reader for ZIP archives.

    The catalog is read once when the reader is created. Every call to
    open() uses a new file handle, so entries may be read concurrently
    from different threads.

    Example:
        with ZipReader("archive.zip") as z:
            print(z.list())
            with z.open("file.txt") as f:
                data = f.read()
    """

    def __init__(self, file: Union[str, os.PathLike]):
        """Initialize ZipReader with a file path.

        Args:
            file: Path to ZIP file (str or pathlib.Path).

        Raises:
            ZipFormatError: If the file is not a valid ZIP.
            ZipUnsupportedFeature: If the archive uses unsupported features.
        """
        self._path = os.fspath(file)
        self._catalog = read_catalog(self._path)
        self._closed = False
        logger.debug("Opened %s: %r", self._path, self._catalog)

    @property
    def catalog(self) -> ZipCatalog:
        """The archive's catalog."""
        self._check_open()
        return self._catalog

    def _check_open(self) -> None:
        if self._closed:
            raise ZipError("Archive is closed")

    def list(self) -> list[str]:
        """List all entry names in the archive, in directory order.

        Returns:
            List of entry names (files and directories), duplicates included.
        """
        self._check_open()
        return [entry.name for entry in self._catalog.all_entries]

    def infolist(self) -> list[ZipEntry]:
        """Get metadata for every entry, in directory order."""
        self._check_open()
        return list(self._catalog.all_entries)

    def get_info(self, name: str) -> Optional[ZipEntry]:
        """Get metadata for a specific entry.

        Args:
            name: Entry name (must match exactly, including path separators).

        Returns:
            ZipEntry object if found, None otherwise. With duplicate names,
            the first entry in the directory is returned.
        """
        self._check_open()
        return self._catalog.get(name)

    def open(self, name: Union[str, ZipEntry]) -> BinaryIO:
        """Open an entry for reading decompressed data.

        Args:
            name: Entry name or ZipEntry to open.

        Returns:
            Readable binary stream of the entry's uncompressed data. The
            caller must close it.

        Raises:
            ZipError: If the archive is closed.
            KeyError: If entry is not found.
            ZipUnsupportedFeature: If the entry cannot be opened.
            ZipIntegrityError: If the local header disagrees with the catalog.
        """
        self._check_open()

        if isinstance(name, ZipEntry):
            entry = name
        else:
            entry = self._catalog.get(name)
            if entry is None:
                raise KeyError(f"Entry not found: {name}")

        return open_entry(self._path, entry)

    def read(self, name: Union[str, ZipEntry]) -> bytes:
        """Read an entry's whole uncompressed content."""
        with self.open(name) as f:
            return f.read()

    def extractall(self, path: Union[str, os.PathLike]) -> None:
        """Extract all entries into an existing directory."""
        self._check_open()
        extract(self._path, path)

    def close(self) -> None:
        """Close the reader. Streams already opened stay usable."""
        self._closed = True

    def __enter__(self) -> "ZipReader":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.close()
