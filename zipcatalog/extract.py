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
Extracting a whole archive to a directory.

Directories are created as needed, including parents of files that have no
directory entry of their own. Each entry is opened through its own file
handle and copied in CHUNK_SIZE pieces. Any failure aborts the extraction.
"""

import logging
import os
import shutil
from contextlib import suppress
from typing import Union

from .catalog import read_catalog
from .constants import CHUNK_SIZE
from .entry import open_entry
from .errors import ZipFormatError
from .structures import ZipEntry, ZipEntryType
from .utils import is_within_directory

logger = logging.getLogger(__name__)

PathType = Union[str, os.PathLike]


class _DirectoryMaker:
    """Creates directories below a destination, remembering what exists."""

    def __init__(self, root: str):
        self._root = root
        self._made: set[str] = {root}

    def ensure(self, path: str) -> None:
        if path in self._made:
            return
        os.makedirs(path, exist_ok=True)
        while path not in self._made:
            self._made.add(path)
            parent = os.path.dirname(path)
            if parent == path:
                break
            path = parent


def extract(zip_file: PathType, dest_dir: PathType, chunk_size: int = CHUNK_SIZE) -> None:
    """Extract every file and directory entry of an archive.

    Entry names are used as paths relative to dest_dir. Existing files are
    replaced. Entries of other kinds are skipped.

    Args:
        zip_file: Path to the ZIP file.
        dest_dir: Existing directory to extract into.
        chunk_size: Copy buffer size in bytes.

    Raises:
        NotADirectoryError: If dest_dir is not a directory.
        ZipFormatError: If an entry would be written outside dest_dir, a file
            entry names no path below it, or the archive is malformed.
    """
    dest = os.fspath(dest_dir)
    if not os.path.isdir(dest):
        raise NotADirectoryError(f"Destination is not a directory: {dest}")

    catalog = read_catalog(zip_file)
    dirs = _DirectoryMaker(os.path.realpath(dest))
    for entry in catalog.all_entries:
        if entry.entry_type is ZipEntryType.DIRECTORY:
            dirs.ensure(_target_path(dest, entry))
        elif entry.entry_type is ZipEntryType.FILE:
            _extract_file(zip_file, entry, _target_path(dest, entry), dirs, chunk_size)
        else:
            logger.debug("Skipping entry %r of type %s", entry.name, entry.entry_type.name)


def _target_path(dest: str, entry: ZipEntry) -> str:
    target = os.path.realpath(os.path.join(dest, *entry.name.split("/")))
    if not is_within_directory(dest, target):
        raise ZipFormatError(f"Entry {entry.name!r} would be extracted outside {dest!r}")
    if entry.entry_type is ZipEntryType.FILE and target == os.path.realpath(dest):
        raise ZipFormatError(f"File entry {entry.name!r} has no path below {dest!r}")
    return target


def _extract_file(
    zip_file: PathType,
    entry: ZipEntry,
    target: str,
    dirs: _DirectoryMaker,
    chunk_size: int,
) -> None:
    dirs.ensure(os.path.dirname(target))
    with suppress(FileNotFoundError):
        os.remove(target)

    logger.debug("Extracting %r to %s", entry.name, target)
    with open(target, "wb") as dst:
        with open_entry(zip_file, entry) as src:
            shutil.copyfileobj(src, dst, chunk_size)
