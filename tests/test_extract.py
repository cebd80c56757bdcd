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

import os
import zipfile

import pytest

from tests.zipbuild import RawEntry, build_archive, make_zip
from zipcatalog.errors import ZipFormatError, ZipUnsupportedFeature
from zipcatalog.extract import extract


def _archive(tmp_path, data):
    path = tmp_path / "archive.zip"
    path.write_bytes(data)
    return path


def test_round_trip(tmp_path):
    files = [
        ("top.txt", b"top level"),
        ("dir/", b""),
        ("dir/inner.txt", b"inside dir " * 100),
        ("deep/nested/path/data.bin", bytes(range(256)) * 8),
        ("empty-dir/", b""),
    ]
    archive = _archive(tmp_path, make_zip(files, compression=zipfile.ZIP_DEFLATED))
    dest = tmp_path / "out"
    dest.mkdir()

    extract(archive, dest)

    for name, data in files:
        target = dest / name
        if name.endswith("/"):
            assert target.is_dir()
        else:
            assert target.read_bytes() == data
    # parents are created even without a directory entry
    assert (dest / "deep" / "nested" / "path").is_dir()


def test_existing_file_replaced(tmp_path):
    archive = _archive(tmp_path, make_zip([("a.txt", b"new")]))
    dest = tmp_path / "out"
    dest.mkdir()
    (dest / "a.txt").write_bytes(b"old content that is longer")

    extract(str(archive), str(dest))

    assert (dest / "a.txt").read_bytes() == b"new"


def test_destination_must_be_directory(tmp_path):
    archive = _archive(tmp_path, make_zip([("a.txt", b"1")]))

    with pytest.raises(NotADirectoryError):
        extract(archive, tmp_path / "missing")


def test_entry_outside_destination_rejected(tmp_path):
    archive = _archive(tmp_path, build_archive([RawEntry(b"../escape.txt", b"evil")]))
    dest = tmp_path / "out"
    dest.mkdir()

    with pytest.raises(ZipFormatError, match="outside"):
        extract(archive, dest)
    assert not (tmp_path / "escape.txt").exists()


def test_failure_aborts_extraction(tmp_path):
    entries = [
        RawEntry(b"first.txt", b"ok"),
        RawEntry(b"second.bin", b"opaque", method=12),
        RawEntry(b"third.txt", b"never written"),
    ]
    archive = _archive(tmp_path, build_archive(entries))
    dest = tmp_path / "out"
    dest.mkdir()

    with pytest.raises(ZipUnsupportedFeature):
        extract(archive, dest)

    assert (dest / "first.txt").read_bytes() == b"ok"
    assert not (dest / "third.txt").exists()


def test_duplicate_names_last_written_wins_on_disk(tmp_path):
    archive = _archive(tmp_path, build_archive([RawEntry(b"same", b"first"), RawEntry(b"same", b"second")]))
    dest = tmp_path / "out"
    dest.mkdir()

    extract(archive, dest)

    assert os.listdir(dest) == ["same"]
    assert (dest / "same").read_bytes() == b"second"


def test_unnamed_file_entry_rejected(tmp_path):
    archive = _archive(tmp_path, build_archive([RawEntry(b"", b"x"), RawEntry(b"b.txt", b"y")]))
    dest = tmp_path / "out"
    dest.mkdir()

    with pytest.raises(ZipFormatError, match="no path below"):
        extract(archive, dest)
    assert dest.is_dir()
