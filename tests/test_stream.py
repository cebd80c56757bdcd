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

import io
import random

import pytest

from tests.zipbuild import deflate
from zipcatalog.errors import ZipCompressionError, ZipEOFError
from zipcatalog.stream import BoundedReader, InflaterReader


def test_bounded_reader_stops_at_limit():
    source = io.BytesIO(b"abcdefghij")
    reader = BoundedReader(source, 4)

    assert reader.read() == b"abcd"
    assert reader.read(10) == b""
    assert reader.remaining == 0
    # the wrapped source is not drained past the limit
    assert source.tell() == 4


def test_bounded_reader_caps_each_read():
    reader = BoundedReader(io.BytesIO(b"abcdefghij"), 4)

    assert reader.read(3) == b"abc"
    assert reader.read(3) == b"d"
    assert reader.read(3) == b""


def test_bounded_reader_short_source():
    reader = BoundedReader(io.BytesIO(b"ab"), 10)

    assert reader.read() == b"ab"
    assert reader.remaining == 0
    assert reader.read() == b""


def test_bounded_reader_zero_limit():
    source = io.BytesIO(b"abc")
    reader = BoundedReader(source, 0)

    assert reader.read() == b""
    assert source.tell() == 0


def test_bounded_reader_close_is_idempotent():
    source = io.BytesIO(b"abc")
    reader = BoundedReader(source, 3)

    reader.close()
    reader.close()

    assert reader.closed
    assert reader.remaining == 0
    assert source.closed


def test_inflater_reader_inflates_raw_deflate():
    data = b"hello zip world " * 500
    reader = InflaterReader(io.BytesIO(deflate(data)))

    assert reader.read() == data


def test_inflater_reader_small_reads():
    data = random.Random(7).randbytes(5000)
    reader = InflaterReader(io.BytesIO(deflate(data)), chunk_size=64)

    chunks = []
    while True:
        chunk = reader.read(33)
        if not chunk:
            break
        assert len(chunk) <= 33
        chunks.append(chunk)

    assert b"".join(chunks) == data


def test_inflater_reader_ignores_bytes_after_stream_end():
    data = b"payload" * 10
    reader = InflaterReader(io.BytesIO(deflate(data) + b"NEXT ENTRY"))

    assert reader.read() == data


def test_inflater_reader_truncated_stream():
    compressed = deflate(random.Random(1).randbytes(4000))
    reader = InflaterReader(io.BytesIO(compressed[: len(compressed) // 2]))

    with pytest.raises(ZipEOFError):
        reader.read()


def test_inflater_reader_corrupt_stream():
    reader = InflaterReader(io.BytesIO(b"\xff" * 32))

    with pytest.raises(ZipCompressionError):
        reader.read()


def test_closing_a_chain_closes_every_layer():
    raw = io.BytesIO(deflate(b"x" * 100))
    inner = BoundedReader(raw, 50)
    inflater = InflaterReader(inner)
    outer = BoundedReader(inflater, 100)

    outer.close()

    assert inflater.closed
    assert inner.closed
    assert raw.closed


def test_outer_bound_limits_inflated_output():
    data = b"0123456789" * 100
    compressed = deflate(data)
    reader = BoundedReader(InflaterReader(BoundedReader(io.BytesIO(compressed), len(compressed))), 25)

    assert reader.read() == data[:25]


@pytest.mark.parametrize("read_size", [1, 7, 100, 257])
def test_inflater_reader_small_reads_of_repetitive_data(read_size):
    data = b"a" * 100000
    compressed = deflate(data)
    reader = BoundedReader(InflaterReader(BoundedReader(io.BytesIO(compressed), len(compressed))), len(data))

    chunks = []
    while True:
        chunk = reader.read(read_size)
        if not chunk:
            break
        chunks.append(chunk)

    assert b"".join(chunks) == data
