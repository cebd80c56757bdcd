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
Stream layers used to expose an entry's data.

BoundedReader caps how many bytes may be drawn from a wrapped source and
InflaterReader decompresses a raw deflate stream. Each layer owns the source
it wraps and closes it when it is closed itself, so a chain such as
BoundedReader(InflaterReader(BoundedReader(raw))) is released by closing the
outermost layer.
"""

import io
import zlib
from typing import BinaryIO

from .constants import CHUNK_SIZE
from .errors import ZipCompressionError, ZipEOFError


class BoundedReader(io.RawIOBase):
    """Readable stream that yields at most 'limit' bytes from its source.

    Once the limit is used up every read reports end of stream, even when the
    wrapped source still has data. The source is never read past the limit.
    If the source ends first, the remaining limit drops to zero.
    """

    def __init__(self, source: BinaryIO, limit: int):
        """Wrap a readable source with a byte limit.

        Args:
            source: Binary file-like object to read from.
            limit: Maximum number of bytes to yield.
        """
        if limit < 0:
            raise ValueError(f"Invalid limit: {limit} (must be non-negative)")
        super().__init__()
        self._source = source
        self._remaining = limit

    @property
    def remaining(self) -> int:
        """Number of bytes that may still be read."""
        return self._remaining

    def readable(self) -> bool:
        return True

    def readinto(self, b) -> int:
        if self._remaining == 0 or len(b) == 0:
            return 0
        data = self._source.read(min(len(b), self._remaining))
        if not data:
            self._remaining = 0
            return 0
        n = len(data)
        b[:n] = data
        self._remaining -= n
        return n

    def close(self) -> None:
        if self.closed:
            return
        self._remaining = 0
        try:
            self._source.close()
        finally:
            super().close()


class InflaterReader(io.RawIOBase):
    """Readable stream that inflates raw deflate data from its source.

    The source must carry a bare deflate stream without a zlib or gzip
    envelope, as stored in ZIP entries.
    """

    def __init__(self, source: BinaryIO, chunk_size: int = CHUNK_SIZE):
        """Wrap a readable source of compressed data.

        Args:
            source: Binary file-like object yielding raw deflate data.
            chunk_size: Number of compressed bytes to pull per read.
        """
        super().__init__()
        self._source = source
        self._chunk_size = chunk_size
        self._decompressor = zlib.decompressobj(-zlib.MAX_WBITS)
        self._pending = b""
        self._eof = False

    def readable(self) -> bool:
        return True

    def readinto(self, b) -> int:
        size = len(b)
        if size == 0:
            return 0

        while not self._pending and not self._eof:
            if self._decompressor.eof:
                self._eof = True
                break

            data = self._decompressor.unconsumed_tail
            if not data:
                data = self._source.read(self._chunk_size) or b""

            # With no input left, zlib may still hold output cut off by max_length
            try:
                self._pending = self._decompressor.decompress(data, size)
            except zlib.error as e:
                raise ZipCompressionError(f"Deflate decompression failed: {e}") from e

            if not data and not self._pending and not self._decompressor.eof:
                raise ZipEOFError("Unexpected end of deflate stream")

        chunk = self._pending[:size]
        self._pending = self._pending[size:]
        n = len(chunk)
        b[:n] = chunk
        return n

    def close(self) -> None:
        if self.closed:
            return
        self._pending = b""
        self._eof = True
        try:
            self._source.close()
        finally:
            super().close()
