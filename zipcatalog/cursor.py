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
Little-endian binary cursor over a readable byte source.

ZipDataReader counts every byte it consumes and offers the fixed-width reads
the ZIP record parsers need. A short fixed-width or exact read raises
ZipEOFError instead of returning partial data.
"""

import io
import struct
from typing import BinaryIO, Optional

from .constants import CHUNK_SIZE
from .errors import ZipEOFError


class ZipDataReader(io.RawIOBase):
    """Sequential little-endian reader that tracks the consumed offset.

    Closing the reader closes the wrapped source.

    Example:
        with ZipDataReader(open("archive.zip", "rb")) as cursor:
            signature = cursor.read_uint32()
    """

    def __init__(self, source: BinaryIO):
        """Wrap a readable binary source.

        Args:
            source: Binary file-like object to read from.
        """
        super().__init__()
        self._source = source
        self._offset = 0

    @property
    def offset(self) -> int:
        """Total number of bytes consumed through this reader."""
        return self._offset

    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return False

    def readinto(self, b) -> int:
        data = self._source.read(len(b))
        if not data:
            return 0
        n = len(data)
        b[:n] = data
        self._offset += n
        return n

    def read_byte(self) -> Optional[int]:
        """Read a single byte.

        Returns:
            The byte value (0-255), or None at end of stream.
        """
        data = self.read(1)
        if not data:
            return None
        return data[0]

    def read_exact(self, size: int) -> bytes:
        """Read exactly 'size' bytes.

        Args:
            size: Number of bytes to read.

        Returns:
            Exactly 'size' bytes of data.

        Raises:
            ZipEOFError: If the source ends before 'size' bytes were read.
        """
        if size < 0:
            raise ValueError(f"Invalid read size: {size} (must be non-negative)")

        chunks = []
        remaining = size
        while remaining > 0:
            chunk = self.read(remaining)
            if not chunk:
                raise ZipEOFError(
                    f"Unexpected end of stream: expected {size} bytes, got {size - remaining}"
                )
            chunks.append(chunk)
            remaining -= len(chunk)
        return b"".join(chunks)

    def read_uint16(self) -> int:
        """Read a little-endian 16-bit unsigned integer."""
        return struct.unpack("<H", self.read_exact(2))[0]

    def read_uint32(self) -> int:
        """Read a little-endian 32-bit unsigned integer."""
        return struct.unpack("<I", self.read_exact(4))[0]

    def read_int64(self) -> int:
        """Read a little-endian 64-bit signed integer."""
        return struct.unpack("<q", self.read_exact(8))[0]

    def skip_exact(self, size: int) -> None:
        """Skip exactly 'size' bytes.

        Seeks forward when the wrapped source supports it, otherwise reads
        and discards.

        Raises:
            ZipEOFError: If the source ends before 'size' bytes were skipped.
        """
        if size < 0:
            raise ValueError(f"Invalid skip size: {size} (must be non-negative)")
        if size == 0:
            return

        if _is_seekable(self._source):
            position = self._source.tell()
            end = self._source.seek(0, io.SEEK_END)
            if position + size > end:
                self._source.seek(end)
                self._offset += end - position
                raise ZipEOFError(
                    f"Unexpected end of stream: cannot skip {size} bytes, {end - position} left"
                )
            self._source.seek(position + size)
            self._offset += size
            return

        remaining = size
        while remaining > 0:
            chunk = self.read(min(remaining, CHUNK_SIZE))
            if not chunk:
                raise ZipEOFError(
                    f"Unexpected end of stream: cannot skip {size} bytes, {size - remaining} skipped"
                )
            remaining -= len(chunk)

    def close(self) -> None:
        if self.closed:
            return
        try:
            self._source.close()
        finally:
            super().close()


def _is_seekable(source: BinaryIO) -> bool:
    seekable = getattr(source, "seekable", None)
    if seekable is None:
        return False
    try:
        return bool(seekable())
    except ValueError:
        # Closed file objects raise instead of answering
        return False
