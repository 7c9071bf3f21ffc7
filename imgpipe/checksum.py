"""
ChecksumEngine - CRC32 and MD5 digests over files and byte streams.
"""

import hashlib
import io
import os
import zlib
from dataclasses import dataclass
from typing import BinaryIO, Optional, Union

from .exceptions import ImageIOError


ChecksumSource = Union[str, os.PathLike, bytes, bytearray, memoryview, BinaryIO]


@dataclass(frozen=True)
class Checksums:
    """
    Digests computed in a single pass.

    Attributes:
        crc32: Unsigned 32-bit CRC, or None when not requested
        md5: 16-byte MD5 digest, or None when not requested
        length: Number of bytes consumed
    """
    crc32: Optional[int]
    md5: Optional[bytes]
    length: int


class ChecksumEngine:
    """
    Computes integrity digests, streaming the input in fixed-size chunks.
    """

    DEFAULT_CHUNK_SIZE = 64 * 1024

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE):
        if chunk_size < 1:
            raise ValueError("chunk_size must be positive")
        self.chunk_size = chunk_size

    def crc32(self, source: ChecksumSource) -> int:
        """Return the unsigned CRC32 of the source."""
        return self.compute(source, crc=True, md5=False).crc32

    def md5(self, source: ChecksumSource) -> bytes:
        """Return the 16-byte MD5 digest of the source."""
        return self.compute(source, crc=False, md5=True).md5

    def compute(
        self,
        source: ChecksumSource,
        crc: bool = True,
        md5: bool = True
    ) -> Checksums:
        """
        Compute the requested digests in one pass over the source.

        Args:
            source: File path, binary stream or bytes. Streams are consumed
                to end-of-stream from their current position.
            crc: Compute CRC32
            md5: Compute MD5

        Returns:
            Checksums with the requested digests and the byte count

        Raises:
            ImageIOError: If the source cannot be read
        """
        if isinstance(source, (bytes, bytearray, memoryview)):
            return self._compute_stream(io.BytesIO(source), crc, md5)

        if isinstance(source, (str, os.PathLike)):
            try:
                with open(source, 'rb') as f:
                    return self._compute_stream(f, crc, md5)
            except OSError as e:
                raise ImageIOError(f"Cannot read {os.fspath(source)}: {e}") from e

        return self._compute_stream(source, crc, md5)

    def _compute_stream(self, stream: BinaryIO, crc: bool, md5: bool) -> Checksums:
        crc_value = 0 if crc else None
        digest = hashlib.md5() if md5 else None
        length = 0

        try:
            for chunk in iter(lambda: stream.read(self.chunk_size), b''):
                length += len(chunk)
                if crc_value is not None:
                    crc_value = zlib.crc32(chunk, crc_value)
                if digest is not None:
                    digest.update(chunk)
        except OSError as e:
            if isinstance(e, ImageIOError):
                raise
            raise ImageIOError(f"Cannot read stream: {e}") from e

        return Checksums(
            crc32=crc_value & 0xFFFFFFFF if crc_value is not None else None,
            md5=digest.digest() if digest is not None else None,
            length=length,
        )
