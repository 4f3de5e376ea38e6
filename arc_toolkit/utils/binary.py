"""Binary reading utilities for little-endian data.arc data."""

import struct
from io import BytesIO
from typing import BinaryIO, Union


def _require(data: bytes, offset: int, size: int) -> None:
    available = len(data) - offset
    if offset < 0 or available < size:
        raise EOFError(f"Expected {size} bytes at offset {offset}, got {max(available, 0)}")


class BinaryReader:
    """Helper for reading little-endian binary data."""

    def __init__(self, data: Union[bytes, BinaryIO]):
        if isinstance(data, (bytes, bytearray, memoryview)):
            self._stream = BytesIO(data)
        else:
            self._stream = data

    def seek(self, offset: int, whence: int = 0) -> int:
        return self._stream.seek(offset, whence)

    def read(self, size: int = -1) -> bytes:
        return self._stream.read(size)

    def read_bytes(self, size: int) -> bytes:
        data = self._stream.read(size)
        if len(data) < size:
            raise EOFError(f"Expected {size} bytes, got {len(data)}")
        return data

    def read_u64(self) -> int:
        return struct.unpack("<Q", self.read_bytes(8))[0]


def read_u16_le(data: bytes, offset: int = 0) -> int:
    """Read a little-endian 16-bit unsigned integer from bytes."""
    _require(data, offset, 2)
    return struct.unpack_from("<H", data, offset)[0]


def read_u32_le(data: bytes, offset: int = 0) -> int:
    """Read a little-endian 32-bit unsigned integer from bytes."""
    _require(data, offset, 4)
    return struct.unpack_from("<I", data, offset)[0]


def read_u64_le(data: bytes, offset: int = 0) -> int:
    """Read a little-endian 64-bit unsigned integer from bytes."""
    _require(data, offset, 8)
    return struct.unpack_from("<Q", data, offset)[0]


def read_u24_le(data: bytes, offset: int = 0) -> int:
    """Read three bytes as a zero-extended little-endian 32-bit value."""
    _require(data, offset, 3)
    return struct.unpack("<I", bytes(data[offset : offset + 3]) + b"\x00")[0]


def read_u40_le(data: bytes, offset: int = 0) -> int:
    """Read five bytes as a zero-extended little-endian 64-bit value.

    Reading eight bytes directly would pull the following metadata into
    the hash.
    """
    _require(data, offset, 5)
    return struct.unpack("<Q", bytes(data[offset : offset + 5]) + b"\x00\x00\x00")[0]
