"""Fixed-size records stored in the data.arc node section.

All records are little-endian. Hashes are 40-bit values packed next to
24-bit metadata, so they are rebuilt byte by byte instead of being read as
native integers.
"""

from dataclasses import dataclass

from ..utils.binary import read_u16_le, read_u24_le, read_u32_le, read_u40_le, read_u64_le
from .errors import TruncatedData


def _check_size(record: type, data: bytes, offset: int) -> None:
    """Raise TruncatedData if fewer than record.SIZE bytes follow offset."""
    available = max(len(data) - offset, 0)
    if offset < 0 or available < record.SIZE:
        raise TruncatedData(record.__name__, record.SIZE, available)


@dataclass(frozen=True)
class Pair:
    """40-bit hash + 24-bit metadata (8 bytes)."""

    SIZE = 0x08

    hash: int  # 0x00-0x04
    meta: int  # 0x05-0x07

    @classmethod
    def from_bytes(cls, data: bytes, offset: int = 0) -> "Pair":
        _check_size(cls, data, offset)
        return cls(
            hash=read_u40_le(data, offset),
            meta=read_u24_le(data, offset + 5),
        )

    def __repr__(self) -> str:
        return f"Pair(hash=0x{self.hash:010x}, meta=0x{self.meta:06x})"


@dataclass(frozen=True)
class Triplet:
    """40-bit hash + 24-bit metadata + 32-bit metadata (12 bytes)."""

    SIZE = 0x0C

    hash: int  # 0x00-0x04
    meta: int  # 0x05-0x07
    meta2: int  # 0x08-0x0B

    @classmethod
    def from_bytes(cls, data: bytes, offset: int = 0) -> "Triplet":
        _check_size(cls, data, offset)
        return cls(
            hash=read_u40_le(data, offset),
            meta=read_u24_le(data, offset + 5),
            meta2=read_u32_le(data, offset + 8),
        )

    def __repr__(self) -> str:
        return f"Triplet(hash=0x{self.hash:010x}, meta=0x{self.meta:06x}, meta2=0x{self.meta2:x})"


@dataclass(frozen=True)
class FileIndex:
    """Index into the file table, used by the bulkfile lookup (4 bytes)."""

    SIZE = 0x04

    file_index: int

    @classmethod
    def from_bytes(cls, data: bytes, offset: int = 0) -> "FileIndex":
        _check_size(cls, data, offset)
        return cls(file_index=read_u32_le(data, offset))

    def __repr__(self) -> str:
        return f"FileIndex(0x{self.file_index:x})"


@dataclass(frozen=True)
class FilePair:
    """Size and offset of a music file (16 bytes)."""

    SIZE = 0x10

    size: int
    offset: int

    @classmethod
    def from_bytes(cls, data: bytes, offset: int = 0) -> "FilePair":
        _check_size(cls, data, offset)
        return cls(
            size=read_u64_le(data, offset),
            offset=read_u64_le(data, offset + 8),
        )

    def __repr__(self) -> str:
        return f"FilePair(size=0x{self.size:x}, offset=0x{self.offset:x})"


@dataclass(frozen=True)
class BigHashEntry:
    """Folder entry with its path hashes and first sub-file (52 bytes)."""

    SIZE = 0x34

    path: Pair  # 0x00
    folder: Pair  # 0x08
    parent: Pair  # 0x10
    hash4: Pair  # 0x18
    suboffset_start: int  # 0x20
    file_count: int  # 0x24
    unk3: int  # 0x28
    unk4: int  # 0x2C (u16)
    unk5: int  # 0x2E (u16)
    unk6: int  # 0x30 (u8)
    unk7: int  # 0x31 (u8)
    unk8: int  # 0x32 (u8)
    unk9: int  # 0x33 (u8)

    @classmethod
    def from_bytes(cls, data: bytes, offset: int = 0) -> "BigHashEntry":
        _check_size(cls, data, offset)
        return cls(
            path=Pair.from_bytes(data, offset),
            folder=Pair.from_bytes(data, offset + 0x08),
            parent=Pair.from_bytes(data, offset + 0x10),
            hash4=Pair.from_bytes(data, offset + 0x18),
            suboffset_start=read_u32_le(data, offset + 0x20),
            file_count=read_u32_le(data, offset + 0x24),
            unk3=read_u32_le(data, offset + 0x28),
            unk4=read_u16_le(data, offset + 0x2C),
            unk5=read_u16_le(data, offset + 0x2E),
            unk6=data[offset + 0x30],
            unk7=data[offset + 0x31],
            unk8=data[offset + 0x32],
            unk9=data[offset + 0x33],
        )


@dataclass(frozen=True)
class TreeEntry:
    """File tree entry: path, extension, folder and file hashes (40 bytes)."""

    SIZE = 0x28

    path: Pair  # 0x00
    ext: Pair  # 0x08
    folder: Pair  # 0x10
    file: Pair  # 0x18
    suboffset_index: int  # 0x20
    flags: int  # 0x24

    @classmethod
    def from_bytes(cls, data: bytes, offset: int = 0) -> "TreeEntry":
        _check_size(cls, data, offset)
        return cls(
            path=Pair.from_bytes(data, offset),
            ext=Pair.from_bytes(data, offset + 0x08),
            folder=Pair.from_bytes(data, offset + 0x10),
            file=Pair.from_bytes(data, offset + 0x18),
            suboffset_index=read_u32_le(data, offset + 0x20),
            flags=read_u32_le(data, offset + 0x24),
        )


@dataclass(frozen=True)
class BigFileEntry:
    """Location of a packed file group in the archive (28 bytes)."""

    SIZE = 0x1C

    offset: int  # 0x00 (u64)
    decomp_size: int  # 0x08
    comp_size: int  # 0x0C
    suboffset_index: int  # 0x10
    files: int  # 0x14
    unk3: int  # 0x18

    @classmethod
    def from_bytes(cls, data: bytes, offset: int = 0) -> "BigFileEntry":
        _check_size(cls, data, offset)
        return cls(
            offset=read_u64_le(data, offset),
            decomp_size=read_u32_le(data, offset + 0x08),
            comp_size=read_u32_le(data, offset + 0x0C),
            suboffset_index=read_u32_le(data, offset + 0x10),
            files=read_u32_le(data, offset + 0x14),
            unk3=read_u32_le(data, offset + 0x18),
        )


@dataclass(frozen=True)
class FileEntry:
    """Sub-file location relative to its group (16 bytes)."""

    SIZE = 0x10

    offset: int
    comp_size: int
    decomp_size: int
    flags: int

    @classmethod
    def from_bytes(cls, data: bytes, offset: int = 0) -> "FileEntry":
        _check_size(cls, data, offset)
        return cls(
            offset=read_u32_le(data, offset),
            comp_size=read_u32_le(data, offset + 0x04),
            decomp_size=read_u32_le(data, offset + 0x08),
            flags=read_u32_le(data, offset + 0x0C),
        )


@dataclass(frozen=True)
class HashBucket:
    """Bucket of the file lookup hash table (8 bytes)."""

    SIZE = 0x08

    index: int
    num_entries: int

    @classmethod
    def from_bytes(cls, data: bytes, offset: int = 0) -> "HashBucket":
        _check_size(cls, data, offset)
        return cls(
            index=read_u32_le(data, offset),
            num_entries=read_u32_le(data, offset + 4),
        )
