"""data.arc header structures."""

import struct
from dataclasses import asdict, dataclass
from typing import Dict

from .errors import TruncatedData

# data.arc magic number, stored little-endian in the first 8 bytes
ARC_MAGIC = 0xABCDEF9876543210
ARC_MAGIC_SIZE = 0x08

# Node sections whose first field is below this are zstd-compressed
COMPRESSED_DATA_START_LIMIT = 0x100


def _unpack(fmt: struct.Struct, name: str, data: bytes) -> tuple:
    if len(data) < fmt.size:
        raise TruncatedData(name, fmt.size, len(data))
    return fmt.unpack_from(data, 0)


@dataclass(frozen=True)
class ArchiveHeader:
    """Archive header (40 bytes), directly after the magic."""

    SIZE = 0x28
    _FORMAT = struct.Struct("<5Q")

    music_file_section_offset: int
    file_section_offset: int
    music_section_offset: int
    node_section_offset: int
    unk_section_offset: int

    @classmethod
    def from_bytes(cls, data: bytes) -> "ArchiveHeader":
        return cls(*_unpack(cls._FORMAT, "archive_header", data))

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


@dataclass(frozen=True)
class CompressedNodeHeader:
    """Probe read at the node section offset (16 bytes).

    A raw node section starts with its file size, which is always far above
    0x100. A compressed one starts with the offset of its zstd data instead.
    """

    SIZE = 0x10
    _FORMAT = struct.Struct("<4I")

    data_start: int
    decomp_size: int
    comp_size: int
    zstd_comp_size: int

    @property
    def is_compressed(self) -> bool:
        return self.data_start < COMPRESSED_DATA_START_LIMIT

    @classmethod
    def from_bytes(cls, data: bytes) -> "CompressedNodeHeader":
        return cls(*_unpack(cls._FORMAT, "compressed_node_header", data))

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


@dataclass(frozen=True)
class NodeHeader:
    """Raw node section header (68 bytes).

    The counts in here are the only way to find where each table of the
    node section ends.
    """

    SIZE = 0x44
    _FORMAT = struct.Struct("<12IBBH4I")

    file_size: int  # Whole node section, header included
    folder_count: int
    file_count1: int
    tree_count: int

    sub_files1_count: int
    file_lookup_count: int
    hash_folder_count: int
    file_information_count: int

    file_count2: int
    sub_files2_count: int
    unk1: int
    unk2: int

    another_hash_table_size: int  # u8
    unk3: int  # u8
    unk4: int  # u16

    movie_count: int
    part1_count: int
    part2_count: int
    music_file_count: int

    @property
    def total_file_count(self) -> int:
        return self.file_count1 + self.file_count2

    @property
    def payload_size(self) -> int:
        """Size of the node section data following this header."""
        return self.file_size - self.SIZE

    @classmethod
    def from_bytes(cls, data: bytes) -> "NodeHeader":
        return cls(*_unpack(cls._FORMAT, "node_header", data))

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)
