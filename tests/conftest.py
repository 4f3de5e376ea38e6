"""Shared byte builders for data.arc tests."""

import struct

import pytest

ARC_MAGIC_BYTES = struct.pack("<Q", 0xABCDEF9876543210)
PREFIX_SIZE = 0x30  # magic + archive header
NODE_HEADER_SIZE = 0x44
MIN_RAW_PAYLOAD = 0x100 - NODE_HEADER_SIZE

NODE_HEADER_FIELDS = [
    "file_size",
    "folder_count",
    "file_count1",
    "tree_count",
    "sub_files1_count",
    "file_lookup_count",
    "hash_folder_count",
    "file_information_count",
    "file_count2",
    "sub_files2_count",
    "unk1",
    "unk2",
    "another_hash_table_size",
    "unk3",
    "unk4",
    "movie_count",
    "part1_count",
    "part2_count",
    "music_file_count",
]


def build_node_header(payload_size: int = 0, **fields) -> bytes:
    """Create a raw 68-byte node header.

    file_size defaults to the header plus `payload_size` bytes.
    """
    values = dict.fromkeys(NODE_HEADER_FIELDS, 0)
    values["file_size"] = NODE_HEADER_SIZE + payload_size
    values.update(fields)
    return struct.pack("<12IBBH4I", *(values[name] for name in NODE_HEADER_FIELDS))


def build_archive(node_section: bytes, node_offset: int = PREFIX_SIZE) -> bytes:
    """Create a minimal archive with every header offset at the node section."""
    header = struct.pack("<5Q", *([node_offset] * 5))
    padding = b"\x00" * (node_offset - PREFIX_SIZE)
    return ARC_MAGIC_BYTES + header + padding + node_section


def build_raw_node_section(payload: bytes = b"", **counts) -> bytes:
    """Create a raw node section: header plus zero-padded payload.

    Node sections under 0x100 bytes would be taken for compressed ones, so
    the payload is padded up to that size.
    """
    payload = payload.ljust(MIN_RAW_PAYLOAD, b"\x00")
    return build_node_header(len(payload), **counts) + payload


def build_raw_archive(payload: bytes = b"", **counts) -> bytes:
    """Create an archive with a raw node section holding `payload`."""
    return build_archive(build_raw_node_section(payload, **counts))


@pytest.fixture
def make_node_header():
    return build_node_header


@pytest.fixture
def make_archive():
    return build_archive


@pytest.fixture
def make_raw_node_section():
    return build_raw_node_section


@pytest.fixture
def make_raw_archive():
    return build_raw_archive
