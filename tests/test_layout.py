"""Tests for the node section layout resolver."""

import struct

import pytest

from arc_toolkit.arc.errors import TruncatedData
from arc_toolkit.arc.header import NodeHeader
from arc_toolkit.arc.layout import SECTION_NAMES, resolve
from arc_toolkit.arc.records import FileEntry, HashBucket, Pair, TreeEntry, Triplet

# Counts giving one or more entries in every header-driven section
COUNTS = dict(
    movie_count=1,
    part1_count=2,
    part2_count=1,
    music_file_count=1,
    another_hash_table_size=1,
    folder_count=1,
    file_count1=1,
    file_count2=1,
    hash_folder_count=1,
    tree_count=1,
    sub_files1_count=1,
    sub_files2_count=2,
    file_lookup_count=3,
)

# Bytes taken by the header-driven sections for COUNTS
HEADER_SECTIONS_SIZE = 12 + 8 * 2 + 12 * 2 + 4 + 16 + 12 + 52 + 28 * 2 + 8 + 40 + 16 + 16 * 2 + 8


@pytest.fixture
def node_header(make_node_header):
    def factory(**counts) -> NodeHeader:
        return NodeHeader.from_bytes(make_node_header(**counts))

    return factory


def bucket_table(num_entries: int, index: int = 0) -> bytes:
    """Bucket header followed by `num_entries` buckets."""
    data = struct.pack("<II", index, num_entries)
    for i in range(num_entries):
        data += struct.pack("<II", i, i + 10)
    return data


def full_buffer(numbers: bytes = b"") -> bytes:
    """Buffer matching COUNTS with two buckets and the given numbers region."""
    return b"\x00" * HEADER_SECTIONS_SIZE + bucket_table(2) + b"\x11" * 24 + numbers


class TestResolveEmpty:
    def test_all_counts_zero(self, node_header):
        layout = resolve(b"", node_header())

        assert layout.names() == SECTION_NAMES
        assert len(layout) == 16
        for section in layout:
            assert section.offset == 0
            assert section.length == 0
            assert section.count == 0
            assert section.first() is None
        assert layout.consumed == 0
        assert layout.hash_bucket is None

    def test_nonzero_lookup_count_needs_bytes(self, node_header):
        with pytest.raises(TruncatedData) as exc_info:
            resolve(b"", node_header(file_lookup_count=1))
        assert exc_info.value.section == "file_lookup"
        assert exc_info.value.needed == 8
        assert exc_info.value.available == 0


class TestResolvePartition:
    def test_sections_are_contiguous(self, node_header):
        buffer = full_buffer(numbers=b"\x22" * 16)
        layout = resolve(buffer, node_header(**COUNTS))

        position = 0
        for section in layout:
            assert section.offset == position
            position = section.end
        assert position == len(buffer)
        assert layout.consumed == len(buffer)

    def test_section_lengths(self, node_header):
        layout = resolve(full_buffer(), node_header(**COUNTS))

        expected = {
            "bulkfile_category_info": 12,
            "bulkfile_hash_lookup": 16,
            "bulkfiles_by_name": 24,
            "bulkfile_lookup_to_fileidx": 4,
            "file_pairs": 16,
            "another_hash_table": 12,
            "big_hashes": 52,
            "big_files": 56,
            "folder_hash_lookup": 8,
            "trees": 40,
            "sub_files1": 16,
            "sub_files2": 32,
            "folder_to_big_hash": 8,
            "file_lookup_buckets": 24,
            "file_lookup": 24,
            "numbers": 0,
        }
        assert {section.name: section.length for section in layout} == expected

    def test_header_counts_fill_buffer_exactly(self, node_header):
        counts = dict(COUNTS, file_lookup_count=0)
        layout = resolve(b"\x00" * HEADER_SECTIONS_SIZE, node_header(**counts))

        assert layout["folder_to_big_hash"].end == HEADER_SECTIONS_SIZE
        assert layout["file_lookup_buckets"].length == 0
        assert layout["numbers"].length == 0

    def test_numbers_keeps_partial_record(self, node_header):
        buffer = full_buffer(numbers=b"\x22" * 19)
        numbers = resolve(buffer, node_header(**COUNTS))["numbers"]

        assert numbers.length == 19
        assert numbers.count == 2
        assert numbers.end == len(buffer)

    def test_views_share_buffer_contents(self, node_header):
        layout = resolve(full_buffer(), node_header(**COUNTS))
        assert layout["file_lookup"].tobytes() == b"\x11" * 24


class TestHashBuckets:
    def test_bucket_table_length_from_data(self, node_header):
        buffer = b"\x00" * HEADER_SECTIONS_SIZE + bucket_table(4, index=9) + b"\x11" * 24
        layout = resolve(buffer, node_header(**COUNTS))

        buckets = layout["file_lookup_buckets"]
        assert layout.hash_bucket == HashBucket(index=9, num_entries=4)
        assert buckets.length == 8 * 5
        assert buckets.count == 5
        assert buckets[1] == HashBucket(index=0, num_entries=10)
        assert layout["file_lookup"].offset == buckets.end

    def test_partial_bucket_header(self, node_header):
        buffer = b"\x00" * HEADER_SECTIONS_SIZE + b"\x01\x02\x03"
        with pytest.raises(TruncatedData) as exc_info:
            resolve(buffer, node_header(**COUNTS))

        assert exc_info.value.section == "file_lookup_buckets"
        assert exc_info.value.needed == 8
        assert exc_info.value.available == 3

    def test_bucket_count_overflows(self, node_header):
        buffer = b"\x00" * HEADER_SECTIONS_SIZE + bucket_table(0)[:4] + struct.pack("<I", 1000)
        with pytest.raises(TruncatedData) as exc_info:
            resolve(buffer, node_header(**COUNTS))

        assert exc_info.value.section == "file_lookup_buckets"
        assert exc_info.value.needed == 8 * 1001
        assert exc_info.value.available == 8


class TestTruncation:
    def test_first_overflowing_section_is_reported(self, node_header):
        with pytest.raises(TruncatedData) as exc_info:
            resolve(b"\x00" * 100, node_header(tree_count=1000, sub_files1_count=1000))

        assert exc_info.value.section == "trees"
        assert exc_info.value.needed == 40 * 1000
        assert exc_info.value.available == 100

    def test_overflow_after_earlier_sections(self, node_header):
        # 12 bytes of category info leave 10 for the big hash entry
        with pytest.raises(TruncatedData) as exc_info:
            resolve(b"\x00" * 22, node_header(movie_count=1, folder_count=1))

        assert exc_info.value.section == "big_hashes"
        assert exc_info.value.needed == 52
        assert exc_info.value.available == 10

    def test_summed_file_counts(self, node_header):
        with pytest.raises(TruncatedData) as exc_info:
            resolve(b"\x00" * 28, node_header(file_count1=1, file_count2=1))
        assert exc_info.value.section == "big_files"
        assert exc_info.value.needed == 56


class TestSectionView:
    def test_typed_entries(self, node_header):
        buffer = bytearray(full_buffer())
        trees_offset = 12 + 16 + 24 + 4 + 16 + 12 + 52 + 56 + 8
        buffer[0:12] = bytes([1, 2, 3, 4, 5, 6, 7, 8, 9, 0, 0, 0])
        buffer[trees_offset + 0x24 : trees_offset + 0x28] = struct.pack("<I", 0xF00D)

        layout = resolve(bytes(buffer), node_header(**COUNTS))

        category = layout["bulkfile_category_info"]
        assert category.record_type is Triplet
        assert category.first() == Triplet(hash=0x0504030201, meta=0x080706, meta2=9)

        trees = layout["trees"]
        assert trees.offset == trees_offset
        assert isinstance(trees.first(), TreeEntry)
        assert trees.first().flags == 0xF00D

    def test_iteration_and_limits(self, node_header):
        layout = resolve(full_buffer(), node_header(**COUNTS))
        sub_files2 = layout["sub_files2"]

        assert len(sub_files2) == 2
        assert all(isinstance(entry, FileEntry) for entry in sub_files2)
        assert len(list(sub_files2.entries(limit=1))) == 1
        assert list(layout["file_lookup"].entries(limit=10)) == [Pair(0x1111111111, 0x111111)] * 3

    def test_negative_index(self, node_header):
        layout = resolve(full_buffer(), node_header(**COUNTS))
        assert layout["file_lookup_buckets"][-1] == HashBucket(index=1, num_entries=11)

    def test_index_out_of_range(self, node_header):
        layout = resolve(full_buffer(), node_header(**COUNTS))
        with pytest.raises(IndexError):
            layout["trees"][1]

    def test_unknown_section(self, node_header):
        layout = resolve(b"", node_header())
        assert "nope" not in layout
        assert layout.get("nope") is None
        with pytest.raises(KeyError):
            layout["nope"]


class TestObserver:
    def test_callback_sees_sections_in_order(self, node_header):
        seen = []
        resolve(full_buffer(), node_header(**COUNTS), on_section=lambda view: seen.append(view.name))
        assert seen == SECTION_NAMES

    def test_callback_stops_at_failure(self, node_header):
        seen = []
        with pytest.raises(TruncatedData):
            resolve(b"", node_header(part2_count=1), on_section=lambda view: seen.append(view.name))
        assert seen == ["bulkfile_category_info", "bulkfile_hash_lookup", "bulkfiles_by_name"]
