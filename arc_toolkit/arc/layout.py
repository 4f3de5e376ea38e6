"""Section layout of the data.arc node section.

The node section stores its tables back to back without any offsets. The
only way to find where a table starts is to add up the sizes of every table
before it, using the counts from the NodeHeader. This makes resolution a
single forward pass: an error in one count moves every later boundary.

One table breaks the pattern. The size of the file lookup bucket table is
stored in its own first bucket, so it has to be read from the buffer before
the boundary after it is known.
"""

from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Tuple, Union

from .errors import TruncatedData
from .header import NodeHeader
from .records import (
    BigFileEntry,
    BigHashEntry,
    FileEntry,
    FileIndex,
    FilePair,
    HashBucket,
    Pair,
    TreeEntry,
    Triplet,
)

Record = Union[
    Pair, Triplet, FileIndex, FilePair, BigHashEntry, TreeEntry, BigFileEntry, FileEntry, HashBucket
]

# (section name, record type, entry count from the node header), in file order
HEADER_SECTIONS: List[Tuple[str, type, Callable[[NodeHeader], int]]] = [
    ("bulkfile_category_info", Triplet, lambda h: h.movie_count),
    ("bulkfile_hash_lookup", Pair, lambda h: h.part1_count),
    ("bulkfiles_by_name", Triplet, lambda h: h.part1_count),
    ("bulkfile_lookup_to_fileidx", FileIndex, lambda h: h.part2_count),
    ("file_pairs", FilePair, lambda h: h.music_file_count),
    ("another_hash_table", Triplet, lambda h: h.another_hash_table_size),
    ("big_hashes", BigHashEntry, lambda h: h.folder_count),
    ("big_files", BigFileEntry, lambda h: h.total_file_count),
    ("folder_hash_lookup", Pair, lambda h: h.hash_folder_count),
    ("trees", TreeEntry, lambda h: h.tree_count),
    ("sub_files1", FileEntry, lambda h: h.sub_files1_count),
    ("sub_files2", FileEntry, lambda h: h.sub_files2_count),
    ("folder_to_big_hash", Pair, lambda h: h.folder_count),
]

FILE_LOOKUP_BUCKETS = "file_lookup_buckets"
FILE_LOOKUP = "file_lookup"
NUMBERS = "numbers"

SECTION_NAMES = [name for name, _, _ in HEADER_SECTIONS] + [
    FILE_LOOKUP_BUCKETS,
    FILE_LOOKUP,
    NUMBERS,
]


@dataclass(frozen=True)
class SectionView:
    """A typed byte range inside the node section buffer."""

    name: str
    record_type: type
    offset: int  # Relative to the start of the node section payload
    length: int
    count: int
    data: memoryview

    @property
    def end(self) -> int:
        return self.offset + self.length

    @property
    def entry_size(self) -> int:
        return self.record_type.SIZE

    def entry(self, index: int) -> Record:
        """Decode entry `index` of this section."""
        if index < 0:
            index += self.count
        if not 0 <= index < self.count:
            raise IndexError(f"{self.name}: entry {index} out of range (count={self.count})")
        return self.record_type.from_bytes(self.data, index * self.entry_size)

    def first(self) -> Optional[Record]:
        """Decode the first entry, or None if the section is empty."""
        if self.count == 0:
            return None
        return self.entry(0)

    def entries(self, limit: Optional[int] = None) -> Iterator[Record]:
        """Iterate over decoded entries, stopping after `limit` if given."""
        count = self.count if limit is None else min(limit, self.count)
        for i in range(count):
            yield self.entry(i)

    def tobytes(self) -> bytes:
        return self.data.tobytes()

    def __getitem__(self, index: int) -> Record:
        return self.entry(index)

    def __len__(self) -> int:
        return self.count

    def __iter__(self) -> Iterator[Record]:
        return self.entries()

    def __repr__(self) -> str:
        return (
            f"SectionView(name={self.name!r}, offset=0x{self.offset:x}, "
            f"length=0x{self.length:x}, count={self.count})"
        )


class SectionLayout:
    """Sections of one node section buffer, in file order."""

    def __init__(self, sections: List[SectionView], hash_bucket: Optional[HashBucket] = None):
        self._sections = OrderedDict((section.name, section) for section in sections)
        self._hash_bucket = hash_bucket

    @property
    def hash_bucket(self) -> Optional[HashBucket]:
        """First bucket of the file lookup table, None if that table is empty."""
        return self._hash_bucket

    @property
    def consumed(self) -> int:
        return sum(section.length for section in self._sections.values())

    def names(self) -> List[str]:
        return list(self._sections)

    def get(self, name: str) -> Optional[SectionView]:
        return self._sections.get(name)

    def __getitem__(self, name: str) -> SectionView:
        return self._sections[name]

    def __contains__(self, name: str) -> bool:
        return name in self._sections

    def __iter__(self) -> Iterator[SectionView]:
        return iter(self._sections.values())

    def __len__(self) -> int:
        return len(self._sections)

    def __repr__(self) -> str:
        return f"SectionLayout(sections={len(self._sections)}, consumed=0x{self.consumed:x})"


class _Cursor:
    """Forward-only position in the node section buffer."""

    def __init__(self, buffer: memoryview, on_section: Optional[Callable[[SectionView], None]]):
        self.buffer = buffer
        self.position = 0
        self.sections: List[SectionView] = []
        self._on_section = on_section

    @property
    def remaining(self) -> int:
        return len(self.buffer) - self.position

    def take(self, name: str, record_type: type, count: int, length: Optional[int] = None) -> SectionView:
        """Cut the next section off the buffer and advance past it."""
        if length is None:
            length = record_type.SIZE * count
        if count < 0 or length > self.remaining:
            raise TruncatedData(name, length, self.remaining)

        start = self.position
        view = SectionView(
            name=name,
            record_type=record_type,
            offset=start,
            length=length,
            count=count,
            data=self.buffer[start : start + length],
        )
        self.position += length
        self.sections.append(view)
        if self._on_section:
            self._on_section(view)
        return view


def resolve(
    buffer: Union[bytes, bytearray, memoryview],
    header: NodeHeader,
    on_section: Optional[Callable[[SectionView], None]] = None,
) -> SectionLayout:
    """Slice a node section payload into its sections.

    `buffer` is the node section data following the NodeHeader. If given,
    `on_section` is called with each SectionView as soon as it is resolved.
    Raises TruncatedData naming the first section that does not fit.
    """
    cursor = _Cursor(memoryview(buffer).cast("B"), on_section)

    for name, record_type, count_of in HEADER_SECTIONS:
        cursor.take(name, record_type, count_of(header))

    # The bucket table length comes from the buffer, not the header: its
    # first bucket holds the number of buckets that follow it.
    hash_bucket = None
    if cursor.remaining == 0:
        cursor.take(FILE_LOOKUP_BUCKETS, HashBucket, 0)
    else:
        if cursor.remaining < HashBucket.SIZE:
            raise TruncatedData(FILE_LOOKUP_BUCKETS, HashBucket.SIZE, cursor.remaining)
        hash_bucket = HashBucket.from_bytes(cursor.buffer, cursor.position)
        cursor.take(FILE_LOOKUP_BUCKETS, HashBucket, hash_bucket.num_entries + 1)

    cursor.take(FILE_LOOKUP, Pair, header.file_lookup_count)

    # Everything left over; a trailing partial record stays in the view
    cursor.take(NUMBERS, Pair, cursor.remaining // Pair.SIZE, length=cursor.remaining)

    return SectionLayout(cursor.sections, hash_bucket)
