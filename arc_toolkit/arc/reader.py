"""data.arc archive reader."""

import sys
from pathlib import Path
from typing import BinaryIO, Callable, Dict, Optional, TypeVar, Union

from ..utils.binary import BinaryReader
from .errors import (
    ArchiveIOError,
    CorruptHeader,
    InternalError,
    NotArchiveFormat,
    TruncatedData,
    UnsupportedFeature,
)
from .header import ARC_MAGIC, ARC_MAGIC_SIZE, ArchiveHeader, CompressedNodeHeader, NodeHeader
from .layout import Record, SectionLayout, SectionView, resolve

SectionCallback = Callable[[SectionView], None]
T = TypeVar("T")


class ParsedArchive:
    """Headers and resolved node section layout of a data.arc file."""

    def __init__(self, header: ArchiveHeader, node_header: NodeHeader, layout: SectionLayout):
        self.header = header
        self.node_header = node_header
        self.layout = layout

    @property
    def sections(self) -> SectionLayout:
        return self.layout

    def section(self, name: str) -> SectionView:
        """Get a section by name. Raises KeyError for unknown names."""
        return self.layout[name]

    def first_entries(self) -> Dict[str, Optional[Record]]:
        """Map each section name to its first decoded entry (None if empty)."""
        return {section.name: section.first() for section in self.layout}

    def __repr__(self) -> str:
        return (
            f"ParsedArchive(node_section_offset=0x{self.header.node_section_offset:x}, "
            f"sections={len(self.layout)})"
        )


def _read_exact(reader: BinaryReader, size: int, name: str) -> bytes:
    data = reader.read(size)
    if len(data) < size:
        raise TruncatedData(name, size, len(data))
    return data


class ArchiveHeaders:
    """Headers in front of the node section payload.

    `node_header` is None when the node section is compressed.
    """

    def __init__(
        self,
        header: ArchiveHeader,
        probe: CompressedNodeHeader,
        node_header: Optional[NodeHeader] = None,
    ):
        self.header = header
        self.probe = probe
        self.node_header = node_header

    @property
    def is_compressed(self) -> bool:
        return self.probe.is_compressed


def _check_magic(reader: BinaryReader) -> None:
    try:
        magic = reader.read_u64()
    except (EOFError, OSError):
        raise NotArchiveFormat() from None
    if magic != ARC_MAGIC:
        raise NotArchiveFormat(f"Not a data.arc file: magic 0x{magic:016x}")


def _classified(read: Callable[[BinaryReader], T], stream: BinaryIO) -> T:
    """Check the magic, then run `read` with every failure as an InternalError."""
    reader = BinaryReader(stream)
    _check_magic(reader)

    try:
        return read(reader)
    except InternalError:
        raise
    except OSError as e:
        raise ArchiveIOError(f"I/O error while reading archive: {e}") from e


def _read_headers(reader: BinaryReader) -> ArchiveHeaders:
    header = ArchiveHeader.from_bytes(_read_exact(reader, ArchiveHeader.SIZE, "archive_header"))
    node_offset = header.node_section_offset
    if node_offset < ARC_MAGIC_SIZE + ArchiveHeader.SIZE:
        raise CorruptHeader(f"Node section offset 0x{node_offset:x} points into the archive header")
    if node_offset > sys.maxsize:
        raise CorruptHeader(f"Node section offset 0x{node_offset:x} is out of range")

    reader.seek(node_offset)
    probe = CompressedNodeHeader.from_bytes(
        _read_exact(reader, CompressedNodeHeader.SIZE, "compressed_node_header")
    )
    if probe.is_compressed:
        return ArchiveHeaders(header, probe)

    reader.seek(node_offset)
    node_header = NodeHeader.from_bytes(_read_exact(reader, NodeHeader.SIZE, "node_header"))
    # Unreachable after the probe: file_size is data_start, which is >= 0x100 here
    if node_header.file_size < NodeHeader.SIZE:
        raise CorruptHeader(
            f"Node section size 0x{node_header.file_size:x} is smaller than "
            f"its header (0x{NodeHeader.SIZE:x})"
        )
    return ArchiveHeaders(header, probe, node_header)


def _read_archive(reader: BinaryReader, on_section: Optional[SectionCallback]) -> ParsedArchive:
    headers = _read_headers(reader)
    if headers.is_compressed:
        # TODO: decompress the zstd node section once sample files are available
        raise UnsupportedFeature("compressed node section")

    node_header = headers.node_header
    buffer = _read_exact(reader, node_header.payload_size, "node_section")
    layout = resolve(buffer, node_header, on_section)

    return ParsedArchive(header=headers.header, node_header=node_header, layout=layout)


def read_headers(stream: BinaryIO) -> ArchiveHeaders:
    """Read only the headers of a data.arc stream positioned at offset 0.

    Unlike parse(), a compressed node section is not an error here.
    """
    return _classified(_read_headers, stream)


def parse(stream: BinaryIO, on_section: Optional[SectionCallback] = None) -> ParsedArchive:
    """Parse a data.arc stream positioned at offset 0.

    Raises NotArchiveFormat if the stream does not start with the magic
    number. Any other failure raises an InternalError subclass.
    """
    return _classified(lambda reader: _read_archive(reader, on_section), stream)


def read_headers_file(path: Union[str, Path]) -> ArchiveHeaders:
    """Open a data.arc file and read its headers."""
    with open(Path(path), "rb") as f:
        return read_headers(f)


def parse_file(path: Union[str, Path], on_section: Optional[SectionCallback] = None) -> ParsedArchive:
    """Open and parse a data.arc file from disk."""
    with open(Path(path), "rb") as f:
        return parse(f, on_section)
