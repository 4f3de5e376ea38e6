"""data.arc archive parsing."""

from .errors import (
    ArchiveError,
    ArchiveIOError,
    CorruptHeader,
    InternalError,
    NotArchiveFormat,
    TruncatedData,
    UnsupportedFeature,
)
from .header import ARC_MAGIC, ArchiveHeader, CompressedNodeHeader, NodeHeader
from .layout import SECTION_NAMES, SectionLayout, SectionView, resolve
from .reader import ArchiveHeaders, ParsedArchive, parse, parse_file, read_headers, read_headers_file

__all__ = [
    "ARC_MAGIC",
    "ArchiveError",
    "ArchiveHeader",
    "ArchiveHeaders",
    "ArchiveIOError",
    "CompressedNodeHeader",
    "CorruptHeader",
    "InternalError",
    "NodeHeader",
    "NotArchiveFormat",
    "ParsedArchive",
    "SECTION_NAMES",
    "SectionLayout",
    "SectionView",
    "TruncatedData",
    "UnsupportedFeature",
    "parse",
    "parse_file",
    "read_headers",
    "read_headers_file",
    "resolve",
]
