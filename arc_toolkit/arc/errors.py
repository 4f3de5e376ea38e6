"""Errors raised while reading a data.arc archive.

A file that does not start with the magic number raises NotArchiveFormat,
so callers can move on to another parser. Once the magic has matched, any
failure is an InternalError: either a bug or a file variant that is not
supported yet.
"""


class ArchiveError(Exception):
    """Base class for all archive errors."""


class NotArchiveFormat(ArchiveError):
    """The stream does not start with the data.arc magic number."""

    def __init__(self, message: str = "Not a data.arc file"):
        super().__init__(message)


class InternalError(ArchiveError):
    """The magic matched but the archive could not be read."""


class CorruptHeader(InternalError):
    """Header fields are inconsistent with each other."""


class TruncatedData(InternalError):
    """A section or record needs more bytes than are available."""

    def __init__(self, section: str, needed: int, available: int):
        self.section = section
        self.needed = needed
        self.available = available
        super().__init__(
            f"{section}: needs {needed} bytes, only {available} available"
        )


class UnsupportedFeature(InternalError):
    """The archive uses a variant this toolkit cannot read yet."""

    def __init__(self, feature: str):
        self.feature = feature
        super().__init__(f"Unsupported feature: {feature}")


class ArchiveIOError(InternalError):
    """An I/O error occurred while reading the archive."""
