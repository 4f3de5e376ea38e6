"""Arc Toolkit - Inspect the index of data.arc game archives."""

__version__ = "0.1.0"
