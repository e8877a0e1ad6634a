"""OverSeek Flow Builder backend."""

__version__ = "0.1.0"
