"""rbisync — keep a directory of generated gem RBI files in sync."""

__version__ = "0.1.0"
