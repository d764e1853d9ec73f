"""Artifacts — the generated RBI files and how they are named, found and rendered.

This package provides:
- Models: identity (name + version) and content of an artifact
- Identity parsing: ``<name>@<version>.<ext>`` filenames
- Scanning: the set of artifacts already on disk
- Serialization: typed sigil, header banner, and the empty placeholder
"""
