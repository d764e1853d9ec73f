"""Serializer — turn a compiled body into the bytes written to disk."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rbisync.config import SyncConfig

EMPTY_BODY = (
    "# THIS IS AN EMPTY RBI FILE.\n"
    "# see https://github.com/Shopify/tapioca/wiki/Manual-Gem-Requires\n"
)


def file_header(name: str, command: str) -> str:
    return (
        "# DO NOT EDIT MANUALLY\n"
        f"# This is an autogenerated file for types exported from the `{name}` gem.\n"
        f"# Please instead update this file by running `{command} {name}`.\n"
    )


def render_content(name: str, body: str | None, config: SyncConfig) -> bytes:
    """Render the full RBI file for a gem.

    A ``None`` or blank body is an empty artifact and gets the placeholder.
    """
    parts = [f"# typed: {config.typed_sigil}\n", "\n"]
    if config.file_header:
        parts += [file_header(name, config.command), "\n"]
    if body is None or not body.strip():
        parts.append(EMPTY_BODY)
    else:
        parts.append(body if body.endswith("\n") else body + "\n")
    return "".join(parts).encode("utf-8")
