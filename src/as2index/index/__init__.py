"""Decoding of the ``index.sav`` entry found in AS/2 packages."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from as2index.config.models import DecodingSettings
from as2index.container import open_archive

from .assembler import INDEX_ENTRY_NAME, IndexAssembler, friendly_name_from_comment
from .dates import OLE_EPOCH, decode_ole_date, from_ole_date
from .header import HEADER_LENGTH, HeaderDecoder
from .hierarchy import apply_tree_levels, compute_tree_levels
from .models import As2Index, IndexHeader, IndexRecord
from .password import decrypt_password, narrow_password_slot
from .reader import BinaryCursor
from .records import SEGMENT_LENGTH, RecordListDecoder, segment_offset


def read_index(path: Path | str, settings: Optional[DecodingSettings] = None) -> As2Index:
    """Open the package at ``path`` and decode its index.

    Args:
        path: Location of the package archive.
        settings: Decoding settings; defaults apply when omitted.

    Returns:
        As2Index: Decoded header and records.

    Raises:
        ContainerError: If the archive cannot be opened.
        EntryNotFound: If the archive lacks the index entry.
        DecodeError: If the index bytes are malformed.
    """
    settings = settings or DecodingSettings()
    with open_archive(path, comment_encoding=settings.comment_encoding) as source:
        return IndexAssembler(settings.entry_name).assemble(source)


def decode_index(buffer: bytes, comment: str = "") -> As2Index:
    """Decode index bytes that were already extracted from their container."""
    return IndexAssembler().decode(buffer, comment)


__all__ = [
    "HEADER_LENGTH",
    "SEGMENT_LENGTH",
    "INDEX_ENTRY_NAME",
    "OLE_EPOCH",
    "As2Index",
    "IndexHeader",
    "IndexRecord",
    "BinaryCursor",
    "HeaderDecoder",
    "RecordListDecoder",
    "IndexAssembler",
    "apply_tree_levels",
    "compute_tree_levels",
    "decode_index",
    "decode_ole_date",
    "decrypt_password",
    "friendly_name_from_comment",
    "from_ole_date",
    "narrow_password_slot",
    "read_index",
    "segment_offset",
]
