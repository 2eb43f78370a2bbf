"""Assemble a complete ``As2Index`` from a container byte source."""

from __future__ import annotations

import logging
from typing import Optional

from as2index.container import ByteSource

from .header import HEADER_LENGTH, HeaderDecoder
from .hierarchy import apply_tree_levels
from .models import As2Index
from .records import SEGMENT_LENGTH, RecordListDecoder

LOGGER = logging.getLogger(__name__)

INDEX_ENTRY_NAME = "index.sav"


def friendly_name_from_comment(comment: str) -> str:
    """Return the part of the container comment after its last ``;``.

    The whole comment is returned when it contains no semicolon.
    """
    return comment[comment.rfind(";") + 1 :]


class IndexAssembler:
    """Run header decoding, list traversal, and hierarchy reconstruction."""

    def __init__(
        self,
        entry_name: str = INDEX_ENTRY_NAME,
        *,
        header_decoder: Optional[HeaderDecoder] = None,
        record_decoder: Optional[RecordListDecoder] = None,
    ) -> None:
        self.entry_name = entry_name
        self.header_decoder = header_decoder or HeaderDecoder(HEADER_LENGTH)
        self.record_decoder = record_decoder or RecordListDecoder(HEADER_LENGTH, SEGMENT_LENGTH)

    def assemble(self, source: ByteSource) -> As2Index:
        """Decode the index entry held by ``source``.

        Args:
            source: Container exposing the index entry and its comment.

        Returns:
            As2Index: Fully decoded index.

        Raises:
            EntryNotFound: If the container lacks the index entry.
            DecodeError: If any decoding stage fails.
        """
        buffer = source.read_entry(self.entry_name)
        return self.decode(buffer, source.comment)

    def decode(self, buffer: bytes, comment: str = "") -> As2Index:
        """Decode an already extracted index buffer.

        Args:
            buffer: Complete contents of the index entry.
            comment: Container comment carrying the friendly archive name.

        Returns:
            As2Index: Fully decoded index.
        """
        header = self.header_decoder.decode(buffer)
        records = self.record_decoder.decode(buffer, header.first_item_index)
        records = apply_tree_levels(records)
        header = header.model_copy(
            update={"abk_friendly_name": friendly_name_from_comment(comment)}
        )
        LOGGER.info(
            "Decoded %d record(s) for %r",
            len(records),
            header.abk_friendly_name or header.folder_title,
        )
        return As2Index(header=header, records=tuple(records))


__all__ = ["INDEX_ENTRY_NAME", "IndexAssembler", "friendly_name_from_comment"]
