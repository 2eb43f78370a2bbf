"""Traversal of the linked list of record segments."""

from __future__ import annotations

import logging
from typing import Dict, List

from as2index.errors import CyclicList

from .header import HEADER_LENGTH
from .models import SIGNOFF_SLOTS, IndexRecord
from .reader import BinaryCursor

LOGGER = logging.getLogger(__name__)

SEGMENT_LENGTH = 632

_TITLE_WIDTH = 164
_UID_WIDTH = 76
_DOCUMENT_TYPE_WIDTH = 18
_REFERENCE_WIDTH = 22
_INITIALS_WIDTH = 22


def segment_offset(
    index: int,
    header_length: int = HEADER_LENGTH,
    segment_length: int = SEGMENT_LENGTH,
) -> int:
    """Return the byte offset of 1-based segment ``index``."""
    return header_length + (index - 1) * segment_length


class RecordListDecoder:
    """Follow ``next_item_index`` pointers from the first record to the end of the list."""

    def __init__(
        self,
        header_length: int = HEADER_LENGTH,
        segment_length: int = SEGMENT_LENGTH,
    ) -> None:
        self.header_length = header_length
        self.segment_length = segment_length

    def decode(self, buffer: bytes, first_item_index: int) -> List[IndexRecord]:
        """Decode every record reachable from ``first_item_index``.

        Args:
            buffer: Complete contents of the index entry.
            first_item_index: 1-based index of the first record; values of
                zero or below yield an empty list.

        Returns:
            List[IndexRecord]: Records in list order, each with ``tree_level`` 0.

        Raises:
            BufferTooShort: If a segment lies past the end of the buffer.
            CyclicList: If a pointer leads back to a segment already read.
            DateOutOfRange: If a record timestamp is invalid.
        """
        records: List[IndexRecord] = []
        positions: Dict[int, int] = {}

        with BinaryCursor(buffer) as cursor:
            cursor_index = first_item_index
            while cursor_index > 0:
                if cursor_index in positions:
                    raise CyclicList(cursor_index, len(records))
                offset = segment_offset(cursor_index, self.header_length, self.segment_length)
                LOGGER.debug("Reading segment %d at offset %d", cursor_index, offset)
                cursor.seek(offset)
                record = self._read_record(cursor, cursor_index)
                positions[cursor_index] = len(records)
                records.append(record)
                cursor_index = record.next_item_index

        return records

    def _read_record(self, cursor: BinaryCursor, index: int) -> IndexRecord:
        title = cursor.read_utf16(_TITLE_WIDTH)
        segment = cursor.read_int32()
        parent = cursor.read_int32()
        next_item_index = cursor.read_int32()
        uid = cursor.read_utf16(_UID_WIDTH)
        item_type = cursor.read_int32()
        document_type = cursor.read_utf16(_DOCUMENT_TYPE_WIDTH)
        reference = cursor.read_utf16(_REFERENCE_WIDTH)
        is_master = cursor.read_int32()
        prepared_initials = tuple(cursor.read_utf16(_INITIALS_WIDTH) for _ in range(SIGNOFF_SLOTS))
        review_initials = tuple(cursor.read_utf16(_INITIALS_WIDTH) for _ in range(SIGNOFF_SLOTS))
        offset = cursor.read(SIGNOFF_SLOTS)
        prepared_dates = tuple(cursor.read_ole_date() for _ in range(SIGNOFF_SLOTS))
        reviewed_dates = tuple(cursor.read_ole_date() for _ in range(SIGNOFF_SLOTS))
        return IndexRecord(
            title=title,
            index=index,
            segment=segment,
            parent=parent,
            next_item_index=next_item_index,
            uid=uid,
            item_type=item_type,
            document_type=document_type,
            reference=reference,
            is_master=is_master,
            prepared_initials=prepared_initials,
            review_initials=review_initials,
            offset=offset,
            prepared_dates=prepared_dates,
            reviewed_dates=reviewed_dates,
            is_attention_manual=cursor.read_int32(),
            is_attention_auto=cursor.read_int32(),
            number_of_open_notes=cursor.read_int32(),
            number_of_closed_notes=cursor.read_int32(),
            is_recently_filed=cursor.read_int32(),
            default_reference=cursor.read_utf16(_REFERENCE_WIDTH),
        )


__all__ = ["SEGMENT_LENGTH", "RecordListDecoder", "segment_offset"]
