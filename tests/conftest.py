"""Shared fixtures for building synthetic index buffers and packages."""

from __future__ import annotations

import struct
import zipfile
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, Optional, Sequence

import pytest

from as2index.index import HEADER_LENGTH, OLE_EPOCH, SEGMENT_LENGTH

DEFAULT_DATE = datetime(2009, 7, 31, 14, 30)


def _utf16(text: str, width: int) -> bytes:
    encoded = text.encode("utf-16-le")
    assert len(encoded) <= width, f"{text!r} does not fit in {width} bytes"
    return encoded.ljust(width, b"\x00")


class IndexBuilder:
    """Encode headers and record segments in the on-disk layout."""

    @staticmethod
    def ole(value: datetime) -> float:
        delta = value - OLE_EPOCH
        return delta.days + (delta.seconds + delta.microseconds / 1_000_000) / 86_400

    def date_bytes(self, value: datetime | float) -> bytes:
        number = value if isinstance(value, float) else self.ole(value)
        return struct.pack("<d", number)

    def header(
        self,
        *,
        version: str = "2.0",
        revision: int = 7,
        folder_title: str = "Client File 2009",
        first_item_index: int = 0,
        last_backup_date: datetime | float = DEFAULT_DATE,
        last_edit_date: datetime | float = DEFAULT_DATE,
        period_end_date: datetime | float = datetime(2009, 12, 31),
        long_pack_name: str = "Client File 2009 Year End",
        pack_dir: str = "C:\\AS2\\Packs",
        pack_version: str = "5.1",
        password_key: Sequence[int] = (0,) * 10,
        password: Sequence[int] = (0,) * 10,
        password_high_words: Sequence[int] = (0,) * 10,
    ) -> bytes:
        data = b"".join(
            [
                _utf16(version, 12),
                struct.pack("<i", revision),
                _utf16(folder_title, 164),
                struct.pack("<i", first_item_index),
                self.date_bytes(last_backup_date),
                self.date_bytes(last_edit_date),
                self.date_bytes(period_end_date),
                _utf16(long_pack_name, 162),
                _utf16(pack_dir, 162),
                _utf16(pack_version, 12),
                struct.pack("<10h", *password_key),
                b"".join(
                    struct.pack("<hh", value, high)
                    for value, high in zip(password, password_high_words)
                ),
            ]
        )
        return data.ljust(HEADER_LENGTH, b"\x00")

    def record(
        self,
        *,
        title: str = "Item",
        segment: int = 0,
        parent: int = 0,
        next_item_index: int = 0,
        uid: str = "",
        item_type: int = 1,
        document_type: str = "",
        reference: str = "",
        is_master: int = 0,
        prepared_initials: Sequence[str] = ("", "", "", ""),
        review_initials: Sequence[str] = ("", "", "", ""),
        offset: bytes = b"\x00\x00\x00\x00",
        prepared_dates: Sequence[datetime | float] = (0.0, 0.0, 0.0, 0.0),
        reviewed_dates: Sequence[datetime | float] = (0.0, 0.0, 0.0, 0.0),
        is_attention_manual: int = 0,
        is_attention_auto: int = 0,
        number_of_open_notes: int = 0,
        number_of_closed_notes: int = 0,
        is_recently_filed: int = 0,
        default_reference: str = "",
        pad: bool = True,
    ) -> bytes:
        data = b"".join(
            [
                _utf16(title, 164),
                struct.pack("<iii", segment, parent, next_item_index),
                _utf16(uid, 76),
                struct.pack("<i", item_type),
                _utf16(document_type, 18),
                _utf16(reference, 22),
                struct.pack("<i", is_master),
                b"".join(_utf16(initials, 22) for initials in prepared_initials),
                b"".join(_utf16(initials, 22) for initials in review_initials),
                offset,
                b"".join(self.date_bytes(value) for value in prepared_dates),
                b"".join(self.date_bytes(value) for value in reviewed_dates),
                struct.pack(
                    "<iiiii",
                    is_attention_manual,
                    is_attention_auto,
                    number_of_open_notes,
                    number_of_closed_notes,
                    is_recently_filed,
                ),
                _utf16(default_reference, 22),
            ]
        )
        return data.ljust(SEGMENT_LENGTH, b"\x00") if pad else data

    def buffer(self, header: bytes, segments: Optional[Dict[int, bytes]] = None) -> bytes:
        """Place each segment at its 1-based slot after the header."""
        segments = segments or {}
        slot_count = max(segments, default=0)
        slots = [b"\x00" * SEGMENT_LENGTH] * slot_count
        for index, data in segments.items():
            slots[index - 1] = data
        return header + b"".join(slots)

    def chain(self, parents: Sequence[int], titles: Optional[Sequence[str]] = None) -> bytes:
        """Return a buffer whose records 1..n are chained in order with ``parents``."""
        titles = titles or [f"Item {number}" for number in range(1, len(parents) + 1)]
        count = len(parents)
        segments = {
            number: self.record(
                title=titles[number - 1],
                segment=number,
                parent=parent,
                next_item_index=number + 1 if number < count else 0,
            )
            for number, parent in enumerate(parents, start=1)
        }
        return self.buffer(self.header(first_item_index=1 if count else 0), segments)


@pytest.fixture
def index_builder() -> IndexBuilder:
    return IndexBuilder()


@pytest.fixture
def make_package(tmp_path: Path) -> Callable[..., Path]:
    """Return a factory writing zip packages into ``tmp_path``."""

    def _make(
        entries: Dict[str, bytes],
        *,
        comment: str = "",
        name: str = "package.as2",
    ) -> Path:
        path = tmp_path / name
        with zipfile.ZipFile(path, "w", zipfile.ZIP_DEFLATED) as archive:
            for entry_name, data in entries.items():
                archive.writestr(entry_name, data)
            archive.comment = comment.encode("cp437")
        return path

    return _make
