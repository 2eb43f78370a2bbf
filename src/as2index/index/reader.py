"""Bounds-checked little-endian cursor over an in-memory buffer."""

from __future__ import annotations

import struct
from datetime import datetime
from types import TracebackType
from typing import Optional, Type

from as2index.errors import BufferTooShort

from .dates import OLE_DATE_WIDTH, decode_ole_date

_INT16 = struct.Struct("<h")
_INT32 = struct.Struct("<i")


class BinaryCursor:
    """Sequential reader with random-access seeks over a bytes-like buffer.

    Use as a context manager; the underlying ``memoryview`` is released when
    the block exits, whether normally or through an exception.
    """

    def __init__(self, buffer: bytes | bytearray | memoryview) -> None:
        self._view: Optional[memoryview] = memoryview(buffer).cast("B")
        self._position = 0

    def __enter__(self) -> "BinaryCursor":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.close()

    def close(self) -> None:
        """Release the buffer view; further reads raise ``ValueError``."""
        if self._view is not None:
            self._view.release()
            self._view = None

    @property
    def length(self) -> int:
        """Return the total number of bytes in the buffer."""
        return self._require_view().nbytes

    def tell(self) -> int:
        """Return the current read position."""
        return self._position

    def seek(self, offset: int) -> None:
        """Move the read position to an absolute offset.

        Raises:
            BufferTooShort: If the offset lies outside the buffer.
        """
        length = self.length
        if offset < 0 or offset > length:
            raise BufferTooShort(offset, 0, length)
        self._position = offset

    def read(self, width: int) -> bytes:
        """Read exactly ``width`` bytes and advance the position.

        Raises:
            BufferTooShort: If fewer than ``width`` bytes remain.
        """
        view = self._require_view()
        start = self._position
        end = start + width
        if width < 0 or end > view.nbytes:
            raise BufferTooShort(start, width, view.nbytes)
        self._position = end
        return view[start:end].tobytes()

    def read_byte(self) -> int:
        return self.read(1)[0]

    def read_int16(self) -> int:
        return _INT16.unpack(self.read(_INT16.size))[0]

    def read_int32(self) -> int:
        return _INT32.unpack(self.read(_INT32.size))[0]

    def read_utf16(self, width: int) -> str:
        """Read a fixed-width UTF-16LE field with trailing NULs removed."""
        return self.read(width).decode("utf-16-le", errors="replace").rstrip("\x00")

    def read_ole_date(self) -> datetime:
        return decode_ole_date(self.read(OLE_DATE_WIDTH))

    def _require_view(self) -> memoryview:
        if self._view is None:
            raise ValueError("BinaryCursor is closed.")
        return self._view


__all__ = ["BinaryCursor"]
