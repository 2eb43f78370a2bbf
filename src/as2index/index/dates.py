"""Conversion of legacy OLE Automation dates to ``datetime`` values.

The index stores timestamps as little-endian IEEE-754 doubles counting days
since 1899-12-30, with the fractional part holding the time of day. Negative
values count days backwards while the fraction still moves forward from
midnight, so ``-1.25`` is 1899-12-29 06:00.
"""

from __future__ import annotations

import math
import struct
from datetime import datetime, timedelta

from as2index.errors import BufferTooShort, DateOutOfRange

OLE_EPOCH = datetime(1899, 12, 30)
OLE_DATE_WIDTH = 8

# Exclusive bounds accepted by the legacy runtime (years 100 through 9999).
_MIN_OLE_DATE = -657435.0
_MAX_OLE_DATE = 2958466.0
_MILLIS_PER_DAY = 86_400_000
_MAX_MILLIS = int(_MAX_OLE_DATE) * _MILLIS_PER_DAY

_DOUBLE = struct.Struct("<d")


def from_ole_date(value: float) -> datetime:
    """Return the calendar timestamp for a legacy day count.

    Args:
        value: Days since 1899-12-30, fractional part being the time of day.

    Returns:
        datetime: Naive timestamp rounded to the nearest millisecond.

    Raises:
        DateOutOfRange: If the value is not finite or lies outside the range
            representable by the legacy date type.
    """
    if not math.isfinite(value) or not _MIN_OLE_DATE < value < _MAX_OLE_DATE:
        raise DateOutOfRange(value)

    millis = int(value * _MILLIS_PER_DAY + (0.5 if value >= 0 else -0.5))
    if millis < 0:
        # Keep the day part negative but make the time of day run forward.
        remainder = -((-millis) % _MILLIS_PER_DAY)
        millis -= remainder * 2
    if millis >= _MAX_MILLIS:
        raise DateOutOfRange(value)
    return OLE_EPOCH + timedelta(milliseconds=millis)


def decode_ole_date(raw: bytes) -> datetime:
    """Decode eight raw bytes holding a legacy date.

    Args:
        raw: Exactly eight little-endian bytes.

    Returns:
        datetime: Decoded timestamp.

    Raises:
        BufferTooShort: If fewer than eight bytes are supplied.
        DateOutOfRange: If the stored value has no calendar equivalent.
    """
    if len(raw) < OLE_DATE_WIDTH:
        raise BufferTooShort(0, OLE_DATE_WIDTH, len(raw))
    (value,) = _DOUBLE.unpack_from(raw, 0)
    return from_ole_date(value)


__all__ = ["OLE_EPOCH", "OLE_DATE_WIDTH", "from_ole_date", "decode_ole_date"]
