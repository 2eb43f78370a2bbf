"""Tests for legacy date conversion."""

from __future__ import annotations

import math
import struct
from datetime import datetime

import pytest

from as2index.errors import BufferTooShort, DateOutOfRange
from as2index.index.dates import OLE_EPOCH, decode_ole_date, from_ole_date


def test_zero_is_the_epoch() -> None:
    assert from_ole_date(0.0) == datetime(1899, 12, 30, 0, 0, 0)
    assert decode_ole_date(b"\x00" * 8) == OLE_EPOCH


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (1.0, datetime(1899, 12, 31)),
        (1.5, datetime(1899, 12, 31, 12, 0)),
        (2.25, datetime(1900, 1, 1, 6, 0)),
        (-1.0, datetime(1899, 12, 29)),
        (-1.25, datetime(1899, 12, 29, 6, 0)),
        (40025.0, datetime(2009, 7, 31)),
    ],
)
def test_day_counts_and_time_fractions(value: float, expected: datetime) -> None:
    assert from_ole_date(value) == expected


def test_rounds_to_nearest_millisecond() -> None:
    one_ms = 1 / 86_400_000

    assert from_ole_date(40025.0 + one_ms * 0.6) == datetime(2009, 7, 31, 0, 0, 0, 1000)
    assert from_ole_date(40025.0 + one_ms * 0.4) == datetime(2009, 7, 31)


def test_decodes_little_endian_double(index_builder) -> None:
    moment = datetime(2009, 7, 31, 14, 30, 15)
    raw = struct.pack("<d", index_builder.ole(moment))

    assert decode_ole_date(raw) == moment


def test_extreme_representable_values() -> None:
    assert from_ole_date(2958465.0).year == 9999
    assert from_ole_date(-657434.0).year == 100


@pytest.mark.parametrize(
    "value",
    [
        math.nan,
        math.inf,
        -math.inf,
        2958466.0,
        math.nextafter(2958466.0, 0.0),
        -657435.0,
        1e300,
        -1e300,
    ],
)
def test_values_outside_calendar_raise(value: float) -> None:
    with pytest.raises(DateOutOfRange) as info:
        from_ole_date(value)

    if not math.isnan(value):
        assert info.value.value == value


def test_short_input_raises_buffer_too_short() -> None:
    with pytest.raises(BufferTooShort):
        decode_ole_date(b"\x00" * 7)
