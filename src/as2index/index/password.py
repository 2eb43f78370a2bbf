"""Recovery of the obfuscated package password."""

from __future__ import annotations

import struct
from typing import Sequence

from as2index.errors import BufferTooShort, InvalidDivision

PASSWORD_SLOT_WIDTH = 4

_INT16 = struct.Struct("<h")


def narrow_password_slot(raw: bytes) -> int:
    """Return the semantic value of a 4-byte password slot.

    Slots occupy four bytes on disk but only the low 16 bits carry data; the
    value is the signed 16-bit integer in the first two bytes and the upper
    half is discarded.

    Raises:
        BufferTooShort: If fewer than four bytes are supplied.
    """
    if len(raw) < PASSWORD_SLOT_WIDTH:
        raise BufferTooShort(0, PASSWORD_SLOT_WIDTH, len(raw))
    return _INT16.unpack_from(raw, 0)[0]


def _truncating_divide(numerator: int, denominator: int) -> int:
    quotient = abs(numerator) // abs(denominator)
    return quotient if (numerator < 0) == (denominator < 0) else -quotient


def decrypt_password(password: Sequence[int], password_key: Sequence[int]) -> str:
    """Decrypt the password slots with their matching keys.

    Each non-zero slot contributes one character whose code is the slot value
    divided by its key (integer division, truncating toward zero). Zero slots
    are skipped, so the result has one character per non-zero slot.

    Args:
        password: Obfuscated password slots.
        password_key: Keys for each slot.

    Returns:
        str: The recovered password, empty when no slot is set.

    Raises:
        InvalidDivision: If a non-zero slot has a zero key.
    """
    characters = []
    for slot, (value, key) in enumerate(zip(password, password_key)):
        if value == 0:
            continue
        if key == 0:
            raise InvalidDivision(slot)
        characters.append(chr(_truncating_divide(value, key) & 0xFFFF))
    return "".join(characters)


__all__ = ["PASSWORD_SLOT_WIDTH", "narrow_password_slot", "decrypt_password"]
