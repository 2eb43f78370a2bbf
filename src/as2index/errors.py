"""Errors raised while reading AS/2 index files and their containers."""

from __future__ import annotations


class As2IndexError(Exception):
    """Base exception for index decoding and container access."""


class DecodeError(As2IndexError):
    """Raised when the index bytes cannot be decoded."""


class BufferTooShort(DecodeError):
    """Raised when a fixed-width read would run past the end of the buffer."""

    def __init__(self, offset: int, width: int, length: int) -> None:
        super().__init__(
            f"Cannot read {width} byte(s) at offset {offset}; buffer holds {length} byte(s)."
        )
        self.offset = offset
        self.width = width
        self.length = length


class InvalidDivision(DecodeError):
    """Raised when a non-zero password slot is paired with a zero key."""

    def __init__(self, slot: int) -> None:
        super().__init__(f"Password slot {slot} is set but its key is zero.")
        self.slot = slot


class DateOutOfRange(DecodeError):
    """Raised when a legacy date value has no calendar equivalent."""

    def __init__(self, value: float) -> None:
        super().__init__(f"Legacy date value {value!r} is out of range.")
        self.value = value


class CyclicList(DecodeError):
    """Raised when the record list points back at an already visited segment."""

    def __init__(self, index: int, position: int) -> None:
        super().__init__(
            f"Record list revisits segment {index} after {position} record(s)."
        )
        self.index = index
        self.position = position


class EntryNotFound(As2IndexError):
    """Raised when the container has no entry with the requested name."""

    def __init__(self, entry_name: str) -> None:
        super().__init__(f"Container has no entry named {entry_name!r}.")
        self.entry_name = entry_name


class ContainerError(As2IndexError):
    """Raised when the container archive cannot be opened or read."""


__all__ = [
    "As2IndexError",
    "DecodeError",
    "BufferTooShort",
    "InvalidDivision",
    "DateOutOfRange",
    "CyclicList",
    "EntryNotFound",
    "ContainerError",
]
