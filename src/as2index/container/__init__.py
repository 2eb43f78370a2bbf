"""Byte sources exposing the entries and comment of a package container."""

from .source import ByteSource, MemoryByteSource, ZipByteSource, open_archive

__all__ = ["ByteSource", "MemoryByteSource", "ZipByteSource", "open_archive"]
