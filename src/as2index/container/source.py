"""Container access for AS/2 packages.

A package is a zip archive; the index lives in one entry and the archive
comment carries the friendly name. Decoding needs random access, so entries
are always materialised into memory in full.
"""

from __future__ import annotations

import logging
import zipfile
import zlib
from pathlib import Path
from types import TracebackType
from typing import Mapping, Optional, Protocol, Type, runtime_checkable

from as2index.errors import ContainerError, EntryNotFound

LOGGER = logging.getLogger(__name__)

DEFAULT_COMMENT_ENCODING = "cp437"


@runtime_checkable
class ByteSource(Protocol):
    """Read-only view of a container: named entries plus a comment string."""

    @property
    def comment(self) -> str: ...

    def read_entry(self, name: str) -> bytes: ...


class MemoryByteSource:
    """Byte source backed by an in-memory mapping of entry names to bytes."""

    def __init__(self, entries: Mapping[str, bytes], comment: str = "") -> None:
        self._entries = dict(entries)
        self._comment = comment

    @property
    def comment(self) -> str:
        return self._comment

    def read_entry(self, name: str) -> bytes:
        try:
            return bytes(self._entries[name])
        except KeyError:
            raise EntryNotFound(name) from None


class ZipByteSource:
    """Byte source reading entries from a zip archive on disk."""

    def __init__(self, path: Path | str, comment_encoding: str = DEFAULT_COMMENT_ENCODING) -> None:
        self.path = Path(path).expanduser()
        self.comment_encoding = comment_encoding
        try:
            self._archive: Optional[zipfile.ZipFile] = zipfile.ZipFile(self.path)
        except FileNotFoundError as exc:
            raise ContainerError(f"Package not found: {self.path}") from exc
        except (zipfile.BadZipFile, OSError) as exc:
            raise ContainerError(f"Cannot open package {self.path}: {exc}") from exc

    def __enter__(self) -> "ZipByteSource":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying archive."""
        if self._archive is not None:
            self._archive.close()
            self._archive = None

    @property
    def comment(self) -> str:
        """Return the archive comment decoded with ``comment_encoding``."""
        return self._require_archive().comment.decode(self.comment_encoding, errors="replace")

    def read_entry(self, name: str) -> bytes:
        """Return the full decompressed contents of entry ``name``.

        Raises:
            EntryNotFound: If the archive has no entry with that exact name.
            ContainerError: If the entry cannot be decompressed.
        """
        archive = self._require_archive()
        try:
            info = archive.getinfo(name)
        except KeyError:
            raise EntryNotFound(name) from None
        try:
            data = archive.read(info)
        except (zipfile.BadZipFile, zlib.error, NotImplementedError, OSError, RuntimeError) as exc:
            raise ContainerError(f"Cannot read {name!r} from {self.path}: {exc}") from exc
        LOGGER.debug("Read %d byte(s) from %s:%s", len(data), self.path, name)
        return data

    def _require_archive(self) -> zipfile.ZipFile:
        if self._archive is None:
            raise ContainerError(f"Package {self.path} is closed.")
        return self._archive


def open_archive(
    path: Path | str,
    comment_encoding: str = DEFAULT_COMMENT_ENCODING,
) -> ZipByteSource:
    """Open the package at ``path`` as a byte source."""
    return ZipByteSource(path, comment_encoding=comment_encoding)


__all__ = [
    "DEFAULT_COMMENT_ENCODING",
    "ByteSource",
    "MemoryByteSource",
    "ZipByteSource",
    "open_archive",
]
