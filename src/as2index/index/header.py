"""Decoder for the fixed-size header at the start of ``index.sav``."""

from __future__ import annotations

import logging

from as2index.errors import BufferTooShort

from .models import PASSWORD_SLOTS, IndexHeader
from .password import PASSWORD_SLOT_WIDTH, decrypt_password, narrow_password_slot
from .reader import BinaryCursor

LOGGER = logging.getLogger(__name__)

HEADER_LENGTH = 648

_VERSION_WIDTH = 12
_FOLDER_TITLE_WIDTH = 164
_PACK_NAME_WIDTH = 162
_PACK_DIR_WIDTH = 162
_PACK_VERSION_WIDTH = 12


class HeaderDecoder:
    """Decode the package header into an ``IndexHeader``."""

    def __init__(self, header_length: int = HEADER_LENGTH) -> None:
        self.header_length = header_length

    def decode(self, buffer: bytes) -> IndexHeader:
        """Decode the header region of ``buffer``.

        The friendly archive name is left empty; it comes from the container
        comment and is filled in by the assembler.

        Args:
            buffer: Complete contents of the index entry.

        Returns:
            IndexHeader: Decoded header with the password already decrypted.

        Raises:
            BufferTooShort: If the buffer is smaller than the header region.
            InvalidDivision: If a password slot cannot be decrypted.
            DateOutOfRange: If a header timestamp is invalid.
        """
        if len(buffer) < self.header_length:
            raise BufferTooShort(0, self.header_length, len(buffer))

        with BinaryCursor(buffer) as cursor:
            version = cursor.read_utf16(_VERSION_WIDTH)
            revision = cursor.read_int32()
            folder_title = cursor.read_utf16(_FOLDER_TITLE_WIDTH)
            first_item_index = cursor.read_int32()
            last_backup_date = cursor.read_ole_date()
            last_edit_date = cursor.read_ole_date()
            period_end_date = cursor.read_ole_date()
            long_pack_name = cursor.read_utf16(_PACK_NAME_WIDTH)
            pack_dir = cursor.read_utf16(_PACK_DIR_WIDTH)
            pack_version = cursor.read_utf16(_PACK_VERSION_WIDTH)
            password_key = tuple(cursor.read_int16() for _ in range(PASSWORD_SLOTS))
            password = tuple(
                narrow_password_slot(cursor.read(PASSWORD_SLOT_WIDTH))
                for _ in range(PASSWORD_SLOTS)
            )

        LOGGER.debug(
            "Decoded header version=%r revision=%d first_item_index=%d",
            version,
            revision,
            first_item_index,
        )
        return IndexHeader(
            version=version,
            revision=revision,
            folder_title=folder_title,
            first_item_index=first_item_index,
            last_backup_date=last_backup_date,
            last_edit_date=last_edit_date,
            period_end_date=period_end_date,
            long_pack_name=long_pack_name,
            pack_dir=pack_dir,
            pack_version=pack_version,
            password_key=password_key,
            password=password,
            decrypted_password=decrypt_password(password, password_key),
        )


__all__ = ["HEADER_LENGTH", "HeaderDecoder"]
