"""Data models describing a decoded AS/2 index."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_serializer

PASSWORD_SLOTS = 10
SIGNOFF_SLOTS = 4


class As2BaseModel(BaseModel):
    """Shared configuration for immutable index models."""

    model_config = ConfigDict(frozen=True, extra="forbid")


class IndexHeader(As2BaseModel):
    """Package-level metadata stored at the start of ``index.sav``.

    Attributes:
        version: Format version string.
        revision: Package revision number.
        folder_title: Title of the top-level folder.
        first_item_index: 1-based index of the first record, 0 when empty.
        last_backup_date: Timestamp of the last backup.
        last_edit_date: Timestamp of the last edit.
        period_end_date: End of the reporting period.
        long_pack_name: Long package name.
        pack_dir: Package directory recorded by the authoring tool.
        pack_version: Package version string.
        password_key: Per-slot keys used to obfuscate the password.
        password: Obfuscated password slots, narrowed to signed 16-bit values.
        decrypted_password: Password recovered from ``password`` and ``password_key``.
        abk_friendly_name: Friendly archive name taken from the container comment.
    """

    version: str = ""
    revision: int = 0
    folder_title: str = ""
    first_item_index: int = 0
    last_backup_date: datetime
    last_edit_date: datetime
    period_end_date: datetime
    long_pack_name: str = ""
    pack_dir: str = ""
    pack_version: str = ""
    password_key: Tuple[int, ...] = Field(min_length=PASSWORD_SLOTS, max_length=PASSWORD_SLOTS)
    password: Tuple[int, ...] = Field(min_length=PASSWORD_SLOTS, max_length=PASSWORD_SLOTS)
    decrypted_password: str = ""
    abk_friendly_name: str = ""

    @property
    def has_password(self) -> bool:
        """Return whether the package is password protected."""
        return bool(self.decrypted_password)


class IndexRecord(As2BaseModel):
    """One outline entry of the index.

    ``index`` is the 1-based segment position used to reach the record, and
    ``tree_level`` is reconstructed after traversal; neither is stored in the
    segment itself.
    """

    title: str = ""
    index: int
    tree_level: int = 0
    segment: int = 0
    parent: int = 0
    next_item_index: int = 0
    uid: str = ""
    item_type: int = 0
    document_type: str = ""
    reference: str = ""
    is_master: int = 0
    prepared_initials: Tuple[str, ...] = Field(min_length=SIGNOFF_SLOTS, max_length=SIGNOFF_SLOTS)
    review_initials: Tuple[str, ...] = Field(min_length=SIGNOFF_SLOTS, max_length=SIGNOFF_SLOTS)
    offset: bytes = Field(min_length=SIGNOFF_SLOTS, max_length=SIGNOFF_SLOTS)
    prepared_dates: Tuple[datetime, ...] = Field(
        min_length=SIGNOFF_SLOTS, max_length=SIGNOFF_SLOTS
    )
    reviewed_dates: Tuple[datetime, ...] = Field(
        min_length=SIGNOFF_SLOTS, max_length=SIGNOFF_SLOTS
    )
    is_attention_manual: int = 0
    is_attention_auto: int = 0
    number_of_open_notes: int = 0
    number_of_closed_notes: int = 0
    is_recently_filed: int = 0
    default_reference: str = ""

    @field_serializer("offset")
    def _serialize_offset(self, value: bytes) -> str:
        return value.hex()


class As2Index(As2BaseModel):
    """Decoded index: the header plus records in linked-list order."""

    header: IndexHeader
    records: Tuple[IndexRecord, ...] = ()

    def get(self, index: int) -> Optional[IndexRecord]:
        """Return the record reached through segment ``index``, if any.

        Args:
            index: 1-based segment index.

        Returns:
            Optional[IndexRecord]: Matching record or None.
        """
        for record in self.records:
            if record.index == index:
                return record
        return None

    def children_of(self, parent: int) -> List[IndexRecord]:
        """Return the records whose parent is ``parent``, in traversal order."""
        return [record for record in self.records if record.parent == parent]

    @property
    def max_depth(self) -> int:
        """Return the deepest reconstructed tree level, 0 for an empty index."""
        return max((record.tree_level for record in self.records), default=0)


__all__ = [
    "PASSWORD_SLOTS",
    "SIGNOFF_SLOTS",
    "As2BaseModel",
    "IndexHeader",
    "IndexRecord",
    "As2Index",
]
