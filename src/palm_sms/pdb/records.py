"""
PDB Container Structures
========================

This module defines the fixed structures of a PalmOS record database
(.pdb) file.

File Structure Overview
-----------------------
A PDB file contains:
1. Database header (78 bytes)
2. Record list: one 8-byte entry per record
3. Two bytes of padding (traditionally zero)
4. Optional AppInfo block
5. Optional SortInfo block
6. Record payloads, in record list order

Database Header
---------------
    Offset  Size    Description
    ------  ----    -----------
    0       32      Database name, NUL-padded
    32      2       Attributes
    34      2       Version
    36      4       Creation time (seconds since 1904)
    40      4       Modification time
    44      4       Last backup time
    48      4       Modification number
    52      4       AppInfo block offset (0 = none)
    56      4       SortInfo block offset (0 = none)
    60      4       Database type, e.g. "DATA"
    64      4       Creator ID, e.g. "SMS!"
    68      4       Unique ID seed
    72      4       Next record list ID (always 0 in files)
    76      2       Number of records

Record List Entry
-----------------
    Offset  Size    Description
    ------  ----    -----------
    0       4       Payload offset from start of file
    4       1       Attributes: high nibble flags, low nibble category
    5       3       Unique ID (big-endian)

Reference
---------
- Palm File Format documentation, "PDB and PRC Database Formats"
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import IntFlag
import struct

from palm_sms.errors import PDBFormatError
from palm_sms.palmtime import (
    datetime_to_unix,
    palm_to_unix,
    unix_to_datetime,
    unix_to_palm,
)


# =============================================================================
# Constants
# =============================================================================

HEADER_SIZE = 78
RECORD_ENTRY_SIZE = 8

# Padding between the record list and the first data block
GAP_SIZE = 2

NAME_SIZE = 32

CATEGORY_MASK = 0x0F
FLAGS_MASK = 0xF0


# =============================================================================
# Attribute Flags
# =============================================================================

class DatabaseAttribute(IntFlag):
    """Database header attribute bits."""
    RESOURCE = 0x0001
    READ_ONLY = 0x0002
    APPINFO_DIRTY = 0x0004
    BACKUP = 0x0008
    OK_TO_INSTALL_NEWER = 0x0010
    RESET_AFTER_INSTALL = 0x0020
    COPY_PREVENTION = 0x0040
    STREAM = 0x0080
    OPEN = 0x8000


class RecordAttribute(IntFlag):
    """Record list attribute bits (high nibble of the attribute byte)."""
    SECRET = 0x10
    BUSY = 0x20
    DIRTY = 0x40
    DELETE = 0x80


def palm_time_to_datetime(palm_seconds: int) -> datetime:
    """Render a 1904-based PDB time as a naive datetime."""
    return unix_to_datetime(palm_to_unix(palm_seconds))


def datetime_to_palm_time(value: datetime) -> int:
    """Convert a naive datetime to seconds since 1904."""
    return unix_to_palm(datetime_to_unix(value))


def _now_palm_time() -> int:
    return datetime_to_palm_time(datetime.now().replace(microsecond=0))


# =============================================================================
# Database Header
# =============================================================================

@dataclass
class PDBHeader:
    """
    Database header (78 bytes at the start of the file).

    Times are kept as raw 1904-based values so that a load/save cycle does
    not alter them; use get_creation_time() and friends for display.
    """
    name: str = ""
    attributes: int = 0
    version: int = 0
    creation_time: int = field(default_factory=_now_palm_time)
    modification_time: int = field(default_factory=_now_palm_time)
    backup_time: int = 0
    modification_number: int = 0
    app_info_offset: int = 0
    sort_info_offset: int = 0
    db_type: str = "DATA"
    creator: str = "SMS!"
    unique_id_seed: int = 0
    next_record_list: int = 0
    num_records: int = 0

    FORMAT = struct.Struct(">32sHHIIIIII4s4sIIH")

    def to_bytes(self) -> bytes:
        """Serialize the header to 78 bytes."""
        name_bytes = self.name.encode("latin-1")[:NAME_SIZE - 1]
        return self.FORMAT.pack(
            name_bytes.ljust(NAME_SIZE, b"\x00"),
            self.attributes,
            self.version,
            self.creation_time,
            self.modification_time,
            self.backup_time,
            self.modification_number,
            self.app_info_offset,
            self.sort_info_offset,
            self.db_type.encode("latin-1")[:4].ljust(4, b" "),
            self.creator.encode("latin-1")[:4].ljust(4, b" "),
            self.unique_id_seed,
            self.next_record_list,
            self.num_records,
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> "PDBHeader":
        """Deserialize a header from the first 78 bytes of data."""
        if len(data) < HEADER_SIZE:
            raise PDBFormatError(
                f"Header too short: need {HEADER_SIZE} bytes, got {len(data)}"
            )

        (name, attributes, version, creation_time, modification_time,
         backup_time, modification_number, app_info_offset, sort_info_offset,
         db_type, creator, unique_id_seed, next_record_list,
         num_records) = cls.FORMAT.unpack_from(data)

        return cls(
            name=name.split(b"\x00", 1)[0].decode("latin-1"),
            attributes=attributes,
            version=version,
            creation_time=creation_time,
            modification_time=modification_time,
            backup_time=backup_time,
            modification_number=modification_number,
            app_info_offset=app_info_offset,
            sort_info_offset=sort_info_offset,
            db_type=db_type.decode("latin-1"),
            creator=creator.decode("latin-1"),
            unique_id_seed=unique_id_seed,
            next_record_list=next_record_list,
            num_records=num_records,
        )

    def is_resource_db(self) -> bool:
        """True for resource databases (.prc), which hold no records."""
        return bool(self.attributes & DatabaseAttribute.RESOURCE)

    def get_creation_time(self) -> datetime:
        return palm_time_to_datetime(self.creation_time)

    def get_modification_time(self) -> datetime:
        return palm_time_to_datetime(self.modification_time)

    def get_backup_time(self) -> datetime:
        return palm_time_to_datetime(self.backup_time)


# =============================================================================
# Record List
# =============================================================================

@dataclass
class RecordEntry:
    """One 8-byte record list entry."""
    offset: int
    attributes: int = 0
    unique_id: int = 0

    FORMAT = struct.Struct(">IB3s")

    def to_bytes(self) -> bytes:
        """Serialize the entry to 8 bytes."""
        return self.FORMAT.pack(
            self.offset,
            self.attributes,
            (self.unique_id & 0xFFFFFF).to_bytes(3, "big"),
        )

    @classmethod
    def from_bytes(cls, data: bytes, offset: int = 0) -> "RecordEntry":
        """Deserialize an entry starting at offset."""
        if len(data) < offset + RECORD_ENTRY_SIZE:
            raise PDBFormatError(f"Truncated record list entry at offset {offset}")
        record_offset, attributes, unique_id = cls.FORMAT.unpack_from(data, offset)
        return cls(
            offset=record_offset,
            attributes=attributes,
            unique_id=int.from_bytes(unique_id, "big"),
        )

    @property
    def category(self) -> int:
        return self.attributes & CATEGORY_MASK

    @property
    def flags(self) -> int:
        return self.attributes & FLAGS_MASK


@dataclass
class RawRecord:
    """
    A record payload with its envelope metadata.

    Attributes:
        data: The record payload
        category: Record category (0-15)
        flags: RecordAttribute bits
        unique_id: 24-bit record unique ID
    """
    data: bytes = field(default=b"", repr=False)
    category: int = 0
    flags: int = 0
    unique_id: int = 0

    def get_attributes(self) -> int:
        """Combine flags and category into the on-disk attribute byte."""
        return (self.flags & FLAGS_MASK) | (self.category & CATEGORY_MASK)

    def is_deleted(self) -> bool:
        return bool(self.flags & RecordAttribute.DELETE)
