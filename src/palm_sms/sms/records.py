"""
SMS Record Definitions
======================

This module defines the data structures for records of the Handspring SMS
application database (the "SMS Messages" PDB, type DATA, creator SMS!).

Record Layout
-------------
Every record starts with a fixed 36-byte prefix:

    Offset  Size    Description
    ------  ----    -----------
    0       4       Header tag, ASCII "SMSh"
    4       2       Unknown (opaque)
    6       4       Timestamp, big-endian seconds since 1904-01-01
    10      26      Unknown (opaque); byte 7 high nibble = Inbox name flag

The variable-length tail depends on the folder (the record category):

    Inbox (0):  phone\\0 [name\\0 firstName\\0] unknown3 text
    Sent (1):   phone\\0 name\\0 firstName\\0 text\\0

unknown3 is an opaque span ending with an ASCII digit followed by a NUL.
The layout was reverse engineered from a single Treo 270 database produced
by SMS v3.5H; the unknown spans are kept byte-for-byte and never
interpreted.

Timestamps
----------
The device stores its local clock, with no time zone or DST information.
SMSRecord.timestamp is that clock value shifted to the Unix epoch, so it
should be rendered as if it were UTC.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Optional
import time

from palm_sms.palmtime import EPOCH_1904, unix_to_datetime


# =============================================================================
# Constants
# =============================================================================

# Folder display names, indexed by folder number ("Pending" is a guess)
FOLDER_NAMES = ("Inbox", "Sent", "Pending")

HEADER_TAG = "SMSh"

# Fixed prefix field sizes
HEADER_TAG_SIZE = 4
UNKNOWN1_SIZE = 2
TIMESTAMP_SIZE = 4
UNKNOWN2_SIZE = 26
PREFIX_SIZE = HEADER_TAG_SIZE + UNKNOWN1_SIZE + TIMESTAMP_SIZE + UNKNOWN2_SIZE

# Shortest decodable record: prefix plus the terminator of an empty phone
MIN_RECORD_SIZE = PREFIX_SIZE + 1

# Byte of unknown2 whose high nibble flags name/firstName in Inbox records
NAME_FLAG_OFFSET = 7
NAME_FLAG_NIBBLE = 0x4

# Lossless byte <-> str mapping for the NUL-terminated text fields
TEXT_ENCODING = "latin-1"


# =============================================================================
# Enumeration Types
# =============================================================================

class Folder(IntEnum):
    """
    SMS folder, stored as the PDB record category.

    The folder decides the record layout. Only INBOX and SENT can be
    decoded or encoded.
    """
    INBOX = 0
    SENT = 1
    PENDING = 2

    @classmethod
    def from_name(cls, name: str) -> "Folder":
        """Look up a folder by display name (case-insensitive)."""
        for index, folder_name in enumerate(FOLDER_NAMES):
            if folder_name.lower() == name.lower():
                return cls(index)
        raise ValueError(f"Unknown folder name: {name!r}")

    def get_display_name(self) -> str:
        """Get the English folder name."""
        return FOLDER_NAMES[self.value]

    @classmethod
    def is_supported(cls, value: int) -> bool:
        """Check if records in this folder have a known layout."""
        return value in (cls.INBOX, cls.SENT)


def folder_name(folder: int) -> str:
    """
    Get the display name for a folder number.

    Values outside the folder table render as "Unknown (N)".
    """
    if 0 <= folder < len(FOLDER_NAMES):
        return FOLDER_NAMES[folder]
    return f"Unknown ({folder})"


# =============================================================================
# SMS Record
# =============================================================================

@dataclass
class SMSRecord:
    """
    A single SMS message.

    Text fields are None when unset. For Inbox records name and first_name
    are only present when the name flag in unknown2 is set; Sent records
    always carry them.

    Attributes:
        folder: Folder number (0=Inbox, 1=Sent, 2=Pending)
        header_tag: Record marker, "SMSh"
        unknown1: Opaque 2-byte span
        timestamp: Seconds since the Unix epoch, device local clock
        unknown2: Opaque 26-byte span
        phone: Sender or recipient phone number
        name: Contact name
        first_name: Contact first name
        unknown3: Opaque span between the names and the text (Inbox only)
        text: Message body
    """
    folder: int = Folder.SENT
    header_tag: str = HEADER_TAG
    unknown1: Optional[bytes] = None
    timestamp: int = field(default_factory=lambda: int(time.time()))
    unknown2: Optional[bytes] = None
    phone: Optional[str] = None
    name: Optional[str] = None
    first_name: Optional[str] = None
    unknown3: Optional[bytes] = None
    text: Optional[str] = None

    @property
    def category(self) -> int:
        """The PDB record category; identical to the folder."""
        return self.folder

    @property
    def folder_name(self) -> str:
        """English name of the record's folder."""
        return folder_name(self.folder)

    @property
    def has_name(self) -> bool:
        """True when either name field is set."""
        return self.name is not None or self.first_name is not None

    def get_datetime(self) -> datetime:
        """The timestamp as a naive datetime of the device clock."""
        return unix_to_datetime(self.timestamp)

    def name_flag_set(self) -> bool:
        """
        Check the Inbox name flag in unknown2.

        The flag is the high nibble of byte 7; a value of 4 means name and
        first name follow the phone number.
        """
        return has_name_flag(self.unknown2)

    def get_display_name(self) -> str:
        """Contact name for display, falling back to the phone number."""
        parts = [part for part in (self.first_name, self.name) if part]
        if parts:
            return " ".join(parts)
        return self.phone or ""


def has_name_flag(unknown2: Optional[bytes]) -> bool:
    """Check whether an unknown2 span carries the Inbox name flag."""
    if unknown2 is None or len(unknown2) <= NAME_FLAG_OFFSET:
        return False
    return (unknown2[NAME_FLAG_OFFSET] >> 4) == NAME_FLAG_NIBBLE


def new_record() -> SMSRecord:
    """
    Create a new SMS record with blank values for all fields.

    Defaults:
        folder:     1 (Sent)
        timestamp:  now
        header_tag: "SMSh"
        everything else unset

    The unknown spans are not known for a fresh record, so the packed
    result is not guaranteed to be accepted by the device.
    """
    return SMSRecord()
