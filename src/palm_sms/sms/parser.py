"""
SMS Record Parser
=================

This module turns the raw payload of one SMS database record into an
SMSRecord. It is called once per record by SMSDatabase while loading a
PDB file, after the container has stripped the record envelope and
supplied the record category.

Usage Examples
--------------
Decoding a record payload:
    >>> from palm_sms.sms import parse_record
    >>> record = parse_record(1, payload)
    >>> print(f"{record.phone}: {record.text}")

Layout selection
----------------
The category picks the layout:
- 0 (Inbox): optional names, opaque unknown3 span, unterminated text
- 1 (Sent): names always present, NUL-terminated text
- 2 (Pending): never observed, rejected
- anything else: rejected

The Inbox unknown3 span is found by scanning for the first ASCII digit
followed by a NUL. That rule comes from reverse engineering a single
database and is not a verified part of the format.
"""

from typing import Optional
import logging
import struct

from palm_sms.errors import MalformedRecordError, UnsupportedCategoryError
from palm_sms.sms.records import (
    EPOCH_1904,
    MIN_RECORD_SIZE,
    PREFIX_SIZE,
    TEXT_ENCODING,
    Folder,
    SMSRecord,
    has_name_flag,
)

# Logger for this module
logger = logging.getLogger(__name__)

# header_tag, unknown1, timestamp, unknown2
PREFIX_FORMAT = struct.Struct(">4s2sI26s")


# =============================================================================
# Field Readers
# =============================================================================

def read_cstring(data: bytes, offset: int, field_name: str) -> tuple[str, int]:
    """
    Read a NUL-terminated string.

    Args:
        data: The record bytes
        offset: Where the string starts
        field_name: Field being read, for error messages

    Returns:
        Tuple of (decoded string, offset just past the terminator)

    Raises:
        MalformedRecordError: If no NUL terminator follows offset
    """
    end = data.find(b"\x00", offset)
    if end < 0:
        raise MalformedRecordError(f"unterminated {field_name} field", offset)
    return data[offset:end].decode(TEXT_ENCODING), end + 1


def find_digit_terminator(data: bytes, offset: int = 0) -> int:
    """
    Find the first ASCII digit immediately followed by a NUL byte.

    Args:
        data: Bytes to scan
        offset: Where to start scanning

    Returns:
        Index of the NUL byte, or -1 if there is no such pair
    """
    end = data.find(b"\x00", offset)
    while end >= 0:
        if end > offset and 0x30 <= data[end - 1] <= 0x39:
            return end
        end = data.find(b"\x00", end + 1)
    return -1


def _parse_prefix(data: bytes) -> tuple[str, bytes, int, bytes]:
    """Unpack the fixed 36-byte prefix shared by all layouts."""
    header_tag, unknown1, raw_timestamp, unknown2 = PREFIX_FORMAT.unpack_from(data)
    header_tag = header_tag.decode(TEXT_ENCODING)
    if header_tag != "SMSh":
        logger.warning(f"Unexpected record header tag {header_tag!r}")
    return header_tag, unknown1, raw_timestamp - EPOCH_1904, unknown2


# =============================================================================
# Layout Parsers
# =============================================================================

def _parse_inbox(data: bytes) -> SMSRecord:
    """Parse an Inbox (category 0) record."""
    header_tag, unknown1, timestamp, unknown2 = _parse_prefix(data)
    phone, offset = read_cstring(data, PREFIX_SIZE, "phone")

    name: Optional[str] = None
    first_name: Optional[str] = None
    if has_name_flag(unknown2):
        name, offset = read_cstring(data, offset, "name")
        first_name, offset = read_cstring(data, offset, "first name")

    marker = find_digit_terminator(data, offset)
    if marker < 0:
        raise MalformedRecordError("missing digit+NUL marker before message text", offset)
    unknown3 = data[offset:marker + 1]

    text_start = marker + 1
    text_end = data.find(b"\x00", text_start)
    if text_end < 0:
        text_end = len(data)
    text = data[text_start:text_end].decode(TEXT_ENCODING)

    return SMSRecord(
        folder=Folder.INBOX,
        header_tag=header_tag,
        unknown1=unknown1,
        timestamp=timestamp,
        unknown2=unknown2,
        phone=phone,
        name=name,
        first_name=first_name,
        unknown3=unknown3,
        text=text,
    )


def _parse_sent(data: bytes) -> SMSRecord:
    """Parse a Sent (category 1) record."""
    header_tag, unknown1, timestamp, unknown2 = _parse_prefix(data)
    phone, offset = read_cstring(data, PREFIX_SIZE, "phone")
    name, offset = read_cstring(data, offset, "name")
    first_name, offset = read_cstring(data, offset, "first name")
    text, offset = read_cstring(data, offset, "text")

    if offset < len(data):
        logger.warning(f"Ignoring {len(data) - offset} bytes after Sent message text")

    return SMSRecord(
        folder=Folder.SENT,
        header_tag=header_tag,
        unknown1=unknown1,
        timestamp=timestamp,
        unknown2=unknown2,
        phone=phone,
        name=name,
        first_name=first_name,
        unknown3=b"",
        text=text,
    )


# =============================================================================
# Public Entry Point
# =============================================================================

def parse_record(category: int, data: bytes) -> SMSRecord:
    """
    Decode one SMS record payload.

    Args:
        category: The PDB record category (0=Inbox, 1=Sent)
        data: The raw record payload

    Returns:
        The decoded SMSRecord

    Raises:
        UnsupportedCategoryError: If category is not Inbox or Sent
        MalformedRecordError: If data does not fit the layout

    Example:
        >>> record = parse_record(1, payload)
        >>> record.folder_name
        'Sent'
    """
    if not Folder.is_supported(category):
        raise UnsupportedCategoryError(category)

    data = bytes(data)
    if len(data) < MIN_RECORD_SIZE:
        raise MalformedRecordError(
            f"record too short: need at least {MIN_RECORD_SIZE} bytes, got {len(data)}"
        )

    if category == Folder.INBOX:
        record = _parse_inbox(data)
    else:
        record = _parse_sent(data)

    logger.debug(
        f"Parsed {record.folder_name} record from {record.phone!r} "
        f"({len(data)} bytes)"
    )
    return record


# The host-facing name for parse_record
decode = parse_record
