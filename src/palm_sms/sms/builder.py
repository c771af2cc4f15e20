"""
SMS Record Builder
==================

This module is the converse of the parser: it packs an SMSRecord back
into the raw payload stored in the SMS database.

Packing a record that came from parse_record() and was not modified
reproduces the original bytes exactly. Records created from scratch with
new_record() have no unknown spans to copy, so the fixed-width spans are
NUL-filled and unknown3 is left out; the device may not accept the
result.

Usage
-----
    >>> from palm_sms.sms import parse_record, pack_record
    >>> record = parse_record(1, payload)
    >>> record.text = "See you at 8"
    >>> payload = pack_record(record)
"""

from typing import Optional
import logging
import struct

from palm_sms.errors import MalformedRecordError, UnsupportedCategoryError
from palm_sms.sms.records import (
    EPOCH_1904,
    HEADER_TAG_SIZE,
    TEXT_ENCODING,
    UNKNOWN1_SIZE,
    UNKNOWN2_SIZE,
    Folder,
    SMSRecord,
)

# Logger for this module
logger = logging.getLogger(__name__)

# Largest value the on-disk u32 timestamp can hold
MAX_PALM_TIMESTAMP = 0xFFFFFFFF


# =============================================================================
# Field Writers
# =============================================================================

def _fixed(data: Optional[bytes], size: int, pad: bytes = b"\x00") -> bytes:
    """Pad or truncate a span to exactly size bytes."""
    data = data or b""
    return data[:size].ljust(size, pad)


def _encode(value: Optional[str]) -> bytes:
    """Encode an optional string; unset encodes as empty."""
    if value is None:
        return b""
    try:
        return value.encode(TEXT_ENCODING)
    except UnicodeEncodeError as e:
        raise MalformedRecordError(f"cannot store {value!r}: {e.reason}") from e


def _text(value: Optional[str], field_name: str) -> bytes:
    """
    Encode a variable-length text field.

    A NUL inside the value would end the field early when the record is
    read back, so it is refused.
    """
    if value is not None and "\x00" in value:
        raise MalformedRecordError(f"{field_name} field contains a NUL character")
    return _encode(value)


def _cstring(value: Optional[str], field_name: str) -> bytes:
    """Encode a text field with a NUL terminator."""
    return _text(value, field_name) + b"\x00"


def _pack_prefix(record: SMSRecord) -> bytes:
    """Pack the fixed 36-byte prefix shared by all layouts."""
    raw_timestamp = record.timestamp + EPOCH_1904
    if not 0 <= raw_timestamp <= MAX_PALM_TIMESTAMP:
        raise MalformedRecordError(
            f"timestamp {record.timestamp} is outside the range of the on-disk clock"
        )

    return b"".join([
        _fixed(_encode(record.header_tag), HEADER_TAG_SIZE, b" "),
        _fixed(record.unknown1, UNKNOWN1_SIZE),
        struct.pack(">I", raw_timestamp),
        _fixed(record.unknown2, UNKNOWN2_SIZE),
    ])


# =============================================================================
# Public Entry Point
# =============================================================================

def pack_record(record: SMSRecord) -> bytes:
    """
    Encode an SMSRecord as a raw record payload.

    Args:
        record: The record to pack

    Returns:
        The record payload bytes

    Raises:
        UnsupportedCategoryError: If the record's folder is not Inbox or Sent
        MalformedRecordError: If the timestamp cannot be stored, or a text
            field holds a NUL or a character outside Latin-1
    """
    if not Folder.is_supported(record.folder):
        raise UnsupportedCategoryError(record.folder)

    parts = [_pack_prefix(record), _cstring(record.phone, "phone")]

    if record.folder == Folder.INBOX:
        # Names are written only when present; text carries no terminator
        if record.has_name:
            parts.append(_cstring(record.name, "name"))
            parts.append(_cstring(record.first_name, "first name"))
        parts.append(record.unknown3 or b"")
        parts.append(_text(record.text, "text"))
    else:
        parts.append(_cstring(record.name, "name"))
        parts.append(_cstring(record.first_name, "first name"))
        parts.append(_cstring(record.text, "text"))

    data = b"".join(parts)
    logger.debug(f"Packed {record.folder_name} record to {len(data)} bytes")
    return data


# The host-facing name for pack_record
encode = pack_record
