"""
Handspring SMS Records
======================

This module decodes and encodes the records of the Handspring SMS
application database used on PalmOS devices such as the Treo 270.

This module provides:
- **parse_record**: raw record payload -> SMSRecord
- **pack_record**: SMSRecord -> raw record payload
- **SMSRecord**: the decoded message
- **SMSDatabase**: a whole SMS PDB file, decoded record by record
- **Formatting helpers**: text and JSON renderings

Quick Start
-----------
Decoding a single payload:

    >>> from palm_sms.sms import parse_record, pack_record
    >>> record = parse_record(1, payload)
    >>> print(record.phone, record.text)
    >>> assert pack_record(record) == payload

Reading a database:

    >>> from palm_sms.sms import SMSDatabase
    >>> db = SMSDatabase.from_file("SMS Messages.pdb")
    >>> for record in db.iter_records():
    ...     print(record.folder_name, record.text)

Folders
-------
The record category is the folder:
- **0 Inbox**: received messages
- **1 Sent**: sent messages
- **2 Pending**: name guessed, layout unknown, not supported
"""

from palm_sms.sms.records import (
    # Constants
    EPOCH_1904,
    FOLDER_NAMES,
    HEADER_TAG,
    PREFIX_SIZE,
    MIN_RECORD_SIZE,
    # Types
    Folder,
    SMSRecord,
    # Helpers
    folder_name,
    has_name_flag,
    new_record,
)

from palm_sms.sms.parser import (
    parse_record,
    decode,
    find_digit_terminator,
)

from palm_sms.sms.builder import (
    pack_record,
    encode,
)

from palm_sms.sms.database import (
    SMSDatabase,
    StoredMessage,
)

from palm_sms.sms.formatting import (
    format_record,
    format_summary,
    format_timestamp,
    record_to_dict,
)

__all__ = [
    # Constants
    "EPOCH_1904",
    "FOLDER_NAMES",
    "HEADER_TAG",
    "PREFIX_SIZE",
    "MIN_RECORD_SIZE",
    # Types
    "Folder",
    "SMSRecord",
    # Helpers
    "folder_name",
    "has_name_flag",
    "new_record",
    # Codec
    "parse_record",
    "decode",
    "find_digit_terminator",
    "pack_record",
    "encode",
    # Database
    "SMSDatabase",
    "StoredMessage",
    # Formatting
    "format_record",
    "format_summary",
    "format_timestamp",
    "record_to_dict",
]
