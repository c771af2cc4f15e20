"""
Palm SMS - Handspring SMS Database Toolkit
==========================================

This package reads, manipulates and writes the .pdb files used by the
Handspring SMS application on PalmOS devices such as the Handspring Treo
270.

The record layout is the result of reverse engineering a database produced
by SMS v3.5H. Several byte spans have no known meaning; they are kept
byte-for-byte so that unmodified records are written back exactly as they
were read. Creating messages from scratch is possible, but the result is
not guaranteed to be accepted by the device.

Main Components
---------------
- **sms**: SMS record codec and the SMSDatabase wrapper
- **pdb**: Generic PalmOS PDB container reader/writer
- **cli**: The palm-sms command-line tool

Quick Start
-----------
Read messages:
    >>> from palm_sms import SMSDatabase
    >>> db = SMSDatabase.from_file("SMS Messages.pdb")
    >>> for record in db.iter_records():
    ...     print(f"{record.folder_name}: {record.phone}: {record.text}")

Decode a single record payload:
    >>> from palm_sms import parse_record
    >>> record = parse_record(category=1, data=payload)

Or use the command-line tool:
    $ palm-sms list "SMS Messages.pdb"
    $ palm-sms export -f json -o messages.json "SMS Messages.pdb"

Version History
---------------
0.1.0 - Inbox and Sent record codec, PDB container, palm-sms tool
"""

__version__ = "0.1.0"

# =============================================================================
# Public API Exports
# =============================================================================

from palm_sms.errors import (
    PalmSMSError,
    SMSRecordError,
    UnsupportedCategoryError,
    MalformedRecordError,
    PDBError,
    PDBFormatError,
)

from palm_sms.palmtime import (
    palm_to_unix,
    unix_to_palm,
)

# SMS record exports
from palm_sms.sms import (
    EPOCH_1904,
    FOLDER_NAMES,
    Folder,
    SMSRecord,
    SMSDatabase,
    StoredMessage,
    new_record,
    parse_record,
    pack_record,
    decode,
    encode,
)

# PDB container exports
from palm_sms.pdb import (
    PalmDatabase,
    PDBHeader,
    RawRecord,
)

__all__ = [
    # Version info
    "__version__",
    # Exception hierarchy
    "PalmSMSError",
    "SMSRecordError",
    "UnsupportedCategoryError",
    "MalformedRecordError",
    "PDBError",
    "PDBFormatError",
    # Time conversion
    "palm_to_unix",
    "unix_to_palm",
    # SMS records
    "EPOCH_1904",
    "FOLDER_NAMES",
    "Folder",
    "SMSRecord",
    "SMSDatabase",
    "StoredMessage",
    "new_record",
    "parse_record",
    "pack_record",
    "decode",
    "encode",
    # PDB container
    "PalmDatabase",
    "PDBHeader",
    "RawRecord",
]
