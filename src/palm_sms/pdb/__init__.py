"""
PalmOS PDB Container
====================

Reading and writing of PalmOS record database (.pdb) files. The container
carries an ordered list of opaque record payloads, each tagged with a
category, attribute flags and a unique ID.

- **PalmDatabase**: load/save whole databases
- **PDBHeader**: the 78-byte database header
- **RecordEntry**: one record list entry
- **RawRecord**: a record payload with its envelope metadata
"""

from palm_sms.pdb.records import (
    HEADER_SIZE,
    RECORD_ENTRY_SIZE,
    DatabaseAttribute,
    RecordAttribute,
    PDBHeader,
    RecordEntry,
    RawRecord,
    palm_time_to_datetime,
    datetime_to_palm_time,
)
from palm_sms.pdb.database import PalmDatabase

__all__ = [
    "HEADER_SIZE",
    "RECORD_ENTRY_SIZE",
    "DatabaseAttribute",
    "RecordAttribute",
    "PDBHeader",
    "RecordEntry",
    "RawRecord",
    "palm_time_to_datetime",
    "datetime_to_palm_time",
    "PalmDatabase",
]
