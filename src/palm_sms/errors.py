"""
Palm SMS Error Hierarchy
========================

This module defines the exception hierarchy for the palm_sms package.
All exceptions inherit from PalmSMSError, allowing callers to catch all
package-related errors with a single except clause if desired.

Exception Hierarchy
-------------------
PalmSMSError (base)
├── SMSRecordError (record codec)
│   ├── UnsupportedCategoryError - folder/category outside Inbox and Sent
│   └── MalformedRecordError - record bytes do not fit the layout
└── PDBError (database container)
    └── PDBFormatError - invalid PDB file structure

Errors are raised per record. The codec never substitutes default values
for a record it could not decode; whether to skip the record or abort the
whole load is up to the caller (see SMSDatabase).
"""

from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class PalmSMSError(Exception):
    """
    Base exception for all palm_sms errors.

    All exceptions in the package inherit from this class, allowing callers
    to catch everything with a single except clause:

        try:
            db = SMSDatabase.from_file("sms.pdb")
        except PalmSMSError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Record Codec Exceptions
# =============================================================================

class SMSRecordError(PalmSMSError):
    """Base exception for SMS record decoding and encoding errors."""
    pass


class UnsupportedCategoryError(SMSRecordError):
    """
    Category (folder) value the codec cannot handle.

    Only Inbox (0) and Sent (1) records have a known layout. Pending (2)
    is a known folder whose layout was never observed; any other value is
    not a folder at all.

    Attributes:
        category: The offending category value
    """

    def __init__(self, category: int, message: str = ""):
        self.category = category
        if not message:
            if category == 2:
                message = "Pending folder records have never been decoded"
            else:
                message = f"Unknown category {category}"
        super().__init__(message)


class MalformedRecordError(SMSRecordError):
    """
    Record bytes that do not match the expected layout.

    Raised when:
    - The record is shorter than the fixed prefix
    - A NUL terminator is missing
    - The digit+NUL marker ending the Inbox opaque span is absent
    - A timestamp cannot be represented on disk

    Attributes:
        offset: Byte offset within the record where the problem was found
    """

    def __init__(self, message: str, offset: Optional[int] = None):
        self.offset = offset
        if offset is not None:
            message = f"{message} (at offset {offset})"
        super().__init__(message)


# =============================================================================
# PDB Container Exceptions
# =============================================================================

class PDBError(PalmSMSError):
    """Base exception for PDB container errors."""
    pass


class PDBFormatError(PDBError):
    """
    Invalid PDB file format.

    Raised when reading a PDB file that:
    - Is shorter than the 78-byte header
    - Has a record list running past the end of the file
    - Has record offsets out of order or beyond the file
    - Is a resource database (PRC) rather than a record database
    """
    pass
