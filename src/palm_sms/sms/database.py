"""
SMS Database
============

This module provides SMSDatabase, which loads a Handspring SMS PDB file,
decodes every record with parse_record() and packs them back with
pack_record() on save.

Usage Examples
--------------
Reading messages:
    >>> from palm_sms import SMSDatabase
    >>> db = SMSDatabase.from_file("SMS Messages.pdb")
    >>> for record in db.iter_records():
    ...     print(f"{record.folder_name}: {record.text}")

Adding a message and saving:
    >>> record = db.new_record()
    >>> record.phone = "5551234"
    >>> record.text = "hello"
    >>> db.append(record)
    >>> db.write_file("SMS Messages.pdb")

Error policy
------------
In strict mode (the default) the first record that fails to decode aborts
the load. In lenient mode the failure is logged, the raw payload is kept in
its StoredMessage and written back untouched on save.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Optional, Union
import logging

from palm_sms.errors import SMSRecordError
from palm_sms.pdb import PalmDatabase, PDBHeader, RawRecord
from palm_sms.sms.builder import pack_record
from palm_sms.sms.parser import parse_record
from palm_sms.sms.records import Folder, SMSRecord, new_record

# Logger for this module
logger = logging.getLogger(__name__)

DEFAULT_NAME = "SMS Messages"
DB_TYPE = "DATA"
CREATOR = "SMS!"


@dataclass
class StoredMessage:
    """
    One database record: the decoded message plus its envelope.

    Attributes:
        record: The decoded message, None if decoding failed
        raw: The payload as loaded (empty for new messages)
        category: Category from the record list
        flags: Record attribute flags
        unique_id: Record unique ID
        error: Why decoding failed, when it did
    """
    record: Optional[SMSRecord]
    raw: bytes = field(default=b"", repr=False)
    category: int = 0
    flags: int = 0
    unique_id: int = 0
    error: Optional[str] = None

    @property
    def is_decoded(self) -> bool:
        return self.record is not None

    def to_raw_record(self) -> RawRecord:
        """Pack the message into a container record."""
        if self.record is None:
            # Undecodable payloads go back exactly as they came in
            return RawRecord(
                data=self.raw,
                category=self.category,
                flags=self.flags,
                unique_id=self.unique_id,
            )
        return RawRecord(
            data=pack_record(self.record),
            category=self.record.folder,
            flags=self.flags,
            unique_id=self.unique_id,
        )


@dataclass
class SMSDatabase:
    """
    The Handspring SMS message database.

    Attributes:
        header: PDB header of the underlying file
        messages: Stored messages in file order
        app_info: Raw AppInfo block, kept as-is
        sort_info: Raw SortInfo block, kept as-is
    """
    header: PDBHeader = field(default_factory=lambda: PDBHeader(
        name=DEFAULT_NAME, db_type=DB_TYPE, creator=CREATOR,
    ))
    messages: list[StoredMessage] = field(default_factory=list)
    app_info: bytes = field(default=b"", repr=False)
    sort_info: bytes = field(default=b"", repr=False)

    # =========================================================================
    # Construction
    # =========================================================================

    @classmethod
    def new(cls) -> "SMSDatabase":
        """Create an empty SMS database with the default name, type and creator."""
        return cls()

    @classmethod
    def from_file(cls, filepath: Union[str, Path], strict: bool = True) -> "SMSDatabase":
        """
        Load an SMS database from disk.

        Args:
            filepath: Path to the PDB file
            strict: Abort on the first undecodable record

        Raises:
            FileNotFoundError: If the file doesn't exist
            PDBFormatError: If the container cannot be parsed
            SMSRecordError: In strict mode, if a record cannot be decoded
        """
        logger.debug(f"Loading {filepath}")
        return cls.from_pdb(PalmDatabase.from_file(filepath), strict=strict)

    @classmethod
    def from_bytes(cls, data: bytes, strict: bool = True) -> "SMSDatabase":
        """Load an SMS database from a PDB image."""
        return cls.from_pdb(PalmDatabase.from_bytes(data), strict=strict)

    @classmethod
    def from_pdb(cls, pdb: PalmDatabase, strict: bool = True) -> "SMSDatabase":
        """
        Decode every record of a loaded container.

        Args:
            pdb: The loaded container
            strict: Abort on the first undecodable record

        Raises:
            SMSRecordError: In strict mode, if a record cannot be decoded
        """
        header = pdb.header
        if header.db_type != DB_TYPE or header.creator != CREATOR:
            logger.warning(
                f"Database type/creator is {header.db_type!r}/{header.creator!r}, "
                f"expected {DB_TYPE!r}/{CREATOR!r}"
            )

        messages = []
        for index, raw in enumerate(pdb.records):
            try:
                record = parse_record(raw.category, raw.data)
                error = None
            except SMSRecordError as e:
                if strict:
                    logger.error(f"Failed to decode record {index}: {e}")
                    raise
                logger.warning(f"Keeping record {index} undecoded: {e}")
                record = None
                error = str(e)

            messages.append(StoredMessage(
                record=record,
                raw=raw.data,
                category=raw.category,
                flags=raw.flags,
                unique_id=raw.unique_id,
                error=error,
            ))

        logger.debug(f"Loaded {len(messages)} records from {header.name!r}")
        return cls(
            header=header,
            messages=messages,
            app_info=pdb.app_info,
            sort_info=pdb.sort_info,
        )

    # =========================================================================
    # Record Management
    # =========================================================================

    def new_record(self) -> SMSRecord:
        """
        Create a new blank record.

        The record is not added to the database; use append() for that.
        """
        return new_record()

    def append(self, record: SMSRecord) -> StoredMessage:
        """Add a record at the end of the database."""
        stored = StoredMessage(record=record, category=record.folder)
        self.messages.append(stored)
        return stored

    def remove(self, index: int) -> StoredMessage:
        """Remove and return the message at index."""
        return self.messages.pop(index)

    def iter_records(self, folder: Optional[int] = None) -> Iterator[SMSRecord]:
        """
        Iterate over decoded records.

        Args:
            folder: Only yield records in this folder

        Yields:
            SMSRecord instances, skipping undecoded messages
        """
        for stored in self.messages:
            if stored.record is None:
                continue
            if folder is not None and stored.record.folder != folder:
                continue
            yield stored.record

    def get_errors(self) -> list[tuple[int, str]]:
        """List (index, message) for every record that failed to decode."""
        return [
            (index, stored.error or "")
            for index, stored in enumerate(self.messages)
            if stored.record is None
        ]

    def count_by_folder(self) -> dict[str, int]:
        """Count decoded records per folder name."""
        counts = {folder.get_display_name(): 0 for folder in Folder}
        for record in self.iter_records():
            counts[record.folder_name] = counts.get(record.folder_name, 0) + 1
        return counts

    # =========================================================================
    # Saving
    # =========================================================================

    def to_pdb(self) -> PalmDatabase:
        """
        Pack every message into a container.

        Raises:
            SMSRecordError: If a record cannot be encoded
        """
        records = [stored.to_raw_record() for stored in self.messages]
        return PalmDatabase(
            header=self.header,
            app_info=self.app_info,
            sort_info=self.sort_info,
            records=records,
        )

    def to_bytes(self) -> bytes:
        """Serialize the database to a PDB image."""
        return self.to_pdb().to_bytes()

    def write_file(self, filepath: Union[str, Path]) -> int:
        """
        Write the database to disk.

        Returns:
            Number of bytes written
        """
        return self.to_pdb().write_file(filepath)
