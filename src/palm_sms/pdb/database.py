"""
PDB Database Reader and Writer
==============================

This module provides the PalmDatabase class, a generic container for the
records of a PalmOS record database. It knows nothing about what the
records contain; SMSDatabase layers the SMS record codec on top.

Usage Examples
--------------
Reading a PDB file:
    >>> from palm_sms.pdb import PalmDatabase
    >>> db = PalmDatabase.from_file("SMS Messages.pdb")
    >>> print(f"{db.header.name}: {len(db.records)} records")

Writing it back:
    >>> db.write_file("copy.pdb")
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Union
import logging

from palm_sms.errors import PDBFormatError
from palm_sms.pdb.records import (
    GAP_SIZE,
    HEADER_SIZE,
    RECORD_ENTRY_SIZE,
    PDBHeader,
    RawRecord,
    RecordEntry,
)

# Logger for this module
logger = logging.getLogger(__name__)


@dataclass
class PalmDatabase:
    """
    A PalmOS record database.

    Attributes:
        header: The database header; offsets and record count are
            recomputed on save
        app_info: Raw AppInfo block (empty when absent)
        sort_info: Raw SortInfo block (empty when absent)
        records: Record payloads in file order

    Example:
        >>> db = PalmDatabase.from_file("SMS Messages.pdb")
        >>> for record in db.records:
        ...     print(record.category, len(record.data))
    """
    header: PDBHeader = field(default_factory=PDBHeader)
    app_info: bytes = field(default=b"", repr=False)
    sort_info: bytes = field(default=b"", repr=False)
    records: list[RawRecord] = field(default_factory=list)

    # =========================================================================
    # Loading
    # =========================================================================

    @classmethod
    def from_file(cls, filepath: Union[str, Path]) -> "PalmDatabase":
        """
        Read a PDB file from disk.

        Raises:
            FileNotFoundError: If the file doesn't exist
            PDBFormatError: If the file cannot be parsed
        """
        filepath = Path(filepath)
        return cls.from_bytes(filepath.read_bytes())

    @classmethod
    def from_bytes(cls, data: bytes) -> "PalmDatabase":
        """
        Parse a PDB image.

        Args:
            data: The raw file bytes

        Returns:
            A PalmDatabase with all record payloads split out

        Raises:
            PDBFormatError: If the data is not a valid record database
        """
        data = bytes(data)
        header = PDBHeader.from_bytes(data)

        if header.is_resource_db():
            raise PDBFormatError("Resource databases (PRC) are not supported")

        list_end = HEADER_SIZE + header.num_records * RECORD_ENTRY_SIZE
        if list_end > len(data):
            raise PDBFormatError(
                f"Record list of {header.num_records} entries runs past end of file"
            )
        if header.next_record_list:
            logger.warning("Chained record lists are not supported; ignoring the chain")

        entries = [
            RecordEntry.from_bytes(data, HEADER_SIZE + index * RECORD_ENTRY_SIZE)
            for index in range(header.num_records)
        ]

        # Each block ends where the next one starts
        first_record = entries[0].offset if entries else len(data)
        app_info = b""
        sort_info = b""
        if header.app_info_offset:
            app_end = header.sort_info_offset or first_record
            app_info = cls._slice(data, list_end, header.app_info_offset, app_end, "AppInfo")
        if header.sort_info_offset:
            sort_info = cls._slice(
                data, list_end, header.sort_info_offset, first_record, "SortInfo"
            )

        records = []
        for index, entry in enumerate(entries):
            if index + 1 < len(entries):
                end = entries[index + 1].offset
            else:
                end = len(data)
            payload = cls._slice(data, list_end, entry.offset, end, f"record {index}")
            records.append(RawRecord(
                data=payload,
                category=entry.category,
                flags=entry.flags,
                unique_id=entry.unique_id,
            ))
            logger.debug(
                f"Record {index}: offset 0x{entry.offset:X}, {len(payload)} bytes, "
                f"category {entry.category}"
            )

        return cls(header=header, app_info=app_info, sort_info=sort_info, records=records)

    @staticmethod
    def _slice(data: bytes, data_start: int, start: int, end: int, what: str) -> bytes:
        """
        Cut a block out of the file, checking its bounds.

        Blocks may not begin inside the header or the record list
        (data_start is the end of the list). The two-byte gap after the
        list is not enforced; some desktop tools omit it.
        """
        if start < data_start or start > end or end > len(data):
            raise PDBFormatError(
                f"Invalid {what} bounds 0x{start:X}-0x{end:X} "
                f"(file size {len(data)} bytes)"
            )
        return data[start:end]

    # =========================================================================
    # Saving
    # =========================================================================

    def to_bytes(self) -> bytes:
        """
        Serialize the database.

        The header's record count and block offsets are updated to match
        the current contents.
        """
        offset = HEADER_SIZE + len(self.records) * RECORD_ENTRY_SIZE + GAP_SIZE

        self.header.num_records = len(self.records)
        self.header.next_record_list = 0
        self.header.app_info_offset = offset if self.app_info else 0
        offset += len(self.app_info)
        self.header.sort_info_offset = offset if self.sort_info else 0
        offset += len(self.sort_info)

        result = bytearray(self.header.to_bytes())
        for record in self.records:
            entry = RecordEntry(
                offset=offset,
                attributes=record.get_attributes(),
                unique_id=record.unique_id,
            )
            result.extend(entry.to_bytes())
            offset += len(record.data)

        result.extend(b"\x00" * GAP_SIZE)
        result.extend(self.app_info)
        result.extend(self.sort_info)
        for record in self.records:
            result.extend(record.data)

        return bytes(result)

    def write_file(self, filepath: Union[str, Path]) -> int:
        """
        Write the database to disk.

        Returns:
            Number of bytes written
        """
        data = self.to_bytes()
        Path(filepath).write_bytes(data)
        logger.info(f"Wrote {len(self.records)} records ({len(data)} bytes) to {filepath}")
        return len(data)
