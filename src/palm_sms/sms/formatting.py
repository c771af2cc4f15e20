"""
Human-Readable SMS Output
=========================

Text and JSON renderings of SMS records, used by the palm-sms command-line
tool for listing and exporting messages.

Opaque spans are shown as hex. They are printed for inspection only; no
meaning is attached to them.
"""

from typing import Any, Optional

from palm_sms.config import DisplayConfig
from palm_sms.sms.records import SMSRecord


def format_timestamp(record: SMSRecord, config: Optional[DisplayConfig] = None) -> str:
    """Format the record timestamp (device local time, no zone)."""
    config = config or DisplayConfig()
    return record.get_datetime().strftime(config.date_format)


def hex_span(data: Optional[bytes]) -> str:
    """Render an opaque span as space-separated hex, or "-" when unset."""
    if data is None:
        return "-"
    return data.hex(" ") if data else "(empty)"


def _preview(text: Optional[str], width: int) -> str:
    text = (text or "").replace("\r", " ").replace("\n", " ")
    if len(text) > width:
        return text[:width - 3] + "..."
    return text


def format_summary(index: int, record: SMSRecord,
                   config: Optional[DisplayConfig] = None) -> str:
    """
    Format a record as one table line.

    Example:
        "  3  Inbox    2003-05-01 12:30:00  5551234          Alice  See you..."
    """
    config = config or DisplayConfig()
    return (
        f"{index:>4}  {record.folder_name:<8} {format_timestamp(record, config)}  "
        f"{record.phone or '':<16} {record.get_display_name():<20} "
        f"{_preview(record.text, config.preview_width)}"
    )


def format_record(record: SMSRecord, config: Optional[DisplayConfig] = None,
                  show_unknown: bool = False) -> str:
    """
    Format a record as a multi-line block.

    Args:
        record: The record to format
        config: Display settings
        show_unknown: Include hex dumps of the opaque spans

    Returns:
        The formatted block, without a trailing newline
    """
    config = config or DisplayConfig()
    lines = [
        f"Folder:     {record.folder_name}",
        f"Date:       {format_timestamp(record, config)}",
        f"Phone:      {record.phone or ''}",
    ]
    if record.has_name:
        lines.append(f"Name:       {record.name or ''}")
        lines.append(f"First name: {record.first_name or ''}")

    if show_unknown:
        lines.append(f"Header:     {record.header_tag}")
        lines.append(f"Unknown1:   {hex_span(record.unknown1)}")
        lines.append(f"Unknown2:   {hex_span(record.unknown2)}")
        lines.append(f"Unknown3:   {hex_span(record.unknown3)}")

    lines.append("")
    lines.append(record.text or "")
    return "\n".join(lines)


def record_to_dict(record: SMSRecord) -> dict[str, Any]:
    """
    Convert a record to a JSON-ready dictionary.

    Opaque spans are hex strings (None when unset).
    """
    def _hex(data: Optional[bytes]) -> Optional[str]:
        return data.hex() if data is not None else None

    return {
        "folder": int(record.folder),
        "folder_name": record.folder_name,
        "timestamp": record.timestamp,
        "date": record.get_datetime().isoformat(),
        "phone": record.phone,
        "name": record.name,
        "first_name": record.first_name,
        "text": record.text,
        "header_tag": record.header_tag,
        "unknown1": _hex(record.unknown1),
        "unknown2": _hex(record.unknown2),
        "unknown3": _hex(record.unknown3),
    }
