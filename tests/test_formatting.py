"""
Display Configuration and Formatting Tests
==========================================

Tests for DisplayConfig and the text/JSON renderings of SMS records.
"""

import logging

import pytest

from palm_sms.config import DisplayConfig
from palm_sms.sms import (
    Folder,
    SMSRecord,
    format_record,
    format_summary,
    format_timestamp,
    record_to_dict,
)
from palm_sms.sms.formatting import hex_span


@pytest.fixture
def record() -> SMSRecord:
    """A decoded-looking Inbox record."""
    return SMSRecord(
        folder=Folder.INBOX,
        unknown1=b"\x00\x01",
        timestamp=1051792200,
        unknown2=bytes(26),
        phone="5551234",
        name="Smith",
        first_name="John",
        unknown3=b"1\x00",
        text="See you at 8",
    )


# =============================================================================
# Configuration Tests
# =============================================================================

class TestDisplayConfig:
    """Tests for DisplayConfig defaults and environment overrides."""

    ENV_VARS = (
        "PALM_SMS_DATE_FORMAT",
        "PALM_SMS_PREVIEW_WIDTH",
        "PALM_SMS_EXPORT_FORMAT",
        "PALM_SMS_LENIENT",
    )

    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        for name in self.ENV_VARS:
            monkeypatch.delenv(name, raising=False)

    def test_defaults(self):
        config = DisplayConfig.from_env()
        assert config == DisplayConfig()
        assert config.date_format == "%Y-%m-%d %H:%M:%S"
        assert config.preview_width == 40
        assert config.export_format == "text"
        assert config.lenient is False

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("PALM_SMS_DATE_FORMAT", "%d/%m/%Y")
        monkeypatch.setenv("PALM_SMS_PREVIEW_WIDTH", "20")
        monkeypatch.setenv("PALM_SMS_EXPORT_FORMAT", "JSON")
        monkeypatch.setenv("PALM_SMS_LENIENT", "yes")

        config = DisplayConfig.from_env()
        assert config.date_format == "%d/%m/%Y"
        assert config.preview_width == 20
        assert config.export_format == "json"
        assert config.lenient is True

    def test_lenient_false_values(self, monkeypatch):
        monkeypatch.setenv("PALM_SMS_LENIENT", "0")
        assert DisplayConfig.from_env().lenient is False

    def test_invalid_values_ignored(self, monkeypatch, caplog):
        """Test that bad values fall back to the defaults with a warning."""
        monkeypatch.setenv("PALM_SMS_PREVIEW_WIDTH", "wide")
        monkeypatch.setenv("PALM_SMS_EXPORT_FORMAT", "xml")

        with caplog.at_level(logging.WARNING, logger="palm_sms.config"):
            config = DisplayConfig.from_env()

        assert config.preview_width == 40
        assert config.export_format == "text"
        assert "PALM_SMS_PREVIEW_WIDTH" in caplog.text
        assert "PALM_SMS_EXPORT_FORMAT" in caplog.text


# =============================================================================
# Formatting Tests
# =============================================================================

class TestFormatting:
    """Tests for record renderings."""

    def test_timestamp(self, record: SMSRecord):
        assert format_timestamp(record) == "2003-05-01 12:30:00"
        config = DisplayConfig(date_format="%Y")
        assert format_timestamp(record, config) == "2003"

    def test_hex_span(self):
        assert hex_span(None) == "-"
        assert hex_span(b"") == "(empty)"
        assert hex_span(b"\x00\xff") == "00 ff"

    def test_summary(self, record: SMSRecord):
        line = format_summary(3, record)
        assert line.startswith("   3  Inbox")
        assert "5551234" in line
        assert "John Smith" in line
        assert line.endswith("See you at 8")

    def test_summary_preview(self, record: SMSRecord):
        record.text = "line one\nline two"
        line = format_summary(0, record, DisplayConfig(preview_width=10))
        assert line.endswith("line on...")

    def test_record_block(self, record: SMSRecord):
        block = format_record(record)
        assert block.splitlines() == [
            "Folder:     Inbox",
            "Date:       2003-05-01 12:30:00",
            "Phone:      5551234",
            "Name:       Smith",
            "First name: John",
            "",
            "See you at 8",
        ]

    def test_record_block_without_names(self, record: SMSRecord):
        record.name = None
        record.first_name = None
        assert "Name:" not in format_record(record)

    def test_record_block_unknown(self, record: SMSRecord):
        block = format_record(record, show_unknown=True)
        assert "Header:     SMSh" in block
        assert "Unknown3:   31 00" in block

    def test_to_dict(self, record: SMSRecord):
        data = record_to_dict(record)
        assert data["folder"] == 0
        assert data["date"] == "2003-05-01T12:30:00"
        assert data["unknown1"] == "0001"
        assert data["unknown2"] == "00" * 26

    def test_to_dict_unset(self):
        data = record_to_dict(SMSRecord(timestamp=0))
        assert data["phone"] is None
        assert data["unknown1"] is None
        assert data["folder_name"] == "Sent"
