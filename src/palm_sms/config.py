"""
Palm SMS - Configuration
========================

Presentation settings for the command-line tool and the text formatters.
Configuration can come from:
- Default values (defined here)
- Environment variables

None of these settings affect how records are decoded or encoded.
"""

from dataclasses import dataclass
import logging
import os

logger = logging.getLogger(__name__)

EXPORT_FORMATS = ("text", "json")


@dataclass
class DisplayConfig:
    """
    Configuration for rendering SMS records.

    Timestamps carry the device's local clock with no time zone, so they
    are formatted without any zone conversion.

    Attributes:
        date_format: strftime pattern for timestamps
        preview_width: Characters of message text shown by `list`
        export_format: Default format for `export` ("text" or "json")
        lenient: Keep undecodable records instead of aborting the load
    """

    date_format: str = "%Y-%m-%d %H:%M:%S"
    preview_width: int = 40
    export_format: str = "text"
    lenient: bool = False

    @classmethod
    def from_env(cls) -> "DisplayConfig":
        """
        Create DisplayConfig from environment variables.

        Environment variables (all optional):
            PALM_SMS_DATE_FORMAT: strftime pattern for timestamps
            PALM_SMS_PREVIEW_WIDTH: Preview width (integer)
            PALM_SMS_EXPORT_FORMAT: "text" or "json"
            PALM_SMS_LENIENT: "1", "true" or "yes" to enable lenient loading

        Returns:
            DisplayConfig with values from environment variables
        """
        config = cls()

        if date_format := os.environ.get("PALM_SMS_DATE_FORMAT"):
            config.date_format = date_format

        if width := os.environ.get("PALM_SMS_PREVIEW_WIDTH"):
            try:
                config.preview_width = max(1, int(width))
            except ValueError:
                logger.warning(f"Ignoring invalid PALM_SMS_PREVIEW_WIDTH {width!r}")

        if export_format := os.environ.get("PALM_SMS_EXPORT_FORMAT"):
            if export_format.lower() in EXPORT_FORMATS:
                config.export_format = export_format.lower()
            else:
                logger.warning(f"Ignoring invalid PALM_SMS_EXPORT_FORMAT {export_format!r}")

        if lenient := os.environ.get("PALM_SMS_LENIENT"):
            config.lenient = lenient.lower() in ("1", "true", "yes")

        return config
