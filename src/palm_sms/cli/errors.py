"""
palm-sms Exit Codes and Error Reporting
=======================================

Every palm-sms command wraps its body in a try block and hands any
exception to handle_cli_exception(), which prints a one-line message on
stderr and exits with one of the ExitCode values:

    0  success
    1  the database file or one of its records could not be read
    2  bad command-line arguments, or the file could not be opened
    3  anything else (a bug); -v adds the traceback

Record errors in strict mode get a hint about --lenient, which loads the
remaining records and leaves the bad ones untouched.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click

from palm_sms.errors import PalmSMSError, SMSRecordError


class ExitCode(IntEnum):
    """Process exit codes of the palm-sms tool."""
    SUCCESS = 0
    DATA_ERROR = 1
    INVALID_ARGS = 2
    INTERNAL_ERROR = 3


LENIENT_HINT = "Use --lenient to load the remaining records."


def handle_cli_exception(
    error: Exception,
    verbose: bool = False,
    error_type: str | None = None
) -> NoReturn:
    """
    Report an exception raised by a palm-sms command and exit.

    Args:
        error: The exception raised by the command
        verbose: Print the traceback of unexpected errors
        error_type: Word put in front of "error:", e.g. "Export"

    Raises:
        SystemExit: Always
    """
    prefix = f"{error_type} error: " if error_type else "Error: "

    if isinstance(error, SMSRecordError):
        click.echo(f"{prefix}{error}", err=True)
        click.echo(LENIENT_HINT, err=True)
        sys.exit(ExitCode.DATA_ERROR)

    if isinstance(error, PalmSMSError):
        click.echo(f"{prefix}not a readable SMS database: {error}", err=True)
        sys.exit(ExitCode.DATA_ERROR)

    if isinstance(error, (click.BadParameter, OSError)):
        click.echo(f"{prefix}{error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    click.echo(f"Internal error: {error}", err=True)
    if verbose:
        traceback.print_exc()
    sys.exit(ExitCode.INTERNAL_ERROR)
