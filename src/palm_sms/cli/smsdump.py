"""
palm-sms - SMS Database Command-Line Interface
==============================================

This module implements the command-line interface for inspecting and
extracting messages from Handspring SMS databases.

Commands
--------
- **info**: Show database header information
- **list**: List messages, one per line
- **show**: Show one message in full
- **export**: Export messages as text or JSON
- **validate**: Check that every record decodes and packs back unchanged

Usage Examples
--------------
List all messages:
    $ palm-sms list "SMS Messages.pdb"

List only received messages:
    $ palm-sms list --folder inbox "SMS Messages.pdb"

Show a message with its opaque spans:
    $ palm-sms show "SMS Messages.pdb" 3

Export to JSON:
    $ palm-sms export -f json -o messages.json "SMS Messages.pdb"

Check a database before editing it:
    $ palm-sms validate "SMS Messages.pdb"
"""

from pathlib import Path
from typing import Optional
import json
import logging
import sys

import click

from palm_sms import __version__
from palm_sms.cli.errors import ExitCode, handle_cli_exception
from palm_sms.config import EXPORT_FORMATS, DisplayConfig
from palm_sms.sms import (
    FOLDER_NAMES,
    Folder,
    SMSDatabase,
    format_record,
    format_summary,
    pack_record,
    record_to_dict,
)
from palm_sms.sms.formatting import hex_span

# Configure logging
logger = logging.getLogger(__name__)


# =============================================================================
# CLI Context and Utilities
# =============================================================================

class Context:
    """
    Shared context for CLI commands.

    Stores the display configuration and the global flags.
    """

    def __init__(self) -> None:
        self.config: DisplayConfig = DisplayConfig.from_env()
        self.verbose: bool = False

    def setup_logging(self) -> None:
        """Configure logging based on verbosity."""
        level = logging.DEBUG if self.verbose else logging.WARNING
        logging.basicConfig(
            level=level,
            format="%(levelname)s: %(message)s" if self.verbose else "%(message)s",
        )

    def load(self, db_file: Path) -> SMSDatabase:
        """Load a database honouring the lenient setting."""
        return SMSDatabase.from_file(db_file, strict=not self.config.lenient)


pass_context = click.make_pass_decorator(Context, ensure=True)


class FolderChoice(click.ParamType):
    """
    Click parameter type for folder selection.

    Accepts a folder name (inbox, sent, pending) or number.
    """
    name = "folder"

    def convert(self, value: str, param: Optional[click.Parameter],
                ctx: Optional[click.Context]) -> Folder:
        """Convert string to Folder."""
        if isinstance(value, Folder):
            return value

        if value.isdigit() and int(value) < len(FOLDER_NAMES):
            return Folder(int(value))
        try:
            return Folder.from_name(value)
        except ValueError:
            self.fail(
                f"Invalid folder '{value}'. "
                f"Choose from: {', '.join(name.lower() for name in FOLDER_NAMES)}",
                param, ctx
            )


FOLDER = FolderChoice()


# =============================================================================
# Main CLI Group
# =============================================================================

@click.group()
@click.version_option(__version__, "--version", "-V", prog_name="palm-sms")
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output (debug logging, tracebacks)",
)
@click.option(
    "--lenient",
    is_flag=True,
    help="Keep going past records that cannot be decoded",
)
@pass_context
def main(ctx: Context, verbose: bool, lenient: bool) -> None:
    """
    Handspring SMS database tool.

    Inspect and extract messages from the "SMS Messages" PDB file of the
    Handspring SMS application (Treo 270 and similar PalmOS devices).

    \b
    Commands:
      info      Show database header information
      list      List messages
      show      Show one message in full
      export    Export messages as text or JSON
      validate  Check that records pack back unchanged

    \b
    Examples:
      palm-sms list "SMS Messages.pdb"
      palm-sms show "SMS Messages.pdb" 3
      palm-sms export -f json -o sms.json "SMS Messages.pdb"
    """
    ctx.verbose = verbose
    if lenient:
        ctx.config.lenient = True
    ctx.setup_logging()


# =============================================================================
# Info Command
# =============================================================================

@main.command("info")
@click.argument(
    "db_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@pass_context
def cmd_info(ctx: Context, db_file: Path) -> None:
    """
    Show information about an SMS database.

    \b
    Output includes:
      - Database name, type and creator
      - Creation, modification and backup times
      - Message counts per folder
    """
    try:
        db = ctx.load(db_file)
        header = db.header
        date_format = ctx.config.date_format

        click.echo(f"Database Information: {db_file}")
        click.echo("=" * 40)
        click.echo(f"Name:        {header.name}")
        click.echo(f"Type:        {header.db_type}")
        click.echo(f"Creator:     {header.creator}")
        click.echo(f"Version:     {header.version}")
        click.echo(f"Created:     {header.get_creation_time().strftime(date_format)}")
        click.echo(f"Modified:    {header.get_modification_time().strftime(date_format)}")
        if header.backup_time:
            click.echo(f"Backed up:   {header.get_backup_time().strftime(date_format)}")
        else:
            click.echo("Backed up:   never")
        click.echo()
        click.echo("Messages:")
        for name, count in db.count_by_folder().items():
            click.echo(f"  {name + ':':<12} {count}")
        click.echo(f"  {'Total:':<12} {len(db.messages)} records")

        errors = db.get_errors()
        if errors:
            click.echo(f"  {'Undecoded:':<12} {len(errors)}")

    except Exception as e:
        handle_cli_exception(e, verbose=ctx.verbose)


# =============================================================================
# List Command
# =============================================================================

@main.command("list")
@click.argument(
    "db_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-f", "--folder",
    type=FOLDER,
    default=None,
    help="Only list this folder (inbox, sent)",
)
@pass_context
def cmd_list(ctx: Context, db_file: Path, folder: Optional[Folder]) -> None:
    """
    List messages in an SMS database.

    \b
    Example:
      palm-sms list "SMS Messages.pdb"

    \b
    Output format:
         #  Folder   Date                 Phone            Name                 Text
         0  Inbox    2003-05-01 12:30:00  5551234          Alice                See you at 8
    """
    try:
        db = ctx.load(db_file)

        click.echo(
            f"{'#':>4}  {'Folder':<8} {'Date':<19}  {'Phone':<16} {'Name':<20} Text"
        )
        click.echo("-" * 80)

        for index, stored in enumerate(db.messages):
            if folder is not None and stored.category != folder:
                continue
            if stored.record is None:
                click.echo(f"{index:>4}  (undecoded: {stored.error})")
                continue
            click.echo(format_summary(index, stored.record, ctx.config))

    except Exception as e:
        handle_cli_exception(e, verbose=ctx.verbose)


# =============================================================================
# Show Command
# =============================================================================

@main.command("show")
@click.argument(
    "db_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.argument("index", type=int)
@pass_context
def cmd_show(ctx: Context, db_file: Path, index: int) -> None:
    """
    Show one message in full, including its opaque byte spans.

    INDEX is the record number printed by `list`.

    \b
    Example:
      palm-sms show "SMS Messages.pdb" 3
    """
    try:
        db = ctx.load(db_file)

        if not 0 <= index < len(db.messages):
            click.echo(
                f"Error: Record {index} not found "
                f"(database has {len(db.messages)} records)",
                err=True
            )
            sys.exit(ExitCode.INVALID_ARGS)

        stored = db.messages[index]
        click.echo(f"Record {index} (unique ID 0x{stored.unique_id:06X})")
        click.echo("-" * 40)
        if stored.record is None:
            click.echo(f"Undecoded: {stored.error}")
            click.echo(f"Category:   {stored.category}")
            click.echo(f"Raw:        {hex_span(stored.raw)}")
        else:
            click.echo(format_record(stored.record, ctx.config, show_unknown=True))

    except Exception as e:
        handle_cli_exception(e, verbose=ctx.verbose)


# =============================================================================
# Export Command
# =============================================================================

@main.command("export")
@click.argument(
    "db_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-f", "--format",
    "export_format",
    type=click.Choice(EXPORT_FORMATS, case_sensitive=False),
    default=None,
    help="Output format: text or json (default: text)",
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Output file (default: standard output)",
)
@click.option(
    "--folder",
    type=FOLDER,
    default=None,
    help="Only export this folder (inbox, sent)",
)
@click.option(
    "--unknown",
    "show_unknown",
    is_flag=True,
    help="Include opaque byte spans in text output",
)
@pass_context
def cmd_export(
    ctx: Context,
    db_file: Path,
    export_format: Optional[str],
    output: Optional[Path],
    folder: Optional[Folder],
    show_unknown: bool,
) -> None:
    """
    Export messages as human-readable text or JSON.

    \b
    Examples:
      palm-sms export "SMS Messages.pdb"
      palm-sms export -f json -o sms.json "SMS Messages.pdb"
      palm-sms export --folder sent "SMS Messages.pdb"
    """
    try:
        db = ctx.load(db_file)
        export_format = (export_format or ctx.config.export_format).lower()
        records = list(db.iter_records(folder))

        if export_format == "json":
            content = json.dumps(
                [record_to_dict(record) for record in records],
                indent=2,
                ensure_ascii=False,
            ) + "\n"
        else:
            blocks = [
                format_record(record, ctx.config, show_unknown=show_unknown)
                for record in records
            ]
            content = "".join(f"{block}\n\n{'-' * 40}\n" for block in blocks)

        if output is None:
            click.echo(content, nl=False)
        else:
            output.write_text(content, encoding="utf-8")
            click.echo(f"Exported {len(records)} messages to {output}", err=True)

    except Exception as e:
        handle_cli_exception(e, verbose=ctx.verbose, error_type="Export")


# =============================================================================
# Validate Command
# =============================================================================

@main.command("validate")
@click.argument(
    "db_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@pass_context
def cmd_validate(ctx: Context, db_file: Path) -> None:
    """
    Validate an SMS database.

    Every record is decoded and packed again; the check fails when a
    record cannot be decoded or does not pack back to identical bytes.
    Run this before editing a database with other tools.

    \b
    Example:
      palm-sms validate "SMS Messages.pdb"
    """
    try:
        db = SMSDatabase.from_file(db_file, strict=False)
        errors = []

        for index, stored in enumerate(db.messages):
            if stored.record is None:
                errors.append(f"Record {index}: {stored.error}")
                continue
            packed = pack_record(stored.record)
            if packed != stored.raw:
                errors.append(
                    f"Record {index}: packs to {len(packed)} bytes, "
                    f"expected the original {len(stored.raw)}"
                )
            elif ctx.verbose:
                click.echo(f"  Record {index}: OK ({stored.record.folder_name})")

        if errors:
            click.echo("Validation FAILED:")
            for error in errors:
                click.echo(f"  ERROR: {error}")
            sys.exit(ExitCode.DATA_ERROR)

        click.echo(f"Validation PASSED: {db_file} ({len(db.messages)} records)")

    except Exception as e:
        handle_cli_exception(e, verbose=ctx.verbose)


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
