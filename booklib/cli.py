"""Command-line inspector for a local catalog."""

import asyncio
import logging
import mimetypes
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TypeVar

import click
import msgspec
from rich.console import Console
from rich.table import Table

from booklib import __version__
from booklib.config import LibrarySettings, load_config
from booklib.core.codec import decode_from_text
from booklib.core.models import FileType, Language, Level, Record
from booklib.storage.exceptions import StorageError
from booklib.storage.library import Library

T = TypeVar("T")

# Errors a command reports as one line instead of a traceback.
REPORTED_ERRORS = (StorageError, OSError, ValueError, msgspec.ValidationError)


@dataclass
class Context:
    """CLI context that holds shared resources."""

    settings: LibrarySettings
    console: Console
    debug: bool = False


def log_level(verbose: bool, quiet: bool, debug: bool) -> int:
    """Library log level for the CLI flags.

    Commands print their own results, so library logging stays at WARNING
    unless asked for.
    """
    if debug:
        return logging.DEBUG
    if verbose:
        return logging.INFO
    if quiet:
        return logging.ERROR
    return logging.WARNING


class EchoHandler(logging.Handler):
    """Log handler writing through ``click.echo`` to the current stderr."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            click.echo(self.format(record), err=True)
        except Exception:
            self.handleError(record)


def setup_logging(level: int, debug: bool = False) -> None:
    """Send ``booklib`` log records to stderr at ``level``."""
    logger = logging.getLogger("booklib")
    logger.setLevel(level)
    handler = next((h for h in logger.handlers if isinstance(h, EchoHandler)), None)
    if handler is None:
        handler = EchoHandler()
        logger.addHandler(handler)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s %(name)s %(levelname)s: %(message)s"
            if debug
            else "%(levelname)s: %(message)s"
        )
    )


def run_with_library(
    ctx: click.Context, action: Callable[[Library], Awaitable[T]]
) -> T:
    """Initialize a library, run ``action`` against it and close it."""

    async def _run() -> T:
        library = Library.from_settings(ctx.obj.settings)
        await library.initialize()
        try:
            return await action(library)
        finally:
            library.close()

    return asyncio.run(_run())


def parse_assignments(assignments: tuple[str, ...]) -> dict[str, Any]:
    """Parse ``field=value`` pairs; empty values clear optional fields."""
    updates: dict[str, Any] = {}
    for item in assignments:
        field, sep, value = item.partition("=")
        if not sep or not field.strip():
            raise click.BadParameter(f"Expected field=value, got {item!r}")
        field = field.strip()
        if field not in Record.__struct_fields__:
            raise click.BadParameter(f"Unknown field: {field}")
        updates[field] = value if value != "" else None
    for numeric in ("file_size", "total_pages"):
        if updates.get(numeric) is not None:
            try:
                updates[numeric] = int(updates[numeric])
            except ValueError:
                raise click.BadParameter(f"{numeric} must be an integer")
    return updates


class BooklibGroup(click.Group):
    """Group that reports storage and input errors as a one-line message.

    With ``--debug`` the original exception propagates with its traceback.
    """

    def invoke(self, ctx):
        try:
            return super().invoke(ctx)
        except REPORTED_ERRORS as e:
            if isinstance(ctx.obj, Context) and ctx.obj.debug:
                raise
            raise click.ClickException(str(e)) from e


@click.group(cls=BooklibGroup)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-error output")
@click.option("--no-color", is_flag=True, help="Disable colored output")
@click.option("--debug", is_flag=True, help="Enable debug mode with full tracebacks")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file",
)
@click.option(
    "--data-dir",
    "-d",
    type=click.Path(path_type=Path),
    help="Override data directory location",
)
@click.option(
    "--native/--no-native",
    default=None,
    help="Treat the host as a native shell (native tier)",
)
@click.version_option(
    version=__version__, prog_name="booklib", message="booklib version %(version)s"
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    no_color: bool,
    debug: bool,
    config: Path | None,
    data_dir: Path | None,
    native: bool | None,
) -> None:
    """Inspect and maintain a local document catalog."""
    setup_logging(log_level(verbose, quiet, debug), debug=debug)

    try:
        config_data = load_config(config)
        if data_dir:
            config_data["data_dir"] = str(data_dir)
        if native is not None:
            config_data["native_host"] = native
        settings = LibrarySettings.from_mapping(config_data)
    except ValueError as e:
        if debug:
            raise
        raise click.ClickException(f"Invalid configuration: {e}") from e

    ctx.obj = Context(
        settings=settings,
        console=Console(no_color=no_color, highlight=not no_color),
        debug=debug,
    )


@cli.command()
@click.pass_context
def info(ctx: click.Context) -> None:
    """Show the active tier and catalog size."""

    async def action(library: Library) -> None:
        console = ctx.obj.console
        console.print(f"Data directory: {ctx.obj.settings.data_dir}")
        console.print(f"Active tier: [bold]{library.tier.value}[/bold]")
        console.print(f"Records: {len(library.records)}")

    run_with_library(ctx, action)


@cli.command(name="list")
@click.pass_context
def list_records(ctx: click.Context) -> None:
    """List records, newest first."""

    async def action(library: Library) -> None:
        console = ctx.obj.console
        if not library.records:
            console.print("[yellow]No records[/yellow]")
            return

        table = Table(title="Catalog")
        table.add_column("ID", style="cyan", no_wrap=True)
        table.add_column("Title")
        table.add_column("Level")
        table.add_column("Type")
        table.add_column("Language")
        table.add_column("Added", style="dim")
        for record in library.records:
            table.add_row(
                record.id,
                f"{record.cover_emoji} {record.title}".strip(),
                record.level.value,
                record.file_type.value,
                record.language.value,
                record.added_date.isoformat(),
            )
        console.print(table)

    run_with_library(ctx, action)


@cli.command()
@click.option("--title", "-t", required=True, help="Document title")
@click.option(
    "--level",
    type=click.Choice([level.value for level in Level]),
    required=True,
    help="Study level",
)
@click.option("--category", required=True, help="Category")
@click.option(
    "--file-type",
    type=click.Choice([t.value for t in FileType]),
    default=FileType.PDF.value,
    show_default=True,
    help="Content type",
)
@click.option(
    "--language",
    type=click.Choice([lang.value for lang in Language]),
    required=True,
    help="Document language",
)
@click.option("--author", default="", help="Author")
@click.option("--description", default="", help="Description")
@click.option("--source-url", help="Source URL (for URL records)")
@click.option("--mime-type", help="Payload MIME type (guessed from the file)")
@click.option(
    "--file",
    "file_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Payload file",
)
@click.pass_context
def add(
    ctx: click.Context,
    title: str,
    level: str,
    category: str,
    file_type: str,
    language: str,
    author: str,
    description: str,
    source_url: str | None,
    mime_type: str | None,
    file_path: Path | None,
) -> None:
    """Add a record, with the payload read from --file."""
    metadata: dict[str, Any] = {
        "title": title,
        "level": level,
        "category": category,
        "file_type": file_type,
        "language": language,
        "author": author,
        "description": description,
        "source_url": source_url,
    }
    payload = None
    if file_path is not None and file_type != FileType.URL.value:
        payload = file_path.read_bytes()
        metadata["file_name"] = file_path.name
        metadata["file_size"] = len(payload)
        metadata["file_mime_type"] = (
            mime_type or mimetypes.guess_type(file_path.name)[0] or None
        )

    async def action(library: Library) -> Record:
        return await library.add_record(metadata, payload)

    record = run_with_library(ctx, action)
    ctx.obj.console.print(f"[green]Added[/green] {record.id}")


@cli.command()
@click.argument("record_id")
@click.option(
    "--set", "assignments", multiple=True, required=True, help="field=value"
)
@click.pass_context
def update(ctx: click.Context, record_id: str, assignments: tuple[str, ...]) -> None:
    """Update fields of a record."""
    updates = parse_assignments(assignments)

    async def action(library: Library) -> Record | None:
        return await library.update_record(record_id, updates)

    if run_with_library(ctx, action) is None:
        raise click.ClickException(f"Record not found: {record_id}")
    ctx.obj.console.print(f"[green]Updated[/green] {record_id}")


@cli.command()
@click.argument("record_id")
@click.pass_context
def remove(ctx: click.Context, record_id: str) -> None:
    """Delete a record and its payload."""

    async def action(library: Library):
        if library.find(record_id) is None:
            return None
        return await library.delete_record(record_id)

    outcome = run_with_library(ctx, action)
    if outcome is None:
        raise click.ClickException(f"Record not found: {record_id}")
    ctx.obj.console.print(
        f"[green]Removed[/green] {record_id} (payload: {outcome.status.value})"
    )


@cli.command()
@click.argument("record_id")
@click.argument("output", type=click.Path(dir_okay=False, path_type=Path))
@click.pass_context
def export(ctx: click.Context, record_id: str, output: Path) -> None:
    """Write a record's payload bytes to OUTPUT."""

    async def action(library: Library) -> str | None:
        return await library.get_payload_as_embedded_uri(record_id)

    uri = run_with_library(ctx, action)
    if uri is None:
        raise click.ClickException(f"No payload for {record_id}")
    data = decode_from_text(uri)
    output.write_bytes(data)
    ctx.obj.console.print(f"[green]Exported[/green] {len(data)} bytes to {output}")


def main() -> None:
    """Console script entry point."""
    cli()
