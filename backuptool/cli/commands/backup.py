"""``backup-tool`` — archive a data source into a storage sink.

Selects the source and sink from the command line, loads their settings
from the environment, runs the backup, and prints a summary.  Fatal errors
are printed to stderr and exit with code 1.
"""

from __future__ import annotations

import contextlib
import logging

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from backuptool.config import BackupSettings, load_settings
from backuptool.core.errors import BackupError, ConfigurationError
from backuptool.core.factory import build_sink, build_source
from backuptool.core.logging_setup import configure_logging
from backuptool.core.orchestrator import BackupRun, RunResult
from backuptool.models.config import DataSourceType, RunOptions, StorageType

logger = logging.getLogger(__name__)

console = Console()
err_console = Console(stderr=True)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def backup_cmd(
    storage_type: StorageType = typer.Option(
        ...,
        "--storage.type",
        "-storage.type",
        case_sensitive=False,
        help="Destination storage service to use.",
    ),
    datasource: DataSourceType = typer.Option(
        ...,
        "--datasource",
        "-datasource",
        case_sensitive=False,
        help="Data source to archive.",
    ),
    output_prefix: str = typer.Option(
        None,
        "--output.prefix",
        "-output.prefix",
        help=(
            "Leading path segment for the archive destination.  Always relative "
            "to the storage root: leading and trailing '/' are stripped."
        ),
    ),
    log_level: str = typer.Option(
        None,
        "--log-level",
        help="Log level (DEBUG, INFO, WARNING, ERROR). Defaults to BACKUP_LOG_LEVEL.",
    ),
) -> None:
    """Archive every artifact from the data source into one .tgz file.

    The archive is written to [prefix/]YYYY/M/D/<name>-HHMM.tgz and is never
    overwritten: an existing destination aborts the run.
    """
    with contextlib.ExitStack() as resources:
        try:
            settings = load_settings(BackupSettings)
            level = (log_level or settings.log_level).upper()
            if level not in _LOG_LEVELS:
                raise ConfigurationError(f"invalid log level {level!r}")
            configure_logging(level)

            options = RunOptions(
                storage_type=storage_type,
                datasource=datasource,
                output_prefix=settings.output_prefix if output_prefix is None else output_prefix,
            )
            sink = build_sink(options.storage_type, settings)
            resources.callback(sink.close)
            source = build_source(options.datasource, settings)
            resources.callback(source.close)
        except BackupError as exc:
            err_console.print(f"[bold red]Configuration error:[/bold red] {escape(str(exc))}")
            raise typer.Exit(code=1)

        try:
            result = BackupRun(source, sink, prefix=options.output_prefix).run()
        except BackupError as exc:
            err_console.print(f"[bold red]Backup failed:[/bold red] {escape(str(exc))}")
            raise typer.Exit(code=1)

    _print_summary(result)


def _print_summary(result: RunResult) -> None:
    report = result.report
    status = (
        "[bold yellow]Backup complete with skipped artifacts[/bold yellow]"
        if report.is_partial
        else "[bold green]Backup complete![/bold green]"
    )
    lines = [
        status,
        "",
        f"[bold]Source:[/bold]       {result.source_name}",
        f"[bold]Storage:[/bold]      {result.sink_name}",
        f"[bold]Destination:[/bold]  {escape(result.destination)}",
        f"[bold]Archived:[/bold]     {report.archived} of {report.total}",
        f"[bold]Failed:[/bold]       {report.failed}",
        f"[bold]Size:[/bold]         {report.size_bytes:,} bytes",
        f"[bold]SHA-256:[/bold]      {report.sha256}",
    ]
    if report.failed_identifiers:
        lines.append("")
        lines.append("[dim]Skipped: " + escape(", ".join(report.failed_identifiers)) + "[/dim]")

    console.print(
        Panel(
            "\n".join(lines),
            title="[bold]backup-tool[/bold]",
            border_style="yellow" if report.is_partial else "green",
            padding=(1, 2),
        )
    )
    logger.debug("run finished at %s", result.finished_at.isoformat())
