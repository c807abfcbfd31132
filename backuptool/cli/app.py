"""Main Typer application.

Entry point: ``backup-tool`` (configured via pyproject.toml project.scripts).
The application has a single command, so its options are given directly::

    backup-tool --storage.type local --datasource grafana --output.prefix backups
"""

from __future__ import annotations

import typer

from backuptool.cli.commands.backup import backup_cmd

app = typer.Typer(
    name="backup-tool",
    help="Archive Grafana dashboards or local files into a date-partitioned .tgz.",
    rich_markup_mode="rich",
    add_completion=False,
)

app.command(name="backup", help="Archive a data source into a storage sink.")(backup_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
