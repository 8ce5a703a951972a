"""Main CLI entry point for pathindex maintenance commands."""

import click

from pathindex import __version__
from pathindex.cli.commands import paths
from pathindex.core.settings import DatabaseSettings
from pathindex.infra.logging import setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="pathindex")
@click.option(
    "--dsn",
    default=None,
    help="Database URL (overrides DB_DSN)",
)
@click.option("-v", "--verbose", is_flag=True, help="Debug logging")
@click.pass_context
def cli(ctx: click.Context, dsn: str | None, verbose: bool) -> None:
    """Materialized path index maintenance.

    \b
    Commands:
      init-db      Create tables, register hierarchical types
      show         Show a node's stored and expected path
      save         Run path maintenance for a node
      descendants  List nodes below the given ids
      ancestors    List a node's ancestors, root first
      verify       Report stale or missing paths
      rebuild      Recompute every path
    """
    ctx.ensure_object(dict)
    setup_logging(force=verbose, **({"log_level": "DEBUG"} if verbose else {}))
    if dsn:
        ctx.obj["db_settings"] = DatabaseSettings(dsn=dsn)


for command in paths.COMMANDS:
    cli.add_command(command)


def main() -> None:
    """Entry point for CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
