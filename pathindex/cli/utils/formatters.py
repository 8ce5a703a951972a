"""Output formatting utilities for CLI commands.

Status lines go to stderr so stdout carries only command results.
"""

import json
from typing import Any

import click


def success(message: str) -> None:
    """Print a success message in green."""
    click.secho(f"✓ {message}", fg="green", err=True)


def error(message: str) -> None:
    """Print an error message in red."""
    click.secho(f"✗ {message}", fg="red", err=True)


def warning(message: str) -> None:
    """Print a warning message in yellow."""
    click.secho(f"⚠ {message}", fg="yellow", err=True)


def info(message: str) -> None:
    """Print an info message in blue."""
    click.secho(f"ℹ {message}", fg="blue", err=True)


def emit_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2, default=str))


def emit_table(rows: list[dict[str, Any]], columns: list[str]) -> None:
    """Print rows as left-aligned columns."""
    widths = {
        col: max([len(col), *(len(str(row.get(col, ""))) for row in rows)])
        for col in columns
    }
    click.echo("  ".join(col.upper().ljust(widths[col]) for col in columns))
    for row in rows:
        click.echo("  ".join(str(row.get(col, "")).ljust(widths[col]) for col in columns))
