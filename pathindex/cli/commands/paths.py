"""Materialized path commands.

Example:bash
    # Create tables and flag hierarchical types
    pathindex init-db --type page --type section

    # Recompute one node's path after an out-of-band edit
    pathindex save 42

    # Everything below nodes 4 and 9
    pathindex descendants 4,9 --format json

    # Find and repair drift
    pathindex verify
    pathindex rebuild
"""

from __future__ import annotations

import sys
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

import click

from pathindex.cli.utils import coro, emit_json, emit_table, error, info, success, warning
from pathindex.core.database import BaseRepository
from pathindex.core.exceptions import PathIndexError
from pathindex.core.models import Node, NodeType
from pathindex.core.services import PathIndex
from pathindex.core.settings import get_db_settings, get_index_settings
from pathindex.infra.database import (
    close_database,
    create_engine,
    create_session_factory,
    init_database,
    session_scope,
)

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Sequence

    from pathindex.core.settings import DatabaseSettings

FORMAT_OPTION = click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format",
)

_nodes = BaseRepository(Node)


def _db_settings(obj: dict[str, Any]) -> DatabaseSettings:
    return obj.get("db_settings") or get_db_settings()


@asynccontextmanager
async def open_index(obj: dict[str, Any]) -> AsyncIterator[PathIndex]:
    """PathIndex on a committing session; the engine is disposed afterwards."""
    db_settings = _db_settings(obj)
    engine = create_engine(db_settings)
    try:
        factory = create_session_factory(engine, db_settings)
        async with session_scope(factory) as session:
            yield PathIndex(session, get_index_settings())
    finally:
        await close_database(engine)


async def _rows(index: PathIndex, nodes: Sequence[Node]) -> list[dict[str, Any]]:
    return [
        {
            "id": node.id,
            "type": node.type,
            "parent_id": node.parent_id,
            "title": node.title,
            "path": await index.store.get_attribute(node.id, index.settings.meta_key) or "",
        }
        for node in nodes
    ]


def _output(rows: list[dict[str, Any]], output_format: str) -> None:
    if output_format == "json":
        emit_json(rows)
    elif rows:
        emit_table(rows, ["id", "type", "parent_id", "path", "title"])
    else:
        info("No nodes found")


@click.command(name="init-db")
@click.option(
    "--type",
    "hierarchical_types",
    multiple=True,
    help="Register a hierarchical node type (repeatable)",
)
@click.pass_obj
@coro
async def init_db(obj: dict[str, Any], hierarchical_types: tuple[str, ...]) -> None:
    """Create tables and register hierarchical node types."""
    db_settings = _db_settings(obj)
    engine = create_engine(db_settings)
    try:
        await init_database(engine)
        if hierarchical_types:
            factory = create_session_factory(engine, db_settings)
            async with session_scope(factory) as session:
                for name in hierarchical_types:
                    await session.merge(NodeType(name=name, hierarchical=True))
    finally:
        await close_database(engine)

    success("Database schema ready")
    for name in hierarchical_types:
        info(f"Hierarchical type registered: {name}")


@click.command()
@click.argument("node_id", type=int)
@FORMAT_OPTION
@click.pass_obj
@coro
async def show(obj: dict[str, Any], node_id: int, output_format: str) -> None:
    """Show a node with its stored and expected path."""
    try:
        async with open_index(obj) as index:
            node = await _nodes.get_or_raise(index.session, node_id)
            stored = await index.maintainer.stored_path(node_id)
            expected = await index.maintainer.compute_path(node_id)
            row = {
                "id": node.id,
                "type": node.type,
                "parent_id": node.parent_id,
                "title": node.title,
                "stored_path": stored,
                "expected_path": str(expected),
                "consistent": stored == str(expected),
            }
    except PathIndexError as e:
        error(str(e))
        sys.exit(1)

    if output_format == "json":
        emit_json(row)
        return
    for key, value in row.items():
        click.echo(f"{key + ':':<15}{value}")


@click.command()
@click.argument("node_id", type=int)
@click.pass_obj
@coro
async def save(obj: dict[str, Any], node_id: int) -> None:
    """Run path maintenance for a node, as after a save."""
    try:
        async with open_index(obj) as index:
            result = await index.on_node_saved(node_id)
    except PathIndexError as e:
        error(str(e))
        sys.exit(1)

    click.echo(f"{result.status.value} {result.new_path or ''}".rstrip())
    if result.old_path:
        info(f"moved from {result.old_path}, {result.descendants_updated} descendants updated")


@click.command()
@click.argument("node_ids")
@click.option("--exclude-self", is_flag=True, help="Leave the given nodes out")
@click.option("--type", "node_types", multiple=True, help="Only these node types")
@FORMAT_OPTION
@click.pass_obj
@coro
async def descendants(
    obj: dict[str, Any],
    node_ids: str,
    exclude_self: bool,
    node_types: tuple[str, ...],
    output_format: str,
) -> None:
    """List nodes below NODE_IDS (e.g. "4,9")."""
    try:
        async with open_index(obj) as index:
            nodes = await index.descendants(
                node_ids, include_self=not exclude_self, node_types=node_types
            )
            rows = await _rows(index, nodes)
    except PathIndexError as e:
        error(str(e))
        sys.exit(1)

    _output(rows, output_format)


@click.command()
@click.argument("node_id", type=int)
@click.option("--include-self", is_flag=True, help="Append the node itself")
@FORMAT_OPTION
@click.pass_obj
@coro
async def ancestors(
    obj: dict[str, Any],
    node_id: int,
    include_self: bool,
    output_format: str,
) -> None:
    """List the ancestors of NODE_ID, root first."""
    try:
        async with open_index(obj) as index:
            nodes = await index.ancestors(node_id, include_self=include_self)
            rows = await _rows(index, nodes)
    except PathIndexError as e:
        error(str(e))
        sys.exit(1)

    _output(rows, output_format)


@click.command()
@FORMAT_OPTION
@click.pass_obj
@coro
async def verify(obj: dict[str, Any], output_format: str) -> None:
    """Report nodes whose stored path is missing or stale. Exits 1 on drift."""
    try:
        async with open_index(obj) as index:
            mismatches = await index.verify()
    except PathIndexError as e:
        error(str(e))
        sys.exit(1)

    rows = [
        {"id": m.node_id, "stored": m.stored or "", "expected": str(m.expected)}
        for m in mismatches
    ]
    if output_format == "json":
        emit_json(rows)
    elif rows:
        emit_table(rows, ["id", "stored", "expected"])

    if rows:
        warning(f"{len(rows)} node(s) out of date")
        sys.exit(1)
    success("All materialized paths are consistent")


@click.command()
@click.pass_obj
@coro
async def rebuild(obj: dict[str, Any]) -> None:
    """Recompute and store every indexable node's path."""
    try:
        async with open_index(obj) as index:
            report = await index.rebuild()
    except PathIndexError as e:
        error(str(e))
        sys.exit(1)

    success(
        f"Scanned {report.scanned} node(s): "
        f"{report.written} written, {report.unchanged} unchanged"
    )


COMMANDS = [init_db, show, save, descendants, ancestors, verify, rebuild]

__all__ = ["COMMANDS", "open_index"]
