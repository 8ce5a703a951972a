"""Tests for the path maintenance CLI commands.

Testing approach:
- Uses Click's CliRunner for command invocation
- Runs against a SQLite file in tmp_path created by ``init-db``
- Seeds nodes through a synchronous SQLAlchemy session
- Checks stdout (results) separately from stderr (status lines)
"""

from __future__ import annotations

import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner
from sqlalchemy import create_engine, select
from sqlalchemy.orm import Session

from pathindex.cli.main import cli
from pathindex.core.models import Node, NodeMeta, NodeType

# =============================================================================
# Test Fixtures
# =============================================================================


@pytest.fixture
def cli_runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def _quiet_logging():
    """Keep the CLI from reconfiguring root logging during the test run."""
    with patch("pathindex.cli.main.setup_logging"):
        yield


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "nodes.db"


@pytest.fixture
def invoke(cli_runner, db_path):
    def _invoke(*args: str):
        return cli_runner.invoke(
            cli,
            ["--dsn", f"sqlite+aiosqlite:///{db_path}", *args],
            obj={},
        )

    return _invoke


@pytest.fixture
def seeded(invoke, db_path):
    """r -> a -> b, plus a lone root s. Paths are not stored yet."""
    result = invoke("init-db", "--type", "page", "--type", "post")
    assert result.exit_code == 0, result.output

    engine = create_engine(f"sqlite:///{db_path}")
    with Session(engine) as session:
        r = Node(title="r")
        session.add(r)
        session.flush()
        a = Node(title="a", parent_id=r.id)
        session.add(a)
        session.flush()
        b = Node(title="b", parent_id=a.id, type="post")
        s = Node(title="s")
        session.add_all([b, s])
        session.commit()
        ids = {"r": r.id, "a": a.id, "b": b.id, "s": s.id}
    engine.dispose()
    return ids


def _stored_paths(db_path) -> dict[int, str]:
    engine = create_engine(f"sqlite:///{db_path}")
    with Session(engine) as session:
        rows = session.execute(
            select(NodeMeta.node_id, NodeMeta.meta_value).where(
                NodeMeta.meta_key == "materialized"
            )
        ).all()
    engine.dispose()
    return dict(rows)


# =============================================================================
# Commands
# =============================================================================


def test_init_db_registers_types(invoke, db_path):
    result = invoke("init-db", "--type", "page", "--type", "section")

    assert result.exit_code == 0
    assert "Database schema ready" in result.output

    engine = create_engine(f"sqlite:///{db_path}")
    with Session(engine) as session:
        names = session.scalars(select(NodeType.name).order_by(NodeType.name)).all()
    engine.dispose()
    assert names == ["page", "section"]


def test_save_prints_status_and_path(invoke, seeded, db_path):
    r, a = seeded["r"], seeded["a"]

    assert invoke("save", str(r)).stdout.strip() == f"created /{r}/"
    assert invoke("save", str(a)).stdout.strip() == f"created /{r}/{a}/"
    assert invoke("save", str(a)).stdout.strip() == f"unchanged /{r}/{a}/"
    assert _stored_paths(db_path) == {r: f"/{r}/", a: f"/{r}/{a}/"}


def test_save_unknown_node_is_skipped(invoke, seeded):
    result = invoke("save", "999")

    assert result.exit_code == 0
    assert result.stdout.strip() == "skipped"


def test_show(invoke, seeded):
    r = seeded["r"]
    invoke("save", str(r))

    result = invoke("show", str(r), "--format", "json")

    assert result.exit_code == 0
    row = json.loads(result.stdout)
    assert row["stored_path"] == f"/{r}/"
    assert row["consistent"] is True


def test_show_missing_node_fails(invoke, seeded):
    result = invoke("show", "999")

    assert result.exit_code == 1
    assert "Node not found" in result.output


def test_descendants_and_ancestors(invoke, seeded):
    r, a, b, s = seeded["r"], seeded["a"], seeded["b"], seeded["s"]
    assert invoke("rebuild").exit_code == 0

    result = invoke("descendants", str(a), "--format", "json")
    assert result.exit_code == 0, result.output
    assert [row["id"] for row in json.loads(result.stdout)] == [a, b]

    result = invoke("descendants", f"{r},{s}", "--exclude-self", "--format", "json")
    assert [row["id"] for row in json.loads(result.stdout)] == [a, b]

    result = invoke("ancestors", str(b), "--include-self", "--format", "json")
    assert [row["title"] for row in json.loads(result.stdout)] == ["r", "a", "b"]

    result = invoke("descendants", str(a))
    assert "PATH" in result.stdout
    assert f"/{r}/{a}/{b}/" in result.stdout


def test_verify_and_rebuild(invoke, seeded):
    result = invoke("verify", "--format", "json")
    assert result.exit_code == 1
    assert len(json.loads(result.stdout)) == 4
    assert "out of date" in result.output

    result = invoke("rebuild")
    assert result.exit_code == 0
    assert "4 written" in result.output

    result = invoke("verify")
    assert result.exit_code == 0
    assert "consistent" in result.output


def test_version(cli_runner):
    result = cli_runner.invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert "pathindex" in result.output
