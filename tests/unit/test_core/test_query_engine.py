"""Tests for compiling and executing NodeQuery objects."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from pathindex.core.query import MetaCondition, MetaQuery, NodeQuery, QueryEngine


@pytest.fixture
def engine() -> QueryEngine:
    return QueryEngine()


@pytest.fixture
async def catalog(make_node, store):
    """Four nodes under one parent with color/size attributes."""
    shelf = await make_node(title="shelf")
    specs = [
        ("apple", "page", {"color": "red", "size": "s"}),
        ("berry", "post", {"color": "blue"}),
        ("cherry", "page", {"color": "red", "size": "l"}),
        ("date", "post", {}),
    ]
    for title, node_type, attrs in specs:
        node = await make_node(parent=shelf, title=title, node_type=node_type)
        for key, value in attrs.items():
            await store.set_attribute(node.id, key, value)
    return shelf


async def _titles(engine, session, query) -> list[str]:
    return [n.title for n in await engine.execute(session, query)]


def _meta(*clauses, relation="AND") -> NodeQuery:
    return NodeQuery(meta_query=MetaQuery(relation=relation, clauses=list(clauses)))


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("condition", "expected"),
    [
        (MetaCondition(key="color", value="red"), ["apple", "cherry"]),
        (MetaCondition(key="color", value="red", compare="!="), ["berry"]),
        (MetaCondition(key="color", value="b%", compare="LIKE"), ["berry"]),
        (MetaCondition(key="color", value="r%", compare="NOT LIKE"), ["berry"]),
        (MetaCondition(key="size", value=["l", "xl"], compare="IN"), ["cherry"]),
        (MetaCondition(key="size", compare="EXISTS"), ["apple", "cherry"]),
        (MetaCondition(key="color", compare="NOT EXISTS"), ["shelf", "date"]),
    ],
)
async def test_compare_operators(engine, session, catalog, condition, expected):
    assert await _titles(engine, session, _meta(condition)) == expected


@pytest.mark.asyncio
async def test_and_or_groups(engine, session, catalog):
    red = MetaCondition(key="color", value="red")
    small = MetaCondition(key="size", value="s")
    blue = MetaCondition(key="color", value="blue")

    assert await _titles(engine, session, _meta(red, small)) == ["apple"]
    assert await _titles(engine, session, _meta(small, blue, relation="OR")) == ["apple", "berry"]

    nested = _meta(MetaQuery(relation="OR", clauses=[small, blue]), MetaCondition(key="color", value="blue"))
    assert await _titles(engine, session, nested) == ["berry"]


@pytest.mark.asyncio
async def test_empty_groups_do_not_filter(engine, session, catalog):
    query = _meta(MetaQuery(relation="OR"))
    assert len(await engine.execute(session, query)) == 5


@pytest.mark.asyncio
async def test_node_with_many_meta_rows_is_returned_once(engine, session, catalog, store):
    await store.set_attribute(catalog.id, "tag", "x", unique_only=False)
    await store.set_attribute(catalog.id, "tag", "y", unique_only=False)

    query = _meta(MetaCondition(key="tag", value="%", compare="LIKE"))
    assert await _titles(engine, session, query) == ["shelf"]


@pytest.mark.asyncio
async def test_direct_parent_and_type_filters(engine, session, catalog):
    assert await _titles(engine, session, NodeQuery(parent_in=str(catalog.id), node_types=["post"])) == [
        "berry",
        "date",
    ]


@pytest.mark.asyncio
async def test_exclude_limit_offset(engine, session, catalog):
    query = NodeQuery(parent_in=[catalog.id], exclude=[catalog.id + 1], limit=2, offset=1)
    assert await _titles(engine, session, query) == ["cherry", "date"]


def test_compile_uses_exists_subquery(engine):
    stmt = engine.compile(_meta(MetaCondition(key="materialized", value="/4/%", compare="LIKE")))
    sql = str(stmt)
    assert "EXISTS" in sql
    assert "ORDER BY nodes.id" in sql


def test_query_aliases_and_extras():
    query = NodeQuery.model_validate({"post_parent__in": "4,9", "orderby": "title"})

    assert query.parent_in == "4,9"
    assert query.get("post_parent__in") == "4,9"
    assert query.get("orderby") == "title"
    assert query.get("missing", "fallback") == "fallback"

    query.set("post_parent__in", None)
    query.set("orderby", "date")
    assert query.parent_in is None
    assert query.get("orderby") == "date"


def test_meta_query_validation():
    with pytest.raises(ValidationError):
        MetaCondition(key="", value="x")
    with pytest.raises(ValidationError):
        MetaCondition(key="color", compare="BETWEEN")
    with pytest.raises(ValidationError):
        NodeQuery(limit=0)

    parsed = MetaQuery.model_validate(
        {"relation": "OR", "clauses": [{"key": "a"}, {"relation": "AND", "clauses": []}]}
    )
    assert isinstance(parsed.clauses[0], MetaCondition)
    assert isinstance(parsed.clauses[1], MetaQuery)
