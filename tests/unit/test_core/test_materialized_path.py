"""Tests for the MaterializedPath value object."""

from __future__ import annotations

import pytest

from pathindex.core.database.hierarchy import MaterializedPath


class TestParsing:
    def test_root_path(self):
        path = MaterializedPath("/7/")
        assert path.depth == 1
        assert path.ids == [7]
        assert path.node_id == 7
        assert path.root_id == 7
        assert path.parent is None
        assert path.ancestor_ids == []

    def test_nested_path(self):
        path = MaterializedPath("/1/4/9/")
        assert path.depth == 3
        assert path.node_id == 9
        assert path.ancestor_ids == [1, 4]
        assert path.parent == "/1/4/"
        assert [str(a) for a in path.ancestors] == ["/1/", "/1/4/"]

    def test_empty_path_is_falsy(self):
        path = MaterializedPath("")
        assert not path
        assert path.depth == 0
        assert path.node_id is None

    @pytest.mark.parametrize(
        "raw",
        ["1/2/", "/1/2", "/1//2/", "/a/2/", "/0/", "/-3/", "/", "//"],
    )
    def test_rejects_malformed(self, raw):
        with pytest.raises(ValueError, match="Invalid materialized path"):
            MaterializedPath(raw)

    def test_copy_constructor_and_equality(self):
        path = MaterializedPath("/1/2/")
        assert MaterializedPath(path) == path
        assert path == "/1/2/"
        assert hash(path) == hash(MaterializedPath("/1/2/"))
        assert path != 5


class TestFromAncestors:
    def test_joins_chain_root_first(self):
        assert MaterializedPath.from_ancestors([1, 4], 9) == "/1/4/9/"

    def test_empty_chain_gives_root(self):
        assert MaterializedPath.from_ancestors([], 9) == "/9/"

    def test_from_ids(self):
        assert MaterializedPath.from_ids(3, 5) == "/3/5/"
        assert not MaterializedPath.from_ids()

    def test_child_and_div(self):
        root = MaterializedPath("/3/")
        assert root.child(5) == "/3/5/"
        assert root / 5 / 8 == "/3/5/8/"


class TestSegmentSafety:
    """Prefix tests must respect id boundaries: 12 never matches 120."""

    def test_prefix_does_not_cross_segment(self):
        twelve = MaterializedPath("/12/")
        assert not twelve.contains("/120/")
        assert not twelve.is_ancestor_of("/120/4/")
        assert twelve.is_ancestor_of("/12/120/")

    def test_ancestor_and_descendant(self):
        a = MaterializedPath("/1/2/")
        assert a.is_ancestor_of("/1/2/3/")
        assert not a.is_ancestor_of("/1/2/")
        assert not a.is_ancestor_of("/1/20/")
        assert MaterializedPath("/1/2/3/").is_descendant_of(a)

    def test_contains_is_inclusive(self):
        a = MaterializedPath("/1/2/")
        assert a.contains("/1/2/")
        assert a.contains("/1/2/30/")
        assert not a.contains("/1/")

    def test_like_pattern_keeps_trailing_separator(self):
        assert MaterializedPath("/1/2/").like_pattern() == "/1/2/%"


class TestArithmetic:
    def test_common_ancestor(self):
        assert MaterializedPath("/1/2/3/").common_ancestor("/1/2/9/") == "/1/2/"
        assert MaterializedPath("/1/2/").common_ancestor("/5/2/") is None

    def test_replace_prefix(self):
        moved = MaterializedPath("/1/2/3/").replace_prefix("/1/2/", "/5/2/")
        assert moved == "/5/2/3/"

    def test_replace_prefix_requires_prefix(self):
        with pytest.raises(ValueError, match="not a prefix"):
            MaterializedPath("/1/2/3/").replace_prefix("/4/", "/5/")

    def test_iteration_and_len(self):
        path = MaterializedPath("/1/4/9/")
        assert list(path) == [1, 4, 9]
        assert len(path) == 3
        assert repr(path) == "MaterializedPath('/1/4/9/')"
