"""Tests for the editable game tree."""

import logging
import math

import pytest

from abprune import GameTree, InvalidEdgeError, NodeKind, NoRootError, UnknownNodeError


class TestNodes:
    def test_ids_are_fresh_and_never_reused(self):
        tree = GameTree()
        a = tree.add_node(NodeKind.MAX)
        b = tree.add_node()
        tree.remove_node(b)
        c = tree.add_node()
        assert len({a, b, c}) == 3
        assert c > b > a

    def test_default_kind_is_leaf_without_value(self):
        tree = GameTree()
        nid = tree.add_node()
        node = tree.node(nid)
        assert node.kind is NodeKind.LEAF
        assert node.value is None
        assert tree.leaf_value(nid) == 0

    def test_kind_accepts_enum_value_string(self):
        tree = GameTree()
        nid = tree.add_node("MIN")
        assert tree.node(nid).kind is NodeKind.MIN

    def test_set_value_and_kind_in_place(self):
        tree = GameTree()
        nid = tree.add_node(NodeKind.LEAF, 1)
        node = tree.node(nid)
        tree.set_value(nid, 4.5)
        tree.set_kind(nid, NodeKind.MAX)
        assert node.value == 4.5
        assert node.kind is NodeKind.MAX

    def test_non_finite_value_rejected(self):
        tree = GameTree()
        nid = tree.add_node()
        with pytest.raises(ValueError):
            tree.set_value(nid, math.inf)
        with pytest.raises(ValueError):
            tree.add_node(NodeKind.LEAF, float("nan"))

    def test_unknown_node(self):
        tree = GameTree()
        with pytest.raises(UnknownNodeError):
            tree.set_value(42, 1)
        with pytest.raises(KeyError):
            tree.node(42)

    def test_remove_node_drops_incident_edges(self, textbook):
        tree, ids = textbook
        tree.remove_node(ids["A"])
        assert ids["A"] not in tree
        assert all(ids["A"] not in e for e in tree.edges())
        assert tree.children_of(ids["ROOT"]) == [ids["B"]]
        assert tree.parents_of(ids["A1"]) == []

    def test_remove_missing_node_is_noop(self, textbook):
        tree, _ = textbook
        before = (tree.node_ids(), tree.edges())
        tree.remove_node(999)
        tree.remove_node(999)
        assert (tree.node_ids(), tree.edges()) == before


class TestEdges:
    def test_children_in_insertion_order(self):
        tree = GameTree()
        p = tree.add_node(NodeKind.MAX)
        c1, c2, c3 = tree.add_node(), tree.add_node(), tree.add_node()
        tree.add_edge(p, c3)
        tree.add_edge(p, c1)
        tree.add_edge(p, c2)
        assert tree.children_of(p) == [c3, c1, c2]

    def test_parents_of(self):
        tree = GameTree()
        a, b, c = tree.add_node(), tree.add_node(), tree.add_node()
        tree.add_edge(a, c)
        tree.add_edge(b, c)
        assert tree.parents_of(c) == [a, b]
        assert tree.parents_of(a) == []

    def test_duplicate_edge_is_noop(self):
        tree = GameTree()
        a, b = tree.add_node(), tree.add_node()
        assert tree.add_edge(a, b) is True
        assert tree.add_edge(a, b) is False
        assert tree.edges() == [(a, b)]
        assert tree.children_of(a) == [b]

    def test_reverse_pair_is_a_different_edge(self):
        tree = GameTree()
        a, b = tree.add_node(), tree.add_node()
        tree.add_edge(a, b)
        assert tree.add_edge(b, a) is True
        assert tree.edges() == [(a, b), (b, a)]

    def test_self_loop_ignored_with_warning(self, caplog):
        tree = GameTree()
        a = tree.add_node()
        with caplog.at_level(logging.WARNING, logger="abprune.graph"):
            assert tree.add_edge(a, a) is False
        assert tree.edges() == []
        assert "self-loops" in caplog.text

    def test_missing_endpoint_ignored(self):
        tree = GameTree()
        a = tree.add_node()
        assert tree.add_edge(a, 99) is False
        assert tree.add_edge(99, a) is False
        assert tree.edges() == []

    def test_strict_mode_raises(self):
        tree = GameTree()
        a = tree.add_node()
        with pytest.raises(InvalidEdgeError) as exc:
            tree.add_edge(a, a, strict=True)
        assert exc.value.parent == a
        with pytest.raises(InvalidEdgeError, match="does not exist"):
            tree.add_edge(a, 99, strict=True)

    def test_strict_mode_duplicate_still_silent(self):
        tree = GameTree()
        a, b = tree.add_node(), tree.add_node()
        tree.add_edge(a, b, strict=True)
        assert tree.add_edge(a, b, strict=True) is False

    def test_remove_edge(self):
        tree = GameTree()
        a, b = tree.add_node(), tree.add_node()
        tree.add_edge(a, b)
        tree.remove_edge(a, b)
        tree.remove_edge(a, b)
        assert tree.edges() == []
        assert tree.children_of(a) == []
        assert tree.parents_of(b) == []


class TestRoot:
    def test_single_parentless_node(self, textbook):
        tree, ids = textbook
        assert tree.find_root() == ids["ROOT"]

    def test_smallest_id_wins_among_candidates(self):
        tree = GameTree()
        a, b, c = tree.add_node(), tree.add_node(), tree.add_node()
        tree.add_edge(c, a)
        assert tree.find_root() == b

    def test_empty_tree_has_no_root(self):
        with pytest.raises(NoRootError):
            GameTree().find_root()

    def test_two_cycle_has_no_root(self):
        tree = GameTree()
        a, b = tree.add_node(), tree.add_node()
        tree.add_edge(a, b)
        tree.add_edge(b, a)
        with pytest.raises(NoRootError):
            tree.find_root()


class TestSnapshot:
    def test_snapshot_is_independent(self, textbook):
        tree, ids = textbook
        snap = tree.snapshot()
        tree.set_value(ids["A1"], 100)
        tree.remove_node(ids["B"])
        assert snap.leaf_value(ids["A1"]) == 3
        assert ids["B"] in snap
        assert snap.edges() != tree.edges()

    def test_snapshot_keeps_id_counter(self):
        tree = GameTree()
        tree.add_node()
        snap = tree.snapshot()
        assert snap.add_node() == tree.add_node()

    def test_structural_leaf(self):
        tree = GameTree()
        a = tree.add_node(NodeKind.MAX, 5)
        assert tree.is_leaf(a)
        b = tree.add_node()
        tree.add_edge(a, b)
        assert not tree.is_leaf(a)
