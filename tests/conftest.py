import matplotlib

matplotlib.use("Agg")

import pytest

from abprune import GameTree, NodeKind
from abprune.samples import textbook_tree


@pytest.fixture
def textbook():
    tree, labels = textbook_tree()
    ids = {name: nid for nid, name in labels.items()}
    return tree, ids


@pytest.fixture
def chain():
    """MAX -> MIN -> leaf(7)."""
    tree = GameTree()
    a = tree.add_node(NodeKind.MAX)
    b = tree.add_node(NodeKind.MIN)
    c = tree.add_node(NodeKind.LEAF, 7)
    tree.add_edge(a, b)
    tree.add_edge(b, c)
    return tree, (a, b, c)
