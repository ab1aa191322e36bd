from typing import Dict, List, Tuple

from .graph import GameTree, NodeKind, Number

Labels = Dict[int, str]


def _min_layer(tree: GameTree, root: int, labels: Labels, groups: List[Tuple[str, List[Number]]]) -> None:
    for name, leaves in groups:
        mid = tree.add_node(NodeKind.MIN)
        labels[mid] = name
        tree.add_edge(root, mid)
        for i, val in enumerate(leaves, start=1):
            lid = tree.add_node(NodeKind.LEAF, val)
            labels[lid] = f"{name}{i}"
            tree.add_edge(mid, lid)


def textbook_tree() -> Tuple[GameTree, Labels]:
    """MAX root over MIN nodes A=[3, 5] and B=[2, 9]; B's second leaf gets pruned."""
    tree = GameTree()
    root = tree.add_node(NodeKind.MAX)
    labels = {root: "ROOT"}
    _min_layer(tree, root, labels, [("A", [3, 5]), ("B", [2, 9])])
    return tree, labels


def three_by_three_tree() -> Tuple[GameTree, Labels]:
    """The classic 3-ply example: three MIN nodes with three leaves each."""
    tree = GameTree()
    root = tree.add_node(NodeKind.MAX)
    labels = {root: "ROOT"}
    _min_layer(tree, root, labels, [
        ("A", [3, 12, 8]),
        ("B", [2, 4, 6]),
        ("C", [14, 5, 2]),
    ])
    return tree, labels


SAMPLES = {
    "Textbook (A=[3,5], B=[2,9])": textbook_tree,
    "Three MIN nodes, 3 leaves each": three_by_three_tree,
}
