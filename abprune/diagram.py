# https://networkx.org/documentation/stable/reference/classes/digraph.html

from typing import Dict, List, Optional, Tuple

import matplotlib.pyplot as plt
import networkx as nx

from .engine import EvaluationResult, VisitRecord
from .errors import NoRootError
from .graph import GameTree, NodeKind

Pos = Dict[int, Tuple[float, float]]

COLOR_CURRENT = "#ffd166"
COLOR_PATH = "#90ee90"
COLOR_PRUNED = "#eeeeee"
COLOR_VISITED = "#d8f3dc"
COLOR_UNTOUCHED = "#c5d6ff"

EDGE_PATH = "#2a9d8f"
EDGE_PRUNED = "#bbbbbb"
EDGE_NEUTRAL = "#333333"


def fmt_ab(a, b):
    def f(x):
        if x == float("-inf"): return "-∞"
        if x == float("inf"):  return "∞"
        return str(x)
    return f(a), f(b)


def hierarchy_pos(tree: GameTree, root: Optional[int] = None, width=2.8, vert_gap=0.28,
                  vert_loc=1.0, xcenter=0.0, sibling_sep=0.0) -> Pos:
    """
    Place nodes in a tidy top-down hierarchy.

    Every node is placed once. Nodes shared by several parents sit under the first
    one reached; nodes not reachable from `root` are laid out as extra subtrees to
    its right, so a half-built tree still draws.
    """
    if not len(tree):
        return {}
    if root is None or root not in tree:
        try:
            root = tree.find_root()
        except NoRootError:
            root = tree.node_ids()[0]

    # spanning forest: first parent reached wins
    owner: Dict[int, List[int]] = {}
    tops: List[int] = []
    ids = tree.node_ids()
    for start in [root] + [n for n in ids if not tree.parents_of(n)] + ids:
        if start in owner:
            continue
        tops.append(start)
        owner[start] = []
        stack = [start]
        while stack:
            n = stack.pop()
            for c in tree.children_of(n):
                if c not in owner:
                    owner[c] = []
                    owner[n].append(c)
                    stack.append(c)

    # leaf counts bottom-up; reversed pre-order puts children before parents
    order: List[int] = []
    stack = list(reversed(tops))
    while stack:
        n = stack.pop()
        order.append(n)
        stack.extend(reversed(owner[n]))
    leaves: Dict[int, int] = {}
    for n in reversed(order):
        leaves[n] = sum(leaves[c] for c in owner[n]) if owner[n] else 1

    total = sum(leaves[t] for t in tops)
    pos: Pos = {}

    frames = []
    left = xcenter - width / 2
    for t in tops:
        w = width * leaves[t] / total
        frames.append((t, left, left + w, vert_loc))
        left += w
    while frames:
        n, left, right, y = frames.pop()
        pos[n] = ((left + right) / 2.0, y)
        k = len(owner[n])
        if k == 0:
            continue
        avail = max((right - left) - sibling_sep * (k - 1), 0.0)
        start = left
        for i, c in enumerate(owner[n]):
            w = avail * leaves[c] / leaves[n]
            frames.append((c, start, start + w, y - vert_gap))
            start += w
            if i < k - 1:
                start += sibling_sep
    return pos


def _current_windows(trace, step: Optional[int]) -> Dict[int, VisitRecord]:
    """Last visit record of each node up to and including `step`."""
    upto = trace if step is None else trace[:step + 1]
    return {rec.node_id: rec for rec in upto}


def draw_tree(tree: GameTree, result: Optional[EvaluationResult] = None, step: Optional[int] = None,
              labels: Optional[Dict[int, str]] = None, show_alpha_beta: bool = True,
              title: str = "", compact: bool = True):
    """Return a matplotlib figure of the tree, colored by `result` up to trace index `step`."""
    labels = labels or {}
    n_leaves = sum(1 for nid in tree.node_ids() if tree.is_leaf(nid))
    fig_w = 8.0 if compact else 10.5
    fig_h = 5.0 if compact else 6.2
    node_size = max(600, 1600 - 40 * n_leaves) if compact else 2000
    font_size = 8 if compact else 10
    margin = 0.05 if compact else 0.15

    G = nx.DiGraph()
    G.add_nodes_from(tree.node_ids())
    G.add_edges_from(tree.edges())

    pos = hierarchy_pos(tree, result.root if result else None, width=5.0, vert_gap=0.34, sibling_sep=0.10)

    pruned_set = set(result.pruned_edges) if result else set()
    path_edges = set(result.path_edges()) if result else set()
    on_path = set(result.optimal_path) if result else set()
    windows = _current_windows(result.trace, step) if result else {}
    current = result.trace[step].node_id if (result and step is not None and result.trace) else None
    finished = result is not None and (step is None or step >= len(result.trace) - 1)

    colors_map, node_labels = {}, {}
    for n in tree:
        nid = n.id
        if nid == current:
            colors_map[nid] = COLOR_CURRENT
        elif finished and nid in on_path:
            colors_map[nid] = COLOR_PATH
        elif result and result.is_pruned_node(nid) and nid not in windows:
            colors_map[nid] = COLOR_PRUNED
        elif nid in windows:
            colors_map[nid] = COLOR_VISITED
        else:
            colors_map[nid] = COLOR_UNTOUCHED

        name = labels.get(nid, str(nid))
        if tree.is_leaf(nid):
            base = f"{name}\n{tree.leaf_value(nid)}"
            if n.kind is not NodeKind.LEAF:
                base += f" ({n.kind.value})"
        else:
            base = f"{name} ({n.kind.value})"
        if show_alpha_beta and nid in windows:
            rec = windows[nid]
            a_str, b_str = fmt_ab(rec.alpha, rec.beta)
            base += f"\nα={a_str}, β={b_str}"
        node_labels[nid] = base

    groups = {"path": [], "pruned": [], "neutral": []}
    for e in G.edges():
        if finished and e in path_edges:
            groups["path"].append(e)
        elif e in pruned_set:
            groups["pruned"].append(e)
        else:
            groups["neutral"].append(e)

    fig = plt.figure(figsize=(fig_w, fig_h))
    ax = plt.gca()
    ax.margins(margin)

    nx.draw_networkx_nodes(G, pos, ax=ax, node_color=[colors_map[n] for n in G.nodes()],
                           node_size=node_size)
    for key, color, style, width in [("neutral", EDGE_NEUTRAL, "solid", 1.2),
                                     ("pruned", EDGE_PRUNED, "dashed", 1.2),
                                     ("path", EDGE_PATH, "solid", 2.6)]:
        if groups[key]:
            nx.draw_networkx_edges(G, pos, ax=ax, edgelist=groups[key], edge_color=color,
                                   style=style, width=width, arrows=False)
    nx.draw_networkx_labels(
        G, pos, node_labels, ax=ax, font_size=font_size,
        bbox=dict(facecolor="none", edgecolor="none", alpha=0.7, pad=0.3 if compact else 0.5)
    )
    ax.set_axis_off()

    plt.title(title)
    plt.tight_layout()
    return fig
