import logging
import math
from dataclasses import dataclass
from typing import FrozenSet, List, Optional, Tuple

from .errors import StructureError, UnknownNodeError
from .graph import Edge, GameTree, NodeKind, Number

logger = logging.getLogger(__name__)

# Kept well under the interpreter's recursion limit; one Python frame per ply.
DEFAULT_MAX_DEPTH = 500


# =========================
# Result types
# =========================
@dataclass(frozen=True)
class VisitRecord:
    node_id: int
    depth: int
    alpha: Number
    beta: Number
    maximizing: bool


@dataclass(frozen=True)
class EvaluationResult:
    root: int
    optimal_value: Number
    optimal_path: Tuple[int, ...]          # root ... chosen leaf
    pruned_edges: FrozenSet[Edge]
    trace: Tuple[VisitRecord, ...]         # pre-order, one entry per visit

    @property
    def visited(self) -> int:
        return len(self.trace)

    def path_edges(self) -> List[Edge]:
        p = self.optimal_path
        return list(zip(p, p[1:]))

    def is_pruned_node(self, node_id: int) -> bool:
        return any(child == node_id for (_, child) in self.pruned_edges)


def _resolve_start(tree: GameTree, root: Optional[int], maximizing: Optional[bool]) -> Tuple[int, bool]:
    if root is None:
        root = tree.find_root()
    elif root not in tree:
        raise UnknownNodeError(root)
    if maximizing is None:
        maximizing = tree.node(root).kind is not NodeKind.MIN
    return root, maximizing


# =========================
# Alpha–Beta
# =========================
def alphabeta(tree: GameTree, root: Optional[int] = None, maximizing: Optional[bool] = None,
              max_depth: int = DEFAULT_MAX_DEPTH) -> EvaluationResult:
    """
    Run alpha-beta from `root` (default: the first parentless node).

    The starting mode follows the root's declared kind (MIN minimizes, anything
    else maximizes) and flips every ply. A node with no children is scored as a
    leaf using its stored value, even when it is declared MAX or MIN. When
    beta <= alpha at a node, the edges to its children not yet visited are
    marked pruned; their own subtrees are not marked.
    """
    root, maximizing = _resolve_start(tree, root, maximizing)
    trace: List[VisitRecord] = []
    pruned: List[Edge] = []

    def dfs(u: int, depth: int, alpha: Number, beta: Number, is_max: bool,
            path: Tuple[int, ...]) -> Tuple[Number, Tuple[int, ...]]:
        if depth > max_depth:
            raise StructureError(u, depth, max_depth)
        trace.append(VisitRecord(u, depth, alpha, beta, is_max))
        children = tree.children_of(u)
        if not children:
            return tree.leaf_value(u), path + (u,)

        best_path: Tuple[int, ...] = ()
        if is_max:
            best = -math.inf
            for i, ch in enumerate(children):
                v, p = dfs(ch, depth + 1, alpha, beta, False, path + (u,))
                if v > best:
                    best, best_path = v, p
                alpha = max(alpha, v)
                if beta <= alpha:
                    _cut(u, children[i + 1:], alpha, beta)
                    break
        else:
            best = math.inf
            for i, ch in enumerate(children):
                v, p = dfs(ch, depth + 1, alpha, beta, True, path + (u,))
                if v < best:
                    best, best_path = v, p
                beta = min(beta, v)
                if beta <= alpha:
                    _cut(u, children[i + 1:], alpha, beta)
                    break
        return best, best_path

    def _cut(u: int, rest: List[int], alpha: Number, beta: Number):
        if rest:
            logger.debug("Cutoff at %d (alpha=%s, beta=%s): pruning %s", u, alpha, beta, rest)
        for ch in rest:
            if (u, ch) not in pruned:
                pruned.append((u, ch))

    value, path = dfs(root, 0, -math.inf, math.inf, maximizing, ())
    logger.debug("Alpha-beta from %d: value=%s path=%s visited=%d pruned=%d",
                 root, value, path, len(trace), len(pruned))
    return EvaluationResult(root, value, path, frozenset(pruned), tuple(trace))


# =========================
# Plain minimax & checks
# =========================
def minimax_value(tree: GameTree, root: Optional[int] = None, maximizing: Optional[bool] = None,
                  max_depth: int = DEFAULT_MAX_DEPTH) -> Number:
    """Full minimax without pruning, same conventions as alphabeta()."""
    root, maximizing = _resolve_start(tree, root, maximizing)

    def mm(u: int, depth: int, is_max: bool) -> Number:
        if depth > max_depth:
            raise StructureError(u, depth, max_depth)
        children = tree.children_of(u)
        if not children:
            return tree.leaf_value(u)
        vals = [mm(ch, depth + 1, not is_max) for ch in children]
        return max(vals) if is_max else min(vals)

    return mm(root, 0, maximizing)


def layer_mismatches(tree: GameTree, root: Optional[int] = None,
                     maximizing: Optional[bool] = None) -> List[int]:
    """Internal nodes whose declared MAX/MIN kind disagrees with the ply they sit on."""
    root, maximizing = _resolve_start(tree, root, maximizing)
    out: List[int] = []
    seen = set()
    stack = [(root, maximizing)]
    while stack:
        u, is_max = stack.pop()
        if (u, is_max) in seen:
            continue
        seen.add((u, is_max))
        children = tree.children_of(u)
        if not children:
            continue
        expected = NodeKind.MAX if is_max else NodeKind.MIN
        if tree.node(u).kind is not expected and u not in out:
            out.append(u)
        for ch in reversed(children):
            stack.append((ch, not is_max))
    return sorted(out)
