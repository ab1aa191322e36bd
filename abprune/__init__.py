"""Build a game tree by hand and watch alpha-beta pruning run over it."""

from .engine import (
    DEFAULT_MAX_DEPTH,
    EvaluationResult,
    VisitRecord,
    alphabeta,
    layer_mismatches,
    minimax_value,
)
from .errors import GameTreeError, InvalidEdgeError, NoRootError, StructureError, UnknownNodeError
from .graph import Edge, GameTree, Node, NodeKind

__all__ = [
    "DEFAULT_MAX_DEPTH",
    "Edge",
    "EvaluationResult",
    "GameTree",
    "GameTreeError",
    "InvalidEdgeError",
    "NoRootError",
    "Node",
    "NodeKind",
    "StructureError",
    "UnknownNodeError",
    "VisitRecord",
    "alphabeta",
    "layer_mismatches",
    "minimax_value",
]
