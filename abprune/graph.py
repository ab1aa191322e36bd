import copy
import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple, Union

from .errors import InvalidEdgeError, NoRootError, UnknownNodeError

logger = logging.getLogger(__name__)

Number = Union[int, float]
Edge = Tuple[int, int]   # (parent, child)


class NodeKind(Enum):
    MAX = "MAX"
    MIN = "MIN"
    LEAF = "LEAF"


@dataclass
class Node:
    id: int
    kind: NodeKind
    value: Optional[Number] = None   # only read when the node has no children


def _check_value(value: Optional[Number]) -> Optional[Number]:
    if value is not None and not math.isfinite(value):
        raise ValueError(f"node value must be finite, got {value!r}")
    return value


class GameTree:
    """
    Editable game tree: nodes keyed by integer id plus directed parent -> child edges.

    Children are kept per parent in edge-insertion order; that order is the
    left-to-right order the search uses. Ids come from a counter and are never
    handed out twice, even after the node is removed.
    """

    def __init__(self):
        self._nodes: Dict[int, Node] = {}
        self._edges: List[Edge] = []
        self._children: Dict[int, List[int]] = {}
        self._parents: Dict[int, List[int]] = {}
        self._next_id = 1

    # =========================
    # Mutations
    # =========================
    def add_node(self, kind: NodeKind = NodeKind.LEAF, value: Optional[Number] = None) -> int:
        nid = self._next_id
        self._next_id += 1
        self._nodes[nid] = Node(nid, NodeKind(kind), _check_value(value))
        self._children[nid] = []
        self._parents[nid] = []
        logger.debug("Added %s node %d", self._nodes[nid].kind.value, nid)
        return nid

    def add_edge(self, parent: int, child: int, strict: bool = False) -> bool:
        """Append parent -> child. Returns False when nothing was added."""
        reason = None
        if parent == child:
            reason = "self-loops are not allowed"
        elif parent not in self._nodes or child not in self._nodes:
            missing = parent if parent not in self._nodes else child
            reason = f"node {missing} does not exist"
        if reason is not None:
            if strict:
                raise InvalidEdgeError(parent, child, reason)
            logger.warning("Ignoring edge %d -> %d: %s", parent, child, reason)
            return False

        if child in self._children[parent]:
            return False
        self._edges.append((parent, child))
        self._children[parent].append(child)
        self._parents[child].append(parent)
        logger.debug("Added edge %d -> %d", parent, child)
        return True

    def remove_edge(self, parent: int, child: int) -> None:
        if (parent, child) not in self._edges:
            return
        self._edges.remove((parent, child))
        self._children[parent].remove(child)
        self._parents[child].remove(parent)

    def remove_node(self, node_id: int) -> None:
        if node_id not in self._nodes:
            return
        for parent in self._parents.pop(node_id):
            self._children[parent].remove(node_id)
        for child in self._children.pop(node_id):
            self._parents[child].remove(node_id)
        self._edges = [(u, v) for (u, v) in self._edges if node_id not in (u, v)]
        del self._nodes[node_id]
        logger.debug("Removed node %d", node_id)

    def set_value(self, node_id: int, value: Optional[Number]) -> None:
        self.node(node_id).value = _check_value(value)

    def set_kind(self, node_id: int, kind: NodeKind) -> None:
        self.node(node_id).kind = NodeKind(kind)

    # =========================
    # Queries
    # =========================
    def node(self, node_id: int) -> Node:
        try:
            return self._nodes[node_id]
        except KeyError:
            raise UnknownNodeError(node_id) from None

    def nodes(self) -> List[Node]:
        return list(self._nodes.values())

    def node_ids(self) -> List[int]:
        return list(self._nodes)

    def edges(self) -> List[Edge]:
        return list(self._edges)

    def children_of(self, node_id: int) -> List[int]:
        return list(self._children.get(node_id, ()))

    def parents_of(self, node_id: int) -> List[int]:
        return list(self._parents.get(node_id, ()))

    def is_leaf(self, node_id: int) -> bool:
        """Structural: a node without children is a leaf whatever its declared kind."""
        return not self._children.get(node_id)

    def leaf_value(self, node_id: int) -> Number:
        value = self.node(node_id).value
        return 0 if value is None else value

    def find_root(self) -> int:
        candidates = [nid for nid, parents in self._parents.items() if not parents]
        if not candidates:
            raise NoRootError()
        if len(candidates) > 1:
            logger.debug("Several parentless nodes %s; using %d", candidates, min(candidates))
        return min(candidates)

    def snapshot(self) -> "GameTree":
        return copy.deepcopy(self)

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id) -> bool:
        return node_id in self._nodes

    def __iter__(self) -> Iterator[Node]:
        return iter(list(self._nodes.values()))
