class GameTreeError(Exception):
    """Base class for everything this package raises on purpose."""


class NoRootError(GameTreeError):
    """Every node has an incoming edge (or there are no nodes at all)."""

    def __init__(self, message: str = "no parentless node to start the search from"):
        super().__init__(message)


class StructureError(GameTreeError):
    """The traversal went deeper than allowed, most likely because of a cycle."""

    def __init__(self, node_id: int, depth: int, max_depth: int):
        self.node_id = node_id
        self.depth = depth
        self.max_depth = max_depth
        super().__init__(
            f"search reached depth {depth} at node {node_id} (limit {max_depth}); "
            "the graph probably contains a cycle"
        )


class InvalidEdgeError(GameTreeError):
    """Self-loop or edge touching a node that does not exist."""

    def __init__(self, parent: int, child: int, reason: str):
        self.parent = parent
        self.child = child
        self.reason = reason
        super().__init__(f"cannot connect {parent} -> {child}: {reason}")


class UnknownNodeError(GameTreeError, KeyError):
    def __init__(self, node_id: int):
        self.node_id = node_id
        super().__init__(node_id)

    def __str__(self) -> str:
        return f"no node with id {self.node_id}"
