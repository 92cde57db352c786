"""Identity-based search over a rubric tree.

Mutation commands address nodes by their stable ``id`` rather than by object
reference, because the rendering layer rebuilds its own node wrappers on every
pass. The plain depth-first helpers work on any subtree; :class:`NodeIndex`
precomputes the same answers once for a loaded tree, whose node set never
changes after load.
"""

from __future__ import annotations

from typing import Iterator

from rubricmap.errors import MalformedRubricError, NodeNotFoundError
from rubricmap.models.node import GroupNode, RubricNode


def iter_nodes(
    root: RubricNode, *, parent: GroupNode | None = None, depth: int = 0
) -> Iterator[tuple[RubricNode, GroupNode | None, int]]:
    """Yield ``(node, parent, depth)`` in depth-first pre-order (display order)."""
    stack: list[tuple[RubricNode, GroupNode | None, int]] = [(root, parent, depth)]
    while stack:
        node, par, d = stack.pop()
        yield node, par, d
        if isinstance(node, GroupNode):
            stack.extend((child, node, d + 1) for child in reversed(node.children))


def find_by_id(root: RubricNode, node_id: str) -> RubricNode | None:
    """Return the first node with ``node_id`` or None."""
    for node, _, _ in iter_nodes(root):
        if node.id == node_id:
            return node
    return None


def find_parent_by_id(root: RubricNode, node_id: str) -> GroupNode | None:
    """Return the immediate parent of ``node_id``; None for the root or an unknown id."""
    for node, parent, _ in iter_nodes(root):
        if node.id == node_id:
            return parent
    return None


class NodeIndex:
    """id -> node / parent / depth maps for one loaded tree."""

    def __init__(self, root: GroupNode) -> None:
        self.root = root
        self._nodes: dict[str, RubricNode] = {}
        self._parents: dict[str, GroupNode | None] = {}
        self._depths: dict[str, int] = {}
        for node, parent, depth in iter_nodes(root):
            if node.id in self._nodes:
                raise MalformedRubricError(
                    f"duplicate node id {node.id!r} ({self._nodes[node.id].name!r} and {node.name!r})"
                )
            self._nodes[node.id] = node
            self._parents[node.id] = parent
            self._depths[node.id] = depth

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __iter__(self) -> Iterator[RubricNode]:
        return iter(self._nodes.values())

    def find(self, node_id: str) -> RubricNode | None:
        return self._nodes.get(node_id)

    def get(self, node_id: str) -> RubricNode:
        """Like :meth:`find` but raises NodeNotFoundError."""
        try:
            return self._nodes[node_id]
        except KeyError:
            raise NodeNotFoundError(node_id) from None

    def parent(self, node_id: str) -> GroupNode | None:
        if node_id not in self._parents:
            raise NodeNotFoundError(node_id)
        return self._parents[node_id]

    def depth(self, node_id: str) -> int:
        if node_id not in self._depths:
            raise NodeNotFoundError(node_id)
        return self._depths[node_id]

    def ancestors(self, node_id: str) -> list[GroupNode]:
        """Ancestors of ``node_id``, nearest first."""
        out: list[GroupNode] = []
        parent = self.parent(node_id)
        while parent is not None:
            out.append(parent)
            parent = self._parents[parent.id]
        return out
