"""Per-node display records for a rendering layer.

Everything a renderer needs to draw one node (labels, state, visibility)
without reaching into the scoring rules itself. Layout and geometry stay on
the rendering side.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Literal

from pydantic import BaseModel, ConfigDict

from rubricmap.lookup import iter_nodes
from rubricmap.models.node import GroupNode, LeafNode, RubricNode
from rubricmap.scoring import calculate_effective_max_score, calculate_node_score

if TYPE_CHECKING:
    from rubricmap.engine import MindMap


class NodeState(str, Enum):
    selected = "selected"
    enabled = "enabled"
    disabled = "disabled"


class NodeView(BaseModel):
    """Display values of one node, rebuilt on every render pass."""

    model_config = ConfigDict(extra="forbid")

    id: str
    name: str
    kind: Literal["leaf", "node"]
    depth: int
    parent_id: str | None = None
    value_label: str
    details_label: str = ""
    state: NodeState
    visible: bool
    expanded: bool = False
    score: float
    effective_max: float


def value_label(node: RubricNode, score: float) -> str:
    """Leaf: its weight. Group: "current/max"."""
    if isinstance(node, LeafNode):
        return f"{node.weight:g}"
    return f"{score:g}/{node.max_score:g}"


def details_label(node: RubricNode) -> str:
    """Operator, shown only for groups that directly hold options."""
    if isinstance(node, GroupNode) and node.has_leaf_children():
        return node.operator.value.upper()
    return ""


def node_state(node: RubricNode, parent: GroupNode | None) -> NodeState:
    if isinstance(node, LeafNode):
        if node.selected:
            return NodeState.selected
        return NodeState.enabled if parent is not None and parent.enabled else NodeState.disabled
    return NodeState.enabled if node.enabled else NodeState.disabled


def build_views(mm: "MindMap", *, visible_only: bool = True) -> list[NodeView]:
    """Views in display order; hidden subtrees are skipped unless ``visible_only`` is False."""
    views: list[NodeView] = []
    # ids of groups whose descendants are hidden (collapsed or under a collapsed ancestor)
    hidden_below: set[str] = set()
    for node, parent, depth in iter_nodes(mm.root):
        visible = parent is None or parent.id not in hidden_below
        if isinstance(node, GroupNode) and (not visible or not node.expanded):
            hidden_below.add(node.id)
        if visible_only and not visible:
            continue
        score = calculate_node_score(node, mm.rules)
        views.append(
            NodeView(
                id=node.id,
                name=node.name,
                kind=node.type,
                depth=depth,
                parent_id=parent.id if parent is not None else None,
                value_label=value_label(node, score),
                details_label=details_label(node),
                state=node_state(node, parent),
                visible=visible,
                expanded=isinstance(node, GroupNode) and node.expanded,
                score=score,
                effective_max=calculate_effective_max_score(node),
            )
        )
    return views
