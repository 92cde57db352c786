"""Aggregation of leaf selections into subtree scores.

OR groups take their best child ("choose one option"), AND groups sum their
children ("accumulate checked items"); both are capped by the group's
``max_score``. A disabled group contributes nothing and has no ceiling.
"""

from __future__ import annotations

from typing import Mapping

from rubricmap.models.node import GroupNode, LeafNode, Operator, RubricNode
from rubricmap.rules import ScoringRule


def calculate_node_score(node: RubricNode, rules: Mapping[str, ScoringRule] | None = None) -> float:
    """Current score of ``node``'s subtree given the selections."""
    if isinstance(node, LeafNode):
        return node.weight if node.selected else 0.0

    if node.rule is not None and rules and node.rule.name in rules:
        return rules[node.rule.name](node, lambda child: calculate_node_score(child, rules))

    score = 0.0
    if node.enabled and node.children:
        child_scores = [calculate_node_score(c, rules) for c in node.children]
        if node.operator is Operator.OR:
            score = max(child_scores)
        else:
            score = sum(child_scores)
    return min(score, node.max_score)


def calculate_effective_max_score(node: RubricNode | None) -> float:
    """Ceiling ``node`` could reach under the current enable/disable state.

    A group with any direct leaf child is bounded by its own ``max_score``;
    a group of groups adds up what its children could reach.
    """
    if node is None:
        return 0.0
    if isinstance(node, LeafNode):
        return node.weight
    if not node.enabled:
        return 0.0
    if node.has_leaf_children():
        return node.max_score
    if node.children:
        return sum(calculate_effective_max_score(c) for c in node.children)
    return node.max_score


def calculate_score(root: RubricNode, rules: Mapping[str, ScoringRule] | None = None) -> float:
    return calculate_node_score(root, rules)


def normalized_score(score: float, effective_max: float, precision: int = 2) -> float:
    """Scale ``score`` to 0-100 against ``effective_max``; 0 when there is no ceiling."""
    if effective_max <= 0:
        return 0.0
    return round(score / effective_max * 100, precision)


def format_score(value: float, precision: int = 2) -> str:
    return f"{value:.{precision}f}"


def is_enabled(node: RubricNode) -> bool:
    """Leaves carry no flag of their own; their selectability follows the parent."""
    if isinstance(node, GroupNode):
        return node.enabled
    return True
