"""Typed rubric tree and command/score result models."""

from rubricmap.models.node import GroupNode, LeafNode, Operator, RubricNode, RuleRef, new_node_id
from rubricmap.models.result import CommandResult, ScoreSummary

__all__ = [
    "CommandResult",
    "GroupNode",
    "LeafNode",
    "Operator",
    "RubricNode",
    "RuleRef",
    "ScoreSummary",
    "new_node_id",
]
