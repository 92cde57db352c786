"""rubricmap scoring engine.

Weighted rubric trees ("mind maps"): AND/OR groups capped by max scores,
selectable leaf options, and a normalized 0-100 score kept consistent with
user edits.
"""

from __future__ import annotations

from .errors import (
    RubricMapError,
    MalformedRubricError,
    NodeNotFoundError,
    InvalidCommandError,
)
from .engine import MindMap
from .models import CommandResult, GroupNode, LeafNode, Operator, ScoreSummary

__all__ = [
    "__version__",
    "MindMap",
    "GroupNode",
    "LeafNode",
    "Operator",
    "CommandResult",
    "ScoreSummary",
    "RubricMapError",
    "MalformedRubricError",
    "NodeNotFoundError",
    "InvalidCommandError",
]

__version__ = "0.1.0"
