"""Centralized structured exception hierarchy for rubricmap.

A small, well-named set of error types that callers (typically a rendering
layer) can depend on without pattern-matching errors raised by dependencies
(pydantic, yaml).

Design:
  - RubricMapError is the common base (subclass of RuntimeError for ergonomics).
  - MalformedRubricError is raised while loading a rubric definition that is
    structurally invalid (missing field, unknown operator, duplicate id...).
  - NodeNotFoundError also inherits from ``LookupError`` so code catching the
    builtin keeps working while gaining the structured variant.
  - InvalidCommandError signals a mutation aimed at the wrong kind of node or
    carrying an unusable value.
"""

from __future__ import annotations

__all__ = [
    "RubricMapError",
    "MalformedRubricError",
    "NodeNotFoundError",
    "InvalidCommandError",
]


class RubricMapError(RuntimeError):
    """Base class for all structured rubricmap errors."""


class MalformedRubricError(RubricMapError):
    """Raised when a rubric definition cannot be turned into a tree."""


class NodeNotFoundError(LookupError, RubricMapError):
    """No node with the requested id exists in the tree."""

    def __init__(self, node_id: str) -> None:
        super().__init__(f"no node with id {node_id!r}")
        self.node_id = node_id


class InvalidCommandError(RubricMapError):
    """Raised for mutations that do not apply to the target node."""
