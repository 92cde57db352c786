# src/rubricmap/engine.py
from __future__ import annotations

import math
from numbers import Real
from pathlib import Path
from typing import Any, Callable, Mapping

from rubricmap.cascade import clear_subtree_selections, disable_subtree, enable_subtree
from rubricmap.errors import InvalidCommandError, NodeNotFoundError
from rubricmap.io.loader import load_rubric, load_rubric_file
from rubricmap.logging import get_logger
from rubricmap.lookup import NodeIndex
from rubricmap.models.node import GroupNode, LeafNode, Operator, RubricNode
from rubricmap.models.result import CommandResult, ScoreSummary
from rubricmap.rules import DEFAULT_RULES, ScoringRule, check_rule_tags
from rubricmap.scoring import (
    calculate_effective_max_score,
    calculate_node_score,
    is_enabled,
    normalized_score,
)
from rubricmap.settings import get_settings
from rubricmap.view import NodeView, build_views

log = get_logger("engine")


def _check_value(value: Any, field: str) -> float:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidCommandError(f"{field} must be a number, got {value!r}")
    value = float(value)
    if not math.isfinite(value) or value < 0:
        raise InvalidCommandError(f"{field} must be a finite number >= 0, got {value!r}")
    return value


class MindMap:
    """
    Owns one rubric tree and exposes the query and command surface used by a
    rendering layer.

    Commands address nodes by id, mutate the canonical tree in place and return
    a CommandResult; they never raise into the caller. Queries taking an id
    raise NodeNotFoundError for unknown ids.

    Not thread safe: callers with more than one writer must serialize commands.
    """

    def __init__(
        self,
        root: GroupNode,
        *,
        rules: Mapping[str, ScoringRule] | None = None,
        precision: int | None = None,
    ) -> None:
        self._root = root
        self._index = NodeIndex(root)
        self._rules: dict[str, ScoringRule] = dict(DEFAULT_RULES if rules is None else rules)
        check_rule_tags(root, self._rules)
        self._precision = get_settings().score_precision if precision is None else precision

    @classmethod
    def from_definition(
        cls,
        data: Any,
        *,
        rules: Mapping[str, ScoringRule] | None = None,
        legacy_rules: bool | None = None,
        precision: int | None = None,
    ) -> "MindMap":
        root = load_rubric(data, rules=rules, legacy_rules=legacy_rules)
        return cls(root, rules=rules, precision=precision)

    @classmethod
    def from_file(
        cls,
        path: str | Path,
        *,
        rules: Mapping[str, ScoringRule] | None = None,
        legacy_rules: bool | None = None,
        precision: int | None = None,
    ) -> "MindMap":
        root = load_rubric_file(path, rules=rules, legacy_rules=legacy_rules)
        return cls(root, rules=rules, precision=precision)

    # ── queries ─────────────────────────────────────────────────────────────

    @property
    def root(self) -> GroupNode:
        return self._root

    @property
    def index(self) -> NodeIndex:
        return self._index

    @property
    def rules(self) -> Mapping[str, ScoringRule]:
        return self._rules

    @property
    def precision(self) -> int:
        return self._precision

    def node(self, node_id: str) -> RubricNode:
        return self._index.get(node_id)

    def parent(self, node_id: str) -> GroupNode | None:
        return self._index.parent(node_id)

    def node_score(self, node_id: str) -> float:
        return calculate_node_score(self.node(node_id), self._rules)

    def effective_max(self, node_id: str) -> float:
        return calculate_effective_max_score(self.node(node_id))

    def score(self) -> float:
        return calculate_node_score(self._root, self._rules)

    def effective_max_score(self) -> float:
        return calculate_effective_max_score(self._root)

    def normalized_score(self) -> float:
        return normalized_score(self.score(), self.effective_max_score(), self._precision)

    def summary(self) -> ScoreSummary:
        score = self.score()
        eff = self.effective_max_score()
        return ScoreSummary(
            score=score,
            effective_max=eff,
            normalized=normalized_score(score, eff, self._precision),
            precision=self._precision,
        )

    def is_enabled(self, node_id: str) -> bool:
        return is_enabled(self.node(node_id))

    def is_selectable(self, node_id: str) -> bool:
        """Groups follow their own flag; a leaf can be picked only under an enabled parent."""
        node = self.node(node_id)
        if isinstance(node, GroupNode):
            return node.enabled
        parent = self._index.parent(node_id)
        return parent is not None and parent.enabled

    def is_visible(self, node_id: str) -> bool:
        """True iff every ancestor is expanded."""
        return all(a.expanded for a in self._index.ancestors(node_id))

    def views(self, *, visible_only: bool = True) -> list[NodeView]:
        return build_views(self, visible_only=visible_only)

    # ── commands ────────────────────────────────────────────────────────────

    def _run(self, command: str, node_id: str, action: Callable[[], bool]) -> CommandResult:
        try:
            changed = action()
        except (NodeNotFoundError, InvalidCommandError) as ex:
            log.warning("%s(%s) rejected: %s", command, node_id, ex)
            return CommandResult(command=command, node_id=node_id, ok=False, error=str(ex))
        log.debug("%s(%s) applied (changed=%s)", command, node_id, changed)
        return CommandResult(command=command, node_id=node_id, changed=changed)

    def _leaf(self, node_id: str) -> LeafNode:
        node = self._index.get(node_id)
        if not isinstance(node, LeafNode):
            raise InvalidCommandError(f"{node.name!r} is a group, not a leaf")
        return node

    def _group(self, node_id: str) -> GroupNode:
        node = self._index.get(node_id)
        if not isinstance(node, GroupNode):
            raise InvalidCommandError(f"{node.name!r} is a leaf, not a group")
        return node

    def select_leaf(self, leaf_id: str) -> CommandResult:
        """Toggle a leaf under an AND parent; pick it exclusively under an OR parent."""

        def action() -> bool:
            leaf = self._leaf(leaf_id)
            parent = self._index.parent(leaf_id)
            if parent is None or not parent.enabled:
                raise InvalidCommandError(f"{leaf.name!r} cannot be selected: parent is disabled")
            if parent.operator is Operator.AND:
                leaf.selected = not leaf.selected
                return True
            changed = False
            for sibling in parent.leaf_children():
                want = sibling.id == leaf.id
                if sibling.selected != want:
                    sibling.selected = want
                    changed = True
            return changed

        return self._run("select_leaf", leaf_id, action)

    def set_group_enabled(self, group_id: str, enabled: bool) -> CommandResult:
        """Enable/disable a group and cascade to its descendants (disable also clears selections)."""

        def action() -> bool:
            group = self._group(group_id)
            return enable_subtree(group) if enabled else disable_subtree(group)

        return self._run("set_group_enabled", group_id, action)

    def set_leaf_weight(self, leaf_id: str, weight: float) -> CommandResult:
        def action() -> bool:
            leaf = self._leaf(leaf_id)
            value = _check_value(weight, "weight")
            changed = leaf.weight != value
            leaf.weight = value
            return changed

        return self._run("set_leaf_weight", leaf_id, action)

    def set_group_max(self, group_id: str, max_score: float) -> CommandResult:
        def action() -> bool:
            group = self._group(group_id)
            value = _check_value(max_score, "max_score")
            changed = group.max_score != value
            group.max_score = value
            return changed

        return self._run("set_group_max", group_id, action)

    def toggle_expansion(self, group_id: str) -> CommandResult:
        """Flip `expanded` on a group with children; anything else is left alone."""

        def action() -> bool:
            node = self._index.get(group_id)
            if not isinstance(node, GroupNode) or not node.has_children():
                return False
            node.expanded = not node.expanded
            return True

        return self._run("toggle_expansion", group_id, action)

    def save_node(self, node_id: str, value: float, enabled: bool | None = None) -> CommandResult:
        """Apply an edit form: a leaf's weight, or a group's max score and enabled state."""

        def action() -> bool:
            node = self._index.get(node_id)
            if isinstance(node, LeafNode):
                if enabled is not None:
                    raise InvalidCommandError(f"{node.name!r} is a leaf and has no enabled flag")
                new_weight = _check_value(value, "weight")
                changed = node.weight != new_weight
                node.weight = new_weight
                return changed
            new_max = _check_value(value, "max_score")
            changed = node.max_score != new_max
            node.max_score = new_max
            if enabled is not None:
                cascaded = enable_subtree(node) if enabled else disable_subtree(node)
                changed = cascaded or changed
            return changed

        return self._run("save_node", node_id, action)

    def clear_selections(self, group_id: str | None = None) -> CommandResult:
        """Deselect every leaf under a group (the root by default), leaving `enabled` alone."""
        target = self._root.id if group_id is None else group_id

        def action() -> bool:
            return clear_subtree_selections(self._group(target))

        return self._run("clear_selections", target, action)

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return f"MindMap(root={self._root.name!r}, nodes={len(self._index)}, rules={sorted(self._rules)})"
