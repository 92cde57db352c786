"""Named scoring rules that override the general AND/OR aggregation.

A group opts into a rule through its ``rule`` tag (a :class:`RuleRef`), set
either in the rubric definition or at load time by a :class:`LabelRule`.
Scoring looks the tag up in a rule table; display names are never matched
while scoring.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Iterable, Mapping, Protocol

from rubricmap.errors import MalformedRubricError
from rubricmap.lookup import iter_nodes
from rubricmap.models.node import GroupNode, RubricNode, RuleRef

# Scores one child; rules receive it so nested rules keep applying below them.
ChildScore = Callable[[RubricNode], float]


class ScoringRule(Protocol):
    """Computes a tagged group's score in place of the general rule."""

    def __call__(self, node: GroupNode, child_score: ChildScore) -> float: ...


def rule_factors(node: GroupNode) -> list[RubricNode]:
    """Children named by the node's rule tag, in tag order (all children if none named)."""
    ids = node.rule.factors if node.rule else []
    if not ids:
        return list(node.children)
    by_id = {c.id: c for c in node.children}
    return [by_id[i] for i in ids if i in by_id]


class ProductRule:
    """Multiplies the factor children's scores, capped by ``max_score``.

    Models "severity x likelihood" style sections (e.g. a CVSS band times an
    EPSS band).
    """

    def __call__(self, node: GroupNode, child_score: ChildScore) -> float:
        if not node.enabled:
            return 0.0
        factors = rule_factors(node)
        if not factors:
            return 0.0
        return min(math.prod(child_score(c) for c in factors), node.max_score)


DEFAULT_RULES: dict[str, ScoringRule] = {"product": ProductRule()}


def check_rule_tags(root: GroupNode, rules: Mapping[str, ScoringRule]) -> None:
    """Fail if a tag names an unknown rule or a factor that is not a direct child."""
    for node, _, _ in iter_nodes(root):
        if not isinstance(node, GroupNode) or node.rule is None:
            continue
        if node.rule.name not in rules:
            raise MalformedRubricError(
                f"group {node.name!r} uses unknown scoring rule {node.rule.name!r} "
                f"(known: {', '.join(sorted(rules)) or 'none'})"
            )
        child_ids = {c.id for c in node.children}
        stray = [f for f in node.rule.factors if f not in child_ids]
        if stray:
            raise MalformedRubricError(
                f"rule {node.rule.name!r} on group {node.name!r} names non-child factors: "
                + ", ".join(stray)
            )


# ─────────────────────────────────────────────────────────────────────────────
# Load-time tagging by label (legacy rubric documents without rule tags)
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class LabelRule:
    """Tags a group named ``group`` that has children named ``factors`` with ``rule``."""

    group: str
    factors: tuple[str, ...]
    rule: str

    def match(self, node: GroupNode) -> RuleRef | None:
        if node.name != self.group or node.rule is not None:
            return None
        ids: list[str] = []
        for label in self.factors:
            child = next((c for c in node.children if c.name == label), None)
            if child is None:
                return None
            ids.append(child.id)
        return RuleRef(name=self.rule, factors=ids)


LEGACY_RULES: tuple[LabelRule, ...] = (
    LabelRule(group="Base sensor score", factors=("CVSS", "EPSS"), rule="product"),
)


def apply_label_rules(root: GroupNode, label_rules: Iterable[LabelRule] = LEGACY_RULES) -> int:
    """Tag matching groups in place; returns how many groups were tagged."""
    label_rules = tuple(label_rules)
    tagged = 0
    for node, _, _ in iter_nodes(root):
        if not isinstance(node, GroupNode):
            continue
        for lr in label_rules:
            ref = lr.match(node)
            if ref is not None:
                node.rule = ref
                tagged += 1
                break
    return tagged
