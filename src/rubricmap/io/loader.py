from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import ValidationError

from rubricmap.cascade import disable_subtree
from rubricmap.errors import MalformedRubricError
from rubricmap.logging import get_logger
from rubricmap.lookup import NodeIndex, iter_nodes
from rubricmap.models.node import GroupNode
from rubricmap.rules import (
    DEFAULT_RULES,
    LEGACY_RULES,
    LabelRule,
    ScoringRule,
    apply_label_rules,
    check_rule_tags,
)
from rubricmap.settings import get_settings

log = get_logger("loader")


def _apply_default_expansion(root: GroupNode) -> None:
    """Progressive disclosure: only the root starts expanded unless the definition says otherwise."""
    for node, _, depth in iter_nodes(root):
        if isinstance(node, GroupNode) and "expanded" not in node.model_fields_set:
            node.expanded = depth == 0


def _cascade_disabled_groups(root: GroupNode) -> int:
    """Push ``enabled: false`` down to every descendant; returns how many disabled groups had state to clear."""
    touched = 0
    for node, _, _ in iter_nodes(root):
        if isinstance(node, GroupNode) and not node.enabled:
            touched += disable_subtree(node)
    return touched


def load_rubric(
    data: Any,
    *,
    rules: Mapping[str, ScoringRule] | None = None,
    legacy_rules: bool | None = None,
    label_rules: tuple[LabelRule, ...] = LEGACY_RULES,
) -> GroupNode:
    """Build the canonical tree from a nested rubric definition.

    Raises MalformedRubricError for anything that is not a well-formed rubric;
    a broken definition never yields a partially usable tree. A disabled group
    wins over whatever its descendants declare: leaves below it are deselected
    and groups below it are disabled. Rule tags are checked against ``rules``
    (the built-in table when omitted).
    """
    if not isinstance(data, Mapping):
        raise MalformedRubricError(
            f"rubric definition must be a mapping, got {type(data).__name__}"
        )
    if data.get("type") != "node":
        raise MalformedRubricError("the rubric root must be a group node (type: 'node')")
    try:
        root = GroupNode.model_validate(data)
    except ValidationError as ex:
        raise MalformedRubricError(f"Invalid rubric definition: {ex}") from ex

    _apply_default_expansion(root)
    index = NodeIndex(root)  # rejects duplicate ids

    if _cascade_disabled_groups(root):
        log.debug("cleared state below disabled groups in %r", root.name)

    if legacy_rules is None:
        legacy_rules = get_settings().legacy_rules
    if legacy_rules:
        tagged = apply_label_rules(root, label_rules)
        if tagged:
            log.debug("tagged %d group(s) with label-matched scoring rules", tagged)
    check_rule_tags(root, DEFAULT_RULES if rules is None else rules)

    log.info("loaded rubric %r with %d nodes", root.name, len(index))
    return root


def load_rubric_file(
    path: str | Path,
    *,
    rules: Mapping[str, ScoringRule] | None = None,
    legacy_rules: bool | None = None,
) -> GroupNode:
    """Load a YAML or JSON rubric document, raising MalformedRubricError on content issues."""
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except UnicodeDecodeError as ex:
        raise MalformedRubricError(f"Cannot decode rubric file '{path}' as UTF-8: {ex}") from ex
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as ex:
        raise MalformedRubricError(f"Cannot parse rubric file '{path}': {ex}") from ex
    try:
        return load_rubric(data, rules=rules, legacy_rules=legacy_rules)
    except MalformedRubricError as ex:
        raise MalformedRubricError(f"Invalid rubric file '{path}': {ex}") from ex
