"""Subtree enable/disable cascades.

A disabled group never has a selected leaf or an enabled group below it. The
engine commands and the loader both go through these helpers, so a tree keeps
that shape whether it was edited or just read from a file.
"""

from __future__ import annotations

from rubricmap.models.node import GroupNode, LeafNode


def enable_subtree(group: GroupNode) -> bool:
    """Enable ``group`` and every descendant group; leaves keep their selection."""
    changed = not group.enabled
    group.enabled = True
    for child in group.group_children():
        changed = enable_subtree(child) or changed
    return changed


def disable_subtree(group: GroupNode) -> bool:
    """Disable ``group`` and every descendant group, deselecting every leaf below."""
    changed = group.enabled
    group.enabled = False
    return clear_subtree_selections(group, disable=True) or changed


def clear_subtree_selections(group: GroupNode, *, disable: bool = False) -> bool:
    changed = False
    for child in group.children:
        if isinstance(child, LeafNode):
            if child.selected:
                child.selected = False
                changed = True
            continue
        if disable and child.enabled:
            child.enabled = False
            changed = True
        changed = clear_subtree_selections(child, disable=disable) or changed
    return changed
