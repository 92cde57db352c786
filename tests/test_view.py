"""Tests for rubricmap.view module."""

from rubricmap.engine import MindMap
from rubricmap.models.node import GroupNode, LeafNode
from rubricmap.view import NodeState, details_label, node_state, value_label


class TestLabels:
    def test_value_label(self) -> None:
        assert value_label(LeafNode(name="a", weight=10), 0) == "10"
        assert value_label(LeafNode(name="a", weight=2.5), 0) == "2.5"
        g = GroupNode(name="g", operator="or", max_score=50)
        assert value_label(g, 30.0) == "30/50"

    def test_details_only_for_groups_holding_leaves(self) -> None:
        holder = GroupNode(
            name="g", operator="or", max_score=5, children=[LeafNode(name="a", weight=1)]
        )
        outer = GroupNode(name="o", operator="and", max_score=5, children=[holder])
        assert details_label(holder) == "OR"
        assert details_label(outer) == ""
        assert details_label(LeafNode(name="a", weight=1)) == ""

    def test_node_state(self) -> None:
        parent = GroupNode(name="g", operator="and", max_score=5)
        leaf = LeafNode(name="a", weight=1)
        assert node_state(leaf, parent) is NodeState.enabled
        leaf.selected = True
        assert node_state(leaf, parent) is NodeState.selected
        leaf.selected = False
        parent.enabled = False
        assert node_state(leaf, parent) is NodeState.disabled
        assert node_state(parent, None) is NodeState.disabled


class TestBuildViews:
    def test_initial_views_show_root_and_sections(self, mindmap: MindMap) -> None:
        """Only the root starts expanded, so only its direct children are visible."""
        views = mindmap.views()
        assert [v.id for v in views] == ["root", "exposure", "controls", "impact"]
        assert views[0].parent_id is None
        assert views[0].expanded
        assert views[1].parent_id == "root"
        assert all(v.visible for v in views)

    def test_all_views_flag_hidden_nodes(self, mindmap: MindMap) -> None:
        views = {v.id: v for v in mindmap.views(visible_only=False)}
        assert len(views) == 16
        assert views["exposure"].visible
        assert not views["exp-low"].visible
        assert not views["avail-major"].visible
        assert views["avail-major"].depth == 3

    def test_expanding_reveals_children(self, mindmap: MindMap) -> None:
        mindmap.toggle_expansion("impact")
        ids = [v.id for v in mindmap.views()]
        assert ids == ["root", "exposure", "controls", "impact", "data", "availability"]

    def test_view_values(self, mindmap: MindMap) -> None:
        mindmap.toggle_expansion("exposure")
        mindmap.select_leaf("exp-med")
        views = {v.id: v for v in mindmap.views()}
        assert views["exposure"].value_label == "20/40"
        assert views["exposure"].details_label == "OR"
        assert views["exposure"].score == 20
        assert views["exposure"].effective_max == 40
        assert views["exp-med"].state is NodeState.selected
        assert views["exp-low"].state is NodeState.enabled
        assert views["exp-low"].kind == "leaf"
        assert views["root"].value_label == "20/100"
        assert views["root"].details_label == ""

    def test_disabled_section(self, mindmap: MindMap) -> None:
        mindmap.toggle_expansion("controls")
        mindmap.set_group_enabled("controls", False)
        views = {v.id: v for v in mindmap.views()}
        assert views["controls"].state is NodeState.disabled
        assert views["mfa"].state is NodeState.disabled
        assert views["controls"].effective_max == 0
