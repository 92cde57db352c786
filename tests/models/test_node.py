import pytest
from pydantic import ValidationError

from rubricmap.models.node import GroupNode, LeafNode, Operator, RuleRef


class TestLeafNode:
    """Tests for LeafNode model."""

    def test_valid_leaf(self) -> None:
        """Test creating a leaf with defaults."""
        leaf = LeafNode(name="Patched", weight=2.5)

        assert leaf.type == "leaf"
        assert leaf.weight == 2.5
        assert leaf.selected is False
        assert leaf.id

    def test_generated_ids_are_unique(self) -> None:
        """Test that every leaf gets its own id."""
        ids = {LeafNode(name="x", weight=1).id for _ in range(50)}
        assert len(ids) == 50

    def test_missing_weight_fails(self) -> None:
        """Test that a leaf requires a weight."""
        with pytest.raises(ValidationError) as exc_info:
            LeafNode(name="x")  # type: ignore[call-arg]

        assert "Field required" in str(exc_info.value)

    def test_negative_weight_fails(self) -> None:
        """Test that negative weights are rejected."""
        with pytest.raises(ValidationError) as exc_info:
            LeafNode(name="x", weight=-1)

        assert "greater than or equal to 0" in str(exc_info.value)

    def test_zero_weight_allowed(self) -> None:
        """Test that a zero-weight option is valid."""
        assert LeafNode(name="none", weight=0).weight == 0

    def test_assignment_is_validated(self) -> None:
        """Test that in-place mutation re-checks constraints."""
        leaf = LeafNode(name="x", weight=1)
        with pytest.raises(ValidationError):
            leaf.weight = -3

    def test_extra_fields_forbidden(self) -> None:
        """Test that unknown fields are rejected."""
        with pytest.raises(ValidationError) as exc_info:
            LeafNode(name="x", weight=1, operator="and")  # type: ignore[call-arg]

        assert "Extra inputs are not permitted" in str(exc_info.value)


class TestGroupNode:
    """Tests for GroupNode model."""

    def test_valid_group_with_children(self) -> None:
        """Test parsing nested children through the type discriminator."""
        g = GroupNode.model_validate(
            {
                "name": "Section",
                "type": "node",
                "operator": "or",
                "max_score": 10,
                "children": [
                    {"name": "a", "type": "leaf", "weight": 3},
                    {"name": "sub", "type": "node", "operator": "and", "max_score": 5},
                ],
            }
        )

        assert g.operator is Operator.OR
        assert g.enabled is True
        assert g.expanded is False
        assert isinstance(g.children[0], LeafNode)
        assert isinstance(g.children[1], GroupNode)
        assert g.has_children()
        assert g.has_leaf_children()
        assert [c.name for c in g.leaf_children()] == ["a"]
        assert [c.name for c in g.group_children()] == ["sub"]

    @pytest.mark.parametrize("raw", ["AND", "And", " and "])
    def test_operator_case_insensitive(self, raw: str) -> None:
        """Test that operators are normalized to lower case."""
        g = GroupNode(name="g", operator=raw, max_score=1)  # type: ignore[arg-type]
        assert g.operator is Operator.AND

    def test_invalid_operator_fails(self) -> None:
        """Test that only AND/OR are accepted."""
        with pytest.raises(ValidationError):
            GroupNode(name="g", operator="xor", max_score=1)  # type: ignore[arg-type]

    def test_missing_operator_and_max_fail(self) -> None:
        """Test that operator and max_score are required."""
        with pytest.raises(ValidationError) as exc_info:
            GroupNode(name="g")  # type: ignore[call-arg]

        error_str = str(exc_info.value)
        assert "operator" in error_str
        assert "max_score" in error_str

    def test_unknown_child_type_fails(self) -> None:
        """Test that children need a known type tag."""
        with pytest.raises(ValidationError):
            GroupNode.model_validate(
                {
                    "name": "g",
                    "operator": "and",
                    "max_score": 1,
                    "children": [{"name": "c", "type": "branch", "weight": 1}],
                }
            )

    def test_or_group_rejects_two_selected_leaves(self) -> None:
        """Test the one-selection-per-OR-group invariant."""
        with pytest.raises(ValidationError) as exc_info:
            GroupNode(
                name="g",
                operator="or",
                max_score=10,
                children=[
                    LeafNode(name="a", weight=1, selected=True),
                    LeafNode(name="b", weight=2, selected=True),
                ],
            )

        assert "more than one selected leaf" in str(exc_info.value)

    def test_and_group_allows_many_selected(self) -> None:
        """Test that AND groups may have several selections."""
        g = GroupNode(
            name="g",
            operator="and",
            max_score=10,
            children=[
                LeafNode(name="a", weight=1, selected=True),
                LeafNode(name="b", weight=2, selected=True),
            ],
        )
        assert all(c.selected for c in g.leaf_children())

    def test_rule_string_shorthand(self) -> None:
        """Test that a bare rule name becomes a RuleRef."""
        g = GroupNode(name="g", operator="and", max_score=1, rule="product")  # type: ignore[arg-type]
        assert g.rule == RuleRef(name="product")
        assert g.rule.factors == []

    def test_childless_group(self) -> None:
        """Test helpers on a group without children."""
        g = GroupNode(name="g", operator="or", max_score=5)
        assert not g.has_children()
        assert not g.has_leaf_children()

    def test_str_is_ascii(self) -> None:
        """Test the one-line summary of a group."""
        g = GroupNode(name="Exposure", operator="or", max_score=40, enabled=False)
        assert str(g) == "Exposure [OR <=40, off]"
        assert str(g).isascii()
