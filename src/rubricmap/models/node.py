# node.py

from enum import Enum
from typing import Annotated, Any, Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def new_node_id() -> str:
    """Opaque, stable node identity assigned once at load time."""
    return uuid4().hex


class Operator(str, Enum):
    """How a group combines its children's scores."""

    AND = "and"  # sum of children
    OR = "or"  # best single child


# ─────────────────────────────────────────────────────────────────────────────
# Scoring rule tag (set at load time, resolved against the engine's rule table)
# ─────────────────────────────────────────────────────────────────────────────


class RuleRef(BaseModel):
    """Names a scoring rule overriding the general AND/OR aggregation."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1)
    # ids of the direct children the rule combines; empty means all children
    factors: list[str] = Field(default_factory=list)


# ─────────────────────────────────────────────────────────────────────────────
# Rubric tree nodes
# ─────────────────────────────────────────────────────────────────────────────


class LeafNode(BaseModel):
    """A selectable option contributing `weight` when selected."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True, allow_inf_nan=False)

    type: Literal["leaf"] = "leaf"
    id: str = Field(default_factory=new_node_id, min_length=1)
    name: str = Field(..., min_length=1)
    weight: float = Field(..., ge=0.0)
    selected: bool = False

    def __str__(self) -> str:  # pragma: no cover - trivial
        mark = "x" if self.selected else " "
        return f"[{mark}] {self.name} ({self.weight:g})"


class GroupNode(BaseModel):
    """An internal rubric section combining its children via AND/OR, capped by `max_score`."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True, allow_inf_nan=False)

    type: Literal["node"] = "node"
    id: str = Field(default_factory=new_node_id, min_length=1)
    name: str = Field(..., min_length=1)
    operator: Operator
    max_score: float = Field(..., ge=0.0)
    enabled: bool = True
    # presentation only: whether descendants are drawn
    expanded: bool = False
    children: list["RubricNode"] = Field(default_factory=list)
    rule: RuleRef | None = None

    @field_validator("operator", mode="before")
    @classmethod
    def _normalize_operator(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("rule", mode="before")
    @classmethod
    def _rule_shorthand(cls, v: Any) -> Any:
        if isinstance(v, str):
            return {"name": v}
        return v

    @model_validator(mode="after")
    def _single_or_selection(self) -> "GroupNode":
        if self.operator is Operator.OR:
            picked = [c.name for c in self.leaf_children() if c.selected]
            if len(picked) > 1:
                raise ValueError(
                    f"OR group {self.name!r} has more than one selected leaf: " + ", ".join(picked)
                )
        return self

    def leaf_children(self) -> list[LeafNode]:
        return [c for c in self.children if isinstance(c, LeafNode)]

    def group_children(self) -> list["GroupNode"]:
        return [c for c in self.children if isinstance(c, GroupNode)]

    def has_children(self) -> bool:
        return bool(self.children)

    def has_leaf_children(self) -> bool:
        return any(isinstance(c, LeafNode) for c in self.children)

    def __str__(self) -> str:
        state = "on" if self.enabled else "off"
        return f"{self.name} [{self.operator.value.upper()} <={self.max_score:g}, {state}]"

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return (
            f"GroupNode(id={self.id!r}, name={self.name!r}, operator={self.operator.value!r}, "
            f"max_score={self.max_score}, enabled={self.enabled}, children={len(self.children)})"
        )


RubricNode = Annotated[LeafNode | GroupNode, Field(discriminator="type")]

GroupNode.model_rebuild()
