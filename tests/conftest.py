from typing import Any

import pytest

from rubricmap.engine import MindMap


def leaf(node_id: str, weight: float, *, name: str | None = None, **extra: Any) -> dict[str, Any]:
    return {"id": node_id, "name": name or node_id, "type": "leaf", "weight": weight, **extra}


def group(
    node_id: str,
    operator: str,
    max_score: float,
    children: list[dict[str, Any]],
    *,
    name: str | None = None,
    **extra: Any,
) -> dict[str, Any]:
    return {
        "id": node_id,
        "name": name or node_id,
        "type": "node",
        "operator": operator,
        "max_score": max_score,
        "children": children,
        **extra,
    }


@pytest.fixture
def cvss_definition() -> dict[str, Any]:
    """Root (AND, 100) -> "CVSS section" (OR, 50) -> A(10), B(30)."""
    return group(
        "root",
        "and",
        100,
        [group("cvss", "or", 50, [leaf("a", 10, name="A"), leaf("b", 30, name="B")], name="CVSS section")],
        name="Root",
    )


@pytest.fixture
def rubric_definition() -> dict[str, Any]:
    """Three sections whose effective maxima add up to 100."""
    return group(
        "root",
        "and",
        100,
        [
            group(
                "exposure",
                "or",
                40,
                [leaf("exp-low", 5), leaf("exp-med", 20), leaf("exp-high", 40)],
            ),
            group(
                "controls",
                "and",
                30,
                [leaf("mfa", 10), leaf("backups", 15), leaf("training", 10)],
            ),
            group(
                "impact",
                "and",
                30,
                [
                    group("data", "or", 20, [leaf("data-none", 0), leaf("data-pii", 20)]),
                    group("availability", "or", 10, [leaf("avail-minor", 5), leaf("avail-major", 10)]),
                ],
            ),
        ],
        name="Risk",
    )


@pytest.fixture
def mindmap(rubric_definition: dict[str, Any]) -> MindMap:
    return MindMap.from_definition(rubric_definition)
