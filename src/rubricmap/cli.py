# src/rubricmap/cli.py

import json
from pathlib import Path

import typer

from rubricmap.engine import MindMap
from rubricmap.errors import MalformedRubricError
from rubricmap.logging import configure_logging
from rubricmap.models.result import CommandResult
from rubricmap.scoring import format_score
from rubricmap.settings import get_settings
from rubricmap.view import NodeState, NodeView

app = typer.Typer(help="rubricmap: weighted rubric mind maps and their scores.")


def _resolve_rubric(path: Path | None) -> Path:
    if path is not None:
        return path
    configured = get_settings().rubric_path
    if configured:
        return Path(configured)
    raise typer.BadParameter("No rubric file given and RUBRICMAP_RUBRIC_PATH is not set.")


def _load(path: Path) -> MindMap:
    try:
        return MindMap.from_file(path)
    except MalformedRubricError as e:
        typer.echo(f"Malformed rubric: {e}", err=True)
        raise typer.Exit(code=2)
    except OSError as e:
        typer.echo(f"Cannot read rubric '{path}': {e}", err=True)
        raise typer.Exit(code=2)


def _parse_assignment(raw: str) -> tuple[str, float]:
    """
    Accepts:
      --weight ID=VALUE / --max ID=VALUE
    """
    if "=" not in raw:
        raise typer.BadParameter(f"Expected format 'ID=VALUE', got {raw!r}")
    node_id, value = raw.rsplit("=", 1)
    try:
        return node_id.strip(), float(value)
    except ValueError as e:
        raise typer.BadParameter(f"Value in {raw!r} is not a number") from e


def _outline_line(view: NodeView, show_ids: bool) -> str:
    if view.kind == "leaf":
        marker = "[x]" if view.state is NodeState.selected else "[ ]"
    else:
        marker = "-" if view.expanded else "+"
    parts = [f"{'  ' * view.depth}{marker} {view.name}", view.value_label]
    if view.details_label:
        parts.append(view.details_label)
    if view.state is NodeState.disabled:
        parts.append("(disabled)")
    if show_ids:
        parts.append(f"<{view.id}>")
    return "  ".join(parts)


@app.callback()
def main(
    log_level: str | None = typer.Option(
        None, "--log-level", help="Logging level (default from settings)."
    ),
) -> None:
    configure_logging(log_level or get_settings().log_level)


@app.command("validate")
def validate(
    rubric: Path | None = typer.Argument(None, help="Rubric file (YAML or JSON)."),
) -> None:
    """
    Load a rubric and report whether it is well formed.
    """
    mm = _load(_resolve_rubric(rubric))
    typer.echo(f"OK: '{mm.root.name}' with {len(mm.index)} nodes")


@app.command("show")
def show(
    rubric: Path | None = typer.Argument(None, help="Rubric file (YAML or JSON)."),
    show_all: bool = typer.Option(False, "--all", help="Include collapsed subtrees."),
    show_ids: bool = typer.Option(True, "--ids/--no-ids", help="Print node ids."),
) -> None:
    """
    Print the rubric as an indented outline followed by the normalized score.
    """
    mm = _load(_resolve_rubric(rubric))
    for view in mm.views(visible_only=not show_all):
        typer.echo(_outline_line(view, show_ids))
    typer.echo(f"\nScore: {mm.summary().display()} / 100")


@app.command("score")
def score(
    rubric: Path | None = typer.Argument(None, help="Rubric file (YAML or JSON)."),
    enable: list[str] | None = typer.Option(None, "--enable", help="Group id to enable."),
    disable: list[str] | None = typer.Option(None, "--disable", help="Group id to disable."),
    weight: list[str] | None = typer.Option(None, "--weight", help="Leaf weight as ID=VALUE."),
    max_score: list[str] | None = typer.Option(None, "--max", help="Group max as ID=VALUE."),
    select: list[str] | None = typer.Option(None, "--select", "-s", help="Leaf id to select."),
    as_json: bool = typer.Option(False, "--json", help="Print the summary as JSON."),
) -> None:
    """
    Apply commands (enable, disable, weight, max, select, in that order) and print the score.
    """
    mm = _load(_resolve_rubric(rubric))
    weights = [_parse_assignment(w) for w in weight or []]
    maxima = [_parse_assignment(m) for m in max_score or []]

    results: list[CommandResult] = []
    results += [mm.set_group_enabled(node_id, True) for node_id in enable or []]
    results += [mm.set_group_enabled(node_id, False) for node_id in disable or []]
    results += [mm.set_leaf_weight(node_id, v) for node_id, v in weights]
    results += [mm.set_group_max(node_id, v) for node_id, v in maxima]
    results += [mm.select_leaf(node_id) for node_id in select or []]
    rejected = [r for r in results if not r.ok]

    summary = mm.summary()
    if as_json:
        payload = {
            **summary.model_dump(),
            "display": summary.display(),
            "commands": [r.model_dump() for r in results],
        }
        typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))
    else:
        for r in rejected:
            typer.echo(f"Rejected {r.command}({r.node_id}): {r.error}", err=True)
        typer.echo(
            f"Score: {summary.display()} / 100  "
            f"(raw={format_score(summary.score, mm.precision)}, "
            f"max={format_score(summary.effective_max, mm.precision)})"
        )
    raise typer.Exit(code=0 if not rejected else 1)
