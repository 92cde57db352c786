from pydantic import BaseModel, ConfigDict, Field

# ─────────────────────────────────────────────────────────────────────────────
# Mutation command outcome (what the rendering layer gets back)
# ─────────────────────────────────────────────────────────────────────────────


class CommandResult(BaseModel):
    """
    Outcome of a mutation command. Commands never raise into the caller;
    a rejected command comes back with `ok=False` and the reason in `error`.
    """

    model_config = ConfigDict(extra="forbid")

    command: str
    node_id: str
    ok: bool = True
    # False when the command was accepted but left the tree as it was
    changed: bool = False
    error: str | None = None

    def __bool__(self) -> bool:
        return self.ok

    def __str__(self) -> str:  # pragma: no cover - trivial
        status = "ok" if self.ok else f"rejected: {self.error}"
        return f"{self.command}({self.node_id}) {status}"


# ─────────────────────────────────────────────────────────────────────────────
# Score summary
# ─────────────────────────────────────────────────────────────────────────────


class ScoreSummary(BaseModel):
    """Raw root score, its effective ceiling and the normalized 0-100 value."""

    model_config = ConfigDict(extra="forbid")

    score: float
    effective_max: float
    normalized: float = Field(..., ge=0.0)
    precision: int = 2

    def display(self) -> str:
        return f"{self.normalized:.{self.precision}f}"

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.display()} / 100 (raw {self.score:g} of {self.effective_max:g})"
