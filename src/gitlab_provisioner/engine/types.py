"""Plan and apply result models."""

from __future__ import annotations

from collections import Counter
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from collections.abc import Iterable


class Action(str, Enum):
    """What apply will do to a variable."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    NOOP = "no-op"


def _tally(changes: Iterable[ResourceChange]) -> dict[str, int]:
    seen = Counter(c.action.value for c in changes)
    return {a.value: seen[a.value] for a in Action}


class PlanMetadata(BaseModel):
    """Where and when a plan was computed."""

    host: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    destroy: bool
    engine_version: str


class ResourceChange(BaseModel):
    """One planned operation on a variable.

    ``desired`` is the (late-initialized) resource dump that apply replays,
    ``prior`` the variable as read from GitLab, ``planned`` the create
    payload and ``diff`` the ``{field: {"from", "to"}}`` map of an update.
    """

    address: str
    resource_type: str
    action: Action
    desired: dict[str, Any] | None = None
    prior: dict[str, Any] | None = None
    planned: dict[str, Any] | None = None
    diff: dict[str, Any] | None = None

    def is_actionable(self) -> bool:
        return self.action is not Action.NOOP


class Plan(BaseModel):
    """Changes computed against the live variables, in apply order."""

    metadata: PlanMetadata
    changes: list[ResourceChange]

    def actionable(self) -> list[ResourceChange]:
        """Changes that call GitLab when applied."""
        return [c for c in self.changes if c.is_actionable()]

    def summary(self) -> dict[str, int]:
        return _tally(self.changes)

    def save(self, path: Path | str) -> None:
        """Write the plan as JSON. Desired values are stored in clear text."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.model_dump_json(indent=2) + "\n", encoding="utf-8")

    @classmethod
    def load(cls, path: Path | str) -> Plan:
        return cls.model_validate_json(Path(path).read_text(encoding="utf-8"))


class ApplyResult(BaseModel):
    """Changes that were carried out, in order."""

    applied: list[ResourceChange] = Field(default_factory=list)

    def summary(self) -> dict[str, int]:
        return _tally(self.applied)
