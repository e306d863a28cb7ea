"""Terminal rendering of plans and apply results."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, NamedTuple

import typer

from gitlab_provisioner.engine.types import Action

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from gitlab_provisioner.engine.types import Plan, ResourceChange


class ActionLook(NamedTuple):
    color: str
    symbol: str
    heading: str
    doing: str
    done: str


ACTION_LOOKS: dict[Action, ActionLook] = {
    Action.CREATE: ActionLook("green", "+", "will be created", "Creating", "Created"),
    Action.UPDATE: ActionLook("yellow", "~", "will be updated in-place", "Updating", "Updated"),
    Action.DELETE: ActionLook("red", "-", "will be destroyed", "Destroying", "Destroyed"),
    Action.NOOP: ActionLook("bright_black", " ", "is up-to-date", "", ""),
}

NO_CHANGES = "No changes. Variables are up-to-date."

_SENSITIVE_ATTRS = frozenset({"value"})
_SENSITIVE_PLACEHOLDER = "(sensitive value)"

# Enough to identify a variable that is about to disappear.
_IDENTITY_ATTRS = ("key", "environment_scope")

# (action, plan phrase, apply phrase, color)
_COUNTS = (
    (Action.CREATE, "to add", "added", "green"),
    (Action.UPDATE, "to change", "changed", "yellow"),
    (Action.DELETE, "to destroy", "destroyed", "red"),
)


def styler(color: bool) -> Callable[..., str]:
    """``typer.style``, or a function returning the text untouched."""
    if color:
        return typer.style

    def _plain(text: str, **_style: Any) -> str:
        return text

    return _plain


def has_actionable_changes(plan: Plan) -> bool:
    return bool(plan.actionable())


def _render(attr: str, value: Any) -> str:
    if value is None:
        return "null"
    if attr in _SENSITIVE_ATTRS:
        return _SENSITIVE_PLACEHOLDER
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return f'"{value}"'
    return str(value)


def _attribute_pairs(change: ResourceChange) -> list[tuple[str, str]]:
    match change.action:
        case Action.CREATE:
            return [(k, _render(k, v)) for k, v in (change.planned or {}).items()]
        case Action.UPDATE:
            return [
                (k, f"{_render(k, d['from'])} -> {_render(k, d['to'])}")
                for k, d in (change.diff or {}).items()
            ]
        case Action.DELETE:
            prior = change.prior or {}
            return [(k, _render(k, prior[k])) for k in _IDENTITY_ATTRS if k in prior]
        case _:
            return []


def format_change(change: ResourceChange, *, color: bool = True) -> str:
    """Render one change as a Terraform-style block, values masked."""
    style = styler(color)
    look = ACTION_LOOKS[change.action]
    _, _, name = change.address.partition(".")
    pairs = _attribute_pairs(change)
    width = max((len(k) for k, _ in pairs), default=0)

    opening = f'  {look.symbol} resource "{change.resource_type}" "{name or change.address}" {{'
    lines = [
        style(f"  # {change.address} {look.heading}", fg=look.color, bold=True),
        style(opening, fg=look.color),
        *(style(f"      {look.symbol} {k.ljust(width)} = {v}", fg=look.color) for k, v in pairs),
        style("    }", fg=look.color),
    ]
    return "\n".join(lines)


def format_changes(changes: Iterable[ResourceChange], *, color: bool = True) -> str:
    blocks = [format_change(c, color=color) for c in changes if c.is_actionable()]
    return "\n\n".join(blocks) if blocks else NO_CHANGES


def format_plan(plan: Plan, *, color: bool = True) -> str:
    return format_changes(plan.changes, color=color)


def count_phrases(summary: dict[str, int], *, applied: bool, color: bool = False) -> list[str]:
    """``["2 to add", "1 to change", "0 to destroy"]`` (or the past tense when *applied*)."""
    style = styler(color)
    phrases = []
    for action, planned_word, applied_word, fg in _COUNTS:
        n = summary.get(action.value, 0)
        text = f"{n} {applied_word if applied else planned_word}"
        phrases.append(style(text, fg=fg) if n else text)
    return phrases


def format_plan_summary(summary: dict[str, int], *, color: bool = True) -> str:
    return f"Plan: {', '.join(count_phrases(summary, applied=False, color=color))}."


def format_apply_summary(summary: dict[str, int], *, color: bool = True) -> str:
    header = styler(color)("Apply complete!", fg="green", bold=True)
    return f"{header} Resources: {', '.join(count_phrases(summary, applied=True, color=color))}."
