"""``plan``, ``apply``, ``destroy`` and ``validate`` commands."""

from __future__ import annotations

import os
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Literal

import typer

from gitlab_provisioner.cli import app
from gitlab_provisioner.cli.errors import handle_error

if TYPE_CHECKING:
    from collections.abc import Iterator

    from gitlab_provisioner.config.schema import Config
    from gitlab_provisioner.engine.types import Plan, ResourceChange

_DEFAULT_CONFIG = Path("gitlab-provisioner.yaml")

ConfigOpt = Annotated[
    Path,
    typer.Option("--config", "-c", help="YAML file declaring projects and variables."),
]
NoColorOpt = Annotated[bool, typer.Option("--no-color", help="Disable colored output.")]
AutoApproveOpt = Annotated[
    bool,
    typer.Option("--auto-approve", help="Apply without asking for confirmation."),
]


def _color(no_color: bool) -> bool:
    return not no_color and not os.environ.get("NO_COLOR")


@contextmanager
def _exit_on_error(color: bool) -> Iterator[None]:
    """Report any exception on stderr and exit with its code."""
    try:
        yield
    except Exception as exc:
        raise typer.Exit(handle_error(exc, color=color)) from exc


def _print_plan(plan_obj: Plan, *, color: bool) -> None:
    from gitlab_provisioner.cli.formatting import format_plan, format_plan_summary

    typer.echo(format_plan(plan_obj, color=color))
    typer.echo()
    typer.echo(format_plan_summary(plan_obj.summary(), color=color))


def _run_apply(plan_obj: Plan, cfg: Config, *, color: bool) -> None:
    """Apply with a progress bar, one status line per finished variable."""
    from rich.console import Console
    from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn

    from gitlab_provisioner.cli.formatting import ACTION_LOOKS, format_apply_summary
    from gitlab_provisioner.config import apply

    columns = (
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
    )
    with Progress(*columns, console=Console(no_color=not color)) as progress:
        task = progress.add_task("Applying", total=len(plan_obj.actionable()))

        def report(change: ResourceChange, event: Literal["start", "done"]) -> None:
            look = ACTION_LOOKS[change.action]
            if event == "start":
                progress.update(task, description=f"{change.address}: {look.doing}...")
            else:
                progress.console.print(f"  {change.address}: {look.done}")
                progress.advance(task)

        with _exit_on_error(color):
            result = apply(plan_obj, cfg, progress=report)

    typer.echo()
    typer.echo(format_apply_summary(result.summary(), color=color))


def _review_and_apply(
    plan_obj: Plan, cfg: Config, *, color: bool, auto_approve: bool, question: str, nothing: str
) -> None:
    from gitlab_provisioner.cli.formatting import has_actionable_changes

    if not has_actionable_changes(plan_obj):
        typer.echo(nothing)
        raise typer.Exit(0)

    _print_plan(plan_obj, color=color)
    typer.echo()

    if not auto_approve and not typer.confirm(question):
        typer.echo("Apply canceled.", err=True)
        raise typer.Exit(1)

    _run_apply(plan_obj, cfg, color=color)


@app.command()
def plan(
    config: ConfigOpt = _DEFAULT_CONFIG,
    out: Annotated[
        Path | None,
        typer.Option("--out", "-o", help="Write the plan to this file for a later apply."),
    ] = None,
    no_color: NoColorOpt = False,
) -> None:
    """Show what apply would change. Exits 2 when there are changes."""
    from gitlab_provisioner import config as api
    from gitlab_provisioner.cli.formatting import has_actionable_changes

    color = _color(no_color)
    with _exit_on_error(color):
        plan_obj = api.plan(api.load(config))

    _print_plan(plan_obj, color=color)
    if out is not None:
        plan_obj.save(out)
        typer.echo(f"\nPlan saved to {out} (contains variable values in clear text)")

    if has_actionable_changes(plan_obj):
        raise typer.Exit(2)


@app.command(name="apply")
def apply_cmd(
    plan_file: Annotated[
        Path | None,
        typer.Argument(help="Plan written by 'plan --out'. Planned afresh when omitted."),
    ] = None,
    config: ConfigOpt = _DEFAULT_CONFIG,
    auto_approve: AutoApproveOpt = False,
    no_color: NoColorOpt = False,
) -> None:
    """Create and update variables so GitLab matches the configuration."""
    from gitlab_provisioner import config as api
    from gitlab_provisioner.engine.types import Plan

    color = _color(no_color)
    with _exit_on_error(color):
        cfg = api.load(config)
        plan_obj = Plan.load(plan_file) if plan_file is not None else api.plan(cfg)

    _review_and_apply(
        plan_obj,
        cfg,
        color=color,
        auto_approve=auto_approve,
        question="Do you want to apply these changes?",
        nothing="No changes. Variables are up-to-date.",
    )


@app.command()
def destroy(
    config: ConfigOpt = _DEFAULT_CONFIG,
    auto_approve: AutoApproveOpt = False,
    no_color: NoColorOpt = False,
) -> None:
    """Remove every declared variable from GitLab."""
    from gitlab_provisioner import config as api

    color = _color(no_color)
    with _exit_on_error(color):
        cfg = api.load(config)
        plan_obj = api.plan(cfg, destroy=True)

    _review_and_apply(
        plan_obj,
        cfg,
        color=color,
        auto_approve=auto_approve,
        question="Do you really want to destroy all declared variables?",
        nothing="No variables to destroy.",
    )


@app.command()
def validate(config: ConfigOpt = _DEFAULT_CONFIG, no_color: NoColorOpt = False) -> None:
    """Check the configuration without contacting GitLab."""
    from gitlab_provisioner import config as api
    from gitlab_provisioner.cli.formatting import styler

    color = _color(no_color)
    with _exit_on_error(color):
        cfg = api.load(config)

    n = len(cfg.variables)
    noun = "variable" if n == 1 else "variables"
    typer.echo(styler(color)(f"Configuration is valid ({n} {noun}).", fg="green"))
