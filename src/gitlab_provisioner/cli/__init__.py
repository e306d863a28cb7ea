"""``gitlab-provisioner`` command line."""

from __future__ import annotations

import logging
import os
import sys

import typer

from gitlab_provisioner import __version__

app = typer.Typer(
    name="gitlab-provisioner",
    no_args_is_help=True,
    add_completion=False,
)

LOG_ENV_VAR = "GITLAB_PROVISIONER_LOG"
_LEVELS_BY_VERBOSITY = {1: logging.INFO, 2: logging.DEBUG}


def _level_from_env(name: str) -> int:
    level = logging.getLevelName(name.upper())
    if isinstance(level, int):
        return level
    typer.echo(f"WARNING: ignoring unknown {LOG_ENV_VAR} level {name!r}, using INFO", err=True)
    return logging.INFO


def _configure_logging(verbose: int) -> None:
    """Route ``gitlab_provisioner`` logs to stderr when asked to.

    ``GITLAB_PROVISIONER_LOG`` takes precedence over ``-v`` / ``-vv``. With
    neither, logging is left unconfigured.
    """
    env_level = os.environ.get(LOG_ENV_VAR)
    if env_level:
        level = _level_from_env(env_level)
    elif verbose:
        level = _LEVELS_BY_VERBOSITY[min(verbose, 2)]
    else:
        return
    # Third-party loggers stay at WARNING.
    logging.basicConfig(
        level=logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
        force=True,
    )
    logging.getLogger("gitlab_provisioner").setLevel(level)


def _print_version(value: bool) -> None:
    if value:
        typer.echo(f"gitlab-provisioner {__version__}")
        raise typer.Exit


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=_print_version,
        is_eager=True,
        help="Print the version and exit.",
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Log progress to stderr (-v info, -vv debug).",
    ),
) -> None:
    """Manage GitLab project CI/CD variables from a YAML file."""
    _ = version
    _configure_logging(verbose)


# Commands import ``app`` from this module.
from gitlab_provisioner.cli import commands as _commands  # noqa: E402, F401
