"""Turn exceptions into stderr messages and an exit code."""

from __future__ import annotations

import typer
from gitlab.exceptions import GitlabAuthenticationError, GitlabError

from gitlab_provisioner.config.loader import ConfigError
from gitlab_provisioner.engine.errors import ApplyCanceled, ApplyError, ValidationError


def _messages(exc: Exception) -> list[str]:
    from gitlab_provisioner.cli.formatting import count_phrases

    match exc:
        case ConfigError():
            return [f"Configuration error: {exc}"]
        case ValidationError():
            return ["Validation failed:", *(f"  - {e}" for e in exc.errors)]
        case ApplyError():
            lines = [str(exc)]
            phrases = count_phrases(exc.result.summary(), applied=True)
            done = [p for p in phrases if not p.startswith("0 ")]
            if done:
                lines.append(f"  Partial result: {', '.join(done)}.")
            return lines
        case ApplyCanceled():
            return ["Apply canceled."]
        case GitlabAuthenticationError():
            return [f"GitLab authentication failed: {exc}"]
        case GitlabError():
            return [f"GitLab API error: {exc}"]
        case _:
            return [f"Error: {exc}"]


def handle_error(exc: Exception, *, color: bool = True) -> int:
    """Print *exc* to stderr without a traceback and return the exit code (always 1)."""
    fg = typer.colors.RED if color else None
    for line in _messages(exc):
        typer.echo(typer.style(line, fg=fg), err=True)
    return 1
