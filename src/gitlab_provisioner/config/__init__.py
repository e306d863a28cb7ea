"""YAML configuration loading and convenience plan/apply API."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import SecretStr

from gitlab_provisioner.config.loader import ConfigError, load_config
from gitlab_provisioner.config.schema import Config, ProjectEntry, ProviderConfig
from gitlab_provisioner.core.provider import GitLabProvider, TokenAuth
from gitlab_provisioner.engine.engine import ProgressCallback, VariableEngine

if TYPE_CHECKING:
    from pathlib import Path

    from gitlab_provisioner.engine.types import ApplyResult, Plan

__all__ = [
    "Config",
    "ConfigError",
    "ProjectEntry",
    "ProviderConfig",
    "apply",
    "load",
    "load_config",
    "plan",
]


def load(path: Path | str) -> Config:
    """Load a YAML configuration file."""
    return load_config(path)


def _engine_from_config(config: Config) -> VariableEngine:
    """Build a ``VariableEngine`` from a ``Config`` instance."""
    if not config.provider.host:
        raise ConfigError("provider.host is required (set in YAML or GITLAB_HOST env var)")
    if not config.provider.token:
        raise ConfigError("provider.token is required (set GITLAB_TOKEN env var)")
    auth = TokenAuth(private_token=SecretStr(config.provider.token))
    provider = GitLabProvider(
        host=config.provider.host, auth=auth, verify_ssl=config.provider.verify_ssl
    )
    return VariableEngine(provider=provider)


def plan(config: Config, *, destroy: bool = False) -> Plan:
    """Plan changes for the given configuration."""
    engine = _engine_from_config(config)
    return engine.plan(config.variables, destroy=destroy)


def apply(
    plan_obj: Plan, config: Config, *, progress: ProgressCallback | None = None
) -> ApplyResult:
    """Apply a previously computed plan."""
    engine = _engine_from_config(config)
    return engine.apply(plan_obj, progress=progress)
