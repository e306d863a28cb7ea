"""Configuration models for YAML-based provisioning."""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from gitlab_provisioner.resources.variable import (
    VariableResource,  # noqa: TC001 — Pydantic needs this at runtime
)


class ProviderConfig(BaseSettings):
    """GitLab provider connection settings.

    Fields can be set via YAML (constructor kwargs) or environment variables
    with the ``GITLAB_`` prefix.  Constructor kwargs take precedence.

    ``token`` is typically provided via the ``GITLAB_TOKEN`` environment
    variable rather than YAML to avoid committing secrets to version control.
    """

    model_config = SettingsConfigDict(env_prefix="GITLAB_")

    host: str | None = None
    token: str | None = None
    verify_ssl: bool = True


class ProjectEntry(BaseModel):
    """A GitLab project that variables can reference by name or labels."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1)
    id: int
    labels: dict[str, str] = Field(default_factory=dict)


def _none_to_list(v: Any) -> Any:
    return v if v is not None else []


class Config(BaseModel):
    """Provisioning configuration, validated directly from the YAML structure."""

    provider: ProviderConfig
    projects: Annotated[list[ProjectEntry], BeforeValidator(_none_to_list)] = []
    variables: Annotated[list[VariableResource], BeforeValidator(_none_to_list)] = []
