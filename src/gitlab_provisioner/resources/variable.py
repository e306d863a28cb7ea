"""Project variable resource model."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, ClassVar

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from gitlab_provisioner.resources.base import Resource
from gitlab_provisioner.resources.markers import Compare, Ref


# Resource type of the projects declared under ``projects:``.
PROJECT_RESOURCE_TYPE = "gitlab_project"


class VariableType(str, Enum):
    """Kind of a CI/CD variable."""

    ENV_VAR = "env_var"
    FILE = "file"


class Reference(BaseModel):
    """Reference to a declared project by name."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1)


class SecretRef(BaseModel):
    """Takes a variable's value from an environment variable (or the ``.env`` file)."""

    model_config = ConfigDict(extra="forbid")

    env: str = Field(min_length=1)


class Selector(BaseModel):
    """Selects a declared project by its labels."""

    model_config = ConfigDict(extra="forbid")

    match_labels: dict[str, str] = Field(default_factory=dict)


class VariableParameters(BaseModel):
    """Desired state of a GitLab project variable.

    Every field but ``key`` is optional: ``None`` means "not managed", and
    late initialization fills those fields from the observed variable.
    ``project_id`` can be given directly or resolved from
    ``project_id_ref`` / ``project_id_selector`` against the declared
    projects.

    ``value_secret_ref`` keeps the value out of the YAML file. The loader
    resolves it into ``value``.
    """

    model_config = ConfigDict(extra="forbid")

    key: str = Field(min_length=1)
    value: str | None = None
    value_secret_ref: SecretRef | None = None
    variable_type: VariableType | None = None
    protected: bool | None = None
    masked: bool | None = None
    environment_scope: str | None = None
    raw: bool | None = None

    project_id: Annotated[int | None, Compare("ignore")] = None
    project_id_ref: Annotated[Reference | None, Ref(PROJECT_RESOURCE_TYPE)] = None
    project_id_selector: Selector | None = None


def _none_to_empty(v: Any) -> Any:
    return "" if v is None else v


class RemoteVariable(BaseModel):
    """A project variable as returned by the GitLab API.

    Extra attributes (``description``, ``hidden``, ...) are dropped. Hidden
    variables come back with a ``null`` value, which is read as ``""``.
    """

    model_config = ConfigDict(extra="ignore")

    key: str
    value: Annotated[str, BeforeValidator(_none_to_empty)] = ""
    variable_type: VariableType = VariableType.ENV_VAR
    protected: bool = False
    masked: bool = False
    environment_scope: str = "*"
    raw: bool = False


class VariableResource(Resource):
    """A GitLab project variable managed by the provisioner."""

    resource_type: ClassVar[str] = "gitlab_project_variable"

    for_provider: VariableParameters
