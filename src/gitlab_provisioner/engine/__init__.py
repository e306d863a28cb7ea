"""Plan and apply engine for GitLab resources."""

from gitlab_provisioner.engine.engine import ProgressCallback, VariableEngine
from gitlab_provisioner.engine.errors import (
    ApplyCanceled,
    ApplyError,
    DuplicateAddressError,
    EngineError,
    ValidationError,
)
from gitlab_provisioner.engine.handlers import EngineContext, ResourceHandler
from gitlab_provisioner.engine.types import Action, ApplyResult, Plan, PlanMetadata, ResourceChange
from gitlab_provisioner.engine.variable_handler import VariableHandler

__all__ = [
    "Action",
    "ApplyCanceled",
    "ApplyError",
    "ApplyResult",
    "DuplicateAddressError",
    "EngineContext",
    "EngineError",
    "Plan",
    "PlanMetadata",
    "ProgressCallback",
    "ResourceChange",
    "ResourceHandler",
    "ValidationError",
    "VariableEngine",
    "VariableHandler",
]
