"""GitLab resource definitions."""

from gitlab_provisioner.resources.base import Resource
from gitlab_provisioner.resources.variable import (
    PROJECT_RESOURCE_TYPE,
    Reference,
    RemoteVariable,
    SecretRef,
    Selector,
    VariableParameters,
    VariableResource,
    VariableType,
)

__all__ = [
    "PROJECT_RESOURCE_TYPE",
    "Reference",
    "RemoteVariable",
    "Resource",
    "SecretRef",
    "Selector",
    "VariableParameters",
    "VariableResource",
    "VariableType",
]
