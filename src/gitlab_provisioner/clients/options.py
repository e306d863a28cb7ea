"""Request option models for the GitLab project variables API.

Unset fields are omitted from the rendered payloads so GitLab applies its
own defaults (or keeps the current value on update).
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from gitlab_provisioner.resources.variable import (
    VariableType,  # noqa: TC001 — Pydantic needs this at runtime
)


class VariableFilter(BaseModel):
    """Narrows a request to the variable with the given environment scope."""

    environment_scope: str

    def to_query(self) -> dict[str, str]:
        """Render as GitLab's ``filter[...]`` query parameters."""
        return {"filter[environment_scope]": self.environment_scope}


class CreateVariableOptions(BaseModel):
    key: str
    value: str | None = None
    variable_type: VariableType | None = None
    protected: bool | None = None
    masked: bool | None = None
    environment_scope: str | None = None
    raw: bool | None = None

    def to_request(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class UpdateVariableOptions(BaseModel):
    """Update payload. The variable key is the request target, not part of the body."""

    value: str | None = None
    variable_type: VariableType | None = None
    protected: bool | None = None
    masked: bool | None = None
    environment_scope: str | None = None
    raw: bool | None = None
    filter: VariableFilter | None = None

    def to_request(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class GetVariableOptions(BaseModel):
    filter: VariableFilter | None = None

    def to_query(self) -> dict[str, str]:
        return self.filter.to_query() if self.filter is not None else {}


class RemoveVariableOptions(BaseModel):
    filter: VariableFilter | None = None

    def to_query(self) -> dict[str, str]:
        return self.filter.to_query() if self.filter is not None else {}
