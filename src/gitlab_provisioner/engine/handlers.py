"""Engine-facing handler interfaces."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from gitlab_provisioner.resources.base import Resource

if TYPE_CHECKING:
    from gitlab_provisioner.core import GitLabProvider

R = TypeVar("R", bound=Resource)


@dataclass(frozen=True)
class EngineContext:
    """Context passed to handlers."""

    provider: GitLabProvider


class ResourceHandler(Generic[R]):
    """Base class for resource handlers.

    Handlers are responsible for translating resources into GitLab API calls.
    Subclass and override the CRUD methods. Validation is optional.
    """

    def validate(self, ctx: EngineContext, desired: R) -> list[str]:
        """Single-resource validation.

        Return list of error messages (empty = valid).
        """
        _ = ctx, desired
        return []

    def read(self, ctx: EngineContext, desired: R) -> Any | None:
        """Read the live object from GitLab. Return None if it does not exist."""
        raise NotImplementedError

    def create(self, ctx: EngineContext, desired: R) -> Any:
        """Create the resource in GitLab. Return the created object."""
        raise NotImplementedError

    def update(self, ctx: EngineContext, desired: R) -> Any:
        """Update the resource in GitLab. Return the updated object."""
        raise NotImplementedError

    def delete(self, ctx: EngineContext, desired: R) -> bool:
        """Delete the resource from GitLab. Return False if it was already gone."""
        raise NotImplementedError
