"""Common base for declared resources."""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field, computed_field

from gitlab_provisioner.resources.markers import ResourceRef, collect_ref_specs


class Resource(BaseModel):
    """A declared piece of GitLab configuration.

    Subclasses set ``resource_type`` and hold desired state only. Reading and
    writing GitLab is left to the engine's handlers.
    """

    model_config = ConfigDict(extra="forbid")

    resource_type: ClassVar[str]

    # Becomes the second half of the address, so it must be a bare identifier.
    name: str = Field(pattern=r"^[a-zA-Z0-9_]+$")
    description: str = ""

    @computed_field
    @property
    def address(self) -> str:
        """``<resource_type>.<name>``, e.g. ``gitlab_project_variable.db_url``."""
        return f"{self.resource_type}.{self.name}"

    def references(self) -> list[ResourceRef]:
        """Resources this one points at through ``Ref`` fields."""
        return collect_ref_specs(self)
