"""Resolve project references on variables against the declared projects."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from gitlab_provisioner.resources.variable import PROJECT_RESOURCE_TYPE

if TYPE_CHECKING:
    from collections.abc import Sequence

    from gitlab_provisioner.config.schema import ProjectEntry
    from gitlab_provisioner.resources.variable import Selector, VariableResource

logger = logging.getLogger(__name__)


class ReferenceResolutionError(Exception):
    """Raised when a variable's project cannot be resolved."""


def _select(selector: Selector, projects: Sequence[ProjectEntry]) -> ProjectEntry | None:
    wanted = selector.match_labels.items()
    return next((p for p in projects if wanted <= p.labels.items()), None)


def resolve_project_id(resource: VariableResource, projects: Sequence[ProjectEntry]) -> int:
    """Return the project ID a variable belongs to.

    An explicit ``project_id`` wins, then ``project_id_ref`` (by project
    name), then ``project_id_selector`` (first project carrying all labels).
    """
    params = resource.for_provider
    if params.project_id is not None:
        return params.project_id

    project_refs = [r for r in resource.references() if r.resource_type == PROJECT_RESOURCE_TYPE]
    if project_refs:
        by_name = {p.name: p for p in projects}
        wanted = project_refs[0].name
        if wanted not in by_name:
            raise ReferenceResolutionError(
                f"{resource.address}: project_id_ref names unknown project '{wanted}'"
            )
        return by_name[wanted].id

    if params.project_id_selector is not None:
        project = _select(params.project_id_selector, projects)
        if project is None:
            match_labels = params.project_id_selector.match_labels
            labels = ", ".join(f"{k}={v}" for k, v in match_labels.items())
            raise ReferenceResolutionError(
                f"{resource.address}: no project matches selector [{labels}]"
            )
        return project.id

    raise ReferenceResolutionError(
        f"{resource.address}: one of project_id, project_id_ref or project_id_selector is required"
    )


def resolve_references(
    resources: Sequence[VariableResource], projects: Sequence[ProjectEntry]
) -> list[str]:
    """Set ``project_id`` on every variable in place.

    Returns the resolution errors (empty = all resolved).
    """
    errors: list[str] = []
    for r in resources:
        try:
            r.for_provider.project_id = resolve_project_id(r, projects)
        except ReferenceResolutionError as exc:
            errors.append(str(exc))
            continue
        logger.debug("Resolved %s to project %d", r.address, r.for_provider.project_id)
    return errors
