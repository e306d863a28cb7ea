"""Variable handler implementing CRUD via the GitLab project variables API."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from gitlab.exceptions import GitlabError

from gitlab_provisioner.clients.variables import (
    generate_create_variable_options,
    generate_get_variable_options,
    generate_remove_variable_options,
    generate_update_variable_options,
    is_variable_not_found,
)
from gitlab_provisioner.engine.handlers import ResourceHandler

if TYPE_CHECKING:
    from gitlab_provisioner.engine.handlers import EngineContext
    from gitlab_provisioner.resources.variable import RemoteVariable, VariableResource

logger = logging.getLogger(__name__)


def _project_id(desired: VariableResource) -> int:
    pid = desired.for_provider.project_id
    if pid is None:
        raise ValueError(f"{desired.address}: project_id is not resolved")
    return pid


class VariableHandler(ResourceHandler["VariableResource"]):
    """CRUD handler for GitLab project variables."""

    def validate(self, ctx: EngineContext, desired: VariableResource) -> list[str]:
        _ = ctx
        if desired.for_provider.project_id is None:
            return [
                f"Variable '{desired.name}' has no project: set project_id, "
                f"project_id_ref or project_id_selector"
            ]
        return []

    def read(self, ctx: EngineContext, desired: VariableResource) -> RemoteVariable | None:
        params = desired.for_provider
        try:
            return ctx.provider.variables.get_variable(
                _project_id(desired), params.key, generate_get_variable_options(params)
            )
        except GitlabError as exc:
            if is_variable_not_found(exc):
                logger.debug("Variable %s not found in project %s", params.key, params.project_id)
                return None
            raise

    def create(self, ctx: EngineContext, desired: VariableResource) -> RemoteVariable:
        params = desired.for_provider
        return ctx.provider.variables.create_variable(
            _project_id(desired), generate_create_variable_options(params)
        )

    def update(self, ctx: EngineContext, desired: VariableResource) -> RemoteVariable:
        params = desired.for_provider
        return ctx.provider.variables.update_variable(
            _project_id(desired), params.key, generate_update_variable_options(params)
        )

    def delete(self, ctx: EngineContext, desired: VariableResource) -> bool:
        params = desired.for_provider
        try:
            ctx.provider.variables.remove_variable(
                _project_id(desired), params.key, generate_remove_variable_options(params)
            )
        except GitlabError as exc:
            if is_variable_not_found(exc):
                logger.info(
                    "Variable %s already removed from project %s", params.key, params.project_id
                )
                return False
            raise
        return True
