"""Plan/apply engine."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Literal

from gitlab_provisioner import __version__
from gitlab_provisioner.clients.variables import (
    diff_variable,
    generate_create_variable_options,
    is_variable_up_to_date,
    late_initialize_variable,
    variable_to_parameters,
)
from gitlab_provisioner.engine.errors import (
    ApplyCanceled,
    ApplyError,
    DuplicateAddressError,
    ValidationError,
)
from gitlab_provisioner.engine.handlers import EngineContext
from gitlab_provisioner.engine.types import Action, ApplyResult, Plan, PlanMetadata, ResourceChange
from gitlab_provisioner.engine.variable_handler import VariableHandler
from gitlab_provisioner.resources.variable import VariableResource

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ResourceChange, Literal["start", "done"]], None]

if TYPE_CHECKING:
    from collections.abc import Sequence

    from gitlab_provisioner.core import GitLabProvider
    from gitlab_provisioner.resources.variable import RemoteVariable


def _dump_resource(resource: VariableResource) -> dict[str, Any]:
    return resource.model_dump(mode="json", exclude={"address"})


def _dump_remote(observed: RemoteVariable) -> dict[str, Any]:
    return variable_to_parameters(observed).model_dump(mode="json", exclude_none=True)


class VariableEngine:
    """Terraform-like plan/apply engine for GitLab project variables.

    There is no state file: every plan reads the live variables from GitLab.
    """

    def __init__(
        self, *, provider: GitLabProvider, handler: VariableHandler | None = None
    ) -> None:
        self._provider = provider
        self._handler = handler or VariableHandler()

    @property
    def provider(self) -> GitLabProvider:
        return self._provider

    def _ctx(self) -> EngineContext:
        return EngineContext(provider=self._provider)

    def _classify_change(self, resource: VariableResource) -> ResourceChange:
        """Classify a single resource as CREATE, UPDATE, or NOOP."""
        addr = resource.address
        observed = self._handler.read(self._ctx(), resource)
        if observed is None:
            logger.debug("Classified %s as create", addr)
            return ResourceChange(
                address=addr,
                resource_type=resource.resource_type,
                action=Action.CREATE,
                desired=_dump_resource(resource),
                planned=generate_create_variable_options(resource.for_provider).to_request(),
            )

        # Late initialization mutates the parameters; keep the caller's object intact.
        initialized = resource.model_copy(deep=True)
        late_initialize_variable(initialized.for_provider, observed)
        if is_variable_up_to_date(initialized.for_provider, observed):
            action, diff = Action.NOOP, {}
        else:
            action, diff = Action.UPDATE, diff_variable(initialized.for_provider, observed)
        logger.debug("Classified %s as %s", addr, action.value)
        return ResourceChange(
            address=addr,
            resource_type=resource.resource_type,
            action=action,
            desired=_dump_resource(initialized),
            prior=_dump_remote(observed),
            diff=diff or None,
        )

    def _plan_delete(self, resource: VariableResource) -> ResourceChange | None:
        observed = self._handler.read(self._ctx(), resource)
        if observed is None:
            logger.debug("Skipping %s: not present in GitLab", resource.address)
            return None
        return ResourceChange(
            address=resource.address,
            resource_type=resource.resource_type,
            action=Action.DELETE,
            desired=_dump_resource(resource),
            prior=_dump_remote(observed),
        )

    def plan(self, resources: Sequence[VariableResource], *, destroy: bool = False) -> Plan:
        logger.info("Planning %d resources (destroy=%s)", len(resources), destroy)

        desired_by_addr: dict[str, VariableResource] = {}
        for r in resources:
            if r.address in desired_by_addr:
                raise DuplicateAddressError(r.address)
            desired_by_addr[r.address] = r

        ctx = self._ctx()
        errors: list[str] = []
        for r in desired_by_addr.values():
            errors.extend(self._handler.validate(ctx, r))
        if errors:
            raise ValidationError(errors)

        changes: list[ResourceChange] = []
        for addr in sorted(desired_by_addr):
            resource = desired_by_addr[addr]
            if destroy:
                change = self._plan_delete(resource)
                if change is not None:
                    changes.append(change)
            else:
                changes.append(self._classify_change(resource))

        metadata = PlanMetadata(
            host=self._provider.host,
            created_at=datetime.now(UTC),
            destroy=destroy,
            engine_version=__version__,
        )
        return Plan(metadata=metadata, changes=changes)

    def _run(self, change: ResourceChange) -> bool:
        """Execute one change. Return False if nothing happened in GitLab."""
        if change.desired is None:
            raise ValueError(f"Missing desired config for {change.action.value}: {change.address}")
        resource = VariableResource.model_validate(change.desired)
        ctx = self._ctx()
        match change.action:
            case Action.CREATE:
                self._handler.create(ctx, resource)
            case Action.UPDATE:
                self._handler.update(ctx, resource)
            case Action.DELETE:
                return self._handler.delete(ctx, resource)
            case _:
                raise ValueError(f"Unknown action: {change.action}")
        return True

    def apply(self, plan: Plan, *, progress: ProgressCallback | None = None) -> ApplyResult:
        actionable = plan.actionable()
        logger.info("Applying %d operations", len(actionable))

        applied: list[ResourceChange] = []
        for change in actionable:
            logger.debug("Applying %s: %s", change.address, change.action.value)
            if progress:
                progress(change, "start")
            try:
                did_change = self._run(change)
            except KeyboardInterrupt as e:  # pragma: no cover
                raise ApplyCanceled("Apply canceled") from e
            except Exception as e:
                raise ApplyError(applied=applied, address=change.address, message=str(e)) from e
            if not did_change:
                continue
            if progress:
                progress(change, "done")
            applied.append(change)

        return ApplyResult(applied=applied)
