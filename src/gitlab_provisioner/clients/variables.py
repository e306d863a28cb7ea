"""GitLab project variable client and reconciliation helpers.

The helpers translate between the declarative ``VariableParameters`` and the
GitLab API: late initialization of unset fields, request options for each
remote operation, and the up-to-date check that decides whether an update
call is needed.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol

from gitlab_provisioner.clients.options import (
    CreateVariableOptions,
    GetVariableOptions,
    RemoveVariableOptions,
    UpdateVariableOptions,
    VariableFilter,
)
from gitlab_provisioner.resources.markers import collect_ignored_fields
from gitlab_provisioner.resources.variable import (
    Reference,
    RemoteVariable,
    SecretRef,
    Selector,
    VariableParameters,
)

if TYPE_CHECKING:
    import gitlab
    from gitlab.v4.objects import ProjectVariableManager

logger = logging.getLogger(__name__)

ERR_VARIABLE_NOT_FOUND = "404 Variable Not Found"

# Pointers resolved at load time, never part of a variable's value.
IGNORED_VALUE_TYPES: tuple[type, ...] = (Reference, Selector, SecretRef)

# Fields the server fills in when they are not sent.
LATE_INIT_FIELDS: tuple[str, ...] = (
    "variable_type",
    "protected",
    "masked",
    "environment_scope",
    "raw",
)


class VariableClient(Protocol):
    """GitLab project variable operations."""

    def list_variables(self, pid: int | str) -> list[RemoteVariable]: ...

    def get_variable(
        self, pid: int | str, key: str, opt: GetVariableOptions | None = None
    ) -> RemoteVariable: ...

    def create_variable(self, pid: int | str, opt: CreateVariableOptions) -> RemoteVariable: ...

    def update_variable(
        self, pid: int | str, key: str, opt: UpdateVariableOptions
    ) -> RemoteVariable: ...

    def remove_variable(
        self, pid: int | str, key: str, opt: RemoveVariableOptions | None = None
    ) -> None: ...


class GitLabVariableClient:
    """``VariableClient`` backed by python-gitlab's project variables manager.

    Errors raised by python-gitlab propagate unchanged.
    """

    def __init__(self, gl: gitlab.Gitlab) -> None:
        self._gl = gl

    def _manager(self, pid: int | str) -> ProjectVariableManager:
        return self._gl.projects.get(pid, lazy=True).variables

    def list_variables(self, pid: int | str) -> list[RemoteVariable]:
        return [
            RemoteVariable.model_validate(v.attributes)
            for v in self._manager(pid).list(get_all=True)
        ]

    def get_variable(
        self, pid: int | str, key: str, opt: GetVariableOptions | None = None
    ) -> RemoteVariable:
        query = opt.to_query() if opt is not None else {}
        obj = self._manager(pid).get(key, query_data=query)
        return RemoteVariable.model_validate(obj.attributes)

    def create_variable(self, pid: int | str, opt: CreateVariableOptions) -> RemoteVariable:
        obj = self._manager(pid).create(opt.to_request())
        return RemoteVariable.model_validate(obj.attributes)

    def update_variable(
        self, pid: int | str, key: str, opt: UpdateVariableOptions
    ) -> RemoteVariable:
        server_data = self._manager(pid).update(key, opt.to_request())
        return RemoteVariable.model_validate(server_data)

    def remove_variable(
        self, pid: int | str, key: str, opt: RemoveVariableOptions | None = None
    ) -> None:
        query = opt.to_query() if opt is not None else {}
        self._manager(pid).delete(key, query_data=query)


def is_variable_not_found(err: BaseException | None) -> bool:
    """Return True if *err* is GitLab's "variable not found" error.

    python-gitlab surfaces it as a generic ``GitlabGetError`` carrying the
    response message, so the message text is the only discriminant.
    """
    if err is None:
        return False
    return ERR_VARIABLE_NOT_FOUND in str(err)


def late_initialize_variable(
    desired: VariableParameters, observed: RemoteVariable | None
) -> None:
    """Fill the unset fields of *desired* with the values seen on GitLab.

    ``value`` is never copied back: masked and hidden variables do not
    return their plaintext value.
    """
    if observed is None:
        return

    for name in LATE_INIT_FIELDS:
        if getattr(desired, name) is None:
            setattr(desired, name, getattr(observed, name))


def variable_to_parameters(observed: RemoteVariable) -> VariableParameters:
    """Convert a GitLab variable back into the ``VariableParameters`` format."""
    return VariableParameters(
        key=observed.key,
        value=observed.value,
        variable_type=observed.variable_type,
        protected=observed.protected,
        masked=observed.masked,
        environment_scope=observed.environment_scope,
        raw=observed.raw,
    )


def generate_create_variable_options(p: VariableParameters) -> CreateVariableOptions:
    return CreateVariableOptions(
        key=p.key,
        value=p.value,
        variable_type=p.variable_type,
        protected=p.protected,
        masked=p.masked,
        environment_scope=p.environment_scope,
        raw=p.raw,
    )


def generate_update_variable_options(p: VariableParameters) -> UpdateVariableOptions:
    return UpdateVariableOptions(
        value=p.value,
        variable_type=p.variable_type,
        protected=p.protected,
        masked=p.masked,
        environment_scope=p.environment_scope,
        raw=p.raw,
        filter=generate_variable_filter(p),
    )


def generate_get_variable_options(p: VariableParameters) -> GetVariableOptions | None:
    if p.environment_scope is None:
        return None
    return GetVariableOptions(filter=generate_variable_filter(p))


def generate_remove_variable_options(p: VariableParameters) -> RemoveVariableOptions | None:
    if p.environment_scope is None:
        return None
    return RemoveVariableOptions(filter=generate_variable_filter(p))


def generate_variable_filter(p: VariableParameters) -> VariableFilter | None:
    """Filter on the environment scope, only when the scope is declared."""
    if p.environment_scope is None:
        return None
    return VariableFilter(environment_scope=p.environment_scope)


def _is_ignored_value(value: Any) -> bool:
    if isinstance(value, list):
        return bool(value) and all(isinstance(v, IGNORED_VALUE_TYPES) for v in value)
    return isinstance(value, IGNORED_VALUE_TYPES)


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, (str, bool, int, list, dict, tuple)) and not value


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def diff_variable(
    desired: VariableParameters | None, observed: RemoteVariable | None
) -> dict[str, dict[str, Any]]:
    """Per-field differences between *desired* and *observed*.

    Returns ``{field: {"from": observed_value, "to": desired_value}}``.
    Fields marked ``Compare("ignore")`` and reference/selector values are
    skipped, desired fields left unset are not managed, and empty values
    (``None``, ``""``, ``False``, empty collections) compare equal.
    """
    if desired is None:
        return {}
    projected = variable_to_parameters(observed) if observed is not None else None
    ignored = collect_ignored_fields(VariableParameters)

    diff: dict[str, dict[str, Any]] = {}
    for name in VariableParameters.model_fields:
        if name in ignored:
            continue
        want = getattr(desired, name)
        have = getattr(projected, name) if projected is not None else None
        if _is_ignored_value(want) or _is_ignored_value(have):
            continue
        if want is None:
            continue
        if _is_empty(want) and _is_empty(have):
            continue
        if want != have:
            diff[name] = {"from": _plain(have), "to": _plain(want)}
    return diff


def is_variable_up_to_date(
    desired: VariableParameters | None, observed: RemoteVariable | None
) -> bool:
    """Check whether any modifiable field of the variable differs on GitLab."""
    if desired is None:
        return True
    if observed is None:
        return False
    diff = diff_variable(desired, observed)
    if diff:
        logger.debug("Variable %s differs in: %s", desired.key, ", ".join(sorted(diff)))
    return not diff
