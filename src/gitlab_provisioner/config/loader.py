"""Read ``gitlab-provisioner.yaml`` into a validated ``Config``."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING, Any

from dotenv import dotenv_values
from pydantic import ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.constructor import SafeConstructor

from gitlab_provisioner.config.references import resolve_references
from gitlab_provisioner.config.schema import Config
from gitlab_provisioner.config.secrets import resolve_secret_values

if TYPE_CHECKING:
    from collections.abc import Mapping

    from gitlab_provisioner.resources.variable import VariableResource

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """The configuration file cannot be read or is invalid."""


# provider field -> (environment variable, is boolean)
_PROVIDER_SOURCES: dict[str, tuple[str, bool]] = {
    "host": ("GITLAB_HOST", False),
    "token": ("GITLAB_TOKEN", False),
    "verify_ssl": ("GITLAB_VERIFY_SSL", True),
}

# GitLab's scope when none is given.
_DEFAULT_SCOPE = "*"


def _parse_bool(env_key: str, text: str) -> bool:
    try:
        return SafeConstructor.bool_values[text.lower()]
    except KeyError:
        raise ConfigError(f"Invalid boolean for {env_key}: {text!r}") from None


def _first_set(field: str, env_key: str, *sources: Mapping[str, Any]) -> Any:
    yaml_value, *env_sources = sources
    if yaml_value.get(field) is not None:
        return yaml_value[field]
    return next((s[env_key] for s in env_sources if s.get(env_key) is not None), None)


def _read_dotenv(config_dir: Path) -> dict[str, str | None]:
    dotenv_path = config_dir / ".env"
    return dotenv_values(dotenv_path, encoding="utf-8-sig") if dotenv_path.is_file() else {}


def _resolve_provider(
    raw_provider: dict[str, Any], from_dotenv: Mapping[str, str | None]
) -> dict[str, Any]:
    """Merge the ``provider`` section with ``GITLAB_*`` settings.

    The YAML value wins over the process environment, which wins over the
    ``.env`` file next to the configuration.
    """

    resolved: dict[str, Any] = {}
    for field, (env_key, is_bool) in _PROVIDER_SOURCES.items():
        value = _first_set(field, env_key, raw_provider, os.environ, from_dotenv)
        if value is None:
            continue
        if is_bool and isinstance(value, str):
            value = _parse_bool(env_key, value)
        resolved[field] = value
    return resolved


def _validate_unique_names(resources: list[VariableResource]) -> list[str]:
    first_seen: dict[str, int] = {}
    errors: list[str] = []
    for i, r in enumerate(resources):
        j = first_seen.setdefault(r.name, i)
        if j != i:
            errors.append(f"Duplicate variable name '{r.name}' (entries {j} and {i})")
    return errors


def _validate_unique_variables(resources: list[VariableResource]) -> list[str]:
    """GitLab identifies a variable by project, key and environment scope."""
    owners: dict[tuple[int | None, str, str], str] = {}
    errors: list[str] = []
    for r in resources:
        p = r.for_provider
        scope = p.environment_scope or _DEFAULT_SCOPE
        owner = owners.setdefault((p.project_id, p.key, scope), r.address)
        if owner != r.address:
            errors.append(
                f"Duplicate variable '{p.key}' (scope '{scope}') in project {p.project_id}: "
                f"found in both {owner} and {r.address}"
            )
    return errors


def load_config(path: Path | str) -> Config:
    """Parse, validate and resolve a configuration file.

    Every variable comes back with ``project_id`` set from its reference or
    selector.

    Raises:
        ConfigError: Unreadable YAML, schema errors, unresolvable project
            references, or two entries for the same GitLab variable.
    """
    path = Path(path)
    try:
        raw = YAML(typ="safe").load(path)
    except Exception as exc:
        raise ConfigError(f"Failed to read {path}: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigError(f"{path}: expected a mapping at the top level")

    from_dotenv = _read_dotenv(path.parent)
    raw["provider"] = _resolve_provider(raw.get("provider") or {}, from_dotenv)
    try:
        config = Config.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc

    errors = [
        *_validate_unique_names(config.variables),
        *resolve_references(config.variables, config.projects),
        *resolve_secret_values(config.variables, from_dotenv),
    ]
    # Identity checks need every project_id resolved.
    errors = errors or _validate_unique_variables(config.variables)
    if errors:
        raise ConfigError("\n".join(errors))

    logger.info("Loaded config from %s (%d variables)", path, len(config.variables))
    return config
