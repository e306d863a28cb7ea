"""Tests for the YAML configuration loader."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from gitlab_provisioner.config.loader import (
    ConfigError,
    _validate_unique_names,
    _validate_unique_variables,
    load_config,
)
from gitlab_provisioner.resources.variable import VariableParameters, VariableResource, VariableType

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from gitlab_provisioner.config.schema import Config

_FULL_YAML = """\
provider:
  host: https://gitlab.example.com

projects:
  - name: backend
    id: 42
    labels:
      team: core
  - name: frontend
    id: 43
    labels:
      team: web

variables:
  - name: database_url
    for_provider:
      key: DATABASE_URL
      value: postgres://db
      masked: true
      project_id_ref:
        name: backend

  - name: kubeconfig
    description: Cluster access for deploy jobs
    for_provider:
      key: KUBECONFIG
      value: "apiVersion: v1"
      variable_type: file
      environment_scope: production
      project_id_selector:
        match_labels:
          team: web

  - name: explicit
    for_provider:
      key: FEATURE_FLAG
      project_id: 7
"""


class TestLoadConfig:
    def test_full_config(self, make_config: Callable[..., Config]) -> None:
        cfg = make_config(_FULL_YAML)

        assert cfg.provider.host == "https://gitlab.example.com"
        assert [p.name for p in cfg.projects] == ["backend", "frontend"]
        assert len(cfg.variables) == 3

        db, kube, explicit = cfg.variables
        assert db.for_provider.project_id == 42
        assert db.for_provider.masked is True
        assert db.for_provider.variable_type is None
        assert kube.for_provider.project_id == 43
        assert kube.for_provider.variable_type == VariableType.FILE
        assert kube.description == "Cluster access for deploy jobs"
        assert explicit.for_provider.project_id == 7
        assert explicit.for_provider.value is None

    def test_empty_sections(self, make_config: Callable[..., Config]) -> None:
        cfg = make_config("provider:\n  host: https://gitlab.example.com\nvariables:\n")
        assert cfg.variables == []
        assert cfg.projects == []

    def test_non_mapping_top_level(self, make_config: Callable[..., Config]) -> None:
        with pytest.raises(ConfigError, match="expected a mapping"):
            make_config("- just\n- a list\n")

    def test_invalid_yaml(self, make_config: Callable[..., Config]) -> None:
        with pytest.raises(ConfigError, match="Failed to read"):
            make_config("provider: [unclosed\n")

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Failed to read"):
            load_config(tmp_path / "missing.yaml")

    def test_unknown_field_rejected(self, make_config: Callable[..., Config]) -> None:
        yaml_str = """\
variables:
  - name: v
    for_provider:
      key: K
      project_id: 1
      colour: blue
"""
        with pytest.raises(ConfigError, match="colour"):
            make_config(yaml_str)

    def test_invalid_resource_name(self, make_config: Callable[..., Config]) -> None:
        yaml_str = """\
variables:
  - name: not-valid
    for_provider:
      key: K
      project_id: 1
"""
        with pytest.raises(ConfigError, match="name"):
            make_config(yaml_str)

    def test_unresolved_reference(self, make_config: Callable[..., Config]) -> None:
        yaml_str = """\
variables:
  - name: v
    for_provider:
      key: K
      project_id_ref:
        name: ghost
"""
        with pytest.raises(ConfigError, match="unknown project 'ghost'"):
            make_config(yaml_str)

    def test_missing_project(self, make_config: Callable[..., Config]) -> None:
        yaml_str = """\
variables:
  - name: v
    for_provider:
      key: K
"""
        with pytest.raises(ConfigError, match="is required"):
            make_config(yaml_str)

    def test_duplicate_names(self, make_config: Callable[..., Config]) -> None:
        yaml_str = """\
variables:
  - name: v
    for_provider: {key: A, project_id: 1}
  - name: v
    for_provider: {key: B, project_id: 1}
"""
        with pytest.raises(ConfigError, match="Duplicate variable name 'v'"):
            make_config(yaml_str)

    def test_duplicate_key_in_same_scope(self, make_config: Callable[..., Config]) -> None:
        yaml_str = """\
projects:
  - name: backend
    id: 1
variables:
  - name: a
    for_provider: {key: TOKEN, project_id: 1}
  - name: b
    for_provider:
      key: TOKEN
      environment_scope: "*"
      project_id_ref: {name: backend}
"""
        with pytest.raises(ConfigError, match="Duplicate variable 'TOKEN'"):
            make_config(yaml_str)

    def test_same_key_in_different_scopes(self, make_config: Callable[..., Config]) -> None:
        yaml_str = """\
variables:
  - name: a
    for_provider: {key: TOKEN, project_id: 1, environment_scope: staging}
  - name: b
    for_provider: {key: TOKEN, project_id: 1, environment_scope: production}
  - name: c
    for_provider: {key: TOKEN, project_id: 2, environment_scope: production}
"""
        cfg = make_config(yaml_str)
        assert len(cfg.variables) == 3


class TestProviderResolution:
    _YAML = "variables: []\n"

    def test_env_vars(
        self, make_config: Callable[..., Config], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("GITLAB_HOST", "https://env.example.com")
        monkeypatch.setenv("GITLAB_TOKEN", "glpat-env")
        monkeypatch.setenv("GITLAB_VERIFY_SSL", "false")

        cfg = make_config(self._YAML)

        assert cfg.provider.host == "https://env.example.com"
        assert cfg.provider.token == "glpat-env"
        assert cfg.provider.verify_ssl is False

    def test_dotenv_file(self, make_config: Callable[..., Config]) -> None:
        cfg = make_config(
            self._YAML, dotenv="GITLAB_HOST=https://dotenv.example.com\nGITLAB_TOKEN=glpat-file\n"
        )
        assert cfg.provider.host == "https://dotenv.example.com"
        assert cfg.provider.token == "glpat-file"

    def test_yaml_beats_env_beats_dotenv(
        self, make_config: Callable[..., Config], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("GITLAB_HOST", "https://env.example.com")
        monkeypatch.setenv("GITLAB_TOKEN", "glpat-env")

        cfg = make_config(
            "provider:\n  host: https://yaml.example.com\n",
            dotenv="GITLAB_HOST=https://dotenv.example.com\nGITLAB_TOKEN=glpat-file\n",
        )

        assert cfg.provider.host == "https://yaml.example.com"
        assert cfg.provider.token == "glpat-env"

    def test_verify_ssl_defaults_true(self, make_config: Callable[..., Config]) -> None:
        assert make_config(self._YAML).provider.verify_ssl is True

    def test_invalid_bool(
        self, make_config: Callable[..., Config], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("GITLAB_VERIFY_SSL", "maybe")
        with pytest.raises(ConfigError, match="Invalid boolean for GITLAB_VERIFY_SSL"):
            make_config(self._YAML)


class TestSecretValues:
    _YAML = """\
variables:
  - name: db_url
    for_provider:
      key: DATABASE_URL
      project_id: 42
      value_secret_ref:
        env: APP_DB_URL
"""

    @pytest.fixture(autouse=True)
    def _unset_secret(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("APP_DB_URL", raising=False)

    def test_value_from_env(
        self, make_config: Callable[..., Config], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("APP_DB_URL", "postgres://env/app")

        (db,) = make_config(self._YAML).variables

        assert db.for_provider.value == "postgres://env/app"
        assert db.for_provider.value_secret_ref is not None
        assert db.for_provider.value_secret_ref.env == "APP_DB_URL"

    def test_value_from_dotenv(self, make_config: Callable[..., Config]) -> None:
        (db,) = make_config(self._YAML, dotenv="APP_DB_URL=postgres://file/app\n").variables
        assert db.for_provider.value == "postgres://file/app"

    def test_env_beats_dotenv(
        self, make_config: Callable[..., Config], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("APP_DB_URL", "postgres://env/app")
        (db,) = make_config(self._YAML, dotenv="APP_DB_URL=postgres://file/app\n").variables
        assert db.for_provider.value == "postgres://env/app"

    def test_empty_secret_is_a_value(
        self, make_config: Callable[..., Config], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("APP_DB_URL", "")
        (db,) = make_config(self._YAML).variables
        assert db.for_provider.value == ""

    def test_missing_secret(self, make_config: Callable[..., Config]) -> None:
        with pytest.raises(ConfigError, match="unset environment variable 'APP_DB_URL'"):
            make_config(self._YAML)

    def test_value_and_secret_ref_conflict(
        self, make_config: Callable[..., Config], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("APP_DB_URL", "postgres://env/app")
        yaml_str = self._YAML.replace("project_id: 42\n", "project_id: 42\n      value: x\n")
        with pytest.raises(ConfigError, match="either value or value_secret_ref"):
            make_config(yaml_str)

    def test_empty_env_name_rejected(self, make_config: Callable[..., Config]) -> None:
        with pytest.raises(ConfigError, match="env"):
            make_config(self._YAML.replace("env: APP_DB_URL", "env: ''"))


class TestValidators:
    def _var(self, name: str, key: str, scope: str | None = None) -> VariableResource:
        return VariableResource(
            name=name,
            for_provider=VariableParameters(key=key, project_id=1, environment_scope=scope),
        )

    def test_unique_names_ok(self) -> None:
        assert _validate_unique_names([self._var("a", "A"), self._var("b", "B")]) == []

    def test_unset_scope_counts_as_wildcard(self) -> None:
        errors = _validate_unique_variables([self._var("a", "K"), self._var("b", "K", "*")])
        assert len(errors) == 1
        assert "gitlab_project_variable.a" in errors[0]
        assert "gitlab_project_variable.b" in errors[0]
