"""Tests for the project variable resource models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from gitlab_provisioner.resources.markers import ResourceRef
from gitlab_provisioner.resources.variable import (
    PROJECT_RESOURCE_TYPE,
    Reference,
    RemoteVariable,
    Selector,
    VariableParameters,
    VariableResource,
    VariableType,
)


class TestVariableParameters:
    def test_defaults(self) -> None:
        p = VariableParameters(key="FOO")
        assert p.value is None
        assert p.variable_type is None
        assert p.protected is None
        assert p.masked is None
        assert p.environment_scope is None
        assert p.raw is None
        assert p.project_id is None

    def test_key_required(self) -> None:
        with pytest.raises(ValidationError, match="key"):
            VariableParameters()  # type: ignore[call-arg]

    def test_empty_key_rejected(self) -> None:
        with pytest.raises(ValidationError, match="key"):
            VariableParameters(key="")

    def test_variable_type_from_string(self) -> None:
        p = VariableParameters(key="FOO", variable_type="file")  # type: ignore[arg-type]
        assert p.variable_type is VariableType.FILE

    def test_unknown_variable_type(self) -> None:
        with pytest.raises(ValidationError, match="variable_type"):
            VariableParameters(key="FOO", variable_type="secret")  # type: ignore[arg-type]

    def test_extra_forbid(self) -> None:
        with pytest.raises(ValidationError, match="extra"):
            VariableParameters(key="FOO", unknown="x")  # type: ignore[call-arg]

    def test_mutable_for_late_initialization(self) -> None:
        p = VariableParameters(key="FOO")
        p.environment_scope = "*"
        assert p.environment_scope == "*"


class TestRemoteVariable:
    def test_ignores_extra_attributes(self) -> None:
        r = RemoteVariable.model_validate(
            {"key": "FOO", "value": "bar", "description": "x", "hidden": False}
        )
        assert r.key == "FOO"
        assert not hasattr(r, "description")

    def test_hidden_value_reads_as_empty(self) -> None:
        r = RemoteVariable.model_validate({"key": "FOO", "value": None, "hidden": True})
        assert r.value == ""

    def test_server_defaults(self) -> None:
        r = RemoteVariable(key="FOO")
        assert r.variable_type is VariableType.ENV_VAR
        assert r.environment_scope == "*"
        assert r.protected is False
        assert r.masked is False
        assert r.raw is False


class TestVariableResource:
    def test_address(self) -> None:
        v = VariableResource(name="db_url", for_provider=VariableParameters(key="DATABASE_URL"))
        assert v.address == "gitlab_project_variable.db_url"

    def test_name_pattern(self) -> None:
        with pytest.raises(ValidationError, match="pattern"):
            VariableResource(name="db-url", for_provider=VariableParameters(key="X"))

    def test_references(self) -> None:
        v = VariableResource(
            name="db_url",
            for_provider=VariableParameters(
                key="DATABASE_URL", project_id_ref=Reference(name="backend")
            ),
        )
        expected = ResourceRef(name="backend", resource_type=PROJECT_RESOURCE_TYPE)
        assert v.references() == [expected]

    def test_selector_is_not_a_named_reference(self) -> None:
        v = VariableResource(
            name="db_url",
            for_provider=VariableParameters(
                key="DATABASE_URL", project_id_selector=Selector(match_labels={"team": "core"})
            ),
        )
        assert v.references() == []

    def test_model_dump_round_trip(self) -> None:
        v = VariableResource(
            name="db_url",
            for_provider=VariableParameters(key="X", variable_type=VariableType.FILE, project_id=4),
        )
        dump = v.model_dump(mode="json", exclude={"address"})
        assert dump["for_provider"]["variable_type"] == "file"
        assert VariableResource.model_validate(dump) == v
