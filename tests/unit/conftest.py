"""Shared fixtures for unit tests."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from unittest.mock import MagicMock

import pytest

from gitlab_provisioner.config import load
from gitlab_provisioner.core import GitLabProvider
from gitlab_provisioner.engine.handlers import EngineContext

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from gitlab_provisioner.config.schema import Config

_GITLAB_ENV_VARS = ("GITLAB_HOST", "GITLAB_TOKEN", "GITLAB_VERIFY_SSL", "GITLAB_PROVISIONER_LOG")


@pytest.fixture(autouse=True)
def _clean_gitlab_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove GITLAB_* env vars so unit tests don't leak host config."""
    for var in _GITLAB_ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def make_config(tmp_path: Path) -> Callable[..., Config]:
    """Factory fixture: write YAML + optional .env, return loaded Config."""

    def _make(yaml_str: str, *, dotenv: str | None = None) -> Config:
        (tmp_path / "config.yaml").write_text(yaml_str)
        if dotenv is not None:
            (tmp_path / ".env").write_text(dotenv)
        return load(tmp_path / "config.yaml")

    return _make


@pytest.fixture
def make_attrs() -> Callable[..., dict[str, Any]]:
    """Factory fixture: variable attributes as python-gitlab exposes them."""

    def _make(**overrides: Any) -> dict[str, Any]:
        attrs: dict[str, Any] = {
            "key": "FOO",
            "value": "bar",
            "variable_type": "env_var",
            "protected": False,
            "masked": False,
            "hidden": False,
            "raw": False,
            "environment_scope": "*",
            "description": None,
        }
        attrs.update(overrides)
        return attrs

    return _make


@pytest.fixture
def mock_gl() -> MagicMock:
    return MagicMock()


@pytest.fixture
def mock_manager(mock_gl: MagicMock) -> MagicMock:
    """The ``project.variables`` manager returned for any project."""
    manager = MagicMock()
    mock_gl.projects.get.return_value.variables = manager
    return manager


@pytest.fixture
def ctx(mock_gl: MagicMock) -> EngineContext:
    return EngineContext(provider=GitLabProvider.from_client(mock_gl))
