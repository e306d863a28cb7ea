"""Errors raised while planning or applying variable changes."""

from __future__ import annotations

from typing import TYPE_CHECKING

from gitlab_provisioner.engine.types import ApplyResult

if TYPE_CHECKING:
    from gitlab_provisioner.engine.types import ResourceChange


class EngineError(Exception):
    """Base class for plan and apply failures."""


class DuplicateAddressError(EngineError):
    def __init__(self, address: str) -> None:
        self.address = address
        super().__init__(f"Duplicate resource address: {address}")


class ValidationError(EngineError):
    """Declared variables that cannot be planned.

    ``errors`` holds one message per problem so callers can list them all.
    """

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        lines = "\n".join(f"  - {e}" for e in errors)
        super().__init__(f"{len(errors)} variable(s) failed validation:\n{lines}")


class ApplyError(EngineError):
    """An operation failed part-way through an apply.

    ``result`` lists the changes already made in GitLab. The failing
    python-gitlab error is the ``__cause__``.
    """

    def __init__(self, *, applied: list[ResourceChange], address: str, message: str) -> None:
        self.result = ApplyResult(applied=applied)
        self.address = address
        super().__init__(f"Apply failed on {address}: {message}")


class ApplyCanceled(EngineError):
    """The user interrupted an apply."""
