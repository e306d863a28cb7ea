"""Fill variable values from ``value_secret_ref`` entries."""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from gitlab_provisioner.resources.variable import VariableResource

logger = logging.getLogger(__name__)


def resolve_secret_values(
    resources: Sequence[VariableResource], dotenv: Mapping[str, str | None]
) -> list[str]:
    """Set ``value`` from the environment variable each secret reference names.

    The process environment wins over the ``.env`` values in *dotenv*.
    Returns the resolution errors (empty = all resolved).
    """
    errors: list[str] = []
    for r in resources:
        params = r.for_provider
        ref = params.value_secret_ref
        if ref is None:
            continue
        if params.value is not None:
            errors.append(f"{r.address}: set either value or value_secret_ref, not both")
            continue
        secret = os.environ.get(ref.env)
        if secret is None:
            secret = dotenv.get(ref.env)
        if secret is None:
            errors.append(
                f"{r.address}: value_secret_ref names unset environment variable '{ref.env}'"
            )
            continue
        params.value = secret
        logger.debug("Took value of %s from %s", r.address, ref.env)
    return errors
