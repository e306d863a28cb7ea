"""Declarative provisioning of GitLab project variables."""

import importlib.metadata

try:
    __version__ = importlib.metadata.version("gitlab-provisioner")
except importlib.metadata.PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"
