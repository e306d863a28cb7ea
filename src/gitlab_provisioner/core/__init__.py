"""Core infrastructure components for GitLab Provisioner."""

from gitlab_provisioner.core.provider import GitLabProvider, TokenAuth

__all__ = ["GitLabProvider", "TokenAuth"]
