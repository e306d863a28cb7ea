"""GitLab Provider - Connection configuration for a GitLab instance."""

from functools import cached_property
from typing import TYPE_CHECKING, Self

import gitlab
from pydantic import BaseModel, ConfigDict, SecretStr

if TYPE_CHECKING:
    from gitlab_provisioner.clients.variables import VariableClient


class TokenAuth(BaseModel):
    """Personal, project or group access token authentication for GitLab."""

    private_token: SecretStr


class GitLabProvider(BaseModel):
    """Connection configuration for a GitLab instance.

    For external use, provide host and auth. For tests or embedding in
    another tool, use the `from_client` classmethod to inject a client.

    Examples:
        # External with an access token
        provider = GitLabProvider(
            host="https://gitlab.company.com",
            auth=TokenAuth(private_token="glpat-..."),
        )

        # Reuse an existing python-gitlab client
        provider = GitLabProvider.from_client(gitlab.Gitlab.from_config())
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    host: str | None = None
    auth: TokenAuth | None = None
    verify_ssl: bool = True

    # Injected client (for embedding / testing)
    _injected_client: gitlab.Gitlab | None = None

    @classmethod
    def from_client(cls, client: gitlab.Gitlab) -> Self:
        """Create a provider with an injected client.

        Args:
            client: A pre-configured ``gitlab.Gitlab`` instance
        """
        provider = cls.model_construct()
        provider._injected_client = client
        return provider

    @cached_property
    def client(self) -> gitlab.Gitlab:
        """Get the GitLab client."""
        if self._injected_client is not None:
            return self._injected_client

        if self.host is None or self.auth is None:
            raise ValueError(
                "Either provide host+auth, or use GitLabProvider.from_client() "
                "to inject a client"
            )

        return gitlab.Gitlab(
            self.host,
            private_token=self.auth.private_token.get_secret_value(),
            ssl_verify=self.verify_ssl,
        )

    @cached_property
    def variables(self) -> "VariableClient":
        from gitlab_provisioner.clients.variables import GitLabVariableClient

        return GitLabVariableClient(self.client)
