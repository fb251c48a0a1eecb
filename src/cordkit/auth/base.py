"""Authentication plugin interface.

An :class:`AuthPlugin` turns a profile's :class:`~cordkit.models.config.AuthConfig`
into an :class:`AuthResult`: the headers the transport adds to every request.
Plugins are looked up by :attr:`AuthPlugin.auth_type` in
:class:`~cordkit.auth.manager.AuthManager`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from cordkit.models.config import AuthConfig


class AuthResult:
    """Headers to inject into outgoing requests.

    Example::

        result = AuthResult(headers={"Authorization": "Bot abc.def"})
    """

    def __init__(self, headers: dict[str, str] | None = None):
        self.headers = headers or {}

    def __repr__(self) -> str:
        return f"AuthResult(headers={sorted(self.headers)})"


class AuthPlugin(ABC):
    """Base class for authentication strategies."""

    @property
    @abstractmethod
    def auth_type(self) -> str:
        """Identifier matched against ``AuthConfig.type`` (e.g. ``"bot"``)."""
        ...

    @abstractmethod
    def authenticate(self, auth_config: AuthConfig) -> AuthResult:
        """Resolve the credential and return the headers to send.

        Raises:
            ConfigError: The credential source cannot be resolved.
        """
        ...

    def validate_config(self, auth_config: AuthConfig) -> list[str]:
        """Return human-readable problems with *auth_config* (empty when valid)."""
        return []
