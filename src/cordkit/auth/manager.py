"""Registry mapping auth types to plugins.

:func:`create_default_manager` returns a manager that knows the ``bot``
and ``bearer`` token schemes, which is all the REST API accepts.
"""

from __future__ import annotations

from cordkit.auth.base import AuthPlugin, AuthResult
from cordkit.exceptions import ConfigError
from cordkit.models.config import Profile


class AuthManager:
    """Dispatches a profile's auth section to the matching plugin.

    Example::

        manager = AuthManager()
        manager.register(BotTokenAuth())
        headers = manager.authenticate(profile).headers
    """

    def __init__(self) -> None:
        self._plugins: dict[str, AuthPlugin] = {}

    def register(self, plugin: AuthPlugin) -> None:
        """Register *plugin*, replacing any plugin of the same type."""
        self._plugins[plugin.auth_type] = plugin

    def get_plugin(self, auth_type: str) -> AuthPlugin:
        plugin = self._plugins.get(auth_type)
        if plugin is None:
            available = ", ".join(sorted(self._plugins)) or "(none)"
            raise ConfigError(f"Unknown auth type '{auth_type}'. Available types: {available}")
        return plugin

    def authenticate(self, profile: Profile) -> AuthResult:
        """Headers for *profile*; empty when the profile has no auth section."""
        if profile.auth is None:
            return AuthResult()
        plugin = self.get_plugin(profile.auth.type)
        problems = plugin.validate_config(profile.auth)
        if problems:
            raise ConfigError("; ".join(problems))
        return plugin.authenticate(profile.auth)

    def list_types(self) -> list[str]:
        return sorted(self._plugins)


def create_default_manager() -> AuthManager:
    """A manager with :class:`BotTokenAuth` and :class:`BearerTokenAuth` registered."""
    from cordkit.auth.tokens import BearerTokenAuth, BotTokenAuth

    manager = AuthManager()
    manager.register(BotTokenAuth())
    manager.register(BearerTokenAuth())
    return manager
