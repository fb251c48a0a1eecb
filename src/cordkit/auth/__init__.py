"""Authentication plugins and their registry."""

from cordkit.auth.base import AuthPlugin, AuthResult
from cordkit.auth.manager import AuthManager, create_default_manager
from cordkit.auth.tokens import BearerTokenAuth, BotTokenAuth

__all__ = [
    "AuthManager",
    "AuthPlugin",
    "AuthResult",
    "BearerTokenAuth",
    "BotTokenAuth",
    "create_default_manager",
]
