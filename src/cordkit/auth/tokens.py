"""Token schemes accepted by the REST API.

Bots send ``Authorization: Bot <token>``; OAuth2 access tokens obtained
for a user are sent as ``Authorization: Bearer <token>``. Both resolve the
token from the profile's ``source`` (``env:VAR``, ``file:/path``,
``prompt``) unless a literal ``token`` was handed over in code.
"""

from __future__ import annotations

from cordkit.auth.base import AuthPlugin, AuthResult
from cordkit.config import resolve_credential
from cordkit.models.config import AuthConfig


class _TokenAuth(AuthPlugin):
    scheme = ""

    def authenticate(self, auth_config: AuthConfig) -> AuthResult:
        token = auth_config.token or resolve_credential(auth_config.source)
        # Tokens copied from the portal sometimes already carry the scheme.
        prefix = f"{self.scheme} "
        if token.startswith(prefix):
            token = token[len(prefix):]
        return AuthResult(headers={"Authorization": f"{prefix}{token.strip()}"})

    def validate_config(self, auth_config: AuthConfig) -> list[str]:
        if not auth_config.token and not auth_config.source:
            return [f"{self.auth_type} auth requires a token 'source'"]
        return []


class BotTokenAuth(_TokenAuth):
    scheme = "Bot"

    @property
    def auth_type(self) -> str:
        return "bot"


class BearerTokenAuth(_TokenAuth):
    scheme = "Bearer"

    @property
    def auth_type(self) -> str:
        return "bearer"
