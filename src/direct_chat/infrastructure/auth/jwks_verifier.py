from __future__ import annotations

import logging

import jwt
from jwt import PyJWKClient

from direct_chat.application.dto.principal import Principal
from direct_chat.application.exceptions import InvalidCredentialError
from direct_chat.infrastructure.auth.claims import principal_from_claims

logger = logging.getLogger(__name__)


class JWKSVerifier:
    """Verify JWTs using a remote JWKS endpoint."""

    def __init__(self, jwks_url: str) -> None:
        self._jwks_url = jwks_url
        self._jwk_client = PyJWKClient(jwks_url)

    async def verify(self, token: str) -> Principal:
        try:
            signing_key = self._jwk_client.get_signing_key_from_jwt(token)
            payload = jwt.decode(
                token,
                signing_key.key,
                algorithms=["RS256", "ES256"],
            )
        except jwt.PyJWTError as exc:
            logger.debug("JWKS verification failed against %s", self._jwks_url, exc_info=True)
            raise InvalidCredentialError("Invalid token or authentication failed.") from exc
        return principal_from_claims(payload)
