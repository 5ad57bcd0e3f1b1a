"""Handshake authentication for chat connections."""
from __future__ import annotations

from direct_chat.application.dto.principal import Principal
from direct_chat.application.exceptions import (
    IdentityMismatchError,
    MalformedCredentialError,
)
from direct_chat.application.ports.auth import TokenVerifier

BEARER = "Bearer"


def parse_bearer(authorization: str | None) -> str:
    """Extract the token from an ``Authorization: Bearer <token>`` value."""
    if not authorization:
        raise MalformedCredentialError("No token provided")
    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0] != BEARER or not parts[1]:
        raise MalformedCredentialError('Token format is "Bearer <token>"')
    return parts[1]


async def authenticate(
    authorization: str | None,
    verifier: TokenVerifier,
    *,
    claimed_user_id: str | None = None,
) -> Principal:
    """Verify the credential and, if given, the id the client claims to be."""
    token = parse_bearer(authorization)
    principal = await verifier.verify(token)
    if claimed_user_id and claimed_user_id != principal.user_id:
        raise IdentityMismatchError("User ID mismatch")
    return principal
