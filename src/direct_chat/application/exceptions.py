from __future__ import annotations


class AppError(Exception):
    """Base application error."""

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__(detail)


class NotFoundError(AppError):
    pass


class ForbiddenError(AppError):
    pass


class ValidationError(AppError):
    pass


class PersistenceError(AppError):
    """The store rejected or failed a write; nothing was committed."""


class AuthError(AppError):
    """Connection or request could not be authenticated."""


class MalformedCredentialError(AuthError):
    pass


class InvalidCredentialError(AuthError):
    pass


class IdentityMismatchError(AuthError):
    pass
