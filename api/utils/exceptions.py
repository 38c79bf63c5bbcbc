"""
Authentication errors.

Token-parsing failures are raised by the hard-parse path of the token provider
and converted into HTTP responses by the handler registered in ``api.main``.
"""

from fastapi import status


class AuthError(Exception):
    """Base class for authentication failures."""

    status_code: int = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str, code: str = "AUTH_ERROR"):
        super().__init__(message)
        self.message = message
        self.code = code


class ExpiredTokenError(AuthError):
    def __init__(self, message: str = "Token has expired"):
        super().__init__(message, code="TOKEN_EXPIRED")


class MalformedTokenError(AuthError):
    def __init__(self, message: str = "Token is malformed"):
        super().__init__(message, code="TOKEN_MALFORMED")


class UnsupportedTokenError(AuthError):
    def __init__(self, message: str = "Token format is unsupported"):
        super().__init__(message, code="TOKEN_UNSUPPORTED")


class InvalidSignatureError(AuthError):
    def __init__(self, message: str = "Token signature is invalid"):
        super().__init__(message, code="TOKEN_BAD_SIGNATURE")


class InvalidClaimsError(AuthError):
    """Raised for an empty token string or missing/invalid claims."""

    def __init__(self, message: str = "Token claims are empty or invalid"):
        super().__init__(message, code="TOKEN_INVALID_CLAIMS")


class UnknownProviderError(AuthError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, provider_id: str):
        super().__init__(
            f"Unsupported OAuth2 provider: {provider_id}",
            code="ILLEGAL_REGISTRATION_ID",
        )
        self.provider_id = provider_id


class TokenNotFoundError(AuthError):
    def __init__(self, message: str = "No stored token matches the access token"):
        super().__init__(message, code="TOKEN_NOT_FOUND")


class AccountConflictError(AuthError):
    """Raised when an OAuth2 login collides with an account it does not own."""

    status_code = status.HTTP_409_CONFLICT

    def __init__(self, message: str = "Account already registered with another login"):
        super().__init__(message, code="ACCOUNT_CONFLICT")
