"""
JWT issuance, validation and reissue.

Every parse goes through ``JwtTokenProvider.parse_token``, which never raises
and returns one of ``Valid``, ``Expired`` or ``Invalid``. Soft callers
(``validate_token``, ``extract_subject``, ``extract_user_id_from_request``)
turn that into a boolean or ``None``. The hard path (``parse_claims``) turns it
into the matching ``AuthError`` subclass.
"""

import enum
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import jwt
from fastapi import Request
from jwt import exceptions as jwt_exc
from pydantic import ValidationError
from sqlmodel import Session

from api.db import models
from api.db.crud import token as token_crud
from api.utils.config import Settings
from api.utils.exceptions import (
    AuthError,
    ExpiredTokenError,
    InvalidClaimsError,
    InvalidSignatureError,
    MalformedTokenError,
    UnsupportedTokenError,
)

logger = logging.getLogger(__name__)

KEY_ROLE = "role"
AUTHORIZATION_HEADER = "Authorization"
BEARER_PREFIX = "Bearer "
REQUIRED_CLAIMS = ["sub", "iat", "exp"]


###
# Parse results
###


@dataclass(frozen=True)
class Valid:
    claims: models.TokenPayload


@dataclass(frozen=True)
class Expired:
    reason: str
    cause: Exception | None = None


@dataclass(frozen=True)
class Invalid:
    reason: str
    error: type[AuthError]
    cause: Exception | None = None


ParseResult = Valid | Expired | Invalid


class ReissueStatus(str, enum.Enum):
    REISSUED = "REISSUED"
    MISSING_TOKEN = "MISSING_TOKEN"
    REFRESH_EXPIRED = "REFRESH_EXPIRED"
    REFRESH_INVALID = "REFRESH_INVALID"


@dataclass(frozen=True)
class ReissueResult:
    """
    Outcome of an access-token reissue.

    Anything other than ``REISSUED`` means the client has to log in again.
    """

    status: ReissueStatus
    access_token: str | None = None

    @property
    def reissued(self) -> bool:
        return self.status is ReissueStatus.REISSUED


def _classify(exc: jwt_exc.PyJWTError) -> type[AuthError]:
    # Order matters: several PyJWT errors subclass DecodeError
    if isinstance(exc, jwt_exc.InvalidSignatureError):
        return InvalidSignatureError
    if isinstance(exc, (jwt_exc.InvalidAlgorithmError, jwt_exc.InvalidKeyError)):
        return UnsupportedTokenError
    if isinstance(exc, jwt_exc.DecodeError):
        return MalformedTokenError
    return InvalidClaimsError


class JwtTokenProvider:
    """
    Issues and verifies HS256 tokens and keeps the refresh-token store in step.

    The signing key is derived from ``settings`` at construction and is never
    mutated afterwards.
    """

    def __init__(self, settings: Settings, session: Session):
        self._secret_key = settings.get_signing_key()
        self._algorithm = settings.ALGORITHM
        self.access_token_ttl = timedelta(milliseconds=settings.ACCESS_TOKEN_EXPIRE_MS)
        self.refresh_token_ttl = timedelta(
            milliseconds=settings.REFRESH_TOKEN_EXPIRE_MS
        )
        self.session = session

    ###
    # Issuance
    ###

    def generate_access_token(self, authentication: models.Authentication) -> str:
        subject = self._subject_from_authentication(authentication)
        logger.info("Generating access token for subject %s", subject)
        return self._generate_token(
            subject, authentication.authorities, self.access_token_ttl
        )

    def generate_refresh_token(
        self, authentication: models.Authentication, access_token: str
    ) -> str:
        """Issue a refresh token and store it against ``access_token``."""
        subject = self._subject_from_authentication(authentication)
        logger.info("Generating refresh token for subject %s", subject)
        now = datetime.now(timezone.utc)
        refresh_token = self._generate_token(
            subject, authentication.authorities, self.refresh_token_ttl, now=now
        )
        token_crud.save_or_update(
            self.session,
            subject=subject,
            refresh_token=refresh_token,
            access_token=access_token,
            issued_at=now,
            expires_at=now + self.refresh_token_ttl,
        )
        return refresh_token

    def _subject_from_authentication(
        self, authentication: models.Authentication
    ) -> str:
        if isinstance(authentication.principal, models.User):
            return authentication.principal.user_id
        return authentication.name

    def _generate_token(
        self,
        subject: str,
        authorities: list[str],
        ttl: timedelta,
        now: datetime | None = None,
    ) -> str:
        now = now or datetime.now(timezone.utc)
        to_encode = {
            "sub": subject,
            KEY_ROLE: ",".join(authorities),
            "jti": str(uuid4()),
            "iat": now,
            "exp": now + ttl,
        }
        return jwt.encode(to_encode, key=self._secret_key, algorithm=self._algorithm)

    ###
    # Parsing
    ###

    def parse_token(self, token: str | None) -> ParseResult:
        if not token or not token.strip():
            return Invalid("Token is empty or null", InvalidClaimsError)
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"require": REQUIRED_CLAIMS},
            )
        except jwt_exc.ExpiredSignatureError as e:
            return Expired(str(e), cause=e)
        except jwt_exc.PyJWTError as e:
            return Invalid(str(e), _classify(e), cause=e)
        try:
            return Valid(models.TokenPayload.model_validate(payload))
        except ValidationError as e:
            return Invalid(str(e), InvalidClaimsError, cause=e)

    def parse_claims(self, token: str | None) -> models.TokenPayload:
        """
        Verify ``token`` and return its claims.

        :raises ExpiredTokenError: signature is fine but the token has expired
        :raises UnsupportedTokenError: the token uses a disallowed algorithm
        :raises MalformedTokenError: the token is not a decodable JWS
        :raises InvalidSignatureError: the signature does not match
        :raises InvalidClaimsError: the token is empty or its claims are invalid
        """
        result = self.parse_token(token)
        if isinstance(result, Expired):
            logger.error("JWT token is expired: %s", result.reason)
            raise ExpiredTokenError(result.reason) from result.cause
        if isinstance(result, Invalid):
            logger.error(
                "JWT token rejected (%s): %s", result.error.__name__, result.reason
            )
            raise result.error(result.reason) from result.cause
        return result.claims

    def validate_token(self, token: str | None) -> bool:
        result = self.parse_token(token)
        if isinstance(result, Expired):
            logger.warning("Token is expired: %s", result.reason)
            return False
        if isinstance(result, Invalid):
            logger.warning("Invalid token: %s", result.reason)
            return False
        logger.info("Valid token for subject %s", result.claims.sub)
        return True

    def get_authentication(self, token: str) -> models.Authentication:
        """
        Rebuild the principal from the token's own claims.

        No database lookup is made; the verified token is the source of truth.
        """
        claims = self.parse_claims(token)
        authorities = claims.authorities
        principal = models.Principal(name=claims.sub, authorities=authorities)
        return models.Authentication(
            principal=principal, authorities=authorities, credentials=token
        )

    ###
    # Reissue
    ###

    def reissue_access_token(self, access_token: str | None) -> ReissueResult:
        """
        Exchange the refresh token stored for ``access_token`` for a new
        access token.

        :raises TokenNotFoundError: nothing is stored for ``access_token``
        """
        if not access_token or not access_token.strip():
            return ReissueResult(ReissueStatus.MISSING_TOKEN)
        token = token_crud.find_by_access_token_or_throw(self.session, access_token)
        result = self.parse_token(token.refresh_token)
        if isinstance(result, Expired):
            logger.warning(
                "Refresh token for %s is expired: %s", token.subject, result.reason
            )
            return ReissueResult(ReissueStatus.REFRESH_EXPIRED)
        if isinstance(result, Invalid):
            logger.warning(
                "Refresh token for %s is invalid: %s", token.subject, result.reason
            )
            return ReissueResult(ReissueStatus.REFRESH_INVALID)
        new_access_token = self.generate_access_token(
            self.get_authentication(token.refresh_token)
        )
        token_crud.update_token(self.session, new_access_token, token)
        return ReissueResult(ReissueStatus.REISSUED, new_access_token)

    ###
    # Request helpers
    ###

    @staticmethod
    def extract_access_token(request: Request) -> str | None:
        auth_header = request.headers.get(AUTHORIZATION_HEADER)
        if auth_header is None or not auth_header.startswith(BEARER_PREFIX):
            return None
        return auth_header[len(BEARER_PREFIX) :]

    def extract_user_id_from_request(self, request: Request) -> str | None:
        token = self.extract_access_token(request)
        if token is None:
            return None
        result = self.parse_token(token)
        if not isinstance(result, Valid):
            logger.error("Failed to extract user id from token: %s", result.reason)
            return None
        return result.claims.sub

    def extract_subject(self, access_token: str | None) -> str | None:
        result = self.parse_token(access_token)
        if not isinstance(result, Valid):
            logger.error("Error extracting subject from token: %s", result.reason)
            return None
        logger.info("Extracted subject %s from token", result.claims.sub)
        return result.claims.sub
