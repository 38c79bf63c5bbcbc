from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from pwdlib import PasswordHash
from sqlmodel import Session

from api.db import models
from api.db.crud import user as user_crud
from api.utils.dependencies import get_session, get_token_provider
from api.utils.redis_client import is_revoked
from api.utils.tokens import JwtTokenProvider

password_hash = PasswordHash.recommended()
credentials_exception = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Could not validate credentials",
    headers={"WWW-Authenticate": "Bearer"},
)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against its hashed version."""
    return password_hash.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash the given password."""
    return password_hash.hash(password)


def authenticate_user(
    session: Session, user_id: str, password: str
) -> models.User | None:
    """Authenticate a local account by user id and password."""
    user = user_crud.get_user(session=session, user_id=user_id)
    if (
        user
        and user.user_status == models.UserStatus.ACTIVE
        and verify_password(password, user.hashed_password)
    ):
        return user
    return None


def issue_tokens(provider: JwtTokenProvider, user: models.User) -> str:
    """
    Issue an access token for ``user`` and store a matching refresh token.

    Called on every successful login, local or OAuth2.
    """
    authentication = models.Authentication(
        principal=user, authorities=user.authorities
    )
    access_token = provider.generate_access_token(authentication)
    provider.generate_refresh_token(authentication, access_token)
    return access_token


async def get_current_claims(
    request: Request,
    provider: Annotated[JwtTokenProvider, Depends(get_token_provider)],
) -> models.TokenPayload:
    """Verified claims of the request's bearer token; parse errors propagate."""
    token = provider.extract_access_token(request)
    if token is None:
        raise credentials_exception
    claims = provider.parse_claims(token)
    if is_revoked(claims.jti):
        raise credentials_exception
    return claims


async def get_current_user(
    claims: Annotated[models.TokenPayload, Depends(get_current_claims)],
    session: Annotated[Session, Depends(get_session)],
) -> models.User:
    user = user_crud.get_user(session=session, user_id=claims.sub)
    if user is None or user.user_status != models.UserStatus.ACTIVE:
        raise credentials_exception
    return user


async def get_admin_user(
    current_user: Annotated[models.User, Depends(get_current_user)],
) -> models.User:
    """Verify if the current user is an admin."""
    if current_user.role != models.Role.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="The user doesn't have enough privileges",
        )
    return current_user
