import logging
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlmodel import Session

from api.db import models
from api.db.crud import token as token_crud
from api.db.crud import user as user_crud
from api.utils import auth
from api.utils.dependencies import get_session, get_token_provider
from api.utils.oauth2 import OAuth2UserInfo
from api.utils.redis_client import revoke_jti
from api.utils.tokens import JwtTokenProvider

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["auth"],
    responses={404: {"description": "Not found"}},
)


@router.post("/")
async def login(
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    session: Annotated[Session, Depends(get_session)],
    provider: Annotated[JwtTokenProvider, Depends(get_token_provider)],
) -> models.AccessTokenResponse:
    user = auth.authenticate_user(session, form_data.username, form_data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect user id or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return models.AccessTokenResponse(
        access_token=auth.issue_tokens(provider, user)
    )


@router.post("/oauth2/{provider_id}")
async def oauth2_login(
    provider_id: str,
    attributes: Annotated[dict[str, Any], Body()],
    session: Annotated[Session, Depends(get_session)],
    provider: Annotated[JwtTokenProvider, Depends(get_token_provider)],
) -> models.AccessTokenResponse:
    """
    Complete an OAuth2 login from the provider's user attributes.

    Creates the account on first login and refreshes its profile otherwise.
    """
    user_info = OAuth2UserInfo.of(provider_id, attributes)
    if not user_info.email:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Provider attributes carry no email.",
        )
    user = user_crud.save_or_update_oauth_user(session, user_info)
    if user.user_status != models.UserStatus.ACTIVE:
        raise auth.credentials_exception
    logger.info("OAuth2 login via %s for %s", provider_id, user.user_id)
    return models.AccessTokenResponse(
        access_token=auth.issue_tokens(provider, user)
    )


@router.post("/reissue")
async def reissue(
    request: Request,
    provider: Annotated[JwtTokenProvider, Depends(get_token_provider)],
) -> models.AccessTokenResponse:
    result = provider.reissue_access_token(provider.extract_access_token(request))
    if not result.reissued:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=result.status.value,
            headers={"WWW-Authenticate": "Bearer"},
        )
    return models.AccessTokenResponse(access_token=result.access_token)  # type: ignore


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    request: Request,
    claims: Annotated[models.TokenPayload, Depends(auth.get_current_claims)],
    session: Annotated[Session, Depends(get_session)],
) -> None:
    access_token = JwtTokenProvider.extract_access_token(request)
    token = token_crud.find_by_access_token(session, access_token)  # type: ignore
    if token is not None:
        token_crud.delete_token(session, token)
    revoke_jti(claims.jti, claims.exp)
