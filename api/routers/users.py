from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session

from api.db import models
from api.db.crud import user as user_crud
from api.utils.auth import get_admin_user, get_current_user
from api.utils.dependencies import get_session

router = APIRouter(
    prefix="/users",
    tags=["users"],
    responses={404: {"description": "Not found"}},
)


@router.post("/")
async def create_user(
    signup: models.UserSignup,
    session: Annotated[Session, Depends(get_session)],
) -> models.UserSafe:
    if user_crud.get_user(session, signup.user_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail="User id must be unique."
        )
    if user_crud.get_user_by_email(session, signup.email):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail="Email must be unique."
        )
    user = models.UserCreate.model_validate(signup)
    return user_crud.create_user(session=session, user=user)


@router.get("/", dependencies=[Depends(get_admin_user)])
async def get_users(
    session: Annotated[Session, Depends(get_session)],
    offset: int = 0,
    limit: int = 100,
) -> list[models.UserSafe]:
    """Admin-only listing of accounts, without password hashes."""
    return user_crud.get_users(session=session, offset=offset, limit=limit)  # type: ignore


@router.get("/me/")
async def read_me(
    current_user: Annotated[models.User, Depends(get_current_user)],
) -> models.UserSafe:
    return current_user  # type: ignore
