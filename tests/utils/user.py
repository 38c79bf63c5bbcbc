from sqlmodel import Session

from api.db import models
from api.db.crud import user as user_crud
from tests.utils import random_email, random_lower_string


def create_random_user(
    session: Session,
    user_id: str | None = None,
    password: str | None = None,
    email: str | None = None,
    role: models.Role = models.Role.USER,
    user_status: models.UserStatus = models.UserStatus.ACTIVE,
) -> models.User:
    user_in = models.UserCreate(
        user_id=user_id or random_lower_string(),
        password=password or random_lower_string(),
        email=email or random_email(),
        role=role,
        user_status=user_status,
    )
    return user_crud.create_user(session=session, user=user_in)
