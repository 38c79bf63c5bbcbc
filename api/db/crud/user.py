from typing import Sequence

from sqlmodel import Session, select

from api.db.models import User, UserCreate
from api.utils import auth
from api.utils.exceptions import AccountConflictError
from api.utils.oauth2 import OAuth2UserInfo


def get_users(session: Session, offset: int = 0, limit: int = 100) -> Sequence[User]:
    return session.exec(select(User).offset(offset).limit(limit)).all()


def create_user(session: Session, user: UserCreate) -> User:
    db_user = User.model_validate(
        user, update={"hashed_password": auth.get_password_hash(user.password)}
    )
    session.add(db_user)
    session.commit()
    session.refresh(db_user)
    return db_user


def get_user(session: Session, user_id: str) -> User | None:
    return session.get(User, user_id)


def get_user_by_email(session: Session, email: str) -> User | None:
    return session.exec(select(User).where(User.email == email)).one_or_none()


def save_or_update_oauth_user(session: Session, user_info: OAuth2UserInfo) -> User:
    """
    Create the account for an OAuth2 login, or refresh the provider-owned
    profile fields of an existing one.

    An existing account is reused only when it was created by the same
    provider and both its id and email belong to ``user_info.email``.

    :raises AccountConflictError: a local (or other-provider) account already
        holds the email as its id or its email address
    """
    if not user_info.email:
        return create_user(session=session, user=user_info.to_entity())
    by_email = get_user_by_email(session, user_info.email)
    by_id = get_user(session, user_info.email)
    if by_email is None and by_id is None:
        return create_user(session=session, user=user_info.to_entity())
    if by_email is not None and by_id is not None and by_email.user_id != by_id.user_id:
        raise AccountConflictError()
    user = by_email or by_id
    if user.login_type != user_info.login_type:
        raise AccountConflictError()
    user.user_name = user_info.name
    user.image = user_info.profile
    session.add(user)
    session.commit()
    session.refresh(user)
    return user
