from datetime import datetime

from sqlmodel import Session, select

from api.db.models import Token
from api.utils.exceptions import TokenNotFoundError


def get_token_by_subject(session: Session, subject: str) -> Token | None:
    return session.exec(select(Token).where(Token.subject == subject)).one_or_none()


def save_or_update(
    session: Session,
    subject: str,
    refresh_token: str,
    access_token: str,
    issued_at: datetime | None = None,
    expires_at: datetime | None = None,
) -> Token:
    """
    Store the token pair for ``subject``, replacing any existing pair.

    A subject never has more than one stored record.
    """
    token = get_token_by_subject(session, subject)
    if token is None:
        token = Token(subject=subject, access_token=access_token, refresh_token="")
    token.access_token = access_token
    token.refresh_token = refresh_token
    token.issued_at = issued_at
    token.expires_at = expires_at
    session.add(token)
    session.commit()
    session.refresh(token)
    return token


def find_by_access_token(session: Session, access_token: str) -> Token | None:
    return session.exec(
        select(Token).where(Token.access_token == access_token)
    ).one_or_none()


def find_by_access_token_or_throw(session: Session, access_token: str) -> Token:
    token = find_by_access_token(session, access_token)
    if token is None:
        raise TokenNotFoundError()
    return token


def update_token(session: Session, new_access_token: str, token: Token) -> Token:
    token.access_token = new_access_token
    session.add(token)
    session.commit()
    session.refresh(token)
    return token


def delete_token(session: Session, token: Token) -> None:
    session.delete(token)
    session.commit()
