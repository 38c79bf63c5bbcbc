import pytest
from sqlmodel import Session, select

from api.db import models
from api.db.crud import token as token_crud
from api.utils.exceptions import TokenNotFoundError
from tests.utils import random_email


class TestTokenStore:
    def test_save_creates_record(self, session: Session) -> None:
        subject = random_email()
        token = token_crud.save_or_update(
            session, subject=subject, refresh_token="refresh-1", access_token="access-1"
        )
        assert token.id is not None
        assert token_crud.find_by_access_token(session, "access-1") == token

    def test_save_is_upsert_per_subject(self, session: Session) -> None:
        subject = random_email()
        first = token_crud.save_or_update(
            session, subject=subject, refresh_token="refresh-a", access_token="access-a"
        )
        second = token_crud.save_or_update(
            session, subject=subject, refresh_token="refresh-b", access_token="access-b"
        )
        assert first.id == second.id
        rows = session.exec(
            select(models.Token).where(models.Token.subject == subject)
        ).all()
        assert len(rows) == 1
        assert rows[0].refresh_token == "refresh-b"
        assert token_crud.find_by_access_token(session, "access-a") is None

    def test_find_or_throw(self, session: Session) -> None:
        with pytest.raises(TokenNotFoundError):
            token_crud.find_by_access_token_or_throw(session, "never-issued")

    def test_update_token_keeps_refresh_token(self, session: Session) -> None:
        token = token_crud.save_or_update(
            session,
            subject=random_email(),
            refresh_token="refresh-keep",
            access_token="access-old",
        )
        token_crud.update_token(session, "access-new", token)
        stored = token_crud.find_by_access_token_or_throw(session, "access-new")
        assert stored.refresh_token == "refresh-keep"

    def test_delete_token(self, session: Session) -> None:
        token = token_crud.save_or_update(
            session,
            subject=random_email(),
            refresh_token="refresh-gone",
            access_token="access-gone",
        )
        token_crud.delete_token(session, token)
        assert token_crud.find_by_access_token(session, "access-gone") is None
