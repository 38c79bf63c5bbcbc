import pytest
from sqlmodel import Session

from api.db import models
from api.db.crud import user as user_crud
from api.utils.exceptions import AccountConflictError, UnknownProviderError
from api.utils.oauth2 import GENERATED_PASSWORD_LENGTH, OAuth2Provider, OAuth2UserInfo
from tests.utils import random_email
from tests.utils.user import create_random_user

GOOGLE_ATTRIBUTES = {
    "sub": "109876543210",
    "name": "Kim Mukpic",
    "email": "kim@example.com",
    "picture": "https://lh3.googleusercontent.com/a/kim.png",
    "email_verified": True,
}


class TestUserInfoMapping:
    def test_google_attributes(self) -> None:
        info = OAuth2UserInfo.of("google", GOOGLE_ATTRIBUTES)
        assert info.name == GOOGLE_ATTRIBUTES["name"]
        assert info.email == GOOGLE_ATTRIBUTES["email"]
        assert info.profile == GOOGLE_ATTRIBUTES["picture"]
        assert info.provider is OAuth2Provider.GOOGLE

    def test_missing_attributes_are_none(self) -> None:
        info = OAuth2UserInfo.of("google", {"email": "only@example.com"})
        assert info.email == "only@example.com"
        assert info.name is None
        assert info.profile is None

    @pytest.mark.parametrize("provider_id", ["kakao", "naver", "GOOGLE", ""])
    def test_unknown_provider(self, provider_id: str) -> None:
        with pytest.raises(UnknownProviderError) as exc_info:
            OAuth2UserInfo.of(provider_id, GOOGLE_ATTRIBUTES)
        assert exc_info.value.code == "ILLEGAL_REGISTRATION_ID"
        assert exc_info.value.provider_id == provider_id


class TestToEntity:
    def test_fixed_fields(self) -> None:
        user = OAuth2UserInfo.of("google", GOOGLE_ATTRIBUTES).to_entity()
        assert user.user_id == GOOGLE_ATTRIBUTES["email"]
        assert user.email == GOOGLE_ATTRIBUTES["email"]
        assert user.user_name == GOOGLE_ATTRIBUTES["name"]
        assert user.image == GOOGLE_ATTRIBUTES["picture"]
        assert user.role is models.Role.USER
        assert user.login_type is models.LoginType.GOOGLE
        assert user.user_status is models.UserStatus.ACTIVE
        assert user.agree is True

    def test_generated_password(self) -> None:
        info = OAuth2UserInfo.of("google", GOOGLE_ATTRIBUTES)
        passwords = {info.to_entity().password for _ in range(50)}
        assert len(passwords) == 50
        assert all(len(p) == GENERATED_PASSWORD_LENGTH for p in passwords)

    def test_requires_email(self) -> None:
        with pytest.raises(ValueError):
            OAuth2UserInfo.of("google", {"name": "No Email"}).to_entity()


class TestOAuthUserUpsert:
    def test_creates_user_on_first_login(self, session: Session) -> None:
        email = random_email()
        info = OAuth2UserInfo.of("google", {**GOOGLE_ATTRIBUTES, "email": email})
        user = user_crud.save_or_update_oauth_user(session, info)
        assert user.user_id == email
        assert user.login_type is models.LoginType.GOOGLE
        # Stored hashed, never as the generated plain text
        assert len(user.hashed_password) > GENERATED_PASSWORD_LENGTH

    def test_updates_profile_on_later_login(self, session: Session) -> None:
        email = random_email()
        first = OAuth2UserInfo.of("google", {**GOOGLE_ATTRIBUTES, "email": email})
        created = user_crud.save_or_update_oauth_user(session, first)
        hashed_password = created.hashed_password

        second = OAuth2UserInfo.of(
            "google",
            {"email": email, "name": "Renamed", "picture": "https://example.com/new.png"},
        )
        updated = user_crud.save_or_update_oauth_user(session, second)
        assert updated.user_id == created.user_id
        assert updated.user_name == "Renamed"
        assert updated.image == "https://example.com/new.png"
        assert updated.hashed_password == hashed_password

    def test_local_account_is_left_untouched(self, session: Session) -> None:
        email = random_email()
        local = create_random_user(session, email=email)
        info = OAuth2UserInfo.of("google", {**GOOGLE_ATTRIBUTES, "email": email})
        with pytest.raises(AccountConflictError):
            user_crud.save_or_update_oauth_user(session, info)
        session.refresh(local)
        assert local.login_type is models.LoginType.LOCAL
        assert local.user_name != GOOGLE_ATTRIBUTES["name"]

    def test_user_id_taken_by_another_account(self, session: Session) -> None:
        email = random_email()
        create_random_user(session, user_id=email)
        info = OAuth2UserInfo.of("google", {**GOOGLE_ATTRIBUTES, "email": email})
        with pytest.raises(AccountConflictError):
            user_crud.save_or_update_oauth_user(session, info)
        assert user_crud.get_user_by_email(session, email) is None
