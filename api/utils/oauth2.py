"""
OAuth2 user-info normalization.

Each supported provider maps its own attribute keys onto the canonical
``name``/``email``/``profile`` triple. Supporting a new provider means adding a
member to ``OAuth2Provider`` and an entry to ``ATTRIBUTE_KEYS``.
"""

import enum
from typing import Any, Mapping
from uuid import uuid4

from sqlmodel import SQLModel

from api.db import models
from api.utils.exceptions import UnknownProviderError

GENERATED_PASSWORD_LENGTH = 10


class OAuth2Provider(str, enum.Enum):
    GOOGLE = "google"


class AttributeKeys(SQLModel):
    name: str
    email: str
    profile: str


ATTRIBUTE_KEYS: dict[OAuth2Provider, AttributeKeys] = {
    OAuth2Provider.GOOGLE: AttributeKeys(name="name", email="email", profile="picture"),
}

LOGIN_TYPES: dict[OAuth2Provider, models.LoginType] = {
    OAuth2Provider.GOOGLE: models.LoginType.GOOGLE,
}


def generate_password() -> str:
    return uuid4().hex[:GENERATED_PASSWORD_LENGTH]


class OAuth2UserInfo(SQLModel):
    name: str | None = None
    email: str | None = None
    profile: str | None = None
    provider: OAuth2Provider = OAuth2Provider.GOOGLE

    @classmethod
    def of(cls, provider_id: str, attributes: Mapping[str, Any]) -> "OAuth2UserInfo":
        """
        Build user info from a provider's attribute map.

        :raises UnknownProviderError: if ``provider_id`` is not a supported provider
        """
        try:
            provider = OAuth2Provider(provider_id)
        except ValueError:
            raise UnknownProviderError(provider_id) from None
        keys = ATTRIBUTE_KEYS[provider]
        return cls(
            name=attributes.get(keys.name),
            email=attributes.get(keys.email),
            profile=attributes.get(keys.profile),
            provider=provider,
        )

    @property
    def login_type(self) -> models.LoginType:
        return LOGIN_TYPES[self.provider]

    def to_entity(self) -> models.UserCreate:
        """
        New-user payload for this account.

        OAuth2 accounts have no user-supplied credential, so a random password
        is generated; it is hashed on insert like any other password.
        """
        if not self.email:
            raise ValueError("OAuth2 attributes carry no email")
        return models.UserCreate(
            user_id=self.email,
            user_name=self.name,
            email=self.email,
            image=self.profile,
            role=models.Role.USER,
            login_type=self.login_type,
            user_status=models.UserStatus.ACTIVE,
            agree=True,
            password=generate_password(),
        )
