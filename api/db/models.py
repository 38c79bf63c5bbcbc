import enum
from dataclasses import dataclass, field
from datetime import datetime

from sqlalchemy import DateTime
from sqlmodel import Column, Field, SQLModel

###
# Utility Models
###


class ApplicationInfo(SQLModel):
    app_name: str
    version: str


class HealthCheck(SQLModel):
    status: str
    timestamp: datetime


class Response(SQLModel):
    """Base response model with count field used for list endpoints."""

    count: int


class ErrorResponse(SQLModel):
    error_code: str
    detail: str


###
# User
###


class Role(str, enum.Enum):
    USER = "ROLE_USER"
    ADMIN = "ROLE_ADMIN"


class LoginType(str, enum.Enum):
    LOCAL = "LOCAL"
    GOOGLE = "GOOGLE"


class UserStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    DELETED = "DELETED"


class UserBase(SQLModel):
    user_name: str | None = None
    email: str = Field(unique=True, index=True)
    image: str | None = None


class UserSignup(UserBase):
    # user_name
    # email
    # image
    user_id: str
    password: str
    agree: bool = False


class UserState(SQLModel):
    role: Role = Field(default=Role.USER)
    login_type: LoginType = Field(default=LoginType.LOCAL)
    user_status: UserStatus = Field(default=UserStatus.ACTIVE)
    agree: bool = Field(default=False)


class UserCreate(UserBase, UserState):
    # user_name
    # email
    # image
    # role
    # login_type
    # user_status
    # agree
    user_id: str
    password: str


class UserSafe(UserBase, UserState):
    """
    Everything but the hashed password.
    - user_id
    - user_name
    - email
    - image
    - role
    - login_type
    - user_status
    - agree
    """

    user_id: str = Field(primary_key=True, index=True)


class User(UserSafe, table=True):
    """
    User model.

    This is the class representing the User table in the database.
    This should never be part of a serialized response. Use UserSafe for that
    purpose.

    For OAuth2 accounts ``user_id`` is the account email and the stored password
    is a generated one the user never sees.
    """

    hashed_password: str

    @property
    def authorities(self) -> list[str]:
        return [self.role.value]


###
# Token
###


class AccessTokenResponse(SQLModel):
    access_token: str
    token_type: str = "bearer"


class TokenPayload(SQLModel):
    sub: str
    role: str = ""
    jti: str
    iat: datetime
    exp: datetime

    @property
    def authorities(self) -> list[str]:
        return [role for role in self.role.split(",") if role]


class Token(SQLModel, table=True):
    """
    Persisted access/refresh token pair.

    One row per subject. ``issued_at`` and ``expires_at`` describe the refresh
    token; the access token is replaced in place on reissue.
    """

    id: int | None = Field(default=None, primary_key=True)
    subject: str = Field(unique=True, index=True)
    access_token: str = Field(index=True)
    refresh_token: str
    issued_at: datetime | None = Field(
        default=None, sa_column=Column(DateTime(timezone=True))
    )
    expires_at: datetime | None = Field(
        default=None, sa_column=Column(DateTime(timezone=True))
    )


###
# Principal
###


@dataclass(frozen=True)
class Principal:
    """A principal rebuilt from token claims alone."""

    name: str
    authorities: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class Authentication:
    principal: User | Principal
    authorities: list[str] = field(default_factory=list)
    credentials: str | None = None

    @property
    def name(self) -> str:
        if isinstance(self.principal, User):
            return self.principal.email
        return self.principal.name


###
# Image
###


class ImageBase(SQLModel):
    image_url: str = Field(unique=True, index=True)
    image_type: int = Field(index=True)
    reference_id: int = Field(index=True)


class Image(ImageBase, table=True):
    """
    Image metadata.

    - image_id
    - image_url
    - image_type
    - reference_id
    """

    image_id: int | None = Field(default=None, primary_key=True)


class ImageResponse(Response):
    # count
    images: list[Image]


###
# Metadata
###

NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = SQLModel.metadata
metadata.naming_convention = NAMING_CONVENTION
