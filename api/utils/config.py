import secrets
import warnings
from typing import Annotated, Any, Literal

from pydantic import AnyUrl, BeforeValidator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing_extensions import Self

# HS256 keys shorter than the digest size are rejected
MIN_SECRET_KEY_BYTES = 32


def parse_cors(v: Any) -> list[str] | str:
    if isinstance(v, str) and not v.startswith("["):
        return [i.strip() for i in v.split(",") if i.strip()]
    elif isinstance(v, list | str):
        return v
    raise ValueError(v)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )
    APP_NAME: str = "MukPic API"
    APP_VERSION: str = "0.1.0"
    ENVIRONMENT: Literal["local", "test", "production"] = "local"
    DATABASE: str = "mukpic.db"
    # Authentication settings
    FIRST_USER: str = "admin"
    FIRST_USER_PASS: str = "changethis"
    ACCESS_TOKEN_EXPIRE_MS: int = 30 * 60 * 1000
    REFRESH_TOKEN_EXPIRE_MS: int = 14 * 24 * 60 * 60 * 1000
    ALGORITHM: Literal["HS256"] = "HS256"
    SECRET_KEY: str = secrets.token_urlsafe(32)
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    BACKEND_CORS_ORIGINS: Annotated[list[AnyUrl] | str, BeforeValidator(parse_cors)] = []

    def _check_default_secret(self, var_name: str, value: str | None) -> None:
        if value == "changethis":
            message = f'The value of {var_name} is "changethis"'
            if self.ENVIRONMENT == "local":
                warnings.warn(message, stacklevel=1)
            elif self.ENVIRONMENT == "test":
                print(f"WARNING: {message}")
            else:
                raise ValueError(message)

    @model_validator(mode="after")
    def _enforce_non_default_secrets(self) -> Self:
        self._check_default_secret("SECRET_KEY", self.SECRET_KEY)
        self._check_default_secret("FIRST_USER_PASS", self.FIRST_USER_PASS)
        if len(self.SECRET_KEY.encode()) < MIN_SECRET_KEY_BYTES:
            raise ValueError(
                f"SECRET_KEY must be at least {MIN_SECRET_KEY_BYTES} bytes for "
                f"{self.ALGORITHM}."
            )
        if self.ACCESS_TOKEN_EXPIRE_MS <= 0 or self.REFRESH_TOKEN_EXPIRE_MS <= 0:
            raise ValueError("Token lifetimes must be positive.")
        return self

    def get_signing_key(self) -> bytes:
        """Key material for HMAC signing and verification."""
        return self.SECRET_KEY.encode()


settings = Settings()
