from collections.abc import Generator
from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from sqlmodel import Session

from api.db.session import engine
from api.utils.config import Settings
from api.utils.tokens import JwtTokenProvider


@lru_cache
def get_settings() -> Settings:
    return Settings()  # type: ignore


def get_session() -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session


def get_token_provider(
    session: Annotated[Session, Depends(get_session)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> JwtTokenProvider:
    return JwtTokenProvider(settings=settings, session=session)
