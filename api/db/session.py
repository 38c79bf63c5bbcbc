import os
from pathlib import Path

import sqlalchemy.exc as exc
from dotenv import load_dotenv
from sqlmodel import SQLModel, create_engine

from api.utils.config import settings

if os.environ.get("ENVIRONMENT") == "test":
    env_path = rf"{Path(__file__).absolute().parent.parent.parent}/.env.test"
    load_dotenv(env_path, override=True)

DATABASE_HOST = os.environ.get("DATABASE", settings.DATABASE)
DATABASE_URL = f"sqlite:///./{DATABASE_HOST}"

try:
    engine = create_engine(
        DATABASE_URL,
        pool_pre_ping=True,
        connect_args={"check_same_thread": False},
    )
except exc.ArgumentError:
    print("Error creating engine:", DATABASE_URL)
    raise


def create_db_and_tables() -> None:
    # Table models must be imported before create_all sees them
    from api.db import models  # noqa: F401

    SQLModel.metadata.create_all(engine)


def drop_db_and_tables() -> None:
    SQLModel.metadata.drop_all(engine)
