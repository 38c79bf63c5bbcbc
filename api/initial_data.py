import logging

from sqlmodel import Session

from api.db import models
from api.db.crud import user as user_crud
from api.db.session import create_db_and_tables, engine
from api.utils.config import settings

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def init_user(session: Session) -> None:
    if not user_crud.get_user(session=session, user_id=settings.FIRST_USER):
        user_in = models.UserCreate(
            user_id=settings.FIRST_USER,
            user_name=settings.FIRST_USER,
            email=f"{settings.FIRST_USER}@mukpic.local",
            password=settings.FIRST_USER_PASS,
            role=models.Role.ADMIN,
            login_type=models.LoginType.LOCAL,
            agree=True,
        )
        user_crud.create_user(session=session, user=user_in)
        logger.info("Created admin user %s", settings.FIRST_USER)


def init() -> None:
    create_db_and_tables()
    with Session(engine) as session:
        init_user(session)


def main() -> None:
    logger.info("Creating initial data")
    init()
    logger.info("Initial data created")


if __name__ == "__main__":
    main()
