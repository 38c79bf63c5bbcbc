from collections.abc import Generator
from pathlib import Path
from threading import Thread

from dotenv import load_dotenv

# Must run before anything under api/ reads its settings
load_dotenv(Path(__file__).absolute().parent.parent / ".env.test", override=True)

import pytest  # noqa: E402
from fakeredis import TcpFakeServer  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlmodel import Session  # noqa: E402

from api.db.session import drop_db_and_tables, engine  # noqa: E402
from api.initial_data import init  # noqa: E402
from api.main import app  # noqa: E402
from api.utils.config import Settings  # noqa: E402
from api.utils.tokens import JwtTokenProvider  # noqa: E402
from tests.utils.auth import get_admin_headers  # noqa: E402


@pytest.fixture(scope="module")
def settings() -> Settings:
    return Settings()


@pytest.fixture
def session() -> Generator[Session, None, None]:
    with Session(engine) as db_session:
        try:
            yield db_session
            db_session.commit()
        except Exception:
            db_session.rollback()
            raise
        finally:
            db_session.close()


@pytest.fixture(scope="module")
def client() -> Generator:
    with TestClient(app) as c:
        yield c


@pytest.fixture(scope="session", autouse=True)
def redis_server() -> Generator:
    server = TcpFakeServer(
        (Settings().REDIS_HOST, Settings().REDIS_PORT), server_type="redis"
    )
    thread = Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        yield server
    finally:
        server.shutdown()


# Fresh schema and seed data for each test class
@pytest.fixture(autouse=True, scope="class")
def setup() -> Generator:
    init()
    yield
    drop_db_and_tables()


@pytest.fixture
def provider(settings: Settings, session: Session) -> JwtTokenProvider:
    return JwtTokenProvider(settings=settings, session=session)


@pytest.fixture
def short_lived_provider(session: Session) -> JwtTokenProvider:
    short_settings = Settings(ACCESS_TOKEN_EXPIRE_MS=1000, REFRESH_TOKEN_EXPIRE_MS=100000)
    return JwtTokenProvider(settings=short_settings, session=session)


@pytest.fixture
def admin_headers(client: TestClient) -> dict[str, str]:
    return get_admin_headers(client)
