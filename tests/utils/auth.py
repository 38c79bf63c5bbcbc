from typing import Any

from fastapi.testclient import TestClient
from sqlmodel import Session

from api.utils.config import settings
from tests.utils import random_lower_string
from tests.utils.user import create_random_user


def get_admin_headers(client: TestClient) -> dict[str, str]:
    r = client.post(
        "/auth/",
        data={
            "username": settings.FIRST_USER,
            "password": settings.FIRST_USER_PASS,
        },
    )
    a_token = r.json()["access_token"]
    return {"Authorization": f"Bearer {a_token}"}


def login_user(client: TestClient, session: Session) -> dict[str, Any]:
    """Create a random local user and log them in."""
    password = random_lower_string()
    user = create_random_user(session, password=password)
    response = client.post(
        "/auth/", data={"username": user.user_id, "password": password}
    )
    return {"user": user, "response": response}


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
