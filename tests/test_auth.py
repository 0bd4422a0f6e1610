from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from app.database import get_db
from app.main import app
from app.utils.security import create_access_token, decode_access_token

from tests.conftest import ACCOUNT_ID


@pytest.fixture
def unauthenticated_client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def test_token_round_trip():
    token = create_access_token({"sub": str(ACCOUNT_ID), "email": "bep@example.com"})

    payload = decode_access_token(token)

    assert payload["sub"] == str(ACCOUNT_ID)
    assert payload["email"] == "bep@example.com"


def test_expired_token_is_rejected():
    token = create_access_token({"sub": str(ACCOUNT_ID)}, expires_delta=timedelta(minutes=-1))

    assert decode_access_token(token) is None


def test_bearer_token_scopes_requests(unauthenticated_client, make_ingredient):
    make_ingredient(code="MINE")
    token = create_access_token({"sub": str(ACCOUNT_ID)})

    response = unauthenticated_client.get(
        "/api/v1/ingredients/", headers={"Authorization": f"Bearer {token}"}
    )

    assert response.status_code == 200
    assert [i["code"] for i in response.json()] == ["MINE"]


def test_missing_or_bad_token(unauthenticated_client):
    missing = unauthenticated_client.get("/api/v1/ingredients/")
    garbage = unauthenticated_client.get("/api/v1/ingredients/", headers={"Authorization": "Bearer nope"})
    bad_sub = unauthenticated_client.get(
        "/api/v1/ingredients/",
        headers={"Authorization": f"Bearer {create_access_token({'sub': 'not-a-uuid'})}"},
    )

    assert missing.status_code in (401, 403)
    assert garbage.status_code == 401
    assert bad_sub.status_code == 401


def test_health(unauthenticated_client):
    assert unauthenticated_client.get("/health").json() == {"status": "healthy"}
    assert unauthenticated_client.get("/").json()["status"] == "running"
