import pytest
from fastapi import Header
from fastapi.testclient import TestClient

from fake_motor import USERS, FakeDatabase, run
from kambaz.auth.auth_utils import get_current_user, verify_token
from kambaz.database import get_db
from kambaz.main import app
from kambaz.quizzes.database import create_quiz_indexes


@pytest.fixture
def db():
    fake = FakeDatabase()
    run(create_quiz_indexes(fake))
    return fake


@pytest.fixture
def client_as(db):
    """
    Build a TestClient acting as the given user.
    Clients built with None go through real bearer-token auth.
    """
    async def override_db():
        return db

    async def override_user(x_test_user: str = Header(None), authorization: str = Header(None)):
        if x_test_user:
            return USERS[x_test_user]
        return await get_current_user(verify_token(authorization))

    app.dependency_overrides[get_db] = override_db
    app.dependency_overrides[get_current_user] = override_user

    def factory(user):
        headers = {"X-Test-User": user.user_id} if user else {}
        return TestClient(app, headers=headers)

    yield factory
    app.dependency_overrides.clear()
