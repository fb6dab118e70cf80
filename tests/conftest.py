import os

import mongomock
import pytest

os.environ.setdefault('JWT_SECRET_KEY', 'test-secret-key-with-enough-length-for-hs256')
os.environ.setdefault('APP_ENV', 'test')

from backend.core import config  # noqa: E402
from backend.user_service.auth import jwt_handler  # noqa: E402
from backend.user_service.auth.passwords import hash_password  # noqa: E402
from backend.user_service.database import ensure_user_indexes  # noqa: E402
from backend.user_service.models.user import AuthenticatedUser, new_user_document  # noqa: E402


@pytest.fixture(autouse=True)
def fast_password_hashing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, 'BCRYPT_ROUNDS', 4)


@pytest.fixture
def users():
    client = mongomock.MongoClient()
    collection = client['user_management_test']['users']
    ensure_user_indexes(collection)
    try:
        yield collection
    finally:
        client.close()


@pytest.fixture
def make_user(users):
    def _make_user(username: str, email: str, password: str = 'secret123', role: str = 'student') -> dict:
        document = new_user_document(username, email, hash_password(password), role)
        document['_id'] = users.insert_one(document).inserted_id
        return document

    return _make_user


@pytest.fixture
def as_caller():
    def _as_caller(document: dict) -> AuthenticatedUser:
        return AuthenticatedUser.from_document(document)

    return _as_caller


@pytest.fixture
def token_for():
    def _token_for(document: dict, expires_minutes: int | None = None) -> str:
        return jwt_handler.create_access_token(str(document['_id']), expires_minutes=expires_minutes)

    return _token_for
