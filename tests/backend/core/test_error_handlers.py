import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import BaseModel

from backend.core import config
from backend.core.error_handlers import register_error_handlers
from backend.core.errors import (
    AuthenticationError,
    ConfigurationError,
    ConflictError,
    NotFoundError,
    UpstreamError,
)


class _Body(BaseModel):
    name: str


class _TeapotError(Exception):
    status_code = 418


def _build_app() -> FastAPI:
    app = FastAPI()
    register_error_handlers(app)

    @app.get('/not-found')
    def not_found():
        raise NotFoundError('User not found')

    @app.get('/conflict')
    def conflict():
        raise ConflictError('Username or Email already exists')

    @app.get('/unauthorized')
    def unauthorized():
        raise AuthenticationError('Not authorized, no token')

    @app.get('/not-configured')
    def not_configured():
        raise ConfigurationError('Email service not fully configured.')

    @app.get('/upstream')
    def upstream():
        raise UpstreamError('Twilio SMS error: invalid number', status_code=400)

    @app.get('/boom')
    def boom():
        raise RuntimeError('kaboom')

    @app.get('/teapot')
    def teapot():
        raise _TeapotError('short and stout')

    @app.post('/echo')
    def echo(body: _Body):
        return body

    return app


@pytest.fixture
def client() -> TestClient:
    return TestClient(_build_app(), raise_server_exceptions=False)


@pytest.mark.parametrize(
    ('path', 'status_code', 'message'),
    [
        ('/not-found', 404, 'User not found'),
        ('/conflict', 400, 'Username or Email already exists'),
        ('/unauthorized', 401, 'Not authorized, no token'),
        ('/not-configured', 500, 'Email service not fully configured.'),
        ('/upstream', 400, 'Twilio SMS error: invalid number'),
    ],
)
def test_service_errors_map_to_status_and_message(client: TestClient, path: str, status_code: int, message: str) -> None:
    response = client.get(path)

    assert response.status_code == status_code
    assert response.json() == {'message': message}


def test_unhandled_error_hides_stack_outside_development(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, 'APP_ENV', 'production')

    response = client.get('/boom')

    assert response.status_code == 500
    assert response.json() == {'message': 'kaboom', 'stack': None}


def test_unhandled_error_includes_stack_in_development(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, 'APP_ENV', 'development')

    response = client.get('/boom')

    assert response.status_code == 500
    assert 'RuntimeError: kaboom' in response.json()['stack']


def test_unhandled_error_keeps_its_own_status(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, 'APP_ENV', 'production')

    response = client.get('/teapot')

    assert response.status_code == 418
    assert response.json()['message'] == 'short and stout'


def test_malformed_body_is_reported_as_bad_request(client: TestClient) -> None:
    response = client.post('/echo', json={'name': 42})

    assert response.status_code == 400
    assert response.json()['message'] == 'Invalid request body'
    assert response.json()['errors'][0]['field'] == 'name'
