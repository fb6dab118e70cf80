import logging

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError, PyMongoError

from backend.core.errors import ConflictError, ValidationError
from backend.user_service.auth import jwt_handler
from backend.user_service.auth.passwords import hash_password, verify_password
from backend.user_service.database import database_unavailable, get_users_collection
from backend.user_service.models.user import (
    DEFAULT_ROLE,
    new_user_document,
    normalize_email,
    normalize_role,
    normalize_username,
    serialize_summary,
    validate_new_password,
)

router = APIRouter(tags=['auth'])

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = 'Invalid credentials'


class RegisterRequest(BaseModel):
    username: str | None = None
    email: str | None = None
    password: str | None = None
    role: str | None = None


class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None


def build_auth_response(document: dict) -> dict:
    response = serialize_summary(document)
    response['token'] = jwt_handler.create_access_token(subject=response['_id'])
    return response


@router.post('/register', status_code=status.HTTP_201_CREATED)
def register(data: RegisterRequest, users: Collection = Depends(get_users_collection)):
    if not data.username or not data.email or not data.password:
        raise ValidationError('Please enter all fields')

    username = normalize_username(data.username)
    email = normalize_email(data.email)
    password = validate_new_password(data.password)
    role = normalize_role(data.role) if data.role else DEFAULT_ROLE

    try:
        if users.find_one({'email': email}, {'_id': 1}):
            raise ConflictError('User with this email already exists')
        if users.find_one({'username': username}, {'_id': 1}):
            raise ConflictError('User with this username already exists')

        document = new_user_document(username, email, hash_password(password), role)
        result = users.insert_one(document)
    except DuplicateKeyError as exc:
        # lost a race against a concurrent registration
        raise ConflictError('Username or Email already exists') from exc
    except PyMongoError as exc:
        raise database_unavailable(exc) from exc

    document['_id'] = result.inserted_id
    logger.info('Registered user %s with role %s', result.inserted_id, role)
    return build_auth_response(document)


@router.post('/login')
def login(data: LoginRequest, users: Collection = Depends(get_users_collection)):
    if not data.email or not data.password:
        raise ValidationError('Please enter all fields')

    try:
        user = users.find_one({'email': data.email.strip().lower()})
    except PyMongoError as exc:
        raise database_unavailable(exc) from exc

    # Same message for unknown email and wrong password.
    if user is None or not verify_password(data.password, user.get('password')):
        raise ValidationError(INVALID_CREDENTIALS)

    return build_auth_response(user)
