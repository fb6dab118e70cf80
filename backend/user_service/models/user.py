"""User document helpers for the `users` collection."""

import re
from datetime import datetime, timezone
from typing import Any

from bson import ObjectId
from pydantic import BaseModel

from backend.core.errors import ValidationError

STUDENT = 'student'
TEACHER = 'teacher'
ADMIN = 'admin'
ROLES = (STUDENT, TEACHER, ADMIN)
DEFAULT_ROLE = STUDENT

MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 6
EMAIL_PATTERN = re.compile(r'^\w+([.-]?\w+)*@\w+([.-]?\w+)*(\.\w{2,3})+$')

# Projection that keeps the password hash out of every read served to clients.
PUBLIC_PROJECTION = {'password': 0}


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def normalize_username(value: str) -> str:
    normalized = value.strip()
    if len(normalized) < MIN_USERNAME_LENGTH:
        raise ValidationError(f'Username must be at least {MIN_USERNAME_LENGTH} characters long')
    return normalized


def normalize_email(value: str) -> str:
    normalized = value.strip().lower()
    if not EMAIL_PATTERN.match(normalized):
        raise ValidationError('Please fill a valid email address')
    return normalized


def normalize_role(value: str) -> str:
    normalized = value.strip().lower()
    if normalized not in ROLES:
        raise ValidationError(f'Role must be one of: {", ".join(ROLES)}')
    return normalized


def validate_new_password(value: str | None, message: str | None = None) -> str:
    if not value or len(value) < MIN_PASSWORD_LENGTH:
        raise ValidationError(message or f'Password must be at least {MIN_PASSWORD_LENGTH} characters long')
    return value


def parse_object_id(value: str) -> ObjectId:
    if not ObjectId.is_valid(value):
        raise ValidationError('Invalid User ID format')
    return ObjectId(value)


def new_user_document(username: str, email: str, password_hash: str, role: str = DEFAULT_ROLE) -> dict[str, Any]:
    now = utcnow()
    return {
        'username': username,
        'email': email,
        'password': password_hash,
        'role': role,
        'createdAt': now,
        'updatedAt': now,
    }


def _isoformat(value: Any) -> Any:
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.isoformat()
    return value


def serialize_user(document: dict[str, Any]) -> dict[str, Any]:
    return {
        '_id': str(document['_id']),
        'username': document.get('username'),
        'email': document.get('email'),
        'role': document.get('role', DEFAULT_ROLE),
        'createdAt': _isoformat(document.get('createdAt')),
        'updatedAt': _isoformat(document.get('updatedAt')),
    }


def serialize_summary(document: dict[str, Any]) -> dict[str, Any]:
    return {
        '_id': str(document['_id']),
        'username': document.get('username'),
        'email': document.get('email'),
        'role': document.get('role', DEFAULT_ROLE),
    }


class AuthenticatedUser(BaseModel):
    """The caller of a request, as resolved from its bearer token."""

    id: str
    username: str
    email: str
    role: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> 'AuthenticatedUser':
        return cls(
            id=str(document['_id']),
            username=document.get('username', ''),
            email=document.get('email', ''),
            role=document.get('role', DEFAULT_ROLE),
            created_at=document.get('createdAt'),
            updated_at=document.get('updatedAt'),
        )

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN

    def owns(self, user_id: ObjectId | str) -> bool:
        return self.id == str(user_id)

    def to_response(self) -> dict[str, Any]:
        return {
            '_id': self.id,
            'username': self.username,
            'email': self.email,
            'role': self.role,
            'createdAt': _isoformat(self.created_at),
            'updatedAt': _isoformat(self.updated_at),
        }
