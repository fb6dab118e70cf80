import logging

from bson import ObjectId
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from pymongo import ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError, PyMongoError

from backend.core.errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from backend.user_service.auth.dependencies import get_current_user, require_roles
from backend.user_service.auth.passwords import hash_password, verify_password
from backend.user_service.database import database_unavailable, get_users_collection
from backend.user_service.models.user import (
    ADMIN,
    MIN_PASSWORD_LENGTH,
    PUBLIC_PROJECTION,
    AuthenticatedUser,
    normalize_email,
    normalize_role,
    normalize_username,
    parse_object_id,
    serialize_summary,
    serialize_user,
    utcnow,
    validate_new_password,
)

router = APIRouter(tags=['users'])

logger = logging.getLogger(__name__)

require_admin = require_roles(ADMIN)


class UpdateUserRequest(BaseModel):
    username: str | None = None
    email: str | None = None
    role: str | None = None


class UpdatePasswordRequest(BaseModel):
    currentPassword: str | None = None
    newPassword: str | None = None


def find_user_or_404(users: Collection, user_id: ObjectId, projection: dict | None = None) -> dict:
    try:
        user = users.find_one({'_id': user_id}, projection)
    except PyMongoError as exc:
        raise database_unavailable(exc) from exc
    if user is None:
        raise NotFoundError('User not found')
    return user


@router.get('/profile')
def get_profile(current_user: AuthenticatedUser = Depends(get_current_user)):
    return current_user.to_response()


@router.get('')
def list_users(
    current_user: AuthenticatedUser = Depends(require_admin),
    users: Collection = Depends(get_users_collection),
):
    try:
        return [serialize_user(user) for user in users.find({}, PUBLIC_PROJECTION)]
    except PyMongoError as exc:
        raise database_unavailable(exc) from exc


@router.get('/{user_id}')
def get_user(
    user_id: str,
    current_user: AuthenticatedUser = Depends(require_admin),
    users: Collection = Depends(get_users_collection),
):
    object_id = parse_object_id(user_id)
    return serialize_user(find_user_or_404(users, object_id, PUBLIC_PROJECTION))


@router.put('/{user_id}')
def update_user(
    user_id: str,
    data: UpdateUserRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    users: Collection = Depends(get_users_collection),
):
    object_id = parse_object_id(user_id)
    user = find_user_or_404(users, object_id, PUBLIC_PROJECTION)

    if not current_user.owns(object_id) and not current_user.is_admin:
        raise AuthorizationError('Not authorized to update this user')

    if data.role and not current_user.is_admin:
        raise AuthorizationError('Only administrators can change user roles')

    changes = {}
    if data.username:
        changes['username'] = normalize_username(data.username)
    if data.email:
        changes['email'] = normalize_email(data.email)
    if data.role:
        changes['role'] = normalize_role(data.role)

    if not changes:
        return serialize_summary(user)

    changes['updatedAt'] = utcnow()
    try:
        updated = users.find_one_and_update(
            {'_id': object_id},
            {'$set': changes},
            projection=PUBLIC_PROJECTION,
            return_document=ReturnDocument.AFTER,
        )
    except DuplicateKeyError as exc:
        raise ConflictError('Username or Email already exists') from exc
    except PyMongoError as exc:
        raise database_unavailable(exc) from exc

    if updated is None:
        raise NotFoundError('User not found')

    logger.info('User %s updated fields %s', user_id, sorted(changes))
    return serialize_summary(updated)


@router.put('/{user_id}/password')
def update_password(
    user_id: str,
    data: UpdatePasswordRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    users: Collection = Depends(get_users_collection),
):
    object_id = parse_object_id(user_id)
    user = find_user_or_404(users, object_id)

    if not current_user.owns(object_id) and not current_user.is_admin:
        raise AuthorizationError("Not authorized to update this user's password")

    # Admins may reset any password without knowing the current one.
    if not current_user.is_admin and not verify_password(data.currentPassword, user.get('password')):
        raise AuthenticationError('Invalid current password')

    new_password = validate_new_password(
        data.newPassword,
        f'New password must be at least {MIN_PASSWORD_LENGTH} characters long',
    )

    try:
        result = users.update_one(
            {'_id': object_id},
            {'$set': {'password': hash_password(new_password), 'updatedAt': utcnow()}},
        )
    except PyMongoError as exc:
        raise database_unavailable(exc) from exc

    if result.matched_count == 0:
        raise NotFoundError('User not found')

    logger.info('Password updated for user %s by %s', user_id, current_user.id)
    return {'message': 'Password updated successfully'}


@router.delete('/{user_id}')
def delete_user(
    user_id: str,
    current_user: AuthenticatedUser = Depends(require_admin),
    users: Collection = Depends(get_users_collection),
):
    object_id = parse_object_id(user_id)
    find_user_or_404(users, object_id, {'_id': 1})

    if current_user.owns(object_id):
        raise ValidationError('Cannot delete own account')

    try:
        result = users.delete_one({'_id': object_id})
    except PyMongoError as exc:
        raise database_unavailable(exc) from exc

    if result.deleted_count == 0:
        raise NotFoundError('User not found')

    logger.info('User %s removed by %s', user_id, current_user.id)
    return {'message': 'User removed'}
