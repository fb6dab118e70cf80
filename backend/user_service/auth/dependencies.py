from typing import Callable

from bson import ObjectId
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from backend.core.errors import AuthenticationError, AuthorizationError
from backend.user_service.auth import jwt_handler
from backend.user_service.database import database_unavailable, get_users_collection
from backend.user_service.models.user import PUBLIC_PROJECTION, AuthenticatedUser

security = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    users: Collection = Depends(get_users_collection),
) -> AuthenticatedUser:
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Not authorized, no token")

    user_id = jwt_handler.verify_access_token(credentials.credentials)
    if not ObjectId.is_valid(user_id):
        raise AuthenticationError("Not authorized, token failed")

    try:
        document = users.find_one({"_id": ObjectId(user_id)}, PUBLIC_PROJECTION)
    except PyMongoError as exc:
        raise database_unavailable(exc) from exc
    if document is None:
        raise AuthenticationError("Not authorized, user not found")
    return AuthenticatedUser.from_document(document)


def require_roles(*roles: str) -> Callable[..., AuthenticatedUser]:
    allowed = frozenset(roles)

    def check_role(current_user: AuthenticatedUser | None = Depends(get_current_user)) -> AuthenticatedUser:
        if current_user is None or current_user.role not in allowed:
            role = current_user.role if current_user is not None else None
            raise AuthorizationError(f"User role {role} is not authorized to access this route")
        return current_user

    return check_role
