import logging

from fastapi import Request
from pymongo import ASCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from backend.core import config
from backend.core.errors import UpstreamError

logger = logging.getLogger(__name__)

USERS_COLLECTION = 'users'


class Database:
    """Owns the MongoDB client for the user management service."""

    def __init__(self, uri: str, name: str | None = None) -> None:
        self.uri = uri
        self.name = name
        self.client: MongoClient | None = None
        self._db = None

    def connect(self) -> None:
        client = MongoClient(self.uri)
        client.admin.command('ping')

        default_db = client.get_default_database(default=self.name or config.MONGO_DB_NAME)
        self.client = client
        self._db = default_db
        self.ensure_indexes()
        logger.info('MongoDB connected successfully (database=%s)', default_db.name)

    def close(self) -> None:
        if self.client is not None:
            self.client.close()
            logger.info('MongoDB connection closed')
        self.client = None
        self._db = None

    def ensure_indexes(self) -> None:
        ensure_user_indexes(self.users)

    @property
    def users(self) -> Collection:
        if self._db is None:
            raise UpstreamError('Database is not connected.')
        return self._db[USERS_COLLECTION]


def ensure_user_indexes(users: Collection) -> None:
    users.create_index([('username', ASCENDING)], unique=True, name='username_unique')
    users.create_index([('email', ASCENDING)], unique=True, name='email_unique')


def get_users_collection(request: Request) -> Collection:
    database: Database | None = getattr(request.app.state, 'database', None)
    if database is None:
        raise UpstreamError('Database is not connected.')
    return database.users


def database_unavailable(exc: PyMongoError) -> UpstreamError:
    logger.error('MongoDB operation failed: %s', exc)
    return UpstreamError('Database unavailable. Verify MONGO_URI and MongoDB credentials.')
