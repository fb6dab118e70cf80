import logging

import uvicorn
from fastapi import FastAPI
from pymongo.errors import PyMongoError

from backend.core import config
from backend.core.error_handlers import register_error_handlers
from backend.core.logging_config import configure_logging
from backend.user_service.database import Database
from backend.user_service.routes import auth_routes, user_routes

app = FastAPI(title='User Management Service')

register_error_handlers(app)

logger = logging.getLogger(__name__)


@app.on_event('startup')
def connect_database() -> None:
    try:
        config.validate_user_service_config()
        database = Database(config.MONGO_URI, config.MONGO_DB_NAME)
        database.connect()
    except (RuntimeError, PyMongoError):
        logger.exception('MongoDB connection failed. Check MONGO_URI and MongoDB credentials.')
        raise SystemExit(1)
    app.state.database = database


@app.on_event('shutdown')
def close_database() -> None:
    database = getattr(app.state, 'database', None)
    if database is not None:
        database.close()


@app.get('/health')
def health():
    return {'status': 'User Management Service is Up and Running!'}


app.include_router(auth_routes.router, prefix='/api/auth')
app.include_router(user_routes.router, prefix='/api/users')


def run() -> None:
    configure_logging()
    uvicorn.run(app, host='0.0.0.0', port=config.USER_SERVICE_PORT)


if __name__ == '__main__':
    run()
