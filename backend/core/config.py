import os

from dotenv import load_dotenv

load_dotenv()


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int(value: str | None, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


APP_ENV = os.getenv("APP_ENV", "development")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# User management service
MONGO_URI = os.getenv("MONGO_URI", "")
MONGO_DB_NAME = os.getenv("MONGO_DB_NAME", "user_management")

JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRES_MINUTES = _get_int(os.getenv("JWT_EXPIRES_MINUTES"), 60)
BCRYPT_ROUNDS = _get_int(os.getenv("BCRYPT_ROUNDS"), 10)

USER_SERVICE_PORT = _get_int(os.getenv("USER_SERVICE_PORT", os.getenv("PORT")), 3001)

# Notification service
RABBITMQ_URL = os.getenv("RABBITMQ_URL", "amqp://localhost:5672")
NOTIFICATION_QUEUE = os.getenv("NOTIFICATION_QUEUE", "notification_requests")
RABBITMQ_RECONNECT_DELAY_SECONDS = _get_int(os.getenv("RABBITMQ_RECONNECT_DELAY_SECONDS"), 5)

RESEND_API_KEY = os.getenv("RESEND_API_KEY", "")
FROM_EMAIL = os.getenv("FROM_EMAIL", "")

TWILIO_ACCOUNT_SID = os.getenv("TWILIO_ACCOUNT_SID", "")
TWILIO_AUTH_TOKEN = os.getenv("TWILIO_AUTH_TOKEN", "")
TWILIO_PHONE_NUMBER = os.getenv("TWILIO_PHONE_NUMBER", "")

FIREBASE_SERVICE_ACCOUNT_PATH = os.getenv("FIREBASE_SERVICE_ACCOUNT_PATH", "")

NOTIFICATION_HTTP_ROUTES_ENABLED = _get_bool(os.getenv("NOTIFICATION_HTTP_ROUTES_ENABLED"), default=False)
NOTIFICATION_SERVICE_PORT = _get_int(os.getenv("NOTIFICATION_SERVICE_PORT"), 3002)


def is_development() -> bool:
    return APP_ENV.lower() == "development"


def validate_user_service_config() -> None:
    if not MONGO_URI:
        raise RuntimeError("MONGO_URI is not defined in environment variables.")
    if APP_ENV.lower() == "production" and JWT_SECRET_KEY == "change-me":
        raise RuntimeError("JWT_SECRET_KEY must be set in production.")
