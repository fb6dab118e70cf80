import logging

import firebase_admin
from firebase_admin import credentials, messaging
from firebase_admin.exceptions import FirebaseError

from backend.core.errors import ConfigurationError, UpstreamError
from backend.notification_service.models.notification import PushPayload

logger = logging.getLogger(__name__)


def initialize_firebase_app(service_account_path: str | None):
    """Return the default Firebase app, creating it from a service account file if needed."""
    if not service_account_path:
        logger.warning('FIREBASE_SERVICE_ACCOUNT_PATH is not defined. Push notifications will not work.')
        return None

    try:
        return firebase_admin.get_app()
    except ValueError:
        pass

    try:
        app = firebase_admin.initialize_app(credentials.Certificate(service_account_path))
    except (OSError, ValueError):
        logger.exception(
            'Failed to initialize Firebase Admin SDK. Check FIREBASE_SERVICE_ACCOUNT_PATH and file content.'
        )
        return None

    logger.info('Firebase Admin SDK initialized.')
    return app


class PushProvider:
    """Mobile push through Firebase Cloud Messaging."""

    def __init__(self, service_account_path: str | None = None, app=None) -> None:
        self.app = app if app is not None else initialize_firebase_app(service_account_path)

    @property
    def configured(self) -> bool:
        return self.app is not None

    def send(self, payload: PushPayload) -> str:
        if not self.configured:
            raise ConfigurationError('Firebase Admin SDK not initialized for push sending.')

        message = messaging.Message(
            notification=messaging.Notification(title=payload.title, body=payload.body),
            data=payload.data or {},
            token=payload.device_token,
        )
        try:
            response = messaging.send(message, app=self.app)
        except FirebaseError as exc:
            raise UpstreamError(f'Firebase push error: {exc}') from exc

        logger.info('Push notification sent to %s: %s', payload.device_token, response)
        return response
