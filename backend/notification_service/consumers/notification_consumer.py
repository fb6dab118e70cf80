import logging

from backend.core.errors import ValidationError
from backend.notification_service.models.notification import (
    EMAIL,
    PUSH,
    SMS,
    UnknownNotificationType,
    decode_job,
)
from backend.notification_service.providers.registry import Providers

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """Routes decoded notification jobs to the matching provider and settles the delivery."""

    def __init__(self, providers: Providers) -> None:
        self.providers = providers
        self._senders = {
            EMAIL: providers.email.send,
            SMS: providers.sms.send,
            PUSH: providers.push.send,
        }

    def dispatch(self, job):
        return self._senders[job.type](job.payload)

    def handle_message(self, channel, method, properties, body: bytes) -> None:
        delivery_tag = method.delivery_tag

        try:
            job = decode_job(body)
        except UnknownNotificationType as exc:
            logger.warning('Unknown notification type received: %s', exc.notification_type)
            channel.basic_ack(delivery_tag=delivery_tag)
            return
        except ValidationError as exc:
            # Redelivery cannot fix a malformed message.
            logger.error('Discarding malformed notification message: %s', exc.message)
            channel.basic_ack(delivery_tag=delivery_tag)
            return

        logger.info('Received message: type=%s', job.type)
        try:
            self.dispatch(job)
        except Exception:
            logger.exception('Error processing message type %s; requeueing', job.type)
            channel.basic_nack(delivery_tag=delivery_tag, multiple=False, requeue=True)
            return

        channel.basic_ack(delivery_tag=delivery_tag)
