import logging

from twilio.base.exceptions import TwilioRestException
from twilio.rest import Client

from backend.core.errors import ConfigurationError, UpstreamError
from backend.notification_service.models.notification import SmsPayload

logger = logging.getLogger(__name__)


class SmsProvider:
    """SMS through Twilio, sent from the service's own phone number."""

    def __init__(
        self,
        account_sid: str | None,
        auth_token: str | None,
        phone_number: str | None,
        client: Client | None = None,
    ) -> None:
        self.phone_number = phone_number
        self.client = client
        if self.client is None and account_sid and auth_token:
            self.client = Client(account_sid, auth_token)

        if not account_sid or not auth_token or not phone_number:
            logger.warning(
                'Twilio credentials (TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN, TWILIO_PHONE_NUMBER) '
                'are not fully configured. SMS sending will fail.'
            )

    @property
    def configured(self) -> bool:
        return self.client is not None and bool(self.phone_number)

    def send(self, payload: SmsPayload) -> dict:
        if not self.configured:
            raise ConfigurationError('Twilio service not fully configured.')

        try:
            message = self.client.messages.create(
                body=payload.body,
                from_=self.phone_number,
                to=payload.to,
            )
        except TwilioRestException as exc:
            raise UpstreamError(f'Twilio SMS error: {exc.msg}', status_code=exc.status) from exc

        logger.info('SMS sent to %s: %s', payload.to, message.sid)
        return {'sid': message.sid}
