import logging

import resend
from resend.exceptions import ResendError

from backend.core.errors import ConfigurationError, UpstreamError
from backend.notification_service.models.notification import EmailPayload

logger = logging.getLogger(__name__)


class EmailProvider:
    """Transactional email through Resend."""

    def __init__(self, api_key: str | None, from_email: str | None) -> None:
        self.api_key = api_key
        self.from_email = from_email

        if not api_key:
            logger.warning('RESEND_API_KEY is not defined. Email sending will fail.')
        if not from_email:
            logger.warning('FROM_EMAIL is not defined. Email sending will fail.')

    @property
    def configured(self) -> bool:
        return bool(self.api_key and self.from_email)

    def send(self, payload: EmailPayload) -> dict:
        if not self.configured:
            raise ConfigurationError('Email service not fully configured.')

        params = {
            'from': self.from_email,
            'to': payload.to,
            'subject': payload.subject,
        }
        if payload.html:
            params['html'] = payload.html
        if payload.text:
            params['text'] = payload.text

        resend.api_key = self.api_key
        try:
            response = resend.Emails.send(params)
        except ResendError as exc:
            code = getattr(exc, 'code', None)
            raise UpstreamError(
                f'Resend email error: {getattr(exc, "message", exc)}',
                status_code=code if isinstance(code, int) else None,
            ) from exc

        email_id = response.get('id') if isinstance(response, dict) else getattr(response, 'id', None)
        logger.info('Email sent to %s: %s', payload.to, email_id)
        return {'id': email_id}
