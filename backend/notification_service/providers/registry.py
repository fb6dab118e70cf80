from dataclasses import dataclass

from backend.core import config
from backend.notification_service.providers.email_provider import EmailProvider
from backend.notification_service.providers.push_provider import PushProvider
from backend.notification_service.providers.sms_provider import SmsProvider


@dataclass
class Providers:
    email: EmailProvider
    sms: SmsProvider
    push: PushProvider


def build_providers() -> Providers:
    return Providers(
        email=EmailProvider(config.RESEND_API_KEY, config.FROM_EMAIL),
        sms=SmsProvider(config.TWILIO_ACCOUNT_SID, config.TWILIO_AUTH_TOKEN, config.TWILIO_PHONE_NUMBER),
        push=PushProvider(config.FIREBASE_SERVICE_ACCOUNT_PATH),
    )
