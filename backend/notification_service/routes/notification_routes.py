"""Direct HTTP send endpoints, mainly for testing and internal tools.

Queue consumption is the primary path; see consumers.notification_consumer.
"""

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, ConfigDict, Field

from backend.core.errors import UpstreamError, ValidationError
from backend.notification_service.models.notification import EmailPayload, PushPayload, SmsPayload
from backend.notification_service.providers.registry import Providers

router = APIRouter(tags=['notifications'])


def get_providers(request: Request) -> Providers:
    providers = getattr(request.app.state, 'providers', None)
    if providers is None:
        raise UpstreamError('Notification providers are not initialized.')
    return providers


class SendEmailRequest(BaseModel):
    to: str | None = None
    subject: str | None = None
    html: str | None = None
    text: str | None = None


class SendSmsRequest(BaseModel):
    to: str | None = None
    body: str | None = None


class SendPushRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    device_token: str | None = Field(default=None, alias='deviceToken')
    title: str | None = None
    body: str | None = None
    data: dict[str, str] | None = None


@router.post('/email')
def send_email(data: SendEmailRequest, providers: Providers = Depends(get_providers)):
    if not data.to or not data.subject or not (data.html or data.text):
        raise ValidationError('Missing required fields for email: to, subject, and either html or text')

    result = providers.email.send(EmailPayload(to=data.to, subject=data.subject, html=data.html, text=data.text))
    return {'message': 'Email sent successfully via HTTP', 'emailId': result.get('id')}


@router.post('/sms')
def send_sms(data: SendSmsRequest, providers: Providers = Depends(get_providers)):
    if not data.to or not data.body:
        raise ValidationError('Missing required fields for SMS: to (phone number), body')

    result = providers.sms.send(SmsPayload(to=data.to, body=data.body))
    return {'message': 'SMS sent successfully via HTTP', 'sid': result.get('sid')}


@router.post('/push')
def send_push(data: SendPushRequest, providers: Providers = Depends(get_providers)):
    if not data.device_token or not data.title or not data.body:
        raise ValidationError('Missing required fields for Push Notification: deviceToken, title, body')

    response = providers.push.send(
        PushPayload(device_token=data.device_token, title=data.title, body=data.body, data=data.data or {})
    )
    return {'message': 'Push notification sent successfully via HTTP', 'response': response}
