"""Notification jobs carried on the `notification_requests` queue.

A job is a JSON object `{"type": ..., "payload": {...}}`. The payload shape
depends on the type, so jobs are decoded into one model per notification kind
before anything is dispatched.
"""

import json
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, model_validator
from pydantic import ValidationError as PydanticValidationError

from backend.core.errors import ValidationError

EMAIL = 'email'
SMS = 'sms'
PUSH = 'push'
NOTIFICATION_TYPES = (EMAIL, SMS, PUSH)


class EmailPayload(BaseModel):
    to: str = Field(min_length=1)
    subject: str = Field(min_length=1)
    html: str | None = None
    text: str | None = None

    @model_validator(mode='after')
    def require_body(self) -> 'EmailPayload':
        if not self.html and not self.text:
            raise ValueError('Either html or text is required.')
        return self


class SmsPayload(BaseModel):
    to: str = Field(min_length=1)
    body: str = Field(min_length=1)


class PushPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    device_token: str = Field(alias='deviceToken', min_length=1)
    title: str = Field(min_length=1)
    body: str = Field(min_length=1)
    data: dict[str, str] = Field(default_factory=dict)


class EmailJob(BaseModel):
    type: Literal['email']
    payload: EmailPayload


class SmsJob(BaseModel):
    type: Literal['sms']
    payload: SmsPayload


class PushJob(BaseModel):
    type: Literal['push']
    payload: PushPayload


NotificationJob = Annotated[Union[EmailJob, SmsJob, PushJob], Field(discriminator='type')]

_job_adapter = TypeAdapter(NotificationJob)


class UnknownNotificationType(Exception):
    def __init__(self, notification_type) -> None:
        super().__init__(f'Unknown notification type: {notification_type}')
        self.notification_type = notification_type


def decode_job(raw: bytes | str) -> EmailJob | SmsJob | PushJob:
    """Parse and validate a queue message body.

    Raises UnknownNotificationType when the `type` tag is missing or not one
    of NOTIFICATION_TYPES, and ValidationError when the body is not JSON or
    the payload does not fit its type.
    """
    try:
        content = json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f'Message body is not valid JSON: {exc}') from exc

    if not isinstance(content, dict):
        raise ValidationError('Message body must be a JSON object.')

    notification_type = content.get('type')
    if notification_type not in NOTIFICATION_TYPES:
        raise UnknownNotificationType(notification_type)

    try:
        return _job_adapter.validate_python(content)
    except PydanticValidationError as exc:
        raise ValidationError(f'Invalid {notification_type} payload: {exc}') from exc
